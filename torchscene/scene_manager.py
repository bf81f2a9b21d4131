"""Owner of the active scene and camera, and the data each render pass needs."""

from __future__ import annotations

from typing import Any, ClassVar, Iterator

import numpy as np

from torchscene.camera import EditorCamera
from torchscene.components import (
    EntityType,
    EntityTypeComponent,
    MaterialComponent,
    ModelComponent,
    TransformComponent,
)
from torchscene.scene import Entity, Scene


def _model_matrix(entity: Entity) -> np.ndarray:
    if entity.has_component(TransformComponent):
        return entity.get_component(TransformComponent).matrix()
    return np.identity(4)


def _model_of(entity: Entity) -> Any:
    if entity.has_component(ModelComponent):
        return entity.get_component(ModelComponent).model
    return None


def _material_uniforms(entity: Entity) -> tuple[dict[str, Any], dict[int, int]]:
    if not entity.has_component(MaterialComponent):
        uniforms = {
            "u_UseAlbedoMap": False,
            "u_UseNormalMap": False,
            "u_UseMetallicMap": False,
            "u_UseRoughness": False,
            "u_UseAoMap": False,
            "u_Metallic": 0.0,
            "u_Roughness": 1.0,
        }
        return uniforms, {}
    m = entity.get_component(MaterialComponent)
    textures = {
        0: m.albedo_texture,
        1: m.normal_texture,
        2: m.metallic_texture,
        3: m.roughness_texture,
        4: m.ao_texture,
    }
    uniforms = {
        "u_AlbedoMap": 0,
        "u_UseAlbedoMap": m.use_albedo_texture,
        "u_NormalMap": 1,
        "u_UseNormalMap": m.use_normal_texture,
        "u_MetallicMap": 2,
        "u_UseMetallicMap": m.use_metallic_texture,
        "u_Metallic": m.metallic,
        "u_RoughnessMap": 3,
        "u_UseRoughnessMap": m.use_roughness_texture,
        "u_Roughness": m.roughness,
        "u_AoMap": 4,
        "u_UseAoMap": m.use_ao_texture,
    }
    return uniforms, textures


class SceneManager:
    """Holds the current scene and editor camera."""

    _instance: ClassVar[SceneManager | None] = None

    def __init__(self) -> None:
        self.scene = Scene()
        self.camera: EditorCamera | None = None

    @classmethod
    def get_instance(cls) -> SceneManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_entity(self, entity_type: EntityType = EntityType.GENERAL) -> Entity:
        return self.scene.create_entity("new entity", entity_type)

    def remove_entity(self, entity: Entity) -> None:
        self.scene.remove_entity(entity)

    def set_scene(self, scene: Scene) -> None:
        self.scene = scene

    def set_camera(self, camera: EditorCamera) -> None:
        self.camera = camera

    def _entities(self) -> Iterator[Entity]:
        for entity_id in self.scene.registry.entities():
            yield Entity(entity_id, self.scene)

    def shadow_casters(self) -> Iterator[tuple[Entity, np.ndarray, Any]]:
        """Yield ``(entity, model matrix, model)`` for every entity that is not a light."""
        for entity in self._entities():
            if (
                entity.has_component(EntityTypeComponent)
                and entity.get_component(EntityTypeComponent).entity_type is EntityType.LIGHT
            ):
                continue
            yield entity, _model_matrix(entity), _model_of(entity)

    def geometry_pass_uniforms(self) -> dict[str, Any]:
        """Uniforms, texture bindings and models for the geometry pass of every entity."""
        if self.camera is None:
            raise RuntimeError("no camera set on the scene manager")
        draws = []
        for entity in self._entities():
            uniforms: dict[str, Any] = {"entity": int(entity), "model": _model_matrix(entity)}
            material, textures = _material_uniforms(entity)
            uniforms.update(material)
            draws.append(
                {"entity": entity, "uniforms": uniforms, "textures": textures, "model": _model_of(entity)}
            )
        return {
            "view": self.camera.view_matrix,
            "projection": self.camera.projection,
            "entities": draws,
        }