"""Component types that can be attached to scene entities."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from torchscene import glmath
from torchscene.camera import EditorCamera


class EntityType(enum.Enum):
    """Broad category of an entity."""

    GENERAL = "General"
    LIGHT = "Light"


_UNKNOWN_TYPE_NAME = "Unknow"


def entity_type_name(entity_type: EntityType) -> str:
    """Display name of an entity type; unknown values get a placeholder name."""
    if isinstance(entity_type, EntityType):
        return entity_type.value
    return _UNKNOWN_TYPE_NAME


def entity_type_from_name(name: str) -> EntityType:
    """Parse a display name; anything other than ``"Light"`` is a general entity."""
    if name == EntityType.LIGHT.value:
        return EntityType.LIGHT
    return EntityType.GENERAL


@dataclass
class UUIDComponent:
    """Stable unique identity of an entity."""

    uuid: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class LabelComponent:
    """Human-readable name of an entity."""

    label: str = ""


@dataclass
class EntityTypeComponent:
    """The category an entity belongs to."""

    entity_type: EntityType = EntityType.GENERAL


def _vec3(x: float, y: float, z: float):
    return field(default_factory=lambda: np.array([x, y, z], dtype=float))


@dataclass(eq=False)
class TransformComponent:
    """Scale, translation and Euler rotation (radians) of an entity."""

    scale: np.ndarray = _vec3(1.0, 1.0, 1.0)
    translation: np.ndarray = _vec3(0.0, 0.0, 0.0)
    rotation: np.ndarray = _vec3(0.0, 0.0, 0.0)

    def matrix(self) -> np.ndarray:
        """Model matrix: translation, then rotation, then scale applied to the point first."""
        rotation = glmath.quat_to_mat4(glmath.quat_from_euler(self.rotation))
        return glmath.translate(self.translation) @ rotation @ glmath.scale(self.scale)


@dataclass(eq=False)
class CameraComponent:
    """An editor camera attached to an entity."""

    editor_camera: EditorCamera = field(default_factory=EditorCamera)


@dataclass(eq=False)
class ColorComponent:
    """Flat RGB colour."""

    color: np.ndarray = _vec3(0.0, 0.0, 0.0)


@dataclass
class ModelComponent:
    """A renderable model shared between entities; ``None`` when unset."""

    model: Any = None


@dataclass
class MaterialComponent:
    """PBR material: texture handles, their source paths and scalar fallbacks."""

    albedo_texture: int = 0
    normal_texture: int = 0
    metallic_texture: int = 0
    roughness_texture: int = 0
    ao_texture: int = 0

    albedo_path: str = ""
    normal_path: str = ""
    metallic_path: str = ""
    roughness_path: str = ""
    ao_path: str = ""

    use_albedo_texture: bool = True
    use_normal_texture: bool = True
    use_metallic_texture: bool = True
    use_roughness_texture: bool = True
    use_ao_texture: bool = True

    roughness: float = 0.6
    metallic: float = 0.0