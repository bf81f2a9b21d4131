import numpy as np
import pytest

from torchscene.camera import EditorCamera
from torchscene.components import (
    CameraComponent,
    ColorComponent,
    EntityType,
    EntityTypeComponent,
    LabelComponent,
    MaterialComponent,
    ModelComponent,
    TransformComponent,
    UUIDComponent,
    entity_type_from_name,
    entity_type_name,
)


@pytest.mark.parametrize(
    "entity_type, name",
    [(EntityType.GENERAL, "General"), (EntityType.LIGHT, "Light")],
)
def test_entity_type_name(entity_type, name):
    assert entity_type_name(entity_type) == name


def test_entity_type_name_unknown():
    assert entity_type_name("bogus") == "Unknow"


@pytest.mark.parametrize("entity_type", list(EntityType))
def test_entity_type_round_trip(entity_type):
    assert entity_type_from_name(entity_type_name(entity_type)) is entity_type


@pytest.mark.parametrize("name", ["", "light", "General", "Camera"])
def test_entity_type_from_other_names_is_general(name):
    assert entity_type_from_name(name) is EntityType.GENERAL


def test_uuid_components_are_unique():
    ids = {UUIDComponent().uuid for _ in range(50)}
    assert len(ids) == 50


def test_label_and_type_defaults():
    assert LabelComponent().label == ""
    assert LabelComponent("cube").label == "cube"
    assert EntityTypeComponent().entity_type is EntityType.GENERAL
    assert EntityTypeComponent(EntityType.LIGHT).entity_type is EntityType.LIGHT


def test_default_transform_is_identity():
    np.testing.assert_allclose(TransformComponent().matrix(), np.identity(4))


def test_transform_translation_and_scale():
    t = TransformComponent(scale=np.array([2.0, 3.0, 4.0]), translation=np.array([1.0, 2.0, 3.0]))
    m = t.matrix()
    np.testing.assert_allclose(m[:3, 3], [1.0, 2.0, 3.0])
    np.testing.assert_allclose(np.diag(m)[:3], [2.0, 3.0, 4.0])
    np.testing.assert_allclose(m[3], [0.0, 0.0, 0.0, 1.0])


def test_transform_rotation_is_orthonormal():
    t = TransformComponent(rotation=np.array([0.3, -1.1, 0.7]))
    r = t.matrix()[:3, :3]
    np.testing.assert_allclose(r.T @ r, np.identity(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_transform_defaults_are_independent():
    a = TransformComponent()
    b = TransformComponent()
    a.translation[0] = 5.0
    assert b.translation[0] == 0.0


def test_material_defaults():
    m = MaterialComponent()
    assert m.roughness == pytest.approx(0.6)
    assert m.metallic == 0.0
    assert m.albedo_texture == 0
    assert m.use_albedo_texture and m.use_normal_texture and m.use_ao_texture
    assert m.albedo_path == ""


def test_model_color_camera_defaults():
    assert ModelComponent().model is None
    np.testing.assert_allclose(ColorComponent().color, [0.0, 0.0, 0.0])
    camera = CameraComponent().editor_camera
    assert isinstance(camera, EditorCamera)
    assert camera.distance == 10.0