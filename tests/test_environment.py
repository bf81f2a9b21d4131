import numpy as np
import pytest

from torchscene.camera import EditorCamera
from torchscene.environment import (
    AtmosphericScattering,
    AtmosphericScatteringSpecification,
    CascadeShadowMapSpecification,
    EnvironmentEntity,
    EnvironmentEntityType,
    EnvironmentManager,
)
from torchscene.model_manager import ModelManager


class _FakeModel:
    def __init__(self, path):
        self.path = path

    def render(self):
        pass


def test_default_spec_sun_direction_is_unit_and_matches_source():
    spec = AtmosphericScatteringSpecification.default()
    assert np.linalg.norm(spec.sun_position) == pytest.approx(1.0)
    expected = np.array([-1.0, 1.0, -1.0]) / np.sqrt(3.0)
    assert np.allclose(spec.sun_position, expected)


def test_default_spec_constants():
    spec = AtmosphericScatteringSpecification.default()
    assert spec.sun_intensity == 2.0
    assert spec.earth_radius == 6371000.0
    assert spec.atmosphere_height == 100000.0
    assert spec.rayleigh_height == 8000.0
    assert spec.mie_height == 1200.0
    assert spec.gamma == 2.8
    assert spec.exposure == 8.0
    assert spec.sun_angle == 0.0
    assert np.allclose(spec.sun_color, np.ones(3))
    assert np.allclose(spec.rayleigh_scattering_coef, np.array([5.802, 13.558, 33.1]) * 1e-6)
    assert np.allclose(spec.mie_scattering_coef, np.full(3, 3.996e-6))


def test_cascade_spec_defaults():
    spec = CascadeShadowMapSpecification()
    assert spec.depth_map_resolution == 4096
    assert spec.shadow_cascade_levels == [10.0, 20.0, 80.0, 640.0, 5000.0]


def test_cascade_spec_levels_are_not_shared():
    a = CascadeShadowMapSpecification()
    b = CascadeShadowMapSpecification()
    a.shadow_cascade_levels.append(9000.0)
    assert len(b.shadow_cascade_levels) == 5


def test_base_entity_defaults():
    entity = EnvironmentEntity()
    assert entity.entity_type is EnvironmentEntityType.NONE
    entity.set_running(True)
    assert entity.running is False


def test_atmosphere_type_and_running_flag():
    atmosphere = AtmosphericScattering()
    assert atmosphere.entity_type is EnvironmentEntityType.ATMOSPHERE
    assert atmosphere.running is False
    atmosphere.set_running(True)
    assert atmosphere.running is True


def test_shader_uniforms_without_camera_mirror_specification():
    atmosphere = AtmosphericScattering()
    uniforms = atmosphere.shader_uniforms()
    assert "view" not in uniforms
    spec = atmosphere.specification
    assert uniforms["u_SunIntensity"] == spec.sun_intensity
    assert uniforms["u_EarthRadius"] == spec.earth_radius
    assert np.allclose(uniforms["u_SunPosition"], spec.sun_position)
    assert len([k for k in uniforms if k.startswith("u_")]) == 12


def test_shader_uniforms_reflect_spec_changes():
    atmosphere = AtmosphericScattering()
    atmosphere.specification.sun_intensity = 5.5
    assert atmosphere.shader_uniforms()["u_SunIntensity"] == 5.5


def test_shader_uniforms_with_camera_strip_translation():
    camera = EditorCamera()
    atmosphere = AtmosphericScattering(camera)
    uniforms = atmosphere.shader_uniforms()
    view = uniforms["view"]
    assert np.allclose(view[:3, :3], camera.view_matrix[:3, :3])
    assert np.allclose(view[:3, 3], 0.0)
    assert np.allclose(view[3], [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(uniforms["projection"], camera.projection)


def test_atmosphere_loads_skybox_through_model_manager(tmp_path):
    manager = ModelManager(_FakeModel)
    atmosphere = AtmosphericScattering(model_manager=manager, root=tmp_path)
    assert atmosphere.skybox_model.path.endswith("scene.gltf")
    assert atmosphere.skybox_model.path.startswith(str(tmp_path))
    assert len(manager) == 1


def test_manager_add_get_find_remove():
    manager = EnvironmentManager()
    atmosphere = AtmosphericScattering()
    manager.add_entity(EnvironmentEntityType.ATMOSPHERE, atmosphere)
    assert manager.get_entity(EnvironmentEntityType.ATMOSPHERE) is atmosphere
    assert manager.find_entity(EnvironmentEntityType.ATMOSPHERE) is atmosphere
    manager.remove_entity(EnvironmentEntityType.ATMOSPHERE)
    assert manager.find_entity(EnvironmentEntityType.ATMOSPHERE) is None
    assert EnvironmentEntityType.ATMOSPHERE not in manager


def test_manager_add_replaces_existing():
    manager = EnvironmentManager()
    first = AtmosphericScattering()
    second = AtmosphericScattering()
    manager.add_entity(EnvironmentEntityType.ATMOSPHERE, first)
    manager.add_entity(EnvironmentEntityType.ATMOSPHERE, second)
    assert manager.get_entity(EnvironmentEntityType.ATMOSPHERE) is second


def test_manager_get_missing_raises():
    manager = EnvironmentManager()
    with pytest.raises(KeyError):
        manager.get_entity(EnvironmentEntityType.SSAO)


def test_manager_remove_missing_is_ignored():
    manager = EnvironmentManager()
    manager.remove_entity(EnvironmentEntityType.SSAO)
    assert manager.find_entity(EnvironmentEntityType.SSAO) is None


def test_manager_singleton():
    atmosphere = AtmosphericScattering()
    EnvironmentManager.get_instance().add_entity(EnvironmentEntityType.VOLMETRIC_FOG, atmosphere)
    try:
        found = EnvironmentManager.get_instance().find_entity(EnvironmentEntityType.VOLMETRIC_FOG)
        assert found is atmosphere
    finally:
        EnvironmentManager.get_instance().remove_entity(EnvironmentEntityType.VOLMETRIC_FOG)
    assert EnvironmentManager.get_instance().find_entity(EnvironmentEntityType.VOLMETRIC_FOG) is None