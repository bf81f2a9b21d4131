"""Environment entities (atmosphere, shadows) and the manager that holds them."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

import numpy as np

from torchscene import glmath
from torchscene.camera import EditorCamera
from torchscene.model_manager import ModelManager

SKYBOX_MODEL_PATH = Path("assets") / "models" / "essential" / "sphere" / "scene.gltf"


class EnvironmentEntityType(enum.Enum):
    """Kinds of environment entity a scene can hold."""

    NONE = enum.auto()
    ATMOSPHERE = enum.auto()
    VOLUMETRIC_FOG = enum.auto()
    CASCADE_SHADOW_MAP = enum.auto()
    SSAO = enum.auto()


def _vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0):
    return field(default_factory=lambda: np.array([x, y, z], dtype=float))


@dataclass(eq=False)
class AtmosphericScatteringSpecification:
    """Parameters of the physically based sky model."""

    sun_position: np.ndarray = _vec3()
    sun_color: np.ndarray = _vec3()
    sun_intensity: float = 0.0
    ray_t_min: float = 0.0
    earth_radius: float = 0.0
    atmosphere_height: float = 0.0
    rayleigh_height: float = 0.0
    rayleigh_scattering_coef: np.ndarray = _vec3()
    mie_height: float = 0.0
    mie_scattering_coef: np.ndarray = _vec3()
    ozone_absorption_coef: np.ndarray = _vec3()
    sample_count: int = 0
    sun_angle: float = 0.0
    exposure: float = 0.0
    gamma: float = 0.0
    henyey_greenstein_coef: float = 0.0
    final_sunlight_color: np.ndarray = _vec3()

    @classmethod
    def default(cls) -> AtmosphericScatteringSpecification:
        """The Earth-like defaults the atmosphere starts with."""
        return cls(
            sun_position=glmath.normalize([-1.0, 1.0, -1.0]),
            sun_intensity=2.0,
            ray_t_min=0.001,
            earth_radius=6371000.0,
            atmosphere_height=100000.0,
            rayleigh_height=8000.0,
            mie_height=1200.0,
            rayleigh_scattering_coef=np.array([5.802, 13.558, 33.1]) * 1e-6,
            mie_scattering_coef=np.full(3, 3.996) * 1e-6,
            ozone_absorption_coef=np.array([3.426, 8.298, 0.356]) * 0.1 * 1e-5,
            sun_color=np.ones(3),
            gamma=2.8,
            exposure=8.0,
            sun_angle=0.0 * math.pi / 180.0,
        )


@dataclass
class CascadeShadowMapSpecification:
    """Resolution and split distances of the cascaded shadow map."""

    shadow_map_framebuffer: int = 0
    depth_map_resolution: int = 4096
    shadow_map_texture: int = 0
    shadow_cascade_levels: list[float] = field(
        default_factory=lambda: [10.0, 20.0, 80.0, 640.0, 5000.0]
    )


class EnvironmentEntity:
    """Base of everything that contributes to the scene environment."""

    def __init__(
        self,
        entity_type: EnvironmentEntityType = EnvironmentEntityType.NONE,
        specification: Any = None,
        camera: EditorCamera | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.specification = specification
        self.camera = camera

    @property
    def running(self) -> bool:
        return False

    def set_running(self, running: bool) -> None:
        """Entities without a running state ignore this."""


class AtmosphericScattering(EnvironmentEntity):
    """Sky rendered by atmospheric scattering around the current camera."""

    def __init__(
        self,
        camera: EditorCamera | None = None,
        model_manager: ModelManager | None = None,
        root: str | Path = ".",
    ) -> None:
        super().__init__(
            EnvironmentEntityType.ATMOSPHERE,
            AtmosphericScatteringSpecification.default(),
            camera,
        )
        self._running = False
        self.skybox_model = None
        if model_manager is not None:
            self.skybox_model = model_manager.load_model(str(Path(root) / SKYBOX_MODEL_PATH))

    @property
    def running(self) -> bool:
        return self._running

    def set_running(self, running: bool) -> None:
        self._running = running

    def shader_uniforms(self) -> dict[str, Any]:
        """Uniforms for the sky shader; camera matrices are included when a camera is set."""
        spec = self.specification
        uniforms: dict[str, Any] = {}
        if self.camera is not None:
            view = np.identity(4)
            view[:3, :3] = self.camera.view_matrix[:3, :3]
            uniforms["view"] = view
            uniforms["projection"] = self.camera.projection
        uniforms.update(
            {
                "u_SunPosition": spec.sun_position,
                "u_SunIntensity": spec.sun_intensity,
                "u_RayTMin": spec.ray_t_min,
                "u_EarthRadius": spec.earth_radius,
                "u_AtmosphereHeight": spec.atmosphere_height,
                "u_RayleighHeight": spec.rayleigh_height,
                "u_MieHeight": spec.mie_height,
                "u_RayleighScatteringCoef": spec.rayleigh_scattering_coef,
                "u_MieScatteringCoef": spec.mie_scattering_coef,
                "u_OzoneAbsorptionCoef": spec.ozone_absorption_coef,
                "u_SunColor": spec.sun_color,
                "u_SunAngle": spec.sun_angle,
            }
        )
        return uniforms


class EnvironmentManager:
    """Holds at most one environment entity of each type."""

    _instance: ClassVar[EnvironmentManager | None] = None

    def __init__(self) -> None:
        self._entities: dict[EnvironmentEntityType, EnvironmentEntity] = {}

    @classmethod
    def get_instance(cls) -> EnvironmentManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def add_entity(self, entity_type: EnvironmentEntityType, entity: EnvironmentEntity) -> None:
        """Register ``entity``, replacing any previous one of the same type."""
        self._entities[entity_type] = entity

    def remove_entity(self, entity_type: EnvironmentEntityType) -> None:
        """Forget the entity of this type; absent types are ignored."""
        self._entities.pop(entity_type, None)

    def get_entity(self, entity_type: EnvironmentEntityType) -> EnvironmentEntity:
        try:
            return self._entities[entity_type]
        except KeyError:
            raise KeyError("Entity not found") from None

    def find_entity(self, entity_type: EnvironmentEntityType) -> EnvironmentEntity | None:
        return self._entities.get(entity_type)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._entities