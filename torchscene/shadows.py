"""Cascaded shadow map: per-cascade light-space matrices fitted to the camera frustum."""

from __future__ import annotations

import itertools
import math

import numpy as np

from torchscene import glmath
from torchscene.camera import EditorCamera
from torchscene.environment import (
    CascadeShadowMapSpecification,
    EnvironmentEntity,
    EnvironmentEntityType,
    EnvironmentManager,
)

_Z_MULT = 10.0


def frustum_corners_world_space(projview: np.ndarray) -> np.ndarray:
    """The eight frustum corners of ``projview`` as homogeneous rows with w = 1.

    Corners are ordered by x, then y, then z, each going from -1 to 1 in NDC.
    """
    inv = np.linalg.inv(np.asarray(projview, dtype=float))
    corners = []
    for x, y, z in itertools.product((0, 1), repeat=3):
        pt = inv @ np.array([2.0 * x - 1.0, 2.0 * y - 1.0, 2.0 * z - 1.0, 1.0])
        corners.append(pt / pt[3])
    return np.array(corners)


class CascadeShadowMap(EnvironmentEntity):
    """Splits the camera frustum into cascades lit from the atmosphere's sun."""

    def __init__(
        self,
        camera: EditorCamera,
        environment_manager: EnvironmentManager | None = None,
    ) -> None:
        super().__init__(
            EnvironmentEntityType.CASCADE_SHADOW_MAP,
            CascadeShadowMapSpecification(),
            camera,
        )
        self._environment = environment_manager

    def _sun_direction(self) -> np.ndarray:
        manager = self._environment or EnvironmentManager.get_instance()
        atmosphere = manager.find_entity(EnvironmentEntityType.ATMOSPHERE)
        if atmosphere is None:
            raise RuntimeError("no atmosphere registered to provide the sun direction")
        return np.asarray(atmosphere.specification.sun_position, dtype=float)

    def cascade_ranges(self) -> list[tuple[float, float]]:
        """Near and far distance of each cascade, from the camera's near to far clip."""
        levels = self.specification.shadow_cascade_levels
        if not levels:
            raise ValueError("at least one cascade level is required")
        bounds = [self.camera.near_clip, *levels, self.camera.far_clip]
        return list(zip(bounds, bounds[1:]))

    def light_space_matrix(self, near_plane: float, far_plane: float) -> np.ndarray:
        """Orthographic light projection times light view covering one frustum slice."""
        camera = self.camera
        proj = glmath.perspective(
            math.radians(camera.zoom),
            float(camera.viewport_width) / float(camera.viewport_height),
            near_plane,
            far_plane,
        )
        corners = frustum_corners_world_space(proj @ camera.view_matrix)
        center = corners[:, :3].mean(axis=0)
        light_view = glmath.look_at(center + self._sun_direction(), center, [0.0, 1.0, 0.0])

        transformed = (light_view @ corners.T).T
        min_x, min_y, min_z = transformed[:, :3].min(axis=0)
        max_x, max_y, max_z = transformed[:, :3].max(axis=0)

        min_z = min_z * _Z_MULT if min_z < 0 else min_z / _Z_MULT
        max_z = max_z / _Z_MULT if max_z < 0 else max_z * _Z_MULT

        light_projection = glmath.ortho(min_x, max_x, min_y, max_y, min_z, max_z)
        return light_projection @ light_view

    def light_space_matrices(self) -> list[np.ndarray]:
        """One light-space matrix per cascade."""
        return [self.light_space_matrix(near, far) for near, far in self.cascade_ranges()]