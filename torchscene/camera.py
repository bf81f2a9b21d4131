"""Cameras: a projection holder and an orbiting editor camera."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from torchscene import glmath

_MOUSE_SENSITIVITY = 0.003


class Camera:
    """A camera that owns a projection matrix."""

    def __init__(self, projection: np.ndarray | None = None) -> None:
        self.projection = np.identity(4) if projection is None else np.asarray(projection, dtype=float)


class EditorCamera(Camera):
    """Camera orbiting a focal point, driven by mouse rotate, pan and zoom."""

    def __init__(
        self,
        fov: float | None = None,
        aspect_ratio: float | None = None,
        near_clip: float | None = None,
        far_clip: float | None = None,
    ) -> None:
        attrs = (fov, aspect_ratio, near_clip, far_clip)
        if any(a is not None for a in attrs) and any(a is None for a in attrs):
            raise ValueError("fov, aspect_ratio, near_clip and far_clip must be given together")
        if fov is None:
            super().__init__()
            self.fov = 45.0
            self.aspect_ratio = 1.778
            self.near_clip = 0.1
            self.far_clip = 10000.0
        else:
            super().__init__(glmath.perspective(math.radians(fov), aspect_ratio, near_clip, far_clip))
            self.fov = fov
            self.aspect_ratio = aspect_ratio
            self.near_clip = near_clip
            self.far_clip = far_clip

        self.view_matrix = np.identity(4)
        self.position = np.zeros(3)
        self.focal_point = np.zeros(3)
        self.distance = 10.0
        self.pitch = 0.0
        self.yaw = 0.0
        self.viewport_width = 1280.0
        self.viewport_height = 720.0
        self.is_on_focus = True
        self._update_view()

    @property
    def zoom(self) -> float:
        """The vertical field of view in degrees."""
        return self.fov

    def update(
        self,
        control_held: bool,
        mouse_offset: Sequence[float],
        left_pressed: bool,
        right_pressed: bool,
        scroll_offset: float,
    ) -> None:
        """Apply one frame of input; nothing happens unless control is held."""
        if not control_held:
            return
        if self.is_on_focus:
            offset = np.asarray(mouse_offset, dtype=float) * _MOUSE_SENSITIVITY
            if left_pressed:
                self.mouse_rotate(offset)
            elif right_pressed:
                self.mouse_pan(offset)
            self.mouse_zoom(scroll_offset)
        self._update_view()

    def set_camera_attributes(self, fov: float, aspect_ratio: float, near_clip: float, far_clip: float) -> None:
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near_clip = near_clip
        self.far_clip = far_clip
        self.projection = glmath.perspective(math.radians(fov), aspect_ratio, near_clip, far_clip)
        self._update_view()

    def set_viewport_size(self, width: float, height: float) -> None:
        self.viewport_width = width
        self.viewport_height = height
        self._update_projection()

    def view_projection(self) -> np.ndarray:
        return self.projection @ self.view_matrix

    def orientation(self) -> np.ndarray:
        return glmath.quat_from_euler([-self.pitch, -self.yaw, 0.0])

    def up_direction(self) -> np.ndarray:
        return glmath.quat_rotate(self.orientation(), [0.0, 1.0, 0.0])

    def right_direction(self) -> np.ndarray:
        return glmath.quat_rotate(self.orientation(), [1.0, 0.0, 0.0])

    def forward_direction(self) -> np.ndarray:
        return glmath.quat_rotate(self.orientation(), [0.0, 0.0, -1.0])

    def mouse_pan(self, delta: Sequence[float]) -> None:
        dx, dy = delta
        x_speed, y_speed = self.pan_speed()
        self.focal_point = self.focal_point - self.right_direction() * dx * x_speed * self.distance
        self.focal_point = self.focal_point + self.up_direction() * dy * y_speed * self.distance

    def mouse_rotate(self, delta: Sequence[float]) -> None:
        dx, dy = delta
        yaw_sign = -1.0 if self.up_direction()[1] < 0 else 1.0
        self.yaw += yaw_sign * dx * self.rotation_speed()
        self.pitch += dy * self.rotation_speed()

    def mouse_zoom(self, delta: float) -> None:
        self.distance -= delta * self.zoom_speed()
        if self.distance < 1.0:
            self.focal_point = self.focal_point + self.forward_direction()
            self.distance = 1.0

    def pan_speed(self) -> tuple[float, float]:
        def factor(size: float) -> float:
            s = min(size / 1000.0, 2.4)
            return 0.0366 * (s * s) - 0.1778 * s + 0.3021

        return factor(self.viewport_width), factor(self.viewport_height)

    def rotation_speed(self) -> float:
        return 0.8

    def zoom_speed(self) -> float:
        distance = max(self.distance * 0.2, 0.0)
        return min(distance * distance, 100.0)

    def _update_projection(self) -> None:
        if self.viewport_height <= 0.0:
            self.viewport_width = 1.0
        if self.viewport_height == 0.0:
            aspect = math.inf
        else:
            aspect = self.viewport_width / self.viewport_height
        self.projection = glmath.perspective(math.radians(self.fov), aspect, self.near_clip, self.far_clip)

    def _update_view(self) -> None:
        self.position = self.focal_point - self.forward_direction() * self.distance
        transform = glmath.translate(self.position) @ glmath.quat_to_mat4(self.orientation())
        self.view_matrix = np.linalg.inv(transform)