"""Small 3D math helpers with OpenGL (right-handed, [-1, 1] depth) conventions.

Matrices are 4x4 ``numpy`` arrays acting on column vectors, so a point ``p``
is transformed as ``m @ p``. Quaternions are arrays ordered ``(w, x, y, z)``.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

ArrayLike = Sequence[float] | np.ndarray


def _vec(v: ArrayLike, size: int) -> np.ndarray:
    arr = np.asarray(v, dtype=float)
    if arr.shape != (size,):
        raise ValueError(f"expected a vector of length {size}, got shape {arr.shape}")
    return arr


def normalize(v: ArrayLike) -> np.ndarray:
    """Return ``v`` scaled to unit length."""
    arr = np.asarray(v, dtype=float)
    length = float(np.linalg.norm(arr))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return arr / length


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection; ``fovy`` is in radians."""
    if near == far:
        raise ValueError("near and far planes must differ")
    f = 1.0 / math.tan(fovy / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect if not math.isinf(aspect) else 0.0
    m[1, 1] = f
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -(2.0 * far * near) / (far - near)
    m[3, 2] = -1.0
    return m


def look_at(eye: ArrayLike, center: ArrayLike, up: ArrayLike) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = _vec(eye, 3)
    f = normalize(_vec(center, 3) - eye_v)
    s = normalize(np.cross(f, _vec(up, 3)))
    u = np.cross(s, f)
    m = np.identity(4)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -float(s @ eye_v)
    m[1, 3] = -float(u @ eye_v)
    m[2, 3] = float(f @ eye_v)
    return m


def ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    """Right-handed orthographic projection."""
    if left == right or bottom == top or near == far:
        raise ValueError("orthographic volume must have non-zero extent")
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def translate(v: ArrayLike) -> np.ndarray:
    """Translation matrix by ``v``."""
    m = np.identity(4)
    m[:3, 3] = _vec(v, 3)
    return m


def scale(v: ArrayLike) -> np.ndarray:
    """Non-uniform scale matrix by ``v``."""
    m = np.identity(4)
    m[:3, :3] = np.diag(_vec(v, 3))
    return m


def quat_from_euler(angles: ArrayLike) -> np.ndarray:
    """Quaternion ``(w, x, y, z)`` from Euler angles (pitch, yaw, roll) in radians."""
    a = _vec(angles, 3) * 0.5
    cx, cy, cz = np.cos(a)
    sx, sy, sz = np.sin(a)
    return np.array(
        [
            cx * cy * cz + sx * sy * sz,
            sx * cy * cz - cx * sy * sz,
            cx * sy * cz + sx * cy * sz,
            cx * cy * sz - sx * sy * cz,
        ]
    )


def quat_to_mat4(q: ArrayLike) -> np.ndarray:
    """Rotation matrix of a unit quaternion ``(w, x, y, z)``."""
    w, x, y, z = _vec(q, 4)
    m = np.identity(4)
    m[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return m


def quat_rotate(q: ArrayLike, v: ArrayLike) -> np.ndarray:
    """Rotate the 3-vector ``v`` by the unit quaternion ``q``."""
    quat = _vec(q, 4)
    vec = _vec(v, 3)
    w, axis = quat[0], quat[1:]
    uv = np.cross(axis, vec)
    uuv = np.cross(axis, uv)
    return vec + 2.0 * (w * uv + uuv)