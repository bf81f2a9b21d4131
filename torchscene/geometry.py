"""Fixed geometry and capture parameters used by the renderer passes."""

from __future__ import annotations

import math

import numpy as np

from torchscene import glmath

CUBE_VERTEX_COUNT = 36
QUAD_VERTEX_COUNT = 4

BRDF_RESOLUTION = 512
CUBEMAP_SIZE = 512
EQUIRECTANGLE_SIZE = 512
IRRADIANCE_SIZE = 32
PREFILTER_BASE_SIZE = 128
PREFILTER_MIP_LEVELS = 5


def _cube_vertices() -> np.ndarray:
    faces = [
        # (normal, four corners in winding order used to build two triangles)
        ((0.0, 0.0, -1.0), [(-1, -1, -1), (1, -1, -1), (1, 1, -1), (1, 1, -1), (-1, 1, -1), (-1, -1, -1)]),
        ((0.0, 0.0, 1.0), [(-1, -1, 1), (1, -1, 1), (1, 1, 1), (1, 1, 1), (-1, 1, 1), (-1, -1, 1)]),
        ((-1.0, 0.0, 0.0), [(-1, 1, 1), (-1, 1, -1), (-1, -1, -1), (-1, -1, -1), (-1, -1, 1), (-1, 1, 1)]),
        ((1.0, 0.0, 0.0), [(1, 1, 1), (1, 1, -1), (1, -1, -1), (1, -1, -1), (1, -1, 1), (1, 1, 1)]),
        ((0.0, -1.0, 0.0), [(-1, -1, -1), (1, -1, -1), (1, -1, 1), (1, -1, 1), (-1, -1, 1), (-1, -1, -1)]),
        ((0.0, 1.0, 0.0), [(-1, 1, -1), (1, 1, -1), (1, 1, 1), (1, 1, 1), (-1, 1, 1), (-1, 1, -1)]),
    ]
    rows = [
        [*(0.5 * c for c in corner), *normal]
        for normal, corners in faces
        for corner in corners
    ]
    return np.array(rows, dtype=np.float32)


CUBE_VERTICES = _cube_vertices()
"""Unit cube as 36 rows of (position xyz, normal xyz)."""

QUAD_VERTICES = np.array(
    [
        [-1.0, 1.0, 0.0, 0.0, 1.0],
        [-1.0, -1.0, 0.0, 0.0, 0.0],
        [1.0, 1.0, 0.0, 1.0, 1.0],
        [1.0, -1.0, 0.0, 1.0, 0.0],
    ],
    dtype=np.float32,
)
"""Full-screen quad as a triangle strip of (position xyz, texcoord uv)."""


def capture_projection() -> np.ndarray:
    """Projection used to render the six cubemap faces."""
    return glmath.perspective(math.radians(90.0), 1.0, 0.1, 10000.0)


def capture_views() -> list[np.ndarray]:
    """View matrices for the +X, -X, +Y, -Y, +Z, -Z cubemap faces."""
    origin = (0.0, 0.0, 0.0)
    targets_and_ups = [
        ((1.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
        ((-1.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
        ((0.0, 1.0, 0.0), (0.0, 0.0, 1.0)),
        ((0.0, -1.0, 0.0), (0.0, 0.0, -1.0)),
        ((0.0, 0.0, 1.0), (0.0, -1.0, 0.0)),
        ((0.0, 0.0, -1.0), (0.0, -1.0, 0.0)),
    ]
    return [glmath.look_at(origin, target, up) for target, up in targets_and_ups]


def prefilter_mip_sizes(base: int = PREFILTER_BASE_SIZE, levels: int = PREFILTER_MIP_LEVELS) -> list[int]:
    """Edge length of each mip level of the prefiltered environment map."""
    if levels < 1:
        raise ValueError("levels must be at least 1")
    return [int(base * 0.5**mip) for mip in range(levels)]


def prefilter_roughness(mip: int, levels: int = PREFILTER_MIP_LEVELS) -> float:
    """Roughness value rendered into the given mip level."""
    if levels < 2:
        raise ValueError("levels must be at least 2")
    if not 0 <= mip < levels:
        raise ValueError(f"mip {mip} out of range for {levels} levels")
    return mip / (levels - 1)