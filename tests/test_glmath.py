import math

import numpy as np
import pytest

from torchscene import glmath


def test_normalize_gives_unit_length():
    v = glmath.normalize([3.0, -4.0, 12.0])
    assert np.isclose(np.linalg.norm(v), 1.0)
    assert np.allclose(np.cross(v, [3.0, -4.0, 12.0]), 0.0)


def test_normalize_zero_raises():
    with pytest.raises(ValueError):
        glmath.normalize([0.0, 0.0, 0.0])


def test_perspective_maps_near_and_far_to_clip_bounds():
    near, far = 0.1, 100.0
    m = glmath.perspective(math.radians(60.0), 1.5, near, far)
    p_near = m @ np.array([0.0, 0.0, -near, 1.0])
    p_far = m @ np.array([0.0, 0.0, -far, 1.0])
    assert np.isclose(p_near[2] / p_near[3], -1.0)
    assert np.isclose(p_far[2] / p_far[3], 1.0)


def test_perspective_equal_planes_raises():
    with pytest.raises(ValueError):
        glmath.perspective(1.0, 1.0, 5.0, 5.0)


def test_look_at_moves_eye_to_origin_and_target_down_negative_z():
    eye = np.array([1.0, 2.0, 3.0])
    center = np.array([4.0, 2.0, -1.0])
    m = glmath.look_at(eye, center, [0.0, 1.0, 0.0])
    assert np.allclose(m @ np.append(eye, 1.0), [0.0, 0.0, 0.0, 1.0])
    target = m @ np.append(center, 1.0)
    assert np.allclose(target[:2], 0.0)
    assert target[2] < 0.0
    assert np.allclose(m[:3, :3] @ m[:3, :3].T, np.identity(3))


def test_ortho_maps_box_corners_to_unit_cube():
    m = glmath.ortho(-2.0, 6.0, -1.0, 3.0, 0.5, 20.0)
    low = m @ np.array([-2.0, -1.0, -0.5, 1.0])
    high = m @ np.array([6.0, 3.0, -20.0, 1.0])
    assert np.allclose(low[:3], [-1.0, -1.0, -1.0])
    assert np.allclose(high[:3], [1.0, 1.0, 1.0])


def test_ortho_degenerate_raises():
    with pytest.raises(ValueError):
        glmath.ortho(1.0, 1.0, 0.0, 1.0, 0.0, 1.0)


def test_translate_and_scale_compose():
    m = glmath.translate([1.0, 2.0, 3.0]) @ glmath.scale([2.0, 3.0, 4.0])
    assert np.allclose(m @ np.array([1.0, 1.0, 1.0, 1.0]), [3.0, 5.0, 7.0, 1.0])


def test_translate_rejects_wrong_size():
    with pytest.raises(ValueError):
        glmath.translate([1.0, 2.0])


def test_zero_euler_is_identity_quaternion():
    assert np.allclose(glmath.quat_from_euler([0.0, 0.0, 0.0]), [1.0, 0.0, 0.0, 0.0])


@pytest.mark.parametrize("angles", [(0.3, -1.2, 0.7), (1.0, 0.0, 0.0), (-0.4, 2.5, -3.0)])
def test_quaternion_rotation_agrees_with_matrix(angles):
    q = glmath.quat_from_euler(angles)
    assert np.isclose(np.linalg.norm(q), 1.0)
    m = glmath.quat_to_mat4(q)
    assert np.allclose(m[:3, :3] @ m[:3, :3].T, np.identity(3))
    assert np.isclose(np.linalg.det(m[:3, :3]), 1.0)
    v = np.array([0.2, -1.5, 3.0])
    assert np.allclose(glmath.quat_rotate(q, v), m[:3, :3] @ v)