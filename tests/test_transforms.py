import math

import numpy as np
import pytest

from showroom.core.transforms import (
    Transform,
    Y_UP_TO_Z_UP,
    compose,
    euler_matrix,
    matrix_to_quaternion,
    offset_from_orbit,
    orbit_from_offset,
    to_yup_position,
    to_zup_points,
    to_zup_position,
    to_zup_quaternion,
)


def _quat_matrix(q):
    x, y, z, w = q
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ]
    )


def test_axis_conversion_is_a_proper_rotation():
    assert np.allclose(Y_UP_TO_Z_UP @ Y_UP_TO_Z_UP.T, np.eye(3))
    assert np.linalg.det(Y_UP_TO_Z_UP) == pytest.approx(1.0)
    assert to_zup_position((1, 2, 3)) == pytest.approx((1, -3, 2))
    assert to_yup_position((1, -3, 2)) == pytest.approx((1, 2, 3))
    assert np.allclose(to_zup_points([(0, 1, 0), (0, 0, 1)]), [(0, 0, 1), (0, -1, 0)])


def test_yaw_about_y_becomes_yaw_about_z():
    q = to_zup_quaternion((0, math.pi / 2, 0))
    s = math.sin(math.pi / 4)
    assert q == pytest.approx((0, 0, s, s), abs=1e-9)


def test_euler_order_is_xyz():
    rot = euler_matrix((math.pi / 2, 0, math.pi / 2))
    # Rz applied first: x -> y, then Rx: y -> z
    assert rot @ np.array([1, 0, 0]) == pytest.approx((0, 0, 1), abs=1e-9)


@pytest.mark.parametrize(
    "euler",
    [(0, 0, 0), (math.pi, 0, 0), (0, math.pi, 0), (0, 0, math.pi), (0.3, -1.2, 2.5)],
)
def test_quaternion_matches_matrix(euler):
    rot = euler_matrix(euler)
    q = matrix_to_quaternion(rot)
    assert np.linalg.norm(q) == pytest.approx(1.0)
    assert np.allclose(_quat_matrix(q), rot, atol=1e-9)


def test_vec3_validation():
    with pytest.raises(ValueError):
        Transform(position=(1, 2))


def test_compose_applies_parent_scale_and_rotation():
    parent = Transform(position=(10, 0, 0), rotation=(0, math.pi / 2, 0), scale=(2, 2, 2))
    child = Transform(position=(1, 0, 0))
    pose = compose(parent, child)
    assert pose.position == pytest.approx((10, 0, -2), abs=1e-9)
    assert pose.scale == pytest.approx((2, 2, 2))


def test_compose_nested_groups():
    building = Transform(position=(30, -0.7, 20))
    stairs = Transform(position=(6, -6, 0))
    step = Transform(position=(-1, 0.75, 0), rotation=(0, -math.pi / 2, 0))
    pose = compose(building, stairs, step)
    assert pose.position == pytest.approx((35, -5.95, 20))
    assert pose.zup_position() == pytest.approx((35, -20, -5.95))


def test_world_pose_scale_swaps_to_z_up():
    pose = compose(Transform(scale=(1, 2, 3)))
    assert pose.zup_scale() == pytest.approx((1, 3, 2))
    assert pose.rotation_matrix == pytest.approx(np.eye(3))


def test_orbit_from_default_camera():
    offset = to_zup_position((0, 5, 15))
    distance, yaw, pitch = orbit_from_offset(offset)
    assert distance == pytest.approx(math.sqrt(250))
    assert yaw == pytest.approx(0.0)
    assert pitch == pytest.approx(-math.degrees(math.atan2(5, 15)))
    assert offset_from_orbit(distance, yaw, pitch) == pytest.approx(offset)


def test_orbit_degenerate_offset():
    assert orbit_from_offset((0, 0, 0)) == (0.0, 0.0, 0.0)


def test_euler_matrix_is_rx_ry_rz():
    rx, ry, rz = 0.4, -0.9, 1.7
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    assert np.allclose(euler_matrix((rx, ry, rz)), mx @ my @ mz)
