import math

import numpy as np
import pytest

from pulsar_sim.render.camera import OrbitCamera


@pytest.fixture
def camera():
    return OrbitCamera((1000, 800), 20.0, fov_deg=75.0, min_distance=4.0, max_distance=120.0)


def test_initial_position_on_z_axis(camera):
    np.testing.assert_allclose(camera.position, [0.0, 0.0, 20.0])
    right, up, forward = camera.basis()
    np.testing.assert_allclose(right, [1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(up, [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(forward, [0.0, 0.0, -1.0], atol=1e-12)


def test_origin_projects_to_viewport_centre(camera):
    assert camera.world_to_screen(np.zeros(3)) == (500, 400)


def test_vertical_field_of_view(camera):
    half = math.tan(math.radians(37.5)) * 20.0
    screen, depth, visible = camera.project(np.array([[0.0, half, 0.0], [0.0, -half, 0.0]]))
    assert visible.all()
    assert depth == pytest.approx([20.0, 20.0])
    assert screen[0, 1] == pytest.approx(0.0, abs=1e-6)
    assert screen[1, 1] == pytest.approx(800.0)


def test_points_behind_camera_are_hidden(camera):
    assert camera.world_to_screen(np.array([0.0, 0.0, 30.0])) is None


def test_resize_changes_aspect(camera):
    camera.update_size((400, 800))
    assert camera.aspect == pytest.approx(0.5)
    assert camera.world_to_screen(np.zeros(3)) == (200, 400)


def test_zoom_is_damped_and_clamped(camera):
    camera.zoom_by_factor(100.0)
    camera.update(0.5)
    assert camera.distance == pytest.approx(70.0)
    for _ in range(200):
        camera.update(0.5)
    assert camera.distance == pytest.approx(120.0)
    camera.set_zoom(1.0)
    assert camera.distance == 4.0


def test_drag_rotates_around_origin(camera):
    camera.begin_drag((100, 100))
    camera.drag((0, 100))
    camera.end_drag()
    assert not camera.dragging
    camera.update(1.0)
    assert camera.yaw == pytest.approx(0.5)
    assert np.linalg.norm(camera.position) == pytest.approx(20.0)


def test_pitch_is_clamped(camera):
    camera.begin_drag((0, 0))
    camera.drag((0, 100000))
    camera.update(1.0)
    assert camera.pitch < math.pi / 2
    right, _, _ = camera.basis()
    assert np.isfinite(right).all()


def test_projected_radius(camera):
    expected = 1.5 / math.tan(math.radians(37.5)) / 20.0 * 400
    assert camera.projected_radius(20.0, 1.5) == pytest.approx(expected)
    assert camera.projected_radius(0.0, 1.5) == 0.0


def test_direction_to_screen(camera):
    x, y, ok = camera.direction_to_screen(np.array([0.0, 0.0, -1.0]))
    assert ok
    assert (x, y) == pytest.approx((500.0, 400.0))
    assert camera.direction_to_screen(np.array([0.0, 0.0, 1.0]))[2] is False
