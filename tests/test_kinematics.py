import math
from dataclasses import replace

import numpy as np
import pytest

from pulsar_sim.core.config import KINEMATICS_CFG
from pulsar_sim.core.errors import InvalidParameters
from pulsar_sim.core.kinematics import (
    KinematicEvaluator,
    Transform,
    body_positions,
    orbit_path,
    orbital_angle,
    orbital_period,
    rot_y,
    rot_z,
)
from pulsar_sim.core.model import ParameterStore


@pytest.fixture
def store():
    return ParameterStore()


@pytest.fixture
def evaluator():
    return KinematicEvaluator()


def test_orbital_period_formula():
    assert orbital_period(2.2) == pytest.approx(2 * math.pi * math.sqrt(1000 / 2.2))


@pytest.mark.parametrize("total_mass", [0.0, -1.0])
def test_period_undefined_for_non_positive_mass(total_mass):
    with pytest.raises(InvalidParameters):
        orbital_period(total_mass)


def test_orbital_angle_one_period_is_full_turn():
    period = orbital_period(2.2)
    assert orbital_angle(period, 2.2) == pytest.approx(2 * math.pi)


@pytest.mark.parametrize("inclination", [0.0, 30.0, 90.0, 180.0])
def test_start_positions_independent_of_inclination(store, evaluator, inclination):
    store.set("orbitalInclination", inclination)
    frame = evaluator.evaluate(0.0, store.params)
    assert frame.angle == 0.0
    np.testing.assert_allclose(
        frame.pulsar.position, [-store.params.pulsar_orbit_radius, 0.0, 0.0], atol=1e-12
    )
    np.testing.assert_allclose(
        frame.companion.position, [store.params.companion_orbit_radius, 0.0, 0.0], atol=1e-12
    )


def test_bodies_diametrically_opposite(store, evaluator):
    store.set("orbitalInclination", 37.0)
    params = store.params
    for elapsed in np.linspace(0.0, 200.0, 17):
        frame = evaluator.evaluate(float(elapsed), params)
        p, c = frame.pulsar.position, frame.companion.position
        np.testing.assert_allclose(
            p * params.companion_orbit_radius, -c * params.pulsar_orbit_radius, atol=1e-9
        )
        assert np.linalg.norm(p - c) == pytest.approx(KINEMATICS_CFG.separation)


def test_zero_inclination_keeps_orbit_in_plane(store, evaluator):
    store.set("orbitalInclination", 0.0)
    frame = evaluator.evaluate(17.3, store.params)
    assert frame.pulsar.position[1] == pytest.approx(0.0, abs=1e-12)
    assert frame.companion.position[1] == pytest.approx(0.0, abs=1e-12)
    assert abs(frame.pulsar.position[2]) > 0.0


def test_ninety_degrees_maximises_out_of_plane(store, evaluator):
    store.set("orbitalInclination", 90.0)
    quarter = orbital_period(store.params.total_mass) / 4
    frame = evaluator.evaluate(quarter, store.params)
    assert frame.pulsar.position[1] == pytest.approx(-store.params.pulsar_orbit_radius)
    assert frame.companion.position[1] == pytest.approx(store.params.companion_orbit_radius)
    assert frame.pulsar.position[2] == pytest.approx(0.0, abs=1e-12)


def test_body_positions_formula():
    angle, inc = 0.7, math.radians(30.0)
    pulsar, companion = body_positions(angle, 2.0, 3.0, inc)
    np.testing.assert_allclose(
        pulsar,
        [-2 * math.cos(angle), -2 * math.sin(angle) * math.sin(inc), 2 * math.sin(angle) * math.cos(inc)],
    )
    np.testing.assert_allclose(
        companion,
        [3 * math.cos(angle), 3 * math.sin(angle) * math.sin(inc), -3 * math.sin(angle) * math.cos(inc)],
    )


def test_periodicity(store, evaluator):
    store.set("orbitalInclination", 63.0)
    period = orbital_period(store.params.total_mass)
    a = evaluator.evaluate(12.5, store.params)
    b = evaluator.evaluate(12.5 + period, store.params)
    np.testing.assert_allclose(a.pulsar.position, b.pulsar.position, atol=1e-9)
    np.testing.assert_allclose(a.companion.position, b.companion.position, atol=1e-9)


def test_time_speed_scales_orbital_time(store, evaluator):
    store.set("timeSpeed", 3.0)
    frame = evaluator.evaluate(2.0, store.params)
    assert frame.time == pytest.approx(6.0)
    assert frame.angle == pytest.approx(orbital_angle(6.0, store.params.total_mass))


def test_evaluate_is_idempotent(store, evaluator):
    evaluator.tick(0.1, 0.1, store.params)
    a = evaluator.evaluate(5.0, store.params)
    b = evaluator.evaluate(5.0, store.params)
    for name in ("pulsar", "companion", "beam_a", "beam_b"):
        np.testing.assert_array_equal(getattr(a, name).matrix(), getattr(b, name).matrix())


def test_spin_accumulates_real_time_only(store, evaluator):
    store.set("pulsarSpinFrequency", 2.0)
    store.set("timeSpeed", 5.0)
    evaluator.tick(0.25, 0.25, store.params)
    frame = evaluator.tick(0.25, 0.5, store.params)
    assert frame.spin_angle == pytest.approx(2.0 * 0.5 * 2 * math.pi)


def test_spin_can_follow_time_speed(store):
    evaluator = KinematicEvaluator(replace(KINEMATICS_CFG, spin_follows_time_speed=True))
    store.set("timeSpeed", 4.0)
    frame = evaluator.tick(0.5, 0.5, store.params)
    assert frame.spin_angle == pytest.approx(1.0 * 0.5 * 4.0 * 2 * math.pi)


def test_spin_starts_at_zero_and_ignores_negative_delta(store, evaluator):
    assert evaluator.spin_angle == 0.0
    evaluator.tick(-1.0, 0.0, store.params)
    assert evaluator.spin_angle == 0.0
    evaluator.tick(0.5, 0.5, store.params)
    evaluator.reset()
    assert evaluator.spin_angle == 0.0


def test_pulsar_rotation_is_spin_about_y(store, evaluator):
    frame = evaluator.tick(0.125, 0.125, store.params)
    np.testing.assert_allclose(frame.pulsar.rotation, rot_y(math.pi / 4))


def test_tick_with_undefined_period_does_not_advance_spin(store, evaluator):
    params = store.params.copy()
    params.pulsar_mass = 0.0
    params.companion_mass = 0.0
    params.total_mass = 0.0
    with pytest.raises(InvalidParameters):
        evaluator.tick(1.0, 1.0, params)
    assert evaluator.spin_angle == 0.0


def test_beams_point_in_opposite_directions(store, evaluator):
    store.set("beamInclination", 33.0)
    frame = evaluator.tick(0.37, 0.37, store.params)
    a, b = frame.beam_directions()
    np.testing.assert_allclose(a, -b, atol=1e-12)
    assert np.linalg.norm(a) == pytest.approx(1.0)


def test_beam_tilt_and_scale(store, evaluator):
    store.set("beamInclination", 90.0)
    store.set("beamConeAngle", 45.0)
    frame = evaluator.evaluate(0.0, store.params)
    a, _ = frame.beam_directions()
    # spin 0: tilt about z turns +y into -x
    np.testing.assert_allclose(a, [-1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(frame.beam_a.scale, [1.0, 1.0, 1.0])
    assert frame.beam_scale == pytest.approx(1.0)


def test_beams_are_attached_to_pulsar(store, evaluator):
    frame = evaluator.tick(0.3, 41.0, store.params)
    np.testing.assert_allclose(frame.beam_a.position, frame.pulsar.position)
    np.testing.assert_allclose(frame.beam_b.position, frame.pulsar.position)
    expected = frame.pulsar.rotation @ rot_z(frame.beam_tilt)
    np.testing.assert_allclose(frame.beam_a.rotation, expected, atol=1e-12)
    np.testing.assert_allclose(frame.beam_b.rotation, expected @ rot_z(math.pi), atol=1e-12)


def test_transform_matrix_and_apply_agree():
    t = Transform(
        position=np.array([1.0, 2.0, 3.0]),
        rotation=rot_z(0.4) @ rot_y(1.1),
        scale=np.array([0.5, 1.0, 0.5]),
    )
    local = np.array([[0.3, -1.0, 2.0], [1.0, 0.0, 0.0]])
    homogeneous = np.hstack([local, np.ones((2, 1))]) @ t.matrix().T
    np.testing.assert_allclose(t.apply(local), homogeneous[:, :3])


def test_orbit_path_matches_evaluator(store, evaluator):
    store.set("orbitalInclination", 70.0)
    pulsar_path, companion_path = orbit_path(store.params, samples=9)
    period = orbital_period(store.params.total_mass)
    frame = evaluator.evaluate(period / 8 * 3, store.params)
    np.testing.assert_allclose(pulsar_path[3], frame.pulsar.position, atol=1e-9)
    np.testing.assert_allclose(companion_path[3], frame.companion.position, atol=1e-9)
