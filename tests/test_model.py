import math

import pytest

from pulsar_sim.core.config import KINEMATICS_CFG
from pulsar_sim.core.errors import (
    InvalidParameters,
    InvalidParameterValue,
    ParameterError,
    UnknownParameter,
)
from pulsar_sim.core.model import ParameterStore, SetParameter, SimulationParameters


@pytest.fixture
def store():
    return ParameterStore()


def test_defaults_match_reference_scene(store):
    assert store.snapshot() == {
        "pulsarMass": 1.4,
        "companionMass": 0.8,
        "orbitalInclination": 90.0,
        "pulsarSpinFrequency": 1.0,
        "beamConeAngle": 20.0,
        "beamInclination": 45.0,
        "timeSpeed": 1.0,
    }


def test_default_radii(store):
    params = store.params
    assert params.total_mass == pytest.approx(2.2)
    assert params.pulsar_orbit_radius == pytest.approx(10 * 0.8 / 2.2)
    assert params.companion_orbit_radius == pytest.approx(10 * 1.4 / 2.2)
    assert params.pulsar_orbit_radius == pytest.approx(3.636, abs=1e-3)
    assert params.companion_orbit_radius == pytest.approx(6.364, abs=1e-3)


@pytest.mark.parametrize("m1, m2", [(1.4, 0.8), (0.1, 3.0), (2.0, 2.0), (1e-3, 50.0)])
def test_radius_ratio_and_sum(store, m1, m2):
    store.set("pulsarMass", m1)
    store.set("companionMass", m2)
    params = store.params
    assert params.pulsar_orbit_radius / params.companion_orbit_radius == pytest.approx(m2 / m1)
    assert params.pulsar_orbit_radius + params.companion_orbit_radius == pytest.approx(
        KINEMATICS_CFG.separation
    )


def test_negative_mass_rejected_and_radii_kept(store):
    before = (store.params.pulsar_orbit_radius, store.params.companion_orbit_radius)
    with pytest.raises(InvalidParameterValue):
        store.set("pulsarMass", -1)
    assert store.get("pulsarMass") == 1.4
    assert (store.params.pulsar_orbit_radius, store.params.companion_orbit_radius) == before


def test_zero_mass_rejected(store):
    with pytest.raises(InvalidParameterValue):
        store.set("companionMass", 0.0)
    assert store.params.total_mass > 0


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "abc", None, True])
def test_non_finite_or_non_numeric_rejected(store, value):
    with pytest.raises(InvalidParameterValue):
        store.set("timeSpeed", value)
    assert store.get("timeSpeed") == 1.0


def test_numeric_strings_are_accepted(store):
    assert store.set("orbitalInclination", "45.5") == 45.5
    assert store.get("orbitalInclination") == 45.5


def test_unknown_parameter_leaves_state_unchanged(store):
    before = store.snapshot()
    with pytest.raises(UnknownParameter):
        store.set("warpFactor", 5)
    assert store.snapshot() == before


def test_get_unknown_parameter(store):
    with pytest.raises(UnknownParameter):
        store.get("totalMass")


@pytest.mark.parametrize("name", [["warpFactor"], None, 3])
def test_non_string_names_are_unknown(store, name):
    before = store.snapshot()
    with pytest.raises(UnknownParameter):
        store.set(name, 5)
    with pytest.raises(UnknownParameter):
        store.get(name)
    assert store.snapshot() == before


def test_errors_share_a_base_class():
    assert issubclass(UnknownParameter, ParameterError)
    assert issubclass(InvalidParameterValue, ValueError)


@pytest.mark.parametrize(
    "name, value",
    [
        ("orbitalInclination", -1.0),
        ("orbitalInclination", 180.5),
        ("pulsarSpinFrequency", -0.1),
        ("beamConeAngle", 0.0),
        ("beamConeAngle", 90.0),
        ("beamInclination", 181.0),
        ("timeSpeed", -2.0),
    ],
)
def test_out_of_domain_values_rejected(store, name, value):
    before = store.get(name)
    with pytest.raises(InvalidParameterValue):
        store.set(name, value)
    assert store.get(name) == before


@pytest.mark.parametrize(
    "name, value",
    [
        ("orbitalInclination", 0.0),
        ("orbitalInclination", 180.0),
        ("pulsarSpinFrequency", 0.0),
        ("beamConeAngle", 89.9),
        ("timeSpeed", 0.0),
    ],
)
def test_domain_boundaries_accepted(store, name, value):
    assert store.set(name, value) == value


def test_beam_geometry_recomputed_on_change(store):
    assert store.params.beam_radial_scale == pytest.approx(math.tan(math.radians(20.0)))
    assert store.params.beam_tilt_angle == pytest.approx(math.radians(45.0))
    store.set("beamConeAngle", 45.0)
    store.set("beamInclination", 90.0)
    assert store.params.beam_radial_scale == pytest.approx(1.0)
    assert store.params.beam_tilt_angle == pytest.approx(math.pi / 2)


def test_apply_command(store):
    store.apply(SetParameter("companionMass", 1.4))
    assert store.params.pulsar_orbit_radius == pytest.approx(5.0)
    assert store.params.companion_orbit_radius == pytest.approx(5.0)


def test_update_is_not_atomic(store):
    with pytest.raises(InvalidParameterValue):
        store.update([("timeSpeed", 3.0), ("pulsarMass", -1.0)])
    assert store.get("timeSpeed") == 3.0
    assert store.get("pulsarMass") == 1.4


def test_reset_keeps_instance(store):
    params = store.params
    store.set("pulsarMass", 2.5)
    store.set("beamConeAngle", 60.0)
    store.reset()
    assert store.params is params
    assert store.get("pulsarMass") == 1.4
    assert params.total_mass == pytest.approx(2.2)
    assert params.beam_radial_scale == pytest.approx(math.tan(math.radians(20.0)))


def test_initial_values():
    store = ParameterStore(initial={"pulsarMass": 2.0, "companionMass": 2.0})
    assert store.params.pulsar_orbit_radius == pytest.approx(5.0)


def test_copy_is_independent(store):
    clone = store.params.copy()
    store.set("pulsarMass", 2.0)
    assert clone.pulsar_mass == 1.4
    assert clone.total_mass == pytest.approx(2.2)


def test_zero_total_mass_is_invalid():
    with pytest.raises(InvalidParameters):
        SimulationParameters(pulsar_mass=0.0, companion_mass=0.0)


def test_copy_of_massless_params_is_invalid(store):
    params = store.params.copy()
    params.pulsar_mass = 0.0
    params.companion_mass = 0.0
    with pytest.raises(InvalidParameters):
        params.copy()
