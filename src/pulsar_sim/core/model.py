"""Data models for the simulation parameters and their derived quantities."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Iterable, Mapping

from .config import KINEMATICS_CFG, KinematicsCfg
from .errors import InvalidParameters, InvalidParameterValue, UnknownParameter

log = logging.getLogger(__name__)

MASS_PARAMETERS = frozenset({"pulsarMass", "companionMass"})

_ATTRIBUTES = {
    "pulsarMass": "pulsar_mass",
    "companionMass": "companion_mass",
    "orbitalInclination": "orbital_inclination",
    "pulsarSpinFrequency": "pulsar_spin_frequency",
    "beamConeAngle": "beam_cone_angle",
    "beamInclination": "beam_inclination",
    "timeSpeed": "time_speed",
}


@dataclass
class SimulationParameters:
    """Mutable parameter set plus derived quantities.

    Only :class:`ParameterStore` writes to it; the evaluator and renderer read
    it every frame.
    """

    pulsar_mass: float = 1.4
    companion_mass: float = 0.8
    orbital_inclination: float = 90.0
    pulsar_spin_frequency: float = 1.0
    beam_cone_angle: float = 20.0
    beam_inclination: float = 45.0
    time_speed: float = 1.0
    separation: float = 10.0
    total_mass: float = 0.0
    pulsar_orbit_radius: float = 0.0
    companion_orbit_radius: float = 0.0
    beam_radial_scale: float = 0.0
    beam_tilt_angle: float = 0.0

    def __post_init__(self) -> None:
        self.update_radii()
        self.update_beam_scale()
        self.update_beam_tilt()

    def update_radii(self) -> None:
        self.total_mass = self.pulsar_mass + self.companion_mass
        if self.total_mass <= 0.0:
            raise InvalidParameters(f"Orbit radii undefined for total mass {self.total_mass!r}")
        self.pulsar_orbit_radius = self.separation * (self.companion_mass / self.total_mass)
        self.companion_orbit_radius = self.separation * (self.pulsar_mass / self.total_mass)

    def update_beam_scale(self) -> None:
        self.beam_radial_scale = math.tan(math.radians(self.beam_cone_angle))

    def update_beam_tilt(self) -> None:
        self.beam_tilt_angle = math.radians(self.beam_inclination)

    @property
    def orbital_inclination_rad(self) -> float:
        return math.radians(self.orbital_inclination)

    def copy(self) -> "SimulationParameters":
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return SimulationParameters(**values)


@dataclass(frozen=True)
class SetParameter:
    """A single validated-before-commit edit coming from the UI."""

    name: str
    value: object


class ParameterStore:
    """Owns the single :class:`SimulationParameters` instance of a session."""

    def __init__(
        self,
        cfg: KinematicsCfg = KINEMATICS_CFG,
        initial: Mapping[str, float] | None = None,
    ) -> None:
        self._cfg = cfg
        self._params = self._build_defaults()
        if initial:
            self.update(initial.items())

    @property
    def params(self) -> SimulationParameters:
        return self._params

    @property
    def names(self) -> tuple[str, ...]:
        return self._cfg.parameter_names

    def _build_defaults(self) -> SimulationParameters:
        values = {_ATTRIBUTES[name]: value for name, value in self._cfg.defaults.items()}
        return SimulationParameters(separation=self._cfg.separation, **values)

    def get(self, name: str) -> float:
        if not isinstance(name, str) or name not in _ATTRIBUTES or self._cfg.spec_for(name) is None:
            raise UnknownParameter(name)
        return getattr(self._params, _ATTRIBUTES[name])

    def set(self, name: str, value: object) -> float:
        """Validate and store *value*; return the stored float.

        Out-of-domain and non-finite values are rejected, never clamped, so
        the previous valid state stays in place.
        """

        if not isinstance(name, str) or name not in _ATTRIBUTES:
            raise UnknownParameter(name)
        spec = self._cfg.spec_for(name)
        if spec is None:
            raise UnknownParameter(name)
        number = self._coerce(name, value)
        if not spec.accepts(number):
            raise InvalidParameterValue(name, value, f"expected {spec.describe_domain()}")

        setattr(self._params, _ATTRIBUTES[name], number)
        if name in MASS_PARAMETERS:
            self._params.update_radii()
        elif name == "beamConeAngle":
            self._params.update_beam_scale()
        elif name == "beamInclination":
            self._params.update_beam_tilt()
        log.debug("%s set to %g", name, number)
        return number

    def apply(self, command: SetParameter) -> float:
        return self.set(command.name, command.value)

    def update(self, items: Iterable[tuple[str, object]]) -> None:
        for name, value in items:
            self.set(name, value)

    def snapshot(self) -> dict[str, float]:
        return {name: self.get(name) for name in self.names}

    def reset(self) -> None:
        # in place: the renderer and the session hold on to the same instance
        defaults = self._build_defaults()
        for f in fields(defaults):
            setattr(self._params, f.name, getattr(defaults, f.name))

    @staticmethod
    def _coerce(name: str, value: object) -> float:
        if isinstance(value, bool):
            raise InvalidParameterValue(name, value, "not a number")
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise InvalidParameterValue(name, value, "not a number") from None
        if not math.isfinite(number):
            raise InvalidParameterValue(name, value, "not finite")
        return number


__all__ = ["MASS_PARAMETERS", "ParameterStore", "SetParameter", "SimulationParameters"]
