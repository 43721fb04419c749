"""Preset parameter sets for well-known binary pulsar configurations."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Preset:
    key: str
    name: str
    values: Mapping[str, float] = field(default_factory=dict)
    description: str = ""

    def items(self) -> list[tuple[str, float]]:
        return list(self.values.items())


def _values(**kwargs: float) -> Mapping[str, float]:
    return MappingProxyType(dict(kwargs))


PRESET_DEFINITIONS: tuple[Preset, ...] = (
    Preset(
        key="default",
        name="Default",
        values=_values(
            pulsarMass=1.4,
            companionMass=0.8,
            orbitalInclination=90.0,
            pulsarSpinFrequency=1.0,
            beamConeAngle=20.0,
            beamInclination=45.0,
            timeSpeed=1.0,
        ),
        description="Neutron star with a lighter companion at 90 degrees inclination.",
    ),
    Preset(
        key="hulse_taylor",
        name="Hulse-Taylor",
        values=_values(
            pulsarMass=1.44,
            companionMass=1.39,
            orbitalInclination=47.0,
            pulsarSpinFrequency=2.0,
            beamConeAngle=15.0,
            beamInclination=30.0,
            timeSpeed=2.0,
        ),
        description="PSR B1913+16 style: two near-equal neutron stars.",
    ),
    Preset(
        key="double_pulsar",
        name="Double Pulsar",
        values=_values(
            pulsarMass=1.34,
            companionMass=1.25,
            orbitalInclination=89.0,
            pulsarSpinFrequency=4.0,
            beamConeAngle=12.0,
            beamInclination=60.0,
            timeSpeed=2.0,
        ),
        description="PSR J0737-3039 style: inclination close to 90 degrees.",
    ),
    Preset(
        key="msp_white_dwarf",
        name="MSP + White Dwarf",
        values=_values(
            pulsarMass=1.9,
            companionMass=0.2,
            orbitalInclination=60.0,
            pulsarSpinFrequency=8.0,
            beamConeAngle=25.0,
            beamInclination=70.0,
            timeSpeed=1.0,
        ),
        description="Recycled millisecond pulsar with a light white dwarf companion.",
    ),
    Preset(
        key="edge_on_fast",
        name="Edge-on, fast",
        values=_values(
            pulsarMass=1.4,
            companionMass=1.0,
            orbitalInclination=0.0,
            pulsarSpinFrequency=3.0,
            beamConeAngle=30.0,
            beamInclination=90.0,
            timeSpeed=5.0,
        ),
        description="Orbit in the x-z plane, seen edge-on from the starting camera.",
    ),
)

PRESETS: dict[str, Preset] = {preset.key: preset for preset in PRESET_DEFINITIONS}
PRESET_DISPLAY_ORDER: list[str] = [preset.key for preset in PRESET_DEFINITIONS]
DEFAULT_PRESET_KEY = PRESET_DISPLAY_ORDER[0]
PRESET_FLASH_DURATION = 2.0


def get_preset(key: str) -> Preset:
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset {key!r}; choose from {', '.join(PRESET_DISPLAY_ORDER)}") from None


__all__ = [
    "DEFAULT_PRESET_KEY",
    "PRESET_DEFINITIONS",
    "PRESET_DISPLAY_ORDER",
    "PRESET_FLASH_DURATION",
    "PRESETS",
    "Preset",
    "get_preset",
]
