"""Configuration dataclasses for the pulsar visualizer."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParameterSpec:
    """Default value and accepted domain of one user-editable parameter."""

    name: str
    label: str
    default: float
    minimum: float
    maximum: float | None = None
    min_inclusive: bool = True
    max_inclusive: bool = True
    slider_min: float = 0.0
    slider_max: float = 1.0
    slider_step: float = 0.1

    def accepts(self, value: float) -> bool:
        if self.min_inclusive:
            if value < self.minimum:
                return False
        elif value <= self.minimum:
            return False
        if self.maximum is None:
            return True
        if self.max_inclusive:
            return value <= self.maximum
        return value < self.maximum

    def describe_domain(self) -> str:
        lo = "[" if self.min_inclusive else "("
        if self.maximum is None:
            return f"{lo}{self.minimum:g}, inf)"
        hi = "]" if self.max_inclusive else ")"
        return f"{lo}{self.minimum:g}, {self.maximum:g}{hi}"


PARAMETER_SPECS: tuple[ParameterSpec, ...] = (
    ParameterSpec(
        "pulsarMass", "Pulsar mass [Msun]", 1.4, 0.0, min_inclusive=False,
        slider_min=0.1, slider_max=3.0, slider_step=0.1,
    ),
    ParameterSpec(
        "companionMass", "Companion mass [Msun]", 0.8, 0.0, min_inclusive=False,
        slider_min=0.1, slider_max=3.0, slider_step=0.1,
    ),
    ParameterSpec(
        "orbitalInclination", "Orbital inclination [deg]", 90.0, 0.0, 180.0,
        slider_min=0.0, slider_max=180.0, slider_step=1.0,
    ),
    ParameterSpec(
        "pulsarSpinFrequency", "Spin frequency [Hz]", 1.0, 0.0,
        slider_min=0.0, slider_max=10.0, slider_step=0.1,
    ),
    ParameterSpec(
        "beamConeAngle", "Beam cone angle [deg]", 20.0, 0.0, 90.0,
        min_inclusive=False, max_inclusive=False,
        slider_min=1.0, slider_max=60.0, slider_step=1.0,
    ),
    ParameterSpec(
        "beamInclination", "Beam inclination [deg]", 45.0, 0.0, 180.0,
        slider_min=0.0, slider_max=180.0, slider_step=1.0,
    ),
    ParameterSpec(
        "timeSpeed", "Time speed [x]", 1.0, 0.0,
        slider_min=0.0, slider_max=10.0, slider_step=0.1,
    ),
)


@dataclass(frozen=True)
class KinematicsCfg:
    separation: float = 10.0
    spin_follows_time_speed: bool = False
    parameters: tuple[ParameterSpec, ...] = field(default_factory=lambda: PARAMETER_SPECS)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.parameters)

    @property
    def defaults(self) -> dict[str, float]:
        return {spec.name: spec.default for spec in self.parameters}

    def spec_for(self, name: str) -> ParameterSpec | None:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        return None


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1300
    height: int = 800
    panel_width: int = 300
    fps: int = 60
    caption: str = "Binary Pulsar Visualizer"
    background_color: tuple[int, int, int] = (2, 4, 12)
    panel_color: tuple[int, int, int, int] = (12, 18, 30, 235)
    panel_border_color: tuple[int, int, int] = (40, 58, 92)
    camera_fov_deg: float = 75.0
    camera_near: float = 0.1
    camera_far: float = 1000.0
    camera_distance: float = 20.0
    camera_min_distance: float = 4.0
    camera_max_distance: float = 120.0
    camera_damping: float = 0.15
    camera_rotate_speed: float = 0.005
    camera_zoom_step: float = 1.1
    pulsar_radius: float = 1.5
    pulsar_color: tuple[int, int, int] = (255, 255, 255)
    companion_radius: float = 1.0
    companion_color: tuple[int, int, int] = (136, 136, 255)
    ambient_light: float = 0.5
    point_light: float = 1.0
    beam_length: float = 10.0
    beam_base_radius: float = 0.5
    beam_segments: int = 24
    beam_color: tuple[int, int, int] = (0, 255, 255)
    beam_alpha: int = int(255 * 0.5)
    spin_marker_color: tuple[int, int, int] = (255, 214, 130)
    orbit_trail_points: int = 240
    orbit_trail_color: tuple[int, int, int, int] = (220, 236, 255, 90)
    num_stars: int = 320
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_dim_text_color: tuple[int, int, int] = (180, 198, 228)
    error_text_color: tuple[int, int, int] = (255, 120, 80)
    error_display_duration: float = 3.0
    slider_height: int = 58
    slider_track_color: tuple[int, int, int] = (40, 58, 92)
    slider_fill_color: tuple[int, int, int] = (46, 209, 195)
    slider_knob_color: tuple[int, int, int] = (234, 241, 255)
    slider_knob_radius: int = 8
    font_names: tuple[str, ...] = ("consolas", "dejavusansmono", "menlo")

    @property
    def viewport_size(self) -> tuple[int, int]:
        return max(1, self.width - self.panel_width), self.height


KINEMATICS_CFG = KinematicsCfg()
RENDER_CFG = RenderCfg()


__all__ = [
    "KINEMATICS_CFG",
    "PARAMETER_SPECS",
    "RENDER_CFG",
    "KinematicsCfg",
    "ParameterSpec",
    "RenderCfg",
]
