"""Kinematic model: parameters and elapsed time to scene transforms."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from .config import KINEMATICS_CFG, KinematicsCfg
from .errors import InvalidParameters
from .model import SimulationParameters

TWO_PI = 2.0 * math.pi
BEAM_AXIS = np.array([0.0, 1.0, 0.0])


def rot_y(theta: float) -> np.ndarray:
    """Rotation matrix around the y (spin) axis."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rot_z(phi: float) -> np.ndarray:
    """Rotation matrix around the z axis."""
    c, s = math.cos(phi), math.sin(phi)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


@dataclass
class Transform:
    """Position, rotation and scale of one scene object (T * R * S)."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=float))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3, dtype=float))

    def matrix(self) -> np.ndarray:
        m = np.eye(4, dtype=float)
        m[:3, :3] = self.rotation @ np.diag(self.scale)
        m[:3, 3] = self.position
        return m

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Map local points of shape ``(..., 3)`` into the parent frame."""

        pts = np.asarray(points, dtype=float)
        return (pts * self.scale) @ self.rotation.T + self.position

    def compose(self, child: "Transform") -> "Transform":
        """Transform of *child* expressed in this transform's parent frame.

        Only valid while this transform's own scale is uniform.
        """

        return Transform(
            position=self.apply(child.position),
            rotation=self.rotation @ child.rotation,
            scale=self.scale * child.scale,
        )


@dataclass
class FrameTransforms:
    """Everything the renderer needs for one frame."""

    time: float
    angle: float
    period: float
    spin_angle: float
    beam_scale: float
    beam_tilt: float
    pulsar: Transform
    companion: Transform
    beam_a: Transform
    beam_b: Transform

    def beam_directions(self) -> tuple[np.ndarray, np.ndarray]:
        a = self.beam_a.rotation @ BEAM_AXIS
        b = self.beam_b.rotation @ BEAM_AXIS
        return a / np.linalg.norm(a), b / np.linalg.norm(b)


def orbital_period(total_mass: float, cfg: KinematicsCfg = KINEMATICS_CFG) -> float:
    """Simplified Keplerian period on the visualization scale."""

    if not total_mass > 0.0:
        raise InvalidParameters(f"Orbital period undefined for total mass {total_mass!r}")
    return TWO_PI * math.sqrt(cfg.separation**3 / total_mass)


def orbital_angle(t: float, total_mass: float, cfg: KinematicsCfg = KINEMATICS_CFG) -> float:
    return (t / orbital_period(total_mass, cfg)) * TWO_PI


def body_positions(
    angle: float,
    pulsar_radius: float,
    companion_radius: float,
    inclination_rad: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Positions of pulsar and companion, diametrically opposite the origin."""

    ca, sa = math.cos(angle), math.sin(angle)
    si, ci = math.sin(inclination_rad), math.cos(inclination_rad)
    pulsar = np.array(
        [-pulsar_radius * ca, -pulsar_radius * sa * si, pulsar_radius * sa * ci]
    )
    companion = np.array(
        [companion_radius * ca, companion_radius * sa * si, -companion_radius * sa * ci]
    )
    return pulsar, companion


def beam_transforms(
    pulsar: Transform, radial_scale: float, tilt: float
) -> tuple[Transform, Transform]:
    """World transforms of the two beam cones attached to *pulsar*."""

    group = pulsar.compose(Transform(rotation=rot_z(tilt)))
    cone_scale = np.array([radial_scale, 1.0, radial_scale])
    beam_a = group.compose(Transform(scale=cone_scale.copy()))
    beam_b = group.compose(Transform(rotation=rot_z(math.pi), scale=cone_scale.copy()))
    return beam_a, beam_b


def orbit_path(
    params: SimulationParameters,
    samples: int = 240,
    cfg: KinematicsCfg = KINEMATICS_CFG,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample one full orbit of both bodies, shape ``(samples, 3)`` each."""

    if params.total_mass <= 0.0:
        raise InvalidParameters(f"Orbit undefined for total mass {params.total_mass!r}")
    angles = np.linspace(0.0, TWO_PI, max(2, samples))
    si = math.sin(params.orbital_inclination_rad)
    ci = math.cos(params.orbital_inclination_rad)
    unit = np.stack([np.cos(angles), np.sin(angles) * si, -np.sin(angles) * ci], axis=1)
    return -params.pulsar_orbit_radius * unit, params.companion_orbit_radius * unit


class KinematicEvaluator:
    """Per-frame evaluator; the spin angle is its only integrated state.

    ``elapsed`` is real time since start and is scaled by ``timeSpeed``
    here. ``delta`` is the real time since the previous frame and drives the
    spin, which ignores ``timeSpeed`` unless the config says otherwise.
    """

    def __init__(self, cfg: KinematicsCfg = KINEMATICS_CFG) -> None:
        self._cfg = cfg
        self.spin_angle = 0.0

    @property
    def cfg(self) -> KinematicsCfg:
        return self._cfg

    def reset(self) -> None:
        self.spin_angle = 0.0

    def advance_spin(self, delta: float, params: SimulationParameters) -> float:
        if delta > 0.0:
            step = delta * params.time_speed if self._cfg.spin_follows_time_speed else delta
            self.spin_angle += params.pulsar_spin_frequency * step * TWO_PI
        return self.spin_angle

    def evaluate(self, elapsed: float, params: SimulationParameters) -> FrameTransforms:
        t = elapsed * params.time_speed
        period = orbital_period(params.total_mass, self._cfg)
        angle = (t / period) * TWO_PI

        pulsar_pos, companion_pos = body_positions(
            angle,
            params.pulsar_orbit_radius,
            params.companion_orbit_radius,
            params.orbital_inclination_rad,
        )
        pulsar = Transform(position=pulsar_pos, rotation=rot_y(self.spin_angle))
        companion = Transform(position=companion_pos)
        beam_a, beam_b = beam_transforms(
            pulsar, params.beam_radial_scale, params.beam_tilt_angle
        )
        return FrameTransforms(
            time=t,
            angle=angle,
            period=period,
            spin_angle=self.spin_angle,
            beam_scale=params.beam_radial_scale,
            beam_tilt=params.beam_tilt_angle,
            pulsar=pulsar,
            companion=companion,
            beam_a=beam_a,
            beam_b=beam_b,
        )

    def tick(self, delta: float, elapsed: float, params: SimulationParameters) -> FrameTransforms:
        # fail before touching the accumulator
        orbital_period(params.total_mass, self._cfg)
        self.advance_spin(delta, params)
        return self.evaluate(elapsed, params)


__all__ = [
    "BEAM_AXIS",
    "FrameTransforms",
    "KinematicEvaluator",
    "Transform",
    "beam_transforms",
    "body_positions",
    "orbit_path",
    "orbital_angle",
    "orbital_period",
    "rot_y",
    "rot_z",
]
