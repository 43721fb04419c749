from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


_MAX_PITCH = math.pi / 2.0 - 0.01


@dataclass
class CameraState:
    yaw: float
    pitch: float
    yaw_target: float
    pitch_target: float
    distance: float
    distance_target: float


class OrbitCamera:
    """Perspective camera orbiting the origin with damped rotate and zoom."""

    def __init__(
        self,
        size: tuple[int, int],
        distance: float,
        *,
        fov_deg: float = 75.0,
        near: float = 0.1,
        far: float = 1000.0,
        min_distance: float = 1.0,
        max_distance: float = 500.0,
        rotate_speed: float = 0.005,
    ) -> None:
        self._size = size
        self._fov = math.radians(fov_deg)
        self._near = near
        self._far = far
        self._min_distance = min_distance
        self._max_distance = max_distance
        self._rotate_speed = rotate_speed
        distance = _clamp(distance, min_distance, max_distance)
        self._state = CameraState(
            yaw=0.0,
            pitch=0.0,
            yaw_target=0.0,
            pitch_target=0.0,
            distance=distance,
            distance_target=distance,
        )
        self._drag_anchor: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = (max(1, size[0]), max(1, size[1]))

    @property
    def aspect(self) -> float:
        width, height = self._size
        return width / max(height, 1)

    @property
    def distance(self) -> float:
        return self._state.distance

    @property
    def yaw(self) -> float:
        return self._state.yaw

    @property
    def pitch(self) -> float:
        return self._state.pitch

    @property
    def focal(self) -> float:
        return 1.0 / math.tan(self._fov / 2.0)

    @property
    def position(self) -> np.ndarray:
        s = self._state
        return s.distance * np.array(
            [
                math.cos(s.pitch) * math.sin(s.yaw),
                math.sin(s.pitch),
                math.cos(s.pitch) * math.cos(s.yaw),
            ]
        )

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(right, up, forward)`` unit vectors in world space."""

        forward = -self.position / max(np.linalg.norm(self.position), 1e-9)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        right /= max(np.linalg.norm(right), 1e-9)
        up = np.cross(right, forward)
        return right, up, forward

    def set_zoom(self, distance: float) -> None:
        clamped = _clamp(distance, self._min_distance, self._max_distance)
        self._state.distance = clamped
        self._state.distance_target = clamped

    def zoom_by_factor(self, factor: float) -> None:
        self._state.distance_target = _clamp(
            self._state.distance_target * factor, self._min_distance, self._max_distance
        )

    def set_orientation(self, yaw: float, pitch: float) -> None:
        pitch = _clamp(pitch, -_MAX_PITCH, _MAX_PITCH)
        self._state.yaw = self._state.yaw_target = yaw
        self._state.pitch = self._state.pitch_target = pitch

    def update(self, smoothing: float = 0.1) -> None:
        state = self._state
        state.yaw += (state.yaw_target - state.yaw) * smoothing
        state.pitch += (state.pitch_target - state.pitch) * smoothing
        state.distance += (state.distance_target - state.distance) * smoothing
        state.distance = _clamp(state.distance, self._min_distance, self._max_distance)

    def begin_drag(self, position: tuple[int, int]) -> None:
        self._drag_anchor = position

    def drag(self, position: tuple[int, int]) -> None:
        if self._drag_anchor is None:
            return
        dx = position[0] - self._drag_anchor[0]
        dy = position[1] - self._drag_anchor[1]
        if dx == 0 and dy == 0:
            return
        self._state.yaw_target -= dx * self._rotate_speed
        self._state.pitch_target = _clamp(
            self._state.pitch_target + dy * self._rotate_speed, -_MAX_PITCH, _MAX_PITCH
        )
        self._drag_anchor = position

    def end_drag(self) -> None:
        self._drag_anchor = None

    @property
    def dragging(self) -> bool:
        return self._drag_anchor is not None

    def to_camera(self, points: np.ndarray) -> np.ndarray:
        """World points ``(N, 3)`` to camera coordinates (x right, y up, z depth)."""

        right, up, forward = self.basis()
        rel = np.atleast_2d(np.asarray(points, dtype=float)) - self.position
        return np.stack([rel @ right, rel @ up, rel @ forward], axis=1)

    def project(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Project world points to screen pixels.

        Returns ``(screen_xy, depth, visible)``; points outside the near/far
        range are flagged invisible and their screen coordinates are undefined.
        """

        cam = self.to_camera(points)
        depth = cam[:, 2]
        visible = (depth > self._near) & (depth < self._far)
        safe_depth = np.where(visible, depth, 1.0)
        width, height = self._size
        f = self.focal
        ndc_x = cam[:, 0] * f / (self.aspect * safe_depth)
        ndc_y = cam[:, 1] * f / safe_depth
        screen = np.stack(
            [(ndc_x + 1.0) * 0.5 * width, (1.0 - ndc_y) * 0.5 * height], axis=1
        )
        return screen, depth, visible

    def world_to_screen(self, point: np.ndarray) -> tuple[int, int] | None:
        screen, _, visible = self.project(point)
        if not visible[0]:
            return None
        return int(screen[0, 0]), int(screen[0, 1])

    def projected_radius(self, depth: float, radius: float) -> float:
        if depth <= self._near:
            return 0.0
        return radius * self.focal / depth * self._size[1] * 0.5

    def direction_to_screen(self, direction: np.ndarray) -> tuple[float, float, bool]:
        """Screen position of a direction at infinity (for the background)."""

        right, up, forward = self.basis()
        d = np.asarray(direction, dtype=float)
        z = float(d @ forward)
        if z <= 1e-6:
            return 0.0, 0.0, False
        width, height = self._size
        f = self.focal
        ndc_x = float(d @ right) * f / (self.aspect * z)
        ndc_y = float(d @ up) * f / z
        return (ndc_x + 1.0) * 0.5 * width, (1.0 - ndc_y) * 0.5 * height, True
