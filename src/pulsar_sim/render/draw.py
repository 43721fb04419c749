from __future__ import annotations

import math
import random
from typing import Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .camera import OrbitCamera

if TYPE_CHECKING:  # pragma: no cover
    from pulsar_sim.core.config import RenderCfg
    from pulsar_sim.core.kinematics import Transform


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def shade_color(color: tuple[int, int, int], intensity: float) -> tuple[int, int, int]:
    intensity = _clamp(intensity, 0.0, 1.0)
    return tuple(int(c * intensity) for c in color)  # type: ignore[return-value]


def lit_fraction(
    center: np.ndarray,
    camera_position: np.ndarray,
    *,
    ambient: float,
    point: float,
    light_position: np.ndarray | None = None,
) -> float:
    """Brightness of a sphere seen from the camera, lit by a point light.

    Uses the fraction of the visible hemisphere facing the light; a body at
    the light itself is fully lit.
    """

    light = np.zeros(3) if light_position is None else light_position
    to_light = light - center
    to_camera = camera_position - center
    n_light = float(np.linalg.norm(to_light))
    n_camera = float(np.linalg.norm(to_camera))
    if n_light < 1e-9 or n_camera < 1e-9:
        return _clamp(ambient + point, 0.0, 1.0)
    cos_phase = float(to_light @ to_camera) / (n_light * n_camera)
    return _clamp(ambient + point * 0.5 * (1.0 + cos_phase), 0.0, 1.0)


def draw_body(
    surface: pygame.Surface,
    camera: OrbitCamera,
    transform: Transform,
    radius: float,
    *,
    color: tuple[int, int, int],
    render_cfg: RenderCfg,
    marker_color: tuple[int, int, int] | None = None,
) -> None:
    screen, depth, visible = camera.project(transform.position)
    if not visible[0]:
        return
    radius_px = int(round(camera.projected_radius(float(depth[0]), radius)))
    if radius_px <= 0:
        return
    center = (int(screen[0, 0]), int(screen[0, 1]))
    intensity = lit_fraction(
        transform.position,
        camera.position,
        ambient=render_cfg.ambient_light,
        point=render_cfg.point_light,
    )
    pygame.draw.circle(surface, shade_color(color, intensity), center, radius_px)
    highlight = shade_color(color, min(1.0, intensity + 0.2))
    pygame.draw.circle(
        surface,
        highlight,
        (center[0] - radius_px // 3, center[1] - radius_px // 3),
        max(1, radius_px // 4),
    )
    if marker_color is None:
        return
    # equatorial marker so the spin is visible on a uniformly shaded sphere
    marker_world = transform.apply(np.array([[radius, 0.0, 0.0]]))[0]
    if float((camera.position - transform.position) @ (marker_world - transform.position)) <= 0.0:
        return
    marker = camera.world_to_screen(marker_world)
    if marker is not None:
        pygame.draw.circle(surface, marker_color, marker, max(2, radius_px // 6))


def cone_outline(
    transform: Transform, base_radius: float, length: float, segments: int
) -> tuple[np.ndarray, np.ndarray]:
    """World coordinates of a beam cone: base ring at the origin, apex along +y."""

    theta = np.linspace(0.0, 2.0 * math.pi, max(3, segments), endpoint=False)
    ring = np.stack(
        [base_radius * np.cos(theta), np.zeros_like(theta), base_radius * np.sin(theta)],
        axis=1,
    )
    apex = np.array([[0.0, length, 0.0]])
    return transform.apply(ring), transform.apply(apex)[0]


def draw_beam(
    layer: pygame.Surface,
    camera: OrbitCamera,
    transform: Transform,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Draw one beam cone onto *layer*, which is later blitted additively."""

    ring, apex = cone_outline(
        transform, render_cfg.beam_base_radius, render_cfg.beam_length, render_cfg.beam_segments
    )
    points = np.vstack([ring, apex[np.newaxis, :]])
    screen, _, visible = camera.project(points)
    if not visible.all():
        return
    color = shade_color(render_cfg.beam_color, render_cfg.beam_alpha / 255.0)
    apex_px = (int(screen[-1, 0]), int(screen[-1, 1]))
    ring_px = [(int(x), int(y)) for x, y in screen[:-1]]
    for idx in range(len(ring_px)):
        triangle = [apex_px, ring_px[idx], ring_px[(idx + 1) % len(ring_px)]]
        pygame.draw.polygon(layer, color, triangle)
    if len(ring_px) >= 3:
        pygame.draw.polygon(layer, color, ring_px)


def draw_orbit_line(
    surface: pygame.Surface,
    camera: OrbitCamera,
    path: np.ndarray,
    *,
    color: tuple[int, int, int] | tuple[int, int, int, int],
) -> None:
    screen, _, visible = camera.project(path)
    points = [(float(x), float(y)) for (x, y), ok in zip(screen, visible) if ok]
    if len(points) < 2:
        return
    pygame.draw.aalines(surface, color, False, points)


def generate_starfield(
    num_stars: int,
    *,
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    """Random star directions on the unit sphere with a pre-rendered sprite."""

    rng = rng or random.Random()
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        z = rng.uniform(-1.0, 1.0)
        phi = rng.uniform(0.0, 2.0 * math.pi)
        rho = math.sqrt(max(0.0, 1.0 - z * z))
        direction = np.array([rho * math.cos(phi), rho * math.sin(phi), z])
        radius = rng.choice([1, 1, 1, 2])
        alpha = rng.randint(80, 200)
        base = rng.randint(200, 240)
        color = (
            max(0, base - rng.randint(10, 25)),
            max(0, base - rng.randint(5, 15)),
            base,
        )
        star_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(star_surface, (*color, alpha), (radius, radius), radius)
        stars.append({"direction": direction, "surface": star_surface, "radius": radius})
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Sequence[dict[str, object]],
    camera: OrbitCamera,
) -> None:
    width, height = surface.get_size()
    for star in starfield:
        sx, sy, ok = camera.direction_to_screen(star["direction"])  # type: ignore[arg-type]
        if not ok or not (0 <= sx < width and 0 <= sy < height):
            continue
        radius = star["radius"]  # type: ignore[index]
        surface.blit(star["surface"], (int(sx) - radius, int(sy) - radius))  # type: ignore[arg-type,operator]


def draw_background(
    surface: pygame.Surface,
    camera: OrbitCamera,
    *,
    starfield: Sequence[dict[str, object]],
    render_cfg: RenderCfg,
) -> None:
    surface.fill(render_cfg.background_color)
    draw_starfield(surface, starfield, camera)
