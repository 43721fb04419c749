"""
Binary Pulsar Visualizer
========================

Interactive 3D view of a pulsar and its companion on an inclined circular
orbit, with a dipolar beam pair sweeping around the pulsar spin axis.

Drag in the view to orbit the camera, scroll to zoom, use the sliders on the
right to change the system. Keys: N next preset, R reset, Esc quit.
"""
from __future__ import annotations

import argparse
import logging
import sys

import numpy as np
import pygame

from pulsar_sim.core.config import KINEMATICS_CFG, RENDER_CFG, RenderCfg
from pulsar_sim.core.errors import ParameterError
from pulsar_sim.core.kinematics import FrameTransforms, orbit_path
from pulsar_sim.core.logging_utils import RunLogger, setup_logging
from pulsar_sim.core.model import SetParameter
from pulsar_sim.core.session import PulsarSession
from pulsar_sim.core.timekeeping import FrameTimer
from pulsar_sim.data.presets import (
    DEFAULT_PRESET_KEY,
    PRESET_DISPLAY_ORDER,
    PRESET_FLASH_DURATION,
    PRESETS,
)
from pulsar_sim.render import (
    Button,
    ButtonVisualStyle,
    OrbitCamera,
    Slider,
    build_text_panel,
    draw_background,
    draw_beam,
    draw_body,
    draw_orbit_line,
    generate_starfield,
    get_text_surface,
    load_font,
)

log = logging.getLogger(__name__)

BUTTON_STYLE = ButtonVisualStyle(
    base_color=(9, 44, 92, 220),
    hover_color=(24, 74, 140, 235),
    text_color=(234, 241, 255),
    radius=14,
    border_color=(88, 140, 255, 140),
    border_width=1,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive binary pulsar visualizer.")
    parser.add_argument("--preset", default=DEFAULT_PRESET_KEY, choices=PRESET_DISPLAY_ORDER)
    parser.add_argument("--record", action="store_true", help="Record frames to data/runs")
    parser.add_argument("--runs-dir", default="data/runs", help="Directory for recorded runs")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="Also write log output to this file")
    parser.add_argument("--width", type=int, default=RENDER_CFG.width)
    parser.add_argument("--height", type=int, default=RENDER_CFG.height)
    parser.add_argument("--fps", type=int, default=RENDER_CFG.fps)
    return parser


def layout_controls(
    session: PulsarSession,
    window_size: tuple[int, int],
    render_cfg: RenderCfg,
    on_change,
) -> list[Slider]:
    panel_x = window_size[0] - render_cfg.panel_width
    sliders: list[Slider] = []
    y = 64
    for spec in KINEMATICS_CFG.parameters:
        name = spec.name
        sliders.append(
            Slider(
                (panel_x + 8, y, render_cfg.panel_width - 16, render_cfg.slider_height),
                name,
                spec.label,
                spec.slider_min,
                spec.slider_max,
                spec.slider_step,
                getter=lambda name=name: session.store.get(name),
                on_change=on_change,
            )
        )
        y += render_cfg.slider_height
    return sliders


def draw_scene(
    scene: pygame.Surface,
    beam_layer: pygame.Surface,
    camera: OrbitCamera,
    session: PulsarSession,
    transforms: FrameTransforms,
    *,
    starfield,
    render_cfg: RenderCfg,
) -> None:
    draw_background(scene, camera, starfield=starfield, render_cfg=render_cfg)

    pulsar_path, companion_path = orbit_path(session.store.params, render_cfg.orbit_trail_points)
    draw_orbit_line(scene, camera, pulsar_path, color=render_cfg.orbit_trail_color)
    draw_orbit_line(scene, camera, companion_path, color=render_cfg.orbit_trail_color)

    bodies = [
        (transforms.pulsar, render_cfg.pulsar_radius, render_cfg.pulsar_color, render_cfg.spin_marker_color),
        (transforms.companion, render_cfg.companion_radius, render_cfg.companion_color, None),
    ]
    # painter's algorithm: far body first
    depths = camera.to_camera(np.array([b[0].position for b in bodies]))[:, 2]
    for idx in np.argsort(-depths):
        transform, radius, color, marker = bodies[int(idx)]
        draw_body(scene, camera, transform, radius, color=color, render_cfg=render_cfg, marker_color=marker)

    beam_layer.fill((0, 0, 0))
    draw_beam(beam_layer, camera, transforms.beam_a, render_cfg=render_cfg)
    draw_beam(beam_layer, camera, transforms.beam_b, render_cfg=render_cfg)
    scene.blit(beam_layer, (0, 0), special_flags=pygame.BLEND_ADD)


def hud_lines(
    session: PulsarSession,
    transforms: FrameTransforms,
    render_cfg: RenderCfg,
) -> list[tuple[str, tuple[int, int, int]]]:
    params = session.store.params
    phase = (transforms.angle / (2.0 * np.pi)) % 1.0
    return [
        (f"t_sim   {transforms.time:9.2f} s", render_cfg.hud_text_color),
        (f"period  {transforms.period:9.2f} s", render_cfg.hud_text_color),
        (f"phase   {phase:9.3f}", render_cfg.hud_text_color),
        (f"spin    {np.degrees(transforms.spin_angle) % 360.0:9.1f} deg", render_cfg.hud_text_color),
        (f"r_psr   {params.pulsar_orbit_radius:9.3f}", render_cfg.hud_dim_text_color),
        (f"r_comp  {params.companion_orbit_radius:9.3f}", render_cfg.hud_dim_text_color),
    ]


def run(args: argparse.Namespace, render_cfg: RenderCfg = RENDER_CFG) -> int:
    recorder = RunLogger(args.runs_dir) if args.record else None
    if recorder is not None:
        log.info("Recording run to %s", recorder.run_dir)

    error_message: str | None = None
    error_time = 0.0
    flash_text: str | None = None
    flash_time = 0.0
    preset_index = PRESET_DISPLAY_ORDER.index(args.preset)

    def on_error(exc: ParameterError) -> None:
        nonlocal error_message, error_time
        error_message = str(exc)
        error_time = timer.elapsed

    session = PulsarSession(recorder=recorder, on_error=on_error)
    timer = FrameTimer()
    if args.preset != DEFAULT_PRESET_KEY:
        session.load_preset(args.preset)
    session.write_meta()

    pygame.init()
    try:
        pygame.display.set_caption(render_cfg.caption)
        window_size = (max(args.width, render_cfg.panel_width + 100), max(args.height, 200))
        screen = pygame.display.set_mode(window_size, pygame.RESIZABLE)
        clock = pygame.time.Clock()
        font = load_font(render_cfg.font_names, 15)
        title_font = load_font(render_cfg.font_names, 18, bold=True)
        starfield = generate_starfield(render_cfg.num_stars)

        def viewport_size() -> tuple[int, int]:
            return max(1, window_size[0] - render_cfg.panel_width), window_size[1]

        camera = OrbitCamera(
            viewport_size(),
            render_cfg.camera_distance,
            fov_deg=render_cfg.camera_fov_deg,
            near=render_cfg.camera_near,
            far=render_cfg.camera_far,
            min_distance=render_cfg.camera_min_distance,
            max_distance=render_cfg.camera_max_distance,
            rotate_speed=render_cfg.camera_rotate_speed,
        )
        scene = pygame.Surface(viewport_size())
        beam_layer = pygame.Surface(viewport_size())

        def on_slider_change(name: str, value: float) -> None:
            session.apply(SetParameter(name, value))

        def next_preset() -> None:
            nonlocal preset_index, flash_text, flash_time
            preset_index = (preset_index + 1) % len(PRESET_DISPLAY_ORDER)
            key = PRESET_DISPLAY_ORDER[preset_index]
            session.load_preset(key)
            flash_text = PRESETS[key].description
            flash_time = timer.elapsed

        def reset() -> None:
            nonlocal preset_index
            session.reset()
            preset_index = PRESET_DISPLAY_ORDER.index(DEFAULT_PRESET_KEY)

        def build_controls() -> tuple[list[Slider], list[Button]]:
            sliders = layout_controls(session, window_size, render_cfg, on_slider_change)
            panel_x = window_size[0] - render_cfg.panel_width
            y = 64 + len(sliders) * render_cfg.slider_height + 16
            half = (render_cfg.panel_width - 40) // 2
            buttons = [
                Button((panel_x + 16, y, half, 36), "Reset", reset, style=BUTTON_STYLE),
                Button(
                    (panel_x + 24 + half, y, half, 36),
                    "",
                    next_preset,
                    text_getter=lambda: PRESETS[PRESET_DISPLAY_ORDER[preset_index]].name,
                    style=BUTTON_STYLE,
                ),
            ]
            return sliders, buttons

        sliders, buttons = build_controls()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_n:
                        next_preset()
                    elif event.key == pygame.K_r:
                        reset()
                elif event.type == pygame.VIDEORESIZE:
                    window_size = (max(event.w, render_cfg.panel_width + 100), max(event.h, 200))
                    screen = pygame.display.set_mode(window_size, pygame.RESIZABLE)
                    camera.update_size(viewport_size())
                    scene = pygame.Surface(viewport_size())
                    beam_layer = pygame.Surface(viewport_size())
                    sliders, buttons = build_controls()
                elif event.type == pygame.MOUSEWHEEL:
                    camera.zoom_by_factor(render_cfg.camera_zoom_step ** (-event.y))
                else:
                    handled = any(slider.handle_event(event) for slider in sliders)
                    if not handled:
                        handled = any(button.handle_event(event) for button in buttons)
                    if handled:
                        continue
                    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        if event.pos[0] < viewport_size()[0]:
                            camera.begin_drag(event.pos)
                    elif event.type == pygame.MOUSEMOTION:
                        camera.drag(event.pos)
                    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                        camera.end_drag()

            delta, elapsed = timer.tick()
            transforms = session.frame(delta, elapsed)
            camera.update(render_cfg.camera_damping)

            draw_scene(
                scene,
                beam_layer,
                camera,
                session,
                transforms,
                starfield=starfield,
                render_cfg=render_cfg,
            )
            screen.blit(scene, (0, 0))

            hud = build_text_panel(
                font,
                hud_lines(session, transforms, render_cfg),
                background_color=(12, 18, 30, int(255 * 0.45)),
            )
            screen.blit(hud, (16, 16))

            if flash_text and elapsed - flash_time < PRESET_FLASH_DURATION:
                flash = get_text_surface(font, flash_text, render_cfg.hud_text_color)
                screen.blit(flash, (16, window_size[1] - 64))
            if error_message and elapsed - error_time < render_cfg.error_display_duration:
                err = get_text_surface(font, error_message, render_cfg.error_text_color)
                screen.blit(err, (16, window_size[1] - 36))

            panel_x = window_size[0] - render_cfg.panel_width
            panel = pygame.Surface((render_cfg.panel_width, window_size[1]), pygame.SRCALPHA)
            panel.fill(render_cfg.panel_color)
            screen.blit(panel, (panel_x, 0))
            pygame.draw.line(
                screen, render_cfg.panel_border_color, (panel_x, 0), (panel_x, window_size[1]), 1
            )
            title = get_text_surface(title_font, "Binary Pulsar", render_cfg.hud_text_color)
            screen.blit(title, (panel_x + 16, 20))
            for slider in sliders:
                slider.draw(
                    screen,
                    font,
                    text_color=render_cfg.hud_text_color,
                    track_color=render_cfg.slider_track_color,
                    fill_color=render_cfg.slider_fill_color,
                    knob_color=render_cfg.slider_knob_color,
                    knob_radius=render_cfg.slider_knob_radius,
                )
            for button in buttons:
                button.draw(screen, font)

            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        session.close()
        pygame.quit()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
