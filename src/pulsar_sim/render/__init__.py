"""Rendering helpers for the pulsar visualizer."""

from .camera import OrbitCamera
from .assets import (
    get_text_surface,
    load_font,
)
from .draw import (
    cone_outline,
    draw_background,
    draw_beam,
    draw_body,
    draw_orbit_line,
    draw_starfield,
    generate_starfield,
    lit_fraction,
    shade_color,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    Slider,
    build_text_panel,
)

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "OrbitCamera",
    "Slider",
    "build_text_panel",
    "cone_outline",
    "draw_background",
    "draw_beam",
    "draw_body",
    "draw_orbit_line",
    "draw_starfield",
    "generate_starfield",
    "get_text_surface",
    "lit_fraction",
    "load_font",
    "shade_color",
]
