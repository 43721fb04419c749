from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0


class Button:
    """Simple rectangular button with hover feedback and callbacks."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._style = style

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        if self._style is None:
            raise ValueError("Button style must be provided")
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        style = self._style
        hovered = self.rect.collidepoint(mouse_pos)
        color = style.hover_color if hovered else style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(button_surface, color, button_surface.get_rect(), border_radius=style.radius)
        if style.border_color is not None and style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                style.border_color,
                button_surface.get_rect(),
                style.border_width,
                border_radius=style.radius,
            )
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


class Slider:
    """Horizontal slider bound to one named parameter.

    ``getter`` reads the committed value so a rejected edit snaps the knob
    back; ``on_change`` receives ``(name, value)`` for every drag step.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        name: str,
        label: str,
        minimum: float,
        maximum: float,
        step: float,
        getter: Callable[[], float],
        on_change: Callable[[str, float], None],
    ) -> None:
        if maximum <= minimum:
            raise ValueError("Slider maximum must exceed minimum")
        self.rect = pygame.Rect(rect)
        self.name = name
        self.label = label
        self.minimum = minimum
        self.maximum = maximum
        self.step = step
        self._getter = getter
        self._on_change = on_change
        self._dragging = False

    @property
    def track_rect(self) -> pygame.Rect:
        return pygame.Rect(self.rect.x + 8, self.rect.bottom - 18, self.rect.width - 16, 6)

    @property
    def dragging(self) -> bool:
        return self._dragging

    def value_from_x(self, x: int) -> float:
        track = self.track_rect
        fraction = (x - track.left) / max(1, track.width)
        fraction = max(0.0, min(1.0, fraction))
        raw = self.minimum + fraction * (self.maximum - self.minimum)
        if self.step > 0:
            raw = self.minimum + round((raw - self.minimum) / self.step) * self.step
        return round(max(self.minimum, min(self.maximum, raw)), 6)

    def x_from_value(self, value: float) -> int:
        track = self.track_rect
        fraction = (value - self.minimum) / (self.maximum - self.minimum)
        fraction = max(0.0, min(1.0, fraction))
        return int(track.left + fraction * track.width)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._dragging = True
                self._emit(event.pos[0])
                return True
        elif event.type == pygame.MOUSEMOTION and self._dragging:
            self._emit(event.pos[0])
            return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self._dragging:
            self._dragging = False
            return True
        return False

    def _emit(self, x: int) -> None:
        value = self.value_from_x(x)
        if value != self._getter():
            self._on_change(self.name, value)

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        *,
        text_color: tuple[int, int, int],
        track_color: tuple[int, int, int],
        fill_color: tuple[int, int, int],
        knob_color: tuple[int, int, int],
        knob_radius: int,
    ) -> None:
        value = self._getter()
        label_surf = get_text_surface(font, self.label, text_color)
        surface.blit(label_surf, (self.rect.x + 8, self.rect.y + 4))
        value_surf = get_text_surface(font, f"{value:g}", text_color)
        surface.blit(value_surf, value_surf.get_rect(topright=(self.rect.right - 8, self.rect.y + 4)))
        track = self.track_rect
        pygame.draw.rect(surface, track_color, track, border_radius=3)
        knob_x = self.x_from_value(value)
        filled = pygame.Rect(track.left, track.top, max(0, knob_x - track.left), track.height)
        pygame.draw.rect(surface, fill_color, filled, border_radius=3)
        pygame.draw.circle(surface, knob_color, (knob_x, track.centery), knob_radius)


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=12)
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface
