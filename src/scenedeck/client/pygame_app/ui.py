from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_text_centered(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: tuple[int, int],
    color: Color = (240, 240, 240),
) -> pygame.Rect:
    img = font.render(text, True, color)
    r = img.get_rect(center=center)
    screen.blit(img, r.topleft)
    return r


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = (60, 60, 60) if self.enabled else (30, 30, 30)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        img = font.render(self.text, True, (240, 240, 240))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class FpsCounter:
    """Top-left FPS readout. The text surface is only re-rendered when the value changes."""

    font: pygame.font.Font
    color: Color = (255, 255, 0)
    _last: int = -1
    _img: pygame.Surface | None = field(default=None, repr=False)

    def draw(self, screen: pygame.Surface, fps: float) -> None:
        current = round(fps)
        if current != self._last or self._img is None:
            self._img = self.font.render(f"FPS: {current}", True, self.color)
            self._last = current
        w, h = screen.get_size()
        screen.blit(self._img, (min(10, int(w * 0.05)), min(10, int(h * 0.05))))
