from __future__ import annotations

import io
import logging
from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

log = logging.getLogger(__name__)


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font
    fps: pygame.font.Font


class AssetManager:
    def __init__(self) -> None:
        self._images: dict[tuple[str, int], pygame.Surface] = {}
        self._fonts: dict[tuple[int, bool], pygame.font.Font] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 40),
            fps=pygame.font.SysFont(None, 28),
        )

    def font(self, size: int, bold: bool = False) -> pygame.font.Font:
        key = (size, bold)
        if key not in self._fonts:
            self._fonts[key] = pygame.font.SysFont(None, int(size * 1.33), bold=bold)
        return self._fonts[key]

    def image_from_bytes(self, key: str, data: bytes | None, height: int) -> pygame.Surface:
        """Decode downloaded image bytes, scaled to ``height``. Falls back to a placeholder."""
        cache_key = (key, height)
        if cache_key in self._images:
            return self._images[cache_key]

        img: pygame.Surface | None = None
        if data:
            try:
                # The extension hint lets SDL_image pick the SVG/PNG decoder.
                hint = key.rsplit("/", 1)[-1].split("?", 1)[0]
                raw = pygame.image.load(io.BytesIO(data), hint).convert_alpha()
                w, h = raw.get_size()
                scale = height / h if h else 1.0
                img = pygame.transform.smoothscale(raw, (max(1, int(w * scale)), height))
            except (pygame.error, ValueError) as e:
                log.warning("Could not decode image %s: %s", key, e)

        if img is None:
            img = pygame.Surface((height, height), pygame.SRCALPHA)
            pygame.draw.circle(img, (200, 40, 200), (height // 2, height // 2), height // 2)
        self._images[cache_key] = img
        return img
