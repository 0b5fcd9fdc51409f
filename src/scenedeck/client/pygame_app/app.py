from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pygame  # type: ignore[import-not-found]

from scenedeck.paths import Paths
from scenedeck.services.content import ContentService, SceneCatalog
from scenedeck.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .scene_base import Scene, window_caption
from .ui import FpsCounter

log = logging.getLogger(__name__)


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    content: ContentService
    telemetry: TelemetryService
    fps: int = 60
    offline: bool = False
    start_scene: str = "menu"

    # Loaded at boot
    scenes: Optional[SceneCatalog] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True
        self.fps_counter = FpsCounter(ctx.assets.fonts.fps)
        pygame.display.set_caption(window_caption(initial_scene))

    def run(self) -> int:
        try:
            while self.running:
                dt = self.ctx.clock.tick(self.ctx.fps) / 1000.0
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                        break
                    self.scene.handle_event(event)
                if not self.running:
                    break

                tr = self.scene.update(dt)
                if tr is not None:
                    log.info("Scene change: %s -> %s", type(self.scene).__name__, type(tr.next_scene).__name__)
                    self.scene.exit()
                    self.scene = tr.next_scene
                    pygame.display.set_caption(window_caption(self.scene))

                self.scene.render(self.ctx.screen)
                self.fps_counter.draw(self.ctx.screen, self.ctx.clock.get_fps())
                pygame.display.flip()
        finally:
            self.scene.exit()
        return 0
