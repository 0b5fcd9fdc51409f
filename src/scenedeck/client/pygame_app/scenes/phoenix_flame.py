from __future__ import annotations

import random

import pygame  # type: ignore[import-not-found]

from scenedeck.engine.flame import FIRE_COLORS, Ember, FireCircle, FlameSystem

from ..app import GameContext
from ..scene_base import Scene, SceneTransition
from ..ui import Button


class PhoenixFlameScene:
    title = "Phoenix Flame"

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._exited = False
        assert ctx.scenes is not None
        w, h = ctx.screen.get_size()
        self.flame = FlameSystem(width=w, height=h, config=ctx.scenes.flame, rng=random.Random())
        self._frames = self._build_ember_frames(ctx.scenes.flame.ember_frames)
        self.btn_menu = Button(rect=pygame.Rect(w - 160, 20, 140, 40), text="Menu", on_click=self._on_menu)
        self.ctx.telemetry.log("scene_enter", {"scene": "phoenix_flame", "particles": self.flame.particle_count})

    @staticmethod
    def _build_ember_frames(count: int) -> list[pygame.Surface]:
        # Procedural stand-in for a fire sprite sheet: a teardrop that swells and shrinks.
        frames: list[pygame.Surface] = []
        for i in range(count):
            phase = abs((i / max(1, count - 1)) * 2 - 1)
            surf = pygame.Surface((96, 160), pygame.SRCALPHA)
            for layer, color in enumerate(FIRE_COLORS[:4]):
                r = int((40 - layer * 8) * (0.8 + 0.2 * phase))
                cy = 110 - layer * 12 - int(8 * phase)
                pygame.draw.circle(surf, (*color, 200), (48, cy), max(2, r))
                pygame.draw.polygon(
                    surf,
                    (*color, 200),
                    [(48 - r, cy), (48 + r, cy), (48, cy - int(r * 2.2))],
                )
            frames.append(surf)
        return frames

    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        self._go(MainMenuScene(self.ctx))

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._on_menu()
            return
        if event.type == pygame.VIDEORESIZE:
            self.flame.resize(event.w, event.h)
            self.btn_menu.rect.x = event.w - 160
        self.btn_menu.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        self.flame.update(dt)
        return self._next

    def _draw_ember(self, screen: pygame.Surface, ember: Ember) -> None:
        frame = self._frames[ember.frame_index(len(self._frames))]
        rect = frame.get_rect(midtop=(int(ember.x), int(ember.y)))
        screen.blit(frame, rect.topleft)

    def _draw_circle(self, screen: pygame.Surface, c: FireCircle) -> None:
        r = max(1, int(c.radius * c.scale))
        surf = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
        alpha = max(0, min(255, int(255 * c.alpha)))
        pygame.draw.circle(surf, (*c.color, alpha), (r, r), r)
        screen.blit(surf, (int(c.x) - r, int(c.y) - r))

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((0, 0, 0))
        for ember in self.flame.embers:
            self._draw_ember(screen, ember)
        for circle in self.flame.circles:
            self._draw_circle(screen, circle)
        self.btn_menu.draw(screen, self.ctx.assets.fonts.ui)

    def exit(self) -> None:
        if self._exited:
            return
        self._exited = True
        self.ctx.telemetry.log("scene_exit", {"scene": "phoenix_flame", "recycled": self.flame.recycled})
