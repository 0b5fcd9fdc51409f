from __future__ import annotations

import logging
import random

import pygame  # type: ignore[import-not-found]

from scenedeck.engine import ConfigError, FrameClock, LayoutError, SceneController, Token, create
from scenedeck.engine.serialize import snapshot

from ..app import GameContext
from ..scene_base import Scene, SceneTransition
from ..ui import Button, draw_text

log = logging.getLogger(__name__)

Color = tuple[int, int, int]


class AceOfShadowsScene:
    """144 cards in 12 stacks; one top card moves to another stack every cadence."""

    title = "Ace of Shadows"

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._error: str | None = None
        self._exited = False
        self.clock = FrameClock()
        self.controller: SceneController[Color] | None = None

        assert ctx.scenes is not None
        settings = ctx.scenes.shuffle
        w, h = ctx.screen.get_size()
        self.config = settings.config_for(w, h)
        rng = random.Random()
        palette = settings.palette

        try:
            self.controller = create(
                self.config,
                self.clock,
                payload_factory=lambda _pile, _slot: rng.choice(palette),
                rng=rng,
            )
        except (ConfigError, LayoutError) as e:
            log.error("Ace of Shadows could not start: %s", e)
            self._error = str(e)

        self.ctx.telemetry.log(
            "scene_enter",
            {"scene": "ace_of_shadows", "ok": self._error is None, "piles": self.config.pile_count},
        )
        self.btn_menu = Button(rect=pygame.Rect(w - 160, 20, 140, 40), text="Menu", on_click=self._on_menu)

    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        self._go(MainMenuScene(self.ctx))

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._on_menu()
            return
        self.btn_menu.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self.controller is not None and not self.controller.destroyed:
            self.clock.advance(dt)
        return self._next

    def _draw_card(self, screen: pygame.Surface, token: Token[Color]) -> None:
        rect = pygame.Rect(int(token.x), int(token.y), int(self.config.token_width), int(self.config.token_height))
        pygame.draw.rect(screen, token.payload, rect)
        pygame.draw.rect(screen, (255, 255, 255), rect, width=2)

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((0, 0, 0))
        fonts = self.ctx.assets.fonts
        if self._error is not None:
            draw_text(screen, fonts.ui, "Ace of Shadows could not start:", (20, 60), color=(240, 80, 80))
            draw_text(screen, fonts.small, self._error[:120], (20, 90))
        elif self.controller is not None:
            for pile in self.controller.store.piles:
                for token in pile.tokens:
                    self._draw_card(screen, token)
            # In-flight cards travel above every stack.
            for transfer in self.controller.animator.transfers():
                self._draw_card(screen, transfer.token)
            sched = self.controller.scheduler
            if sched is not None:
                _w, h = screen.get_size()
                draw_text(
                    screen,
                    fonts.small,
                    f"moved {sched.stats.completed}   in flight {self.controller.in_flight}",
                    (20, h - 28),
                )
        self.btn_menu.draw(screen, fonts.ui)

    def exit(self) -> None:
        if self._exited:
            return
        self._exited = True
        payload: dict[str, object] = {"scene": "ace_of_shadows"}
        if self.controller is not None:
            snap = snapshot(self.controller)
            payload["stats"] = snap["stats"]
            payload["abandoned"] = len(snap["in_flight"])  # type: ignore[arg-type]
            self.controller.destroy()
        self.ctx.telemetry.log("scene_exit", payload)
