from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from ..app import GameContext
from ..scene_base import WINDOW_TITLE, Scene, SceneTransition
from ..ui import Button, draw_text_centered

MENU_ENTRIES: tuple[tuple[str, str], ...] = (
    ("Ace of Shadows", "ace"),
    ("Magic Words", "words"),
    ("Phoenix Flame", "flame"),
)

SCENE_CHOICES: tuple[str, ...] = ("menu",) + tuple(key for _, key in MENU_ENTRIES)


def make_scene(ctx: GameContext, key: str) -> Scene:
    # Scenes are imported lazily so only the selected one is loaded.
    if key == "ace":
        from .ace_of_shadows import AceOfShadowsScene

        return AceOfShadowsScene(ctx)
    if key == "words":
        from .magic_words import MagicWordsScene

        return MagicWordsScene(ctx)
    if key == "flame":
        from .phoenix_flame import PhoenixFlameScene

        return PhoenixFlameScene(ctx)
    return MainMenuScene(ctx)


class MainMenuScene:
    title = "Menu"

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._buttons: list[Button] = []
        self._layout_for: tuple[int, int] | None = None

    def _build_ui(self, size: tuple[int, int]) -> None:
        w, _h = size
        bw = 320
        bh = 56
        gap = 24
        x = w // 2 - bw // 2
        y = 200

        def go(key: str) -> None:
            self._next = SceneTransition(make_scene(self.ctx, key))

        self._buttons = [
            Button(
                rect=pygame.Rect(x, y + (bh + gap) * i, bw, bh),
                text=label,
                on_click=lambda key=key: go(key),
            )
            for i, (label, key) in enumerate(MENU_ENTRIES)
        ]
        self._buttons.append(
            Button(
                rect=pygame.Rect(x, y + (bh + gap) * len(MENU_ENTRIES), bw, bh),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
        )
        self._layout_for = size

    def handle_event(self, event: pygame.event.Event) -> None:
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        size = screen.get_size()
        if size != self._layout_for:
            self._build_ui(size)
        screen.fill((0, 0, 0))
        fonts = self.ctx.assets.fonts
        draw_text_centered(screen, fonts.big, WINDOW_TITLE, (size[0] // 2, 120))
        for b in self._buttons:
            b.draw(screen, fonts.ui)

    def exit(self) -> None:
        return None
