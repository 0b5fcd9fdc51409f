from __future__ import annotations

import logging

import pygame  # type: ignore[import-not-found]

from scenedeck.services.content import ContentError
from scenedeck.services.dialogue import Dialogue, PlacedLine, layout_dialogue
from scenedeck.services.remote import BackgroundFetcher, get_bytes, get_json

from ..app import GameContext
from ..scene_base import Scene, SceneTransition
from ..ui import Button, draw_text

log = logging.getLogger(__name__)


class MagicWordsScene:
    """Chat-style dialogue: ``Name: text`` lines with inline emoji images."""

    title = "Magic Words"

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        assert ctx.scenes is not None
        self.settings = ctx.scenes.dialogue

        self.dialogue: Dialogue | None = None
        self.source = ""
        self.status = "Loading dialogue..."
        self._placed: list[PlacedLine] = []
        self._font_size = 0
        self._images: dict[str, pygame.Surface] = {}
        self._exited = False

        timeout = self.settings.timeout_s
        self._dialogue_fetcher: BackgroundFetcher[object] = BackgroundFetcher(
            lambda url: get_json(url, timeout=timeout)
        )
        self._image_fetcher: BackgroundFetcher[bytes] = BackgroundFetcher(
            lambda url: get_bytes(url, timeout=timeout)
        )

        w, _h = ctx.screen.get_size()
        self.btn_menu = Button(rect=pygame.Rect(w - 160, 20, 140, 40), text="Menu", on_click=self._on_menu)

        if ctx.offline:
            self._use_bundled("offline mode")
        else:
            self._dialogue_fetcher.request(self.settings.url)
        self.ctx.telemetry.log("scene_enter", {"scene": "magic_words", "offline": ctx.offline})

    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        self._go(MainMenuScene(self.ctx))

    def _use_bundled(self, reason: str) -> None:
        try:
            self._set_dialogue(self.ctx.content.load_bundled_dialogue(), source="bundled")
            self.status = f"Showing bundled dialogue ({reason})"
        except ContentError as e:
            log.error("Bundled dialogue unusable: %s", e)
            self.status = f"No dialogue available: {e}"

    def _set_dialogue(self, dialogue: Dialogue, source: str) -> None:
        self.dialogue = dialogue
        self.source = source
        self.status = ""
        self._placed = []
        for url in sorted(dialogue.emoji_urls()):
            self._image_fetcher.request(url)
        for avatar in dialogue.avatars.values():
            self._image_fetcher.request(avatar.url)

    def _relayout(self, width: int) -> None:
        if self.dialogue is None:
            return
        style = self.settings.style
        self._font_size = style.font_size_for(width)
        font = self.ctx.assets.font(self._font_size)
        bold = self.ctx.assets.font(self._font_size, bold=True)
        self._placed = layout_dialogue(
            self.dialogue,
            style,
            self._font_size,
            measure=lambda text: float(font.size(text)[0]),
            measure_label=lambda text: float(bold.size(text)[0]),
        )

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._on_menu()
            return
        if event.type == pygame.VIDEORESIZE:
            self._placed = []
        self.btn_menu.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        for res in self._dialogue_fetcher.poll():
            if not res.ok:
                self._use_bundled(res.error or "fetch failed")
                continue
            try:
                self._set_dialogue(self.ctx.content.parse_dialogue(res.value, context=res.key), source=res.key)
            except ContentError as e:
                log.warning("Fetched dialogue rejected: %s", e)
                self._use_bundled("fetched payload was invalid")

        for res in self._image_fetcher.poll():
            height = max(1, self._font_size or 24)
            self._images[res.key] = self.ctx.assets.image_from_bytes(res.key, res.value, height)
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((0, 0, 0))
        w, h = screen.get_size()
        if self.dialogue is not None and not self._placed:
            self._relayout(w)

        fonts = self.ctx.assets.fonts
        if self._placed and self.dialogue is not None:
            style = self.settings.style
            size = self._font_size
            font = self.ctx.assets.font(size)
            bold = self.ctx.assets.font(size, bold=True)
            pad = int(style.padding)
            # Left column is reserved for left-side avatars.
            x0 = pad + size + 4
            for line in self._placed:
                y = int(line.y)
                avatar = self.dialogue.avatars.get(line.speaker)
                img = self._images.get(avatar.url) if avatar is not None else None
                if avatar is not None and img is not None:
                    ax = w - pad - img.get_width() if avatar.position == "right" else pad
                    screen.blit(img, (ax, y))
                screen.blit(bold.render(f"{line.speaker}: ", True, (255, 255, 255)), (x0, y))
                for placed in line.segments:
                    x = x0 + int(placed.x)
                    seg = placed.segment
                    if seg.emoji_url is None:
                        screen.blit(font.render(seg.text, True, (255, 255, 255)), (x, y))
                        continue
                    emoji = self._images.get(seg.emoji_url)
                    if emoji is not None:
                        screen.blit(emoji, (x, y + (size - emoji.get_height()) // 2))
        if self.status:
            draw_text(screen, fonts.small, self.status[:140], (20, h - 28), color=(200, 200, 200))
        self.btn_menu.draw(screen, fonts.ui)

    def exit(self) -> None:
        if self._exited:
            return
        self._exited = True
        self.ctx.telemetry.log(
            "scene_exit",
            {"scene": "magic_words", "source": self.source, "lines": len(self.dialogue.lines) if self.dialogue else 0},
        )
