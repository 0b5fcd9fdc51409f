from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol

import pygame  # type: ignore[import-not-found]

WINDOW_TITLE = "Game Developer Assignment"


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    """A full-screen state driven by the App loop.

    ``exit`` is called exactly when the scene is left, by transition or by quitting,
    and may be called again during shutdown, so it must be idempotent.
    """

    title: ClassVar[str]

    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...
    def exit(self) -> None: ...


def window_caption(scene: Scene) -> str:
    title = getattr(scene, "title", "")
    return f"{WINDOW_TITLE} | {title}" if title else WINDOW_TITLE
