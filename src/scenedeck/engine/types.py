from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

Vec2 = tuple[float, float]

P = TypeVar("P")


class ConfigError(ValueError):
    """Invalid pile/token counts or scene tuning. Raised before any state is built."""


class LayoutError(RuntimeError):
    """Pile placement could not satisfy the separation constraint within its budget."""


class PileStateError(RuntimeError):
    """A pile mutation was attempted outside its contract (unlocked push, released store)."""


@dataclass(eq=False)
class Token(Generic[P]):
    """A movable unit. ``payload`` is owned by the renderer and never inspected here."""

    id: int
    payload: P
    x: float = 0.0
    y: float = 0.0

    @property
    def position(self) -> Vec2:
        return (self.x, self.y)

    def move_to(self, pos: Vec2) -> None:
        self.x, self.y = pos


@dataclass(eq=False)
class Pile(Generic[P]):
    anchor: Vec2
    tokens: list[Token[P]] = field(default_factory=list)
    locked: bool = False

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def top(self) -> Token[P] | None:
        return self.tokens[-1] if self.tokens else None


@dataclass(eq=False)
class Transfer(Generic[P]):
    source: int
    destination: int
    token: Token[P]
    start: Vec2
    end: Vec2
    duration: float  # seconds
    started_at: float = 0.0
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, self.elapsed / self.duration))
