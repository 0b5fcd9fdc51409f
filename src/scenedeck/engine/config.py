from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from .types import ConfigError

LayoutMode = Literal["row", "random"]

MIN_CADENCE_MS = 100
LAYOUT_MODES: tuple[LayoutMode, ...] = ("row", "random")


@dataclass(frozen=True)
class CardSizing:
    """Responsive card size: a fraction of the viewport, capped in pixels."""

    max_width: float = 100.0
    max_height: float = 150.0
    width_fraction: float = 0.08
    height_fraction: float = 0.15

    def size_for(self, viewport_width: float, viewport_height: float) -> tuple[float, float]:
        return (
            min(self.max_width, viewport_width * self.width_fraction),
            min(self.max_height, viewport_height * self.height_fraction),
        )


@dataclass(frozen=True)
class ShuffleConfig:
    pile_count: int = 12
    tokens_per_pile: int = 12
    viewport_width: float = 1024.0
    viewport_height: float = 768.0
    token_width: float = 80.0
    token_height: float = 115.0
    transfer_cadence_ms: int = 1000
    transfer_duration_ms: int = 2000

    layout: LayoutMode = "row"
    stack_step_ratio: float = 0.6
    padding: float = 20.0
    pile_gap: float = 8.0
    # Random layout only: extra anchor-to-anchor distance on top of the no-overlap rule.
    min_separation: float | None = None
    max_layout_attempts: int = 1000

    @classmethod
    def for_viewport(
        cls,
        viewport_width: float,
        viewport_height: float,
        sizing: CardSizing | None = None,
        **overrides: object,
    ) -> "ShuffleConfig":
        w, h = (sizing or CardSizing()).size_for(viewport_width, viewport_height)
        base = cls(
            viewport_width=float(viewport_width),
            viewport_height=float(viewport_height),
            token_width=w,
            token_height=h,
        )
        return replace(base, **overrides)  # type: ignore[arg-type]

    @property
    def stack_step(self) -> float:
        return self.token_height * self.stack_step_ratio

    @property
    def cadence_seconds(self) -> float:
        return self.transfer_cadence_ms / 1000.0

    @property
    def duration_seconds(self) -> float:
        return self.transfer_duration_ms / 1000.0

    @property
    def separation(self) -> float:
        return 0.0 if self.min_separation is None else self.min_separation

    def validate(self) -> None:
        if self.pile_count < 2:
            raise ConfigError(f"pile_count must be at least 2 (got {self.pile_count})")
        if self.tokens_per_pile < 0:
            raise ConfigError(f"tokens_per_pile must not be negative (got {self.tokens_per_pile})")
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ConfigError("viewport size must be positive")
        if self.token_width <= 0 or self.token_height <= 0:
            raise ConfigError("token size must be positive")
        if self.transfer_cadence_ms < MIN_CADENCE_MS:
            raise ConfigError(
                f"transfer_cadence_ms must be >= {MIN_CADENCE_MS} (got {self.transfer_cadence_ms})"
            )
        if self.transfer_duration_ms <= 0:
            raise ConfigError("transfer_duration_ms must be positive")
        if self.layout not in LAYOUT_MODES:
            raise ConfigError(f"Unknown layout mode: {self.layout}")
        if self.stack_step_ratio < 0:
            raise ConfigError("stack_step_ratio must not be negative")
        if self.padding < 0 or self.pile_gap < 0:
            raise ConfigError("padding and pile_gap must not be negative")
        if self.max_layout_attempts < 1:
            raise ConfigError("max_layout_attempts must be at least 1")
