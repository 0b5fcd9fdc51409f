from __future__ import annotations

import math
import random

from .config import ShuffleConfig
from .types import LayoutError, Vec2


class LayoutPlanner:
    """Places pile anchors so the base card footprints never overlap.

    ``row`` puts every pile on one centered row. The gap between cards is
    ``pile_gap``, narrowed as far as zero when the row would not fit otherwise.
    ``random`` rejection-samples positions inside the padded viewport with a
    bounded number of attempts per pile.
    """

    def __init__(self, config: ShuffleConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self.rng = rng or random.Random()

    @property
    def stack_step(self) -> float:
        return self.config.stack_step

    def resting_position(self, anchor: Vec2, depth: int) -> Vec2:
        return (anchor[0], anchor[1] + depth * self.stack_step)

    def plan(self) -> list[Vec2]:
        if self.config.layout == "random":
            return self._random_anchors()
        return self._row_anchors()

    def _row_anchors(self) -> list[Vec2]:
        cfg = self.config
        n = cfg.pile_count
        usable = cfg.viewport_width - 2 * cfg.padding
        slack = usable - n * cfg.token_width
        if slack < 0:
            raise LayoutError(
                f"Viewport width {cfg.viewport_width} cannot fit {n} cards of {cfg.token_width}px in one row"
            )
        gap = min(cfg.pile_gap, slack / (n - 1)) if n > 1 else 0.0
        pitch = cfg.token_width + gap
        row_width = n * cfg.token_width + (n - 1) * gap
        x0 = (cfg.viewport_width - row_width) / 2
        return [(x0 + i * pitch, cfg.padding) for i in range(n)]

    def _overlaps(self, a: Vec2, b: Vec2) -> bool:
        cfg = self.config
        return abs(a[0] - b[0]) < cfg.token_width and abs(a[1] - b[1]) < cfg.token_height

    def _accepts(self, candidate: Vec2, anchors: list[Vec2]) -> bool:
        sep = self.config.separation
        return all(not self._overlaps(candidate, a) and math.dist(candidate, a) >= sep for a in anchors)

    def _random_anchors(self) -> list[Vec2]:
        cfg = self.config
        max_x = cfg.viewport_width - cfg.token_width - cfg.padding
        max_y = cfg.viewport_height - cfg.token_height - cfg.padding
        if max_x < cfg.padding or max_y < cfg.padding:
            raise LayoutError("Viewport is smaller than one padded card")

        anchors: list[Vec2] = []
        for index in range(cfg.pile_count):
            for _attempt in range(cfg.max_layout_attempts):
                candidate = (
                    self.rng.uniform(cfg.padding, max_x),
                    self.rng.uniform(cfg.padding, max_y),
                )
                if self._accepts(candidate, anchors):
                    anchors.append(candidate)
                    break
            else:
                raise LayoutError(
                    f"Could not place pile {index} without overlap (min separation {cfg.separation}) "
                    f"after {cfg.max_layout_attempts} attempts"
                )
        return anchors
