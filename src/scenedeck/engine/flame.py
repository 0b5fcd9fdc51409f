from __future__ import annotations

import random
from dataclasses import dataclass, field

Color = tuple[int, int, int]

FIRE_COLORS: tuple[Color, ...] = (
    (255, 69, 0),  # orange-red
    (255, 165, 0),  # orange
    (255, 215, 0),  # gold
    (255, 255, 0),  # yellow
    (255, 255, 255),  # white
)

# Per-tick constants below are tuned for 60 ticks per second.
TICKS_PER_SECOND = 60.0


@dataclass(frozen=True)
class FlameConfig:
    max_embers: int = 5
    max_circles: int = 5
    ember_lanes: tuple[float, ...] = (0.30, 0.70, 0.40, 0.60, 0.50)
    ember_rise_offset: float = 260.0
    ember_reset_offset: float = 250.0
    ember_ceiling_offset: float = 280.0
    ember_frames: int = 8
    ember_animation_speed: float = 0.1
    circle_base_offset: float = 250.0
    min_radius: float = 10.0
    max_radius: float = 25.0
    spread_divisor: float = 3.75

    @property
    def max_particles(self) -> int:
        return self.max_embers + self.max_circles


@dataclass
class FireCircle:
    x: float
    y: float
    radius: float
    color: Color
    alpha: float = 1.0
    scale: float = 1.0


@dataclass
class Ember:
    x: float
    y: float
    frame: float = 0.0

    def frame_index(self, frame_count: int) -> int:
        return int(self.frame) % max(1, frame_count)


@dataclass
class FlameSystem:
    """Headless fire effect: a few flickering embers and recycled rising circles.

    Nothing is ever allocated after ``reset``: circles that fade out or leave the
    top of the screen are respawned in place, so the particle count is fixed.
    """

    width: float
    height: float
    config: FlameConfig = field(default_factory=FlameConfig)
    rng: random.Random = field(default_factory=random.Random)
    embers: list[Ember] = field(default_factory=list)
    circles: list[FireCircle] = field(default_factory=list)
    recycled: int = 0

    def __post_init__(self) -> None:
        self.reset()

    @property
    def particle_count(self) -> int:
        return len(self.embers) + len(self.circles)

    def reset(self) -> None:
        cfg = self.config
        lanes = cfg.ember_lanes
        self.embers = [
            Ember(x=self.width * lanes[i % len(lanes)], y=self.height - cfg.ember_rise_offset)
            for i in range(cfg.max_embers)
        ]
        self.circles = [self._spawn_circle() for _ in range(cfg.max_circles)]

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.reset()

    def spawn_x(self) -> float:
        """Triangular distribution around the horizontal center, clamped to the screen."""
        center = self.width / 2
        spread = self.width / self.config.spread_divisor
        offset = (self.rng.random() + self.rng.random() - 1) * spread
        return max(0.0, min(self.width, center + offset))

    def _spawn_circle(self) -> FireCircle:
        cfg = self.config
        return FireCircle(
            x=self.spawn_x(),
            y=self.height - cfg.circle_base_offset,
            radius=self.rng.uniform(cfg.min_radius, cfg.max_radius),
            color=self.rng.choice(FIRE_COLORS),
        )

    def update(self, dt: float) -> None:
        k = dt * TICKS_PER_SECOND
        cfg = self.config
        rng = self.rng

        for e in self.embers:
            e.y -= rng.random() * 2 * k
            e.x += (rng.random() - 0.5) * 2 * k
            if e.y < self.height - cfg.ember_ceiling_offset:
                e.y = self.height - cfg.ember_reset_offset
            e.frame += cfg.ember_animation_speed * k

        for i, c in enumerate(self.circles):
            c.y -= (rng.random() * 5 + 2) * k
            c.x += (rng.random() - 0.5) * 4 * k
            c.alpha -= 0.01 * k
            c.scale *= 0.98**k
            if c.alpha <= 0 or c.y < 0:
                self.circles[i] = self._spawn_circle()
                self.recycled += 1
