from __future__ import annotations

import random
from typing import Any, Generic

from .animator import TransferAnimator
from .clock import Clock
from .config import ShuffleConfig
from .easing import Easing, ease_in_out_quad
from .layout import LayoutPlanner
from .piles import Event, PayloadFactory, PileStore
from .scheduler import TransferScheduler
from .types import P, PileStateError, Transfer


class SceneController(Generic[P]):
    """Lifecycle owner of the shuffling-stacks scene.

    ``enter()`` plans the layout, seeds the piles and starts the scheduler on the
    clock. ``destroy()`` stops the cadence, cancels every in-flight transfer
    (their continuations never run) and releases all pile state. Both are
    all-or-nothing: a failing ``enter()`` registers nothing on the clock.
    """

    def __init__(
        self,
        config: ShuffleConfig,
        clock: Clock,
        *,
        payload_factory: PayloadFactory[P] | None = None,
        rng: random.Random | None = None,
        easing: Easing = ease_in_out_quad,
    ) -> None:
        self.config = config
        self.clock = clock
        self.rng = rng or random.Random()
        self.event_log: list[Event] = []
        self.store: PileStore[P] = PileStore(
            stack_step=config.stack_step,
            rng=self.rng,
            payload_factory=payload_factory,
            event_log=self.event_log,
        )
        self.animator = TransferAnimator(clock, easing=easing)
        self.scheduler: TransferScheduler | None = None
        self.abandoned: list[Transfer[Any]] = []
        self._entered = False
        self._destroyed = False

    @property
    def entered(self) -> bool:
        return self._entered

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def enter(self) -> None:
        if self._destroyed:
            raise PileStateError("Scene has been destroyed")
        if self._entered:
            return
        cfg = self.config
        cfg.validate()
        anchors = LayoutPlanner(cfg, rng=self.rng).plan()
        scheduler = TransferScheduler(
            self.store,
            self.animator,
            cadence_ms=cfg.transfer_cadence_ms,
            duration_ms=cfg.transfer_duration_ms,
            event_log=self.event_log,
        )
        self.store.initialize(cfg.pile_count, cfg.tokens_per_pile, anchors)
        self.scheduler = scheduler
        scheduler.start(self.clock.now())
        self.clock.add_tick_callback(self._on_tick)
        self._entered = True

    def _on_tick(self, now: float) -> None:
        self.animator.tick(now)
        if self.scheduler is not None:
            self.scheduler.tick(now)

    def exit(self) -> None:
        self.destroy()

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        if self.scheduler is not None:
            self.scheduler.stop()
        self.clock.remove_tick_callback(self._on_tick)
        self.abandoned = self.animator.cancel_all()
        for tr in self.abandoned:
            self.event_log.append(
                {"type": "TRANSFER_CANCELLED", "token": tr.token.id, "destination": tr.destination}
            )
        self.store.release()

    # Introspection

    @property
    def in_flight(self) -> int:
        return self.animator.in_flight

    def token_count(self) -> int:
        return self.store.total_tokens() + self.animator.in_flight

    def expected_token_count(self) -> int:
        return self.config.pile_count * self.config.tokens_per_pile


SceneHandle = SceneController


def create(
    config: ShuffleConfig,
    clock: Clock,
    *,
    payload_factory: PayloadFactory[P] | None = None,
    rng: random.Random | None = None,
) -> SceneController[P]:
    """Build and enter a shuffling scene. Raises ConfigError or LayoutError."""
    handle: SceneController[P] = SceneController(
        config, clock, payload_factory=payload_factory, rng=rng
    )
    handle.enter()
    return handle


def destroy(handle: SceneController[Any]) -> None:
    handle.destroy()
