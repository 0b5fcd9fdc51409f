from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .animator import TransferAnimator
from .config import MIN_CADENCE_MS
from .piles import Event, PileStore
from .types import ConfigError, Transfer

# Clock time is an accumulated float; a cadence due within this margin counts as due.
TIME_EPSILON = 1e-9


class SchedulerState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


@dataclass
class SchedulerStats:
    dispatched: int = 0
    completed: int = 0
    skipped: int = 0


class TransferScheduler:
    """Starts at most one single-token transfer per cadence.

    The cadence is measured on the clock passed to ``tick`` and is independent of
    the frame rate. Missed cadences (a frame longer than one interval) are
    dropped rather than fired in a burst.
    """

    def __init__(
        self,
        store: PileStore[Any],
        animator: TransferAnimator,
        cadence_ms: int,
        duration_ms: int,
        event_log: list[Event] | None = None,
    ) -> None:
        if cadence_ms < MIN_CADENCE_MS:
            raise ConfigError(f"cadence_ms must be >= {MIN_CADENCE_MS} (got {cadence_ms})")
        if duration_ms <= 0:
            raise ConfigError("duration_ms must be positive")
        self.store = store
        self.animator = animator
        self.cadence = cadence_ms / 1000.0
        self.duration = duration_ms / 1000.0
        self.event_log: list[Event] = event_log if event_log is not None else store.event_log
        self.state = SchedulerState.STOPPED
        self.stats = SchedulerStats()
        self._next_fire = 0.0

    @property
    def running(self) -> bool:
        return self.state is not SchedulerState.STOPPED

    def start(self, now: float) -> None:
        self._next_fire = now + self.cadence
        self.state = SchedulerState.IDLE

    def stop(self) -> None:
        self.state = SchedulerState.STOPPED

    def tick(self, now: float) -> bool:
        """Fire the cadence if due. Returns True when a transfer was started."""
        if self.state is not SchedulerState.IDLE or now + TIME_EPSILON < self._next_fire:
            return False
        self._next_fire += self.cadence
        if now + TIME_EPSILON >= self._next_fire:
            self._next_fire = now + self.cadence
        return self.dispatch()

    def dispatch(self) -> bool:
        """Attempt one transfer now. A stopped scheduler never dispatches."""
        if self.state is not SchedulerState.IDLE:
            return False
        self.state = SchedulerState.DISPATCHING
        try:
            return self._dispatch_one()
        finally:
            if self.state is SchedulerState.DISPATCHING:
                self.state = SchedulerState.IDLE

    def _dispatch_one(self) -> bool:
        store = self.store
        source = store.pick_eligible_source()
        if source is None:
            self._skip("no_source")
            return False
        destination = store.pick_eligible_destination(excluding=source)
        if destination is None:
            self._skip("no_destination")
            return False

        store.set_locked(destination, True)
        token = store.pop_top(source)
        # Counted before the incoming token lands.
        end = store.resting_position(destination)
        transfer: Transfer[Any] = Transfer(
            source=source,
            destination=destination,
            token=token,
            start=token.position,
            end=end,
            duration=self.duration,
        )
        self.animator.start(transfer, self._complete)
        self.stats.dispatched += 1
        self.event_log.append(
            {
                "type": "TRANSFER_STARTED",
                "token": token.id,
                "source": source,
                "destination": destination,
            }
        )
        return True

    def _complete(self, transfer: Transfer[Any]) -> None:
        self.store.push_top(transfer.destination, transfer.token)
        self.store.set_locked(transfer.destination, False)
        self.stats.completed += 1
        self.event_log.append(
            {
                "type": "TRANSFER_COMPLETED",
                "token": transfer.token.id,
                "source": transfer.source,
                "destination": transfer.destination,
            }
        )

    def _skip(self, reason: str) -> None:
        self.stats.skipped += 1
        self.event_log.append({"type": "CADENCE_SKIPPED", "reason": reason})
