from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .clock import Clock
from .easing import Easing, ease_in_out_quad, lerp
from .types import Transfer

Continuation = Callable[[Transfer[Any]], None]


@dataclass(frozen=True)
class TransferHandle:
    id: int


@dataclass
class _Running:
    transfer: Transfer[Any]
    on_complete: Continuation | None


class TransferAnimator:
    """Moves in-flight tokens from their start to their end position.

    A transfer's continuation runs exactly once, on the first tick where its
    elapsed time reaches the duration. The handle is retired before the
    continuation is called, so a continuation that raises cannot fire twice.
    Cancelled transfers never run their continuation.
    """

    def __init__(self, clock: Clock, easing: Easing = ease_in_out_quad) -> None:
        self._clock = clock
        self._easing = easing
        self._running: dict[int, _Running] = {}
        self._next_id = 0

    @property
    def in_flight(self) -> int:
        return len(self._running)

    def transfers(self) -> list[Transfer[Any]]:
        return [r.transfer for r in self._running.values()]

    def is_active(self, handle: TransferHandle) -> bool:
        return handle.id in self._running

    def start(self, transfer: Transfer[Any], on_complete: Continuation | None = None) -> TransferHandle:
        handle = TransferHandle(self._next_id)
        self._next_id += 1
        transfer.started_at = self._clock.now()
        transfer.elapsed = 0.0
        transfer.token.move_to(transfer.start)
        self._running[handle.id] = _Running(transfer=transfer, on_complete=on_complete)
        return handle

    def cancel(self, handle: TransferHandle) -> Transfer[Any] | None:
        """Stop a transfer where it is. Returns it (the caller owns the token) or None."""
        running = self._running.pop(handle.id, None)
        if running is None:
            return None
        return running.transfer

    def cancel_all(self) -> list[Transfer[Any]]:
        cancelled = [r.transfer for r in self._running.values()]
        self._running.clear()
        return cancelled

    def tick(self, now: float) -> int:
        """Advance every transfer to ``now``. Returns how many completed."""
        completed = 0
        for handle_id, running in list(self._running.items()):
            if handle_id not in self._running:
                continue
            tr = running.transfer
            tr.elapsed = min(max(0.0, now - tr.started_at), tr.duration)
            if tr.elapsed >= tr.duration:
                tr.token.move_to(tr.end)
                del self._running[handle_id]
                completed += 1
                if running.on_complete is not None:
                    running.on_complete(tr)
                continue
            tr.token.move_to(lerp(tr.start, tr.end, self._easing(tr.progress)))
        return completed
