from __future__ import annotations

from typing import Callable, Protocol

TickCallback = Callable[[float], None]


class Clock(Protocol):
    def now(self) -> float: ...
    def add_tick_callback(self, callback: TickCallback) -> None: ...
    def remove_tick_callback(self, callback: TickCallback) -> None: ...


class FrameClock:
    """Monotonic clock driven by the host's frame loop.

    The host calls ``advance(dt)`` once per frame; every registered callback then
    runs with the new time. Time never goes backwards.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._callbacks: list[TickCallback] = []

    def now(self) -> float:
        return self._now

    def add_tick_callback(self, callback: TickCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def remove_tick_callback(self, callback: TickCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def callback_count(self) -> int:
        return len(self._callbacks)

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"Clock cannot go backwards (dt={dt})")
        self._now += dt
        # Callbacks may unregister themselves (scene teardown) while we iterate.
        for cb in list(self._callbacks):
            if cb in self._callbacks:
                cb(self._now)
