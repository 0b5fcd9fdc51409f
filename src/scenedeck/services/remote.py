from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

import requests

log = logging.getLogger(__name__)

T = TypeVar("T")

Spawn = Callable[[Callable[[], None]], None]


class RemoteError(RuntimeError):
    pass


def _daemon_thread(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, daemon=True).start()


def get_json(url: str, *, timeout: float, session: requests.Session | None = None) -> object:
    http = session or requests
    try:
        r = http.get(url, timeout=timeout)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        raise RemoteError(f"Request to {url} failed: {e}") from e
    except ValueError as e:
        raise RemoteError(f"Invalid JSON from {url}: {e}") from e


def get_bytes(url: str, *, timeout: float, session: requests.Session | None = None) -> bytes:
    http = session or requests
    try:
        r = http.get(url, timeout=timeout)
        r.raise_for_status()
        return r.content
    except requests.RequestException as e:
        raise RemoteError(f"Request to {url} failed: {e}") from e


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    key: str
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BackgroundFetcher(Generic[T]):
    """Runs blocking fetches off the frame loop and hands results back on ``poll``.

    - ``request`` returns immediately; a key already in flight or finished is not refetched.
    - Workers only touch ``_ready`` and ``_inflight`` under the lock.
    - A worker always clears its in-flight mark, so a failure never leaves a key stuck.
    """

    def __init__(self, fetch: Callable[[str], T], spawn: Spawn | None = None) -> None:
        self._fetch = fetch
        self._spawn = spawn or _daemon_thread
        self._lock = threading.Lock()
        self._inflight: set[str] = set()
        self._ready: list[FetchResult[T]] = []
        self._seen: set[str] = set()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._inflight)

    def request(self, key: str) -> bool:
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            self._inflight.add(key)
        self._spawn(lambda: self._work(key))
        return True

    def _work(self, key: str) -> None:
        result: FetchResult[T]
        try:
            result = FetchResult(key=key, value=self._fetch(key))
        except Exception as e:
            log.warning("Fetch failed for %s: %s", key, e)
            result = FetchResult(key=key, error=str(e))
        with self._lock:
            self._inflight.discard(key)
            self._ready.append(result)

    def poll(self) -> list[FetchResult[T]]:
        with self._lock:
            out, self._ready = self._ready, []
        return out
