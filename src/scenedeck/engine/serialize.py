from __future__ import annotations

from typing import Any

from .piles import PileStore
from .shuffle import SceneController
from .types import Pile, Transfer


def _pile_to_dict(p: Pile[Any]) -> dict[str, object]:
    return {
        "anchor": [p.anchor[0], p.anchor[1]],
        "locked": p.locked,
        "tokens": [t.id for t in p.tokens],
    }


def _transfer_to_dict(t: Transfer[Any]) -> dict[str, object]:
    return {
        "token": t.token.id,
        "source": t.source,
        "destination": t.destination,
        "elapsed": round(t.elapsed, 6),
        "duration": t.duration,
    }


def store_snapshot(store: PileStore[Any]) -> dict[str, object]:
    return {
        "released": store.released,
        "piles": [_pile_to_dict(p) for p in store.piles],
    }


def snapshot(scene: SceneController[Any]) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the shuffling scene."""
    sched = scene.scheduler
    return {
        "destroyed": scene.destroyed,
        "time": scene.clock.now(),
        "state": sched.state.value if sched is not None else None,
        "stats": {
            "dispatched": sched.stats.dispatched if sched is not None else 0,
            "completed": sched.stats.completed if sched is not None else 0,
            "skipped": sched.stats.skipped if sched is not None else 0,
        },
        "store": store_snapshot(scene.store),
        "in_flight": [_transfer_to_dict(t) for t in scene.animator.transfers()],
    }
