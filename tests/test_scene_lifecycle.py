from __future__ import annotations

import json
import random

import pytest

from scenedeck.engine import (
    ConfigError,
    FrameClock,
    LayoutError,
    PileStateError,
    SceneController,
    ShuffleConfig,
    create,
    destroy,
)
from scenedeck.engine.serialize import snapshot


def _scene(seed: int = 0, **overrides: object) -> tuple[FrameClock, SceneController[str]]:
    clock = FrameClock()
    cfg = ShuffleConfig(**overrides)  # type: ignore[arg-type]
    scene: SceneController[str] = create(
        cfg,
        clock,
        payload_factory=lambda p, s: f"card-{p}-{s}",
        rng=random.Random(seed),
    )
    return clock, scene


def test_initial_deal_twelve_by_twelve() -> None:
    clock, scene = _scene(pile_count=12, tokens_per_pile=12)
    assert scene.store.total_tokens() == 144
    assert scene.token_count() == scene.expected_token_count() == 144
    assert all(len(p) == 12 and not p.locked for p in scene.store.piles)
    assert clock.callback_count == 1


def test_payload_passes_through_untouched() -> None:
    _clock, scene = _scene(pile_count=2, tokens_per_pile=2)
    assert [t.payload for t in scene.store.pile(1).tokens] == ["card-1-0", "card-1-1"]


def test_single_pile_is_a_config_error() -> None:
    clock = FrameClock()
    with pytest.raises(ConfigError):
        create(ShuffleConfig(pile_count=1), clock)
    assert clock.callback_count == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"tokens_per_pile": -1},
        {"transfer_cadence_ms": 50},
        {"transfer_duration_ms": 0},
        {"layout": "spiral"},
        {"token_width": 0},
        {"viewport_height": -5},
    ],
)
def test_invalid_config_builds_nothing(overrides: dict[str, object]) -> None:
    clock = FrameClock()
    with pytest.raises(ConfigError):
        create(ShuffleConfig(**overrides), clock)  # type: ignore[arg-type]
    assert clock.callback_count == 0


def test_layout_failure_builds_nothing() -> None:
    clock = FrameClock()
    cfg = ShuffleConfig(viewport_width=100, viewport_height=100, token_width=80, token_height=80, layout="random")
    scene: SceneController[None] = SceneController(cfg, clock)
    with pytest.raises(LayoutError):
        scene.enter()
    assert clock.callback_count == 0
    assert len(scene.store) == 0
    assert not scene.entered


def test_tokens_are_conserved_while_shuffling() -> None:
    clock, scene = _scene(seed=5, pile_count=5, tokens_per_pile=4, transfer_cadence_ms=100, transfer_duration_ms=450)
    for _ in range(600):
        clock.advance(1 / 30)
        assert scene.token_count() == 20
        assert all(len(p) >= 0 for p in scene.store.piles)
    assert scene.scheduler is not None
    assert scene.scheduler.stats.completed > 50


def test_destroy_is_idempotent() -> None:
    clock, scene = _scene()
    clock.advance(1.5)
    scene.destroy()
    scene.destroy()
    destroy(scene)
    assert scene.destroyed
    assert scene.store.released
    assert clock.callback_count == 0


def test_destroy_abandons_in_flight_transfers() -> None:
    clock, scene = _scene(transfer_cadence_ms=1000, transfer_duration_ms=2000)
    clock.advance(1.5)
    assert scene.in_flight == 1
    assert scene.scheduler is not None
    completed_before = scene.scheduler.stats.completed

    scene.exit()
    assert len(scene.abandoned) == 1
    assert scene.in_flight == 0

    # Well past the original landing time: nothing fires, nothing mutates.
    clock.advance(10.0)
    assert scene.store.lengths() == []
    assert scene.scheduler.stats.completed == completed_before
    assert scene.scheduler.stats.dispatched == 1
    assert scene.event_log[-1]["type"] == "TRANSFER_CANCELLED"


def test_enter_after_destroy_is_rejected() -> None:
    _clock, scene = _scene()
    scene.destroy()
    with pytest.raises(PileStateError):
        scene.enter()


def test_cadence_does_not_depend_on_frame_rate() -> None:
    fast_clock, fast = _scene(seed=1)
    slow_clock, slow = _scene(seed=1)
    for _ in range(630):
        fast_clock.advance(1 / 60)
    for _ in range(21):
        slow_clock.advance(0.5)
    assert fast.scheduler is not None and slow.scheduler is not None
    assert fast.scheduler.stats.dispatched == slow.scheduler.stats.dispatched == 10


def test_same_seed_same_snapshot() -> None:
    clock_a, a = _scene(seed=99, layout="random")
    clock_b, b = _scene(seed=99, layout="random")
    for _ in range(40):
        clock_a.advance(0.25)
        clock_b.advance(0.25)

    snap_a = snapshot(a)
    assert snap_a == snapshot(b)
    # Canonical snapshot is plain JSON.
    assert json.loads(json.dumps(snap_a)) == snap_a


def test_dispatch_after_destroy_does_not_restart() -> None:
    clock, scene = _scene()
    scene.destroy()
    assert scene.scheduler is not None
    assert scene.scheduler.dispatch() is False
    assert not scene.scheduler.running
    clock.advance(5.0)
    assert scene.scheduler.stats.dispatched == 0


def test_five_cadences_of_tenth_second_frames() -> None:
    clock, scene = _scene()
    for _ in range(50):
        clock.advance(0.1)
    assert scene.scheduler is not None
    assert scene.scheduler.stats.dispatched == 5
    assert scene.token_count() == 144
