from __future__ import annotations

import random
from collections import Counter

import pytest

from scenedeck.engine.animator import TransferAnimator
from scenedeck.engine.clock import FrameClock
from scenedeck.engine.piles import PileStore
from scenedeck.engine.scheduler import SchedulerState, TransferScheduler
from scenedeck.engine.types import ConfigError


def _setup(
    piles: int = 12,
    per_pile: int = 12,
    cadence_ms: int = 1000,
    duration_ms: int = 10_000,
    seed: int = 1,
) -> tuple[FrameClock, PileStore[None], TransferAnimator, TransferScheduler]:
    clock = FrameClock()
    store: PileStore[None] = PileStore(stack_step=10.0, rng=random.Random(seed))
    store.initialize(piles, per_pile, [(i * 100.0, 0.0) for i in range(piles)])
    animator = TransferAnimator(clock)
    sched = TransferScheduler(store, animator, cadence_ms=cadence_ms, duration_ms=duration_ms)

    def on_tick(now: float) -> None:
        animator.tick(now)
        sched.tick(now)

    clock.add_tick_callback(on_tick)
    sched.start(clock.now())
    return clock, store, animator, sched


def _started(store: PileStore[None]) -> list[dict[str, object]]:
    return [e for e in store.event_log if e["type"] == "TRANSFER_STARTED"]


def test_one_dispatch_per_cadence() -> None:
    clock, store, animator, sched = _setup()
    fired_at: list[float] = []
    for _ in range(20):
        before = sched.stats.dispatched
        clock.advance(0.25)
        if sched.stats.dispatched != before:
            fired_at.append(clock.now())

    assert fired_at == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert sched.stats.dispatched == 5
    assert animator.in_flight == 5

    # Sources lose their card at dispatch time; nothing has landed yet.
    started = _started(store)
    sources = Counter(e["source"] for e in started)
    assert store.lengths() == [12 - sources[i] for i in range(12)]
    assert store.total_tokens() == 144 - 5


def test_each_destination_gains_after_its_duration() -> None:
    clock, store, animator, sched = _setup()
    for _ in range(5):
        clock.advance(1.0)
    sched.stop()
    destinations = [e["destination"] for e in _started(store)]
    sources = [e["source"] for e in _started(store)]
    assert all(store.pile(d).locked for d in destinations)

    clock.advance(10.0)
    assert sched.stats.completed == 5
    assert animator.in_flight == 0
    src_count, dst_count = Counter(sources), Counter(destinations)
    assert store.lengths() == [12 - src_count[i] + dst_count[i] for i in range(12)]
    assert not any(p.locked for p in store.piles)


def test_card_lands_on_precomputed_resting_position() -> None:
    clock, store, animator, sched = _setup(piles=3, per_pile=2, duration_ms=500)
    clock.advance(1.0)
    (tr,) = animator.transfers()
    expected_end = (tr.destination * 100.0, 2 * 10.0)
    assert tr.end == expected_end

    clock.advance(0.5)
    assert store.pile(tr.destination).top is tr.token
    assert tr.token.position == expected_end


def test_source_stays_unlocked_after_pop() -> None:
    clock, store, animator, sched = _setup(piles=4, per_pile=3)
    clock.advance(1.0)
    (tr,) = animator.transfers()
    assert not store.pile(tr.source).locked
    assert store.pile(tr.destination).locked


def test_all_but_one_locked_skips_cadence() -> None:
    clock, store, animator, sched = _setup(piles=4, per_pile=3)
    for i in (0, 1, 2):
        store.set_locked(i, True)

    assert store.pick_eligible_source() == 3
    assert store.pick_eligible_destination(excluding=3) is None

    clock.advance(1.0)
    assert sched.stats.dispatched == 0
    assert sched.stats.skipped == 1
    assert store.lengths() == [3, 3, 3, 3]
    assert store.event_log[-1] == {"type": "CADENCE_SKIPPED", "reason": "no_destination"}
    assert sched.state is SchedulerState.IDLE


def test_no_source_when_only_unlocked_pile_is_empty() -> None:
    clock, store, animator, sched = _setup(piles=3, per_pile=0)
    clock.advance(1.0)
    assert sched.stats.skipped == 1
    assert store.event_log[-1] == {"type": "CADENCE_SKIPPED", "reason": "no_source"}


def test_missed_cadences_are_dropped_not_burst() -> None:
    clock, store, animator, sched = _setup()
    clock.advance(3.5)
    assert sched.stats.dispatched == 1
    clock.advance(0.5)
    assert sched.stats.dispatched == 1
    clock.advance(0.5)
    assert sched.stats.dispatched == 2


def test_stopped_scheduler_never_fires() -> None:
    clock, store, animator, sched = _setup()
    sched.stop()
    clock.advance(5.0)
    assert sched.stats.dispatched == 0
    assert not sched.running


def test_cadence_below_minimum_is_rejected() -> None:
    store: PileStore[None] = PileStore(stack_step=1.0)
    animator = TransferAnimator(FrameClock())
    with pytest.raises(ConfigError):
        TransferScheduler(store, animator, cadence_ms=50, duration_ms=1000)
    with pytest.raises(ConfigError):
        TransferScheduler(store, animator, cadence_ms=100, duration_ms=0)


def test_locks_match_in_flight_destinations_under_load() -> None:
    # Short cadence and long flights keep several transfers overlapping.
    clock, store, animator, sched = _setup(piles=6, per_pile=3, cadence_ms=100, duration_ms=700, seed=3)
    peak = 0
    for _ in range(1200):
        clock.advance(0.05)
        in_flight = animator.transfers()
        peak = max(peak, len(in_flight))
        destinations = [t.destination for t in in_flight]

        assert len(destinations) == len(set(destinations))
        assert {i for i, p in enumerate(store.piles) if p.locked} == set(destinations)
        assert store.total_tokens() + len(in_flight) == 18
        assert all(n >= 0 for n in store.lengths())
        for _ in range(5):
            pick = store.pick_eligible_destination(excluding=-1)
            assert pick is None or pick not in destinations

    assert peak >= 3
    assert sched.stats.dispatched > 100


def test_decimal_frame_steps_fire_every_cadence() -> None:
    # 50 steps of 0.1 accumulate to 4.999999999999998, which is still five cadences.
    clock, store, animator, sched = _setup()
    for _ in range(50):
        clock.advance(0.1)
    assert clock.now() < 5.0
    assert sched.stats.dispatched == 5


def test_stopped_scheduler_ignores_direct_dispatch() -> None:
    clock, store, animator, sched = _setup()
    sched.stop()
    assert sched.dispatch() is False
    assert sched.state is SchedulerState.STOPPED
    assert not sched.running
    assert sched.stats.dispatched == 0
    assert store.total_tokens() == 144
