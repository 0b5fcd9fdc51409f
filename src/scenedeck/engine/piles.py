from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Callable, Generic

from .types import ConfigError, P, Pile, PileStateError, Token, Vec2

Event = dict[str, object]
PayloadFactory = Callable[[int, int], P]


class PileStore(Generic[P]):
    """Authoritative owner of pile state.

    Only this class mutates piles. Eligibility queries pick uniformly among the
    candidate set, so they terminate immediately and return None when nothing
    qualifies.
    """

    def __init__(
        self,
        stack_step: float,
        rng: random.Random | None = None,
        payload_factory: PayloadFactory[P] | None = None,
        event_log: list[Event] | None = None,
    ) -> None:
        self.stack_step = stack_step
        self.rng = rng or random.Random()
        self._payload_factory = payload_factory
        self.event_log: list[Event] = event_log if event_log is not None else []
        self._piles: list[Pile[P]] = []
        self._released = False
        self._next_token_id = 0

    def initialize(self, pile_count: int, tokens_per_pile: int, anchors: Sequence[Vec2]) -> None:
        self._check_alive()
        if pile_count < 2:
            raise ConfigError(f"A transfer needs two distinct piles (pile_count={pile_count})")
        if tokens_per_pile < 0:
            raise ConfigError(f"tokens_per_pile must not be negative (got {tokens_per_pile})")
        if len(anchors) != pile_count:
            raise ConfigError(f"Expected {pile_count} anchors, got {len(anchors)}")

        piles: list[Pile[P]] = []
        for p_i, anchor in enumerate(anchors):
            pile: Pile[P] = Pile(anchor=(float(anchor[0]), float(anchor[1])))
            for slot in range(tokens_per_pile):
                payload = self._payload_factory(p_i, slot) if self._payload_factory else None
                token: Token[P] = Token(id=self._next_token_id, payload=payload)  # type: ignore[arg-type]
                self._next_token_id += 1
                token.move_to(self._stacked(pile.anchor, slot))
                pile.tokens.append(token)
            piles.append(pile)
        self._piles = piles

    # Queries

    @property
    def piles(self) -> Sequence[Pile[P]]:
        return tuple(self._piles)

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return len(self._piles)

    def pile(self, index: int) -> Pile[P]:
        return self._piles[index]

    def lengths(self) -> list[int]:
        return [len(p) for p in self._piles]

    def total_tokens(self) -> int:
        return sum(len(p) for p in self._piles)

    def pick_eligible_source(self) -> int | None:
        candidates = [i for i, p in enumerate(self._piles) if not p.locked and p.tokens]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def pick_eligible_destination(self, excluding: int) -> int | None:
        candidates = [i for i, p in enumerate(self._piles) if not p.locked and i != excluding]
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def resting_position(self, index: int) -> Vec2:
        pile = self._piles[index]
        return self._stacked(pile.anchor, len(pile))

    # Mutations

    def pop_top(self, index: int) -> Token[P]:
        self._check_alive()
        return self._piles[index].tokens.pop()

    def push_top(self, index: int, token: Token[P]) -> None:
        self._check_alive()
        pile = self._piles[index]
        if not pile.locked:
            raise PileStateError(f"Pile {index} must be locked by its transfer before a push")
        pile.tokens.append(token)

    def set_locked(self, index: int, locked: bool) -> None:
        self._check_alive()
        self._piles[index].locked = locked

    def release(self) -> None:
        """Drop every pile and token. Further mutations raise PileStateError."""
        for pile in self._piles:
            pile.tokens.clear()
        self._piles = []
        self._released = True

    def _stacked(self, anchor: Vec2, depth: int) -> Vec2:
        return (anchor[0], anchor[1] + depth * self.stack_step)

    def _check_alive(self) -> None:
        if self._released:
            raise PileStateError("Pile store has been released")
