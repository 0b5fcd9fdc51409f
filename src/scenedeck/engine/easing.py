from __future__ import annotations

from typing import Callable

from .types import Vec2

Easing = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_in_out_quad(t: float) -> float:
    # power1.inOut
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


EASINGS: dict[str, Easing] = {
    "linear": linear,
    "ease_in_out": ease_in_out_quad,
}
