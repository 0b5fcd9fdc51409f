"""Deterministic, headless scene logic for scenedeck.

IMPORTANT: This package must never import pygame.
"""

from .animator import TransferAnimator, TransferHandle
from .clock import Clock, FrameClock
from .config import MIN_CADENCE_MS, CardSizing, ShuffleConfig
from .layout import LayoutPlanner
from .piles import PileStore
from .scheduler import SchedulerState, TransferScheduler
from .shuffle import SceneController, SceneHandle, create, destroy
from .types import ConfigError, LayoutError, Pile, PileStateError, Token, Transfer

__all__ = [
    "CardSizing",
    "Clock",
    "ConfigError",
    "FrameClock",
    "LayoutError",
    "LayoutPlanner",
    "MIN_CADENCE_MS",
    "Pile",
    "PileStateError",
    "PileStore",
    "SceneController",
    "SceneHandle",
    "SchedulerState",
    "ShuffleConfig",
    "Token",
    "Transfer",
    "TransferAnimator",
    "TransferHandle",
    "TransferScheduler",
    "create",
    "destroy",
]
