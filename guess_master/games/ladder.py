"""Difficulty ladder: how many attempts the next game gets."""

from __future__ import annotations

import random
from typing import Optional

MIN_START_ATTEMPTS = 1


def next_start_attempts(previous_start_attempts: int) -> int:
    """Every win tightens the next game by one attempt, never below one."""
    return max(MIN_START_ATTEMPTS, previous_start_attempts - 1)


def remaining_before_reset(streak: int, threshold: int) -> int:
    """Losses still allowed before the start attempts snap back to the default.

    Zero once the streak has reached the threshold.
    """
    if streak >= threshold:
        return 0
    return threshold - streak


def draw_target(low: int, high: int, rng: Optional[random.Random] = None) -> int:
    chooser = rng or random
    return chooser.randint(low, high)


__all__ = ["MIN_START_ATTEMPTS", "draw_target", "next_start_attempts", "remaining_before_reset"]
