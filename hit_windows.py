# -*- coding: utf-8 -*-
########################
# hit_windows.py
########################
# Purpose:
# - Timing window lookup per judgement for a given overall difficulty.
# - Approach preempt lookup for a given approach rate.
#
# Design notes:
# - Pure functions and a small stateful provider. No knowledge of clock rate.
# - Windows are returned in milliseconds, untruncated. Callers decide rounding.
#
########################
# Interfaces:
# Public enums:
# - class HitResult(enum.Enum): GREAT | OK | MEH | MISS
#
# Public protocols:
# - HitWindowProvider
#   - set_difficulty(overall_difficulty: float) -> None
#   - window_for(result: HitResult) -> float
#
# Public classes:
# - class OsuHitWindows(HitWindowProvider)
#
# Public functions:
# - difficulty_range(difficulty: float, minimum: float, middle: float, maximum: float) -> float
# - preempt_for_approach_rate(approach_rate: float) -> float
#
########################

from __future__ import annotations

import enum
from typing import Dict, Protocol, Tuple


class HitResult(enum.Enum):
    GREAT = "great"
    OK = "ok"
    MEH = "meh"
    MISS = "miss"


def difficulty_range(difficulty: float, minimum: float, middle: float, maximum: float) -> float:
    """Map a 0-10 difficulty setting onto a range anchored at 0, 5 and 10."""
    value = float(difficulty)
    if value > 5.0:
        return middle + (maximum - middle) * (value - 5.0) / 5.0
    if value < 5.0:
        return middle - (middle - minimum) * (5.0 - value) / 5.0
    return float(middle)


PREEMPT_RANGE: Tuple[float, float, float] = (1800.0, 1200.0, 450.0)


def preempt_for_approach_rate(approach_rate: float) -> float:
    return difficulty_range(approach_rate, *PREEMPT_RANGE)


class HitWindowProvider(Protocol):
    def set_difficulty(self, overall_difficulty: float) -> None:
        raise NotImplementedError

    def window_for(self, result: HitResult) -> float:
        raise NotImplementedError


_OSU_WINDOW_RANGES: Dict[HitResult, Tuple[float, float, float]] = {
    HitResult.GREAT: (80.0, 50.0, 20.0),
    HitResult.OK: (140.0, 100.0, 60.0),
    HitResult.MEH: (200.0, 150.0, 100.0),
    HitResult.MISS: (400.0, 400.0, 400.0),
}


class OsuHitWindows:
    def __init__(self) -> None:
        self._windows: Dict[HitResult, float] = {}
        self.set_difficulty(5.0)

    def set_difficulty(self, overall_difficulty: float) -> None:
        self._windows = {
            result: difficulty_range(overall_difficulty, *window_range)
            for result, window_range in _OSU_WINDOW_RANGES.items()
        }

    def window_for(self, result: HitResult) -> float:
        return float(self._windows[result])


def _run_unit_tests() -> None:
    windows = OsuHitWindows()
    assert windows.window_for(HitResult.GREAT) == 50.0
    windows.set_difficulty(10.0)
    assert windows.window_for(HitResult.GREAT) == 20.0
    windows.set_difficulty(0.0)
    assert windows.window_for(HitResult.MEH) == 200.0

    assert preempt_for_approach_rate(5.0) == 1200.0
    assert preempt_for_approach_rate(10.0) == 450.0
    assert preempt_for_approach_rate(0.0) == 1800.0


if __name__ == "__main__":
    _run_unit_tests()
    print("hit_windows.py: ok")
