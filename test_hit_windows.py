from __future__ import annotations

import pytest

from hit_windows import HitResult, OsuHitWindows, difficulty_range, preempt_for_approach_rate


@pytest.mark.parametrize(
    "difficulty, expected",
    [(0.0, 80.0), (2.5, 65.0), (5.0, 50.0), (8.0, 32.0), (10.0, 20.0)],
)
def test_difficulty_range_for_great_window(difficulty, expected):
    assert difficulty_range(difficulty, 80.0, 50.0, 20.0) == pytest.approx(expected)


@pytest.mark.parametrize(
    "approach_rate, expected",
    [(0.0, 1800.0), (4.0, 1320.0), (5.0, 1200.0), (9.0, 600.0), (10.0, 450.0)],
)
def test_preempt_for_approach_rate(approach_rate, expected):
    assert preempt_for_approach_rate(approach_rate) == pytest.approx(expected)


def test_hit_windows_follow_overall_difficulty():
    windows = OsuHitWindows()
    assert windows.window_for(HitResult.GREAT) == 50.0
    assert windows.window_for(HitResult.OK) == 100.0

    windows.set_difficulty(10.0)

    assert windows.window_for(HitResult.GREAT) == 20.0
    assert windows.window_for(HitResult.OK) == 60.0
    assert windows.window_for(HitResult.MEH) == 100.0
    assert windows.window_for(HitResult.MISS) == 400.0
