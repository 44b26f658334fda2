# -*- coding: utf-8 -*-
########################
# difficulty_objects.py
########################
# Purpose:
# - Convert an ordered list of raw hit objects into difficulty objects.
# - Each difficulty object describes the transition from the previous hit object to the current one.
#
# Design notes:
# - One difficulty object per adjacent raw pair: n raw objects give max(0, n - 1) difficulty objects.
# - Time values are divided by clock rate at construction. Distances are left untouched.
# - Predecessors are addressed by index, never by reference to another difficulty object.
# - Difficulty objects are frozen after construction and may be shared by every skill.
#
########################
# Interfaces:
# Public dataclasses:
# - OsuDifficultyHitObject(
#     index: int,
#     base_object: HitObject,
#     last_object: HitObject,
#     last_last_object: Optional[HitObject],
#     last_difficulty_index: Optional[int],
#     last_last_difficulty_index: Optional[int],
#     clock_rate: float,
#     start_time: float,
#     delta_time: float,
#     strain_time: float,
#     jump_distance: float,
#     travel_distance: float,
#     angle: Optional[float],
#   )
#
# Public classes:
# - class DifficultyObjectChain (read-only Sequence[OsuDifficultyHitObject])
#   - previous(difficulty_object, backwards_index: int = 0) -> Optional[OsuDifficultyHitObject]
#
# Public functions:
# - create_difficulty_hit_object(...) -> OsuDifficultyHitObject
# - iter_difficulty_hit_objects(hit_objects, clock_rate) -> Iterator[OsuDifficultyHitObject]
# - build_difficulty_object_chain(hit_objects, clock_rate) -> DifficultyObjectChain
#
# Inputs:
# - Raw hit objects in start time order and a positive clock rate.
#
# Outputs:
# - Difficulty objects in the same order, fed to skills by OsuDifficultyCalculator.
#
########################

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, overload

from beatmap_models import HitObject, HitObjectKind, Position

# Floor for strain_time so that near-simultaneous objects do not explode strain values.
MIN_DELTA_TIME = 25.0


@dataclass(frozen=True)
class OsuDifficultyHitObject:
    index: int
    base_object: HitObject
    last_object: HitObject
    last_last_object: Optional[HitObject]
    last_difficulty_index: Optional[int]
    last_last_difficulty_index: Optional[int]
    clock_rate: float
    start_time: float
    delta_time: float
    strain_time: float
    jump_distance: float
    travel_distance: float
    angle: Optional[float]

    @property
    def is_spinner(self) -> bool:
        return self.base_object.kind is HitObjectKind.SPINNER


def _distance(start: Optional[Position], end: Optional[Position]) -> float:
    if start is None or end is None:
        return 0.0
    return math.hypot(float(end[0]) - float(start[0]), float(end[1]) - float(start[1]))


def _angle_at(first: Optional[Position], middle: Optional[Position], last: Optional[Position]) -> Optional[float]:
    if first is None or middle is None or last is None:
        return None
    v1x = float(first[0]) - float(middle[0])
    v1y = float(first[1]) - float(middle[1])
    v2x = float(last[0]) - float(middle[0])
    v2y = float(last[1]) - float(middle[1])
    dot = v1x * v2x + v1y * v2y
    det = v1x * v2y - v1y * v2x
    return abs(math.atan2(det, dot))


def create_difficulty_hit_object(
    *,
    index: int,
    hit_object: HitObject,
    last_object: HitObject,
    last_last_object: Optional[HitObject],
    last_difficulty_object: Optional[OsuDifficultyHitObject],
    last_last_difficulty_object: Optional[OsuDifficultyHitObject],
    clock_rate: float,
) -> OsuDifficultyHitObject:
    rate = float(clock_rate)
    delta_time = (float(hit_object.start_time_ms) - float(last_object.start_time_ms)) / rate

    # Movement starts where the previous object ended, so slider bodies are excluded from the jump.
    jump_distance = _distance(last_object.effective_end_position, hit_object.position)
    travel_distance = _distance(last_object.position, last_object.effective_end_position)

    angle: Optional[float] = None
    if last_last_object is not None:
        angle = _angle_at(last_last_object.effective_end_position, last_object.position, hit_object.position)

    return OsuDifficultyHitObject(
        index=int(index),
        base_object=hit_object,
        last_object=last_object,
        last_last_object=last_last_object,
        last_difficulty_index=None if last_difficulty_object is None else last_difficulty_object.index,
        last_last_difficulty_index=None if last_last_difficulty_object is None else last_last_difficulty_object.index,
        clock_rate=rate,
        start_time=float(hit_object.start_time_ms) / rate,
        delta_time=delta_time,
        strain_time=max(delta_time, MIN_DELTA_TIME),
        jump_distance=jump_distance,
        travel_distance=travel_distance,
        angle=angle,
    )


def iter_difficulty_hit_objects(hit_objects: Sequence[HitObject], clock_rate: float) -> Iterator[OsuDifficultyHitObject]:
    """Yield one difficulty object per adjacent pair of hit objects, in order.

    The first transition is formed by the first two hit objects, so fewer than two
    hit objects yield nothing. The generator is single-pass.
    """
    last_last_difficulty_object: Optional[OsuDifficultyHitObject] = None
    last_difficulty_object: Optional[OsuDifficultyHitObject] = None

    for object_index in range(1, len(hit_objects)):
        last_last = hit_objects[object_index - 2] if object_index > 1 else None
        last = hit_objects[object_index - 1]
        current = hit_objects[object_index]

        difficulty_object = create_difficulty_hit_object(
            index=object_index - 1,
            hit_object=current,
            last_object=last,
            last_last_object=last_last,
            last_difficulty_object=last_difficulty_object,
            last_last_difficulty_object=last_last_difficulty_object,
            clock_rate=clock_rate,
        )
        last_last_difficulty_object = last_difficulty_object
        last_difficulty_object = difficulty_object
        yield difficulty_object


class DifficultyObjectChain(Sequence[OsuDifficultyHitObject]):
    def __init__(self, difficulty_objects: Sequence[OsuDifficultyHitObject]) -> None:
        self._objects = tuple(difficulty_objects)
        for position, difficulty_object in enumerate(self._objects):
            if difficulty_object.index != position:
                raise ValueError(f"difficulty object at position {position} carries index {difficulty_object.index}")

    @overload
    def __getitem__(self, item: int) -> OsuDifficultyHitObject:
        ...

    @overload
    def __getitem__(self, item: slice) -> Sequence[OsuDifficultyHitObject]:
        ...

    def __getitem__(self, item):
        return self._objects[item]

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[OsuDifficultyHitObject]:
        return iter(self._objects)

    def previous(self, difficulty_object: OsuDifficultyHitObject, backwards_index: int = 0) -> Optional[OsuDifficultyHitObject]:
        """Return the object `backwards_index + 1` steps before `difficulty_object`, or None."""
        if backwards_index < 0:
            raise ValueError("backwards_index must be non-negative")
        target_index = int(difficulty_object.index) - 1 - int(backwards_index)
        if target_index < 0 or target_index >= len(self._objects):
            return None
        return self._objects[target_index]


def build_difficulty_object_chain(hit_objects: Sequence[HitObject], clock_rate: float) -> DifficultyObjectChain:
    return DifficultyObjectChain(list(iter_difficulty_hit_objects(hit_objects, clock_rate)))


def _run_unit_tests() -> None:
    hit_objects = [
        HitObject(0.0, HitObjectKind.CIRCLE, (0.0, 0.0)),
        HitObject(300.0, HitObjectKind.CIRCLE, (100.0, 0.0)),
        HitObject(600.0, HitObjectKind.CIRCLE, (100.0, 100.0)),
    ]
    chain = build_difficulty_object_chain(hit_objects, 1.5)
    assert len(chain) == 2
    assert chain[0].last_last_object is None
    assert chain[0].last_difficulty_index is None
    assert chain[1].last_difficulty_index == 0
    assert abs(chain[1].delta_time - 200.0) < 1e-9
    assert chain[1].jump_distance == 100.0
    assert chain[1].angle is not None and abs(chain[1].angle - math.pi / 2) < 1e-9
    assert chain.previous(chain[1]) is chain[0]
    assert chain.previous(chain[0]) is None

    assert list(iter_difficulty_hit_objects(hit_objects[:1], 1.0)) == []


if __name__ == "__main__":
    _run_unit_tests()
    print("difficulty_objects.py: ok")
