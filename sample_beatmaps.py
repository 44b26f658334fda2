# sample_beatmaps.py
from __future__ import annotations

from typing import List, Tuple

from beatmap_models import Beatmap, BeatmapDifficulty, HitObject, HitObjectKind, NestedObject, NestedObjectKind


def circle(time_ms: float, x: float, y: float) -> HitObject:
    return HitObject(start_time_ms=float(time_ms), kind=HitObjectKind.CIRCLE, position=(float(x), float(y)))


def spinner(time_ms: float, end_time_ms: float) -> HitObject:
    return HitObject(start_time_ms=float(time_ms), kind=HitObjectKind.SPINNER, end_time_ms=float(end_time_ms))


def slider(
    time_ms: float,
    start: Tuple[float, float],
    end: Tuple[float, float],
    *,
    duration_ms: float,
    tick_count: int = 0,
) -> HitObject:
    """Slider with a head, evenly spaced ticks and a tail."""
    end_time_ms = float(time_ms) + float(duration_ms)
    nested: List[NestedObject] = [NestedObject(float(time_ms), NestedObjectKind.HEAD)]
    for tick_index in range(tick_count):
        tick_time = float(time_ms) + float(duration_ms) * (tick_index + 1) / (tick_count + 1)
        nested.append(NestedObject(tick_time, NestedObjectKind.TICK))
    nested.append(NestedObject(end_time_ms, NestedObjectKind.TAIL))
    return HitObject(
        start_time_ms=float(time_ms),
        kind=HitObjectKind.SLIDER,
        position=(float(start[0]), float(start[1])),
        end_time_ms=end_time_ms,
        end_position=(float(end[0]), float(end[1])),
        nested_objects=tuple(nested),
    )


def build_sample_beatmap(*, difficulty: str) -> Beatmap:
    normalized_difficulty = (difficulty or "easy").strip().lower() or "easy"

    if normalized_difficulty == "hard":
        interval_ms = 150.0
        spacing = 220.0
        total_objects = 96
        settings = BeatmapDifficulty(overall_difficulty=9.0, approach_rate=9.5, circle_size=4.0)
    elif normalized_difficulty == "medium":
        interval_ms = 250.0
        spacing = 150.0
        total_objects = 64
        settings = BeatmapDifficulty(overall_difficulty=7.0, approach_rate=8.0, circle_size=4.0)
    else:
        normalized_difficulty = "easy"
        interval_ms = 500.0
        spacing = 80.0
        total_objects = 32
        settings = BeatmapDifficulty(overall_difficulty=4.0, approach_rate=4.0, circle_size=3.0)

    lead_in_ms = 1000.0

    # Deterministic square pattern around the playfield centre.
    corners = [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0)]
    centre_x, centre_y = 256.0, 192.0
    half = spacing / 2.0

    hit_objects: List[HitObject] = []
    current_time = lead_in_ms
    for object_index in range(total_objects):
        dx, dy = corners[object_index % len(corners)]
        x = centre_x + dx * half
        y = centre_y + dy * half
        if object_index % 8 == 7:
            next_dx, next_dy = corners[(object_index + 1) % len(corners)]
            end = (centre_x + next_dx * half, centre_y + next_dy * half)
            hit_objects.append(slider(current_time, (x, y), end, duration_ms=interval_ms, tick_count=1))
            current_time += interval_ms * 2.0
        else:
            hit_objects.append(circle(current_time, x, y))
            current_time += interval_ms

    hit_objects.append(spinner(current_time + 500.0, current_time + 2500.0))

    return Beatmap(hit_objects=tuple(hit_objects), difficulty=settings, title=f"sample {normalized_difficulty}")
