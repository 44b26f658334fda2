# -*- coding: utf-8 -*-
########################
# beatmap_models.py
########################
# Purpose:
# - Raw hit object and beatmap data models consumed by the difficulty calculator.
# - Strict JSON reader for the calculator input format.
#
# Design notes:
# - Plain frozen dataclasses. Nothing here knows about clock rate or skills.
# - Parsing must never silently accept an invalid object list.
# - Times are milliseconds, positions are osu!pixels.
# - A slider always owns at least its head and tail nested objects.
#
########################
# Interfaces:
# Public enums:
# - class HitObjectKind(enum.Enum): CIRCLE | SLIDER | SPINNER
# - class NestedObjectKind(enum.Enum): HEAD | TICK | REPEAT | TAIL
#
# Public exceptions:
# - class BeatmapError(ValueError)
# - class BeatmapParseError(BeatmapError)
# - class BeatmapValidationError(BeatmapError)
#
# Public dataclasses:
# - NestedObject(start_time_ms: float, kind: NestedObjectKind)
# - HitObject(start_time_ms: float, kind: HitObjectKind, position: Optional[(x, y)],
#             end_time_ms: Optional[float], end_position: Optional[(x, y)], nested_objects: tuple[NestedObject, ...])
# - BeatmapDifficulty(overall_difficulty: float, approach_rate: float, circle_size: float, drain_rate: float)
# - Beatmap(hit_objects: tuple[HitObject, ...], difficulty: BeatmapDifficulty, title: str)
#
# Public functions:
# - validate_hit_objects(hit_objects: Sequence[HitObject]) -> None
# - beatmap_from_dict(data: dict) -> Beatmap
# - load_beatmap_json(beatmap_path: pathlib.Path) -> Beatmap
#
# Inputs:
# - JSON text or already-decoded dicts.
#
# Outputs:
# - Beatmap for OsuDifficultyCalculator.
#
########################

from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

Position = Tuple[float, float]


class BeatmapError(ValueError):
    """Base error for beatmap input problems."""


class BeatmapParseError(BeatmapError):
    """Raised when input cannot be decoded into the expected structure."""


class BeatmapValidationError(BeatmapError):
    """Raised when input decodes but violates the hit object ordering rules."""


class HitObjectKind(enum.Enum):
    CIRCLE = "circle"
    SLIDER = "slider"
    SPINNER = "spinner"


class NestedObjectKind(enum.Enum):
    HEAD = "head"
    TICK = "tick"
    REPEAT = "repeat"
    TAIL = "tail"


@dataclass(frozen=True)
class NestedObject:
    start_time_ms: float
    kind: NestedObjectKind


@dataclass(frozen=True)
class HitObject:
    start_time_ms: float
    kind: HitObjectKind
    position: Optional[Position] = None
    end_time_ms: Optional[float] = None
    end_position: Optional[Position] = None
    nested_objects: Tuple[NestedObject, ...] = ()

    @property
    def effective_end_time_ms(self) -> float:
        if self.end_time_ms is None:
            return float(self.start_time_ms)
        return float(self.end_time_ms)

    @property
    def effective_end_position(self) -> Optional[Position]:
        if self.end_position is not None:
            return self.end_position
        return self.position

    @property
    def is_slider(self) -> bool:
        return self.kind is HitObjectKind.SLIDER


@dataclass(frozen=True)
class BeatmapDifficulty:
    overall_difficulty: float = 5.0
    approach_rate: float = 5.0
    circle_size: float = 5.0
    drain_rate: float = 5.0


@dataclass(frozen=True)
class Beatmap:
    hit_objects: Tuple[HitObject, ...] = ()
    difficulty: BeatmapDifficulty = field(default_factory=BeatmapDifficulty)
    title: str = ""


# Head and tail.
MIN_SLIDER_NESTED_OBJECTS = 2


def validate_hit_objects(hit_objects: Sequence[HitObject]) -> None:
    previous_time: Optional[float] = None
    for index, hit_object in enumerate(hit_objects):
        start_time = float(hit_object.start_time_ms)
        if math.isnan(start_time) or math.isinf(start_time):
            raise BeatmapValidationError(f"hit object {index} has a non-finite start time")
        if start_time < 0.0:
            raise BeatmapValidationError(f"hit object {index} has a negative start time: {start_time}")
        if hit_object.is_slider and len(hit_object.nested_objects) < MIN_SLIDER_NESTED_OBJECTS:
            raise BeatmapValidationError(
                f"hit object {index} is a slider with {len(hit_object.nested_objects)} nested objects; "
                "at least a head and a tail are required"
            )
        if previous_time is not None:
            if start_time == previous_time:
                raise BeatmapValidationError(f"hit object {index} duplicates start time {start_time}")
            if start_time < previous_time:
                raise BeatmapValidationError(
                    f"hit object {index} is out of order: {start_time} after {previous_time}"
                )
        previous_time = start_time


_DIFFICULTY_KEYS = ("overall_difficulty", "approach_rate", "circle_size", "drain_rate")


def _require_number(raw_value: Any, *, context: str) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)):
        raise BeatmapParseError(f"{context} must be a number, got {raw_value!r}")
    return float(raw_value)


def _optional_position(raw_object: Dict[str, Any], x_key: str, y_key: str, *, context: str) -> Optional[Position]:
    has_x = x_key in raw_object
    has_y = y_key in raw_object
    if not has_x and not has_y:
        return None
    if has_x != has_y:
        raise BeatmapParseError(f"{context} must define both {x_key} and {y_key}")
    return (
        _require_number(raw_object[x_key], context=f"{context}.{x_key}"),
        _require_number(raw_object[y_key], context=f"{context}.{y_key}"),
    )


def _parse_kind(raw_value: Any, enum_type: Any, *, context: str) -> Any:
    text = str(raw_value or "").strip().lower()
    try:
        return enum_type(text)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_type)
        raise BeatmapParseError(f"{context} must be one of: {allowed}; got {raw_value!r}") from exc


def _parse_nested(raw_nested: Any, *, context: str) -> Tuple[NestedObject, ...]:
    if not isinstance(raw_nested, list):
        raise BeatmapParseError(f"{context} must be a list")
    nested: List[NestedObject] = []
    for nested_index, raw_item in enumerate(raw_nested):
        item_context = f"{context}[{nested_index}]"
        if not isinstance(raw_item, dict):
            raise BeatmapParseError(f"{item_context} must be an object")
        nested.append(
            NestedObject(
                start_time_ms=_require_number(raw_item.get("time"), context=f"{item_context}.time"),
                kind=_parse_kind(raw_item.get("kind"), NestedObjectKind, context=f"{item_context}.kind"),
            )
        )
    return tuple(nested)


def _parse_hit_object(raw_object: Any, *, index: int) -> HitObject:
    context = f"hit_objects[{index}]"
    if not isinstance(raw_object, dict):
        raise BeatmapParseError(f"{context} must be an object")

    kind = _parse_kind(raw_object.get("kind"), HitObjectKind, context=f"{context}.kind")
    start_time_ms = _require_number(raw_object.get("time"), context=f"{context}.time")
    position = _optional_position(raw_object, "x", "y", context=context)
    end_position = _optional_position(raw_object, "end_x", "end_y", context=context)

    end_time_ms: Optional[float] = None
    if raw_object.get("end_time") is not None:
        end_time_ms = _require_number(raw_object["end_time"], context=f"{context}.end_time")
        if end_time_ms < start_time_ms:
            raise BeatmapValidationError(f"{context} ends before it starts")

    nested_objects: Tuple[NestedObject, ...] = ()
    if "nested" in raw_object:
        if kind is not HitObjectKind.SLIDER:
            raise BeatmapParseError(f"{context} is a {kind.value}; only sliders own nested objects")
        nested_objects = _parse_nested(raw_object["nested"], context=f"{context}.nested")
    elif kind is HitObjectKind.SLIDER:
        raise BeatmapParseError(f"{context} is a slider and requires nested objects")

    if kind is not HitObjectKind.SPINNER and position is None:
        raise BeatmapParseError(f"{context} is a {kind.value} and requires x and y")

    return HitObject(
        start_time_ms=start_time_ms,
        kind=kind,
        position=position,
        end_time_ms=end_time_ms,
        end_position=end_position,
        nested_objects=nested_objects,
    )


def _parse_difficulty(raw_difficulty: Any) -> BeatmapDifficulty:
    if raw_difficulty is None:
        return BeatmapDifficulty()
    if not isinstance(raw_difficulty, dict):
        raise BeatmapParseError("difficulty must be an object")

    values: Dict[str, float] = {}
    for key in _DIFFICULTY_KEYS:
        if key not in raw_difficulty:
            continue
        value = _require_number(raw_difficulty[key], context=f"difficulty.{key}")
        if value < 0.0 or value > 10.0:
            raise BeatmapValidationError(f"difficulty.{key} must be within [0, 10], got {value}")
        values[key] = value
    return BeatmapDifficulty(**values)


def beatmap_from_dict(data: Dict[str, Any]) -> Beatmap:
    if not isinstance(data, dict):
        raise BeatmapParseError("beatmap root must be a JSON object")

    raw_objects = data.get("hit_objects", [])
    if not isinstance(raw_objects, list):
        raise BeatmapParseError("hit_objects must be a list")

    hit_objects = tuple(_parse_hit_object(raw_object, index=index) for index, raw_object in enumerate(raw_objects))
    validate_hit_objects(hit_objects)

    return Beatmap(
        hit_objects=hit_objects,
        difficulty=_parse_difficulty(data.get("difficulty")),
        title=str(data.get("title") or "").strip(),
    )


def load_beatmap_json(beatmap_path: Path) -> Beatmap:
    resolved_path = Path(beatmap_path)
    try:
        raw_text = resolved_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read beatmap file: {resolved_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise BeatmapParseError(f"Beatmap file is not valid JSON: {resolved_path}. Error: {exception}") from exception

    try:
        return beatmap_from_dict(parsed)
    except BeatmapError as exception:
        raise type(exception)(f"{resolved_path}: {exception}") from exception


def _run_unit_tests() -> None:
    beatmap = beatmap_from_dict(
        {
            "difficulty": {"overall_difficulty": 8, "approach_rate": 9},
            "hit_objects": [
                {"kind": "circle", "time": 0, "x": 0, "y": 0},
                {"kind": "slider", "time": 500, "x": 10, "y": 0, "end_x": 110, "end_y": 0, "end_time": 800,
                 "nested": [{"kind": "head", "time": 500}, {"kind": "tail", "time": 800}]},
                {"kind": "spinner", "time": 1000, "end_time": 2000},
            ],
        }
    )
    assert len(beatmap.hit_objects) == 3
    assert beatmap.hit_objects[1].effective_end_position == (110.0, 0.0)
    assert beatmap.hit_objects[2].position is None
    assert beatmap.difficulty.approach_rate == 9.0

    try:
        validate_hit_objects([HitObject(100.0, HitObjectKind.CIRCLE, (0, 0)), HitObject(50.0, HitObjectKind.CIRCLE, (0, 0))])
    except BeatmapValidationError:
        pass
    else:
        raise AssertionError("Expected BeatmapValidationError for out-of-order objects")


if __name__ == "__main__":
    _run_unit_tests()
    print("beatmap_models.py: ok")
