from __future__ import annotations

import json

import pytest

from beatmap_models import (
    BeatmapParseError,
    BeatmapValidationError,
    HitObject,
    HitObjectKind,
    NestedObject,
    NestedObjectKind,
    beatmap_from_dict,
    load_beatmap_json,
    validate_hit_objects,
)


def _payload():
    return {
        "title": "  Test Map ",
        "difficulty": {"overall_difficulty": 8, "approach_rate": 9.5},
        "hit_objects": [
            {"kind": "circle", "time": 0, "x": 256, "y": 192},
            {
                "kind": "slider",
                "time": 500,
                "x": 100,
                "y": 100,
                "end_time": 900,
                "end_x": 300,
                "end_y": 100,
                "nested": [
                    {"kind": "head", "time": 500},
                    {"kind": "tick", "time": 700},
                    {"kind": "tail", "time": 900},
                ],
            },
            {"kind": "spinner", "time": 1500, "end_time": 3000},
        ],
    }


def test_beatmap_from_dict_reads_every_field():
    beatmap = beatmap_from_dict(_payload())

    assert beatmap.title == "Test Map"
    assert beatmap.difficulty.overall_difficulty == 8.0
    assert beatmap.difficulty.circle_size == 5.0
    circle, slider, spinner = beatmap.hit_objects
    assert circle.kind is HitObjectKind.CIRCLE
    assert circle.effective_end_position == (256.0, 192.0)
    assert circle.effective_end_time_ms == 0.0
    assert slider.is_slider
    assert [item.kind for item in slider.nested_objects] == [
        NestedObjectKind.HEAD,
        NestedObjectKind.TICK,
        NestedObjectKind.TAIL,
    ]
    assert slider.effective_end_position == (300.0, 100.0)
    assert spinner.position is None
    assert spinner.effective_end_time_ms == 3000.0


def test_missing_hit_objects_gives_empty_beatmap():
    assert beatmap_from_dict({}).hit_objects == ()


@pytest.mark.parametrize(
    "mutate",
    [
        lambda data: data.update(hit_objects="nope"),
        lambda data: data["hit_objects"][0].update(kind="hold"),
        lambda data: data["hit_objects"][0].update(time="0"),
        lambda data: data["hit_objects"][0].update(time=True),
        lambda data: data["hit_objects"][0].pop("y"),
        lambda data: data["hit_objects"][0].update(nested=[]),
        lambda data: data["hit_objects"][1].update(nested=[{"kind": "tick"}]),
        lambda data: data["hit_objects"][1].pop("nested"),
        lambda data: data.update(difficulty=[]),
    ],
)
def test_malformed_input_raises_parse_error(mutate):
    data = _payload()
    mutate(data)

    with pytest.raises(BeatmapParseError):
        beatmap_from_dict(data)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda data: data["hit_objects"][0].update(time=-1),
        lambda data: data["hit_objects"][1].update(time=0),
        lambda data: data["hit_objects"][2].update(time=100),
        lambda data: data["hit_objects"][1].update(end_time=400),
        lambda data: data["difficulty"].update(approach_rate=11),
        lambda data: data["hit_objects"][1].update(nested=[{"kind": "head", "time": 500}]),
        lambda data: data["hit_objects"][1].update(nested=[]),
    ],
)
def test_rule_violations_raise_validation_error(mutate):
    data = _payload()
    mutate(data)

    with pytest.raises(BeatmapValidationError):
        beatmap_from_dict(data)


def test_validation_errors_are_value_errors():
    with pytest.raises(ValueError):
        validate_hit_objects([HitObject(0.0, HitObjectKind.CIRCLE, (0, 0)), HitObject(0.0, HitObjectKind.CIRCLE, (0, 0))])


def test_validate_accepts_empty_and_ordered_lists():
    validate_hit_objects([])
    validate_hit_objects([HitObject(0.0, HitObjectKind.CIRCLE, (0, 0)), HitObject(1.0, HitObjectKind.CIRCLE, (0, 0))])


def test_validate_rejects_slider_without_head_and_tail():
    bare_slider = HitObject(500.0, HitObjectKind.SLIDER, (0, 0), end_time_ms=800.0, end_position=(100, 0))
    head_and_tail_slider = HitObject(
        500.0,
        HitObjectKind.SLIDER,
        (0, 0),
        end_time_ms=800.0,
        end_position=(100, 0),
        nested_objects=(NestedObject(500.0, NestedObjectKind.HEAD), NestedObject(800.0, NestedObjectKind.TAIL)),
    )

    with pytest.raises(BeatmapValidationError, match="head and a tail"):
        validate_hit_objects([HitObject(0.0, HitObjectKind.CIRCLE, (0, 0)), bare_slider])

    validate_hit_objects([HitObject(0.0, HitObjectKind.CIRCLE, (0, 0)), head_and_tail_slider])


def test_load_beatmap_json(tmp_path):
    beatmap_path = tmp_path / "map.json"
    beatmap_path.write_text(json.dumps(_payload()), encoding="utf-8")

    beatmap = load_beatmap_json(beatmap_path)

    assert len(beatmap.hit_objects) == 3


def test_load_beatmap_json_reports_path_on_errors(tmp_path):
    broken_path = tmp_path / "broken.json"
    broken_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(BeatmapParseError, match="broken.json"):
        load_beatmap_json(broken_path)

    unordered_path = tmp_path / "unordered.json"
    data = _payload()
    data["hit_objects"][2]["time"] = 10
    unordered_path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(BeatmapValidationError, match="unordered.json"):
        load_beatmap_json(unordered_path)


def test_load_beatmap_json_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_beatmap_json(tmp_path / "missing.json")
