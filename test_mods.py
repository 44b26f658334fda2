from __future__ import annotations

import pytest

from beatmap_models import BeatmapDifficulty
from mods import (
    DIFFICULTY_ADJUSTMENT_MODS,
    DOUBLE_TIME,
    EASY,
    HALF_TIME,
    HARD_ROCK,
    HIDDEN,
    MAX_DIFFICULTY_SETTING,
    NIGHTCORE,
    apply_difficulty_adjustments,
    difficulty_adjustment_mod_combinations,
    mods_acronym,
    parse_mods,
    resolve_clock_rate,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ()),
        ("NM", ()),
        ("DTHR", (DOUBLE_TIME, HARD_ROCK)),
        ("dt,hd", (DOUBLE_TIME, HIDDEN)),
        (["HR", "EZ"], (HARD_ROCK, EASY)),
    ],
)
def test_parse_mods(text, expected):
    assert parse_mods(text) == expected


@pytest.mark.parametrize("text", ["XX", "DTD", "DTDT", "DTHT", "HREZ", "NCDC"])
def test_parse_mods_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_mods(text)


@pytest.mark.parametrize(
    "mods, expected",
    [
        ((), 1.0),
        ((DOUBLE_TIME,), 1.5),
        ((NIGHTCORE, HIDDEN), 1.5),
        ((HALF_TIME, HARD_ROCK), 0.75),
    ],
)
def test_resolve_clock_rate(mods, expected):
    assert resolve_clock_rate(mods) == pytest.approx(expected)


def test_mods_acronym():
    assert mods_acronym(()) == "NM"
    assert mods_acronym((HIDDEN, DOUBLE_TIME)) == "HDDT"


def test_difficulty_adjustment_combinations_skip_incompatible_pairs():
    combinations = difficulty_adjustment_mod_combinations()

    assert combinations[0] == ()
    assert combinations[1:5] == [(mod,) for mod in DIFFICULTY_ADJUSTMENT_MODS]
    assert len(combinations) == 9
    for combination in combinations:
        acronyms = {mod.acronym for mod in combination}
        assert not {"DT", "HT"} <= acronyms
        assert not {"EZ", "HR"} <= acronyms
    assert len(set(combinations)) == len(combinations)


def test_hard_rock_and_easy_scale_difficulty_settings():
    settings = BeatmapDifficulty(overall_difficulty=6.0, approach_rate=9.0, circle_size=4.0, drain_rate=5.0)

    hard_rock = HARD_ROCK.adjust_difficulty(settings)
    easy = EASY.adjust_difficulty(settings)

    assert hard_rock.overall_difficulty == pytest.approx(8.4)
    assert hard_rock.approach_rate == MAX_DIFFICULTY_SETTING
    assert hard_rock.circle_size == pytest.approx(5.2)
    assert hard_rock.drain_rate == pytest.approx(7.0)
    assert easy.overall_difficulty == pytest.approx(3.0)
    assert easy.approach_rate == pytest.approx(4.5)
    assert easy.circle_size == pytest.approx(2.0)


def test_clock_rate_mods_leave_difficulty_settings_alone():
    settings = BeatmapDifficulty(overall_difficulty=6.0, approach_rate=9.0)

    assert apply_difficulty_adjustments((DOUBLE_TIME, HIDDEN), settings) == settings
    assert apply_difficulty_adjustments((), settings) is settings


def test_adjustments_compose_with_clock_rate_mods():
    settings = BeatmapDifficulty(overall_difficulty=5.0, approach_rate=5.0)

    adjusted = apply_difficulty_adjustments((HALF_TIME, HARD_ROCK), settings)

    assert adjusted.overall_difficulty == pytest.approx(7.0)
    assert adjusted.approach_rate == pytest.approx(7.0)
