from __future__ import annotations

import pytest

from config import StrainConfig
from difficulty_objects import build_difficulty_object_chain
from mods import DOUBLE_TIME
from sample_beatmaps import build_sample_beatmap, circle, spinner
from skills import (
    SKILL_ORDER,
    Aim,
    FlowAim,
    JumpAim,
    RawAim,
    RhythmComplexity,
    Speed,
    Stamina,
    StrainSkill,
    create_skills,
)


class ConstantStrain(StrainSkill):
    name = "constant"
    skill_multiplier = 1.0
    strain_decay_base = 0.5

    def strain_value_of(self, current) -> float:
        return 1.0


def _feed(skill, hit_objects, clock_rate: float = 1.0):
    for item in build_difficulty_object_chain(hit_objects, clock_rate):
        skill.process(item)
    return skill


def test_create_skills_returns_seven_fresh_skills_in_order():
    first = create_skills((DOUBLE_TIME,))
    second = create_skills((DOUBLE_TIME,))

    assert [skill.name for skill in first] == list(SKILL_ORDER)
    assert [type(skill) for skill in first] == [Aim, RawAim, JumpAim, FlowAim, Speed, Stamina, RhythmComplexity]
    assert all(a is not b for a, b in zip(first, second))
    assert all(skill.mods == (DOUBLE_TIME,) for skill in first)


def test_strain_skill_section_peaks_are_weighted():
    skill = _feed(ConstantStrain(()), [circle(0, 0, 0), circle(500, 0, 0), circle(1000, 0, 0)])

    # Peak 1.0 in the first section, 1 + 0.5 ** 0.5 in the second.
    assert skill.difficulty_value() == pytest.approx(1.0 + 0.5 ** 0.5 + 0.9 * 1.0)


def test_strain_skill_uses_configured_section_length_and_weight():
    settings = StrainConfig(section_length_ms=2000.0, decay_weight=0.5)
    skill = ConstantStrain((), section_length_ms=settings.section_length_ms, decay_weight=settings.decay_weight)

    _feed(skill, [circle(0, 0, 0), circle(500, 0, 0), circle(1000, 0, 0)])

    assert skill.difficulty_value() == pytest.approx(1.0 + 0.5 ** 0.5)


def test_difficulty_value_is_pure_and_zero_before_processing():
    skill = Aim(())
    assert skill.difficulty_value() == 0.0

    _feed(skill, build_sample_beatmap(difficulty="medium").hit_objects)

    first = skill.difficulty_value()
    assert skill.difficulty_value() == first
    assert first > 0.0


def test_previous_keeps_the_two_latest_objects():
    hit_objects = [circle(index * 100, 0, 0) for index in range(4)]
    chain = build_difficulty_object_chain(hit_objects, 1.0)
    skill = _feed(Speed(()), hit_objects)

    assert skill.previous(0) is chain[2]
    assert skill.previous(1) is chain[1]
    assert skill.previous(2) is None


def test_raw_aim_never_exceeds_aim():
    hit_objects = build_sample_beatmap(difficulty="hard").hit_objects

    aim = _feed(Aim(()), hit_objects).difficulty_value()
    raw_aim = _feed(RawAim(()), hit_objects).difficulty_value()

    assert 0.0 < raw_aim < aim


def test_spinners_add_no_aim():
    hit_objects = [circle(0, 0, 0), spinner(500, 1500)]

    assert _feed(Aim(()), hit_objects).difficulty_value() == 0.0
    assert _feed(JumpAim(()), hit_objects).difficulty_value() == 0.0
    assert _feed(Speed(()), hit_objects).difficulty_value() == 0.0


def test_back_and_forth_is_jump_and_straight_line_is_flow():
    back_and_forth = [circle(0, 0, 0), circle(200, 200, 0), circle(400, 0, 0), circle(600, 200, 0)]
    straight_line = [circle(0, 0, 0), circle(200, 200, 0), circle(400, 400, 0), circle(600, 600, 0)]

    assert _feed(JumpAim(()), back_and_forth).difficulty_value() > _feed(JumpAim(()), straight_line).difficulty_value()
    assert _feed(FlowAim(()), straight_line).difficulty_value() > _feed(FlowAim(()), back_and_forth).difficulty_value()


def test_faster_clock_rate_raises_speed_and_stamina():
    hit_objects = build_sample_beatmap(difficulty="medium").hit_objects

    for skill_type in (Speed, Stamina):
        normal = _feed(skill_type(()), hit_objects, 1.0).difficulty_value()
        fast = _feed(skill_type(()), hit_objects, 1.5).difficulty_value()
        assert fast > normal


def test_regular_rhythm_has_base_complexity():
    skill = _feed(RhythmComplexity(()), [circle(index * 250, 0, 0) for index in range(8)])

    assert skill.difficulty_value() == 1.0


def test_changing_rhythm_raises_complexity():
    times = [0, 250, 375, 750, 875, 1000, 1500]
    skill = _feed(RhythmComplexity(()), [circle(time, 0, 0) for time in times])

    value = skill.difficulty_value()
    assert value > 1.0
    assert skill.difficulty_value() == value


def test_rhythm_complexity_without_objects():
    assert RhythmComplexity(()).difficulty_value() == 1.0
