# -*- coding: utf-8 -*-
########################
# difficulty_calculator.py
########################
# Purpose:
# - Drive one difficulty calculation: difficulty object chain -> skills -> fused attributes.
# - Fuse the seven skill values, timing windows and object counts into OsuDifficultyAttributes.
#
# Design notes:
# - Single pass, single thread. Every difficulty object is fed to every skill, in chain order.
# - Each skill value is read exactly once, in construction order.
# - Overall difficulty and approach rate are read after every mod has adjusted the beatmap settings.
# - The great hit window is truncated to an integer before dividing by clock rate, while the
#   overall difficulty is derived from the untruncated window. Both paths are kept for parity
#   with osu!stable and must not be merged.
# - Collaborator errors (skills, hit window and preempt providers) propagate unchanged.
#
########################
# Interfaces:
# Public constants:
# - DIFFICULTY_MULTIPLIER = 0.0675
# - STAR_RATING_SCALE = 1.6
#
# Public classes:
# - class OsuDifficultyCalculator
#   - __init__(beatmap, *, skill_factory=None, hit_windows_factory=OsuHitWindows,
#              preempt_provider=preempt_for_approach_rate, settings=None)
#   - calculate(mods: Sequence[Mod] = ()) -> OsuDifficultyAttributes
#   - calculate_all() -> list[OsuDifficultyAttributes]
#   - create_difficulty_hit_objects(clock_rate: float) -> Iterator[OsuDifficultyHitObject]
#   - create_skills(mods: Sequence[Mod]) -> tuple[Skill, ...]
#   - create_difficulty_attributes(mods, skills, clock_rate) -> OsuDifficultyAttributes
#
# Public functions:
# - rating_from_value(value: float) -> float
# - star_rating_from(aim_rating: float, speed_rating: float, stamina_rating: float) -> float
# - approach_rate_from_preempt(preempt_ms: float) -> float
# - overall_difficulty_from_great_window(great_window_ms: float) -> float
# - max_combo_for(hit_objects: Sequence[HitObject]) -> int
# - count_kind(hit_objects: Sequence[HitObject], kind: HitObjectKind) -> int
#
# Inputs:
# - Beatmap from beatmap_models.py and a mod set from mods.py.
#
# Outputs:
# - OsuDifficultyAttributes for ranking and performance layers.
#
########################
# Smoke Tests:
#   - python difficulty_calculator.py
########################

from __future__ import annotations

import logging
import math
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from beatmap_models import Beatmap, HitObject, HitObjectKind, validate_hit_objects
from config import StrainConfig
from difficulty_attributes import OsuDifficultyAttributes
from difficulty_objects import OsuDifficultyHitObject, iter_difficulty_hit_objects
from hit_windows import HitResult, HitWindowProvider, OsuHitWindows, preempt_for_approach_rate
from mods import (
    Mod,
    apply_difficulty_adjustments,
    difficulty_adjustment_mod_combinations,
    mods_acronym,
    resolve_clock_rate,
)
from skills import SKILL_ORDER, Skill, create_skills

logger = logging.getLogger(__name__)

DIFFICULTY_MULTIPLIER = 0.0675
STAR_RATING_SCALE = 1.6

SKILL_COUNT = len(SKILL_ORDER)

SkillFactory = Callable[[Sequence[Mod]], Sequence[Skill]]


def rating_from_value(value: float) -> float:
    return math.sqrt(value) * DIFFICULTY_MULTIPLIER


def star_rating_from(aim_rating: float, speed_rating: float, stamina_rating: float) -> float:
    """Cubic power mean of aim and the harder of speed and stamina."""
    tapping_rating = max(speed_rating, stamina_rating)
    return math.pow(math.pow(aim_rating, 3) + math.pow(tapping_rating, 3), 1.0 / 3.0) * STAR_RATING_SCALE


def approach_rate_from_preempt(preempt_ms: float) -> float:
    if preempt_ms > 1200.0:
        return (1800.0 - preempt_ms) / 120.0
    return (1200.0 - preempt_ms) / 150.0 + 5.0


def overall_difficulty_from_great_window(great_window_ms: float) -> float:
    return (80.0 - great_window_ms) / 6.0


def max_combo_for(hit_objects: Sequence[HitObject]) -> int:
    max_combo = len(hit_objects)
    # Each slider also gives combo for its ticks, repeats and tail. Its head is already counted above.
    max_combo += sum(len(hit_object.nested_objects) - 1 for hit_object in hit_objects if hit_object.is_slider)
    return max_combo


def count_kind(hit_objects: Sequence[HitObject], kind: HitObjectKind) -> int:
    return sum(1 for hit_object in hit_objects if hit_object.kind is kind)


class OsuDifficultyCalculator:
    def __init__(
        self,
        beatmap: Beatmap,
        *,
        skill_factory: Optional[SkillFactory] = None,
        hit_windows_factory: Callable[[], HitWindowProvider] = OsuHitWindows,
        preempt_provider: Callable[[float], float] = preempt_for_approach_rate,
        settings: Optional[StrainConfig] = None,
    ) -> None:
        self._beatmap = beatmap
        self._settings = settings if settings is not None else StrainConfig()
        self._skill_factory = skill_factory
        self._hit_windows_factory = hit_windows_factory
        self._preempt_provider = preempt_provider

    def calculate(self, mods: Sequence[Mod] = ()) -> OsuDifficultyAttributes:
        mod_tuple = tuple(mods)
        clock_rate = resolve_clock_rate(mod_tuple)
        if not clock_rate > 0.0:
            raise ValueError(f"clock rate must be positive, got {clock_rate!r} for mods {mods_acronym(mod_tuple)}")

        hit_objects = self._beatmap.hit_objects
        validate_hit_objects(hit_objects)

        skills = tuple(self.create_skills(mod_tuple))
        if len(skills) != SKILL_COUNT:
            raise ValueError(f"skill factory must return {SKILL_COUNT} skills, got {len(skills)}")

        processed_count = 0
        for difficulty_object in self.create_difficulty_hit_objects(clock_rate):
            for skill in skills:
                skill.process(difficulty_object)
            processed_count += 1

        logger.debug(
            "Processed %d difficulty objects for %r at clock rate %.4f (mods=%s)",
            processed_count,
            self._beatmap.title,
            clock_rate,
            mods_acronym(mod_tuple),
        )

        return self.create_difficulty_attributes(mod_tuple, skills, clock_rate)

    def calculate_all(self) -> List[OsuDifficultyAttributes]:
        return [self.calculate(combination) for combination in difficulty_adjustment_mod_combinations()]

    def create_difficulty_hit_objects(self, clock_rate: float) -> Iterator[OsuDifficultyHitObject]:
        return iter_difficulty_hit_objects(self._beatmap.hit_objects, clock_rate)

    def create_skills(self, mods: Sequence[Mod]) -> Sequence[Skill]:
        if self._skill_factory is not None:
            return self._skill_factory(mods)
        return create_skills(mods, self._settings)

    def create_difficulty_attributes(
        self,
        mods: Sequence[Mod],
        skills: Sequence[Skill],
        clock_rate: float,
    ) -> OsuDifficultyAttributes:
        """Fuse skill values, timing windows and counts. Clock rate must be positive."""
        hit_objects = self._beatmap.hit_objects
        if len(hit_objects) == 0:
            return OsuDifficultyAttributes(mods=tuple(mods), skills=tuple(skills))

        values: Tuple[float, ...] = tuple(float(skill.difficulty_value()) for skill in skills)
        aim_value, raw_aim_value, jump_aim_value, flow_aim_value, speed_value, stamina_value, rhythm_value = values
        logger.debug("Skill values: %s", dict(zip(SKILL_ORDER, values)))

        aim_rating = rating_from_value(aim_value)
        jump_aim_rating = rating_from_value(jump_aim_value)
        flow_aim_rating = rating_from_value(flow_aim_value)
        precision_rating = rating_from_value(max(0.0, aim_value - raw_aim_value))
        speed_rating = rating_from_value(speed_value)
        stamina_rating = rating_from_value(stamina_value)
        accuracy_rating = rhythm_value

        star_rating = star_rating_from(aim_rating, speed_rating, stamina_rating)

        difficulty = apply_difficulty_adjustments(mods, self._beatmap.difficulty)
        hit_windows = self._hit_windows_factory()
        hit_windows.set_difficulty(difficulty.overall_difficulty)
        great_window_ms = hit_windows.window_for(HitResult.GREAT)

        # int() truncates toward zero to match osu!stable before the clock rate is applied.
        great_hit_window = int(great_window_ms) / clock_rate
        preempt = int(self._preempt_provider(difficulty.approach_rate)) / clock_rate

        return OsuDifficultyAttributes(
            star_rating=star_rating,
            mods=tuple(mods),
            aim_strain=aim_rating,
            jump_aim_strain=jump_aim_rating,
            flow_aim_strain=flow_aim_rating,
            precision_strain=precision_rating,
            speed_strain=speed_rating,
            stamina_strain=stamina_rating,
            accuracy_strain=accuracy_rating,
            approach_rate=approach_rate_from_preempt(preempt),
            overall_difficulty=overall_difficulty_from_great_window(great_window_ms / clock_rate),
            great_hit_window=great_hit_window,
            max_combo=max_combo_for(hit_objects),
            hit_circle_count=count_kind(hit_objects, HitObjectKind.CIRCLE),
            spinner_count=count_kind(hit_objects, HitObjectKind.SPINNER),
            skills=tuple(skills),
        )


def _run_unit_tests() -> None:
    empty = OsuDifficultyCalculator(Beatmap()).calculate()
    assert empty.star_rating == 0.0
    assert empty.max_combo == 0

    assert approach_rate_from_preempt(1260.0) == 4.5
    assert abs(approach_rate_from_preempt(1100.0) - (100.0 / 150.0 + 5.0)) < 1e-12
    assert overall_difficulty_from_great_window(50.0) == 5.0


if __name__ == "__main__":
    _run_unit_tests()
    print("difficulty_calculator.py: ok")
