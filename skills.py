# -*- coding: utf-8 -*-
########################
# skills.py
########################
# Purpose:
# - Skills reduce the ordered difficulty object chain to one difficulty value each.
# - Default strain-based implementations for the seven skills the calculator fuses.
#
# Design notes:
# - A skill is a single-use, single-threaded accumulator. One instance per calculation.
# - process() must be called once per difficulty object, in chain order.
# - difficulty_value() is pure: it may be called any number of times, before or after more processing.
# - Skills only hold the mods they were created with. Nothing is shared between instances.
#
########################
# Interfaces:
# Public protocols:
# - Skill
#   - process(current: OsuDifficultyHitObject) -> None
#   - difficulty_value() -> float
#
# Public classes:
# - class StrainSkill(Skill)
#   - strain_value_of(current: OsuDifficultyHitObject) -> float  (override)
#   - previous(backwards_index: int = 0) -> Optional[OsuDifficultyHitObject]
# - class Aim, RawAim, JumpAim, FlowAim, Speed, Stamina (StrainSkill)
# - class RhythmComplexity(Skill)
#
# Public functions:
# - create_skills(mods: Sequence[Mod], settings: Optional[StrainConfig] = None) -> tuple[Skill, ...]
#
# Inputs:
# - OsuDifficultyHitObject values from difficulty_objects.py.
#
# Outputs:
# - One float per skill, consumed by OsuDifficultyCalculator.
#
########################

from __future__ import annotations

import math
from collections import deque
from typing import Deque, List, Optional, Protocol, Sequence, Tuple

from beatmap_models import HitObjectKind
from config import StrainConfig
from difficulty_objects import OsuDifficultyHitObject
from mods import Mod


class Skill(Protocol):
    name: str

    def process(self, current: OsuDifficultyHitObject) -> None:
        raise NotImplementedError

    def difficulty_value(self) -> float:
        raise NotImplementedError


class StrainSkill:
    """Strain that decays exponentially over time, sampled as one peak per section.

    The final value is a weighted sum of section peaks sorted from hardest to
    easiest, each peak weighted by decay_weight ** rank.
    """

    name = "strain"
    skill_multiplier = 1.0
    strain_decay_base = 0.15

    def __init__(self, mods: Sequence[Mod], *, section_length_ms: float = 400.0, decay_weight: float = 0.9) -> None:
        self._mods: Tuple[Mod, ...] = tuple(mods)
        self._section_length_ms = float(section_length_ms)
        self._decay_weight = float(decay_weight)
        self._previous: Deque[OsuDifficultyHitObject] = deque(maxlen=2)
        self._current_strain = 0.0
        self._current_section_peak = 0.0
        self._current_section_end: Optional[float] = None
        self._strain_peaks: List[float] = []

    @property
    def mods(self) -> Tuple[Mod, ...]:
        return self._mods

    def previous(self, backwards_index: int = 0) -> Optional[OsuDifficultyHitObject]:
        if 0 <= backwards_index < len(self._previous):
            return self._previous[backwards_index]
        return None

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        raise NotImplementedError

    def _strain_decay(self, elapsed_ms: float) -> float:
        return math.pow(self.strain_decay_base, float(elapsed_ms) / 1000.0)

    def _start_new_section_from(self, section_start: float) -> None:
        # The new section starts with whatever strain is left at its start time.
        last_object = self._previous[0]
        self._current_section_peak = self._current_strain * self._strain_decay(section_start - last_object.start_time)

    def process(self, current: OsuDifficultyHitObject) -> None:
        section_length = self._section_length_ms
        if self._current_section_end is None:
            self._current_section_end = math.ceil(current.start_time / section_length) * section_length

        while current.start_time > self._current_section_end:
            self._strain_peaks.append(self._current_section_peak)
            self._start_new_section_from(self._current_section_end)
            self._current_section_end += section_length

        self._current_strain *= self._strain_decay(current.delta_time)
        self._current_strain += self.strain_value_of(current) * self.skill_multiplier
        self._current_section_peak = max(self._current_strain, self._current_section_peak)

        self._previous.appendleft(current)

    def difficulty_value(self) -> float:
        if self._current_section_end is None:
            return 0.0

        peaks = sorted(self._strain_peaks + [self._current_section_peak], reverse=True)
        difficulty = 0.0
        weight = 1.0
        for strain in peaks:
            difficulty += strain * weight
            weight *= self._decay_weight
        return difficulty


# Distance exponent below 1 slightly favours many small movements over one huge one.
_DISTANCE_EXPONENT = 0.99

# Movements shorter than this are treated as precision rather than raw aim.
PRECISION_THRESHOLD = 60.0


def _involves_spinner(current: OsuDifficultyHitObject) -> bool:
    return current.is_spinner or current.last_object.kind is HitObjectKind.SPINNER


class Aim(StrainSkill):
    name = "aim"
    skill_multiplier = 26.25
    strain_decay_base = 0.15

    def _effective_distance(self, distance: float) -> float:
        return distance

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        if _involves_spinner(current):
            return 0.0
        jump = self._effective_distance(current.jump_distance)
        travel = self._effective_distance(current.travel_distance)
        return (math.pow(jump, _DISTANCE_EXPONENT) + math.pow(travel, _DISTANCE_EXPONENT)) / current.strain_time


class RawAim(Aim):
    """Aim with the precision share of every movement removed."""

    name = "raw_aim"

    def _effective_distance(self, distance: float) -> float:
        return max(0.0, distance - PRECISION_THRESHOLD)


def _jump_factor(angle: Optional[float]) -> float:
    # Sharp back-and-forth movement (angle near 0) reads as a jump.
    if angle is None:
        return 1.0
    return (1.0 + math.cos(angle)) / 2.0


class JumpAim(StrainSkill):
    name = "jump_aim"
    skill_multiplier = 26.25
    strain_decay_base = 0.15

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        if _involves_spinner(current):
            return 0.0
        return math.pow(current.jump_distance, _DISTANCE_EXPONENT) * _jump_factor(current.angle) / current.strain_time


class FlowAim(StrainSkill):
    name = "flow_aim"
    skill_multiplier = 26.25
    strain_decay_base = 0.15

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        if _involves_spinner(current):
            return 0.0
        flow_factor = 1.0 - _jump_factor(current.angle) if current.angle is not None else 0.0
        return math.pow(current.jump_distance, _DISTANCE_EXPONENT) * flow_factor / current.strain_time


_SINGLE_SPACING = 125.0
_SPEED_BONUS_THRESHOLD_MS = 75.0


def _speed_bonus(strain_time: float) -> float:
    if strain_time >= _SPEED_BONUS_THRESHOLD_MS:
        return 1.0
    return 1.0 + math.pow((_SPEED_BONUS_THRESHOLD_MS - strain_time) / 40.0, 2)


class Speed(StrainSkill):
    name = "speed"
    skill_multiplier = 1400.0
    strain_decay_base = 0.3

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        if current.is_spinner:
            return 0.0
        distance = min(_SINGLE_SPACING, current.jump_distance + current.travel_distance)
        spacing_factor = 0.95 + math.pow(distance / _SINGLE_SPACING, 3.5)
        return spacing_factor * _speed_bonus(current.strain_time) / current.strain_time


class Stamina(StrainSkill):
    """Sustained tapping load. Decays slower than speed, ignores spacing."""

    name = "stamina"
    skill_multiplier = 9.0
    strain_decay_base = 0.4

    def strain_value_of(self, current: OsuDifficultyHitObject) -> float:
        if current.is_spinner:
            return 0.0
        return 0.5 + 50.0 / current.strain_time


# Interval ratios closer to 1 than this are the same rhythm.
_RHYTHM_CHANGE_RATIO = 1.25
_MAX_RHYTHM_RATIO = 4.0


class RhythmComplexity:
    """Average weight of rhythm changes between consecutive intervals.

    The value starts at 1.0 for a perfectly regular rhythm and is used unscaled.
    """

    name = "rhythm_complexity"

    def __init__(self, mods: Sequence[Mod]) -> None:
        self._mods: Tuple[Mod, ...] = tuple(mods)
        self._previous_delta: Optional[float] = None
        self._change_total = 0.0
        self._object_count = 0

    @property
    def mods(self) -> Tuple[Mod, ...]:
        return self._mods

    def process(self, current: OsuDifficultyHitObject) -> None:
        self._object_count += 1
        if current.is_spinner:
            self._previous_delta = None
            return

        delta = current.strain_time
        if self._previous_delta is not None:
            ratio = max(delta, self._previous_delta) / min(delta, self._previous_delta)
            if ratio > _RHYTHM_CHANGE_RATIO:
                self._change_total += min(ratio, _MAX_RHYTHM_RATIO) - 1.0
        self._previous_delta = delta

    def difficulty_value(self) -> float:
        if self._object_count == 0:
            return 1.0
        return 1.0 + self._change_total / self._object_count


SKILL_ORDER: Tuple[str, ...] = (
    Aim.name,
    RawAim.name,
    JumpAim.name,
    FlowAim.name,
    Speed.name,
    Stamina.name,
    RhythmComplexity.name,
)


def create_skills(mods: Sequence[Mod], settings: Optional[StrainConfig] = None) -> Tuple[Skill, ...]:
    strain_settings = settings if settings is not None else StrainConfig()
    strain_kwargs = {
        "section_length_ms": float(strain_settings.section_length_ms),
        "decay_weight": float(strain_settings.decay_weight),
    }
    return (
        Aim(mods, **strain_kwargs),
        RawAim(mods, **strain_kwargs),
        JumpAim(mods, **strain_kwargs),
        FlowAim(mods, **strain_kwargs),
        Speed(mods, **strain_kwargs),
        Stamina(mods, **strain_kwargs),
        RhythmComplexity(mods),
    )
