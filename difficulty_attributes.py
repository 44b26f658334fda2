# -*- coding: utf-8 -*-
########################
# difficulty_attributes.py
########################
# Purpose:
# - Immutable result of one difficulty calculation for one (beatmap, mods, clock rate) triple.
#
# Design notes:
# - Frozen dataclass. All numeric fields default to zero so an empty beatmap has a defined result.
# - Skill instances are kept for downstream consumers but are excluded from serialization.
#
########################
# Interfaces:
# Public dataclasses:
# - OsuDifficultyAttributes(
#     star_rating, mods, aim_strain, jump_aim_strain, flow_aim_strain, precision_strain,
#     speed_strain, stamina_strain, accuracy_strain, approach_rate, overall_difficulty,
#     great_hit_window, max_combo, hit_circle_count, spinner_count, skills,
#   )
#   - skill_ratings -> tuple[float, ...]
#   - to_dict() -> dict
#
########################

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from mods import Mod, mods_acronym


@dataclass(frozen=True)
class OsuDifficultyAttributes:
    star_rating: float = 0.0
    mods: Tuple[Mod, ...] = ()
    aim_strain: float = 0.0
    jump_aim_strain: float = 0.0
    flow_aim_strain: float = 0.0
    precision_strain: float = 0.0
    speed_strain: float = 0.0
    stamina_strain: float = 0.0
    accuracy_strain: float = 0.0
    approach_rate: float = 0.0
    overall_difficulty: float = 0.0
    great_hit_window: float = 0.0
    max_combo: int = 0
    hit_circle_count: int = 0
    spinner_count: int = 0
    skills: Tuple[Any, ...] = field(default=(), compare=False, repr=False)

    @property
    def skill_ratings(self) -> Tuple[float, ...]:
        """Ratings in skill construction order; the raw aim slot carries precision."""
        return (
            self.aim_strain,
            self.precision_strain,
            self.jump_aim_strain,
            self.flow_aim_strain,
            self.speed_strain,
            self.stamina_strain,
            self.accuracy_strain,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "star_rating": float(self.star_rating),
            "mods": mods_acronym(self.mods),
            "aim_strain": float(self.aim_strain),
            "jump_aim_strain": float(self.jump_aim_strain),
            "flow_aim_strain": float(self.flow_aim_strain),
            "precision_strain": float(self.precision_strain),
            "speed_strain": float(self.speed_strain),
            "stamina_strain": float(self.stamina_strain),
            "accuracy_strain": float(self.accuracy_strain),
            "approach_rate": float(self.approach_rate),
            "overall_difficulty": float(self.overall_difficulty),
            "great_hit_window": float(self.great_hit_window),
            "max_combo": int(self.max_combo),
            "hit_circle_count": int(self.hit_circle_count),
            "spinner_count": int(self.spinner_count),
        }
