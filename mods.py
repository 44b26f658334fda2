# -*- coding: utf-8 -*-
########################
# mods.py
########################
# Purpose:
# - Opaque mod identifiers passed through the difficulty calculation.
# - Resolves the clock rate implied by a mod set.
# - Applies the difficulty setting adjustments (overall difficulty, approach rate) a mod set implies.
# - Enumerates the difficulty adjustment mod combinations used by calculate_all.
#
# Design notes:
# - Mods are values. The calculator never inspects their identity: it reads clock_rate and
#   calls adjust_difficulty, nothing else.
# - Difficulty adjustment scales the beatmap settings and caps them at MAX_DIFFICULTY_SETTING.
# - Mod order given by the caller is preserved.
# - Combination order is deterministic: by size, then by DIFFICULTY_ADJUSTMENT_MODS order.
#
########################
# Interfaces:
# Public dataclasses:
# - Mod(acronym: str, name: str, clock_rate: float = 1.0, difficulty_multiplier: float = 1.0,
#       circle_size_multiplier: float = 1.0)
#   - adjust_difficulty(difficulty: BeatmapDifficulty) -> BeatmapDifficulty
#
# Public constants:
# - KNOWN_MODS: dict[str, Mod]
# - DIFFICULTY_ADJUSTMENT_MODS: tuple[Mod, ...]
# - MAX_DIFFICULTY_SETTING = 10.0
#
# Public functions:
# - parse_mods(value: str | Sequence[str]) -> tuple[Mod, ...]
# - resolve_clock_rate(mods: Sequence[Mod]) -> float
# - apply_difficulty_adjustments(mods: Sequence[Mod], difficulty: BeatmapDifficulty) -> BeatmapDifficulty
# - mods_acronym(mods: Sequence[Mod]) -> str
# - difficulty_adjustment_mod_combinations() -> list[tuple[Mod, ...]]
#
########################

from __future__ import annotations

import itertools
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Sequence, Tuple, Union

from beatmap_models import BeatmapDifficulty

MAX_DIFFICULTY_SETTING = 10.0


@dataclass(frozen=True)
class Mod:
    acronym: str
    name: str
    clock_rate: float = 1.0
    difficulty_multiplier: float = 1.0
    circle_size_multiplier: float = 1.0

    def adjust_difficulty(self, difficulty: BeatmapDifficulty) -> BeatmapDifficulty:
        if self.difficulty_multiplier == 1.0 and self.circle_size_multiplier == 1.0:
            return difficulty
        return replace(
            difficulty,
            overall_difficulty=_scaled_setting(difficulty.overall_difficulty, self.difficulty_multiplier),
            approach_rate=_scaled_setting(difficulty.approach_rate, self.difficulty_multiplier),
            drain_rate=_scaled_setting(difficulty.drain_rate, self.difficulty_multiplier),
            circle_size=_scaled_setting(difficulty.circle_size, self.circle_size_multiplier),
        )


def _scaled_setting(value: float, multiplier: float) -> float:
    return min(float(value) * float(multiplier), MAX_DIFFICULTY_SETTING)


DOUBLE_TIME = Mod("DT", "Double Time", clock_rate=1.5)
NIGHTCORE = Mod("NC", "Nightcore", clock_rate=1.5)
HALF_TIME = Mod("HT", "Half Time", clock_rate=0.75)
DAYCORE = Mod("DC", "Daycore", clock_rate=0.75)
HARD_ROCK = Mod("HR", "Hard Rock", difficulty_multiplier=1.4, circle_size_multiplier=1.3)
EASY = Mod("EZ", "Easy", difficulty_multiplier=0.5, circle_size_multiplier=0.5)
HIDDEN = Mod("HD", "Hidden")
FLASHLIGHT = Mod("FL", "Flashlight")
NO_FAIL = Mod("NF", "No Fail")
SPUN_OUT = Mod("SO", "Spun Out")

KNOWN_MODS: Dict[str, Mod] = {
    mod.acronym: mod
    for mod in (DOUBLE_TIME, NIGHTCORE, HALF_TIME, DAYCORE, HARD_ROCK, EASY, HIDDEN, FLASHLIGHT, NO_FAIL, SPUN_OUT)
}

DIFFICULTY_ADJUSTMENT_MODS: Tuple[Mod, ...] = (DOUBLE_TIME, HALF_TIME, EASY, HARD_ROCK)

_INCOMPATIBLE_GROUPS: Tuple[FrozenSet[str], ...] = (
    frozenset({"DT", "NC", "HT", "DC"}),
    frozenset({"EZ", "HR"}),
)


def _split_acronyms(text: str) -> List[str]:
    cleaned = "".join(ch for ch in text.upper() if ch.isalnum())
    if len(cleaned) % 2 != 0:
        raise ValueError(f"mod string must be a sequence of two-letter acronyms, got {text!r}")
    return [cleaned[index:index + 2] for index in range(0, len(cleaned), 2)]


def parse_mods(value: Union[str, Sequence[str]]) -> Tuple[Mod, ...]:
    if isinstance(value, str):
        acronyms = _split_acronyms(value)
    else:
        acronyms = [str(item).strip().upper() for item in value if str(item).strip()]

    mods: List[Mod] = []
    seen = set()
    for acronym in acronyms:
        if acronym == "NM":
            continue
        mod = KNOWN_MODS.get(acronym)
        if mod is None:
            allowed = ", ".join(sorted(KNOWN_MODS))
            raise ValueError(f"unknown mod {acronym!r}; known mods: {allowed}")
        if acronym in seen:
            raise ValueError(f"mod {acronym!r} given more than once")
        seen.add(acronym)
        mods.append(mod)
    if not _is_compatible(mods):
        raise ValueError(f"incompatible mods: {mods_acronym(mods)}")
    return tuple(mods)


def resolve_clock_rate(mods: Sequence[Mod]) -> float:
    clock_rate = 1.0
    for mod in mods:
        clock_rate *= float(mod.clock_rate)
    return clock_rate


def apply_difficulty_adjustments(mods: Sequence[Mod], difficulty: BeatmapDifficulty) -> BeatmapDifficulty:
    for mod in mods:
        difficulty = mod.adjust_difficulty(difficulty)
    return difficulty


def mods_acronym(mods: Sequence[Mod]) -> str:
    return "".join(mod.acronym for mod in mods) or "NM"


def _is_compatible(combination: Sequence[Mod]) -> bool:
    acronyms = {mod.acronym for mod in combination}
    return all(len(acronyms & group) <= 1 for group in _INCOMPATIBLE_GROUPS)


def difficulty_adjustment_mod_combinations() -> List[Tuple[Mod, ...]]:
    combinations: List[Tuple[Mod, ...]] = []
    for size in range(len(DIFFICULTY_ADJUSTMENT_MODS) + 1):
        for combination in itertools.combinations(DIFFICULTY_ADJUSTMENT_MODS, size):
            if _is_compatible(combination):
                combinations.append(tuple(combination))
    return combinations


def _run_unit_tests() -> None:
    assert parse_mods("DTHR") == (DOUBLE_TIME, HARD_ROCK)
    assert parse_mods(["hd", "nc"]) == (HIDDEN, NIGHTCORE)
    assert parse_mods("NM") == ()
    assert abs(resolve_clock_rate(parse_mods("HT")) - 0.75) < 1e-12

    hard_rock = apply_difficulty_adjustments((HARD_ROCK,), BeatmapDifficulty(overall_difficulty=8.0, approach_rate=5.0))
    assert hard_rock.overall_difficulty == MAX_DIFFICULTY_SETTING
    assert abs(hard_rock.approach_rate - 7.0) < 1e-12

    combinations = difficulty_adjustment_mod_combinations()
    assert combinations[0] == ()
    assert (DOUBLE_TIME, HALF_TIME) not in combinations
    assert len(combinations) == 9


if __name__ == "__main__":
    _run_unit_tests()
    print("mods.py: ok")
