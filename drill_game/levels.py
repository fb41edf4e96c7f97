from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import Operator

MIN_LEVEL = 1
MAX_LEVEL = 20
# Levels 11-20 replay rules 1-10 with typed input instead of choices.
INPUT_LEVEL_OFFSET = 10
INPUT_TIMER_BONUS = 5
# Rules from this base level on get distance-limited, last-digit-biased distractors.
BIASED_FROM_LEVEL = 3


class TermPolicy(str, Enum):
    INDEPENDENT = "independent"
    # a in first_range, b in [rest_lo, a - 1]
    DESCENDING_PAIR = "descending_pair"
    # subtraction capped so the running total never drops below zero
    RUNNING_TOTAL = "running_total"


@dataclass(frozen=True)
class LevelRule:
    base_level: int
    term_count: tuple[int, int]
    first_range: tuple[int, int]
    rest_range: tuple[int, int]
    operators: tuple[Operator, ...]
    answer_range: tuple[int, int]
    timer_seconds: int = 0
    policy: TermPolicy = TermPolicy.INDEPENDENT

    @property
    def biased(self) -> bool:
        return self.base_level >= BIASED_FROM_LEVEL


@dataclass(frozen=True)
class LevelSpec:
    """A base rule resolved for a concrete level (choice or input mode)."""

    level: int
    rule: LevelRule
    input_mode: bool

    @property
    def timer_seconds(self) -> int:
        if self.rule.timer_seconds and self.input_mode:
            return self.rule.timer_seconds + INPUT_TIMER_BONUS
        return self.rule.timer_seconds

    @property
    def has_timer(self) -> bool:
        return self.timer_seconds > 0


_ADD = (Operator.ADD,)
_ADD_SUB = (Operator.ADD, Operator.SUBTRACT)

RULES: dict[int, LevelRule] = {
    rule.base_level: rule
    for rule in (
        LevelRule(1, (2, 2), (0, 9), (0, 9), _ADD, (0, 18)),
        LevelRule(2, (2, 2), (0, 50), (0, 50), _ADD, (0, 100)),
        LevelRule(3, (2, 3), (0, 99), (0, 99), _ADD, (0, 297)),
        LevelRule(
            4, (2, 2), (4, 20), (2, 19), (Operator.SUBTRACT,), (1, 18),
            policy=TermPolicy.DESCENDING_PAIR,
        ),
        LevelRule(
            5, (2, 3), (5, 15), (1, 20), _ADD_SUB, (0, 75),
            policy=TermPolicy.RUNNING_TOTAL,
        ),
        LevelRule(6, (2, 3), (0, 20), (0, 20), _ADD_SUB, (-60, 60)),
        LevelRule(7, (2, 3), (0, 20), (0, 20), _ADD_SUB, (-60, 60), timer_seconds=20),
        LevelRule(8, (2, 3), (1, 99), (1, 99), _ADD_SUB, (-198, 297), timer_seconds=20),
        LevelRule(9, (2, 2), (0, 9), (0, 9), (Operator.MULTIPLY,), (0, 81)),
        LevelRule(
            10, (2, 3), (1, 30), (1, 30),
            (Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY), (-59, 930),
            timer_seconds=13,
        ),
    )
}


def is_valid_level(level) -> bool:
    return isinstance(level, int) and not isinstance(level, bool) and MIN_LEVEL <= level <= MAX_LEVEL


def level_rule(level: int) -> LevelSpec:
    if not is_valid_level(level):
        raise ValueError(f"Unsupported level: {level!r} (expected {MIN_LEVEL}-{MAX_LEVEL})")
    input_mode = level > INPUT_LEVEL_OFFSET
    base = level - INPUT_LEVEL_OFFSET if input_mode else level
    return LevelSpec(level=level, rule=RULES[base], input_mode=input_mode)


def band_top(level: int) -> int:
    """Highest level reachable by progression from `level` (10 or 20)."""
    return MAX_LEVEL if level > INPUT_LEVEL_OFFSET else INPUT_LEVEL_OFFSET
