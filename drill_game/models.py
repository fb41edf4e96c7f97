from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .evaluator import format_expression


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"


@dataclass(frozen=True)
class Choice:
    """
    One multiple-choice answer.

    Whether a choice has been ruled out ("disabled") is tracked by the caller
    against `id`; the generator only hands out immutable choices.
    """

    id: str
    value: int


@dataclass(frozen=True)
class Problem:
    """
    Represents a single drill round.

    - `terms` / `operators`: the flat expression, e.g. (5, 3) and (+,)
    - `result`: the correct answer
    - `choices`: three shuffled choices, or empty for typed-input levels
    - `has_timer` / `timer_seconds`: countdown the caller should run
    """

    level: int
    terms: tuple[int, ...]
    operators: tuple[Operator, ...]
    result: int
    choices: tuple[Choice, ...] = ()
    has_timer: bool = False
    timer_seconds: int = 0

    @property
    def expression(self) -> str:
        return format_expression(self.terms, self.operators)

    @property
    def is_input(self) -> bool:
        return not self.choices

    def choice(self, choice_id: str) -> Choice | None:
        for c in self.choices:
            if c.id == choice_id:
                return c
        return None
