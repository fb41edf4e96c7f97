from __future__ import annotations

import logging
from dataclasses import dataclass

from .generator import ProblemGenerator
from .levels import band_top, level_rule
from .models import Problem
from .store import StateStore

logger = logging.getLogger(__name__)

LEVEL_UP_STREAK = 20

CORRECT_TEXT = "Correct! 🎉"
WRONG_TEXT = "Try again…"
TIMEOUT_TEXT = "Time's up!"


def streak_color(streak: int) -> str:
    if streak >= 18:
        return "#22c55e"  # green
    if streak >= 15:
        return "#84cc16"  # light green
    if streak >= 10:
        return "#eab308"  # yellow
    if streak >= 5:
        return "#f97316"  # orange
    return "#ffffff"


@dataclass(frozen=True)
class Outcome:
    accepted: bool
    correct: bool = False
    leveled_up: bool = False
    feedback: str | None = None


class DrillSession:
    """
    One player's run through the levels.

    Holds the current problem, the streak, and which choices the player has
    already ruled out. A correct answer locks the round until `next_problem()`;
    twenty in a row moves the player up a level within their band (1-10 with
    choices, 11-20 with typed input).
    """

    def __init__(self, generator: ProblemGenerator, store: StateStore) -> None:
        self._generator = generator
        self._store = store
        saved = store.load()
        self.level = saved.level
        self.streak = saved.streak
        self.locked = False
        self.feedback: str | None = None
        self._disabled: set[str] = set()
        self.problem: Problem = self._generator.generate(self.level)

    def _save(self) -> None:
        self._store.save(self.level, self.streak)

    def is_disabled(self, choice_id: str) -> bool:
        return choice_id in self._disabled

    @property
    def disabled_ids(self) -> frozenset[str]:
        return frozenset(self._disabled)

    def next_problem(self) -> Problem:
        self.locked = False
        self.feedback = None
        self._disabled.clear()
        self.problem = self._generator.generate(self.level)
        return self.problem

    def select_level(self, level: int) -> Problem:
        level_rule(level)  # validates
        self.level = level
        self.streak = 0
        self._save()
        return self.next_problem()

    def _on_correct(self) -> Outcome:
        self.locked = True
        self.streak += 1
        if self.streak >= LEVEL_UP_STREAK and self.level < band_top(self.level):
            self.level += 1
            self.streak = 0
            self.feedback = f"You made it to level {self.level}!"
            logger.info("level up to %d", self.level)
            self._save()
            return Outcome(accepted=True, correct=True, leveled_up=True, feedback=self.feedback)
        self.feedback = CORRECT_TEXT
        self._save()
        return Outcome(accepted=True, correct=True, feedback=self.feedback)

    def _on_wrong(self) -> Outcome:
        self.streak = 0
        self.feedback = WRONG_TEXT
        self._save()
        return Outcome(accepted=True, correct=False, feedback=self.feedback)

    def submit_choice(self, choice_id: str) -> Outcome:
        choice = self.problem.choice(choice_id)
        if self.locked or choice is None or choice_id in self._disabled:
            return Outcome(accepted=False)
        if choice.value == self.problem.result:
            return self._on_correct()
        self._disabled.add(choice_id)
        return self._on_wrong()

    def submit_answer(self, value: int) -> Outcome:
        if self.locked or not self.problem.is_input:
            return Outcome(accepted=False)
        if value == self.problem.result:
            return self._on_correct()
        return self._on_wrong()

    def expire_timer(self) -> Outcome:
        if self.locked or not self.problem.has_timer:
            return Outcome(accepted=False)
        self.locked = True
        self.streak = 0
        self.feedback = TIMEOUT_TEXT
        self._save()
        return Outcome(accepted=True, correct=False, feedback=self.feedback)
