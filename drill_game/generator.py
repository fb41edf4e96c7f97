from __future__ import annotations

import logging
import random
import uuid
from typing import List

from .distractors import DistractorSampler
from .evaluator import evaluate
from .levels import LevelSpec, TermPolicy, level_rule
from .models import Choice, Operator, Problem
from .randomness import coin, make_rng, shuffle

logger = logging.getLogger(__name__)


class ChoiceAssembler:
    """Wrap the correct value and two distractors as shuffled, uniquely-id'd choices."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    def _new_id(self) -> str:
        # Drawn from the generator's rng so seeded runs stay reproducible.
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

    def assemble(self, correct: int, wrongs: tuple[int, int]) -> tuple[Choice, ...]:
        choices = [Choice(id=self._new_id(), value=v) for v in (correct, *wrongs)]
        return tuple(shuffle(choices, self._rng))


class ProblemGenerator:
    """
    Generate drill problems for levels 1-20.

    Usage:

    ```python
    gen = ProblemGenerator(seed=42)
    problem = gen.generate(7)
    # problem.expression -> "12 - 4 + 9"
    # problem.choices    -> three Choice values, one equal to problem.result
    ```

    Pass `rng` to share or control the random source; calls on one instance
    must not be interleaved across threads.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        self._rng = make_rng(seed, rng)
        self._sampler = DistractorSampler(self._rng)
        self._assembler = ChoiceAssembler(self._rng)

    def _term_count(self, spec: LevelSpec) -> int:
        lo, hi = spec.rule.term_count
        return self._rng.randint(lo, hi)

    def _pick_operator(self, spec: LevelSpec) -> Operator:
        ops = spec.rule.operators
        if len(ops) == 2:
            return ops[0] if coin(self._rng) else ops[1]
        return ops[self._rng.randint(0, len(ops) - 1)]

    def _descending_pair(self, spec: LevelSpec) -> tuple[list[int], list[Operator], int]:
        a = self._rng.randint(*spec.rule.first_range)
        b = self._rng.randint(spec.rule.rest_range[0], a - 1)
        return [a, b], [Operator.SUBTRACT], a - b

    def _running_total(self, spec: LevelSpec) -> tuple[list[int], list[Operator], int]:
        count = self._term_count(spec)
        total = self._rng.randint(*spec.rule.first_range)
        rest_lo, rest_hi = spec.rule.rest_range
        terms, operators = [total], []
        for _ in range(count - 1):
            op = self._pick_operator(spec)
            if op == Operator.SUBTRACT and total < rest_lo:
                # nothing left to take away
                op = Operator.ADD
            if op == Operator.SUBTRACT:
                operand = self._rng.randint(rest_lo, min(rest_hi, total))
                total -= operand
            else:
                operand = self._rng.randint(rest_lo, rest_hi)
                total += operand
            terms.append(operand)
            operators.append(op)
        # The running total is authoritative; it never went negative on the way.
        return terms, operators, total

    def _independent(self, spec: LevelSpec) -> tuple[list[int], list[Operator], int]:
        count = self._term_count(spec)
        terms = [self._rng.randint(*spec.rule.first_range)]
        operators: list[Operator] = []
        for _ in range(count - 1):
            operators.append(self._pick_operator(spec))
            terms.append(self._rng.randint(*spec.rule.rest_range))
        return terms, operators, evaluate(terms, operators)

    def generate(self, level: int) -> Problem:
        spec = level_rule(level)
        if spec.rule.policy == TermPolicy.DESCENDING_PAIR:
            terms, operators, result = self._descending_pair(spec)
        elif spec.rule.policy == TermPolicy.RUNNING_TOTAL:
            terms, operators, result = self._running_total(spec)
        else:
            terms, operators, result = self._independent(spec)

        choices: tuple[Choice, ...] = ()
        if not spec.input_mode:
            lo, hi = spec.rule.answer_range
            wrongs = self._sampler.sample(result, lo, hi, biased=spec.rule.biased)
            choices = self._assembler.assemble(result, wrongs)

        problem = Problem(
            level=level,
            terms=tuple(terms),
            operators=tuple(operators),
            result=result,
            choices=choices,
            has_timer=spec.has_timer,
            timer_seconds=spec.timer_seconds,
        )
        logger.debug("level %d problem: %s = %d", level, problem.expression, result)
        return problem

    def generate_batch(
        self,
        level: int,
        n: int,
        unique: bool = True,
        max_retries: int = 50,
    ) -> List[Problem]:
        """
        Generate up to `n` problems for one level.

        With `unique`, repeated expressions are rejected; after `max_retries`
        consecutive rejections the batch stops early, since the easiest levels
        only have a few dozen distinct expressions.
        """
        if n <= 0:
            return []
        if not unique:
            return [self.generate(level) for _ in range(n)]

        seen: set[str] = set()
        problems: List[Problem] = []
        retries = 0
        while len(problems) < n:
            problem = self.generate(level)
            if problem.expression in seen:
                retries += 1
                if retries >= max_retries:
                    logger.info(
                        "level %d: stopped after %d unique problems (wanted %d)",
                        level, len(problems), n,
                    )
                    break
                continue
            seen.add(problem.expression)
            problems.append(problem)
            retries = 0
        return problems
