from __future__ import annotations

import random

from .randomness import coin, shuffle

# Offsets tried first, so most wrong answers sit right next to the correct one.
NEAR_OFFSETS = tuple(range(1, 9))


def last_digit(n: int) -> int:
    return abs(n) % 10


def max_distance(min_val: int, max_val: int) -> int:
    """How far a wrong answer may sit from the correct one, by answer range width."""
    width = max(0, max_val - min_val)
    if width <= 20:
        return 10
    if width <= 60:
        return 20
    if width <= 120:
        return 30
    return 40


def _same_digit_values(digit: int, low: int, high: int) -> list[int]:
    """All v in [low, high] with abs(v) % 10 == digit, i.e. |v| = 10k + digit."""
    values: list[int] = []
    start = max(low, 0)
    if start <= high:
        first = start + (digit - start) % 10
        values.extend(range(first, high + 1, 10))
    neg_high = min(high, -1)
    if low <= neg_high:
        mag_lo, mag_hi = -neg_high, -low
        first = mag_lo + (digit - mag_lo) % 10
        values.extend(-m for m in range(first, mag_hi + 1, 10))
    return values


class DistractorSampler:
    """
    Produce two plausible wrong answers for a correct value.

    Unbiased sampling only keeps values close to the answer when it can.
    Biased sampling additionally pulls far values into a distance window and
    steers how many wrong answers share the correct answer's last digit, so
    the right choice cannot be spotted without doing the arithmetic.
    """

    def __init__(self, rng: random.Random, max_attempts: int = 100) -> None:
        self._rng = rng
        self.max_attempts = max_attempts

    def sample(
        self, correct: int, min_val: int, max_val: int, biased: bool = False
    ) -> tuple[int, int]:
        available = max_val - min_val + 1 - (1 if min_val <= correct <= max_val else 0)
        if available < 2:
            raise ValueError(
                f"Range [{min_val}, {max_val}] cannot hold two wrong answers for {correct}"
            )

        wrongs = self._near_pass(correct, min_val, max_val)
        if biased:
            wrongs = self._bias_last_digit(correct, wrongs, min_val, max_val)
        return wrongs[0], wrongs[1]

    def _near_pass(self, correct: int, min_val: int, max_val: int) -> list[int]:
        found: list[int] = []
        for offset in shuffle(NEAR_OFFSETS, self._rng):
            candidate = correct + (-offset if coin(self._rng) else offset)
            if min_val <= candidate <= max_val and candidate not in found:
                found.append(candidate)
            if len(found) >= 2:
                return found

        for _ in range(self.max_attempts * 10):
            candidate = self._rng.randint(min_val, max_val)
            if candidate != correct and candidate not in found:
                found.append(candidate)
                if len(found) >= 2:
                    return found

        for candidate in range(min_val, max_val + 1):
            if candidate != correct and candidate not in found:
                found.append(candidate)
                if len(found) >= 2:
                    break
        return found

    def _window(self, correct: int, min_val: int, max_val: int, distance: int) -> tuple[int, int]:
        return max(min_val, correct - distance), min(max_val, correct + distance)

    def _pick_near(
        self, correct: int, min_val: int, max_val: int, distance: int, avoid: set[int]
    ) -> int | None:
        low, high = self._window(correct, min_val, max_val, distance)
        if low > high:
            return None
        span = min(distance, high - low)
        if span >= 1:
            for _ in range(self.max_attempts):
                offset = self._rng.randint(1, span)
                candidate = correct + (-offset if coin(self._rng) else offset)
                if low <= candidate <= high and candidate not in avoid:
                    return candidate
        for candidate in range(low, high + 1):
            if candidate not in avoid:
                return candidate
        return None

    def _enforce_distance(
        self, correct: int, wrongs: list[int], min_val: int, max_val: int, distance: int
    ) -> list[int]:
        result = list(wrongs)
        avoid = {correct, *result}
        for i, value in enumerate(result):
            if abs(value - correct) <= distance:
                continue
            pick = self._pick_near(correct, min_val, max_val, distance, avoid)
            if pick is not None:
                avoid.discard(value)
                result[i] = pick
                avoid.add(pick)
        return result

    def _pick_same_digit(
        self, digit: int, correct: int, min_val: int, max_val: int, distance: int, avoid: set[int]
    ) -> int | None:
        low, high = self._window(correct, min_val, max_val, distance)
        values = _same_digit_values(digit, low, high)
        if not values:
            return None
        for _ in range(self.max_attempts):
            candidate = values[self._rng.randint(0, len(values) - 1)]
            if candidate not in avoid:
                return candidate
        for candidate in values:
            if candidate not in avoid:
                return candidate
        return None

    def _pick_other_digit(
        self, digit: int, correct: int, min_val: int, max_val: int, distance: int, avoid: set[int]
    ) -> int | None:
        low, high = self._window(correct, min_val, max_val, distance)
        if low > high:
            return None
        for _ in range(self.max_attempts):
            candidate = self._rng.randint(low, high)
            if candidate not in avoid and last_digit(candidate) != digit:
                return candidate
        for candidate in range(low, high + 1):
            if candidate not in avoid and last_digit(candidate) != digit:
                return candidate
        return None

    def _bias_last_digit(
        self, correct: int, wrongs: list[int], min_val: int, max_val: int
    ) -> list[int]:
        digit = last_digit(correct)
        roll = self._rng.random()
        if roll < 0.1:
            desired = 0
        elif roll < 0.55:
            desired = 1
        else:
            desired = 2

        distance = max_distance(min_val, max_val)
        result = self._enforce_distance(correct, wrongs, min_val, max_val, distance)
        avoid = {correct, *result}
        matches = sum(1 for w in result if last_digit(w) == digit)

        # Best effort: a slot keeps its value when no replacement fits.
        for i, value in enumerate(result):
            if matches >= desired:
                break
            if last_digit(value) == digit:
                continue
            pick = self._pick_same_digit(digit, correct, min_val, max_val, distance, avoid)
            if pick is not None:
                avoid.discard(value)
                result[i] = pick
                avoid.add(pick)
                matches += 1

        for i, value in enumerate(result):
            if matches <= desired:
                break
            if last_digit(value) != digit:
                continue
            pick = self._pick_other_digit(digit, correct, min_val, max_val, distance, avoid)
            if pick is not None:
                avoid.discard(value)
                result[i] = pick
                avoid.add(pick)
                matches -= 1

        return result
