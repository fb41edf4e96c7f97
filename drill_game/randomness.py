from __future__ import annotations

import random
from typing import Iterable, TypeVar

T = TypeVar("T")


def make_rng(seed: int | None = None, rng: random.Random | None = None) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(seed)


def coin(rng: random.Random) -> bool:
    return rng.random() < 0.5


def shuffle(items: Iterable[T], rng: random.Random) -> list[T]:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
