from __future__ import annotations

import operator
from typing import Callable, Sequence

_ADDITIVE: dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
}


def _symbol(op) -> str:
    # Operator members are str subclasses; .value keeps "+" rather than "Operator.ADD"
    return getattr(op, "value", op)


def evaluate(terms: Sequence[int], operators: Sequence) -> int:
    """
    Evaluate a flat term/operator list with `*` binding tighter than `+`/`-`.

    Multiplications are folded into the previous accumulated value while
    scanning; the remaining `+`/`-` chain is then reduced left to right.
    """
    if not terms:
        return 0
    if len(operators) != len(terms) - 1:
        raise ValueError(
            f"Expected {len(terms) - 1} operators for {len(terms)} terms, got {len(operators)}"
        )

    nums = [terms[0]]
    ops: list[str] = []
    for op, value in zip(operators, terms[1:]):
        symbol = _symbol(op)
        if symbol == "*":
            nums[-1] = nums[-1] * value
        elif symbol in _ADDITIVE:
            nums.append(value)
            ops.append(symbol)
        else:
            raise ValueError(f"Unsupported operator: {op!r}")

    total = nums[0]
    for symbol, value in zip(ops, nums[1:]):
        total = _ADDITIVE[symbol](total, value)
    return total


def format_expression(terms: Sequence[int], operators: Sequence) -> str:
    if not terms:
        return ""
    parts = [str(terms[0])]
    for op, value in zip(operators, terms[1:]):
        parts.append(f"{_symbol(op)} {value}")
    return " ".join(parts)
