from __future__ import annotations

import math
import statistics
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

Number = int | float

# function name -> columns it applies to
FunctionMap = Mapping[str, tuple[str, ...]]


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def numeric_values(values: Iterable[Any]) -> list[Number]:
    return [v for v in values if is_number(v)]


FUNCTIONS: dict[str, Callable[[Sequence[Number]], Number]] = {
    "sum": sum,
    "mean": statistics.fmean,
    "min": min,
    "max": max,
    "median": statistics.median,
}


def apply_function(name: str, values: Iterable[Any]) -> Number | None:
    """Apply an aggregate function to the numeric members of `values`.

    Non-numeric values are skipped; returns None when nothing numeric is left.
    """
    nums = numeric_values(values)
    if not nums:
        return None
    return FUNCTIONS[name](nums)
