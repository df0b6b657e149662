from __future__ import annotations

import math
from typing import Any

import attrs

MEMORY_STATS: tuple[str, ...] = ("memory", "memory_diff", "memory_inc", "memory_diff_inc")


def _check_revs(_inst: Any, _attr: Any, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"revs must be a positive integer, got {value!r}")


def _check_time(_inst: Any, _attr: Any, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise ValueError(f"time must be a finite non-negative number, got {value!r}")


@attrs.define(frozen=True, slots=True)
class Iteration:
    """One measured execution: `revs` repetitions taking `time` nanoseconds."""

    revs: int = attrs.field(validator=_check_revs)
    time: float = attrs.field(validator=_check_time)
    stats: dict[str, Any] = attrs.field(factory=dict, converter=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"revs": self.revs, "time": self.time, **self.stats}


@attrs.define(frozen=True, slots=True)
class IterationSet:
    iterations: tuple[Iteration, ...] = attrs.field(converter=tuple)
    parameters: dict[str, Any] = attrs.field(factory=dict, converter=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"parameters": self.parameters, "iterations": [it.to_dict() for it in self.iterations]}


@attrs.define(frozen=True, slots=True)
class Subject:
    name: str
    description: str = ""
    groups: tuple[str, ...] = attrs.field(default=(), converter=tuple)
    iteration_sets: tuple[IterationSet, ...] = attrs.field(default=(), converter=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "groups": list(self.groups),
            "iteration_sets": [s.to_dict() for s in self.iteration_sets],
        }


@attrs.define(frozen=True, slots=True)
class Benchmark:
    class_name: str
    subjects: tuple[Subject, ...] = attrs.field(default=(), converter=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"class": self.class_name, "subjects": [s.to_dict() for s in self.subjects]}


@attrs.define(frozen=True, slots=True)
class Suite:
    benchmarks: tuple[Benchmark, ...] = attrs.field(default=(), converter=tuple)

    def iter_subjects(self):
        """Yield `(benchmark, subject)` pairs in document order."""
        for bench in self.benchmarks:
            for subject in bench.subjects:
                yield bench, subject

    def to_dict(self) -> dict[str, Any]:
        return {"benchmarks": [b.to_dict() for b in self.benchmarks]}
