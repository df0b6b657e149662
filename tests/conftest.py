from __future__ import annotations

import pytest

from bench_report.result.model import Benchmark, Iteration, IterationSet, Subject, Suite


def _iterations(revs: int, *times: float) -> list[Iteration]:
    return [Iteration(revs=revs, time=t) for t in times]


@pytest.fixture
def single_suite() -> Suite:
    """One benchmark, one subject, one iteration set with one iteration."""
    iterations = IterationSet(
        iterations=[Iteration(revs=1, time=100)],
        parameters={
            "foo": "bar",
            "array": ["one", "two"],
            "assoc_array": {"one": "two", "three": "four"},
        },
    )
    subject = Subject(
        name="mySubject",
        description="My Subject's description",
        groups=["one", "two"],
        iteration_sets=[iterations],
    )
    return Suite(benchmarks=[Benchmark(class_name="Benchmark\\Class", subjects=[subject])])


@pytest.fixture
def sort_suite() -> Suite:
    """Two subjects with a `size` parameter.

    benchQuick: size=10 -> 100, 200, 300; size=20 -> 400, 600 (revs 10)
    benchSlow:  size=10 -> 1000, 3000 (revs 5)
    """
    quick = Subject(
        name="benchQuick",
        description="Quick sort",
        groups=["fast", "sort"],
        iteration_sets=[
            IterationSet(iterations=_iterations(10, 100, 200, 300), parameters={"size": 10}),
            IterationSet(iterations=_iterations(10, 400, 600), parameters={"size": 20}),
        ],
    )
    slow = Subject(
        name="benchSlow",
        description="Bubble sort",
        groups=["slow"],
        iteration_sets=[IterationSet(iterations=_iterations(5, 1000, 3000), parameters={"size": 10})],
    )
    return Suite(benchmarks=[Benchmark(class_name="Acme\\SortBench", subjects=[quick, slow])])


@pytest.fixture
def memory_suite() -> Suite:
    it = Iteration(
        revs=2,
        time=2_000_000,
        stats={"memory": 4096, "memory_diff": -512, "memory_inc": 8192, "memory_diff_inc": 1024},
    )
    subject = Subject(name="benchAlloc", description="Allocations", iteration_sets=[IterationSet(iterations=[it])])
    return Suite(benchmarks=[Benchmark(class_name="Acme\\MemBench", subjects=[subject])])


@pytest.fixture
def repeat_suite() -> Suite:
    """Runs repeated with the same parameters.

    n=1: run 0 -> 100, 200; run 1 -> 300, 400
    n=2: run 2 -> 500
    """
    subject = Subject(
        name="benchRepeat",
        description="Repeated runs",
        groups=["repeat"],
        iteration_sets=[
            IterationSet(iterations=_iterations(1, 100, 200), parameters={"n": 1}),
            IterationSet(iterations=_iterations(1, 300, 400), parameters={"n": 1}),
            IterationSet(iterations=_iterations(1, 500), parameters={"n": 2}),
        ],
    )
    return Suite(benchmarks=[Benchmark(class_name="Acme\\RepeatBench", subjects=[subject])])
