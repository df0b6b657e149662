from __future__ import annotations

import io

import pytest

from bench_report.report import base
from bench_report.report.console import ConsoleTableReportGenerator
from bench_report.report.options import ConfigurationError, resolve_options
from bench_report.result.model import Suite
from bench_report.tabular.converter import suite_to_workspace
from bench_report.tabular.pipeline import build_steps, run_pipeline
from bench_report.tabular.steps import (
    AggregateStep,
    DeviationStep,
    FilterColsStep,
    FooterStep,
    GroupFilterStep,
    RpsStep,
    SortStep,
)


def test_default_options_only_filter_columns() -> None:
    assert [type(s) for s in build_steps(resolve_options())] == [FilterColsStep]


def test_step_order_with_every_option() -> None:
    options = resolve_options(
        {
            "groups": ["fast"],
            "cols": ["subject", "time", "rps", "deviation"],
            "aggregate": "run",
            "sort": "time",
            "footer_funcs": ["sum"],
        }
    )
    assert [type(s) for s in build_steps(options)] == [
        GroupFilterStep,
        RpsStep,
        AggregateStep,
        DeviationStep,
        SortStep,
        FilterColsStep,
        FooterStep,
    ]


def test_pipeline_output_is_rectangular(sort_suite: Suite) -> None:
    options = resolve_options(
        {
            "cols": ["subject", "params", "time", "rps", "deviation"],
            "aggregate": "subject",
            "footer_funcs": ["max"],
        }
    )
    ws = run_pipeline(suite_to_workspace(sort_suite), options)

    quick = ws.tables[0]
    assert quick.columns == ["subject", "size", "time", "rps", "deviation"]
    assert all(list(r.cells) == quick.columns for t in ws for r in t.rows)
    footer = quick.rows[-1]
    assert footer.value("subject") == "max"
    assert footer.value("time") == 320


def test_configuration_error_stops_before_conversion(monkeypatch: pytest.MonkeyPatch, sort_suite: Suite) -> None:
    def fail(_suite: Suite) -> None:
        raise AssertionError("conversion must not run")

    monkeypatch.setattr(base, "suite_to_workspace", fail)
    out = io.StringIO()

    with pytest.raises(ConfigurationError, match="bogus"):
        ConsoleTableReportGenerator().generate(sort_suite, out, {"cols": ["bogus"]})
    assert out.getvalue() == ""


def test_unknown_sort_column_is_rejected_before_any_step(sort_suite: Suite) -> None:
    ws = suite_to_workspace(sort_suite)
    before = [t.columns[:] for t in ws]

    with pytest.raises(ConfigurationError, match='Invalid sort column: "bogus"'):
        run_pipeline(ws, resolve_options({"sort": "bogus"}))
    assert [t.columns for t in ws] == before


def test_sort_accepts_parameter_and_derived_columns(sort_suite: Suite) -> None:
    ws = run_pipeline(suite_to_workspace(sort_suite), resolve_options({"sort": "size", "sort_dir": "desc"}))
    assert ws.tables[0].column_values("size") == [20, 20, 10, 10, 10]

    options = resolve_options(
        {"sort": "deviation_max", "cols": ["time", "deviation"], "deviation_funcs": ["min", "max"]}
    )
    ws = run_pipeline(suite_to_workspace(sort_suite), options)
    assert ws.tables[0].columns == ["time", "deviation_min", "deviation_max"]
    assert ws.tables[0].column_values("time") == [100, 200, 300, 400, 600]
