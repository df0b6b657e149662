from __future__ import annotations

import pytest

from bench_report.report.options import (
    AVAILABLE_COLS,
    ConfigurationError,
    ReportOptions,
    normalize_functions,
    resolve_options,
)


def test_defaults() -> None:
    options = resolve_options()

    assert options == ReportOptions()
    assert options.aggregate == "none"
    assert options.aggregate_funcs == {"mean": AVAILABLE_COLS}
    assert options.deviation_funcs == {"min": AVAILABLE_COLS}
    assert options.footer_funcs == {}
    assert "rps" not in options.cols
    assert "deviation" not in options.cols
    assert options.precision == 6
    assert options.time_format == "fraction"
    assert options.sort is None
    assert options.sort_dir == "asc"


def test_unknown_column_names_offender_and_valid_set() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_options({"cols": ["subject", "bogus"]})

    message = str(excinfo.value)
    assert '"bogus"' in message
    assert "Valid columns are" in message
    assert '"memory_diff_inc"' in message


def test_unknown_function_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match='Invalid function: "avg"'):
        resolve_options({"footer_funcs": ["avg"]})


def test_function_column_list_is_validated() -> None:
    with pytest.raises(ConfigurationError, match="Invalid columns"):
        resolve_options({"aggregate_funcs": {"mean": ["nope"]}})


def test_bare_function_names_expand_to_every_column() -> None:
    assert normalize_functions(["mean", {"max": ["time"]}]) == {"mean": AVAILABLE_COLS, "max": ("time",)}
    assert normalize_functions({"sum": None, "min": ["revs"]}) == {"sum": AVAILABLE_COLS, "min": ("revs",)}


def test_unknown_option_key_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="colour"):
        resolve_options({"colour": "red"})


def test_sort_direction_is_case_insensitive() -> None:
    assert resolve_options({"sort": "time", "sort_dir": "DESC"}).sort_dir == "desc"
    with pytest.raises(ConfigurationError, match="sideways"):
        resolve_options({"sort_dir": "sideways"})


@pytest.mark.parametrize(
    "config",
    [
        {"precision": -1},
        {"precision": "3"},
        {"aggregate": "everything"},
        {"time_format": "hours"},
        {"groups": "fast"},
    ],
)
def test_schema_rejects_bad_values(config: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError, match="Invalid report options"):
        resolve_options(config)


def test_resolved_values_are_normalized() -> None:
    options = resolve_options(
        {"cols": ["subject", "time", "rps"], "groups": ["fast"], "aggregate": "run", "precision": 2}
    )
    assert options.cols == ("subject", "time", "rps")
    assert options.groups == ("fast",)
    assert options.aggregate == "run"
    assert options.precision == 2
    assert options.to_dict()["cols"] == ["subject", "time", "rps"]


@pytest.mark.parametrize("key", ["aggregate_funcs", "deviation_funcs"])
@pytest.mark.parametrize("value", [[], {}])
def test_empty_function_spec_is_rejected(key: str, value: object) -> None:
    with pytest.raises(ConfigurationError, match=key):
        resolve_options({key: value, "aggregate": "run"})


def test_empty_footer_functions_are_allowed() -> None:
    assert resolve_options({"footer_funcs": []}).footer_funcs == {}


def test_sort_by_params_family_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match='"params"'):
        resolve_options({"sort": "params"})
