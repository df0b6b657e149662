from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import attrs
from jsonschema import Draft202012Validator

from ..tabular.functions import FunctionMap

Aggregate = Literal["none", "run", "subject"]
TimeFormat = Literal["integer", "fraction"]
SortDir = Literal["asc", "desc"]

AVAILABLE_COLS: tuple[str, ...] = (
    "class",
    "subject",
    "description",
    "group",
    "run",
    "iter",
    "params",
    "revs",
    "time",
    "memory",
    "memory_diff",
    "memory_inc",
    "memory_diff_inc",
    "rps",
    "deviation",
)

# Computed columns are only produced when requested explicitly.
DEFAULT_COLS: tuple[str, ...] = tuple(c for c in AVAILABLE_COLS if c not in ("rps", "deviation"))

AVAILABLE_FUNCS: tuple[str, ...] = ("sum", "mean", "min", "max", "median")


class ConfigurationError(ValueError):
    """Raised when report configuration is invalid; nothing has run yet."""


@attrs.define(frozen=True, slots=True)
class ReportOptions:
    aggregate: Aggregate = "none"
    aggregate_funcs: FunctionMap = attrs.field(factory=lambda: {"mean": AVAILABLE_COLS})
    deviation_funcs: FunctionMap = attrs.field(factory=lambda: {"min": AVAILABLE_COLS})
    footer_funcs: FunctionMap = attrs.field(factory=dict)
    cols: tuple[str, ...] = DEFAULT_COLS
    precision: int = 6
    time_format: TimeFormat = "fraction"
    sort: str | None = None
    sort_dir: SortDir = "asc"
    groups: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "aggregate": self.aggregate,
            "aggregate_funcs": {k: list(v) for k, v in self.aggregate_funcs.items()},
            "deviation_funcs": {k: list(v) for k, v in self.deviation_funcs.items()},
            "footer_funcs": {k: list(v) for k, v in self.footer_funcs.items()},
            "cols": list(self.cols),
            "precision": self.precision,
            "time_format": self.time_format,
            "sort": self.sort,
            "sort_dir": self.sort_dir,
            "groups": list(self.groups),
        }


def _schema_path() -> Path:
    return Path(__file__).resolve().parent / "schema" / "report_options.schema.json"


def validate_options_schema(config: Mapping[str, Any], *, schema_path: Path | None = None) -> None:
    schema_path = _schema_path() if schema_path is None else schema_path
    schema = json.loads(schema_path.read_text())
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(dict(config)), key=lambda e: list(e.absolute_path))
    if errors:
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}" for e in errors
        )
        raise ConfigurationError(f"Invalid report options: {details}")


def _quoted(values: Any) -> str:
    return '", "'.join(str(v) for v in values)


def validate_cols(cols: Any) -> None:
    invalid = [c for c in cols if c not in AVAILABLE_COLS]
    if invalid:
        raise ConfigurationError(
            f'Invalid columns: "{_quoted(invalid)}". Valid columns are: "{_quoted(AVAILABLE_COLS)}"'
        )


def normalize_functions(funcs: Any) -> FunctionMap:
    """Expand a function spec into `{function: columns}`.

    Accepted forms: `["mean", {"max": ["time"]}]` or `{"mean": None, "max": ["time"]}`.
    A bare name or a null column list applies to every known column.
    """
    pairs: list[tuple[str, Any]] = []
    if isinstance(funcs, Mapping):
        pairs.extend(funcs.items())
    else:
        for item in funcs:
            if isinstance(item, Mapping):
                pairs.extend(item.items())
            else:
                pairs.append((item, None))

    normalized: dict[str, tuple[str, ...]] = {}
    for function, cols in pairs:
        if function not in AVAILABLE_FUNCS:
            raise ConfigurationError(
                f'Invalid function: "{function}". Valid functions are "{_quoted(AVAILABLE_FUNCS)}"'
            )
        if cols is None:
            normalized[function] = AVAILABLE_COLS
            continue
        validate_cols(cols)
        normalized[function] = tuple(cols)
    return normalized


def resolve_options(config: Mapping[str, Any] | None = None) -> ReportOptions:
    """Validate and normalize a flat report configuration.

    Raises ConfigurationError naming the offending value(s) and the valid set.
    """
    config = dict(config or {})
    validate_options_schema(config)

    kwargs: dict[str, Any] = {}
    for key in ("aggregate_funcs", "deviation_funcs", "footer_funcs"):
        if key in config:
            kwargs[key] = normalize_functions(config[key])

    if "cols" in config:
        validate_cols(config["cols"])
        kwargs["cols"] = tuple(config["cols"])

    if "sort_dir" in config:
        sort_dir = str(config["sort_dir"]).casefold()
        if sort_dir not in ("asc", "desc"):
            raise ConfigurationError(f'Invalid sort_dir: "{config["sort_dir"]}". Valid values are "asc", "desc"')
        kwargs["sort_dir"] = sort_dir

    if "groups" in config:
        kwargs["groups"] = tuple(config["groups"])

    if "precision" in config:
        kwargs["precision"] = int(config["precision"])

    if config.get("sort") == "params":
        raise ConfigurationError('Invalid sort column: "params". Sort by a single parameter name instead')

    for key in ("aggregate", "time_format", "sort"):
        if key in config:
            kwargs[key] = config[key]

    return ReportOptions(**kwargs)
