"""Workspace transformation steps.

Every step exposes `step(workspace)` and mutates the workspace in place. Steps
never raise on data anomalies (non-numeric values, zero times, zero
baselines): the affected cell becomes null, or infinite for rps.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable
from typing import Any, Literal, Protocol

import attrs

from .cells import Row, Table, Tag, Workspace
from .functions import FunctionMap, apply_function, is_number

logger = logging.getLogger(__name__)

# Columns that identify a subject; aggregation carries them from the first row.
SUBJECT_KEY_COLUMNS: tuple[str, ...] = ("class", "subject", "description", "group")


class Step(Protocol):
    def step(self, workspace: Workspace) -> None: ...


def _selects(table: Table, column: str, cols: Iterable[str]) -> bool:
    cols = tuple(cols)
    return column in cols or table.family(column) in cols


def _column_tags(rows: list[Row], column: str) -> set[Tag]:
    for row in rows:
        cell = row.get(column)
        if cell is not None:
            return set(cell.groups)
    return set()


def _signature(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


@attrs.define(frozen=True)
class GroupFilterStep:
    """Drop tables whose subject groups do not intersect `groups`."""

    groups: tuple[str, ...]

    def step(self, workspace: Workspace) -> None:
        wanted = set(self.groups)
        kept = [t for t in workspace.tables if wanted & set(t.attributes.get("groups", ()))]
        dropped = len(workspace.tables) - len(kept)
        workspace.tables[:] = kept
        if dropped:
            logger.info("Group filter %s dropped %d table(s)", sorted(wanted), dropped)


def compute_rps(revs: Any, time: Any) -> float | None:
    """Revolutions per second for `time` in nanoseconds; infinite when time is zero."""
    if not is_number(revs) or not is_number(time):
        return None
    if time <= 0:
        return math.inf
    return revs / (time / 1e9)


@attrs.define(frozen=True)
class RpsStep:
    def step(self, workspace: Workspace) -> None:
        for table in workspace:
            table.add_column("rps", after="time")
            for row in table.data_rows():
                rps = compute_rps(row.value("revs"), row.value("time"))
                if rps == math.inf:
                    logger.debug("%s: zero time, rps is infinite", table.title)
                row.set("rps", rps, [Tag.RPS])


@attrs.define(frozen=True)
class AggregateStep:
    """Collapse rows into one row per group and function.

    `by="run"` groups rows sharing the same parameter values and iteration
    index, collapsing the run dimension; the `run` column of an aggregate row
    names the function that produced it. `by="subject"` puts every data row of
    a table into a single group; there `iter` names the function and `run` is
    null.
    """

    functions: FunctionMap
    by: Literal["run", "subject"] = "run"

    def step(self, workspace: Workspace) -> None:
        for table in workspace:
            param_cols = [c for c in table.columns if table.family(c) == "params"]
            grouped: dict[str, list[Row]] = {}
            for row in table.data_rows():
                if self.by == "subject":
                    key = ""
                else:
                    key = _signature([[row.value(c) for c in param_cols], row.value("iter")])
                grouped.setdefault(key, []).append(row)

            carried = set(SUBJECT_KEY_COLUMNS)
            if self.by == "run":
                carried |= {"iter", *param_cols}
            label = "run" if self.by == "run" else "iter"

            rows: list[Row] = []
            for members in grouped.values():
                for function, cols in self.functions.items():
                    rows.append(self._aggregate_row(table, members, function, cols, carried, label))
            table.rows = rows + [r for r in table.rows if not r.is_data()]
            logger.debug("%s: aggregated by %s into %d row(s)", table.title, self.by, len(rows))

    def _aggregate_row(
        self,
        table: Table,
        members: list[Row],
        function: str,
        cols: tuple[str, ...],
        carried: set[str],
        label: str,
    ) -> Row:
        first = members[0]
        row = Row(groups={Tag.AGGREGATE})
        for column in table.columns:
            tags = _column_tags(members, column)
            if column in carried:
                value = first.value(column)
            elif column == label:
                value = function
            elif column in ("run", "iter"):
                value = None
            elif _selects(table, column, cols):
                value = apply_function(function, (m.value(column) for m in members))
            else:
                value = None
            row.set(column, value, tags)
        return row


def compute_deviation(value: Any, baseline: Any) -> float | None:
    """Percentage difference of `value` from `baseline`."""
    if not is_number(value) or not is_number(baseline):
        return None
    if baseline == 0 or not math.isfinite(baseline) or not math.isfinite(value):
        return None
    return (value - baseline) / baseline * 100


@attrs.define(frozen=True)
class DeviationStep:
    """Deviation of `column` from a workspace-wide baseline, one column per function."""

    column: str
    functions: FunctionMap

    def step(self, workspace: Workspace) -> None:
        rows = [row for _table, row in workspace.data_rows()]
        values = [row.value(self.column) for row in rows]
        functions = [f for f, cols in self.functions.items() if self.column in tuple(cols)]

        for function in functions:
            target = "deviation" if len(functions) == 1 else f"deviation_{function}"
            baseline = apply_function(function, values)
            if baseline is None or baseline == 0:
                logger.debug("Deviation baseline %s(%s) is %r; cells will be null", function, self.column, baseline)
            for table in workspace:
                table.add_column(target)
                table.families[target] = "deviation"
            for row in rows:
                row.set(target, compute_deviation(row.value(self.column), baseline), [Tag.DEVIATION])


def _sort_key(value: Any) -> tuple[int, Any, str]:
    if is_number(value):
        return (0, value, "")
    if isinstance(value, str):
        return (1, 0, value)
    return (2, 0, _signature(value))


@attrs.define(frozen=True)
class SortStep:
    """Stable sort of data rows; null values go last in both directions."""

    column: str
    direction: Literal["asc", "desc"] = "asc"

    def step(self, workspace: Workspace) -> None:
        for table in workspace:
            data = table.data_rows()
            present = [r for r in data if r.value(self.column) is not None]
            missing = [r for r in data if r.value(self.column) is None]
            present.sort(key=lambda r: _sort_key(r.value(self.column)), reverse=self.direction == "desc")
            table.rows = present + missing + [r for r in table.rows if not r.is_data()]


@attrs.define(frozen=True)
class FilterColsStep:
    """Keep only the selected columns, in selection order."""

    cols: tuple[str, ...]

    def step(self, workspace: Workspace) -> None:
        for table in workspace:
            ordered: list[str] = []
            for wanted in self.cols:
                for column in table.columns:
                    if column not in ordered and (column == wanted or table.family(column) == wanted):
                        ordered.append(column)
            for column in list(table.columns):
                if column not in ordered:
                    table.remove_column(column)
            table.columns = ordered


@attrs.define(frozen=True)
class FooterStep:
    """Append a spacer and one summary row per function to every table."""

    functions: FunctionMap

    def step(self, workspace: Workspace) -> None:
        for table in workspace:
            if not table.columns:
                continue
            data = table.data_rows()
            table.rows.append(Row(groups={Tag.SPACER}))
            for function, cols in self.functions.items():
                footer = Row(groups={Tag.FOOTER})
                for column in table.columns:
                    value = None
                    if _selects(table, column, cols):
                        value = apply_function(function, table.column_values(column, data))
                    footer.set(column, value, _column_tags(data, column) | {Tag.FOOTER})
                # The first empty cell names the function.
                label = next((c for c in table.columns if footer.value(c) is None), None)
                if label is not None:
                    footer.set(label, function, [Tag.FOOTER])
                table.rows.append(footer)
