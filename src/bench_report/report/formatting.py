"""Presentational value formatting.

Formatting is driven by cell tags: each rule in `FORMAT_RULES` applies to every
cell selected by its tag (first matching rule wins). The workspace is never
modified; formatted text is returned as a separate grid.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable
from typing import Any

from ..tabular.cells import Table, Tag
from ..tabular.functions import is_number
from .options import ReportOptions

NULL_MARK = "-"
INFINITY_MARK = "∞"

_LEADING_ZEROS_RE = re.compile(r"^([0.]+)(.+)$")


class Style:
    """Markup hooks used by the formatters; the base style adds no markup."""

    def title(self, text: str) -> str:
        return text

    def unit(self, text: str) -> str:
        return text

    def leading_zeros(self, text: str) -> str:
        return text

    def total(self, text: str) -> str:
        return text


Rule = Callable[[Any, set[Tag], ReportOptions, Style], str]


def format_rps(value: Any, tags: set[Tag], options: ReportOptions, style: Style) -> str:
    if math.isinf(value):
        return INFINITY_MARK
    return f"{value:.2f}"


def format_time(value: Any, tags: set[Tag], options: ReportOptions, style: Style) -> str:
    if options.time_format == "integer":
        return f"{round(value / 1000):,}" + style.unit("μs")
    text = f"{value / 1e9:.{options.precision}f}"
    m = _LEADING_ZEROS_RE.match(text)
    if m:
        text = style.leading_zeros(m.group(1)) + m.group(2)
    return text + style.unit("s")


def format_memory(value: Any, tags: set[Tag], options: ReportOptions, style: Style) -> str:
    prefix = "+" if Tag.DIFF in tags and value > 0 else ""
    return f"{prefix}{round(value):,}" + style.unit("b")


def format_deviation(value: Any, tags: set[Tag], options: ReportOptions, style: Style) -> str:
    prefix = "+" if value > 0 else ""
    return f"{prefix}{value:.2f}%"


FORMAT_RULES: dict[Tag, Rule] = {
    Tag.RPS: format_rps,
    Tag.TIME: format_time,
    Tag.MEMORY: format_memory,
    Tag.DEVIATION: format_deviation,
}


def format_plain(value: Any) -> str:
    if value is None:
        return NULL_MARK
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, sort_keys=True, default=str, ensure_ascii=False)
    return str(value)


def format_table(table: Table, options: ReportOptions, style: Style | None = None) -> list[list[str] | None]:
    """Render every row of an aligned table to text.

    Spacer rows come back as None so that renderers can draw a separator.
    """
    style = Style() if style is None else style
    rendered: dict[tuple[int, str], str] = {}

    for tag, rule in FORMAT_RULES.items():
        for row, column, cell in table.select(f".{tag.value}"):
            key = (id(row), column)
            if key in rendered:
                continue
            # Infinity is the only non-finite value a rule knows how to show.
            if not is_number(cell.value) or (math.isinf(cell.value) and tag is not Tag.RPS):
                continue
            rendered[key] = rule(cell.value, cell.groups | row.groups, options, style)

    for row, column, cell in table.select(".footer"):
        if cell.value is None:
            continue
        key = (id(row), column)
        rendered[key] = style.total(rendered[key] if key in rendered else format_plain(cell.value))

    lines: list[list[str] | None] = []
    for row in table.rows:
        if Tag.SPACER in row.groups:
            lines.append(None)
            continue
        lines.append(
            [rendered[(id(row), c)] if (id(row), c) in rendered else format_plain(row.value(c)) for c in table.columns]
        )
    return lines
