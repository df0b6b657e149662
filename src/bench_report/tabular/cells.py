from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from typing import Any

import attrs


class Tag(str, enum.Enum):
    """Classification tags carried by cells and rows."""

    TIME = "time"
    REVS = "revs"
    MEMORY = "memory"
    DIFF = "diff"
    RPS = "rps"
    DEVIATION = "deviation"
    PARAMS = "params"
    AGGREGATE = "aggregate"
    FOOTER = "footer"
    SPACER = "spacer"


def _to_tags(values: Iterable[Tag | str]) -> set[Tag]:
    return {Tag(v) for v in values}


def parse_selector(selector: str) -> str | Tag:
    """Parse `time` (column name) or `.time` (tag selector)."""
    if selector.startswith("."):
        try:
            return Tag(selector[1:])
        except ValueError:
            raise ValueError(f"Unknown tag selector {selector!r}. Known: {sorted(t.value for t in Tag)}") from None
    return selector


@attrs.define
class Cell:
    value: Any = None
    groups: set[Tag] = attrs.field(factory=set, converter=_to_tags)


@attrs.define
class Row:
    cells: dict[str, Cell] = attrs.field(factory=dict)
    groups: set[Tag] = attrs.field(factory=set, converter=_to_tags)

    def __getitem__(self, column: str) -> Cell:
        return self.cells[column]

    def __contains__(self, column: str) -> bool:
        return column in self.cells

    def get(self, column: str) -> Cell | None:
        return self.cells.get(column)

    def value(self, column: str) -> Any:
        cell = self.cells.get(column)
        return None if cell is None else cell.value

    def set(self, column: str, value: Any, groups: Iterable[Tag | str] = ()) -> Cell:
        cell = Cell(value, set(groups))
        self.cells[column] = cell
        return cell

    def remove(self, column: str) -> None:
        self.cells.pop(column, None)

    def is_data(self) -> bool:
        return not self.groups & {Tag.FOOTER, Tag.SPACER}


@attrs.define
class Table:
    title: str
    description: str = ""
    attributes: dict[str, Any] = attrs.field(factory=dict)
    columns: list[str] = attrs.field(factory=list)
    rows: list[Row] = attrs.field(factory=list)
    # column -> selectable family name (e.g. parameter columns -> "params")
    families: dict[str, str] = attrs.field(factory=dict)

    def add_column(self, name: str, *, after: str | None = None) -> None:
        if name in self.columns:
            return
        if after is not None and after in self.columns:
            self.columns.insert(self.columns.index(after) + 1, name)
        else:
            self.columns.append(name)

    def family(self, column: str) -> str:
        return self.families.get(column, column)

    def remove_column(self, name: str) -> None:
        if name in self.columns:
            self.columns.remove(name)
        self.families.pop(name, None)
        for row in self.rows:
            row.remove(name)

    def data_rows(self) -> list[Row]:
        return [r for r in self.rows if r.is_data()]

    def column_values(self, column: str, rows: Iterable[Row] | None = None) -> list[Any]:
        return [r.value(column) for r in (self.data_rows() if rows is None else rows)]

    def select(self, selector: str) -> Iterator[tuple[Row, str, Cell]]:
        """Yield `(row, column, cell)` for every cell matching a selector.

        A plain name matches that column; `.tag` matches cells whose own tags
        or whose row's tags contain the tag.
        """
        target = parse_selector(selector)
        for row in self.rows:
            for column, cell in row.cells.items():
                if isinstance(target, Tag):
                    if target in cell.groups or target in row.groups:
                        yield row, column, cell
                elif column == target:
                    yield row, column, cell

    def align(self) -> None:
        """Make the table rectangular over the declared columns."""
        for row in self.rows:
            row.cells = {c: row.cells[c] if c in row.cells else Cell() for c in self.columns}

    def is_aligned(self) -> bool:
        return all(list(r.cells) == self.columns for r in self.rows)


@attrs.define
class Workspace:
    tables: list[Table] = attrs.field(factory=list)

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    def data_rows(self) -> Iterator[tuple[Table, Row]]:
        for table in self.tables:
            for row in table.data_rows():
                yield table, row
