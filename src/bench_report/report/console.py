from __future__ import annotations

from typing import TextIO

import click
from tabulate import SEPARATING_LINE, tabulate

from ..tabular.cells import Table, Workspace
from .base import BaseTabularReportGenerator
from .formatting import Style, format_table
from .options import ReportOptions


class AnsiStyle(Style):
    def title(self, text: str) -> str:
        return click.style(text, fg="yellow")

    def unit(self, text: str) -> str:
        return click.style(text, dim=True)

    def leading_zeros(self, text: str) -> str:
        return click.style(text, fg="blue")

    def total(self, text: str) -> str:
        return click.style(text, bold=True)


class ConsoleTableReportGenerator(BaseTabularReportGenerator):
    """Plain-text tables, optionally with ANSI styling."""

    name = "console_table"

    def __init__(self, *, color: bool = False, tablefmt: str = "psql") -> None:
        self.color = color
        self.tablefmt = tablefmt

    def _style(self) -> Style:
        return AnsiStyle() if self.color else Style()

    def render_table(self, table: Table, options: ReportOptions) -> str:
        style = self._style()
        rows = [SEPARATING_LINE if line is None else line for line in format_table(table, options, style)]
        # Values are already formatted; tabulate must not reparse "1000.00" as a number.
        return tabulate(rows, headers=table.columns, tablefmt=self.tablefmt, disable_numparse=True)

    def render(self, workspace: Workspace, output: TextIO, options: ReportOptions) -> None:
        style = self._style()
        for table in workspace:
            output.write(f"{style.title(table.title)}: {table.description}\n")
            if not table.columns:
                output.write("No columns selected.\n\n")
                continue
            output.write(self.render_table(table, options) + "\n\n")
