from __future__ import annotations

from typing import TextIO

from mdutils.mdutils import MdUtils  # type: ignore[import-untyped]

from ..tabular.cells import Table, Workspace
from .base import BaseTabularReportGenerator
from .formatting import Style, format_table
from .options import ReportOptions

SPACER_CELL = "--"


class MarkdownStyle(Style):
    def total(self, text: str) -> str:
        return f"**{text}**"


def _escape(text: str) -> str:
    return text.replace("|", "\\|")


def table_lines(table: Table, options: ReportOptions) -> list[str]:
    lines = [
        "| " + " | ".join(_escape(c) for c in table.columns) + " |",
        "|" + "|".join(["---"] * len(table.columns)) + "|",
    ]
    for line in format_table(table, options, MarkdownStyle()):
        cells = [SPACER_CELL] * len(table.columns) if line is None else [_escape(v) for v in line]
        lines.append("| " + " | ".join(cells) + " |")
    return lines


class MarkdownReportGenerator(BaseTabularReportGenerator):
    name = "markdown"

    def __init__(self, *, title: str = "Benchmark Report") -> None:
        self.title = title

    def build_document(self, workspace: Workspace, options: ReportOptions) -> MdUtils:
        md = MdUtils(file_name="report", title=self.title)
        for table in workspace:
            md.new_header(level=2, title=table.title)
            if table.description:
                md.new_paragraph(table.description)
            if not table.columns:
                md.new_paragraph("No columns selected.")
                continue
            md.new_paragraph("\n".join(table_lines(table, options)))
        return md

    def render(self, workspace: Workspace, output: TextIO, options: ReportOptions) -> None:
        output.write(self.build_document(workspace, options).get_md_text().strip() + "\n")
