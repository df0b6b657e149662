"""Benchmark report generation.

This package turns a benchmark result tree into tables, runs a configurable
sequence of transformation steps over them (derived columns, aggregation,
deviation, sorting, column filtering, footers) and renders the result as a
console table or a Markdown document.
"""

from __future__ import annotations
