from __future__ import annotations

import io
import json
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from ..result.xml_io import read_suite
from .base import BaseTabularReportGenerator
from .console import ConsoleTableReportGenerator
from .markdown import MarkdownReportGenerator
from .options import ConfigurationError, resolve_options

GENERATORS: dict[str, type[BaseTabularReportGenerator]] = {
    ConsoleTableReportGenerator.name: ConsoleTableReportGenerator,
    MarkdownReportGenerator.name: MarkdownReportGenerator,
}


def get_generator(name: str, *, color: bool = False) -> BaseTabularReportGenerator:
    if name not in GENERATORS:
        raise ConfigurationError(f'Unknown report generator: "{name}". Valid generators are: {sorted(GENERATORS)}')
    if name == ConsoleTableReportGenerator.name:
        return ConsoleTableReportGenerator(color=color)
    return GENERATORS[name]()


def load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f'Could not find config file "{path}"')
    try:
        config = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return config


def parse_option(item: str) -> tuple[str, Any]:
    """Parse `key=value`; the value is JSON when it parses as JSON, else a string."""
    key, sep, raw = item.partition("=")
    if not sep or not key:
        raise ConfigurationError(f"Invalid option {item!r}; expected key=value")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key.strip(), value


def report_run(
    *,
    results_path: Path,
    generator: str = "console_table",
    config: Mapping[str, Any] | None = None,
    out_path: Path | None = None,
    color: bool = False,
    stream: TextIO | None = None,
) -> int:
    """Generate a report from a result XML file (no benchmark run).

    Configuration is validated before the result file is read.
    """
    options = resolve_options(config)
    gen = get_generator(generator, color=color)
    if not results_path.exists():
        raise ConfigurationError(f'Could not find file "{results_path}"')

    suite = read_suite(results_path)
    buf = io.StringIO()
    gen.generate(suite, buf, options)

    if out_path is not None:
        out_path.write_text(buf.getvalue())
    else:
        (sys.stdout if stream is None else stream).write(buf.getvalue())
    return 0
