from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .report.options import ConfigurationError
from .report.run import GENERATORS, load_config, parse_option, report_run
from .result.xml_io import ResultFormatError


def _abs_path(p: str) -> Path:
    return Path(p).expanduser().resolve()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bench_report",
        description="Tabular reports from benchmark result files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    report = sub.add_parser("report", help="Generate a report from a result XML file.")
    report.add_argument("file", type=_abs_path, help="Result XML file.")
    report.add_argument("--generator", default="console_table", choices=sorted(GENERATORS))
    report.add_argument("--config", type=_abs_path, default=None, help="JSON file with report options.")
    report.add_argument(
        "--option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help='Override a report option (value parsed as JSON, e.g. --option cols=\'["subject","time"]\').',
    )
    report.add_argument("--out", type=_abs_path, default=None, help="Write the report here instead of stdout.")
    report.add_argument("--color", action="store_true", help="Style console output with ANSI colors.")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if ns.cmd == "report":
        try:
            config = load_config(ns.config) if ns.config is not None else {}
            config.update(parse_option(item) for item in ns.option)
            return report_run(
                results_path=ns.file,
                generator=ns.generator,
                config=config,
                out_path=ns.out,
                color=ns.color,
            )
        except (ConfigurationError, ResultFormatError) as e:
            print(str(e), file=sys.stderr)
            return 2

    raise AssertionError(f"Unhandled cmd: {ns.cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
