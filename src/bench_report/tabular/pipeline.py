from __future__ import annotations

import logging

from ..report.options import AVAILABLE_COLS, ConfigurationError, ReportOptions
from .cells import Workspace
from .steps import (
    AggregateStep,
    DeviationStep,
    FilterColsStep,
    FooterStep,
    GroupFilterStep,
    RpsStep,
    SortStep,
    Step,
)

logger = logging.getLogger(__name__)


def build_steps(options: ReportOptions) -> list[Step]:
    """Return the ordered steps selected by resolved options.

    Order matters: later steps read columns and tags written by earlier ones.
    """
    steps: list[Step] = []
    if options.groups:
        steps.append(GroupFilterStep(groups=options.groups))
    if "rps" in options.cols:
        steps.append(RpsStep())
    if options.aggregate in ("run", "subject"):
        steps.append(AggregateStep(functions=options.aggregate_funcs, by=options.aggregate))
    if "deviation" in options.cols:
        steps.append(DeviationStep(column="time", functions=options.deviation_funcs))
    if options.sort:
        steps.append(SortStep(column=options.sort, direction=options.sort_dir))
    steps.append(FilterColsStep(cols=options.cols))
    if options.footer_funcs:
        steps.append(FooterStep(functions=options.footer_funcs))
    return steps


def run_steps(workspace: Workspace, steps: list[Step]) -> None:
    for step in steps:
        logger.debug("Applying %s", type(step).__name__)
        step.step(workspace)
    # Alignment is unconditional and always last.
    for table in workspace:
        table.align()


def _deviation_columns(options: ReportOptions) -> set[str]:
    functions = [f for f, cols in options.deviation_funcs.items() if "time" in cols]
    return {"deviation"} if len(functions) == 1 else {f"deviation_{f}" for f in functions}


def validate_sort_column(workspace: Workspace, options: ReportOptions) -> None:
    """Reject a sort column that no step can produce and no table carries."""
    sort = options.sort
    if sort is None or not len(workspace):
        return
    known = {c for c in AVAILABLE_COLS if c not in ("params", "deviation")} | _deviation_columns(options)
    if sort in known or any(sort in table.columns for table in workspace):
        return
    valid = '", "'.join(sorted(known))
    raise ConfigurationError(f'Invalid sort column: "{sort}". Valid columns are: "{valid}" or a parameter name')


def run_pipeline(workspace: Workspace, options: ReportOptions) -> Workspace:
    validate_sort_column(workspace, options)
    run_steps(workspace, build_steps(options))
    return workspace
