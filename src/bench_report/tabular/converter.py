from __future__ import annotations

import logging

from ..result.model import MEMORY_STATS, Subject, Suite
from .cells import Row, Table, Tag, Workspace

logger = logging.getLogger(__name__)

LEADING_COLUMNS: tuple[str, ...] = ("class", "subject", "description", "group", "run", "iter")
FIXED_COLUMNS: frozenset[str] = frozenset((*LEADING_COLUMNS, "params", "revs", "time", *MEMORY_STATS, "rps", "deviation"))


def parameter_column(name: str) -> str:
    """Column name for a parameter; names clashing with fixed columns get a `param_` prefix."""
    return f"param_{name}" if name in FIXED_COLUMNS else name


def _parameter_names(subject: Subject) -> list[str]:
    names: list[str] = []
    for iter_set in subject.iteration_sets:
        for name in iter_set.parameters:
            if name not in names:
                names.append(name)
    return names


def _memory_columns(subject: Subject) -> list[str]:
    present = {
        stat
        for iter_set in subject.iteration_sets
        for it in iter_set.iterations
        for stat in it.stats
        if stat in MEMORY_STATS
    }
    return [stat for stat in MEMORY_STATS if stat in present]


def subject_to_table(class_name: str, subject: Subject) -> Table:
    param_names = _parameter_names(subject)
    memory_cols = _memory_columns(subject)

    table = Table(
        title=f"{class_name}::{subject.name}",
        description=subject.description,
        attributes={"class": class_name, "subject": subject.name, "groups": list(subject.groups)},
        columns=[*LEADING_COLUMNS, *(parameter_column(n) for n in param_names), "revs", "time", *memory_cols],
    )
    for name in param_names:
        table.families[parameter_column(name)] = "params"

    for run_idx, iter_set in enumerate(subject.iteration_sets):
        for iter_idx, it in enumerate(iter_set.iterations):
            row = Row()
            row.set("class", class_name)
            row.set("subject", subject.name)
            row.set("description", subject.description)
            row.set("group", list(subject.groups))
            row.set("run", run_idx)
            row.set("iter", iter_idx)
            for name in param_names:
                row.set(parameter_column(name), iter_set.parameters.get(name), [Tag.PARAMS])
            row.set("revs", it.revs, [Tag.REVS])
            row.set("time", it.time, [Tag.TIME])
            for stat in memory_cols:
                tags = [Tag.MEMORY, Tag.DIFF] if "diff" in stat else [Tag.MEMORY]
                row.set(stat, it.stats.get(stat), tags)
            table.rows.append(row)

    return table


def suite_to_workspace(suite: Suite) -> Workspace:
    """Build one table per subject, in benchmark then subject order."""
    workspace = Workspace()
    for bench, subject in suite.iter_subjects():
        workspace.tables.append(subject_to_table(bench.class_name, subject))
    logger.debug("Converted suite into %d table(s)", len(workspace))
    return workspace
