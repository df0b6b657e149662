from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, TextIO

from ..result.model import Suite
from ..tabular.cells import Workspace
from ..tabular.converter import suite_to_workspace
from ..tabular.pipeline import run_pipeline
from .options import ReportOptions, resolve_options

logger = logging.getLogger(__name__)


class BaseTabularReportGenerator(ABC):
    """Generate a report from a table workspace with computed values.

    Options are resolved before anything else so that configuration errors
    surface before conversion or any pipeline step runs.
    """

    name: str = ""

    def build_workspace(self, suite: Suite, options: ReportOptions) -> Workspace:
        workspace = suite_to_workspace(suite)
        return run_pipeline(workspace, options)

    def generate(self, suite: Suite, output: TextIO, config: Mapping[str, Any] | ReportOptions | None = None) -> None:
        options = config if isinstance(config, ReportOptions) else resolve_options(config)
        workspace = self.build_workspace(suite, options)
        logger.debug("Rendering %d table(s) with %s", len(workspace), type(self).__name__)
        self.render(workspace, output, options)

    @abstractmethod
    def render(self, workspace: Workspace, output: TextIO, options: ReportOptions) -> None:
        raise NotImplementedError
