"""Mutable table grid and the transformation steps applied to it.

A result tree is converted into a `Workspace` of `Table`s (one per subject).
Steps mutate the workspace in place; cells carry tags that later steps and the
renderers use to decide how to treat them.
"""

from __future__ import annotations
