"""Immutable benchmark result tree and its XML persistence.

The tree (suite -> benchmark -> subject -> iteration set -> iteration) is
produced by an external execution subsystem and is only ever read here.
"""

from __future__ import annotations
