"""Report options, value formatting and output generators."""

from __future__ import annotations
