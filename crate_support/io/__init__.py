"""crate_support.io

Filesystem contracts and IO helpers.

Design principle
----------------
Where artifacts live under a crate download directory, and how the report is
written, is a public contract shared by every entrypoint. This package keeps
those rules in one place.
"""

from __future__ import annotations

from .layout import (
    DEFAULT_ANALYSIS_RELPATH,
    DEFAULT_REPORT_BASENAME,
    CratePaths,
    crate_paths,
    report_paths,
)

__all__ = [
    "DEFAULT_ANALYSIS_RELPATH",
    "DEFAULT_REPORT_BASENAME",
    "CratePaths",
    "crate_paths",
    "report_paths",
]
