"""crate_support.io.layout

Canonical filesystem layout under a crate download directory::

    <crate_root>/
      whitelist-report-YYYY-MM-DD-HHMMSS.csv   (running report)
      whitelist-report.csv                     (final report)
      <crate_name>/
        source/prusti-filter-results.json      (analysis artifact)
        procedures.csv
        supported-procedures.csv
        supported-procedures-with-assertions.csv
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

DEFAULT_ANALYSIS_RELPATH = "source/prusti-filter-results.json"
DEFAULT_REPORT_BASENAME = "whitelist-report"

PROCEDURES_LIST = "procedures.csv"
SUPPORTED_LIST = "supported-procedures.csv"
SUPPORTED_WITH_FEATURE_LIST = "supported-procedures-with-assertions.csv"


@dataclass(frozen=True)
class CratePaths:
    """Canonical artifact paths for one crate."""

    crate_dir: Path
    analysis: Path
    procedures: Path
    supported: Path
    supported_with_feature: Path

    @property
    def name(self) -> str:
        return self.crate_dir.name


def crate_paths(
    crate_dir: Union[str, Path],
    *,
    analysis_relpath: str = DEFAULT_ANALYSIS_RELPATH,
) -> CratePaths:
    d = Path(crate_dir)
    return CratePaths(
        crate_dir=d,
        analysis=d / analysis_relpath,
        procedures=d / PROCEDURES_LIST,
        supported=d / SUPPORTED_LIST,
        supported_with_feature=d / SUPPORTED_WITH_FEATURE_LIST,
    )


def report_paths(
    crate_root: Union[str, Path],
    *,
    basename: str = DEFAULT_REPORT_BASENAME,
    started_at: Optional[datetime] = None,
) -> Tuple[Path, Path]:
    """Return ``(running_report, final_report)`` for a batch started at *started_at*."""
    root = Path(crate_root)
    stamp = (started_at or datetime.now()).strftime("%Y-%m-%d-%H%M%S")
    return root / f"{basename}-{stamp}.csv", root / f"{basename}.csv"
