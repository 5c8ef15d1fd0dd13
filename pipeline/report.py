"""pipeline.report

Report accumulator.

The running report is append-only: the header is written when the file is
first created, then one row per crate. ``finalize`` copies the running report
over the stable final report.

A batch interrupted after N crates leaves the header plus exactly N rows.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from crate_support.domain import REPORT_FIELDNAMES, REPORT_HEADER, ReportRow
from crate_support.io.fs import (
    append_csv_row,
    copy_file_atomic,
    read_csv_rows,
    write_text_atomic,
)

logger = logging.getLogger(__name__)


class ReportAccumulator:
    """Append rows to one running report file."""

    def __init__(self, report_path: Path) -> None:
        self.report_path = Path(report_path)
        self.rows_written = 0

    def start(self) -> None:
        """Start a fresh report holding only the header."""
        write_text_atomic(self.report_path, REPORT_HEADER + "\n")
        self.rows_written = 0

    def ensure_header(self) -> None:
        """Create the report with only its header if it does not exist yet."""
        p = self.report_path
        if p.exists() and p.stat().st_size > 0:
            return
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8", newline="") as f:
            f.write(REPORT_HEADER + "\n")

    def append(self, row: ReportRow) -> None:
        append_csv_row(self.report_path, row.to_csv_fields(), header=REPORT_FIELDNAMES)
        self.rows_written += 1

    def finalize(self, final_path: Path) -> Path:
        self.ensure_header()
        final_path = Path(final_path)
        copy_file_atomic(self.report_path, final_path)
        logger.debug("Copied %s -> %s", self.report_path, final_path)
        return final_path


def append(report_path: Path, row: ReportRow) -> None:
    ReportAccumulator(report_path).append(row)


def finalize(report_path: Path, final_path: Path) -> Path:
    return ReportAccumulator(report_path).finalize(final_path)


def read_rows(report_path: Path) -> List[ReportRow]:
    """Parse a report back into rows (header checked and dropped)."""
    rows = read_csv_rows(Path(report_path))
    if not rows:
        return []
    header, body = rows[0], rows[1:]
    if tuple(header) != tuple(REPORT_FIELDNAMES):
        raise ValueError(f"Unexpected report header in {report_path}: {header}")
    return [ReportRow.from_csv_fields(r) for r in body]
