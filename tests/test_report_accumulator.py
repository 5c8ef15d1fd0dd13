from __future__ import annotations

from pathlib import Path

import pytest

from crate_support.domain import REPORT_HEADER, ReportRow, SupportCounts
from pipeline.report import ReportAccumulator, append, finalize, read_rows


def _row(name: str, n: int, s: int, f: int) -> ReportRow:
    return ReportRow(package_name=name, counts=SupportCounts(n, s, f))


def test_append_creates_header_once(tmp_path: Path) -> None:
    report = tmp_path / "whitelist-report-2024-01-01-000000.csv"

    append(report, _row("libc", 10, 4, 1))
    append(report, _row("rand", 3, 3, 0))

    assert report.read_text(encoding="utf-8") == (
        f"{REPORT_HEADER}\nlibc,10,4,1\nrand,3,3,0\n"
    )


def test_partial_report_is_parseable(tmp_path: Path) -> None:
    report = tmp_path / "running.csv"
    acc = ReportAccumulator(report)
    acc.start()
    acc.append(_row("a", 2, 1, 0))

    rows = read_rows(report)
    assert [r.package_name for r in rows] == ["a"]
    assert rows[0].counts == SupportCounts(2, 1, 0)
    assert acc.rows_written == 1


def test_start_truncates_previous_content(tmp_path: Path) -> None:
    report = tmp_path / "running.csv"
    append(report, _row("old", 1, 1, 1))

    ReportAccumulator(report).start()

    assert report.read_text(encoding="utf-8") == f"{REPORT_HEADER}\n"


def test_finalize_overwrites_prior_final_report(tmp_path: Path) -> None:
    report = tmp_path / "running.csv"
    final = tmp_path / "whitelist-report.csv"
    final.write_text("stale\n", encoding="utf-8")

    append(report, _row("a", 1, 0, 0))
    finalize(report, final)

    assert final.read_bytes() == report.read_bytes()
    assert list(tmp_path.glob("*.tmp")) == []


def test_finalize_without_rows_still_has_header(tmp_path: Path) -> None:
    final = tmp_path / "final.csv"
    finalize(tmp_path / "running.csv", final)
    assert final.read_text(encoding="utf-8") == f"{REPORT_HEADER}\n"


def test_names_with_commas_are_quoted(tmp_path: Path) -> None:
    report = tmp_path / "r.csv"
    append(report, _row("weird,name", 1, 1, 0))
    assert read_rows(report)[0].package_name == "weird,name"


def test_read_rows_rejects_foreign_header(tmp_path: Path) -> None:
    report = tmp_path / "r.csv"
    report.write_text("a,b,c,d\nx,1,1,1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_rows(report)
