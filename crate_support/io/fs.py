"""crate_support.io.fs

Atomic and append-safe filesystem writers.

Two write disciplines are used by the report pipeline:

* whole-file artifacts (per-crate procedure lists, the final report) are
  written to a temp file and moved into place with ``os.replace`` so a reader
  never sees a half-written file;
* the running report grows one row at a time; each row is written in a single
  call and fsynced, so an interrupted batch leaves only complete rows.
"""

from __future__ import annotations

import csv
import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence


def _atomic_write_text(
    path: Path,
    write_fn,
    *,
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> None:
    """Write a file atomically by writing to a temp file and os.replace()."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline=newline) as f:
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(tmp_path, p)
    finally:
        # If os.replace fails, best-effort cleanup of the temp file.
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write UTF-8 text atomically."""

    def _write(f) -> None:
        f.write(text)

    _atomic_write_text(Path(path), _write, encoding=encoding)


def write_lines_atomic(path: Path, lines: Iterable[str], *, encoding: str = "utf-8") -> None:
    """Write one item per line (trailing newline on every line)."""

    def _write(f) -> None:
        for line in lines:
            f.write(f"{line}\n")

    _atomic_write_text(Path(path), _write, encoding=encoding)


def append_csv_row(
    path: Path,
    fields: Sequence[str],
    *,
    header: Optional[Sequence[str]] = None,
    encoding: str = "utf-8",
) -> None:
    """Append one CSV row, creating the file with *header* first if needed.

    The row is written in one call and fsynced before returning.
    """

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    needs_header = header is not None and (not p.exists() or p.stat().st_size == 0)

    # newline="" is the recommended way to write CSV files.
    with p.open("a", encoding=encoding, newline="") as f:
        w = csv.writer(f, lineterminator="\n")
        if needs_header:
            w.writerow(list(header))
        w.writerow(list(fields))
        f.flush()
        os.fsync(f.fileno())


def read_csv_rows(path: Path, *, encoding: str = "utf-8") -> List[List[str]]:
    """Read all CSV rows (header included)."""

    with Path(path).open("r", encoding=encoding, newline="") as f:
        return [row for row in csv.reader(f)]


def copy_file_atomic(src: Path, dst: Path) -> None:
    """Copy *src* over *dst*, replacing any prior file atomically."""

    src = Path(src)
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{dst.name}.", suffix=".tmp", dir=str(dst.parent))
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        shutil.copyfile(src, tmp_path)
        os.replace(tmp_path, dst)
    finally:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


def read_json(path: Path, *, encoding: str = "utf-8") -> Any:
    """Read JSON from disk."""

    with Path(path).open("r", encoding=encoding) as f:
        return json.load(f)


def read_lines(path: Path, *, encoding: str = "utf-8") -> List[str]:
    """Read a text file into stripped, non-empty lines."""

    with Path(path).open("r", encoding=encoding) as f:
        return [ln.strip() for ln in f if ln.strip()]
