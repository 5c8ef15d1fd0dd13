"""pipeline.batch

Batch driver: generate the whitelist report for a list of crates.

Flow per crate, strictly in input order::

    Pending -> Reading -> Filtering -> Recorded            (success)
    Pending -> Reading -> Failed    -> Recorded(degraded)  (NotFoundError / ParseError)

Every requested crate yields exactly one report row. A crate whose artifact is
missing or malformed is logged and recorded with zero counts; it never aborts
the batch. Only configuration errors (crate root, blacklist, package list)
propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from crate_support.domain import Blacklist, ReportRow, SupportCounts
from crate_support.errors import ConfigError, NotFoundError, PackageError, ParseError
from crate_support.io.fs import read_lines, write_lines_atomic
from crate_support.io.layout import DEFAULT_ANALYSIS_RELPATH, crate_paths, report_paths
from pipeline.blacklist import load_blacklist
from pipeline.config import WhitelistConfig
from pipeline.filters import FilterOptions, SupportSelection, select
from pipeline.reader import read_package
from pipeline.report import ReportAccumulator

logger = logging.getLogger(__name__)


class PackageState(str, Enum):
    PENDING = "pending"
    READING = "reading"
    FILTERING = "filtering"
    FAILED = "failed"
    RECORDED = "recorded"


class BatchState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINALIZED = "finalized"


@dataclass
class PackageOutcome:
    name: str
    state: PackageState = PackageState.PENDING
    row: Optional[ReportRow] = None
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.row is not None and self.row.degraded


@dataclass
class BatchResult:
    report_path: Path
    final_path: Path
    state: BatchState = BatchState.NOT_STARTED
    outcomes: List[PackageOutcome] = field(default_factory=list)

    @property
    def rows(self) -> List[ReportRow]:
        return [o.row for o in self.outcomes if o.row is not None]

    @property
    def degraded(self) -> List[PackageOutcome]:
        return [o for o in self.outcomes if o.degraded]


def read_package_list(path: Path) -> List[str]:
    """Read crate names, one per line, top to bottom."""
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Could not read file '{p}' (package list)")
    try:
        return read_lines(p)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read file '{p}' (package list): {e}") from e


def _write_procedure_lists(crate_dir: Path, selection: SupportSelection) -> None:
    """Write the three path lists next to the crate. An empty selection truncates them."""
    paths = crate_paths(crate_dir)
    write_lines_atomic(paths.procedures, selection.procedures)
    write_lines_atomic(paths.supported, selection.supported)
    write_lines_atomic(paths.supported_with_feature, selection.supported_with_feature)


def _try_write_procedure_lists(name: str, crate_dir: Path, selection: SupportSelection) -> None:
    try:
        _write_procedure_lists(crate_dir, selection)
    except OSError as e:
        logger.warning("Crate '%s': could not write procedure lists: %s", name, e)


def process_package(
    name: str,
    crate_root: Path,
    blacklist: Blacklist,
    *,
    options: FilterOptions,
    analysis_relpath: str = DEFAULT_ANALYSIS_RELPATH,
    write_procedure_lists: bool = False,
) -> PackageOutcome:
    """Read and filter one crate. Per-crate errors become a degraded row."""
    outcome = PackageOutcome(name=name)
    crate_dir = Path(crate_root) / name

    failure: Optional[PackageError] = None
    outcome.state = PackageState.READING
    try:
        record = read_package(crate_dir, analysis_relpath=analysis_relpath)
    except NotFoundError as e:
        logger.error("Crate '%s': analysis artifact not found: %s", name, e.path or e)
        failure = e
    except ParseError as e:
        logger.error("Crate '%s': parse error in analysis artifact: %s", name, e)
        failure = e

    if failure is not None:
        # Stale lists from an earlier run must not outlive a zero row.
        if write_procedure_lists and crate_dir.is_dir():
            _try_write_procedure_lists(name, crate_dir, SupportSelection())
        return _degraded(outcome, failure)

    outcome.state = PackageState.FILTERING
    selection = select(record.procedures, blacklist, options)
    counts = selection.counts()

    if write_procedure_lists:
        _try_write_procedure_lists(name, crate_dir, selection)

    logger.info("Number of procedures: %d", counts.procedures)
    logger.info("Number of supported procedures: %d", counts.supported)
    logger.info(
        "Number of supported procedures with %s: %d",
        options.feature_tag,
        counts.supported_with_feature,
    )

    outcome.row = ReportRow(package_name=name, counts=counts)
    outcome.state = PackageState.RECORDED
    return outcome


def _degraded(outcome: PackageOutcome, error: PackageError) -> PackageOutcome:
    outcome.state = PackageState.FAILED
    outcome.error = str(error)
    outcome.row = ReportRow(package_name=outcome.name, counts=SupportCounts.zero(), degraded=True)
    outcome.state = PackageState.RECORDED
    return outcome


def run(
    package_names: Sequence[str],
    crate_root: Path,
    blacklist_path: Path,
    report_path: Path,
    *,
    final_path: Optional[Path] = None,
    options: Optional[FilterOptions] = None,
    analysis_relpath: str = DEFAULT_ANALYSIS_RELPATH,
    write_procedure_lists: bool = False,
) -> BatchResult:
    """Process every crate in *package_names* and finalize the report.

    Parameters
    ----------
    report_path:
        Running report. Started fresh (header only) and appended to after
        each crate.
    final_path:
        Stable report location; defaults to ``<crate_root>/whitelist-report.csv``.

    Raises
    ------
    ConfigError
        *crate_root* is not a directory or the blacklist cannot be read.
    """
    crate_root = Path(crate_root)
    if not crate_root.is_dir():
        raise ConfigError(f"Crate download directory does not exist: '{crate_root}'")

    blacklist = load_blacklist(blacklist_path)
    options = options or FilterOptions()
    if final_path is None:
        _, final_path = report_paths(crate_root)

    result = BatchResult(report_path=Path(report_path), final_path=Path(final_path))
    accumulator = ReportAccumulator(result.report_path)
    accumulator.start()
    result.state = BatchState.RUNNING

    logger.info("Report: '%s'", result.report_path)
    logger.info("Generate whitelist for %d crates", len(package_names))

    for name in package_names:
        logger.info("=== Crate '%s' ===", name)
        outcome = process_package(
            name,
            crate_root,
            blacklist,
            options=options,
            analysis_relpath=analysis_relpath,
            write_procedure_lists=write_procedure_lists,
        )
        accumulator.append(outcome.row)
        result.outcomes.append(outcome)

    accumulator.finalize(result.final_path)
    result.state = BatchState.FINALIZED

    if result.degraded:
        logger.warning(
            "%d of %d crates recorded with zero counts: %s",
            len(result.degraded),
            len(result.outcomes),
            ", ".join(o.name for o in result.degraded),
        )
    logger.info("Final report: '%s'", result.final_path)
    return result


def run_from_config(
    config: WhitelistConfig,
    package_list_path: Path,
    *,
    started_at: Optional[datetime] = None,
) -> BatchResult:
    """Resolve paths from *config* and run the batch."""
    if config.crate_root is None:
        raise ConfigError("No crate download directory configured")

    logger.info("=== Generation of whitelists ===")
    package_names = read_package_list(package_list_path)
    report_path, final_path = report_paths(
        config.crate_root, basename=config.report_basename, started_at=started_at
    )
    return run(
        package_names,
        config.crate_root,
        config.blacklist_path,
        report_path,
        final_path=final_path,
        options=config.filter_options(),
        analysis_relpath=config.analysis_relpath,
        write_procedure_lists=config.write_procedure_lists,
    )
