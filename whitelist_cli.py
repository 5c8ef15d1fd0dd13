#!/usr/bin/env python3
"""
CLI for the crate support whitelist report.

Reads the analysis artifact of every crate listed in a package list, filters
the procedures against the global blacklist and writes one CSV row per crate.

Usage:
  python whitelist_cli.py <crate/download/dir> <file/with/list/of/crates>
  python whitelist_cli.py /data/crates crates.txt --blacklist crates/global_blacklist.csv
  python whitelist_cli.py /data/crates crates.txt --config whitelist.yaml --dedupe

Exit codes:
  0  report written (individual crates may have been recorded with zero counts)
  1  configuration error (crate dir, package list or blacklist unusable)
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from crate_support.errors import ConfigError
from pipeline.batch import run_from_config
from pipeline.wiring import build_config

logger = logging.getLogger("whitelist_cli")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a support whitelist report for a batch of crates.")

    parser.add_argument("crate_root", help="Folder in which all the crates have been downloaded")
    parser.add_argument("package_list", help="File with the list of crates, one per line")

    parser.add_argument("--config", help="Optional YAML config file")
    parser.add_argument("--blacklist", help="Global blacklist (one fully-qualified identifier per line)")
    parser.add_argument("--report-basename", help="Report file name without extension (default: whitelist-report)")
    parser.add_argument("--feature-tag", help="Interestingness tag counted in the last column (default: 'uses assertions')")
    parser.add_argument(
        "--feature-independent",
        action="store_true",
        help="Count feature-tagged procedures even when they have restrictions",
    )
    parser.add_argument("--dedupe", action="store_true", help="Count each fully-qualified path once")
    parser.add_argument(
        "--no-procedure-lists",
        action="store_true",
        help="Do not write procedures.csv / supported-procedures*.csv next to each crate",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument("--no-dotenv", action="store_true", help="Do not load .env from the repo root")
    return parser.parse_args(argv)


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {
        "crate_root": Path(args.crate_root).resolve(),
        "blacklist_path": args.blacklist,
        "report_basename": args.report_basename,
        "feature_tag": args.feature_tag,
        "log_level": args.log_level,
    }
    if args.feature_independent:
        overrides["feature_requires_supported"] = False
    if args.dedupe:
        overrides["dedupe"] = True
    if args.no_procedure_lists:
        overrides["write_procedure_lists"] = False
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        cfg = build_config(
            config_path=Path(args.config) if args.config else None,
            overrides=overrides_from_args(args),
            use_dotenv=not args.no_dotenv,
        )
        result = run_from_config(cfg, Path(args.package_list).resolve())
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "Wrote %d rows (%d degraded) -> %s",
        len(result.rows),
        len(result.degraded),
        result.final_path,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
