"""pipeline.wiring

Entrypoint setup: load `.env`, merge the whitelist configuration and install
the diagnostic log handler on stderr (kept apart from the CSV report).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from dotenv import load_dotenv

from pipeline.config import ROOT_DIR, WhitelistConfig, load_config

ENV_PATH: Path = ROOT_DIR / ".env"

_HANDLER_NAME = "whitelist-diagnostics"


class DiagnosticFormatter(logging.Formatter):
    """``[-] (2024-01-01 12:00:00) message`` for info, ``[!]`` for warnings and errors."""

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        marker = "[!]" if record.levelno >= logging.WARNING else "[-]"
        line = f"{marker} ({self.formatTime(record, self.datefmt)}) {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", *, stream: Optional[TextIO] = None) -> logging.Handler:
    """Route log records to *stream* (stderr by default), never to the report.

    Re-running replaces the previously installed handler.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(DiagnosticFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    return handler


def build_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    use_dotenv: bool = True,
    configure_log: bool = True,
) -> WhitelistConfig:
    """Build the runtime configuration and set up logging."""

    if use_dotenv:
        load_dotenv(ENV_PATH, override=False)

    cfg = load_config(config_path, overrides=overrides)
    if configure_log:
        configure_logging(cfg.log_level)
    return cfg
