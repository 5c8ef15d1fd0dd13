"""pipeline.blacklist

Global blacklist store.

The blacklist file holds one fully-qualified identifier per line, in any
order. It is loaded once per batch and passed explicitly to every per-crate
computation; there is no module-level blacklist state.

Lines are normalized before use:

* surrounding whitespace is stripped
* blank lines and ``#`` comments are skipped
* one surrounding pair of double quotes is removed, so lists produced by
  ``jq '.functions[] | .node_path'`` (JSON-quoted) match parsed node paths
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from crate_support.domain import Blacklist
from crate_support.errors import ConfigError
from crate_support.io.fs import write_lines_atomic

logger = logging.getLogger(__name__)


def normalize_identifier(raw: str) -> Optional[str]:
    """Return the identifier on *raw*, or None for blank/comment lines."""
    line = raw.strip()
    if not line or line.startswith("#"):
        return None
    if len(line) >= 2 and line.startswith('"') and line.endswith('"'):
        line = line[1:-1].strip()
    return line or None


def parse_blacklist(lines: Iterable[str], *, source: Optional[Path] = None) -> Blacklist:
    idents = (normalize_identifier(ln) for ln in lines)
    return Blacklist.of((i for i in idents if i), source=source)


def load_blacklist(path: Path) -> Blacklist:
    """Load the global blacklist from *path*.

    Raises ConfigError if the file is missing or unreadable.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Could not read file '{p}' (global blacklist)")
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read file '{p}' (global blacklist): {e}") from e

    blacklist = parse_blacklist(text.splitlines(), source=p)
    logger.debug("Loaded %d blacklisted identifiers from %s", len(blacklist), p)
    return blacklist


def write_blacklist(path: Path, blacklist: Blacklist) -> Path:
    """Persist *blacklist* sorted, one identifier per line."""
    p = Path(path)
    write_lines_atomic(p, blacklist.sorted())
    return p
