"""crate_support.errors

Error taxonomy for the report pipeline.

* ``ConfigError``   - top-level inputs are missing or unreadable (fatal)
* ``NotFoundError`` - one crate has no analysis artifact (recovered)
* ``ParseError``    - one crate's artifact is malformed (recovered)

Per-crate errors carry the crate name and artifact path so the batch driver can
log them with context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class WhitelistError(Exception):
    """Base class for all report pipeline errors."""


class ConfigError(WhitelistError):
    """A configuration-level input could not be used."""


class PackageError(WhitelistError):
    """A single crate could not be processed."""

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__(message)
        self.package_name = package_name
        self.path = path


class NotFoundError(PackageError):
    """The analysis artifact for a crate does not exist."""


class ParseError(PackageError):
    """The analysis artifact exists but could not be parsed."""


__all__ = [
    "WhitelistError",
    "ConfigError",
    "PackageError",
    "NotFoundError",
    "ParseError",
]
