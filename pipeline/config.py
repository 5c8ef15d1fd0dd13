"""pipeline.config

Configuration for a whitelist report batch.

Sources, lowest precedence first:

1. dataclass defaults
2. optional YAML file (mapping of field name -> value)
3. environment variables (``WHITELIST_*``, usually from ``.env``)
4. explicit overrides (CLI flags)

YAML example::

    crate_root: /data/crates
    blacklist_path: crates/global_blacklist.csv
    feature_tag: uses assertions
    feature_requires_supported: true
    dedupe: false
    write_procedure_lists: true

Relative paths in the YAML file are resolved against the file's directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from crate_support.errors import ConfigError
from crate_support.io.layout import DEFAULT_ANALYSIS_RELPATH, DEFAULT_REPORT_BASENAME
from pipeline.filters import DEFAULT_FEATURE_TAG, FilterOptions

# Repo root = parent of pipeline/
ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_BLACKLIST_PATH = ROOT_DIR / "crates" / "global_blacklist.csv"

ENV_PREFIX = "WHITELIST_"

_PATH_FIELDS = {"crate_root", "blacklist_path"}
_BOOL_FIELDS = {"feature_requires_supported", "dedupe", "write_procedure_lists"}

_ENV_FIELDS = {
    "CRATE_ROOT": "crate_root",
    "BLACKLIST": "blacklist_path",
    "FEATURE_TAG": "feature_tag",
    "FEATURE_REQUIRES_SUPPORTED": "feature_requires_supported",
    "DEDUPE": "dedupe",
    "WRITE_PROCEDURE_LISTS": "write_procedure_lists",
    "LOG_LEVEL": "log_level",
}


@dataclass(frozen=True)
class WhitelistConfig:
    crate_root: Optional[Path] = None
    blacklist_path: Path = DEFAULT_BLACKLIST_PATH
    analysis_relpath: str = DEFAULT_ANALYSIS_RELPATH
    report_basename: str = DEFAULT_REPORT_BASENAME
    feature_tag: str = DEFAULT_FEATURE_TAG
    feature_requires_supported: bool = True
    dedupe: bool = False
    write_procedure_lists: bool = True
    log_level: str = "INFO"

    def filter_options(self) -> FilterOptions:
        return FilterOptions(
            feature_tag=self.feature_tag,
            feature_requires_supported=self.feature_requires_supported,
            dedupe=self.dedupe,
        )

    def with_overrides(self, overrides: Mapping[str, Any]) -> "WhitelistConfig":
        return replace(self, **_coerce(overrides))


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in {"1", "true", "yes", "on"}:
        return True
    if s in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _coerce(raw: Mapping[str, Any], *, base_dir: Optional[Path] = None) -> Dict[str, Any]:
    known = {f.name for f in fields(WhitelistConfig)}
    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if key not in known:
            raise ConfigError(f"Unknown config key: {key!r}")
        if key in _PATH_FIELDS:
            p = Path(str(value)).expanduser()
            if base_dir is not None and not p.is_absolute():
                p = base_dir / p
            out[key] = p
        elif key in _BOOL_FIELDS:
            out[key] = _parse_bool(key, value)
        elif key == "log_level":
            out[key] = str(value).upper()
        else:
            out[key] = str(value)
    return out


def load_yaml_config(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Config file not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not load config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {p} must be a mapping, got {type(raw).__name__}")
    return _coerce(raw, base_dir=p.parent.resolve())


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        value = env.get(ENV_PREFIX + suffix)
        if value is not None and value.strip():
            raw[field_name] = value.strip()
    return _coerce(raw)


def load_config(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> WhitelistConfig:
    """Merge defaults, YAML, environment and explicit overrides."""
    cfg = WhitelistConfig()
    if path is not None:
        cfg = replace(cfg, **load_yaml_config(path))
    cfg = replace(cfg, **env_overrides(environ))
    if overrides:
        cfg = cfg.with_overrides(overrides)
    return cfg
