from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from crate_support.errors import ConfigError
from pipeline.config import DEFAULT_BLACKLIST_PATH, WhitelistConfig, load_config
from pipeline.filters import FilterOptions
from pipeline.wiring import configure_logging


def test_defaults_match_crate_download_layout() -> None:
    cfg = load_config(environ={})
    assert cfg.crate_root is None
    assert cfg.blacklist_path == DEFAULT_BLACKLIST_PATH
    assert cfg.analysis_relpath == "source/prusti-filter-results.json"
    assert cfg.report_basename == "whitelist-report"
    assert cfg.filter_options() == FilterOptions()


def test_precedence_yaml_env_overrides(tmp_path: Path) -> None:
    cfg_path = tmp_path / "whitelist.yaml"
    cfg_path.write_text(
        "crate_root: crates\n"
        "blacklist_path: bl.csv\n"
        "feature_tag: uses panics\n"
        "dedupe: true\n",
        encoding="utf-8",
    )

    cfg = load_config(
        cfg_path,
        environ={"WHITELIST_FEATURE_TAG": "uses loops", "WHITELIST_FEATURE_REQUIRES_SUPPORTED": "no"},
        overrides={"dedupe": False, "log_level": "debug"},
    )

    assert cfg.crate_root == tmp_path.resolve() / "crates"
    assert cfg.blacklist_path == tmp_path.resolve() / "bl.csv"
    assert cfg.feature_tag == "uses loops"
    assert cfg.feature_requires_supported is False
    assert cfg.dedupe is False
    assert cfg.log_level == "DEBUG"


def test_yaml_must_be_a_mapping(tmp_path: Path) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p, environ={})


def test_unknown_key_and_bad_bool(tmp_path: Path) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text("colour: blue\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p, environ={})
    with pytest.raises(ConfigError):
        load_config(environ={"WHITELIST_DEDUPE": "maybe"})


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml", environ={})


def test_with_overrides_skips_none() -> None:
    cfg = WhitelistConfig(feature_tag="x").with_overrides({"feature_tag": None, "dedupe": "1"})
    assert cfg.feature_tag == "x"
    assert cfg.dedupe is True


def test_diagnostic_line_format() -> None:
    stream = io.StringIO()
    handler = configure_logging("INFO", stream=stream)
    try:
        log = logging.getLogger("pipeline.test")
        log.info("=== Crate 'a' ===")
        log.error("Crate 'b': broken")
    finally:
        logging.getLogger().removeHandler(handler)

    lines = stream.getvalue().splitlines()
    assert lines[0].startswith("[-] (") and lines[0].endswith(") === Crate 'a' ===")
    assert lines[1].startswith("[!] (") and lines[1].endswith(") Crate 'b': broken")
