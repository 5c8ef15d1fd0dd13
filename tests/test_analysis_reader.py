from __future__ import annotations

import json
from pathlib import Path

import pytest

from crate_support.domain import ProcedureRecord
from crate_support.errors import NotFoundError, ParseError
from pipeline.reader import read_package


def _write_artifact(crate_dir: Path, payload) -> Path:
    src = crate_dir / "source"
    src.mkdir(parents=True, exist_ok=True)
    p = src / "prusti-filter-results.json"
    p.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return p


def _fn(path: str, restrictions=(), interestings=()) -> dict:
    return {
        "node_path": path,
        "procedure": {"restrictions": list(restrictions), "interestings": list(interestings)},
    }


def test_read_package_keeps_artifact_order(tmp_path: Path) -> None:
    crate = tmp_path / "serde"
    _write_artifact(
        crate,
        {
            "functions": [
                _fn("serde::b", interestings=["uses assertions"]),
                _fn("serde::a", restrictions=["uses unsafe"]),
            ]
        },
    )

    record = read_package(crate)

    assert record.package_name == "serde"
    assert [p.node_path for p in record] == ["serde::b", "serde::a"]
    assert record.procedures[0].is_supported
    assert record.procedures[0].has_tag("uses assertions")
    assert not record.procedures[1].is_supported


def test_empty_function_list(tmp_path: Path) -> None:
    crate = tmp_path / "empty"
    _write_artifact(crate, {"functions": []})
    assert len(read_package(crate)) == 0


def test_missing_artifact_raises_not_found(tmp_path: Path) -> None:
    crate = tmp_path / "ghost"
    crate.mkdir()
    with pytest.raises(NotFoundError) as ei:
        read_package(crate)
    assert ei.value.package_name == "ghost"
    assert ei.value.path == crate / "source" / "prusti-filter-results.json"


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[]",
        {"functions": {"a": 1}},
        {"other": []},
        {"functions": [{"procedure": {"restrictions": []}}]},
        {"functions": [{"node_path": "x::y"}]},
        {"functions": [{"node_path": "x::y", "procedure": {"interestings": []}}]},
        {"functions": [{"node_path": "x::y", "procedure": {"restrictions": "none"}}]},
    ],
)
def test_malformed_artifact_raises_parse_error(tmp_path: Path, payload) -> None:
    crate = tmp_path / "broken"
    _write_artifact(crate, payload)
    with pytest.raises(ParseError) as ei:
        read_package(crate)
    assert ei.value.package_name == "broken"


def test_missing_interestings_is_empty() -> None:
    rec = ProcedureRecord.from_dict({"node_path": "a::b", "procedure": {"restrictions": []}})
    assert rec.interestings == ()
    assert rec.is_supported


def test_custom_artifact_relpath(tmp_path: Path) -> None:
    crate = tmp_path / "c"
    (crate / "out").mkdir(parents=True)
    (crate / "out" / "results.json").write_text(json.dumps({"functions": [_fn("c::f")]}))
    assert len(read_package(crate, analysis_relpath="out/results.json")) == 1


def test_deeply_nested_artifact_is_parse_error(tmp_path: Path) -> None:
    crate = tmp_path / "deep"
    _write_artifact(crate, "[" * 200000)
    with pytest.raises(ParseError) as ei:
        read_package(crate)
    assert ei.value.package_name == "deep"
