"""pipeline.reader

Package analysis reader: turn one crate's analysis artifact into a
:class:`~crate_support.domain.PackageAnalysisRecord`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from crate_support.domain import PackageAnalysisRecord, ProcedureRecord
from crate_support.errors import NotFoundError, ParseError
from crate_support.io.fs import read_json
from crate_support.io.layout import DEFAULT_ANALYSIS_RELPATH, crate_paths


def read_package(
    package_dir: Path,
    *,
    analysis_relpath: str = DEFAULT_ANALYSIS_RELPATH,
) -> PackageAnalysisRecord:
    """Read and validate the analysis artifact under *package_dir*.

    Raises
    ------
    NotFoundError
        The artifact does not exist.
    ParseError
        The artifact is unreadable, is not valid JSON, or does not match the
        expected schema (``functions`` list of procedure entries).
    """
    paths = crate_paths(package_dir, analysis_relpath=analysis_relpath)
    name = paths.name
    artifact = paths.analysis

    if not artifact.is_file():
        raise NotFoundError(
            f"Analysis artifact not found: {artifact}", package_name=name, path=artifact
        )

    try:
        data = read_json(artifact)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON in {artifact}: {e}", package_name=name, path=artifact
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(
            f"Could not read {artifact}: {e}", package_name=name, path=artifact
        ) from e
    except (RecursionError, ValueError) as e:
        # Nesting too deep for the decoder, or out-of-range literals.
        raise ParseError(
            f"Could not decode {artifact}: {e}", package_name=name, path=artifact
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object in {artifact}, got {type(data).__name__}",
            package_name=name,
            path=artifact,
        )

    functions = data.get("functions")
    if not isinstance(functions, list):
        raise ParseError(
            f"Missing 'functions' list in {artifact}", package_name=name, path=artifact
        )

    procedures: List[ProcedureRecord] = []
    for idx, entry in enumerate(functions):
        try:
            procedures.append(ProcedureRecord.from_dict(entry))
        except ParseError as e:
            raise ParseError(
                f"{artifact}: functions[{idx}]: {e}", package_name=name, path=artifact
            ) from e

    return PackageAnalysisRecord(package_name=name, procedures=tuple(procedures))
