"""crate_support.domain.procedure

Typed view of the analysis artifact (``prusti-filter-results.json``).

Artifact shape (only the fields we rely on)::

    {
      "functions": [
        {
          "node_path": "crate::module::function",
          "procedure": {
            "restrictions": [ ... ],   # empty => supported
            "interestings": ["uses assertions", ...]
          }
        }
      ]
    }

``restrictions`` is required. ``interestings`` is tolerated as missing (treated
as empty) since older artifacts did not always emit it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

from crate_support.errors import ParseError


def _as_tuple_of_str(v: Any, *, field_name: str, node_path: str) -> Tuple[str, ...]:
    if not isinstance(v, list):
        raise ParseError(
            f"procedure {node_path!r}: field {field_name!r} must be a list, got {type(v).__name__}"
        )
    return tuple(str(x) for x in v)


@dataclass(frozen=True)
class ProcedureRecord:
    """One analyzed procedure."""

    node_path: str
    restrictions: Tuple[str, ...] = ()
    interestings: Tuple[str, ...] = ()

    @property
    def is_supported(self) -> bool:
        return not self.restrictions

    def has_tag(self, tag: str) -> bool:
        return tag in self.interestings

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> "ProcedureRecord":
        """Parse one ``functions[]`` entry. Raises ParseError on schema drift."""
        if not isinstance(entry, Mapping):
            raise ParseError(f"function entry must be an object, got {type(entry).__name__}")

        node_path = entry.get("node_path")
        if not isinstance(node_path, str) or not node_path:
            raise ParseError("function entry is missing a 'node_path' string")

        procedure = entry.get("procedure")
        if not isinstance(procedure, Mapping):
            raise ParseError(f"procedure {node_path!r}: missing 'procedure' object")

        if "restrictions" not in procedure:
            raise ParseError(f"procedure {node_path!r}: missing 'restrictions'")

        restrictions = _as_tuple_of_str(
            procedure.get("restrictions"), field_name="restrictions", node_path=node_path
        )
        interestings = _as_tuple_of_str(
            procedure.get("interestings", []), field_name="interestings", node_path=node_path
        )
        return cls(node_path=node_path, restrictions=restrictions, interestings=interestings)


@dataclass(frozen=True)
class PackageAnalysisRecord:
    """Full analysis output for one crate, in artifact order."""

    package_name: str
    procedures: Tuple[ProcedureRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.procedures)

    def __iter__(self) -> Iterator[ProcedureRecord]:
        return iter(self.procedures)


@dataclass(frozen=True)
class Blacklist:
    """Global set of fully-qualified identifiers never counted as supported.

    Membership is a set lookup; ``sorted()`` gives the persisted form.
    """

    identifiers: FrozenSet[str] = field(default_factory=frozenset)
    source: Optional[Path] = None

    @classmethod
    def of(cls, identifiers: Iterable[str], *, source: Optional[Path] = None) -> "Blacklist":
        return cls(identifiers=frozenset(identifiers), source=source)

    def __contains__(self, node_path: object) -> bool:
        return node_path in self.identifiers

    def __len__(self) -> int:
        return len(self.identifiers)

    def sorted(self) -> List[str]:
        return sorted(self.identifiers)
