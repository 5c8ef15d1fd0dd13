"""crate_support.domain.report

Report row types. The CSV header is part of the public contract: downstream
spreadsheets key on these exact column names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

REPORT_FIELDNAMES: Sequence[str] = (
    "Crate name",
    "Number of procedures",
    "Number of supported procedures",
    "Number of supported procedures using assertions",
)

REPORT_HEADER = ",".join(REPORT_FIELDNAMES)


@dataclass(frozen=True)
class SupportCounts:
    procedures: int = 0
    supported: int = 0
    supported_with_feature: int = 0

    def __post_init__(self) -> None:
        for name in ("procedures", "supported", "supported_with_feature"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    @classmethod
    def zero(cls) -> "SupportCounts":
        return cls()


@dataclass(frozen=True)
class ReportRow:
    """One line of the report.

    ``degraded`` marks rows whose zero counts come from a read failure rather
    than from an empty crate. It is not persisted.
    """

    package_name: str
    counts: SupportCounts = field(default_factory=SupportCounts)
    degraded: bool = False

    def to_csv_fields(self) -> List[str]:
        return [
            self.package_name,
            str(self.counts.procedures),
            str(self.counts.supported),
            str(self.counts.supported_with_feature),
        ]

    @classmethod
    def from_csv_fields(cls, fields: Sequence[str]) -> "ReportRow":
        if len(fields) != len(REPORT_FIELDNAMES):
            raise ValueError(f"expected {len(REPORT_FIELDNAMES)} fields, got {len(fields)}")
        name, n, s, f = fields
        return cls(
            package_name=name,
            counts=SupportCounts(procedures=int(n), supported=int(s), supported_with_feature=int(f)),
        )
