"""crate_support.domain

Domain objects that form the *contract* between pipeline stages.

Key idea
--------
The analysis tool writes one JSON artifact per crate. The pipeline reads it
into immutable records, filters them against the global blacklist and reduces
them to counts. Nothing downstream of the reader touches raw dicts.
"""

from __future__ import annotations

from .procedure import Blacklist, PackageAnalysisRecord, ProcedureRecord
from .report import REPORT_FIELDNAMES, REPORT_HEADER, ReportRow, SupportCounts

__all__ = [
    "Blacklist",
    "PackageAnalysisRecord",
    "ProcedureRecord",
    "REPORT_FIELDNAMES",
    "REPORT_HEADER",
    "ReportRow",
    "SupportCounts",
]
