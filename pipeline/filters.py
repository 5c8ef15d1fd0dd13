"""pipeline.filters

Filter engine: reduce one crate's procedures to support counts.

Three path lists are derived from the procedure list:

* all procedures
* supported procedures: empty restriction list, not blacklisted
* supported procedures using the feature of interest: tagged with
  ``FilterOptions.feature_tag``, not blacklisted, and (when
  ``feature_requires_supported`` is set) with an empty restriction list

Blacklist exclusion is a set difference (``candidates - blacklist``). By
default counts are raw: a path listed twice in the artifact is counted twice.

Everything here is pure; the blacklist is passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from crate_support.domain import Blacklist, ProcedureRecord, SupportCounts

DEFAULT_FEATURE_TAG = "uses assertions"


@dataclass(frozen=True)
class FilterOptions:
    """Knobs for the filter engine.

    feature_requires_supported:
        True: a procedure counts towards the feature column only if it is also
        supported (empty restriction list). False: the feature-tagged
        procedures are diffed against the blacklist on their own, so a
        restricted but tagged procedure still counts.
        The default keeps the feature column a subset of the supported column,
        matching how the whitelist CSVs have been generated so far.
    dedupe:
        Count each fully-qualified path once.
    """

    feature_tag: str = DEFAULT_FEATURE_TAG
    feature_requires_supported: bool = True
    dedupe: bool = False


@dataclass(frozen=True)
class SupportSelection:
    """The three path lists behind a :class:`SupportCounts`."""

    procedures: List[str] = field(default_factory=list)
    supported: List[str] = field(default_factory=list)
    supported_with_feature: List[str] = field(default_factory=list)

    def counts(self) -> SupportCounts:
        return SupportCounts(
            procedures=len(self.procedures),
            supported=len(self.supported),
            supported_with_feature=len(self.supported_with_feature),
        )


def subtract_blacklist(
    paths: Sequence[str],
    blacklist: Blacklist,
    *,
    dedupe: bool = False,
) -> List[str]:
    """Return the paths of *paths* that are not in *blacklist*.

    With ``dedupe`` the result is the sorted set difference. Without it the
    input order and multiplicity are kept.
    """
    kept = set(paths) - blacklist.identifiers
    if dedupe:
        return sorted(kept)
    return [p for p in paths if p in kept]


def _paths(procedures: Iterable[ProcedureRecord]) -> List[str]:
    return [p.node_path for p in procedures]


def select(
    procedures: Sequence[ProcedureRecord],
    blacklist: Blacklist,
    options: FilterOptions = FilterOptions(),
) -> SupportSelection:
    all_paths = _paths(procedures)
    if options.dedupe:
        all_paths = sorted(set(all_paths))

    supported_candidates = _paths(p for p in procedures if p.is_supported)

    if options.feature_requires_supported:
        feature_candidates = _paths(
            p for p in procedures if p.is_supported and p.has_tag(options.feature_tag)
        )
    else:
        feature_candidates = _paths(p for p in procedures if p.has_tag(options.feature_tag))

    return SupportSelection(
        procedures=all_paths,
        supported=subtract_blacklist(supported_candidates, blacklist, dedupe=options.dedupe),
        supported_with_feature=subtract_blacklist(
            feature_candidates, blacklist, dedupe=options.dedupe
        ),
    )


def compute(
    procedures: Sequence[ProcedureRecord],
    blacklist: Blacklist,
    options: FilterOptions = FilterOptions(),
) -> SupportCounts:
    """Return ``(all, supported, supported_with_feature)`` counts."""
    return select(procedures, blacklist, options).counts()
