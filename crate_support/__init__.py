"""crate_support

Core package for the crate support (whitelist) report.

Why this exists
---------------
The report pipeline reads artifacts written by an external analysis tool and
turns them into one CSV row per crate. Two things must stay stable across the
whole batch, no matter which entrypoint drives it:

* domain types (procedures, blacklist, counts, report rows)
* IO/layout rules (where artifacts live, how the report is written)

This package owns both. The ``pipeline`` package composes them; it must not be
imported from here.
"""

from __future__ import annotations
