"""Reconciliation of local row groups with remote entries.

One pass selects candidate rows for an operation, groups them per common id and
drives every group through its state transition independently:

1) select candidate rows (operation filter AND caller filter)
2) group rows per common id
3) apply the operation's remote calls, strictly in order within a group
4) write the resulting entry id, version and status back to the group's rows
"""

from __future__ import annotations

from .engine import ReconciliationEngine
from .filters import base_filter, parse_equality_filter

__all__ = [
    "ReconciliationEngine",
    "base_filter",
    "parse_equality_filter",
]
