"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import RowFilter, RowRepository
from .remote import EntryClient

__all__ = [
    "EntryClient",
    "RowFilter",
    "RowRepository",
]
