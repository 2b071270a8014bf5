"""Public interface for the Contentful adapter."""

from __future__ import annotations

from .client import MANAGEMENT_CONTENT_TYPE, ContentfulClient
from .schema import (
    ContentTypeCollection,
    ContentTypeField,
    EntryCollection,
    EntryPayload,
    EntrySys,
)

__all__ = [
    "MANAGEMENT_CONTENT_TYPE",
    "ContentTypeCollection",
    "ContentTypeField",
    "ContentfulClient",
    "EntryCollection",
    "EntryPayload",
    "EntrySys",
]
