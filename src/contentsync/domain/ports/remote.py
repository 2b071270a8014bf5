"""Port for the remote versioned content store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contentsync.domain.types import EntityGroup, EntryVersion, FieldMapping


class EntryClient(Protocol):
    """Entry operations; every call waits for admission before hitting the network."""

    async def find_entries_by_common_id(self, common_id: Any) -> Sequence[str]: ...

    async def create(self, group: EntityGroup, mapping: FieldMapping) -> EntryVersion: ...

    async def update(
        self,
        entry_id: str,
        group: EntityGroup,
        mapping: FieldMapping,
        version: int,
    ) -> int: ...

    async def publish(self, entry_id: str, version: int) -> int: ...

    async def unpublish(self, entry_id: str, version: int) -> int: ...

    async def delete(self, entry_id: str, version: int) -> None: ...
