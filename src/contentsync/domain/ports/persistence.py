"""Port for the local table holding the rows to reconcile."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contentsync.domain.types import PublicationStatus, Row


class RemoteIdCondition(StrEnum):
    """Base candidate filter on the remote id column."""

    ANY = "any"
    MISSING = "missing"
    PRESENT = "present"


@dataclass(frozen=True, slots=True)
class RowFilter:
    """Base filter of an operation ANDed with an optional caller equality filter."""

    remote_id: RemoteIdCondition = RemoteIdCondition.ANY
    column: str | None = None
    value: Any = None

    def narrowed(self, column: str | None, value: Any) -> RowFilter:
        return RowFilter(remote_id=self.remote_id, column=column, value=value)


class RowRepository(Protocol):
    def select(self, row_filter: RowFilter) -> Sequence[Row]:
        """Return matching rows ordered by common id, then primary key."""
        ...

    def delete_locale(self, row_filter: RowFilter, locale: str) -> int: ...

    def save_remote_state(
        self,
        keys: Sequence[Any],
        *,
        remote_id: str | None,
        version: int | None,
    ) -> None: ...

    def save_publication(
        self,
        keys: Sequence[Any],
        *,
        version: int,
        status: PublicationStatus,
    ) -> None: ...
