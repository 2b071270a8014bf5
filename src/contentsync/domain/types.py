"""Core value types shared by the grouper, the engine and the adapters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class Operation(StrEnum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    PUBLISH = "publish"
    DRAFT = "draft"


class PublicationStatus(StrEnum):
    PUBLISHED = "Published"
    DRAFT = "Draft"


class GroupState(StrEnum):
    """Lifecycle of one entity group during a pass."""

    CANDIDATE = "candidate"
    PROCESSING = "processing"
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


type LocalizedFields = dict[str, dict[str, Any]]


@dataclass(frozen=True, slots=True)
class Row:
    """One table record, reduced to the columns the sync cares about.

    ``values`` holds every column of the record (bookkeeping columns included) so
    mapped content can be looked up by column name.
    """

    key: Any
    common_id: Any
    locale: str | None
    remote_id: str | None = None
    version: str | None = None
    status: PublicationStatus | None = None
    values: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_published(self) -> bool:
        return self.status is PublicationStatus.PUBLISHED


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Column to remote field mapping; blank targets are unmapped stub entries."""

    columns: Mapping[str, str]

    def __post_init__(self) -> None:
        cleaned = {column: target for column, target in self.columns.items() if target.strip()}
        object.__setattr__(self, "columns", MappingProxyType(cleaned))

    def items(self) -> list[tuple[str, str]]:
        return list(self.columns.items())

    def __len__(self) -> int:
        return len(self.columns)


@dataclass(frozen=True, slots=True)
class EntityGroup:
    """All rows (one per locale) that make up one remote entry."""

    rows: tuple[Row, ...]

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError("Entity group must contain at least one row")
        common_id = self.rows[0].common_id
        if any(row.common_id != common_id for row in self.rows):
            raise ValueError("All rows of an entity group must share one common id")

    @property
    def common_id(self) -> Any:
        return self.rows[0].common_id

    @property
    def representative(self) -> Row:
        """Member whose remote id and version stand for the whole group."""

        for row in self.rows:
            if row.remote_id:
                return row
        return self.rows[0]

    @property
    def remote_id(self) -> str | None:
        return self.representative.remote_id

    @property
    def version(self) -> int | None:
        raw = self.representative.version
        if raw is None or not str(raw).strip():
            return None
        return int(str(raw))

    @property
    def keys(self) -> tuple[Any, ...]:
        return tuple(row.key for row in self.rows)

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(row.locale for row in self.rows if row.locale)

    @property
    def any_published(self) -> bool:
        return any(row.is_published for row in self.rows)

    def localized_fields(self, mapping: FieldMapping, *, common_id_field: str) -> LocalizedFields:
        """Union of every mapped column across all rows, keyed field -> locale -> value."""

        fields: LocalizedFields = {common_id_field: {}}
        for row in self.rows:
            if row.locale:
                fields[common_id_field][row.locale] = self.common_id
        for column, field_name in mapping.items():
            per_locale = fields.setdefault(field_name, {})
            for row in self.rows:
                if row.locale:
                    per_locale[row.locale] = row.values.get(column)
        return fields

    def single_locale_fields(
        self,
        mapping: FieldMapping,
        *,
        common_id_field: str,
        locale: str,
    ) -> LocalizedFields:
        """Every mapped field keyed by ``locale`` only, using the row in that locale if any."""

        source = next((row for row in self.rows if row.locale == locale), self.rows[0])
        fields: LocalizedFields = {common_id_field: {locale: self.common_id}}
        for column, field_name in mapping.items():
            fields[field_name] = {locale: source.values.get(column)}
        return fields


@dataclass(frozen=True, slots=True)
class EntryVersion:
    entry_id: str
    version: int


@dataclass(slots=True)
class GroupOutcome:
    common_id: Any
    state: GroupState = GroupState.CANDIDATE
    entry_id: str | None = None
    version: int | None = None
    error: BaseException | None = None
    reason: str | None = None


@dataclass(slots=True)
class ReconciliationResult:
    """Outcome of one reconciliation pass."""

    operation: Operation
    outcomes: list[GroupOutcome] = field(default_factory=list)
    deleted_locale_rows: int = 0

    def count(self, state: GroupState) -> int:
        return sum(1 for outcome in self.outcomes if outcome.state is state)

    @property
    def applied(self) -> int:
        return self.count(GroupState.APPLIED)

    @property
    def skipped(self) -> int:
        return self.count(GroupState.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(GroupState.FAILED)

    @property
    def ok(self) -> bool:
        return self.failed == 0
