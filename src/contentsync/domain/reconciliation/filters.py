"""Candidate filters selecting which rows an operation looks at."""

from __future__ import annotations

from contentsync.domain.ports.persistence import RemoteIdCondition, RowFilter
from contentsync.domain.types import Operation

_REMOTE_ID_BY_OPERATION: dict[Operation, RemoteIdCondition] = {
    Operation.INSERT: RemoteIdCondition.MISSING,
    Operation.UPDATE: RemoteIdCondition.ANY,
    Operation.DELETE: RemoteIdCondition.PRESENT,
    Operation.PUBLISH: RemoteIdCondition.PRESENT,
    Operation.DRAFT: RemoteIdCondition.PRESENT,
}


def base_filter(operation: Operation, where: tuple[str, str] | None = None) -> RowFilter:
    row_filter = RowFilter(remote_id=_REMOTE_ID_BY_OPERATION[operation])
    if where is None:
        return row_filter
    column, value = where
    return row_filter.narrowed(column, value)


def parse_equality_filter(expression: str) -> tuple[str, str]:
    """Split ``column=value`` into its parts."""

    column, separator, value = expression.partition("=")
    column = column.strip()
    if not separator or not column:
        raise ValueError(f"Filter must look like column=value, got {expression!r}")
    return column, value.strip().strip("'\"")
