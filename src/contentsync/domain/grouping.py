"""Partition table rows into one group per logical entry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import EntityGroup, Row

if TYPE_CHECKING:
    from collections.abc import Iterable


def group_rows(rows: Iterable[Row]) -> tuple[EntityGroup, ...]:
    """Group rows that share a common id.

    ``rows`` must already be sorted by common id: a new group starts whenever the
    common id differs from the previous row's, so unsorted input yields split groups.
    Row order inside each group follows the input.
    """

    groups: list[EntityGroup] = []
    current: list[Row] = []
    for row in rows:
        if current and row.common_id != current[-1].common_id:
            groups.append(EntityGroup(rows=tuple(current)))
            current = []
        current.append(row)
    if current:
        groups.append(EntityGroup(rows=tuple(current)))
    return tuple(groups)
