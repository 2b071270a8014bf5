"""Drive entity groups through insert, update, delete, publish and draft."""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from contentsync.domain.errors import AdmissionTimeout, RemoteRejected, RemoteStoreError
from contentsync.domain.grouping import group_rows
from contentsync.domain.types import (
    GroupOutcome,
    GroupState,
    Operation,
    PublicationStatus,
    ReconciliationResult,
)

from .filters import base_filter

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from contentsync.domain.ports.persistence import RowRepository
    from contentsync.domain.ports.remote import EntryClient
    from contentsync.domain.types import EntityGroup, FieldMapping

    type GroupHandler = Callable[[EntityGroup, GroupOutcome], Awaitable[None]]

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Reconcile the rows selected for one operation with their remote entries.

    Groups are processed concurrently and independently: a remote failure marks
    only its own group as failed. A failed local write fails the whole pass once
    every group has finished.
    """

    client: EntryClient
    rows: RowRepository
    mapping: FieldMapping
    max_concurrency: int | None = None

    async def run(
        self,
        operation: Operation,
        *,
        where: tuple[str, str] | None = None,
        delete_locale: str | None = None,
    ) -> ReconciliationResult:
        result = ReconciliationResult(operation=operation)
        row_filter = base_filter(operation, where)

        if delete_locale:
            result.deleted_locale_rows = self.rows.delete_locale(row_filter, delete_locale)

        groups = group_rows(self.rows.select(row_filter))
        log.info("%s: %s candidate group(s)", operation, len(groups))
        if not groups:
            return result

        handler = self._handler(operation)
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        result.outcomes = [GroupOutcome(common_id=group.common_id) for group in groups]

        async def run_one(group: EntityGroup, outcome: GroupOutcome) -> None:
            async with semaphore if semaphore is not None else nullcontext():
                await self._reconcile_group(operation, handler, group, outcome)

        pairs = zip(groups, result.outcomes, strict=True)
        raised = await asyncio.gather(
            *(run_one(group, outcome) for group, outcome in pairs),
            return_exceptions=True,
        )
        errors = [error for error in raised if isinstance(error, BaseException)]
        if errors:
            raise errors[0]

        log.info(
            "%s finished: applied=%s, skipped=%s, failed=%s",
            operation,
            result.applied,
            result.skipped,
            result.failed,
        )
        return result

    async def _reconcile_group(
        self,
        operation: Operation,
        handler: GroupHandler,
        group: EntityGroup,
        outcome: GroupOutcome,
    ) -> None:
        outcome.state = GroupState.PROCESSING
        outcome.entry_id = group.remote_id
        try:
            await handler(group, outcome)
        except (RemoteStoreError, AdmissionTimeout) as exc:
            outcome.state = GroupState.FAILED
            outcome.error = exc
            log.error(
                "%s failed for common id %s (entry %s): %s",
                operation,
                group.common_id,
                outcome.entry_id,
                exc,
                exc_info=exc,
            )

    def _handler(self, operation: Operation) -> GroupHandler:
        handlers: dict[Operation, GroupHandler] = {
            Operation.INSERT: self._insert,
            Operation.UPDATE: self._update,
            Operation.DELETE: self._delete,
            Operation.PUBLISH: self._publish,
            Operation.DRAFT: self._draft,
        }
        return handlers[operation]

    async def _insert(self, group: EntityGroup, outcome: GroupOutcome) -> None:
        existing = await self.client.find_entries_by_common_id(group.common_id)
        if existing:
            log.info("Skip common id %s, already stored as entry %s", group.common_id, existing[0])
            _skip(outcome, f"entry {existing[0]} already references this common id")
            outcome.entry_id = existing[0]
            return

        log.info("Insert entry for common id %s (%s)", group.common_id, ", ".join(group.locales))
        created = await self.client.create(group, self.mapping)
        outcome.entry_id = created.entry_id
        version = created.version
        if group.any_published:
            log.info("Publish entry %s", created.entry_id)
            version = await self.client.publish(created.entry_id, version)

        self.rows.save_remote_state(group.keys, remote_id=created.entry_id, version=version)
        _apply(outcome, version)

    async def _update(self, group: EntityGroup, outcome: GroupOutcome) -> None:
        target = _target(group, outcome)
        if target is None:
            return
        entry_id, version = target

        log.info("Update entry %s", entry_id)
        version = await self.client.update(entry_id, group, self.mapping, version)
        # the update already moved the remote version, so it is stored whatever happens next
        change_state = self.client.publish if group.any_published else self.client.unpublish
        try:
            version = await change_state(entry_id, version)
        except RemoteRejected as exc:
            log.debug("Entry %s left as is: %s", entry_id, exc)
        except (RemoteStoreError, AdmissionTimeout) as exc:
            log.warning("Publication state of entry %s not changed: %s", entry_id, exc)

        self.rows.save_remote_state(group.keys, remote_id=entry_id, version=version)
        _apply(outcome, version)

    async def _delete(self, group: EntityGroup, outcome: GroupOutcome) -> None:
        target = _target(group, outcome)
        if target is None:
            return
        entry_id, version = target

        log.info("Delete entry %s", entry_id)
        await self.client.delete(entry_id, version)
        self.rows.save_remote_state(group.keys, remote_id=None, version=None)
        outcome.state = GroupState.APPLIED

    async def _publish(self, group: EntityGroup, outcome: GroupOutcome) -> None:
        target = _target(group, outcome)
        if target is None:
            return
        entry_id, version = target

        try:
            version = await self.client.publish(entry_id, version)
        except RemoteRejected as exc:
            _skip(outcome, f"not published, assuming it already is: {exc}")
            return
        log.info("Published entry %s", entry_id)
        self.rows.save_publication(group.keys, version=version, status=PublicationStatus.PUBLISHED)
        _apply(outcome, version)

    async def _draft(self, group: EntityGroup, outcome: GroupOutcome) -> None:
        target = _target(group, outcome)
        if target is None:
            return
        entry_id, version = target

        try:
            version = await self.client.unpublish(entry_id, version)
        except RemoteRejected as exc:
            _skip(outcome, f"not unpublished, assuming it already is a draft: {exc}")
            return
        log.info("Unpublished entry %s", entry_id)
        self.rows.save_publication(group.keys, version=version, status=PublicationStatus.DRAFT)
        _apply(outcome, version)


def _target(group: EntityGroup, outcome: GroupOutcome) -> tuple[str, int] | None:
    """Entry id and version the group's remote calls start from."""

    entry_id = group.remote_id
    if entry_id is None:
        _skip(outcome, "no entry has been created for this common id yet")
        return None
    try:
        version = group.version
    except ValueError:
        outcome.state = GroupState.FAILED
        outcome.reason = f"unreadable version token {group.representative.version!r}"
        log.error(
            "Common id %s has entry %s but version %r is not a number",
            group.common_id,
            entry_id,
            group.representative.version,
        )
        return None
    if version is None:
        outcome.state = GroupState.FAILED
        outcome.reason = "no version token recorded for the entry"
        log.error("Common id %s has entry %s but no version", group.common_id, entry_id)
        return None
    return entry_id, version


def _skip(outcome: GroupOutcome, reason: str) -> None:
    outcome.state = GroupState.SKIPPED
    outcome.reason = reason


def _apply(outcome: GroupOutcome, version: int) -> None:
    outcome.state = GroupState.APPLIED
    outcome.version = version
