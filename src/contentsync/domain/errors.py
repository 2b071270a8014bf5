"""Error kinds raised while reconciling the local table with the remote store."""

from __future__ import annotations


class ContentSyncError(RuntimeError):
    """Base class for reconciliation failures."""


class NotFoundLocally(ContentSyncError):
    """Raised when a local input (mapping or config file) is missing or unparseable."""


class MappingFileError(NotFoundLocally):
    """Raised when the field mapping file cannot be read or validated."""


class AdmissionTimeout(ContentSyncError):
    """Raised when a bounded admission wait runs out before a slot frees up."""


class LocalWriteFailure(ContentSyncError):
    """Raised when writing remote ids, versions or statuses back to the table fails."""


class RemoteStoreError(ContentSyncError):
    """Base class for failures talking to the remote store."""


class RemoteUnavailable(RemoteStoreError):
    """Raised when the remote store could not be reached at all."""


class RemoteRejected(RemoteStoreError):
    """Raised when the remote store answers a required call with a non-success status."""

    def __init__(self, message: str, *, status_code: int, body: object = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class VersionConflict(RemoteRejected):
    """Raised when the version token sent with a write is not the entry's current one."""
