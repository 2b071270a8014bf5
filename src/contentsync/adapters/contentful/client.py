"""Entry operations against the Contentful content management API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Unpack

import httpx
from pydantic import ValidationError

from contentsync.domain.errors import (
    AdmissionTimeout,
    RemoteRejected,
    RemoteStoreError,
    RemoteUnavailable,
    VersionConflict,
)
from contentsync.domain.types import EntryVersion

from .schema import (
    ContentTypeCollection,
    ContentTypeField,
    EntryCollection,
    EntryPayload,
    ErrorResponse,
)

if TYPE_CHECKING:
    from contentsync.adapters.http_resilience import RequestOptions, ResilientClient
    from contentsync.config.contentful import ContentfulConfig
    from contentsync.domain.types import EntityGroup, FieldMapping, LocalizedFields

log = getLogger(__name__)

MANAGEMENT_CONTENT_TYPE = "application/vnd.contentful.management.v1+json"
ENTRY_PAGE_SIZE = 100


class ContentfulClient:
    """Create, update, publish, unpublish and delete entries of one content type.

    All calls go through the given ``ResilientClient``, which waits for an admission
    slot first. Version tokens are taken from the responses, never counted locally,
    except after a publish where Contentful reports ``publishedVersion`` and the next
    writable version is one above it.
    """

    def __init__(self, *, config: ContentfulConfig, http: ResilientClient) -> None:
        self._config = config
        self._http = http

    async def find_entries_by_common_id(self, common_id: Any) -> list[str]:
        """Return ids of entries whose common-id field holds ``common_id`` in any locale."""

        wanted = str(common_id)
        matches: list[str] = []
        skip = 0
        while True:
            page = await self._list_entries(skip=skip)
            for entry in page.items:
                values = entry.field_values(self._config.common_id_field)
                if any(str(value) == wanted for value in values):
                    matches.append(entry.sys.id)
            skip += len(page.items)
            if not page.items or skip >= page.total:
                return matches

    async def create(self, group: EntityGroup, mapping: FieldMapping) -> EntryVersion:
        fields = group.localized_fields(mapping, common_id_field=self._config.common_id_field)
        response = await self._post_entry(fields)
        first_locale = group.rows[0].locale
        if response.status_code != httpx.codes.CREATED and (
            first_locale != self._config.default_locale
        ):
            log.info(
                "Retrying creation of entry for common id %s using default locale %s",
                group.common_id,
                self._config.default_locale,
            )
            fields = group.single_locale_fields(
                mapping,
                common_id_field=self._config.common_id_field,
                locale=self._config.default_locale,
            )
            response = await self._post_entry(fields)
        self._raise_for_status(
            response,
            expected=httpx.codes.CREATED,
            action=f"create entry for common id {group.common_id}",
        )
        entry = self._parse_entry(response)
        return EntryVersion(entry_id=entry.sys.id, version=entry.sys.version)

    async def update(
        self,
        entry_id: str,
        group: EntityGroup,
        mapping: FieldMapping,
        version: int,
    ) -> int:
        fields = group.localized_fields(mapping, common_id_field=self._config.common_id_field)
        response = await self._send(
            "PUT",
            f"entries/{entry_id}",
            headers=self._headers(version=version, with_content_type=True),
            json={"fields": fields},
        )
        self._raise_for_status(response, expected=httpx.codes.OK, action=f"update entry {entry_id}")
        return self._parse_entry(response).sys.version

    async def publish(self, entry_id: str, version: int) -> int:
        response = await self._send(
            "PUT",
            f"entries/{entry_id}/published",
            headers=self._headers(version=version),
        )
        self._raise_for_status(
            response, expected=httpx.codes.OK, action=f"publish entry {entry_id}"
        )
        entry = self._parse_entry(response)
        if entry.sys.published_version is None:
            return entry.sys.version
        return entry.sys.published_version + 1

    async def unpublish(self, entry_id: str, version: int) -> int:
        response = await self._send(
            "DELETE",
            f"entries/{entry_id}/published",
            headers=self._headers(version=version),
        )
        self._raise_for_status(
            response, expected=httpx.codes.OK, action=f"unpublish entry {entry_id}"
        )
        return self._parse_entry(response).sys.version

    async def delete(self, entry_id: str, version: int) -> None:
        """Unpublish then delete; the delete is attempted even when the unpublish fails."""

        try:
            version = await self.unpublish(entry_id, version)
        except (RemoteStoreError, AdmissionTimeout) as exc:
            log.debug("Entry %s not unpublished before deletion: %s", entry_id, exc)
        response = await self._send(
            "DELETE",
            f"entries/{entry_id}",
            headers=self._headers(version=version),
        )
        self._raise_for_status(
            response, expected=httpx.codes.NO_CONTENT, action=f"delete entry {entry_id}"
        )

    async def get_content_type_fields(self) -> list[ContentTypeField]:
        """Look up the field schema of the configured content type by name."""

        response = await self._send(
            "GET",
            "public/content_types",
            params={"name": self._config.content_type_name},
            headers=self._headers(),
        )
        self._raise_for_status(
            response,
            expected=httpx.codes.OK,
            action=f"look up content type {self._config.content_type_name}",
        )
        collection = ContentTypeCollection.model_validate(response.json())
        if not collection.items:
            raise RemoteRejected(
                f"Content type {self._config.content_type_name!r} was not found",
                status_code=response.status_code,
                body=response.text,
            )
        return collection.items[0].fields

    async def _list_entries(self, *, skip: int) -> EntryCollection:
        response = await self._send(
            "GET",
            "entries",
            params={
                "content_type": self._config.content_type,
                "skip": skip,
                "limit": ENTRY_PAGE_SIZE,
            },
            headers=self._headers(),
        )
        self._raise_for_status(response, expected=httpx.codes.OK, action="list entries")
        return EntryCollection.model_validate(response.json())

    async def _post_entry(self, fields: LocalizedFields) -> httpx.Response:
        return await self._send(
            "POST",
            "entries",
            headers=self._headers(with_content_type=True),
            json={"fields": fields},
        )

    async def _send(
        self,
        method: str,
        path: str,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        try:
            return await self._http.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise RemoteUnavailable(f"{method} {path} failed: {exc}") from exc

    def _headers(
        self,
        *,
        version: int | None = None,
        with_content_type: bool = False,
    ) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._config.access_token}"}
        if with_content_type:
            headers["X-Contentful-Content-Type"] = self._config.content_type
            headers["Content-Type"] = MANAGEMENT_CONTENT_TYPE
        if version is not None:
            headers["X-Contentful-Version"] = str(version)
        return headers

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, expected: int, action: str) -> None:
        if response.status_code == expected:
            return
        body = _response_body(response)
        message = f"Failed to {action}: HTTP {response.status_code}"
        detail = _error_message(body)
        if detail:
            message = f"{message} ({detail})"
        if response.status_code == httpx.codes.CONFLICT:
            raise VersionConflict(message, status_code=response.status_code, body=body)
        raise RemoteRejected(message, status_code=response.status_code, body=body)

    @staticmethod
    def _parse_entry(response: httpx.Response) -> EntryPayload:
        try:
            return EntryPayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RemoteRejected(
                "Unexpected Contentful entry payload",
                status_code=response.status_code,
                body=response.text,
            ) from exc


def _response_body(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(body: object) -> str | None:
    if not isinstance(body, dict):
        return None
    try:
        error = ErrorResponse.model_validate(body)
    except ValidationError:
        return None
    if error.message and error.sys.id:
        return f"{error.sys.id}: {error.message}"
    return error.message or error.sys.id
