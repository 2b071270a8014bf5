"""Pydantic models describing the Contentful management API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentfulBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntrySys(ContentfulBaseModel):
    id: str
    version: int
    published_version: int | None = Field(default=None, alias="publishedVersion")


class EntryPayload(ContentfulBaseModel):
    sys: EntrySys
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def field_values(self, field_name: str) -> list[Any]:
        return list(self.fields.get(field_name, {}).values())


class EntryCollection(ContentfulBaseModel):
    total: int = 0
    skip: int = 0
    limit: int = 100
    items: list[EntryPayload] = Field(default_factory=list)


class ContentTypeField(ContentfulBaseModel):
    id: str
    name: str | None = None
    type: str | None = None
    localized: bool = False
    required: bool = False


class ContentTypePayload(ContentfulBaseModel):
    name: str | None = None
    fields: list[ContentTypeField] = Field(default_factory=list)


class ContentTypeCollection(ContentfulBaseModel):
    items: list[ContentTypePayload] = Field(default_factory=list)


class ErrorSys(ContentfulBaseModel):
    id: str | None = None


class ErrorResponse(ContentfulBaseModel):
    sys: ErrorSys = Field(default_factory=ErrorSys)
    message: str | None = None
