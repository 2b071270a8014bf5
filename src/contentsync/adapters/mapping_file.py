"""Read and write the JSON document mapping table columns to entry fields."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from contentsync.domain.errors import MappingFileError
from contentsync.domain.types import FieldMapping

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contentsync.adapters.contentful.schema import ContentTypeField
    from contentsync.adapters.sqlalchemy.repositories import ColumnInfo


class TableColumn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    column_name: str
    data_type: str | None = None
    column_default: str | None = None
    is_nullable: str | None = None


class MappingDocument(BaseModel):
    """On-disk layout: the mapping plus the cached table and content type schemas."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mapping: dict[str, str]
    table_columns: list[TableColumn] = Field(default_factory=list, alias="tableColumns")
    contentful_fields: list[dict[str, Any]] = Field(
        default_factory=list, alias="contentfulFields"
    )

    def field_mapping(self) -> FieldMapping:
        return FieldMapping(columns=self.mapping)


def load_mapping(path: str | Path) -> FieldMapping:
    return load_mapping_document(path).field_mapping()


def load_mapping_document(path: str | Path) -> MappingDocument:
    mapping_path = Path(path)
    try:
        content = mapping_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MappingFileError(f"Cannot read mapping file {mapping_path}: {exc}") from exc
    try:
        return MappingDocument.model_validate_json(content)
    except ValidationError as exc:
        raise MappingFileError(f"Invalid mapping file {mapping_path}: {exc}") from exc


def build_mapping_document(
    columns: Iterable[ColumnInfo],
    fields: Iterable[ContentTypeField],
    *,
    excluded_columns: Iterable[str],
) -> MappingDocument:
    """Stub document mapping every content column to an empty field name."""

    columns = list(columns)
    excluded = set(excluded_columns)
    return MappingDocument(
        mapping={column.name: "" for column in columns if column.name not in excluded},
        table_columns=[
            TableColumn(
                column_name=column.name,
                data_type=column.data_type,
                column_default=column.default,
                is_nullable="YES" if column.nullable else "NO",
            )
            for column in columns
        ],
        contentful_fields=[field.model_dump(exclude_none=True) for field in fields],
    )


def write_mapping_document(document: MappingDocument, path: str | Path) -> Path:
    mapping_path = Path(path)
    mapping_path.write_text(
        document.model_dump_json(by_alias=True, indent=4) + "\n",
        encoding="utf-8",
    )
    return mapping_path
