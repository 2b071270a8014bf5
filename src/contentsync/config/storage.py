"""Local table configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_str, require_env_vars

DEFAULT_TABLE = "item_tab"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


@dataclass(frozen=True, slots=True)
class TableConfig:
    """Names of the table and of the bookkeeping columns the sync reads and writes."""

    name: str = DEFAULT_TABLE
    id_column: str = "id"
    common_id_column: str = "commonid"
    remote_id_column: str = "contentfulid"
    version_column: str = "contentversion"
    status_column: str = "contentstatus"
    locale_column: str = "contentlang"

    @property
    def bookkeeping_columns(self) -> tuple[str, ...]:
        return (
            self.id_column,
            self.common_id_column,
            self.remote_id_column,
            self.version_column,
            self.status_column,
            self.locale_column,
        )


def get_database_config() -> DatabaseConfig:
    values = require_env_vars(("DATABASE_URL",))
    return DatabaseConfig(uri=_normalize_database_url(values["DATABASE_URL"]))


def get_table_config() -> TableConfig:
    return TableConfig(
        name=env_str("TABLE", DEFAULT_TABLE),
        id_column=env_str("TABLE_ID_COLUMN", "id"),
        common_id_column=env_str("TABLE_COMMON_ID_COLUMN", "commonid"),
        remote_id_column=env_str("TABLE_CONTENTFUL_ID_COLUMN", "contentfulid"),
        version_column=env_str("TABLE_CONTENTFUL_VERSION_COLUMN", "contentversion"),
        status_column=env_str("TABLE_CONTENTFUL_STATUS_COLUMN", "contentstatus"),
        locale_column=env_str("TABLE_CONTENTFUL_LANG_COLUMN", "contentlang"),
    )


def _normalize_database_url(url: str) -> str:
    # libpq-style URLs use the "postgres" scheme, which SQLAlchemy no longer accepts
    if url.startswith("postgres://"):
        return "postgresql://" + url.removeprefix("postgres://")
    return url
