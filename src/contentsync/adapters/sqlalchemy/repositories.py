"""Row repository backed by a reflected SQLAlchemy table."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import MetaData, Table, create_engine, delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from contentsync.domain.errors import LocalWriteFailure
from contentsync.domain.ports.persistence import RemoteIdCondition
from contentsync.domain.types import PublicationStatus, Row

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import Engine

    from contentsync.config.storage import DatabaseConfig, TableConfig
    from contentsync.domain.ports.persistence import RowFilter

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ColumnInfo:
    name: str
    data_type: str
    nullable: bool
    default: str | None


class SqlAlchemyRowRepository:
    """Reads candidate rows and writes remote bookkeeping columns back.

    Each write runs in its own transaction so a failing group never rolls back
    what sibling groups already persisted.
    """

    def __init__(self, engine: Engine, config: TableConfig, *, table: Table | None = None) -> None:
        self.engine = engine
        self.config = config
        self._table = table

    @property
    def table(self) -> Table:
        if self._table is None:
            self._table = Table(self.config.name, MetaData(), autoload_with=self.engine)
            missing = [
                name for name in self.config.bookkeeping_columns if name not in self._table.c
            ]
            if missing:
                raise ValueError(
                    f"Table {self.config.name!r} lacks columns: {', '.join(sorted(missing))}"
                )
        return self._table

    def columns(self) -> list[ColumnInfo]:
        return [
            ColumnInfo(
                name=column.name,
                data_type=str(column.type),
                nullable=bool(column.nullable),
                default=None if column.server_default is None else str(column.server_default.arg),
            )
            for column in self.table.columns
        ]

    def select(self, row_filter: RowFilter) -> list[Row]:
        table = self.table
        stmt = (
            select(table)
            .where(*self._conditions(row_filter))
            .order_by(
                table.c[self.config.common_id_column],
                table.c[self.config.id_column],
            )
        )
        with self.engine.connect() as connection:
            records = connection.execute(stmt).mappings().all()
        return [self._to_row(record) for record in records]

    def delete_locale(self, row_filter: RowFilter, locale: str) -> int:
        table = self.table
        stmt = delete(table).where(
            *self._conditions(row_filter),
            table.c[self.config.locale_column] == locale,
        )
        try:
            with self.engine.begin() as connection:
                deleted = connection.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            raise LocalWriteFailure(f"Failed to delete rows of locale {locale}: {exc}") from exc
        log.info("Deleted %s row(s) of locale %s", deleted, locale)
        return deleted

    def save_remote_state(
        self,
        keys: Sequence[Any],
        *,
        remote_id: str | None,
        version: int | None,
    ) -> None:
        self._update(
            keys,
            {
                self.config.remote_id_column: remote_id,
                self.config.version_column: None if version is None else str(version),
            },
        )

    def save_publication(
        self,
        keys: Sequence[Any],
        *,
        version: int,
        status: PublicationStatus,
    ) -> None:
        self._update(
            keys,
            {
                self.config.version_column: str(version),
                self.config.status_column: status.value,
            },
        )

    def _update(self, keys: Sequence[Any], values: dict[str, Any]) -> None:
        table = self.table
        stmt = update(table).where(table.c[self.config.id_column].in_(list(keys))).values(values)
        try:
            with self.engine.begin() as connection:
                connection.execute(stmt)
        except SQLAlchemyError as exc:
            raise LocalWriteFailure(
                f"Failed to update rows {list(keys)} of {self.config.name}: {exc}"
            ) from exc

    def _conditions(self, row_filter: RowFilter) -> list[ColumnElement[bool]]:
        table = self.table
        remote_id = table.c[self.config.remote_id_column]
        conditions: list[ColumnElement[bool]] = []
        if row_filter.column is not None:
            if row_filter.column not in table.c:
                raise ValueError(
                    f"Unknown column {row_filter.column!r} in table {self.config.name!r}"
                )
            conditions.append(table.c[row_filter.column] == row_filter.value)
        if row_filter.remote_id is RemoteIdCondition.MISSING:
            conditions.append(remote_id.is_(None))
        elif row_filter.remote_id is RemoteIdCondition.PRESENT:
            conditions.append(remote_id.is_not(None))
        return conditions

    def _to_row(self, record: Any) -> Row:
        config = self.config
        values = dict(record)
        raw_status = values.get(config.status_column)
        status = (
            PublicationStatus(raw_status)
            if raw_status in {member.value for member in PublicationStatus}
            else None
        )
        version = values.get(config.version_column)
        return Row(
            key=values[config.id_column],
            common_id=values[config.common_id_column],
            locale=values.get(config.locale_column),
            remote_id=values.get(config.remote_id_column),
            version=None if version is None else str(version),
            status=status,
            values=values,
        )


def create_row_repository(database: DatabaseConfig, table: TableConfig) -> SqlAlchemyRowRepository:
    engine = create_engine(database.uri, future=True)
    return SqlAlchemyRowRepository(engine, table)
