from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import MetaData, Table, select

from contentsync.adapters.sqlalchemy import SqlAlchemyRowRepository
from contentsync.config import TableConfig
from contentsync.domain.errors import LocalWriteFailure
from contentsync.domain.ports.persistence import RemoteIdCondition, RowFilter
from contentsync.domain.types import PublicationStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


@pytest.fixture
def seeded(insert_rows: Callable[..., None]) -> None:
    insert_rows(
        {"id": 3, "commonid": 20, "contentlang": "en-US", "title": "B"},
        {"id": 1, "commonid": 10, "contentlang": "en-US", "title": "A"},
        {
            "id": 2,
            "commonid": 10,
            "contentlang": "de-DE",
            "title": "A de",
            "contentfulid": "abc",
            "contentversion": "4",
            "contentstatus": "Published",
        },
        {"id": 4, "commonid": 20, "contentlang": "fr-FR", "contentstatus": "unknown"},
    )


def _stored(engine: Engine) -> dict[int, dict[str, object]]:
    table = Table("item_tab", MetaData(), autoload_with=engine)
    with engine.connect() as connection:
        return {
            record["id"]: dict(record)
            for record in connection.execute(select(table)).mappings().all()
        }


@pytest.mark.usefixtures("seeded")
def test_select_orders_by_common_id_then_key(row_repository: SqlAlchemyRowRepository) -> None:
    rows = row_repository.select(RowFilter())

    assert [(row.common_id, row.key) for row in rows] == [(10, 1), (10, 2), (20, 3), (20, 4)]
    published = rows[1]
    assert published.remote_id == "abc"
    assert published.version == "4"
    assert published.status is PublicationStatus.PUBLISHED
    assert published.values["title"] == "A de"
    assert rows[3].status is None


@pytest.mark.usefixtures("seeded")
def test_select_applies_remote_id_condition(row_repository: SqlAlchemyRowRepository) -> None:
    missing = row_repository.select(RowFilter(remote_id=RemoteIdCondition.MISSING))
    present = row_repository.select(RowFilter(remote_id=RemoteIdCondition.PRESENT))

    assert [row.key for row in missing] == [1, 3, 4]
    assert [row.key for row in present] == [2]


@pytest.mark.usefixtures("seeded")
def test_select_ands_caller_filter(row_repository: SqlAlchemyRowRepository) -> None:
    row_filter = RowFilter(remote_id=RemoteIdCondition.MISSING, column="contentlang", value="en-US")

    assert [row.key for row in row_repository.select(row_filter)] == [1, 3]


@pytest.mark.usefixtures("seeded")
def test_unknown_filter_column_is_rejected(row_repository: SqlAlchemyRowRepository) -> None:
    with pytest.raises(ValueError, match="Unknown column"):
        row_repository.select(RowFilter(column="nope", value="1"))


@pytest.mark.usefixtures("seeded")
def test_save_remote_state_updates_all_group_rows(
    row_repository: SqlAlchemyRowRepository, sqlite_engine: Engine
) -> None:
    row_repository.save_remote_state([1, 2], remote_id="xyz", version=7)

    stored = _stored(sqlite_engine)
    assert stored[1]["contentfulid"] == "xyz"
    assert stored[2]["contentversion"] == "7"
    assert stored[3]["contentfulid"] is None

    row_repository.save_remote_state([1, 2], remote_id=None, version=None)

    stored = _stored(sqlite_engine)
    assert stored[1]["contentfulid"] is None
    assert stored[2]["contentversion"] is None


@pytest.mark.usefixtures("seeded")
def test_save_publication_writes_version_and_status(
    row_repository: SqlAlchemyRowRepository, sqlite_engine: Engine
) -> None:
    row_repository.save_publication([2], version=5, status=PublicationStatus.DRAFT)

    stored = _stored(sqlite_engine)
    assert stored[2]["contentversion"] == "5"
    assert stored[2]["contentstatus"] == "Draft"
    assert stored[1]["contentstatus"] is None


@pytest.mark.usefixtures("seeded")
def test_delete_locale_respects_filter(
    row_repository: SqlAlchemyRowRepository, sqlite_engine: Engine
) -> None:
    deleted = row_repository.delete_locale(
        RowFilter(remote_id=RemoteIdCondition.MISSING, column="commonid", value="20"), "fr-FR"
    )

    assert deleted == 1
    assert sorted(_stored(sqlite_engine)) == [1, 2, 3]


def test_missing_bookkeeping_columns_are_reported(sqlite_engine: Engine) -> None:
    repository = SqlAlchemyRowRepository(sqlite_engine, TableConfig(status_column="state"))

    with pytest.raises(ValueError, match="state"):
        repository.select(RowFilter())


@pytest.mark.usefixtures("seeded")
def test_write_errors_become_local_write_failure(
    row_repository: SqlAlchemyRowRepository, sqlite_engine: Engine
) -> None:
    _ = row_repository.table
    with sqlite_engine.begin() as connection:
        connection.exec_driver_sql("DROP TABLE item_tab")

    with pytest.raises(LocalWriteFailure):
        row_repository.save_remote_state([1], remote_id="x", version=1)


@pytest.mark.usefixtures("seeded")
def test_columns_describe_table(row_repository: SqlAlchemyRowRepository) -> None:
    columns = {column.name: column for column in row_repository.columns()}

    assert set(columns) >= {"id", "commonid", "title", "body"}
    assert columns["title"].nullable
    assert not columns["commonid"].nullable
