from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, create_engine, insert
from sqlalchemy.engine import Engine  # noqa: TC002

from contentsync.adapters.sqlalchemy import SqlAlchemyRowRepository
from contentsync.config import ContentfulConfig, TableConfig
from tests.support.contentful import FakeContentful, make_contentful_config

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

RowValues = dict[str, Any]


def build_item_table(metadata: MetaData) -> Table:
    return Table(
        "item_tab",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("commonid", Integer, nullable=False),
        Column("contentfulid", String, nullable=True),
        Column("contentversion", String, nullable=True),
        Column("contentstatus", String, nullable=True),
        Column("contentlang", String, nullable=False),
        Column("title", String, nullable=True),
        Column("body", String, nullable=True),
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    metadata = MetaData()
    build_item_table(metadata)
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def insert_rows(sqlite_engine: Engine) -> Callable[..., None]:
    table = build_item_table(MetaData())

    def _insert(*rows: RowValues) -> None:
        with sqlite_engine.begin() as connection:
            for row in rows:
                values: RowValues = {
                    "contentfulid": None,
                    "contentversion": None,
                    "contentstatus": None,
                    "title": None,
                    "body": None,
                }
                values.update(row)
                connection.execute(insert(table).values(values))

    return _insert


@pytest.fixture
def row_repository(sqlite_engine: Engine) -> SqlAlchemyRowRepository:
    return SqlAlchemyRowRepository(sqlite_engine, TableConfig())


@pytest.fixture
def fake_contentful() -> FakeContentful:
    return FakeContentful()


@pytest.fixture
def contentful_config() -> ContentfulConfig:
    return make_contentful_config()


@pytest.fixture(autouse=True)
def fast_admission(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTENTFUL_RATE_LIMIT_COUNT", "1000")
    monkeypatch.setenv("CONTENTFUL_RATE_LIMIT_PERIOD", "1000")
    monkeypatch.setenv("CONTENTFUL_RATE_LIMIT_RETRY_PERIOD", "10")
