"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from contentsync.adapters.admission import AdmissionController
from contentsync.adapters.contentful import ContentfulClient
from contentsync.adapters.http_resilience import ResilientClient
from contentsync.adapters.mapping_file import (
    build_mapping_document,
    load_mapping,
    write_mapping_document,
)
from contentsync.adapters.sqlalchemy import SqlAlchemyRowRepository, create_row_repository
from contentsync.config import (
    ResilienceConfig,
    get_admission_config,
    get_contentful_config,
    get_database_config,
    get_sync_config,
    get_table_config,
)
from contentsync.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from pathlib import Path

    from contentsync.config import ContentfulConfig
    from contentsync.domain.types import Operation, ReconciliationResult

HttpClientFactory = Callable[[ResilienceConfig, AdmissionController], ResilientClient]


log = getLogger(__name__)


def _default_http_client_factory(
    config: ResilienceConfig, admission: AdmissionController
) -> ResilientClient:
    return ResilientClient(config, admission=admission)


def run_operation(
    operation: Operation,
    *,
    mapping_path: str | Path,
    where: tuple[str, str] | None = None,
    delete_locale: str | None = None,
    repository: SqlAlchemyRowRepository | None = None,
    contentful: ContentfulConfig | None = None,
    http_client_factory: HttpClientFactory | None = None,
) -> ReconciliationResult:
    """Run one reconciliation pass using the configured adapters."""

    return asyncio.run(
        run_operation_async(
            operation,
            mapping_path=mapping_path,
            where=where,
            delete_locale=delete_locale,
            repository=repository,
            contentful=contentful,
            http_client_factory=http_client_factory,
        )
    )


async def run_operation_async(
    operation: Operation,
    *,
    mapping_path: str | Path,
    where: tuple[str, str] | None = None,
    delete_locale: str | None = None,
    repository: SqlAlchemyRowRepository | None = None,
    contentful: ContentfulConfig | None = None,
    http_client_factory: HttpClientFactory | None = None,
) -> ReconciliationResult:
    mapping = load_mapping(mapping_path)
    effective_contentful = contentful or get_contentful_config()
    effective_repository = repository or create_row_repository(
        get_database_config(), get_table_config()
    )
    effective_factory = http_client_factory or _default_http_client_factory
    admission = AdmissionController.from_config(get_admission_config())
    log.info(
        "Starting %s: table=%s, mapped fields=%s, filter=%s, delete locale=%s",
        operation,
        effective_repository.config.name,
        len(mapping),
        "=".join(where) if where else None,
        delete_locale,
    )

    async with effective_factory(effective_contentful.resilience, admission) as http:
        engine = ReconciliationEngine(
            client=ContentfulClient(config=effective_contentful, http=http),
            rows=effective_repository,
            mapping=mapping,
            max_concurrency=get_sync_config().max_concurrency,
        )
        return await engine.run(operation, where=where, delete_locale=delete_locale)


def generate_mapping(
    *,
    mapping_path: str | Path,
    repository: SqlAlchemyRowRepository | None = None,
    contentful: ContentfulConfig | None = None,
    http_client_factory: HttpClientFactory | None = None,
) -> Path:
    """Write a stub mapping file from the table columns and the content type schema."""

    return asyncio.run(
        _generate_mapping_async(
            mapping_path=mapping_path,
            repository=repository,
            contentful=contentful,
            http_client_factory=http_client_factory,
        )
    )


async def _generate_mapping_async(
    *,
    mapping_path: str | Path,
    repository: SqlAlchemyRowRepository | None,
    contentful: ContentfulConfig | None,
    http_client_factory: HttpClientFactory | None,
) -> Path:
    effective_contentful = contentful or get_contentful_config()
    effective_repository = repository or create_row_repository(
        get_database_config(), get_table_config()
    )
    effective_factory = http_client_factory or _default_http_client_factory
    admission = AdmissionController.from_config(get_admission_config())

    log.info("Get database table columns.")
    columns = effective_repository.columns()
    async with effective_factory(effective_contentful.resilience, admission) as http:
        log.info("Get content type fields.")
        fields = await ContentfulClient(
            config=effective_contentful, http=http
        ).get_content_type_fields()

    document = build_mapping_document(
        columns,
        fields,
        excluded_columns=effective_repository.config.bookkeeping_columns,
    )
    path = write_mapping_document(document, mapping_path)
    log.info("Wrote mapping stub with %s column(s) to %s", len(document.mapping), path)
    return path
