"""SQLAlchemy adapter for the local table."""

from __future__ import annotations

from .repositories import ColumnInfo, SqlAlchemyRowRepository, create_row_repository

__all__ = [
    "ColumnInfo",
    "SqlAlchemyRowRepository",
    "create_row_repository",
]
