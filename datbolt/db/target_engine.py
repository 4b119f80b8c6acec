"""Synchronous engine for the Azure PostgreSQL target database.

Used by the migration pipeline for batch inserts and validation counts.
Alembic builds its own engine from the same settings.
"""

import logging
from typing import Any, Sequence

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from datbolt.config import Settings
from datbolt.errors import ConnectionSetupError

logger = logging.getLogger(__name__)


def create_target_engine(settings: Settings) -> Engine:
    url = settings.target_db_url
    if not url:
        raise ConnectionSetupError(
            "AZURE_POSTGRESQL_CONNECTION_STRING environment variable is required"
        )
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
        connect_args={"sslmode": settings.target_sslmode},
    )


class TargetDatabase:
    """Process-scoped handle to the target. Every call runs in its own transaction."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "TargetDatabase":
        return cls(create_target_engine(settings))

    def ping(self) -> None:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise ConnectionSetupError(f"Target database unreachable: {e}") from e
        logger.info("Azure PostgreSQL client connected")

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a driver-level statement with positional ``%s`` parameters."""
        with self.engine.begin() as conn:
            result = conn.exec_driver_sql(sql, tuple(params))
            return result.rowcount

    def execute_statement(self, statement: Executable) -> int:
        with self.engine.begin() as conn:
            return conn.execute(statement).rowcount

    def count(self, table) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(table)).scalar_one()

    def close(self) -> None:
        self.engine.dispose()
