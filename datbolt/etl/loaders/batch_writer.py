"""Load transformed rows into the target with multi-row conflict-skipping INSERTs."""

import json
import logging
from typing import Any, Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError

from datbolt.db.target_engine import TargetDatabase
from datbolt.errors import WriteError
from datbolt.etl.results import Err, Ok, Result

logger = logging.getLogger(__name__)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _bind_value(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return value


def build_insert_statement(
    table: str,
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
) -> tuple[str, list[Any]]:
    """Build one ``INSERT ... ON CONFLICT DO NOTHING`` for all rows.

    Args:
        table: Target table name (quoted as-is, so mixed case survives)
        rows: Row mappings keyed by column name
        columns: Column order; each row contributes one value per column

    Returns:
        The SQL text with ``%s`` placeholders and the flat parameter list
    """
    if not rows:
        raise ValueError("Cannot build an INSERT for zero rows")
    if not columns:
        raise ValueError("Cannot build an INSERT without columns")

    group = "(" + ", ".join(["%s"] * len(columns)) + ")"
    placeholders = ", ".join([group] * len(rows))
    column_names = ", ".join(_quote(c) for c in columns)

    params = [_bind_value(row.get(col)) for row in rows for col in columns]

    sql = (
        f"INSERT INTO {_quote(table)} ({column_names}) "
        f"VALUES {placeholders} "
        f"ON CONFLICT DO NOTHING"
    )
    return sql, params


def insert_batch(
    target: TargetDatabase,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
) -> Result[int]:
    """Insert a batch; returns the number of rows actually inserted."""
    if not rows:
        return Ok(0)

    sql, params = build_insert_statement(table, rows, columns)
    try:
        inserted = target.execute(sql, params)
    except SQLAlchemyError as e:
        logger.error(f"Failed to insert batch into {table}: {e}")
        return Err(WriteError(table, e))

    logger.debug(f"Inserted {inserted} of {len(rows)} records into {table}")
    return Ok(inserted)
