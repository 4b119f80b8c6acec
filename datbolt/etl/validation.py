"""Post-migration row-count comparison between source and target."""

import logging

from sqlalchemy import table as table_clause
from sqlalchemy.exc import SQLAlchemyError

from datbolt.errors import ValidationQueryError
from datbolt.etl.context import MigrationContext
from datbolt.etl.extractors.source_tables import count_rows
from datbolt.etl.results import Err, Ok, Result, ValidationResult
from datbolt.etl.table_migration import TABLE_MIGRATIONS
from datbolt.models.target import TARGET_TABLES

logger = logging.getLogger(__name__)


def count_target_rows(ctx: MigrationContext, table: str) -> Result[int]:
    target_table = TARGET_TABLES.get(table, table_clause(table))
    try:
        return Ok(ctx.target.count(target_table))
    except SQLAlchemyError as e:
        return Err(ValidationQueryError(f"Failed to count {table} in target: {e}"))


def validate_migration(ctx: MigrationContext) -> dict[str, ValidationResult]:
    """Compare cardinalities for every declared table. Never raises per table."""
    logger.info("Validating migration...")
    results: dict[str, ValidationResult] = {}

    for name, config in TABLE_MIGRATIONS.items():
        source_count = count_rows(ctx.source, config.source_table)
        target_count = count_target_rows(ctx, config.target_table)

        failure = next((r for r in (source_count, target_count) if isinstance(r, Err)), None)
        if failure is not None:
            logger.error(f"Failed to validate {name}: {failure.message}")
            results[name] = ValidationResult(error=failure.message)
            continue

        results[name] = ValidationResult(
            source=source_count.value,
            target=target_count.value,
            match=source_count.value == target_count.value,
        )
        logger.info(
            f"{name}: Source={source_count.value}, Target={target_count.value}, "
            f"Match={results[name].match}"
        )

    return results
