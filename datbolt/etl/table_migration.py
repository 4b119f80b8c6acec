"""Migrate one source table into the target: count, page, transform, write."""

import json
import logging
from dataclasses import dataclass
from typing import Callable

from datbolt.etl.context import MigrationContext
from datbolt.etl.extractors.source_tables import count_rows, read_page
from datbolt.etl.loaders.batch_writer import insert_batch
from datbolt.etl.results import Err, TableResult
from datbolt.etl.transformers.tables import (
    SourceRow,
    transform_audit_report,
    transform_incident,
    transform_report,
    transform_user_activity,
    transform_user_profile,
    transform_user_stat,
)
from datbolt.models.rows import (
    AuditReportRow,
    IncidentRow,
    ReportRow,
    TableRow,
    UserActivityRow,
    UserProfileRow,
    UserStatRow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableMigration:
    source_table: str
    target_table: str
    row_type: type[TableRow]
    transform: Callable[[SourceRow], TableRow]
    order_by: str

    @property
    def columns(self) -> list[str]:
        return self.row_type.columns()


TABLE_MIGRATIONS: dict[str, TableMigration] = {
    "AuditReports": TableMigration(
        "AuditReports", "AuditReports", AuditReportRow, transform_audit_report, "Timestamp"
    ),
    "user_profiles": TableMigration(
        "user_profiles", "user_profiles", UserProfileRow, transform_user_profile, "updated_at"
    ),
    "user_activities": TableMigration(
        "user_activities", "user_activities", UserActivityRow, transform_user_activity, "created_at"
    ),
    "user_stats": TableMigration(
        "user_stats", "user_stats", UserStatRow, transform_user_stat, "updated_at"
    ),
    "incidents": TableMigration(
        "incidents", "incidents", IncidentRow, transform_incident, "created_at"
    ),
    "reports": TableMigration(
        "reports", "reports", ReportRow, transform_report, "generated_at"
    ),
}

# Users first, then tables that reference them
MIGRATION_ORDER = [
    "user_profiles",
    "user_activities",
    "user_stats",
    "AuditReports",
    "incidents",
    "reports",
]


def migrate_table(ctx: MigrationContext, name: str, config: TableMigration) -> TableResult:
    """Run one table to completion or to its first error.

    Returns:
        ``TableResult.ok(n)`` with the number of rows read and handed to the
        writer (or that would have been, in dry-run), else ``TableResult.failed``.
    """
    logger.info(f"Starting migration for table: {name}")

    counted = count_rows(ctx.source, config.source_table)
    if isinstance(counted, Err):
        logger.error(f"Failed to migrate table {name}: {counted.message}")
        return TableResult.failed(counted.message)
    total = counted.value
    logger.info(f"Total records to migrate: {total}")

    if total == 0:
        logger.warning(f"No data found in table {name}")
        return TableResult.ok(0)

    migrated = 0
    offset = 0
    while offset < total:
        page = read_page(ctx.source, config.source_table, offset, ctx.batch_size, config.order_by)
        if isinstance(page, Err):
            logger.error(f"Failed to migrate table {name}: {page.message}")
            return TableResult.failed(page.message)
        if not page.value:
            break

        # Never write past the count observed at the start
        rows = page.value[: total - offset]
        records = [config.transform(row).as_record() for row in rows]

        if ctx.dry_run:
            logger.info(f"[DRY RUN] Would insert {len(records)} records into {config.target_table}")
            logger.debug(f"Sample record: {json.dumps(records[0], indent=2, default=str)}")
        else:
            written = insert_batch(ctx.target, config.target_table, records, config.columns)
            if isinstance(written, Err):
                logger.error(f"Failed to migrate table {name}: {written.message}")
                return TableResult.failed(written.message)

        migrated += len(records)
        offset += ctx.batch_size
        logger.info(f"Progress: {migrated}/{total} records migrated")

    logger.info(f"Completed migration for table: {name} ({migrated} records)")
    return TableResult.ok(migrated)
