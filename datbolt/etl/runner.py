"""Fixed-order migration run and the JSON report it leaves behind."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from datbolt.etl.context import MigrationContext
from datbolt.etl.results import MigrationReport, ReportSummary, TableResult, ValidationResult
from datbolt.etl.table_migration import MIGRATION_ORDER, TABLE_MIGRATIONS, migrate_table
from datbolt.etl.users import create_users
from datbolt.etl.validation import validate_migration

logger = logging.getLogger(__name__)


def run_migration(ctx: MigrationContext, table: str | None = None) -> dict[str, TableResult]:
    """Users first, then every selected table in dependency order."""
    if table is not None and table not in TABLE_MIGRATIONS:
        raise ValueError(f"Unknown table '{table}'. Available: {list(TABLE_MIGRATIONS)}")

    results = {"users": create_users(ctx)}
    for name in MIGRATION_ORDER:
        if table is None or name == table:
            results[name] = migrate_table(ctx, name, TABLE_MIGRATIONS[name])
    return results


def build_report(
    results: dict[str, TableResult],
    dry_run: bool,
    validation: dict[str, ValidationResult] | None = None,
    now: datetime | None = None,
) -> MigrationReport:
    now = now or datetime.now(timezone.utc)
    succeeded = [r for r in results.values() if r.success]
    return MigrationReport(
        timestamp=now.isoformat(),
        dry_run=dry_run,
        results=results,
        validation=validation,
        summary=ReportSummary(
            total_tables=len(results),
            successful_tables=len(succeeded),
            failed_tables=len(results) - len(succeeded),
            total_records_migrated=sum(r.records_migrated or 0 for r in succeeded),
        ),
    )


def report_filename(now: datetime) -> str:
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return f"migration-report-{stamp}.json"


def write_report(report: MigrationReport, report_dir: str | Path, now: datetime | None = None) -> Path:
    now = now or datetime.now(timezone.utc)
    path = Path(report_dir) / report_filename(now)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.to_json(), encoding="utf-8")
    logger.info(f"Migration report saved to: {path}")
    return path
