"""CLI entry-point for the DAT-Bolt Supabase -> Azure PostgreSQL data migration.

Usage:
    datbolt-migrate                          # Full migration
    datbolt-migrate --dry-run                # Read and log only, no writes
    datbolt-migrate --table=AuditReports     # Users + a single table
    datbolt-migrate --validate-only          # Row-count comparison only

Environment:
    SUPABASE_URL, SUPABASE_SERVICE_KEY, AZURE_POSTGRESQL_CONNECTION_STRING
"""

import argparse
import logging
import signal
import sys
from datetime import datetime, timezone

from datbolt.config import Settings, settings as default_settings
from datbolt.errors import ConnectionSetupError
from datbolt.etl.context import MigrationContext
from datbolt.etl.runner import build_report, run_migration, write_report
from datbolt.etl.table_migration import TABLE_MIGRATIONS
from datbolt.etl.validation import validate_migration

logger = logging.getLogger("datbolt")

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    # warnings and errors are still shown
    "silent": logging.WARNING,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=LOG_LEVELS.get(level.lower(), logging.INFO),
        format="[%(levelname)s] %(message)s",
        stream=sys.stdout,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrate DAT-Bolt data from Supabase to Azure PostgreSQL")
    parser.add_argument("--dry-run", action="store_true", help="Read and transform, but write nothing")
    parser.add_argument("--table", choices=list(TABLE_MIGRATIONS), help="Migrate only this table (users are always synthesized)")
    parser.add_argument("--validate-only", action="store_true", help="Only compare source and target row counts")
    parser.add_argument("--report-dir", help="Directory for the JSON report (default: MIGRATION_REPORT_DIR)")
    return parser


def install_signal_handlers(ctx: MigrationContext) -> None:
    def _shutdown(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down gracefully...")
        ctx.close()
        sys.exit(0)

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)


def run(args: argparse.Namespace, settings: Settings) -> int:
    logger.info("Starting DAT-Bolt data migration...")
    logger.info(
        f"Configuration: dry_run={args.dry_run}, table={args.table}, "
        f"batch_size={settings.migration_batch_size}, validate_only={args.validate_only}"
    )

    try:
        ctx = MigrationContext.open(settings, dry_run=args.dry_run)
    except ConnectionSetupError as e:
        logger.error(f"Failed to initialize clients: {e}")
        return 1

    install_signal_handlers(ctx)
    try:
        results = {}
        validation = None
        if not args.validate_only:
            results = run_migration(ctx, table=args.table)
        if args.validate_only or not args.dry_run:
            validation = validate_migration(ctx)

        now = datetime.now(timezone.utc)
        report = build_report(results, dry_run=args.dry_run, validation=validation, now=now)
        write_report(report, args.report_dir or settings.migration_report_dir, now=now)
    finally:
        ctx.close()

    summary = report.summary
    logger.info("Migration completed!")
    logger.info(
        f"Summary: {summary.total_records_migrated} records migrated "
        f"across {summary.successful_tables} tables"
    )
    if summary.failed_tables > 0:
        logger.warning(f"{summary.failed_tables} tables had migration failures")
        return 1
    return 0


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or default_settings
    configure_logging(settings.log_level)

    try:
        return run(args, settings)
    except Exception as e:
        logger.exception(f"Migration failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
