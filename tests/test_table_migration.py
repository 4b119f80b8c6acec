import logging

from datbolt.etl.context import MigrationContext
from datbolt.etl.table_migration import MIGRATION_ORDER, TABLE_MIGRATIONS, migrate_table
from tests.factories import make_rows


def test_paginates_2500_audit_reports_in_three_fetches(ctx, source, target):
    source.tables["AuditReports"] = make_rows("AuditReports", 2500)

    result = migrate_table(ctx, "AuditReports", TABLE_MIGRATIONS["AuditReports"])

    assert result.success
    assert result.records_migrated == 2500
    pages = [c for c in source.select_calls if c["table"] == "AuditReports"]
    assert [c["offset"] for c in pages] == [0, 1000, 2000]
    assert [len(p) for p in (s[1] for s in target.insert_statements)] == [1000 * 11, 1000 * 11, 500 * 11]
    assert len(target.rows["AuditReports"]) == 2500


def test_empty_table_is_skipped(ctx, source, target, caplog):
    with caplog.at_level(logging.WARNING):
        result = migrate_table(ctx, "incidents", TABLE_MIGRATIONS["incidents"])

    assert result.success
    assert result.records_migrated == 0
    assert target.statements == []
    assert source.select_calls == []
    assert "No data found in table incidents" in caplog.text


def test_dry_run_writes_nothing_but_counts(dry_ctx, source, target):
    source.tables["reports"] = make_rows("reports", 1200)

    result = migrate_table(dry_ctx, "reports", TABLE_MIGRATIONS["reports"])

    assert result.success
    assert result.records_migrated == 1200
    assert target.statements == []


def test_source_error_fails_only_this_table(ctx, source):
    source.tables["incidents"] = make_rows("incidents", 3)
    source.fail("incidents", "permission denied for table incidents")

    result = migrate_table(ctx, "incidents", TABLE_MIGRATIONS["incidents"])

    assert not result.success
    assert "permission denied" in result.error
    assert result.records_migrated is None


def test_write_error_stops_the_table(source, target):
    small = MigrationContext(source=source, target=target, batch_size=2)
    source.tables["incidents"] = make_rows("incidents", 5)
    target.fail("incidents")

    result = migrate_table(small, "incidents", TABLE_MIGRATIONS["incidents"])

    assert not result.success
    assert "Failed to insert batch into incidents" in result.error
    assert len(target.insert_statements) == 1


def test_stops_at_count_observed_at_start(source, target):
    small = MigrationContext(source=source, target=target, batch_size=2)
    source.tables["user_stats"] = make_rows("user_stats", 3)
    original_count = source.count

    def count_then_grow(table):
        total = original_count(table)
        source.tables[table].extend(make_rows(table, 4))
        return total

    source.count = count_then_grow

    result = migrate_table(small, "user_stats", TABLE_MIGRATIONS["user_stats"])

    assert result.records_migrated == 3
    assert len(target.rows["user_stats"]) == 3


def test_orders_by_table_timestamp_column():
    assert TABLE_MIGRATIONS["AuditReports"].order_by == "Timestamp"
    assert TABLE_MIGRATIONS["reports"].order_by == "generated_at"
    assert TABLE_MIGRATIONS["incidents"].order_by == "created_at"


def test_migration_order_covers_every_table():
    assert MIGRATION_ORDER == [
        "user_profiles", "user_activities", "user_stats", "AuditReports", "incidents", "reports",
    ]
    assert set(MIGRATION_ORDER) == set(TABLE_MIGRATIONS)
