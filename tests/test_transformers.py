from datbolt.etl.transformers import tables
from datbolt.etl.transformers.tables import (
    transform_audit_report,
    transform_incident,
    transform_report,
    transform_user_activity,
    transform_user_profile,
    transform_user_stat,
)
from datbolt.models.rows import AuditReportRow, UserProfileRow
from tests.factories import make_audit_report, make_incident, make_report


def test_audit_report_defaults_for_missing_fields(monkeypatch):
    monkeypatch.setattr(tables, "random_walkthrough_id", lambda: 4242)

    row = transform_audit_report({"Id": "r-1", "UserEmail": "tech@example.com"})

    assert isinstance(row, AuditReportRow)
    assert row.issues_reported == 0
    assert row.state == "Healthy"
    assert row.generated_by == "tech@example.com"
    assert row.datacenter == "Unknown"
    assert row.datahall == "Unknown"
    assert row.walkthrough_id == 4242
    assert row.user_full_name == "Unknown User"
    assert row.report_data == {}


def test_audit_report_keeps_present_values():
    source = make_audit_report(issues_reported=3, state="Critical", walkthrough_id=17)

    record = transform_audit_report(source).as_record()

    assert record["Id"] == source["Id"]
    assert record["issues_reported"] == 3
    assert record["state"] == "Critical"
    assert record["walkthrough_id"] == 17
    assert record["ReportData"] == source["ReportData"]
    assert record["Timestamp"] == source["Timestamp"]


def test_audit_report_random_walkthrough_id_in_range():
    row = transform_audit_report({"Id": "r-2"})
    assert 0 <= row.walkthrough_id < 10000


def test_every_column_present_even_for_empty_source_row():
    for transform in (
        transform_audit_report,
        transform_user_profile,
        transform_user_activity,
        transform_user_stat,
        transform_incident,
        transform_report,
    ):
        row = transform({})
        record = row.as_record()
        assert list(record) == type(row).columns()


def test_audit_report_column_order():
    assert AuditReportRow.columns() == [
        "Id", "UserEmail", "GeneratedBy", "Timestamp", "datacenter", "datahall",
        "issues_reported", "state", "walkthrough_id", "user_full_name", "ReportData",
    ]


def test_user_profile_department_default():
    row = transform_user_profile({"user_id": "u-1", "full_name": "Ada", "department": ""})
    assert isinstance(row, UserProfileRow)
    assert row.department == "Data Center Operations"


def test_user_stat_counters_default_to_zero():
    row = transform_user_stat({"user_id": "u-1", "issues_resolved": 4})
    assert (row.walkthroughs_completed, row.issues_resolved, row.reports_generated) == (0, 4, 0)


def test_incident_defaults():
    row = transform_incident(make_incident(description=None, status=None))
    assert row.description == ""
    assert row.status == "open"


def test_report_defaults():
    row = transform_report(make_report(status=None, total_incidents=None, report_data=None))
    assert row.status == "draft"
    assert row.total_incidents == 0
    assert row.report_data == {}


def test_user_activity_is_identity_mapping():
    source = {"id": "a-1", "user_id": "u-1", "type": "issue", "description": "Fan noise", "created_at": "2024-02-01"}
    assert transform_user_activity(source).as_record() == source
