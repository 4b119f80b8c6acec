"""Per-table row transforms from source (Supabase) shape to target rows.

Defaults follow the source application's own rule: anything falsy counts as
missing, so ``""`` and ``0`` are replaced just like an absent key.
"""

import random
from typing import Any, Mapping

from datbolt.models.rows import (
    AuditReportRow,
    IncidentRow,
    ReportRow,
    UserActivityRow,
    UserProfileRow,
    UserStatRow,
)
from datbolt.models.target import DEFAULT_DEPARTMENT

SourceRow = Mapping[str, Any]

UNKNOWN_LOCATION = "Unknown"
UNKNOWN_USER = "Unknown User"
WALKTHROUGH_ID_RANGE = 10000


def random_walkthrough_id() -> int:
    return random.randrange(WALKTHROUGH_ID_RANGE)


def transform_audit_report(row: SourceRow) -> AuditReportRow:
    return AuditReportRow(
        id=row.get("Id"),
        user_email=row.get("UserEmail"),
        generated_by=row.get("GeneratedBy") or row.get("UserEmail"),
        timestamp=row.get("Timestamp"),
        datacenter=row.get("datacenter") or UNKNOWN_LOCATION,
        datahall=row.get("datahall") or UNKNOWN_LOCATION,
        issues_reported=row.get("issues_reported") or 0,
        state=row.get("state") or "Healthy",
        walkthrough_id=row.get("walkthrough_id") or random_walkthrough_id(),
        user_full_name=row.get("user_full_name") or UNKNOWN_USER,
        report_data=row.get("ReportData") or {},
    )


def transform_user_profile(row: SourceRow) -> UserProfileRow:
    return UserProfileRow(
        user_id=row.get("user_id"),
        full_name=row.get("full_name"),
        avatar_url=row.get("avatar_url"),
        phone=row.get("phone"),
        department=row.get("department") or DEFAULT_DEPARTMENT,
        updated_at=row.get("updated_at"),
    )


def transform_user_activity(row: SourceRow) -> UserActivityRow:
    return UserActivityRow(
        id=row.get("id"),
        user_id=row.get("user_id"),
        type=row.get("type"),
        description=row.get("description"),
        created_at=row.get("created_at"),
    )


def transform_user_stat(row: SourceRow) -> UserStatRow:
    return UserStatRow(
        user_id=row.get("user_id"),
        walkthroughs_completed=row.get("walkthroughs_completed") or 0,
        issues_resolved=row.get("issues_resolved") or 0,
        reports_generated=row.get("reports_generated") or 0,
        updated_at=row.get("updated_at"),
    )


def transform_incident(row: SourceRow) -> IncidentRow:
    return IncidentRow(
        id=row.get("id"),
        location=row.get("location"),
        datahall=row.get("datahall"),
        description=row.get("description") or "",
        severity=row.get("severity"),
        status=row.get("status") or "open",
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        user_id=row.get("user_id"),
    )


def transform_report(row: SourceRow) -> ReportRow:
    return ReportRow(
        id=row.get("id"),
        title=row.get("title"),
        generated_by=row.get("generated_by"),
        generated_at=row.get("generated_at"),
        date_range_start=row.get("date_range_start"),
        date_range_end=row.get("date_range_end"),
        datacenter=row.get("datacenter"),
        datahall=row.get("datahall"),
        status=row.get("status") or "draft",
        total_incidents=row.get("total_incidents") or 0,
        report_data=row.get("report_data") or {},
    )
