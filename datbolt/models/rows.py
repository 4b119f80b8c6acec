"""Typed row records, one per migrated entity.

Field names are Python names; the ``column`` metadata carries the target
column name, which for AuditReports keeps the source's mixed casing.
Field order is the column order used by the batch writer.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar


def column(name: str, **kwargs):
    return field(metadata={"column": name}, **kwargs)


class TableRow:
    table_name: ClassVar[str]

    @classmethod
    def columns(cls) -> list[str]:
        return [f.metadata.get("column", f.name) for f in fields(cls)]

    def as_record(self) -> dict[str, Any]:
        return {
            f.metadata.get("column", f.name): getattr(self, f.name)
            for f in fields(self)
        }


@dataclass
class AuditReportRow(TableRow):
    table_name: ClassVar[str] = "AuditReports"

    id: str = column("Id")
    user_email: str | None = column("UserEmail")
    generated_by: str | None = column("GeneratedBy")
    timestamp: datetime | str | None = column("Timestamp")
    datacenter: str = column("datacenter")
    datahall: str = column("datahall")
    issues_reported: int = column("issues_reported")
    state: str = column("state")
    walkthrough_id: int = column("walkthrough_id")
    user_full_name: str = column("user_full_name")
    report_data: dict = column("ReportData")


@dataclass
class UserProfileRow(TableRow):
    table_name: ClassVar[str] = "user_profiles"

    user_id: str
    full_name: str | None
    avatar_url: str | None
    phone: str | None
    department: str
    updated_at: datetime | str | None


@dataclass
class UserActivityRow(TableRow):
    table_name: ClassVar[str] = "user_activities"

    id: str
    user_id: str | None
    type: str | None
    description: str | None
    created_at: datetime | str | None


@dataclass
class UserStatRow(TableRow):
    table_name: ClassVar[str] = "user_stats"

    user_id: str
    walkthroughs_completed: int
    issues_resolved: int
    reports_generated: int
    updated_at: datetime | str | None


@dataclass
class IncidentRow(TableRow):
    table_name: ClassVar[str] = "incidents"

    id: str
    location: str | None
    datahall: str | None
    description: str
    severity: str | None
    status: str
    created_at: datetime | str | None
    updated_at: datetime | str | None
    user_id: str | None


@dataclass
class ReportRow(TableRow):
    table_name: ClassVar[str] = "reports"

    id: str
    title: str | None
    generated_by: str | None
    generated_at: datetime | str | None
    date_range_start: datetime | str | None
    date_range_end: datetime | str | None
    datacenter: str | None
    datahall: str | None
    status: str
    total_incidents: int
    report_data: dict


@dataclass
class UserRow(TableRow):
    """Synthesized user; never read from the source directly."""

    table_name: ClassVar[str] = "users"

    id: str
    email: str
    full_name: str | None
    department: str | None
