"""SQLAlchemy ORM models for the Azure PostgreSQL target schema.

These mirror the tables the migration writes into. The alembic revision in
``alembic/versions`` creates them; the pipeline uses them for the user insert
and the validation counts.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DEFAULT_DEPARTMENT = "Data Center Operations"

ActivityType = Enum("inspection", "issue", "report", name="activity_type")
IncidentSeverity = Enum("critical", "high", "medium", "low", name="incident_severity")
IncidentStatus = Enum("open", "in-progress", "resolved", name="incident_status")


class TargetBase(DeclarativeBase):
    pass


class User(TargetBase):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    encrypted_password: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    department: Mapped[str | None] = mapped_column(Text, server_default=DEFAULT_DEPARTMENT)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    last_sign_in_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    email_confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))


class UserProfile(TargetBase):
    __tablename__ = "user_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    full_name: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    department: Mapped[str] = mapped_column(Text, nullable=False, server_default=DEFAULT_DEPARTMENT)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )


class UserActivity(TargetBase):
    __tablename__ = "user_activities"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(ActivityType, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )


class UserStat(TargetBase):
    __tablename__ = "user_stats"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    walkthroughs_completed: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    issues_resolved: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    reports_generated: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )


class AuditReport(TargetBase):
    __tablename__ = "AuditReports"
    __table_args__ = (
        CheckConstraint("\"state\" IN ('Healthy', 'Warning', 'Critical')", name="state_check"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        "Id", UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    user_email: Mapped[str] = mapped_column("UserEmail", Text, nullable=False, index=True)
    generated_by: Mapped[str | None] = mapped_column("GeneratedBy", Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        "Timestamp", DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    datacenter: Mapped[str] = mapped_column(Text, nullable=False)
    datahall: Mapped[str] = mapped_column(Text, nullable=False)
    issues_reported: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    state: Mapped[str] = mapped_column(Text, nullable=False, server_default="Healthy")
    walkthrough_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_full_name: Mapped[str] = mapped_column(Text, nullable=False)
    report_data: Mapped[dict] = mapped_column(
        "ReportData", JSONB, nullable=False, server_default=text("'{}'::jsonb")
    )


class Incident(TargetBase):
    __tablename__ = "incidents"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    location: Mapped[str] = mapped_column(Text, nullable=False)
    datahall: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    severity: Mapped[str] = mapped_column(IncidentSeverity, nullable=False)
    status: Mapped[str] = mapped_column(IncidentStatus, nullable=False, server_default="open")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


class Report(TargetBase):
    __tablename__ = "reports"
    __table_args__ = (
        CheckConstraint("status IN ('draft', 'published', 'archived')", name="status_check"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    generated_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=False
    )
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("now()")
    )
    date_range_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    date_range_end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    datacenter: Mapped[str | None] = mapped_column(Text, nullable=True)
    datahall: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, server_default="draft")
    total_incidents: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    report_data: Mapped[dict] = mapped_column(
        JSONB, nullable=False, server_default=text("'{}'::jsonb")
    )


# Lookup used by validation: target table name -> mapped Table
TARGET_TABLES = {
    model.__tablename__: model.__table__
    for model in (User, UserProfile, UserActivity, UserStat, AuditReport, Incident, Report)
}
