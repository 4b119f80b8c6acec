"""Synthesize the target ``users`` table from profiles and audit reports.

The source keeps its users in an auth schema that cannot be exported, so users
are rebuilt from the two tables that reference them:

1. ``user_profiles``: keyed by ``user_id``, with a placeholder email derived
   from the id.
2. ``AuditReports``: keyed by ``UserEmail``, added only when no user built so
   far has that exact email.

Known defect: a person present in both tables becomes two users, because the
profile-derived email is a placeholder and never equals the real address.
This is kept as-is until the data owners decide how to merge them.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError

from datbolt.errors import UserSynthesisWriteError
from datbolt.etl.context import MigrationContext
from datbolt.etl.extractors.source_tables import read_all
from datbolt.etl.results import Err, TableResult
from datbolt.etl.transformers.tables import UNKNOWN_USER
from datbolt.models.rows import UserRow
from datbolt.models.target import DEFAULT_DEPARTMENT, User

logger = logging.getLogger(__name__)


def placeholder_email(user_id: str) -> str:
    return f"user-{user_id[:8]}@temp.local"


def synthesize_users(
    profiles: Iterable[Mapping],
    audit_reports: Iterable[Mapping],
    new_id: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> list[UserRow]:
    """Build the candidate user set, profiles first, then report emails."""
    users: dict[str, UserRow] = {}

    for profile in profiles:
        user_id = profile.get("user_id")
        if user_id and user_id not in users:
            users[user_id] = UserRow(
                id=user_id,
                email=placeholder_email(user_id),
                full_name=profile.get("full_name"),
                department=profile.get("department"),
            )

    for report in audit_reports:
        email = report.get("UserEmail")
        if email and not any(u.email == email for u in users.values()):
            users[email] = UserRow(
                id=new_id(),
                email=email,
                full_name=report.get("user_full_name") or UNKNOWN_USER,
                department=DEFAULT_DEPARTMENT,
            )

    return list(users.values())


def _read_table(ctx: MigrationContext, table: str, order_by: str, **kwargs) -> list[dict] | Err:
    rows = []
    for page in read_all(ctx.source, table, ctx.batch_size, order_by, **kwargs):
        if isinstance(page, Err):
            return page
        rows.extend(page.value)
    return rows


def insert_user(ctx: MigrationContext, user: UserRow, now: datetime) -> None:
    """Insert one user, skipping on email conflict. Raises UserSynthesisWriteError."""
    try:
        statement = insert(User).values(
            id=uuid.UUID(str(user.id)),
            email=user.email,
            full_name=user.full_name,
            department=user.department,
            is_active=True,
            created_at=now,
            email_confirmed_at=now,
        ).on_conflict_do_nothing(index_elements=[User.email])
        ctx.target.execute_statement(statement)
    except (SQLAlchemyError, ValueError) as e:
        raise UserSynthesisWriteError(user.email, e) from e


def create_users(ctx: MigrationContext) -> TableResult:
    logger.info("Creating users from user profiles...")

    profiles = _read_table(ctx, "user_profiles", "updated_at")
    if isinstance(profiles, Err):
        logger.error(f"Failed to create users: {profiles.message}")
        return TableResult.failed(profiles.message)

    reports = _read_table(
        ctx, "AuditReports", "Timestamp",
        columns="UserEmail,user_full_name",
        not_null=["UserEmail"],
    )
    if isinstance(reports, Err):
        logger.error(f"Failed to create users: {reports.message}")
        return TableResult.failed(reports.message)

    users = synthesize_users(profiles, reports)

    if ctx.dry_run:
        logger.info(f"[DRY RUN] Would create {len(users)} users")
        if users:
            logger.debug(f"Sample user: {json.dumps(users[0].as_record(), indent=2)}")
        return TableResult.ok(len(users))

    now = datetime.now(timezone.utc)
    failed = 0
    for user in users:
        try:
            insert_user(ctx, user, now)
        except UserSynthesisWriteError as e:
            logger.warning(str(e))
            failed += 1

    created = len(users) - failed
    logger.info(f"Created {created} users ({failed} skipped after errors)")
    return TableResult.ok(created)
