"""Initial DAT-Bolt target schema

Revision ID: dat_001
Revises:
Create Date: 2026-10-18

Tables added:
- users (replaces the source's auth.users)
- user_profiles, user_activities, user_stats
- AuditReports
- incidents, reports
- user_dashboard (view)
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = 'dat_001'
down_revision = None
branch_labels = None
depends_on = None

UPDATED_AT_TABLES = ['users', 'user_profiles', 'user_stats', 'incidents']


def _uuid_pk(name='id'):
    return sa.Column(name, postgresql.UUID(as_uuid=True), primary_key=True,
                     server_default=sa.text('gen_random_uuid()'))


def _timestamp(name):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'))


def upgrade() -> None:
    activity_type = postgresql.ENUM('inspection', 'issue', 'report', name='activity_type')
    incident_severity = postgresql.ENUM('critical', 'high', 'medium', 'low', name='incident_severity')
    incident_status = postgresql.ENUM('open', 'in-progress', 'resolved', name='incident_status')

    # users
    op.create_table(
        'users',
        _uuid_pk(),
        sa.Column('email', sa.Text(), nullable=False, unique=True),
        sa.Column('encrypted_password', sa.Text(), nullable=True),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('department', sa.Text(), server_default='Data Center Operations'),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.Column('last_sign_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('email_confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
    )
    op.create_index('users_email_idx', 'users', ['email'])
    op.create_index('users_created_at_idx', 'users', [sa.text('created_at DESC')])

    # user_profiles
    op.create_table(
        'user_profiles',
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('full_name', sa.Text(), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('phone', sa.Text(), nullable=True),
        sa.Column('department', sa.Text(), nullable=False, server_default='Data Center Operations'),
        _timestamp('updated_at'),
    )

    # user_activities
    op.create_table(
        'user_activities',
        _uuid_pk(),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', activity_type, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        _timestamp('created_at'),
    )
    op.create_index('user_activities_user_id_idx', 'user_activities', ['user_id'])
    op.create_index('user_activities_created_at_idx', 'user_activities', [sa.text('created_at DESC')])
    op.create_index('user_activities_type_idx', 'user_activities', ['type'])

    # user_stats
    op.create_table(
        'user_stats',
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('walkthroughs_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('issues_resolved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reports_generated', sa.Integer(), nullable=False, server_default='0'),
        _timestamp('updated_at'),
    )

    # AuditReports
    op.create_table(
        'AuditReports',
        _uuid_pk('Id'),
        sa.Column('UserEmail', sa.Text(), nullable=False),
        sa.Column('GeneratedBy', sa.Text(), nullable=True),
        _timestamp('Timestamp'),
        sa.Column('datacenter', sa.Text(), nullable=False),
        sa.Column('datahall', sa.Text(), nullable=False),
        sa.Column('issues_reported', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('state', sa.Text(), nullable=False, server_default='Healthy'),
        sa.Column('walkthrough_id', sa.Integer(), nullable=False),
        sa.Column('user_full_name', sa.Text(), nullable=False),
        sa.Column('ReportData', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.CheckConstraint("\"state\" IN ('Healthy', 'Warning', 'Critical')", name='state_check'),
    )
    op.create_index('idx_audit_reports_timestamp', 'AuditReports', [sa.text('"Timestamp" DESC')])
    op.create_index('idx_audit_reports_datacenter', 'AuditReports', ['datacenter'])
    op.create_index('idx_audit_reports_datahall', 'AuditReports', ['datahall'])
    op.create_index('idx_audit_reports_state', 'AuditReports', ['state'])
    op.create_index('idx_audit_reports_walkthrough_id', 'AuditReports', ['walkthrough_id'])
    op.create_index('idx_audit_reports_user_email', 'AuditReports', ['UserEmail'])

    # incidents
    op.create_table(
        'incidents',
        _uuid_pk(),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('datahall', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('severity', incident_severity, nullable=False),
        sa.Column('status', incident_status, nullable=False, server_default='open'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('incidents_user_id_idx', 'incidents', ['user_id'])
    op.create_index('incidents_status_idx', 'incidents', ['status'])
    op.create_index('incidents_severity_idx', 'incidents', ['severity'])
    op.create_index('incidents_created_at_idx', 'incidents', [sa.text('created_at DESC')])
    op.execute(
        "CREATE INDEX incidents_description_idx ON incidents "
        "USING gin(to_tsvector('english', description))"
    )

    # reports
    op.create_table(
        'reports',
        _uuid_pk(),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('generated_by', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=False),
        _timestamp('generated_at'),
        sa.Column('date_range_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_range_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('datacenter', sa.Text(), nullable=True),
        sa.Column('datahall', sa.Text(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False, server_default='draft'),
        sa.Column('total_incidents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('report_data', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.CheckConstraint("status IN ('draft', 'published', 'archived')", name='status_check'),
    )
    op.create_index('reports_generated_by_idx', 'reports', ['generated_by'])
    op.create_index('reports_generated_at_idx', 'reports', [sa.text('generated_at DESC')])
    op.create_index('reports_date_range_idx', 'reports', ['date_range_start', 'date_range_end'])
    op.create_index('reports_status_idx', 'reports', ['status'])

    # updated_at maintenance
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
          NEW.updated_at = now();
          RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)
    for table in UPDATED_AT_TABLES:
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
              BEFORE UPDATE ON {table}
              FOR EACH ROW
              EXECUTE FUNCTION update_updated_at_column()
        """)

    # user_dashboard view
    op.execute("""
        CREATE OR REPLACE VIEW user_dashboard AS
        SELECT
          u.id,
          u.email,
          up.full_name,
          up.department,
          us.walkthroughs_completed,
          us.issues_resolved,
          us.reports_generated,
          (SELECT COUNT(*) FROM "AuditReports" ar
           WHERE ar."UserEmail" = u.email
             AND ar."Timestamp" >= CURRENT_DATE - INTERVAL '30 days') AS recent_audits,
          (SELECT COUNT(*) FROM incidents i
           WHERE i.user_id = u.id
             AND i.created_at >= CURRENT_DATE - INTERVAL '30 days') AS recent_incidents
        FROM users u
        LEFT JOIN user_profiles up ON u.id = up.user_id
        LEFT JOIN user_stats us ON u.id = us.user_id
        WHERE u.is_active = true
    """)


def downgrade() -> None:
    op.execute('DROP VIEW IF EXISTS user_dashboard')
    for table in UPDATED_AT_TABLES:
        op.execute(f'DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}')
    op.execute('DROP FUNCTION IF EXISTS update_updated_at_column()')
    op.drop_table('reports')
    op.drop_table('incidents')
    op.drop_table('AuditReports')
    op.drop_table('user_stats')
    op.drop_table('user_activities')
    op.drop_table('user_profiles')
    op.drop_table('users')
    op.execute('DROP TYPE IF EXISTS incident_status')
    op.execute('DROP TYPE IF EXISTS incident_severity')
    op.execute('DROP TYPE IF EXISTS activity_type')
