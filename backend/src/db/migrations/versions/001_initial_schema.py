"""Initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-17

Creates the account directory (users, user_regions, device_tokens),
daily reports with their remarks, and in-app notifications.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _uuid_column() -> sa.Column:
    """UUIDv7 column: native UUID on PostgreSQL, 16 bytes on SQLite."""
    return sa.Column(
        'uuid',
        postgresql.UUID(as_uuid=True).with_variant(sa.LargeBinary(16), 'sqlite'),
        nullable=False
    )


def upgrade() -> None:
    """
    Create all tables.

    Tables:
    - users: Staff accounts with role (Admin/RSM/ASM/User)
    - user_regions: Region assignments (one row per user per region)
    - device_tokens: FCM registration tokens per user device
    - reports: Daily activity reports with submitter snapshot and metrics
    - report_remarks: Timestamped remarks appended to reports
    - notifications: In-app bell notifications
    """
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column(
            'role',
            sa.Enum('Admin', 'RSM', 'ASM', 'User', name='user_role', create_constraint=True),
            nullable=False
        ),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_uuid', 'users', ['uuid'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_is_active', 'users', ['is_active'])

    op.create_table(
        'user_regions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('region', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'region', name='uq_user_regions_user_region'),
    )
    op.create_index('ix_user_regions_user_id', 'user_regions', ['user_id'])
    op.create_index('ix_user_regions_region', 'user_regions', ['region'])

    op.create_table(
        'device_tokens',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=512), nullable=False),
        sa.Column('device_name', sa.String(length=100), nullable=True),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'token', name='uq_device_tokens_user_token'),
    )
    op.create_index('ix_device_tokens_uuid', 'device_tokens', ['uuid'], unique=True)
    op.create_index('ix_device_tokens_user_id', 'device_tokens', ['user_id'])
    op.create_index('ix_device_tokens_token', 'device_tokens', ['token'])

    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('report_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('submitted_by_id', sa.Integer(), nullable=False),
        sa.Column('submitted_by_name', sa.String(length=255), nullable=True),
        sa.Column('submitted_by_role', sa.String(length=20), nullable=False),
        sa.Column('submitted_by_region', sa.String(length=50), nullable=True),
        sa.Column('location_name', sa.String(length=255), nullable=True),
        sa.Column('outstanding_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('oow_collection', sa.Float(), nullable=False, server_default='0'),
        sa.Column('good_inventory', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('defective_inventory', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('agreement_dispatch', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sd_collection', sa.Float(), nullable=False, server_default='0'),
        sa.Column('multibrand_stn_dispatched', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('multibrand_pending_stns', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['submitted_by_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_reports_uuid', 'reports', ['uuid'], unique=True)
    op.create_index('ix_reports_report_date', 'reports', ['report_date'])
    op.create_index('ix_reports_created_at', 'reports', ['created_at'])
    op.create_index('ix_reports_submitted_by_id', 'reports', ['submitted_by_id'])
    op.create_index('ix_reports_submitted_by_region', 'reports', ['submitted_by_region'])

    op.create_table(
        'report_remarks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('report_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('author_name', sa.String(length=255), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_report_remarks_uuid', 'report_remarks', ['uuid'], unique=True)
    op.create_index('ix_report_remarks_report_id', 'report_remarks', ['report_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('report_id', sa.Integer(), nullable=True),
        sa.Column(
            'type',
            sa.Enum('comment', 'reminder', name='notification_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('message', sa.String(length=500), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_notifications_uuid', 'notifications', ['uuid'], unique=True)
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    # Partial index for unread count queries (PostgreSQL only)
    dialect = op.get_bind().dialect.name
    if dialect == 'postgresql':
        op.create_index(
            'ix_notifications_user_unread',
            'notifications',
            ['user_id'],
            postgresql_where=sa.text('is_read = false'),
        )
    else:
        op.create_index('ix_notifications_user_unread', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table('notifications')
    op.drop_table('report_remarks')
    op.drop_table('reports')
    op.drop_table('device_tokens')
    op.drop_table('user_regions')
    op.drop_table('users')

    dialect = op.get_bind().dialect.name
    if dialect == 'postgresql':
        op.execute('DROP TYPE IF EXISTS notification_type')
        op.execute('DROP TYPE IF EXISTS user_role')
