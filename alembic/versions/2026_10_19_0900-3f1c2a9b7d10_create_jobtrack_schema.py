"""create_jobtrack_schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3f1c2a9b7d10'
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _base_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create users, job tracking, permission, caller and logging tables."""

    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('role', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('profile_picture', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('department', sa.String(length=50), nullable=True),
        sa.Column('position', sa.String(length=50), nullable=True),
        sa.CheckConstraint('role IN (0, 1, 2)', name='ck_users_role'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'job_applications',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_name', sa.String(length=100), nullable=False),
        sa.Column('position_title', sa.String(length=100), nullable=False),
        sa.Column('application_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=True, server_default='applied'),
        sa.Column('job_description', sa.Text(), nullable=True),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('salary_range', sa.String(length=50), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('application_url', sa.String(length=500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('follow_up_date', sa.Date(), nullable=True),
        sa.Column('resume_file_path', sa.String(length=500), nullable=True),
        sa.Column('has_resume', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_job_applications_id', 'job_applications', ['id'])
    op.create_index('ix_job_applications_user_id', 'job_applications', ['user_id'])
    op.create_index('ix_job_applications_status', 'job_applications', ['status'])

    op.create_table(
        'interviews',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'job_application_id',
            sa.Integer(),
            sa.ForeignKey('job_applications.id', ondelete='CASCADE'),
            nullable=True,
        ),
        sa.Column('interview_type', sa.String(length=20), nullable=True, server_default='video'),
        sa.Column('scheduled_date', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True, server_default='60'),
        sa.Column('interviewer_name', sa.String(length=100), nullable=True),
        sa.Column('interviewer_email', sa.String(length=100), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('meeting_link', sa.String(length=500), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='scheduled'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('feedback', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('company_name', sa.String(length=100), nullable=True),
        sa.Column('position_title', sa.String(length=100), nullable=True),
        sa.Column('job_description', sa.Text(), nullable=True),
        sa.Column('resume_link', sa.String(length=500), nullable=True),
        sa.CheckConstraint(
            'job_application_id IS NOT NULL OR (company_name IS NOT NULL AND position_title IS NOT NULL)',
            name='ck_interviews_application_or_company',
        ),
        sa.CheckConstraint('rating IS NULL OR (rating >= 1 AND rating <= 5)', name='ck_interviews_rating'),
    )
    op.create_index('ix_interviews_id', 'interviews', ['id'])
    op.create_index('ix_interviews_user_id', 'interviews', ['user_id'])
    op.create_index('ix_interviews_job_application_id', 'interviews', ['job_application_id'])
    op.create_index('ix_interviews_scheduled_date', 'interviews', ['scheduled_date'])
    op.create_index('ix_interviews_status', 'interviews', ['status'])

    op.create_table(
        'schedule_permissions',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('granted_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('granted_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('user_id', 'target_user_id', name='unique_schedule_permission'),
    )
    op.create_index('ix_schedule_permissions_id', 'schedule_permissions', ['id'])
    op.create_index('ix_schedule_permissions_user_id', 'schedule_permissions', ['user_id'])
    op.create_index('ix_schedule_permissions_target_user_id', 'schedule_permissions', ['target_user_id'])

    op.create_table(
        'call_schedules',
        *_base_columns(),
        sa.Column('contact_name', sa.String(length=100), nullable=False),
        sa.Column('contact_email', sa.String(length=100), nullable=True),
        sa.Column('contact_phone', sa.String(length=30), nullable=True),
        sa.Column('company', sa.String(length=100), nullable=True),
        sa.Column('call_type', sa.String(length=30), nullable=True, server_default='follow_up'),
        sa.Column('scheduled_time', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True, server_default='30'),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='scheduled'),
        sa.Column('priority', sa.String(length=10), nullable=True, server_default='medium'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('preparation_notes', sa.Text(), nullable=True),
        sa.Column('outcome_notes', sa.Text(), nullable=True),
        sa.Column('failed_reason', sa.Text(), nullable=True),
        sa.Column('actual_duration', sa.Integer(), nullable=True),
        sa.Column('assigned_caller_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reminder_minutes', JSON_TYPE, nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_call_schedules_id', 'call_schedules', ['id'])
    op.create_index('ix_call_schedules_scheduled_time', 'call_schedules', ['scheduled_time'])
    op.create_index('ix_call_schedules_status', 'call_schedules', ['status'])
    op.create_index('ix_call_schedules_assigned_caller_id', 'call_schedules', ['assigned_caller_id'])

    op.create_table(
        'call_notifications',
        *_base_columns(),
        sa.Column('caller_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'call_schedule_id',
            sa.Integer(),
            sa.ForeignKey('call_schedules.id', ondelete='CASCADE'),
            nullable=True,
        ),
        sa.Column('notification_type', sa.String(length=30), nullable=True, server_default='reminder'),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('scheduled_for', sa.DateTime(), nullable=False),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='pending'),
        sa.Column('priority', sa.String(length=10), nullable=True, server_default='medium'),
        sa.Column('delivery_method', sa.String(length=20), nullable=True, server_default='in_app'),
    )
    op.create_index('ix_call_notifications_id', 'call_notifications', ['id'])
    op.create_index('ix_call_notifications_caller_id', 'call_notifications', ['caller_id'])
    op.create_index('ix_call_notifications_call_schedule_id', 'call_notifications', ['call_schedule_id'])
    op.create_index('ix_call_notifications_scheduled_for', 'call_notifications', ['scheduled_for'])
    op.create_index('ix_call_notifications_status', 'call_notifications', ['status'])

    op.create_table(
        'caller_performance',
        *_base_columns(),
        sa.Column('caller_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('calls_scheduled', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('calls_completed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('calls_failed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_call_duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('average_call_duration', sa.Numeric(8, 2), nullable=True, server_default='0'),
        sa.Column('success_rate', sa.Numeric(5, 2), nullable=True, server_default='0'),
        sa.Column('performance_score', sa.Numeric(5, 2), nullable=True, server_default='0'),
        sa.UniqueConstraint('caller_id', 'date', name='unique_caller_performance_day'),
    )
    op.create_index('ix_caller_performance_id', 'caller_performance', ['id'])
    op.create_index('ix_caller_performance_caller_id', 'caller_performance', ['caller_id'])
    op.create_index('ix_caller_performance_date', 'caller_performance', ['date'])

    op.create_table(
        'activity_logs',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=True),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('entity_name', sa.String(length=255), nullable=True),
        sa.Column('details', JSON_TYPE, nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
    )
    op.create_index('ix_activity_logs_id', 'activity_logs', ['id'])
    op.create_index('ix_activity_logs_user_id', 'activity_logs', ['user_id'])
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])

    op.create_table(
        'caller_activity_logs',
        *_base_columns(),
        sa.Column('caller_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('activity_type', sa.String(length=50), nullable=False),
        sa.Column(
            'call_schedule_id',
            sa.Integer(),
            sa.ForeignKey('call_schedules.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('contact_name', sa.String(length=100), nullable=True),
        sa.Column('company', sa.String(length=100), nullable=True),
        sa.Column('call_duration', sa.Integer(), nullable=True),
        sa.Column('details', JSON_TYPE, nullable=True),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
    )
    op.create_index('ix_caller_activity_logs_id', 'caller_activity_logs', ['id'])
    op.create_index('ix_caller_activity_logs_caller_id', 'caller_activity_logs', ['caller_id'])
    op.create_index('ix_caller_activity_logs_activity_type', 'caller_activity_logs', ['activity_type'])

    op.create_table(
        'sessions',
        *_base_columns(),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('refresh_token_hash', sa.String(length=64), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('last_used', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.Column('ip_address', sa.String(length=45), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_sessions_id', 'sessions', ['id'])
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_token_hash', 'sessions', ['token_hash'])
    op.create_index('ix_sessions_refresh_token_hash', 'sessions', ['refresh_token_hash'])


def downgrade() -> None:
    for table in (
        'sessions',
        'caller_activity_logs',
        'activity_logs',
        'caller_performance',
        'call_notifications',
        'call_schedules',
        'schedule_permissions',
        'interviews',
        'job_applications',
        'users',
    ):
        op.drop_table(table)
