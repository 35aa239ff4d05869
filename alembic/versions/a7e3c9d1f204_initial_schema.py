"""initial_schema

Revision ID: a7e3c9d1f204
Revises:
Create Date: 2025-06-02 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a7e3c9d1f204'
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name, nullable=False):
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade():
    op.create_table(
        'domain_verifications',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('host', sa.String(length=63), nullable=False),
        sa.Column('ttl', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _timestamp('verified_at', nullable=True),
        _timestamp('expires_at', nullable=True),
        _timestamp('last_checked_at', nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_domain_verifications_domain', 'domain_verifications', ['domain'], unique=True)
    op.create_index('ix_domain_verifications_status', 'domain_verifications', ['status'])

    op.create_table(
        'admin_users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False, unique=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('license_key', sa.String(length=40), nullable=False),
        sa.Column('license_status', sa.String(length=20), nullable=False),
        _timestamp('issued_at'),
        sa.Column('seat_limit', sa.Integer(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('ix_admin_users_domain', 'admin_users', ['domain'])
    op.create_index('ix_admin_users_license_key', 'admin_users', ['license_key'], unique=True)
    op.create_index('idx_admin_users_domain_status', 'admin_users', ['domain', 'license_status'])

    op.create_table(
        'company_users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('email', sa.String(length=254), nullable=False, unique=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='employee'),
        _timestamp('created_at'),
    )
    op.create_index('ix_company_users_domain', 'company_users', ['domain'])
    op.create_index('ix_company_users_role', 'company_users', ['role'])

    op.create_table(
        'checkin_questions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('question', sa.String(length=500), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_positive', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_support', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.UniqueConstraint('domain', 'question', name='uq_question_domain_text'),
    )
    op.create_index('ix_checkin_questions_domain', 'checkin_questions', ['domain'])

    op.create_table(
        'checkin_responses',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('employee_id', sa.String(length=100), nullable=False),
        _timestamp('submitted_at'),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('support_requested', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('acked', sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp('acked_at', nullable=True),
        sa.Column('meta', sa.JSON(), nullable=False),
    )
    op.create_index('ix_checkin_responses_employee_id', 'checkin_responses', ['employee_id'])
    op.create_index('ix_checkin_responses_support_requested', 'checkin_responses', ['support_requested'])
    op.create_index('idx_checkin_responses_domain_submitted', 'checkin_responses', ['domain', 'submitted_at'])

    op.create_table(
        'weekly_report_dispatches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('week_ending', sa.String(length=10), nullable=False),
        sa.Column('recipients', sa.JSON(), nullable=False),
        _timestamp('sent_at'),
        sa.UniqueConstraint('domain', 'week_ending', name='uq_dispatch_domain_week'),
    )
    op.create_index('ix_weekly_report_dispatches_domain', 'weekly_report_dispatches', ['domain'])

    op.create_table(
        'support_tool_contents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('tips', sa.JSON(), nullable=False),
        sa.Column('eap', sa.JSON(), nullable=False),
        sa.Column('hr', sa.JSON(), nullable=False),
        sa.Column('crisis', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp('updated_at'),
    )
    op.create_index('ix_support_tool_contents_domain', 'support_tool_contents', ['domain'])
    op.create_index('ix_support_tool_contents_is_active', 'support_tool_contents', ['is_active'])

    op.create_table(
        'support_requests',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('domain', sa.String(length=253), nullable=False),
        sa.Column('employee_id', sa.String(length=100), nullable=False, server_default=''),
        sa.Column('support_type', sa.String(length=20), nullable=False, server_default='hr'),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('contact_name', sa.String(length=200), nullable=False, server_default=''),
        sa.Column('contact_email', sa.String(length=254), nullable=False, server_default=''),
        sa.Column('contact_phone', sa.String(length=20), nullable=False, server_default=''),
        sa.Column('checkin_id', sa.String(length=50), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='new'),
        _timestamp('status_updated_at'),
        _timestamp('resolved_at', nullable=True),
        sa.Column('routed_to', sa.Integer(), nullable=False, server_default='0'),
        _timestamp('submitted_at'),
    )
    op.create_index('ix_support_requests_employee_id', 'support_requests', ['employee_id'])
    op.create_index('ix_support_requests_support_type', 'support_requests', ['support_type'])
    op.create_index('ix_support_requests_status', 'support_requests', ['status'])
    op.create_index('idx_support_requests_domain_submitted', 'support_requests', ['domain', 'submitted_at'])


def downgrade():
    op.drop_table('support_requests')
    op.drop_table('support_tool_contents')
    op.drop_table('weekly_report_dispatches')
    op.drop_table('checkin_responses')
    op.drop_table('checkin_questions')
    op.drop_table('company_users')
    op.drop_table('admin_users')
    op.drop_table('domain_verifications')
