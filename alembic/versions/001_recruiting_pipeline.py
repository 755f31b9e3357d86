"""
Initial migration - recruiting pipeline tables.

Revision ID: 001_recruiting_pipeline
Revises:
Create Date: 2026-10-18

Creates candidate, position, pipeline_stage, pipeline_entry and
automation_log, including the partial unique index that allows at most one
active application per (tenant, candidate, position).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_recruiting_pipeline'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    # ===== CANDIDATE TABLE =====
    op.create_table(
        'candidate',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('current_title', sa.String(200), nullable=True),
        sa.Column('current_company', sa.String(255), nullable=True),
        sa.Column('linkedin_url', sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_candidate_tenant_id', 'candidate', ['tenant_id'])

    # ===== POSITION TABLE =====
    op.create_table(
        'position',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_position_tenant_id', 'position', ['tenant_id'])

    # ===== PIPELINE STAGE TABLE =====
    op.create_table(
        'pipeline_stage',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('color', sa.String(7), nullable=False, server_default='#1F2937'),
        sa.Column('pipeline_type', sa.String(20), nullable=False, server_default='recruiting'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_pipeline_stage_tenant_id', 'pipeline_stage', ['tenant_id'])

    # ===== PIPELINE ENTRY TABLE =====
    op.create_table(
        'pipeline_entry',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('candidate_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('candidate.id'), nullable=False),
        sa.Column('position_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('position.id'), nullable=False),
        sa.Column('stage_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('pipeline_stage.id'), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('interview_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('hired_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rejected_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('withdrawn_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('offer_details', postgresql.JSONB(), nullable=True),
        sa.Column('rejection_reason', sa.String(500), nullable=True),
        sa.Column('custom_fields', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('active', 'hired', 'passed', 'withdrawn')",
            name='ck_pipeline_entry_status',
        ),
        sa.CheckConstraint(
            'rating IS NULL OR (rating >= 0 AND rating <= 5)',
            name='ck_pipeline_entry_rating',
        ),
    )
    op.create_index('ix_pipeline_entry_tenant_id', 'pipeline_entry', ['tenant_id'])
    op.create_index('ix_pipeline_entry_candidate_id', 'pipeline_entry', ['candidate_id'])
    op.create_index('ix_pipeline_entry_position_id', 'pipeline_entry', ['position_id'])
    op.create_index('ix_pipeline_entry_stage_id', 'pipeline_entry', ['stage_id'])
    op.create_index('ix_pipeline_entry_status', 'pipeline_entry', ['status'])
    op.create_index('ix_pipeline_entry_tenant_applied', 'pipeline_entry', ['tenant_id', 'applied_at'])
    op.create_index(
        'uq_pipeline_entry_active_application',
        'pipeline_entry',
        ['tenant_id', 'candidate_id', 'position_id'],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
    )

    # ===== AUTOMATION LOG TABLE =====
    op.create_table(
        'automation_log',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('automation_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('trigger_type', sa.String(100), nullable=False),
        sa.Column('trigger_data', postgresql.JSONB(), nullable=False),
        sa.Column('conditions_met', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('executed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_automation_log_tenant_id', 'automation_log', ['tenant_id'])
    op.create_index('ix_automation_log_trigger_type', 'automation_log', ['trigger_type'])
    op.create_index('ix_automation_log_executed_at', 'automation_log', ['executed_at'])


def downgrade() -> None:
    """Drop all tables in reverse order."""
    op.drop_table('automation_log')
    op.drop_index('uq_pipeline_entry_active_application', table_name='pipeline_entry')
    op.drop_table('pipeline_entry')
    op.drop_table('pipeline_stage')
    op.drop_table('position')
    op.drop_table('candidate')
