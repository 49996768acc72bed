"""Initial trust score tables - v1.0

Revision ID: 001_trust_score_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_trust_score_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DIMENSIONS = (
    'pressure', 'structure', 'communication', 'leadership',
    'reliability', 'initiative', 'conflict_risk', 'tone_stability',
)

SCORE_KEY = ('entity_id', 'tenant_id', 'score_type', 'environment', 'sandbox_session_id')


def _namespace_column() -> sa.Column:
    return sa.Column('sandbox_session_id', sa.String(64), nullable=False, server_default='')


def _dimension_columns() -> list[sa.Column]:
    return [sa.Column(name, sa.Float(), nullable=True) for name in DIMENSIONS]


def _structural_columns() -> list[sa.Column]:
    return [
        sa.Column('avg_tenure_months', sa.Float(), nullable=True),
        sa.Column('avg_verified_count', sa.Float(), nullable=True),
        sa.Column('avg_reference_count', sa.Float(), nullable=True),
        sa.Column('sample_size', sa.Integer(), nullable=False),
        sa.Column('model_version', sa.String(64), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _score_columns() -> list[sa.Column]:
    return [
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('tenant_id', sa.String(64), nullable=False, server_default=''),
        sa.Column('score_type', sa.String(32), nullable=False),
        sa.Column('environment', sa.String(16), nullable=False),
        _namespace_column(),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.Column('breakdown', sa.JSON(), nullable=False),
        sa.Column('model_version', sa.String(32), nullable=False),
        sa.Column('confidence', sa.Integer(), nullable=False),
        sa.Column('computed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


NAMESPACED_TABLES = (
    'employment_records', 'reference_requests', 'disputes', 'rehire_registry',
    'fraud_flags', 'behavioral_vectors', 'employer_accounts',
    'industry_baselines', 'employer_baselines', 'risk_model_configs',
)


def upgrade() -> None:
    """Create score, fact, baseline and sandbox tables."""

    # ===== 1. SCORE RECORDS =====
    op.create_table(
        'score_records',
        *_score_columns(),
        sa.UniqueConstraint(*SCORE_KEY, name='uq_score_records_key'),
    )
    op.create_index('ix_score_records_entity_id', 'score_records', ['entity_id'])

    op.create_table(
        'sandbox_score_records',
        *_score_columns(),
        sa.Column('is_sandbox', sa.Boolean(), nullable=False),
        sa.UniqueConstraint(*SCORE_KEY, name='uq_sandbox_score_records_key'),
    )
    op.create_index('ix_sandbox_score_records_entity_id', 'sandbox_score_records', ['entity_id'])

    # ===== 2. FACT TABLES =====
    op.create_table(
        'employment_records',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('employer_id', sa.String(64), nullable=True, index=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('verification_status', sa.String(20), nullable=False),
        _namespace_column(),
    )
    op.create_table(
        'reference_requests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('sentiment', sa.Float(), nullable=True),
        _namespace_column(),
    )
    op.create_table(
        'disputes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False),
        _namespace_column(),
    )
    op.create_table(
        'rehire_registry',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('employer_id', sa.String(64), nullable=True),
        sa.Column('rehire_eligible', sa.Boolean(), nullable=False),
        _namespace_column(),
    )
    op.create_table(
        'fraud_flags',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('confidence', sa.Float(), nullable=True),
        sa.Column('reason', sa.String(255), nullable=True),
        _namespace_column(),
    )
    op.create_table(
        'behavioral_vectors',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('entity_id', sa.String(64), nullable=False, index=True),
        sa.Column('industry_key', sa.String(64), nullable=True, index=True),
        *_dimension_columns(),
        _namespace_column(),
        sa.UniqueConstraint('entity_id', 'sandbox_session_id', name='uq_behavioral_vectors_entity'),
    )
    op.create_table(
        'employer_accounts',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('industry_key', sa.String(64), nullable=True),
        sa.Column('risk_override_allowed', sa.Boolean(), nullable=False),
        _namespace_column(),
    )

    # ===== 3. BASELINES AND WEIGHTS =====
    op.create_table(
        'industry_baselines',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('industry_key', sa.String(64), nullable=False),
        *_dimension_columns(),
        *_structural_columns(),
        _namespace_column(),
        sa.UniqueConstraint('industry_key', 'sandbox_session_id', name='uq_industry_baselines_key'),
    )
    op.create_table(
        'employer_baselines',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('employer_id', sa.String(64), nullable=False),
        sa.Column('industry_key', sa.String(64), nullable=True),
        *_dimension_columns(),
        *_structural_columns(),
        _namespace_column(),
        sa.UniqueConstraint('employer_id', 'sandbox_session_id', name='uq_employer_baselines_key'),
    )
    op.create_table(
        'risk_model_configs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('employer_id', sa.String(64), nullable=True, index=True),
        sa.Column('industry_key', sa.String(64), nullable=True, index=True),
        sa.Column('tenure_weight', sa.Float(), nullable=True),
        sa.Column('reference_weight', sa.Float(), nullable=True),
        sa.Column('rehire_weight', sa.Float(), nullable=True),
        sa.Column('dispute_weight', sa.Float(), nullable=True),
        sa.Column('gap_weight', sa.Float(), nullable=True),
        sa.Column('fraud_weight', sa.Float(), nullable=True),
        sa.Column('override_enabled', sa.Boolean(), nullable=False),
        _namespace_column(),
    )

    for table in NAMESPACED_TABLES:
        op.create_index(f'ix_{table}_sandbox_session_id', table, ['sandbox_session_id'])

    # ===== 4. SANDBOX SESSIONS =====
    op.create_table(
        'sandbox_sessions',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('industry_key', sa.String(64), nullable=False),
        sa.Column('employer_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_sandbox', sa.Boolean(), nullable=False),
    )
    op.create_table(
        'sandbox_profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('sandbox_session_id', sa.String(64), nullable=False, index=True),
        sa.Column('entity_id', sa.String(64), nullable=False),
        sa.Column('is_sandbox', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['sandbox_session_id'], ['sandbox_sessions.id']),
    )


def downgrade() -> None:
    """Drop all trust score tables."""
    op.drop_table('sandbox_profiles')
    op.drop_table('sandbox_sessions')
    for table in reversed(NAMESPACED_TABLES):
        op.drop_table(table)
    op.drop_table('sandbox_score_records')
    op.drop_table('score_records')
