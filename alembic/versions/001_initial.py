# alembic/versions/001_initial.py

"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create trade table
    op.create_table('trade',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('symbol', sa.String(length=32), nullable=True),
        sa.Column('profit_loss', sa.Numeric(precision=14, scale=2), nullable=True),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trade_user_id'), 'trade', ['user_id'], unique=False)
    op.create_index('ix_trade_user_closed_at', 'trade', ['user_id', 'closed_at'], unique=False)

    # Create user_settings table
    op.create_table('user_settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('initial_investment', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('rolling_target_mode', sa.String(length=16), nullable=False, server_default='per-day'),
        sa.Column('rolling_target_percent', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('rolling_target_carryover_cap', sa.Float(), nullable=False, server_default='2.0'),
        sa.Column('rolling_target_suggestions_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('rolling_target_suggestion_method', sa.String(length=16), nullable=False, server_default='median'),
        sa.Column('rolling_target_dismissed_suggestion', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('rolling_target_last_suggestion_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('rolling_target_rollover_weekends', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_settings_user_id'), 'user_settings', ['user_id'], unique=True)


def downgrade():
    op.drop_index(op.f('ix_user_settings_user_id'), table_name='user_settings')
    op.drop_table('user_settings')
    op.drop_index('ix_trade_user_closed_at', table_name='trade')
    op.drop_index(op.f('ix_trade_user_id'), table_name='trade')
    op.drop_table('trade')
