"""physical profile and metrics history tables

Revision ID: 001
Revises:
Create Date: 2025-04-13 20:13:38.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# JSONB on Postgres, plain JSON elsewhere
JSONType = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def upgrade() -> None:
    # Current physical profile, one row per user
    op.create_table(
        'user_physical_profile',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('biological_sex', sa.String(length=13), server_default='not_specified', nullable=False),
        sa.Column('height_mm', sa.Integer(), nullable=True),
        sa.Column('weight_g', sa.Integer(), nullable=True),
        sa.Column('max_heart_rate', sa.Integer(), nullable=False),
        sa.Column('resting_heart_rate', sa.Integer(), nullable=True),
        sa.Column('fitness_level', sa.String(length=13), server_default='not_specified', nullable=False),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('height_mm IS NULL OR height_mm > 0', name='ck_profile_height_positive'),
        sa.CheckConstraint('weight_g IS NULL OR weight_g > 0', name='ck_profile_weight_positive'),
        sa.CheckConstraint('max_heart_rate > 0', name='ck_profile_max_hr_positive'),
    )
    op.create_index('ix_user_physical_profile_user_id', 'user_physical_profile', ['user_id'], unique=True)

    # Height history
    op.create_table(
        'height_history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('height_mm', sa.Integer(), nullable=False),
        sa.CheckConstraint('height_mm > 0', name='ck_height_history_positive'),
    )
    op.create_index('ix_height_history_user_id', 'height_history', ['user_id'])
    op.create_index('ix_height_history_user_recorded', 'height_history', ['user_id', 'recorded_at'])

    # Weight history
    op.create_table(
        'weight_history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('weight_g', sa.Integer(), nullable=False),
        sa.CheckConstraint('weight_g > 0', name='ck_weight_history_positive'),
    )
    op.create_index('ix_weight_history_user_id', 'weight_history', ['user_id'])
    op.create_index('ix_weight_history_user_recorded', 'weight_history', ['user_id', 'recorded_at'])

    # Heart rate zone snapshots (full zone table stored as JSONB)
    op.create_table(
        'heart_rate_zones_history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('max_heart_rate', sa.Integer(), nullable=False),
        sa.Column('resting_heart_rate', sa.Integer(), nullable=True),
        sa.Column('zones_json', JSONType, nullable=False),
    )
    op.create_index('ix_heart_rate_zones_history_user_id', 'heart_rate_zones_history', ['user_id'])
    op.create_index(
        'ix_heart_rate_zones_history_user_recorded',
        'heart_rate_zones_history',
        ['user_id', 'recorded_at'],
    )


def downgrade() -> None:
    op.drop_index('ix_heart_rate_zones_history_user_recorded', table_name='heart_rate_zones_history')
    op.drop_index('ix_heart_rate_zones_history_user_id', table_name='heart_rate_zones_history')
    op.drop_table('heart_rate_zones_history')

    op.drop_index('ix_weight_history_user_recorded', table_name='weight_history')
    op.drop_index('ix_weight_history_user_id', table_name='weight_history')
    op.drop_table('weight_history')

    op.drop_index('ix_height_history_user_recorded', table_name='height_history')
    op.drop_index('ix_height_history_user_id', table_name='height_history')
    op.drop_table('height_history')

    op.drop_index('ix_user_physical_profile_user_id', table_name='user_physical_profile')
    op.drop_table('user_physical_profile')
