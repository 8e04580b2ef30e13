"""Create sites and observations tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:41.203518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'sites',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=2), nullable=False),
        sa.Column('latitude', sa.Numeric(precision=10, scale=7), nullable=False),
        sa.Column('longitude', sa.Numeric(precision=10, scale=7), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_sites_state', 'sites', ['state'], unique=False)

    # No foreign key to sites: history survives site deletion
    op.create_table(
        'observations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('site_id', sa.String(length=32), nullable=False),
        sa.Column('precip_24hr_in', sa.Float(), nullable=False),
        sa.Column('temp_f', sa.Float(), nullable=True),
        sa.Column('humidity', sa.Float(), nullable=True),
        sa.Column('dew_point_f', sa.Float(), nullable=True),
        sa.Column('wind_speed_mph', sa.Float(), nullable=True),
        sa.Column('wind_dir', sa.Float(), nullable=True),
        sa.Column('captured_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_observations_site_id', 'observations', ['site_id'], unique=False)
    op.create_index('idx_observations_captured_at', 'observations', ['captured_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_observations_captured_at', table_name='observations')
    op.drop_index('idx_observations_site_id', table_name='observations')
    op.drop_table('observations')

    op.drop_index('idx_sites_state', table_name='sites')
    op.drop_table('sites')
