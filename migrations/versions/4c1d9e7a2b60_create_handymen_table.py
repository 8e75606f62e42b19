"""create_handymen_table

Revision ID: 4c1d9e7a2b60
Revises:
Create Date: 2026-10-18 09:12:44.310582

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4c1d9e7a2b60'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the handymen profile table."""
    op.create_table('handymen',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('experience', sa.Integer(), server_default='0', nullable=False),
        sa.Column('hourly_rate', sa.Float(), server_default='0', nullable=False),
        sa.Column('skills', postgresql.JSONB(astext_type=sa.Text()), server_default='[]', nullable=False),
        sa.Column('is_available', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('availability', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('rating', sa.Float(), server_default='0', nullable=False),
        sa.Column('reviews', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('experience >= 0', name='ck_handymen_experience_non_negative'),
        sa.CheckConstraint('hourly_rate >= 0', name='ck_handymen_hourly_rate_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    # Not unique: existing data may already hold duplicates per user.
    op.create_index('ix_handymen_user_id', 'handymen', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop the handymen profile table."""
    op.drop_index('ix_handymen_user_id', table_name='handymen')
    op.drop_table('handymen')
