"""Initial schema migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONTHS = (
    'january', 'february', 'march', 'april', 'may', 'june',
    'july', 'august', 'september', 'october', 'november', 'december',
)


def upgrade() -> None:
    # Members table
    op.create_table(
        'members',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False, index=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('join_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    )

    # Contributions table - one row per member and year
    op.create_table(
        'contributions',
        sa.Column('id', sa.String(15), primary_key=True),
        sa.Column('member_id', sa.String(15), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('year', sa.Integer(), nullable=False, index=True),
        *[sa.Column(month, sa.Float(), nullable=False, server_default='0') for month in MONTHS],
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('member_id', 'year', name='uq_contributions_member_year'),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('contributions')
    op.drop_table('members')
