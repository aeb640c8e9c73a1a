"""create translatable tables

Revision ID: 3a7e51c0d2b4
Revises:
Create Date: 2026-10-19 10:12:41.208310

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a7e51c0d2b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'translatable_table',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=True),
    )
    op.create_table(
        'translatable_table_locale',
        sa.Column('row_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('translatable_table.id', ondelete='CASCADE'), nullable=False),
        sa.Column('locale', sa.String(length=16), nullable=False),
        sa.Column('attr_one', sa.String(length=255), nullable=True),
        sa.Column('attr_two', sa.String(length=255), nullable=True),
        sa.Column('attr_three', sa.String(length=255), nullable=True),
        sa.UniqueConstraint('owner_id', 'locale', name='uq_translatable_table_locale_owner_locale'),
    )
    op.create_index('idx_translatable_table_locale_owner_id', 'translatable_table_locale', ['owner_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_translatable_table_locale_owner_id', table_name='translatable_table_locale')
    op.drop_table('translatable_table_locale')
    op.drop_table('translatable_table')
