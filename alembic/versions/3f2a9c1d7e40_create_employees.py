"""create employees

Revision ID: 3f2a9c1d7e40
Revises: 
Create Date: 2026-10-18 10:12:41.503217

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7e40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('nip', sa.String(length=50), server_default='-', nullable=False),
        sa.Column('gol', sa.String(length=20), nullable=False),
        sa.Column('pangkat', sa.String(length=100), server_default='-', nullable=False),
        sa.Column('position', sa.String(length=255), server_default='-', nullable=False),
        sa.Column('sub_position', sa.String(length=255), server_default='-', nullable=False),
        sa.Column('organizational_level', sa.String(length=50), nullable=False),
        sa.Column('detailed_position', sa.String(length=255), server_default='Staff/Other', nullable=False),
        sa.Column('created_on', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('modified_on', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_employees_name', 'employees', ['name'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_employees_name', table_name='employees')
    op.drop_table('employees')
