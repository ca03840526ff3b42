"""Add version counter to service_assignments

Revision ID: 7b2e9c41d5a8
Revises: 4c1f2a7d9e3b
Create Date: 2026-10-18 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7b2e9c41d5a8'
down_revision: Union[str, Sequence[str], None] = '4c1f2a7d9e3b'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # Existing rows start at version 1
    with op.batch_alter_table('service_assignments') as batch_op:
        batch_op.add_column(sa.Column('version', sa.Integer(), nullable=False, server_default='1'))


def downgrade():
    with op.batch_alter_table('service_assignments') as batch_op:
        batch_op.drop_column('version')
