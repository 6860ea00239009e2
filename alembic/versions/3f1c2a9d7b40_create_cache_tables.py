"""create_cache_tables

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'topics',
        sa.Column('name',       sa.String(length=512),      nullable=False),
        sa.Column('content',    sa.Text(),                  nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('name'),
    )
    op.create_table(
        'images',
        sa.Column('name',       sa.String(length=512),      nullable=False),
        sa.Column('url',        sa.String(length=2048),     nullable=True),
        sa.Column('filename',   sa.String(length=1024),     nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('name'),
    )


def downgrade() -> None:
    op.drop_table('images')
    op.drop_table('topics')
