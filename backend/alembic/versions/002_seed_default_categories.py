"""Seed default joke categories

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 09:05:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import table, column

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None

DEFAULT_CATEGORIES = ['Funny Joke', 'Lame Joke', 'Tech Joke']


def upgrade() -> None:
    categories_table = table('categories',
        column('id', sa.Integer),
        column('name', sa.String),
    )

    conn = op.get_bind()
    existing = {
        name.lower()
        for (name,) in conn.execute(sa.select(categories_table.c.name))
    }

    missing = [name for name in DEFAULT_CATEGORIES if name.lower() not in existing]
    if missing:
        op.bulk_insert(categories_table, [{'name': name} for name in missing])


def downgrade() -> None:
    categories_table = table('categories',
        column('name', sa.String),
    )
    # Only drop defaults nothing refers to
    op.execute(
        categories_table.delete().where(
            sa.and_(
                categories_table.c.name.in_(DEFAULT_CATEGORIES),
                sa.text('NOT EXISTS (SELECT 1 FROM jokes WHERE jokes.category_id = categories.id)'),
            )
        )
    )
