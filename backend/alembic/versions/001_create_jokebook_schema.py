"""Create categories and jokes tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('categories',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    # Names are unique regardless of case
    op.create_index('uq_categories_name_lower', 'categories', [sa.text('lower(name)')], unique=True)

    op.create_table('jokes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('setup', sa.Text(), nullable=False),
        sa.Column('delivery', sa.Text(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_joke_category_id', 'jokes', ['category_id', 'id'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_joke_category_id', table_name='jokes')
    op.drop_table('jokes')

    op.drop_index('uq_categories_name_lower', table_name='categories')
    op.drop_table('categories')
