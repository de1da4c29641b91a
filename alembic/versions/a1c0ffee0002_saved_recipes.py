"""Saved recipes (user bookmarks)

Revision ID: a1c0ffee0002
Revises: a1c0ffee0001
Create Date: 2026-10-19 10:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = 'a1c0ffee0002'
down_revision = 'a1c0ffee0001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'saved_recipes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('recipe_id', sa.Integer(), sa.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'recipe_id', name='uq_saved_recipes_user_recipe'),
    )
    op.create_index('ix_saved_recipes_user_id', 'saved_recipes', ['user_id'])
    op.create_index('ix_saved_recipes_recipe_id', 'saved_recipes', ['recipe_id'])


def downgrade() -> None:
    op.drop_index('ix_saved_recipes_recipe_id', table_name='saved_recipes')
    op.drop_index('ix_saved_recipes_user_id', table_name='saved_recipes')
    op.drop_table('saved_recipes')
