"""Initial schema: recipes, embeddings, external sources, generation history

Revision ID: a1c0ffee0001
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = 'a1c0ffee0001'
down_revision = None
branch_labels = None
depends_on = None

DRINK_TYPES = ("COFFEE", "MATCHA", "UBE", "TEA")
TEMPERATURES = ("HOT", "ICED")
DIFFICULTIES = ("EASY", "MEDIUM", "HARD")


def upgrade() -> None:
    op.create_table(
        'recipes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('author_id', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.Enum(*DRINK_TYPES, name='drinktype', native_enum=False), nullable=False),
        sa.Column('temperature', sa.Enum(*TEMPERATURES, name='temperature', native_enum=False), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('ingredients', sa.JSON(), nullable=False),
        sa.Column('steps', sa.JSON(), nullable=False),
        sa.Column('difficulty', sa.Enum(*DIFFICULTIES, name='difficulty', native_enum=False), nullable=True),
        sa.Column('prep_time_minutes', sa.Integer(), nullable=True),
        sa.Column('total_time_minutes', sa.Integer(), nullable=True),
        sa.Column('servings', sa.Integer(), nullable=True),
        sa.Column('equipment', sa.JSON(), nullable=False),
        sa.Column('seasonal_tags', sa.JSON(), nullable=False),
        sa.Column('flavor_profile', sa.JSON(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_recipes_id', 'recipes', ['id'])
    op.create_index('ix_recipes_author_id', 'recipes', ['author_id'])
    op.create_index('ix_recipes_created_at', 'recipes', ['created_at'])

    op.create_table(
        'recipe_embeddings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('recipe_id', sa.Integer(), sa.ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('embedding', sa.JSON(), nullable=False),
        sa.Column('content_for_embedding', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_recipe_embeddings_recipe_id', 'recipe_embeddings', ['recipe_id'], unique=True)

    op.create_table(
        'external_sources',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('domain', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('content_type', sa.String(), nullable=False, server_default='other'),
        sa.Column('robots_txt_allowed', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_scraped', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_external_sources_url', 'external_sources', ['url'], unique=True)
    op.create_index('ix_external_sources_domain', 'external_sources', ['domain'])

    op.create_table(
        'recipe_generations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('seed_recipe_id', sa.Integer(), sa.ForeignKey('recipes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('generated_recipes', sa.JSON(), nullable=False),
        sa.Column('model_used', sa.String(), nullable=False),
        sa.Column('tokens_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_recipe_generations_seed', 'recipe_generations', ['seed_recipe_id'])


def downgrade() -> None:
    op.drop_index('ix_recipe_generations_seed', table_name='recipe_generations')
    op.drop_table('recipe_generations')
    op.drop_index('ix_external_sources_domain', table_name='external_sources')
    op.drop_index('ix_external_sources_url', table_name='external_sources')
    op.drop_table('external_sources')
    op.drop_index('ix_recipe_embeddings_recipe_id', table_name='recipe_embeddings')
    op.drop_table('recipe_embeddings')
    op.drop_index('ix_recipes_created_at', table_name='recipes')
    op.drop_index('ix_recipes_author_id', table_name='recipes')
    op.drop_index('ix_recipes_id', table_name='recipes')
    op.drop_table('recipes')
