"""Initial schema with ingredients, recipes, recipe_ingredients, favorite_recipes

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Ingredients table
    op.create_table(
        "ingredients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("available_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("name", name="uq_ingredients_name"),
        sa.CheckConstraint("available_quantity >= 0", name="ck_ingredients_quantity_non_negative"),
    )

    # Recipes table
    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("instructions", sa.Text, nullable=False),
        sa.Column("last_cooked_at", sa.DateTime(timezone=True), nullable=True),
    )

    # Recipe requirements, keyed by ingredient name
    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ingredient_name", sa.String(200), nullable=False),
        sa.Column("required_quantity", sa.Integer, nullable=False),
        sa.UniqueConstraint("recipe_id", "ingredient_name", name="uq_recipe_ingredient_name"),
        sa.CheckConstraint("required_quantity > 0", name="ck_recipe_ingredients_quantity_positive"),
    )
    op.create_index("ix_recipe_ingredients_recipe_id", "recipe_ingredients", ["recipe_id"])

    # Favorite metadata; row presence is the favorite flag
    op.create_table(
        "favorite_recipes",
        sa.Column("recipe_id", sa.Integer, sa.ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("favorite_recipes")
    op.drop_index("ix_recipe_ingredients_recipe_id", table_name="recipe_ingredients")
    op.drop_table("recipe_ingredients")
    op.drop_table("recipes")
    op.drop_table("ingredients")
