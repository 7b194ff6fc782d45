"""SQLAlchemy ORM models for the pantry.

Tables:
- ingredients: Stocked ingredients and their available quantity
- recipes: Base recipe fields and last-cooked timestamp
- recipe_ingredients: Required (ingredient name, quantity) rows per recipe
- favorite_recipes: Optional favorite metadata; row presence is the flag
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Text,
    Integer,
    ForeignKey,
    Index,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IngredientRow(Base):
    """Ingredient in stock, matched to recipe requirements by name."""
    __tablename__ = "ingredients"
    __table_args__ = (
        UniqueConstraint("name", name="uq_ingredients_name"),
        CheckConstraint("available_quantity >= 0", name="ck_ingredients_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class RecipeRow(Base):
    """Core recipe fields."""
    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    last_cooked_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    requirements: Mapped[list["RecipeIngredientRow"]] = relationship(
        "RecipeIngredientRow", back_populates="recipe", cascade="all, delete-orphan"
    )
    favorite: Mapped[Optional["FavoriteRecipeRow"]] = relationship(
        "FavoriteRecipeRow", back_populates="recipe", cascade="all, delete-orphan",
        uselist=False
    )


class RecipeIngredientRow(Base):
    """Required ingredient for a recipe, keyed by ingredient name (not id)."""
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("ix_recipe_ingredients_recipe_id", "recipe_id"),
        UniqueConstraint("recipe_id", "ingredient_name", name="uq_recipe_ingredient_name"),
        CheckConstraint("required_quantity > 0", name="ck_recipe_ingredients_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    ingredient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    required_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    recipe: Mapped["RecipeRow"] = relationship("RecipeRow", back_populates="requirements")


class FavoriteRecipeRow(Base):
    """Favorite metadata for a recipe."""
    __tablename__ = "favorite_recipes"

    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # 1-5
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    recipe: Mapped["RecipeRow"] = relationship("RecipeRow", back_populates="favorite")
