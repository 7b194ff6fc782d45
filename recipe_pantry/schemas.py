"""Pydantic schemas for the pantry.

Request/result models for:
- Ingredients (create/patch)
- Recipes (create/patch, detail view)
- Cooking (shortfall, evaluation, result)
- Favorites
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

if TYPE_CHECKING:
    from .domain import Recipe


def _clean_requirements(value: Optional[dict[str, int]]) -> Optional[dict[str, int]]:
    if value is None:
        return None
    cleaned: dict[str, int] = {}
    for name, qty in value.items():
        key = name.strip()
        if not key:
            raise ValueError("ingredient name must not be empty")
        if key in cleaned:
            raise ValueError(f"duplicate ingredient {key!r}")
        cleaned[key] = qty
    return cleaned


# --- Ingredient ---

class IngredientCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    available_quantity: int = Field(0, ge=0)


class IngredientPatch(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    available_quantity: Optional[int] = Field(None, ge=0)


# --- Recipe ---

class RecipeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    instructions: str = Field(..., min_length=1)
    ingredients: dict[str, PositiveInt] = Field(..., min_length=1)

    @field_validator("ingredients")
    @classmethod
    def strip_ingredient_names(cls, value):
        return _clean_requirements(value)


class RecipePatch(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    instructions: Optional[str] = Field(None, min_length=1)
    ingredients: Optional[dict[str, PositiveInt]] = Field(None, min_length=1)

    @field_validator("ingredients")
    @classmethod
    def strip_ingredient_names(cls, value):
        return _clean_requirements(value)


class RequirementOut(BaseModel):
    ingredient_name: str
    quantity: int


class RecipeDetail(BaseModel):
    id: int
    name: str
    instructions: str
    is_favorite: bool
    rating: Optional[int]
    note: Optional[str]
    requirements: list[RequirementOut]
    last_cooked_at: Optional[datetime]

    @classmethod
    def from_recipe(cls, recipe: "Recipe") -> "RecipeDetail":
        return cls(
            id=recipe.id,
            name=recipe.name,
            instructions=recipe.instructions,
            is_favorite=recipe.is_favorite,
            rating=recipe.rating,
            note=recipe.note,
            requirements=[
                RequirementOut(ingredient_name=name, quantity=qty)
                for name, qty in sorted(recipe.requirements.items())
            ],
            last_cooked_at=recipe.last_cooked_at,
        )


# --- Cooking ---

class Shortfall(BaseModel):
    """Deficit for one required ingredient."""
    ingredient_name: str
    required_quantity: int
    available_quantity: int  # 0 when no ingredient matches the name

    @property
    def missing(self) -> int:
        return self.required_quantity - self.available_quantity

    def describe(self) -> str:
        return f"{self.ingredient_name} ({self.missing} short)"


class CookEvaluation(BaseModel):
    recipe_id: Optional[int]
    recipe_name: str
    shortfalls: list[Shortfall] = []

    @property
    def can_cook(self) -> bool:
        return not self.shortfalls


class CookResult(BaseModel):
    recipe_id: int
    cooked: bool
    cooked_at: Optional[datetime] = None
    deducted: dict[str, int] = {}


# --- Favorites ---

class FavoriteIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int
    note: Optional[str] = None
