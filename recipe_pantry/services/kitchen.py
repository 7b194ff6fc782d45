"""Entry point for presentation code.

Provides:
- Ingredient listing, create/edit/delete, restock and consume
- Recipe listing, detail, create/edit/delete
- Cook evaluation and cook with confirmation
- Favorite toggling with rating/note

Payloads may be schema instances or plain dicts; pydantic errors are
re-raised as ValidationError.
"""

import logging
from typing import Any, Callable, Optional, TypeVar, Union

import pydantic
from pydantic import BaseModel

from ..db import Database
from ..domain import Ingredient, Recipe
from ..errors import NotFoundError, ValidationError
from ..schemas import (
    CookEvaluation,
    CookResult,
    FavoriteIn,
    IngredientCreate,
    IngredientPatch,
    RecipeCreate,
    RecipeDetail,
    RecipePatch,
)
from ..stores import IngredientStore, RecipeStore
from .cook_engine import CookEngine
from .favorites import FavoriteManager

logger = logging.getLogger("recipe_pantry.kitchen")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _parse(schema: type[SchemaT], payload: Union[SchemaT, dict[str, Any]]) -> SchemaT:
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {schema.__name__}: {e}") from e


class Kitchen:
    def __init__(
        self,
        db: Database,
        *,
        ingredients: Optional[IngredientStore] = None,
        recipes: Optional[RecipeStore] = None,
    ):
        self.db = db
        self.ingredients = ingredients or IngredientStore(db)
        self.recipes = recipes or RecipeStore(db)
        self.cook_engine = CookEngine(db, self.ingredients, self.recipes)
        self.favorites = FavoriteManager(self.recipes)

    def close(self) -> None:
        self.db.dispose()

    def __enter__(self) -> "Kitchen":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- Ingredients ---

    def list_ingredients(self) -> list[Ingredient]:
        return sorted(self.ingredients.find_all(), key=lambda i: i.name)

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        ingredient = self.ingredients.find_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError("ingredient", ingredient_id)
        return ingredient

    def create_ingredient(self, payload: Union[IngredientCreate, dict[str, Any]]) -> Ingredient:
        data = _parse(IngredientCreate, payload)
        return self.ingredients.save(Ingredient(name=data.name, available_quantity=data.available_quantity))

    def edit_ingredient(self, ingredient_id: int, payload: Union[IngredientPatch, dict[str, Any]]) -> Ingredient:
        data = _parse(IngredientPatch, payload)
        ingredient = self.get_ingredient(ingredient_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(ingredient, field, value)
        return self.ingredients.update(ingredient)

    def delete_ingredient(self, ingredient_id: int) -> None:
        self.ingredients.delete(ingredient_id)

    def restock(self, ingredient_id: int, amount: int) -> Ingredient:
        ingredient = self.get_ingredient(ingredient_id)
        ingredient.add_quantity(amount)
        self.ingredients.update(ingredient)
        logger.info(f"Restocked {ingredient.name!r} by {amount} (now {ingredient.available_quantity})")
        return ingredient

    def consume(self, ingredient_id: int, amount: int) -> Ingredient:
        ingredient = self.get_ingredient(ingredient_id)
        ingredient.use_quantity(amount)
        return self.ingredients.update(ingredient)

    # --- Recipes ---

    def list_recipes(self) -> list[Recipe]:
        return self.recipes.find_all()

    def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.recipes.find_by_id(recipe_id)
        if recipe is None:
            raise NotFoundError("recipe", recipe_id)
        return recipe

    def recipe_detail(self, recipe_id: int) -> RecipeDetail:
        return RecipeDetail.from_recipe(self.get_recipe(recipe_id))

    def create_recipe(self, payload: Union[RecipeCreate, dict[str, Any]]) -> Recipe:
        data = _parse(RecipeCreate, payload)
        recipe = Recipe(name=data.name, instructions=data.instructions)
        for name, qty in data.ingredients.items():
            recipe.add_ingredient(name, qty)
        return self.recipes.save(recipe)

    def edit_recipe(self, recipe_id: int, payload: Union[RecipePatch, dict[str, Any]]) -> Recipe:
        """Apply base-field and requirement changes in one transaction."""
        data = _parse(RecipePatch, payload)
        with self.db.session_scope() as s:
            recipe = self.recipes.find_by_id(recipe_id, session=s)
            if recipe is None:
                raise NotFoundError("recipe", recipe_id)

            if data.name is not None:
                recipe.name = data.name
            if data.instructions is not None:
                recipe.instructions = data.instructions

            if data.ingredients is not None:
                for name in set(recipe.requirements) - set(data.ingredients):
                    recipe.remove_ingredient(name)
                    self.recipes.remove_requirement(recipe_id, name, session=s)
                for name, qty in data.ingredients.items():
                    if recipe.requirements.get(name) != qty:
                        recipe.add_ingredient(name, qty)
                        self.recipes.add_requirement(recipe_id, name, qty, session=s)

            self.recipes.update(recipe, session=s)
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        self.recipes.delete(recipe_id)

    # --- Cooking ---

    def evaluate_cook(self, recipe_id: int) -> CookEvaluation:
        return self.cook_engine.evaluate(self.get_recipe(recipe_id))

    def cook(self, recipe_id: int, confirm: Callable[[CookEvaluation], bool]) -> CookResult:
        return self.cook_engine.cook(self.get_recipe(recipe_id), confirm)

    # --- Favorites ---

    def toggle_favorite(self, recipe_id: int, rating: Optional[int] = None, note: Optional[str] = None) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        if recipe.is_favorite:
            return self.favorites.unmark_favorite(recipe)
        data = _parse(FavoriteIn, {"rating": rating, "note": note})
        return self.favorites.mark_favorite(recipe, data.rating, data.note or None)

    def list_favorites(self) -> list[Recipe]:
        return self.favorites.list_favorites()
