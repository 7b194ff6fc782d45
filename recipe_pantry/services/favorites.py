import logging
from typing import Optional

from ..domain import Recipe, validate_rating
from ..errors import ValidationError
from ..stores import RecipeStore

logger = logging.getLogger("recipe_pantry.favorites")


class FavoriteManager:
    """Favorite flag, rating and note for recipes.

    The in-memory recipe is only changed after the store write succeeds.
    """

    def __init__(self, recipes: RecipeStore):
        self.recipes = recipes

    def mark_favorite(self, recipe: Recipe, rating: int, note: Optional[str] = None) -> Recipe:
        validate_rating(rating)
        if recipe.id is None:
            raise ValidationError("Recipe must be saved before it can be a favorite")

        self.recipes.upsert_favorite(recipe.id, rating, note)

        recipe.is_favorite = True
        recipe.rating = rating
        recipe.note = note
        logger.info(f"Marked recipe {recipe.id} as favorite (rating={rating})")
        return recipe

    def unmark_favorite(self, recipe: Recipe) -> Recipe:
        if recipe.id is None:
            raise ValidationError("Recipe must be saved before it can be a favorite")

        self.recipes.remove_from_favorites(recipe.id)

        # Clear rating/note too so the object matches a fresh reload.
        recipe.clear_favorite()
        logger.info(f"Removed recipe {recipe.id} from favorites")
        return recipe

    def toggle_favorite(self, recipe: Recipe, rating: Optional[int] = None, note: Optional[str] = None) -> Recipe:
        if recipe.is_favorite:
            return self.unmark_favorite(recipe)
        return self.mark_favorite(recipe, rating, note)

    def list_favorites(self) -> list[Recipe]:
        return self.recipes.find_all_favorites()
