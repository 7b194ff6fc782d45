from .ingredient_store import IngredientStore
from .recipe_store import RecipeStore

__all__ = ["IngredientStore", "RecipeStore"]
