"""Ingredient inventory and inventory-aware recipes."""

from .db import Database
from .domain import Ingredient, Recipe
from .errors import (
    InsufficientStockError,
    InvalidRating,
    NotFoundError,
    PantryError,
    PersistenceError,
    ValidationError,
)
from .main import configure_logging, create_kitchen
from .services.cook_engine import CookEngine
from .services.favorites import FavoriteManager
from .services.kitchen import Kitchen
from .stores import IngredientStore, RecipeStore

__all__ = [
    "CookEngine",
    "Database",
    "FavoriteManager",
    "Ingredient",
    "IngredientStore",
    "InsufficientStockError",
    "InvalidRating",
    "Kitchen",
    "NotFoundError",
    "PantryError",
    "PersistenceError",
    "Recipe",
    "RecipeStore",
    "ValidationError",
    "configure_logging",
    "create_kitchen",
]
