import pytest

from recipe_pantry.db import Database
from recipe_pantry.domain import Ingredient, Recipe
from recipe_pantry.services.cook_engine import CookEngine
from recipe_pantry.services.favorites import FavoriteManager
from recipe_pantry.services.kitchen import Kitchen
from recipe_pantry.stores import IngredientStore, RecipeStore

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def database():
    """In-memory database; schema created before each test, dropped after."""
    db = Database(SQLALCHEMY_DATABASE_URL, echo=False)
    db.connect()
    db.create_all()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def ingredient_store(database):
    return IngredientStore(database)


@pytest.fixture
def recipe_store(database):
    return RecipeStore(database)


@pytest.fixture
def cook_engine(database, ingredient_store, recipe_store):
    return CookEngine(database, ingredient_store, recipe_store)


@pytest.fixture
def favorites(recipe_store):
    return FavoriteManager(recipe_store)


@pytest.fixture
def kitchen(database, ingredient_store, recipe_store):
    return Kitchen(database, ingredients=ingredient_store, recipes=recipe_store)


@pytest.fixture
def omelette(ingredient_store, recipe_store):
    """Egg x3 and Flour x0 in stock; Omelette needs Egg x2, Flour x1."""
    ingredient_store.save(Ingredient("Egg", 3))
    ingredient_store.save(Ingredient("Flour", 0))
    recipe = Recipe("Omelette", "Whisk and fry.")
    recipe.add_ingredient("Egg", 2)
    recipe.add_ingredient("Flour", 1)
    return recipe_store.save(recipe)
