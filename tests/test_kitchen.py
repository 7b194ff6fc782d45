import pytest

from recipe_pantry.errors import (
    InsufficientStockError,
    InvalidRating,
    NotFoundError,
    ValidationError,
)
from recipe_pantry.schemas import IngredientCreate


def test_create_and_list_ingredients(kitchen):
    kitchen.create_ingredient({"name": "  Flour ", "available_quantity": 2})
    kitchen.create_ingredient(IngredientCreate(name="Egg", available_quantity=6))

    assert [(i.name, i.available_quantity) for i in kitchen.list_ingredients()] == [("Egg", 6), ("Flour", 2)]


@pytest.mark.parametrize(
    "payload",
    (
        {"name": "", "available_quantity": 1},
        {"name": "   "},
        {"name": "Egg", "available_quantity": -1},
        {"available_quantity": 1},
    ),
)
def test_create_ingredient_rejects_bad_input(kitchen, payload):
    with pytest.raises(ValidationError):
        kitchen.create_ingredient(payload)
    assert kitchen.list_ingredients() == []


def test_edit_restock_consume_delete_ingredient(kitchen):
    egg = kitchen.create_ingredient({"name": "Egg", "available_quantity": 1})

    kitchen.edit_ingredient(egg.id, {"name": "Duck Egg"})
    kitchen.restock(egg.id, 4)
    kitchen.consume(egg.id, 2)

    loaded = kitchen.get_ingredient(egg.id)
    assert (loaded.name, loaded.available_quantity) == ("Duck Egg", 3)

    with pytest.raises(InsufficientStockError):
        kitchen.consume(egg.id, 4)
    with pytest.raises(ValidationError):
        kitchen.restock(egg.id, -1)
    assert kitchen.get_ingredient(egg.id).available_quantity == 3

    kitchen.delete_ingredient(egg.id)
    with pytest.raises(NotFoundError):
        kitchen.get_ingredient(egg.id)


def test_create_recipe_and_detail(kitchen):
    recipe = kitchen.create_recipe({
        "name": "Omelette",
        "instructions": "Whisk and fry.",
        "ingredients": {"Egg": 2, " Flour ": 1},
    })

    detail = kitchen.recipe_detail(recipe.id)

    assert detail.name == "Omelette"
    assert detail.is_favorite is False
    assert detail.rating is None
    assert detail.last_cooked_at is None
    assert [(r.ingredient_name, r.quantity) for r in detail.requirements] == [("Egg", 2), ("Flour", 1)]


@pytest.mark.parametrize(
    "payload",
    (
        {"name": "", "instructions": "x", "ingredients": {"Egg": 1}},
        {"name": "Omelette", "instructions": "", "ingredients": {"Egg": 1}},
        {"name": "Omelette", "instructions": "x", "ingredients": {}},
        {"name": "Omelette", "instructions": "x", "ingredients": {"Egg": 0}},
        {"name": "Omelette", "instructions": "x", "ingredients": {"  ": 1}},
    ),
)
def test_create_recipe_rejects_bad_input(kitchen, payload):
    with pytest.raises(ValidationError):
        kitchen.create_recipe(payload)
    assert kitchen.list_recipes() == []


def test_edit_recipe_updates_fields_and_requirements(kitchen):
    recipe = kitchen.create_recipe({
        "name": "Omelette",
        "instructions": "Whisk and fry.",
        "ingredients": {"Egg": 2, "Flour": 1},
    })

    edited = kitchen.edit_recipe(recipe.id, {
        "instructions": "Low heat.",
        "ingredients": {"Egg": 3, "Milk": 1},
    })

    assert edited.name == "Omelette"
    loaded = kitchen.get_recipe(recipe.id)
    assert loaded.instructions == "Low heat."
    assert loaded.requirements == {"Egg": 3, "Milk": 1}


def test_edit_missing_recipe(kitchen):
    with pytest.raises(NotFoundError):
        kitchen.edit_recipe(5, {"name": "x"})


def test_delete_recipe(kitchen):
    recipe = kitchen.create_recipe({"name": "Tea", "instructions": "Steep.", "ingredients": {"Tea": 1}})
    kitchen.delete_recipe(recipe.id)
    with pytest.raises(NotFoundError):
        kitchen.recipe_detail(recipe.id)


def test_cook_flow(kitchen):
    egg = kitchen.create_ingredient({"name": "Egg", "available_quantity": 3})
    flour = kitchen.create_ingredient({"name": "Flour", "available_quantity": 0})
    recipe = kitchen.create_recipe({
        "name": "Omelette",
        "instructions": "Whisk and fry.",
        "ingredients": {"Egg": 2, "Flour": 1},
    })

    evaluation = kitchen.evaluate_cook(recipe.id)
    assert [s.describe() for s in evaluation.shortfalls] == ["Flour (1 short)"]

    with pytest.raises(InsufficientStockError):
        kitchen.cook(recipe.id, lambda e: True)

    kitchen.restock(flour.id, 1)
    result = kitchen.cook(recipe.id, lambda e: True)

    assert result.cooked
    assert kitchen.get_ingredient(egg.id).available_quantity == 1
    assert kitchen.get_ingredient(flour.id).available_quantity == 0
    assert kitchen.recipe_detail(recipe.id).last_cooked_at == result.cooked_at


def test_toggle_favorite(kitchen):
    recipe = kitchen.create_recipe({"name": "Tea", "instructions": "Steep.", "ingredients": {"Tea": 1}})

    with pytest.raises(InvalidRating):
        kitchen.toggle_favorite(recipe.id, 6)
    with pytest.raises(ValidationError):
        kitchen.toggle_favorite(recipe.id)

    kitchen.toggle_favorite(recipe.id, 4, "  ")
    detail = kitchen.recipe_detail(recipe.id)
    assert (detail.is_favorite, detail.rating, detail.note) == (True, 4, None)
    assert [r.id for r in kitchen.list_favorites()] == [recipe.id]

    kitchen.toggle_favorite(recipe.id)
    assert not kitchen.recipe_detail(recipe.id).is_favorite
    assert kitchen.list_favorites() == []
