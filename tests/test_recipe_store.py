from datetime import datetime, timezone

import pytest

from recipe_pantry.domain import Recipe
from recipe_pantry.errors import NotFoundError, ValidationError
from recipe_pantry.models import FavoriteRecipeRow, RecipeIngredientRow
from recipe_pantry.stores.recipe_store import as_utc


def _omelette():
    recipe = Recipe("Omelette", "Whisk and fry.")
    recipe.add_ingredient("Egg", 2)
    recipe.add_ingredient("Flour", 1)
    return recipe


def test_save_and_reload_requirements(recipe_store):
    recipe = recipe_store.save(_omelette())
    assert recipe.id is not None

    loaded = recipe_store.find_by_id(recipe.id)
    assert set(loaded.requirements.items()) == {("Egg", 2), ("Flour", 1)}
    assert loaded.name == "Omelette"
    assert loaded.instructions == "Whisk and fry."


def test_reload_without_favorite_row(recipe_store):
    recipe = recipe_store.save(_omelette())

    loaded = recipe_store.find_by_id(recipe.id)
    assert loaded.is_favorite is False
    assert loaded.rating is None
    assert loaded.note is None
    assert loaded.last_cooked_at is None


def test_save_rejects_invalid_recipe_before_writing(recipe_store):
    with pytest.raises(ValidationError):
        recipe_store.save(Recipe("Omelette", "Whisk and fry."))
    assert recipe_store.find_all() == []


def test_find_by_id_missing(recipe_store):
    assert recipe_store.find_by_id(123) is None


def test_find_all_hydrates_every_recipe(recipe_store):
    first = recipe_store.save(_omelette())
    second = Recipe("Toast", "Toast it.")
    second.add_ingredient("Bread", 2)
    recipe_store.save(second)
    recipe_store.upsert_favorite(first.id, 4, "Sunday")

    recipes = {r.name: r for r in recipe_store.find_all()}

    assert recipes["Omelette"].is_favorite
    assert recipes["Omelette"].rating == 4
    assert recipes["Omelette"].note == "Sunday"
    assert recipes["Omelette"].requirements == {"Egg": 2, "Flour": 1}
    assert not recipes["Toast"].is_favorite
    assert recipes["Toast"].requirements == {"Bread": 2}


def test_update_overwrites_base_fields(recipe_store):
    recipe = recipe_store.save(_omelette())
    cooked = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    recipe.name = "French Omelette"
    recipe.instructions = "Low heat."
    recipe.last_cooked_at = cooked

    recipe_store.update(recipe)

    loaded = recipe_store.find_by_id(recipe.id)
    assert loaded.name == "French Omelette"
    assert loaded.instructions == "Low heat."
    assert loaded.last_cooked_at == cooked
    assert not recipe_store.is_favorite(recipe.id)


def test_update_upserts_favorite_metadata(recipe_store):
    recipe = recipe_store.save(_omelette())
    recipe.is_favorite = True
    recipe.rating = 3
    recipe.note = "good"
    recipe_store.update(recipe)

    recipe.rating = 5
    recipe.note = "better"
    recipe_store.update(recipe)

    loaded = recipe_store.find_by_id(recipe.id)
    assert loaded.is_favorite
    assert (loaded.rating, loaded.note) == (5, "better")


def test_upsert_coerces_out_of_range_rating(recipe_store):
    recipe = recipe_store.save(_omelette())

    recipe_store.upsert_favorite(recipe.id, 9, None)
    assert recipe_store.find_by_id(recipe.id).rating == 1

    recipe_store.upsert_favorite(recipe.id, None, "n")
    assert recipe_store.find_by_id(recipe.id).rating == 1


def test_update_missing_raises(recipe_store):
    recipe = _omelette()
    recipe.id = 77
    with pytest.raises(NotFoundError):
        recipe_store.update(recipe)
    with pytest.raises(NotFoundError):
        recipe_store.update_last_cooked_at(77, datetime.now(timezone.utc))
    with pytest.raises(NotFoundError):
        recipe_store.delete(77)


def test_delete_removes_requirements_and_favorite(recipe_store, database):
    recipe = recipe_store.save(_omelette())
    recipe_store.add_to_favorites(recipe.id)

    recipe_store.delete(recipe.id)

    assert recipe_store.find_by_id(recipe.id) is None
    assert not recipe_store.is_favorite(recipe.id)
    with database.session_scope() as s:
        assert s.query(RecipeIngredientRow).count() == 0
        assert s.query(FavoriteRecipeRow).count() == 0


def test_favorite_toggles_are_independent_of_rating(recipe_store):
    recipe = recipe_store.save(_omelette())

    recipe_store.add_to_favorites(recipe.id)
    recipe_store.add_to_favorites(recipe.id)
    assert recipe_store.is_favorite(recipe.id)
    loaded = recipe_store.find_by_id(recipe.id)
    assert loaded.is_favorite and loaded.rating is None

    recipe_store.remove_from_favorites(recipe.id)
    assert not recipe_store.is_favorite(recipe.id)


def test_remove_from_favorites_never_favorited_is_noop(recipe_store):
    recipe = recipe_store.save(_omelette())

    assert recipe_store.is_favorite(recipe.id) is False
    recipe_store.remove_from_favorites(recipe.id)
    assert recipe_store.is_favorite(recipe.id) is False


def test_find_all_favorites_newest_first(recipe_store):
    first = recipe_store.save(_omelette())
    second = Recipe("Toast", "Toast it.", {"Bread": 1})
    recipe_store.save(second)
    third = Recipe("Tea", "Steep.", {"Tea": 1})
    recipe_store.save(third)

    recipe_store.upsert_favorite(first.id, 5, None)
    recipe_store.upsert_favorite(third.id, 2, None)

    assert [r.name for r in recipe_store.find_all_favorites()] == ["Tea", "Omelette"]


def test_update_last_cooked_at(recipe_store):
    recipe = recipe_store.save(_omelette())
    cooked = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    recipe_store.update_last_cooked_at(recipe.id, cooked)

    assert recipe_store.find_by_id(recipe.id).last_cooked_at == cooked


def test_add_and_remove_requirement_after_save(recipe_store):
    recipe = recipe_store.save(_omelette())

    recipe_store.add_requirement(recipe.id, "Milk", 1)
    recipe_store.add_requirement(recipe.id, "Egg", 3)
    recipe_store.remove_requirement(recipe.id, "Flour")
    recipe_store.remove_requirement(recipe.id, "Unknown")

    assert recipe_store.find_by_id(recipe.id).requirements == {"Egg": 3, "Milk": 1}

    with pytest.raises(ValidationError):
        recipe_store.add_requirement(recipe.id, "Milk", 0)
    with pytest.raises(NotFoundError):
        recipe_store.add_requirement(999, "Milk", 1)


def test_save_is_atomic(recipe_store, database):
    recipe = recipe_store.save(_omelette())

    # A failing requirement insert inside an outer unit of work rolls back the base row too.
    with pytest.raises(Exception):
        with database.session_scope() as s:
            recipe_store.save(Recipe("Toast", "Toast it.", {"Bread": 1}), session=s)
            recipe_store.add_requirement(recipe.id, "Egg", 1, session=s)
            raise RuntimeError("boom")

    assert [r.name for r in recipe_store.find_all()] == ["Omelette"]
    assert recipe_store.find_by_id(recipe.id).requirements == {"Egg": 2, "Flour": 1}


def test_upsert_refreshes_updated_at_with_same_values(recipe_store, database):
    recipe = recipe_store.save(_omelette())
    recipe_store.upsert_favorite(recipe.id, 4, "same")
    stale = datetime(2020, 1, 1, tzinfo=timezone.utc)
    with database.session_scope() as s:
        s.get(FavoriteRecipeRow, recipe.id).updated_at = stale

    recipe_store.upsert_favorite(recipe.id, 4, "same")

    with database.session_scope() as s:
        favorite = s.get(FavoriteRecipeRow, recipe.id)
        assert as_utc(favorite.updated_at) > stale
        assert (favorite.rating, favorite.note) == (4, "same")
