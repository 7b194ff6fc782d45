"""Recipe persistence.

A recipe is stored across three tables and hydrated back into one
`Recipe`:
- recipes: base fields and last_cooked_at
- recipe_ingredients: one row per (ingredient_name, required_quantity)
- favorite_recipes: left-joined; a missing row means "not a favorite"

Multi-row writes (save, update, delete) run in a single transaction.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import Database
from ..domain import MAX_RATING, MIN_RATING, Recipe, validate_requirement
from ..errors import NotFoundError
from ..models import FavoriteRecipeRow, RecipeIngredientRow, RecipeRow, utcnow

logger = logging.getLogger("recipe_pantry.recipes")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite returns naive datetimes; they were written as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _coerce_rating(rating: Optional[int]) -> int:
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        return MIN_RATING
    return rating


def _hydrate(
    row: RecipeRow,
    favorite: Optional[FavoriteRecipeRow],
    requirements: list[RecipeIngredientRow],
) -> Recipe:
    recipe = Recipe(
        id=row.id,
        name=row.name,
        instructions=row.instructions,
        requirements={r.ingredient_name: r.required_quantity for r in requirements},
        last_cooked_at=as_utc(row.last_cooked_at),
    )
    if favorite is not None:
        recipe.is_favorite = True
        recipe.note = favorite.note
        if favorite.rating is not None and MIN_RATING <= favorite.rating <= MAX_RATING:
            recipe.rating = favorite.rating
    return recipe


def _base_query():
    return (
        select(RecipeRow, FavoriteRecipeRow)
        .outerjoin(FavoriteRecipeRow, FavoriteRecipeRow.recipe_id == RecipeRow.id)
    )


class RecipeStore:
    def __init__(self, db: Database):
        self.db = db

    # --- Reads ---

    def _requirements_for(self, s: Session, recipe_ids: list[int]) -> dict[int, list[RecipeIngredientRow]]:
        grouped: dict[int, list[RecipeIngredientRow]] = defaultdict(list)
        if not recipe_ids:
            return grouped
        rows = s.scalars(
            select(RecipeIngredientRow)
            .where(RecipeIngredientRow.recipe_id.in_(recipe_ids))
            .order_by(RecipeIngredientRow.id)
        ).all()
        for r in rows:
            grouped[r.recipe_id].append(r)
        return grouped

    def find_by_id(self, recipe_id: int, *, session: Session | None = None) -> Optional[Recipe]:
        with self.db.session_scope(session) as s:
            result = s.execute(_base_query().where(RecipeRow.id == recipe_id)).first()
            if result is None:
                return None
            row, favorite = result
            requirements = self._requirements_for(s, [row.id])
            return _hydrate(row, favorite, requirements[row.id])

    def find_all(self, *, session: Session | None = None) -> list[Recipe]:
        with self.db.session_scope(session) as s:
            results = s.execute(_base_query().order_by(RecipeRow.id)).all()
            requirements = self._requirements_for(s, [row.id for row, _ in results])
            return [_hydrate(row, fav, requirements[row.id]) for row, fav in results]

    def find_all_favorites(self, *, session: Session | None = None) -> list[Recipe]:
        """Favorited recipes, most recently favorited first."""
        with self.db.session_scope(session) as s:
            results = s.execute(
                select(RecipeRow, FavoriteRecipeRow)
                .join(FavoriteRecipeRow, FavoriteRecipeRow.recipe_id == RecipeRow.id)
                .order_by(FavoriteRecipeRow.created_at.desc(), RecipeRow.id.desc())
            ).all()
            requirements = self._requirements_for(s, [row.id for row, _ in results])
            return [_hydrate(row, fav, requirements[row.id]) for row, fav in results]

    def is_favorite(self, recipe_id: int, *, session: Session | None = None) -> bool:
        with self.db.session_scope(session) as s:
            return s.get(FavoriteRecipeRow, recipe_id) is not None

    # --- Writes ---

    def _get_row(self, s: Session, recipe_id: Optional[int]) -> RecipeRow:
        row = s.get(RecipeRow, recipe_id) if recipe_id is not None else None
        if row is None:
            raise NotFoundError("recipe", recipe_id)
        return row

    def save(self, recipe: Recipe, *, session: Session | None = None) -> Recipe:
        """Insert the recipe and its requirement rows; assigns `recipe.id`."""
        recipe.validate()
        with self.db.session_scope(session) as s:
            row = RecipeRow(
                name=recipe.name,
                instructions=recipe.instructions,
                last_cooked_at=recipe.last_cooked_at,
            )
            s.add(row)
            s.flush()
            for name, qty in recipe.requirements.items():
                s.add(RecipeIngredientRow(recipe_id=row.id, ingredient_name=name, required_quantity=qty))
            s.flush()
            new_id = row.id
        recipe.id = new_id
        logger.info(f"Saved recipe {recipe.name!r} (id={recipe.id}, {len(recipe.requirements)} ingredients)")
        return recipe

    def update(self, recipe: Recipe, *, session: Session | None = None) -> Recipe:
        """Overwrite base fields and last_cooked_at; upsert favorite metadata if favorited.

        Requirement rows are not touched; use add_requirement/remove_requirement.
        """
        recipe.validate()
        with self.db.session_scope(session) as s:
            row = self._get_row(s, recipe.id)
            row.name = recipe.name
            row.instructions = recipe.instructions
            row.last_cooked_at = recipe.last_cooked_at
            if recipe.is_favorite:
                self.upsert_favorite(recipe.id, recipe.rating, recipe.note, session=s)
            s.flush()
        return recipe

    def delete(self, recipe_id: int, *, session: Session | None = None) -> None:
        with self.db.session_scope(session) as s:
            row = self._get_row(s, recipe_id)
            name = row.name
            # Cascades to requirement and favorite rows.
            s.delete(row)
        logger.info(f"Deleted recipe {name!r} (id={recipe_id})")

    def add_requirement(self, recipe_id: int, ingredient_name: str, quantity: int, *, session: Session | None = None) -> None:
        validate_requirement(ingredient_name, quantity)
        with self.db.session_scope(session) as s:
            self._get_row(s, recipe_id)
            existing = s.scalar(
                select(RecipeIngredientRow).where(
                    RecipeIngredientRow.recipe_id == recipe_id,
                    RecipeIngredientRow.ingredient_name == ingredient_name,
                )
            )
            if existing:
                existing.required_quantity = quantity
            else:
                s.add(RecipeIngredientRow(recipe_id=recipe_id, ingredient_name=ingredient_name, required_quantity=quantity))
            s.flush()

    def remove_requirement(self, recipe_id: int, ingredient_name: str, *, session: Session | None = None) -> None:
        with self.db.session_scope(session) as s:
            self._get_row(s, recipe_id)
            existing = s.scalar(
                select(RecipeIngredientRow).where(
                    RecipeIngredientRow.recipe_id == recipe_id,
                    RecipeIngredientRow.ingredient_name == ingredient_name,
                )
            )
            if existing:
                s.delete(existing)
                s.flush()

    def update_last_cooked_at(self, recipe_id: int, cooked_at: datetime, *, session: Session | None = None) -> None:
        with self.db.session_scope(session) as s:
            row = self._get_row(s, recipe_id)
            row.last_cooked_at = cooked_at
            s.flush()

    # --- Favorites ---

    def upsert_favorite(self, recipe_id: int, rating: Optional[int], note: Optional[str], *, session: Session | None = None) -> None:
        """Insert the favorite row or overwrite its rating/note.

        Out-of-range ratings are stored as 1.
        """
        with self.db.session_scope(session) as s:
            self._get_row(s, recipe_id)
            favorite = s.get(FavoriteRecipeRow, recipe_id)
            if favorite is None:
                favorite = FavoriteRecipeRow(recipe_id=recipe_id)
                s.add(favorite)
            favorite.rating = _coerce_rating(rating)
            favorite.note = note
            favorite.updated_at = utcnow()
            s.flush()

    def add_to_favorites(self, recipe_id: int, *, session: Session | None = None) -> None:
        with self.db.session_scope(session) as s:
            self._get_row(s, recipe_id)
            if s.get(FavoriteRecipeRow, recipe_id) is None:
                s.add(FavoriteRecipeRow(recipe_id=recipe_id))
                s.flush()

    def remove_from_favorites(self, recipe_id: int, *, session: Session | None = None) -> None:
        with self.db.session_scope(session) as s:
            favorite = s.get(FavoriteRecipeRow, recipe_id)
            if favorite is not None:
                s.delete(favorite)
                s.flush()
