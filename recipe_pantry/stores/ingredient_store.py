import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import Database
from ..domain import Ingredient
from ..errors import NotFoundError
from ..models import IngredientRow

logger = logging.getLogger("recipe_pantry.ingredients")


def _to_domain(row: IngredientRow) -> Ingredient:
    return Ingredient(id=row.id, name=row.name, available_quantity=row.available_quantity)


class IngredientStore:
    """CRUD and exact-name lookup for ingredients.

    Each call runs in its own session unless `session` is passed, in which
    case it joins the caller's unit of work.
    """

    def __init__(self, db: Database):
        self.db = db

    def save(self, ingredient: Ingredient, *, session: Session | None = None) -> Ingredient:
        ingredient.validate()
        with self.db.session_scope(session) as s:
            row = IngredientRow(name=ingredient.name, available_quantity=ingredient.available_quantity)
            s.add(row)
            s.flush()
            new_id = row.id
        ingredient.id = new_id
        logger.info(f"Saved ingredient {ingredient.name!r} (id={ingredient.id})")
        return ingredient

    def find_by_id(self, ingredient_id: int, *, session: Session | None = None) -> Optional[Ingredient]:
        with self.db.session_scope(session) as s:
            row = s.get(IngredientRow, ingredient_id)
            return _to_domain(row) if row else None

    def find_by_name(self, name: str, *, session: Session | None = None) -> Optional[Ingredient]:
        with self.db.session_scope(session) as s:
            row = s.scalar(select(IngredientRow).where(IngredientRow.name == name))
            return _to_domain(row) if row else None

    def find_all(self, *, session: Session | None = None) -> list[Ingredient]:
        with self.db.session_scope(session) as s:
            rows = s.scalars(select(IngredientRow)).all()
            return [_to_domain(r) for r in rows]

    def find_by_names(
        self, names, *, session: Session | None = None, for_update: bool = False
    ) -> dict[str, Ingredient]:
        """Ingredients keyed by name; names with no match are omitted."""
        names = list(names)
        if not names:
            return {}
        with self.db.session_scope(session) as s:
            stmt = select(IngredientRow).where(IngredientRow.name.in_(names))
            if for_update:
                stmt = stmt.with_for_update()
            rows = s.scalars(stmt).all()
            return {r.name: _to_domain(r) for r in rows}

    def update(self, ingredient: Ingredient, *, session: Session | None = None) -> Ingredient:
        ingredient.validate()
        with self.db.session_scope(session) as s:
            row = s.get(IngredientRow, ingredient.id) if ingredient.id is not None else None
            if row is None:
                raise NotFoundError("ingredient", ingredient.id)
            row.name = ingredient.name
            row.available_quantity = ingredient.available_quantity
            s.flush()
        return ingredient

    def delete(self, ingredient_id: int, *, session: Session | None = None) -> None:
        # Recipe requirements reference ingredients by name and are left as-is.
        with self.db.session_scope(session) as s:
            row = s.get(IngredientRow, ingredient_id)
            if row is None:
                raise NotFoundError("ingredient", ingredient_id)
            name = row.name
            s.delete(row)
        logger.info(f"Deleted ingredient {name!r} (id={ingredient_id})")
