"""Cook evaluation and commit.

evaluate: resolve each required ingredient by name and collect shortfalls
(an unknown name counts as zero in stock). Nothing is written.

commit: inside one transaction, re-read the required ingredients, re-check
stock, deduct every requirement and stamp last_cooked_at. Any shortfall or
failure rolls the whole transaction back.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..db import Database
from ..domain import Recipe
from ..errors import InsufficientStockError, ValidationError
from ..schemas import CookEvaluation, CookResult
from ..stores import IngredientStore, RecipeStore

logger = logging.getLogger("recipe_pantry.cook")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CookEngine:
    def __init__(
        self,
        db: Database,
        ingredients: IngredientStore,
        recipes: RecipeStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.ingredients = ingredients
        self.recipes = recipes
        self.clock = clock

    def evaluate(self, recipe: Recipe) -> CookEvaluation:
        found = self.ingredients.find_by_names(recipe.requirements)
        stock = {name: ing.available_quantity for name, ing in found.items()}
        return CookEvaluation(
            recipe_id=recipe.id,
            recipe_name=recipe.name,
            shortfalls=recipe.shortfalls(stock),
        )

    def commit(self, recipe: Recipe) -> CookResult:
        """Deduct all requirements and record the cook time, atomically.

        Raises InsufficientStockError if stock changed since evaluation.
        """
        if recipe.id is None:
            raise ValidationError("Recipe must be saved before it can be cooked")
        recipe.validate()

        cooked_at = self.clock()
        with self.db.session_scope() as s:
            found = self.ingredients.find_by_names(recipe.requirements, session=s, for_update=True)
            stock = {name: ing.available_quantity for name, ing in found.items()}
            shortfalls = recipe.shortfalls(stock)
            if shortfalls:
                logger.warning(
                    f"Cook aborted for recipe {recipe.id}: stock changed before commit "
                    f"({', '.join(sf.describe() for sf in shortfalls)})"
                )
                raise InsufficientStockError(shortfalls)

            for name, qty in recipe.requirements.items():
                ingredient = found[name]
                ingredient.use_quantity(qty)
                self.ingredients.update(ingredient, session=s)

            self.recipes.update_last_cooked_at(recipe.id, cooked_at, session=s)

        recipe.cooked_now(cooked_at)
        logger.info(f"Cooked recipe {recipe.name!r} (id={recipe.id})")
        return CookResult(
            recipe_id=recipe.id,
            cooked=True,
            cooked_at=cooked_at,
            deducted=dict(recipe.requirements),
        )

    def cook(
        self,
        recipe: Recipe,
        confirm: Callable[[CookEvaluation], bool],
    ) -> CookResult:
        """Evaluate, ask `confirm`, then commit.

        Shortfalls raise InsufficientStockError without touching stock; a
        declined confirmation returns a result with cooked=False.
        """
        evaluation = self.evaluate(recipe)
        if not evaluation.can_cook:
            logger.warning(
                f"Insufficient stock for {recipe.name!r}: "
                f"{', '.join(sf.describe() for sf in evaluation.shortfalls)}"
            )
            raise InsufficientStockError(evaluation.shortfalls)

        if not confirm(evaluation):
            logger.info(f"Cook of {recipe.name!r} cancelled")
            return CookResult(recipe_id=recipe.id, cooked=False)

        return self.commit(recipe)
