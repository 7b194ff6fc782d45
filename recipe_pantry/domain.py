"""In-memory pantry objects.

`Ingredient` guards its quantity on every mutation. `Recipe` accepts
requirement edits freely and checks full validity only through the
explicit `validate()` gate that stores call before writing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping, Optional

from .errors import InsufficientStockError, InvalidRating, ValidationError
from .schemas import Shortfall

MIN_RATING = 1
MAX_RATING = 5


def _require_quantity(value, *, what: str, positive: bool = False) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{what} must be an integer, got {value!r}")
    if positive and value <= 0:
        raise ValidationError(f"{what} must be greater than 0, got {value}")
    if value < 0:
        raise ValidationError(f"{what} must not be negative, got {value}")
    return value


def _require_text(value, *, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} must not be empty")
    return value


def validate_requirement(name, quantity) -> None:
    _require_text(name, what="Ingredient name")
    _require_quantity(quantity, what="Required quantity", positive=True)


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating(rating)
    return rating


@dataclass
class Ingredient:
    name: str
    available_quantity: int = 0
    id: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        _require_text(self.name, what="Ingredient name")
        _require_quantity(self.available_quantity, what="Available quantity")

    def has_enough_quantity(self, required: int) -> bool:
        return self.available_quantity >= required

    def use_quantity(self, quantity: int) -> None:
        _require_quantity(quantity, what="Quantity to use")
        if not self.has_enough_quantity(quantity):
            raise InsufficientStockError([
                Shortfall(
                    ingredient_name=self.name,
                    required_quantity=quantity,
                    available_quantity=self.available_quantity,
                )
            ])
        self.available_quantity -= quantity

    def add_quantity(self, quantity: int) -> None:
        _require_quantity(quantity, what="Quantity to add")
        self.available_quantity += quantity

    def __str__(self) -> str:
        return f"{self.name}, {self.available_quantity}"


@dataclass
class Recipe:
    name: str
    instructions: str
    requirements: dict[str, int] = field(default_factory=dict)
    id: Optional[int] = None
    is_favorite: bool = False
    note: Optional[str] = None
    last_cooked_at: Optional[datetime] = None
    _rating: Optional[int] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        for name, qty in self.requirements.items():
            validate_requirement(name, qty)

    @property
    def rating(self) -> Optional[int]:
        return self._rating

    @rating.setter
    def rating(self, value: int) -> None:
        self._rating = validate_rating(value)

    def clear_favorite(self) -> None:
        self.is_favorite = False
        self._rating = None
        self.note = None

    def add_ingredient(self, name: str, quantity: int) -> None:
        """Require `quantity` of `name`; replaces an existing requirement."""
        validate_requirement(name, quantity)
        self.requirements[name] = quantity

    def remove_ingredient(self, name: str) -> None:
        self.requirements.pop(name, None)

    def validate(self) -> None:
        _require_text(self.name, what="Recipe name")
        _require_text(self.instructions, what="Recipe instructions")
        if not self.requirements:
            raise ValidationError("Recipe needs at least one required ingredient")
        for name, qty in self.requirements.items():
            _require_text(name, what="Ingredient name")
            _require_quantity(qty, what=f"Required quantity for {name!r}", positive=True)

    # Cooking checks against a name -> available quantity snapshot

    def shortfalls(self, stock: Mapping[str, int]) -> list[Shortfall]:
        result = []
        for name, required in self.requirements.items():
            available = stock.get(name, 0)
            if available < required:
                result.append(
                    Shortfall(
                        ingredient_name=name,
                        required_quantity=required,
                        available_quantity=available,
                    )
                )
        return result

    def can_cook(self, stock: Mapping[str, int]) -> bool:
        return not self.shortfalls(stock)

    def missing_ingredients(self, stock: Mapping[str, int]) -> list[str]:
        return [s.describe() for s in self.shortfalls(stock)]

    def cooked_now(self, now: Optional[datetime] = None) -> datetime:
        self.last_cooked_at = now or datetime.now(timezone.utc)
        return self.last_cooked_at

    def __str__(self) -> str:
        stars = self._rating or 0
        suffix = " [favorite]" if self.is_favorite else ""
        return f"{self.name} (★{stars}){suffix}"
