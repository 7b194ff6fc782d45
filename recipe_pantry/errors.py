"""Error hierarchy for the pantry domain.

- ValidationError: bad caller input, raised before any persistence call
- NotFoundError: lookup target missing where the operation cannot proceed
- InsufficientStockError: cook evaluation or re-validation found shortfalls
- PersistenceError: the storage backend failed; original error is chained
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .schemas import Shortfall


class PantryError(Exception):
    """Base exception for pantry errors."""
    pass


class ValidationError(PantryError):
    """Input rejected before reaching storage."""
    pass


class InvalidRating(ValidationError):
    """Rating outside the 1-5 range."""

    def __init__(self, rating):
        self.rating = rating
        super().__init__(f"Rating must be between 1 and 5, got {rating!r}")


class NotFoundError(PantryError):
    """No record for the given id or name."""

    def __init__(self, kind: str, key):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} {key!r} not found")


class InsufficientStockError(PantryError):
    """One or more required ingredients are short."""

    def __init__(self, shortfalls: list["Shortfall"]):
        self.shortfalls = list(shortfalls)
        missing = ", ".join(s.describe() for s in self.shortfalls)
        super().__init__(f"Insufficient stock: {missing}")


class PersistenceError(PantryError):
    """Storage operation failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
