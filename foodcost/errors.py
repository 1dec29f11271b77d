"""Exception hierarchy for the costing engine and its outer surfaces."""

from __future__ import annotations


class FoodcostError(Exception):
    """Base class for all foodcost errors."""


class CircularBatchReferenceError(FoodcostError):
    """A batch ingredient references itself, directly or transitively."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__(
            "circular batch reference: " + " -> ".join(chain)
        )


class InvalidIngredientError(FoodcostError):
    """Ingredient pricing fields cannot produce a unit cost."""


class WeekAlreadyFinalizedError(FoodcostError):
    """The week has already been finalized and its snapshot is frozen."""

    def __init__(self, week_id: str) -> None:
        self.week_id = week_id
        super().__init__(f"week {week_id} is already finalized")


class WeekFileError(FoodcostError):
    """A week data file is unreadable or malformed."""
