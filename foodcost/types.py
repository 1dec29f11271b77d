"""Plain records consumed and produced by the costing engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

UNSPECIFIED_VERSION = "unspecified"

INGREDIENT_CATEGORIES = ("food", "paper", "other")

WEEK_DRAFT = "draft"
WEEK_FINALIZED = "finalized"


@dataclass
class RecipeLine:
    """One ingredient line of a menu item or batch recipe."""

    ingredient_id: str
    quantity: float
    unit: str
    id: str = ""


@dataclass
class RegularIngredient:
    """An ingredient priced directly by the case."""

    id: str
    name: str
    inventory_unit: str
    unit_cost: float = 0.0      # per inventory unit
    units_per_case: float = 1.0
    case_price: float = 0.0
    recipe_unit: str | None = None
    conversion_factor: float | None = None  # legacy manual factor
    category: str = "food"
    is_active: bool = True
    current_version_id: str | None = None


@dataclass
class BatchIngredient:
    """An ingredient prepared in-house from its own recipe.

    Its cost is always derived from ``recipe_lines`` divided by
    ``yield_quantity``; there is no stored unit cost.
    """

    id: str
    name: str
    recipe_lines: list[RecipeLine] = field(default_factory=list)
    yield_quantity: float = 0.0
    yield_unit: str | None = None
    inventory_unit: str = ""
    units_per_case: float = 1.0
    case_price: float = 0.0
    category: str = "food"
    is_active: bool = True
    current_version_id: str | None = None


Ingredient = Union[RegularIngredient, BatchIngredient]


@dataclass(frozen=True)
class IngredientVersion:
    """Immutable cost history entry for an ingredient."""

    id: str
    ingredient_id: str
    case_price: float
    units_per_case: float
    unit_cost: float
    effective_from: datetime
    effective_to: datetime | None = None


@dataclass
class MenuItem:
    id: str
    name: str
    selling_price: float = 0.0
    recipe_lines: list[RecipeLine] = field(default_factory=list)
    is_active: bool = True


@dataclass
class WeeklyInventoryEntry:
    """Counts for one ingredient over one week."""

    ingredient_id: str
    begin: float = 0.0
    received: float = 0.0
    end: float = 0.0


@dataclass(frozen=True)
class WeeklyCostSnapshotEntry:
    """Unit cost frozen for one ingredient when a week is finalized."""

    ingredient_id: str
    unit_cost: float
    source_version_id: str = UNSPECIFIED_VERSION


@dataclass
class SalesDay:
    """Sales figures for one calendar day."""

    food: float = 0.0
    drink: float = 0.0
    other: float = 0.0
    less_sales_tax: float = 0.0
    less_promo: float = 0.0


@dataclass
class Week:
    id: str
    status: str = WEEK_DRAFT
    created_at: datetime | None = None
    finalized_at: datetime | None = None
    finalized_by: str | None = None

    @property
    def is_finalized(self) -> bool:
        return self.status == WEEK_FINALIZED
