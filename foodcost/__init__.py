"""Restaurant costing engine: recipe costs, weekly cost of sales and margins."""

from .catalog import (
    InventoryValuation,
    build_cost_snapshot,
    create_version,
    inventory_valuation,
    revise_ingredient,
    unit_cost_from_case,
    version_in_effect,
)
from .config import FoodcostConfig, load_config
from .errors import (
    CircularBatchReferenceError,
    FoodcostError,
    InvalidIngredientError,
    WeekAlreadyFinalizedError,
    WeekFileError,
)
from .loader import WeekData, load_week_file
from .report import (
    FinalizedWeek,
    WeekReport,
    build_week_report,
    finalize_week,
    rank_menu_items,
    rate_food_cost,
    rate_margin,
)
from .types import (
    BatchIngredient,
    Ingredient,
    IngredientVersion,
    MenuItem,
    RecipeLine,
    RegularIngredient,
    SalesDay,
    Week,
    WeeklyCostSnapshotEntry,
    WeeklyInventoryEntry,
)

__all__ = [
    "BatchIngredient",
    "Ingredient",
    "IngredientVersion",
    "MenuItem",
    "RecipeLine",
    "RegularIngredient",
    "SalesDay",
    "Week",
    "WeeklyCostSnapshotEntry",
    "WeeklyInventoryEntry",
    "InventoryValuation",
    "build_cost_snapshot",
    "create_version",
    "inventory_valuation",
    "revise_ingredient",
    "unit_cost_from_case",
    "version_in_effect",
    "FinalizedWeek",
    "WeekReport",
    "build_week_report",
    "finalize_week",
    "rank_menu_items",
    "rate_food_cost",
    "rate_margin",
    "WeekData",
    "load_week_file",
    "FoodcostConfig",
    "load_config",
    "FoodcostError",
    "CircularBatchReferenceError",
    "InvalidIngredientError",
    "WeekAlreadyFinalizedError",
    "WeekFileError",
]
