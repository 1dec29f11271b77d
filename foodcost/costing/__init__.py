"""Costing engine: unit conversion, recipe costs, usage and sales analytics."""

from .numbers import clamp_non_negative, ensure_finite, round_half_away, safe_number
from .recipe import (
    LineCost,
    RecipeCostSummary,
    batch_unit_cost,
    calculate_recipe_cost,
    calculate_recipe_cost_with_percentage,
    effective_unit_cost,
    food_cost_percentage,
    menu_item_cost,
)
from .sales import (
    DAY_KEYS,
    WeeklySalesTotals,
    daily_net,
    food_cost_percentage_of_sales,
    gross_margin,
    gross_profit,
    week_over_week_growth,
    weekly_totals,
)
from .units import (
    ALLOWED_UNITS,
    UNIT_LABELS,
    are_units_compatible,
    compatible_units,
    conversion_factor,
    format_quantity,
    is_valid_unit,
    unit_category,
)
from .usage import (
    CostOfSalesLine,
    CostOfSalesResult,
    ReportSummary,
    compute_cost_of_sales,
    compute_report_summary,
    compute_usage,
    usage_by_ingredient,
)

__all__ = [
    # Numbers
    "clamp_non_negative",
    "ensure_finite",
    "round_half_away",
    "safe_number",
    # Units
    "ALLOWED_UNITS",
    "UNIT_LABELS",
    "are_units_compatible",
    "compatible_units",
    "conversion_factor",
    "format_quantity",
    "is_valid_unit",
    "unit_category",
    # Recipe
    "LineCost",
    "RecipeCostSummary",
    "batch_unit_cost",
    "calculate_recipe_cost",
    "calculate_recipe_cost_with_percentage",
    "effective_unit_cost",
    "food_cost_percentage",
    "menu_item_cost",
    # Usage
    "CostOfSalesLine",
    "CostOfSalesResult",
    "ReportSummary",
    "compute_cost_of_sales",
    "compute_report_summary",
    "compute_usage",
    "usage_by_ingredient",
    # Sales
    "DAY_KEYS",
    "WeeklySalesTotals",
    "daily_net",
    "food_cost_percentage_of_sales",
    "gross_margin",
    "gross_profit",
    "week_over_week_growth",
    "weekly_totals",
]
