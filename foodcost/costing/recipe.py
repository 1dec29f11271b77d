"""Recipe cost roll-up, including nested batch ingredients."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

from ..errors import CircularBatchReferenceError
from ..types import BatchIngredient, Ingredient, MenuItem, RecipeLine, RegularIngredient
from .numbers import ensure_finite, round_half_away, safe_number
from .units import conversion_factor

logger = logging.getLogger(__name__)

UNKNOWN_INGREDIENT_NAME = "Unknown Ingredient"

Catalog = Mapping[str, Ingredient]


@dataclass
class LineCost:
    """Costed view of a single recipe line."""

    ingredient_id: str
    ingredient_name: str
    quantity: float
    unit: str
    unit_cost: float
    line_cost: float
    category: str = "other"


@dataclass
class RecipeCostSummary:
    total_cost: float = 0.0
    lines: list[LineCost] = field(default_factory=list)
    food_cost_percentage: float = 0.0   # 0 until a selling price is known

    def summary_dict(self) -> dict:
        return {
            "total_cost": self.total_cost,
            "food_cost_percentage": self.food_cost_percentage,
            "lines": [
                {
                    "ingredient_id": line.ingredient_id,
                    "ingredient_name": line.ingredient_name,
                    "quantity": line.quantity,
                    "unit": line.unit,
                    "unit_cost": round_half_away(line.unit_cost, 4),
                    "line_cost": line.line_cost,
                    "category": line.category,
                }
                for line in self.lines
            ],
        }


def index_catalog(catalog: Iterable[Ingredient] | Catalog) -> Catalog:
    """Key a catalog by ingredient id (mappings pass through)."""
    if isinstance(catalog, Mapping):
        return catalog
    return {ingredient.id: ingredient for ingredient in catalog}


def calculate_recipe_cost(
    lines: Iterable[RecipeLine],
    catalog: Iterable[Ingredient] | Catalog,
) -> RecipeCostSummary:
    """Cost every line of a recipe against an ingredient catalog.

    Unknown ingredients, zero quantities and unconvertible units all
    degrade to a best-effort number; nothing here raises for bad data.

    Raises:
        CircularBatchReferenceError: If a batch ingredient (directly or
            transitively) contains itself.
    """
    return _recipe_cost(lines, index_catalog(catalog), ())


def batch_unit_cost(
    batch: BatchIngredient,
    catalog: Iterable[Ingredient] | Catalog,
) -> float:
    """Cost of one ``yield_unit`` of a batch ingredient (4 dp)."""
    return _batch_unit_cost(batch, index_catalog(catalog), ())


def effective_unit_cost(
    ingredient: Ingredient,
    unit: str,
    catalog: Iterable[Ingredient] | Catalog,
) -> float:
    """Cost of one ``unit`` of the ingredient, after any unit conversion."""
    return _unit_cost_in(ingredient, unit, index_catalog(catalog), ())


def food_cost_percentage(recipe_cost: float, selling_price: float) -> float:
    """Recipe cost as a percentage of selling price (2 dp, 0 if unpriced)."""
    cost = safe_number(recipe_cost)
    price = safe_number(selling_price)
    if price == 0:
        return 0.0
    return round_half_away(cost / price * 100, 2)


def calculate_recipe_cost_with_percentage(
    lines: Iterable[RecipeLine],
    catalog: Iterable[Ingredient] | Catalog,
    selling_price: float | None = None,
) -> RecipeCostSummary:
    summary = calculate_recipe_cost(lines, catalog)
    if not selling_price:
        return summary
    return replace(
        summary,
        food_cost_percentage=food_cost_percentage(summary.total_cost, selling_price),
    )


def menu_item_cost(
    menu_item: MenuItem,
    catalog: Iterable[Ingredient] | Catalog,
) -> RecipeCostSummary:
    return calculate_recipe_cost_with_percentage(
        menu_item.recipe_lines, catalog, menu_item.selling_price
    )


def _recipe_cost(
    lines: Iterable[RecipeLine],
    catalog: Catalog,
    chain: tuple[str, ...],
) -> RecipeCostSummary:
    costs = [_line_cost(line, catalog, chain) for line in lines]
    total = sum(c.line_cost for c in costs)
    return RecipeCostSummary(total_cost=round_half_away(total, 4), lines=costs)


def _line_cost(
    line: RecipeLine,
    catalog: Catalog,
    chain: tuple[str, ...],
) -> LineCost:
    quantity = safe_number(line.quantity)
    ingredient = catalog.get(line.ingredient_id)

    if ingredient is None:
        logger.warning(
            "Recipe line references unknown ingredient %r; costing it at 0",
            line.ingredient_id,
        )
        return LineCost(
            ingredient_id=line.ingredient_id,
            ingredient_name=UNKNOWN_INGREDIENT_NAME,
            quantity=quantity,
            unit=line.unit,
            unit_cost=0.0,
            line_cost=0.0,
        )

    unit_cost = _unit_cost_in(ingredient, line.unit, catalog, chain)
    return LineCost(
        ingredient_id=line.ingredient_id,
        ingredient_name=ingredient.name,
        quantity=quantity,
        unit=line.unit,
        unit_cost=unit_cost,
        line_cost=round_half_away(quantity * unit_cost, 4),
        category=ingredient.category or "other",
    )


def _unit_cost_in(
    ingredient: Ingredient,
    unit: str,
    catalog: Catalog,
    chain: tuple[str, ...],
) -> float:
    if isinstance(ingredient, BatchIngredient):
        return _batch_cost_in_unit(ingredient, unit, catalog, chain)
    return _regular_cost_in_unit(ingredient, unit)


def _batch_unit_cost(
    batch: BatchIngredient,
    catalog: Catalog,
    chain: tuple[str, ...],
) -> float:
    if batch.id in chain:
        raise CircularBatchReferenceError(chain + (batch.id,))

    yield_quantity = ensure_finite(batch.yield_quantity)
    if yield_quantity <= 0 or not batch.recipe_lines:
        logger.debug("Batch %r has no usable recipe or yield; cost is 0", batch.id)
        return 0.0

    nested = _recipe_cost(batch.recipe_lines, catalog, chain + (batch.id,))
    return round_half_away(nested.total_cost / yield_quantity, 4)


def _batch_cost_in_unit(
    batch: BatchIngredient,
    unit: str,
    catalog: Catalog,
    chain: tuple[str, ...],
) -> float:
    per_yield_unit = _batch_unit_cost(batch, catalog, chain)

    # Same unit (or no yield unit recorded): nothing to convert.
    if not batch.yield_unit or batch.yield_unit == unit:
        return per_yield_unit

    factor = conversion_factor(batch.yield_unit, unit)
    if factor is not None:
        return per_yield_unit / factor

    logger.debug(
        "No conversion from %s to %s for batch %r; using unconverted cost",
        batch.yield_unit, unit, batch.id,
    )
    return per_yield_unit


def _regular_cost_in_unit(ingredient: RegularIngredient, unit: str) -> float:
    base_cost = safe_number(ingredient.unit_cost)

    if not ingredient.inventory_unit or ingredient.inventory_unit == unit:
        return base_cost

    # 1. Dynamic conversion through the unit table.
    factor = conversion_factor(ingredient.inventory_unit, unit)
    if factor is not None:
        return base_cost / factor

    # 2. Legacy manual factor stored against the ingredient's recipe unit.
    legacy_factor = ensure_finite(ingredient.conversion_factor)
    if ingredient.recipe_unit and legacy_factor > 0 and unit == ingredient.recipe_unit:
        return base_cost / legacy_factor

    # 3. Assume the units already match.
    logger.debug(
        "No conversion from %s to %s for %r; using unconverted cost",
        ingredient.inventory_unit, unit, ingredient.id,
    )
    return base_cost
