"""Ingredient pricing, version history and week-end cost snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable

from .costing.numbers import round_half_away, safe_number
from .costing.recipe import Catalog, batch_unit_cost, index_catalog
from .errors import InvalidIngredientError
from .timeutil import Clock, as_utc, epoch_millis, utc_now
from .types import (
    INGREDIENT_CATEGORIES,
    UNSPECIFIED_VERSION,
    BatchIngredient,
    Ingredient,
    IngredientVersion,
    WeeklyCostSnapshotEntry,
    WeeklyInventoryEntry,
)

logger = logging.getLogger(__name__)


@dataclass
class InventoryValuation:
    """Value of ending inventory, in total and per ingredient category."""

    total_value: float = 0.0
    value_by_category: dict[str, float] = field(
        default_factory=lambda: {c: 0.0 for c in INGREDIENT_CATEGORIES}
    )


def unit_cost_from_case(case_price: float, units_per_case: float) -> float:
    """Cost of one inventory unit (4 dp).

    Raises:
        InvalidIngredientError: If ``units_per_case`` is not positive.
    """
    units = safe_number(units_per_case)
    if units <= 0:
        raise InvalidIngredientError("units per case must be greater than zero")
    return round_half_away(safe_number(case_price) / units, 4)


def create_version(ingredient: Ingredient, now: Clock | None = None) -> IngredientVersion:
    """Snapshot an ingredient's current pricing as a new version.

    The version id is the creation time in epoch milliseconds. Batch
    ingredients have no stored unit cost, so their versions record 0.
    """
    moment = as_utc((now or utc_now)())
    if isinstance(ingredient, BatchIngredient):
        unit_cost = 0.0
    else:
        unit_cost = safe_number(ingredient.unit_cost)
    return IngredientVersion(
        id=str(epoch_millis(moment)),
        ingredient_id=ingredient.id,
        case_price=safe_number(ingredient.case_price),
        units_per_case=safe_number(ingredient.units_per_case),
        unit_cost=unit_cost,
        effective_from=moment,
    )


def revise_ingredient(
    ingredient: Ingredient,
    case_price: float,
    units_per_case: float,
    previous: IngredientVersion | None = None,
    now: Clock | None = None,
) -> tuple[Ingredient, IngredientVersion | None, IngredientVersion]:
    """Apply a price change and open a new version.

    Returns:
        (updated ingredient, previous version closed at the change time or
        None, new version).

    Raises:
        InvalidIngredientError: If a regular ingredient's ``units_per_case``
            is not positive.
    """
    moment = as_utc((now or utc_now)())

    if isinstance(ingredient, BatchIngredient):
        priced = replace(ingredient, case_price=case_price, units_per_case=units_per_case)
    else:
        priced = replace(
            ingredient,
            case_price=case_price,
            units_per_case=units_per_case,
            unit_cost=unit_cost_from_case(case_price, units_per_case),
        )

    version = create_version(priced, now=lambda: moment)
    closed = replace(previous, effective_to=moment) if previous is not None else None
    updated = replace(priced, current_version_id=version.id)

    logger.info(
        "Ingredient %r revised: version %s supersedes %s",
        ingredient.id, version.id, previous.id if previous else None,
    )
    return updated, closed, version


def version_in_effect(
    versions: Iterable[IngredientVersion], at: datetime
) -> IngredientVersion | None:
    """Return the version whose effective window contains ``at``."""
    moment = as_utc(at)
    candidates = [
        v for v in versions
        if as_utc(v.effective_from) <= moment
        and (v.effective_to is None or moment < as_utc(v.effective_to))
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda v: as_utc(v.effective_from))


def build_cost_snapshot(
    inventory: Iterable[WeeklyInventoryEntry],
    catalog: Iterable[Ingredient] | Catalog,
) -> list[WeeklyCostSnapshotEntry]:
    """Freeze the current unit cost of every inventoried ingredient.

    Unknown ingredients snapshot at 0 with the ``unspecified`` version id.
    Batch ingredients snapshot their derived cost per yield unit.
    """
    index = index_catalog(catalog)
    snapshot: dict[str, WeeklyCostSnapshotEntry] = {}

    for entry in inventory:
        ingredient = index.get(entry.ingredient_id)
        if ingredient is None:
            logger.warning(
                "Inventory entry for unknown ingredient %r; snapshot cost is 0",
                entry.ingredient_id,
            )
            unit_cost = 0.0
        elif isinstance(ingredient, BatchIngredient):
            unit_cost = batch_unit_cost(ingredient, index)
        else:
            unit_cost = safe_number(ingredient.unit_cost)

        version_id = (ingredient.current_version_id if ingredient else None) or UNSPECIFIED_VERSION
        snapshot[entry.ingredient_id] = WeeklyCostSnapshotEntry(
            ingredient_id=entry.ingredient_id,
            unit_cost=unit_cost,
            source_version_id=version_id,
        )

    return list(snapshot.values())


def inventory_valuation(
    inventory: Iterable[WeeklyInventoryEntry],
    catalog: Iterable[Ingredient] | Catalog,
) -> InventoryValuation:
    """Value ending counts at current unit costs, skipping unknown ingredients."""
    index = index_catalog(catalog)
    valuation = InventoryValuation()
    total = 0.0

    for entry in inventory:
        ingredient = index.get(entry.ingredient_id)
        if ingredient is None:
            continue
        if isinstance(ingredient, BatchIngredient):
            unit_cost = batch_unit_cost(ingredient, index)
        else:
            unit_cost = safe_number(ingredient.unit_cost)

        value = safe_number(entry.end) * unit_cost
        category = ingredient.category if ingredient.category in INGREDIENT_CATEGORIES else "other"
        valuation.value_by_category[category] += value
        total += value

    valuation.total_value = round_half_away(total, 2)
    valuation.value_by_category = {
        k: round_half_away(v, 2) for k, v in valuation.value_by_category.items()
    }
    return valuation
