"""Load a week's costing inputs from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .catalog import unit_cost_from_case
from .errors import InvalidIngredientError, WeekFileError
from .types import (
    UNSPECIFIED_VERSION,
    WEEK_DRAFT,
    BatchIngredient,
    Ingredient,
    MenuItem,
    RecipeLine,
    RegularIngredient,
    SalesDay,
    Week,
    WeeklyCostSnapshotEntry,
    WeeklyInventoryEntry,
)


@dataclass
class WeekData:
    """Everything needed to cost recipes and report on one week."""

    week: Week
    ingredients: list[Ingredient] = field(default_factory=list)
    menu_items: list[MenuItem] = field(default_factory=list)
    inventory: list[WeeklyInventoryEntry] = field(default_factory=list)
    cost_snapshot: list[WeeklyCostSnapshotEntry] = field(default_factory=list)
    sales: dict[str, SalesDay] = field(default_factory=dict)

    @property
    def ingredient_names(self) -> dict[str, str]:
        return {i.id: i.name for i in self.ingredients}


def load_week_file(path: str | Path) -> WeekData:
    """Read and parse a week file.

    Raises:
        WeekFileError: If the file is missing, not JSON, or malformed.
    """
    p = Path(path)
    try:
        with open(p, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise WeekFileError(f"week file not found: {p}")
    except json.JSONDecodeError as e:
        raise WeekFileError(f"{p}: invalid JSON: {e}")

    return parse_week_data(raw)


def parse_week_data(raw: Any) -> WeekData:
    if not isinstance(raw, dict):
        raise WeekFileError("week file must contain a JSON object")

    try:
        return WeekData(
            week=_parse_week(raw.get("week", {})),
            ingredients=[parse_ingredient(d) for d in raw.get("ingredients", [])],
            menu_items=[_parse_menu_item(d) for d in raw.get("menu_items", [])],
            inventory=[_parse_inventory_entry(d) for d in raw.get("inventory", [])],
            cost_snapshot=[_parse_snapshot_entry(d) for d in raw.get("cost_snapshot", [])],
            sales={
                key: _parse_sales_day(day)
                for key, day in raw.get("sales", {}).items()
            },
        )
    except KeyError as e:
        raise WeekFileError(f"missing required field {e}")
    except (TypeError, ValueError, AttributeError) as e:
        raise WeekFileError(f"malformed week file: {e}")


def parse_ingredient(data: dict) -> Ingredient:
    """Build a regular or batch ingredient from a dict.

    ``is_batch`` selects the variant. A regular ingredient without
    ``unit_cost`` derives it from ``case_price`` / ``units_per_case``.
    """
    common = {
        "id": str(data["id"]),
        "name": data.get("name", str(data["id"])),
        "units_per_case": data.get("units_per_case", 1.0),
        "case_price": data.get("case_price", 0.0),
        "category": data.get("category", "food"),
        "is_active": data.get("is_active", True),
        "current_version_id": data.get("current_version_id"),
    }

    if data.get("is_batch"):
        return BatchIngredient(
            recipe_lines=[_parse_recipe_line(d) for d in data.get("recipe_lines", [])],
            yield_quantity=data.get("yield_quantity", data.get("yield", 0.0)),
            yield_unit=data.get("yield_unit"),
            inventory_unit=data.get("inventory_unit", data.get("yield_unit") or ""),
            **common,
        )

    unit_cost = data.get("unit_cost")
    if unit_cost is None:
        try:
            unit_cost = unit_cost_from_case(common["case_price"], common["units_per_case"])
        except InvalidIngredientError as e:
            raise WeekFileError(f"ingredient {common['id']!r}: {e}")

    return RegularIngredient(
        inventory_unit=data.get("inventory_unit", ""),
        unit_cost=unit_cost,
        recipe_unit=data.get("recipe_unit"),
        conversion_factor=data.get("conversion_factor"),
        **common,
    )


def _parse_recipe_line(data: dict) -> RecipeLine:
    return RecipeLine(
        id=str(data.get("id", "")),
        ingredient_id=str(data["ingredient_id"]),
        quantity=data.get("quantity", 0.0),
        unit=data.get("unit", ""),
    )


def _parse_menu_item(data: dict) -> MenuItem:
    return MenuItem(
        id=str(data["id"]),
        name=data.get("name", str(data["id"])),
        selling_price=data.get("selling_price", 0.0),
        recipe_lines=[_parse_recipe_line(d) for d in data.get("recipe_lines", [])],
        is_active=data.get("is_active", True),
    )


def _parse_inventory_entry(data: dict) -> WeeklyInventoryEntry:
    return WeeklyInventoryEntry(
        ingredient_id=str(data["ingredient_id"]),
        begin=data.get("begin", 0.0),
        received=data.get("received", 0.0),
        end=data.get("end", 0.0),
    )


def _parse_snapshot_entry(data: dict) -> WeeklyCostSnapshotEntry:
    return WeeklyCostSnapshotEntry(
        ingredient_id=str(data["ingredient_id"]),
        unit_cost=data.get("unit_cost", 0.0),
        source_version_id=data.get("source_version_id") or UNSPECIFIED_VERSION,
    )


def _parse_sales_day(data: dict) -> SalesDay:
    return SalesDay(
        food=data.get("food", 0.0),
        drink=data.get("drink", 0.0),
        other=data.get("other", 0.0),
        less_sales_tax=data.get("less_sales_tax", 0.0),
        less_promo=data.get("less_promo", 0.0),
    )


def _parse_week(data: dict) -> Week:
    return Week(
        id=str(data.get("id", "")),
        status=data.get("status", WEEK_DRAFT),
        created_at=_parse_datetime(data.get("created_at")),
        finalized_at=_parse_datetime(data.get("finalized_at")),
        finalized_by=data.get("finalized_by"),
    )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    # fromisoformat() only accepts a trailing "Z" from Python 3.11
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
