"""Shared fixtures: a small but complete week of costing data."""

import json

import pytest


@pytest.fixture
def week_payload():
    return {
        "week": {"id": "2025-W05", "status": "draft", "created_at": "2025-01-27T08:00:00Z"},
        "ingredients": [
            {
                "id": "beef",
                "name": "Ground Beef",
                "inventory_unit": "lb",
                "case_price": 50.0,
                "units_per_case": 20,
                "current_version_id": "1735689600000",
            },
            {
                "id": "cheese",
                "name": "Cheddar",
                "inventory_unit": "lb",
                "unit_cost": 1.0,
                "current_version_id": "1735689600001",
            },
            {
                "id": "seasoning",
                "name": "Taco Seasoning",
                "inventory_unit": "oz",
                "unit_cost": 0.5,
            },
            {
                "id": "seasoned-beef",
                "name": "Seasoned Beef",
                "is_batch": True,
                "yield": 8,
                "yield_unit": "lb",
                "recipe_lines": [
                    {"ingredient_id": "beef", "quantity": 10, "unit": "lb"},
                    {"ingredient_id": "seasoning", "quantity": 4, "unit": "oz"},
                ],
            },
        ],
        "menu_items": [
            {
                "id": "taco",
                "name": "Beef Taco",
                "selling_price": 3.0,
                "recipe_lines": [
                    {"ingredient_id": "seasoned-beef", "quantity": 4, "unit": "oz"},
                    {"ingredient_id": "cheese", "quantity": 1, "unit": "oz"},
                ],
            },
            {
                "id": "quesadilla",
                "name": "Quesadilla",
                "selling_price": 5.0,
                "recipe_lines": [
                    {"ingredient_id": "cheese", "quantity": 4, "unit": "oz"},
                ],
            },
            {"id": "water", "name": "Water", "recipe_lines": []},
        ],
        "inventory": [
            {"ingredient_id": "beef", "begin": 20, "received": 5, "end": 8},
            {"ingredient_id": "cheese", "begin": 10, "received": 4, "end": 9},
        ],
        "cost_snapshot": [
            {"ingredient_id": "beef", "unit_cost": 2.5, "source_version_id": "1735689600000"},
            {"ingredient_id": "cheese", "unit_cost": 1.0, "source_version_id": "1735689600001"},
        ],
        "sales": {
            "mon": {"food": 70, "drink": 30, "less_sales_tax": 8, "less_promo": 5},
            "tue": {"food": 110, "drink": 40.5, "less_sales_tax": 12.34, "less_promo": 7.01},
        },
    }


@pytest.fixture
def week_file(tmp_path, week_payload):
    path = tmp_path / "week.json"
    path.write_text(json.dumps(week_payload), encoding="utf-8")
    return path
