"""Unit-of-measure registry and conversion factors."""

from __future__ import annotations

MASS = "mass"
US_VOLUME = "us_volume"
METRIC_VOLUME = "metric_volume"
COUNT = "count"

# Category -> unit -> amount of the category base unit (g, tsp, ml, each).
# US and metric volume are deliberately separate categories.
_UNIT_TABLE: dict[str, dict[str, float]] = {
    MASS: {
        "oz": 28.3495,
        "lb": 453.592,
        "g": 1.0,
        "kg": 1000.0,
    },
    US_VOLUME: {
        "tsp": 1.0,
        "tbsp": 3.0,
        "cup": 48.0,
        "pt": 96.0,
        "qt": 192.0,
        "gal": 768.0,
    },
    METRIC_VOLUME: {
        "ml": 1.0,
        "l": 1000.0,
    },
    COUNT: {
        "each": 1.0,
        "count": 1.0,
        "case": 1.0,
    },
}

_UNIT_CATEGORY: dict[str, str] = {
    unit: category
    for category, members in _UNIT_TABLE.items()
    for unit in members
}

ALLOWED_UNITS: tuple[str, ...] = tuple(_UNIT_CATEGORY)

UNIT_LABELS: dict[str, str] = {
    # Weight
    "oz": "ounces",
    "lb": "pounds",
    "g": "grams",
    "kg": "kilograms",
    # Volume (US)
    "tsp": "teaspoons",
    "tbsp": "tablespoons",
    "cup": "cups",
    "pt": "pints",
    "qt": "quarts",
    "gal": "gallons",
    # Volume (metric)
    "ml": "milliliters",
    "l": "liters",
    # Count
    "each": "each",
    "count": "count",
    "case": "case",
}

CATEGORY_LABELS: dict[str, str] = {
    MASS: "Weight",
    US_VOLUME: "Volume (US)",
    METRIC_VOLUME: "Volume (metric)",
    COUNT: "Count",
}


def is_valid_unit(unit: str | None) -> bool:
    return unit in _UNIT_CATEGORY


def unit_category(unit: str | None) -> str | None:
    """Return the category a unit belongs to, or None if unrecognised."""
    if unit is None:
        return None
    return _UNIT_CATEGORY.get(unit)


def units_in_category(category: str) -> tuple[str, ...]:
    return tuple(_UNIT_TABLE.get(category, ()))


def conversion_factor(from_unit: str | None, to_unit: str | None) -> float | None:
    """Factor turning one ``from_unit`` into ``to_unit``.

    Examples:
        conversion_factor("lb", "oz")  -> ~16.0
        conversion_factor("gal", "cup") -> 16.0
        conversion_factor("cup", "ml") -> None (US vs metric volume)

    Returns:
        The scalar factor, or None when either unit is unknown or the
        units belong to different categories.
    """
    from_category = unit_category(from_unit)
    to_category = unit_category(to_unit)
    if from_category is None or to_category is None:
        return None

    if from_unit == to_unit:
        return 1.0

    if from_category != to_category:
        return None

    table = _UNIT_TABLE[from_category]
    return table[from_unit] / table[to_unit]


def are_units_compatible(a: str | None, b: str | None) -> bool:
    return conversion_factor(a, b) is not None


def compatible_units(unit: str | None) -> frozenset[str]:
    """All units sharing ``unit``'s category (empty if unrecognised)."""
    category = unit_category(unit)
    if category is None:
        return frozenset()
    return frozenset(_UNIT_TABLE[category])


def format_quantity(quantity: float, unit: str) -> str:
    """Human form, e.g. ``1.5 pounds`` or ``1 each``."""
    amount = _format_number(quantity)
    if quantity == 1 and unit_category(unit) == COUNT:
        return f"{amount} {unit}"
    return f"{amount} {UNIT_LABELS.get(unit, unit)}"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)
