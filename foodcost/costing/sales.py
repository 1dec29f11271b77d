"""Weekly sales totals and profitability figures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from ..types import SalesDay
from .numbers import ensure_finite, round_half_away, safe_number

logger = logging.getLogger(__name__)

DAY_KEYS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

DAY_LABELS: dict[str, str] = {
    "mon": "Monday",
    "tue": "Tuesday",
    "wed": "Wednesday",
    "thu": "Thursday",
    "fri": "Friday",
    "sat": "Saturday",
    "sun": "Sunday",
}


@dataclass
class WeeklySalesTotals:
    gross_sales: float = 0.0
    less_sales_tax: float = 0.0
    less_promo: float = 0.0
    net_sales: float = 0.0

    def summary_dict(self) -> dict:
        return {
            "gross_sales": self.gross_sales,
            "less_sales_tax": self.less_sales_tax,
            "less_promo": self.less_promo,
            "net_sales": self.net_sales,
        }


def daily_gross(day: SalesDay) -> float:
    return safe_number(day.food) + safe_number(day.drink) + safe_number(day.other)


def daily_net(day: SalesDay) -> float:
    """Gross less sales tax and promotions, rounded to cents."""
    net = daily_gross(day) - safe_number(day.less_sales_tax) - safe_number(day.less_promo)
    return round_half_away(net, 2)


def weekly_totals(days: Mapping[str, SalesDay]) -> WeeklySalesTotals:
    """Sum a week of sales over the fixed Monday..Sunday keys.

    Missing days count as zero, so the result always covers a full week.
    """
    unknown = set(days) - set(DAY_KEYS)
    if unknown:
        logger.debug("Ignoring unknown sales day keys: %s", sorted(unknown))

    gross = tax = promo = net = 0.0
    for key in DAY_KEYS:
        day = days.get(key)
        if day is None:
            continue
        gross += daily_gross(day)
        tax += safe_number(day.less_sales_tax)
        promo += safe_number(day.less_promo)
        net += daily_net(day)

    return WeeklySalesTotals(
        gross_sales=round_half_away(gross, 2),
        less_sales_tax=round_half_away(tax, 2),
        less_promo=round_half_away(promo, 2),
        net_sales=round_half_away(net, 2),
    )


def gross_profit(gross_sales: float, cost_of_sales: float) -> float:
    """Sales minus cost of sales; may be negative."""
    return round_half_away(safe_number(gross_sales) - safe_number(cost_of_sales), 2)


def gross_margin(gross_sales: float, cost_of_sales: float) -> float:
    """Gross profit as a percentage of sales (0 when there are no sales).

    A NaN or negative cost is treated as zero cost, giving 100%.
    """
    sales = safe_number(gross_sales)
    if sales == 0:
        return 0.0
    cost = safe_number(cost_of_sales)
    return round_half_away((sales - cost) / sales * 100, 2)


def food_cost_percentage_of_sales(
    cost_of_sales: float, gross_sales: float
) -> float | None:
    """Cost of sales over gross sales, or None when nothing was sold."""
    sales = safe_number(gross_sales)
    if sales == 0:
        return None
    return round_half_away(safe_number(cost_of_sales) / sales * 100, 2)


def week_over_week_growth(current: float, previous: float) -> float:
    """Percent change in sales from the previous week (0 without a baseline)."""
    baseline = safe_number(previous)
    if baseline == 0:
        return 0.0
    return round_half_away((ensure_finite(current) - baseline) / baseline * 100, 2)
