"""Weekly report assembly and week finalization."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

from .catalog import build_cost_snapshot
from .costing.recipe import Catalog, RecipeCostSummary, index_catalog, menu_item_cost
from .costing.sales import (
    WeeklySalesTotals,
    food_cost_percentage_of_sales,
    gross_margin,
    gross_profit,
    weekly_totals,
)
from .costing.usage import ReportSummary, compute_report_summary
from .errors import WeekAlreadyFinalizedError
from .timeutil import Clock, as_utc, utc_now
from .types import (
    WEEK_FINALIZED,
    Ingredient,
    MenuItem,
    SalesDay,
    Week,
    WeeklyCostSnapshotEntry,
    WeeklyInventoryEntry,
)

logger = logging.getLogger(__name__)

RATING_NONE = "none"
RATING_EXCELLENT = "excellent"
RATING_ACCEPTABLE = "acceptable"
RATING_HIGH = "high"
RATING_LOW = "low"


@dataclass
class WeekReport:
    """Everything the weekly review screen and PDF show for one week."""

    week_id: str
    summary: ReportSummary
    sales: WeeklySalesTotals = field(default_factory=WeeklySalesTotals)
    food_cost_percentage: float | None = None
    gross_profit: float = 0.0
    gross_margin: float = 0.0

    def summary_dict(self) -> dict:
        """Return a summary dict for JSON serialization."""
        return {
            "week_id": self.week_id,
            "summary": self.summary.summary_dict(),
            "sales": self.sales.summary_dict(),
            "food_cost_percentage": self.food_cost_percentage,
            "gross_profit": self.gross_profit,
            "gross_margin": self.gross_margin,
        }


@dataclass
class FinalizedWeek:
    week: Week
    cost_snapshot: list[WeeklyCostSnapshotEntry]
    report: WeekReport


def build_week_report(
    week: Week,
    inventory: Iterable[WeeklyInventoryEntry],
    snapshots: Iterable[WeeklyCostSnapshotEntry],
    sales: Mapping[str, SalesDay],
    now: Clock | None = None,
) -> WeekReport:
    """Combine cost of sales with the week's sales figures."""
    summary = compute_report_summary(inventory, snapshots, now=now)
    totals = weekly_totals(sales)
    cost = summary.total_cost_of_sales
    return WeekReport(
        week_id=week.id,
        summary=summary,
        sales=totals,
        food_cost_percentage=food_cost_percentage_of_sales(cost, totals.gross_sales),
        gross_profit=gross_profit(totals.gross_sales, cost),
        gross_margin=gross_margin(totals.gross_sales, cost),
    )


def finalize_week(
    week: Week,
    inventory: Iterable[WeeklyInventoryEntry],
    catalog: Iterable[Ingredient] | Catalog,
    sales: Mapping[str, SalesDay],
    finalized_by: str,
    now: Clock | None = None,
) -> FinalizedWeek:
    """Freeze this week's unit costs and produce its final report.

    The returned snapshot is what keeps the report reproducible after
    ingredient prices change.

    Raises:
        WeekAlreadyFinalizedError: If ``week`` is already finalized.
    """
    if week.is_finalized:
        raise WeekAlreadyFinalizedError(week.id)

    moment = as_utc((now or utc_now)())
    inventory = list(inventory)
    snapshot = build_cost_snapshot(inventory, catalog)
    report = build_week_report(week, inventory, snapshot, sales, now=lambda: moment)

    logger.info(
        "Finalized week %s: cost of sales %.2f over %d ingredients",
        week.id, report.summary.total_cost_of_sales, len(snapshot),
    )
    return FinalizedWeek(
        week=replace(
            week,
            status=WEEK_FINALIZED,
            finalized_at=moment,
            finalized_by=finalized_by,
        ),
        cost_snapshot=snapshot,
        report=report,
    )


def rate_food_cost(
    percentage: float | None,
    excellent: float = 30.0,
    acceptable: float = 35.0,
) -> str:
    """Band a food-cost percentage; lower is better."""
    if not percentage:
        return RATING_NONE
    if percentage < excellent:
        return RATING_EXCELLENT
    if percentage < acceptable:
        return RATING_ACCEPTABLE
    return RATING_HIGH


def rate_margin(
    percentage: float | None,
    excellent: float = 70.0,
    acceptable: float = 60.0,
) -> str:
    """Band a gross-margin percentage; higher is better."""
    if percentage is None:
        return RATING_NONE
    if percentage >= excellent:
        return RATING_EXCELLENT
    if percentage >= acceptable:
        return RATING_ACCEPTABLE
    return RATING_LOW


def rank_menu_items(
    menu_items: Iterable[MenuItem],
    catalog: Iterable[Ingredient] | Catalog,
    include_inactive: bool = False,
) -> list[tuple[MenuItem, RecipeCostSummary]]:
    """Cost menu items and order them best margin first.

    Items without a selling price have no food-cost percentage and sort last.
    """
    index = index_catalog(catalog)
    costed = [
        (item, menu_item_cost(item, index))
        for item in menu_items
        if include_inactive or item.is_active
    ]
    return sorted(
        costed,
        key=lambda pair: (
            pair[1].food_cost_percentage == 0,
            pair[1].food_cost_percentage,
        ),
    )
