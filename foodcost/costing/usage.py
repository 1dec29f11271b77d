"""Weekly inventory usage and cost-of-sales aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ..timeutil import Clock, isoformat_z, utc_now
from ..types import UNSPECIFIED_VERSION, WeeklyCostSnapshotEntry, WeeklyInventoryEntry
from .numbers import clamp_non_negative, round_half_away, safe_number

logger = logging.getLogger(__name__)


@dataclass
class CostOfSalesLine:
    ingredient_id: str
    usage: float
    unit_cost: float
    cost_of_sales: float
    source_version_id: str = UNSPECIFIED_VERSION

    @property
    def is_unspecified(self) -> bool:
        """True when no cost snapshot backed this line."""
        return self.source_version_id == UNSPECIFIED_VERSION


@dataclass
class CostOfSalesResult:
    breakdown: list[CostOfSalesLine] = field(default_factory=list)
    total: float = 0.0


@dataclass
class ReportSummary:
    """Usage and cost-of-sales totals for one week."""

    computed_at: str
    total_usage_units: float = 0.0
    total_cost_of_sales: float = 0.0
    ingredient_cost_share: dict[str, float] = field(default_factory=dict)
    breakdown: list[CostOfSalesLine] = field(default_factory=list)

    @property
    def unspecified_ingredients(self) -> list[str]:
        return [line.ingredient_id for line in self.breakdown if line.is_unspecified]

    def summary_dict(self) -> dict:
        """Return a summary dict for JSON serialization."""
        return {
            "computed_at": self.computed_at,
            "totals": {
                "total_usage_units": self.total_usage_units,
                "total_cost_of_sales": self.total_cost_of_sales,
            },
            "percentages": {
                "ingredient_cost_share": dict(self.ingredient_cost_share),
            },
            "breakdown": [
                {
                    "ingredient_id": line.ingredient_id,
                    "usage": line.usage,
                    "unit_cost": line.unit_cost,
                    "cost_of_sales": line.cost_of_sales,
                    "source_version_id": line.source_version_id,
                }
                for line in self.breakdown
            ],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> ReportSummary:
        """Rebuild a frozen report produced by :meth:`summary_dict`."""
        totals = data.get("totals", {})
        percentages = data.get("percentages", {})
        return cls(
            computed_at=data.get("computed_at", ""),
            total_usage_units=totals.get("total_usage_units", 0.0),
            total_cost_of_sales=totals.get("total_cost_of_sales", 0.0),
            ingredient_cost_share=dict(percentages.get("ingredient_cost_share", {})),
            breakdown=[
                CostOfSalesLine(
                    ingredient_id=row["ingredient_id"],
                    usage=row.get("usage", 0.0),
                    unit_cost=row.get("unit_cost", 0.0),
                    cost_of_sales=row.get("cost_of_sales", 0.0),
                    source_version_id=row.get("source_version_id", UNSPECIFIED_VERSION),
                )
                for row in data.get("breakdown", [])
            ],
        )


def compute_usage(entry: WeeklyInventoryEntry) -> float:
    """Inventory consumed over the week: begin + received - end, never negative."""
    begin = safe_number(entry.begin)
    received = safe_number(entry.received)
    end = safe_number(entry.end)
    return clamp_non_negative(begin + received - end)


def usage_by_ingredient(inventory: Iterable[WeeklyInventoryEntry]) -> dict[str, float]:
    """Usage keyed by ingredient id; a repeated id keeps its last entry."""
    return {entry.ingredient_id: compute_usage(entry) for entry in inventory}


def compute_cost_of_sales(
    usage: Mapping[str, float],
    snapshots: Iterable[WeeklyCostSnapshotEntry],
) -> CostOfSalesResult:
    """Multiply each ingredient's usage by its frozen unit cost.

    Ingredients without a snapshot cost 0 and carry the ``unspecified``
    version id so the report can flag them.
    """
    snapshot_by_id = {s.ingredient_id: s for s in snapshots}

    breakdown: list[CostOfSalesLine] = []
    for ingredient_id, used in usage.items():
        snapshot = snapshot_by_id.get(ingredient_id)
        if snapshot is None:
            logger.warning(
                "No cost snapshot for ingredient %r; costing its usage at 0",
                ingredient_id,
            )
            unit_cost = 0.0
            source_version_id = UNSPECIFIED_VERSION
        else:
            unit_cost = safe_number(snapshot.unit_cost)
            source_version_id = snapshot.source_version_id or UNSPECIFIED_VERSION

        normalized_usage = safe_number(used)
        breakdown.append(
            CostOfSalesLine(
                ingredient_id=ingredient_id,
                usage=normalized_usage,
                unit_cost=unit_cost,
                cost_of_sales=normalized_usage * unit_cost,
                source_version_id=source_version_id,
            )
        )

    return CostOfSalesResult(
        breakdown=breakdown,
        total=sum(line.cost_of_sales for line in breakdown),
    )


def compute_report_summary(
    inventory: Iterable[WeeklyInventoryEntry],
    snapshots: Iterable[WeeklyCostSnapshotEntry],
    now: Clock | None = None,
) -> ReportSummary:
    """Build the weekly usage / cost-of-sales summary.

    Args:
        inventory: Begin/received/end counts for the week.
        snapshots: Frozen unit costs for the week.
        now: Clock used for ``computed_at``; defaults to UTC wall time.

    Returns:
        ReportSummary with totals rounded to 2 decimals and cost shares
        rounded to 4 decimals.
    """
    usage = usage_by_ingredient(inventory)
    result = compute_cost_of_sales(usage, snapshots)
    total_usage = sum(usage.values())

    shares = {
        line.ingredient_id: (
            round_half_away(line.cost_of_sales / result.total, 4) if result.total else 0.0
        )
        for line in result.breakdown
    }

    clock = now or utc_now
    return ReportSummary(
        computed_at=isoformat_z(clock()),
        total_usage_units=round_half_away(total_usage, 2),
        total_cost_of_sales=round_half_away(result.total, 2),
        ingredient_cost_share=shares,
        breakdown=[
            CostOfSalesLine(
                ingredient_id=line.ingredient_id,
                usage=round_half_away(line.usage, 2),
                unit_cost=round_half_away(line.unit_cost, 4),
                cost_of_sales=round_half_away(line.cost_of_sales, 2),
                source_version_id=line.source_version_id,
            )
            for line in result.breakdown
        ],
    )
