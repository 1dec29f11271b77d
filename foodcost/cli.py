"""CLI entry point for the costing engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import FoodcostConfig, load_config
from .costing.recipe import menu_item_cost
from .costing.units import (
    CATEGORY_LABELS,
    UNIT_LABELS,
    conversion_factor,
    is_valid_unit,
    units_in_category,
)
from .errors import FoodcostError
from .loader import WeekData, load_week_file
from .report import (
    build_week_report,
    finalize_week,
    rank_menu_items,
    rate_food_cost,
    rate_margin,
)

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="foodcost",
        description="Restaurant costing: recipe costs, weekly cost of sales and margins",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # units
    sub.add_parser("units", help="List supported units by category")

    # convert
    convert_parser = sub.add_parser("convert", help="Show the factor between two units")
    convert_parser.add_argument("from_unit", help="Unit to convert from (e.g. lb)")
    convert_parser.add_argument("to_unit", help="Unit to convert to (e.g. oz)")

    # recipe
    recipe_parser = sub.add_parser("recipe", help="Cost menu item recipes")
    recipe_parser.add_argument("week_file", help="Week data file (JSON)")
    recipe_parser.add_argument(
        "--menu-item", type=str, default=None, help="Only cost this menu item id"
    )
    recipe_parser.add_argument("--json", action="store_true", help="Output JSON")

    # report
    report_parser = sub.add_parser("report", help="Weekly cost of sales report")
    report_parser.add_argument("week_file", help="Week data file (JSON)")
    report_parser.add_argument("--json", action="store_true", help="Output JSON")
    report_parser.add_argument(
        "--pdf", type=str, default=None, metavar="FILE",
        help="Write the report as a PDF file",
    )
    report_parser.add_argument(
        "--finalize", action="store_true",
        help="Freeze unit costs from the ingredient catalog before reporting",
    )
    report_parser.add_argument(
        "--by", type=str, default="cli", help="User recorded as finalizing the week"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    config = load_config(args.config)
    _configure_logging(config, args.verbose)

    try:
        match args.command:
            case "units":
                _cmd_units()
            case "convert":
                _cmd_convert(args)
            case "recipe":
                _cmd_recipe(args)
            case "report":
                _cmd_report(config, args)
    except FoodcostError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _configure_logging(config: FoodcostConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_units() -> None:
    for category, label in CATEGORY_LABELS.items():
        print(f"{label}:")
        for unit in units_in_category(category):
            print(f"  {unit:<6} {UNIT_LABELS[unit]}")


def _cmd_convert(args) -> None:
    for unit in (args.from_unit, args.to_unit):
        if not is_valid_unit(unit):
            print(f"Unknown unit: {unit}", file=sys.stderr)
            sys.exit(1)

    factor = conversion_factor(args.from_unit, args.to_unit)
    if factor is None:
        print(
            f"{args.from_unit} and {args.to_unit} are not convertible",
            file=sys.stderr,
        )
        sys.exit(1)
    print(f"1 {args.from_unit} = {factor:.6g} {args.to_unit}")


def _cmd_recipe(args) -> None:
    data = load_week_file(args.week_file)

    if args.menu_item:
        items = [m for m in data.menu_items if m.id == args.menu_item]
        if not items:
            print(f"Menu item not found: {args.menu_item}", file=sys.stderr)
            sys.exit(1)
        costed = [(item, menu_item_cost(item, data.ingredients)) for item in items]
    else:
        costed = rank_menu_items(data.menu_items, data.ingredients)

    if args.json:
        payload = [
            {"id": item.id, "name": item.name, "selling_price": item.selling_price,
             **summary.summary_dict()}
            for item, summary in costed
        ]
        print(json.dumps(payload, indent=2))
        return

    if not costed:
        print("No menu items found.")
        return
    for item, summary in costed:
        print(f"{item.name} ({item.id})")
        for line in summary.lines:
            print(
                f"  {line.ingredient_name:<24} {line.quantity:>8g} {line.unit:<5}"
                f" @ {line.unit_cost:>9.4f} = {line.line_cost:>9.4f}"
            )
        pct = f"{summary.food_cost_percentage:.2f}%" if summary.food_cost_percentage else "n/a"
        print(f"  Total cost {summary.total_cost:.4f}  food cost {pct}\n")


def _cmd_report(config: FoodcostConfig, args) -> None:
    data = load_week_file(args.week_file)

    if args.finalize:
        finalized = finalize_week(
            data.week, data.inventory, data.ingredients, data.sales, args.by
        )
        report = finalized.report
        snapshot = finalized.cost_snapshot
    else:
        if not data.cost_snapshot:
            logger.warning(
                "Week %s has no cost snapshot; every ingredient will cost 0. "
                "Use --finalize to snapshot current prices.",
                data.week.id,
            )
        report = build_week_report(
            data.week, data.inventory, data.cost_snapshot, data.sales
        )
        snapshot = data.cost_snapshot

    if args.json:
        payload = report.summary_dict()
        if args.finalize:
            payload["cost_snapshot"] = [
                {
                    "ingredient_id": s.ingredient_id,
                    "unit_cost": s.unit_cost,
                    "source_version_id": s.source_version_id,
                }
                for s in snapshot
            ]
        print(json.dumps(payload, indent=2))
    else:
        _print_report(config, data, report)

    if args.pdf:
        from .pdf import generate_report_pdf

        print(f"Writing PDF to {args.pdf}...", file=sys.stderr)
        try:
            path = generate_report_pdf(
                report,
                Path(args.pdf),
                ingredient_names=data.ingredient_names,
                config=config.report,
                font_path=config.pdf.font_path,
            )
            print(f"  PDF saved: {path}", file=sys.stderr)
        except (ImportError, FileNotFoundError) as e:
            print(f"PDF error: {e}", file=sys.stderr)
            sys.exit(1)


def _print_report(config: FoodcostConfig, data: WeekData, report) -> None:
    rpt = config.report
    symbol = rpt.currency_symbol
    names = data.ingredient_names
    summary = report.summary

    print(f"Week {report.week_id}")
    print(f"  Total usage units    {summary.total_usage_units:>12.2f}")
    print(f"  Total cost of sales  {symbol}{summary.total_cost_of_sales:>11,.2f}")
    print(f"  Gross sales          {symbol}{report.sales.gross_sales:>11,.2f}")
    print(f"  Net sales            {symbol}{report.sales.net_sales:>11,.2f}")
    if report.food_cost_percentage is None:
        print("  Food cost %                  n/a")
    else:
        rating = rate_food_cost(
            report.food_cost_percentage, rpt.food_cost_excellent, rpt.food_cost_acceptable
        )
        print(f"  Food cost %          {report.food_cost_percentage:>11.2f}%  [{rating}]")
    print(f"  Gross profit         {symbol}{report.gross_profit:>11,.2f}")
    margin_rating = rate_margin(
        report.gross_margin, rpt.margin_excellent, rpt.margin_acceptable
    )
    print(f"  Gross margin         {report.gross_margin:>11.2f}%  [{margin_rating}]")

    if summary.breakdown:
        print()
        print(f"  {'Ingredient':<24} {'Usage':>8} {'Unit cost':>10} {'Cost':>10} {'Share':>7}")
        for line in summary.breakdown:
            share = summary.ingredient_cost_share.get(line.ingredient_id, 0.0)
            flag = "  (unspecified version)" if line.is_unspecified else ""
            print(
                f"  {names.get(line.ingredient_id, line.ingredient_id):<24}"
                f" {line.usage:>8.2f} {line.unit_cost:>10.4f}"
                f" {line.cost_of_sales:>10.2f} {share:>7.1%}{flag}"
            )
