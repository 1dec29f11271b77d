"""TOML configuration loader for the CLI and report export."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


@dataclass
class ReportConfig:
    business_name: str = ""
    currency_symbol: str = "$"
    food_cost_excellent: float = 30.0
    food_cost_acceptable: float = 35.0
    margin_excellent: float = 70.0
    margin_acceptable: float = 60.0


@dataclass
class PDFConfig:
    font_path: str = ""


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class FoodcostConfig:
    report: ReportConfig = field(default_factory=ReportConfig)
    pdf: PDFConfig = field(default_factory=PDFConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> FoodcostConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The log level can be overridden via FOODCOST_LOG_LEVEL when the file
    leaves it unset.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    rpt = raw.get("report", {})
    pdf = raw.get("pdf", {})
    log = raw.get("logging", {})

    defaults = ReportConfig()

    # Resolve log level: config file → environment variable → default
    level = log.get("level", "") or os.environ.get("FOODCOST_LOG_LEVEL", "") or "WARNING"

    return FoodcostConfig(
        report=ReportConfig(
            business_name=rpt.get("business_name", defaults.business_name),
            currency_symbol=rpt.get("currency_symbol", defaults.currency_symbol),
            food_cost_excellent=float(
                rpt.get("food_cost_excellent", defaults.food_cost_excellent)
            ),
            food_cost_acceptable=float(
                rpt.get("food_cost_acceptable", defaults.food_cost_acceptable)
            ),
            margin_excellent=float(rpt.get("margin_excellent", defaults.margin_excellent)),
            margin_acceptable=float(
                rpt.get("margin_acceptable", defaults.margin_acceptable)
            ),
        ),
        pdf=PDFConfig(
            font_path=pdf.get("font_path", ""),
        ),
        logging=LoggingConfig(
            level=level.upper(),
        ),
    )
