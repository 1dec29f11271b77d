"""PDF generation for weekly cost reports using ReportLab."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Mapping

from .config import ReportConfig
from .report import WeekReport, rate_food_cost, rate_margin

# Fonts tried when no font_path is configured; Helvetica is the fallback
_FONT_SEARCH_PATHS = [
    # DejaVu (Debian/Ubuntu)
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    # DejaVu (Fedora/RHEL)
    "/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    # Liberation
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # macOS
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
]

_FALLBACK_FONT = "Helvetica"

_RATING_COLORS = {
    "excellent": "#059669",
    "acceptable": "#CA8A04",
    "high": "#DC2626",
    "low": "#DC2626",
    "none": "#94A3B8",
}


def _find_font(font_path: str = "") -> str | None:
    """Return a TrueType font path, or None to use the built-in font.

    Raises:
        FileNotFoundError: If an explicitly configured font does not exist.
    """
    if font_path:
        if not Path(font_path).exists():
            raise FileNotFoundError(f"Configured font not found: {font_path}")
        return font_path
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    return None


def _register_font(font_path: str = "") -> str:
    """Register a TrueType font with ReportLab and return the font name."""
    path = _find_font(font_path)
    if path is None:
        return _FALLBACK_FONT

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    font_name = "ReportFont"
    pdfmetrics.registerFont(TTFont(font_name, path))
    return font_name


def _money(value: float, symbol: str) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def generate_report_pdf(
    report: WeekReport,
    output_path: str | Path,
    ingredient_names: Mapping[str, str] | None = None,
    config: ReportConfig | None = None,
    font_path: str = "",
) -> Path:
    """Generate a PDF file from a WeekReport.

    Args:
        report: The weekly report to render.
        output_path: Where to save the PDF file.
        ingredient_names: Display names keyed by ingredient id.
        config: Currency symbol, business name and rating thresholds.
        font_path: Optional TrueType font to embed.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
        FileNotFoundError: If ``font_path`` is given but missing.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import LETTER
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "reportlab is required: pip install 'foodcost[pdf]'"
        )

    config = config or ReportConfig()
    names = ingredient_names or {}
    symbol = config.currency_symbol
    font_name = _register_font(font_path)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=LETTER,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Weekly Cost Report - {report.week_id}",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Title"],
        fontName=font_name,
        fontSize=18,
        leading=24,
    )
    subtitle_style = ParagraphStyle(
        "ReportSubtitle",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=10,
        leading=14,
        textColor=colors.grey,
    )
    heading_style = ParagraphStyle(
        "ReportHeading",
        parent=styles["Heading2"],
        fontName=font_name,
        fontSize=13,
        leading=18,
        spaceAfter=3 * mm,
    )
    footer_style = ParagraphStyle(
        "ReportFooter",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=8,
        leading=11,
        textColor=colors.grey,
    )

    table_style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1E293B")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F1F5F9")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
    ])

    summary = report.summary
    elements: list = []

    # Title
    elements.append(Paragraph(f"Weekly Cost Report - {report.week_id}", title_style))
    elements.append(
        Paragraph(f"Generated on {date.today().strftime('%m/%d/%Y')}", subtitle_style)
    )
    if config.business_name:
        elements.append(Paragraph(config.business_name, subtitle_style))
    elements.append(Spacer(1, 6 * mm))

    # Cost summary
    food_cost_rating = rate_food_cost(
        report.food_cost_percentage,
        config.food_cost_excellent,
        config.food_cost_acceptable,
    )
    margin_rating = rate_margin(
        report.gross_margin if report.sales.gross_sales else None,
        config.margin_excellent,
        config.margin_acceptable,
    )
    food_cost_text = (
        f"{report.food_cost_percentage:.2f}%"
        if report.food_cost_percentage is not None
        else "n/a"
    )

    elements.append(Paragraph("Cost Summary", heading_style))
    summary_rows = [
        ["Metric", "Value"],
        ["Total usage units", f"{summary.total_usage_units:.2f}"],
        ["Total cost of sales", _money(summary.total_cost_of_sales, symbol)],
        ["Ingredients", str(len(summary.breakdown))],
        ["Gross sales", _money(report.sales.gross_sales, symbol)],
        ["Net sales", _money(report.sales.net_sales, symbol)],
        ["Food cost %", food_cost_text],
        ["Gross profit", _money(report.gross_profit, symbol)],
        ["Gross margin", f"{report.gross_margin:.2f}%"],
    ]
    t = Table(summary_rows, colWidths=[70 * mm, 50 * mm])
    t.setStyle(table_style)
    t.setStyle(TableStyle([
        ("TEXTCOLOR", (1, 6), (1, 6), colors.HexColor(_RATING_COLORS[food_cost_rating])),
        ("TEXTCOLOR", (1, 8), (1, 8), colors.HexColor(_RATING_COLORS[margin_rating])),
    ]))
    elements.append(t)
    elements.append(Spacer(1, 6 * mm))

    # Ingredient breakdown
    if summary.breakdown:
        elements.append(Paragraph("Ingredient Cost Breakdown", heading_style))
        table_data = [["Ingredient", "Usage", "Unit Cost", "Cost of Sales", "Share", "Version"]]
        for line in summary.breakdown:
            share = summary.ingredient_cost_share.get(line.ingredient_id, 0.0)
            table_data.append([
                names.get(line.ingredient_id, line.ingredient_id),
                f"{line.usage:.2f}",
                _money(line.unit_cost, symbol),
                _money(line.cost_of_sales, symbol),
                f"{share * 100:.1f}%",
                line.source_version_id,
            ])
        col_widths = [55 * mm, 20 * mm, 25 * mm, 30 * mm, 18 * mm, 32 * mm]
        t = Table(table_data, colWidths=col_widths, repeatRows=1)
        t.setStyle(table_style)
        flagged = [
            ("TEXTCOLOR", (5, row), (5, row), colors.HexColor("#DC2626"))
            for row, line in enumerate(summary.breakdown, 1)
            if line.is_unspecified
        ]
        if flagged:
            t.setStyle(TableStyle(flagged))
        elements.append(t)
        elements.append(Spacer(1, 6 * mm))

    elements.append(
        Paragraph(
            f"Computed at {summary.computed_at}. Unit costs are frozen per week; "
            "versions marked 'unspecified' had no cost snapshot.",
            footer_style,
        )
    )

    doc.build(elements)
    return output_path
