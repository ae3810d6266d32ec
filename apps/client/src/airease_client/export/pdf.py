"""Render a ``ComparisonReport`` to PDF with reportlab."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from airease_ml.labels import format_score, stage_label

if TYPE_CHECKING:
    from reportlab.platypus import Flowable

    from airease_client.export.report import ComparisonReport, FlightCard

logger = logging.getLogger(__name__)

BEST_MARKER = " *"
MARGIN = 36
HEADER_BG = colors.HexColor("#1E3A8A")
BEST_BG = colors.HexColor("#ECFDF5")


def format_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def format_stops(stops: int) -> str:
    if stops == 0:
        return "Direct"
    return f"{stops} stop" if stops == 1 else f"{stops} stops"


def _table_style(best_cells: list[tuple[int, int]]) -> TableStyle:
    style = TableStyle(
        [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
            ("ALIGN", (1, 0), (-1, -1), "CENTER"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ]
    )
    for col, row in best_cells:
        style.add("BACKGROUND", (col, row), (col, row), BEST_BG)
    return style


def _header(cards: tuple[FlightCard, ...], first: str) -> list[str]:
    return [first, *(f"{c.airline} {c.flight_number}" for c in cards)]


def _cards_table(cards: tuple[FlightCard, ...]) -> Table:
    rows: list[list[str]] = [
        _header(cards, "Flight"),
        ["Route", *(c.route for c in cards)],
        [
            "Times",
            *(
                f"{c.departure_time:%H:%M} - {c.arrival_time:%H:%M}"
                for c in cards
            ),
        ],
        [
            "Score",
            *(
                f"{format_score(c.overall_score)} "
                f"({stage_label('overall', c.overall_score)})"
                for c in cards
            ),
        ],
        [
            "Price",
            *(
                f"{c.currency} {c.price:,.2f}" + (BEST_MARKER if c.is_lowest_price else "")
                for c in cards
            ),
        ],
        [
            "Duration",
            *(
                format_duration(c.duration_minutes)
                + (BEST_MARKER if c.is_shortest else "")
                for c in cards
            ),
        ],
        ["Stops", *(format_stops(c.stops) for c in cards)],
        ["", *("BEST CHOICE" if c.is_best_overall else "" for c in cards)],
    ]
    best_cells = [
        (col, len(rows) - 1)
        for col, card in enumerate(cards, start=1)
        if card.is_best_overall
    ]
    table = Table(rows, hAlign="LEFT")
    table.setStyle(_table_style(best_cells))
    return table


def _dimension_table(report: ComparisonReport) -> Table:
    rows: list[list[str]] = [_header(report.cards, "Dimension")]
    best_cells: list[tuple[int, int]] = []
    for row_idx, row in enumerate(report.dimension_rows, start=1):
        cells = [row.label]
        for col, (value, best) in enumerate(zip(row.values, row.best, strict=True), start=1):
            text = "n/a" if value is None else format_score(value)
            if best:
                text += BEST_MARKER
                best_cells.append((col, row_idx))
            cells.append(text)
        rows.append(cells)
    table = Table(rows, hAlign="LEFT")
    table.setStyle(_table_style(best_cells))
    return table


def _amenity_table(report: ComparisonReport) -> Table:
    rows: list[list[str]] = [_header(report.cards, "Amenity")]
    rows.extend([row.label, *row.values] for row in report.amenity_rows)
    table = Table(rows, hAlign="LEFT")
    table.setStyle(_table_style([]))
    return table


def _chart(chart_png: bytes, max_width: float) -> Image:
    width, height = ImageReader(BytesIO(chart_png)).getSize()
    scale = min(1.0, max_width / width)
    return Image(BytesIO(chart_png), width=width * scale, height=height * scale)


def render_pdf(report: ComparisonReport, chart_png: bytes | None = None) -> bytes:
    """Render ``report`` as an A4 PDF and return the document bytes.

    ``chart_png`` is an already rendered chart image and is embedded as is.
    Best values are marked with ``*``.
    """
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=report.title,
    )
    styles = getSampleStyleSheet()

    def heading(text: str) -> Paragraph:
        return Paragraph(f"<b>{escape(text)}</b>", styles["Heading2"])

    elements: list[Flowable] = [
        Paragraph(f"<b>{escape(report.title)}</b>", styles["Title"]),
        Paragraph(
            f"Generated on {report.generated_at:%B %d, %Y}", styles["BodyText"]
        ),
        Spacer(1, 12),
        heading("Flight Summary"),
        _cards_table(report.cards),
        Spacer(1, 14),
        heading("Score Breakdown"),
        _dimension_table(report),
        Spacer(1, 14),
        heading("Amenities & Facilities"),
        _amenity_table(report),
    ]
    if chart_png:
        elements += [
            Spacer(1, 14),
            heading("Visual Comparison"),
            _chart(chart_png, doc.width),
        ]
    elements += [
        Spacer(1, 14),
        Paragraph(
            f"{BEST_MARKER.strip()} best value in row. Scores are on a 0-10 scale.",
            styles["Italic"],
        ),
    ]

    doc.build(elements)
    pdf = buf.getvalue()
    logger.info(
        "Rendered comparison PDF for %s (%d bytes)", ", ".join(report.signature), len(pdf)
    )
    return pdf

