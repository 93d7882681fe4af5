"""
Activity report export as PDF (reportlab).

Layout: title and subtitle, generation details with the active filters,
then one striped table row per activity entry.
"""

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from . import settings, utils
from .activity import ALL
from .schemas import ActivityLogEntry

logger = logging.getLogger(__name__)

BRAND_RED = colors.HexColor("#dc2626")
LIGHT_BG = colors.HexColor("#f8fafc")
MUTED = colors.HexColor("#646464")

TABLE_HEADER = ["Date", "Activity", "Entity Type", "Entity", "Description"]


def _build_styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=base["Title"],
            fontSize=20,
            textColor=BRAND_RED,
            alignment=TA_CENTER,
            spaceAfter=4,
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle",
            parent=base["Normal"],
            fontSize=16,
            alignment=TA_CENTER,
            spaceAfter=14,
        ),
        "meta": ParagraphStyle("Meta", parent=base["Normal"], fontSize=10, leading=14),
        "meta_small": ParagraphStyle(
            "MetaSmall", parent=base["Normal"], fontSize=8, textColor=MUTED, leading=11
        ),
        "cell": ParagraphStyle("TableCell", parent=base["Normal"], fontSize=8, leading=10),
    }


def _format_timestamp(value: Optional[datetime]) -> str:
    return value.strftime("%b %d, %Y %I:%M %p") if value else "N/A"


def _filter_label(value: str, all_label: str) -> str:
    return all_label if value == ALL else value


def _activity_table(entries: Sequence[ActivityLogEntry], cell_style: ParagraphStyle) -> Table:
    data: list[list] = [TABLE_HEADER]
    for entry in entries:
        data.append(
            [
                _format_timestamp(entry.created_at),
                entry.activity_type.value,
                entry.entity_type.value,
                Paragraph(escape(entry.entity_name or "N/A"), cell_style),
                Paragraph(escape(entry.description), cell_style),
            ]
        )

    table = Table(
        data,
        colWidths=[1.45 * inch, 1.05 * inch, 0.8 * inch, 1.3 * inch, 2.6 * inch],
        repeatRows=1,
    )
    style_cmds: list[tuple] = [
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_RED),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
    ]
    # Striped rows
    for i in range(2, len(data), 2):
        style_cmds.append(("BACKGROUND", (0, i), (-1, i), LIGHT_BG))
    table.setStyle(TableStyle(style_cmds))
    return table


def build_activity_pdf(
    entries: Sequence[ActivityLogEntry],
    activity_filter: str = ALL,
    entity_filter: str = ALL,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Renders the activity report. Raises ValueError when there is nothing to export."""
    if not entries:
        raise ValueError("No activities to export. Adjust the filters or record some activity first.")

    generated_at = generated_at or datetime.now()
    styles = _build_styles()

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        title="Activity Report",
        topMargin=0.6 * inch,
        bottomMargin=0.6 * inch,
        leftMargin=0.5 * inch,
        rightMargin=0.5 * inch,
    )

    story: list = [
        Paragraph("Meat Inventory System", styles["title"]),
        Paragraph("Activity Report", styles["subtitle"]),
        Paragraph(f"Generated: {_format_timestamp(generated_at)}", styles["meta"]),
        Paragraph(
            f"Filter: {escape(_filter_label(activity_filter, 'All Activities'))}",
            styles["meta"],
        ),
        Paragraph(
            f"Entity: {escape(_filter_label(entity_filter, 'All Entities'))}",
            styles["meta"],
        ),
        Paragraph(f"Total Records: {len(entries)}", styles["meta_small"]),
        Spacer(1, 0.2 * inch),
        _activity_table(entries, styles["cell"]),
    ]

    doc.build(story)
    pdf_bytes = buf.getvalue()
    buf.close()

    logger.info(f"Generated activity PDF: {len(entries)} entries, {len(pdf_bytes)} bytes")
    return pdf_bytes


def save_activity_pdf(
    entries: Sequence[ActivityLogEntry],
    activity_filter: str = ALL,
    entity_filter: str = ALL,
    output_dir: Optional[Path] = None,
) -> Path | None:
    """Writes meat-inventory-report-YYYY-MM-DD.pdf, or returns None when there is nothing to export."""
    try:
        pdf_bytes = build_activity_pdf(entries, activity_filter, entity_filter)
    except ValueError as e:
        logger.warning(f"⚠️ {e}")
        return None

    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    pdf_path = (
        output_dir
        / f"{settings.REPORT_FILENAME_BASE}-{utils.get_date_suffix_for_filename()}.pdf"
    )
    pdf_path.write_bytes(pdf_bytes)
    logger.info(f"✅ Activity report saved to: {pdf_path}")
    return pdf_path
