"""
PDF and Excel rendering of contribution reports.

Rows come from chama.services.reports; this module only handles layout.
"""
import io
import logging
from datetime import date
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from chama.services.reports import (
    EXPORT_COLUMNS,
    Record,
    build_export_rows,
    build_report_table,
    format_amount,
)

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_BLUE = colors.Color(41 / 255, 128 / 255, 185 / 255)


def pdf_filename(year: int) -> str:
    return f"Contributions_Report_{year}.pdf"


def xlsx_filename(year: int) -> str:
    return f"contributions_report_{year}.xlsx"


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 9)
    canvas.setFillColor(colors.grey)
    canvas.drawString(doc.leftMargin, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def render_pdf(
    records: Iterable[Record],
    year: int,
    group_name: str,
    as_of: Optional[date] = None
) -> bytes:
    """Render the landscape contributions report with a TOTALS row."""
    headers, rows = build_report_table(records)
    as_of = as_of or date.today()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=28,
        rightMargin=28,
        topMargin=36,
        bottomMargin=36,
        title=f"{group_name} - {year} Contributions Report",
    )
    styles = getSampleStyleSheet()

    story = [
        Paragraph(f"{group_name} - {year} Contributions Report", styles["Title"]),
        Paragraph(f"As of: {as_of:%B} {as_of.day}, {as_of.year}", styles["Normal"]),
        Spacer(1, 12),
    ]

    body = [[format_amount(cell) for cell in row] for row in rows]
    table = Table([headers] + body, repeatRows=1)
    style = [
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.2, colors.black),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ]
    if body:
        style.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))
    table.setStyle(TableStyle(style))
    story.append(table)

    doc.build(story, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    logger.info(f"Rendered PDF report for {year} with {len(body)} row(s)")
    return buffer.getvalue()


def render_xlsx(records: Iterable[Record], year: int) -> bytes:
    """Render one flat row per record into a single-sheet workbook."""
    rows = build_export_rows(records)

    wb = Workbook()
    sheet = wb.active
    sheet.title = "Contributions"

    for col, header in enumerate(EXPORT_COLUMNS, 1):
        cell = sheet.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")

    for row_index, row in enumerate(rows, 2):
        for col, header in enumerate(EXPORT_COLUMNS, 1):
            sheet.cell(row=row_index, column=col, value=row[header])

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Rendered Excel report for {year} with {len(rows)} row(s)")
    return buffer.getvalue()
