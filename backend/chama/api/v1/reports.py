"""
Report download endpoints.

Records are ranked by their computed total, the same way the board shows them.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from chama.api.v1.contributions import contribution_to_response
from chama.core.config import settings
from chama.core.periods import parse_year
from chama.db.base import get_db
from chama.services.contributions import list_contributions_by_member_name
from chama.services.exports import (
    PDF_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    pdf_filename,
    render_pdf,
    render_xlsx,
    xlsx_filename,
)
from chama.services.reports import sort_by_total

router = APIRouter()


async def _ranked_records(db: AsyncSession, year: int) -> list[dict]:
    records = await list_contributions_by_member_name(db, year)
    return sort_by_total(contribution_to_response(c).model_dump(mode="json") for c in records)


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/reports/{year}/pdf")
async def download_pdf_report(year: str, db: AsyncSession = Depends(get_db)):
    """Printable contributions report for a year."""
    report_year = parse_year(year)
    records = await _ranked_records(db, report_year)
    content = render_pdf(records, report_year, settings.GROUP_NAME)
    return _attachment(content, PDF_MEDIA_TYPE, pdf_filename(report_year))


@router.get("/reports/{year}/xlsx")
async def download_xlsx_report(year: str, db: AsyncSession = Depends(get_db)):
    """Spreadsheet export of a year's contributions."""
    report_year = parse_year(year)
    records = await _ranked_records(db, report_year)
    content = render_xlsx(records, report_year)
    return _attachment(content, XLSX_MEDIA_TYPE, xlsx_filename(report_year))
