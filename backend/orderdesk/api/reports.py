# backend/orderdesk/api/reports.py
"""Printable job card and PDI reports, addressed by job card number."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.database import get_db
from orderdesk.models.user import User
from orderdesk.services.job_card_locator import JobCardFound, JobCardNotFound, JobCardLookup
from orderdesk.services.reports import render_job_card_report, render_pdi_report
from orderdesk.services.sales_order_service import SalesOrderService

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _require_found(result: JobCardLookup) -> JobCardFound:
    if isinstance(result, JobCardFound):
        return result
    if isinstance(result, JobCardNotFound):
        raise HTTPException(status_code=404, detail=result.message)
    raise HTTPException(status_code=422, detail=result.message)


# job card numbers contain a slash, hence the path converter
@router.get("/job-card/{job_card_number:path}", response_class=HTMLResponse)
async def job_card_report(
    job_card_number: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    found = _require_found(await SalesOrderService(db).locate_job_card(job_card_number.strip()))
    return HTMLResponse(content=render_job_card_report(found.sales_order, found.item))


@router.get("/pdi/{job_card_number:path}", response_class=HTMLResponse)
async def pdi_report(
    job_card_number: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    found = _require_found(await SalesOrderService(db).locate_job_card(job_card_number.strip()))
    return HTMLResponse(content=render_pdi_report(found.sales_order, found.item))
