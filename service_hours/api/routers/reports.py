# service_hours/api/routers/reports.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from service_hours.core.db import get_db
from service_hours.schemas.report import ReportSummary
from service_hours.services.report_service import ReportService

router = APIRouter()


@router.get("/summary", response_model=ReportSummary)
async def get_summary_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service_type: Optional[str] = Query(None),
    program: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    return ReportService(db).summary(
        start_date=start_date, end_date=end_date, service_type=service_type, program=program
    )
