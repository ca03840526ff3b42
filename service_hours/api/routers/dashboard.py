# service_hours/api/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from service_hours.core.db import get_db
from service_hours.schemas.dashboard import DashboardMetrics, LedgerIssue, ProgressOverview
from service_hours.services.dashboard_service import DashboardService
from service_hours.services.reconciliation import find_inconsistencies

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetrics)
async def get_metrics(db: Session = Depends(get_db)):
    return DashboardService(db).metrics()


@router.get("/progress", response_model=ProgressOverview)
async def get_progress(db: Session = Depends(get_db)):
    """Supervisor view: per-student progress plus the latest requests"""
    return DashboardService(db).progress()


@router.get("/reconciliation", response_model=List[LedgerIssue])
async def get_reconciliation(db: Session = Depends(get_db)):
    """Balances that disagree with their committed assignments"""
    return find_inconsistencies(db)
