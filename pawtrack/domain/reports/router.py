from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import DashboardMetrics, FinancialSummary
from .service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.get("/dashboard", response_model=DashboardMetrics)
async def get_dashboard_metrics(
    current_user: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.dashboard_metrics(current_user)


@router.get("/financial", response_model=FinancialSummary)
async def get_financial_summary(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    current_user: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    return service.financial_summary(current_user, start, end)
