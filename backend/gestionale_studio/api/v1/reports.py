"""
Router FastAPI per i Report
Progetto: Gestionale Studio Legale
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from gestionale_studio.core.storage import JsonStore, get_store
from gestionale_studio.schemas.report import DashboardReport, MonthlyTotal
from gestionale_studio.services.report_service import ReportService

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/reports",
    tags=["Report"],
)


def get_report_service() -> ReportService:
    """Dependency per ottenere un'istanza del ReportService."""
    return ReportService()


@router.get(
    "/dashboard",
    name="report_dashboard",
    summary="Riepilogo dashboard",
    response_model=DashboardReport,
    status_code=status.HTTP_200_OK,
)
async def get_dashboard(
    store: JsonStore = Depends(get_store),
    service: ReportService = Depends(get_report_service),
) -> DashboardReport:
    return service.dashboard(store)


@router.get(
    "/months",
    name="report_mesi",
    summary="Andamento mensile",
    description="Fatturato e incassato degli ultimi mesi, mese corrente incluso.",
    response_model=list[MonthlyTotal],
    status_code=status.HTTP_200_OK,
)
async def get_monthly_totals(
    months: int = Query(12, ge=1, le=36, description="Numero di mesi"),
    store: JsonStore = Depends(get_store),
    service: ReportService = Depends(get_report_service),
) -> list[MonthlyTotal]:
    return service.monthly_totals(store, months=months)
