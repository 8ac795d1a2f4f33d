"""
Reports API Routes

Profit and COGS summaries over the sales journal.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_report_service, get_sales_service
from batchcogs.models.reports import PeriodSummary, SalesOverview, TopItem
from batchcogs.services import ReportService, SalesService

router = APIRouter()


@router.get("/overview", response_model=SalesOverview)
async def overview(
    sales: SalesService = Depends(get_sales_service),
    reports: ReportService = Depends(get_report_service),
):
    """Today's profit, last month's profit and the summary tables."""
    return reports.overview(sales.history(), now=sales.clock())


@router.get("/monthly", response_model=List[PeriodSummary])
async def monthly_summary(
    sales: SalesService = Depends(get_sales_service),
    reports: ReportService = Depends(get_report_service),
):
    return reports.monthly_summary(sales.history())


@router.get("/yearly", response_model=List[PeriodSummary])
async def yearly_summary(
    sales: SalesService = Depends(get_sales_service),
    reports: ReportService = Depends(get_report_service),
):
    return reports.yearly_summary(sales.history())


@router.get("/top-items", response_model=List[TopItem])
async def top_items(
    limit: int = Query(5, ge=1, le=50),
    sales: SalesService = Depends(get_sales_service),
    reports: ReportService = Depends(get_report_service),
):
    """Best-selling dishes by quantity."""
    return reports.top_selling(sales.history(), limit=limit)
