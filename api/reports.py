# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0

"""
API endpoints for warehouse reports.

Every report takes an optional `on` timestamp selecting the week or month to
report on; without it the current period is used.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_warehouse
from schemas.report import (
    ArrivalCalendar,
    CompanyTrailersReport,
    OverdueReleasedReport,
    ReleasedReport,
    UnreleasedStockLocationItem,
)
from services.report_service import ReportService
from services.warehouse_service import WarehouseService

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _reference(on: Optional[datetime], warehouse: WarehouseService) -> datetime:
    return on or warehouse.now()


@router.get("/weekly-released", response_model=ReleasedReport)
def weekly_released(on: Optional[datetime] = None, warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.weekly_released(warehouse.snapshot(), _reference(on, warehouse))


@router.get("/monthly-released", response_model=ReleasedReport)
def monthly_released(on: Optional[datetime] = None, warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.monthly_released(warehouse.snapshot(), _reference(on, warehouse))


@router.get("/monthly-overdue-released", response_model=OverdueReleasedReport)
def monthly_overdue_released(
    on: Optional[datetime] = None,
    company: Optional[str] = None,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    """Shipments released after their trailer's storage expiry, optionally for one company."""
    return ReportService.monthly_overdue_released(warehouse.snapshot(), _reference(on, warehouse), company=company)


@router.get("/monthly-company-trailers", response_model=CompanyTrailersReport)
def monthly_company_trailers(on: Optional[datetime] = None, warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.monthly_company_trailers(warehouse.snapshot(), _reference(on, warehouse))


@router.get("/unreleased-stock-locations", response_model=List[UnreleasedStockLocationItem])
def unreleased_stock_locations(warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.unreleased_stock_locations(warehouse.snapshot())


@router.get("/arrival-calendar", response_model=ArrivalCalendar)
def arrival_calendar(on: Optional[datetime] = None, warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.arrival_calendar(warehouse.snapshot(), _reference(on, warehouse))
