"""
Pydantic schemas for report rows and printable views.
"""
from typing import List, Optional

from pydantic import Field

from schemas.common import CamelModel
from schemas.shipment import Shipment
from schemas.trailer import Trailer


class ReleasedReportItem(CamelModel):
    shipment_id: str
    sts_job: int
    customer_job_number: Optional[str] = None
    trailer_id: str
    trailer_name: Optional[str] = None
    trailer_company: Optional[str] = None
    released_at: str
    released_at_formatted: str
    importer: str
    exporter: str
    clearance_date: Optional[str] = None
    clearance_date_formatted: str
    mrn: Optional[str] = None


class OverdueReleasedReportItem(CamelModel):
    shipment_id: str
    sts_job: int
    customer_job_number: Optional[str] = None
    trailer_id: str
    trailer_name: Optional[str] = None
    trailer_company: Optional[str] = None
    storage_expiry_date: str
    storage_expiry_date_formatted: str
    released_at: str
    released_at_formatted: str
    days_overdue: int


class CompanyTrailerCount(CamelModel):
    company_name: str
    trailer_count: int


class UnreleasedStockLocationItem(CamelModel):
    shipment_id: str
    sts_job: int
    customer_job_number: Optional[str] = None
    trailer_id: str
    trailer_name: Optional[str] = None
    trailer_company: Optional[str] = None
    trailer_arrival_date: str
    shipment_quantity: int
    location_name: str
    location_pallets: Optional[int] = None


class CalendarDay(CamelModel):
    date: str
    trailers: List[Trailer]


class ReportPeriod(CamelModel):
    start: str
    end: str
    label: str


class ReleasedReport(CamelModel):
    period: ReportPeriod
    items: List[ReleasedReportItem]


class OverdueReleasedReport(CamelModel):
    period: ReportPeriod
    company: Optional[str] = None
    companies: List[str]
    items: List[OverdueReleasedReportItem]


class CompanyTrailersReport(CamelModel):
    period: ReportPeriod
    items: List[CompanyTrailerCount]


class ArrivalCalendar(CamelModel):
    period: ReportPeriod
    days: List[CalendarDay]


class TrailerTransferForm(CamelModel):
    """Fields of the transfer to authorised temporary storage form."""
    manifest_ref: str
    unit_container_number: str
    t1_1: Optional[str] = Field(None, alias="t1_1")
    t1_2: Optional[str] = Field(None, alias="t1_2")
    arrival_date: str
    total_shipments: int
    clearance_agency_company: Optional[str] = None
    generated_at: str


class ShipmentLabelSheet(CamelModel):
    trailer: Trailer
    label_date: str
    shipments: List[Shipment]
