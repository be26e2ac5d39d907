"""
Reports and list views computed from a warehouse snapshot.

Every function here is pure over the snapshot it is given, so a report
never mixes collections captured at different moments.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from schemas.report import (
    ArrivalCalendar,
    CalendarDay,
    CompanyTrailerCount,
    CompanyTrailersReport,
    OverdueReleasedReport,
    OverdueReleasedReportItem,
    ReleasedReport,
    ReleasedReportItem,
    ReportPeriod,
    ShipmentLabelSheet,
    TrailerTransferForm,
    UnreleasedStockLocationItem,
)
from schemas.shipment import Shipment, pending_locations
from schemas.trailer import Trailer, TrailerStatus
from services.date_service import (
    DATE_FORMAT,
    DATETIME_FORMAT,
    FORM_DATE_FORMAT,
    FORM_PLACEHOLDER,
    INVALID_DATE,
    NOT_AVAILABLE,
    day_key,
    days_between,
    format_safe,
    is_within,
    month_bounds,
    parse_iso,
    week_bounds,
    week_days,
)
from services.warehouse_service import WarehouseSnapshot

log = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"

Bounds = Tuple[datetime, datetime]


def _period(bounds: Bounds, label: str) -> ReportPeriod:
    start, end = bounds
    return ReportPeriod(start=start.isoformat(), end=end.isoformat(), label=label)


def _timestamp(value: Optional[str]) -> float:
    parsed = parse_iso(value)
    return parsed.timestamp() if parsed else 0.0


class ReportService:
    # ==================== RELEASED SHIPMENTS ====================

    @staticmethod
    def released_between(snapshot: WarehouseSnapshot, start: datetime, end: datetime) -> List[ReleasedReportItem]:
        """Shipments whose released_at falls in [start, end], most recent first."""
        rows = []
        for shipment in snapshot.shipments:
            released = parse_iso(shipment.released_at)
            if not is_within(released, start, end):
                continue
            trailer = snapshot.trailer_by_id(shipment.trailer_id)
            rows.append((released, ReleasedReportItem(
                shipment_id=shipment.id,
                sts_job=shipment.sts_job,
                customer_job_number=shipment.customer_job_number,
                trailer_id=shipment.trailer_id,
                trailer_name=trailer.name if trailer else None,
                trailer_company=trailer.company if trailer else None,
                released_at=shipment.released_at,
                released_at_formatted=format_safe(shipment.released_at, DATETIME_FORMAT),
                importer=shipment.importer,
                exporter=shipment.exporter,
                clearance_date=shipment.clearance_date,
                clearance_date_formatted=format_safe(shipment.clearance_date, DATE_FORMAT),
                mrn=shipment.mrn,
            )))
        rows.sort(key=lambda row: row[0], reverse=True)
        return [item for _, item in rows]

    @staticmethod
    def weekly_released(snapshot: WarehouseSnapshot, reference: datetime) -> ReleasedReport:
        bounds = week_bounds(reference)
        label = f"{bounds[0].strftime('%b %d')} - {bounds[1].strftime('%b %d, %Y')}"
        return ReleasedReport(period=_period(bounds, label), items=ReportService.released_between(snapshot, *bounds))

    @staticmethod
    def monthly_released(snapshot: WarehouseSnapshot, reference: datetime) -> ReleasedReport:
        bounds = month_bounds(reference)
        return ReleasedReport(
            period=_period(bounds, bounds[0].strftime("%B %Y")),
            items=ReportService.released_between(snapshot, *bounds),
        )

    # ==================== OVERDUE RELEASES ====================

    @staticmethod
    def monthly_overdue_released(
        snapshot: WarehouseSnapshot,
        reference: datetime,
        company: Optional[str] = None,
    ) -> OverdueReleasedReport:
        """Shipments released in the month after their trailer's storage expired."""
        start, end = month_bounds(reference)
        company_filter = company.strip().lower() if company and company.strip().lower() != "all" else None

        items: List[OverdueReleasedReportItem] = []
        for shipment in snapshot.shipments:
            released = parse_iso(shipment.released_at)
            if not is_within(released, start, end):
                continue
            trailer = snapshot.trailer_by_id(shipment.trailer_id)
            if trailer is None or not trailer.storage_expiry_date:
                continue
            if company_filter and (trailer.company or "").lower() != company_filter:
                continue
            expiry = parse_iso(trailer.storage_expiry_date)
            if expiry is None:
                log.warning("Skipping shipment %s: trailer %s has an unreadable storage expiry date",
                            shipment.id, trailer.id)
                continue
            if released <= expiry:
                continue
            items.append(OverdueReleasedReportItem(
                shipment_id=shipment.id,
                sts_job=shipment.sts_job,
                customer_job_number=shipment.customer_job_number,
                trailer_id=shipment.trailer_id,
                trailer_name=trailer.name,
                trailer_company=trailer.company,
                storage_expiry_date=trailer.storage_expiry_date,
                storage_expiry_date_formatted=format_safe(trailer.storage_expiry_date, DATE_FORMAT),
                released_at=shipment.released_at,
                released_at_formatted=format_safe(shipment.released_at, DATETIME_FORMAT),
                days_overdue=days_between(released, expiry),
            ))

        items.sort(key=lambda item: item.days_overdue, reverse=True)
        return OverdueReleasedReport(
            period=_period((start, end), start.strftime("%B %Y")),
            company=company_filter,
            companies=ReportService.unique_companies(snapshot.trailers),
            items=items,
        )

    # ==================== COMPANY ARRIVALS ====================

    @staticmethod
    def monthly_company_trailers(snapshot: WarehouseSnapshot, reference: datetime) -> CompanyTrailersReport:
        """Trailer arrivals in the month grouped by company, busiest first."""
        start, end = month_bounds(reference)
        counts: Dict[str, int] = {}
        for trailer in snapshot.trailers:
            arrival = parse_iso(trailer.arrival_date)
            if trailer.arrival_date and arrival is None:
                log.warning("Skipping trailer %s: unreadable arrival date %r", trailer.id, trailer.arrival_date)
                continue
            if not is_within(arrival, start, end):
                continue
            name = trailer.company or UNKNOWN_COMPANY
            counts[name] = counts.get(name, 0) + 1

        items = [CompanyTrailerCount(company_name=name, trailer_count=count) for name, count in counts.items()]
        items.sort(key=lambda item: item.trailer_count, reverse=True)
        return CompanyTrailersReport(period=_period((start, end), start.strftime("%B %Y")), items=items)

    # ==================== UNRELEASED STOCK ====================

    @staticmethod
    def unreleased_stock_locations(snapshot: WarehouseSnapshot) -> List[UnreleasedStockLocationItem]:
        """One row per location of every shipment that has not been released."""
        rows = []
        for shipment in snapshot.shipments:
            if shipment.released_at:
                continue
            trailer = snapshot.trailer_by_id(shipment.trailer_id)
            arrival_raw = trailer.arrival_date if trailer else None
            arrival_sort = _timestamp(arrival_raw)
            for location in shipment.locations or pending_locations():
                rows.append((arrival_sort, UnreleasedStockLocationItem(
                    shipment_id=shipment.id,
                    sts_job=shipment.sts_job,
                    customer_job_number=shipment.customer_job_number,
                    trailer_id=shipment.trailer_id,
                    trailer_name=trailer.name if trailer else None,
                    trailer_company=trailer.company if trailer else None,
                    trailer_arrival_date=format_safe(arrival_raw, DATE_FORMAT),
                    shipment_quantity=shipment.quantity,
                    location_name=location.name,
                    location_pallets=location.pallets,
                )))

        rows.sort(key=lambda row: (-row[0], row[1].trailer_id, row[1].sts_job, row[1].location_name))
        return [item for _, item in rows]

    # ==================== CALENDAR ====================

    @staticmethod
    def arrival_calendar(snapshot: WarehouseSnapshot, reference: datetime) -> ArrivalCalendar:
        """Trailers bucketed by arrival day for the week containing reference."""
        start, end = week_bounds(reference)
        by_day: Dict[str, List[Trailer]] = {}
        for trailer in snapshot.trailers:
            arrival = parse_iso(trailer.arrival_date)
            if arrival is None:
                continue
            by_day.setdefault(day_key(arrival), []).append(trailer)

        days = [
            CalendarDay(date=day_key(day), trailers=by_day.get(day_key(day), []))
            for day in week_days(start)
        ]
        label = f"{start.strftime('%b %d')} - {end.strftime('%b %d, %Y')}"
        return ArrivalCalendar(period=_period((start, end), label), days=days)

    # ==================== LIST FILTERS ====================

    @staticmethod
    def unique_companies(trailers: Iterable[Trailer]) -> List[str]:
        return sorted({t.company for t in trailers if t.company})

    @staticmethod
    def filter_trailers(
        trailers: Iterable[Trailer],
        search: Optional[str] = None,
        status: Optional[TrailerStatus] = None,
        company: Optional[str] = None,
    ) -> List[Trailer]:
        term = (search or "").strip().lower()
        company_filter = (company or "").strip().lower()
        if company_filter == "all":
            company_filter = ""

        def matches(trailer: Trailer) -> bool:
            if term and not (
                term in trailer.id.lower()
                or term in trailer.name.lower()
                or (trailer.company and term in trailer.company.lower())
            ):
                return False
            if status and trailer.status != status:
                return False
            if company_filter and (trailer.company or "").lower() != company_filter:
                return False
            return True

        return [t for t in trailers if matches(t)]

    @staticmethod
    def filter_shipments(
        shipments: Iterable[Shipment],
        search: Optional[str] = None,
        trailer_id: Optional[str] = None,
    ) -> List[Shipment]:
        term = (search or "").strip().lower()

        def matches(shipment: Shipment) -> bool:
            if trailer_id and trailer_id != "all" and shipment.trailer_id != trailer_id:
                return False
            if not term:
                return True
            return (
                term in shipment.id.lower()
                or term in str(shipment.sts_job)
                or term in shipment.importer.lower()
                or any(term in loc.name.lower() for loc in shipment.locations)
            )

        return [s for s in shipments if matches(s)]

    # ==================== PRINTABLE VIEWS ====================

    @staticmethod
    def trailer_transfer_form(snapshot: WarehouseSnapshot, trailer_id: str, generated_at: datetime) -> Optional[TrailerTransferForm]:
        trailer = snapshot.trailer_by_id(trailer_id)
        if trailer is None:
            return None
        if trailer.arrival_date:
            arrival = format_safe(trailer.arrival_date, FORM_DATE_FORMAT)
        else:
            arrival = FORM_PLACEHOLDER
        return TrailerTransferForm(
            manifest_ref=trailer.id,
            unit_container_number=trailer.name,
            t1_1=trailer.custom_field_1,
            t1_2=trailer.custom_field_2,
            arrival_date=arrival,
            total_shipments=len(snapshot.shipments_for_trailer(trailer.id)),
            clearance_agency_company=trailer.company,
            generated_at=format_safe(generated_at, "%d/%m/%Y, %H:%M"),
        )

    @staticmethod
    def shipment_labels(snapshot: WarehouseSnapshot, trailer_id: str, today: datetime) -> Optional[ShipmentLabelSheet]:
        """Labels for every shipment on a trailer, dated with the trailer's arrival."""
        trailer = snapshot.trailer_by_id(trailer_id.strip())
        if trailer is None:
            return None
        label_date = format_safe(trailer.arrival_date, DATE_FORMAT)
        if label_date in (NOT_AVAILABLE, INVALID_DATE):
            label_date = format_safe(today, DATE_FORMAT)
        return ShipmentLabelSheet(
            trailer=trailer,
            label_date=label_date,
            shipments=snapshot.shipments_for_trailer(trailer.id),
        )

