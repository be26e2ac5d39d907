from datetime import datetime, timezone

import pytest

from schemas.shipment import PENDING_ASSIGNMENT, LocationInfo, Shipment
from schemas.trailer import Trailer, TrailerStatus
from services.date_service import FORM_PLACEHOLDER, INVALID_DATE
from services.report_service import UNKNOWN_COMPANY, ReportService
from services.warehouse_service import WarehouseSnapshot

UTC = timezone.utc
REFERENCE = datetime(2024, 7, 24, 12, 0, tzinfo=UTC)


def trailer(trailer_id, **kwargs):
    return Trailer(id=trailer_id, name=f"Trailer {trailer_id}", **kwargs)


def shipment(shipment_id, trailer_id, sts_job=1, **kwargs):
    return Shipment(
        id=shipment_id, trailer_id=trailer_id, sts_job=sts_job, quantity=5,
        importer="Acme", exporter="Globex", **kwargs
    )


def snapshot(trailers=(), shipments=()):
    return WarehouseSnapshot(trailers=tuple(trailers), shipments=tuple(shipments), quiz_reports=())


# ==================== RELEASED SHIPMENTS ====================

def test_weekly_released_includes_both_boundaries():
    data = snapshot(
        [trailer("T-1", company="Logistics Inc.")],
        [
            shipment("at-start", "T-1", released_at="2024-07-22T00:00:00+00:00"),
            shipment("at-end", "T-1", released_at="2024-07-28T23:59:59.999999+00:00"),
            shipment("next-week", "T-1", released_at="2024-07-29T00:00:00+00:00"),
            shipment("never", "T-1"),
        ],
    )

    report = ReportService.weekly_released(data, REFERENCE)

    assert [item.shipment_id for item in report.items] == ["at-end", "at-start"]
    assert report.items[0].trailer_company == "Logistics Inc."
    assert report.period.label == "Jul 22 - Jul 28, 2024"


def test_monthly_released_skips_unreadable_release_dates():
    data = snapshot(
        [trailer("T-1")],
        [
            shipment("ok", "T-1", released_at="2024-07-01T00:00:00+00:00"),
            shipment("broken", "T-1", released_at="yesterday"),
            shipment("june", "T-1", released_at="2024-06-30T23:59:59+00:00"),
        ],
    )

    report = ReportService.monthly_released(data, REFERENCE)

    assert [item.shipment_id for item in report.items] == ["ok"]
    assert report.period.label == "July 2024"


def test_released_report_formats_missing_clearance_date():
    data = snapshot([trailer("T-1")], [shipment("s", "T-1", released_at="2024-07-23T09:30:00+00:00")])

    item = ReportService.monthly_released(data, REFERENCE).items[0]

    assert item.released_at_formatted == "Jul 23, 2024, 09:30:00 AM"
    assert item.clearance_date_formatted == "N/A"


# ==================== OVERDUE RELEASES ====================

def overdue_snapshot():
    return snapshot(
        [
            trailer("T-1", company="Logistics Inc.", storage_expiry_date="2024-07-10T10:00:00+00:00"),
            trailer("T-2", company="QuickShip Co.", storage_expiry_date="2024-07-01T10:00:00+00:00"),
            trailer("T-3", company="Cargo Movers"),
        ],
        [
            shipment("late", "T-1", released_at="2024-07-15T12:00:00+00:00"),
            shipment("on-time", "T-1", released_at="2024-07-09T12:00:00+00:00"),
            shipment("at-expiry", "T-1", released_at="2024-07-10T10:00:00+00:00"),
            shipment("very-late", "T-2", released_at="2024-07-20T12:00:00+00:00"),
            shipment("no-expiry", "T-3", released_at="2024-07-20T12:00:00+00:00"),
        ],
    )


def test_monthly_overdue_released_sorted_by_days_overdue():
    report = ReportService.monthly_overdue_released(overdue_snapshot(), REFERENCE)

    assert [(item.shipment_id, item.days_overdue) for item in report.items] == [("very-late", 19), ("late", 5)]
    assert report.companies == ["Cargo Movers", "Logistics Inc.", "QuickShip Co."]
    assert report.company is None


@pytest.mark.parametrize("company", ["logistics inc.", "  Logistics Inc. "])
def test_monthly_overdue_released_company_filter_ignores_case(company):
    report = ReportService.monthly_overdue_released(overdue_snapshot(), REFERENCE, company=company)

    assert [item.shipment_id for item in report.items] == ["late"]


def test_monthly_overdue_released_all_means_no_filter():
    report = ReportService.monthly_overdue_released(overdue_snapshot(), REFERENCE, company="All")

    assert len(report.items) == 2


# ==================== COMPANY ARRIVALS ====================

def test_monthly_company_trailers_groups_and_counts():
    data = snapshot([
        trailer("T-1", company="Logistics Inc.", arrival_date="2024-07-01T08:00:00+00:00"),
        trailer("T-2", company="Logistics Inc.", arrival_date="2024-07-31T23:00:00+00:00"),
        trailer("T-3", arrival_date="2024-07-15T08:00:00+00:00"),
        trailer("T-4", company="QuickShip Co.", arrival_date="2024-08-01T00:00:00+00:00"),
        trailer("T-5", company="QuickShip Co.", arrival_date="not a date"),
        trailer("T-6", company="QuickShip Co."),
    ])

    report = ReportService.monthly_company_trailers(data, REFERENCE)

    assert [(row.company_name, row.trailer_count) for row in report.items] == [
        ("Logistics Inc.", 2),
        (UNKNOWN_COMPANY, 1),
    ]


# ==================== UNRELEASED STOCK ====================

def test_unreleased_stock_locations_one_row_per_location():
    data = snapshot(
        [
            trailer("T-old", arrival_date="2024-07-01T08:00:00+00:00"),
            trailer("T-new", arrival_date="2024-07-20T08:00:00+00:00"),
            trailer("T-bad", arrival_date="soon"),
        ],
        [
            shipment("a", "T-old", sts_job=2, locations=[LocationInfo(name="Rack 2"), LocationInfo(name="Bay A")]),
            shipment("b", "T-new", sts_job=9),
            shipment("c", "T-new", sts_job=3, released_at="2024-07-21T08:00:00+00:00"),
            shipment("d", "T-bad", sts_job=4),
        ],
    )

    rows = ReportService.unreleased_stock_locations(data)

    assert [(row.shipment_id, row.location_name) for row in rows] == [
        ("b", PENDING_ASSIGNMENT),
        ("a", "Bay A"),
        ("a", "Rack 2"),
        ("d", PENDING_ASSIGNMENT),
    ]
    assert rows[0].trailer_arrival_date == "Jul 20, 2024"
    assert rows[-1].trailer_arrival_date == INVALID_DATE


# ==================== CALENDAR ====================

def test_arrival_calendar_buckets_by_day():
    data = snapshot([
        trailer("T-1", arrival_date="2024-07-24T08:00:00+00:00"),
        trailer("T-2", arrival_date="2024-07-24T18:00:00+00:00"),
        trailer("T-3", arrival_date="2024-07-28T23:00:00+00:00"),
        trailer("T-4", arrival_date="2024-07-29T00:00:00+00:00"),
        trailer("T-5"),
    ])

    calendar = ReportService.arrival_calendar(data, REFERENCE)

    assert [day.date for day in calendar.days] == [
        "2024-07-22", "2024-07-23", "2024-07-24", "2024-07-25", "2024-07-26", "2024-07-27", "2024-07-28",
    ]
    assert [t.id for t in calendar.days[2].trailers] == ["T-1", "T-2"]
    assert [t.id for t in calendar.days[6].trailers] == ["T-3"]


# ==================== LIST FILTERS ====================

def test_filter_trailers():
    trailers = [
        trailer("T-1", company="Logistics Inc.", status=TrailerStatus.ARRIVED),
        trailer("T-2", company="QuickShip Co.", status=TrailerStatus.ARRIVED),
        trailer("X-3", company="Logistics Inc."),
    ]

    assert [t.id for t in ReportService.filter_trailers(trailers, search="t-")] == ["T-1", "T-2"]
    assert [t.id for t in ReportService.filter_trailers(trailers, company="logistics inc.")] == ["T-1", "X-3"]
    assert [t.id for t in ReportService.filter_trailers(
        trailers, status=TrailerStatus.ARRIVED, company="all")] == ["T-1", "T-2"]


def test_filter_shipments():
    shipments = [
        shipment("s-1", "T-1", sts_job=12345, locations=[LocationInfo(name="Bay A")]),
        shipment("s-2", "T-2", sts_job=67890),
    ]

    assert [s.id for s in ReportService.filter_shipments(shipments, search="bay a")] == ["s-1"]
    assert [s.id for s in ReportService.filter_shipments(shipments, search="678")] == ["s-2"]
    assert [s.id for s in ReportService.filter_shipments(shipments, trailer_id="T-1")] == ["s-1"]
    assert len(ReportService.filter_shipments(shipments, trailer_id="all")) == 2


# ==================== PRINTABLE VIEWS ====================

def test_transfer_form_uses_placeholder_without_arrival():
    data = snapshot(
        [trailer("T-1", custom_field_1="T1-A", company="Logistics Inc.")],
        [shipment("s-1", "T-1"), shipment("s-2", "T-1")],
    )

    form = ReportService.trailer_transfer_form(data, "T-1", REFERENCE)

    assert form.arrival_date == FORM_PLACEHOLDER
    assert form.total_shipments == 2
    assert form.generated_at == "24/07/2024, 12:00"
    assert form.model_dump(by_alias=True)["t1_1"] == "T1-A"
    assert ReportService.trailer_transfer_form(data, "missing", REFERENCE) is None


def test_shipment_labels_fall_back_to_today():
    data = snapshot(
        [trailer("T-1"), trailer("T-2", arrival_date="2024-07-20T10:00:00+00:00")],
        [shipment("s-1", "T-1")],
    )

    sheet = ReportService.shipment_labels(data, " T-1 ", REFERENCE)
    assert sheet.label_date == "Jul 24, 2024"
    assert [s.id for s in sheet.shipments] == ["s-1"]

    assert ReportService.shipment_labels(data, "T-2", REFERENCE).label_date == "Jul 20, 2024"
    assert ReportService.shipment_labels(data, "nope", REFERENCE) is None
