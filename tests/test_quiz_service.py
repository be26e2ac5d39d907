import pytest

from schemas.shipment import PENDING_ASSIGNMENT, LocationInfo, ShipmentCreate, ShipmentUpdate
from schemas.trailer import TrailerCreate
from services.quiz_service import QuizService


@pytest.fixture
def stocked(warehouse):
    warehouse.add_trailer(TrailerCreate(id="T-old", name="Old", company="Cargo Movers",
                                        arrival_date="2024-07-01T08:00:00+00:00"))
    warehouse.add_trailer(TrailerCreate(id="T-new", name="New", arrival_date="2024-07-20T08:00:00+00:00"))

    def ship(trailer_id, sts_job, locations=None):
        return warehouse.add_shipment(ShipmentCreate(
            trailer_id=trailer_id, sts_job=sts_job, quantity=3, importer="Acme", exporter="Globex",
            locations=locations,
        ))

    first = ship("T-old", 10, [LocationInfo(name="bay b", pallets=2), LocationInfo(name="Bay A")])
    second = ship("T-new", 20, [LocationInfo(name="Bay A", pallets=1)])
    ship("T-new", 30)
    released = ship("T-new", 40, [LocationInfo(name="Bay A")])
    warehouse.update_shipment(released.id, ShipmentUpdate(released_at="2024-07-21T08:00:00+00:00"))
    return first, second


def test_build_items_orders_by_location_then_newest_arrival(warehouse, stocked):
    items = QuizService.build_items(warehouse.snapshot())

    assert [(item.location_name, item.sts_job) for item in items] == [
        ("Bay A", 20),
        ("Bay A", 10),
        ("bay b", 10),
        (PENDING_ASSIGNMENT, 30),
    ]
    first, _ = stocked
    assert items[1].id == f"{first.id}-Bay A-1"
    assert items[1].trailer_company == "Cargo Movers"
    assert items[1].trailer_arrival_date_formatted == "Jul 01, 2024"


def test_complete_defaults_unanswered_items_to_no(warehouse, stocked, clock):
    items = QuizService.build_items(warehouse.snapshot())

    report = QuizService.complete(warehouse, items, {items[0].id: "yes"}, "  Sam  ")

    assert report.completed_by == "Sam"
    assert report.completed_at == clock().isoformat()
    assert [item.user_answer for item in report.items] == ["yes", "no", "no", "no"]
    assert warehouse.get_quiz_report_by_id(report.id) == report


def test_complete_requires_a_name(warehouse, stocked):
    items = QuizService.build_items(warehouse.snapshot())

    with pytest.raises(ValueError):
        QuizService.complete(warehouse, items, {}, "   ")

    assert warehouse.get_quiz_reports() == []


def test_list_reports_newest_first(warehouse, clock):
    first = QuizService.complete(warehouse, [], {}, "Sam")
    clock.advance(days=1)
    second = QuizService.complete(warehouse, [], {}, "Alex")

    assert [r.id for r in QuizService.list_reports(warehouse.snapshot())] == [second.id, first.id]

    assert warehouse.delete_quiz_report(first.id) is True
    assert warehouse.delete_quiz_report(first.id) is False
    assert [r.id for r in warehouse.get_quiz_reports()] == [second.id]
