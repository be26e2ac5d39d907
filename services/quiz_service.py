"""
Stock-check quiz: one question per location of every unreleased shipment.
"""
from __future__ import annotations

from typing import Dict, List

from schemas.quiz import AnsweredQuizItem, QuizItem, QuizReport
from schemas.shipment import PENDING_ASSIGNMENT, pending_locations
from services.date_service import DATE_FORMAT, format_safe, parse_iso, start_of_day
from services.warehouse_service import WarehouseService, WarehouseSnapshot


def _timestamp(value: str | None) -> float:
    parsed = parse_iso(value)
    return parsed.timestamp() if parsed else 0.0


def _arrival_day_sort(arrival_date: str | None) -> float:
    parsed = parse_iso(arrival_date)
    return start_of_day(parsed).timestamp() if parsed else 0.0


class QuizService:
    @staticmethod
    def build_items(snapshot: WarehouseSnapshot) -> List[QuizItem]:
        """Quiz items ordered for a walk through the warehouse.

        Real locations come first in name order, "Pending Assignment" last;
        within a location the most recent trailer arrival leads.
        """
        rows = []
        for shipment in snapshot.shipments:
            if shipment.released_at:
                continue
            trailer = snapshot.trailer_by_id(shipment.trailer_id)
            arrival_raw = trailer.arrival_date if trailer else None
            for index, location in enumerate(shipment.locations or pending_locations()):
                item = QuizItem(
                    id=f"{shipment.id}-{location.name}-{index}",
                    shipment_id=shipment.id,
                    sts_job=shipment.sts_job,
                    trailer_id=shipment.trailer_id,
                    trailer_company=trailer.company if trailer else None,
                    trailer_arrival_date_formatted=format_safe(arrival_raw, DATE_FORMAT),
                    shipment_quantity=shipment.quantity,
                    location_name=location.name,
                    location_pallets=location.pallets,
                )
                rows.append((_arrival_day_sort(arrival_raw), item))

        rows.sort(key=lambda row: (
            row[1].location_name == PENDING_ASSIGNMENT,
            row[1].location_name.lower(),
            -row[0],
            row[1].trailer_id.lower(),
            row[1].sts_job,
        ))
        return [item for _, item in rows]

    @staticmethod
    def complete(
        warehouse: WarehouseService,
        items: List[QuizItem],
        answers: Dict[str, str],
        completed_by: str,
    ) -> QuizReport:
        """Save a report for a finished quiz; unanswered items count as "no"."""
        name = (completed_by or "").strip()
        if not name:
            raise ValueError("Please enter the name of the person who completed the quiz.")
        answered = [
            AnsweredQuizItem(**item.model_dump(), user_answer=answers.get(item.id, "no"))
            for item in items
        ]
        report = QuizReport(
            id=warehouse.new_id(),
            completed_at=warehouse.now().isoformat(),
            completed_by=name,
            items=answered,
        )
        return warehouse.add_quiz_report(report)

    @staticmethod
    def list_reports(snapshot: WarehouseSnapshot) -> List[QuizReport]:
        """Saved reports, most recently completed first."""
        return sorted(snapshot.quiz_reports, key=lambda report: _timestamp(report.completed_at), reverse=True)
