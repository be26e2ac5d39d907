"""
Record store for trailers, shipments and stock-check reports.

The store holds the authoritative in-memory collections. Each collection is
mirrored into its own storage slot through a PersistedCollection, and every
successful mutation is announced to subscribers. Lookups of unknown ids
return None; callers decide how to report a miss.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Sequence

from schemas.quiz import QuizReport
from schemas.shipment import (
    LocationInfo,
    Shipment,
    ShipmentCreate,
    ShipmentUpdate,
    normalize_locations,
    upgrade_legacy_shipment,
)
from schemas.trailer import (
    DEFAULT_TRAILER_STATUS,
    Trailer,
    TrailerCreate,
    TrailerDocumentType,
    TrailerStatus,
    TrailerUpdate,
    check_date_order,
)
from services.persistence_service import PersistedCollection
from services.storage_service import KeyValueStorage

log = logging.getLogger(__name__)

TRAILERS_KEY = "trailers"
SHIPMENTS_KEY = "shipments"
QUIZ_REPORTS_KEY = "quizReports"


class ChangeSource(Enum):
    LOCAL = "LOCAL"
    EXTERNAL = "EXTERNAL"


@dataclass(frozen=True)
class StoreChange:
    collection: str
    source: ChangeSource


@dataclass(frozen=True)
class WarehouseSnapshot:
    trailers: tuple[Trailer, ...]
    shipments: tuple[Shipment, ...]
    quiz_reports: tuple[QuizReport, ...]

    def trailer_by_id(self, trailer_id: str) -> Optional[Trailer]:
        return next((t for t in self.trailers if t.id == trailer_id), None)

    def shipments_for_trailer(self, trailer_id: str) -> List[Shipment]:
        return [s for s in self.shipments if s.trailer_id == trailer_id]


Subscriber = Callable[[StoreChange], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class WarehouseService:
    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        context_id: Optional[str] = None,
        default_trailers: Sequence[Trailer] = (),
        default_shipments: Sequence[Shipment] = (),
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.context_id = context_id or uuid.uuid4().hex
        self._clock = clock
        self._id_factory = id_factory
        self._lock = storage.lock
        self._subscribers: List[Subscriber] = []

        with self._lock:
            self._trailers: PersistedCollection[Trailer] = PersistedCollection(
                storage, TRAILERS_KEY, Trailer, default_trailers,
                context_id=self.context_id, on_external_change=self._apply_external_change,
            )
            self._shipments: PersistedCollection[Shipment] = PersistedCollection(
                storage, SHIPMENTS_KEY, Shipment, default_shipments,
                context_id=self.context_id, on_external_change=self._apply_external_change,
                legacy_item_upgrade=upgrade_legacy_shipment,
            )
            self._quiz_reports: PersistedCollection[QuizReport] = PersistedCollection(
                storage, QUIZ_REPORTS_KEY, QuizReport, (),
                context_id=self.context_id, on_external_change=self._apply_external_change,
            )

    # ==================== COLLECTIONS ====================

    @property
    def trailers(self) -> List[Trailer]:
        with self._lock:
            return self._trailers.items

    @property
    def shipments(self) -> List[Shipment]:
        with self._lock:
            return self._shipments.items

    def snapshot(self) -> WarehouseSnapshot:
        """Capture all collections together so derived views never mix states."""
        with self._lock:
            return WarehouseSnapshot(
                trailers=tuple(self._trailers.items),
                shipments=tuple(self._shipments.items),
                quiz_reports=tuple(self._quiz_reports.items),
            )

    def close(self) -> None:
        with self._lock:
            self._trailers.close()
            self._shipments.close()
            self._quiz_reports.close()

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def _notify(self, collection: str, source: ChangeSource = ChangeSource.LOCAL) -> None:
        change = StoreChange(collection=collection, source=source)
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception as exc:
                log.error("Warehouse subscriber failed on %s change: %s", collection, exc, exc_info=True)

    def _apply_external_change(self, key: str, items: list) -> None:
        # The adapter has already swapped the collection in.
        log.info("Collection %s replaced by another context", key)
        self._notify(key, ChangeSource.EXTERNAL)

    # ==================== TRAILERS ====================

    def trailer_exists(self, trailer_id: str) -> bool:
        return self.get_trailer_by_id(trailer_id) is not None

    def get_trailer_by_id(self, trailer_id: str) -> Optional[Trailer]:
        with self._lock:
            return next((t for t in self._trailers.items if t.id == trailer_id), None)

    def add_trailer(self, data: TrailerCreate) -> Optional[Trailer]:
        """Append a trailer. A duplicate id is ignored and None is returned."""
        with self._lock:
            if self.trailer_exists(data.id):
                log.warning("Trailer %s already exists, add ignored", data.id)
                return None
            trailer = Trailer(
                **data.model_dump(exclude={"status"}),
                status=data.status or DEFAULT_TRAILER_STATUS,
            )
            self._trailers.set(self._trailers.items + [trailer])
            self._notify(TRAILERS_KEY)
            return trailer

    def update_trailer(self, trailer_id: str, data: TrailerUpdate) -> Optional[Trailer]:
        """Merge a patch into a trailer.

        Raises ValueError when the merged storage expiry precedes the arrival.
        """
        changes = data.model_dump(exclude_unset=True)
        with self._lock:
            current = self.get_trailer_by_id(trailer_id)
            if current is None:
                return None
            if "arrival_date" in changes or "storage_expiry_date" in changes:
                check_date_order(
                    changes.get("arrival_date", current.arrival_date),
                    changes.get("storage_expiry_date", current.storage_expiry_date),
                )
            return self._replace_trailer(trailer_id, changes)

    def update_trailer_status(self, trailer_id: str, status: TrailerStatus) -> Optional[Trailer]:
        return self._replace_trailer(trailer_id, {"status": status})

    def attach_trailer_document(
        self,
        trailer_id: str,
        document_type: TrailerDocumentType,
        document_name: Optional[str],
    ) -> Optional[Trailer]:
        """Set or, with None, clear one of the trailer's document names."""
        return self._replace_trailer(trailer_id, {document_type.field_name: document_name})

    def delete_trailer(self, trailer_id: str) -> bool:
        """Remove a trailer together with all of its shipments."""
        with self._lock:
            trailers = self._trailers.items
            remaining = [t for t in trailers if t.id != trailer_id]
            if len(remaining) == len(trailers):
                return False
            self._trailers.set(remaining)
            shipments = self._shipments.items
            kept = [s for s in shipments if s.trailer_id != trailer_id]
            self._shipments.set(kept)
            log.info("Deleted trailer %s and %s shipment(s)", trailer_id, len(shipments) - len(kept))
            self._notify(TRAILERS_KEY)
            self._notify(SHIPMENTS_KEY)
            return True

    def _replace_trailer(self, trailer_id: str, changes: dict) -> Optional[Trailer]:
        with self._lock:
            trailers = self._trailers.items
            for index, trailer in enumerate(trailers):
                if trailer.id == trailer_id:
                    updated = Trailer.model_validate({**trailer.model_dump(), **changes})
                    trailers[index] = updated
                    self._trailers.set(trailers)
                    self._notify(TRAILERS_KEY)
                    return updated
            return None

    # ==================== SHIPMENTS ====================

    def get_shipment_by_id(self, shipment_id: str) -> Optional[Shipment]:
        with self._lock:
            return next((s for s in self._shipments.items if s.id == shipment_id), None)

    def get_shipments_by_trailer_id(self, trailer_id: str) -> List[Shipment]:
        with self._lock:
            return [s for s in self._shipments.items if s.trailer_id == trailer_id]

    def add_shipment(self, data: ShipmentCreate) -> Shipment:
        fields = data.model_dump(exclude={
            "locations", "initial_location_name", "initial_location_pallets",
            "released", "cleared", "empty_pallet_required",
        })
        with self._lock:
            shipment = Shipment(
                **fields,
                id=self._id_factory(),
                locations=data.initial_locations(),
                released=bool(data.released),
                cleared=bool(data.cleared),
                empty_pallet_required=data.empty_pallet_required or 0,
            )
            if shipment.cleared and not shipment.clearance_date:
                shipment = shipment.model_copy(update={"clearance_date": self._now_iso()})
            self._shipments.set(self._shipments.items + [shipment])
            self._notify(SHIPMENTS_KEY)
            return shipment

    def update_shipment(self, shipment_id: str, data: ShipmentUpdate) -> Optional[Shipment]:
        changes = data.model_dump(exclude_unset=True)
        if "locations" in changes:
            changes["locations"] = normalize_locations(data.locations)

        def apply(shipment: Shipment) -> dict:
            if (
                changes.get("cleared") is True
                and not shipment.clearance_date
                and "clearance_date" not in changes
            ):
                return {**changes, "clearance_date": self._now_iso()}
            return changes

        return self._replace_shipment(shipment_id, apply)

    def set_shipment_released(
        self,
        shipment_id: str,
        released: bool,
        document_name: Optional[str] = None,
    ) -> Optional[Shipment]:
        """Attach a release document, or revoke the release and drop its document."""
        if released:
            changes = {"released": True}
            if document_name:
                changes["release_document_name"] = document_name
        else:
            changes = {"released": False, "release_document_name": None}
        return self._replace_shipment(shipment_id, lambda _: changes)

    def set_shipment_cleared(
        self,
        shipment_id: str,
        cleared: bool,
        document_name: Optional[str] = None,
    ) -> Optional[Shipment]:
        """Attach a clearance document, or revoke clearance and drop its document and date."""
        if not cleared:
            return self._replace_shipment(
                shipment_id,
                lambda _: {"cleared": False, "clearance_document_name": None, "clearance_date": None},
            )
        patch = ShipmentUpdate(cleared=True)
        if document_name:
            patch = ShipmentUpdate(cleared=True, clearance_document_name=document_name)
        return self.update_shipment(shipment_id, patch)

    def replace_shipment_locations(self, shipment_id: str, locations: Sequence[LocationInfo]) -> Optional[Shipment]:
        return self.update_shipment(shipment_id, ShipmentUpdate(locations=list(locations)))

    def add_shipment_location(self, shipment_id: str, name: str, pallets: Optional[int] = None) -> Optional[Shipment]:
        """Add a location, replacing the pending sentinel. Names already present are ignored."""
        name = name.strip()

        def apply(shipment: Shipment) -> dict:
            current = normalize_locations(shipment.locations)
            if any(loc.name == name for loc in current):
                return {}
            return {"locations": normalize_locations(current + [LocationInfo(name=name, pallets=pallets)])}

        return self._replace_shipment(shipment_id, apply)

    def remove_shipment_location(self, shipment_id: str, name: str) -> Optional[Shipment]:
        """Remove a location; removing the last one restores the pending sentinel."""
        def apply(shipment: Shipment) -> dict:
            return {"locations": normalize_locations([loc for loc in shipment.locations if loc.name != name])}

        return self._replace_shipment(shipment_id, apply)

    @staticmethod
    def can_print_shipment(shipment: Shipment) -> bool:
        return shipment.released and shipment.cleared

    def mark_shipment_as_printed(self, shipment_id: str) -> Optional[Shipment]:
        """Stamp released_at on first print only; later prints keep the first timestamp."""
        def apply(shipment: Shipment) -> dict:
            changes = {}
            now = self._now_iso()
            if not shipment.released_at:
                changes["released_at"] = now
            if shipment.cleared and not shipment.clearance_date:
                changes["clearance_date"] = now
            return changes

        return self._replace_shipment(shipment_id, apply)

    def delete_shipment(self, shipment_id: str) -> bool:
        with self._lock:
            shipments = self._shipments.items
            remaining = [s for s in shipments if s.id != shipment_id]
            if len(remaining) == len(shipments):
                return False
            self._shipments.set(remaining)
            self._notify(SHIPMENTS_KEY)
            return True

    def _replace_shipment(self, shipment_id: str, build_changes: Callable[[Shipment], dict]) -> Optional[Shipment]:
        with self._lock:
            shipments = self._shipments.items
            for index, shipment in enumerate(shipments):
                if shipment.id != shipment_id:
                    continue
                changes = build_changes(shipment)
                if not changes:
                    return shipment
                updated = Shipment.model_validate({**shipment.model_dump(), **changes})
                shipments[index] = updated
                self._shipments.set(shipments)
                self._notify(SHIPMENTS_KEY)
                return updated
            return None

    # ==================== QUIZ REPORTS ====================

    def add_quiz_report(self, report: QuizReport) -> QuizReport:
        with self._lock:
            self._quiz_reports.set(self._quiz_reports.items + [report])
            self._notify(QUIZ_REPORTS_KEY)
            return report

    def get_quiz_reports(self) -> List[QuizReport]:
        with self._lock:
            return self._quiz_reports.items

    def get_quiz_report_by_id(self, report_id: str) -> Optional[QuizReport]:
        with self._lock:
            return next((r for r in self._quiz_reports.items if r.id == report_id), None)

    def delete_quiz_report(self, report_id: str) -> bool:
        with self._lock:
            reports = self._quiz_reports.items
            remaining = [r for r in reports if r.id != report_id]
            if len(remaining) == len(reports):
                return False
            self._quiz_reports.set(remaining)
            self._notify(QUIZ_REPORTS_KEY)
            return True

    # ==================== HELPERS ====================

    def now(self) -> datetime:
        return self._clock()

    def new_id(self) -> str:
        return self._id_factory()

    def _now_iso(self) -> str:
        return self._clock().isoformat()
