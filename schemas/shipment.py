"""
Pydantic schemas for shipments and their warehouse locations.
"""
from typing import Any, List, Optional

from pydantic import Field, field_validator

from schemas.common import CamelModel, IsoTimestamp, RecordModel

PENDING_ASSIGNMENT = "Pending Assignment"


class LocationInfo(RecordModel):
    name: str = Field(..., min_length=1, max_length=100)
    pallets: Optional[int] = Field(None, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


def pending_locations() -> List[LocationInfo]:
    return [LocationInfo(name=PENDING_ASSIGNMENT)]


def is_pending(locations: Optional[List[LocationInfo]]) -> bool:
    if not locations:
        return True
    return len(locations) == 1 and locations[0].name == PENDING_ASSIGNMENT


def normalize_locations(locations: Optional[List[LocationInfo]]) -> List[LocationInfo]:
    """Drop the pending sentinel next to real locations; empty becomes the sentinel."""
    real = [loc for loc in (locations or []) if loc.name != PENDING_ASSIGNMENT]
    return real if real else pending_locations()


class Shipment(RecordModel):
    id: str
    trailer_id: str
    sts_job: int
    customer_job_number: Optional[str] = None
    quantity: int
    importer: str
    exporter: str
    locations: List[LocationInfo] = Field(default_factory=pending_locations)
    release_document_name: Optional[str] = None
    clearance_document_name: Optional[str] = None
    released: bool = False
    cleared: bool = False
    weight: Optional[float] = None
    pallet_space: Optional[float] = None
    released_at: Optional[IsoTimestamp] = None
    empty_pallet_required: int = 0
    mrn: Optional[str] = None
    clearance_date: Optional[IsoTimestamp] = None

    @field_validator("locations", mode="before")
    @classmethod
    def default_locations(cls, v: Any) -> Any:
        return v if v else pending_locations()

    @field_validator("empty_pallet_required", mode="before")
    @classmethod
    def default_empty_pallets(cls, v: Any) -> Any:
        return 0 if v is None else v


class ShipmentCreate(CamelModel):
    """Schema for adding a shipment to a trailer."""
    trailer_id: str = Field(..., min_length=1)
    sts_job: int = Field(..., gt=0, description="STS job number")
    customer_job_number: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(..., ge=1)
    importer: str = Field(..., min_length=1, max_length=50, description="Consignee")
    exporter: str = Field(..., min_length=1, max_length=50, description="Consignor")
    locations: Optional[List[LocationInfo]] = None
    initial_location_name: Optional[str] = Field(None, max_length=100)
    initial_location_pallets: Optional[int] = Field(None, ge=0)
    release_document_name: Optional[str] = Field(None, max_length=255)
    clearance_document_name: Optional[str] = Field(None, max_length=255)
    released: Optional[bool] = None
    cleared: Optional[bool] = None
    weight: Optional[float] = Field(None, gt=0)
    pallet_space: Optional[float] = Field(None, gt=0)
    empty_pallet_required: Optional[int] = Field(None, ge=0)
    mrn: Optional[str] = Field(None, max_length=50)
    clearance_date: Optional[IsoTimestamp] = None

    def initial_locations(self) -> List[LocationInfo]:
        if self.locations:
            return normalize_locations(self.locations)
        name = (self.initial_location_name or "").strip()
        if name:
            return [LocationInfo(name=name, pallets=self.initial_location_pallets)]
        return pending_locations()


class ShipmentUpdate(CamelModel):
    """Partial update for a shipment.

    Fields left unset keep their current value; an explicit null clears a
    nullable field. A locations value replaces the whole list.
    """
    sts_job: Optional[int] = Field(None, gt=0)
    customer_job_number: Optional[str] = Field(None, max_length=50)
    quantity: Optional[int] = Field(None, ge=1)
    importer: Optional[str] = Field(None, min_length=1, max_length=50)
    exporter: Optional[str] = Field(None, min_length=1, max_length=50)
    locations: Optional[List[LocationInfo]] = None
    release_document_name: Optional[str] = Field(None, max_length=255)
    clearance_document_name: Optional[str] = Field(None, max_length=255)
    released: Optional[bool] = None
    cleared: Optional[bool] = None
    weight: Optional[float] = Field(None, gt=0)
    pallet_space: Optional[float] = Field(None, gt=0)
    released_at: Optional[IsoTimestamp] = None
    empty_pallet_required: Optional[int] = Field(None, ge=0)
    mrn: Optional[str] = Field(None, max_length=50)
    clearance_date: Optional[IsoTimestamp] = None

    @field_validator("sts_job", "quantity", "importer", "exporter", "released", "cleared", "empty_pallet_required")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field cannot be cleared")
        return v


class ShipmentDocumentAttach(CamelModel):
    document_name: str = Field(..., min_length=1, max_length=255)


class ShipmentLocationsReplace(CamelModel):
    locations: List[LocationInfo] = Field(default_factory=list)


class ShipmentLocationAdd(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    pallets: Optional[int] = Field(None, ge=0)


def upgrade_legacy_shipment(raw: dict) -> dict:
    """Bring a shipment written before locations carried pallet counts up to date."""
    if "locations" in raw or "locationNames" not in raw:
        return raw
    upgraded = dict(raw)
    names = upgraded.pop("locationNames") or []
    upgraded["locations"] = [{"name": name} for name in names if isinstance(name, str) and name]
    return upgraded
