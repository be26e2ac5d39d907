"""
Pydantic schemas for trailers.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from schemas.common import CamelModel, IsoTimestamp, RecordModel


class TrailerStatus(str, Enum):
    SCHEDULED = "Scheduled"
    ARRIVED = "Arrived"
    LOADING = "Loading"
    OFFLOADING = "Offloading"
    EMPTY = "Empty"


# Status names written by earlier releases.
LEGACY_STATUS_ALIASES = {
    "Docked": TrailerStatus.ARRIVED,
    "In-Transit": TrailerStatus.SCHEDULED,
    "Unloading": TrailerStatus.OFFLOADING,
    "Devanned": TrailerStatus.EMPTY,
}

DEFAULT_TRAILER_STATUS = TrailerStatus.SCHEDULED


class TrailerDocumentType(str, Enum):
    OUTTURN_REPORT = "outturn-report"
    T1_SUMMARY = "t1-summary"
    MANIFEST = "manifest"
    ACP = "acp"

    @property
    def field_name(self) -> str:
        return {
            TrailerDocumentType.OUTTURN_REPORT: "outturn_report_document_name",
            TrailerDocumentType.T1_SUMMARY: "t1_summary_document_name",
            TrailerDocumentType.MANIFEST: "manifest_document_name",
            TrailerDocumentType.ACP: "acp_document_name",
        }[self]


def _normalize_status(value: Any) -> Any:
    if isinstance(value, str) and value in LEGACY_STATUS_ALIASES:
        return LEGACY_STATUS_ALIASES[value]
    return value


def _parse_for_comparison(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def check_date_order(arrival_date: Optional[str], storage_expiry_date: Optional[str]) -> None:
    arrival = _parse_for_comparison(arrival_date)
    expiry = _parse_for_comparison(storage_expiry_date)
    if arrival is not None and expiry is not None and expiry < arrival:
        raise ValueError("Storage expiry date cannot be before the arrival date")


class Trailer(RecordModel):
    id: str
    name: str
    status: TrailerStatus = DEFAULT_TRAILER_STATUS
    company: Optional[str] = None
    arrival_date: Optional[IsoTimestamp] = None
    storage_expiry_date: Optional[IsoTimestamp] = None
    weight: Optional[float] = None
    custom_field_1: Optional[str] = None
    custom_field_2: Optional[str] = None

    outturn_report_document_name: Optional[str] = None
    t1_summary_document_name: Optional[str] = None
    manifest_document_name: Optional[str] = None
    acp_document_name: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def accept_legacy_status(cls, v: Any) -> Any:
        return _normalize_status(v)


class TrailerCreate(CamelModel):
    """Schema for registering a new trailer."""
    id: str = Field(..., min_length=1, max_length=20, description="User-assigned trailer ID, unique")
    name: str = Field(..., min_length=1, max_length=50)
    status: Optional[TrailerStatus] = None
    company: Optional[str] = Field(None, max_length=50)
    arrival_date: Optional[IsoTimestamp] = None
    storage_expiry_date: Optional[IsoTimestamp] = None
    weight: Optional[float] = Field(None, gt=0)
    custom_field_1: Optional[str] = Field(None, max_length=100, description="T1.1")
    custom_field_2: Optional[str] = Field(None, max_length=100, description="T1.2")

    @field_validator("id", "name", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("status", mode="before")
    @classmethod
    def accept_legacy_status(cls, v: Any) -> Any:
        return _normalize_status(v)

    @model_validator(mode="after")
    def check_dates(self) -> "TrailerCreate":
        check_date_order(self.arrival_date, self.storage_expiry_date)
        return self


class TrailerUpdate(CamelModel):
    """Partial update for a trailer.

    Fields left unset keep their current value; an explicit null clears a
    nullable field.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    company: Optional[str] = Field(None, max_length=50)
    status: Optional[TrailerStatus] = None
    arrival_date: Optional[IsoTimestamp] = None
    storage_expiry_date: Optional[IsoTimestamp] = None
    weight: Optional[float] = Field(None, gt=0)
    custom_field_1: Optional[str] = Field(None, max_length=100)
    custom_field_2: Optional[str] = Field(None, max_length=100)
    outturn_report_document_name: Optional[str] = None
    t1_summary_document_name: Optional[str] = None
    manifest_document_name: Optional[str] = None
    acp_document_name: Optional[str] = None

    @field_validator("name", "status")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("field cannot be cleared")
        return v

    @model_validator(mode="after")
    def check_dates(self) -> "TrailerUpdate":
        check_date_order(self.arrival_date, self.storage_expiry_date)
        return self


class TrailerStatusUpdate(CamelModel):
    status: TrailerStatus


class TrailerDocumentAttach(CamelModel):
    document_name: Optional[str] = Field(None, max_length=255)
