# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0

"""
API endpoints for trailers.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_warehouse
from schemas.report import ShipmentLabelSheet, TrailerTransferForm
from schemas.shipment import Shipment
from schemas.trailer import (
    Trailer,
    TrailerCreate,
    TrailerDocumentAttach,
    TrailerDocumentType,
    TrailerStatus,
    TrailerStatusUpdate,
    TrailerUpdate,
)
from services.report_service import ReportService
from services.warehouse_service import WarehouseService

router = APIRouter(prefix="/api/trailers", tags=["trailers"])


def _trailer_or_404(trailer: Optional[Trailer]) -> Trailer:
    if trailer is None:
        raise HTTPException(status_code=404, detail="Trailer not found")
    return trailer


@router.get("/", response_model=List[Trailer])
def list_trailers(
    search: Optional[str] = None,
    status: Optional[TrailerStatus] = None,
    company: Optional[str] = None,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return ReportService.filter_trailers(warehouse.trailers, search=search, status=status, company=company)


@router.get("/companies", response_model=List[str])
def list_companies(warehouse: WarehouseService = Depends(get_warehouse)):
    return ReportService.unique_companies(warehouse.trailers)


@router.post("/", response_model=Trailer, status_code=status.HTTP_201_CREATED)
def add_trailer(
    payload: TrailerCreate,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    if warehouse.trailer_exists(payload.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Trailer ID already exists. Please use a unique ID."
        )
    trailer = warehouse.add_trailer(payload)
    if trailer is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Trailer ID already exists.")
    return trailer


@router.get("/{trailer_id}", response_model=Trailer)
def get_trailer(trailer_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    return _trailer_or_404(warehouse.get_trailer_by_id(trailer_id))


@router.patch("/{trailer_id}", response_model=Trailer)
def update_trailer(
    trailer_id: str,
    payload: TrailerUpdate,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    try:
        trailer = warehouse.update_trailer(trailer_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _trailer_or_404(trailer)


@router.put("/{trailer_id}/status", response_model=Trailer)
def update_trailer_status(
    trailer_id: str,
    payload: TrailerStatusUpdate,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return _trailer_or_404(warehouse.update_trailer_status(trailer_id, payload.status))


@router.put("/{trailer_id}/documents/{document_type}", response_model=Trailer)
def attach_trailer_document(
    trailer_id: str,
    document_type: TrailerDocumentType,
    payload: TrailerDocumentAttach,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    """Attach a document by name; a null name removes it."""
    return _trailer_or_404(warehouse.attach_trailer_document(trailer_id, document_type, payload.document_name))


@router.delete("/{trailer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trailer(trailer_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    if not warehouse.delete_trailer(trailer_id):
        raise HTTPException(status_code=404, detail="Trailer not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{trailer_id}/shipments", response_model=List[Shipment])
def list_trailer_shipments(trailer_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    _trailer_or_404(warehouse.get_trailer_by_id(trailer_id))
    return warehouse.get_shipments_by_trailer_id(trailer_id)


@router.get("/{trailer_id}/transfer-form", response_model=TrailerTransferForm)
def get_transfer_form(trailer_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    form = ReportService.trailer_transfer_form(warehouse.snapshot(), trailer_id, warehouse.now())
    if form is None:
        raise HTTPException(status_code=404, detail="Trailer not found")
    return form


@router.get("/{trailer_id}/labels", response_model=ShipmentLabelSheet)
def get_shipment_labels(trailer_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    sheet = ReportService.shipment_labels(warehouse.snapshot(), trailer_id, warehouse.now())
    if sheet is None:
        raise HTTPException(status_code=404, detail=f'Trailer with ID "{trailer_id.strip()}" not found.')
    return sheet
