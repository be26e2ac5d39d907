# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0

"""
API endpoints for shipments, their locations and release/clearance documents.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_warehouse
from schemas.shipment import (
    Shipment,
    ShipmentCreate,
    ShipmentDocumentAttach,
    ShipmentLocationAdd,
    ShipmentLocationsReplace,
    ShipmentUpdate,
)
from services.report_service import ReportService
from services.warehouse_service import WarehouseService

router = APIRouter(prefix="/api/shipments", tags=["shipments"])


def _shipment_or_404(shipment: Optional[Shipment]) -> Shipment:
    if shipment is None:
        raise HTTPException(status_code=404, detail="Shipment not found")
    return shipment


@router.get("/", response_model=List[Shipment])
def list_shipments(
    search: Optional[str] = None,
    trailer_id: Optional[str] = None,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return ReportService.filter_shipments(warehouse.shipments, search=search, trailer_id=trailer_id)


@router.post("/", response_model=Shipment, status_code=status.HTTP_201_CREATED)
def add_shipment(
    payload: ShipmentCreate,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    if not warehouse.trailer_exists(payload.trailer_id):
        raise HTTPException(status_code=404, detail="Trailer not found")
    return warehouse.add_shipment(payload)


@router.get("/{shipment_id}", response_model=Shipment)
def get_shipment(shipment_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    return _shipment_or_404(warehouse.get_shipment_by_id(shipment_id))


@router.patch("/{shipment_id}", response_model=Shipment)
def update_shipment(
    shipment_id: str,
    payload: ShipmentUpdate,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return _shipment_or_404(warehouse.update_shipment(shipment_id, payload))


@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipment(shipment_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    if not warehouse.delete_shipment(shipment_id):
        raise HTTPException(status_code=404, detail="Shipment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== RELEASE / CLEARANCE ====================

@router.put("/{shipment_id}/release", response_model=Shipment)
def attach_release_document(
    shipment_id: str,
    payload: ShipmentDocumentAttach,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    """Attach the release document and mark the shipment as permitted."""
    return _shipment_or_404(warehouse.set_shipment_released(shipment_id, True, payload.document_name))


@router.delete("/{shipment_id}/release", response_model=Shipment)
def revoke_release(shipment_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    return _shipment_or_404(warehouse.set_shipment_released(shipment_id, False))


@router.put("/{shipment_id}/clearance", response_model=Shipment)
def attach_clearance_document(
    shipment_id: str,
    payload: ShipmentDocumentAttach,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    """Attach the clearance document and mark the shipment as cleared."""
    return _shipment_or_404(warehouse.set_shipment_cleared(shipment_id, True, payload.document_name))


@router.delete("/{shipment_id}/clearance", response_model=Shipment)
def revoke_clearance(shipment_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    return _shipment_or_404(warehouse.set_shipment_cleared(shipment_id, False))


# ==================== LOCATIONS ====================

@router.put("/{shipment_id}/locations", response_model=Shipment)
def replace_locations(
    shipment_id: str,
    payload: ShipmentLocationsReplace,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return _shipment_or_404(warehouse.replace_shipment_locations(shipment_id, payload.locations))


@router.post("/{shipment_id}/locations", response_model=Shipment)
def add_location(
    shipment_id: str,
    payload: ShipmentLocationAdd,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return _shipment_or_404(warehouse.add_shipment_location(shipment_id, payload.name, payload.pallets))


@router.delete("/{shipment_id}/locations/{location_name}", response_model=Shipment)
def remove_location(
    shipment_id: str,
    location_name: str,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    return _shipment_or_404(warehouse.remove_shipment_location(shipment_id, location_name))


# ==================== PRINT ====================

@router.post("/{shipment_id}/print", response_model=Shipment)
def print_shipment(shipment_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    """Record a print of the shipment release; requires cleared and permitted."""
    shipment = _shipment_or_404(warehouse.get_shipment_by_id(shipment_id))
    if not WarehouseService.can_print_shipment(shipment):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Shipment must be cleared and permitted before printing"
        )
    return _shipment_or_404(warehouse.mark_shipment_as_printed(shipment_id))
