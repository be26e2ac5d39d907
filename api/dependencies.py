from fastapi import Request

from services.warehouse_service import WarehouseService


def get_warehouse(request: Request) -> WarehouseService:
    """Dependency returning the warehouse store bound at application startup."""
    return request.app.state.warehouse
