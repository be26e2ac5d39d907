# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0

import logging

from fastapi import FastAPI

from core.database import SessionLocal, init_db
from services.config_service import get_log_level, get_storage_prefix, seed_demo_data_enabled
from services.seed_data import demo_shipments, demo_trailers
from services.storage_service import KeyValueStorage
from services.warehouse_service import WarehouseService

# Import routers
from api import quiz, reports, shipments, trailers

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="ShipShape",
    description="Warehouse tracker for trailers, shipments and stock checks",
    version="1.0.0"
)

# Register routers
app.include_router(trailers.router)
app.include_router(shipments.router)
app.include_router(reports.router)
app.include_router(quiz.router)


@app.on_event("startup")
def bind_warehouse() -> None:
    init_db()
    storage = KeyValueStorage(SessionLocal, prefix=get_storage_prefix())
    if seed_demo_data_enabled():
        warehouse = WarehouseService(
            storage,
            default_trailers=demo_trailers(),
            default_shipments=demo_shipments(),
        )
    else:
        warehouse = WarehouseService(storage)
    app.state.warehouse = warehouse
    log.info(
        "Warehouse bound: %s trailer(s), %s shipment(s)",
        len(warehouse.trailers), len(warehouse.shipments),
    )


@app.on_event("shutdown")
def release_warehouse() -> None:
    warehouse = getattr(app.state, "warehouse", None)
    if warehouse:
        warehouse.close()


# ==================== HEALTH CHECK ====================
@app.get("/health")
def health_check():
    """Health check endpoint for Docker and Kubernetes."""
    return {
        "status": "healthy",
        "service": "ShipShape",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
