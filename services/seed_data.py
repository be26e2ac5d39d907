"""
Demo trailers and shipments used as the default collections on first start.
"""
import uuid
from typing import List

from schemas.shipment import LocationInfo, Shipment
from schemas.trailer import Trailer, TrailerStatus


def demo_trailers() -> List[Trailer]:
    return [
        Trailer(id="T-001", name="Alpha Transporter", status=TrailerStatus.ARRIVED, company="Logistics Inc.",
                arrival_date="2024-07-20T10:00:00+00:00", storage_expiry_date="2024-08-20T10:00:00+00:00",
                weight=3500, custom_field_1="CF1-Alpha", custom_field_2="CF2-Alpha"),
        Trailer(id="T-002", name="Beta Hauler", status=TrailerStatus.SCHEDULED, company="QuickShip Co.",
                arrival_date="2024-07-22T14:30:00+00:00", weight=3200),
        Trailer(id="T-003", name="Gamma Carrier", status=TrailerStatus.EMPTY, company="Cargo Movers",
                weight=3000, custom_field_1="CF1-Gamma"),
        Trailer(id="T-004", name="Delta Freighter", status=TrailerStatus.LOADING, company="Logistics Inc.",
                weight=4000),
        Trailer(id="T-005", name="Epsilon Mover", status=TrailerStatus.OFFLOADING, company="QuickShip Co.",
                arrival_date="2024-07-25T09:00:00+00:00", weight=3300),
        Trailer(id="T-006", name="Zeta Voyager", status=TrailerStatus.SCHEDULED, company="Cargo Movers",
                arrival_date="2024-07-28T16:00:00+00:00", weight=3700),
    ]


def _locations(*names: str) -> List[LocationInfo]:
    return [LocationInfo(name=name) for name in names]


def demo_shipments() -> List[Shipment]:
    rows = [
        dict(trailer_id="T-001", sts_job=12345, customer_job_number="CUST-001", quantity=50,
             importer="National Importers Ltd.", exporter="Global Exporters Inc.",
             locations=_locations("Bay A", "Section 1-A", "Rack 3, Shelf B", "Pallet Spot 101",
                                  "Aisle 5, Position 2", "Zone Blue-7", "Overflow Area 1", "QC Hold Area",
                                  "Staging Lane 4", "Dock Door 12"),
             release_document_name="release_electronics_123.pdf",
             clearance_document_name="clearance_electronics_123.pdf",
             released=True, cleared=True, weight=1200, pallet_space=4),
        dict(trailer_id="T-001", sts_job=67890, customer_job_number="CUST-002", quantity=200,
             importer="Global Goods Inc.", exporter="Domestic Suppliers LLC",
             locations=_locations("Bay B"), weight=800, pallet_space=6),
        dict(trailer_id="T-002", sts_job=11223, quantity=10,
             importer="Cross-Border Traders", exporter="International Exports Co.",
             locations=_locations("Bay C", "Section 2-A"), release_document_name="industrial_release.docx",
             released=True, weight=2500, pallet_space=2),
        dict(trailer_id="T-003", sts_job=22334, customer_job_number="CUST-003", quantity=75,
             importer="FoodStuffs Co.", exporter="Farm Fresh Exports",
             locations=_locations("Shelf C-2", "Cold Storage 1"), released=True, cleared=True,
             weight=1500, pallet_space=10),
        dict(trailer_id="T-003", sts_job=33445, quantity=120,
             importer="Fashion Forward", exporter="Textile Mills Global",
             locations=_locations("Hanging Rack 5"), cleared=True, weight=600, pallet_space=8),
        dict(trailer_id="T-004", sts_job=44556, customer_job_number="CUST-004", quantity=30,
             importer="BuildIt Supplies", exporter="Hardware Exports Ltd.",
             locations=_locations("Bulk Area 3"), released=True, weight=5000, pallet_space=5),
        dict(trailer_id="T-001", sts_job=55667, quantity=90,
             importer="HealthCorp", exporter="Pharma Exports Int.",
             locations=_locations("Pharma Vault 1"), released=True, cleared=True, weight=300, pallet_space=3),
        dict(trailer_id="T-002", sts_job=66778, customer_job_number="CUST-005", quantity=150,
             importer="Mechanics United", exporter="Auto Parts Global",
             locations=_locations("Parts Aisle M-10"), weight=1800, pallet_space=12),
        dict(trailer_id="T-004", sts_job=77889, quantity=25,
             importer="Luxury Imports", exporter="Fine Goods Exporters",
             locations=_locations("High Value Cage 2"), released=True, cleared=True, weight=400, pallet_space=2),
        dict(trailer_id="T-003", sts_job=88990, quantity=500,
             importer="Warehouse Direct", exporter="Bulk Exporters Co.",
             locations=_locations("Section D", "Overflow Area 2"), weight=2200, pallet_space=15),
        dict(trailer_id="T-005", sts_job=99001, customer_job_number="CUST-006", quantity=60,
             importer="Gourmet Foods", exporter="Specialty Exports Ltd.",
             released=True, cleared=True, weight=700, pallet_space=5),
        dict(trailer_id="T-006", sts_job=10101, quantity=200,
             importer="Constructors Choice", exporter="Building Material Exports",
             weight=3000, pallet_space=20),
    ]
    return [Shipment(id=str(uuid.uuid4()), **row) for row in rows]
