"""
Services module - Business logic layer for ShipShape.
"""
from services.quiz_service import QuizService
from services.report_service import ReportService
from services.warehouse_service import WarehouseService

__all__ = ["QuizService", "ReportService", "WarehouseService"]
