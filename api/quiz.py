# ShipShape warehouse tracker
# Trailer, shipment and stock-check records kept in a local key-value store
# v1.0.0

"""
API endpoints for the stock-check quiz and its saved reports.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_warehouse
from schemas.quiz import QuizCompletion, QuizItem, QuizReport
from services.quiz_service import QuizService
from services.warehouse_service import WarehouseService

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


@router.get("/items", response_model=List[QuizItem])
def get_quiz_items(warehouse: WarehouseService = Depends(get_warehouse)):
    return QuizService.build_items(warehouse.snapshot())


@router.post("/reports", response_model=QuizReport, status_code=status.HTTP_201_CREATED)
def complete_quiz(
    payload: QuizCompletion,
    warehouse: WarehouseService = Depends(get_warehouse)
):
    """Score the current quiz items against the submitted answers and save the report."""
    items = QuizService.build_items(warehouse.snapshot())
    try:
        return QuizService.complete(warehouse, items, payload.answers, payload.completed_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/reports", response_model=List[QuizReport])
def list_quiz_reports(warehouse: WarehouseService = Depends(get_warehouse)):
    return QuizService.list_reports(warehouse.snapshot())


@router.get("/reports/{report_id}", response_model=QuizReport)
def get_quiz_report(report_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    report = warehouse.get_quiz_report_by_id(report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Quiz report not found")
    return report


@router.delete("/reports/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz_report(report_id: str, warehouse: WarehouseService = Depends(get_warehouse)):
    if not warehouse.delete_quiz_report(report_id):
        raise HTTPException(status_code=404, detail="Quiz report not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
