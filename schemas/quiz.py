"""
Pydantic schemas for the stock-check quiz and its saved reports.
"""
from typing import Dict, List, Literal, Optional

from pydantic import Field

from schemas.common import CamelModel, IsoTimestamp, RecordModel

QuizAnswer = Literal["yes", "no"]


class QuizItem(RecordModel):
    id: str
    shipment_id: str
    sts_job: int
    trailer_id: str
    trailer_company: Optional[str] = None
    trailer_arrival_date_formatted: str
    shipment_quantity: int
    location_name: str
    location_pallets: Optional[int] = None


class AnsweredQuizItem(QuizItem):
    user_answer: QuizAnswer


class QuizReport(RecordModel):
    id: str
    completed_at: IsoTimestamp
    completed_by: str
    items: List[AnsweredQuizItem] = Field(default_factory=list)


class QuizCompletion(CamelModel):
    """Answers keyed by quiz item id, plus the name of whoever did the check."""
    completed_by: str = Field(..., max_length=120)
    answers: Dict[str, QuizAnswer] = Field(default_factory=dict)
