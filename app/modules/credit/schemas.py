from pydantic import BaseModel
from datetime import datetime
from typing import List

from app.modules.credit.models import ScoreEvent


class CreditHistoryResponse(BaseModel):
    id: int
    event_type: ScoreEvent
    description: str
    score_change: int
    new_score: int
    created_at: datetime

    class Config:
        from_attributes = True


class ScoreResponse(BaseModel):
    """Current score plus the latest history entries"""
    score: int
    history: List[CreditHistoryResponse]
