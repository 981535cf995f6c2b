# Credit score module
from app.modules.credit.models import CreditHistory, ScoreEvent, SCORE_RULES
from app.modules.credit.services import CreditScoreService, ScoreChange

__all__ = [
    "CreditHistory", "ScoreEvent", "SCORE_RULES",
    "CreditScoreService", "ScoreChange"
]
