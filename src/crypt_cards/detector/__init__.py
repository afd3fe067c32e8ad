"""Scoring layer - Narrative-interest ranking of wallet transactions."""

from crypt_cards.detector.models import ScoreResult
from crypt_cards.detector.scorer import get_net_sol, get_sol, score_transaction

__all__ = [
    "ScoreResult",
    "get_net_sol",
    "get_sol",
    "score_transaction",
]
