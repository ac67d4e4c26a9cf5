"""Pydantic schemas for the Movie Recommendation Assistant."""

from .catalog import Item
from .recommendation import (
    MAX_RECOMMENDATIONS,
    EvaluatorKind,
    EvaluatorRole,
    RawResponse,
    RecommendationTier,
    RecommendationResult,
)
from .stream import StreamState

__all__ = [
    "Item",
    "MAX_RECOMMENDATIONS",
    "EvaluatorKind",
    "EvaluatorRole",
    "RawResponse",
    "RecommendationTier",
    "RecommendationResult",
    "StreamState",
]
