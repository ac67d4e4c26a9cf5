"""Recommendation pipeline schemas."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import Item

MAX_RECOMMENDATIONS = 3


class EvaluatorKind(str, Enum):
    """Specializations an evaluator can take."""
    ROMANCE = "romance"
    ACTION_HERO = "action_hero"
    CLASSIC = "classic"


class EvaluatorRole(BaseModel):
    """Static configuration for one evaluator."""
    model_config = ConfigDict(frozen=True)

    kind: EvaluatorKind
    name: str
    instructions: str
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)


class RawResponse(BaseModel):
    """Free-text answer from one evaluator."""
    role_name: str
    content: str


class RecommendationTier(str, Enum):
    """Which selection rule produced a result."""
    DIRECT = "direct"
    PARTIAL_FALLBACK = "partial_fallback"
    FULL_FALLBACK = "full_fallback"
    TOP_RATED = "top_rated"
    EMPTY_CATALOG = "empty_catalog"


class RecommendationResult(BaseModel):
    """Final recommendation list with its explanation."""
    items: list[Item] = Field(default_factory=list, max_length=MAX_RECOMMENDATIONS)
    reasoning: str
    tier: RecommendationTier

    @field_validator("items")
    @classmethod
    def _unique_ids(cls, items: list[Item]) -> list[Item]:
        ids = [item.id for item in items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate item ids in recommendations: {ids}")
        return items
