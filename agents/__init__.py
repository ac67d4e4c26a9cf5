"""Agents for the Movie Recommendation Assistant."""

from .evaluator_roles import DEFAULT_EVALUATOR_ROLES, build_evaluator_prompt
from .evaluator_pool import EvaluatorPool, OrchestrationError
from .response_extractor import extract_item_id
from .assembler import RecommendationAssembler, AssembledRecommendations, top_rated
from .reasoning import format_reasoning

__all__ = [
    "DEFAULT_EVALUATOR_ROLES",
    "build_evaluator_prompt",
    "EvaluatorPool",
    "OrchestrationError",
    "extract_item_id",
    "RecommendationAssembler",
    "AssembledRecommendations",
    "top_rated",
    "format_reasoning",
]
