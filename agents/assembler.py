"""Recommendation assembly: deduplication, capping and fallback filling."""

import logging
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, Field

from schemas.catalog import Item
from schemas.recommendation import MAX_RECOMMENDATIONS, RawResponse, RecommendationTier
from .response_extractor import extract_item_id

logger = logging.getLogger(__name__)

CLASSIC_CUTOFF_YEAR = 2010


class AssembledRecommendations(BaseModel):
    """Assembler output with provenance."""
    items: list[Item] = Field(default_factory=list)
    tier: RecommendationTier
    evaluator_count: int = 0  # items that came from evaluator answers


def top_rated(catalog: Sequence[Item], limit: int = MAX_RECOMMENDATIONS) -> list[Item]:
    """Highest rated items first; equal ratings keep catalog order."""
    return sorted(catalog, key=lambda item: item.rating, reverse=True)[:limit]


def _first_romance(catalog: Sequence[Item]) -> Optional[Item]:
    return next((m for m in catalog if "romance" in m.category.lower()), None)


def _first_action(catalog: Sequence[Item]) -> Optional[Item]:
    return next(
        (
            m for m in catalog
            if "action" in m.category.lower() or "knight" in m.title.lower()
        ),
        None,
    )


def _best_classic(catalog: Sequence[Item]) -> Optional[Item]:
    classics = [m for m in catalog if m.release_year < CLASSIC_CUTOFF_YEAR]
    if not classics:
        return None
    # max() keeps the first of equally rated items
    return max(classics, key=lambda m: m.rating)


FALLBACK_PICKS: tuple[Callable[[Sequence[Item]], Optional[Item]], ...] = (
    _first_romance,
    _first_action,
    _best_classic,
)


class RecommendationAssembler:
    """
    Turns evaluator answers into a short, unique recommendation list.

    Evaluator picks are taken in arrival order. When they leave the list
    short, rule-based picks (romance, action, best classic) fill it in that
    order. Everything is drawn from the filtered catalog passed in.
    """

    def __init__(self, max_items: int = MAX_RECOMMENDATIONS):
        if not 1 <= max_items <= MAX_RECOMMENDATIONS:
            raise ValueError(f"max_items must be between 1 and {MAX_RECOMMENDATIONS}")
        self.max_items = max_items

    def assemble(
        self,
        responses: Sequence[RawResponse],
        catalog: Sequence[Item],
        orchestration_failed: bool = False
    ) -> AssembledRecommendations:
        """
        Build the recommendation list.

        Args:
            responses: Evaluator answers in arrival order
            catalog: Filtered catalog for this request
            orchestration_failed: Skip evaluator answers entirely

        Returns:
            AssembledRecommendations with items and the tier that produced them
        """
        by_id = {item.id: item for item in reversed(catalog)}
        recommendations: list[Item] = []

        if not orchestration_failed:
            for response in responses:
                if len(recommendations) >= self.max_items:
                    break
                item_id = extract_item_id(response.content)
                if item_id is None:
                    logger.debug(f"No movie id in answer from {response.role_name}")
                    continue
                item = by_id.get(item_id)
                if item is None:
                    logger.info(
                        f"{response.role_name} picked id {item_id}, which is not in the filtered catalog"
                    )
                    continue
                self._append_unique(recommendations, item)

        evaluator_count = len(recommendations)

        if len(recommendations) < self.max_items:
            self._apply_fallback(catalog, recommendations)

        fallback_count = len(recommendations) - evaluator_count
        if fallback_count == 0:
            tier = RecommendationTier.DIRECT
        elif evaluator_count == 0:
            tier = RecommendationTier.FULL_FALLBACK
        else:
            tier = RecommendationTier.PARTIAL_FALLBACK

        logger.info(
            f"Assembled {len(recommendations)} recommendations "
            f"({evaluator_count} from evaluators, {fallback_count} from fallback)"
        )
        return AssembledRecommendations(
            items=recommendations,
            tier=tier,
            evaluator_count=evaluator_count,
        )

    def _apply_fallback(self, catalog: Sequence[Item], recommendations: list[Item]) -> None:
        """Append rule-based picks in priority order while under the cap."""
        for pick in FALLBACK_PICKS:
            if len(recommendations) >= self.max_items:
                return
            item = pick(catalog)
            if item is not None:
                self._append_unique(recommendations, item)

    @staticmethod
    def _append_unique(recommendations: list[Item], item: Item) -> bool:
        if any(existing.id == item.id for existing in recommendations):
            return False
        recommendations.append(item)
        return True
