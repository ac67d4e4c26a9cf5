"""Main orchestrator for the Movie Recommendation Assistant."""

import asyncio
import logging
from typing import Optional, Sequence

from config.settings import Settings
from schemas.catalog import Item
from schemas.recommendation import EvaluatorRole, RecommendationResult, RecommendationTier

# Catalog access
from retrieval.catalog_provider import CatalogProvider
from retrieval.catalog_filter import filter_by_age, build_catalog_description
from retrieval.factory import create_catalog_provider

# LLM components
from llm.factory import create_llm_client
from llm.base_client import BaseLLMClient

# Agents
from agents.evaluator_roles import DEFAULT_EVALUATOR_ROLES, build_evaluator_prompt
from agents.evaluator_pool import EvaluatorPool, OrchestrationError
from agents.assembler import RecommendationAssembler, top_rated
from agents.reasoning import format_reasoning, FALLBACK_HEADER

# Streaming
from streaming.category_stream import CategoryStreamPump, CategoryStream

logger = logging.getLogger(__name__)

EMPTY_CATALOG_MESSAGE = "No age-appropriate movies found."
TOP_RATED_FOR_AGE_MESSAGE = "Fallback: Top rated movies for your age."
TOP_RATED_MESSAGE = "Fallback: Top rated movies."


class RecommendationCancelledError(Exception):
    """Raised when a recommendation is cancelled before the catalog is available."""


class MovieRecommendationOrchestrator:
    """Recommendation pipeline with concurrent evaluators and layered fallbacks."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog_provider: Optional[CatalogProvider] = None,
        llm_client: Optional[BaseLLMClient] = None,
        roles: Optional[Sequence[EvaluatorRole]] = None
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Application settings
            catalog_provider: Catalog source (built from settings if omitted)
            llm_client: LLM client for evaluators (built from settings if omitted)
            roles: Evaluator roles (defaults to romance, action hero and classic)
        """
        self.settings = settings or Settings()

        self.catalog_provider = catalog_provider or create_catalog_provider(self.settings)
        logger.info(f"Using catalog provider: {type(self.catalog_provider).__name__}")

        self.llm_client = llm_client
        if self.llm_client is None:
            self._init_llm_client()

        self.roles = tuple(roles) if roles is not None else DEFAULT_EVALUATOR_ROLES
        self.evaluator_pool = EvaluatorPool(
            llm_client=self.llm_client,
            timeout_seconds=self.settings.evaluator_timeout_seconds
        )
        self.assembler = RecommendationAssembler(max_items=self.settings.max_recommendations)
        self.stream_pump = CategoryStreamPump(
            catalog_provider=self.catalog_provider,
            delay_seconds=self.settings.stream_delay_seconds
        )

    def _init_llm_client(self):
        """Initialize LLM client based on settings."""
        api_key = self.settings.get_llm_api_key()

        if not api_key:
            logger.warning(
                f"No API key for {self.settings.llm_provider}. "
                "Evaluators are disabled, using rule-based fallback."
            )
            return

        try:
            self.llm_client = create_llm_client(
                provider=self.settings.llm_provider,
                api_key=api_key,
                model=self.settings.llm_model,
                timeout=self.settings.evaluator_timeout_seconds
            )
            logger.info(
                f"LLM client initialized: {self.settings.llm_provider} "
                f"({self.llm_client.get_model_name()})"
            )
        except Exception as e:
            logger.error(f"Failed to initialize LLM client: {e}")
            self.llm_client = None

    def recommend(self, user_age: int) -> RecommendationResult:
        """Blocking wrapper around ``recommend_async``."""
        return asyncio.run(self.recommend_async(user_age))

    async def recommend_async(
        self,
        user_age: int,
        cancel: Optional[asyncio.Event] = None
    ) -> RecommendationResult:
        """
        Recommend up to three movies for a viewer.

        Failures never reach the caller; each resolves to a labeled
        fallback result.

        Args:
            user_age: Viewer age
            cancel: Optional signal honored by the catalog fetch and dispatch

        Returns:
            RecommendationResult with items, reasoning and the tier used

        Raises:
            RecommendationCancelledError: If cancelled before the catalog arrives
        """
        try:
            return await self._recommend(user_age, cancel)
        except RecommendationCancelledError:
            raise
        except Exception as e:
            logger.error(f"Recommendation pipeline failed, using top rated fallback: {e}")
            return await self._top_rated_fallback(user_age)

    async def _recommend(
        self,
        user_age: int,
        cancel: Optional[asyncio.Event]
    ) -> RecommendationResult:
        all_movies = await self._fetch_catalog(cancel)
        age_appropriate = filter_by_age(all_movies, user_age)
        logger.info(f"{len(age_appropriate)} of {len(all_movies)} movies suit age {user_age}")

        if not age_appropriate:
            return RecommendationResult(
                items=[],
                reasoning=EMPTY_CATALOG_MESSAGE,
                tier=RecommendationTier.EMPTY_CATALOG
            )

        catalog_text = build_catalog_description(age_appropriate, user_age)
        prompt = build_evaluator_prompt(catalog_text)

        orchestration_failed = False
        responses = []
        try:
            responses = await self.evaluator_pool.dispatch(self.roles, prompt, cancel=cancel)
        except OrchestrationError as e:
            logger.warning(f"Concurrent orchestration failed, using fallback: {e}")
            orchestration_failed = True

        assembled = self.assembler.assemble(
            responses, age_appropriate, orchestration_failed=orchestration_failed
        )

        if not assembled.items:
            return RecommendationResult(
                items=top_rated(age_appropriate, self.settings.max_recommendations),
                reasoning=TOP_RATED_FOR_AGE_MESSAGE,
                tier=RecommendationTier.TOP_RATED
            )

        header_kwargs = {"header": FALLBACK_HEADER} if orchestration_failed else {}
        return RecommendationResult(
            items=assembled.items,
            reasoning=format_reasoning(assembled.items, **header_kwargs),
            tier=assembled.tier
        )

    async def _fetch_catalog(self, cancel: Optional[asyncio.Event]) -> list[Item]:
        """Fetch the catalog off the event loop, giving up if cancelled."""
        fetch = asyncio.ensure_future(self.catalog_provider.fetch_all_async())
        if cancel is None:
            return await fetch

        cancel_waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({fetch, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_waiter.cancel()

        if cancel.is_set():
            fetch.cancel()
            try:
                await fetch
            except asyncio.CancelledError:
                pass
            raise RecommendationCancelledError("Recommendation cancelled during catalog fetch")
        return fetch.result()

    async def _top_rated_fallback(self, user_age: int) -> RecommendationResult:
        try:
            all_movies = await self.catalog_provider.fetch_all_async()
            movies = top_rated(
                [m for m in all_movies if m.minimum_age <= user_age],
                self.settings.max_recommendations
            )
        except Exception as e:
            logger.error(f"Fallback catalog fetch failed: {e}")
            movies = []

        return RecommendationResult(
            items=movies,
            reasoning=TOP_RATED_MESSAGE,
            tier=RecommendationTier.TOP_RATED
        )

    def stream_category(
        self,
        category: str,
        cancel: Optional[asyncio.Event] = None
    ) -> CategoryStream:
        """Stream a category's movies, best rated first, at the configured pace."""
        return self.stream_pump.stream(category, cancel=cancel)
