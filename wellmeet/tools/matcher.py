"""
Recommendation matcher.

Turns either the fixed dialog's SlotAnswers or a free-text query into a
classified MatchResult. The candidate order produced by the catalog or
the recommend service is surfaced unchanged; the matcher never re-sorts.

Outcomes are kept apart because each maps to its own user-facing copy:
    RESULTS          - at least one candidate
    EMPTY            - the lookup succeeded but nothing matched
    SERVICE_ERROR    - non-2xx or malformed service response
    TRANSPORT_ERROR  - the service could not be reached
"""

import logging
from typing import Callable, Optional

from wellmeet.errors import ServiceError, TransportError
from wellmeet.schemas.restaurant_schema import (
    FreeTextQuery,
    MatchInput,
    MatchOutcome,
    MatchResult,
    RestaurantCandidate,
    SlotAnswers,
)
from wellmeet.tools.catalog import candidates_for_buckets
from wellmeet.tools.protocols import RecommendService

logger = logging.getLogger(__name__)

BucketLookup = Callable[[SlotAnswers], list[RestaurantCandidate]]


class RecommendationMatcher:
    """Single entry point for both dialog variants' candidate lookups."""

    def __init__(
        self,
        service: Optional[RecommendService] = None,
        bucket_lookup: BucketLookup = candidates_for_buckets,
    ) -> None:
        self._service = service
        self._bucket_lookup = bucket_lookup
        self.calls = 0

    async def match(self, query: MatchInput) -> MatchResult:
        """Look up candidates for ``query``. Never raises for service failures."""
        self.calls += 1
        if isinstance(query, SlotAnswers):
            return self._classify(self._bucket_lookup(query))
        if isinstance(query, FreeTextQuery):
            return await self._match_text(query)
        raise TypeError(f"Unsupported match input: {type(query).__name__}")

    async def _match_text(self, query: FreeTextQuery) -> MatchResult:
        if self._service is None:
            raise RuntimeError("Free-text matching needs a recommend service")
        try:
            candidates = await self._service.recommend(query.text)
        except TransportError as e:
            logger.warning("Recommend service unreachable: %s", e)
            return MatchResult(outcome=MatchOutcome.TRANSPORT_ERROR, error=str(e))
        except ServiceError as e:
            logger.warning("Recommend service failed: %s", e)
            return MatchResult(outcome=MatchOutcome.SERVICE_ERROR, error=str(e))
        return self._classify(candidates)

    @staticmethod
    def _classify(candidates: list[RestaurantCandidate]) -> MatchResult:
        if not candidates:
            return MatchResult(outcome=MatchOutcome.EMPTY)
        return MatchResult(outcome=MatchOutcome.RESULTS, candidates=tuple(candidates))
