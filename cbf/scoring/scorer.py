from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from ..data.models import SparseVector
from ..data.sources import RatingSource, TagVectorStore
from ..errors import DegenerateNorm, MissingVector, UnknownUser
from ..profiles.base import UserProfileBuilder
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import OmissionReason, ScoredItem, ScoringResult
from .vectors import cosine_from_parts, dot, norm_sq

logger = logging.getLogger(__name__)


class TfidfItemScorer:
    """
    Scores candidate items by cosine similarity between the user's profile
    and each item's tag vector.

    The profile is rebuilt on every call; the scorer keeps no state besides
    its collaborators, so concurrent calls are safe as long as the store is
    only read.
    """

    def __init__(
        self,
        ratings: RatingSource,
        store: TagVectorStore,
        builder: UserProfileBuilder,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    ) -> None:
        self.ratings = ratings
        self.store = store
        self.builder = builder
        self.config = config

    def _profile(self, user_id: str) -> SparseVector | None:
        ratings = self.ratings.fetch_ratings(user_id)
        if ratings is None:
            return None
        return self.builder.build_profile(ratings)

    def score_with_details(self, user_id: str, candidates: Iterable[str]) -> ScoringResult:
        """
        Score *candidates* for *user_id*, recording why any were left out.

        Unknown users get an empty result with ``unknown_user`` set.
        """
        start_time = time.time()
        user_id = str(user_id)

        profile = self._profile(user_id)
        if profile is None:
            logger.info("No rating history for user %s, nothing to score", user_id)
            return ScoringResult(user_id=user_id, unknown_user=True)

        profile_norm_sq = norm_sq(profile)

        scores: dict[str, float] = {}
        omitted: dict[str, OmissionReason] = {}
        for item_id in {str(c) for c in candidates}:
            item_vector = self.store.get_item_vector(item_id)
            if item_vector is None:
                logger.debug("Omitting item %s: no tag vector", item_id)
                omitted[item_id] = OmissionReason.missing_vector
                continue

            try:
                scores[item_id] = cosine_from_parts(
                    dot(item_vector, profile), norm_sq(item_vector), profile_norm_sq,
                )
            except DegenerateNorm:
                logger.debug("Omitting item %s: zero-magnitude item or profile vector", item_id)
                omitted[item_id] = OmissionReason.degenerate_norm

        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        logger.info(
            "Scored %d items for user %s (%d omitted, profile has %d tags) in %.1f ms",
            len(scores), user_id, len(omitted), len(profile), elapsed_ms,
        )
        return ScoringResult(
            user_id=user_id,
            scores=scores,
            omitted=omitted,
            profile_size=len(profile),
            elapsed_ms=elapsed_ms,
        )

    def score(self, user_id: str, candidates: Iterable[str]) -> dict[str, float]:
        """Map each scorable candidate to its cosine score; others are absent."""
        return self.score_with_details(user_id, candidates).scores

    def score_item(self, user_id: str, item_id: str) -> float:
        """Score one item, raising instead of omitting it.

        Raises ``UnknownUser``, ``MissingVector`` or ``DegenerateNorm``.
        """
        user_id, item_id = str(user_id), str(item_id)
        profile = self._profile(user_id)
        if profile is None:
            raise UnknownUser(user_id)
        item_vector = self.store.get_item_vector(item_id)
        if item_vector is None:
            raise MissingVector(item_id)
        return cosine_from_parts(dot(item_vector, profile), norm_sq(item_vector), norm_sq(profile))

    def recommend(
        self,
        user_id: str,
        candidates: Iterable[str],
        n: int | None = None,
    ) -> list[ScoredItem]:
        """Top *n* candidates by score, best first; ties go to the smaller item id."""
        limit = self.config.top_n if n is None else n
        if limit < 0:
            raise ValueError("n must be non-negative")
        scores = self.score(user_id, candidates)
        ranked = sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))
        return [ScoredItem(item_id=item_id, score=score) for item_id, score in ranked[:limit]]
