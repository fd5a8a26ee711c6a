from __future__ import annotations

import logging
from collections.abc import Sequence

from ..data.models import Rating, SparseVector
from ..errors import InvalidHistory
from .base import UserProfileBuilder

logger = logging.getLogger(__name__)


def mean_rating(ratings: Sequence[Rating]) -> float:
    """Arithmetic mean of every rating value. Raises ``InvalidHistory`` when empty."""
    if not ratings:
        raise InvalidHistory("mean rating is undefined for an empty history")
    return sum(r.value for r in ratings) / len(ratings)


class WeightedProfileBuilder(UserProfileBuilder):
    """
    Build a mean-centered profile from every rating.

    Each rated item's tag vector is added scaled by ``value - mean``, so
    ratings above the user's own average pull towards its tags and ratings
    below push away. Negative weights are kept as they are.
    """

    def build_profile(self, ratings: Sequence[Rating]) -> SparseVector:
        ratings = list(ratings)
        try:
            mean = mean_rating(ratings)
        except InvalidHistory:
            logger.debug("Empty rating history, returning empty profile")
            return {}
        logger.debug("Mean rating %.4f over %d ratings", mean, len(ratings))

        profile: SparseVector = {}
        for rating in ratings:
            self._add_rated_item(profile, rating, rating.value - mean)
        return profile
