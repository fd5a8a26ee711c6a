from __future__ import annotations

from collections.abc import Sequence

from ..data.models import Rating, SparseVector
from ..data.sources import TagVectorStore
from .base import UserProfileBuilder

# The lowest rating that counts towards the profile
RATING_THRESHOLD = 3.5


class ThresholdProfileBuilder(UserProfileBuilder):
    """
    Build a user profile from all positive ratings.

    Every rating at or above the threshold adds its item's tag vector with
    weight 1. Lower ratings are ignored, not subtracted.
    """

    def __init__(self, store: TagVectorStore, threshold: float = RATING_THRESHOLD) -> None:
        super().__init__(store)
        self.threshold = threshold

    def build_profile(self, ratings: Sequence[Rating]) -> SparseVector:
        profile: SparseVector = {}
        for rating in ratings:
            if rating.value >= self.threshold:
                self._add_rated_item(profile, rating)
        return profile
