from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from ..data.models import Rating, SparseVector
from ..data.sources import TagVectorStore
from ..errors import MissingVector
from ..scoring.vectors import accumulate

logger = logging.getLogger(__name__)


class UserProfileBuilder(ABC):
    """Builds a fresh profile vector per call; holds no per-user state."""

    def __init__(self, store: TagVectorStore) -> None:
        self.store = store

    @abstractmethod
    def build_profile(self, ratings: Sequence[Rating]) -> SparseVector:
        """Accumulate *ratings* into a new tag -> weight profile."""

    def item_vector(self, item_id: str) -> Mapping[str, float]:
        vector = self.store.get_item_vector(item_id)
        if vector is None:
            raise MissingVector(item_id)
        return vector

    def _add_rated_item(self, profile: SparseVector, rating: Rating, scale: float = 1.0) -> None:
        try:
            vector = self.item_vector(rating.item_id)
        except MissingVector:
            logger.debug("Skipping rated item %s for user %s: no tag vector", rating.item_id, rating.user_id)
            return
        accumulate(profile, vector, scale)
