from __future__ import annotations

from enum import Enum

from ..data.sources import TagVectorStore
from ..scoring.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .base import UserProfileBuilder
from .threshold import ThresholdProfileBuilder
from .weighted import WeightedProfileBuilder


class ProfilePolicy(str, Enum):
    threshold = "threshold"
    weighted = "weighted"


def make_profile_builder(
    store: TagVectorStore,
    policy: ProfilePolicy | str | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> UserProfileBuilder:
    """Return the builder for *policy*, falling back to ``config.profile_policy``.

    Raises ``ValueError`` for an unknown policy name.
    """
    policy = ProfilePolicy(policy or config.profile_policy)
    if policy is ProfilePolicy.threshold:
        return ThresholdProfileBuilder(store, threshold=config.rating_threshold)
    return WeightedProfileBuilder(store)
