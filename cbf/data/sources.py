from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Protocol

from ..scoring.vectors import is_finite
from .models import Rating


class RatingSource(Protocol):
    def fetch_ratings(self, user_id: str) -> list[Rating] | None:
        """Return the user's ratings, or ``None`` if the user is unknown."""
        ...


class TagVectorStore(Protocol):
    def get_item_vector(self, item_id: str) -> Mapping[str, float] | None:
        """Return the item's tag vector, or ``None`` if it has none."""
        ...


class InMemoryRatingSource:
    """Rating source over an already-loaded list of ratings."""

    def __init__(self, ratings: Iterable[Rating]) -> None:
        self._by_user: dict[str, list[Rating]] = {}
        for rating in ratings:
            self._by_user.setdefault(rating.user_id, []).append(rating)

    def fetch_ratings(self, user_id: str) -> list[Rating] | None:
        ratings = self._by_user.get(str(user_id))
        if ratings is None:
            return None
        return list(ratings)

    def user_ids(self) -> list[str]:
        return sorted(self._by_user)


class InMemoryTagVectorStore:
    """Read-only tag vector store backed by a dict of dicts.

    Vectors are copied on construction and handed out as read-only views,
    so concurrent readers never observe a write. Raises ``ValueError`` for
    a vector with a non-finite weight.
    """

    def __init__(self, vectors: Mapping[str, Mapping[str, float]]) -> None:
        self._vectors: dict[str, Mapping[str, float]] = {}
        for item_id, vec in vectors.items():
            copy = {str(tag): float(w) for tag, w in vec.items()}
            if not is_finite(copy):
                raise ValueError(f"Tag vector for item {item_id!r} has non-finite weights")
            self._vectors[str(item_id)] = MappingProxyType(copy)

    def get_item_vector(self, item_id: str) -> Mapping[str, float] | None:
        return self._vectors.get(str(item_id))

    def item_ids(self) -> list[str]:
        return sorted(self._vectors)

    def __len__(self) -> int:
        return len(self._vectors)
