from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import numpy as np
import pandas as pd

from .config import DEFAULT_DATA_CONFIG, DataConfig
from .models import Rating

logger = logging.getLogger(__name__)

RATING_COLUMNS = ["user", "item", "rating"]
TAG_COLUMNS = ["item", "tag", "weight"]


def _require_columns(df: pd.DataFrame, columns: list[str], path: Path) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing required columns: {', '.join(missing)}")


def _read_ids_as_str(path: Path, id_columns: list[str]) -> pd.DataFrame:
    # Identifiers stay strings ("007" must not become 7); empty cells are kept as ""
    return pd.read_csv(path, dtype={c: str for c in id_columns}, keep_default_na=False)


class CsvRatingSource:
    """Rating source over a ``user,item,rating[,timestamp]`` CSV, loaded on first use."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._by_user: dict[str, list[Rating]] | None = None

    def _load(self) -> dict[str, list[Rating]]:
        df = _read_ids_as_str(self.path, ["user", "item"])
        _require_columns(df, RATING_COLUMNS, self.path)

        df["rating"] = pd.to_numeric(df["rating"], errors="coerce")
        has_timestamp = "timestamp" in df.columns
        if has_timestamp:
            df["timestamp"] = pd.to_numeric(df["timestamp"], errors="coerce")

        by_user: dict[str, list[Rating]] = {}
        for user_id, group in df.groupby("user", sort=False):
            ratings: list[Rating] = []
            for row in group.itertuples(index=False):
                timestamp = None
                if has_timestamp and pd.notna(row.timestamp):
                    timestamp = int(row.timestamp)
                ratings.append(Rating(
                    user_id=str(user_id),
                    item_id=str(row.item),
                    value=float(row.rating),
                    timestamp=timestamp,
                ))
            by_user[str(user_id)] = ratings

        logger.info("Loaded %d ratings for %d users from %s", len(df), len(by_user), self.path)
        return by_user

    def _ratings(self) -> dict[str, list[Rating]]:
        if self._by_user is None:
            self._by_user = self._load()
        return self._by_user

    def fetch_ratings(self, user_id: str) -> list[Rating] | None:
        ratings = self._ratings().get(str(user_id))
        if ratings is None:
            return None
        return list(ratings)

    def user_ids(self) -> list[str]:
        return sorted(self._ratings())


class CsvTagVectorStore:
    """
    Tag vector store over an ``item,tag,weight`` CSV, loaded on first use.

    Rows with a non-finite or zero weight are dropped; duplicate
    ``(item, tag)`` rows accumulate. After loading, all access is read-only.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._vectors: dict[str, Mapping[str, float]] | None = None

    def _load(self) -> dict[str, Mapping[str, float]]:
        df = _read_ids_as_str(self.path, ["item", "tag"])
        _require_columns(df, TAG_COLUMNS, self.path)

        weights = pd.to_numeric(df["weight"], errors="coerce").to_numpy(dtype=float)
        keep = np.isfinite(weights) & (weights != 0.0)
        dropped = int((~keep).sum())
        if dropped:
            logger.warning("Dropped %d tag rows with non-finite or zero weight from %s", dropped, self.path)
        df = df.loc[keep].assign(weight=weights[keep])

        raw: dict[str, dict[str, float]] = {}
        summed = df.groupby(["item", "tag"], sort=False)["weight"].sum()
        for (item_id, tag), weight in summed.items():
            raw.setdefault(str(item_id), {})[str(tag)] = float(weight)

        logger.info("Loaded tag vectors for %d items from %s", len(raw), self.path)
        return {item_id: MappingProxyType(vec) for item_id, vec in raw.items()}

    def _all(self) -> dict[str, Mapping[str, float]]:
        if self._vectors is None:
            self._vectors = self._load()
        return self._vectors

    def get_item_vector(self, item_id: str) -> Mapping[str, float] | None:
        return self._all().get(str(item_id))

    def item_ids(self) -> list[str]:
        return sorted(self._all())

    def __len__(self) -> int:
        return len(self._all())


def load_data_store(
    config: DataConfig = DEFAULT_DATA_CONFIG,
) -> tuple[CsvRatingSource, CsvTagVectorStore]:
    """Return the CSV-backed rating source and tag vector store for *config*."""
    return CsvRatingSource(config.ratings_path), CsvTagVectorStore(config.tags_path)
