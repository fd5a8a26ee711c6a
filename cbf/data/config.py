from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


@dataclass(frozen=True)
class DataConfig:
    """
    Locations of the rating and tag vector files.

    Ratings: ``user,item,rating[,timestamp]``.
    Tag vectors: ``item,tag,weight`` (one row per non-zero entry).
    """

    ratings_path: Path = Path(os.getenv("CBF_RATINGS_PATH", str(_DATA_DIR / "ratings.csv")))
    tags_path: Path = Path(os.getenv("CBF_TAGS_PATH", str(_DATA_DIR / "tag_vectors.csv")))


DEFAULT_DATA_CONFIG = DataConfig()
