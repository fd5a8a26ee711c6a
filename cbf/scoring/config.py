from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ScoringConfig:
    profile_policy: str = os.getenv("CBF_PROFILE_POLICY", "weighted")
    rating_threshold: float = 3.5
    top_n: int = int(os.getenv("CBF_TOP_N", "10"))
    log_level: str = os.getenv("CBF_LOG_LEVEL", "INFO")


DEFAULT_SCORING_CONFIG = ScoringConfig()
