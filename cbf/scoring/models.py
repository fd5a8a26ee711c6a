from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class OmissionReason(str, Enum):
    missing_vector = "missing_vector"
    degenerate_norm = "degenerate_norm"


class ScoredItem(BaseModel):
    item_id: str
    score: float


class ScoringResult(BaseModel):
    """
    Scores for one user plus the candidates that could not be scored.

    An item in ``omitted`` has no comparable score; it is not a zero.
    """

    user_id: str
    scores: dict[str, float] = Field(default_factory=dict)
    omitted: dict[str, OmissionReason] = Field(default_factory=dict)
    unknown_user: bool = False
    profile_size: int = Field(default=0, ge=0)
    elapsed_ms: float = Field(default=0.0, ge=0.0)
