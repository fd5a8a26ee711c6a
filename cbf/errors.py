"""
Error taxonomy for the scoring core.

None of these is fatal to a bulk scoring call: ``score_with_details`` turns
them into omissions. They are raised explicitly by the lower-level helpers
and by ``TfidfItemScorer.score_item``.
"""
from __future__ import annotations


class ScoringError(Exception):
    """Base class for recoverable scoring failures."""


class UnknownUser(ScoringError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"No rating history for user {user_id!r}")
        self.user_id = user_id


class MissingVector(ScoringError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"No tag vector for item {item_id!r}")
        self.item_id = item_id


class DegenerateNorm(ScoringError):
    """One operand of a cosine computation has zero magnitude."""


class InvalidHistory(ScoringError):
    """Rating history is empty where a mean rating is required."""
