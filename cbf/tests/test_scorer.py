from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from cbf.data.models import Rating
from cbf.data.sources import InMemoryRatingSource, InMemoryTagVectorStore
from cbf.errors import DegenerateNorm, MissingVector, UnknownUser
from cbf.profiles.threshold import ThresholdProfileBuilder
from cbf.profiles.weighted import WeightedProfileBuilder
from cbf.scoring.config import ScoringConfig
from cbf.scoring.models import OmissionReason
from cbf.scoring.scorer import TfidfItemScorer
from cbf.scoring.vectors import norm_sq

VECTORS = {
    "1": {"a": 1.0, "b": 1.0},
    "2": {"a": 1.0},
    "3": {"b": 1.0},
    "4": {"c": 1.0},
    "X": {"t1": 2.0},
    "Y": {"t2": 5.0},
    "C": {"t1": 1.0, "t2": 1.0},
}

RATINGS = [
    # mean-centered scenario: mean 3.0
    Rating(user_id="u1", item_id="1", value=5.0),
    Rating(user_id="u1", item_id="2", value=1.0),
    # threshold scenario
    Rating(user_id="u2", item_id="X", value=4.0),
    Rating(user_id="u2", item_id="Y", value=2.0),
    # identical ratings
    Rating(user_id="flat", item_id="1", value=4.0),
    Rating(user_id="flat", item_id="2", value=4.0),
    # nothing liked
    Rating(user_id="grumpy", item_id="1", value=1.0),
    Rating(user_id="grumpy", item_id="X", value=2.5),
]


def _scorer(builder_cls=WeightedProfileBuilder, config: ScoringConfig | None = None) -> TfidfItemScorer:
    store = InMemoryTagVectorStore(VECTORS)
    kwargs = {"config": config} if config else {}
    return TfidfItemScorer(InMemoryRatingSource(RATINGS), store, builder_cls(store), **kwargs)


# ── Worked scenarios ─────────────────────────────────────────────────────


def test_weighted_scenario_scores_one():
    assert _scorer().score("u1", {"3"}) == {"3": pytest.approx(1.0)}


def test_threshold_scenario():
    scores = _scorer(ThresholdProfileBuilder).score("u2", ["C"])
    assert scores == {"C": pytest.approx(1 / math.sqrt(2))}
    assert scores["C"] == pytest.approx(0.7071, abs=1e-4)


def test_zero_overlap_is_a_real_zero_score():
    # profile {"a": 0, "b": 2} has a non-zero norm, so item 4 scores 0.0
    result = _scorer().score_with_details("u1", ["4"])
    assert result.scores == {"4": 0.0}
    assert result.omitted == {}


# ── Omissions ────────────────────────────────────────────────────────────


def test_unknown_user_returns_empty_result():
    scorer = _scorer()
    assert scorer.score("nobody", ["1", "2", "3"]) == {}

    result = scorer.score_with_details("nobody", ["1"])
    assert result.unknown_user is True
    assert result.scores == {}
    assert result.omitted == {}


def test_identical_ratings_omit_every_candidate():
    result = _scorer().score_with_details("flat", ["1", "2", "3"])
    assert result.scores == {}
    assert result.omitted == {
        "1": OmissionReason.degenerate_norm,
        "2": OmissionReason.degenerate_norm,
        "3": OmissionReason.degenerate_norm,
    }


def test_empty_threshold_profile_omits_every_candidate():
    result = _scorer(ThresholdProfileBuilder).score_with_details("grumpy", ["1", "X"])
    assert result.scores == {}
    assert result.profile_size == 0
    assert set(result.omitted.values()) == {OmissionReason.degenerate_norm}


def test_missing_candidate_vector_is_omitted_not_zero():
    result = _scorer().score_with_details("u1", ["3", "ghost"])
    assert "ghost" not in result.scores
    assert result.omitted == {"ghost": OmissionReason.missing_vector}
    assert result.scores["3"] == pytest.approx(1.0)


def test_zero_weight_item_vector_is_omitted():
    store = InMemoryTagVectorStore({**VECTORS, "Z": {"b": 0.0}})
    scorer = TfidfItemScorer(InMemoryRatingSource(RATINGS), store, WeightedProfileBuilder(store))
    result = scorer.score_with_details("u1", ["Z"])
    assert result.omitted == {"Z": OmissionReason.degenerate_norm}


def test_omissions_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="cbf.scoring.scorer"):
        _scorer().score("u1", ["ghost"])
    assert "Omitting item ghost" in caplog.text


# ── Candidate handling ───────────────────────────────────────────────────


def test_duplicate_candidates_collapse():
    assert list(_scorer().score("u1", ["3", "3", "3"])) == ["3"]


def test_candidate_ids_are_normalised_to_str():
    assert _scorer().score("u1", [3]) == {"3": pytest.approx(1.0)}


def test_score_matches_details():
    scorer = _scorer()
    candidates = ["1", "2", "3", "4", "ghost"]
    assert scorer.score("u1", candidates) == scorer.score_with_details("u1", candidates).scores


def test_profile_norm_is_computed_once_per_call():
    scorer = _scorer()
    with patch("cbf.scoring.scorer.norm_sq", wraps=norm_sq) as mock_norm:
        scorer.score("u1", ["1", "2", "3", "4"])
    # once for the profile, once per item vector
    assert mock_norm.call_count == 5


def test_result_details():
    result = _scorer().score_with_details("u1", ["3"])
    assert result.user_id == "u1"
    assert result.profile_size == 2
    assert result.elapsed_ms >= 0.0
    assert result.unknown_user is False


# ── Single-item scoring ──────────────────────────────────────────────────


class TestScoreItem:
    def test_matches_bulk_score(self):
        scorer = _scorer()
        assert scorer.score_item("u1", "1") == pytest.approx(scorer.score("u1", ["1"])["1"])

    def test_unknown_user_raises(self):
        with pytest.raises(UnknownUser):
            _scorer().score_item("nobody", "1")

    def test_missing_vector_raises(self):
        with pytest.raises(MissingVector):
            _scorer().score_item("u1", "ghost")

    def test_degenerate_norm_raises(self):
        with pytest.raises(DegenerateNorm):
            _scorer().score_item("flat", "1")


# ── Ranking ──────────────────────────────────────────────────────────────


class TestRecommend:
    def test_orders_by_score_then_item_id(self):
        ranked = _scorer().recommend("u1", ["1", "2", "3", "4"])
        assert [r.item_id for r in ranked] == ["3", "1", "2", "4"]
        assert ranked[0].score == pytest.approx(1.0)
        assert ranked[1].score == pytest.approx(1 / math.sqrt(2))

    def test_truncates_to_n(self):
        ranked = _scorer().recommend("u1", ["1", "2", "3", "4"], n=2)
        assert [r.item_id for r in ranked] == ["3", "1"]

    def test_defaults_to_config_top_n(self):
        ranked = _scorer(config=ScoringConfig(top_n=1)).recommend("u1", ["1", "2", "3", "4"])
        assert len(ranked) == 1

    def test_omitted_items_are_not_ranked(self):
        ranked = _scorer().recommend("u1", ["ghost", "3"])
        assert [r.item_id for r in ranked] == ["3"]

    def test_negative_n_raises(self):
        with pytest.raises(ValueError):
            _scorer().recommend("u1", ["3"], n=-1)


# ── Re-entrancy ──────────────────────────────────────────────────────────


def test_concurrent_calls_match_sequential():
    scorer = _scorer()
    requests = [("u1", ["1", "2", "3", "4"]), ("u2", ["C", "X", "Y"]), ("flat", ["1"])] * 10
    expected = [scorer.score(u, items) for u, items in requests]

    with ThreadPoolExecutor(max_workers=4) as pool:
        actual = list(pool.map(lambda req: scorer.score(*req), requests))

    assert actual == expected
