"""
Score one user's candidate items from CSV files.

Usage:
    python -m cbf.cli --user 42 [--items 1,2,3] [--policy weighted] [--top 10]
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from .data.config import DEFAULT_DATA_CONFIG, DataConfig
from .data.data_store import CsvTagVectorStore, load_data_store
from .profiles.factory import ProfilePolicy, make_profile_builder
from .scoring.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .scoring.scorer import TfidfItemScorer


def build_scorer(
    data_config: DataConfig = DEFAULT_DATA_CONFIG,
    scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> tuple[TfidfItemScorer, CsvTagVectorStore]:
    ratings, store = load_data_store(data_config)
    builder = make_profile_builder(store, config=scoring_config)
    return TfidfItemScorer(ratings, store, builder, config=scoring_config), store


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="cbf", description=__doc__.strip().splitlines()[0])
    ap.add_argument("--user", required=True)
    ap.add_argument("--items", default=None, help="comma-separated item ids (default: every item with tags)")
    ap.add_argument("--policy", choices=[p.value for p in ProfilePolicy], default=None)
    ap.add_argument("--top", type=int, default=None)
    ap.add_argument("--ratings", default=None, help="ratings CSV (user,item,rating[,timestamp])")
    ap.add_argument("--tags", default=None, help="tag vector CSV (item,tag,weight)")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    scoring_config = DEFAULT_SCORING_CONFIG
    if args.policy:
        scoring_config = replace(scoring_config, profile_policy=args.policy)
    if args.top is not None:
        scoring_config = replace(scoring_config, top_n=args.top)

    data_config = DEFAULT_DATA_CONFIG
    if args.ratings:
        data_config = replace(data_config, ratings_path=Path(args.ratings))
    if args.tags:
        data_config = replace(data_config, tags_path=Path(args.tags))

    logging.basicConfig(
        level=scoring_config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    scorer, store = build_scorer(data_config, scoring_config)
    if args.items:
        candidates = [i.strip() for i in args.items.split(",") if i.strip()]
    else:
        candidates = store.item_ids()

    for item in scorer.recommend(args.user, candidates):
        print(f"{item.item_id}\t{item.score:.4f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
