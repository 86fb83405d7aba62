#!/usr/bin/env python3
"""
Rebuild stored career recommendations from current skills and careers.

Recommendations are a derived cache, so this is safe to run at any time, e.g.
after bulk-editing the career catalog.

Usage (needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY):
    python scripts/rebuild_recommendations.py <user_id> [<user_id> ...]
    python scripts/rebuild_recommendations.py --all
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "backend" / "src"))

from config.settings import get_settings
from recommender import RecommendationEngine, RecommenderError
from services import SupabaseRecommendationStore, SupabaseServiceError

logger = logging.getLogger("rebuild_recommendations")


def die(msg: str, code: int = 1):
    print(f"✗ {msg}", file=sys.stderr)
    sys.exit(code)


def ok(msg: str):
    print(f"✓ {msg}")


def rebuild_candidates(store: SupabaseRecommendationStore) -> list:
    # Users with stored recommendations but no skills left still need their stale set cleared.
    return sorted(set(store.user_skills.user_ids()) | set(store.recommendations.user_ids()))


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Rebuild stored career recommendations")
    p.add_argument("user_ids", nargs="*", help="User ids to rebuild")
    p.add_argument("--all", action="store_true", help="Rebuild every user with skills or recommendations")
    p.add_argument("--verbose", "-v", action="store_true")
    a = p.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.INFO)

    if not a.user_ids and not a.all:
        p.error("pass one or more user ids, or --all")

    settings = get_settings()
    try:
        store = SupabaseRecommendationStore()
    except SupabaseServiceError as e:
        die(str(e))

    engine = RecommendationEngine(
        store,
        default_limit=settings.recommendation_default_limit,
        max_limit=settings.recommendation_limit_max,
    )

    user_ids = rebuild_candidates(store) if a.all else a.user_ids
    summary = {}
    failures = 0
    for user_id in user_ids:
        try:
            details = engine.rebuild(user_id)
        except RecommenderError as e:
            failures += 1
            logger.error(f"Rebuild failed for user {user_id}: {e}")
            continue
        summary[user_id] = [d.career.title for d in details]

    ok(f"Rebuilt {len(summary)} of {len(user_ids)} users.")
    print(json.dumps(summary, indent=2))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
