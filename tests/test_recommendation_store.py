"""
Tests for SupabaseRecommendationStore row mapping and error translation.

Run with: pytest tests/test_recommendation_store.py -v
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from recommender import ConflictError, StoreError
from recommender.models import ProficiencyLevel, RecommendationRecord
from services.recommendation_store import (
    SupabaseRecommendationStore,
    career_from_row,
    recommendation_from_row,
    user_skill_from_row,
)
from services.supabase_service import DuplicateRecordError, SupabaseServiceError


def _store(**services):
    defaults = {
        name: MagicMock()
        for name in ("skills", "careers", "courses", "user_skills", "recommendations")
    }
    defaults.update(services)
    return SupabaseRecommendationStore(**defaults)


class TestRowMapping:
    def test_career_row_with_null_skills(self):
        career = career_from_row({"id": 7, "title": "Analyst", "required_skills": None})

        assert career.id == "7"
        assert career.required_skills == []

    def test_user_skill_level_is_normalized(self):
        entry = user_skill_from_row({"id": "e1", "user_id": "u1", "skill_id": "s1", "level": "intermediate"})

        assert entry.level is ProficiencyLevel.INTERMEDIATE

    def test_recommendation_row_parses_numeric_strings_and_timestamp(self):
        record = recommendation_from_row(
            {
                "id": "r1",
                "user_id": "u1",
                "career_id": "c1",
                "score": "52.90",
                "match_percentage": 67,
                "reason": "Matched 2 out of 3 required skills",
                "created_at": "2025-03-01T10:00:00Z",
            }
        )

        assert record.score == 52.9
        assert record.created_at == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)


class TestStore:
    def test_replace_sends_rows_and_maps_result(self):
        recommendations = MagicMock()
        recommendations.replace_for_user.return_value = [
            {"id": "r1", "user_id": "u1", "career_id": "c1", "score": 44, "match_percentage": 50, "reason": "r"}
        ]
        store = _store(recommendations=recommendations)
        record = RecommendationRecord(user_id="u1", career_id="c1", score=44.0, match_percentage=50, reason="r")

        stored = store.replace_recommendations("u1", [record])

        recommendations.replace_for_user.assert_called_once_with(
            "u1",
            [{"user_id": "u1", "career_id": "c1", "score": 44.0, "match_percentage": 50, "reason": "r"}],
        )
        assert stored[0].id == "r1"

    def test_service_failure_becomes_store_error(self):
        careers = MagicMock()
        careers.list_all.side_effect = SupabaseServiceError("down")

        with pytest.raises(StoreError):
            _store(careers=careers).find_all_careers()

    def test_duplicate_becomes_conflict(self):
        recommendations = MagicMock()
        recommendations.replace_for_user.side_effect = DuplicateRecordError("dup")

        with pytest.raises(ConflictError):
            _store(recommendations=recommendations).replace_recommendations("u1", [])

    def test_missing_career_returns_none(self):
        careers = MagicMock()
        careers.get_career.return_value = None

        assert _store(careers=careers).find_career_by_id("c404") is None
