"""
Tests for the Supabase table services.

Uses a MagicMock Supabase client; query builder methods all return the same
builder so chained calls resolve to one configurable ``execute`` result.

Run with: pytest tests/test_services.py -v
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from services.analytics_service import AnalyticsService, AnalyticsServiceError
from services.careers_service import CareersService
from services.courses_service import CoursesService
from services.recommendations_service import REPLACE_FUNCTION, RecommendationsService
from services.skills_service import SkillsService, SkillsServiceError
from services.supabase_service import (
    DuplicateRecordError,
    contains_pattern,
    escape_like,
    is_unique_violation,
    quote_filter_value,
)
from services.user_skills_service import UserSkillsService, UserSkillsServiceError

CHAIN_METHODS = (
    "select", "eq", "in_", "ilike", "or_", "overlaps", "order",
    "range", "limit", "insert", "update", "delete", "gte", "lte",
)


def _builder(data=None, count=None, error=None):
    builder = MagicMock()
    for name in CHAIN_METHODS:
        getattr(builder, name).return_value = builder
    if error is not None:
        builder.execute.side_effect = error
    else:
        builder.execute.return_value = MagicMock(data=data, count=count)
    return builder


def _client_with(builder):
    client = MagicMock()
    client.table.return_value = builder
    return client


class TestHelpers:
    def test_escape_like_escapes_wildcards(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"

    def test_contains_pattern_keeps_star_from_becoming_a_wildcard_run(self):
        assert contains_pattern("c*") == "%c_%"
        assert contains_pattern("100%") == "%100\\%%"

    def test_quote_filter_value_escapes_quotes_and_backslashes(self):
        assert quote_filter_value('a"b\\c') == '"a\\"b\\\\c"'

    def test_unique_violation_detection(self):
        err = Exception("boom")
        err.code = "23505"
        assert is_unique_violation(err)
        assert is_unique_violation(Exception('duplicate key value violates unique constraint "x"'))
        assert not is_unique_violation(Exception("timeout"))


class TestSkillsService:
    def test_list_skills_paginates_and_filters(self):
        builder = _builder(data=[{"id": "s1", "name": "Python"}], count=41)
        service = SkillsService(client=_client_with(builder))

        rows, total = service.list_skills(category="Programming", search="py", page=3, limit=20)

        assert rows == [{"id": "s1", "name": "Python"}]
        assert total == 41
        builder.select.assert_called_with("*", count="exact")
        builder.eq.assert_called_with("category", "Programming")
        builder.ilike.assert_called_with("name", "%py%")
        builder.range.assert_called_with(40, 59)

    def test_create_skill_rejects_existing_name(self):
        builder = _builder(data=[{"id": "s1", "name": "Python"}])
        service = SkillsService(client=_client_with(builder))

        with pytest.raises(DuplicateRecordError):
            service.create_skill({"name": "python", "category": "Programming"})
        builder.insert.assert_not_called()

    def test_unique_violation_on_insert_maps_to_duplicate(self):
        err = Exception("duplicate key value violates unique constraint")
        service = SkillsService(client=_client_with(_builder(error=err)))

        with pytest.raises(DuplicateRecordError):
            service._insert({"name": "Python", "category": "Programming"})

    def test_other_failures_raise_service_error(self):
        service = SkillsService(client=_client_with(_builder(error=RuntimeError("network down"))))

        with pytest.raises(SkillsServiceError):
            service.get_skill("s1")

    def test_get_skills_with_no_ids_skips_query(self):
        client = MagicMock()
        assert SkillsService(client=client).get_skills([]) == []
        client.table.assert_not_called()

    def test_none_response_is_an_error(self):
        service = SkillsService(client=_client_with(_builder(data=None)))

    def test_name_lookup_treats_star_literally(self):
        builder = _builder(data=[])
        service = SkillsService(client=_client_with(builder))

        assert service.find_by_name("C*") is None

        builder.eq.assert_called_once_with("name_key", "c*")
        builder.ilike.assert_not_called()

    def test_search_star_is_not_a_multi_character_wildcard(self):
        builder = _builder(data=[], count=0)
        service = SkillsService(client=_client_with(builder))

        service.list_skills(search="C*")

        builder.ilike.assert_called_with("name", "%C_%")

        with pytest.raises(SkillsServiceError):
            service.get_skill("s1")


class TestCareersService:
    def test_update_allows_keeping_own_title(self):
        builder = _builder(data=[{"id": "c1", "title": "Data Engineer"}])
        service = CareersService(client=_client_with(builder))

        updated = service.update_career("c1", {"title": "Data Engineer"})

        assert updated["id"] == "c1"
        builder.update.assert_called_once_with({"title": "Data Engineer"})

    def test_update_rejects_title_of_another_career(self):
        builder = _builder(data=[{"id": "c2", "title": "Data Engineer"}])
        service = CareersService(client=_client_with(builder))

        with pytest.raises(DuplicateRecordError):
            service.update_career("c1", {"title": "Data Engineer"})

    def test_search_matches_title_or_description(self):
        builder = _builder(data=[], count=0)
        service = CareersService(client=_client_with(builder))

        service.list_careers(search="data")

        builder.or_.assert_called_once_with('title.ilike."%data%",description.ilike."%data%"')

    def test_search_text_cannot_add_filter_branches(self):
        builder = _builder(data=[], count=0)
        service = CareersService(client=_client_with(builder))

        service.list_careers(search="x%,id.neq.00000000-0000-0000-0000-000000000000")

        (filters,), _ = builder.or_.call_args
        quoted = '"%x\\\\%,id.neq.00000000-0000-0000-0000-000000000000%"'
        assert filters == f"title.ilike.{quoted},description.ilike.{quoted}"

    @pytest.mark.parametrize("search", ["a(b", "a)b", 'say "hi"', "c++ (or c#)"])
    def test_reserved_characters_stay_inside_quotes(self, search):
        builder = _builder(data=[], count=0)
        service = CareersService(client=_client_with(builder))

        service.list_careers(search=search)

        (filters,), _ = builder.or_.call_args
        title_part, description_part = filters.split(",description.ilike.")
        assert title_part.startswith('title.ilike."') and title_part.endswith('"')
        assert description_part == title_part[len("title.ilike."):]

    def test_title_lookup_compares_normalized_key(self):
        builder = _builder(data=[])
        service = CareersService(client=_client_with(builder))

        assert service.find_by_title("  Data*Engineer ") is None

        builder.eq.assert_called_once_with("title_key", "data*engineer")
        builder.ilike.assert_not_called()

    def test_star_in_title_does_not_block_create(self):
        builder = _builder(data=[{"id": "c9", "title": "C* Developer"}])
        builder.execute.side_effect = [
            MagicMock(data=[], count=None),
            MagicMock(data=[{"id": "c9", "title": "C* Developer"}], count=None),
        ]
        service = CareersService(client=_client_with(builder))

        row = service.create_career({"title": "C* Developer", "description": "Systems work"})

        assert row["id"] == "c9"
        builder.eq.assert_called_once_with("title_key", "c* developer")


class TestCoursesService:
    def test_find_teaching_any_uses_array_overlap(self):
        builder = _builder(data=[{"id": "k1"}])
        service = CoursesService(client=_client_with(builder))

        assert service.find_teaching_any(["s1", "s2"], 3) == [{"id": "k1"}]
        builder.overlaps.assert_called_once_with("skills_taught", ["s1", "s2"])
        builder.order.assert_called_with("id")
        builder.limit.assert_called_with(3)

    @pytest.mark.parametrize("skill_ids, limit", [([], 3), (["s1"], 0)])
    def test_find_teaching_any_short_circuits(self, skill_ids, limit):
        client = MagicMock()
        assert CoursesService(client=client).find_teaching_any(skill_ids, limit) == []
        client.table.assert_not_called()


class TestUserSkillsService:
    def test_add_skill_rejects_existing_entry(self):
        builder = _builder(data=[{"id": "e1"}])
        service = UserSkillsService(client=_client_with(builder))

        with pytest.raises(DuplicateRecordError):
            service.add_skill("u1", "s1", "BEGINNER")

    def test_bulk_add_reports_each_entry(self):
        service = UserSkillsService(client=MagicMock())
        existing = {"s2"}

        def fake_add(user_id, skill_id, level):
            if skill_id in existing:
                raise DuplicateRecordError("exists")
            if skill_id == "s3":
                raise UserSkillsServiceError("write failed")
            return {"id": f"e-{skill_id}", "level": level}

        service.add_skill = fake_add
        known = {
            "s1": {"id": "s1", "name": "Python"},
            "s2": {"id": "s2", "name": "SQL"},
            "s3": {"id": "s3", "name": "Spark"},
        }

        results = service.bulk_add(
            "u1",
            [{"skill_id": "s1"}, {"skill_id": "s2", "level": "ADVANCED"}, {"skill_id": "s3"}, {"skill_id": "s9"}],
            known,
        )

        assert results["added"] == [
            {"id": "e-s1", "skill_id": "s1", "skill_name": "Python", "level": "BEGINNER"}
        ]
        assert results["skipped"] == [{"skill_id": "s2", "skill_name": "SQL", "reason": "Already exists"}]
        assert [e["skill_id"] for e in results["errors"]] == ["s3", "s9"]

    def test_user_ids_are_deduplicated(self):
        builder = _builder(data=[{"user_id": "u1"}, {"user_id": "u2"}, {"user_id": "u1"}])
        service = UserSkillsService(client=_client_with(builder))

        assert service.user_ids() == ["u1", "u2"]


class TestRecommendationsService:
    def test_replace_for_user_calls_database_function(self):
        client = MagicMock()
        client.rpc.return_value.execute.return_value = MagicMock(data=[{"id": "r1"}])
        service = RecommendationsService(client=client)
        rows = [{"career_id": "c1", "score": 52.9, "match_percentage": 67, "reason": "x"}]

        assert service.replace_for_user("u1", rows) == [{"id": "r1"}]
        client.rpc.assert_called_once_with(REPLACE_FUNCTION, {"p_user_id": "u1", "p_records": rows})

    def test_list_for_user_orders_by_score(self):
        builder = _builder(data=[])
        service = RecommendationsService(client=_client_with(builder))

        service.list_for_user("u1")

        builder.eq.assert_called_once_with("user_id", "u1")
        builder.order.assert_any_call("score", desc=True)
        builder.order.assert_any_call("career_id")


def _rpc_client(results):
    """Client whose ``rpc(name, params)`` returns ``results[name]``."""
    client = MagicMock()

    def rpc(name, params):
        call = MagicMock()
        call.execute.return_value = MagicMock(data=results.get(name))
        return call

    client.rpc.side_effect = rpc
    return client


class TestAnalyticsService:
    def test_record_event_inserts_row(self):
        builder = _builder(data=[{"id": "a1", "event_type": "LOGIN"}])
        service = AnalyticsService(client=_client_with(builder))

        row = service.record_event("LOGIN", user_id="u1", metadata={"ip": "10.0.0.1"})

        assert row["id"] == "a1"
        builder.insert.assert_called_once_with(
            {"user_id": "u1", "event_type": "LOGIN", "event_data": None, "metadata": {"ip": "10.0.0.1"}}
        )

    def test_count_rows_applies_date_bounds(self):
        builder = _builder(data=[], count=12)
        client = _client_with(builder)
        service = AnalyticsService(client=client)
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 31, tzinfo=timezone.utc)

        assert service.count_rows("careers", start, end) == 12

        client.table.assert_called_with("careers")
        builder.select.assert_called_once_with("id", count="exact")
        builder.gte.assert_called_once_with("created_at", start.isoformat())
        builder.lte.assert_called_once_with("created_at", end.isoformat())

    def test_count_rows_without_count_is_zero(self):
        builder = _builder(data=[], count=None)
        service = AnalyticsService(client=_client_with(builder))

        assert service.count_rows("skills") == 0
        builder.gte.assert_not_called()
        builder.lte.assert_not_called()

    def test_user_count_passes_bounds_to_function(self):
        client = _rpc_client({"analytics_user_count": 7})
        service = AnalyticsService(client=client)
        start = datetime(2024, 3, 1, tzinfo=timezone.utc)

        assert service.user_count(start, None) == 7
        client.rpc.assert_called_once_with(
            "analytics_user_count", {"p_start": start.isoformat(), "p_end": None}
        )

    def test_user_growth_looks_back_from_now(self):
        client = _rpc_client({"analytics_user_growth": [{"day": "2024-03-09", "count": 3}]})
        service = AnalyticsService(client=client)
        now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)

        assert service.user_growth(now=now) == [{"date": "2024-03-09", "count": 3}]
        client.rpc.assert_called_once_with(
            "analytics_user_growth", {"p_since": "2024-03-03T12:00:00+00:00"}
        )

    def test_top_careers_are_shaped_for_the_dashboard(self):
        client = _rpc_client(
            {
                "analytics_top_careers": [
                    {"career_id": "c1", "career_title": "Data Engineer", "recommendation_count": 4, "average_score": "61.25"},
                    {"career_id": "c2", "career_title": "Analyst", "recommendation_count": 1, "average_score": None},
                ]
            }
        )
        service = AnalyticsService(client=client)

        assert service.top_careers(limit=5) == [
            {"career_id": "c1", "career_title": "Data Engineer", "recommendation_count": 4, "average_score": 61.25},
            {"career_id": "c2", "career_title": "Analyst", "recommendation_count": 1, "average_score": 0.0},
        ]
        client.rpc.assert_called_once_with("analytics_top_careers", {"p_limit": 5})

    def test_recommendation_stats_default_to_zero(self):
        service = AnalyticsService(client=_rpc_client({"analytics_recommendation_stats": []}))

        assert service.recommendation_stats() == {
            "total_recommendations": 0,
            "average_score": 0.0,
            "average_match_percentage": 0.0,
        }

    def test_summary_combines_counts_and_aggregates(self):
        builder = _builder(data=[], count=2)
        client = _rpc_client(
            {
                "analytics_user_count": 5,
                "analytics_user_growth": [],
                "analytics_top_careers": [],
                "analytics_popular_skills": [
                    {"skill_id": "s1", "name": "Python", "category": "Programming", "user_count": 3}
                ],
                "analytics_event_counts": [{"event_type": "LOGIN", "count": 9, "last_activity": None}],
                "analytics_recommendation_stats": [
                    {"total_recommendations": 2, "average_score": 40.5, "average_match_percentage": 50}
                ],
            }
        )
        client.table.return_value = builder
        service = AnalyticsService(client=client)

        summary = service.summary()

        assert summary["overview"] == {
            "total_users": 5,
            "total_careers": 2,
            "total_courses": 2,
            "total_skills": 2,
            "total_recommendations": 2,
        }
        assert summary["popular_skills"][0]["name"] == "Python"
        assert summary["events_summary"] == [{"event_type": "LOGIN", "count": 9, "last_activity": None}]
        assert summary["recommendation_stats"]["average_match_percentage"] == 50.0

    def test_user_activity_reads_recent_events(self):
        builder = _builder(data=[{"id": "a1", "event_type": "LOGIN"}])
        client = _rpc_client({"analytics_event_counts": []})
        client.table.return_value = builder
        service = AnalyticsService(client=client)

        activity = service.user_activity("u1")

        assert activity == {"activities": [{"id": "a1", "event_type": "LOGIN"}], "summary": []}
        builder.eq.assert_called_once_with("user_id", "u1")
        builder.order.assert_called_once_with("created_at", desc=True)
        builder.limit.assert_called_once_with(50)
        client.rpc.assert_called_once_with("analytics_event_counts", {"p_user_id": "u1"})

    def test_function_failure_raises_service_error(self):
        client = MagicMock()
        client.rpc.return_value.execute.side_effect = RuntimeError("function missing")
        service = AnalyticsService(client=client)

        with pytest.raises(AnalyticsServiceError):
            service.top_careers()
