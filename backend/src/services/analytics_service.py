from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from services.supabase_service import SupabaseService, SupabaseServiceError

logger = logging.getLogger(__name__)

# Tables counted in the dashboard overview, keyed by the overview field name.
COUNTED_TABLES = {
    "total_careers": "careers",
    "total_courses": "courses",
    "total_skills": "skills",
    "total_recommendations": "recommendations",
}

USER_GROWTH_DAYS = 7
TOP_LIMIT = 10
RECENT_EVENTS_LIMIT = 50


class AnalyticsServiceError(SupabaseServiceError):
    """Raised when analytics recording or aggregation fails."""


class AnalyticsService(SupabaseService):
    """Usage events in the ``analytics`` table plus dashboard aggregates.

    Aggregates run in Postgres through the ``analytics_*`` functions in
    ``db/schema.sql``; this class only shapes their results.
    """

    table_name = "analytics"
    error_cls = AnalyticsServiceError

    def _rpc(self, function: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self.client.rpc(function, params or {}).execute()
        except Exception as exc:
            raise self._fail(f"run {function}", exc) from exc
        return response.data

    def record_event(
        self,
        event_type: str,
        *,
        user_id: Optional[str] = None,
        event_data: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        row = self._insert(
            {
                "user_id": user_id,
                "event_type": event_type,
                "event_data": event_data,
                "metadata": metadata,
            }
        )
        logger.debug(f"Recorded analytics event {event_type} for user {user_id}")
        return row

    def count_rows(
        self,
        table: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        try:
            query = self.client.table(table).select("id", count="exact")
            if start:
                query = query.gte("created_at", start.isoformat())
            if end:
                query = query.lte("created_at", end.isoformat())
            response = query.limit(1).execute()
        except Exception as exc:
            raise self._fail(f"count {table}", exc) from exc
        return response.count or 0

    def user_count(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> int:
        data = self._rpc(
            "analytics_user_count",
            {
                "p_start": start.isoformat() if start else None,
                "p_end": end.isoformat() if end else None,
            },
        )
        return int(data or 0)

    def user_growth(self, days: int = USER_GROWTH_DAYS, *, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        since = (now or datetime.now(timezone.utc)) - timedelta(days=days)
        rows = self._rpc("analytics_user_growth", {"p_since": since.isoformat()}) or []
        return [{"date": str(row["day"]), "count": int(row["count"])} for row in rows]

    def top_careers(self, limit: int = TOP_LIMIT) -> List[Dict[str, Any]]:
        rows = self._rpc("analytics_top_careers", {"p_limit": limit}) or []
        return [
            {
                "career_id": str(row["career_id"]),
                "career_title": row["career_title"],
                "recommendation_count": int(row["recommendation_count"]),
                "average_score": float(row["average_score"] or 0),
            }
            for row in rows
        ]

    def popular_skills(self, limit: int = TOP_LIMIT) -> List[Dict[str, Any]]:
        rows = self._rpc("analytics_popular_skills", {"p_limit": limit}) or []
        return [
            {
                "skill_id": str(row["skill_id"]),
                "name": row["name"],
                "category": row.get("category"),
                "user_count": int(row["user_count"]),
            }
            for row in rows
        ]

    def event_counts(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        rows = self._rpc("analytics_event_counts", {"p_user_id": user_id}) or []
        return [
            {
                "event_type": row["event_type"],
                "count": int(row["count"]),
                "last_activity": row.get("last_activity"),
            }
            for row in rows
        ]

    def recommendation_stats(self) -> Dict[str, Any]:
        rows = self._rpc("analytics_recommendation_stats") or []
        row = rows[0] if rows else {}
        return {
            "total_recommendations": int(row.get("total_recommendations") or 0),
            "average_score": float(row.get("average_score") or 0),
            "average_match_percentage": float(row.get("average_match_percentage") or 0),
        }

    def recent_events(self, user_id: str, limit: int = RECENT_EVENTS_LIMIT) -> List[Dict[str, Any]]:
        try:
            response = (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail(f"retrieve analytics for user {user_id}", exc) from exc

    def summary(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict[str, Any]:
        """Dashboard figures. ``start``/``end`` bound the overview totals only."""
        overview = {"total_users": self.user_count(start, end)}
        for field, table in COUNTED_TABLES.items():
            overview[field] = self.count_rows(table, start, end)
        return {
            "overview": overview,
            "user_growth": self.user_growth(),
            "top_careers": self.top_careers(),
            "popular_skills": self.popular_skills(),
            "events_summary": self.event_counts(),
            "recommendation_stats": self.recommendation_stats(),
        }

    def user_activity(self, user_id: str) -> Dict[str, Any]:
        return {
            "activities": self.recent_events(user_id),
            "summary": self.event_counts(user_id),
        }
