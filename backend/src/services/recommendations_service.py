from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from services.supabase_service import SupabaseService, SupabaseServiceError

logger = logging.getLogger(__name__)

REPLACE_FUNCTION = "replace_user_recommendations"


class RecommendationsServiceError(SupabaseServiceError):
    """Raised when recommendation persistence fails."""


class RecommendationsService(SupabaseService):
    """Stored recommendation sets in the ``recommendations`` table."""

    table_name = "recommendations"
    error_cls = RecommendationsServiceError

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            response = (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("score", desc=True)
                .order("career_id")
                .execute()
            )
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail(f"retrieve recommendations for user {user_id}", exc) from exc

    def replace_for_user(self, user_id: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Swap the user's whole recommendation set in one transaction.

        The ``replace_user_recommendations`` database function deletes and
        inserts under a per-user advisory lock, so concurrent callers never see
        or produce a half-replaced set. Returns the inserted rows.
        """
        try:
            response = self.client.rpc(
                REPLACE_FUNCTION,
                {"p_user_id": user_id, "p_records": list(rows)},
            ).execute()
            data = self._handle_response(response.data)
            logger.info(f"Replaced recommendations for user {user_id}: {len(data)} stored")
            return data
        except Exception as exc:
            raise self._fail(f"replace recommendations for user {user_id}", exc) from exc

    def get_recommendation(self, recommendation_id: str) -> Optional[Dict[str, Any]]:
        return self._get_by_id(recommendation_id)

    def delete_recommendation(self, recommendation_id: str) -> bool:
        return self._delete(recommendation_id)

    def user_ids(self) -> List[str]:
        """Every user id with at least one stored recommendation."""
        try:
            response = self._table().select("user_id").execute()
            data = self._handle_response(response.data)
            return list(dict.fromkeys(str(row["user_id"]) for row in data))
        except Exception as exc:
            raise self._fail("list users with recommendations", exc) from exc
