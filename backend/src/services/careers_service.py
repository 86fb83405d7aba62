from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from services.supabase_service import (
    DuplicateRecordError,
    SupabaseService,
    SupabaseServiceError,
    contains_pattern,
    normalize_key,
    quote_filter_value,
)

logger = logging.getLogger(__name__)


class CareersServiceError(SupabaseServiceError):
    """Raised when career catalog operations fail."""


class CareersService(SupabaseService):
    """Career catalog stored in the ``careers`` table.

    ``required_skills`` is a uuid[] column of skill ids.
    """

    table_name = "careers"
    error_cls = CareersServiceError

    def find_by_title(self, title: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive exact title lookup."""
        try:
            response = self._table().select("*").eq("title_key", normalize_key(title)).limit(1).execute()
            data = self._handle_response(response.data)
            return data[0] if data else None
        except Exception as exc:
            raise self._fail(f"look up career '{title}'", exc) from exc

    def list_all(self) -> List[Dict[str, Any]]:
        try:
            response = self._table().select("*").order("id").execute()
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail("list careers", exc) from exc

    def list_careers(
        self,
        *,
        industry: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[List[Dict[str, Any]], int]:
        try:
            query = self._table().select("*", count="exact")
            if industry:
                query = query.eq("industry", industry)
            if search:
                pattern = quote_filter_value(contains_pattern(search))
                query = query.or_(f"title.ilike.{pattern},description.ilike.{pattern}")
            return self._paginate(query.order("title"), page, limit)
        except Exception as exc:
            raise self._fail("list careers", exc) from exc

    def get_career(self, career_id: str) -> Optional[Dict[str, Any]]:
        return self._get_by_id(career_id)

    def get_careers(self, career_ids: List[str]) -> List[Dict[str, Any]]:
        return self._get_by_ids(career_ids)

    def create_career(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.find_by_title(payload["title"]):
            raise DuplicateRecordError(f"Career with title '{payload['title']}' already exists")
        return self._insert(payload)

    def update_career(self, career_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        title = payload.get("title")
        if title:
            existing = self.find_by_title(title)
            if existing and existing.get("id") != career_id:
                raise DuplicateRecordError(f"Career with title '{title}' already exists")
        return self._update(career_id, payload)

    def delete_career(self, career_id: str) -> bool:
        return self._delete(career_id)
