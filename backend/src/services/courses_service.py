from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from services.supabase_service import SupabaseService, SupabaseServiceError

logger = logging.getLogger(__name__)


class CoursesServiceError(SupabaseServiceError):
    """Raised when course catalog operations fail."""


class CoursesService(SupabaseService):
    """Course catalog stored in the ``courses`` table (``skills_taught`` is uuid[])."""

    table_name = "courses"
    error_cls = CoursesServiceError

    def list_courses(
        self,
        *,
        provider: Optional[str] = None,
        difficulty: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[List[Dict[str, Any]], int]:
        try:
            query = self._table().select("*", count="exact")
            if provider:
                query = query.eq("provider", provider)
            if difficulty:
                query = query.eq("difficulty", difficulty)
            return self._paginate(query.order("title"), page, limit)
        except Exception as exc:
            raise self._fail("list courses", exc) from exc

    def find_teaching_any(self, skill_ids: List[str], limit: int) -> List[Dict[str, Any]]:
        """Courses whose ``skills_taught`` overlaps ``skill_ids``, ordered by id."""
        if not skill_ids or limit <= 0:
            return []
        try:
            response = (
                self._table()
                .select("*")
                .overlaps("skills_taught", list(skill_ids))
                .order("id")
                .limit(limit)
                .execute()
            )
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail("find courses for skills", exc) from exc

    def get_course(self, course_id: str) -> Optional[Dict[str, Any]]:
        return self._get_by_id(course_id)

    def create_course(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert(payload)

    def update_course(self, course_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._update(course_id, payload)

    def delete_course(self, course_id: str) -> bool:
        return self._delete(course_id)
