from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from services.supabase_service import (
    DuplicateRecordError,
    SupabaseService,
    SupabaseServiceError,
    contains_pattern,
    normalize_key,
)

logger = logging.getLogger(__name__)


class SkillsServiceError(SupabaseServiceError):
    """Raised when skill catalog operations fail."""


class SkillsService(SupabaseService):
    """Skill catalog stored in the ``skills`` table."""

    table_name = "skills"
    error_cls = SkillsServiceError

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._table().select("*").eq("name_key", normalize_key(name)).limit(1).execute()
            data = self._handle_response(response.data)
            return data[0] if data else None
        except Exception as exc:
            raise self._fail(f"look up skill '{name}'", exc) from exc

    def list_skills(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[List[Dict[str, Any]], int]:
        try:
            query = self._table().select("*", count="exact")
            if category:
                query = query.eq("category", category)
            if search:
                query = query.ilike("name", contains_pattern(search))
            return self._paginate(query.order("name"), page, limit)
        except Exception as exc:
            raise self._fail("list skills", exc) from exc

    def get_skill(self, skill_id: str) -> Optional[Dict[str, Any]]:
        return self._get_by_id(skill_id)

    def get_skills(self, skill_ids: List[str]) -> List[Dict[str, Any]]:
        return self._get_by_ids(skill_ids)

    def create_skill(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.find_by_name(payload["name"]):
            raise DuplicateRecordError(f"Skill '{payload['name']}' already exists")
        return self._insert(payload)

    def update_skill(self, skill_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        name = payload.get("name")
        if name:
            existing = self.find_by_name(name)
            if existing and existing.get("id") != skill_id:
                raise DuplicateRecordError(f"Skill '{name}' already exists")
        return self._update(skill_id, payload)

    def delete_skill(self, skill_id: str) -> bool:
        return self._delete(skill_id)
