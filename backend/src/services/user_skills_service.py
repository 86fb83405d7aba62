from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from services.supabase_service import (
    DuplicateRecordError,
    SupabaseService,
    SupabaseServiceError,
)

logger = logging.getLogger(__name__)


class UserSkillsServiceError(SupabaseServiceError):
    """Raised when user skill registry operations fail."""


class UserSkillsService(SupabaseService):
    """User skill registry stored in ``user_skills``.

    One row per (user_id, skill_id); ``level`` is BEGINNER, INTERMEDIATE or ADVANCED.
    """

    table_name = "user_skills"
    error_cls = UserSkillsServiceError

    def list_for_user(self, user_id: str, level: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            query = self._table().select("*").eq("user_id", user_id)
            if level:
                query = query.eq("level", level)
            response = query.order("created_at", desc=True).execute()
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail(f"retrieve skills for user {user_id}", exc) from exc

    def list_for_skill(self, skill_id: str, level: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            query = self._table().select("*").eq("skill_id", skill_id)
            if level:
                query = query.eq("level", level)
            response = query.order("created_at", desc=True).execute()
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail(f"retrieve users for skill {skill_id}", exc) from exc

    def find_entry(self, user_id: str, skill_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .eq("skill_id", skill_id)
                .limit(1)
                .execute()
            )
            data = self._handle_response(response.data)
            return data[0] if data else None
        except Exception as exc:
            raise self._fail(f"look up skill {skill_id} for user {user_id}", exc) from exc

    def get_entry(self, entry_id: str) -> Optional[Dict[str, Any]]:
        return self._get_by_id(entry_id)

    def add_skill(self, user_id: str, skill_id: str, level: str) -> Dict[str, Any]:
        if self.find_entry(user_id, skill_id):
            raise DuplicateRecordError(
                "User already has this skill. Use the update endpoint to modify level."
            )
        return self._insert({"user_id": user_id, "skill_id": skill_id, "level": level})

    def update_level(self, entry_id: str, level: str) -> Optional[Dict[str, Any]]:
        return self._update(entry_id, {"level": level})

    def remove_skill(self, entry_id: str) -> bool:
        return self._delete(entry_id)

    def bulk_add(
        self,
        user_id: str,
        entries: List[Mapping[str, Any]],
        known_skills: Mapping[str, Mapping[str, Any]],
    ) -> Dict[str, List[Dict[str, Any]]]:
        """Add several skills, reporting each one as added, skipped or errored.

        ``known_skills`` maps skill id to its catalog row; ids missing from it
        are reported as errors rather than inserted.
        """
        results: Dict[str, List[Dict[str, Any]]] = {"added": [], "skipped": [], "errors": []}
        for entry in entries:
            skill_id = entry["skill_id"]
            level = entry.get("level") or "BEGINNER"
            skill = known_skills.get(skill_id)
            if skill is None:
                results["errors"].append({"skill_id": skill_id, "reason": "Skill not found"})
                continue
            try:
                row = self.add_skill(user_id, skill_id, level)
            except DuplicateRecordError:
                results["skipped"].append(
                    {"skill_id": skill_id, "skill_name": skill.get("name"), "reason": "Already exists"}
                )
                continue
            except UserSkillsServiceError as exc:
                logger.warning(f"Bulk add of skill {skill_id} for user {user_id} failed: {exc}")
                results["errors"].append({"skill_id": skill_id, "reason": str(exc)})
                continue
            results["added"].append(
                {
                    "id": row.get("id"),
                    "skill_id": skill_id,
                    "skill_name": skill.get("name"),
                    "level": row.get("level", level),
                }
            )
        return results

    def user_ids(self) -> List[str]:
        """Every user id with at least one registered skill."""
        try:
            response = self._table().select("user_id").execute()
            data = self._handle_response(response.data)
            return list(dict.fromkeys(str(row["user_id"]) for row in data))
        except Exception as exc:
            raise self._fail("list users with skills", exc) from exc
