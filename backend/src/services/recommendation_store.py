"""Supabase-backed implementation of the recommendation core's store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Sequence

from recommender.errors import ConflictError, StoreError
from recommender.models import (
    Career,
    Course,
    ProficiencyLevel,
    RecommendationRecord,
    Skill,
    UserSkill,
)
from services.careers_service import CareersService
from services.courses_service import CoursesService
from services.recommendations_service import RecommendationsService
from services.skills_service import SkillsService
from services.supabase_service import DuplicateRecordError, SupabaseServiceError
from services.user_skills_service import UserSkillsService

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors() -> Iterator[None]:
    try:
        yield
    except DuplicateRecordError as exc:
        raise ConflictError(str(exc)) from exc
    except SupabaseServiceError as exc:
        raise StoreError(str(exc)) from exc


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def skill_from_row(row: Dict[str, Any]) -> Skill:
    return Skill(id=str(row["id"]), name=row.get("name"), category=row.get("category"))


def user_skill_from_row(row: Dict[str, Any]) -> UserSkill:
    return UserSkill(
        id=str(row["id"]) if row.get("id") is not None else None,
        user_id=str(row["user_id"]),
        skill_id=str(row["skill_id"]),
        level=ProficiencyLevel.parse(row.get("level") or ProficiencyLevel.BEGINNER.value),
    )


def career_from_row(row: Dict[str, Any]) -> Career:
    return Career(
        id=str(row["id"]),
        title=row.get("title") or "",
        required_skills=[str(sid) for sid in row.get("required_skills") or []],
        description=row.get("description"),
        industry=row.get("industry"),
        level=row.get("level"),
        average_salary=row.get("average_salary"),
        growth_rate=row.get("growth_rate"),
    )


def course_from_row(row: Dict[str, Any]) -> Course:
    return Course(
        id=str(row["id"]),
        title=row.get("title") or "",
        provider=row.get("provider"),
        difficulty=row.get("difficulty"),
        url=row.get("url"),
        skills_taught=[str(sid) for sid in row.get("skills_taught") or []],
    )


def recommendation_from_row(row: Dict[str, Any]) -> RecommendationRecord:
    return RecommendationRecord(
        id=str(row["id"]) if row.get("id") is not None else None,
        user_id=str(row["user_id"]),
        career_id=str(row["career_id"]),
        score=float(row["score"]),
        match_percentage=int(row["match_percentage"]),
        reason=row.get("reason") or "",
        created_at=_parse_timestamp(row.get("created_at")),
    )


def recommendation_to_row(record: RecommendationRecord) -> Dict[str, Any]:
    return {
        "user_id": record.user_id,
        "career_id": record.career_id,
        "score": record.score,
        "match_percentage": record.match_percentage,
        "reason": record.reason,
    }


class SupabaseRecommendationStore:
    """Adapts the table services to ``recommender.store.RecommendationStore``."""

    def __init__(
        self,
        *,
        skills: Optional[SkillsService] = None,
        careers: Optional[CareersService] = None,
        courses: Optional[CoursesService] = None,
        user_skills: Optional[UserSkillsService] = None,
        recommendations: Optional[RecommendationsService] = None,
    ) -> None:
        self.skills = skills or SkillsService()
        self.careers = careers or CareersService()
        self.courses = courses or CoursesService()
        self.user_skills = user_skills or UserSkillsService()
        self.recommendations = recommendations or RecommendationsService()

    def find_user_skills(self, user_id: str) -> List[UserSkill]:
        with _store_errors():
            return [user_skill_from_row(row) for row in self.user_skills.list_for_user(user_id)]

    def find_all_careers(self) -> List[Career]:
        with _store_errors():
            return [career_from_row(row) for row in self.careers.list_all()]

    def find_career_by_id(self, career_id: str) -> Optional[Career]:
        with _store_errors():
            row = self.careers.get_career(career_id)
        return career_from_row(row) if row else None

    def find_careers_by_ids(self, career_ids: Sequence[str]) -> List[Career]:
        with _store_errors():
            return [career_from_row(row) for row in self.careers.get_careers(list(career_ids))]

    def find_skills_by_ids(self, skill_ids: Sequence[str]) -> List[Skill]:
        with _store_errors():
            return [skill_from_row(row) for row in self.skills.get_skills(list(skill_ids))]

    def find_courses_teaching_any(self, skill_ids: Sequence[str], limit: int) -> List[Course]:
        with _store_errors():
            rows = self.courses.find_teaching_any(list(skill_ids), limit)
        return [course_from_row(row) for row in rows]

    def find_recommendations(self, user_id: str) -> List[RecommendationRecord]:
        with _store_errors():
            return [recommendation_from_row(row) for row in self.recommendations.list_for_user(user_id)]

    def replace_recommendations(
        self, user_id: str, records: Sequence[RecommendationRecord]
    ) -> List[RecommendationRecord]:
        rows = [recommendation_to_row(record) for record in records]
        with _store_errors():
            stored = self.recommendations.replace_for_user(user_id, rows)
        return [recommendation_from_row(row) for row in stored]
