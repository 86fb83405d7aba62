from __future__ import annotations

import logging

from .errors import CareerNotFound
from .models import CareerSummary, GapResult, HeldSkill, Skill
from .scoring import round_half_up
from .store import RecommendationStore

logger = logging.getLogger(__name__)

DEFAULT_COURSE_LIMIT = 10


class SkillGapAnalyzer:
    """Compare a user's skills with what a target career requires.

    Results are computed on every call and never persisted.
    """

    def __init__(self, store: RecommendationStore, *, course_limit: int = DEFAULT_COURSE_LIMIT) -> None:
        self.store = store
        self.course_limit = course_limit

    def analyze(self, user_id: str, career_id: str) -> GapResult:
        career = self.store.find_career_by_id(career_id)
        if career is None:
            raise CareerNotFound(f"Career {career_id} not found")

        levels = {entry.skill_id: entry.level for entry in self.store.find_user_skills(user_id)}
        required = list(dict.fromkeys(career.required_skills))
        skills_by_id = {skill.id: skill for skill in self.store.find_skills_by_ids(required)} if required else {}

        held_skills = []
        missing_skills = []
        for skill_id in required:
            skill = skills_by_id.get(skill_id) or Skill(id=skill_id)
            if skill_id in levels:
                held_skills.append(HeldSkill(skill=skill, level=levels[skill_id]))
            else:
                missing_skills.append(skill)

        readiness = int(round_half_up(100 * len(held_skills) / len(required))) if required else 0

        suggested_courses = []
        if missing_skills and self.course_limit > 0:
            suggested_courses = self.store.find_courses_teaching_any(
                [skill.id for skill in missing_skills], self.course_limit
            )

        logger.debug(
            f"Gap analysis user={user_id} career={career_id}: "
            f"{len(held_skills)} held, {len(missing_skills)} missing, readiness {readiness}%"
        )
        return GapResult(
            career=CareerSummary(id=career.id, title=career.title),
            readiness_percentage=readiness,
            held_skills=held_skills,
            missing_skills=missing_skills,
            suggested_courses=suggested_courses[: self.course_limit],
        )
