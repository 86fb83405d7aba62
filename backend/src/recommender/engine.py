"""Recommendation engine: scores careers for a user and persists the ranking."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import NoSkillsRegistered, StoreError, ValidationError
from .models import (
    Career,
    CareerDetail,
    RecommendationDetail,
    RecommendationRecord,
    Skill,
)
from .scoring import build_skill_weights, match_reason, rank_careers
from .store import RecommendationStore

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
MAX_LIMIT = 50
DEFAULT_COURSES_PER_RECOMMENDATION = 3


class UserLockRegistry:
    """Hands out one lock per user id, dropping it once nobody holds or waits on it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: Dict[str, list] = {}

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.setdefault(user_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._entries.pop(user_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


class RecommendationEngine:
    """Generate, rebuild and read back a user's career recommendations.

    Recommendations are a derived cache of the user skill registry and the
    career catalog. Regenerations for the same user are serialized in-process,
    and the store swaps the persisted set in a single transaction.
    """

    def __init__(
        self,
        store: RecommendationStore,
        *,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        courses_per_recommendation: int = DEFAULT_COURSES_PER_RECOMMENDATION,
        locks: Optional[UserLockRegistry] = None,
    ) -> None:
        self.store = store
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.courses_per_recommendation = courses_per_recommendation
        self._locks = locks or UserLockRegistry()

    def validate_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValidationError("limit must be an integer", code="invalid_limit")
        if limit < 1 or limit > self.max_limit:
            raise ValidationError(
                f"limit must be between 1 and {self.max_limit}", code="invalid_limit"
            )
        return limit

    def generate(self, user_id: str, limit: Optional[int] = None) -> List[RecommendationDetail]:
        """Score all careers for ``user_id`` and replace the stored ranking.

        Returns an empty list, leaving stored records untouched, when no career
        shares a skill with the user.

        Raises:
            ValidationError: ``limit`` is out of range.
            NoSkillsRegistered: the user has no skills.
            StoreError: reading the catalog or persisting the ranking failed.
        """
        limit = self.validate_limit(limit)
        with self._locks.hold(user_id):
            return self._generate_locked(user_id, limit, clear_when_empty=False)

    def rebuild(self, user_id: str) -> List[RecommendationDetail]:
        """Recompute the stored ranking from source data.

        Keeps the size of the previous ranking (the default limit when there
        was none). Unlike ``generate`` this clears stale records when nothing
        qualifies any more, so it is safe to run for any user at any time.
        """
        with self._locks.hold(user_id):
            previous = self.store.find_recommendations(user_id)
            limit = min(len(previous), self.max_limit) if previous else self.default_limit
            try:
                return self._generate_locked(user_id, limit, clear_when_empty=True)
            except NoSkillsRegistered:
                if previous:
                    logger.info(f"Clearing {len(previous)} stale recommendations for user {user_id}")
                    self.store.replace_recommendations(user_id, [])
                return []

    def list_recommendations(self, user_id: str) -> List[RecommendationDetail]:
        """Return the stored ranking with a few courses for each career's skills."""
        records = self.store.find_recommendations(user_id)
        if not records:
            return []
        careers = self.store.find_careers_by_ids(
            list(dict.fromkeys(record.career_id for record in records))
        )
        details = self._join(records, careers)
        for detail in details:
            skill_ids = [skill.id for skill in detail.career.required_skills]
            if skill_ids:
                detail.suggested_courses = self.store.find_courses_teaching_any(
                    skill_ids, self.courses_per_recommendation
                )
        return details

    def _generate_locked(
        self, user_id: str, limit: int, *, clear_when_empty: bool
    ) -> List[RecommendationDetail]:
        user_skills = self.store.find_user_skills(user_id)
        if not user_skills:
            raise NoSkillsRegistered("User has no skills registered. Please add skills first.")

        weights = build_skill_weights(user_skills)
        careers = self.store.find_all_careers()
        ranked = rank_careers(careers, weights, limit)
        logger.info(
            f"Scored {len(careers)} careers for user {user_id}: {len(ranked)} qualified (limit {limit})"
        )

        if not ranked:
            if clear_when_empty:
                self.store.replace_recommendations(user_id, [])
            return []

        records = [
            RecommendationRecord(
                user_id=user_id,
                career_id=item.career_id,
                score=item.score,
                match_percentage=item.match_percentage,
                reason=match_reason(item),
            )
            for item in ranked
        ]
        try:
            persisted = self.store.replace_recommendations(user_id, records)
        except StoreError:
            logger.error(f"Failed to persist {len(records)} recommendations for user {user_id}")
            raise
        if len(persisted) != len(records):
            raise StoreError(
                f"Expected {len(records)} persisted recommendations, store returned {len(persisted)}"
            )
        return self._join(persisted, careers)

    def _join(
        self, records: Sequence[RecommendationRecord], careers: Iterable[Career]
    ) -> List[RecommendationDetail]:
        careers_by_id = {career.id: career for career in careers}
        wanted = [careers_by_id[r.career_id] for r in records if r.career_id in careers_by_id]
        skill_ids = list(dict.fromkeys(sid for career in wanted for sid in career.required_skills))
        skills_by_id = {skill.id: skill for skill in self.store.find_skills_by_ids(skill_ids)} if skill_ids else {}

        details: List[RecommendationDetail] = []
        for record in sorted(records, key=lambda r: (-r.score, r.career_id)):
            career = careers_by_id.get(record.career_id)
            if career is None:
                # Career deleted after the ranking was stored.
                logger.warning(f"Recommendation {record.id} points at missing career {record.career_id}")
                continue
            details.append(
                RecommendationDetail(
                    record=record,
                    career=CareerDetail(
                        id=career.id,
                        title=career.title,
                        description=career.description,
                        industry=career.industry,
                        average_salary=career.average_salary,
                        growth_rate=career.growth_rate,
                        required_skills=[
                            skills_by_id.get(sid) or Skill(id=sid) for sid in career.required_skills
                        ],
                    ),
                )
            )
        return details
