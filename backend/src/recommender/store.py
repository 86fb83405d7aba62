from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from .models import Career, Course, RecommendationRecord, Skill, UserSkill


class RecommendationStore(Protocol):
    """Data access the recommendation core depends on.

    Catalog reads are snapshots. The only writes are to a user's
    recommendation set, and ``replace_recommendations`` must swap the whole
    set atomically: a reader never observes a mix of old and new records.
    """

    def find_user_skills(self, user_id: str) -> List[UserSkill]:
        ...

    def find_all_careers(self) -> List[Career]:
        ...

    def find_career_by_id(self, career_id: str) -> Optional[Career]:
        ...

    def find_careers_by_ids(self, career_ids: Sequence[str]) -> List[Career]:
        ...

    def find_skills_by_ids(self, skill_ids: Sequence[str]) -> List[Skill]:
        ...

    def find_courses_teaching_any(self, skill_ids: Sequence[str], limit: int) -> List[Course]:
        ...

    def find_recommendations(self, user_id: str) -> List[RecommendationRecord]:
        ...

    def replace_recommendations(
        self, user_id: str, records: Sequence[RecommendationRecord]
    ) -> List[RecommendationRecord]:
        ...
