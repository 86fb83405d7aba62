from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ProficiencyLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"

    @property
    def weight(self) -> int:
        """Numeric weight used when scoring careers."""
        return _LEVEL_WEIGHTS[self]

    @classmethod
    def parse(cls, value: str) -> "ProficiencyLevel":
        """Accept any casing (``"advanced"``, ``"Advanced"``) of a level name."""
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(level.value for level in cls)
            raise ValueError(f"Invalid skill level '{value}'. Must be one of {allowed}") from None


_LEVEL_WEIGHTS = {
    ProficiencyLevel.BEGINNER: 1,
    ProficiencyLevel.INTERMEDIATE: 2,
    ProficiencyLevel.ADVANCED: 3,
}


@dataclass(slots=True)
class Skill:
    id: str
    name: Optional[str] = None
    category: Optional[str] = None


@dataclass(slots=True)
class UserSkill:
    user_id: str
    skill_id: str
    level: ProficiencyLevel
    id: Optional[str] = None


@dataclass(slots=True)
class Career:
    id: str
    title: str
    required_skills: List[str] = field(default_factory=list)
    description: Optional[str] = None
    industry: Optional[str] = None
    level: Optional[str] = None
    average_salary: Optional[float] = None
    growth_rate: Optional[float] = None


@dataclass(slots=True)
class Course:
    id: str
    title: str
    provider: Optional[str] = None
    difficulty: Optional[str] = None
    url: Optional[str] = None
    skills_taught: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ScoredCareer:
    """Intermediate scoring result for a single career."""

    career_id: str
    matched_skills: int
    total_required_skills: int
    match_percentage: int
    score: float


@dataclass(slots=True)
class RecommendationRecord:
    user_id: str
    career_id: str
    score: float
    match_percentage: int
    reason: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class CareerDetail:
    id: str
    title: str
    description: Optional[str] = None
    industry: Optional[str] = None
    average_salary: Optional[float] = None
    growth_rate: Optional[float] = None
    required_skills: List[Skill] = field(default_factory=list)


@dataclass(slots=True)
class RecommendationDetail:
    """A persisted recommendation joined with the career it points at."""

    record: RecommendationRecord
    career: CareerDetail
    suggested_courses: List[Course] = field(default_factory=list)


@dataclass(slots=True)
class HeldSkill:
    skill: Skill
    level: ProficiencyLevel


@dataclass(slots=True)
class CareerSummary:
    id: str
    title: str


@dataclass(slots=True)
class GapResult:
    career: CareerSummary
    readiness_percentage: int
    held_skills: List[HeldSkill] = field(default_factory=list)
    missing_skills: List[Skill] = field(default_factory=list)
    suggested_courses: List[Course] = field(default_factory=list)
