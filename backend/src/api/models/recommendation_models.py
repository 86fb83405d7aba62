from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from api.models.catalog_models import Course, SkillRef
from recommender.models import GapResult, RecommendationDetail


class GenerateRecommendationsRequest(BaseModel):
    limit: Optional[int] = Field(None, description="Number of careers to return; server default when omitted")


class RecommendedCareer(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    industry: Optional[str] = None
    average_salary: Optional[float] = None
    growth_rate: Optional[float] = None
    required_skills: List[SkillRef] = Field(default_factory=list)


class Recommendation(BaseModel):
    id: Optional[str] = None
    user_id: str
    career_id: str
    score: float
    match_percentage: int = Field(..., ge=0, le=100)
    reason: str
    created_at: Optional[datetime] = None
    career: RecommendedCareer
    suggested_courses: Optional[List[Course]] = None


class RecommendationListResponse(BaseModel):
    message: str
    data: List[Recommendation]


class HeldSkill(BaseModel):
    skill: SkillRef
    level: str


class CareerSummary(BaseModel):
    id: str
    title: str


class SkillGapResponse(BaseModel):
    career: CareerSummary
    readiness_percentage: int = Field(..., ge=0, le=100)
    held_skills: List[HeldSkill]
    missing_skills: List[SkillRef]
    suggested_courses: List[Course]


def recommendation_from_detail(detail: RecommendationDetail, *, include_courses: bool = False) -> Recommendation:
    record = detail.record
    return Recommendation(
        id=record.id,
        user_id=record.user_id,
        career_id=record.career_id,
        score=record.score,
        match_percentage=record.match_percentage,
        reason=record.reason,
        created_at=record.created_at,
        career=RecommendedCareer(**asdict(detail.career)),
        suggested_courses=(
            [Course(**asdict(course)) for course in detail.suggested_courses] if include_courses else None
        ),
    )


def gap_response_from_result(result: GapResult) -> SkillGapResponse:
    return SkillGapResponse(
        career=CareerSummary(id=result.career.id, title=result.career.title),
        readiness_percentage=result.readiness_percentage,
        held_skills=[
            HeldSkill(skill=SkillRef(**asdict(held.skill)), level=held.level.value)
            for held in result.held_skills
        ],
        missing_skills=[SkillRef(**asdict(skill)) for skill in result.missing_skills],
        suggested_courses=[Course(**asdict(course)) for course in result.suggested_courses],
    )
