from __future__ import annotations

from datetime import datetime
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, Field

from recommender.models import ProficiencyLevel


def _normalize_level(value):
    if value is None:
        return value
    return ProficiencyLevel.parse(value).value


# Accepts any casing, stores the canonical upper-case level name.
Level = Annotated[str, BeforeValidator(_normalize_level)]


class UserSkillCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    skill_id: str = Field(..., min_length=1)
    level: Level


class UserSkillUpdate(BaseModel):
    level: Level


class BulkSkillEntry(BaseModel):
    skill_id: str = Field(..., min_length=1)
    level: Optional[Level] = None


class BulkUserSkillRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    skills: List[BulkSkillEntry] = Field(..., min_length=1)


class UserSkill(BaseModel):
    id: str
    user_id: str
    skill_id: str
    level: str
    skill_name: Optional[str] = None
    skill_category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSkillsResponse(BaseModel):
    all_skills: List[UserSkill]
    by_level: Dict[str, List[UserSkill]]
    total: int


class SkillHoldersResponse(BaseModel):
    users: List[UserSkill]
    total: int
    by_level: Dict[str, int]


class BulkResultItem(BaseModel):
    skill_id: str
    id: Optional[str] = None
    skill_name: Optional[str] = None
    level: Optional[str] = None
    reason: Optional[str] = None


class BulkUserSkillResponse(BaseModel):
    added: List[BulkResultItem] = Field(default_factory=list)
    skipped: List[BulkResultItem] = Field(default_factory=list)
    errors: List[BulkResultItem] = Field(default_factory=list)
