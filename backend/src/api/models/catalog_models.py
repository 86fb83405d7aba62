from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, HttpUrl

CareerLevel = Literal["JUNIOR", "MID", "SENIOR"]
Difficulty = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

class SkillBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2048)


class SkillCreate(SkillBase):
    pass


class SkillUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2048)


class SkillRef(BaseModel):
    id: str
    name: Optional[str] = None
    category: Optional[str] = None

    class Config:
        from_attributes = True


class Skill(SkillBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SkillPage(BaseModel):
    items: List[Skill]
    total: int
    page: int
    limit: int


# ---------------------------------------------------------------------------
# Careers
# ---------------------------------------------------------------------------

class CareerBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=4000)
    industry: Optional[str] = Field(None, max_length=255)
    level: Optional[CareerLevel] = None
    average_salary: Optional[float] = Field(None, ge=0)
    growth_rate: Optional[float] = None
    required_skills: List[str] = Field(default_factory=list, description="Skill ids")


class CareerCreate(CareerBase):
    pass


class CareerUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=4000)
    industry: Optional[str] = Field(None, max_length=255)
    level: Optional[CareerLevel] = None
    average_salary: Optional[float] = Field(None, ge=0)
    growth_rate: Optional[float] = None
    required_skills: Optional[List[str]] = None


class Career(CareerBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CareerWithSkills(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    industry: Optional[str] = None
    level: Optional[str] = None
    average_salary: Optional[float] = None
    growth_rate: Optional[float] = None
    required_skills: List[SkillRef] = Field(default_factory=list)


class CareerPage(BaseModel):
    items: List[Career]
    total: int
    page: int
    limit: int


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------

class CourseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    provider: str = Field(..., min_length=1, max_length=255)
    difficulty: Difficulty
    url: HttpUrl
    skills_taught: List[str] = Field(default_factory=list, description="Skill ids")


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    provider: Optional[str] = Field(None, min_length=1, max_length=255)
    difficulty: Optional[Difficulty] = None
    url: Optional[HttpUrl] = None
    skills_taught: Optional[List[str]] = None


class Course(BaseModel):
    id: str
    title: str
    provider: Optional[str] = None
    difficulty: Optional[str] = None
    url: Optional[str] = None
    skills_taught: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True


class CoursePage(BaseModel):
    items: List[Course]
    total: int
    page: int
    limit: int
