from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AnalyticsEventCreate(BaseModel):
    event_type: str = Field(..., min_length=1, max_length=100, description="e.g. RECOMMENDATIONS_GENERATED")
    user_id: Optional[str] = Field(None, description="Defaults to the caller")
    event_data: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None


class AnalyticsEvent(BaseModel):
    id: str
    user_id: Optional[str] = None
    event_type: str
    event_data: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


class Overview(BaseModel):
    total_users: int
    total_careers: int
    total_courses: int
    total_skills: int
    total_recommendations: int


class DailyCount(BaseModel):
    date: str
    count: int


class TopCareer(BaseModel):
    career_id: str
    career_title: str
    recommendation_count: int
    average_score: float


class PopularSkill(BaseModel):
    skill_id: str
    name: str
    category: Optional[str] = None
    user_count: int


class EventCount(BaseModel):
    event_type: str
    count: int
    last_activity: Optional[datetime] = None


class RecommendationStats(BaseModel):
    total_recommendations: int
    average_score: float
    average_match_percentage: float


class AnalyticsSummary(BaseModel):
    overview: Overview
    user_growth: List[DailyCount]
    top_careers: List[TopCareer]
    popular_skills: List[PopularSkill]
    events_summary: List[EventCount]
    recommendation_stats: RecommendationStats


class UserAnalytics(BaseModel):
    activities: List[AnalyticsEvent]
    summary: List[EventCount]
