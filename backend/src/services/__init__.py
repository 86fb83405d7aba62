"""Supabase table services for the career recommendation backend.

Each service owns one table and raises its own ``*ServiceError``;
``SupabaseRecommendationStore`` adapts them to the recommendation core.
"""

from .analytics_service import AnalyticsService, AnalyticsServiceError
from .careers_service import CareersService, CareersServiceError
from .courses_service import CoursesService, CoursesServiceError
from .recommendation_store import SupabaseRecommendationStore
from .recommendations_service import RecommendationsService, RecommendationsServiceError
from .skills_service import SkillsService, SkillsServiceError
from .supabase_service import DuplicateRecordError, SupabaseServiceError
from .user_skills_service import UserSkillsService, UserSkillsServiceError

__all__ = [
    "AnalyticsService",
    "AnalyticsServiceError",
    "CareersService",
    "CareersServiceError",
    "CoursesService",
    "CoursesServiceError",
    "DuplicateRecordError",
    "RecommendationsService",
    "RecommendationsServiceError",
    "SkillsService",
    "SkillsServiceError",
    "SupabaseRecommendationStore",
    "SupabaseServiceError",
    "UserSkillsService",
    "UserSkillsServiceError",
]
