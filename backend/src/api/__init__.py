# API routes module
# Contains all API endpoint definitions

from .analytics_routes import router as analytics_router
from .career_routes import router as career_router
from .course_routes import router as course_router
from .recommendation_routes import router as recommendation_router
from .skill_routes import router as skill_router
from .user_skill_routes import router as user_skill_router

__all__ = [
    "analytics_router",
    "career_router",
    "course_router",
    "recommendation_router",
    "skill_router",
    "user_skill_router",
]
