# Career recommendation core.
# Scores careers against a user's skills and analyses skill gaps; all data
# access goes through the RecommendationStore protocol.

from .engine import RecommendationEngine, UserLockRegistry
from .errors import (
    CareerNotFound,
    ConflictError,
    NoSkillsRegistered,
    NotFoundError,
    RecommenderError,
    StoreError,
    ValidationError,
)
from .gap_analyzer import SkillGapAnalyzer
from .models import ProficiencyLevel

__all__ = [
    "CareerNotFound",
    "ConflictError",
    "NoSkillsRegistered",
    "NotFoundError",
    "ProficiencyLevel",
    "RecommendationEngine",
    "RecommenderError",
    "SkillGapAnalyzer",
    "StoreError",
    "UserLockRegistry",
    "ValidationError",
]
