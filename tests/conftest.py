"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
BACKEND_SRC = PROJECT_ROOT / "backend" / "src"

# Make backend/src importable (api, config, recommender, services, main).
if str(BACKEND_SRC) not in sys.path:
    sys.path.insert(0, str(BACKEND_SRC))

# Set required env vars BEFORE importing so config checks pass.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-service-role-key")

from fakes import InMemoryRecommendationStore  # noqa: E402
from recommender.models import ProficiencyLevel  # noqa: E402


@pytest.fixture
def store() -> InMemoryRecommendationStore:
    """Empty in-memory store."""
    return InMemoryRecommendationStore()


@pytest.fixture
def seeded_store() -> InMemoryRecommendationStore:
    """Store with a small catalog and one user holding python (ADVANCED) and sql (BEGINNER).

    - data-engineer requires python, sql, spark
    - backend-dev requires python, docker
    - designer requires figma (no overlap)
    - placeholder requires nothing
    """
    s = InMemoryRecommendationStore()
    for skill_id in ("python", "sql", "spark", "docker", "figma"):
        s.add_skill(skill_id)
    s.add_career("data-engineer", ["python", "sql", "spark"], title="Data Engineer")
    s.add_career("backend-dev", ["python", "docker"], title="Backend Developer")
    s.add_career("designer", ["figma"], title="Designer")
    s.add_career("placeholder", [], title="Placeholder")
    s.add_course("course-1", ["spark"], title="Spark Fundamentals")
    s.add_course("course-2", ["docker", "spark"], title="Containers and Clusters")
    s.add_course("course-3", ["python"], title="Python Basics")
    s.set_user_skill("user-1", "python", ProficiencyLevel.ADVANCED)
    s.set_user_skill("user-1", "sql", ProficiencyLevel.BEGINNER)
    return s
