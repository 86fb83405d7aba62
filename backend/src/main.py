# main.py
# Entry point for the career recommendation backend.
# - Initializes FastAPI app and logging
# - Registers API routes (skills, careers, courses, user skills, recommendations, analytics)
# - Provides root health-check endpoints
# - Run with: uvicorn src.main:app --reload  (from backend/)
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

sys.path.insert(0, str(Path(__file__).parent))
from api import (
    analytics_router,
    career_router,
    course_router,
    recommendation_router,
    skill_router,
    user_skill_router,
)
from config.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Career Recommendation API",
    description="Skill-based career recommendations and skill gap analysis",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def root():
    return {"status": "healthy", "message": "Backend API is running"}

@app.get("/health")
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


# Register API routes
app.include_router(skill_router)
app.include_router(career_router)
app.include_router(course_router)
app.include_router(user_skill_router)
app.include_router(recommendation_router)
app.include_router(analytics_router)
