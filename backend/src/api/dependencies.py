from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, Header, HTTPException, status

from config.settings import get_settings
from recommender import RecommendationEngine, SkillGapAnalyzer
from services import (
    AnalyticsService,
    CareersService,
    CoursesService,
    RecommendationsService,
    SkillsService,
    SupabaseRecommendationStore,
    SupabaseServiceError,
    UserSkillsService,
)

logger = logging.getLogger(__name__)

ADMIN_ROLES = {"ADMIN", "SUPER_ADMIN"}


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    access_token: str
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() in ADMIN_ROLES


def _raise_auth_error(message: str, status_code: int = status.HTTP_401_UNAUTHORIZED) -> None:
    raise HTTPException(
        status_code=status_code,
        detail={"code": "unauthorized", "message": message},
    )


async def _fetch_user(access_token: str) -> Dict[str, Any]:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "configuration_error", "message": "Supabase credentials missing"},
        )

    headers = {
        "Authorization": f"Bearer {access_token}",
        "apikey": settings.supabase_key,
        "Content-Type": "application/json",
    }
    async with httpx.AsyncClient(timeout=10) as client:
        response = await client.get(f"{settings.supabase_url}/auth/v1/user", headers=headers)

    if response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        _raise_auth_error("Invalid or expired access token")
    if response.status_code >= 400:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": "upstream_error", "message": "Failed to validate access token"},
        )

    payload = response.json()
    if not payload.get("id"):
        _raise_auth_error("Access token missing user id")
    return payload


def _role_from_user(user: Dict[str, Any]) -> Optional[str]:
    app_metadata = user.get("app_metadata") or {}
    role = app_metadata.get("role")
    return str(role).upper() if role else None


async def get_auth_context(authorization: Optional[str] = Header(default=None)) -> AuthContext:
    if not authorization:
        _raise_auth_error("Authorization header missing")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        _raise_auth_error("Authorization header must be Bearer token")

    access_token = parts[1].strip()
    if not access_token:
        _raise_auth_error("Access token missing")

    user = await _fetch_user(access_token)
    return AuthContext(
        user_id=user["id"],
        access_token=access_token,
        email=user.get("email"),
        role=_role_from_user(user),
    )


async def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not auth.is_admin:
        _raise_auth_error("Access denied. Admin privileges required.", status.HTTP_403_FORBIDDEN)
    return auth


def ensure_owner_or_admin(auth: AuthContext, user_id: str) -> None:
    """Allow access to ``user_id``'s resources for that user or any admin."""
    if auth.is_admin or auth.user_id == user_id:
        return
    _raise_auth_error(
        "Access denied. You can only access your own resources.", status.HTTP_403_FORBIDDEN
    )


# ---------------------------------------------------------------------------
# Service singletons
# ---------------------------------------------------------------------------

_services: Dict[str, Any] = {}
# Reentrant: the engine and analyzer factories resolve the store singleton.
_services_lock = threading.RLock()


def _service(name: str, factory):
    service = _services.get(name)
    if service is not None:
        return service
    with _services_lock:
        if name not in _services:
            try:
                _services[name] = factory()
            except SupabaseServiceError as exc:
                logger.error(f"Failed to initialize {name}: {exc}")
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail={"code": "service_unavailable", "message": "Storage backend unavailable"},
                )
        return _services[name]


def get_skills_service() -> SkillsService:
    return _service("skills", SkillsService)


def get_careers_service() -> CareersService:
    return _service("careers", CareersService)


def get_courses_service() -> CoursesService:
    return _service("courses", CoursesService)


def get_user_skills_service() -> UserSkillsService:
    return _service("user_skills", UserSkillsService)


def get_recommendations_service() -> RecommendationsService:
    return _service("recommendations", RecommendationsService)


def get_analytics_service() -> AnalyticsService:
    return _service("analytics", AnalyticsService)


def get_recommendation_store() -> SupabaseRecommendationStore:
    return _service(
        "store",
        lambda: SupabaseRecommendationStore(
            skills=get_skills_service(),
            careers=get_careers_service(),
            courses=get_courses_service(),
            user_skills=get_user_skills_service(),
            recommendations=get_recommendations_service(),
        ),
    )


def get_recommendation_engine() -> RecommendationEngine:
    settings = get_settings()
    return _service(
        "engine",
        lambda: RecommendationEngine(
            get_recommendation_store(),
            default_limit=settings.recommendation_default_limit,
            max_limit=settings.recommendation_limit_max,
            courses_per_recommendation=settings.recommendation_course_limit,
        ),
    )


def get_gap_analyzer() -> SkillGapAnalyzer:
    settings = get_settings()
    return _service(
        "gap_analyzer",
        lambda: SkillGapAnalyzer(get_recommendation_store(), course_limit=settings.gap_course_limit),
    )
