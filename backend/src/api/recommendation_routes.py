"""Career recommendation endpoints: generate, rebuild, list and delete."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import (
    AuthContext,
    ensure_owner_or_admin,
    get_auth_context,
    get_recommendation_engine,
    get_recommendations_service,
)
from api.errors import not_found, to_http_exception
from api.models.recommendation_models import (
    GenerateRecommendationsRequest,
    RecommendationListResponse,
    recommendation_from_detail,
)
from recommender import RecommendationEngine
from services import RecommendationsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recommendations", tags=["Recommendations"])


@router.post("/generate/{user_id}", response_model=RecommendationListResponse)
def generate_recommendations(
    user_id: str,
    payload: Optional[GenerateRecommendationsRequest] = None,
    auth: AuthContext = Depends(get_auth_context),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> RecommendationListResponse:
    """Score every career for the user and replace their stored recommendations.

    - **limit**: number of careers to keep (server default when omitted)

    Returns an empty list, not an error, when no career shares a skill with
    the user.
    """
    ensure_owner_or_admin(auth, user_id)
    limit = payload.limit if payload else None
    try:
        details = engine.generate(user_id, limit)
    except Exception as exc:
        raise to_http_exception(exc)

    if not details:
        return RecommendationListResponse(
            message="No career recommendations found based on current skills",
            data=[],
        )
    return RecommendationListResponse(
        message="Career recommendations generated successfully",
        data=[recommendation_from_detail(detail) for detail in details],
    )


@router.post("/rebuild/{user_id}", response_model=RecommendationListResponse)
def rebuild_recommendations(
    user_id: str,
    auth: AuthContext = Depends(get_auth_context),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> RecommendationListResponse:
    """Recompute the user's stored recommendations from their current skills."""
    ensure_owner_or_admin(auth, user_id)
    try:
        details = engine.rebuild(user_id)
    except Exception as exc:
        raise to_http_exception(exc)
    return RecommendationListResponse(
        message=f"Rebuilt {len(details)} recommendations",
        data=[recommendation_from_detail(detail) for detail in details],
    )


@router.get("/user/{user_id}", response_model=RecommendationListResponse)
def get_recommendations_by_user(
    user_id: str,
    auth: AuthContext = Depends(get_auth_context),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> RecommendationListResponse:
    """Return the stored recommendations with suggested courses for each career."""
    ensure_owner_or_admin(auth, user_id)
    try:
        details = engine.list_recommendations(user_id)
    except Exception as exc:
        raise to_http_exception(exc)

    if not details:
        raise not_found("No recommendations found for this user")
    return RecommendationListResponse(
        message="Recommendations retrieved",
        data=[recommendation_from_detail(detail, include_courses=True) for detail in details],
    )


@router.delete("/{recommendation_id}")
def delete_recommendation(
    recommendation_id: str,
    auth: AuthContext = Depends(get_auth_context),
    service: RecommendationsService = Depends(get_recommendations_service),
) -> dict:
    try:
        recommendation = service.get_recommendation(recommendation_id)
        if not recommendation:
            raise not_found("Recommendation not found")
        ensure_owner_or_admin(auth, str(recommendation.get("user_id")))
        service.delete_recommendation(recommendation_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise to_http_exception(exc)
    return {"ok": True, "message": "Recommendation deleted successfully"}
