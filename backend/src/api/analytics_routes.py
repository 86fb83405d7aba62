"""Usage analytics: event recording, the admin dashboard summary and per-user activity."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import (
    AuthContext,
    ensure_owner_or_admin,
    get_analytics_service,
    get_auth_context,
    require_admin,
)
from api.errors import to_http_exception
from api.models.analytics_models import (
    AnalyticsEvent,
    AnalyticsEventCreate,
    AnalyticsSummary,
    UserAnalytics,
)
from services import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.post("", response_model=AnalyticsEvent, status_code=status.HTTP_201_CREATED)
def record_event(
    body: AnalyticsEventCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsEvent:
    """Record a usage event for the caller (admins may record for any user)."""
    user_id = body.user_id or auth.user_id
    ensure_owner_or_admin(auth, user_id)
    event_type = body.event_type.strip()
    if not event_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "validation_error", "message": "Please provide event type"},
        )
    try:
        row = service.record_event(
            event_type,
            user_id=user_id,
            event_data=body.event_data,
            metadata=body.metadata,
        )
    except Exception as exc:
        raise to_http_exception(exc)
    return AnalyticsEvent(**row)


@router.get("/summary", response_model=AnalyticsSummary)
def get_summary(
    start_date: Optional[datetime] = Query(None, description="Lower bound for overview totals"),
    end_date: Optional[datetime] = Query(None, description="Upper bound for overview totals"),
    _: AuthContext = Depends(require_admin),
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSummary:
    """Dashboard totals, 7-day user growth, top careers, popular skills and event counts."""
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "validation_error", "message": "start_date must not be after end_date"},
        )
    try:
        summary = service.summary(start_date, end_date)
    except Exception as exc:
        raise to_http_exception(exc)
    return AnalyticsSummary(**summary)


@router.get("/user/{user_id}", response_model=UserAnalytics)
def get_user_analytics(
    user_id: str,
    auth: AuthContext = Depends(get_auth_context),
    service: AnalyticsService = Depends(get_analytics_service),
) -> UserAnalytics:
    ensure_owner_or_admin(auth, user_id)
    try:
        activity = service.user_activity(user_id)
    except Exception as exc:
        raise to_http_exception(exc)
    return UserAnalytics(**activity)
