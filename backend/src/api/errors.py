"""Translate service and core errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from recommender.errors import (
    ConflictError,
    NotFoundError,
    RecommenderError,
    StoreError,
    ValidationError,
)
from services.supabase_service import DuplicateRecordError, SupabaseServiceError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def not_found(message: str, code: str = "not_found") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": code, "message": message},
    )


def to_http_exception(exc: Exception) -> HTTPException:
    """Map an error raised below the routes to an ``HTTPException``.

    Store failures are logged with their detail and reported to the client
    with a generic message only.
    """
    if isinstance(exc, RecommenderError) and not isinstance(exc, StoreError):
        for error_cls, status_code in _STATUS_BY_ERROR:
            if isinstance(exc, error_cls):
                return HTTPException(
                    status_code=status_code,
                    detail={"code": exc.code, "message": exc.message},
                )

    if isinstance(exc, DuplicateRecordError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "conflict", "message": str(exc)},
        )

    if isinstance(exc, (StoreError, SupabaseServiceError)):
        logger.error(f"Storage error: {exc}")
    else:
        logger.exception("Unexpected error handling request")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": "server_error", "message": "An unexpected error occurred"},
    )
