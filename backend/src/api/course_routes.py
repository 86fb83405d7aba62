"""Course catalog endpoints. Reads are public, writes need an admin."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import AuthContext, get_courses_service, require_admin
from api.errors import not_found, to_http_exception
from api.models.catalog_models import Course, CourseCreate, CoursePage, CourseUpdate, Difficulty
from services import CoursesService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["Courses"])


def _to_course(row: Dict[str, Any]) -> Course:
    return Course(
        id=str(row["id"]),
        title=row["title"],
        provider=row.get("provider"),
        difficulty=row.get("difficulty"),
        url=row.get("url"),
        skills_taught=[str(sid) for sid in row.get("skills_taught") or []],
    )


@router.post("", response_model=Course, status_code=status.HTTP_201_CREATED)
def create_course(
    body: CourseCreate,
    _: AuthContext = Depends(require_admin),
    service: CoursesService = Depends(get_courses_service),
) -> Course:
    payload = body.model_dump(mode="json")
    payload["skills_taught"] = list(dict.fromkeys(payload["skills_taught"]))
    try:
        row = service.create_course(payload)
    except Exception as exc:
        raise to_http_exception(exc)
    return _to_course(row)


@router.get("", response_model=CoursePage)
def list_courses(
    provider: Optional[str] = Query(None),
    difficulty: Optional[Difficulty] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: CoursesService = Depends(get_courses_service),
) -> CoursePage:
    try:
        rows, total = service.list_courses(provider=provider, difficulty=difficulty, page=page, limit=limit)
    except Exception as exc:
        raise to_http_exception(exc)
    return CoursePage(items=[_to_course(row) for row in rows], total=total, page=page, limit=limit)


@router.get("/{course_id}", response_model=Course)
def get_course(course_id: str, service: CoursesService = Depends(get_courses_service)) -> Course:
    try:
        row = service.get_course(course_id)
    except Exception as exc:
        raise to_http_exception(exc)
    if not row:
        raise not_found("Course not found")
    return _to_course(row)


@router.put("/{course_id}", response_model=Course)
def update_course(
    course_id: str,
    body: CourseUpdate,
    _: AuthContext = Depends(require_admin),
    service: CoursesService = Depends(get_courses_service),
) -> Course:
    payload = body.model_dump(mode="json", exclude_unset=True)
    if payload.get("skills_taught") is not None:
        payload["skills_taught"] = list(dict.fromkeys(payload["skills_taught"]))
    try:
        row = service.update_course(course_id, payload)
    except Exception as exc:
        raise to_http_exception(exc)
    if not row:
        raise not_found("Course not found")
    return _to_course(row)


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    _: AuthContext = Depends(require_admin),
    service: CoursesService = Depends(get_courses_service),
) -> dict:
    try:
        deleted = service.delete_course(course_id)
    except Exception as exc:
        raise to_http_exception(exc)
    if not deleted:
        raise not_found("Course not found")
    return {"ok": True, "message": "Course deleted successfully"}
