"""Career catalog endpoints. Reads are public, writes need an admin."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import AuthContext, get_careers_service, get_skills_service, require_admin
from api.errors import not_found, to_http_exception
from api.models.catalog_models import (
    Career,
    CareerCreate,
    CareerPage,
    CareerUpdate,
    CareerWithSkills,
    SkillRef,
)
from services import CareersService, SkillsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/careers", tags=["Careers"])


@router.post("", response_model=Career, status_code=status.HTTP_201_CREATED)
def create_career(
    body: CareerCreate,
    _: AuthContext = Depends(require_admin),
    service: CareersService = Depends(get_careers_service),
) -> Career:
    """Create a career. Titles are unique regardless of case."""
    payload = body.model_dump(mode="json")
    payload["required_skills"] = list(dict.fromkeys(payload["required_skills"]))
    try:
        row = service.create_career(payload)
    except Exception as exc:
        raise to_http_exception(exc)
    return Career(**row)


@router.get("", response_model=CareerPage)
def list_careers(
    industry: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches title or description"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: CareersService = Depends(get_careers_service),
) -> CareerPage:
    try:
        rows, total = service.list_careers(industry=industry, search=search, page=page, limit=limit)
    except Exception as exc:
        raise to_http_exception(exc)
    return CareerPage(items=[Career(**row) for row in rows], total=total, page=page, limit=limit)


@router.get("/{career_id}", response_model=CareerWithSkills)
def get_career(
    career_id: str,
    service: CareersService = Depends(get_careers_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> CareerWithSkills:
    try:
        row = service.get_career(career_id)
        if not row:
            raise not_found("Career not found", code="career_not_found")
        skill_ids = [str(sid) for sid in row.get("required_skills") or []]
        skills = {str(s["id"]): s for s in skills_service.get_skills(skill_ids)}
    except HTTPException:
        raise
    except Exception as exc:
        raise to_http_exception(exc)

    required = []
    for sid in skill_ids:
        skill = skills.get(sid) or {}
        required.append(SkillRef(id=sid, name=skill.get("name"), category=skill.get("category")))
    return CareerWithSkills(
        id=str(row["id"]),
        title=row["title"],
        description=row.get("description"),
        industry=row.get("industry"),
        level=row.get("level"),
        average_salary=row.get("average_salary"),
        growth_rate=row.get("growth_rate"),
        required_skills=required,
    )


@router.put("/{career_id}", response_model=Career)
def update_career(
    career_id: str,
    body: CareerUpdate,
    _: AuthContext = Depends(require_admin),
    service: CareersService = Depends(get_careers_service),
) -> Career:
    payload = body.model_dump(mode="json", exclude_unset=True)
    if payload.get("required_skills") is not None:
        payload["required_skills"] = list(dict.fromkeys(payload["required_skills"]))
    try:
        row = service.update_career(career_id, payload)
    except Exception as exc:
        raise to_http_exception(exc)
    if not row:
        raise not_found("Career not found", code="career_not_found")
    return Career(**row)


@router.delete("/{career_id}")
def delete_career(
    career_id: str,
    _: AuthContext = Depends(require_admin),
    service: CareersService = Depends(get_careers_service),
) -> dict:
    try:
        deleted = service.delete_career(career_id)
    except Exception as exc:
        raise to_http_exception(exc)
    if not deleted:
        raise not_found("Career not found", code="career_not_found")
    return {"ok": True, "message": "Career deleted successfully"}
