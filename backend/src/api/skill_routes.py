"""Skill catalog endpoints. Reads are public, writes need an admin."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import AuthContext, get_skills_service, require_admin
from api.errors import not_found, to_http_exception
from api.models.catalog_models import Skill, SkillCreate, SkillPage, SkillUpdate
from services import SkillsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/skills", tags=["Skills"])


@router.post("", response_model=Skill, status_code=status.HTTP_201_CREATED)
def create_skill(
    body: SkillCreate,
    _: AuthContext = Depends(require_admin),
    service: SkillsService = Depends(get_skills_service),
) -> Skill:
    try:
        row = service.create_skill(body.model_dump(mode="json"))
    except Exception as exc:
        raise to_http_exception(exc)
    return Skill(**row)


@router.get("", response_model=SkillPage)
def list_skills(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive name match"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    service: SkillsService = Depends(get_skills_service),
) -> SkillPage:
    try:
        rows, total = service.list_skills(category=category, search=search, page=page, limit=limit)
    except Exception as exc:
        raise to_http_exception(exc)
    return SkillPage(items=[Skill(**row) for row in rows], total=total, page=page, limit=limit)


@router.get("/{skill_id}", response_model=Skill)
def get_skill(skill_id: str, service: SkillsService = Depends(get_skills_service)) -> Skill:
    try:
        row = service.get_skill(skill_id)
    except Exception as exc:
        raise to_http_exception(exc)
    if not row:
        raise not_found("Skill not found")
    return Skill(**row)


@router.put("/{skill_id}", response_model=Skill)
def update_skill(
    skill_id: str,
    body: SkillUpdate,
    _: AuthContext = Depends(require_admin),
    service: SkillsService = Depends(get_skills_service),
) -> Skill:
    try:
        row = service.update_skill(skill_id, body.model_dump(mode="json", exclude_unset=True))
    except Exception as exc:
        raise to_http_exception(exc)
    if not row:
        raise not_found("Skill not found")
    return Skill(**row)


@router.delete("/{skill_id}")
def delete_skill(
    skill_id: str,
    _: AuthContext = Depends(require_admin),
    service: SkillsService = Depends(get_skills_service),
) -> dict:
    try:
        deleted = service.delete_skill(skill_id)
    except Exception as exc:
        raise to_http_exception(exc)
    if not deleted:
        raise not_found("Skill not found")
    return {"ok": True, "message": "Skill deleted successfully"}
