"""User skill registry endpoints and skill gap analysis."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import (
    AuthContext,
    ensure_owner_or_admin,
    get_auth_context,
    get_gap_analyzer,
    get_skills_service,
    get_user_skills_service,
    require_admin,
)
from api.errors import not_found, to_http_exception
from api.models.recommendation_models import SkillGapResponse, gap_response_from_result
from api.models.user_skill_models import (
    BulkUserSkillRequest,
    BulkUserSkillResponse,
    SkillHoldersResponse,
    UserSkill,
    UserSkillCreate,
    UserSkillsResponse,
    UserSkillUpdate,
)
from recommender import ProficiencyLevel, SkillGapAnalyzer
from services import SkillsService, UserSkillsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user-skills", tags=["User Skills"])


def _parse_level_filter(level: Optional[str]) -> Optional[str]:
    if not level:
        return None
    try:
        return ProficiencyLevel.parse(level).value
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"code": "validation_error", "message": str(exc)},
        )


def _to_user_skill(row: Mapping[str, Any], skills: Mapping[str, Mapping[str, Any]]) -> UserSkill:
    skill = skills.get(str(row.get("skill_id"))) or {}
    return UserSkill(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        skill_id=str(row["skill_id"]),
        level=row["level"],
        skill_name=skill.get("name"),
        skill_category=skill.get("category"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _with_skill_names(rows: List[Dict[str, Any]], skills_service: SkillsService) -> List[UserSkill]:
    skill_ids = list(dict.fromkeys(str(row["skill_id"]) for row in rows))
    skills = {str(s["id"]): s for s in skills_service.get_skills(skill_ids)}
    return [_to_user_skill(row, skills) for row in rows]


def _load_owned_entry(entry_id: str, auth: AuthContext, service: UserSkillsService) -> Dict[str, Any]:
    entry = service.get_entry(entry_id)
    if not entry:
        raise not_found("User skill not found")
    ensure_owner_or_admin(auth, str(entry.get("user_id")))
    return entry


@router.post("", response_model=UserSkill, status_code=status.HTTP_201_CREATED)
def add_user_skill(
    body: UserSkillCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: UserSkillsService = Depends(get_user_skills_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> UserSkill:
    """Add a skill to a user's profile. Each skill can only be added once per user."""
    ensure_owner_or_admin(auth, body.user_id)
    try:
        skill = skills_service.get_skill(body.skill_id)
        if not skill:
            raise not_found("Skill not found")
        row = service.add_skill(body.user_id, body.skill_id, body.level)
    except HTTPException:
        raise
    except Exception as exc:
        raise to_http_exception(exc)
    return _to_user_skill(row, {str(skill["id"]): skill})


@router.post("/bulk", response_model=BulkUserSkillResponse)
def bulk_add_user_skills(
    body: BulkUserSkillRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: UserSkillsService = Depends(get_user_skills_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> BulkUserSkillResponse:
    """Add several skills at once; duplicates are skipped, unknown skills reported."""
    ensure_owner_or_admin(auth, body.user_id)
    try:
        skill_ids = list(dict.fromkeys(entry.skill_id for entry in body.skills))
        known = {str(s["id"]): s for s in skills_service.get_skills(skill_ids)}
        results = service.bulk_add(
            body.user_id,
            [entry.model_dump() for entry in body.skills],
            known,
        )
    except Exception as exc:
        raise to_http_exception(exc)
    return BulkUserSkillResponse(**results)


@router.get("/user/{user_id}", response_model=UserSkillsResponse)
def get_user_skills(
    user_id: str,
    level: Optional[str] = Query(None, description="Filter by BEGINNER, INTERMEDIATE or ADVANCED"),
    auth: AuthContext = Depends(get_auth_context),
    service: UserSkillsService = Depends(get_user_skills_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> UserSkillsResponse:
    ensure_owner_or_admin(auth, user_id)
    level_filter = _parse_level_filter(level)
    try:
        entries = _with_skill_names(service.list_for_user(user_id, level_filter), skills_service)
    except Exception as exc:
        raise to_http_exception(exc)

    by_level: Dict[str, List[UserSkill]] = {lvl.value: [] for lvl in ProficiencyLevel}
    for entry in entries:
        by_level.setdefault(entry.level, []).append(entry)
    return UserSkillsResponse(all_skills=entries, by_level=by_level, total=len(entries))


@router.get("/skill/{skill_id}", response_model=SkillHoldersResponse)
def get_users_by_skill(
    skill_id: str,
    level: Optional[str] = Query(None),
    _: AuthContext = Depends(require_admin),
    service: UserSkillsService = Depends(get_user_skills_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> SkillHoldersResponse:
    """Admin view of every user holding a skill, with counts per level."""
    level_filter = _parse_level_filter(level)
    try:
        entries = _with_skill_names(service.list_for_skill(skill_id, level_filter), skills_service)
    except Exception as exc:
        raise to_http_exception(exc)

    counts = {lvl.value: 0 for lvl in ProficiencyLevel}
    for entry in entries:
        if entry.level in counts:
            counts[entry.level] += 1
    return SkillHoldersResponse(users=entries, total=len(entries), by_level=counts)


@router.get("/gap-analysis/{user_id}/{career_id}", response_model=SkillGapResponse)
def get_skill_gap_analysis(
    user_id: str,
    career_id: str,
    auth: AuthContext = Depends(get_auth_context),
    analyzer: SkillGapAnalyzer = Depends(get_gap_analyzer),
) -> SkillGapResponse:
    """Split a career's required skills into held and missing, with courses for the gaps."""
    ensure_owner_or_admin(auth, user_id)
    try:
        result = analyzer.analyze(user_id, career_id)
    except Exception as exc:
        raise to_http_exception(exc)
    return gap_response_from_result(result)


@router.put("/{entry_id}", response_model=UserSkill)
def update_user_skill(
    entry_id: str,
    body: UserSkillUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: UserSkillsService = Depends(get_user_skills_service),
    skills_service: SkillsService = Depends(get_skills_service),
) -> UserSkill:
    try:
        _load_owned_entry(entry_id, auth, service)
        row = service.update_level(entry_id, body.level)
        if not row:
            raise not_found("User skill not found")
        return _with_skill_names([row], skills_service)[0]
    except HTTPException:
        raise
    except Exception as exc:
        raise to_http_exception(exc)


@router.delete("/{entry_id}")
def delete_user_skill(
    entry_id: str,
    auth: AuthContext = Depends(get_auth_context),
    service: UserSkillsService = Depends(get_user_skills_service),
) -> dict:
    try:
        _load_owned_entry(entry_id, auth, service)
        service.remove_skill(entry_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise to_http_exception(exc)
    return {"ok": True, "message": "Skill removed from user profile successfully"}
