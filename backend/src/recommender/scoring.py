"""Career match scoring.

A career's score blends two signals:

- match percentage: share of the career's required skills the user holds
  (0-100), weighted at 70%;
- average proficiency of the matched skills (1-3, scaled x10), weighted at 30%.

All functions here are pure; the skill weight map is built per call by the
engine and never shared between requests.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Optional

from .models import Career, ScoredCareer, UserSkill

MATCH_WEIGHT = 0.7
PROFICIENCY_WEIGHT = 0.3
PROFICIENCY_SCALE = 10


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up (12.5 -> 13), unlike Python's banker's rounding."""
    factor = 10 ** digits
    # Nudge by a tiny epsilon so values like 46.9 + 6.0 = 52.8999... land on 52.9.
    return math.floor(value * factor + 0.5 + 1e-9) / factor


def build_skill_weights(user_skills: Iterable[UserSkill]) -> Dict[str, int]:
    return {entry.skill_id: entry.level.weight for entry in user_skills}


def score_career(career: Career, weights: Mapping[str, int]) -> Optional[ScoredCareer]:
    """Score one career against a user's skill weights.

    Returns ``None`` when the career cannot be matched: it requires no skills,
    or the user holds none of them.
    """
    required = list(dict.fromkeys(career.required_skills))
    if not required:
        return None

    matched = 0
    total_score = 0
    for skill_id in required:
        weight = weights.get(skill_id)
        if weight is not None:
            matched += 1
            total_score += weight

    match_percentage = int(round_half_up(100 * matched / len(required)))
    if match_percentage == 0:
        return None

    average_proficiency = total_score / matched if matched else 0
    score = round_half_up(
        MATCH_WEIGHT * match_percentage + PROFICIENCY_WEIGHT * (average_proficiency * PROFICIENCY_SCALE),
        2,
    )
    return ScoredCareer(
        career_id=career.id,
        matched_skills=matched,
        total_required_skills=len(required),
        match_percentage=match_percentage,
        score=score,
    )


def rank_careers(
    careers: Iterable[Career],
    weights: Mapping[str, int],
    limit: Optional[int] = None,
) -> List[ScoredCareer]:
    """Score every career, drop the unmatched ones and order best first.

    Equal scores are ordered by career id so the ranking never depends on the
    order the catalog happened to return rows in.
    """
    scored = [result for result in (score_career(career, weights) for career in careers) if result]
    scored.sort(key=lambda item: (-item.score, item.career_id))
    if limit is not None:
        scored = scored[:limit]
    return scored


def match_reason(scored: ScoredCareer) -> str:
    return f"Matched {scored.matched_skills} out of {scored.total_required_skills} required skills"
