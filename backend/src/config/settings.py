from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration read from the environment (and a local .env file)."""

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    recommendation_default_limit: int = 5
    recommendation_limit_max: int = 50
    recommendation_course_limit: int = 3
    gap_course_limit: int = 10
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default
    if value < minimum:
        logger.warning(f"Ignoring {name}={value} below {minimum}, using {default}")
        return default
    return value


def supabase_key_from_env() -> Optional[str]:
    return (
        os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        or os.getenv("SUPABASE_KEY")
        or os.getenv("SUPABASE_ANON_KEY")
    )


def load_settings() -> Settings:
    default_limit = _int_env("RECOMMENDATION_DEFAULT_LIMIT", 5, minimum=1)
    limit_max = _int_env("RECOMMENDATION_LIMIT_MAX", 50, minimum=1)
    if default_limit > limit_max:
        logger.warning(
            f"RECOMMENDATION_DEFAULT_LIMIT={default_limit} exceeds RECOMMENDATION_LIMIT_MAX={limit_max}; clamping"
        )
        default_limit = limit_max

    origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=supabase_key_from_env(),
        recommendation_default_limit=default_limit,
        recommendation_limit_max=limit_max,
        recommendation_course_limit=_int_env("RECOMMENDATION_COURSE_LIMIT", 3),
        gap_course_limit=_int_env("GAP_COURSE_LIMIT", 10),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_allow_origins=origins or ["*"],
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
