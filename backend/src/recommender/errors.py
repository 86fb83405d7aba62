from __future__ import annotations


class RecommenderError(Exception):
    """Base error for the recommendation core.

    ``code`` is a stable machine-readable identifier surfaced to API clients.
    """

    default_code = "recommender_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(RecommenderError):
    default_code = "validation_error"


class NoSkillsRegistered(ValidationError):
    default_code = "no_skills_registered"


class NotFoundError(RecommenderError):
    default_code = "not_found"


class CareerNotFound(NotFoundError):
    default_code = "career_not_found"


class ConflictError(RecommenderError):
    default_code = "conflict"


class StoreError(RecommenderError):
    default_code = "store_error"
