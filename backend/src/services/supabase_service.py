from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from config.settings import get_settings

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation.
UNIQUE_VIOLATION = "23505"


class SupabaseServiceError(Exception):
    """Raised when a Supabase table operation fails."""


class DuplicateRecordError(SupabaseServiceError):
    """Raised when a write would break a uniqueness constraint."""


def is_unique_violation(exc: BaseException) -> bool:
    code = getattr(exc, "code", None)
    if code == UNIQUE_VIOLATION:
        return True
    return "duplicate key" in str(exc).lower()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    """Build an ``ilike`` pattern matching ``value`` anywhere in the column.

    PostgREST rewrites ``*`` to ``%`` in like patterns, so a literal ``*`` is
    matched as a single-character wildcard instead.
    """
    return f"%{escape_like(value).replace('*', '_')}%"


def quote_filter_value(value: str) -> str:
    """Double-quote a value for a PostgREST logic tree (``or=(...)``).

    Quoting keeps ``,``, ``.``, ``:`` and parentheses in user input from being
    read as filter syntax.
    """
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def normalize_key(value: str) -> str:
    """Case-folded form stored in the ``*_key`` columns used for uniqueness."""
    return value.strip(" ").lower()


class SupabaseService:
    """Shared client setup for services backed by a single Supabase table."""

    table_name: str = ""
    error_cls = SupabaseServiceError

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        *,
        client: Optional[Client] = None,
    ) -> None:
        if client is not None:
            self.client = client
            return

        settings = get_settings()
        self.supabase_url = supabase_url or settings.supabase_url
        self.supabase_key = supabase_key or settings.supabase_key

        if not self.supabase_url or not self.supabase_key:
            raise self.error_cls("Supabase credentials not configured.")

        try:
            self.client = create_client(self.supabase_url, self.supabase_key)
        except Exception as exc:
            raise self.error_cls(f"Failed to initialize Supabase client: {exc}") from exc

    def _table(self):
        return self.client.table(self.table_name)

    def _handle_response(self, response: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Handle Supabase response data."""
        if response is not None:
            return response
        logger.error(f"Supabase operation on {self.table_name} returned None")
        raise self.error_cls("Supabase operation returned None")

    def _fail(self, action: str, exc: Exception) -> SupabaseServiceError:
        if isinstance(exc, SupabaseServiceError):
            return exc
        if is_unique_violation(exc):
            return DuplicateRecordError(f"Failed to {action}: record already exists")
        logger.error(f"Failed to {action}: {exc}")
        return self.error_cls(f"Failed to {action}: {exc}")

    def _get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._table().select("*").eq("id", record_id).limit(1).execute()
            data = self._handle_response(response.data)
            return data[0] if data else None
        except Exception as exc:
            raise self._fail(f"retrieve {self.table_name} record {record_id}", exc) from exc

    def _get_by_ids(self, record_ids: List[str]) -> List[Dict[str, Any]]:
        if not record_ids:
            return []
        try:
            response = self._table().select("*").in_("id", list(record_ids)).execute()
            return self._handle_response(response.data)
        except Exception as exc:
            raise self._fail(f"retrieve {self.table_name} records", exc) from exc

    def _insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._table().insert(payload).execute()
            data = self._handle_response(response.data)
            if not data:
                raise self.error_cls(f"Insert into {self.table_name} returned no rows")
            return data[0]
        except Exception as exc:
            raise self._fail(f"create {self.table_name} record", exc) from exc

    def _update(self, record_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not payload:
            return self._get_by_id(record_id)
        try:
            response = self._table().update(payload).eq("id", record_id).execute()
            data = self._handle_response(response.data)
            return data[0] if data else None
        except Exception as exc:
            raise self._fail(f"update {self.table_name} record {record_id}", exc) from exc

    def _delete(self, record_id: str) -> bool:
        try:
            response = self._table().delete().eq("id", record_id).execute()
            data = self._handle_response(response.data)
            return bool(data)
        except Exception as exc:
            raise self._fail(f"delete {self.table_name} record {record_id}", exc) from exc

    def _paginate(self, query, page: int, limit: int) -> tuple[List[Dict[str, Any]], int]:
        start = (page - 1) * limit
        response = query.range(start, start + limit - 1).execute()
        data = self._handle_response(response.data)
        total = response.count if response.count is not None else len(data)
        return data, total
