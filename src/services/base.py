"""
Shared plumbing for Supabase-backed services.

Every remote call goes through ``SupabaseService._run`` which times it,
logs failures and converts them to BackendError. There is no retry: the
caller surfaces a "try again" notice and the user retries by hand.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from supabase import Client

from src.config.settings import Settings, get_settings
from src.core.exceptions import BackendError
from src.monitoring.metrics import track_backend_operation

logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Postgres timestamp as returned by PostgREST."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class SupabaseService:
    """Base class for services that talk to Supabase tables and RPCs."""

    def __init__(self, supabase: Client, settings: Optional[Settings] = None) -> None:
        self._supabase = supabase
        self._settings = settings or get_settings()

    def _table(self, name: str):
        return self._supabase.table(name)

    def _run(self, table: str, operation: str, query) -> Any:
        """
        Execute a prepared query.

        Raises:
            BackendError: If the call fails for any reason.
        """
        try:
            with track_backend_operation(table, operation):
                return query.execute()
        except Exception as e:
            logger.error(
                "backend_call_failed",
                table=table,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise BackendError(f"{table}.{operation}", str(e)) from e

    def _rpc(self, function: str, params: dict[str, Any]) -> Any:
        return self._run(function, "rpc", self._supabase.rpc(function, params))

    def _count(self, table: str, **filters: Any) -> int:
        """Head count of rows matching equality filters."""
        query = self._table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = self._run(table, "count", query)
        return result.count or 0
