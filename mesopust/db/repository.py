# mesopust/db/repository.py
"""
Read-only access to the Mesopust tables.

The search pipeline and the social tab take a `SearchRepository` instead of
reaching for a global client, so tests can hand in fakes.

`SupabaseSearchRepository` is the production implementation: one PostgREST
request per call, no retries, no caching.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from postgrest.exceptions import APIError
from supabase import Client

logger = logging.getLogger(__name__)


class SearchRepository(Protocol):
    def fetch_matching(
        self,
        table: str,
        columns: Sequence[str],
        search_columns: Sequence[str],
        pattern: str,
    ) -> list[dict[str, Any]]:
        """Rows where any of *search_columns* ilike-matches *pattern*."""
        ...

    def list_rows(
        self,
        table: str,
        columns: Sequence[str],
        order_by: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """All rows of *table*, optionally ascending by *order_by*."""
        ...


def _quote_filter_value(value: str) -> str:
    """
    Double-quote a value for a PostgREST logic-tree filter.

    Inside quotes, reserved characters (, . : ( )) lose their meaning;
    only backslash and double quote need escaping.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_or_filter(search_columns: Sequence[str], pattern: str) -> str:
    """
    Build the `or` expression for a multi-column ilike match.

    >>> build_or_filter(["name", "name_local"], "%sop%")
    'name.ilike."%sop%",name_local.ilike."%sop%"'
    """
    value = _quote_filter_value(pattern)
    return ",".join(f"{col}.ilike.{value}" for col in search_columns)


def api_error_fields(e: APIError) -> dict[str, Any]:
    """`code` and `message` of a PostgREST error, read from attributes or the raw payload."""
    payload = e.args[0] if e.args and isinstance(e.args[0], dict) else {}
    return {
        "code": getattr(e, "code", None) or payload.get("code"),
        "message": getattr(e, "message", None) or payload.get("message") or str(e),
    }


class SupabaseSearchRepository:
    """SearchRepository backed by a supabase-py client."""

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def from_env(cls) -> "SupabaseSearchRepository":
        from mesopust.db.supabase_client import get_supabase_client

        return cls(get_supabase_client())

    def fetch_matching(
        self,
        table: str,
        columns: Sequence[str],
        search_columns: Sequence[str],
        pattern: str,
    ) -> list[dict[str, Any]]:
        try:
            resp = (
                self.client.table(table)
                .select(",".join(columns))
                .or_(build_or_filter(search_columns, pattern))
                .execute()
            )
        except APIError as e:
            err = api_error_fields(e)
            logger.warning(
                "[repo] fetch_matching FAILED table=%s code=%s message=%s",
                table, err.get("code"), err.get("message"),
            )
            raise

        return list(getattr(resp, "data", None) or [])

    def list_rows(
        self,
        table: str,
        columns: Sequence[str],
        order_by: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        query = self.client.table(table).select(",".join(columns))
        if order_by:
            query = query.order(order_by, desc=False)

        try:
            resp = query.execute()
        except APIError as e:
            err = api_error_fields(e)
            logger.warning(
                "[repo] list_rows FAILED table=%s code=%s message=%s",
                table, err.get("code"), err.get("message"),
            )
            raise

        return list(getattr(resp, "data", None) or [])
