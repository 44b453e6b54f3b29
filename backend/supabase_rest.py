"""
supabase_rest.py — HTTP row client for Supabase's PostgREST API.
Every table read/write in the app goes through these helpers; they only
support the simple predicates the screens need (equality, `in`, `not null`,
ordering, limit).
"""
import logging
import httpx
from urllib.parse import quote

from config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, HTTP_TIMEOUT

logger = logging.getLogger(__name__)


def _headers(prefer: str = "return=representation"):
    return {
        "apikey": SUPABASE_SERVICE_ROLE_KEY,
        "Authorization": f"Bearer {SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
        "Prefer": prefer,
    }


def _client() -> httpx.Client:
    return httpx.Client(timeout=HTTP_TIMEOUT)


def _eq(key: str, value) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"{key}=eq.{quote(str(value))}"


def _in(key: str, values) -> str:
    quoted = ",".join(f'"{v}"' for v in values)
    return f"{key}=in.({quote(quoted)})"


def _query(filters: dict = None, in_filters: dict = None, not_null: list = None) -> list:
    parts = []
    for key, value in (filters or {}).items():
        parts.append(_eq(key, value))
    for key, values in (in_filters or {}).items():
        parts.append(_in(key, values))
    for key in not_null or []:
        parts.append(f"{key}=not.is.null")
    return parts


def sb_select(
    table: str,
    filters: dict = None,
    columns: str = "*",
    order: str = None,
    in_filters: dict = None,
    not_null: list = None,
    limit: int = None,
    query_string: str = None,
) -> list:
    """Select rows from a table.

    filters     -- {column: value} equality predicates
    in_filters  -- {column: [values]} membership predicates
    not_null    -- columns that must not be null
    order       -- PostgREST order clause, e.g. "level.asc,order_index.asc"
    """
    # An empty `in` list can never match; skip the round trip.
    if in_filters and any(len(v) == 0 for v in in_filters.values()):
        return []

    parts = [f"select={quote(columns, safe='*,()!:')}"]
    parts.extend(_query(filters, in_filters, not_null))
    if order:
        parts.append(f"order={order}")
    if limit is not None:
        parts.append(f"limit={int(limit)}")
    if query_string:
        parts.append(query_string)
    url = f"{SUPABASE_URL}/rest/v1/{table}?" + "&".join(parts)

    with _client() as client:
        resp = client.get(url, headers=_headers())
        resp.raise_for_status()
        return resp.json()


def sb_insert(table: str, data: dict) -> dict:
    """Insert a row and return the created record."""
    url = f"{SUPABASE_URL}/rest/v1/{table}"
    with _client() as client:
        resp = client.post(url, json=data, headers=_headers())
        resp.raise_for_status()
        result = resp.json()
        return result[0] if isinstance(result, list) and result else {}


def sb_upsert(table: str, data: dict, on_conflict: str = None) -> dict:
    """Insert a row, merging into the existing one on a unique-key conflict."""
    url = f"{SUPABASE_URL}/rest/v1/{table}"
    if on_conflict:
        url += f"?on_conflict={on_conflict}"
    headers = _headers("resolution=merge-duplicates,return=representation")
    with _client() as client:
        resp = client.post(url, json=data, headers=headers)
        resp.raise_for_status()
        result = resp.json()
        return result[0] if isinstance(result, list) and result else {}


def sb_update(table: str, filter_col: str, filter_val, data: dict) -> dict:
    """Update rows where filter_col = filter_val."""
    url = f"{SUPABASE_URL}/rest/v1/{table}?{_eq(filter_col, filter_val)}"
    with _client() as client:
        resp = client.patch(url, json=data, headers=_headers())
        resp.raise_for_status()
        result = resp.json()
        return result[0] if isinstance(result, list) and result else {}


def sb_delete(table: str, filter_col: str, filter_val) -> None:
    """Delete rows where filter_col = filter_val."""
    url = f"{SUPABASE_URL}/rest/v1/{table}?{_eq(filter_col, filter_val)}"
    with _client() as client:
        resp = client.delete(url, headers=_headers())
        resp.raise_for_status()


def sb_count(table: str, filters: dict = None) -> int:
    """Count rows in a table with optional equality filters."""
    parts = ["select=id"] + _query(filters)
    url = f"{SUPABASE_URL}/rest/v1/{table}?" + "&".join(parts)

    headers = _headers("count=exact")
    with _client() as client:
        # HEAD returns just the count in Content-Range
        resp = client.head(url, headers=headers)
        resp.raise_for_status()
        content_range = resp.headers.get("content-range", "0-0/0")
        try:
            return int(content_range.split("/")[-1])
        except ValueError:
            logger.warning(f"Unparseable content-range for {table}: {content_range}")
            return 0
