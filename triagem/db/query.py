"""Helpers shared by the services that talk to PostgREST.

``execute()`` runs a built query, logging any backend failure with the
operation name before re-raising it unchanged.  Nothing here retries.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any

from triagem.core.constants import POSTGREST_RESERVED_CHARS

logger = logging.getLogger(__name__)


def execute(query: Any, operation: str, **context: Any) -> Any:
    """Execute a supabase-py request builder and return its response."""
    try:
        return query.execute()
    except Exception as exc:
        logger.error(
            f"{operation}_failed",
            extra={
                "operation": operation,
                "error_message": str(exc),
                **{k: str(v) for k, v in context.items()},
            },
        )
        raise


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Translate a 1-indexed page into an inclusive ``range(start, end)``.

    Raises ``ValueError`` for non-positive arguments.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start = (page - 1) * page_size
    return start, start + page_size - 1


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for *count* rows."""
    return math.ceil(count / page_size) if count > 0 else 0


def sanitize_term(term: str) -> str:
    """Strip characters that would break a PostgREST ``or=(...)`` filter."""
    return "".join(ch for ch in term if ch not in POSTGREST_RESERVED_CHARS).strip()


def ilike_any(columns: tuple[str, ...], term: str) -> str:
    """Build an ``or`` expression matching *term* as a substring of any column."""
    return ",".join(f"{column}.ilike.%{term}%" for column in columns)


def eq_any(columns: tuple[str, ...], value: str) -> str:
    """Build an ``or`` expression matching *value* exactly in any column."""
    return ",".join(f'{column}.eq."{value}"' for column in columns)


def combine_or_groups(groups: list[str]) -> str:
    """AND together several ``or`` groups inside a single ``or`` parameter.

    PostgREST takes one ``or`` query parameter; two independent groups are
    expressed as ``and(or(...),or(...))``.
    """
    if len(groups) == 1:
        return groups[0]
    return "and(" + ",".join(f"or({group})" for group in groups) + ")"
