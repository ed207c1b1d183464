"""Candidate statistics for the dashboard header.

Every bucket is an exact-count ``HEAD`` request, so no rows are transferred
and the totals are not capped by PostgREST's max-rows setting.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from uuid import UUID

from supabase import Client

from triagem.core.constants import (
    AREA_ADMINISTRATIVA,
    AREA_ASSISTENCIAL,
    CANDIDATES_TABLE,
    PCD_NAO,
    PCD_SIM,
    VAGA_PCD_COLUMN,
)
from triagem.db.query import execute
from triagem.models.candidate import CandidateStatistics
from triagem.models.enums import CandidateStatus

logger = logging.getLogger(__name__)

# Statistic field -> filter applied on top of the optional assignee scope
_BUCKETS: dict[str, Callable[[Any], Any]] = {
    "total": lambda q: q,
    "pendente": lambda q: q.eq("status", CandidateStatus.pendente.value),
    "em_analise": lambda q: q.eq("status", CandidateStatus.em_analise.value),
    "concluido": lambda q: q.eq("status", CandidateStatus.concluido.value),
    "administrativa": lambda q: q.eq("area", AREA_ADMINISTRATIVA),
    "assistencial": lambda q: q.eq("area", AREA_ASSISTENCIAL),
    "pcd": lambda q: q.eq(VAGA_PCD_COLUMN, PCD_SIM),
    "nao_pcd": lambda q: q.eq(VAGA_PCD_COLUMN, PCD_NAO),
}


class StatisticsService:
    """Aggregates candidate counts, optionally scoped to one assignee."""

    def __init__(self, client: Client) -> None:
        self._client = client

    def _count(self, bucket: str, user_id: UUID | None) -> int:
        query = self._client.table(CANDIDATES_TABLE).select(
            "id", count="exact", head=True
        )
        if user_id is not None:
            query = query.eq("assigned_to", str(user_id))
        query = _BUCKETS[bucket](query)
        result = execute(query, "get_statistics", bucket=bucket, user_id=user_id)
        return result.count or 0

    def get_statistics(self, user_id: UUID | None = None) -> CandidateStatistics:
        """Return counts per status, area and PCD flag."""
        counts = {bucket: self._count(bucket, user_id) for bucket in _BUCKETS}
        stats = CandidateStatistics(**counts)
        logger.debug(
            "get_statistics",
            extra={"user_id": str(user_id) if user_id else None, **counts},
        )
        return stats
