"""Candidate query and mutation service.

Translates listing filters and pagination into PostgREST queries against
the ``candidates`` table and performs the triage mutations (status change,
assignment, unassignment) as single updates.

Every read goes to the database; nothing is cached between calls.  Backend
errors are logged and propagated unchanged (see ``triagem.db.query``).
"""

from __future__ import annotations

import logging
import re
from typing import Any
from uuid import UUID

from supabase import Client

from triagem.core.config import Settings, settings
from triagem.core.constants import (
    CANDIDATES_TABLE,
    CARGO_COLUMNS,
    CPF_COLUMN,
    LIST_SEARCH_COLUMNS,
    SEARCH_COLUMNS,
    VAGA_PCD_COLUMN,
)
from triagem.core.exceptions import CandidateNotFoundError
from triagem.db.query import (
    combine_or_groups,
    eq_any,
    execute,
    ilike_any,
    page_bounds,
    sanitize_term,
    total_pages,
    utc_now_iso,
)
from triagem.models.candidate import (
    Candidate,
    CandidateCreate,
    CandidateFilters,
    CandidateStatistics,
    CandidateUpdate,
    PaginatedResponse,
)
from triagem.models.enums import CandidateStatus
from triagem.services.migrations import adapt_records
from triagem.services.statistics import StatisticsService

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def _to_page(
    result: Any, page: int, page_size: int
) -> PaginatedResponse[Candidate]:
    rows = result.data or []
    count = result.count if result.count is not None else len(rows)
    return PaginatedResponse[Candidate](
        data=[Candidate(**row) for row in rows],
        count=count,
        page=page,
        page_size=page_size,
        total_pages=total_pages(count, page_size),
    )


def _distinct(rows: list[dict[str, Any]], keys: tuple[str, ...]) -> list[str]:
    """Distinct non-empty string values of *keys* across *rows*, sorted."""
    values: set[str] = set()
    for row in rows:
        for key in keys:
            value = row.get(key)
            if isinstance(value, str) and value.strip():
                values.add(value.strip())
    return sorted(values)


class CandidateService:
    """Data access for the ``candidates`` table."""

    def __init__(self, client: Client, config: Settings | None = None) -> None:
        self._client = client
        self._settings = config or settings
        self._statistics = StatisticsService(client)

    def _table(self) -> Any:
        return self._client.table(CANDIDATES_TABLE)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_candidates(
        self,
        page: int = 1,
        page_size: int | None = None,
        filters: CandidateFilters | None = None,
        user_id: UUID | None = None,
    ) -> PaginatedResponse[Candidate]:
        """Return one page of candidates, newest first.

        When *user_id* is given and *filters* carries no explicit
        ``assigned_to``, the listing is restricted to that user's queue.
        """
        if page_size is None:
            page_size = self._settings.DEFAULT_PAGE_SIZE
        start, end = page_bounds(page, page_size)
        filters = filters or CandidateFilters()

        query = self._table().select("*", count="exact")
        if filters.status is not None:
            query = query.eq("status", filters.status.value)
        if filters.area:
            query = query.eq("area", filters.area)
        if filters.vaga_pcd:
            query = query.eq(VAGA_PCD_COLUMN, filters.vaga_pcd)

        or_groups: list[str] = []
        if filters.cargo:
            or_groups.append(eq_any(CARGO_COLUMNS, sanitize_term(filters.cargo)))
        if filters.search and sanitize_term(filters.search):
            or_groups.append(
                ilike_any(LIST_SEARCH_COLUMNS, sanitize_term(filters.search))
            )
        if or_groups:
            query = query.or_(combine_or_groups(or_groups))

        if filters.assigned_to is not None:
            query = query.eq("assigned_to", str(filters.assigned_to))
        elif user_id is not None:
            query = query.eq("assigned_to", str(user_id))

        query = query.order("created_at", desc=True).range(start, end)
        result = execute(query, "list_candidates", page=page, page_size=page_size)
        return _to_page(result, page, page_size)

    def list_unassigned(
        self, page: int = 1, page_size: int | None = None
    ) -> PaginatedResponse[Candidate]:
        """Return one page of the unassigned queue.

        Highest ``priority`` first; among equal priority the oldest
        candidate comes first.
        """
        if page_size is None:
            page_size = self._settings.DEFAULT_PAGE_SIZE
        start, end = page_bounds(page, page_size)

        query = (
            self._table()
            .select("*", count="exact")
            .is_("assigned_to", "null")
            .order("priority", desc=True, nullsfirst=False)
            .order("created_at")
            .range(start, end)
        )
        result = execute(query, "list_unassigned", page=page, page_size=page_size)
        return _to_page(result, page, page_size)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_by_id(self, candidate_id: UUID) -> Candidate | None:
        """Return the candidate, or ``None`` if no row has this id."""
        query = self._table().select("*").eq("id", str(candidate_id)).limit(1)
        result = execute(query, "get_candidate_by_id", candidate_id=candidate_id)
        if not result.data:
            return None
        return Candidate(**result.data[0])

    def get_by_cpf(self, cpf: str) -> Candidate | None:
        """Return the candidate with this CPF, formatted or digits-only."""
        raw = cpf.strip()
        digits = _NON_DIGITS.sub("", raw)
        candidates = sorted({raw, digits} - {""})
        if not candidates:
            return None
        query = self._table().select("*").in_(CPF_COLUMN, candidates).limit(1)
        result = execute(query, "get_candidate_by_cpf")
        if not result.data:
            return None
        return Candidate(**result.data[0])

    def search(self, term: str) -> list[Candidate]:
        """Autocomplete search over name, nome social, CPF, cargo and registration.

        Returns at most ``settings.SEARCH_LIMIT`` candidates.
        """
        cleaned = sanitize_term(term)
        if not cleaned:
            return []
        query = (
            self._table()
            .select("*")
            .or_(ilike_any(SEARCH_COLUMNS, cleaned))
            .order("name")
            .limit(self._settings.SEARCH_LIMIT)
        )
        result = execute(query, "search_candidates", term=cleaned)
        return [Candidate(**row) for row in (result.data or [])]

    def get_statistics(self, user_id: UUID | None = None) -> CandidateStatistics:
        """Counts per status, area and PCD flag (optionally per assignee)."""
        return self._statistics.get_statistics(user_id)

    # ------------------------------------------------------------------
    # Filter options
    # ------------------------------------------------------------------

    def list_areas(self) -> list[str]:
        result = execute(self._table().select("area"), "list_areas")
        return _distinct(result.data or [], ("area",))

    def list_cargos(self) -> list[str]:
        query = self._table().select(
            "cargo_administrativo:data->>cargo_administrativo,"
            "cargo_assistencial:data->>cargo_assistencial"
        )
        result = execute(query, "list_cargos")
        return _distinct(
            result.data or [], ("cargo_administrativo", "cargo_assistencial")
        )

    def list_vaga_pcd_options(self) -> list[str]:
        query = self._table().select(f"vaga_pcd:{VAGA_PCD_COLUMN}")
        result = execute(query, "list_vaga_pcd_options")
        return _distinct(result.data or [], ("vaga_pcd",))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _merged_data(self, candidate_id: UUID, patch: dict[str, Any]) -> dict[str, Any]:
        """Current ``data`` payload of the candidate with *patch* applied."""
        query = self._table().select("data").eq("id", str(candidate_id)).limit(1)
        result = execute(query, "get_candidate_data", candidate_id=candidate_id)
        if not result.data:
            raise CandidateNotFoundError(f"Candidato não encontrado: {candidate_id}")
        current = result.data[0].get("data") or {}
        return {**current, **patch}

    def _update(
        self, candidate_id: UUID, payload: dict[str, Any], operation: str
    ) -> Candidate | None:
        payload["updated_at"] = utc_now_iso()
        query = self._table().update(payload).eq("id", str(candidate_id))
        result = execute(query, operation, candidate_id=candidate_id)
        if not result.data:
            return None
        return Candidate(**result.data[0])

    def update_status(
        self,
        candidate_id: UUID,
        status: CandidateStatus,
        notes: str | None = None,
    ) -> Candidate | None:
        """Set ``status``; *notes* is merged into ``data`` keeping other keys."""
        payload: dict[str, Any] = {"status": CandidateStatus(status).value}
        if notes is not None:
            payload["data"] = self._merged_data(candidate_id, {"notes": notes})
        candidate = self._update(candidate_id, payload, "update_candidate_status")
        logger.info(
            "candidate_status_updated",
            extra={"candidate_id": str(candidate_id), "status": payload["status"]},
        )
        return candidate

    def assign(
        self, candidate_id: UUID, analyst_id: UUID, admin_id: UUID
    ) -> Candidate | None:
        """Assign the candidate to *analyst_id* in a single update."""
        payload = {
            "assigned_to": str(analyst_id),
            "assigned_by": str(admin_id),
            "assigned_at": utc_now_iso(),
            "status": self._settings.STATUS_ON_ASSIGN,
        }
        candidate = self._update(candidate_id, payload, "assign_candidate")
        logger.info(
            "candidate_assigned",
            extra={
                "candidate_id": str(candidate_id),
                "analyst_id": str(analyst_id),
                "admin_id": str(admin_id),
            },
        )
        return candidate

    def unassign(self, candidate_id: UUID) -> Candidate | None:
        """Clear the assignment and put the candidate back to ``pendente``."""
        payload = {
            "assigned_to": None,
            "assigned_by": None,
            "assigned_at": None,
            "status": CandidateStatus.pendente.value,
        }
        candidate = self._update(candidate_id, payload, "unassign_candidate")
        logger.info("candidate_unassigned", extra={"candidate_id": str(candidate_id)})
        return candidate

    def create(self, candidate: CandidateCreate) -> Candidate:
        """Insert a candidate; id and timestamps come from the database."""
        query = self._table().insert(candidate.to_row())
        result = execute(
            query, "create_candidate", registration_number=candidate.registration_number
        )
        return Candidate(**result.data[0])

    def update(self, candidate_id: UUID, changes: CandidateUpdate) -> Candidate:
        """Apply the fields set on *changes*; ``data`` keys are merged.

        Raises ``CandidateNotFoundError`` when no row comes back.
        """
        payload = changes.model_dump(
            mode="json", exclude_unset=True, exclude_none=True, exclude={"data"}
        )
        if changes.data is not None:
            payload["data"] = self._merged_data(candidate_id, changes.data.to_payload())
        candidate = self._update(candidate_id, payload, "update_candidate")
        if candidate is None:
            raise CandidateNotFoundError("Candidato não encontrado após atualização")
        return candidate

    def delete(self, candidate_id: UUID) -> None:
        """Hard-delete the candidate row."""
        query = self._table().delete().eq("id", str(candidate_id))
        execute(query, "delete_candidate", candidate_id=candidate_id)
        logger.info("candidate_deleted", extra={"candidate_id": str(candidate_id)})

    def import_candidates(self, rows: list[dict[str, Any]]) -> list[Candidate]:
        """Adapt rows of any known schema version and insert them in one call."""
        if not rows:
            return []
        payload = [record.to_row() for record in adapt_records(rows)]
        result = execute(self._table().insert(payload), "import_candidates", rows=len(rows))
        imported = [Candidate(**row) for row in (result.data or [])]
        logger.info("candidates_imported", extra={"imported": len(imported)})
        return imported
