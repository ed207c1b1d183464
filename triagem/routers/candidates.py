"""Candidate endpoints.

Listing, lookup, statistics and triage mutations over ``CandidateService``.
Static paths are registered before ``/{candidate_id}`` so they are not
captured by the id route.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from triagem.core.config import settings
from triagem.models.candidate import (
    AssignRequest,
    Candidate,
    CandidateCreate,
    CandidateFilters,
    CandidateStatistics,
    CandidateUpdate,
    ImportResult,
    PaginatedResponse,
    StatusUpdateRequest,
)
from triagem.models.enums import CandidateStatus
from triagem.routers.deps import get_candidate_service
from triagem.services.candidates import CandidateService

logger = logging.getLogger(__name__)

router = APIRouter()


def _found(candidate: Candidate | None, candidate_id: UUID | str) -> Candidate:
    if candidate is None:
        raise HTTPException(status_code=404, detail=f"Candidato não encontrado: {candidate_id}")
    return candidate


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@router.get("", response_model=PaginatedResponse[Candidate])
async def list_candidates(
    page: int = Query(default=1, ge=1, description="1-indexed page"),
    page_size: int = Query(
        default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE
    ),
    status: CandidateStatus | None = Query(default=None),
    area: str | None = Query(default=None),
    cargo: str | None = Query(default=None),
    vaga_pcd: str | None = Query(default=None),
    search: str | None = Query(default=None, description="Name or registration number"),
    assigned_to: UUID | None = Query(default=None),
    user_id: UUID | None = Query(
        default=None,
        description="Restrict to this user's queue when assigned_to is omitted",
    ),
    service: CandidateService = Depends(get_candidate_service),
) -> PaginatedResponse[Candidate]:
    """Return one page of candidates, newest first."""
    filters = CandidateFilters(
        status=status,
        area=area,
        cargo=cargo,
        vaga_pcd=vaga_pcd,
        search=search,
        assigned_to=assigned_to,
    )
    return service.list_candidates(page, page_size, filters, user_id)


@router.get("/unassigned", response_model=PaginatedResponse[Candidate])
async def list_unassigned(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE
    ),
    service: CandidateService = Depends(get_candidate_service),
) -> PaginatedResponse[Candidate]:
    """Unassigned queue: highest priority first, then oldest."""
    return service.list_unassigned(page, page_size)


@router.get("/search", response_model=list[Candidate])
async def search_candidates(
    q: str = Query(..., min_length=1, description="Search term"),
    service: CandidateService = Depends(get_candidate_service),
) -> list[Candidate]:
    """Autocomplete search, capped at ``SEARCH_LIMIT`` results."""
    return service.search(q)


@router.get("/statistics", response_model=CandidateStatistics)
async def candidate_statistics(
    user_id: UUID | None = Query(default=None),
    service: CandidateService = Depends(get_candidate_service),
) -> CandidateStatistics:
    return service.get_statistics(user_id)


# ---------------------------------------------------------------------------
# Filter options
# ---------------------------------------------------------------------------

@router.get("/areas", response_model=list[str])
async def list_areas(
    service: CandidateService = Depends(get_candidate_service),
) -> list[str]:
    return service.list_areas()


@router.get("/cargos", response_model=list[str])
async def list_cargos(
    service: CandidateService = Depends(get_candidate_service),
) -> list[str]:
    return service.list_cargos()


@router.get("/vaga-pcd", response_model=list[str])
async def list_vaga_pcd_options(
    service: CandidateService = Depends(get_candidate_service),
) -> list[str]:
    return service.list_vaga_pcd_options()


# ---------------------------------------------------------------------------
# Single candidate
# ---------------------------------------------------------------------------

@router.get("/cpf/{cpf}", response_model=Candidate)
async def get_candidate_by_cpf(
    cpf: str,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return _found(service.get_by_cpf(cpf), cpf)


@router.get("/{candidate_id}", response_model=Candidate)
async def get_candidate(
    candidate_id: UUID,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return _found(service.get_by_id(candidate_id), candidate_id)


@router.post("", response_model=Candidate, status_code=201)
async def create_candidate(
    body: CandidateCreate,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return service.create(body)


@router.post("/import", response_model=ImportResult, status_code=201)
async def import_candidates(
    rows: list[dict[str, Any]] = Body(..., description="Rows in any known schema version"),
    service: CandidateService = Depends(get_candidate_service),
) -> ImportResult:
    """Bulk import of spreadsheet, wide or normalized candidate rows."""
    imported = service.import_candidates(rows)
    return ImportResult(imported=len(imported), candidates=imported)


@router.patch("/{candidate_id}", response_model=Candidate)
async def update_candidate(
    candidate_id: UUID,
    body: CandidateUpdate,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return service.update(candidate_id, body)


@router.delete("/{candidate_id}", status_code=204)
async def delete_candidate(
    candidate_id: UUID,
    service: CandidateService = Depends(get_candidate_service),
) -> Response:
    service.delete(candidate_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Triage
# ---------------------------------------------------------------------------

@router.patch("/{candidate_id}/status", response_model=Candidate)
async def update_candidate_status(
    candidate_id: UUID,
    body: StatusUpdateRequest,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return _found(
        service.update_status(candidate_id, body.status, body.notes), candidate_id
    )


@router.post("/{candidate_id}/assign", response_model=Candidate)
async def assign_candidate(
    candidate_id: UUID,
    body: AssignRequest,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return _found(
        service.assign(candidate_id, body.analyst_id, body.admin_id), candidate_id
    )


@router.post("/{candidate_id}/unassign", response_model=Candidate)
async def unassign_candidate(
    candidate_id: UUID,
    service: CandidateService = Depends(get_candidate_service),
) -> Candidate:
    return _found(service.unassign(candidate_id), candidate_id)
