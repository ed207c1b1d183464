"""Pydantic models for the ``candidates`` table.

The canonical (normalized) schema keeps a handful of queryable columns and
moves everything else into the ``data`` JSON column.  ``CandidateData``
types the keys the application knows about and keeps any other key
verbatim, so rows written by newer importers survive a read/write cycle.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from triagem.models.enums import CandidateStatus

T = TypeVar("T")


class CandidateData(BaseModel):
    """Supplementary fields stored in the ``data`` JSON column."""
    model_config = ConfigDict(extra="allow")

    nome_social: str | None = None
    cpf: str | None = None
    vaga_pcd: str | None = None
    laudo_medico: str | None = None
    notes: str | None = None
    cargo_administrativo: str | None = None
    cargo_assistencial: str | None = None
    adm_curriculo: str | None = None
    adm_diploma: str | None = None
    adm_documentos: str | None = None
    adm_cursos: str | None = None
    assist_curriculo: str | None = None
    assist_diploma: str | None = None
    assist_carteira: str | None = None
    assist_cursos: str | None = None
    assist_documentos: str | None = None
    submission_date: str | None = None
    status_triagem: str | None = None
    data_hora_triagem: str | None = None
    analista_triagem: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def scalars_as_text(cls, value: Any) -> Any:
        """Render numbers and booleans the way ``data->>key`` returns them."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON payload: keys that were set plus unknown extras."""
        known = type(self).model_fields
        payload = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name in known
        }
        payload.update(self.model_extra or {})
        return payload


class CandidateCreate(BaseModel):
    """Payload for creating a candidate (insert).

    ``id``, ``created_at`` and ``updated_at`` are assigned by the database.
    """
    registration_number: str
    name: str
    area: str
    status: CandidateStatus = CandidateStatus.pendente
    priority: int = 0
    assigned_to: UUID | None = None
    assigned_by: UUID | None = None
    assigned_at: datetime | None = None
    data: CandidateData = Field(default_factory=CandidateData)

    def to_row(self) -> dict[str, Any]:
        """Serialize to a row dict ready for ``insert``."""
        row = self.model_dump(mode="json", exclude={"data"})
        row["data"] = self.data.to_payload()
        return row


class CandidateUpdate(BaseModel):
    """Partial update; only fields explicitly provided are written."""
    registration_number: str | None = None
    name: str | None = None
    area: str | None = None
    status: CandidateStatus | None = None
    priority: int | None = None
    data: CandidateData | None = None


class Candidate(BaseModel):
    """Full candidate record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    registration_number: str
    name: str
    area: str
    status: CandidateStatus = CandidateStatus.pendente
    assigned_to: UUID | None = None
    assigned_by: UUID | None = None
    assigned_at: datetime | None = None
    priority: int = 0
    data: CandidateData = Field(default_factory=CandidateData)
    created_at: datetime
    updated_at: datetime

    @field_validator("data", mode="before")
    @classmethod
    def null_data_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def null_priority_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class CandidateFilters(BaseModel):
    """Filters accepted by the paginated candidate listing."""
    status: CandidateStatus | None = None
    area: str | None = None
    cargo: str | None = None
    vaga_pcd: str | None = None
    search: str | None = None
    assigned_to: UUID | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus the totals needed to render a pager."""
    data: list[T] = []
    count: int = 0
    page: int = 1
    page_size: int = 50
    total_pages: int = 0


class CandidateStatistics(BaseModel):
    """Counts per status, area and PCD flag."""
    total: int = 0
    pendente: int = 0
    em_analise: int = 0
    concluido: int = 0
    administrativa: int = 0
    assistencial: int = 0
    pcd: int = 0
    nao_pcd: int = 0


# --- Request bodies ---

class StatusUpdateRequest(BaseModel):
    """Body for PATCH /candidates/{id}/status."""
    status: CandidateStatus
    notes: str | None = None


class AssignRequest(BaseModel):
    """Body for POST /candidates/{id}/assign."""
    analyst_id: UUID
    admin_id: UUID


class ImportResult(BaseModel):
    """Response for POST /candidates/import."""
    imported: int = 0
    candidates: list[Candidate] = []
