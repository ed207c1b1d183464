"""Pydantic models for the ``users`` table and assignment requests."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from triagem.models.enums import UserRole


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class UserCreate(BaseModel):
    """Payload for creating an application user (admin action)."""
    email: str
    name: str
    role: UserRole = UserRole.analista

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserUpdate(BaseModel):
    """Partial update of a user; only provided fields are written."""
    email: str | None = None
    name: str | None = None
    role: UserRole | None = None
    active: bool | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return _normalize_email(value) if value is not None else None


class User(BaseModel):
    """Full users record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: UserRole
    active: bool = True
    created_at: datetime | None = None


class AssignmentRequest(BaseModel):
    """Bulk assignment of candidates to one analyst."""
    candidate_ids: list[UUID] = Field(default_factory=list)
    analyst_id: UUID
    admin_id: UUID


class UnassignmentRequest(BaseModel):
    """Bulk removal of candidate assignments."""
    candidate_ids: list[UUID] = Field(default_factory=list)
