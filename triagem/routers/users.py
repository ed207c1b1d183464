"""User management and bulk assignment endpoints."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from triagem.models.user import (
    AssignmentRequest,
    UnassignmentRequest,
    User,
    UserCreate,
    UserUpdate,
)
from triagem.routers.deps import get_user_service
from triagem.services.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[User])
async def list_users(service: UserService = Depends(get_user_service)) -> list[User]:
    """Active users ordered by name."""
    return service.list_users()


@router.get("/analysts", response_model=list[User])
async def list_analysts(service: UserService = Depends(get_user_service)) -> list[User]:
    """Active analysts ordered by name."""
    return service.list_analysts()


@router.post("", response_model=User, status_code=201)
async def create_user(
    body: UserCreate,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.create_user(body)


@router.patch("/{user_id}", response_model=User)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> User:
    return service.update_user(user_id, body)


@router.delete("/{user_id}", status_code=204)
async def deactivate_user(
    user_id: UUID,
    service: UserService = Depends(get_user_service),
) -> Response:
    """Soft delete: the user is deactivated, never removed."""
    service.deactivate_user(user_id)
    return Response(status_code=204)


@router.post("/assignments")
async def assign_candidates(
    body: AssignmentRequest,
    service: UserService = Depends(get_user_service),
) -> dict[str, int]:
    return {"updated": service.assign_candidates(body)}


@router.post("/unassignments")
async def unassign_candidates(
    body: UnassignmentRequest,
    service: UserService = Depends(get_user_service),
) -> dict[str, int]:
    return {"updated": service.unassign_candidates(body.candidate_ids)}
