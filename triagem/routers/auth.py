"""Login endpoint.

Exchanges credentials for the matching active application user.  Each
request gets its own ``AuthSession`` (and client), so nothing about one
caller's session leaks into another request.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from triagem.models.user import User
from triagem.routers.deps import get_auth_session
from triagem.services.auth import AuthSession

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user: User
    is_admin: bool
    is_analyst: bool


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AuthSession = Depends(get_auth_session),
) -> LoginResponse:
    """Authenticate and return the active user with its role flags.

    401 for rejected credentials or a missing/inactive user.
    """
    user = session.login(body.email, body.password)
    return LoginResponse(
        user=user,
        is_admin=session.is_admin(),
        is_analyst=session.is_analyst(),
    )
