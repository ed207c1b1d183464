"""User management and bulk candidate assignment.

Users are never hard-deleted: ``deactivate_user`` flips ``active`` to
``False`` and every listing filters on ``active = True``.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import Client

from triagem.core.config import Settings, settings
from triagem.core.constants import CANDIDATES_TABLE, USERS_TABLE
from triagem.core.exceptions import UserNotFoundError
from triagem.db.query import execute, utc_now_iso
from triagem.models.enums import CandidateStatus, UserRole
from triagem.models.user import AssignmentRequest, User, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Data access for the ``users`` table plus bulk assignment."""

    def __init__(self, client: Client, config: Settings | None = None) -> None:
        self._client = client
        self._settings = config or settings

    def _users(self) -> Any:
        return self._client.table(USERS_TABLE)

    def _candidates(self) -> Any:
        return self._client.table(CANDIDATES_TABLE)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def list_users(self) -> list[User]:
        """Active users ordered by name."""
        query = self._users().select("*").eq("active", True).order("name")
        result = execute(query, "list_users")
        return [User(**row) for row in (result.data or [])]

    def list_analysts(self) -> list[User]:
        """Active analysts ordered by name."""
        query = (
            self._users()
            .select("*")
            .eq("active", True)
            .eq("role", UserRole.analista.value)
            .order("name")
        )
        result = execute(query, "list_analysts")
        return [User(**row) for row in (result.data or [])]

    def get_user(self, user_id: UUID) -> User | None:
        query = self._users().select("*").eq("id", str(user_id)).limit(1)
        result = execute(query, "get_user", user_id=user_id)
        if not result.data:
            return None
        return User(**result.data[0])

    def get_active_user_by_email(self, email: str) -> User | None:
        """Return the active user with this e-mail, or ``None``."""
        query = (
            self._users()
            .select("*")
            .eq("email", email.strip().lower())
            .eq("active", True)
            .limit(1)
        )
        result = execute(query, "get_active_user_by_email")
        if not result.data:
            return None
        return User(**result.data[0])

    def create_user(self, user: UserCreate) -> User:
        row = {**user.model_dump(mode="json"), "active": True}
        result = execute(self._users().insert(row), "create_user", role=user.role.value)
        created = User(**result.data[0])
        logger.info(
            "user_created",
            extra={"user_id": str(created.id), "role": created.role.value},
        )
        return created

    def update_user(self, user_id: UUID, changes: UserUpdate) -> User:
        """Apply the fields set on *changes*.

        Raises ``UserNotFoundError`` when no row matched.
        """
        payload = changes.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not payload:
            user = self.get_user(user_id)
            if user is None:
                raise UserNotFoundError(f"Usuário não encontrado: {user_id}")
            return user
        query = self._users().update(payload).eq("id", str(user_id))
        result = execute(query, "update_user", user_id=user_id)
        if not result.data:
            raise UserNotFoundError(f"Usuário não encontrado: {user_id}")
        return User(**result.data[0])

    def deactivate_user(self, user_id: UUID) -> None:
        """Soft-delete: the row stays, ``active`` becomes ``False``."""
        query = self._users().update({"active": False}).eq("id", str(user_id))
        execute(query, "deactivate_user", user_id=user_id)
        logger.info("user_deactivated", extra={"user_id": str(user_id)})

    # ------------------------------------------------------------------
    # Bulk assignment
    # ------------------------------------------------------------------

    def assign_candidates(self, request: AssignmentRequest) -> int:
        """Assign every listed candidate to the analyst in one update.

        The resulting status follows ``settings.STATUS_ON_ASSIGN``.
        Returns the number of rows updated.
        """
        if not request.candidate_ids:
            return 0
        now = utc_now_iso()
        payload = {
            "assigned_to": str(request.analyst_id),
            "assigned_by": str(request.admin_id),
            "assigned_at": now,
            "status": self._settings.STATUS_ON_ASSIGN,
            "updated_at": now,
        }
        query = self._candidates().update(payload).in_(
            "id", [str(cid) for cid in request.candidate_ids]
        )
        result = execute(
            query,
            "assign_candidates",
            analyst_id=request.analyst_id,
            candidates=len(request.candidate_ids),
        )
        updated = len(result.data or [])
        logger.info(
            "candidates_assigned",
            extra={
                "analyst_id": str(request.analyst_id),
                "admin_id": str(request.admin_id),
                "updated": updated,
            },
        )
        return updated

    def unassign_candidates(self, candidate_ids: list[UUID]) -> int:
        """Clear the assignment of every listed candidate in one update."""
        if not candidate_ids:
            return 0
        payload = {
            "assigned_to": None,
            "assigned_by": None,
            "assigned_at": None,
            "status": CandidateStatus.pendente.value,
            "updated_at": utc_now_iso(),
        }
        query = self._candidates().update(payload).in_(
            "id", [str(cid) for cid in candidate_ids]
        )
        result = execute(query, "unassign_candidates", candidates=len(candidate_ids))
        updated = len(result.data or [])
        logger.info("candidates_unassigned", extra={"updated": updated})
        return updated
