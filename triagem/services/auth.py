"""Auth session resolver.

Maps a Supabase auth session onto an active row of the ``users`` table.
A credential session without a matching active user is treated as logged
out: the resolver signs it out and stays ``unauthenticated``.

State machine::

    unauthenticated -> loading -> authenticated | unauthenticated
"""

from __future__ import annotations

import logging
from typing import Any

from supabase import AuthError, Client

from triagem.core.exceptions import AuthenticationError, InactiveUserError
from triagem.models.enums import AuthState, UserRole
from triagem.models.user import User
from triagem.services.users import UserService

logger = logging.getLogger(__name__)

INACTIVE_USER_MESSAGE = "Usuário não encontrado ou inativo"


def _session_email(session: Any) -> str | None:
    user = getattr(session, "user", None) if session is not None else None
    return getattr(user, "email", None)


class AuthSession:
    """Current user of one client, resolved from the Supabase session."""

    def __init__(self, client: Client, users: UserService | None = None) -> None:
        self._client = client
        self._users = users or UserService(client)
        self.user: User | None = None
        self.state: AuthState = AuthState.unauthenticated

    @property
    def loading(self) -> bool:
        return self.state is AuthState.loading

    def _resolve(self, session: Any) -> User | None:
        """Look up the active user for *session*; ``None`` if there is none."""
        email = _session_email(session)
        if not email:
            return None
        return self._users.get_active_user_by_email(email)

    def _set_user(self, user: User | None) -> None:
        self.user = user
        self.state = AuthState.authenticated if user else AuthState.unauthenticated

    def initialize(self) -> User | None:
        """Resolve any session already held by the client."""
        self.state = AuthState.loading
        try:
            session = self._client.auth.get_session()
            user = self._resolve(session)
            if session is not None and user is None:
                logger.warning(
                    "auth_session_without_active_user",
                    extra={"email": _session_email(session)},
                )
                self._client.auth.sign_out()
        except Exception:
            logger.warning("auth_initialize_failed", exc_info=True)
            user = None
        self._set_user(user)
        return user

    def handle_auth_change(self, event: str, session: Any) -> None:
        """Callback for ``client.auth.on_auth_state_change``."""
        if event == "SIGNED_OUT" or session is None:
            self._set_user(None)
            return
        self.state = AuthState.loading
        try:
            user = self._resolve(session)
        except Exception:
            logger.warning(
                "auth_change_resolve_failed", extra={"event": event}, exc_info=True
            )
            user = None
        self._set_user(user)

    def subscribe(self) -> Any:
        """Register ``handle_auth_change`` with the client; returns the subscription."""
        return self._client.auth.on_auth_state_change(self.handle_auth_change)

    def login(self, email: str, password: str) -> User:
        """Sign in and resolve the active user.

        Raises ``AuthenticationError`` for rejected credentials and
        ``InactiveUserError`` when no active user matches the account.
        """
        self.state = AuthState.loading
        normalized = email.strip().lower()
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": normalized, "password": password}
            )
        except AuthError as exc:
            self._set_user(None)
            logger.warning("auth_login_rejected", extra={"email": normalized})
            raise AuthenticationError(str(exc)) from exc

        try:
            user = self._resolve(response)
        except Exception:
            self._set_user(None)
            raise

        if user is None:
            self._client.auth.sign_out()
            self._set_user(None)
            raise InactiveUserError(INACTIVE_USER_MESSAGE)

        self._set_user(user)
        logger.info("auth_login", extra={"user_id": str(user.id)})
        return user

    def logout(self) -> None:
        """Sign out and forget the current user."""
        self.state = AuthState.loading
        try:
            self._client.auth.sign_out()
        finally:
            self._set_user(None)

    def is_admin(self) -> bool:
        return self.user is not None and self.user.role is UserRole.admin

    def is_analyst(self) -> bool:
        return self.user is not None and self.user.role is UserRole.analista
