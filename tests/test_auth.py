"""Unit tests for the auth session resolver."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from supabase import AuthError

from triagem.core.exceptions import AuthenticationError, InactiveUserError
from triagem.models.enums import AuthState, UserRole
from triagem.models.user import User
from triagem.services.auth import AuthSession


def _user(role: UserRole = UserRole.analista) -> User:
    return User(id=uuid4(), email="ana@example.com", name="Ana", role=role)


def _session(email: str = "ana@example.com") -> MagicMock:
    session = MagicMock()
    session.user.email = email
    return session


def _resolver(user: User | None = None) -> tuple[AuthSession, MagicMock, MagicMock]:
    client = MagicMock()
    users = MagicMock()
    users.get_active_user_by_email.return_value = user
    return AuthSession(client, users), client, users


class TestInitialize:

    def test_starts_unauthenticated(self) -> None:
        auth, _, _ = _resolver()
        assert auth.state is AuthState.unauthenticated
        assert auth.user is None
        assert auth.loading is False

    def test_existing_session_resolves_active_user(self) -> None:
        user = _user()
        auth, client, users = _resolver(user)
        client.auth.get_session.return_value = _session()

        assert auth.initialize() == user
        assert auth.state is AuthState.authenticated
        users.get_active_user_by_email.assert_called_once_with("ana@example.com")
        client.auth.sign_out.assert_not_called()

    def test_session_without_active_user_is_signed_out(self) -> None:
        auth, client, _ = _resolver(None)
        client.auth.get_session.return_value = _session()

        assert auth.initialize() is None
        assert auth.state is AuthState.unauthenticated
        client.auth.sign_out.assert_called_once()

    def test_no_session(self) -> None:
        auth, client, users = _resolver()
        client.auth.get_session.return_value = None

        assert auth.initialize() is None
        assert auth.state is AuthState.unauthenticated
        users.get_active_user_by_email.assert_not_called()

    def test_lookup_failure_leaves_user_unset(self) -> None:
        auth, client, users = _resolver()
        client.auth.get_session.return_value = _session()
        users.get_active_user_by_email.side_effect = RuntimeError("timeout")

        assert auth.initialize() is None
        assert auth.state is AuthState.unauthenticated


class TestLogin:

    def test_login_success(self) -> None:
        user = _user(UserRole.admin)
        auth, client, users = _resolver(user)
        client.auth.sign_in_with_password.return_value = _session()

        assert auth.login(" Ana@Example.com ", "secret") == user
        client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "ana@example.com", "password": "secret"}
        )
        assert auth.state is AuthState.authenticated
        assert auth.is_admin() is True
        assert auth.is_analyst() is False

    def test_rejected_credentials(self) -> None:
        auth, client, users = _resolver()
        client.auth.sign_in_with_password.side_effect = AuthError(
            "Invalid login credentials", "invalid_credentials"
        )

        with pytest.raises(AuthenticationError, match="Invalid login credentials"):
            auth.login("ana@example.com", "wrong")
        assert auth.state is AuthState.unauthenticated
        users.get_active_user_by_email.assert_not_called()

    def test_valid_credentials_without_active_user(self) -> None:
        auth, client, _ = _resolver(None)
        client.auth.sign_in_with_password.return_value = _session()

        with pytest.raises(InactiveUserError, match="não encontrado ou inativo"):
            auth.login("ana@example.com", "secret")
        client.auth.sign_out.assert_called_once()
        assert auth.user is None
        assert auth.state is AuthState.unauthenticated

    def test_logout_clears_user(self) -> None:
        auth, client, _ = _resolver(_user())
        client.auth.sign_in_with_password.return_value = _session()
        auth.login("ana@example.com", "secret")

        auth.logout()

        client.auth.sign_out.assert_called_once()
        assert auth.user is None
        assert auth.is_analyst() is False


class TestAuthChange:

    def test_signed_in_event_resolves_user(self) -> None:
        user = _user()
        auth, _, _ = _resolver(user)

        auth.handle_auth_change("SIGNED_IN", _session())

        assert auth.user == user
        assert auth.state is AuthState.authenticated

    def test_signed_out_event_clears_user(self) -> None:
        auth, _, users = _resolver(_user())
        auth.handle_auth_change("SIGNED_IN", _session())

        auth.handle_auth_change("SIGNED_OUT", None)

        assert auth.user is None
        assert auth.state is AuthState.unauthenticated
        assert users.get_active_user_by_email.call_count == 1

    def test_lookup_failure_on_refresh_clears_user(self) -> None:
        auth, _, users = _resolver(_user(UserRole.admin))
        auth.handle_auth_change("SIGNED_IN", _session())
        assert auth.is_admin() is True

        users.get_active_user_by_email.side_effect = RuntimeError("timeout")
        auth.handle_auth_change("TOKEN_REFRESHED", _session())

        assert auth.user is None
        assert auth.state is AuthState.unauthenticated
        assert auth.loading is False
        assert auth.is_admin() is False

    def test_subscribe_registers_callback(self) -> None:
        auth, client, _ = _resolver()
        auth.subscribe()
        client.auth.on_auth_state_change.assert_called_once_with(auth.handle_auth_change)
