"""Enum types mirroring the PostgreSQL enums and client-side states."""

from enum import Enum


class CandidateStatus(str, Enum):
    """Triage status of a candidate."""
    pendente = "pendente"
    em_analise = "em_analise"
    concluido = "concluido"


class UserRole(str, Enum):
    """Application role of a user."""
    admin = "admin"
    analista = "analista"


class AuthState(str, Enum):
    """Lifecycle state of the auth session resolver."""
    unauthenticated = "unauthenticated"
    loading = "loading"
    authenticated = "authenticated"


class SchemaVersion(str, Enum):
    """Known shapes of a stored candidate row."""
    sheets = "sheets"
    wide = "wide"
    normalized = "normalized"
