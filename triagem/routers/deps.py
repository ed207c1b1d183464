"""FastAPI dependencies wiring services to the Supabase client.

This is the composition root for request handling: services never reach
for a global client themselves.  Tests override these with
``app.dependency_overrides``.
"""

from fastapi import Depends
from supabase import Client

from triagem.core.config import settings
from triagem.db.supabase import create_supabase_client, get_supabase
from triagem.services.auth import AuthSession
from triagem.services.candidates import CandidateService
from triagem.services.users import UserService


def get_client() -> Client:
    return get_supabase()


def get_candidate_service(client: Client = Depends(get_client)) -> CandidateService:
    return CandidateService(client, settings)


def get_user_service(client: Client = Depends(get_client)) -> UserService:
    return UserService(client, settings)


def get_auth_session() -> AuthSession:
    """A resolver on a fresh client, so auth state is never shared between requests."""
    return AuthSession(create_supabase_client(settings))
