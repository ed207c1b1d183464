"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global ``settings`` instance is available for import throughout the app;
missing Supabase credentials abort the import with a ``ConfigurationError``.
"""

from typing import Literal

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from triagem.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (URL + anon/public key)
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Triage policy
    STATUS_ON_ASSIGN: Literal["pendente", "em_analise"] = "em_analise"

    # Pagination / search
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200
    SEARCH_LIMIT: int = 10

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


def load_settings() -> Settings:
    """Build ``Settings`` from the environment.

    Raises ``ConfigurationError`` naming the missing or invalid variables
    instead of pydantic's raw validation report.
    """
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        fields = ", ".join(
            str(err["loc"][0]) for err in exc.errors() if err.get("loc")
        )
        raise ConfigurationError(
            "Variáveis de ambiente não configuradas ou inválidas: "
            f"{fields}.\n"
            "Defina-as no ambiente ou em um arquivo .env na raiz do projeto, "
            "por exemplo:\n"
            "SUPABASE_URL=https://<projeto>.supabase.co\n"
            "SUPABASE_KEY=<chave anon publica>"
        ) from exc


settings = load_settings()
