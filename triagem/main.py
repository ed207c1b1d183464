"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events, error mapping and
router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from postgrest import APIError
from starlette.responses import JSONResponse

from triagem.core.config import settings
from triagem.core.exceptions import (
    AuthenticationError,
    CandidateNotFoundError,
    LegacySchemaError,
    UserNotFoundError,
)
from triagem.core.logging import setup_logging
from triagem.routers import auth, candidates, health, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Triagem de Candidatos API",
    description="Backend para importacao, atribuicao e triagem de candidatos",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.exception_handler(CandidateNotFoundError)
@app.exception_handler(UserNotFoundError)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(AuthenticationError)
async def authentication_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(LegacySchemaError)
async def legacy_schema_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(APIError)
async def backend_error_handler(request: Request, exc: APIError) -> JSONResponse:
    # Already logged by the service that executed the query
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "code": exc.code},
    )


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(candidates.router, prefix="/api/v1/candidates", tags=["Candidates"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
