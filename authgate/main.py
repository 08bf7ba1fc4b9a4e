"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from authgate.api import router as api_router
from authgate.api.deps import get_identity_store
from authgate.core.config import settings
from authgate.core.errors import AuthServiceError
from authgate.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def _warn_about_insecure_config() -> None:
    if settings.jwt_secret_ephemeral:
        logger.warning(
            "JWT_SECRET is not set; using a random per-process secret. "
            "Tokens will not survive a restart. Set JWT_SECRET (required when APP_ENV=prod)."
        )
    if not settings.GOOGLE_CLIENT_ID:
        logger.warning("GOOGLE_CLIENT_ID is not set; Google sign-in will be rejected.")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    _warn_about_insecure_config()
    identity_store = get_identity_store()
    connection = identity_store.connection
    # The first ping pays for DNS/TLS, so give it the full operation timeout.
    if connection.is_connected(timeout_sec=settings.MONGO_TIMEOUT_SEC):
        identity_store.select()
        logger.info("Connected to MongoDB", extra={"storage_backend": "mongo"})
    else:
        logger.warning(
            "MongoDB %s; running in offline mode with users stored in %s",
            "unreachable" if connection.configured else "not configured",
            identity_store.fallback.path,
            extra={"storage_backend": "file"},
        )
    try:
        yield
    finally:
        connection.close()


app = FastAPI(
    title="authgate API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthServiceError)
async def auth_error_handler(_request: Request, exc: AuthServiceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Field values are not logged: the body may carry a password.
    logger.info("Rejected malformed request body (%s errors)", len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error occurred"},
    )


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "authgate API"}
