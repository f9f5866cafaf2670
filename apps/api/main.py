"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

logging.basicConfig(level=logging.INFO)
from fastapi.middleware.cors import CORSMiddleware
from requests import RequestException
from sqlalchemy.exc import SQLAlchemyError

from apps.api.db import ensure_tables
from apps.api.routes import cleanup, describe, health, status
from apps.api.schemas.describe import ErrorResponse
from apps.api.services.google_books import ProviderError
from apps.api.services.normalize import MissingLookupKeyError
from apps.api.services.retention import cleanup_middleware

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Failed to fetch book description"

# CORS: descriptions are fetched from browser clients. Comma-separated origins; "*" if unset.
_cors_origins_raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
CORS_ORIGINS = (
    [o.strip() for o in _cors_origins_raw.split(",") if o.strip()]
    if _cors_origins_raw
    else ["*"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ensure tables exist on startup (SQLite; Postgres uses Alembic)."""
    ensure_tables()
    yield


app = FastAPI(
    title="Book Description Cache",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_methods=["GET"], allow_headers=["*"])
app.middleware("http")(cleanup_middleware)

app.include_router(health.router, tags=["health"])
app.include_router(status.router, tags=["status"])
app.include_router(cleanup.router, tags=["cleanup"])
app.include_router(describe.router, tags=["describe"])


def _error_response(exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=ERROR_MESSAGE, details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


@app.exception_handler(MissingLookupKeyError)
async def missing_key_handler(request: Request, exc: MissingLookupKeyError) -> PlainTextResponse:
    """400, plain text, no JSON envelope."""
    return PlainTextResponse(str(exc), status_code=400)


@app.exception_handler(ProviderError)
@app.exception_handler(RequestException)
@app.exception_handler(SQLAlchemyError)
async def known_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Provider, transport and storage failures -> 500 with details."""
    logger.error("Error on %s: %s", request.url.path, exc, exc_info=exc)
    return _error_response(exc)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else -> same 500 envelope. Starlette re-raises after responding (server logs)."""
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return _error_response(exc)
