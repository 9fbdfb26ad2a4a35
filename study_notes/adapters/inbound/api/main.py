"""FastAPI application for the AI Study Notes API."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....config import settings, setup_logging
from ....core.domain.exceptions import StudyNotesError
from ...common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from .routers import chat, conversations, health, notes, upload

setup_logging(level=settings.log_level, json_format=settings.log_json)
logger = logging.getLogger(__name__)

# Full stack traces in error responses
DEBUG_MODE = settings.debug

app = FastAPI(
    title="AI Study Notes API",
    description=(
        "Upload course documents, get AI-generated study notes, "
        "and chat with your documents using retrieval-augmented answers."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Local dev
        "http://localhost:5173",  # Vite dev server
        settings.site_url,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(upload.router)
app.include_router(notes.router)
app.include_router(chat.router)
app.include_router(conversations.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(StudyNotesError)
async def study_notes_error_handler(request: Request, exc: StudyNotesError) -> JSONResponse:
    """Handle all StudyNotesError exceptions with structured JSON response."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=exc.to_dict(include_trace=DEBUG_MODE),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with structured JSON response."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=error_data,
    )


# =============================================================================
# Lifecycle Events
# =============================================================================


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    from ...common.debug import log_encoding_info

    log_encoding_info()

    logger.info("AI Study Notes API starting up...")
    logger.info("API docs available at /docs")
    logger.info("Debug mode: %s", "ENABLED" if DEBUG_MODE else "DISABLED")
    logger.info(
        "Embeddings: %s | Chat: %s | Backend: %s",
        "openai" if settings.effective_openai_api_key else "synthetic fallback",
        "configured" if settings.openrouter_api_key else "missing OPENROUTER_API_KEY",
        "configured" if settings.backend_configured else "missing SUPABASE_URL/SUPABASE_ANON_KEY",
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup resources on shutdown."""
    logger.info("AI Study Notes API shutting down...")


# Export for uvicorn
__all__ = ["app"]
