"""FastAPI application for the advisor document context engine."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .... import __version__
from ....common.exception_handler import error_response, log_exception
from ....config.logging import setup_logging
from ....config.settings import settings
from ....core.domain.exceptions import AdvisorDocsError, ValidationError
from .routers import context, documents, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file, settings.log_json)
    logger.info("Advisor document API starting up...")
    logger.info(
        f"Upload limit: {settings.max_upload_megabytes:g}MB, "
        f"context budget: {settings.max_context_tokens} tokens"
    )
    logger.info("Debug mode: %s", "ENABLED" if settings.debug else "DISABLED")
    yield
    logger.info("Advisor document API shutting down...")


app = FastAPI(
    title="Advisor Documents API",
    description=(
        "Upload advisor documents, search them and assemble token-budgeted "
        "context for conversation prompts."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(documents.router)
app.include_router(context.router)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(AdvisorDocsError)
async def advisor_docs_error_handler(request: Request, exc: AdvisorDocsError) -> JSONResponse:
    """Handle all AdvisorDocsError exceptions with structured JSON response.

    Validation failures are expected client errors and logged at WARNING.
    """
    level = logging.WARNING if isinstance(exc, ValidationError) else logging.ERROR
    log_exception(
        exc,
        level=level,
        extra_context={"path": str(request.url.path), "method": request.method},
    )

    status_code, body = error_response(exc, include_trace=settings.debug)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions with structured JSON response."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})

    status_code, body = error_response(exc, include_trace=settings.debug)
    return JSONResponse(status_code=status_code, content=body)


# Export for uvicorn
__all__ = ["app"]
