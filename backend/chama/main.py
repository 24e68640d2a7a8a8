"""
Chama Tracker FastAPI Application - Main entry point.

Membership and monthly contribution tracking for a community group:

- Members: group members with contact details
- Contributions: one record per member and year with twelve monthly amounts
- Reports: PDF and Excel exports of a year's contributions

All endpoints are served under /api.
"""
import asyncio
import logging
import sys
import traceback
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chama.api.v1 import api_router
from chama.core.config import settings
from chama.core.exceptions import ChamaError
from chama.core.logging import (
    configure_logging,
    fatal_error_occurred,
    handle_loop_exception,
    install_fatal_handlers,
)
from chama.db.base import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

    # Note: In production, use Alembic migrations instead
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG and not settings.is_production)
    await database.create_all()
    app.state.database = database
    logger.info(f"{settings.APP_NAME} started in {settings.APP_ENV} mode")
    yield
    await database.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Membership and monthly contribution tracking.",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(ChamaError)
async def chama_exception_handler(request: Request, exc: ChamaError):
    """Map domain errors (bad input, not found, conflict) to client errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    content = {"detail": str(exc)}
    if not settings.is_production:
        content["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=500, content=content)


def run() -> None:
    """Run the API server; exit non-zero after a fatal error."""
    import uvicorn

    configure_logging(settings.LOG_LEVEL)
    install_fatal_handlers()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
    if fatal_error_occurred():
        sys.exit(1)


if __name__ == "__main__":
    run()
