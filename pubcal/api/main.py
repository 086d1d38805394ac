import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pubcal import __version__
from pubcal.api.deps import get_settings
from pubcal.app_shell.config import prepare_database, validate_rules
from pubcal.core.ports.db import TransactionConflictError
from pubcal.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and prepare storage on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_rules(rules)
        applied = prepare_database(settings)
        logger.info(
            "Rules loaded from %s; database %s (%d migrations applied)",
            settings.rules_path,
            settings.db_path,
            len(applied),
        )
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    yield


app = FastAPI(
    title="Publication Calendar API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from pubcal.api.routes import blocked_dates, calendar, publications  # noqa: E402

app.include_router(publications.router, prefix="/api/publications", tags=["Publications"])
app.include_router(blocked_dates.router, prefix="/api/blocked-dates", tags=["Blocked Dates"])
app.include_router(calendar.router, prefix="/api/calendar", tags=["Calendar"])


@app.exception_handler(TransactionConflictError)
async def transaction_conflict_handler(request: Request, exc: TransactionConflictError) -> Any:
    logger.warning("Transaction conflict on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={
            "detail": {
                "errors": [
                    {"code": "transaction_conflict", "message": "Store busy, retry the request"}
                ]
            }
        },
        headers={"Retry-After": "1"},
    )


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "pubcal", "version": __version__}
