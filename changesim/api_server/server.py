"""
FastAPI server: impact analysis API.

POST /api/impact-analysis runs (or returns a cached) analysis for the caller's
session. GET /api/admin/cost-status reports in-memory LLM spend. Config via env
(see changesim.config.env).
"""

from __future__ import annotations

import functools
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from changesim.analysis.cost_tracker import cost_tracker
from changesim.analysis.llm_client import LLMClient
from changesim.analysis.schemas import ImpactAnalysisRequest
from changesim.analysis.service import ImpactAnalysisService
from changesim.api_server.auth import require_api_token
from changesim.api_server.session import SessionInfo, apply_session_cookie, get_session
from changesim.config import get_settings
from changesim.core.exceptions import ChangeSimError
from changesim.database import init_db
from changesim.logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_service() -> ImpactAnalysisService:
    """Dependency: one service (and one HTTP client) per process."""
    settings = get_settings()
    return ImpactAnalysisService(LLMClient(settings), settings)


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create run store tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.warning("run_store_init_skip", error=str(e))
    logger.info("api_started", model=get_settings().model)
    yield
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="ChangeSim API",
    description="Organizational change impact analysis with deterministic risk classification.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.post("/api/impact-analysis", dependencies=[Depends(require_api_token)])
def impact_analysis(
    body: ImpactAnalysisRequest,
    session: SessionInfo = Depends(get_session),
    service: ImpactAnalysisService = Depends(get_service),
) -> JSONResponse:
    """
    Analyze the impact of an organizational change.

    The risk level is always decided by the deterministic risk engine, not the
    model. X-ChangeSim-Cache is hit | race | miss | session.
    """
    logger.info("impact_analysis_called", is_new_session=session.is_new, force_fresh=body.force_fresh)
    try:
        outcome = service.analyze(body, session.session_id, session.is_new)
    except ChangeSimError as e:
        logger.error("impact_analysis_failed", error=str(e), error_type=type(e).__name__)
        response = JSONResponse(status_code=e.status_code, content={"error": e.public_message})
        apply_session_cookie(response, session)
        return response
    except Exception as e:
        logger.exception("impact_analysis_error", error=str(e))
        response = JSONResponse(
            status_code=500, content={"error": ChangeSimError.public_message}
        )
        apply_session_cookie(response, session)
        return response

    response = JSONResponse(content=outcome.result, headers=outcome.headers())
    apply_session_cookie(response, session)
    return response


@app.get("/api/admin/cost-status", dependencies=[Depends(require_api_token)])
def cost_status() -> dict[str, Any]:
    """In-memory LLM cost totals for today (UTC)."""
    return cost_tracker.get_stats()


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with a single joined message, e.g. "changeDescription: String should have at least 1 character"."""
    message = ", ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:])}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": message})


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    content = exc.detail if isinstance(exc.detail, dict) else {"detail": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
