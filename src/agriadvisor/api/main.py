"""Agri Advisor API — FastAPI application for farm advisories.

Run:
    uvicorn agriadvisor.api.main:app --reload
    # or
    agri-advisor-api
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from agriadvisor.api.directory import router as directory_router
from agriadvisor.api.routes import router
from agriadvisor.config import settings
from agriadvisor.core.errors import AdvisoryError
from agriadvisor.observability.logging import correlation_id, setup_logging
from agriadvisor.observability.prompts import list_prompts
from agriadvisor.observability.tracing import init_tracing
from agriadvisor.storage.db import get_session, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize logging, tracing and DB on startup."""
    setup_logging(json_format=settings.log_json, level=settings.log_level)

    if init_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name):
        logger.info("MLflow tracing enabled: %s", settings.mlflow_tracking_uri)

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; advisory endpoints will fail")

    try:
        await asyncio.wait_for(init_db(), timeout=15)
    except asyncio.TimeoutError:
        logger.error("Database initialization timed out after 15s, API will start in degraded mode")
    except Exception as e:
        logger.error("Database initialization failed: %s, API will start in degraded mode", e)
    logger.info("Agri Advisor API ready on port %d", settings.api_port)
    yield
    logger.info("Shutting down")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Set correlation ID from X-Request-ID header or generate a new one."""

    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("x-request-id", str(uuid.uuid4()))
        token = correlation_id.set(cid)
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = cid
            return response
        finally:
            correlation_id.reset(token)


app = FastAPI(
    title="Agri Advisor",
    description="AI-generated farm advisories, crop plans and disease diagnosis, "
    "with optional translation and PDF reports.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(directory_router)


@app.exception_handler(AdvisoryError)
async def advisory_error_handler(request: Request, exc: AdvisoryError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same 400 `{error}` shape as missing fields."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})


@app.get("/health")
async def health():
    """Health check: DB connectivity, upstream credentials, active prompt versions."""
    checks = {}

    session = None
    try:
        from sqlalchemy import text

        session = await get_session()
        await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"
    finally:
        if session:
            await session.close()

    checks["generation"] = "configured" if settings.gemini_api_key else "missing_api_key"
    # Requests may still bring their own translation key
    checks["translation"] = "configured" if settings.google_translate_api_key else "per_request_key"

    status = "healthy" if checks["database"] == "ok" and settings.gemini_api_key else "degraded"
    return {"status": status, "checks": checks, "prompts": list_prompts()}


def run():
    """Entry point for agri-advisor-api console script."""
    uvicorn.run("agriadvisor.api.main:app", host=settings.api_host, port=settings.api_port, reload=True)
