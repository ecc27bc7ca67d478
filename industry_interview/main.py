"""FastAPI application entrypoint for the industry interview service."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from industry_interview import __version__
from industry_interview.catalog import get_canonical_industries, merge_sub_industries
from industry_interview.config import get_settings
from industry_interview.document import load_interview_state, store_interview_state
from industry_interview.document_store import get_document_store
from industry_interview.engine import IndustryInterviewEngine, InterviewValidationError
from industry_interview.keys import normalize_key, safe_trim
from industry_interview.models import (
    HealthResponse,
    IndustriesResponse,
    InterviewRequest,
    InterviewResponse,
    InterviewState,
    SubIndustriesResponse,
)
from industry_interview.observability import (
    generate_trace_id,
    record_interview_action,
    record_rejected_action,
    set_trace_id,
)

settings = get_settings()

# Configure structlog
logging.basicConfig(format="%(message)s", level=settings.log_level)
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Rate limiter
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting industry interview API", version=__version__)

    industries = get_canonical_industries()
    logger.info("Canonical industries ready", count=len(industries))

    yield

    logger.info("Shutting down industry interview API")


# Create FastAPI app
app = FastAPI(
    title="Industry Interview API",
    description="Adaptive onboarding interview that infers a tenant's service industry",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Trace ID middleware for request correlation
@app.middleware("http")
async def trace_id_middleware(request: Request, call_next):
    """Add trace ID to every request for log correlation."""
    trace_id = request.headers.get("X-Trace-ID", generate_trace_id())
    set_trace_id(trace_id)

    # Bind trace ID to structlog context for all logs in this request
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(trace_id=trace_id)

    response = await call_next(request)

    response.headers["X-Trace-ID"] = trace_id
    return response


# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add Prometheus metrics
Instrumentator().instrument(app).expose(app)


def _answer_text(raw: Any) -> str:
    """Answers may arrive as structured values; store them as JSON text."""
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    return json.dumps(raw)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/health", response_model=HealthResponse)
@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check the health of the API."""
    return HealthResponse(
        status="healthy",
        active_documents=get_document_store().count(),
        canonical_industries=len(get_canonical_industries()),
        version=__version__,
    )


# =============================================================================
# Industry Catalog Endpoints
# =============================================================================


@app.get("/api/v1/industries", response_model=IndustriesResponse)
async def list_industries() -> IndustriesResponse:
    """List the canonical industries used to filter and label candidates."""
    return IndustriesResponse(industries=list(get_canonical_industries()))


@app.get("/api/v1/industries/{industry_key}/sub-industries", response_model=SubIndustriesResponse)
async def list_sub_industries(industry_key: str) -> SubIndustriesResponse:
    """List sub-industry choices for an industry (platform defaults or generic)."""
    key = normalize_key(industry_key)
    if not key:
        raise HTTPException(status_code=404, detail="Unknown industry key")
    return SubIndustriesResponse(industry_key=key, sub_industries=merge_sub_industries(key))


# =============================================================================
# Interview Endpoints
# =============================================================================


@app.get("/api/v1/onboarding/industry-interview/{tenant_id}", response_model=InterviewResponse)
async def get_industry_interview(tenant_id: str) -> InterviewResponse:
    """Return the tenant's current interview state (fresh if none is stored)."""
    tenant_id = safe_trim(tenant_id)
    document = get_document_store().get(tenant_id)
    return InterviewResponse(tenant_id=tenant_id, industry_inference=load_interview_state(document))


@app.post("/api/v1/onboarding/industry-interview", response_model=InterviewResponse)
@limiter.limit(f"{settings.rate_limit_per_minute}/minute")
async def industry_interview(request: Request, interview_request: InterviewRequest) -> InterviewResponse:
    """
    Drive the industry interview.

    - **tenantId**: Tenant being onboarded
    - **action**: `start`, `answer` or `reset`
    - **qid** / **answer**: Required for `answer`
    """
    tenant_id = safe_trim(interview_request.tenant_id)
    action = interview_request.action
    engine = IndustryInterviewEngine(settings=get_settings())
    canonical = get_canonical_industries()

    transition: dict[str, InterviewState] = {}

    def apply(document: dict | None) -> dict:
        before = load_interview_state(document, engine.settings.max_rounds)
        if action == "reset":
            after = engine.reset(before)
        elif action == "start":
            after = engine.start(before, canonical)
        else:
            after = engine.answer(
                before,
                interview_request.qid,
                _answer_text(interview_request.answer),
                canonical=canonical,
            )
        transition["before"], transition["after"] = before, after
        return store_interview_state(document, after)

    try:
        get_document_store().update(tenant_id, apply)
    except InterviewValidationError as e:
        record_rejected_action(action, tenant_id, e.code)
        raise HTTPException(
            status_code=400,
            detail={"error": e.code, "message": e.message},
        ) from e

    record_interview_action(action, tenant_id, transition["before"], transition["after"])
    return InterviewResponse(tenant_id=tenant_id, industry_inference=transition["after"])


# =============================================================================
# Entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "industry_interview.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
