"""
Main Application Entry Point
============================

Responsibilities:
- Initialize FastAPI application
- Load local history once at startup
- Register API routers
- Set up exception handlers
- Provide health check endpoints
- Configure CORS
"""

import asyncio
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from myjellybean.core.config import get_settings
from myjellybean.core.exceptions import JellyBeanException, exception_to_http_exception
from myjellybean.core.logging import LogContext, configure_logging, get_logger
from myjellybean.schemas.session import SessionState
from myjellybean.services.session_service import AnalysisSession, get_analysis_session

# Import routers
from myjellybean.api.routes import analyze, history, navigation, samples

settings = get_settings()
logger = get_logger(__name__)


# =====================================
# Application Lifespan Handler
# =====================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events.

    Startup:
    - Configure logging
    - Load persisted history (corrupt or missing history starts empty)

    Shutdown:
    - Log application shutdown
    """
    configure_logging()
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        provider_configured=settings.provider_configured,
    )

    session_factory = app.dependency_overrides.get(get_analysis_session, get_analysis_session)
    session_factory().start()

    try:
        yield
    except asyncio.CancelledError:
        logger.debug("application_shutdown_requested")
        raise
    finally:
        logger.info("application_shutdown_complete")


# =====================================
# FastAPI App Initialization
# =====================================

app = FastAPI(
    title=settings.app_name,
    description="""
    MyJellyBean - bite-sized clarity for high-pressure messages.

    Paste a suspicious message, add a few context signals, and get a risk
    score, red flags, next steps, a safer reply draft and a shareable report.
    History stays on this device.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
)


# =====================================
# CORS Configuration
# =====================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def bind_request_id(request: Request, call_next):
    """Tag every log line of a request with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LogContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# =====================================
# Exception Handlers
# =====================================

@app.exception_handler(JellyBeanException)
async def jellybean_exception_handler(request: Request, exc: JellyBeanException):
    """
    Handle custom MyJellyBean exceptions.

    Converts custom exceptions to proper HTTP responses.
    """
    logger.warning(
        "jellybean_exception",
        exception_type=type(exc).__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )

    http_exc = exception_to_http_exception(exc)
    return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.

    Provides detailed error messages for invalid requests.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning("request_validation_error", path=request.url.path, errors=errors)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "message": "Validation error",
            "details": {"errors": errors},
        },
    )


# =====================================
# Register Routers
# =====================================

app.include_router(analyze.router, prefix="/api/v1")
app.include_router(navigation.router, prefix="/api/v1")
app.include_router(history.router, prefix="/api/v1")
app.include_router(samples.router, prefix="/api/v1")


# =====================================
# Health Check Endpoints
# =====================================

@app.get(
    "/health",
    tags=["Health"],
    summary="Health Check",
    description="Returns service status and whether the analysis provider is configured.",
)
def health_check():
    return {
        "status": "healthy" if settings.provider_configured else "degraded",
        "service": settings.app_name,
        "version": settings.app_version,
        "checks": {
            "provider_credential": "configured" if settings.provider_configured else "missing",
        },
    }


@app.get(
    "/session",
    tags=["Navigation"],
    response_model=SessionState,
    summary="Session State",
    description="Which view to render, plus the draft form and last error.",
)
def session_state(session: AnalysisSession = Depends(get_analysis_session)):
    return session.snapshot()
