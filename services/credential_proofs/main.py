"""
Credential Proofs Service - Main Application
============================================

FastAPI application for credential threshold proofs, condition matching
and selective disclosure.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from nfcareer import __version__
from nfcareer.config import settings
from nfcareer.logging import bind_context, clear_context, get_logger, setup_logging
from nfcareer.storage import get_disclosure_store
from nfcareer.zk import CIRCUITS
from services.credential_proofs.routes import (
    circuits,
    conditions,
    credentials,
    disclosures,
    proofs,
    verification,
)


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="credential_proofs",
)

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = "healthy"
    service: str
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    components: dict[str, dict[str, Any]] = Field(default_factory=dict)


def circuit_assets_health() -> dict[str, Any]:
    """Report which circuit files are present in the build directory."""
    build_dir = settings.zk.build_dir
    missing = [
        filename
        for spec in CIRCUITS.values()
        for filename in (spec.wasm_file, spec.zkey_file, spec.vkey_file)
        if not (build_dir / filename).exists()
    ]
    return {
        "status": "healthy" if not missing else "degraded",
        "build_dir": str(build_dir),
        "missing": missing,
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "credential_proofs_service_starting",
        environment=settings.environment.value,
        port=settings.port,
        storage_backend=settings.storage.backend.value,
    )

    # Startup
    try:
        get_disclosure_store()

        assets = circuit_assets_health()
        if assets["missing"]:
            logger.warning(
                "zk_circuit_assets_missing",
                build_dir=assets["build_dir"],
                missing=assets["missing"],
            )

    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("credential_proofs_service_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="NonFungibleCareer Credential Proofs Service",
    description="Zero-knowledge threshold proofs and selective disclosure of career credentials",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_log_context(request: Request, call_next: Any) -> Any:
    """Scope structlog context variables to a single request."""
    clear_context()
    bind_context(
        service="credential_proofs",
        method=request.method,
        path=request.url.path,
    )
    return await call_next(request)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    The service is degraded, not down, when circuit assets are missing:
    condition matching and stored disclosures still work.
    """
    components: dict[str, dict[str, Any]] = {
        "circuits": circuit_assets_health(),
        "storage": {"status": "healthy", "backend": settings.storage.backend.value},
    }

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="credential_proofs",
        version=__version__,
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "NonFungibleCareer Credential Proofs Service",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    proofs.router,
    prefix="/api/v1/proofs",
    tags=["ZK Proofs"],
)

app.include_router(
    circuits.router,
    prefix="/api/v1/circuits",
    tags=["Circuits"],
)

app.include_router(
    credentials.router,
    prefix="/api/v1/credentials",
    tags=["Verifiable Credentials"],
)

app.include_router(
    conditions.router,
    prefix="/api/v1/conditions",
    tags=["Condition Matching"],
)

app.include_router(
    disclosures.router,
    prefix="/api/v1/disclosures",
    tags=["Selective Disclosure"],
)

app.include_router(
    verification.router,
    prefix="/api/v1/verify",
    tags=["Verification"],
)


# ============================================================================
# Error Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> Any:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> Any:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.credential_proofs.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
