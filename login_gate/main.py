"""
FastAPI application serving the OAuth2 login step.

This module wires dependencies and configures the application.
Business logic is in login_gate/core, infrastructure in login_gate/infrastructure.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

# Configure logging FIRST, before other local imports
from login_gate.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from starlette.middleware.sessions import SessionMiddleware  # noqa: E402

from login_gate.core.exceptions import ProviderError, SecurityError  # noqa: E402
from login_gate.oauth import router as oauth_router  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Dependencies are lazy-loaded, so there is nothing to set up or close.
    """
    logger.info("Application starting up...")
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title="OAuth2 Login Gate",
    description="Validates login attempts against OAuth2 authorization servers",
    version="1.0.0",
    lifespan=lifespan,
)

# Session middleware holds the expected state across the provider round trip
SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
if not SESSION_SECRET_KEY:
    raise ValueError("SESSION_SECRET_KEY is not set in the environment.")
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET_KEY)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


@app.exception_handler(SecurityError)
async def security_error_handler(request: Request, exc: SecurityError):
    """
    Handle security errors (missing or mismatched OAuth2 state).

    Returns 400 Bad Request and aborts the login attempt.
    """
    logger.warning(
        f"Login aborted: {exc}",
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": "error", "message": str(exc)},
    )


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    """
    Handle OAuth2 provider errors.

    Returns 502 Bad Gateway: the authorization URL could not be built.
    """
    logger.error(f"Provider error: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "status": "error",
            "message": "OAuth2 provider unavailable - please retry",
        },
    )


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "login-gate",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(oauth_router.router)


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
