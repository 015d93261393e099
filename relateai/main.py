"""
RelateAI API - FastAPI Application
Main entry point with all routes configured.
"""
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from relateai import __version__
from relateai.config import settings
from relateai.database import init_db
from relateai.core.exceptions import AppError
from relateai.core.logging import setup_logging
from relateai.core.validation import format_error_list

# Import all API routers
from relateai.api import auth, accounts, research, meddppicc, contacts, messages, email, email_templates, linkedin

logger = logging.getLogger("relateai.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    setup_logging()
    await init_db()
    logger.info("RelateAI API %s started", __version__)
    yield
    # Shutdown
    logger.info("RelateAI API shutting down")


app = FastAPI(
    title="RelateAI API",
    description="AI-assisted sales outreach: accounts, contacts, MEDDPPICC and messaging",
    version=__version__,
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %s %.1fms",
        request.method, request.url.path, response.status_code, duration_ms
    )
    return response


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    body = {"success": False, "message": exc.message}
    if getattr(exc, "errors", None) is not None:
        body["errors"] = exc.errors
    if getattr(exc, "error", None) is not None:
        body["error"] = exc.error
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Path/query parameters FastAPI validates itself (ids, indexes)."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation error",
            "errors": format_error_list(exc.errors(), strip_segment=True)
        }
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "error": str(exc)}
    )


# Include all routers
app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(research.router)
app.include_router(meddppicc.router)
app.include_router(contacts.router)
app.include_router(messages.router)
app.include_router(email.router)
app.include_router(email_templates.router)
app.include_router(linkedin.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "RelateAI API is running",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "version": __version__
    }
