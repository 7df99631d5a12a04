"""Main FastAPI application for Hireflow."""

import time
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from hireflow import __version__
from hireflow.config import settings
from hireflow.core.errors import (
    CascadeIncomplete,
    DocumentUnreadable,
    DuplicateApplication,
    HireflowError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from hireflow.utils.logging import configure_logging, get_logger
from hireflow.api.models import ErrorResponse
from hireflow.api.routes import all_routers
from hireflow.jobs.application import ApplicationWorkflow
from hireflow.storage import LocalResumeStore, create_repositories
import hireflow.api.routes as routes_module

# Configure logging
configure_logging()
logger = get_logger(__name__)

ERROR_STATUS_CODES = {
    DocumentUnreadable: 400,
    InvalidTransition: 400,
    PermissionDenied: 403,
    NotFound: 404,
    DuplicateApplication: 409,
    CascadeIncomplete: 500,
}


def error_status_code(exc: HireflowError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


def create_workflow() -> ApplicationWorkflow:
    """Build the workflow from settings."""
    jobs, applications = create_repositories(settings.database_url, echo=settings.db_echo)
    return ApplicationWorkflow(
        jobs=jobs,
        applications=applications,
        resume_store=LocalResumeStore(settings.resume_dir),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Hireflow API")

    if routes_module.workflow is None:
        try:
            routes_module.workflow = create_workflow()
        except Exception as e:
            logger.error("Application startup failed", error=str(e))
            raise

    logger.info(
        "Application startup completed successfully",
        storage=type(routes_module.workflow.applications).__name__
    )

    yield

    # Shutdown
    logger.info("Shutting down Hireflow API")


def create_app(workflow: Optional[ApplicationWorkflow] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if workflow is not None:
        routes_module.workflow = workflow

    app = FastAPI(
        title="Hireflow API",
        description="Resume evaluation and application lifecycle engine",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    for router in all_routers:
        app.include_router(router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "name": "Hireflow API",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else "disabled"
        }

    return app


def setup_middleware(app: FastAPI) -> None:
    """Setup application middleware."""

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                url=str(request.url),
                error=str(e),
                duration_seconds=time.perf_counter() - start_time
            )
            raise

        logger.info(
            "Request completed",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            duration_seconds=time.perf_counter() - start_time
        )
        return response


def _error_body(error: str, message: str, details=None) -> dict:
    return jsonable_encoder(ErrorResponse(
        error=error,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc)
    ))


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers."""

    @app.exception_handler(HireflowError)
    async def hireflow_exception_handler(request: Request, exc: HireflowError):
        status_code = error_status_code(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log(
            "Request rejected",
            error=exc.code,
            status_code=status_code,
            url=str(request.url),
            **exc.to_dict()
        )

        return JSONResponse(
            status_code=status_code,
            content=_error_body(type(exc).__name__, exc.message, exc.to_dict() or None)
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            url=str(request.url)
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("HTTPException", str(exc.detail))
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error",
            errors=exc.errors(),
            url=str(request.url)
        )

        return JSONResponse(
            status_code=422,
            content=_error_body(
                "ValidationError",
                "Request validation failed",
                {"validation_errors": jsonable_encoder(exc.errors())}
            )
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            url=str(request.url)
        )

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "InternalServerError",
                "An unexpected error occurred",
                {"error_type": type(exc).__name__} if settings.debug else None
            )
        )


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hireflow.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_config=None  # Use our custom logging
    )
