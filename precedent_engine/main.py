"""Main FastAPI application for the precedent engine."""

from contextlib import asynccontextmanager
from typing import Optional
import time

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
import uvicorn

from . import __version__
from .api import health, precedents
from .core.config import Settings, settings
from .core.exceptions import ValidationError
from .core.log_config import configure_logging
from .services.case_catalog import CaseCatalog
from .services.precedent_engine import PrecedentEngine

logger = structlog.get_logger()


def create_app(
    app_settings: Optional[Settings] = None,
    engine: Optional[PrecedentEngine] = None,
    catalog: Optional[CaseCatalog] = None,
) -> FastAPI:
    """Build the application.

    The engine and catalog are built from settings at startup unless given.
    A malformed engine configuration aborts startup.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting precedent engine", version=__version__, env=app_settings.app_env)

        app.state.engine = engine if engine is not None else PrecedentEngine.from_settings(app_settings)
        app.state.catalog = catalog if catalog is not None else CaseCatalog.from_json(app_settings.catalog_path)

        yield

        logger.info("Shutting down precedent engine")

    app = FastAPI(
        title="Precedent Engine",
        description="Relevance, authority and citation strategy for veterans-law precedents",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request, exc: ValidationError):
        logger.warning("Rejected case record", case_id=exc.case_id, fields=list(exc.fields), error=str(exc))
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "caseId": exc.case_id, "fields": list(exc.fields)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error("Unhandled exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.middleware("http")
    async def log_requests(request, call_next):
        """Log all requests."""
        start_time = time.time()

        logger.info(
            "Request received",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=time.time() - start_time,
        )
        return response

    app.include_router(
        precedents.router,
        prefix=f"{app_settings.api_prefix}/precedents",
        tags=["precedents"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["health"],
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": app_settings.app_name,
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "health": "/health",
        }

    return app


configure_logging(settings.log_level, settings.log_format)
app = create_app()


def run():
    """Run the application."""
    uvicorn.run(
        "precedent_engine.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
