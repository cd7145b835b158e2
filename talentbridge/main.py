"""
TalentBridge - Main Application

FastAPI backend for a job/education marketplace:
- Students, schools and employers register and keep one profile each
- Employers post jobs, schools post programs
- Students apply to exactly one job or program per application

Run: uvicorn talentbridge.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from talentbridge import __version__
from talentbridge.api.routes import api_router
from talentbridge.core.auth import AccessGate
from talentbridge.core.config import Settings, get_settings
from talentbridge.core.errors import DomainError, StoreError, ValidationError
from talentbridge.core.logging_config import setup_logging
from talentbridge.db.store import EntityStore
from talentbridge.models.domain import ListingKind
from talentbridge.schemas.schemas import HealthResponse
from talentbridge.services.account_service import AccountService
from talentbridge.services.application_service import ApplicationService
from talentbridge.services.listing_service import ListingService
from talentbridge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

SERVER_ERROR = {"msg": "Server Error"}


def install_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to the HTTP status table."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if isinstance(exc, StoreError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
            return JSONResponse(status_code=500, content=SERVER_ERROR)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=ValidationError.from_pydantic(exc.errors()).to_body())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=SERVER_ERROR)


def create_app(settings: Optional[Settings] = None, store: Optional[EntityStore] = None) -> FastAPI:
    """Build an app bound to ``store`` (or one built from ``settings``)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    owns_store = store is None
    if store is None:
        store = EntityStore(settings.store_url, timeout_seconds=settings.store_timeout_seconds,
                            echo=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.open()
        store.create_schema()
        logger.info("TalentBridge %s started", __version__)
        yield
        if owns_store:
            store.close()

    app = FastAPI(
        title="TalentBridge",
        description="Job and education marketplace API: profiles, listings and applications.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware (allow all for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.store = store
    app.state.gate = AccessGate(store, settings)
    app.state.accounts = AccountService(store, settings)
    app.state.profiles = ProfileService(store)
    app.state.applications = ApplicationService(store)
    app.state.listings = {kind: ListingService(store, kind) for kind in ListingKind}

    install_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Store connectivity check."""
        connected = store.ping()
        return HealthResponse(
            status="healthy" if connected else "degraded",
            store="connected" if connected else "disconnected",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("talentbridge.main:app", host=settings.host, port=settings.port, reload=settings.debug)
