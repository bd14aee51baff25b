"""
Catchbook Backend - record keeping for the Shinojima fishing cooperative.

ARCHITECTURE:
- Browser client: photo / voice / manual capture, dashboard screens
- FastAPI Backend: thin routes over the record store and the AI client
- Record store: in-memory maps (default) or SQLAlchemy tables
- Groq: fish recognition, receipt OCR, business advice (opaque capability)

Collaborators are constructed once and passed down through app.state;
create_app() accepts replacements so tests get isolated instances.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catchbook.ai.groq_client import AIClient, GroqAIClient
from catchbook.api.routes import analysis, dashboard, grants, records, users
from catchbook.core.config import settings
from catchbook.services.store import RecordStore, build_store

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: report which store and AI backend this process runs with.
    Shutdown: nothing to release; the memory store dies with the process.
    """
    logger.info(f"Environment: {settings.ENVIRONMENT}, record store: {type(app.state.store).__name__}")
    ai_client = app.state.ai_client
    if isinstance(ai_client, GroqAIClient) and not ai_client.is_available():
        logger.warning("AI analysis disabled (no GROQ_API_KEY)")
    yield
    logger.info("Shutting down")


def create_app(store: Optional[RecordStore] = None, ai_client: Optional[AIClient] = None) -> FastAPI:
    """Build the application around the given (or configured) collaborators."""
    app = FastAPI(
        title="Catchbook API",
        description="Shipments, expenses, dashboard and photo analysis for a fishing cooperative.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else build_store()
    app.state.ai_client = ai_client if ai_client is not None else GroqAIClient()

    # Restrict CORS to specific origins, methods and headers (not wildcards)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
        ],
        max_age=600,  # Cache preflight for 10 minutes
    )

    @app.middleware("http")
    async def add_security_headers(request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"  # Prevent MIME sniffing
        response.headers["X-Frame-Options"] = "DENY"  # Prevent clickjacking
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.include_router(analysis.router, prefix="/api", tags=["analysis"])
    app.include_router(records.router, prefix="/api", tags=["records"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
    app.include_router(grants.router, prefix="/api", tags=["grants"])
    app.include_router(users.router, prefix="/api", tags=["users"])

    @app.get("/health")
    def health():
        return {"status": "ok", "store": type(app.state.store).__name__}

    return app


configure_logging()
app = create_app()
