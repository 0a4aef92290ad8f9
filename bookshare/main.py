"""FastAPI application factory — entry point for BookShare."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookshare.adapters.catalog.bn import BnCatalogAdapter, build_http_client
from bookshare.adapters.review_store.memory import InMemoryReviewStoreAdapter
from bookshare.adapters.review_store.sql import SqlReviewStoreAdapter
from bookshare.api.errors import register_exception_handlers
from bookshare.api.middleware.session import SessionConfig, SessionGateMiddleware
from bookshare.api.routes.books import router as books_router
from bookshare.api.routes.recommendations import router as recommendations_router
from bookshare.api.routes.session import router as session_router
from bookshare.config import ReviewStoreBackend, Settings, settings
from bookshare.database import build_engine, build_session_factory
from bookshare.ports.catalog import CatalogPort
from bookshare.ports.review_store import ReviewStorePort

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: open and close the remote collaborators."""
    cfg: Settings = app.state.settings
    logger.info("BookShare starting up...")
    logger.info("Environment: %s", cfg.environment.value)
    logger.info("Catalog: %s", cfg.catalog_base_url)
    logger.info("Review store backend: %s", cfg.review_store_backend.value)

    http_client = None
    engine = None
    if getattr(app.state, "catalog", None) is None:
        http_client = build_http_client(cfg.catalog_base_url, cfg.catalog_timeout)
        app.state.catalog = BnCatalogAdapter(http_client)
    if getattr(app.state, "review_store", None) is None:
        if cfg.review_store_backend == ReviewStoreBackend.SQL:
            engine = build_engine(cfg.database_url)
            app.state.review_store = SqlReviewStoreAdapter(build_session_factory(engine))
        else:
            app.state.review_store = InMemoryReviewStoreAdapter()

    yield

    logger.info("BookShare shutting down...")
    if http_client is not None:
        await http_client.aclose()
    if engine is not None:
        await engine.dispose()


def create_app(
    cfg: Settings | None = None,
    *,
    catalog: CatalogPort | None = None,
    review_store: ReviewStorePort | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Collaborators passed in explicitly are used as-is; the rest are built
    from settings when the application starts.
    """
    cfg = cfg or settings
    application = FastAPI(
        title="BookShare",
        description="Book sharing catalog, reviews and recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.settings = cfg
    application.state.catalog = catalog
    application.state.review_store = review_store

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        SessionGateMiddleware, config=SessionConfig.from_settings(cfg)
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    # ── Routes ─────────────────────────────────────
    application.include_router(session_router)
    application.include_router(books_router)
    application.include_router(recommendations_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "bookshare"}

    return application


app = create_app()
