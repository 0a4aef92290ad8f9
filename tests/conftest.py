from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bookshare.adapters.catalog.bn import BnCatalogAdapter
from bookshare.adapters.review_store.memory import InMemoryReviewStoreAdapter
from bookshare.config import Environment, Settings
from bookshare.domain.models import Base
from bookshare.main import create_app
from bookshare.services.recommendation import RecommendationService
from tests.factories import CatalogStub

CATALOG_URL = "http://catalog.test/api"
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def catalog_stub() -> CatalogStub:
    return CatalogStub()


@pytest.fixture
async def catalog(catalog_stub: CatalogStub) -> AsyncGenerator[BnCatalogAdapter, None]:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(catalog_stub.handler), base_url=CATALOG_URL
    )
    yield BnCatalogAdapter(client)
    await client.aclose()


@pytest.fixture
def review_store() -> InMemoryReviewStoreAdapter:
    return InMemoryReviewStoreAdapter()


@pytest.fixture
def service(catalog, review_store) -> RecommendationService:
    return RecommendationService(catalog, review_store)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(environment=Environment.TEST, catalog_base_url=CATALOG_URL)


@pytest.fixture
async def client(test_settings, catalog, review_store) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(test_settings, catalog=catalog, review_store=review_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory SQLite review store per test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
