"""Shared fixtures for API tests.

Each test gets a fresh application wired to a temporary SQLite file
and an in-memory blob store through dependency overrides.
"""

import asyncio
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import shoecatalog.catalog.models  # noqa: F401  (registers tables on Base)
from shoecatalog.api.dependencies import get_blob_store
from shoecatalog.infrastructure.blob_store import InMemoryBlobStore
from shoecatalog.infrastructure.database import Base, get_session
from shoecatalog.main import create_app


async def _create_tables(url: str) -> None:
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Create a SQLite database file with all tables."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    asyncio.run(_create_tables(url))
    return url


@pytest.fixture
def api_blob_store() -> InMemoryBlobStore:
    """Blob store shared between the app and the test."""
    return InMemoryBlobStore()


@pytest.fixture
def app(database_url: str, api_blob_store: InMemoryBlobStore) -> Generator[FastAPI, None, None]:
    """Create the application with test dependencies."""
    # NullPool: the test client may run each request on its own event loop
    engine = create_async_engine(database_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application = create_app()
    application.dependency_overrides[get_session] = override_get_session
    application.dependency_overrides[get_blob_store] = lambda: api_blob_store

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def create_product(client: TestClient, jpeg_bytes: bytes):
    """Factory fixture that creates a product through the API."""

    def _create(name: str = "Air Max", brand: str = "NIKE", image: bytes | None = None) -> dict:
        response = client.post(
            "/products",
            data={"product_name": name, "brand_name": brand},
            files={"product_image": ("shoe.jpg", image or jpeg_bytes, "image/jpeg")},
        )
        assert response.status_code == 201, response.text
        return response.json()["product"]

    return _create
