"""Shared fixtures for all tests.

Image factories, an in-memory blob store, and a throwaway SQLite
catalog database.
"""

from collections.abc import AsyncGenerator
from io import BytesIO

import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import shoecatalog.catalog.models  # noqa: F401  (registers tables on Base)
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.infrastructure.blob_store import InMemoryBlobStore
from shoecatalog.infrastructure.database import Base


# ============================================================================
# Image Factories
# ============================================================================


def make_image_bytes(
    width: int = 100,
    height: int = 80,
    fmt: str = "JPEG",
    mode: str = "RGB",
    color: tuple[int, ...] = (200, 30, 30),
) -> bytes:
    """Encode a solid-color test image."""
    image = Image.new(mode, (width, height), color)
    out = BytesIO()
    image.save(out, format=fmt)
    return out.getvalue()


def image_size(data: bytes) -> tuple[int, int]:
    """Decode image bytes and return their pixel size."""
    with Image.open(BytesIO(data)) as image:
        return image.size


@pytest.fixture
def make_image():
    """Factory fixture for encoded test images."""
    return make_image_bytes


@pytest.fixture
def read_size():
    """Helper fixture returning the pixel size of encoded image bytes."""
    return image_size


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small JPEG."""
    return make_image_bytes()


@pytest.fixture
def png_bytes() -> bytes:
    """A small opaque PNG."""
    return make_image_bytes(fmt="PNG", color=(20, 120, 220))


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    """Create an empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create an in-memory SQLite catalog database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session on the test database."""
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def repository(session: AsyncSession) -> CatalogRepository:
    """Create a catalog repository on the test session."""
    return CatalogRepository(session)
