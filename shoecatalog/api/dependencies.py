"""Shared FastAPI dependencies.

Builds the per-request collaborators (repository, blob store, image
acquirer) that the routers hand to the application services. Tests
swap these out through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.imaging.acquirer import ImageAcquirer
from shoecatalog.infrastructure.blob_store import BlobStore, build_blob_store
from shoecatalog.infrastructure.config import settings
from shoecatalog.infrastructure.database import get_session
from shoecatalog.pdf.builder import CatalogDocumentBuilder


def get_blob_store(request: Request) -> BlobStore:
    """Get the application's blob store.

    The store is created on first use when the lifespan did not set one.
    """
    store = getattr(request.app.state, "blob_store", None)
    if store is None:
        store = build_blob_store(settings)
        request.app.state.blob_store = store
    return store


def get_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogRepository:
    """Get a catalog repository bound to the request session."""
    return CatalogRepository(session)


def get_image_acquirer(
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> ImageAcquirer:
    """Get an image acquirer reading from the images bucket."""
    return ImageAcquirer(
        blob_store,
        settings.images_bucket,
        timeout=settings.image_fetch_timeout,
        concurrency=settings.image_fetch_concurrency,
        max_bytes=settings.max_upload_bytes,
    )


def get_document_builder() -> CatalogDocumentBuilder:
    """Get a catalog document builder."""
    return CatalogDocumentBuilder(
        max_image_edge=settings.image_max_edge,
        jpeg_quality=settings.image_jpeg_quality,
    )
