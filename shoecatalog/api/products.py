"""Product API endpoints.

Provides endpoints for creating products from an uploaded photo and
listing products.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from shoecatalog.api.dependencies import get_blob_store, get_repository
from shoecatalog.api.schemas import (
    ErrorResponse,
    ProductCreateResponse,
    ProductListResponse,
    ProductSchema,
)
from shoecatalog.application.ingestion_service import ProductIngestionService
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.catalog.service import CatalogService
from shoecatalog.domain.entities import Product
from shoecatalog.infrastructure.blob_store import BlobStore
from shoecatalog.infrastructure.config import settings

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    repository: Annotated[CatalogRepository, Depends(get_repository)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> ProductIngestionService:
    """Get product ingestion service for the request."""
    return ProductIngestionService(
        repository,
        blob_store,
        images_bucket=settings.images_bucket,
        max_upload_bytes=settings.max_upload_bytes,
        max_image_edge=settings.image_max_edge,
        jpeg_quality=settings.image_jpeg_quality,
    )


def get_catalog_service(
    repository: Annotated[CatalogRepository, Depends(get_repository)],
) -> CatalogService:
    """Get catalog service for the request."""
    return CatalogService(repository)


# ============================================================================
# Converters
# ============================================================================


def product_to_schema(product: Product) -> ProductSchema:
    """Convert Product entity to response schema."""
    return ProductSchema(
        id=product.id,
        name=product.name,
        brand_id=product.brand_id,
        brand_name=product.brand_name,
        image_url=product.image_ref,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ProductCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Create product",
    description=(
        "Create a product from a multipart upload. The brand is matched "
        "case-insensitively or created; the photo is resized and stored."
    ),
)
async def create_product(
    service: Annotated[ProductIngestionService, Depends(get_service)],
    product_name: Annotated[str | None, Form()] = None,
    brand_name: Annotated[str | None, Form()] = None,
    product_image: Annotated[UploadFile | None, File()] = None,
) -> ProductCreateResponse:
    """Create a product with its photo.

    Raises:
        InvalidRequestError: On missing fields or an unacceptable image.
        StorageError: If the photo or product cannot be stored.
    """
    image_data: bytes | None = None
    content_type: str | None = None
    filename: str | None = None
    if product_image is not None:
        # one byte past the limit is enough to reject
        image_data = await product_image.read(service.max_upload_bytes + 1)
        content_type = product_image.content_type
        filename = product_image.filename

    result = await service.ingest(
        product_name=product_name,
        brand_name=brand_name,
        image_data=image_data,
        content_type=content_type,
        filename=filename,
    )

    return ProductCreateResponse(
        message=result.message,
        product=product_to_schema(result.product),
    )


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Get all products, newest first.",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductListResponse:
    """List all products."""
    products = await service.list_products()
    return ProductListResponse(
        products=[product_to_schema(p) for p in products],
        total=len(products),
    )
