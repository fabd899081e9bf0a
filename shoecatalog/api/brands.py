"""Brand API endpoints.

Provides endpoints for listing brands, looking up or creating a brand
by name, and listing a brand's products.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from shoecatalog.api.dependencies import get_repository
from shoecatalog.api.products import product_to_schema
from shoecatalog.api.schemas import (
    BrandCreateRequest,
    BrandCreateResponse,
    BrandListResponse,
    BrandSchema,
    ErrorResponse,
    ProductListResponse,
)
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.catalog.service import CatalogService
from shoecatalog.domain.entities import Brand

router = APIRouter(prefix="/brands", tags=["Brands"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    repository: Annotated[CatalogRepository, Depends(get_repository)],
) -> CatalogService:
    """Get catalog service for the request."""
    return CatalogService(repository)


# ============================================================================
# Converters
# ============================================================================


def brand_to_schema(brand: Brand) -> BrandSchema:
    """Convert Brand entity to response schema."""
    return BrandSchema(id=brand.id, name=brand.name)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=BrandListResponse,
    summary="List brands",
    description="Get all brands ordered by name.",
)
async def list_brands(
    service: Annotated[CatalogService, Depends(get_service)],
) -> BrandListResponse:
    """List all brands."""
    brands = await service.list_brands()
    return BrandListResponse(
        brands=[brand_to_schema(b) for b in brands],
        total=len(brands),
    )


@router.post(
    "",
    response_model=BrandCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
    },
    summary="Create brand",
    description=(
        "Create a brand, or return the existing one whose name matches "
        "case-insensitively."
    ),
)
async def create_brand(
    request: BrandCreateRequest,
    service: Annotated[CatalogService, Depends(get_service)],
) -> BrandCreateResponse:
    """Look up or create a brand.

    Raises:
        InvalidRequestError: If the name is blank.
    """
    result = await service.get_or_create_brand(request.brand_name)
    return BrandCreateResponse(
        message="Brand created successfully" if result.created else "Brand already exists",
        brand=brand_to_schema(result.brand),
        created=result.created,
    )


@router.get(
    "/{brand_id}/products",
    response_model=ProductListResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List brand products",
    description="Get the products of a brand.",
)
async def list_brand_products(
    brand_id: str,
    service: Annotated[CatalogService, Depends(get_service)],
) -> ProductListResponse:
    """List products of a brand.

    Raises:
        NotFoundError: If the brand does not exist.
    """
    products = await service.list_brand_products(brand_id)
    return ProductListResponse(
        products=[product_to_schema(p) for p in products],
        total=len(products),
    )
