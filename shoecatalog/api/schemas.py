"""API schemas for the Shoe Catalog API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict[str, Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    database: str


# ============================================================================
# Brand Schemas
# ============================================================================


class BrandSchema(BaseModel):
    """A brand."""

    id: str = Field(..., description="Brand identifier")
    name: str = Field(..., description="Brand display name")


class BrandCreateRequest(BaseModel):
    """Request to create (or look up) a brand by name."""

    brand_name: str | None = Field(
        default=None,
        description="Brand name; matched case-insensitively against existing brands",
    )


class BrandCreateResponse(BaseModel):
    """Response for a brand lookup-or-create."""

    message: str = Field(..., description="Outcome message")
    brand: BrandSchema = Field(..., description="Existing or newly created brand")
    created: bool = Field(..., description="Whether the brand was created by this call")


class BrandListResponse(BaseModel):
    """List of brands."""

    brands: list[BrandSchema] = Field(..., description="Brands ordered by name")
    total: int = Field(..., description="Number of brands")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """A catalog product."""

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    brand_id: str = Field(..., description="Owning brand identifier")
    brand_name: str = Field(..., description="Owning brand name")
    image_url: str = Field(default="", description="Product image URL or storage key")


class ProductCreateResponse(BaseModel):
    """Response for a created product."""

    message: str = Field(..., description="Outcome message")
    product: ProductSchema = Field(..., description="The created product")


class ProductListResponse(BaseModel):
    """List of products."""

    products: list[ProductSchema] = Field(..., description="Products")
    total: int = Field(..., description="Number of products")


# ============================================================================
# Catalog PDF Schemas
# ============================================================================


class GenerateCatalogRequest(BaseModel):
    """Request to generate a catalog PDF.

    ``product_ids`` is validated by the generation service so that a
    missing or malformed value is reported as ``INVALID_REQUEST``.
    """

    product_ids: Any = Field(
        default=None,
        description="Product IDs to include, one page per product, in request order",
    )


class GenerateCatalogResponse(BaseModel):
    """Response for a generated catalog PDF."""

    message: str = Field(..., description="Outcome message")
    pdf_id: str = Field(..., description="Generated catalog identifier")
    filename: str = Field(..., description="Stored PDF filename")
    download_url: str = Field(..., description="Public URL of the PDF")
    product_ids: list[str] = Field(..., description="Products rendered, in page order")
    missing_product_ids: list[str] = Field(
        default_factory=list, description="Requested IDs that did not resolve"
    )
    page_count: int = Field(..., description="Number of pages in the PDF")
    placeholder_pages: int = Field(
        default=0, description="Pages rendered without a product image"
    )


class GeneratedCatalogSchema(BaseModel):
    """A previously generated catalog PDF."""

    pdf_id: str = Field(..., description="Catalog identifier")
    filename: str = Field(..., description="Stored PDF filename")
    download_url: str = Field(..., description="Public URL of the PDF")
    product_ids: list[str] = Field(..., description="Products covered by the PDF")
    created_at: datetime | None = Field(default=None, description="When it was generated")


class GeneratedCatalogListResponse(BaseModel):
    """List of generated catalog PDFs."""

    catalogs: list[GeneratedCatalogSchema] = Field(..., description="Newest first")
    total: int = Field(..., description="Number of catalogs returned")
