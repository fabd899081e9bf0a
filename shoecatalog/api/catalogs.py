"""Catalog PDF API endpoints.

Provides endpoints for generating catalog PDFs from product IDs,
listing generated catalogs, and downloading a stored PDF.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from shoecatalog.api.dependencies import (
    get_blob_store,
    get_document_builder,
    get_image_acquirer,
    get_repository,
)
from shoecatalog.api.schemas import (
    ErrorResponse,
    GenerateCatalogRequest,
    GenerateCatalogResponse,
    GeneratedCatalogListResponse,
    GeneratedCatalogSchema,
)
from shoecatalog.application.catalog_generation_service import CatalogGenerationService
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.domain.entities import GeneratedCatalog
from shoecatalog.imaging.acquirer import ImageAcquirer
from shoecatalog.infrastructure.blob_store import BlobStore
from shoecatalog.infrastructure.config import settings
from shoecatalog.pdf.builder import CatalogDocumentBuilder

router = APIRouter(prefix="/pdf", tags=["Catalogs"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    repository: Annotated[CatalogRepository, Depends(get_repository)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
    acquirer: Annotated[ImageAcquirer, Depends(get_image_acquirer)],
    builder: Annotated[CatalogDocumentBuilder, Depends(get_document_builder)],
) -> CatalogGenerationService:
    """Get catalog generation service for the request."""
    return CatalogGenerationService(
        repository,
        blob_store,
        acquirer,
        builder=builder,
        documents_bucket=settings.documents_bucket,
    )


# ============================================================================
# Converters
# ============================================================================


def catalog_to_schema(catalog: GeneratedCatalog) -> GeneratedCatalogSchema:
    """Convert GeneratedCatalog entity to response schema."""
    return GeneratedCatalogSchema(
        pdf_id=catalog.id,
        filename=catalog.filename,
        download_url=catalog.download_url,
        product_ids=list(catalog.product_ids),
        created_at=catalog.created_at,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/generate",
    response_model=GenerateCatalogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Generate catalog PDF",
    description=(
        "Render one page per product, in request order, and store the PDF. "
        "Products without a usable image get a placeholder page."
    ),
)
async def generate_catalog(
    request: GenerateCatalogRequest,
    service: Annotated[CatalogGenerationService, Depends(get_service)],
) -> GenerateCatalogResponse:
    """Generate a catalog PDF.

    Raises:
        InvalidRequestError: If ``product_ids`` is empty or malformed.
        NotFoundError: If none of the products exist.
        StorageError: If the PDF cannot be stored.
    """
    result = await service.generate(request.product_ids)

    return GenerateCatalogResponse(
        message=result.message,
        pdf_id=result.pdf_id,
        filename=result.filename,
        download_url=result.download_url,
        product_ids=list(result.product_ids),
        missing_product_ids=result.missing_product_ids,
        page_count=result.page_count,
        placeholder_pages=result.placeholder_pages,
    )


@router.get(
    "",
    response_model=GeneratedCatalogListResponse,
    summary="List generated catalogs",
    description="Get generated catalog PDFs, newest first.",
)
async def list_catalogs(
    service: Annotated[CatalogGenerationService, Depends(get_service)],
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
) -> GeneratedCatalogListResponse:
    """List generated catalogs."""
    catalogs = await service.list_catalogs(limit=limit)
    return GeneratedCatalogListResponse(
        catalogs=[catalog_to_schema(c) for c in catalogs],
        total=len(catalogs),
    )


@router.get(
    "/{filename}",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
    summary="Download catalog PDF",
    description="Download a stored catalog PDF as an attachment.",
)
async def download_catalog(
    filename: str,
    service: Annotated[CatalogGenerationService, Depends(get_service)],
) -> Response:
    """Download a generated catalog.

    Raises:
        NotFoundError: If the PDF does not exist.
    """
    catalog_file = await service.get_catalog_file(filename)
    return Response(
        content=catalog_file.data,
        media_type=catalog_file.content_type,
        headers={"Content-Disposition": f'attachment; filename="{catalog_file.filename}"'},
    )
