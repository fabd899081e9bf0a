"""Catalog generation application service.

Orchestrates catalog PDF generation:
- Resolving requested product IDs against the catalog store
- Acquiring each product's image (network, then storage, then placeholder)
- Building the multi-page document
- Persisting the PDF to the documents bucket and recording it
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError

from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.domain.entities import GeneratedCatalog, Product
from shoecatalog.domain.exceptions import InvalidRequestError, NotFoundError, StorageError
from shoecatalog.imaging.acquirer import ImageAcquirer, ImageHit
from shoecatalog.infrastructure.blob_store import BlobStore, BlobStoreError, generate_blob_key
from shoecatalog.pdf.builder import BuiltDocument, CatalogDocumentBuilder
from shoecatalog.pdf.composer import CatalogPage

logger = structlog.get_logger()

PDF_CONTENT_TYPE = "application/pdf"
CATALOG_PREFIX = "catalog"
MAX_PRODUCTS_PER_CATALOG = 500


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class GenerateCatalogResult:
    """Result of generating a catalog."""

    catalog: GeneratedCatalog
    page_count: int
    placeholder_pages: int = 0
    missing_product_ids: list[str] = field(default_factory=list)
    message: str = "PDF generated successfully"

    @property
    def pdf_id(self) -> str:
        return self.catalog.id

    @property
    def filename(self) -> str:
        return self.catalog.filename

    @property
    def download_url(self) -> str:
        return self.catalog.download_url

    @property
    def product_ids(self) -> list[str]:
        return self.catalog.product_ids


@dataclass
class CatalogFile:
    """A stored catalog PDF."""

    filename: str
    data: bytes
    content_type: str = PDF_CONTENT_TYPE


# ============================================================================
# Helpers
# ============================================================================


def validate_product_ids(product_ids: Any) -> list[str]:
    """Validate the requested product IDs.

    Args:
        product_ids: Caller-supplied value; must be a non-empty list of
            non-blank strings.

    Returns:
        Trimmed IDs, duplicates removed, first occurrence order kept.

    Raises:
        InvalidRequestError: If the value is not a non-empty list of IDs.
    """
    if not isinstance(product_ids, (list, tuple)) or len(product_ids) == 0:
        raise InvalidRequestError(
            "product_ids array is required",
            details={"field": "product_ids"},
        )

    cleaned: list[str] = []
    for value in product_ids:
        if not isinstance(value, str) or not value.strip():
            raise InvalidRequestError(
                "product_ids must contain non-empty string IDs",
                details={"field": "product_ids"},
            )
        if value.strip() not in cleaned:
            cleaned.append(value.strip())

    if len(cleaned) > MAX_PRODUCTS_PER_CATALOG:
        raise InvalidRequestError(
            f"A catalog can contain at most {MAX_PRODUCTS_PER_CATALOG} products",
            details={"field": "product_ids", "count": len(cleaned)},
        )
    return cleaned


def order_as_requested(
    requested: Sequence[str], products: Sequence[Product]
) -> tuple[list[Product], list[str]]:
    """Order resolved products by their position in the request.

    Returns:
        Tuple of (ordered products, requested IDs that did not resolve).
    """
    by_id = {p.id: p for p in products}
    ordered = [by_id[pid] for pid in requested if pid in by_id]
    missing = [pid for pid in requested if pid not in by_id]
    return ordered, missing


def catalog_id_from_filename(filename: str) -> str:
    """Strip the prefix and extension from a catalog filename."""
    stem = filename.rsplit(".", 1)[0]
    return stem.removeprefix(f"{CATALOG_PREFIX}-")


# ============================================================================
# Catalog Generation Service
# ============================================================================


class CatalogGenerationService:
    """Application service for generating catalog PDFs.

    All collaborators are injected; the service holds no global state.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        blob_store: BlobStore,
        acquirer: ImageAcquirer,
        builder: CatalogDocumentBuilder | None = None,
        documents_bucket: str = "pdfs",
    ) -> None:
        """Initialize service.

        Args:
            repository: Catalog store.
            blob_store: Blob store for the generated PDFs.
            acquirer: Product image acquirer.
            builder: Document builder.
            documents_bucket: Bucket receiving generated PDFs.
        """
        self.repository = repository
        self.blob_store = blob_store
        self.acquirer = acquirer
        self.builder = builder or CatalogDocumentBuilder()
        self.documents_bucket = documents_bucket

    async def generate(self, product_ids: Any) -> GenerateCatalogResult:
        """Generate and persist a catalog PDF.

        Args:
            product_ids: Requested product IDs.

        Returns:
            GenerateCatalogResult describing the stored PDF.

        Raises:
            InvalidRequestError: If ``product_ids`` is empty or malformed.
            NotFoundError: If none of the IDs resolve.
            StorageError: If the PDF or its record cannot be written.
        """
        requested = validate_product_ids(product_ids)

        resolved = await self.repository.get_products_by_ids(requested)
        products, missing = order_as_requested(requested, resolved)
        if not products:
            raise NotFoundError(
                "Product",
                message="No products found",
                details={"product_ids": requested},
            )
        if missing:
            logger.warning(
                "Some requested products were not found",
                requested=len(requested),
                resolved=len(products),
                missing_product_ids=missing,
            )

        document = await self._render(products)

        filename = generate_blob_key(CATALOG_PREFIX, ".pdf")
        catalog_id = catalog_id_from_filename(filename)
        download_url = await self._store(filename, document.data)

        try:
            catalog = await self.repository.record_generated_catalog(
                catalog_id=catalog_id,
                filename=filename,
                download_url=download_url,
                product_ids=[p.id for p in products],
            )
            await self.repository.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to record generated catalog, removing PDF",
                filename=filename,
                error=str(e),
            )
            await self.blob_store.delete(self.documents_bucket, filename)
            raise StorageError("Failed to save PDF") from e

        logger.info(
            "Catalog generated",
            pdf_id=catalog.id,
            filename=filename,
            page_count=document.page_count,
            placeholder_pages=document.placeholder_count,
        )

        return GenerateCatalogResult(
            catalog=catalog,
            page_count=document.page_count,
            placeholder_pages=document.placeholder_count,
            missing_product_ids=missing,
        )

    async def get_catalog_file(self, filename: str) -> CatalogFile:
        """Read a stored catalog PDF.

        Only PDFs with a generation record are served.

        Raises:
            NotFoundError: If no catalog was recorded under ``filename``
                or its PDF is no longer stored.
        """
        catalog = await self.repository.get_generated_catalog(filename)
        if catalog is None:
            raise NotFoundError("Catalog", message="PDF not found", details={"filename": filename})

        try:
            data = await self.blob_store.get(self.documents_bucket, filename)
        except BlobStoreError as e:
            raise NotFoundError("Catalog", message="PDF not found") from e
        if data is None:
            raise NotFoundError("Catalog", message="PDF not found", details={"filename": filename})
        return CatalogFile(filename=filename, data=data)

    async def list_catalogs(self, limit: int = 50) -> list[GeneratedCatalog]:
        """Get recently generated catalogs."""
        return await self.repository.list_generated_catalogs(limit=limit)

    async def _render(self, products: Sequence[Product]) -> BuiltDocument:
        outcomes = await self.acquirer.acquire_all([p.image_ref for p in products])
        pages = [
            CatalogPage(
                product_id=product.id,
                brand_name=product.brand_name,
                product_name=product.name,
                image_data=outcome.data if isinstance(outcome, ImageHit) else None,
            )
            for product, outcome in zip(products, outcomes)
        ]
        # reportlab rendering is CPU-bound
        return await asyncio.to_thread(self.builder.build, pages)

    async def _store(self, filename: str, data: bytes) -> str:
        try:
            stored = await self.blob_store.put(
                self.documents_bucket, filename, data, PDF_CONTENT_TYPE
            )
        except BlobStoreError as e:
            logger.error("PDF upload failed", filename=filename, error=str(e))
            raise StorageError("Failed to save PDF") from e
        return stored.url
