"""Product ingestion application service.

Handles product creation from an uploaded photo:
- Resolving or creating the brand by case-insensitive name
- Resizing the photo (best-effort)
- Storing it in the images bucket
- Creating the product row, deleting the stored photo if that fails
"""

import asyncio
from dataclasses import dataclass
from pathlib import PurePath

import structlog
from sqlalchemy.exc import SQLAlchemyError

from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.catalog.service import CatalogService
from shoecatalog.domain.entities import Brand, Product
from shoecatalog.domain.exceptions import InvalidRequestError, StorageError
from shoecatalog.imaging.resizer import JPEG_QUALITY, MAX_EDGE, resize_or_original
from shoecatalog.infrastructure.blob_store import BlobStore, BlobStoreError, generate_blob_key

logger = structlog.get_logger()

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_PRODUCT_NAME_LENGTH = 500
IMAGE_KEY_PREFIX = "product"

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
}


@dataclass
class IngestProductResult:
    """Result of ingesting a product."""

    product: Product
    brand: Brand
    brand_created: bool
    image_key: str
    image_resized: bool
    message: str = "Product created successfully"


def _extension_for(content_type: str, filename: str | None) -> str:
    if content_type in _EXTENSIONS:
        return _EXTENSIONS[content_type]
    suffix = PurePath(filename or "").suffix.lower()
    return suffix if suffix and suffix[1:].isalnum() else ".img"


class ProductIngestionService:
    """Application service for creating products with photos.

    The brand is committed before the photo is stored, so it survives a
    failed product write and is reused on retry. The photo is deleted
    again if the product row cannot be written.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        blob_store: BlobStore,
        images_bucket: str = "uploads",
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        max_image_edge: int = MAX_EDGE,
        jpeg_quality: int = JPEG_QUALITY,
    ) -> None:
        """Initialize service.

        Args:
            repository: Catalog store.
            blob_store: Blob store for product photos.
            images_bucket: Bucket receiving product photos.
            max_upload_bytes: Largest accepted upload.
            max_image_edge: Longest edge of the stored photo.
            jpeg_quality: JPEG quality of the stored photo.
        """
        self.repository = repository
        self.catalog = CatalogService(repository)
        self.blob_store = blob_store
        self.images_bucket = images_bucket
        self.max_upload_bytes = max_upload_bytes
        self.max_image_edge = max_image_edge
        self.jpeg_quality = jpeg_quality

    def validate(
        self,
        product_name: str | None,
        brand_name: str | None,
        image_data: bytes | None,
        content_type: str | None,
    ) -> tuple[str, str]:
        """Validate ingestion input before any side effect.

        Returns:
            Tuple of trimmed (product_name, brand_name).

        Raises:
            InvalidRequestError: On any missing or unacceptable field.
        """
        name = (product_name or "").strip()
        brand = (brand_name or "").strip()
        if not name or not brand:
            raise InvalidRequestError(
                "product_name and brand_name are required",
                details={"fields": ["product_name", "brand_name"]},
            )
        if len(name) > MAX_PRODUCT_NAME_LENGTH:
            raise InvalidRequestError(
                f"product_name must be at most {MAX_PRODUCT_NAME_LENGTH} characters",
                details={"field": "product_name"},
            )
        if image_data is None:
            raise InvalidRequestError(
                "Product image is required",
                details={"field": "product_image"},
            )
        if not (content_type or "").lower().startswith("image/"):
            raise InvalidRequestError(
                "Only image files are allowed",
                details={"field": "product_image", "content_type": content_type},
            )
        if len(image_data) == 0:
            raise InvalidRequestError(
                "Image file is empty or corrupted",
                details={"field": "product_image"},
            )
        if len(image_data) > self.max_upload_bytes:
            raise InvalidRequestError(
                f"Image file exceeds {self.max_upload_bytes} bytes",
                details={"field": "product_image", "size_bytes": len(image_data)},
            )
        return name, brand

    async def ingest(
        self,
        product_name: str | None,
        brand_name: str | None,
        image_data: bytes | None,
        content_type: str | None = "image/jpeg",
        filename: str | None = None,
    ) -> IngestProductResult:
        """Create a product from an uploaded photo.

        Args:
            product_name: Product name.
            brand_name: Brand name (matched case-insensitively).
            image_data: Uploaded image bytes.
            content_type: Uploaded content type; must be ``image/*``.
            filename: Original upload filename.

        Returns:
            IngestProductResult with the created product.

        Raises:
            InvalidRequestError: If input validation fails.
            StorageError: If the photo or the product row cannot be written.
        """
        name, brand_label = self.validate(product_name, brand_name, image_data, content_type)

        try:
            brand_result = await self.catalog.get_or_create_brand(brand_label)
            if brand_result.created:
                await self.repository.commit()
        except SQLAlchemyError as e:
            logger.error("Brand create failed", brand_name=brand_label, error=str(e))
            raise StorageError("Failed to create brand") from e
        brand = brand_result.brand

        resized = await asyncio.to_thread(
            resize_or_original,
            image_data,
            content_type=(content_type or "image/jpeg").lower(),
            max_edge=self.max_image_edge,
            quality=self.jpeg_quality,
        )
        extension = ".jpg" if resized.resized else _extension_for(resized.content_type, filename)
        key = generate_blob_key(IMAGE_KEY_PREFIX, extension)

        try:
            stored = await self.blob_store.put(
                self.images_bucket, key, resized.data, resized.content_type
            )
        except BlobStoreError as e:
            logger.error("Image upload failed", key=key, error=str(e))
            raise StorageError("Failed to upload image") from e

        try:
            product = await self.repository.create_product(
                name=name,
                brand=brand,
                image_ref=stored.url,
            )
            await self.repository.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Product insert failed, removing uploaded image",
                key=key,
                brand_id=brand.id,
                error=str(e),
            )
            await self.blob_store.delete(self.images_bucket, key)
            raise StorageError("Failed to create product") from e

        logger.info(
            "Product created",
            product_id=product.id,
            brand_id=brand.id,
            brand_created=brand_result.created,
            image_key=key,
            image_resized=resized.resized,
        )

        return IngestProductResult(
            product=product,
            brand=brand,
            brand_created=brand_result.created,
            image_key=key,
            image_resized=resized.resized,
        )
