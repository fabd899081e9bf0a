"""Blob storage for product images and generated catalogs.

Provides a small async interface over key-addressed byte storage with
public retrieval URLs, plus filesystem and in-memory implementations.
"""

import asyncio
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

import structlog

from shoecatalog.infrastructure.config import Settings

logger = structlog.get_logger()

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class BlobStoreError(Exception):
    """Error from a blob store operation."""

    def __init__(self, bucket: str, key: str, message: str) -> None:
        self.bucket = bucket
        self.key = key
        self.message = message
        super().__init__(f"[{bucket}/{key}] {message}")


@dataclass(frozen=True)
class StoredBlob:
    """Reference to a blob that has been written."""

    bucket: str
    key: str
    size_bytes: int
    content_type: str
    url: str


def generate_blob_key(prefix: str, extension: str) -> str:
    """Generate a collision-resistant blob key.

    Keys combine a nanosecond timestamp with a random UUID component,
    e.g. ``product-1718000000000000000-3f2a...c1.jpg``.

    Args:
        prefix: Key prefix (e.g., "product", "catalog").
        extension: File extension with or without leading dot.

    Returns:
        New unique key.
    """
    ext = extension if extension.startswith(".") else f".{extension}"
    return f"{prefix}-{time.time_ns()}-{uuid4().hex}{ext.lower()}"


def is_valid_key(key: str) -> bool:
    """Check that a key is a single safe path segment."""
    return bool(_KEY_PATTERN.match(key)) and ".." not in key


class BlobStore(ABC):
    """Key-addressed byte storage organised in buckets."""

    @abstractmethod
    async def put(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StoredBlob:
        """Store a payload.

        Raises:
            BlobStoreError: If the write fails or the key already exists.
        """

    @abstractmethod
    async def get(self, bucket: str, key: str) -> bytes | None:
        """Read a payload, or None if it does not exist."""

    @abstractmethod
    async def exists(self, bucket: str, key: str) -> bool:
        """Check whether a payload exists."""

    @abstractmethod
    async def _remove(self, bucket: str, key: str) -> None:
        """Remove a payload. May raise."""

    @abstractmethod
    def public_url(self, bucket: str, key: str) -> str:
        """Get the public retrieval URL for a payload."""

    async def delete(self, bucket: str, key: str) -> bool:
        """Delete a payload, best-effort.

        Failures are logged and never raised.

        Returns:
            True if the payload was removed.
        """
        try:
            await self._remove(bucket, key)
        except Exception as e:
            logger.warning(
                "Blob delete failed",
                bucket=bucket,
                key=key,
                error=str(e),
            )
            return False
        logger.info("Blob deleted", bucket=bucket, key=key)
        return True


class LocalBlobStore(BlobStore):
    """Filesystem blob store: one directory per bucket.

    Public URLs point at the API's ``/storage/{bucket}/{key}`` route.
    """

    def __init__(self, root: str | Path, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, bucket: str, key: str) -> Path:
        if not is_valid_key(bucket) or not is_valid_key(key):
            raise BlobStoreError(bucket, key, "Invalid bucket or key")
        return self.root / bucket / key

    async def put(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StoredBlob:
        path = self._path(bucket, key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to overwrite: blobs are immutable
            with open(path, "xb") as fh:
                fh.write(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise BlobStoreError(bucket, key, f"Write failed: {e}") from e

        logger.info(
            "Blob stored",
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            content_type=content_type,
        )
        return StoredBlob(
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            content_type=content_type,
            url=self.public_url(bucket, key),
        )

    async def get(self, bucket: str, key: str) -> bytes | None:
        path = self._path(bucket, key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise BlobStoreError(bucket, key, f"Read failed: {e}") from e

    async def exists(self, bucket: str, key: str) -> bool:
        try:
            path = self._path(bucket, key)
        except BlobStoreError:
            return False
        return await asyncio.to_thread(path.is_file)

    async def _remove(self, bucket: str, key: str) -> None:
        path = self._path(bucket, key)
        await asyncio.to_thread(path.unlink)

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/storage/{bucket}/{key}"


class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests and local runs."""

    def __init__(self, public_base_url: str = "memory://blobs") -> None:
        self.public_base_url = public_base_url.rstrip("/")
        self._blobs: dict[tuple[str, str], tuple[bytes, str]] = {}

    async def put(
        self, bucket: str, key: str, data: bytes, content_type: str
    ) -> StoredBlob:
        if not is_valid_key(bucket) or not is_valid_key(key):
            raise BlobStoreError(bucket, key, "Invalid bucket or key")
        if (bucket, key) in self._blobs:
            raise BlobStoreError(bucket, key, "Key already exists")
        self._blobs[(bucket, key)] = (bytes(data), content_type)
        return StoredBlob(
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            content_type=content_type,
            url=self.public_url(bucket, key),
        )

    async def get(self, bucket: str, key: str) -> bytes | None:
        blob = self._blobs.get((bucket, key))
        return blob[0] if blob else None

    async def exists(self, bucket: str, key: str) -> bool:
        return (bucket, key) in self._blobs

    async def _remove(self, bucket: str, key: str) -> None:
        del self._blobs[(bucket, key)]

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.public_base_url}/{bucket}/{key}"

    def content_type(self, bucket: str, key: str) -> str | None:
        """Get the stored content type of a payload."""
        blob = self._blobs.get((bucket, key))
        return blob[1] if blob else None

    def keys(self, bucket: str) -> list[str]:
        """List keys stored in a bucket."""
        return [k for b, k in self._blobs if b == bucket]


def build_blob_store(config: Settings) -> BlobStore:
    """Create the blob store selected by configuration.

    Args:
        config: Application settings.

    Returns:
        BlobStore instance.
    """
    if config.blob_backend == "memory":
        return InMemoryBlobStore(public_base_url=f"{config.public_base_url.rstrip('/')}/storage")
    return LocalBlobStore(config.blob_storage_path, config.public_base_url)
