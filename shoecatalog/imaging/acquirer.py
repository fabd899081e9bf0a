"""Product image acquisition.

Resolves a product's image reference to bytes through an ordered
fallback chain:

1. Fetch the reference over HTTP(S) when it is a direct URL.
2. Read the blob straight from the images bucket when the reference
   encodes a storage key (public URLs may be slow, expired or blocked
   from where the catalog is generated).
3. Give up with a miss.

Each attempt returns an ``ImageHit`` or ``ImageMiss``; nothing here
raises to the caller.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

import httpx
import structlog

from shoecatalog.infrastructure.blob_store import BlobStore, is_valid_key

logger = structlog.get_logger()

DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024

# Miss reasons
NO_REFERENCE = "no_reference"
NETWORK_MISS = "network_miss"
STORAGE_MISS = "storage_miss"
ATTEMPT_ERROR = "attempt_error"
NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class ImageHit:
    """Image bytes were acquired."""

    data: bytes
    source: str  # "network" or "storage"

    @property
    def available(self) -> bool:
        return True


@dataclass(frozen=True)
class ImageMiss:
    """No image could be acquired."""

    reason: str
    detail: str | None = None

    @property
    def available(self) -> bool:
        return False


ImageOutcome = ImageHit | ImageMiss
Attempt = Callable[[str, httpx.AsyncClient], Awaitable[ImageOutcome]]


def is_fetchable_url(ref: str) -> bool:
    """Whether a reference is an HTTP(S) URL."""
    return urlsplit(ref).scheme.lower() in ("http", "https")


def extract_storage_key(ref: str, bucket: str) -> str | None:
    """Extract an images-bucket key from a reference.

    Recognises ``.../<bucket>/<key>`` paths, the percent-encoded
    ``<bucket>%2F<key>`` form used by some object-store URLs, and bare
    keys with no scheme or path.

    Args:
        ref: Image reference (URL or key).
        bucket: Images bucket name.

    Returns:
        The storage key, or None if the reference does not point into
        the bucket.
    """
    ref = ref.strip()
    if not ref:
        return None

    bucket_re = re.escape(bucket)
    match = re.search(rf"/{bucket_re}/([^?#]+)", ref) or re.search(
        rf"{bucket_re}%2F([^?#&]+)", ref, flags=re.IGNORECASE
    )
    if match:
        key = unquote(match.group(1))
    elif "://" not in ref and "/" not in ref:
        key = ref
    else:
        return None

    return key if is_valid_key(key) else None


class ImageAcquirer:
    """Acquires product images with network and storage fallbacks.

    Example usage:
        async with httpx.AsyncClient(timeout=5.0) as http:
            acquirer = ImageAcquirer(blob_store, "uploads", client=http)
            outcomes = await acquirer.acquire_all(
                [p.image_ref for p in products]
            )
    """

    def __init__(
        self,
        blob_store: BlobStore,
        images_bucket: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        concurrency: int = 1,
        max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ) -> None:
        """Initialize acquirer.

        Args:
            blob_store: Store holding the images bucket.
            images_bucket: Name of the images bucket.
            client: Optional shared HTTP client. When omitted, a client
                is opened per ``acquire_all`` call.
            timeout: Fetch timeout in seconds.
            concurrency: Maximum number of images acquired at once.
            max_bytes: Largest remote image accepted; bigger bodies are
                abandoned mid-download and count as a network miss.
        """
        self.blob_store = blob_store
        self.images_bucket = images_bucket
        self.timeout = timeout
        self.concurrency = max(1, concurrency)
        self.max_bytes = max_bytes
        self._client = client
        self.attempts: list[Attempt] = [self._fetch_remote, self._read_from_storage]

    async def acquire(self, ref: str | None) -> ImageOutcome:
        """Acquire one image.

        Args:
            ref: Image reference; empty or None means no image.

        Returns:
            ImageHit from the first successful attempt, else ImageMiss.
        """
        ref = (ref or "").strip()
        if not ref:
            return ImageMiss(reason=NO_REFERENCE)

        if self._client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await self._run_chain(ref, client)
        return await self._run_chain(ref, self._client)

    async def acquire_all(self, refs: Sequence[str | None]) -> list[ImageOutcome]:
        """Acquire a batch of images.

        Results are returned in the same order as ``refs`` regardless of
        completion order.

        Args:
            refs: Image references.

        Returns:
            One outcome per reference, in input order.
        """
        if self._client is not None:
            return await self._acquire_ordered(refs, self._client)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._acquire_ordered(refs, client)

    async def _acquire_ordered(
        self, refs: Sequence[str | None], client: httpx.AsyncClient
    ) -> list[ImageOutcome]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _one(ref: str | None) -> ImageOutcome:
            ref = (ref or "").strip()
            if not ref:
                return ImageMiss(reason=NO_REFERENCE)
            async with semaphore:
                return await self._run_chain(ref, client)

        # gather preserves argument order
        return list(await asyncio.gather(*(_one(ref) for ref in refs)))

    async def _run_chain(self, ref: str, client: httpx.AsyncClient) -> ImageOutcome:
        last_miss = ImageMiss(reason=NO_REFERENCE)
        for attempt in self.attempts:
            try:
                outcome = await attempt(ref, client)
            except Exception as e:
                logger.warning(
                    "Image acquisition attempt failed",
                    ref=ref,
                    error=str(e),
                )
                outcome = ImageMiss(reason=ATTEMPT_ERROR, detail=str(e))

            if isinstance(outcome, ImageHit):
                logger.debug("Image acquired", ref=ref, source=outcome.source)
                return outcome
            if outcome.reason != NOT_APPLICABLE:
                last_miss = outcome

        logger.info(
            "Image unavailable",
            ref=ref,
            reason=last_miss.reason,
            detail=last_miss.detail,
        )
        return last_miss

    async def _fetch_remote(self, ref: str, client: httpx.AsyncClient) -> ImageOutcome:
        """Fetch the reference over HTTP(S)."""
        if not is_fetchable_url(ref):
            return ImageMiss(reason=NOT_APPLICABLE)

        try:
            async with client.stream(
                "GET", ref, timeout=self.timeout, follow_redirects=True
            ) as response:
                if not response.is_success:
                    logger.info("Image fetch miss", url=ref, status_code=response.status_code)
                    return ImageMiss(reason=NETWORK_MISS, detail=f"HTTP {response.status_code}")

                declared = response.headers.get("Content-Length", "")
                if declared.isdigit() and int(declared) > self.max_bytes:
                    logger.info("Image too large", url=ref, content_length=int(declared))
                    return ImageMiss(reason=NETWORK_MISS, detail="too large")

                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk)
                    if len(body) > self.max_bytes:
                        logger.info("Image too large", url=ref, read_bytes=len(body))
                        return ImageMiss(reason=NETWORK_MISS, detail="too large")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.info("Image fetch failed", url=ref, error=str(e))
            return ImageMiss(reason=NETWORK_MISS, detail=type(e).__name__)

        if not body:
            return ImageMiss(reason=NETWORK_MISS, detail="empty body")

        return ImageHit(data=bytes(body), source="network")

    async def _read_from_storage(self, ref: str, client: httpx.AsyncClient) -> ImageOutcome:
        """Read the blob directly from the images bucket."""
        key = extract_storage_key(ref, self.images_bucket)
        if key is None:
            return ImageMiss(reason=NOT_APPLICABLE)

        data = await self.blob_store.get(self.images_bucket, key)
        if not data:
            return ImageMiss(reason=STORAGE_MISS, detail=key)

        return ImageHit(data=data, source="storage")
