"""Blob storage API endpoints.

Serves stored product photos and catalog PDFs at the public URLs the
blob store hands out.
"""

import mimetypes
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from shoecatalog.api.dependencies import get_blob_store
from shoecatalog.api.schemas import ErrorResponse
from shoecatalog.domain.exceptions import NotFoundError
from shoecatalog.infrastructure.blob_store import BlobStore, BlobStoreError
from shoecatalog.infrastructure.config import settings

router = APIRouter(prefix="/storage", tags=["Storage"])


@router.get(
    "/{bucket}/{key}",
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
    summary="Get stored blob",
)
async def get_blob(
    bucket: str,
    key: str,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    """Return a stored blob.

    Raises:
        NotFoundError: If the bucket is unknown or the blob is absent.
    """
    if bucket not in (settings.images_bucket, settings.documents_bucket):
        raise NotFoundError("Blob", message="Blob not found", details={"bucket": bucket})

    try:
        data = await blob_store.get(bucket, key)
    except BlobStoreError as e:
        raise NotFoundError("Blob", message="Blob not found", details={"key": key}) from e
    if data is None:
        raise NotFoundError("Blob", message="Blob not found", details={"key": key})

    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
