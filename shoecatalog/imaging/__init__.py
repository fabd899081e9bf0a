"""Image handling.

Resizing uploads into bounded JPEGs and acquiring product images
for catalog rendering.
"""

from shoecatalog.imaging.acquirer import (
    ImageAcquirer,
    ImageHit,
    ImageMiss,
    ImageOutcome,
    extract_storage_key,
)
from shoecatalog.imaging.resizer import ResizedImage, resize_image, resize_or_original

__all__ = [
    # Acquirer
    "ImageAcquirer",
    "ImageHit",
    "ImageMiss",
    "ImageOutcome",
    "extract_storage_key",
    # Resizer
    "ResizedImage",
    "resize_image",
    "resize_or_original",
]
