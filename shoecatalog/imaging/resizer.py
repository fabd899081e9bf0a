"""Image normalization for storage and PDF embedding.

Turns an arbitrary raster upload into a bounded JPEG: longest edge
capped, aspect ratio preserved, never enlarged.
"""

from dataclasses import dataclass
from io import BytesIO

import structlog
from PIL import Image, ImageOps, UnidentifiedImageError

from shoecatalog.domain.exceptions import ImageDecodeError

logger = structlog.get_logger()

MAX_EDGE = 1200
JPEG_QUALITY = 90
JPEG_CONTENT_TYPE = "image/jpeg"

# Modes the JPEG encoder accepts as-is
_JPEG_MODES = {"RGB", "L", "CMYK"}


@dataclass(frozen=True)
class ResizedImage:
    """Result of normalizing an image.

    Attributes:
        data: Encoded image bytes.
        width: Output width in pixels.
        height: Output height in pixels.
        content_type: MIME type of ``data``.
        resized: False when the original bytes were kept unchanged.
    """

    data: bytes
    width: int
    height: int
    content_type: str = JPEG_CONTENT_TYPE
    resized: bool = True


def _flatten(image: Image.Image) -> Image.Image:
    """Drop alpha/palette so the JPEG encoder accepts the image."""
    if image.mode in _JPEG_MODES:
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def resize_image(
    data: bytes,
    max_edge: int = MAX_EDGE,
    quality: int = JPEG_QUALITY,
) -> ResizedImage:
    """Resize and re-encode an image as JPEG.

    Args:
        data: Raw image bytes in any format Pillow can decode.
        max_edge: Maximum length of the longest edge in pixels.
        quality: JPEG quality (1-95).

    Returns:
        ResizedImage with the encoded JPEG.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded.
    """
    if not data:
        raise ImageDecodeError("Image payload is empty")

    try:
        with Image.open(BytesIO(data)) as source:
            source.load()
            image = ImageOps.exif_transpose(source) or source
            image = _flatten(image)
            # thumbnail() only ever shrinks
            image.thumbnail((max_edge, max_edge), Image.Resampling.LANCZOS)

            out = BytesIO()
            image.save(out, format="JPEG", quality=quality, optimize=True)
            width, height = image.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(
            "Image could not be decoded",
            details={"reason": str(e)},
        ) from e

    return ResizedImage(data=out.getvalue(), width=width, height=height)


def resize_or_original(
    data: bytes,
    content_type: str = JPEG_CONTENT_TYPE,
    max_edge: int = MAX_EDGE,
    quality: int = JPEG_QUALITY,
) -> ResizedImage:
    """Resize best-effort, keeping the original bytes when decoding fails.

    Args:
        data: Raw image bytes.
        content_type: Content type of the original bytes.
        max_edge: Maximum length of the longest edge in pixels.
        quality: JPEG quality.

    Returns:
        ResizedImage; ``resized`` is False if the original was kept.
    """
    try:
        return resize_image(data, max_edge=max_edge, quality=quality)
    except ImageDecodeError as e:
        logger.warning(
            "Image resize failed, keeping original bytes",
            size_bytes=len(data),
            reason=e.details.get("reason", e.message),
        )
        return ResizedImage(
            data=data,
            width=0,
            height=0,
            content_type=content_type,
            resized=False,
        )
