"""Catalog page composition.

Draws one product per A4 page: brand name in a title band, product
name in a subtitle band below it, and the product image fitted into a
reserved region underneath. When there is no usable image the region
carries an "Image not available" placeholder instead.

Layout is computed by ``compute_layout`` as plain geometry (top-left
origin, PDF points) so it can be tested without rendering anything.
"""

from dataclasses import dataclass, field
from io import BytesIO

import structlog
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

logger = structlog.get_logger()

PLACEHOLDER_TEXT = "Image not available"
ELLIPSIS = "..."


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, top-left origin, in points."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, other: "Rect", tolerance: float = 0.01) -> bool:
        """Check whether ``other`` lies entirely inside this rectangle."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.x + other.width <= self.x + self.width + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page geometry for catalog pages.

    Attributes:
        width: Page width in points.
        height: Page height in points.
        margin: Margin on all four sides.
        title_band_height: Height of the brand band.
        subtitle_band_height: Height of the product-name band.
        band_gap: Space between the subtitle band and the image region.
        image_share: Fraction of the remaining content height given to
            the image region.
    """

    width: float = A4[0]
    height: float = A4[1]
    margin: float = 50.0
    title_band_height: float = 50.0
    subtitle_band_height: float = 40.0
    band_gap: float = 10.0
    image_share: float = 0.70

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    @property
    def content(self) -> Rect:
        return Rect(
            x=self.margin,
            y=self.margin,
            width=self.width - 2 * self.margin,
            height=self.height - 2 * self.margin,
        )


@dataclass(frozen=True)
class TextStyle:
    """Font settings for a text band."""

    font: str
    size: float
    min_size: float
    color: str = "black"


TITLE_STYLE = TextStyle(font="Helvetica-Bold", size=20, min_size=12)
SUBTITLE_STYLE = TextStyle(font="Helvetica", size=18, min_size=10)
PLACEHOLDER_STYLE = TextStyle(font="Helvetica", size=14, min_size=14, color="red")


@dataclass(frozen=True)
class PageLayout:
    """Computed geometry of one catalog page."""

    page: Rect
    title_band: Rect
    subtitle_band: Rect
    image_region: Rect
    image_box: Rect | None = None


@dataclass(frozen=True)
class CatalogPage:
    """Display fields for one product page.

    Attributes:
        product_id: Product the page belongs to.
        brand_name: Brand shown in the title band.
        product_name: Product name shown in the subtitle band.
        image_data: Encoded image bytes, or None when unavailable.
    """

    product_id: str
    brand_name: str | None = ""
    product_name: str | None = ""
    image_data: bytes | None = None


@dataclass
class RenderedPage:
    """What was drawn on a page."""

    product_id: str
    layout: PageLayout
    texts: list[str] = field(default_factory=list)
    placeholder: bool = False

    @property
    def has_image(self) -> bool:
        return self.layout.image_box is not None and not self.placeholder


def fit_within(image_width: float, image_height: float, region: Rect) -> Rect:
    """Scale an image to fit inside a region, preserving aspect ratio.

    The result may be larger than the source image; it is always
    centered on both axes.

    Args:
        image_width: Source width (any unit).
        image_height: Source height (any unit).
        region: Target region.

    Returns:
        Placement rectangle inside ``region``.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError("Image dimensions must be positive")

    scale = min(region.width / image_width, region.height / image_height)
    width = image_width * scale
    height = image_height * scale
    return Rect(
        x=region.x + (region.width - width) / 2,
        y=region.y + (region.height - height) / 2,
        width=width,
        height=height,
    )


def compute_layout(
    geometry: PageGeometry,
    image_size: tuple[int, int] | None = None,
) -> PageLayout:
    """Compute the bands and image placement for a page.

    Args:
        geometry: Page geometry.
        image_size: Pixel size of the image, or None for no image.

    Returns:
        PageLayout with all rectangles in top-left-origin points.
    """
    content = geometry.content
    title_band = Rect(content.x, content.y, content.width, geometry.title_band_height)
    subtitle_band = Rect(
        content.x, title_band.bottom, content.width, geometry.subtitle_band_height
    )

    region_top = subtitle_band.bottom + geometry.band_gap
    remaining = content.bottom - region_top
    image_region = Rect(content.x, region_top, content.width, remaining * geometry.image_share)

    image_box = None
    if image_size is not None:
        image_box = fit_within(image_size[0], image_size[1], image_region)

    return PageLayout(
        page=Rect(0, 0, geometry.width, geometry.height),
        title_band=title_band,
        subtitle_band=subtitle_band,
        image_region=image_region,
        image_box=image_box,
    )


def fit_text(text: str, style: TextStyle, max_width: float) -> tuple[str, float]:
    """Shrink, then truncate, text so it fits a width.

    Args:
        text: Text to fit.
        style: Font style with maximum and minimum size.
        max_width: Available width in points.

    Returns:
        Tuple of (possibly truncated text, font size).
    """
    size = style.size
    while size > style.min_size and stringWidth(text, style.font, size) > max_width:
        size -= 1

    if stringWidth(text, style.font, size) <= max_width:
        return text, size

    while text and stringWidth(text + ELLIPSIS, style.font, size) > max_width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS, size


def decode_image(data: bytes | None) -> Image.Image | None:
    """Fully decode image bytes, or return None if that is not possible."""
    if not data:
        return None
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except Exception as e:
        logger.warning("Image decode failed at draw time", error=str(e))
        return None
    if image.width <= 0 or image.height <= 0:
        return None
    return image


class PageComposer:
    """Draws catalog pages on a reportlab canvas.

    Performs no I/O: everything it needs arrives in ``CatalogPage``.
    """

    def __init__(self, geometry: PageGeometry | None = None) -> None:
        self.geometry = geometry or PageGeometry()

    def draw(self, canvas: Canvas, page: CatalogPage) -> RenderedPage:
        """Draw one page onto the canvas's current page.

        Does not call ``showPage``; the document builder owns pagination.

        Args:
            canvas: Target canvas.
            page: Page content.

        Returns:
            RenderedPage describing what was drawn.
        """
        image = decode_image(page.image_data)
        layout = compute_layout(self.geometry, image.size if image else None)
        rendered = RenderedPage(product_id=page.product_id, layout=layout)

        self._fill_background(canvas)
        rendered.texts.append(
            self._draw_centered(canvas, page.brand_name or "", TITLE_STYLE, layout.title_band)
        )
        rendered.texts.append(
            self._draw_centered(
                canvas, page.product_name or "", SUBTITLE_STYLE, layout.subtitle_band
            )
        )

        if image is not None and layout.image_box is not None:
            try:
                self._draw_image(canvas, image, layout.image_box)
                return rendered
            except Exception as e:
                logger.warning(
                    "Image draw failed, using placeholder",
                    product_id=page.product_id,
                    error=str(e),
                )

        return self.draw_placeholder(canvas, rendered)

    def draw_placeholder(self, canvas: Canvas, rendered: RenderedPage) -> RenderedPage:
        """Draw the placeholder into the image region."""
        region = rendered.layout.image_region
        canvas.saveState()
        canvas.setStrokeColor(colors.lightgrey)
        canvas.setLineWidth(0.5)
        canvas.rect(
            region.x,
            self._pdf_y(region),
            region.width,
            region.height,
            stroke=1,
            fill=0,
        )
        canvas.restoreState()

        rendered.texts.append(
            self._draw_centered(canvas, PLACEHOLDER_TEXT, PLACEHOLDER_STYLE, region)
        )
        rendered.placeholder = True
        rendered.layout = PageLayout(
            page=rendered.layout.page,
            title_band=rendered.layout.title_band,
            subtitle_band=rendered.layout.subtitle_band,
            image_region=region,
            image_box=None,
        )
        return rendered

    def _fill_background(self, canvas: Canvas) -> None:
        canvas.saveState()
        canvas.setFillColor(colors.white)
        canvas.rect(0, 0, self.geometry.width, self.geometry.height, stroke=0, fill=1)
        canvas.restoreState()

    def _draw_centered(
        self, canvas: Canvas, text: str, style: TextStyle, band: Rect
    ) -> str:
        fitted, size = fit_text(text, style, band.width)
        # Baseline sits ~0.35em below the band's vertical center
        baseline = self.geometry.height - band.center_y - size * 0.35
        canvas.saveState()
        canvas.setFillColor(style.color)
        canvas.setFont(style.font, size)
        canvas.drawCentredString(band.center_x, baseline, fitted)
        canvas.restoreState()
        return fitted

    def _draw_image(self, canvas: Canvas, image: Image.Image, box: Rect) -> None:
        canvas.drawImage(
            ImageReader(image),
            box.x,
            self._pdf_y(box),
            width=box.width,
            height=box.height,
            mask="auto",
        )

    def _pdf_y(self, rect: Rect) -> float:
        """Convert a top-left-origin rect to reportlab's bottom-left y."""
        return self.geometry.height - rect.y - rect.height
