"""Catalog document assembly.

Builds a multi-page PDF with exactly one page per product, in input
order. A product whose image cannot be used gets the placeholder page;
nothing a single product does can abort the rest of the document.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from io import BytesIO

import structlog
from reportlab.pdfgen.canvas import Canvas

from shoecatalog.domain.exceptions import InvalidRequestError
from shoecatalog.imaging.resizer import JPEG_QUALITY, MAX_EDGE, resize_or_original
from shoecatalog.pdf.composer import (
    CatalogPage,
    PageComposer,
    PageGeometry,
    RenderedPage,
    compute_layout,
)

logger = structlog.get_logger()


@dataclass
class BuiltDocument:
    """A rendered PDF and per-page render details."""

    data: bytes
    pages: list[RenderedPage] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def placeholder_count(self) -> int:
        return sum(1 for p in self.pages if p.placeholder)


class CatalogDocumentBuilder:
    """Assembles catalog pages into a PDF.

    Example usage:
        builder = CatalogDocumentBuilder()
        document = builder.build([
            CatalogPage(product_id="p1", brand_name="NIKE",
                        product_name="Air Max", image_data=jpeg_bytes),
        ])
        pdf_bytes = document.data
    """

    def __init__(
        self,
        composer: PageComposer | None = None,
        normalize_images: bool = True,
        max_image_edge: int = MAX_EDGE,
        jpeg_quality: int = JPEG_QUALITY,
        title: str = "Product Catalog",
        author: str = "Shoe Catalog",
    ) -> None:
        """Initialize builder.

        Args:
            composer: Page composer; defaults to A4 geometry.
            normalize_images: Resize images before embedding to bound
                the document size.
            max_image_edge: Longest image edge when normalizing.
            jpeg_quality: JPEG quality when normalizing.
            title: PDF title metadata.
            author: PDF author metadata.
        """
        self.composer = composer or PageComposer()
        self.normalize_images = normalize_images
        self.max_image_edge = max_image_edge
        self.jpeg_quality = jpeg_quality
        self.title = title
        self.author = author

    @property
    def geometry(self) -> PageGeometry:
        return self.composer.geometry

    def build(self, pages: Sequence[CatalogPage]) -> BuiltDocument:
        """Render pages into a PDF.

        Args:
            pages: Page contents in output order.

        Returns:
            BuiltDocument with the PDF bytes.

        Raises:
            InvalidRequestError: If ``pages`` is empty.
        """
        if not pages:
            raise InvalidRequestError("At least one product is required to build a catalog")

        buffer = BytesIO()
        canvas = Canvas(buffer, pagesize=self.geometry.size, pageCompression=1)
        canvas.setTitle(self.title)
        canvas.setAuthor(self.author)
        canvas.setSubject(f"{len(pages)} product(s)")
        canvas.setCreator(self.author)

        rendered: list[RenderedPage] = []
        for index, page in enumerate(pages):
            rendered.append(self._render_page(canvas, self._prepare(page), index))
            canvas.showPage()

        canvas.save()

        document = BuiltDocument(data=buffer.getvalue(), pages=rendered)
        logger.info(
            "Catalog document built",
            page_count=document.page_count,
            placeholder_pages=document.placeholder_count,
            size_bytes=len(document.data),
        )
        return document

    def _prepare(self, page: CatalogPage) -> CatalogPage:
        """Normalize display fields and shrink the image for embedding."""
        page = replace(
            page,
            brand_name=page.brand_name or "",
            product_name=page.product_name or "",
        )
        if not self.normalize_images or not page.image_data:
            return page

        resized = resize_or_original(
            page.image_data,
            max_edge=self.max_image_edge,
            quality=self.jpeg_quality,
        )
        return replace(page, image_data=resized.data)

    def _render_page(self, canvas: Canvas, page: CatalogPage, index: int) -> RenderedPage:
        try:
            return self.composer.draw(canvas, page)
        except Exception as e:
            logger.warning(
                "Page render failed, drawing placeholder page",
                product_id=page.product_id,
                page_index=index,
                error=str(e),
            )

        # The background fill in draw() paints over anything partially drawn
        fallback = replace(page, image_data=None)
        try:
            return self.composer.draw(canvas, fallback)
        except Exception as e:
            logger.error(
                "Placeholder page render failed",
                product_id=page.product_id,
                page_index=index,
                error=str(e),
            )
            rendered = RenderedPage(
                product_id=page.product_id,
                layout=compute_layout(self.geometry),
            )
            return self.composer.draw_placeholder(canvas, rendered)
