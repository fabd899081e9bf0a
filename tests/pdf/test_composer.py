"""Tests for catalog page composition."""

from io import BytesIO

import pytest
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from shoecatalog.pdf.composer import (
    ELLIPSIS,
    PLACEHOLDER_TEXT,
    SUBTITLE_STYLE,
    TITLE_STYLE,
    CatalogPage,
    PageComposer,
    PageGeometry,
    Rect,
    compute_layout,
    fit_text,
    fit_within,
)


@pytest.fixture
def geometry() -> PageGeometry:
    return PageGeometry()


@pytest.fixture
def canvas(geometry: PageGeometry) -> Canvas:
    return Canvas(BytesIO(), pagesize=geometry.size)


# ============================================================================
# Geometry
# ============================================================================


class TestFitWithin:
    """Tests for aspect-preserving placement."""

    def test_wide_image_fills_width(self) -> None:
        region = Rect(0, 0, 400, 400)
        box = fit_within(800, 200, region)

        assert box.width == pytest.approx(400)
        assert box.height == pytest.approx(100)
        assert box.center_y == pytest.approx(region.center_y)

    def test_tall_image_fills_height(self) -> None:
        region = Rect(10, 20, 400, 200)
        box = fit_within(100, 400, region)

        assert box.height == pytest.approx(200)
        assert box.width == pytest.approx(50)
        assert box.center_x == pytest.approx(region.center_x)

    def test_small_image_is_scaled_up(self) -> None:
        box = fit_within(10, 10, Rect(0, 0, 300, 200))

        assert box.width == pytest.approx(200)
        assert box.height == pytest.approx(200)

    def test_aspect_ratio_is_kept(self) -> None:
        box = fit_within(1200, 800, Rect(50, 150, 495, 400))

        assert box.width / box.height == pytest.approx(1.5)

    def test_rejects_degenerate_size(self) -> None:
        with pytest.raises(ValueError):
            fit_within(0, 10, Rect(0, 0, 10, 10))


class TestComputeLayout:
    """Tests for page band layout."""

    def test_bands_are_stacked_inside_margins(self, geometry: PageGeometry) -> None:
        layout = compute_layout(geometry)

        assert layout.title_band.y == pytest.approx(geometry.margin)
        assert layout.subtitle_band.y == pytest.approx(layout.title_band.bottom)
        assert layout.image_region.y == pytest.approx(
            layout.subtitle_band.bottom + geometry.band_gap
        )
        assert geometry.content.contains(layout.image_region)

    def test_image_region_takes_share_of_remaining_height(
        self, geometry: PageGeometry
    ) -> None:
        layout = compute_layout(geometry)
        remaining = geometry.content.bottom - layout.image_region.y

        assert layout.image_region.height == pytest.approx(remaining * geometry.image_share)

    def test_image_box_inside_region(self, geometry: PageGeometry) -> None:
        layout = compute_layout(geometry, image_size=(3000, 500))

        assert layout.image_box is not None
        assert layout.image_region.contains(layout.image_box)
        assert layout.image_box.center_x == pytest.approx(geometry.width / 2)

    def test_no_image_box_without_image(self, geometry: PageGeometry) -> None:
        assert compute_layout(geometry).image_box is None


class TestFitText:
    """Tests for text shrinking and truncation."""

    def test_short_text_unchanged(self) -> None:
        text, size = fit_text("NIKE", TITLE_STYLE, 495)

        assert text == "NIKE"
        assert size == TITLE_STYLE.size

    def test_long_text_shrinks_before_truncating(self) -> None:
        text = "Air Zoom Pegasus Trail Running"
        natural = stringWidth(text, SUBTITLE_STYLE.font, SUBTITLE_STYLE.size)

        fitted, size = fit_text(text, SUBTITLE_STYLE, natural * 0.8)

        assert fitted == text
        assert SUBTITLE_STYLE.min_size <= size < SUBTITLE_STYLE.size

    def test_very_long_text_is_truncated(self) -> None:
        fitted, size = fit_text("X" * 500, TITLE_STYLE, 200)

        assert fitted.endswith(ELLIPSIS)
        assert size == TITLE_STYLE.min_size
        assert stringWidth(fitted, TITLE_STYLE.font, size) <= 200


# ============================================================================
# Drawing
# ============================================================================


class TestPageComposer:
    """Tests for drawing a single page."""

    def test_draws_image_page(self, canvas: Canvas, jpeg_bytes: bytes) -> None:
        rendered = PageComposer().draw(
            canvas,
            CatalogPage(
                product_id="p1",
                brand_name="NIKE",
                product_name="Air Max",
                image_data=jpeg_bytes,
            ),
        )

        assert rendered.has_image
        assert not rendered.placeholder
        assert rendered.texts == ["NIKE", "Air Max"]

    def test_missing_image_draws_placeholder(self, canvas: Canvas) -> None:
        rendered = PageComposer().draw(
            canvas, CatalogPage(product_id="p2", brand_name="BATA", product_name="Loafer")
        )

        assert rendered.placeholder
        assert not rendered.has_image
        assert PLACEHOLDER_TEXT in rendered.texts

    def test_corrupt_image_draws_placeholder(self, canvas: Canvas) -> None:
        rendered = PageComposer().draw(
            canvas,
            CatalogPage(product_id="p3", brand_name="SPARX", image_data=b"not an image"),
        )

        assert rendered.placeholder
        assert rendered.layout.image_box is None

    def test_missing_names_render_empty(self, canvas: Canvas) -> None:
        rendered = PageComposer().draw(
            canvas, CatalogPage(product_id="p4", brand_name=None, product_name=None)
        )

        assert rendered.texts[:2] == ["", ""]
