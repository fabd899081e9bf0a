"""Catalog PDF rendering.

Page composition and multi-page document assembly using reportlab.
"""

from shoecatalog.pdf.builder import BuiltDocument, CatalogDocumentBuilder
from shoecatalog.pdf.composer import (
    PLACEHOLDER_TEXT,
    CatalogPage,
    PageComposer,
    PageGeometry,
    PageLayout,
    Rect,
    RenderedPage,
    compute_layout,
    fit_within,
)

__all__ = [
    # Composer
    "PLACEHOLDER_TEXT",
    "CatalogPage",
    "PageComposer",
    "PageGeometry",
    "PageLayout",
    "Rect",
    "RenderedPage",
    "compute_layout",
    "fit_within",
    # Builder
    "BuiltDocument",
    "CatalogDocumentBuilder",
]
