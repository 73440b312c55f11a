"""
Layout Engine

Deterministic page-grid geometry: slot rectangles, canvas size, and
pages-per-row inference for payloads that omit derived fields.
"""

from .config import LayoutSettings
from .models import CanvasGeometry, PageGeometry, PageRect
from .engine import (
    compute_canvas,
    content_width_for,
    infer_pages_per_row,
    infer_rows,
    page_rect,
    page_rects,
    page_top_left,
    pair_gaps_before_column,
    row_count,
)

__all__ = [
    "LayoutSettings",
    "CanvasGeometry",
    "PageGeometry",
    "PageRect",
    "compute_canvas",
    "content_width_for",
    "infer_pages_per_row",
    "infer_rows",
    "page_rect",
    "page_rects",
    "page_top_left",
    "pair_gaps_before_column",
    "row_count",
]
