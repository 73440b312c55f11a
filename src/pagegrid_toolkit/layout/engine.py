"""
Module: layout.engine

Purpose:
    Pure page-grid geometry. Pages are placed right-to-left within each
    row and grouped into left/right pairs; a spacing gap separates pairs.
    Every consumer (composer, extractor, resolver) derives geometry from
    these functions so the same settings always give the same pixels.

Key Functions:
    - row_count(): Rows needed for the settings
    - pair_gaps_before_column(): Spacing gaps left of a column
    - page_top_left(): Slot origin for a page
    - page_rect() / page_rects(): Slot rectangles
    - compute_canvas(): Canvas and content size
    - infer_pages_per_row(): Recover pages-per-row from a canvas width
    - infer_rows(): Row count for an inferred pages-per-row

Dependencies:
    - math (std)
    - layout.config, layout.models

Used By:
    - composer.sheet
    - registration.resolver
    - extraction.cropper
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from pagegrid_toolkit.common.constants import ALLOWED_PAGES_PER_ROW
from pagegrid_toolkit.core.errors import InvalidConfigurationError

from .config import LayoutSettings
from .models import CanvasGeometry, PageGeometry, PageRect


# ─────────────────────────────────────────────────────────────────────────────
# Grid
# ─────────────────────────────────────────────────────────────────────────────

def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def rows_for(total_pages: int, pages_per_row: int, start_with_left_page: bool) -> int:
    """Rows needed for a page count, counting the empty leading slot."""
    slots = total_pages + (1 if start_with_left_page else 0)
    return _ceil_div(slots, pages_per_row)


def row_count(settings: LayoutSettings) -> int:
    """Number of grid rows for the settings."""
    return rows_for(settings.total_pages, settings.pages_per_row, settings.start_with_left_page)


def pair_gaps_per_row(pages_per_row: int) -> int:
    """Gaps between pairs in a full row (excluding the left-start gap)."""
    return max(0, pages_per_row // 2 - 1)


def pair_gaps_before_column(col: int, start_with_left_page: bool) -> int:
    """
    Count spacing gaps between column 0 and ``col``.
    
    Columns form pairs (0,1), (2,3), ...; crossing from an odd column to
    the next even column crosses a pair boundary. When starting with a
    left page an extra gap sits right after column 0.
    """
    gaps = col // 2
    if start_with_left_page and col >= 1:
        gaps += 1
    return gaps


def slot_position(page_number: int, settings: LayoutSettings) -> Tuple[int, int]:
    """
    Return (row, col) for a 1-based page number.
    
    Raises:
        InvalidConfigurationError: If the page number is out of range
    """
    if page_number < 1 or page_number > settings.total_pages:
        raise InvalidConfigurationError(
            f"page_number must be in 1..{settings.total_pages}: {page_number}"
        )
    slot_index = page_number - 1 + settings.leading_slots
    row = slot_index // settings.pages_per_row
    col = settings.pages_per_row - 1 - (slot_index % settings.pages_per_row)
    return row, col


def page_top_left(
    page_number: int,
    settings: LayoutSettings,
    page: PageGeometry,
) -> Tuple[int, int]:
    """Top-left pixel of the slot holding ``page_number``."""
    row, col = slot_position(page_number, settings)
    gaps = pair_gaps_before_column(col, settings.start_with_left_page)
    x = settings.padding_x + col * page.width + gaps * settings.page_spacing
    y = settings.padding_y + row * page.height + row * settings.row_spacing
    return x, y


def page_rect(page_number: int, settings: LayoutSettings, page: PageGeometry) -> PageRect:
    """Slot rectangle for one page."""
    x, y = page_top_left(page_number, settings, page)
    return PageRect(page_number, x, y, page.width, page.height)


def page_rects(settings: LayoutSettings, page: PageGeometry) -> List[PageRect]:
    """Slot rectangles for all pages, in page order."""
    return [page_rect(n, settings, page) for n in range(1, settings.total_pages + 1)]


# ─────────────────────────────────────────────────────────────────────────────
# Canvas
# ─────────────────────────────────────────────────────────────────────────────

def content_width_for(
    page_width: int,
    pages_per_row: int,
    page_spacing: int,
    start_with_left_page: bool,
) -> int:
    """Width of the page grid without padding."""
    gaps = pair_gaps_per_row(pages_per_row) + (1 if start_with_left_page else 0)
    return page_width * pages_per_row + page_spacing * gaps


def content_height_for(page_height: int, rows: int, row_spacing: int) -> int:
    """Height of the page grid without padding."""
    return page_height * rows + row_spacing * max(0, rows - 1)


def compute_canvas(settings: LayoutSettings, page: PageGeometry) -> CanvasGeometry:
    """Canvas geometry (content plus padding on both sides)."""
    rows = row_count(settings)
    content_w = content_width_for(
        page.width, settings.pages_per_row, settings.page_spacing, settings.start_with_left_page
    )
    content_h = content_height_for(page.height, rows, settings.row_spacing)
    return CanvasGeometry(
        width=content_w + 2 * settings.padding_x,
        height=content_h + 2 * settings.padding_y,
        content_width=content_w,
        content_height=content_h,
        rows=rows,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Inference (payloads without derived fields)
# ─────────────────────────────────────────────────────────────────────────────

def infer_pages_per_row(
    canvas_width: int,
    padding_x: int,
    page_width: int,
    page_spacing: int,
    start_with_left_page: bool,
    candidates: Sequence[int] = ALLOWED_PAGES_PER_ROW,
) -> int:
    """
    Pick the pages-per-row whose content width best matches the canvas.
    
    Observed content width is ``canvas_width - 2 * padding_x`` (floored at
    zero). Ties resolve to the earliest candidate.
    """
    observed = max(0, canvas_width - 2 * padding_x)
    best = candidates[0]
    best_diff = None
    for candidate in candidates:
        expected = content_width_for(page_width, candidate, page_spacing, start_with_left_page)
        diff = abs(expected - observed)
        if best_diff is None or diff < best_diff:
            best = candidate
            best_diff = diff
    return best


def infer_rows(total_pages: int, pages_per_row: int, start_with_left_page: bool) -> int:
    """Row count for inferred pages-per-row (same rule as row_count)."""
    return rows_for(total_pages, pages_per_row, start_with_left_page)
