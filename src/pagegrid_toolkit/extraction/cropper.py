"""
Module: extraction.cropper

Purpose:
    Bounds-checked page crops from a rectified (or raw) canvas. Crops
    use nearest-neighbour sampling so edges stay sharp on a canvas that
    is already pixel-aligned with the layout.

Key Functions:
    - crop_page(): Crop one page rectangle
    - extract_pages(): Crop every page in order

Dependencies:
    - PIL: Image cropping
    - layout.engine: Page rectangles

Used By:
    - extraction.controller
"""

from __future__ import annotations

import logging
from typing import List

from PIL import Image

from pagegrid_toolkit.core.errors import GeometryOutOfBoundsError
from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.engine import page_rects
from pagegrid_toolkit.layout.models import PageGeometry, PageRect

logger = logging.getLogger(__name__)


def crop_page(canvas: Image.Image, rect: PageRect) -> Image.Image:
    """
    Crop a page rectangle into a new image of the rectangle's size.
    
    Args:
        canvas: Source canvas
        rect: Page rectangle in canvas coordinates
        
    Returns:
        Newly allocated page image
        
    Raises:
        GeometryOutOfBoundsError: If the rectangle exceeds the canvas
    """
    if not rect.fits_within(canvas.width, canvas.height):
        raise GeometryOutOfBoundsError(rect.page_number, rect, canvas.size)
    
    # resize() with a source box samples pixel centres (half-pixel offset)
    return canvas.resize(
        (rect.width, rect.height),
        Image.Resampling.NEAREST,
        box=rect.box,
    )


def extract_pages(
    canvas: Image.Image,
    settings: LayoutSettings,
    page: PageGeometry,
) -> List[Image.Image]:
    """
    Crop all pages in page order.
    
    Args:
        canvas: Canvas the settings describe
        settings: Layout settings including the registration border
        page: Page geometry
    """
    pages = [crop_page(canvas, rect) for rect in page_rects(settings, page)]
    logger.debug(f"Cropped {len(pages)} page(s) of {page.width}x{page.height}")
    return pages
