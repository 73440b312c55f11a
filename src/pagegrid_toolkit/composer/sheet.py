"""
Module: composer.sheet

Purpose:
    Compose a printable sheet: every page slot filled from a template
    (or a caller-supplied source image in multi-image mode), then the
    corner markers and the payload code drawn in the registration
    border. The result carries everything needed to split it later.

Key Classes:
    - MultiImageOptions: Scale settings for multi-image mode
    - ComposedSheet: Canvas image, embedded payload and geometry

Key Functions:
    - compose_sheet(): Template-only sheet
    - compose_multi_image_sheet(): Source images over template slots
    - build_payload(): Metadata snapshot for a composition
    - fit_within(): Downscale-only fit of an image into a box

Dependencies:
    - PIL: Canvas drawing and resampling
    - layout.engine: Slot geometry
    - payload.codec: Embedded metadata

Used By:
    - composer.controller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from PIL import Image

from pagegrid_toolkit.codes.encoder import CodeEncoder, QrCodeEncoder
from pagegrid_toolkit.common.constants import REGISTRATION, RegistrationConstants
from pagegrid_toolkit.core.errors import InvalidConfigurationError
from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.engine import compute_canvas, page_rects
from pagegrid_toolkit.layout.models import CanvasGeometry, PageGeometry, PageRect
from pagegrid_toolkit.payload.codec import MetadataPayload

from .markers import draw_registration_codes
from .templates import TemplateSet

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "white"


@dataclass(frozen=True)
class MultiImageOptions:
    """
    Multi-image mode settings.
    
    Attributes:
        scale_percent: Fit box size as a percentage of the page slot (10-100)
    """
    scale_percent: int = 100
    
    def __post_init__(self) -> None:
        if not 10 <= self.scale_percent <= 100:
            raise InvalidConfigurationError(
                f"scale_percent must be in 10..100: {self.scale_percent}"
            )
    
    def box_size(self, page: PageGeometry) -> Tuple[float, float]:
        """Fit box (width, height) inside one page slot."""
        scale = self.scale_percent / 100.0
        return page.width * scale, page.height * scale


@dataclass(frozen=True)
class ComposedSheet:
    """
    Result of a composition.
    
    Attributes:
        image: Composed RGB canvas (owned by the caller)
        payload: Metadata embedded in the payload code
        canvas: Canvas geometry
        rects: Page slot rectangles in page order
    """
    image: Image.Image
    payload: MetadataPayload
    canvas: CanvasGeometry
    rects: Tuple[PageRect, ...]


def build_payload(
    settings: LayoutSettings,
    page: PageGeometry,
    canvas: CanvasGeometry,
    constants: RegistrationConstants = REGISTRATION,
) -> MetadataPayload:
    """
    Snapshot the layout for embedding.
    
    Args:
        settings: Caller settings (padding without registration border)
        page: Page geometry
        canvas: Canvas computed with the registration border
    """
    return MetadataPayload(
        page_width=page.width,
        page_height=page.height,
        total_pages=settings.total_pages,
        start_with_left_page=settings.start_with_left_page,
        page_spacing=settings.page_spacing,
        row_spacing=settings.row_spacing,
        padding_x=settings.padding_x,
        padding_y=settings.padding_y,
        canvas_width=canvas.width,
        canvas_height=canvas.height,
        pages_per_row=settings.pages_per_row,
        rows=canvas.rows,
        payload_code_size=constants.payload_code_size_px,
        payload_code_margin=constants.payload_code_margin_px,
        marker_size=constants.marker_size_px,
        marker_margin=constants.marker_margin_px,
    )


def fit_within(image: Image.Image, box_width: float, box_height: float) -> Image.Image:
    """
    Scale ``image`` to fit the box, keeping aspect ratio, never enlarging.
    
    Returns a new image (a copy when no scaling is needed).
    """
    fit = min(box_width / image.width, box_height / image.height, 1.0)
    draw_w = max(1, int(round(image.width * fit)))
    draw_h = max(1, int(round(image.height * fit)))
    if (draw_w, draw_h) == image.size:
        return image.copy()
    return image.resize((draw_w, draw_h), Image.Resampling.LANCZOS)


def _blank_canvas(canvas: CanvasGeometry) -> Image.Image:
    return Image.new("RGB", canvas.size, BACKGROUND_COLOR)


def _draw_templates(
    image: Image.Image,
    templates: TemplateSet,
    settings: LayoutSettings,
    rects: Sequence[PageRect],
) -> None:
    for rect in rects:
        page_img = templates.page_image(rect.page_number, settings.start_with_left_page)
        image.paste(page_img, (rect.left, rect.top))


def _compose(
    templates: TemplateSet,
    settings: LayoutSettings,
    encoder: Optional[CodeEncoder],
    constants: RegistrationConstants,
    sources: Optional[Sequence[Image.Image]] = None,
    options: Optional[MultiImageOptions] = None,
) -> ComposedSheet:
    page = templates.page_geometry
    effective = settings.with_registration_border(constants.border_px)
    canvas = compute_canvas(effective, page)
    rects = tuple(page_rects(effective, page))
    
    image = _blank_canvas(canvas)
    _draw_templates(image, templates, settings, rects)
    
    if sources is not None:
        box_w, box_h = (options or MultiImageOptions()).box_size(page)
        for rect, source in zip(rects, sources):
            fitted = fit_within(source.convert("RGB"), box_w, box_h)
            x = rect.left + (rect.width - fitted.width) // 2
            y = rect.top + (rect.height - fitted.height) // 2
            image.paste(fitted, (x, y))
    
    payload = build_payload(settings, page, canvas, constants)
    draw_registration_codes(image, payload.to_text(), encoder or QrCodeEncoder(), constants)
    
    logger.info(
        f"Composed {settings.total_pages} pages ({page.width}x{page.height}) "
        f"into {canvas.width}x{canvas.height} canvas, {canvas.rows} row(s)"
    )
    return ComposedSheet(image=image, payload=payload, canvas=canvas, rects=rects)


def compose_sheet(
    templates: TemplateSet,
    settings: LayoutSettings,
    *,
    encoder: Optional[CodeEncoder] = None,
    constants: RegistrationConstants = REGISTRATION,
) -> ComposedSheet:
    """
    Compose a template sheet.
    
    Args:
        templates: Page template source
        settings: Caller layout settings (registration border is added)
        encoder: Code encoder (QR by default)
        constants: Registration metrics
        
    Returns:
        ComposedSheet with a freshly allocated canvas
    """
    return _compose(templates, settings, encoder, constants)


def compose_multi_image_sheet(
    templates: TemplateSet,
    sources: Sequence[Image.Image],
    settings: LayoutSettings,
    options: Optional[MultiImageOptions] = None,
    *,
    encoder: Optional[CodeEncoder] = None,
    constants: RegistrationConstants = REGISTRATION,
) -> ComposedSheet:
    """
    Compose a sheet with one source image per page over the template.
    
    Each source is scaled down (never up) to fit a box of
    ``scale_percent`` of the page slot and centered in its slot.
    
    Raises:
        InvalidConfigurationError: If the image count differs from total_pages
    """
    if len(sources) != settings.total_pages:
        raise InvalidConfigurationError(
            f"Image count ({len(sources)}) does not match total_pages ({settings.total_pages})"
        )
    return _compose(templates, settings, encoder, constants, sources, options or MultiImageOptions())
