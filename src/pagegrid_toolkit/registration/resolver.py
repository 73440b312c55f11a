"""
Module: registration.resolver

Purpose:
    Recover the layout payload and a rectified canonical canvas from a
    captured (possibly rotated, skewed or rescaled) sheet image.

    Flow:
    1. Search for the payload code (whole image, then corner regions).
    2. If none is found, rectify once using the corner markers alone,
       assuming the input's own size is the canvas size, and search again.
    3. Pair the payload anchor and every detected marker with its
       canonical position, fit an affine transform, and resample the
       input onto a canonical-sized canvas (bicubic, white background).

Key Classes:
    - CanonicalLayout: Geometry the resolved canvas must match
    - ResolvedSheet: Rectified canvas, payload and registration details
    - SheetResolver: Runs the resolve flow with an injectable detector

Key Functions:
    - canonical_layout(): Payload -> canonical geometry (inferring
      pages-per-row/rows/canvas for older payloads)
    - rectify(): Apply an observed->canonical transform to an image

Dependencies:
    - PIL: Affine resampling
    - registration.search, registration.affine
    - layout.engine: Canvas and inference

Used By:
    - extraction.controller
    - pagegrid_toolkit.cli (inspect)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PIL import Image

from pagegrid_toolkit.codes.detector import CodeDetector, QrCodeDetector
from pagegrid_toolkit.common.constants import (
    REGISTRATION,
    SEARCH,
    RegistrationConstants,
    SearchConstants,
)
from pagegrid_toolkit.core.errors import (
    DecodeFailureError,
    PageGridError,
    RegistrationFailureError,
)
from pagegrid_toolkit.core.models.markers import (
    PAYLOAD_ANCHOR_KEY,
    MarkerRole,
    ObservedPoint,
    marker_center,
    payload_anchor_center,
)
from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.engine import compute_canvas, infer_pages_per_row, infer_rows
from pagegrid_toolkit.layout.models import PageGeometry
from pagegrid_toolkit.payload.codec import MetadataPayload

from .affine import AffineTransform, PointPair, solve_affine
from .search import PayloadMatch, collect_marker_points, find_payload

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


# ─────────────────────────────────────────────────────────────────────────────
# Canonical geometry
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CanonicalLayout:
    """
    Canonical geometry recovered from a payload.
    
    Attributes:
        settings: Layout settings including the registration border
        page: Page geometry
        canvas_width: Canonical canvas width
        canvas_height: Canonical canvas height
        pages_per_row: Stored or inferred pages per row
        rows: Stored or inferred row count
        marker_size: Corner marker edge
        marker_margin: Corner marker margin
        payload_code_size: Payload code edge
        payload_code_margin: Payload code margin
    """
    settings: LayoutSettings
    page: PageGeometry
    canvas_width: int
    canvas_height: int
    pages_per_row: int
    rows: int
    marker_size: int
    marker_margin: int
    payload_code_size: int
    payload_code_margin: int
    
    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self.canvas_width, self.canvas_height
    
    def marker_center(self, role: MarkerRole) -> Point:
        return marker_center(role, self.canvas_width, self.canvas_height, self.marker_size, self.marker_margin)
    
    def payload_anchor(self) -> Point:
        return payload_anchor_center(self.canvas_width, self.payload_code_size, self.payload_code_margin)


def canonical_layout(
    payload: MetadataPayload,
    observed_size: Tuple[int, int],
    constants: RegistrationConstants = REGISTRATION,
) -> CanonicalLayout:
    """
    Build canonical geometry from a payload.
    
    Fields missing from older payloads are re-derived: pages-per-row is
    inferred from the canvas width (the payload's, else the observed
    image width), rows follow the layout row formula, and the canvas
    size is recomputed from the layout.
    
    Args:
        payload: Decoded payload
        observed_size: Size of the image the payload was read from
        constants: Fallback code metrics and registration border
        
    Raises:
        InvalidConfigurationError: If the payload describes an invalid layout
    """
    pad_x = payload.padding_x + constants.border_px
    
    pages_per_row = payload.pages_per_row
    if pages_per_row <= 0:
        width_hint = payload.canvas_width if payload.canvas_width > 0 else observed_size[0]
        pages_per_row = infer_pages_per_row(
            canvas_width=width_hint,
            padding_x=pad_x,
            page_width=payload.page_width,
            page_spacing=payload.page_spacing,
            start_with_left_page=payload.start_with_left_page,
        )
        logger.info(f"Inferred pages_per_row={pages_per_row} from canvas width {width_hint}")
    
    settings = payload.layout_settings(pages_per_row).with_registration_border(constants.border_px)
    page = payload.page_geometry
    
    rows = payload.rows if payload.rows > 0 else infer_rows(
        payload.total_pages, pages_per_row, payload.start_with_left_page
    )
    
    computed = compute_canvas(settings, page).size
    if payload.has_canvas_size:
        canvas_w, canvas_h = payload.canvas_width, payload.canvas_height
        if (canvas_w, canvas_h) != computed:
            logger.warning(
                f"Stored canvas {canvas_w}x{canvas_h} differs from layout canvas "
                f"{computed[0]}x{computed[1]}; rectifying to the stored size"
            )
    else:
        canvas_w, canvas_h = computed
    
    return CanonicalLayout(
        settings=settings,
        page=page,
        canvas_width=canvas_w,
        canvas_height=canvas_h,
        pages_per_row=pages_per_row,
        rows=rows,
        marker_size=payload.marker_size or constants.marker_size_px,
        marker_margin=payload.marker_margin or constants.marker_margin_px,
        payload_code_size=payload.payload_code_size or constants.payload_code_size_px,
        payload_code_margin=payload.payload_code_margin or constants.payload_code_margin_px,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Rectification
# ─────────────────────────────────────────────────────────────────────────────

def rectify(image: Image.Image, transform: AffineTransform, size: Tuple[int, int]) -> Image.Image:
    """
    Resample ``image`` onto a new canvas of ``size`` through ``transform``.
    
    ``transform`` maps observed -> canonical; PIL samples through the
    inverse (canonical -> observed). Uncovered pixels are white.
    """
    inverse = transform.inverse()
    return image.convert("RGB").transform(
        size,
        Image.Transform.AFFINE,
        data=inverse.parameters,
        resample=Image.Resampling.BICUBIC,
        fillcolor="white",
    )


@dataclass(frozen=True)
class ResolvedSheet:
    """
    Outcome of resolving a captured sheet.
    
    Attributes:
        image: Rectified canvas of the canonical size
        payload: Decoded payload
        layout: Canonical geometry
        transform: Observed -> canonical transform of the final fit
        pairs: Point pairs used for the final fit
        used_marker_fallback: Markers-only rectification was needed
    """
    image: Image.Image
    payload: MetadataPayload
    layout: CanonicalLayout
    transform: AffineTransform
    pairs: Tuple[PointPair, ...]
    used_marker_fallback: bool = False


# ─────────────────────────────────────────────────────────────────────────────
# Resolver
# ─────────────────────────────────────────────────────────────────────────────

class SheetResolver:
    """
    Resolve captured sheets into rectified canonical canvases.
    
    Example:
        >>> resolver = SheetResolver()
        >>> resolved = resolver.resolve(Image.open("scan.png"))
        >>> resolved.layout.canvas_size
        (4760, 2350)
    """
    
    def __init__(
        self,
        detector: Optional[CodeDetector] = None,
        search: SearchConstants = SEARCH,
        registration: RegistrationConstants = REGISTRATION,
    ) -> None:
        self.detector = detector or QrCodeDetector()
        self.search = search
        self.registration = registration
    
    def resolve(self, image: Image.Image) -> ResolvedSheet:
        """
        Decode the payload and rectify ``image`` onto the canonical canvas.
        
        Raises:
            DecodeFailureError: No payload, even after markers-only rectification
            RegistrationFailureError: Fewer than 3 point pairs or degenerate fit
            InvalidConfigurationError: Payload describes an invalid layout
        """
        working = image.convert("RGB")
        match, working, used_fallback = self._find_payload_with_fallback(working)
        
        layout = canonical_layout(match.payload, working.size, self.registration)
        if working.size != layout.canvas_size:
            logger.debug(
                f"Observed {working.width}x{working.height}, canonical "
                f"{layout.canvas_width}x{layout.canvas_height}"
            )
        
        pairs = self._point_pairs(working, match, layout)
        if len(pairs) < self.search.min_point_pairs:
            raise RegistrationFailureError(
                f"Found {len(pairs)} registration point(s) "
                f"({', '.join(p.key for p in pairs) or 'none'}), "
                f"need {self.search.min_point_pairs}"
            )
        
        transform = solve_affine(pairs, self.search.min_point_pairs, self.search.pivot_epsilon)
        rectified = rectify(working, transform, layout.canvas_size)
        logger.info(
            f"Registered sheet from {len(pairs)} points onto "
            f"{layout.canvas_width}x{layout.canvas_height} canvas"
        )
        return ResolvedSheet(
            image=rectified,
            payload=match.payload,
            layout=layout,
            transform=transform,
            pairs=tuple(pairs),
            used_marker_fallback=used_fallback,
        )
    
    def try_decode_payload(self, image: Image.Image) -> Optional[MetadataPayload]:
        """
        Decode the payload for preview, returning None instead of raising.
        
        Uses the same search and markers-only fallback as ``resolve``.
        """
        try:
            match, _, _ = self._find_payload_with_fallback(image.convert("RGB"))
        except PageGridError as e:
            logger.debug(f"Preview decode failed: {e}")
            return None
        return match.payload
    
    def rectify_by_markers_only(self, image: Image.Image) -> Optional[Image.Image]:
        """
        Rectify using corner markers alone, without a payload.
        
        The input's own size is assumed to be the canvas size, which only
        holds for uncropped captures. For a cropped capture the result is
        approximate; the payload-based fit that follows corrects it.
        
        Returns:
            Rectified image, or None if fewer than 3 markers were found
            
        Raises:
            RegistrationFailureError: If the markers are degenerate
        """
        width, height = image.size
        size = self.registration.marker_size_px
        margin = self.registration.marker_margin_px
        
        observed = collect_marker_points(image, self.detector, self.search)
        pairs = [
            PointPair(
                role.value,
                (point.x, point.y),
                marker_center(role, width, height, size, margin),
            )
            for role, point in observed.items()
        ]
        if len(pairs) < self.search.min_point_pairs:
            logger.info(f"Markers-only rectification found {len(pairs)} marker(s), need {self.search.min_point_pairs}")
            return None
        
        transform = solve_affine(pairs, self.search.min_point_pairs, self.search.pivot_epsilon)
        return rectify(image, transform, (width, height))
    
    def _find_payload_with_fallback(
        self,
        image: Image.Image,
    ) -> Tuple[PayloadMatch, Image.Image, bool]:
        """Return (match, image the match refers to, fallback used)."""
        try:
            return find_payload(image, self.detector, self.search), image, False
        except DecodeFailureError as first_error:
            logger.warning("Payload code not found; trying markers-only rectification")
            try:
                normalized = self.rectify_by_markers_only(image)
            except RegistrationFailureError as e:
                raise DecodeFailureError(f"{first_error} (markers-only rectification failed: {e})") from e
            if normalized is None:
                raise
        
        match = find_payload(normalized, self.detector, self.search)
        logger.info("Payload decoded after markers-only rectification")
        return match, normalized, True
    
    def _point_pairs(
        self,
        image: Image.Image,
        match: PayloadMatch,
        layout: CanonicalLayout,
    ) -> List[PointPair]:
        """Payload anchor plus every detected marker, each with its canonical point."""
        pairs = [PointPair(PAYLOAD_ANCHOR_KEY, match.code.centroid, layout.payload_anchor())]
        markers: Dict[MarkerRole, ObservedPoint] = collect_marker_points(image, self.detector, self.search)
        for role in MarkerRole:
            point = markers.get(role)
            if point is not None:
                pairs.append(PointPair(role.value, (point.x, point.y), layout.marker_center(role)))
        return pairs
