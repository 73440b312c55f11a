"""
Module: registration.search

Purpose:
    Ordered, sequential code search over an image. The whole image is
    searched first, then four corner regions (TL, TR, BL, BR). Corner
    regions exist because a detector may lock onto a marker and miss
    the payload code when several codes share the frame.

Key Classes:
    - SearchRegion: Named rectangle searched for codes
    - PayloadMatch: Decoded payload plus the code it came from

Key Functions:
    - corner_region_size(): Side length of corner regions
    - corner_regions(): The four clipped corner regions
    - search_regions(): Whole image followed by corner regions
    - detect_in_region(): Detect codes, mapped to full-image coordinates
    - find_payload(): First code that parses as a valid payload
    - collect_marker_points(): Marker centres found in corner regions

Dependencies:
    - PIL: Region crops
    - codes.detector: Code detection
    - payload.codec: Payload recognition

Used By:
    - registration.resolver
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from PIL import Image

from pagegrid_toolkit.codes.detector import CodeDetector, DetectedCode
from pagegrid_toolkit.common.constants import SEARCH, SearchConstants
from pagegrid_toolkit.core.errors import DecodeFailureError
from pagegrid_toolkit.core.models.markers import MarkerRole, ObservedPoint
from pagegrid_toolkit.payload.codec import MetadataPayload, try_parse_payload

logger = logging.getLogger(__name__)

WHOLE_IMAGE = "FULL"


@dataclass(frozen=True, slots=True)
class SearchRegion:
    """Rectangle of the image searched for codes (left, top, right, bottom)."""
    name: str
    left: int
    top: int
    right: int
    bottom: int
    
    @property
    def box(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.right, self.bottom)
    
    @property
    def is_empty(self) -> bool:
        return self.right <= self.left or self.bottom <= self.top


@dataclass(frozen=True)
class PayloadMatch:
    """A decoded payload and the code (in full-image coordinates) carrying it."""
    payload: MetadataPayload
    code: DetectedCode
    region: str


def corner_region_size(width: int, height: int, constants: SearchConstants = SEARCH) -> int:
    """
    Side of a corner search region.
    
    ``round(min(width, height) * ratio)`` clamped to the configured range.
    """
    base = int(round(min(width, height) * constants.corner_region_ratio))
    return max(constants.corner_region_min_px, min(constants.corner_region_max_px, base))


def _clip(name: str, left: int, top: int, size: int, width: int, height: int) -> SearchRegion:
    return SearchRegion(
        name,
        max(0, left),
        max(0, top),
        min(width, left + size),
        min(height, top + size),
    )


def corner_regions(
    width: int,
    height: int,
    constants: SearchConstants = SEARCH,
) -> List[SearchRegion]:
    """Corner regions in search order TL, TR, BL, BR, clipped to the image."""
    size = corner_region_size(width, height, constants)
    return [
        _clip(MarkerRole.TL.value, 0, 0, size, width, height),
        _clip(MarkerRole.TR.value, width - size, 0, size, width, height),
        _clip(MarkerRole.BL.value, 0, height - size, size, width, height),
        _clip(MarkerRole.BR.value, width - size, height - size, size, width, height),
    ]


def search_regions(
    width: int,
    height: int,
    constants: SearchConstants = SEARCH,
) -> List[SearchRegion]:
    """Whole image first, then the four corner regions."""
    return [SearchRegion(WHOLE_IMAGE, 0, 0, width, height)] + corner_regions(width, height, constants)


def detect_in_region(
    image: Image.Image,
    region: SearchRegion,
    detector: CodeDetector,
) -> List[DetectedCode]:
    """
    Detect codes inside ``region``; points are returned in image coordinates.
    
    Detections without corner points carry no position and are dropped.
    """
    if region.is_empty:
        return []
    if region.box == (0, 0, image.width, image.height):
        codes = list(detector.detect(image))
    else:
        crop = image.crop(region.box)
        codes = [code.shifted(region.left, region.top) for code in detector.detect(crop)]
    located = [code for code in codes if code.points]
    if len(located) < len(codes):
        logger.debug(f"Region {region.name}: dropped {len(codes) - len(located)} code(s) without points")
    return located


def find_payload(
    image: Image.Image,
    detector: CodeDetector,
    constants: SearchConstants = SEARCH,
) -> PayloadMatch:
    """
    Search regions in order until a code parses as a valid payload.
    
    Raises:
        DecodeFailureError: If no region yields a payload
    """
    for region in search_regions(image.width, image.height, constants):
        codes = detect_in_region(image, region, detector)
        logger.debug(f"Region {region.name} {region.box}: {len(codes)} code(s)")
        for code in codes:
            payload = try_parse_payload(code.text)
            if payload is not None:
                logger.debug(f"Payload found in region {region.name}")
                return PayloadMatch(payload=payload, code=code, region=region.name)
    
    raise DecodeFailureError(
        f"No layout payload code found in {image.width}x{image.height} image"
    )


def collect_marker_points(
    image: Image.Image,
    detector: CodeDetector,
    constants: SearchConstants = SEARCH,
) -> Dict[MarkerRole, ObservedPoint]:
    """
    Search the corner regions for marker codes.
    
    Returns:
        Observed centre per marker role; the first sighting of a role wins
    """
    found: Dict[MarkerRole, ObservedPoint] = {}
    for region in corner_regions(image.width, image.height, constants):
        for code in detect_in_region(image, region, detector):
            role = MarkerRole.from_text(code.text)
            if role is None or role in found:
                continue
            cx, cy = code.centroid
            found[role] = ObservedPoint(cx, cy)
            logger.debug(f"Marker {role} at ({cx:.1f}, {cy:.1f}) in region {region.name}")
    return found
