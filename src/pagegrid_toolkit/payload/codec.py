"""
Module: payload.codec

Purpose:
    Compact JSON serialization of layout metadata for the payload code.
    Keys are shortened to keep the code small; fields equal to their
    default (0 / False) are omitted on write. Reading is lenient: each
    field is looked up by short key, then by its legacy long key, then
    defaulted, so older payloads without derived fields still parse.

Key Classes:
    - MetadataPayload: Immutable layout snapshot embedded in a sheet

Key Functions:
    - encode_payload(): Payload -> compact text
    - decode_payload(): Text -> payload (raises PayloadParseError)
    - try_parse_payload(): Text -> payload or None (for mixed code channels)

Dependencies:
    - json (std)
    - dataclasses (std)

Used By:
    - composer.sheet: Embeds the payload at composition
    - registration.search: Distinguishes payload codes from marker codes
"""

from __future__ import annotations

import json
import logging
from dataclasses import MISSING, dataclass, fields
from typing import Any, Dict, Mapping, Optional

from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.models import PageGeometry

logger = logging.getLogger(__name__)


class PayloadParseError(ValueError):
    """Raised when text is not a valid layout payload."""
    pass


# field name -> (short key, legacy long key)
FIELD_KEYS: Dict[str, tuple[str, str]] = {
    "page_width": ("w", "PageWidth"),
    "page_height": ("h", "PageHeight"),
    "total_pages": ("n", "TotalPages"),
    "start_with_left_page": ("l", "StartWithLeftPage"),
    "page_spacing": ("ps", "PageSpacing"),
    "row_spacing": ("rs", "RowSpacing"),
    "padding_x": ("px", "PaddingX"),
    "padding_y": ("py", "PaddingY"),
    "canvas_width": ("cw", "CanvasWidth"),
    "canvas_height": ("ch", "CanvasHeight"),
    "pages_per_row": ("ppr", "PagesPerRow"),
    "rows": ("r", "Rows"),
    "payload_code_size": ("qs", "PayloadQrSize"),
    "payload_code_margin": ("qm", "PayloadQrMargin"),
    "marker_size": ("ms", "CornerMarkerSize"),
    "marker_margin": ("mm", "CornerMarkerMargin"),
}


@dataclass(frozen=True)
class MetadataPayload:
    """
    Layout metadata carried by the payload code (immutable).
    
    Padding values exclude the registration border. Derived fields
    (canvas size, pages per row, rows, code metrics) are 0 when the
    payload predates them; consumers re-derive them in that case.
    
    Attributes:
        page_width: Single page width (px)
        page_height: Single page height (px)
        total_pages: Number of pages on the sheet
        start_with_left_page: Empty leading slot flag
        page_spacing: Gap between page pairs (px)
        row_spacing: Gap between rows (px)
        padding_x: Caller padding X (px)
        padding_y: Caller padding Y (px)
        canvas_width: Composed canvas width, optional
        canvas_height: Composed canvas height, optional
        pages_per_row: Slots per row, optional
        rows: Row count, optional
        payload_code_size: Payload code edge (px), optional
        payload_code_margin: Payload code margin (px), optional
        marker_size: Corner marker edge (px), optional
        marker_margin: Corner marker margin (px), optional
    """
    
    page_width: int
    page_height: int
    total_pages: int
    start_with_left_page: bool = False
    page_spacing: int = 0
    row_spacing: int = 0
    padding_x: int = 0
    padding_y: int = 0
    canvas_width: int = 0
    canvas_height: int = 0
    pages_per_row: int = 0
    rows: int = 0
    payload_code_size: int = 0
    payload_code_margin: int = 0
    marker_size: int = 0
    marker_margin: int = 0
    
    def is_valid(self) -> bool:
        """Required fields are all positive."""
        return self.page_width > 0 and self.page_height > 0 and self.total_pages > 0
    
    @property
    def has_canvas_size(self) -> bool:
        return self.canvas_width > 0 and self.canvas_height > 0
    
    @property
    def page_geometry(self) -> PageGeometry:
        return PageGeometry(self.page_width, self.page_height)
    
    def layout_settings(self, pages_per_row: Optional[int] = None) -> LayoutSettings:
        """
        Rebuild the caller's layout settings (padding without border).
        
        Args:
            pages_per_row: Override for payloads that omit the value
        """
        return LayoutSettings(
            total_pages=self.total_pages,
            pages_per_row=pages_per_row or self.pages_per_row,
            start_with_left_page=self.start_with_left_page,
            page_spacing=self.page_spacing,
            row_spacing=self.row_spacing,
            padding_x=self.padding_x,
            padding_y=self.padding_y,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Short-key dict with default-valued fields omitted."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.default is not MISSING and value == f.default:
                continue
            data[FIELD_KEYS[f.name][0]] = value
        return data
    
    def to_text(self) -> str:
        """Compact JSON text for embedding in a code."""
        return json.dumps(self.to_dict(), separators=(",", ":"))
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MetadataPayload":
        """
        Build a payload from a parsed mapping (short, then long, then default).
        
        Raises:
            PayloadParseError: If a present value has the wrong type
        """
        values: Dict[str, Any] = {}
        for f in fields(cls):
            short_key, long_key = FIELD_KEYS[f.name]
            is_flag = f.name == "start_with_left_page"
            value = _lookup(data, short_key, long_key, is_flag)
            values[f.name] = value if value is not None else (False if is_flag else 0)
        return cls(**values)
    
    @classmethod
    def from_text(cls, text: str) -> "MetadataPayload":
        """
        Parse payload text (structure only; see is_valid for content).
        
        Raises:
            PayloadParseError: If the text is not a JSON object
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise PayloadParseError(f"Payload is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise PayloadParseError(f"Payload is not a JSON object: {type(data).__name__}")
        return cls.from_dict(data)


def _lookup(data: Mapping[str, Any], short_key: str, long_key: str, is_flag: bool) -> Any:
    """Return the first correctly-typed value under short then long key."""
    for key in (short_key, long_key):
        if key not in data:
            continue
        value = data[key]
        if is_flag:
            if isinstance(value, bool):
                return value
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if isinstance(value, float) and not value.is_integer():
            raise PayloadParseError(f"Non-integer value for {key!r}: {value}")
        return int(value)
    return None


def encode_payload(payload: MetadataPayload) -> str:
    """Serialize a payload to compact text."""
    return payload.to_text()


def decode_payload(text: str) -> MetadataPayload:
    """
    Parse and validate payload text.
    
    Raises:
        PayloadParseError: If the text does not parse or required fields
            (page width/height, total pages) are not positive
    """
    payload = MetadataPayload.from_text(text)
    if not payload.is_valid():
        raise PayloadParseError(
            f"Payload missing required fields: w={payload.page_width} "
            f"h={payload.page_height} n={payload.total_pages}"
        )
    return payload


def try_parse_payload(text: Optional[str]) -> Optional[MetadataPayload]:
    """
    Parse text as a payload, returning None when it is not one.
    
    Marker codes share the channel with the payload code, so "not a
    payload" is an expected outcome rather than an error.
    """
    if not text:
        return None
    try:
        return decode_payload(text)
    except PayloadParseError as e:
        logger.debug(f"Not a payload ({e}): {text[:40]!r}")
        return None
