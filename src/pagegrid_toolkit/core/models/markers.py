"""
Module: core.models.markers

Purpose:
    Identity and canonical placement of the registration codes drawn in
    the sheet border. Corner markers carry fixed texts ("NS_MARKER_TL" ...)
    so that the detector can tell them apart from the payload code.

Key Classes:
    - MarkerRole: Corner identity (TL, TR, BL, BR) with its marker text
    - ObservedPoint: A detected code centre in image coordinates

Key Functions:
    - marker_center(): Canonical centre of a corner marker
    - payload_anchor_center(): Canonical centre of the payload code

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - composer.markers
    - registration.resolver
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

MARKER_TEXT_PREFIX = "NS_MARKER_"

# Key used for the payload code's point pair during registration
PAYLOAD_ANCHOR_KEY = "PAYLOAD"


class MarkerRole(str, Enum):
    """Canvas corner a registration marker belongs to."""
    TL = "TL"
    TR = "TR"
    BL = "BL"
    BR = "BR"
    
    def __str__(self) -> str:
        return self.value
    
    @property
    def text(self) -> str:
        """Text encoded in the marker code for this corner."""
        return f"{MARKER_TEXT_PREFIX}{self.value}"
    
    @classmethod
    def from_text(cls, text: str) -> Optional["MarkerRole"]:
        """Return the role encoded by a marker text, or None if not a marker."""
        if not text or not text.startswith(MARKER_TEXT_PREFIX):
            return None
        try:
            return cls(text[len(MARKER_TEXT_PREFIX):])
        except ValueError:
            return None


# TR holds the payload code, so only three corners carry markers
DRAWN_MARKER_ROLES: Tuple[MarkerRole, ...] = (MarkerRole.TL, MarkerRole.BL, MarkerRole.BR)


@dataclass(frozen=True, slots=True)
class ObservedPoint:
    """Centre of a detected code in image pixel coordinates."""
    x: float
    y: float


def marker_top_left(
    role: MarkerRole,
    canvas_width: int,
    canvas_height: int,
    size: int,
    margin: int,
) -> Tuple[int, int]:
    """Top-left pixel where the marker for ``role`` is drawn."""
    x = margin if role in (MarkerRole.TL, MarkerRole.BL) else canvas_width - size - margin
    y = margin if role in (MarkerRole.TL, MarkerRole.TR) else canvas_height - size - margin
    return x, y


def marker_center(
    role: MarkerRole,
    canvas_width: int,
    canvas_height: int,
    size: int,
    margin: int,
) -> Tuple[float, float]:
    """
    Canonical centre of the marker for ``role``.
    
    Markers sit ``margin`` pixels in from their corner, so the centre is
    ``margin + size / 2`` from both adjacent edges.
    """
    x, y = marker_top_left(role, canvas_width, canvas_height, size, margin)
    return x + size / 2.0, y + size / 2.0


def payload_code_top_left(canvas_width: int, size: int, margin: int) -> Tuple[int, int]:
    """Top-left pixel of the payload code (top-right corner of the canvas)."""
    return canvas_width - size - margin, margin


def payload_anchor_center(canvas_width: int, size: int, margin: int) -> Tuple[float, float]:
    """Canonical centre of the payload code."""
    x, y = payload_code_top_left(canvas_width, size, margin)
    return x + size / 2.0, y + size / 2.0
