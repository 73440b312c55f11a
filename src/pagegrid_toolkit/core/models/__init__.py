"""Core value types shared between composition and registration."""

from .markers import (
    MarkerRole,
    ObservedPoint,
    PAYLOAD_ANCHOR_KEY,
    DRAWN_MARKER_ROLES,
    marker_center,
    marker_top_left,
    payload_anchor_center,
    payload_code_top_left,
)

__all__ = [
    "MarkerRole",
    "ObservedPoint",
    "PAYLOAD_ANCHOR_KEY",
    "DRAWN_MARKER_ROLES",
    "marker_center",
    "marker_top_left",
    "payload_anchor_center",
    "payload_code_top_left",
]
