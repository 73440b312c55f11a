"""
Module: core.errors

Purpose:
    Error taxonomy for the toolkit. Each class maps to one failure
    category with a fixed retry policy:

    - InvalidConfigurationError: bad settings; immediate, never retried
    - MissingAssetError: absent or mismatched input images; immediate
    - DecodeFailureError: no payload found; one markers-only fallback,
      then terminal
    - RegistrationFailureError: too few points or singular system; terminal
    - GeometryOutOfBoundsError: page rectangle outside canvas; terminal

Used By:
    - every pipeline stage
    - pagegrid_toolkit.cli: maps PageGridError to exit code 2
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from pagegrid_toolkit.layout.models import PageRect


class PageGridError(Exception):
    """Base class for all toolkit errors."""
    pass


class InvalidConfigurationError(PageGridError, ValueError):
    """Settings, image counts or scale values are out of range."""
    pass


class MissingAssetError(PageGridError):
    """Template or source image is absent, unreadable or mismatched."""
    pass


class DecodeFailureError(PageGridError):
    """No valid layout payload could be decoded from the image."""
    pass


class RegistrationFailureError(PageGridError):
    """Affine registration impossible (too few points or degenerate)."""
    pass


class GeometryOutOfBoundsError(PageGridError):
    """A page rectangle does not fit inside the canonical canvas."""
    
    def __init__(
        self,
        page_number: int,
        rect: "PageRect",
        canvas_size: Tuple[int, int],
    ) -> None:
        self.page_number = page_number
        self.rect = rect
        self.canvas_size = canvas_size
        super().__init__(
            f"Page {page_number} rectangle {rect} exceeds canvas "
            f"{canvas_size[0]}x{canvas_size[1]}"
        )
