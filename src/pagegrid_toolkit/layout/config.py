"""
Module: layout.config

Purpose:
    Immutable page-grid settings with validation on construction.

Key Classes:
    - LayoutSettings: Page count, pages per row, left-start flag,
      spacing and padding

Dependencies:
    - dataclasses (std)
    - pagegrid_toolkit.common.constants

Used By:
    - layout.engine: Slot and canvas geometry
    - composer.sheet: Sheet composition
    - payload.codec: Settings recovered from a decoded payload
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from pagegrid_toolkit.common.constants import ALLOWED_PAGES_PER_ROW, REGISTRATION
from pagegrid_toolkit.core.errors import InvalidConfigurationError


@dataclass(frozen=True)
class LayoutSettings:
    """
    Page-grid layout settings (immutable).
    
    Attributes:
        total_pages: Number of pages placed on the sheet
        pages_per_row: Slots per row, one of ALLOWED_PAGES_PER_ROW
        start_with_left_page: Leave slot 0 empty so page 1 is a left page
        page_spacing: Gap between left/right page pairs (px)
        row_spacing: Gap between rows (px)
        padding_x: Horizontal canvas padding (px)
        padding_y: Vertical canvas padding (px)
    
    Example:
        >>> settings = LayoutSettings(total_pages=8, pages_per_row=6)
        >>> settings.slot_count
        8
    """
    
    total_pages: int = 8
    pages_per_row: int = 6
    start_with_left_page: bool = False
    page_spacing: int = 20
    row_spacing: int = 30
    padding_x: int = 0
    padding_y: int = 0
    
    def __post_init__(self) -> None:
        """Validate settings on construction."""
        if self.total_pages <= 0:
            raise InvalidConfigurationError(
                f"total_pages must be positive: {self.total_pages}"
            )
        if self.pages_per_row not in ALLOWED_PAGES_PER_ROW:
            raise InvalidConfigurationError(
                f"pages_per_row must be one of {ALLOWED_PAGES_PER_ROW}: {self.pages_per_row}"
            )
        for name in ("page_spacing", "row_spacing", "padding_x", "padding_y"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidConfigurationError(f"{name} must be non-negative: {value}")
    
    @property
    def leading_slots(self) -> int:
        """Empty slots before page 1 (1 when starting with a left page)."""
        return 1 if self.start_with_left_page else 0
    
    @property
    def slot_count(self) -> int:
        """Total slots occupied, including the empty leading slot."""
        return self.total_pages + self.leading_slots
    
    def with_registration_border(self, border: int = REGISTRATION.border_px) -> "LayoutSettings":
        """
        Return settings with the registration border added to both paddings.
        
        Payloads store the caller's padding; every consumer rebuilds the
        composed geometry through this method.
        """
        return replace(
            self,
            padding_x=self.padding_x + border,
            padding_y=self.padding_y + border,
        )
