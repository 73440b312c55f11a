"""
Module: layout.models

Purpose:
    Geometry value types produced by the layout engine.

Key Classes:
    - PageGeometry: Page size in pixels, derived from template size
    - CanvasGeometry: Canvas size, content size and row count
    - PageRect: Pixel rectangle of one page slot

Dependencies:
    - dataclasses (std)

Used By:
    - layout.engine
    - composer.sheet
    - extraction.cropper
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from pagegrid_toolkit.core.errors import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Size of a single page in pixels."""
    width: int
    height: int
    
    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidConfigurationError(
                f"Page size must be positive: {self.width}x{self.height}"
            )
    
    @classmethod
    def from_template_size(cls, width: int, height: int) -> "PageGeometry":
        """
        Derive page size from a template image size.
        
        A template wider than tall is a two-page spread and is halved.
        """
        if width > height:
            return cls(width // 2, height)
        return cls(width, height)
    
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class CanvasGeometry:
    """
    Derived canvas dimensions.
    
    Attributes:
        width: Canvas width including padding
        height: Canvas height including padding
        content_width: Width of the page grid alone
        content_height: Height of the page grid alone
        rows: Number of grid rows
    """
    width: int
    height: int
    content_width: int
    content_height: int
    rows: int
    
    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class PageRect:
    """Pixel rectangle occupied by one page (half-open on right/bottom)."""
    page_number: int
    left: int
    top: int
    width: int
    height: int
    
    @property
    def right(self) -> int:
        return self.left + self.width
    
    @property
    def bottom(self) -> int:
        return self.top + self.height
    
    @property
    def box(self) -> Tuple[int, int, int, int]:
        """PIL-style (left, top, right, bottom) box."""
        return (self.left, self.top, self.right, self.bottom)
    
    def overlaps(self, other: "PageRect") -> bool:
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )
    
    def fits_within(self, width: int, height: int) -> bool:
        return (
            self.left >= 0
            and self.top >= 0
            and self.right <= width
            and self.bottom <= height
        )
    
    def __str__(self) -> str:
        return f"({self.left}, {self.top}, {self.width}x{self.height})"
