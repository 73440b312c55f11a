"""Centralized fixed constants for composition and registration.

Every consumer of sheet geometry (composer, resolver, extractor) reads its
marker and border metrics from here, so a sheet composed today and a sheet
decoded later agree on where every code sits.
"""

from __future__ import annotations

from dataclasses import dataclass


# Pages are grouped in left/right pairs, so a row always holds an even count
ALLOWED_PAGES_PER_ROW: tuple[int, ...] = (2, 4, 6, 8, 10, 12)


@dataclass(frozen=True)
class RegistrationConstants:
    """Metrics of the registration border and the codes drawn inside it."""
    
    border_px: int = 160  # Added to user padding on all sides
    marker_size_px: int = 150  # Corner marker code edge length
    marker_margin_px: int = 32  # Distance from canvas edge to marker
    payload_code_size_px: int = 300  # Payload code edge length (top-right)
    payload_code_margin_px: int = 32  # Distance from canvas edge to payload code


@dataclass(frozen=True)
class SearchConstants:
    """Constants for code search and affine registration."""
    
    # Corner search regions: side = ratio * min(width, height), clamped
    corner_region_ratio: float = 0.45
    corner_region_min_px: int = 260
    corner_region_max_px: int = 1200
    
    # Affine fit
    min_point_pairs: int = 3  # Six unknowns need at least three points
    pivot_epsilon: float = 1e-12  # Smaller pivots mean a degenerate point set


# Global instances for easy import
REGISTRATION = RegistrationConstants()
SEARCH = SearchConstants()
