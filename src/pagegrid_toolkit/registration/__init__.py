"""
Registration Resolver

Code search, least-squares affine registration and rectification of
captured sheets.
"""

from .affine import AffineTransform, PointPair, solve_affine
from .search import (
    PayloadMatch,
    SearchRegion,
    collect_marker_points,
    corner_region_size,
    corner_regions,
    find_payload,
    search_regions,
)
from .resolver import CanonicalLayout, ResolvedSheet, SheetResolver, canonical_layout, rectify

__all__ = [
    "AffineTransform",
    "PointPair",
    "solve_affine",
    "PayloadMatch",
    "SearchRegion",
    "collect_marker_points",
    "corner_region_size",
    "corner_regions",
    "find_payload",
    "search_regions",
    "CanonicalLayout",
    "ResolvedSheet",
    "SheetResolver",
    "canonical_layout",
    "rectify",
]
