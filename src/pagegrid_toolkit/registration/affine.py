"""
Module: registration.affine

Purpose:
    Least-squares affine fit from observed points to canonical points:
        x' = a*x + b*y + c
        y' = d*x + e*y + f
    Each point pair contributes two rows to the 6x6 normal equations,
    solved by Gauss-Jordan elimination with partial pivoting.

Key Classes:
    - PointPair: Observed point and its canonical position
    - AffineTransform: Six affine parameters with apply/inverse helpers

Key Functions:
    - solve_affine(): Fit a transform to three or more pairs

Dependencies:
    - numpy: Normal equation accumulation and row operations

Used By:
    - registration.resolver
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from pagegrid_toolkit.common.constants import SEARCH
from pagegrid_toolkit.core.errors import RegistrationFailureError

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class PointPair:
    """
    Correspondence used for registration.
    
    Attributes:
        key: Which code produced the pair ("PAYLOAD", "TL", ...)
        observed: Centre in the captured image
        canonical: Expected centre on the composed canvas
    """
    key: str
    observed: Point
    canonical: Point


@dataclass(frozen=True, slots=True)
class AffineTransform:
    """Affine map x' = a*x + b*y + c, y' = d*x + e*y + f."""
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float
    
    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls(1.0, 0.0, 0.0, 0.0, 1.0, 0.0)
    
    @property
    def parameters(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)
    
    @property
    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d
    
    def apply(self, x: float, y: float) -> Point:
        return (
            self.a * x + self.b * y + self.c,
            self.d * x + self.e * y + self.f,
        )
    
    def inverse(self) -> "AffineTransform":
        """
        Inverse mapping.
        
        Raises:
            RegistrationFailureError: If the linear part is singular
        """
        det = self.determinant
        if abs(det) < SEARCH.pivot_epsilon:
            raise RegistrationFailureError(f"Affine transform is not invertible (det={det:g})")
        ia = self.e / det
        ib = -self.b / det
        id_ = -self.d / det
        ie = self.a / det
        ic = -(ia * self.c + ib * self.f)
        if_ = -(id_ * self.c + ie * self.f)
        return AffineTransform(ia, ib, ic, id_, ie, if_)
    
    def residual(self, pair: PointPair) -> float:
        """Distance between the mapped observed point and its canonical point."""
        x, y = self.apply(*pair.observed)
        return float(np.hypot(x - pair.canonical[0], y - pair.canonical[1]))


def _normal_equations(pairs: Sequence[PointPair]) -> Tuple[np.ndarray, np.ndarray]:
    """Accumulate A^T A and A^T b, two rows per pair."""
    ata = np.zeros((6, 6), dtype=np.float64)
    atb = np.zeros(6, dtype=np.float64)
    for pair in pairs:
        x, y = pair.observed
        u, v = pair.canonical
        for row, target in (
            (np.array([x, y, 1.0, 0.0, 0.0, 0.0]), u),
            (np.array([0.0, 0.0, 0.0, x, y, 1.0]), v),
        ):
            ata += np.outer(row, row)
            atb += row * target
    return ata, atb


def _solve_linear_system(
    matrix: np.ndarray,
    rhs: np.ndarray,
    epsilon: float,
) -> np.ndarray:
    """
    Gauss-Jordan elimination with partial pivoting.
    
    Raises:
        RegistrationFailureError: If a pivot magnitude falls below ``epsilon``
    """
    n = matrix.shape[0]
    aug = np.hstack([matrix.astype(np.float64), rhs.reshape(-1, 1).astype(np.float64)])
    
    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(aug[col:, col])))
        pivot = aug[pivot_row, col]
        if abs(pivot) < epsilon:
            raise RegistrationFailureError(
                f"Degenerate point configuration (pivot {abs(pivot):.3g} in column {col})"
            )
        if pivot_row != col:
            aug[[col, pivot_row]] = aug[[pivot_row, col]]
        
        aug[col] /= aug[col, col]
        for row in range(n):
            if row == col:
                continue
            factor = aug[row, col]
            if factor != 0.0:
                aug[row] -= factor * aug[col]
    
    return aug[:, n]


def solve_affine(
    pairs: Sequence[PointPair],
    min_pairs: int = SEARCH.min_point_pairs,
    epsilon: float = SEARCH.pivot_epsilon,
) -> AffineTransform:
    """
    Fit observed -> canonical affine transform by least squares.
    
    Args:
        pairs: Point correspondences (three or more)
        min_pairs: Minimum number of pairs required
        epsilon: Pivot magnitude below which the system is degenerate
        
    Returns:
        Fitted AffineTransform
        
    Raises:
        RegistrationFailureError: Too few pairs or degenerate configuration
    """
    if len(pairs) < min_pairs:
        raise RegistrationFailureError(
            f"Need at least {min_pairs} point pairs for affine registration, got {len(pairs)}"
        )
    
    ata, atb = _normal_equations(pairs)
    params = _solve_linear_system(ata, atb, epsilon)
    transform = AffineTransform(*(float(p) for p in params))
    
    if logger.isEnabledFor(logging.DEBUG):
        residuals = ", ".join(f"{p.key}={transform.residual(p):.2f}" for p in pairs)
        logger.debug(f"Affine fit from {len(pairs)} pairs, residuals: {residuals}")
    return transform
