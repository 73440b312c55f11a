"""
Tests for registration.affine

Test Coverage:
- Exact recovery of known parameters from consistent pairs
- Least-squares behaviour with more than three pairs
- Failure with fewer than three pairs or degenerate points
- AffineTransform helpers (apply, inverse)
"""
import math

import pytest

from pagegrid_toolkit.core.errors import RegistrationFailureError
from pagegrid_toolkit.registration.affine import AffineTransform, PointPair, solve_affine

OBSERVED = [(107.0, 107.0), (1013.0, 182.0), (107.0, 1443.0), (1013.0, 1443.0), (560.0, 800.0)]


def _pairs_from(transform: AffineTransform, points):
    return [
        PointPair(f"P{i}", point, transform.apply(*point))
        for i, point in enumerate(points)
    ]


class TestSolveAffine:
    """Tests for solve_affine()."""
    
    @pytest.mark.parametrize("params", [
        (1.0, 0.0, 0.0, 0.0, 1.0, 0.0),
        (1.0, 0.0, 25.5, 0.0, 1.0, -13.0),
        (0.8, 0.0, 0.0, 0.0, 1.25, 0.0),
        (math.cos(0.1), -math.sin(0.1), 40.0, math.sin(0.1), math.cos(0.1), -12.0),
        (1.1, 0.2, -30.0, -0.05, 0.9, 17.0),
    ])
    def test_solve_when_three_exact_pairs_then_recovers_parameters(self, params):
        expected = AffineTransform(*params)
        pairs = _pairs_from(expected, OBSERVED[:3])
        
        result = solve_affine(pairs)
        
        assert result.parameters == pytest.approx(expected.parameters, abs=1e-6)
    
    def test_solve_when_five_exact_pairs_then_recovers_parameters(self):
        expected = AffineTransform(0.97, -0.08, 55.0, 0.08, 0.97, -20.0)
        
        result = solve_affine(_pairs_from(expected, OBSERVED))
        
        assert result.parameters == pytest.approx(expected.parameters, abs=1e-6)
    
    def test_solve_when_noisy_pairs_then_least_squares_close(self):
        expected = AffineTransform(1.0, 0.0, 10.0, 0.0, 1.0, 5.0)
        pairs = _pairs_from(expected, OBSERVED)
        noisy = [
            PointPair(p.key, p.observed, (p.canonical[0] + d, p.canonical[1] - d))
            for p, d in zip(pairs, (0.5, -0.5, 0.5, -0.5, 0.0))
        ]
        
        result = solve_affine(noisy)
        
        for pair in noisy:
            assert result.residual(pair) < 1.0
    
    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_solve_when_fewer_than_three_pairs_then_raises(self, count):
        pairs = _pairs_from(AffineTransform.identity(), OBSERVED[:count])
        
        with pytest.raises(RegistrationFailureError, match="at least 3"):
            solve_affine(pairs)
    
    def test_solve_when_points_collinear_then_raises(self):
        points = [(0.0, 0.0), (100.0, 0.0), (250.0, 0.0), (400.0, 0.0)]
        pairs = _pairs_from(AffineTransform.identity(), points)
        
        with pytest.raises(RegistrationFailureError, match="Degenerate"):
            solve_affine(pairs)
    
    def test_solve_when_points_coincide_then_raises(self):
        pairs = _pairs_from(AffineTransform.identity(), [(5.0, 5.0)] * 3)
        
        with pytest.raises(RegistrationFailureError):
            solve_affine(pairs)


class TestAffineTransform:
    """Tests for AffineTransform helpers."""
    
    def test_apply_when_identity_then_unchanged(self):
        assert AffineTransform.identity().apply(3.0, 4.0) == (3.0, 4.0)
    
    def test_inverse_when_composed_then_identity(self):
        transform = AffineTransform(1.1, 0.2, -30.0, -0.05, 0.9, 17.0)
        inverse = transform.inverse()
        
        x, y = inverse.apply(*transform.apply(123.0, 456.0))
        
        assert (x, y) == pytest.approx((123.0, 456.0))
    
    def test_inverse_when_singular_then_raises(self):
        with pytest.raises(RegistrationFailureError):
            AffineTransform(1.0, 2.0, 0.0, 2.0, 4.0, 0.0).inverse()
