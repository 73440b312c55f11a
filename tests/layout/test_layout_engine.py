"""
Tests for layout.engine

Test Coverage:
- Page placement (right-to-left, pair gaps, left-start shift)
- Canvas size formula
- Non-overlap and containment for all valid settings
- Pages-per-row and row inference
"""
import itertools

import pytest

from pagegrid_toolkit.core.errors import InvalidConfigurationError
from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.engine import (
    compute_canvas,
    content_width_for,
    infer_pages_per_row,
    infer_rows,
    page_rect,
    page_rects,
    page_top_left,
    pair_gaps_before_column,
    row_count,
)
from pagegrid_toolkit.layout.models import PageGeometry, PageRect

PAGE = PageGeometry(720, 1000)


# ─────────────────────────────────────────────────────────────────────────────
# Scenarios
# ─────────────────────────────────────────────────────────────────────────────

class TestScenarios:
    """Worked layout examples."""
    
    def test_canvas_when_eight_pages_six_per_row_then_two_rows_and_two_pair_gaps(self):
        settings = LayoutSettings(
            total_pages=8, pages_per_row=6, start_with_left_page=False,
            page_spacing=20, row_spacing=30, padding_x=0, padding_y=0,
        )
        
        canvas = compute_canvas(settings, PAGE)
        
        assert canvas.rows == 2
        assert canvas.content_width == 720 * 6 + 20 * 2 == 4360
        assert canvas.content_height == 1000 * 2 + 30
        assert canvas.size == (4360, 2030)
    
    def test_page_one_when_not_start_left_then_rightmost_column(self):
        settings = LayoutSettings(total_pages=8, pages_per_row=6)
        
        x, y = page_top_left(1, settings, PAGE)
        
        # Column 5 crosses two pair boundaries
        assert (x, y) == (5 * 720 + 2 * 20, 0)
    
    def test_page_one_when_start_left_then_shifted_by_leading_slot_and_gap(self):
        settings = LayoutSettings(total_pages=7, pages_per_row=6, start_with_left_page=True)
        
        canvas = compute_canvas(settings, PAGE)
        rect = page_rect(1, settings, PAGE)
        
        assert settings.slot_count == 8
        assert canvas.rows == 2
        # Slot 0 (rightmost) stays empty; page 1 sits in column 4 with the extra gap
        assert (rect.left, rect.top) == (4 * 720 + (2 + 1) * 20, 0)
        assert canvas.content_width == 720 * 6 + 20 * (2 + 1)
    
    def test_second_row_when_start_left_then_continues_right_to_left(self):
        settings = LayoutSettings(total_pages=7, pages_per_row=6, start_with_left_page=True)
        
        # Page 6 fills slot 6 -> row 1, column 5
        x, y = page_top_left(6, settings, PAGE)
        
        assert y == 1000 + 30
        assert x == 5 * 720 + (2 + 1) * 20
    
    def test_padding_when_set_then_offsets_every_page(self):
        plain = LayoutSettings(total_pages=4, pages_per_row=4)
        padded = LayoutSettings(total_pages=4, pages_per_row=4, padding_x=50, padding_y=40)
        
        for n in range(1, 5):
            px, py = page_top_left(n, plain, PAGE)
            qx, qy = page_top_left(n, padded, PAGE)
            assert (qx - px, qy - py) == (50, 40)


class TestPairGaps:
    """Tests for pair_gaps_before_column()."""
    
    @pytest.mark.parametrize("col,expected", [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2), (5, 2), (11, 5)])
    def test_gaps_when_normal_start_then_one_per_pair_boundary(self, col, expected):
        assert pair_gaps_before_column(col, start_with_left_page=False) == expected
    
    @pytest.mark.parametrize("col,expected", [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3)])
    def test_gaps_when_start_left_then_extra_gap_after_column_zero(self, col, expected):
        assert pair_gaps_before_column(col, start_with_left_page=True) == expected


class TestPageNumbers:
    
    @pytest.mark.parametrize("page_number", [0, 9, -1])
    def test_page_rect_when_page_out_of_range_then_raises(self, page_number):
        with pytest.raises(InvalidConfigurationError):
            page_rect(page_number, LayoutSettings(total_pages=8), PAGE)


# ─────────────────────────────────────────────────────────────────────────────
# Properties over all valid settings
# ─────────────────────────────────────────────────────────────────────────────

SETTINGS_GRID = [
    LayoutSettings(
        total_pages=total,
        pages_per_row=ppr,
        start_with_left_page=left,
        page_spacing=spacing,
        row_spacing=row_spacing,
        padding_x=pad,
        padding_y=pad // 2,
    )
    for total, ppr, left, spacing, row_spacing, pad in itertools.product(
        [1, 2, 5, 8, 13], [2, 4, 6, 8, 10, 12], [False, True], [0, 20], [0, 30], [0, 160]
    )
]


class TestGeometryProperties:
    
    @pytest.mark.parametrize("settings", SETTINGS_GRID)
    def test_rects_when_any_valid_settings_then_disjoint_and_inside_canvas(self, settings):
        page = PageGeometry(30, 40)
        canvas = compute_canvas(settings, page)
        rects = page_rects(settings, page)
        
        assert len(rects) == settings.total_pages
        for rect in rects:
            assert rect.fits_within(canvas.width, canvas.height), rect
        for a, b in itertools.combinations(rects, 2):
            assert not a.overlaps(b), (a, b)
    
    @pytest.mark.parametrize("settings", SETTINGS_GRID)
    def test_rows_when_any_valid_settings_then_ceil_of_slots(self, settings):
        expected = -(-settings.slot_count // settings.pages_per_row)
        assert row_count(settings) == expected


class TestPageRect:
    
    def test_overlaps_when_touching_edges_then_false(self):
        a = PageRect(1, 0, 0, 10, 10)
        b = PageRect(2, 10, 0, 10, 10)
        assert not a.overlaps(b)
        assert a.right == 10 and a.bottom == 10
        assert a.box == (0, 0, 10, 10)
    
    def test_fits_within_when_exceeding_then_false(self):
        rect = PageRect(1, 5, 5, 10, 10)
        assert rect.fits_within(15, 15)
        assert not rect.fits_within(14, 15)
    
    def test_page_geometry_when_wider_than_tall_then_halved(self):
        assert PageGeometry.from_template_size(800, 600).size == (400, 600)
        assert PageGeometry.from_template_size(400, 600).size == (400, 600)
        assert PageGeometry.from_template_size(500, 500).size == (500, 500)
    
    def test_page_geometry_when_not_positive_then_raises(self):
        with pytest.raises(InvalidConfigurationError):
            PageGeometry(0, 10)


# ─────────────────────────────────────────────────────────────────────────────
# Inference
# ─────────────────────────────────────────────────────────────────────────────

class TestInference:
    
    @pytest.mark.parametrize("ppr", [2, 4, 6, 8, 10, 12])
    @pytest.mark.parametrize("start_left", [False, True])
    def test_infer_pages_per_row_when_canvas_from_formula_then_exact(self, ppr, start_left):
        settings = LayoutSettings(
            total_pages=10, pages_per_row=ppr, start_with_left_page=start_left,
            page_spacing=20, padding_x=160,
        )
        canvas = compute_canvas(settings, PAGE)
        
        inferred = infer_pages_per_row(
            canvas_width=canvas.width,
            padding_x=160,
            page_width=PAGE.width,
            page_spacing=20,
            start_with_left_page=start_left,
        )
        
        assert inferred == ppr
    
    def test_infer_pages_per_row_when_width_slightly_off_then_nearest(self):
        width = content_width_for(720, 6, 20, False) + 7
        assert infer_pages_per_row(width, 0, 720, 20, False) == 6
    
    def test_infer_pages_per_row_when_padding_exceeds_width_then_smallest(self):
        assert infer_pages_per_row(100, 200, 720, 20, False) == 2
    
    def test_infer_rows_when_called_then_matches_row_count(self):
        assert infer_rows(7, 6, True) == 2
        assert infer_rows(6, 6, False) == 1
        assert infer_rows(13, 4, False) == 4
