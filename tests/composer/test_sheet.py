"""
Tests for composer.sheet

Test Coverage:
- Canvas size and payload contents of composed sheets
- Corner markers at TL/BL/BR and payload code at TR
- Multi-image mode fitting (downscale only, centered)
- Validation of image count and scale
"""
import pytest
from PIL import Image

from pagegrid_toolkit.composer.sheet import (
    MultiImageOptions,
    compose_multi_image_sheet,
    compose_sheet,
    fit_within,
)
from pagegrid_toolkit.composer.templates import TemplateSet
from pagegrid_toolkit.core.errors import InvalidConfigurationError
from pagegrid_toolkit.core.models.markers import MarkerRole
from pagegrid_toolkit.layout.config import LayoutSettings
from pagegrid_toolkit.layout.engine import compute_canvas

SETTINGS = LayoutSettings(total_pages=4, pages_per_row=2)


# ─────────────────────────────────────────────────────────────────────────────
# Template sheets
# ─────────────────────────────────────────────────────────────────────────────

class TestComposeSheet:
    
    def test_compose_when_single_template_then_canvas_includes_border(self, page_template, fake_channel):
        sheet = compose_sheet(TemplateSet.single(page_template), SETTINGS, encoder=fake_channel)
        
        assert sheet.image.size == (800 + 320, 1230 + 320)
        assert sheet.canvas == compute_canvas(SETTINGS.with_registration_border(), sheet.payload.page_geometry)
    
    def test_compose_when_done_then_payload_snapshots_layout(self, page_template, fake_channel):
        settings = LayoutSettings(total_pages=3, pages_per_row=2, start_with_left_page=True, padding_x=10)
        
        sheet = compose_sheet(TemplateSet.single(page_template), settings, encoder=fake_channel)
        payload = sheet.payload
        
        assert (payload.page_width, payload.page_height, payload.total_pages) == (400, 600, 3)
        assert payload.start_with_left_page is True
        assert payload.padding_x == 10  # border not included
        assert (payload.canvas_width, payload.canvas_height) == sheet.image.size
        assert (payload.pages_per_row, payload.rows) == (2, 2)
        assert (payload.marker_size, payload.marker_margin) == (150, 32)
        assert (payload.payload_code_size, payload.payload_code_margin) == (300, 32)
    
    def test_compose_when_done_then_codes_drawn_at_three_corners_and_payload(self, page_template, fake_channel):
        sheet = compose_sheet(TemplateSet.single(page_template), SETTINGS, encoder=fake_channel)
        w, h = sheet.image.size
        
        assert sheet.image.getpixel((107, 107)) == fake_channel.color_for(MarkerRole.TL.text)
        assert sheet.image.getpixel((107, h - 107)) == fake_channel.color_for(MarkerRole.BL.text)
        assert sheet.image.getpixel((w - 107, h - 107)) == fake_channel.color_for(MarkerRole.BR.text)
        assert sheet.image.getpixel((w - 182, 182)) == fake_channel.color_for(sheet.payload.to_text())
        assert MarkerRole.TR.text not in fake_channel.colors
    
    def test_compose_when_done_then_pages_drawn_from_template(self, page_template, fake_channel):
        sheet = compose_sheet(TemplateSet.single(page_template), SETTINGS, encoder=fake_channel)
        
        for rect in sheet.rects:
            # Darker block at template (100..300, 200..400)
            assert sheet.image.getpixel((rect.left + 200, rect.top + 300)) == (180, 180, 180)
            assert sheet.image.getpixel((rect.left + 20, rect.top + 500)) == (235, 235, 235)
    
    def test_compose_when_spread_template_then_odd_pages_use_right_half(self, spread_template, fake_channel):
        sheet = compose_sheet(TemplateSet.single(spread_template), SETTINGS, encoder=fake_channel)
        page1, page2 = sheet.rects[0], sheet.rects[1]
        
        assert sheet.image.getpixel((page1.left + 200, page1.top + 300)) == (200, 200, 200)
        assert sheet.image.getpixel((page2.left + 200, page2.top + 300)) == (120, 120, 120)
    
    def test_compose_when_called_twice_then_independent_buffers(self, page_template, fake_channel):
        templates = TemplateSet.single(page_template)
        
        a = compose_sheet(templates, SETTINGS, encoder=fake_channel)
        b = compose_sheet(templates, SETTINGS, encoder=fake_channel)
        a.image.paste((0, 0, 0), (0, 0, 50, 50))
        
        assert b.image.getpixel((10, 10)) == (255, 255, 255)


# ─────────────────────────────────────────────────────────────────────────────
# Multi-image sheets
# ─────────────────────────────────────────────────────────────────────────────

class TestFitWithin:
    
    def test_fit_when_larger_than_box_then_scaled_down_keeping_aspect(self):
        result = fit_within(Image.new("RGB", (800, 600)), 200, 300)
        assert result.size == (200, 150)
    
    def test_fit_when_smaller_than_box_then_not_upscaled(self):
        source = Image.new("RGB", (100, 50))
        
        result = fit_within(source, 200, 300)
        
        assert result.size == (100, 50)
        assert result is not source


class TestMultiImageOptions:
    
    @pytest.mark.parametrize("scale", [9, 0, 101, -5])
    def test_scale_when_out_of_range_then_raises(self, scale):
        with pytest.raises(InvalidConfigurationError, match="scale_percent"):
            MultiImageOptions(scale_percent=scale)
    
    @pytest.mark.parametrize("scale", [10, 50, 100])
    def test_scale_when_in_range_then_accepted(self, scale):
        assert MultiImageOptions(scale_percent=scale).scale_percent == scale


class TestComposeMultiImage:
    
    def test_multi_when_half_scale_then_sources_centered_in_half_box(self, page_template, fake_channel):
        large = Image.new("RGB", (800, 600), (10, 60, 110))   # fits to 200x150
        small = Image.new("RGB", (100, 50), (110, 60, 10))    # stays 100x50
        sources = [large, small, large, small]
        
        sheet = compose_multi_image_sheet(
            TemplateSet.single(page_template), sources, SETTINGS,
            MultiImageOptions(scale_percent=50), encoder=fake_channel,
        )
        
        big_rect, small_rect = sheet.rects[0], sheet.rects[1]
        # 200x150 centered in 400x600 -> (100..300, 225..375)
        assert sheet.image.getpixel((big_rect.left + 100, big_rect.top + 225)) == (10, 60, 110)
        assert sheet.image.getpixel((big_rect.left + 299, big_rect.top + 374)) == (10, 60, 110)
        assert sheet.image.getpixel((big_rect.left + 99, big_rect.top + 300)) != (10, 60, 110)
        assert sheet.image.getpixel((big_rect.left + 200, big_rect.top + 375)) != (10, 60, 110)
        # 100x50 centered in 400x600 -> (150..250, 275..325), never upscaled
        assert sheet.image.getpixel((small_rect.left + 150, small_rect.top + 275)) == (110, 60, 10)
        assert sheet.image.getpixel((small_rect.left + 249, small_rect.top + 324)) == (110, 60, 10)
        assert sheet.image.getpixel((small_rect.left + 250, small_rect.top + 300)) != (110, 60, 10)
    
    def test_multi_when_done_then_template_is_background(self, page_template, fake_channel):
        sources = [Image.new("RGB", (10, 10), (0, 0, 0))] * 4
        
        sheet = compose_multi_image_sheet(
            TemplateSet.single(page_template), sources, SETTINGS, encoder=fake_channel,
        )
        
        rect = sheet.rects[0]
        assert sheet.image.getpixel((rect.left + 20, rect.top + 20)) == (235, 235, 235)
    
    def test_multi_when_image_count_differs_then_raises(self, page_template, fake_channel):
        with pytest.raises(InvalidConfigurationError, match="Image count"):
            compose_multi_image_sheet(
                TemplateSet.single(page_template), [Image.new("RGB", (5, 5))] * 3, SETTINGS,
                encoder=fake_channel,
            )


class TestLandscapePairSheet:
    
    def test_compose_when_landscape_pair_then_pages_do_not_overlap(self, fake_channel):
        left = Image.new("RGB", (800, 600), (10, 10, 10))
        right = Image.new("RGB", (800, 600), (90, 90, 90))
        settings = LayoutSettings(total_pages=2, pages_per_row=2, page_spacing=0)
        
        sheet = compose_sheet(TemplateSet.pair(left, right), settings, encoder=fake_channel)
        
        assert (sheet.payload.page_width, sheet.payload.page_height) == (800, 600)
        assert sheet.image.size == (1600 + 320, 600 + 320)
        by_page = {rect.page_number: rect for rect in sheet.rects}
        # Page 1 is a right page, page 2 a left page
        page1 = by_page[1]
        page2 = by_page[2]
        assert page1.width == 800
        assert sheet.image.getpixel((page1.left + 400, page1.top + 300)) == (90, 90, 90)
        assert sheet.image.getpixel((page2.left + 400, page2.top + 300)) == (10, 10, 10)
        assert sheet.image.getpixel((page2.right - 5, page2.top + 300)) == (10, 10, 10)
