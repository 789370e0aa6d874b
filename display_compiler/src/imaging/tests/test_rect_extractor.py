"""
Tests for imaging/rect_extractor.py - Color grouping and rectangle covering.
"""

import numpy as np
from PIL import Image

from display_compiler.src.common.constants import DISPLAY_BACKGROUND, ExportConfig
from display_compiler.src.imaging.rect_extractor import (
    Rect,
    extract_rectangles,
    greedy_rectangles,
    pack_color,
    prepare_pixels,
    unpack_color,
)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def solid(size, color):
    return Image.new("RGBA", (size, size), color)


def covered_pixels(rects):
    pixels = set()
    for rect in rects:
        for dy in range(rect.height):
            for dx in range(rect.width):
                pixels.add((rect.x + dx, rect.y + dy))
    return pixels


class TestPackColor:
    def test_pack_and_unpack(self):
        """Test packed color codes keep every channel."""
        code = pack_color(18, 52, 86, 120)
        assert code == 0x12345678
        assert unpack_color(code) == (18, 52, 86, 120)

    def test_default_alpha(self):
        """Test alpha defaults to opaque."""
        assert pack_color(0, 0, 0) & 0xFF == 0xFF


class TestExtractRectangles:
    def test_solid_tile_is_one_rectangle(self):
        """Test a single-color tile becomes one full rectangle."""
        result = extract_rectangles(ExportConfig(), solid(8, RED))
        assert result == [(RED, [Rect(0, 0, 8, 8)])]

    def test_fully_transparent_tile_is_empty(self):
        """Test fully transparent pixels are never drawn."""
        result = extract_rectangles(ExportConfig(), solid(8, (10, 20, 30, 0)))
        assert result == []

    def test_color_order_is_first_appearance(self):
        """Test colors are reported in scan order of first appearance."""
        image = solid(4, BLUE)
        image.putpixel((3, 0), RED)
        image.putpixel((0, 0), RED)
        result = extract_rectangles(ExportConfig(), image)
        assert [color for color, _ in result] == [RED, BLUE]

    def test_rectangles_cover_each_color_without_overlap(self):
        """Test rectangles are disjoint and cover exactly their color's pixels."""
        image = solid(6, BLUE)
        for x, y in [(0, 0), (1, 0), (0, 1), (1, 1), (4, 2), (5, 5), (2, 4)]:
            image.putpixel((x, y), RED)

        result = dict(extract_rectangles(ExportConfig(), image))

        red_pixels = {(x, y) for x in range(6) for y in range(6) if image.getpixel((x, y)) == RED}
        blue_pixels = {(x, y) for x in range(6) for y in range(6)} - red_pixels
        assert covered_pixels(result[RED]) == red_pixels
        assert covered_pixels(result[BLUE]) == blue_pixels
        total = sum(r.width * r.height for rects in result.values() for r in rects)
        assert total == 36

    def test_greedy_merge_extends_right_then_down(self):
        """Test a 2x2 block in the corner is found as one rectangle."""
        image = solid(4, BLUE)
        for x, y in [(0, 0), (1, 0), (0, 1), (1, 1)]:
            image.putpixel((x, y), RED)
        result = dict(extract_rectangles(ExportConfig(), image))
        assert result[RED] == [Rect(0, 0, 2, 2)]
        assert result[BLUE][0] == Rect(2, 0, 2, 4)

    def test_deterministic(self):
        """Test identical input gives identical output."""
        image = Image.frombytes(
            "RGBA", (5, 5), bytes((i * 37) % 256 for i in range(5 * 5 * 4))
        )
        config = ExportConfig(quality=200)
        assert extract_rectangles(config, image) == extract_rectangles(config, image)

    def test_hsv_mode_reports_packed_codes(self):
        """Test HSV mode reports colors as integer codes."""
        result = extract_rectangles(ExportConfig(use_hsv=True), solid(4, (0, 0, 0, 255)))
        assert len(result) == 1
        color, rects = result[0]
        assert isinstance(color, int)
        assert unpack_color(color) == (0, 0, 0, 255)
        assert rects == [Rect(0, 0, 4, 4)]

    def test_hsv_mode_at_full_quality_keeps_exact_colors(self):
        """Test full quality skips the lossy HSV round trip."""
        color = (250, 3, 128, 255)
        result = extract_rectangles(ExportConfig(use_hsv=True), solid(3, color))
        assert [(unpack_color(code), rects) for code, rects in result] == [
            (color, [Rect(0, 0, 3, 3)])
        ]

    def test_hsv_mode_below_full_quality_quantizes(self):
        """Test reduced quality still goes through HSV quantization."""
        image = Image.new("RGBA", (2, 1))
        image.putdata([(250, 3, 128, 255), (248, 5, 126, 255)])
        codes, _ = prepare_pixels(ExportConfig(use_hsv=True, quality=192), image)
        assert codes[0, 0] == codes[0, 1]


class TestPreparePixels:
    def test_translucent_pixels_are_darkened(self):
        """Test channel multiplication without gray transparency."""
        codes, drawable = prepare_pixels(ExportConfig(), solid(1, (200, 100, 50, 51)))
        assert drawable[0, 0]
        assert unpack_color(int(codes[0, 0])) == (40, 20, 10, 255)

    def test_gray_transparency_blends_over_background(self):
        """Test translucent pixels blend over the display background."""
        config = ExportConfig(use_gray_transparency=True)
        codes, _ = prepare_pixels(config, solid(1, (255, 255, 255, 0)))
        # Fully transparent blends to the background but is not drawable
        assert unpack_color(int(codes[0, 0]))[:3] == DISPLAY_BACKGROUND

    def test_quality_quantizes_channels(self):
        """Test lower quality snaps channels to a coarser step."""
        config = ExportConfig(quality=192)  # step 64
        codes, _ = prepare_pixels(config, solid(1, (70, 100, 250, 255)))
        assert unpack_color(int(codes[0, 0])) == (64, 128, 255, 255)

    def test_full_quality_keeps_exact_colors(self):
        """Test quality 255 keeps every channel."""
        codes, _ = prepare_pixels(ExportConfig(), solid(1, (1, 2, 3, 255)))
        assert unpack_color(int(codes[0, 0])) == (1, 2, 3, 255)


class TestGreedyRectangles:
    def test_respects_drawable_mask(self):
        """Test masked pixels are skipped and split runs."""
        codes = np.full((1, 3), 7, dtype=np.uint32)
        drawable = np.array([[True, False, True]])
        assert greedy_rectangles(codes, drawable) == {
            7: [Rect(0, 0, 1, 1), Rect(2, 0, 1, 1)]
        }
