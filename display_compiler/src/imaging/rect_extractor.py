from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

import numpy as np
from PIL import Image

from display_compiler.src.common.constants import DISPLAY_BACKGROUND, ExportConfig

"""Color quantization and rectangle covering for a single tile."""


Color = Union[Tuple[int, int, int, int], int]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in tile pixels, origin top-left."""

    x: int
    y: int
    width: int
    height: int


# Ordered association list; color order and rect order are significant
ColorRectangles = List[Tuple[Color, List[Rect]]]


def pack_color(r: int, g: int, b: int, a: int = 255) -> int:
    """Pack channels into a ``0xRRGGBBAA`` code."""
    return (r << 24) | (g << 16) | (b << 8) | a


def unpack_color(code: int) -> Tuple[int, int, int, int]:
    return (code >> 24) & 0xFF, (code >> 16) & 0xFF, (code >> 8) & 0xFF, code & 0xFF


def _quantize(channels: np.ndarray, quality: int) -> np.ndarray:
    step = 256 - quality
    if step <= 1:
        return channels
    stepped = np.round(channels.astype(np.float64) / step) * step
    return np.minimum(stepped, 255).astype(np.uint8)


def _flatten_alpha(rgba: np.ndarray, use_gray_transparency: bool) -> np.ndarray:
    """Resolve partial transparency into opaque RGB."""
    rgb = rgba[..., :3].astype(np.float64)
    alpha = rgba[..., 3:4].astype(np.float64) / 255.0

    if use_gray_transparency:
        background = np.array(DISPLAY_BACKGROUND, dtype=np.float64)
        rgb = rgb * alpha + background * (1.0 - alpha)
    else:
        rgb = rgb * alpha
    return np.clip(np.round(rgb), 0, 255).astype(np.uint8)


def prepare_pixels(
    config: ExportConfig, image: Image.Image
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(codes, drawable)`` arrays for ``image``.

    ``codes`` holds one packed RGBA code per pixel; ``drawable`` is False for
    fully transparent pixels, which are never drawn. The HSV round trip is
    lossy, so it only runs below full quality.
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
    drawable = rgba[..., 3] > 0
    rgb = _flatten_alpha(rgba, config.use_gray_transparency)

    if config.use_hsv and config.quality < 255:
        size = image.size
        hsv_image = Image.fromarray(rgb).convert("HSV")
        hsv = np.frombuffer(hsv_image.tobytes(), dtype=np.uint8).reshape(rgb.shape)
        hsv = np.ascontiguousarray(_quantize(hsv, config.quality))
        rgb_image = Image.frombytes("HSV", size, hsv.tobytes()).convert("RGB")
        rgb = np.asarray(rgb_image, dtype=np.uint8)
    else:
        rgb = _quantize(rgb, config.quality)

    rgb = rgb.astype(np.uint32)
    codes = (rgb[..., 0] << 24) | (rgb[..., 1] << 16) | (rgb[..., 2] << 8) | 0xFF
    return codes, drawable


def greedy_rectangles(codes: np.ndarray, drawable: np.ndarray) -> Dict[int, List[Rect]]:
    """Cover every drawable pixel with non-overlapping single-color rectangles.

    Scans top to bottom, left to right. Each uncovered pixel grows right while
    the color matches, then down while the whole span matches. Colors keep the
    order of their first appearance in the scan.
    """
    height, width = codes.shape
    used = ~drawable.copy()
    by_color: Dict[int, List[Rect]] = {}

    for y in range(height):
        for x in range(width):
            if used[y, x]:
                continue
            code = int(codes[y, x])

            run = 1
            while x + run < width and not used[y, x + run] and codes[y, x + run] == code:
                run += 1

            depth = 1
            while y + depth < height:
                span_codes = codes[y + depth, x : x + run]
                span_used = used[y + depth, x : x + run]
                if span_used.any() or not np.all(span_codes == code):
                    break
                depth += 1

            used[y : y + depth, x : x + run] = True
            by_color.setdefault(code, []).append(Rect(x, y, run, depth))

    return by_color


def extract_rectangles(config: ExportConfig, image: Image.Image) -> ColorRectangles:
    """Group a tile's pixels into colored rectangles.

    Deterministic for a given image and config. Colors are ``(r, g, b, a)``
    tuples, or packed ``0xRRGGBBAA`` codes when ``config.use_hsv`` is set.
    """
    codes, drawable = prepare_pixels(config, image)
    by_color = greedy_rectangles(codes, drawable)

    if config.use_hsv:
        return [(code, rects) for code, rects in by_color.items()]
    return [(unpack_color(code), rects) for code, rects in by_color.items()]
