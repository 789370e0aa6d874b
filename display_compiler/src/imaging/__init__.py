"""Image preparation: loading, tiling and rectangle extraction."""

from .bitmap import crop_tile, load_image, scale_to
from .rect_extractor import (
    Color,
    ColorRectangles,
    Rect,
    extract_rectangles,
    greedy_rectangles,
    pack_color,
    prepare_pixels,
    unpack_color,
)

__all__ = [
    "load_image",
    "scale_to",
    "crop_tile",
    "Rect",
    "Color",
    "ColorRectangles",
    "extract_rectangles",
    "greedy_rectangles",
    "prepare_pixels",
    "pack_color",
    "unpack_color",
]
