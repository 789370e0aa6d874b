"""Bitmap loading, scaling and tile cropping built on Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from PIL import Image

from display_compiler.src.grid.grid_planner import GridCell


def load_image(source: Union[str, Path, Image.Image]) -> Image.Image:
    """Open ``source`` (or take an already loaded image) as RGBA.

    Pillow errors such as ``FileNotFoundError`` or ``UnidentifiedImageError``
    propagate to the caller.
    """
    if isinstance(source, Image.Image):
        image = source
    else:
        with Image.open(source) as handle:
            handle.load()
            image = handle.copy()
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return image


def scale_to(image: Image.Image, width: int, height: int) -> Image.Image:
    """Scale with bilinear filtering; images already at size are returned as is."""
    if image.size == (width, height):
        return image
    return image.resize((width, height), resample=Image.Resampling.BILINEAR)


def crop_tile(image: Image.Image, cell: GridCell, unit_size: int) -> Image.Image:
    """Cut the ``unit_size`` square that belongs to ``cell``."""
    left = cell.column * unit_size
    top = cell.row * unit_size
    return image.crop((left, top, left + unit_size, top + unit_size))
