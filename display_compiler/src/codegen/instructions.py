"""Text forms of the drawing instructions emitted for a display processor."""

from __future__ import annotations

from display_compiler.src.imaging.rect_extractor import Color, Rect


def color_line(color: Color) -> str:
    """Color select: ``draw color R G B A`` or ``draw col %rrggbbaa``."""
    if isinstance(color, int):
        return f"draw col %{color:08x}"
    channels = list(color)
    if len(channels) == 3:
        channels.append(255)
    return "draw color " + " ".join(str(int(c)) for c in channels)


def rect_line(rect: Rect, display_size: int) -> str:
    """Rectangle draw, flipped from top-left image space to bottom-left display space."""
    y = display_size - rect.y - rect.height
    return f"draw rect {rect.x} {y} {rect.width} {rect.height}"


def flush_line(link_name: str) -> str:
    return f"drawflush {link_name}"

