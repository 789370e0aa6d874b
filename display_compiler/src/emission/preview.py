"""Replay generated programs into a preview image."""

from __future__ import annotations

from typing import Optional

from PIL import Image, ImageDraw

from display_compiler.src.common.constants import DISPLAY_BACKGROUND
from display_compiler.src.common.diagnostics import ExportDiagnostics
from display_compiler.src.grid.grid_planner import GridPlan
from display_compiler.src.layout.layout_plan import LayoutPlan, TilePlacement
from display_compiler.src.parsing.parser import ProgramParser
from display_compiler.src.parsing.transformer import DrawFlush, DrawRect, SetColor


def render_preview(
    layout_plan: LayoutPlan,
    grid_plan: GridPlan,
    unit_size: int,
    parser: Optional[ProgramParser] = None,
    diagnostics: Optional[ExportDiagnostics] = None,
) -> Image.Image:
    """Draw what every display would show, arranged like the source image.

    Draw calls only reach a display when a flush names that display's link;
    anything left unflushed at the end of a program is dropped.
    """
    parser = parser or ProgramParser()
    diagnostics = diagnostics or ExportDiagnostics()
    width, height = grid_plan.pixel_size(unit_size)
    image = Image.new("RGBA", (width, height), (*DISPLAY_BACKGROUND, 255))

    for tile in layout_plan.tiles:
        canvas = _replay_tile(tile, unit_size, parser, diagnostics)
        display_x, display_y = tile.display.position
        left = display_x - (grid_plan.columns + 1)
        image.paste(canvas, (left, display_y))

    return image


def _replay_tile(
    tile: TilePlacement,
    unit_size: int,
    parser: ProgramParser,
    diagnostics: ExportDiagnostics,
) -> Image.Image:
    canvas = Image.new("RGBA", (unit_size, unit_size), (*DISPLAY_BACKGROUND, 255))
    draw = ImageDraw.Draw(canvas)
    link_names = {link.name for link in tile.processor.links}

    color = (255, 255, 255, 255)
    pending = []
    for block in parser.parse(tile.processor.program or ""):
        for instruction in block:
            if isinstance(instruction, SetColor):
                color = instruction.rgba
            elif isinstance(instruction, DrawRect):
                pending.append((instruction, color))
            elif isinstance(instruction, DrawFlush):
                if instruction.target not in link_names:
                    diagnostics.warning(
                        f"Flush to unlinked '{instruction.target}' ignored",
                        stage="preview",
                    )
                else:
                    for rect, fill in pending:
                        _paint(draw, rect, fill, unit_size)
                pending = []

    return canvas


def _paint(draw: ImageDraw.ImageDraw, rect: DrawRect, fill, unit_size: int) -> None:
    if rect.width <= 0 or rect.height <= 0:
        return
    # Display origin is bottom-left
    top = unit_size - rect.y - rect.height
    draw.rectangle(
        [rect.x, top, rect.x + rect.width - 1, top + rect.height - 1], fill=fill
    )
