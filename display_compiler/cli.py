#!/usr/bin/env python3
"""
Pictocompile CLI - Command-line interface for the display grid compiler.

This module provides the entry point for the 'pictocompile' command installed via pip.

Usage:
    pictocompile image.png                        # Print schematic string to stdout
    pictocompile image.png --displays 6           # Split across a 6-display grid
    pictocompile image.png -o art.msch            # Save schematic file
    pictocompile image.png --json                 # Print the layout as JSON
    pictocompile image.png --preview preview.png  # Render what the displays will show
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import click
from PIL import Image

from display_compiler.src.codegen.stream_builder import build_program
from display_compiler.src.common.constants import (
    DEFAULT_CONFIG,
    DISPLAY_TYPES,
    MAX_GRAPHICS_BUFFER,
    MAX_INSTRUCTIONS,
    PROCESSOR_TYPES,
    ExportConfig,
)
from display_compiler.src.common.diagnostics import ExportDiagnostics
from display_compiler.src.emission.emitter import Schematic, SchematicEmitter, install_schematic
from display_compiler.src.emission.preview import render_preview
from display_compiler.src.grid.grid_planner import GridCell, GridPlan, plan_grid
from display_compiler.src.imaging.bitmap import crop_tile, load_image, scale_to
from display_compiler.src.imaging.rect_extractor import extract_rectangles
from display_compiler.src.layout.assembler import LayoutAssembler
from display_compiler.src.layout.layout_plan import LayoutPlan
from display_compiler.src.layout.layout_sink import PlanLayoutSink

ProgressCallback = Callable[[str], None]


@dataclass
class ExportResult:
    """Everything produced by one export run."""

    grid_plan: GridPlan
    layout_plan: LayoutPlan
    schematic: Schematic


def export_image(
    source: Union[str, Path, Image.Image],
    config: ExportConfig = DEFAULT_CONFIG,
    diagnostics: Optional[ExportDiagnostics] = None,
    progress: Optional[ProgressCallback] = None,
) -> ExportResult:
    """Convert an image into a processor/display grid schematic.

    Any stage failure propagates and aborts the whole export.

    Args:
        source: Image path or an already loaded Pillow image
        config: Export settings
        diagnostics: Collector for progress labels and problems
        progress: Optional callback receiving each progress label

    Returns:
        ExportResult with the grid plan, layout plan and schematic
    """
    diagnostics = diagnostics or ExportDiagnostics()

    def report(label: str, stage: str, tile_index: Optional[int] = None) -> None:
        diagnostics.info(label, stage=stage, tile_index=tile_index)
        if progress is not None:
            progress(label)

    grid_plan = plan_grid(config.requested_count)
    unit_size = config.display_size
    total_width, total_height = grid_plan.pixel_size(unit_size)

    image = load_image(source)
    if image.size != (total_width, total_height):
        report(
            f"Scaling to grid size {total_width}x{total_height} "
            f"({grid_plan.columns}x{grid_plan.rows} displays)...",
            stage="scaling",
        )
        image = scale_to(image, total_width, total_height)

    limits = config.limits

    def program_for(cell: GridCell, link_name: str):
        report(
            f"Processing tile {cell.index + 1} of {config.requested_count} "
            f"({cell.column + 1}, {cell.row + 1})...",
            stage="codegen",
            tile_index=cell.index,
        )
        tile_image = crop_tile(image, cell, unit_size)
        color_rects = extract_rectangles(config, tile_image)
        blocks = build_program(color_rects, limits, link_name, unit_size)
        diagnostics.debug(
            f"{len(color_rects)} color(s) in {len(blocks)} block(s)",
            stage="codegen",
            tile_index=cell.index,
        )
        return blocks

    report("Building schematic...", stage="layout")
    sink = PlanLayoutSink(config.display_type, config.processor_type)
    layout_plan = LayoutAssembler(sink, diagnostics).assemble(
        grid_plan, config.requested_count, unit_size, program_for
    )

    report("Saving...", stage="emission")
    description = (
        f"{layout_plan.label}, {limits.instruction_budget} instructions, "
        f"{limits.buffer_slots} buffer slots"
    )
    schematic = SchematicEmitter(diagnostics).emit_from_plan(
        layout_plan, name=config.schematic_name, description=description
    )

    return ExportResult(grid_plan, layout_plan, schematic)


def export_image_source(
    source: Union[str, Path, Image.Image],
    config: ExportConfig = DEFAULT_CONFIG,
    log_level: str = "error",
    use_json: bool = False,
) -> tuple[bool, str, list]:
    """
    Export an image to a schematic string.

    Returns:
        (success: bool, result: str, diagnostics: list)
    """
    diagnostics = ExportDiagnostics(log_level=log_level)
    result = export_image(source, config, diagnostics)

    if diagnostics.has_errors():
        return False, "Schematic emission failed", diagnostics.get_messages()

    if use_json:
        output = json.dumps(result.layout_plan.to_dict())
    else:
        output = result.schematic.to_string()

    return True, output, diagnostics.get_messages()


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


def validate_positive(ctx, param, value):
    """Validate that a numeric option is positive."""
    if value is not None and value <= 0:
        raise click.BadParameter("must be a positive integer")
    return value


def validate_quality(ctx, param, value):
    if not 0 <= value <= 255:
        raise click.BadParameter("must be between 0 and 255")
    return value


@click.command()
@click.argument("image_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file (.msch writes a schematic file, anything else the text result)",
)
@click.option(
    "-n",
    "--displays",
    type=int,
    default=1,
    callback=validate_positive,
    help="Number of displays to split the image across",
)
@click.option(
    "--display-type",
    type=click.Choice(sorted(DISPLAY_TYPES)),
    default=DEFAULT_CONFIG.display_type,
    help="Display block to draw on",
)
@click.option(
    "--size",
    type=int,
    default=None,
    callback=validate_positive,
    help="Pixels per display edge (default: the display type's resolution)",
)
@click.option(
    "--speed",
    type=int,
    default=MAX_INSTRUCTIONS,
    callback=validate_positive,
    help=f"Instruction budget per block (default: {MAX_INSTRUCTIONS})",
)
@click.option(
    "--buffer",
    type=int,
    default=MAX_GRAPHICS_BUFFER,
    callback=validate_positive,
    help=f"Draw calls a display buffers before a flush (default: {MAX_GRAPHICS_BUFFER})",
)
@click.option(
    "--quality",
    type=int,
    default=255,
    callback=validate_quality,
    help="Color quality 0-255; 255 keeps exact colors",
)
@click.option("--hsv", is_flag=True, help="Quantize colors in HSV space")
@click.option(
    "--gray-transparency",
    is_flag=True,
    help="Blend translucent pixels over the display background instead of darkening them",
)
@click.option(
    "--processor",
    type=click.Choice(PROCESSOR_TYPES),
    default=DEFAULT_CONFIG.processor_type,
    help="Processor block driving each display",
)
@click.option("--name", type=str, help="Schematic name")
@click.option("--json", "use_json", is_flag=True, help="Output the layout as JSON")
@click.option(
    "--install-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Also write the schematic into this schematic directory",
)
@click.option(
    "--preview",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a PNG of what the displays will show",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def main(
    image_file,
    output,
    displays,
    display_type,
    size,
    speed,
    buffer,
    quality,
    hsv,
    gray_transparency,
    processor,
    name,
    use_json,
    install_dir,
    preview,
    log_level,
):
    """Compile an image into a grid of logic displays and processors."""
    setup_logging(log_level)
    verbose = log_level in ["debug", "info"]

    config = ExportConfig(
        display_type=display_type,
        unit_display_size=size,
        requested_count=displays,
        instruction_budget=speed,
        buffer_slots=buffer,
        use_gray_transparency=gray_transparency,
        quality=quality,
        use_hsv=hsv,
        processor_type=processor,
        schematic_name=name,
    )

    if verbose:
        click.echo(f"Exporting {image_file}...")

    diagnostics = ExportDiagnostics(log_level=log_level)
    try:
        result = export_image(image_file, config, diagnostics)
    except (OSError, ValueError) as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)

    if diagnostics.has_errors():
        click.echo("Diagnostics:", err=True)
        for msg in diagnostics.get_messages():
            click.echo(f"  {msg}", err=True)
        click.echo("Export failed: schematic emission failed", err=True)
        sys.exit(1)

    try:
        if preview:
            preview.parent.mkdir(parents=True, exist_ok=True)
            render_preview(
                result.layout_plan, result.grid_plan, config.display_size
            ).save(preview)
            if verbose:
                click.echo(f"Preview saved to {preview}")

        if install_dir:
            installed = install_schematic(result.schematic, install_dir)
            if verbose:
                click.echo(f"Schematic installed as {installed}")

        if use_json:
            text = json.dumps(result.layout_plan.to_dict(), indent=2)
        else:
            text = result.schematic.to_string()

        if output and output.suffix == ".msch" and not use_json:
            result.schematic.save(output)
            if verbose:
                click.echo(f"Schematic saved to {output}")
        elif output:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding="utf-8")
            if verbose:
                click.echo(f"Result saved to {output}")
        else:
            click.echo(text)
    except OSError as e:
        click.echo(f"Failed to write output: {e}", err=True)
        sys.exit(1)

    if verbose:
        click.echo(
            f"Export completed: {len(result.layout_plan.tiles)} display(s) "
            f"in a {result.grid_plan.label}.",
            err=True,
        )


if __name__ == "__main__":
    main()
