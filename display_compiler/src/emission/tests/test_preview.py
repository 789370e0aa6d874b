"""Tests for emission/preview.py - Program replay previews."""

from display_compiler.src.common.constants import DISPLAY_BACKGROUND
from display_compiler.src.common.diagnostics import ExportDiagnostics
from display_compiler.src.grid.grid_planner import GridPlan
from display_compiler.src.emission.preview import render_preview
from display_compiler.src.layout.assembler import LayoutAssembler
from display_compiler.src.layout.layout_sink import PlanLayoutSink

BACKGROUND = (*DISPLAY_BACKGROUND, 255)


def assemble(grid_plan, count, unit, program_for):
    sink = PlanLayoutSink("logic-display", "micro-processor")
    return LayoutAssembler(sink).assemble(grid_plan, count, unit, program_for)


class TestRenderPreview:
    def test_preview_size(self):
        """Test the preview covers the whole grid."""
        plan = GridPlan(3, 2)
        layout = assemble(plan, 5, 4, lambda cell, link: [])
        image = render_preview(layout, plan, 4)
        assert image.size == (12, 8)
        assert image.getpixel((11, 7)) == BACKGROUND

    def test_flushed_rect_is_painted_with_flip(self):
        """Test a flushed rect lands top-left after undoing the display flip."""
        plan = GridPlan(1, 1)

        def program_for(cell, link):
            # Top-left 2x1 rectangle on a 4px display
            return [["draw color 255 0 0 255", "draw rect 0 3 2 1", f"drawflush {link}"]]

        image = render_preview(assemble(plan, 1, 4, program_for), plan, 4)
        assert image.getpixel((0, 0)) == (255, 0, 0, 255)
        assert image.getpixel((1, 0)) == (255, 0, 0, 255)
        assert image.getpixel((2, 0)) == BACKGROUND
        assert image.getpixel((0, 3)) == BACKGROUND

    def test_tiles_land_in_grid_slots(self):
        """Test each display is drawn at its cell of the source image."""
        plan = GridPlan(2, 2)

        def program_for(cell, link):
            shade = 10 * (cell.index + 1)
            return [[f"draw color {shade} 0 0 255", "draw rect 0 0 2 2", f"drawflush {link}"]]

        image = render_preview(assemble(plan, 3, 2, program_for), plan, 2)
        assert image.getpixel((0, 0)) == (10, 0, 0, 255)
        assert image.getpixel((2, 0)) == (20, 0, 0, 255)
        assert image.getpixel((0, 2)) == (30, 0, 0, 255)
        assert image.getpixel((3, 3)) == BACKGROUND

    def test_unflushed_draws_dropped(self):
        """Test draw calls after the last flush never reach the display."""
        plan = GridPlan(1, 1)
        layout = assemble(plan, 1, 2, lambda cell, link: [])
        layout.tiles[0].processor.program = "draw color 255 255 255 255\ndraw rect 0 0 2 2"
        image = render_preview(layout, plan, 2)
        assert image.getpixel((0, 0)) == BACKGROUND

    def test_flush_to_unlinked_display_warns(self):
        """Test flushing another display's link is ignored with a warning."""
        plan = GridPlan(1, 1)
        layout = assemble(plan, 1, 2, lambda cell, link: [])
        layout.tiles[0].processor.program = (
            "draw color 255 255 255 255\ndraw rect 0 0 2 2\ndrawflush display9"
        )
        diagnostics = ExportDiagnostics()
        image = render_preview(layout, plan, 2, diagnostics=diagnostics)
        assert image.getpixel((0, 0)) == BACKGROUND
        assert diagnostics.warning_count() == 1
