"""Processor/display grid assembly."""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

from display_compiler.src.codegen.stream_builder import InstructionBlock, join_program
from display_compiler.src.common.constants import LINK_PREFIX
from display_compiler.src.common.diagnostics import ExportDiagnostics
from display_compiler.src.grid.grid_planner import GridCell, GridPlan, iter_active_cells

from .layout_plan import LayoutPlan, LogicLink
from .layout_sink import LayoutSink

ProgramSource = Callable[[GridCell, str], List[InstructionBlock]]


def link_name_for(index: int) -> str:
    """1-based link name shared by a processor's link and its flush lines."""
    return f"{LINK_PREFIX}{index + 1}"


def processor_position(cell: GridCell) -> Tuple[int, int]:
    return cell.column, cell.row


def display_position(cell: GridCell, plan: GridPlan, unit_size: int) -> Tuple[int, int]:
    """Displays sit right of the processor block, past a one-unit gap."""
    return plan.columns + 1 + cell.column * unit_size, cell.row * unit_size


class LayoutAssembler:
    """Place one processor and one display per active grid cell.

    Processors form a compact ``columns x rows`` block at the origin; the
    displays form a second block to its right. Programs are requested from
    ``program_for`` with the same link name the processor is wired with.
    """

    def __init__(
        self, sink: LayoutSink, diagnostics: Optional[ExportDiagnostics] = None
    ) -> None:
        self.sink = sink
        self.diagnostics = diagnostics or ExportDiagnostics()

    def assemble(
        self,
        grid_plan: GridPlan,
        requested_count: int,
        unit_size: int,
        program_for: ProgramSource,
    ) -> LayoutPlan:
        max_width = 0
        max_height = 0

        for cell in iter_active_cells(grid_plan, requested_count):
            link_name = link_name_for(cell.index)
            display_x, display_y = display_position(cell, grid_plan, unit_size)

            self.sink.place_display((display_x, display_y))

            program = join_program(program_for(cell, link_name))
            link = LogicLink(link_name, display_x, display_y)
            self.sink.place_processor(processor_position(cell), program, [link])
            self.diagnostics.debug(
                f"Placed {link_name} at ({display_x}, {display_y})",
                stage="layout",
                tile_index=cell.index,
            )

            max_width = max(max_width, display_x + unit_size)
            max_height = max(max_height, display_y + unit_size)

        return self.sink.finish(max_width, max_height, grid_plan.label)
