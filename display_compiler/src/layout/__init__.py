"""Layout Assembly Module
=========================

Turns per-tile programs into a positioned arrangement of processors and
displays:

1. Cell iteration – row-major, skipping cells past the requested count.
2. Placement – processors in a compact block, displays to the right.
3. Wiring – one named link per processor, matching its flush target.

The resulting :class:`LayoutPlan` is consumed by the emission package to
produce a schematic.
"""

from .assembler import (
    LayoutAssembler,
    display_position,
    link_name_for,
    processor_position,
)
from .layout_plan import EntityPlacement, LayoutPlan, LogicLink, TilePlacement
from .layout_sink import LayoutSink, PlanLayoutSink

__all__ = [
    "LayoutAssembler",
    "LayoutPlan",
    "LayoutSink",
    "PlanLayoutSink",
    # Data structures
    "EntityPlacement",
    "TilePlacement",
    "LogicLink",
    # Geometry helpers
    "link_name_for",
    "processor_position",
    "display_position",
]
