"""Drawing program generation for display processors."""

from display_compiler.src.common.constants import ResourceLimits

from .instructions import color_line, flush_line, rect_line
from .stream_builder import (
    FlushReason,
    FlushState,
    InstructionBlock,
    InstructionStreamBuilder,
    build_program,
    join_program,
)

__all__ = [
    "ResourceLimits",
    "InstructionBlock",
    "InstructionStreamBuilder",
    "FlushState",
    "FlushReason",
    "build_program",
    "join_program",
    "color_line",
    "rect_line",
    "flush_line",
]
