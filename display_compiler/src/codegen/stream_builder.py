"""Per-tile drawing program generation under instruction and buffer budgets.

A display processor may execute at most ``instruction_budget`` lines before
it has to flush, and its display buffers at most ``buffer_slots`` draw calls.
The builder walks a tile's colors and rectangles in extractor order and
inserts ``drawflush`` lines so neither limit is crossed:

* when the current block would reach the instruction budget, the block is
  closed with a flush and a new block starts by re-selecting the color;
* otherwise, when the draw-call counter reaches the buffer size, a flush and
  a color re-selection are appended inline to the current block.

The instruction check always runs first and the two branches never both
fire on the same check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from display_compiler.src.common.constants import ResourceLimits
from display_compiler.src.imaging.rect_extractor import ColorRectangles

from .instructions import color_line, flush_line, rect_line

InstructionBlock = List[str]


class FlushReason(Enum):
    NONE = "none"
    INSTRUCTION_BUDGET = "instruction_budget"
    BUFFER_SLOTS = "buffer_slots"


@dataclass
class FlushState:
    """Counters consumed by one tile since its last flush.

    ``lines_since_flush`` counts every line already in the current block,
    including a re-selected color and any inline flush.
    """

    limits: ResourceLimits
    lines_since_flush: int = 0
    draw_calls_since_flush: int = 0

    def maybe_flush(self) -> FlushReason:
        """Run the budget check that precedes every emitted instruction."""
        if self.lines_since_flush + 2 >= self.limits.instruction_budget:
            # New block holds just the re-selected color
            self.lines_since_flush = 1
            self.draw_calls_since_flush = 1
            return FlushReason.INSTRUCTION_BUDGET

        self.draw_calls_since_flush += 1
        if self.draw_calls_since_flush >= self.limits.buffer_slots:
            # Inline flush + color re-selection
            self.lines_since_flush += 2
            self.draw_calls_since_flush = 1
            return FlushReason.BUFFER_SLOTS

        return FlushReason.NONE

    def record_line(self) -> None:
        self.lines_since_flush += 1


@dataclass
class InstructionStreamBuilder:
    """Encode one tile's ``ColorRectangles`` into flush-terminated blocks."""

    limits: ResourceLimits
    flush_target: str
    display_size: int

    _blocks: List[InstructionBlock] = field(default_factory=list, init=False)
    _current: InstructionBlock = field(default_factory=list, init=False)
    _color: Optional[str] = field(default=None, init=False)
    _state: Optional[FlushState] = field(default=None, init=False)

    def build(self, color_rects: ColorRectangles) -> List[InstructionBlock]:
        """Return the tile's program as an ordered list of blocks.

        An empty mapping yields an empty program. Instructions are never
        rejected for size; the budgets only decide where flushes go.
        """
        self._blocks = []
        self._current = []
        self._color = None
        self._state = FlushState(self.limits)
        flush = flush_line(self.flush_target)

        for color, rects in color_rects:
            self._color = color_line(color)
            if self._check(flush) is FlushReason.NONE:
                self._emit(self._color)
            for rect in rects:
                self._check(flush)
                self._emit(rect_line(rect, self.display_size))

        if self._current:
            self._current.append(flush)
            self._blocks.append(self._current)
            self._current = []

        return self._blocks

    def _check(self, flush: str) -> FlushReason:
        reason = self._state.maybe_flush()
        if reason is FlushReason.INSTRUCTION_BUDGET:
            self._current.append(flush)
            self._blocks.append(self._current)
            self._current = [self._color]
        elif reason is FlushReason.BUFFER_SLOTS:
            self._current.append(flush)
            self._current.append(self._color)
        return reason

    def _emit(self, line: str) -> None:
        self._current.append(line)
        self._state.record_line()


def build_program(
    color_rects: ColorRectangles,
    limits: ResourceLimits,
    flush_target: str,
    display_size: int,
) -> List[InstructionBlock]:
    """Convenience wrapper around :class:`InstructionStreamBuilder`."""
    return InstructionStreamBuilder(limits, flush_target, display_size).build(
        color_rects
    )


def join_program(blocks: List[InstructionBlock]) -> str:
    """Fold blocks into one program blob, blocks separated by a blank line."""
    return "\n\n".join("\n".join(block) for block in blocks)
