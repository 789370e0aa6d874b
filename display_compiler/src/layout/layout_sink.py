"""Entity construction behind a small capability interface."""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, Tuple

from .layout_plan import EntityPlacement, LayoutPlan, LogicLink, TilePlacement

Position = Tuple[int, int]


class LayoutSink(Protocol):
    """Receives placed entities; decides what a placed entity actually is."""

    def place_display(self, position: Position) -> None: ...

    def place_processor(
        self, position: Position, program: str, links: Sequence[LogicLink]
    ) -> None: ...

    def finish(self, width: int, height: int, label: str) -> LayoutPlan: ...


class PlanLayoutSink:
    """Collect placements into a :class:`LayoutPlan`.

    Displays and processors are paired in placement order: each processor
    completes the tile opened by the display placed right before it.
    """

    def __init__(self, display_type: str, processor_type: str) -> None:
        self.display_type = display_type
        self.processor_type = processor_type
        self._plan = LayoutPlan()
        self._pending_display: Optional[EntityPlacement] = None
        self._placed: List[TilePlacement] = []

    def place_display(self, position: Position) -> None:
        if self._pending_display is not None:
            raise RuntimeError("Display placed without a processor for the previous one")
        self._pending_display = EntityPlacement(
            entity_id=f"display_{len(self._placed) + 1}",
            block_type=self.display_type,
            position=position,
        )

    def place_processor(
        self, position: Position, program: str, links: Sequence[LogicLink]
    ) -> None:
        if self._pending_display is None:
            raise RuntimeError("Processor placed before its display")
        processor = EntityPlacement(
            entity_id=f"processor_{len(self._placed) + 1}",
            block_type=self.processor_type,
            position=position,
            program=program,
            links=list(links),
        )
        self._placed.append(TilePlacement(self._pending_display, processor))
        self._pending_display = None

    def finish(self, width: int, height: int, label: str) -> LayoutPlan:
        """Hand over the collected plan and start a fresh one."""
        if self._pending_display is not None:
            raise RuntimeError("Display placed without a processor")
        plan = self._plan
        plan.tiles = self._placed
        plan.width = width
        plan.height = height
        plan.label = label

        self._plan = LayoutPlan()
        self._placed = []
        return plan
