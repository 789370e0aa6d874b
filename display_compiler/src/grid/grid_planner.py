"""Near-square display grid planning."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class GridPlan:
    """Columns and rows of displays for one export."""

    columns: int
    rows: int

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @property
    def label(self) -> str:
        return f"{self.columns}x{self.rows} display grid"

    def pixel_size(self, unit_size: int) -> Tuple[int, int]:
        """Total source image size in pixels when every display is ``unit_size`` wide."""
        return self.columns * unit_size, self.rows * unit_size


@dataclass(frozen=True)
class GridCell:
    """One grid position; ``index`` is its row-major position."""

    column: int
    row: int
    index: int


def plan_grid(count: int) -> GridPlan:
    """Compute a near-square grid holding at least ``count`` displays.

    Columns come from the rounded square root, rows from the ceiling of
    ``count / columns``. This can leave whole rows partially unused; the
    assembler skips cells past ``count``.
    """
    if count <= 0:
        return GridPlan(1, 1)

    columns = round(math.sqrt(count))
    if columns == 0:
        columns = 1

    rows = math.ceil(count / columns)
    return GridPlan(columns, rows)


def iter_active_cells(plan: GridPlan, requested_count: int) -> Iterator[GridCell]:
    """Yield cells in row-major order, skipping indices >= ``requested_count``."""
    for row in range(plan.rows):
        for column in range(plan.columns):
            index = row * plan.columns + column
            if index >= requested_count:
                continue
            yield GridCell(column, row, index)
