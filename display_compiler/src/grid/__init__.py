"""Display grid planning."""

from .grid_planner import GridCell, GridPlan, iter_active_cells, plan_grid

__all__ = ["GridPlan", "GridCell", "plan_grid", "iter_active_cells"]
