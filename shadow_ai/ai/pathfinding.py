"""A* pathfinding over a quantized navigation grid.

The obstacle field is rasterized into a uniform grid of ``cell_size``
pixel cells.  A cell is blocked when it lies within one safety margin of
any wall, so an agent whose top-left sits on a walkable cell center does
not clip the wall it is walking past.

Usage:
    pf = Pathfinder(field, config)
    path = pf.find_path(start, goal)     # list[Vector2], [] when no route
"""

from __future__ import annotations

import heapq
import logging
import math
from typing import TYPE_CHECKING, Callable

from shadow_ai.core.models import Vector2

if TYPE_CHECKING:
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.obstacles import ObstacleField

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Step costs (fixed-point: diagonal ~ 10 * sqrt(2))
# ---------------------------------------------------------------------------

ORTHOGONAL_COST = 10
DIAGONAL_COST = 14
# Manhattan distance scaled so one step never lowers h by more than it costs
HEURISTIC_SCALE = ORTHOGONAL_COST // 2

# 8-connected neighborhood, orthogonal first
_DIRS: tuple[tuple[int, int, int], ...] = (
    (-1, 0, ORTHOGONAL_COST), (1, 0, ORTHOGONAL_COST),
    (0, -1, ORTHOGONAL_COST), (0, 1, ORTHOGONAL_COST),
    (-1, -1, DIAGONAL_COST), (1, -1, DIAGONAL_COST),
    (-1, 1, DIAGONAL_COST), (1, 1, DIAGONAL_COST),
)

# Rings searched around a blocked start cell
_START_RELOCATE_RINGS = 2


# ---------------------------------------------------------------------------
# Navigation grid
# ---------------------------------------------------------------------------

class NavGrid:
    """Walkability grid derived from an obstacle field."""

    __slots__ = ("cell_size", "cols", "rows", "_blocked")

    def __init__(self, cell_size: int, cols: int, rows: int) -> None:
        self.cell_size = cell_size
        self.cols = cols
        self.rows = rows
        self._blocked: list[bool] = [False] * (cols * rows)

    @classmethod
    def build(cls, field: ObstacleField, cell_size: int = 15, margin_cells: int = 1) -> NavGrid:
        if cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        c = cell_size
        grid = cls(c, math.ceil(field.width / c), math.ceil(field.height / c))
        pad = margin_cells * c
        for o in field:
            x0 = max(math.floor((o.x - pad) / c), 0)
            y0 = max(math.floor((o.y - pad) / c), 0)
            x1 = min(math.ceil((o.x + o.width + pad) / c), grid.cols)
            y1 = min(math.ceil((o.y + o.height + pad) / c), grid.rows)
            for cy in range(y0, y1):
                row = cy * grid.cols
                for cx in range(x0, x1):
                    grid._blocked[row + cx] = True
        return grid

    # -- access --

    def in_bounds(self, cx: int, cy: int) -> bool:
        return 0 <= cx < self.cols and 0 <= cy < self.rows

    def is_walkable(self, cx: int, cy: int) -> bool:
        if not (0 <= cx < self.cols and 0 <= cy < self.rows):
            return False
        return not self._blocked[cy * self.cols + cx]

    def cell_of(self, x: float, y: float) -> tuple[int, int]:
        return math.floor(x / self.cell_size), math.floor(y / self.cell_size)

    def center_of(self, cx: int, cy: int) -> Vector2:
        half = self.cell_size / 2
        return Vector2(cx * self.cell_size + half, cy * self.cell_size + half)

    def walkable_count(self) -> int:
        return sum(1 for b in self._blocked if not b)

    def nearest_walkable(
        self,
        x: float,
        y: float,
        rings: int,
        reachable: Callable[[Vector2], bool] | None = None,
    ) -> tuple[int, int] | None:
        """Walkable cell within *rings* of the cell holding (x, y).

        Candidates are ranked by distance from (x, y) to their center, ties
        broken row-major.  With *reachable*, the closest accepted candidate
        beats closer rejected ones; the closest overall is the last resort.
        """
        cx, cy = self.cell_of(x, y)
        if self.is_walkable(cx, cy):
            return cx, cy
        ranked: list[tuple[float, int, int, int, int]] = []
        for dy in range(-rings, rings + 1):
            for dx in range(-rings, rings + 1):
                nx, ny = cx + dx, cy + dy
                if (dx or dy) and self.is_walkable(nx, ny):
                    c = self.center_of(nx, ny)
                    ranked.append(((c.x - x) ** 2 + (c.y - y) ** 2, dy, dx, nx, ny))
        if not ranked:
            return None
        ranked.sort()
        if reachable is not None:
            for *_, nx, ny in ranked:
                if reachable(self.center_of(nx, ny)):
                    return nx, ny
        *_, nx, ny = ranked[0]
        return nx, ny


# ---------------------------------------------------------------------------
# A* Pathfinder
# ---------------------------------------------------------------------------

class Pathfinder:
    """A* pathfinder over the navigation grid of one obstacle field.

    Stateless between calls: the grid is derived once from the immutable
    field and every query allocates its own open/closed sets.
    Performance-bounded: gives up once the open set exceeds ``max_open``.
    """

    __slots__ = ("_field", "_grid", "_max_open")

    def __init__(self, field: ObstacleField, config: SimulationConfig) -> None:
        self._field = field
        self._grid = NavGrid.build(field, config.cell_size, config.margin_cells)
        self._max_open = config.max_open_nodes

    @property
    def grid(self) -> NavGrid:
        return self._grid

    def find_path(self, start: Vector2, goal: Vector2) -> list[Vector2]:
        """Compute a route of cell centers from *start* to *goal* (inclusive).

        Returns ``[]`` when the goal is outside the grid or blocked, when
        the start has no walkable cell nearby, or when the open set
        outgrows its budget.
        """
        grid = self._grid
        sx, sy = grid.cell_of(start.x, start.y)
        gx, gy = grid.cell_of(goal.x, goal.y)
        if not grid.in_bounds(sx, sy) or not grid.in_bounds(gx, gy):
            return []
        if not grid.is_walkable(gx, gy):
            return []

        relocated = grid.nearest_walkable(
            start.x, start.y, _START_RELOCATE_RINGS,
            reachable=lambda c: self._field.segment_clear(start.x, start.y, c.x, c.y),
        )
        if relocated is None:
            return []
        sx, sy = relocated

        cells = self._search(sx, sy, gx, gy)
        return [grid.center_of(cx, cy) for cx, cy in cells]

    def _search(self, sx: int, sy: int, gx: int, gy: int) -> list[tuple[int, int]]:
        grid = self._grid
        max_open = self._max_open

        # A* open heap: (f_score, counter, x, y); counter keeps FIFO order on ties
        counter = 0
        open_heap: list[tuple[int, int, int, int]] = []
        heapq.heappush(open_heap, (self._h(sx, sy, gx, gy), counter, sx, sy))
        open_set: set[tuple[int, int]] = {(sx, sy)}

        g_score: dict[tuple[int, int], int] = {(sx, sy): 0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()

        while open_heap:
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)
            if ckey in closed:
                continue
            open_set.discard(ckey)

            if cx == gx and cy == gy:
                return self._reconstruct(came_from, ckey)

            closed.add(ckey)
            current_g = g_score[ckey]

            for dx, dy, step_cost in _DIRS:
                nx, ny = cx + dx, cy + dy
                nkey = (nx, ny)
                if nkey in closed or not grid.is_walkable(nx, ny):
                    continue

                tentative_g = current_g + step_cost
                if tentative_g < g_score.get(nkey, 1 << 30):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    counter += 1
                    heapq.heappush(open_heap, (tentative_g + self._h(nx, ny, gx, gy), counter, nx, ny))
                    open_set.add(nkey)

            if len(open_set) > max_open:
                logger.debug("A* open set exceeded %d nodes, aborting", max_open)
                break

        return []

    @staticmethod
    def _h(x: int, y: int, gx: int, gy: int) -> int:
        return (abs(x - gx) + abs(y - gy)) * HEURISTIC_SCALE

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[tuple[int, int]]:
        """Walk back through came_from to build the path, start included."""
        path: list[tuple[int, int]] = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path
