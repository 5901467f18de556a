"""
A* pathfinding over a terrain grid with an optional portal edge.

This module implements:
- Elevation-aware movement costs (step length plus absolute height change)
- An octile/Manhattan heuristic that also considers the portal detour
- A binary-heap A* whose scratch state lives in per-search maps, so the
  Grid itself is never written to by a search

The graph is implicit: every traversable cell is a node, grid adjacency
under the chosen connectivity gives the ordinary edges, and a linked
portal pair adds one fixed-cost edge in each direction.
"""

import heapq
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

import structlog

from .exceptions import (
    ConfigurationError,
    SearchCancelled,
    UntraversableEndpointError,
)
from .grid import Connectivity, Grid, Position
from .reconstruct import reconstruct_path
from .terrain import TERRAIN_NAMES, TraversabilityPolicy

logger = structlog.get_logger()

SQRT2 = math.sqrt(2.0)

PortalEdges = Dict[Position, Tuple[Position, ...]]


@dataclass(frozen=True)
class SearchParams:
    """
    Per-call search configuration.

    ``heuristic_scaling`` multiplies only the leg of the portal-detour
    estimate that leads to the portal entry. Values <= 1 keep the heuristic
    admissible; values > 1 bias the search towards the portal and can
    return a path that is not the cheapest one.
    """

    connectivity: Connectivity = Connectivity.EIGHT
    diagonal_cost: float = SQRT2
    terrain_weight: float = 1.0
    heuristic_scaling: float = 1.0
    teleport_cost: float = 1.0
    policy: TraversabilityPolicy = field(default_factory=TraversabilityPolicy)

    def __post_init__(self):
        try:
            object.__setattr__(self, "connectivity", Connectivity(self.connectivity))
        except ValueError:
            raise ConfigurationError(
                f"connectivity must be 4 or 8, got {self.connectivity!r}"
            ) from None
        if not self.diagonal_cost > 0:
            raise ConfigurationError(f"diagonal_cost must be positive, got {self.diagonal_cost}")
        if not self.terrain_weight >= 0:
            raise ConfigurationError(f"terrain_weight must be >= 0, got {self.terrain_weight}")
        if not self.heuristic_scaling > 0:
            raise ConfigurationError(
                f"heuristic_scaling must be positive, got {self.heuristic_scaling}"
            )
        if not self.teleport_cost > 0:
            raise ConfigurationError(f"teleport_cost must be positive, got {self.teleport_cost}")


class SearchStatus(str, Enum):
    FOUND = "found"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class PathResult:
    """Outcome of one search. Falsy when no path exists."""

    status: SearchStatus
    path: Tuple[Position, ...] = ()
    cost: float = math.inf
    explored: FrozenSet[Position] = frozenset()

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND

    def __bool__(self) -> bool:
        return self.found


def grid_distance(a: Tuple[int, int], b: Tuple[int, int],
                  connectivity: Connectivity = Connectivity.EIGHT,
                  diagonal_cost: float = SQRT2) -> float:
    """
    Octile distance for 8-connectivity, Manhattan distance for 4.

    Stays a lower bound for any positive ``diagonal_cost``: a diagonal is
    worth at most two straight steps, and when diagonals are cheaper than
    straight moves the remaining straight run can be zig-zagged.
    """
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    if connectivity == Connectivity.FOUR:
        return float(dx + dy)
    short, long = (dx, dy) if dx < dy else (dy, dx)
    return short * min(diagonal_cost, 2.0) + (long - short) * min(diagonal_cost, 1.0)


def heuristic(position: Tuple[int, int], goal: Tuple[int, int], params: SearchParams,
              portals: Optional[PortalEdges] = None) -> float:
    """
    Lower-bound estimate of the remaining cost from ``position`` to ``goal``.

    The direct grid distance is the baseline. For every portal edge
    entry -> exit the detour estimate is
    ``dist(position, entry) * heuristic_scaling + teleport_cost + dist(exit, goal)``
    and the smallest of all estimates wins. Terrain cost is ignored, which
    keeps the estimate an underestimate of the true cost.
    """
    def dist(a, b):
        return grid_distance(a, b, params.connectivity, params.diagonal_cost)

    best = dist(position, goal)
    if portals:
        for entry, exits in portals.items():
            to_entry = dist(position, entry) * params.heuristic_scaling
            for exit_ in exits:
                best = min(best, to_entry + params.teleport_cost + dist(exit_, goal))
    return best


def movement_cost(grid: Grid, current: Tuple[int, int], neighbour: Tuple[int, int],
                  params: SearchParams) -> float:
    """Cost of one adjacency step: 1 or diagonal_cost, plus weighted height change."""
    straight = current[0] == neighbour[0] or current[1] == neighbour[1]
    base = 1.0 if straight else params.diagonal_cost
    climb = abs(grid.elevation_at(neighbour) - grid.elevation_at(current))
    return base + params.terrain_weight * climb


def path_cost(grid: Grid, path: Sequence[Tuple[int, int]], params: SearchParams) -> float:
    """
    Total cost of walking ``path`` on ``grid``.

    A step between linked portal cells is charged the cheaper of the
    teleport and, when the cells also touch, the ordinary move.

    Raises:
        ConfigurationError: if two consecutive positions are neither
            adjacent nor a portal pair
    """
    total = 0.0
    for current, nxt in zip(path, path[1:]):
        options = []
        if nxt in grid.neighbors(current, params.connectivity):
            options.append(movement_cost(grid, current, nxt, params))
        if grid.portal_partner(current) == tuple(nxt):
            options.append(params.teleport_cost)
        if not options:
            raise ConfigurationError(
                f"{tuple(current)} -> {tuple(nxt)} is not an edge of the grid graph"
            )
        total += min(options)
    return total


class OpenSet:
    """
    Binary-heap frontier ordered by f, then by first discovery.

    A position keeps the insertion order it got when first pushed, so a
    relaxed position still wins ties against positions found after it.
    Superseded entries stay in the heap; callers skip them on pop.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, Position]] = []
        self._order: Dict[Position, int] = {}

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, position: Position, f: float) -> None:
        order = self._order.setdefault(position, len(self._order))
        heapq.heappush(self._heap, (f, order, position))

    def pop(self) -> Position:
        return heapq.heappop(self._heap)[2]


class PathfindingEngine:
    """
    Runs A* searches over one Grid.

    The engine never stores search state between calls: g-scores, parents,
    the heap and the closed set are local to each ``find_path`` call, so
    repeated or interleaved searches on the same grid are independent.
    """

    def __init__(self, grid: Grid, params: Optional[SearchParams] = None):
        """
        Initialize engine.

        Args:
            grid: Grid to search; it must not be regenerated mid-search
            params: Default search parameters for ``find_path``
        """
        self.grid = grid
        self.params = params or SearchParams()

    def _check_endpoint(self, role: str, position: Tuple[int, int],
                        params: SearchParams) -> Position:
        pos = self.grid.check_bounds(position)
        category = self.grid.category_at(pos)
        if not params.policy.is_traversable(category):
            raise UntraversableEndpointError(role, pos, TERRAIN_NAMES[category])
        return pos

    def _edges(self, current: Position, params: SearchParams,
               portals: PortalEdges) -> Iterator[Tuple[Position, float]]:
        for neighbour in self.grid.neighbors(current, params.connectivity):
            yield neighbour, movement_cost(self.grid, current, neighbour, params)
        for dest in portals.get(current, ()):
            yield dest, params.teleport_cost

    def find_path(self, start: Tuple[int, int], end: Tuple[int, int],
                  params: Optional[SearchParams] = None,
                  cancel: Optional[Callable[[], bool]] = None) -> PathResult:
        """
        Find the cheapest path from ``start`` to ``end``.

        Args:
            start: Start position (column, row)
            end: Goal position (column, row)
            params: Overrides the engine's default parameters for this call
            cancel: Optional callback polled once per expansion; returning
                True aborts the search

        Returns:
            PathResult with status FOUND and the start->end path, or status
            EXHAUSTED and an empty path when the goal is unreachable

        Raises:
            OutOfBoundsError: start or end outside the grid
            UntraversableEndpointError: start or end on a blocked cell
            SearchCancelled: ``cancel`` returned True
        """
        params = params or self.params
        start = self._check_endpoint("start", start, params)
        goal = self._check_endpoint("end", end, params)

        grid = self.grid
        walkable = params.policy.mask(grid.categories)
        portals = grid.portal_edges()

        h_cache: Dict[Position, float] = {}

        def estimate(pos: Position) -> float:
            h = h_cache.get(pos)
            if h is None:
                h = h_cache[pos] = heuristic(pos, goal, params, portals)
            return h

        g_score: Dict[Position, float] = {start: 0.0}
        parents: Dict[Position, Optional[Position]] = {start: None}
        closed = set()
        open_set = OpenSet()
        open_set.push(start, estimate(start))

        logger.debug("Path search started", start=tuple(start), end=tuple(goal),
                     connectivity=int(params.connectivity),
                     portals=len(portals) // 2)

        while open_set:
            if cancel is not None and cancel():
                logger.info("Path search cancelled", explored=len(closed))
                raise SearchCancelled(f"search {tuple(start)} -> {tuple(goal)} cancelled")

            current = open_set.pop()
            if current in closed:
                # Superseded by a cheaper entry pushed on relaxation
                continue

            if current == goal:
                closed.add(current)
                path = reconstruct_path(parents, current)
                cost = g_score[current]
                logger.debug("Path found", length=len(path), cost=cost, explored=len(closed))
                return PathResult(SearchStatus.FOUND, tuple(path), cost, frozenset(closed))

            closed.add(current)
            current_g = g_score[current]

            for neighbour, step in self._edges(current, params, portals):
                if neighbour in closed or not walkable[neighbour.y, neighbour.x]:
                    continue

                tentative = current_g + step
                if tentative < g_score.get(neighbour, math.inf):
                    g_score[neighbour] = tentative
                    parents[neighbour] = current
                    open_set.push(neighbour, tentative + estimate(neighbour))

        logger.debug("Path search exhausted", start=tuple(start), end=tuple(goal),
                     explored=len(closed))
        return PathResult(SearchStatus.EXHAUSTED, explored=frozenset(closed))


def find_path(grid: Grid, start: Tuple[int, int], end: Tuple[int, int],
              params: Optional[SearchParams] = None,
              cancel: Optional[Callable[[], bool]] = None) -> PathResult:
    """Convenience wrapper: one search with a throwaway engine."""
    return PathfindingEngine(grid, params).find_path(start, end, cancel=cancel)
