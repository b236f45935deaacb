"""Pathfinding and snapshot utilities for the deck grid."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, List, Optional

from .grid import Coordinate, EnvironmentGrid, Tile, TileType
from .schemas import EnvironmentGridState, OccupantState, TileState


class PathStatus(str, Enum):
    """Outcome of a path search."""

    FOUND = "found"                            # goal itself reached
    APPROACH = "approach"                      # goal blocked, stopped on an adjacent tile
    NEAREST = "nearest"                        # goal cut off, closest reachable tile instead
    ALREADY_AT_TARGET = "already_at_target"    # nothing to walk
    NOT_FOUND = "not_found"


class NoPathFoundError(LookupError):
    """Raised when a destination cannot be reached or approached."""

    def __init__(self, *, start: Coordinate, goal: Coordinate) -> None:
        self.start = start
        self.goal = goal
        super().__init__(f"No path from {start} to {goal} or any tile next to it")


@dataclass(frozen=True)
class PathResult:
    """Result of ``find_path``.

    ``path`` runs from the start (inclusive) to the tile the agent will end on
    (inclusive). It is empty only when ``status`` is ``NOT_FOUND``.
    """

    status: PathStatus
    start: Coordinate
    goal: Coordinate
    path: List[Coordinate] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """True when there is something to walk."""
        return self.status in (PathStatus.FOUND, PathStatus.APPROACH, PathStatus.NEAREST)

    @property
    def end(self) -> Optional[Coordinate]:
        return self.path[-1] if self.path else None

    @property
    def steps(self) -> int:
        return max(len(self.path) - 1, 0)

    def unwrap(self) -> List[Coordinate]:
        """Return the path, raising ``NoPathFoundError`` when there is none."""
        if self.status is PathStatus.NOT_FOUND:
            raise NoPathFoundError(start=self.start, goal=self.goal)
        return list(self.path)


def manhattan(a: Coordinate, b: Coordinate) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _rebuild(came_from: Dict[Coordinate, Optional[Coordinate]], end: Coordinate) -> List[Coordinate]:
    path = [end]
    step = came_from[end]
    while step is not None:
        path.append(step)
        step = came_from[step]
    path.reverse()
    return path


def find_path(
    grid: EnvironmentGrid,
    start: Coordinate,
    goal: Coordinate,
    *,
    occupant_id: Optional[str] = None,
    nearest_fallback: bool = False,
) -> PathResult:
    """Breadth-first shortest path from ``start`` to ``goal`` on the grid.

    Neighbours are explored up, right, down, left, so equal-length paths are
    broken the same way every time. Only tiles walkable for ``occupant_id``
    are entered (the occupant's own tile never blocks it).

    When ``goal`` cannot be entered (a wall, another occupant) the search
    stops on the first reachable tile next to it and reports ``APPROACH``.
    When nothing next to the goal is reachable and ``nearest_fallback`` is
    set, the reachable tile with the smallest Manhattan distance to the goal
    is used instead (``NEAREST``), provided it is closer than the start.
    The fallback is off by default: with it off, a goal sealed off from the
    start is reported as ``NOT_FOUND`` rather than walked toward.

    Raises:
        OutOfBoundsError: if ``start`` or ``goal`` lies outside the grid.
    """
    grid.tile_at(*start)
    grid.tile_at(*goal)

    if start == goal:
        return PathResult(PathStatus.ALREADY_AT_TARGET, start, goal, [start])

    goal_enterable = grid.is_walkable(*goal, ignore=occupant_id)
    # Tiles that end the search: the goal itself, or any tile beside it.
    targets = {goal} if goal_enterable else set(grid.neighbors(*goal))
    if not goal_enterable and start in targets:
        return PathResult(PathStatus.ALREADY_AT_TARGET, start, goal, [start])

    came_from: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    queue: Deque[Coordinate] = deque([start])
    best, best_distance = start, manhattan(start, goal)

    while queue:
        current = queue.popleft()
        for nb in grid.neighbors(*current):
            if nb in came_from or not grid.is_walkable(*nb, ignore=occupant_id):
                continue
            came_from[nb] = current
            if nb in targets:
                status = PathStatus.FOUND if goal_enterable else PathStatus.APPROACH
                return PathResult(status, start, goal, _rebuild(came_from, nb))
            distance = manhattan(nb, goal)
            if distance < best_distance:
                best, best_distance = nb, distance
            queue.append(nb)

    if nearest_fallback and best != start:
        return PathResult(PathStatus.NEAREST, start, goal, _rebuild(came_from, best))
    return PathResult(PathStatus.NOT_FOUND, start, goal)


def snapshot_grid(grid: EnvironmentGrid) -> EnvironmentGridState:
    """Capture the grid's painted tiles and occupants as a pydantic snapshot."""
    tiles = {
        coord: TileState(tile_type=tile.tile_type)
        for coord, tile in grid.tiles.items()
        if tile.tile_type is not TileType.LAND
    }
    occupants = [
        OccupantState(
            occupant_id=occupant_id,
            position=[x, y],
        )
        for occupant_id, (x, y) in sorted(grid.occupants().items())
    ]
    return EnvironmentGridState(width=grid.width, height=grid.height, tiles=tiles, occupants=occupants)


def build_grid(state: EnvironmentGridState) -> EnvironmentGrid:
    """Create a live grid from a snapshot, placing every listed occupant."""
    tiles = {
        (x, y): Tile(x=x, y=y, tile_type=tile.tile_type)
        for (x, y), tile in state.tiles.items()
    }
    grid = EnvironmentGrid(width=state.width, height=state.height, tiles=tiles)
    for occupant in state.occupants:
        x, y = occupant.position
        grid.place_occupant(occupant.occupant_id, x, y)
    return grid
