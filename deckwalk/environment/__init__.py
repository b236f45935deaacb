"""Environment tier for deckwalk: the grid, its snapshots and pathfinding."""

from .grid import (
    Coordinate,
    DIRECTIONS,
    EnvironmentGrid,
    OccupancyError,
    OutOfBoundsError,
    Tile,
    TileType,
    WALKABLE_TILE_TYPES,
)
from .schemas import (
    EnvironmentGridState,
    OccupantState,
    TileState,
)
from .helpers import (
    NoPathFoundError,
    PathResult,
    PathStatus,
    build_grid,
    find_path,
    manhattan,
    snapshot_grid,
)

__all__ = [
    "Coordinate",
    "DIRECTIONS",
    "EnvironmentGrid",
    "OccupancyError",
    "OutOfBoundsError",
    "Tile",
    "TileType",
    "WALKABLE_TILE_TYPES",
    "EnvironmentGridState",
    "OccupantState",
    "TileState",
    "NoPathFoundError",
    "PathResult",
    "PathStatus",
    "build_grid",
    "find_path",
    "manhattan",
    "snapshot_grid",
]
