"""Spatial grid for the deck.

The grid is an arena: it owns every tile by coordinate and keeps an index of
which occupant stands where. Occupants are referenced by id only, so agents
never hold pointers to tiles and tiles never hold pointers to agents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

Coordinate = Tuple[int, int]

# Fixed exploration order (up, right, down, left). ``up`` decreases y, matching
# row-major screen layout where row 0 is drawn first.
DIRECTIONS: Tuple[Coordinate, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


class TileType(str, Enum):
    """Kinds of tile that can be painted onto the deck."""

    LAND = "land"
    WALL = "wall"


# Tile types an occupant may stand on. Extend alongside TileType.
WALKABLE_TILE_TYPES = frozenset({TileType.LAND})


class OutOfBoundsError(IndexError):
    """Raised when a coordinate falls outside the grid."""

    def __init__(self, *, x: int, y: int, width: int, height: int) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        super().__init__(
            f"Coordinate ({x}, {y}) is outside the {width}x{height} grid "
            f"(valid x: 0..{width - 1}, y: 0..{height - 1})"
        )


class OccupancyError(ValueError):
    """Raised when placing, moving or painting would break occupancy rules."""

    def __init__(self, *, x: int, y: int, reason: str, occupant_id: Optional[str] = None) -> None:
        self.x = x
        self.y = y
        self.reason = reason
        self.occupant_id = occupant_id
        who = f"'{occupant_id}' " if occupant_id else ""
        super().__init__(f"Cannot put {who}on ({x}, {y}): {reason}")


@dataclass
class Tile:
    """A single cell of the deck."""

    x: int
    y: int
    tile_type: TileType = TileType.LAND

    @property
    def coordinate(self) -> Coordinate:
        return (self.x, self.y)


@dataclass
class EnvironmentGrid:
    """Dense 2D grid of typed tiles with an occupancy index.

    ``tiles`` may be passed sparsely; every missing coordinate is filled with a
    LAND tile so that each in-bounds coordinate maps to exactly one Tile.
    """

    width: int
    height: int
    tiles: Dict[Coordinate, Tile] = field(default_factory=dict)
    _occupants: Dict[Coordinate, str] = field(default_factory=dict, init=False, repr=False)
    _positions: Dict[str, Coordinate] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive (got {self.width}x{self.height})")

        for coord, tile in self.tiles.items():
            self._check_bounds(*coord)
            if tile.coordinate != coord:
                raise ValueError(f"Tile at {tile.coordinate} registered under key {coord}")

        for y in range(self.height):
            for x in range(self.width):
                self.tiles.setdefault((x, y), Tile(x=x, y=y))

    # ------------------------------------------------------------------
    # Spatial queries
    # ------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x=x, y=y, width=self.width, height=self.height)

    def tile_at(self, x: int, y: int) -> Tile:
        """Return the tile at ``(x, y)`` or raise ``OutOfBoundsError``."""
        self._check_bounds(x, y)
        return self.tiles[(x, y)]

    def is_walkable(self, x: int, y: int, *, ignore: Optional[str] = None) -> bool:
        """Return True when the tile permits traversal.

        A tile is walkable if its type is walkable and no occupant other than
        ``ignore`` stands on it. This is the same rule ``move_occupant``
        enforces, so a planned step can always be committed.
        """
        return self._refusal(ignore, x, y) is None

    def neighbors(self, x: int, y: int) -> Iterator[Coordinate]:
        """Yield in-bounds 4-neighbours in up, right, down, left order."""
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    # ------------------------------------------------------------------
    # Tile painting
    # ------------------------------------------------------------------

    def set_tile_type(self, x: int, y: int, tile_type: TileType) -> Tile:
        """Change a tile's type. Used by external painting tools."""
        tile = self.tile_at(x, y)
        occupant = self._occupants.get((x, y))
        if occupant is not None and tile_type not in WALKABLE_TILE_TYPES:
            raise OccupancyError(
                x=x, y=y, occupant_id=occupant,
                reason=f"tile is occupied and cannot become {tile_type.value}",
            )
        tile.tile_type = tile_type
        return tile

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def occupant_at(self, x: int, y: int) -> Optional[str]:
        self._check_bounds(x, y)
        return self._occupants.get((x, y))

    def position_of(self, occupant_id: str) -> Optional[Coordinate]:
        return self._positions.get(occupant_id)

    def occupants(self) -> Dict[str, Coordinate]:
        """Return a copy of the occupant -> coordinate index."""
        return dict(self._positions)

    def _refusal(self, occupant_id: Optional[str], x: int, y: int) -> Optional[str]:
        """Why ``occupant_id`` may not stand on ``(x, y)``, or None if it may."""
        tile = self.tile_at(x, y)
        if tile.tile_type not in WALKABLE_TILE_TYPES:
            return f"tile is {tile.tile_type.value}"
        holder = self._occupants.get((x, y))
        if holder is not None and holder != occupant_id:
            return f"already occupied by '{holder}'"
        return None

    def _check_enterable(self, occupant_id: str, x: int, y: int) -> None:
        reason = self._refusal(occupant_id, x, y)
        if reason is not None:
            raise OccupancyError(x=x, y=y, occupant_id=occupant_id, reason=reason)

    def place_occupant(self, occupant_id: str, x: int, y: int) -> None:
        """Put a new occupant on the grid."""
        if occupant_id in self._positions:
            raise OccupancyError(
                x=x, y=y, occupant_id=occupant_id,
                reason=f"occupant already placed at {self._positions[occupant_id]}",
            )
        self._check_enterable(occupant_id, x, y)
        self._occupants[(x, y)] = occupant_id
        self._positions[occupant_id] = (x, y)

    def move_occupant(self, occupant_id: str, x: int, y: int) -> Coordinate:
        """Move an occupant to ``(x, y)`` and return its previous coordinate.

        Check and commit happen together with no suspension point in between,
        so two schedulers on one event loop can never claim the same tile.
        """
        previous = self._positions.get(occupant_id)
        if previous is None:
            raise KeyError(f"Occupant '{occupant_id}' is not on the grid")
        self._check_enterable(occupant_id, x, y)
        del self._occupants[previous]
        self._occupants[(x, y)] = occupant_id
        self._positions[occupant_id] = (x, y)
        return previous

    def remove_occupant(self, occupant_id: str) -> Optional[Coordinate]:
        """Take an occupant off the grid. Safe to call for unknown ids."""
        position = self._positions.pop(occupant_id, None)
        if position is not None:
            self._occupants.pop(position, None)
        return position

    # ------------------------------------------------------------------
    # Debug helpers
    # ------------------------------------------------------------------

    def walls(self) -> List[Coordinate]:
        return [c for c, t in self.tiles.items() if t.tile_type is TileType.WALL]

    def render_rows(self, marks: Optional[Dict[Coordinate, str]] = None) -> List[str]:
        """Return one string per row: ``.`` land, ``#`` wall, ``@`` occupant.

        ``marks`` overrides individual cells (e.g. queued destinations).
        """
        marks = marks or {}
        rows: List[str] = []
        for y in range(self.height):
            chars: List[str] = []
            for x in range(self.width):
                if (x, y) in marks:
                    chars.append(marks[(x, y)][:1])
                elif (x, y) in self._occupants:
                    chars.append("@")
                elif self.tiles[(x, y)].tile_type is TileType.WALL:
                    chars.append("#")
                else:
                    chars.append(".")
            rows.append("".join(chars))
        return rows
