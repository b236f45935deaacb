"""Pydantic schemas for the deck grid.

These models mirror the dataclasses in ``grid.py`` but keep grid snapshots
serializable, so a UI or scenario file can describe a deck without touching
the live arena.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from pydantic import BaseModel, Field

from .grid import TileType


class TileState(BaseModel):
    """Encodes a single painted tile."""

    tile_type: TileType = TileType.LAND


class OccupantState(BaseModel):
    """An occupant standing on the grid (an agent or a static obstacle).

    Every occupant blocks its tile; nothing else may enter it.
    """

    occupant_id: str
    position: List[int] = Field(
        ...,
        description="[x, y] coordinate of the occupied tile",
        min_length=2,
        max_length=2,
    )


class EnvironmentGridState(BaseModel):
    """Sparse representation of the deck: only non-land tiles are listed."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    tiles: Dict[Tuple[int, int], TileState] = Field(
        default_factory=dict,
        description="Sparse map: (x, y) → painted tile",
    )
    occupants: List[OccupantState] = Field(default_factory=list)
