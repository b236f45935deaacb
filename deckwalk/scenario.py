"""
Scenario loading for JSON-defined decks.

A scenario describes the starting layout of a deck:
- Grid size and painted tiles (walls)
- Optional static obstacles that block traversal (crates, seated customers)
- Agents and where they start

Scenario file structure:
```json
{
  "name": "Cargo Hold",
  "description": "...",
  "grid": {
    "width": 8,
    "height": 5,
    "rows": [
      "........",
      "..##....",
      "........"
    ],
    "walls": [[5, 4]],
    "tiles": {"6,4": "wall"}
  },
  "obstacles": [{"occupant_id": "crate-1", "position": [7, 0]}],
  "agents": [{"agent_id": "deckhand", "position": [0, 0], "step_delay": 0.2}]
}
```

``rows``, ``walls`` and ``tiles`` may be combined; ``rows`` uses ``.`` for
land and ``#`` for wall. When ``grid`` is omitted the deck is an all-land
grid of the configured default size.

Usage:
    loader = ScenarioLoader()
    grid, agents = loader.load("cargo_hold")
    orchestrator = build_orchestrator(grid, agents)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .config import Config
from .environment import (
    EnvironmentGrid,
    EnvironmentGridState,
    OccupantState,
    TileState,
    TileType,
    build_grid,
)
from .orchestrator import Orchestrator

_ROW_SYMBOLS: Dict[str, TileType] = {
    ".": TileType.LAND,
    "#": TileType.WALL,
}


class AgentSpec(BaseModel):
    """Starting definition for one agent in a scenario."""

    agent_id: str
    position: List[int] = Field(..., min_length=2, max_length=2, description="[x, y] start tile")
    step_delay: Optional[float] = Field(
        None, ge=0, description="Seconds per step; None uses the orchestrator default"
    )


class ScenarioLoader:
    """Load and validate deck scenarios from JSON files.

    Directory structure:
    - Default: Config.SCENARIOS_DIR ({PROJECT_ROOT}/examples/scenarios)
    - Override via constructor: ScenarioLoader(Path("/custom/scenarios"))
    - Scenario files: {scenario_name}.json (e.g., "cargo_hold.json")

    Validation:
    - Required fields: name, description, agents
    - At least one agent required
    - Raises ValueError if validation fails
    """

    def __init__(self, scenarios_dir: Optional[Path] = None):
        self.scenarios_dir = scenarios_dir or Config.SCENARIOS_DIR

    def load(self, scenario_name: str) -> Tuple[EnvironmentGrid, List[AgentSpec]]:
        """Load a scenario by name.

        Args:
            scenario_name: Name of scenario (without .json extension)

        Returns:
            Tuple of (grid with walls and obstacles in place, agent specs)

        Raises:
            FileNotFoundError: If scenario file doesn't exist in scenarios_dir
            ValueError: If scenario JSON is missing required fields or malformed
            OutOfBoundsError: If a wall or obstacle lies outside the grid
            json.JSONDecodeError: If file contains invalid JSON
        """
        scenario_path = self.scenarios_dir / f"{scenario_name}.json"

        if not scenario_path.exists():
            raise FileNotFoundError(
                f"Scenario '{scenario_name}' not found at {scenario_path}"
            )

        data = json.loads(scenario_path.read_text())
        return self.parse(data)

    def parse(self, data: Dict[str, Any]) -> Tuple[EnvironmentGrid, List[AgentSpec]]:
        """Build a grid and agent specs from already-decoded scenario data."""
        self._validate_scenario(data)

        grid_state = self._parse_grid(data.get("grid", {}))
        grid_state.occupants = [self._parse_obstacle(item) for item in data.get("obstacles", [])]
        grid = build_grid(grid_state)

        agents = [AgentSpec(**entry) for entry in data["agents"]]
        for spec in agents:
            x, y = spec.position
            if not grid.in_bounds(x, y):
                raise ValueError(
                    f"Agent '{spec.agent_id}' starts at ({x}, {y}), outside the "
                    f"{grid.width}x{grid.height} grid"
                )
        return grid, agents

    def _validate_scenario(self, data: Dict) -> None:
        required = ["name", "description", "agents"]
        missing = [field for field in required if field not in data]

        if missing:
            raise ValueError(f"Scenario missing required fields: {missing}")

        if not data["agents"]:
            raise ValueError("Scenario must have at least one agent")

        ids = [agent.get("agent_id") for agent in data["agents"]]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Scenario agent ids must be unique: {ids}")

    def _parse_grid(self, data: Dict[str, Any]) -> EnvironmentGridState:
        rows = data.get("rows") or []
        width = int(data.get("width", len(rows[0]) if rows else Config.GRID_WIDTH))
        height = int(data.get("height", len(rows) if rows else Config.GRID_HEIGHT))
        tiles: Dict[Tuple[int, int], TileState] = {}

        if len(rows) > height:
            raise ValueError(f"Grid has {len(rows)} rows but height is {height}")
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
            for x, symbol in enumerate(row):
                if symbol not in _ROW_SYMBOLS:
                    raise ValueError(f"Unknown tile symbol {symbol!r} at ({x}, {y})")
                if _ROW_SYMBOLS[symbol] is not TileType.LAND:
                    tiles[(x, y)] = TileState(tile_type=_ROW_SYMBOLS[symbol])

        for raw in data.get("walls", []):
            x, y = int(raw[0]), int(raw[1])
            tiles[(x, y)] = TileState(tile_type=TileType.WALL)

        for key, value in data.get("tiles", {}).items():
            x_str, y_str = key.split(",", 1)
            tile_type = value.get("tile_type", "land") if isinstance(value, dict) else value
            tiles[(int(x_str), int(y_str))] = TileState(tile_type=TileType(tile_type))

        return EnvironmentGridState(width=width, height=height, tiles=tiles)

    def _parse_obstacle(self, data: Dict[str, Any]) -> OccupantState:
        unknown = sorted(set(data) - {"occupant_id", "position"})
        if unknown:
            raise ValueError(f"Obstacle {data.get('occupant_id')!r} has unknown fields: {unknown}")
        return OccupantState(
            occupant_id=data["occupant_id"],
            position=[int(v) for v in data["position"]],
        )

    def list_scenarios(self) -> List[str]:
        """List all available scenario files (names without .json)."""
        if not self.scenarios_dir.exists():
            return []

        return sorted(
            f.stem for f in self.scenarios_dir.glob("*.json")
            if not f.name.startswith("_")
        )

    def get_scenario_info(self, scenario_name: str) -> Dict[str, Any]:
        """Get scenario metadata without building the grid."""
        scenario_path = self.scenarios_dir / f"{scenario_name}.json"
        data = json.loads(scenario_path.read_text())
        grid = data.get("grid", {})

        return {
            "name": data.get("name", scenario_name),
            "description": data.get("description", "No description"),
            "num_agents": len(data.get("agents", [])),
            "size": f"{grid.get('width', Config.GRID_WIDTH)}x{grid.get('height', Config.GRID_HEIGHT)}",
        }


def build_orchestrator(
    grid: EnvironmentGrid,
    agents: List[AgentSpec],
    **kwargs: Any,
) -> Orchestrator:
    """Create an orchestrator for ``grid`` with every agent placed."""
    orchestrator = Orchestrator(grid, **kwargs)
    for spec in agents:
        x, y = spec.position
        orchestrator.add_agent(spec.agent_id, x, y, step_delay=spec.step_delay)
    return orchestrator


def load_scenario(scenario_name: str) -> Tuple[EnvironmentGrid, List[AgentSpec]]:
    """Convenience function to load a scenario from the default directory."""
    loader = ScenarioLoader()
    return loader.load(scenario_name)
