"""
deckwalk - movement scheduling for agents on a tiled deck.

Queue destinations for an agent, let priority requests cut in, and watch it
walk shortest paths step by step on an asyncio event loop.

No rendering. No persistence. No global state.
The grid and listeners are injected by the caller.
"""

__version__ = "0.1.0"

# Main entry point
from .orchestrator import Orchestrator

# Movement core
from .agent import Agent, MoveQueue, NotPlacedError
from .scheduler import ConcurrentLoopError, MovementListener, MovementScheduler
from .commands import Activate, Command, PriorityActivate, Stop, parse_command
from .environment import (
    Coordinate,
    EnvironmentGrid,
    EnvironmentGridState,
    NoPathFoundError,
    OccupancyError,
    OccupantState,
    OutOfBoundsError,
    PathResult,
    PathStatus,
    Tile,
    TileState,
    TileType,
    build_grid,
    find_path,
    manhattan,
    snapshot_grid,
)

# Notifications and snapshots
from .schemas import (
    AgentStatus,
    DestinationUnreachable,
    MovementEvent,
    MovementInterrupted,
    PositionChanged,
    QueueChanged,
)

# Scenario loader helpers
from .scenario import AgentSpec, ScenarioLoader, build_orchestrator, load_scenario

__all__ = [
    # Main class
    "Orchestrator",
    # Movement core
    "Agent",
    "MoveQueue",
    "MovementScheduler",
    "MovementListener",
    # Commands
    "Command",
    "Activate",
    "PriorityActivate",
    "Stop",
    "parse_command",
    # Environment
    "Coordinate",
    "EnvironmentGrid",
    "EnvironmentGridState",
    "OccupantState",
    "Tile",
    "TileState",
    "TileType",
    "PathResult",
    "PathStatus",
    "build_grid",
    "find_path",
    "manhattan",
    "snapshot_grid",
    # Errors
    "OutOfBoundsError",
    "OccupancyError",
    "NotPlacedError",
    "NoPathFoundError",
    "ConcurrentLoopError",
    # Events and snapshots
    "MovementEvent",
    "PositionChanged",
    "QueueChanged",
    "DestinationUnreachable",
    "MovementInterrupted",
    "AgentStatus",
    # Scenario helpers
    "AgentSpec",
    "ScenarioLoader",
    "build_orchestrator",
    "load_scenario",
]
