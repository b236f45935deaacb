"""
Deck orchestrator: the API the UI layer talks to.

Fully decoupled from rendering and input handling.
The grid and listeners are injected by the caller.

Responsibilities:
1. Own one MovementScheduler per agent (all sharing one grid)
2. Route enqueue / priority / stop requests by agent id
3. Answer position, queue and moving queries
4. Fan every movement event out to the registered listeners

All mutating calls must be made from code running on the asyncio event loop
(UI callbacks, coroutines); the schedulers start their processing tasks there.
"""

import asyncio
from typing import Dict, List, Optional, Sequence

from .agent import Agent, NotPlacedError
from .commands import Activate, Command, PriorityActivate, Stop
from .config import Config
from .environment import Coordinate, EnvironmentGrid, EnvironmentGridState, snapshot_grid
from .logging_utils import log_info
from .scheduler import MovementListener, MovementScheduler
from .schemas import AgentStatus


class Orchestrator:
    """
    Core-facing API for a deck with one or more agents.

    Every agent gets its own scheduler; they share the grid, so occupancy is
    checked and claimed inside a single step on the one event loop.
    """

    def __init__(
        self,
        grid: EnvironmentGrid,
        *,
        listeners: Optional[Sequence[MovementListener]] = None,
        nearest_fallback: Optional[bool] = None,
        step_delay: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            grid: The deck every agent walks on
            listeners: Optional callables invoked with every MovementEvent.
                A listener that raises is reported and skipped.
            nearest_fallback: Walk toward the closest reachable tile when a
                destination is cut off (defaults to Config.NEAREST_FALLBACK)
            step_delay: Default seconds per step for agents added without
                their own delay (defaults to Config.STEP_DELAY)
        """
        self.grid = grid
        # One list shared with every scheduler, so add_listener reaches all agents.
        self.listeners: List[MovementListener] = list(listeners or [])
        self.nearest_fallback = Config.NEAREST_FALLBACK if nearest_fallback is None else nearest_fallback
        self.step_delay = Config.STEP_DELAY if step_delay is None else step_delay
        self.schedulers: Dict[str, MovementScheduler] = {}

    @classmethod
    def with_default_grid(cls, **kwargs) -> "Orchestrator":
        """Build an orchestrator on an all-land deck of the configured size."""
        grid = EnvironmentGrid(width=Config.GRID_WIDTH, height=Config.GRID_HEIGHT)
        return cls(grid, **kwargs)

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def register_agent(self, agent_id: str, *, step_delay: Optional[float] = None) -> MovementScheduler:
        """Create an agent that is not yet on the grid."""
        if agent_id in self.schedulers:
            raise ValueError(f"Agent '{agent_id}' is already registered")
        agent = Agent(
            agent_id=agent_id,
            grid=self.grid,
            step_delay=self.step_delay if step_delay is None else step_delay,
        )
        scheduler = MovementScheduler(
            agent,
            listeners=self.listeners,
            nearest_fallback=self.nearest_fallback,
        )
        self.schedulers[agent_id] = scheduler
        return scheduler

    def place_agent(self, agent_id: str, x: int, y: int) -> None:
        """Put a registered agent on the grid.

        Raises:
            OutOfBoundsError: coordinate outside the grid
            OccupancyError: tile is a wall, is taken, or the agent is already placed
        """
        self._scheduler(agent_id).place(x, y)

    def add_agent(self, agent_id: str, x: int, y: int, *, step_delay: Optional[float] = None) -> MovementScheduler:
        """Register an agent and place it at ``(x, y)`` in one call."""
        scheduler = self.register_agent(agent_id, step_delay=step_delay)
        try:
            scheduler.place(x, y)
        except Exception:
            del self.schedulers[agent_id]
            raise
        log_info(f"Agent '{agent_id}' placed at ({x}, {y})")
        return scheduler

    def remove_agent(self, agent_id: str) -> None:
        """Stop the agent, free its tile and forget it."""
        scheduler = self._scheduler(agent_id)
        scheduler.remove()
        del self.schedulers[agent_id]

    def agent_ids(self) -> List[str]:
        return list(self.schedulers)

    def _scheduler(self, agent_id: str) -> MovementScheduler:
        scheduler = self.schedulers.get(agent_id)
        if scheduler is None:
            raise NotPlacedError(agent_id=agent_id, reason="no such agent on this deck")
        return scheduler

    # ------------------------------------------------------------------
    # Movement requests
    # ------------------------------------------------------------------

    def enqueue_destination(self, agent_id: str, x: int, y: int) -> None:
        """Append ``(x, y)`` to the agent's queue (normal click)."""
        self._scheduler(agent_id).enqueue((x, y))

    def preempt_to(self, agent_id: str, x: int, y: int) -> None:
        """Discard pending destinations and go to ``(x, y)`` now (priority click)."""
        self._scheduler(agent_id).preempt((x, y))

    def stop(self, agent_id: str) -> None:
        """Clear the queue; the agent halts once its current step is done."""
        self._scheduler(agent_id).stop_all()

    def stop_everyone(self) -> None:
        for scheduler in self.schedulers.values():
            scheduler.stop_all()

    def dispatch(self, command: Command) -> None:
        """Apply an already-disambiguated input command."""
        if isinstance(command, Activate):
            self.enqueue_destination(command.agent_id, command.x, command.y)
        elif isinstance(command, PriorityActivate):
            self.preempt_to(command.agent_id, command.x, command.y)
        elif isinstance(command, Stop):
            self.stop(command.agent_id)
        else:
            raise TypeError(f"Unsupported command type: {type(command).__name__}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_position(self, agent_id: str) -> Coordinate:
        """Return the agent's coordinate, raising NotPlacedError if it has none."""
        return self._scheduler(agent_id).agent.require_position()

    def pending_queue(self, agent_id: str) -> List[Coordinate]:
        """Ordered destinations still to visit, head first (badge 1 is the head)."""
        return self._scheduler(agent_id).pending()

    def is_moving(self, agent_id: str) -> bool:
        return self._scheduler(agent_id).is_moving

    def status(self, agent_id: str) -> AgentStatus:
        return self._scheduler(agent_id).status()

    def grid_state(self) -> EnvironmentGridState:
        """Serializable snapshot of tiles and occupants."""
        return snapshot_grid(self.grid)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: MovementListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: MovementListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    async def wait_idle(self, agent_id: Optional[str] = None) -> None:
        """Wait until the given agent (or every agent) has stopped processing.

        Listeners may queue more work for other agents while we wait, so the
        check repeats until a full pass finds every scheduler idle.
        """
        if agent_id is not None:
            await self._scheduler(agent_id).wait_idle()
            return

        while True:
            busy = [s for s in self.schedulers.values() if s.is_moving or s.running]
            if not busy:
                return
            await asyncio.gather(*(s.wait_idle() for s in busy))
            # Let freshly created tasks start before re-checking.
            await asyncio.sleep(0)
