"""
Per-agent movement scheduler.

Drives one traversal at a time for a single agent:
1. Peek the head of the agent's MoveQueue
2. Plan a route over the grid (breadth-first, see environment.helpers)
3. Commit one step, then sleep for the agent's step delay
4. Pop the head on arrival and move on to the next destination

Everything runs on one asyncio event loop. The per-step sleep is the only
suspension point, so a step (occupancy + position) is always applied whole.
Preemption and stop are cooperative: they flip ``interrupted`` and bump the
agent's ``move_token``, and the running loop notices at the next checkpoint
(between destinations or between steps).
"""

import asyncio
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .agent import Agent, MoveQueue
from .config import Config
from .environment import Coordinate, PathStatus, find_path
from .logging_utils import (
    log_error,
    log_interrupt,
    log_movement,
    log_success,
    movement_debug_enabled,
)
from .schemas import (
    AgentStatus,
    DestinationUnreachable,
    MovementEvent,
    MovementInterrupted,
    PositionChanged,
    QueueChanged,
)

MovementListener = Callable[[MovementEvent], None]


class ConcurrentLoopError(RuntimeError):
    """Raised if two traversals ever run at once for the same agent.

    The ``running`` guard makes this unreachable in correct use; seeing it
    means a scheduler invariant was broken.
    """

    def __init__(self, *, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(
            f"Agent '{agent_id}' already has a traversal in flight; "
            "a second processing loop was started for the same agent"
        )


class _WalkOutcome(Enum):
    ARRIVED = "arrived"
    INTERRUPTED = "interrupted"
    BLOCKED = "blocked"


class MovementScheduler:
    """Processes one agent's destination queue.

    Attributes:
        agent: The agent being driven. The scheduler is its only writer.
        queue: Pending destinations, head first.
        listeners: Callables receiving every MovementEvent. Shared by reference,
            so the orchestrator can hand the same list to every scheduler.
    """

    def __init__(
        self,
        agent: Agent,
        *,
        listeners: Optional[List[MovementListener]] = None,
        nearest_fallback: Optional[bool] = None,
    ) -> None:
        self.agent = agent
        self.queue = MoveQueue()
        self.listeners: List[MovementListener] = listeners if listeners is not None else []
        self.nearest_fallback = (
            Config.NEAREST_FALLBACK if nearest_fallback is None else nearest_fallback
        )
        self._running = False
        self._interrupted = False
        self._walking = False
        self._task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    @property
    def is_moving(self) -> bool:
        return self.agent.moving

    def pending(self) -> List[Coordinate]:
        return self.queue.snapshot()

    def status(self) -> AgentStatus:
        return AgentStatus(
            agent_id=self.agent_id,
            position=self.agent.position,
            moving=self.agent.moving,
            pending=self.queue.snapshot(),
            step_delay=self.agent.step_delay,
            move_token=self.agent.move_token,
        )

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place(self, x: int, y: int) -> None:
        """Put the agent on its grid at ``(x, y)``."""
        self.agent.grid.place_occupant(self.agent_id, x, y)
        self.agent.position = (x, y)
        self._emit(PositionChanged(agent_id=self.agent_id, x=x, y=y))

    def remove(self) -> None:
        """Stop the agent and take it off the grid."""
        self.stop_all()
        self.agent.grid.remove_occupant(self.agent_id)
        self.agent.position = None

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    def _validate(self, destination: Sequence[int]) -> Coordinate:
        self.agent.require_position()
        if len(destination) != 2 or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in destination
        ):
            raise TypeError(f"Destination must be two integers, got {destination!r}")
        x, y = destination
        self.agent.grid.tile_at(x, y)
        return (x, y)

    def enqueue(self, destination: Sequence[int]) -> None:
        """Append a destination. Never interrupts the traversal in flight.

        Raises:
            NotPlacedError: the agent is not on the grid.
            OutOfBoundsError: the destination is outside the grid.
            TypeError: the destination is not a pair of integers.
        """
        dest = self._validate(destination)
        self.queue.append(dest)
        self.agent.moving = True
        self._start()

    def preempt(self, destination: Sequence[int]) -> None:
        """Replace everything pending with ``destination`` and cut in.

        A running traversal exits at its next checkpoint and the loop starts
        over against the new queue.
        """
        dest = self._validate(destination)
        self._interrupted = True
        self.queue.replace(dest)
        self.agent.move_token += 1
        self.agent.moving = True
        log_interrupt(f"[{self.agent_id}] Priority move to {dest}")
        self._emit_queue()
        self._start()

    def stop_all(self) -> None:
        """Clear the queue and halt once the current step has finished."""
        self._interrupted = True
        self.agent.move_token += 1
        self.queue.clear()
        if self._running:
            log_interrupt(f"[{self.agent_id}] Stop requested")
        self._emit_queue()

    # ------------------------------------------------------------------
    # Processing loop
    # ------------------------------------------------------------------

    def _start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.process_queue(), name=f"deckwalk-move-{self.agent_id}")

    async def process_queue(self) -> None:
        """Work through the queue until it is empty.

        Returns immediately if a loop is already running for this agent. An
        interruption observed while running restarts the loop against the
        refreshed queue.
        """
        if self._running:
            return
        try:
            while True:
                self._running = True
                self._interrupted = False
                await self._drain()
                self._running = False
                if not self._interrupted:
                    break
                self._interrupted = False
                self._emit(MovementInterrupted(agent_id=self.agent_id, position=self.agent.position))
        finally:
            self._running = False
            self.agent.moving = False

    async def _drain(self) -> None:
        agent = self.agent
        while self.queue:
            if self._interrupted:
                break
            destination = self.queue.peek()
            start = agent.require_position()
            result = find_path(
                agent.grid,
                start,
                destination,
                occupant_id=agent.agent_id,
                nearest_fallback=self.nearest_fallback,
            )

            if result.status is PathStatus.NOT_FOUND:
                log_error(f"[{agent.agent_id}] No path from {start} to {destination}; skipping")
                self._drop(destination, "no_path")
                continue

            if result.status is PathStatus.ALREADY_AT_TARGET:
                self._complete()
                continue

            agent.moving = True
            log_movement(
                f"[{agent.agent_id}] Heading to {destination} "
                f"({result.steps} steps, {result.status.value})"
            )
            outcome = await self._walk(result.path)

            if outcome is _WalkOutcome.INTERRUPTED:
                continue
            if outcome is _WalkOutcome.BLOCKED:
                log_error(f"[{agent.agent_id}] Route to {destination} blocked at {agent.position}; skipping")
                self._drop(destination, "blocked")
                continue
            log_success(f"[{agent.agent_id}] Reached {agent.position}")
            self._complete()

    def _cancelled(self, token: int) -> bool:
        return self._interrupted or self.agent.move_token != token

    async def _walk(self, path: List[Coordinate]) -> _WalkOutcome:
        """Step along ``path`` (which starts at the agent's position)."""
        if self._walking:
            raise ConcurrentLoopError(agent_id=self.agent_id)
        self._walking = True
        token = self.agent.move_token
        try:
            for step in path[1:]:
                if self._cancelled(token):
                    return _WalkOutcome.INTERRUPTED
                if not self._commit_step(step):
                    return _WalkOutcome.BLOCKED
                await asyncio.sleep(self.agent.step_delay)
            if self._cancelled(token):
                return _WalkOutcome.INTERRUPTED
            return _WalkOutcome.ARRIVED
        finally:
            self._walking = False

    def _commit_step(self, step: Coordinate) -> bool:
        """Check and claim the next tile without suspending."""
        agent = self.agent
        grid = agent.grid
        if not grid.is_walkable(*step, ignore=agent.agent_id):
            return False
        grid.move_occupant(agent.agent_id, *step)
        agent.position = step
        if movement_debug_enabled():
            log_movement(f"[{agent.agent_id}] step -> {step}")
        self._emit(PositionChanged(agent_id=agent.agent_id, x=step[0], y=step[1]))
        return True

    def _complete(self) -> None:
        self.queue.pop_head()
        self._emit_queue()

    def _drop(self, destination: Coordinate, reason: str) -> None:
        self.queue.pop_head()
        x, y = destination
        self._emit(DestinationUnreachable(agent_id=self.agent_id, x=x, y=y, reason=reason))
        self._emit_queue()

    async def wait_idle(self) -> None:
        """Wait until the processing loop has nothing left to do."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _emit_queue(self) -> None:
        self._emit(QueueChanged(agent_id=self.agent_id, destinations=self.queue.snapshot()))

    def _emit(self, event: MovementEvent) -> None:
        # Listener failures are reported but never stop the agent.
        for listener in list(self.listeners):
            try:
                listener(event)
            except Exception as exc:
                log_error(f"[{self.agent_id}] Listener failed on {type(event).__name__}: {exc}")

