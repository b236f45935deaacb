"""Agent state and its pending-destination queue.

Both are plain containers. Only ``MovementScheduler`` writes to them; callers
go through the scheduler (or the orchestrator) and read copies.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List, Optional

from .config import Config
from .environment import Coordinate, EnvironmentGrid


class NotPlacedError(LookupError):
    """Raised when an operation needs an agent that is unknown or not on a grid."""

    def __init__(self, *, agent_id: str, reason: str = "agent has not been placed on the grid") -> None:
        self.agent_id = agent_id
        self.reason = reason
        super().__init__(f"Agent '{agent_id}': {reason}")


class MoveQueue:
    """Ordered destinations; insertion order is execution order.

    The head stays in the queue while it is being walked and is only popped
    once the agent arrives (or the destination is dropped as unreachable).
    """

    def __init__(self) -> None:
        self._items: Deque[Coordinate] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(list(self._items))

    def append(self, destination: Coordinate) -> None:
        self._items.append(destination)

    def replace(self, destination: Coordinate) -> None:
        """Drop everything pending and keep only ``destination``."""
        self._items.clear()
        self._items.append(destination)

    def clear(self) -> None:
        self._items.clear()

    def peek(self) -> Optional[Coordinate]:
        return self._items[0] if self._items else None

    def pop_head(self) -> Coordinate:
        return self._items.popleft()

    def snapshot(self) -> List[Coordinate]:
        return list(self._items)


@dataclass
class Agent:
    """A mobile agent on the deck.

    The agent only stores its own coordinate; the grid stores which occupant
    stands on each tile. ``grid`` is passed in explicitly so the agent never
    depends on shared module state to find its world.
    """

    agent_id: str
    grid: EnvironmentGrid
    step_delay: float = field(default_factory=lambda: Config.STEP_DELAY)
    position: Optional[Coordinate] = None
    move_token: int = 0
    moving: bool = False

    def __post_init__(self) -> None:
        if self.step_delay < 0:
            raise ValueError(f"step_delay must be >= 0 (got {self.step_delay})")

    @property
    def placed(self) -> bool:
        return self.position is not None

    def require_position(self) -> Coordinate:
        """Return the current coordinate or raise ``NotPlacedError``."""
        if self.position is None:
            raise NotPlacedError(agent_id=self.agent_id)
        return self.position
