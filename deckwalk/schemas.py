"""
Pydantic schemas for deckwalk notifications and snapshots.

Everything the core tells the outside world is one of the events below. The
rendering layer subscribes to them; it never reaches into schedulers or the
grid to find out what happened.

Design Philosophy:
- Events are plain data (serializable, comparable in tests)
- Coordinates are ``(x, y)`` tuples throughout
- Status snapshots are copies; mutating them never touches live state
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Movement Events
# ============================================================================

class MovementEvent(BaseModel):
    """Base class for every notification emitted by a scheduler."""

    model_config = ConfigDict(frozen=True)

    agent_id: str = Field(..., description="Agent the event refers to")


class PositionChanged(MovementEvent):
    """The agent committed a step onto ``(x, y)``."""

    kind: Literal["position_changed"] = "position_changed"
    x: int
    y: int

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


class QueueChanged(MovementEvent):
    """The pending destination list changed (arrival, drop, preempt, stop).

    ``destinations`` is ordered; the UI numbers badges from 1 in this order.
    """

    kind: Literal["queue_changed"] = "queue_changed"
    destinations: List[Tuple[int, int]] = Field(default_factory=list)


class DestinationUnreachable(MovementEvent):
    """A destination was dropped because no route to it (or next to it) exists.

    ``reason`` is ``"no_path"`` when planning failed and ``"blocked"`` when the
    route became blocked while walking it.
    """

    kind: Literal["destination_unreachable"] = "destination_unreachable"
    x: int
    y: int
    reason: Literal["no_path", "blocked"] = "no_path"


class MovementInterrupted(MovementEvent):
    """A preemption or stop cut the running traversal short."""

    kind: Literal["movement_interrupted"] = "movement_interrupted"
    position: Optional[Tuple[int, int]] = Field(
        None, description="Where the agent stood when the interruption took effect"
    )


# ============================================================================
# Agent Snapshots
# ============================================================================

class AgentStatus(BaseModel):
    """Point-in-time view of an agent, for UIs and debugging."""

    agent_id: str
    position: Optional[Tuple[int, int]] = Field(None, description="None until the agent is placed")
    moving: bool = False
    pending: List[Tuple[int, int]] = Field(
        default_factory=list, description="Queued destinations, head first"
    )
    step_delay: float = Field(..., ge=0, description="Seconds between committed steps")
    move_token: int = Field(0, ge=0, description="Generation counter bumped on preempt/stop")
