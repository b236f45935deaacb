"""Input commands accepted by the orchestrator.

The UI layer turns raw pointer input into one of these (a single click becomes
``Activate``, a double click ``PriorityActivate``, and so on) before calling
``Orchestrator.dispatch``. No timing decisions are made on this side.
"""

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Command(BaseModel):
    """Base class for commands addressed to one agent."""

    model_config = ConfigDict(frozen=True)

    agent_id: str


class Activate(Command):
    """Queue ``(x, y)`` behind whatever the agent is already doing."""

    kind: Literal["activate"] = "activate"
    x: int
    y: int


class PriorityActivate(Command):
    """Drop pending destinations and head for ``(x, y)`` right away."""

    kind: Literal["priority_activate"] = "priority_activate"
    x: int
    y: int


class Stop(Command):
    """Clear the queue and halt after the current step."""

    kind: Literal["stop"] = "stop"


AnyCommand = Annotated[Union[Activate, PriorityActivate, Stop], Field(discriminator="kind")]

_command_adapter: TypeAdapter = TypeAdapter(AnyCommand)


def parse_command(data: Dict[str, Any]) -> Command:
    """Build a command from a plain dict such as ``{"kind": "stop", "agent_id": "crew"}``.

    Raises:
        pydantic.ValidationError: unknown ``kind`` or missing fields.
    """
    return _command_adapter.validate_python(data)
