"""Unit tests for the event, snapshot and command schemas."""

import pytest
from pydantic import ValidationError

from deckwalk.commands import Activate, PriorityActivate, Stop, parse_command
from deckwalk.environment import EnvironmentGridState, OccupantState, TileType
from deckwalk.schemas import (
    AgentStatus,
    DestinationUnreachable,
    MovementInterrupted,
    PositionChanged,
    QueueChanged,
)


def test_events_are_frozen_and_comparable():
    event = PositionChanged(agent_id="deckhand", x=2, y=3)

    assert event.position == (2, 3)
    assert event.kind == "position_changed"
    assert event == PositionChanged(agent_id="deckhand", x=2, y=3)
    with pytest.raises(ValidationError):
        event.x = 4


def test_queue_changed_keeps_badge_order():
    event = QueueChanged(agent_id="deckhand", destinations=[[2, 0], [2, 4]])

    assert event.destinations == [(2, 0), (2, 4)]
    assert QueueChanged(agent_id="deckhand").destinations == []


def test_unreachable_reason_is_restricted():
    assert DestinationUnreachable(agent_id="deckhand", x=4, y=4).reason == "no_path"
    with pytest.raises(ValidationError):
        DestinationUnreachable(agent_id="deckhand", x=4, y=4, reason="tired")


def test_interrupted_position_is_optional():
    assert MovementInterrupted(agent_id="deckhand").position is None
    dumped = MovementInterrupted(agent_id="deckhand", position=(1, 0)).model_dump()
    assert dumped["kind"] == "movement_interrupted"
    assert dumped["position"] == (1, 0)


def test_agent_status_validation():
    status = AgentStatus(agent_id="deckhand", position=(1, 1), step_delay=0.25)
    assert status.pending == []
    assert status.moving is False

    with pytest.raises(ValidationError):
        AgentStatus(agent_id="deckhand", step_delay=-1)
    with pytest.raises(ValidationError):
        AgentStatus(agent_id="deckhand", step_delay=0, move_token=-1)


def test_grid_state_validation():
    state = EnvironmentGridState(
        width=3,
        height=2,
        tiles={(1, 0): {"tile_type": "wall"}},
        occupants=[{"occupant_id": "crate", "position": [2, 1]}],
    )
    assert state.tiles[(1, 0)].tile_type is TileType.WALL

    with pytest.raises(ValidationError):
        EnvironmentGridState(width=0, height=2)
    with pytest.raises(ValidationError):
        OccupantState(occupant_id="crate", position=[1, 2, 3])


def test_parse_command_picks_the_right_kind():
    assert parse_command({"kind": "activate", "agent_id": "a", "x": 1, "y": 2}) == Activate(
        agent_id="a", x=1, y=2
    )
    assert isinstance(
        parse_command({"kind": "priority_activate", "agent_id": "a", "x": 0, "y": 0}),
        PriorityActivate,
    )
    assert isinstance(parse_command({"kind": "stop", "agent_id": "a"}), Stop)


def test_parse_command_rejects_bad_input():
    with pytest.raises(ValidationError):
        parse_command({"kind": "teleport", "agent_id": "a"})
    with pytest.raises(ValidationError):
        parse_command({"kind": "activate", "agent_id": "a", "x": 1})
