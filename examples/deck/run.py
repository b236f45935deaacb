"""
Example: Cargo Hold - Queued, Priority and Stopped Moves
=========================================================

WHAT THIS SHOWS:
- Loading a deck from a JSON scenario
- Queueing destinations (FIFO, like single clicks)
- A priority move cutting in mid-walk (like a double click)
- A walled-off destination being skipped without blocking the queue
- Approaching a tile held by an obstacle
- Stopping an agent

RUN:
    python -m examples.deck.run
    python -m examples.deck.run main_deck
"""

import asyncio
import sys

from deckwalk import (
    Activate,
    DestinationUnreachable,
    MovementEvent,
    MovementInterrupted,
    PositionChanged,
    PriorityActivate,
    QueueChanged,
    Stop,
    build_orchestrator,
    load_scenario,
)
from deckwalk.config import Config


def print_event(event: MovementEvent) -> None:
    """Stand-in for a renderer: print what it would redraw."""
    if isinstance(event, PositionChanged):
        print(f"    {event.agent_id} -> {event.position}")
    elif isinstance(event, QueueChanged):
        badges = ", ".join(f"{i}:{dest}" for i, dest in enumerate(event.destinations, start=1))
        print(f"    {event.agent_id} queue [{badges}]")
    elif isinstance(event, DestinationUnreachable):
        print(f"    {event.agent_id} cannot reach ({event.x}, {event.y}) [{event.reason}]")
    elif isinstance(event, MovementInterrupted):
        print(f"    {event.agent_id} interrupted at {event.position}")


def draw(orchestrator, agent_id: str) -> None:
    """ASCII view with numbered destination badges."""
    marks = {dest: str(i) for i, dest in enumerate(orchestrator.pending_queue(agent_id), start=1)}
    for row in orchestrator.grid.render_rows(marks):
        print(f"  {row}")


async def main(scenario_name: str = "cargo_hold") -> None:
    print(Config.display())
    print()

    # ========================================
    # Load the deck
    # ========================================
    grid, agents = load_scenario(scenario_name)
    orchestrator = build_orchestrator(grid, agents, listeners=[print_event], step_delay=0.05)
    crew = agents[0].agent_id
    far_x, far_y = grid.width - 1, grid.height - 1

    # ========================================
    # Single clicks: queue two destinations
    # ========================================
    orchestrator.dispatch(Activate(agent_id=crew, x=far_x, y=0))
    orchestrator.dispatch(Activate(agent_id=crew, x=0, y=far_y))
    draw(orchestrator, crew)
    await orchestrator.wait_idle()

    # ========================================
    # Sealed storeroom: skipped, queue continues
    # ========================================
    if scenario_name == "cargo_hold":
        orchestrator.dispatch(Activate(agent_id=crew, x=3, y=2))   # walled in
        orchestrator.dispatch(Activate(agent_id=crew, x=5, y=2))   # crate: walk next to it
        await orchestrator.wait_idle()

    # ========================================
    # Double click: priority move cuts in
    # ========================================
    orchestrator.dispatch(Activate(agent_id=crew, x=far_x, y=far_y))
    await asyncio.sleep(0.12)
    orchestrator.dispatch(PriorityActivate(agent_id=crew, x=0, y=0))
    await orchestrator.wait_idle()

    # ========================================
    # Stop mid-walk
    # ========================================
    orchestrator.dispatch(Activate(agent_id=crew, x=far_x, y=far_y))
    await asyncio.sleep(0.12)
    orchestrator.dispatch(Stop(agent_id=crew))
    await orchestrator.wait_idle()

    status = orchestrator.status(crew)
    print(f"\n✅ {crew} idle at {status.position} (queue: {status.pending})")
    draw(orchestrator, crew)


if __name__ == "__main__":
    asyncio.run(main(*sys.argv[1:2]))
