"""Tests for the colour-coded log tags printed while agents move.

These tests assert that:
- each log helper prints its own tag
- DECKWALK_NO_COLOR strips the ANSI codes
- per-step tracing stays off unless requested
"""

from __future__ import annotations

import pytest

from deckwalk.environment import EnvironmentGrid
from deckwalk.logging_utils import (
    LOG_TAG_ERROR,
    LOG_TAG_INTERRUPT,
    LOG_TAG_MOVEMENT,
    LOG_TAG_SUCCESS,
    Color,
    colored,
    log_error,
    log_info,
    log_interrupt,
    log_movement,
    log_success,
    movement_debug_enabled,
)
from deckwalk.orchestrator import Orchestrator


def test_colored_respects_no_color(monkeypatch):
    monkeypatch.delenv("DECKWALK_NO_COLOR", raising=False)
    assert colored("hi", Color.GREEN) == f"{Color.GREEN.value}hi{Color.RESET.value}"
    assert colored("hi", Color.RED, bold=True).startswith(Color.BOLD.value + Color.RED.value)

    monkeypatch.setenv("DECKWALK_NO_COLOR", "1")
    assert colored("hi", Color.GREEN) == "hi"


def test_each_helper_prints_its_tag(monkeypatch, capsys):
    monkeypatch.setenv("DECKWALK_NO_COLOR", "1")

    log_movement("walk")
    log_interrupt("cut in")
    log_error("stuck")
    log_success("arrived")
    log_info("note")

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["[•] walk", "[~] cut in", "[!] stuck", "[✓] arrived", "[i] note"]


def test_movement_debug_flag(monkeypatch):
    monkeypatch.delenv("DEBUG_MOVEMENT", raising=False)
    monkeypatch.delenv("DECKWALK_VERBOSE", raising=False)
    assert movement_debug_enabled() is False

    monkeypatch.setenv("DECKWALK_VERBOSE", "1")
    assert movement_debug_enabled() is True


@pytest.mark.asyncio
async def test_walk_logs_heading_arrival_and_priority(monkeypatch, capsys):
    monkeypatch.setenv("DECKWALK_NO_COLOR", "1")
    monkeypatch.delenv("DEBUG_MOVEMENT", raising=False)
    monkeypatch.delenv("DECKWALK_VERBOSE", raising=False)
    deck = Orchestrator(EnvironmentGrid(width=3, height=1), step_delay=0, nearest_fallback=False)
    deck.add_agent("deckhand", 0, 0)

    deck.enqueue_destination("deckhand", 2, 0)
    await deck.wait_idle()
    deck.preempt_to("deckhand", 0, 0)
    await deck.wait_idle()

    out = capsys.readouterr().out
    assert f"{LOG_TAG_MOVEMENT} [deckhand] Heading to (2, 0) (2 steps, found)" in out
    assert f"{LOG_TAG_SUCCESS} [deckhand] Reached (2, 0)" in out
    assert f"{LOG_TAG_INTERRUPT} [deckhand] Priority move to (0, 0)" in out
    # No per-step trace without the debug flag
    assert "step ->" not in out


@pytest.mark.asyncio
async def test_unreachable_destination_logs_error(monkeypatch, capsys):
    monkeypatch.setenv("DECKWALK_NO_COLOR", "1")
    grid = EnvironmentGrid(width=3, height=1)
    grid.place_occupant("crate", 1, 0)
    grid.place_occupant("barrel", 2, 0)
    deck = Orchestrator(grid, step_delay=0, nearest_fallback=False)
    deck.add_agent("deckhand", 0, 0)

    deck.enqueue_destination("deckhand", 2, 0)
    await deck.wait_idle()

    out = capsys.readouterr().out
    assert f"{LOG_TAG_ERROR} [deckhand] No path from (0, 0) to (2, 0); skipping" in out
