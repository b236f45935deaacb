"""Logging utilities for deckwalk.

Provides color-coded console output so movement, failures and completions
are easy to tell apart when a deck is running.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Movement (steps, path planning)
    YELLOW = "\033[93m"    # Interruptions (preempt, stop)
    RED = "\033[91m"       # Errors and unreachable destinations
    GREEN = "\033[92m"     # Arrivals
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if DECKWALK_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("DECKWALK_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def log_movement(message: str) -> None:
    """Log a movement operation (blue)."""
    print(colored(f"{LOG_TAG_MOVEMENT} {message}", Color.BLUE))


def log_interrupt(message: str) -> None:
    """Log a preemption or stop (yellow)."""
    print(colored(f"{LOG_TAG_INTERRUPT} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error or unreachable destination (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log an arrival (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


def movement_debug_enabled() -> bool:
    """Return ``True`` when per-step tracing was requested via the environment."""
    return bool(os.getenv("DEBUG_MOVEMENT") or os.getenv("DECKWALK_VERBOSE"))


# Markers for operation types (color-blind accessible)
LOG_TAG_MOVEMENT = "[•]"     # Movement
LOG_TAG_INTERRUPT = "[~]"    # Preemption / stop
LOG_TAG_ERROR = "[!]"        # Error / unreachable
LOG_TAG_SUCCESS = "[✓]"      # Arrival
LOG_TAG_INFO = "[i]"         # Information
