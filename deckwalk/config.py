"""
deckwalk Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration loaded from environment variables."""

    # Deck dimensions used when no scenario supplies a grid
    GRID_WIDTH: int = int(os.getenv("DECKWALK_GRID_WIDTH", "20"))
    GRID_HEIGHT: int = int(os.getenv("DECKWALK_GRID_HEIGHT", "10"))

    # Seconds an agent waits after committing each step
    STEP_DELAY: float = float(os.getenv("DECKWALK_STEP_DELAY", "0.25"))

    # Walk toward the closest reachable tile when a goal and its neighbours are cut off.
    # Off by default so a sealed-off goal is reported unreachable instead.
    NEAREST_FALLBACK: bool = _env_flag("DECKWALK_NEAREST_FALLBACK")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    SCENARIOS_DIR: Path = Path(
        os.getenv("DECKWALK_SCENARIOS_DIR", str(PROJECT_ROOT / "examples" / "scenarios"))
    )

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        if cls.GRID_WIDTH <= 0 or cls.GRID_HEIGHT <= 0:
            raise ValueError(
                "DECKWALK_GRID_WIDTH and DECKWALK_GRID_HEIGHT must be positive "
                f"(got {cls.GRID_WIDTH}x{cls.GRID_HEIGHT})"
            )

        if cls.STEP_DELAY < 0:
            raise ValueError(
                f"DECKWALK_STEP_DELAY must be >= 0 (got {cls.STEP_DELAY}). "
                "Use 0 to step as fast as the event loop allows."
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "deckwalk Configuration:",
            f"  Grid: {cls.GRID_WIDTH}x{cls.GRID_HEIGHT}",
            f"  Step Delay: {cls.STEP_DELAY}s",
            f"  Nearest Fallback: {'on' if cls.NEAREST_FALLBACK else 'off'}",
            f"  Scenarios: {cls.SCENARIOS_DIR}",
            f"  Log Level: {cls.LOG_LEVEL}",
        ]
        return "\n".join(lines)
