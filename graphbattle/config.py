"""
Configuration - Game defaults and environment settings.

Defaults are plain class attributes so callers can read them without
instantiating anything. Environment settings are read once at import.
"""

import logging
import os


# ===== ENVIRONMENT =====
GRAPHBATTLE_ENV = os.getenv("GRAPHBATTLE_ENV", "development")
GRAPHBATTLE_LOG_LEVEL = os.getenv("GRAPHBATTLE_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


# ===== GAME DEFAULTS =====
class GameDefaults:
    """Default settings for a standard game."""

    # 8x6 for create_standard_game; a bare StandardBoardGenerator uses 6x8
    ROWS = 8
    COLUMNS = 6
    NODES_PER_PLAYER = 6
    STRENGTH_PER_PLAYER = 12
    ATTACK_WIN_PROBABILITY = 0.5
    PLAYER_COUNT = 5

    PLAYER_COLORS = ("red", "blue", "green", "yellow", "purple")


# ===== BOARD GENERATION =====
class BoardDefaults:
    """Standard board generator settings."""

    # Generator defaults, used only when StandardBoardGenerator is built directly
    ROWS = 6
    COLUMNS = 8
    TARGET_NODE_COUNT = 30
    REQUIRED_PLAYER_COUNT = 5
    STRENGTH_PER_PLAYER = 12
    MIN_STRENGTH_PER_NODE = 1

    # Full shuffled removal passes before falling back to BFS selection
    MAX_CARVE_PASSES = 8


_logging_configured = False


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger (once)."""
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=(level or GRAPHBATTLE_LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _logging_configured = True
