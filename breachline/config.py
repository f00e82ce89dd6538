"""
Configuration - Game constants with environment overrides.

Environment variables:
    BREACHLINE_CORE_HEALTH   Starting (and maximum) Defender core health
    BREACHLINE_LOG_CAP       Event log retention cap
    BREACHLINE_SAVE_DIR      Directory for save files
    BREACHLINE_LOG_LEVEL     Diagnostic logging level for the CLI
"""

from __future__ import annotations
from dataclasses import dataclass
import os


@dataclass(frozen=True)
class GameConfig:
    """Tunable numbers for a single game."""
    core_health: int = 10
    intruder_hand_size: int = 7
    defender_hand_size: int = 4
    log_cap: int = 200

    # Collaborator settings
    save_dir: str = "saves"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> GameConfig:
        """Build a config, letting BREACHLINE_* variables override defaults."""
        defaults = cls()
        return cls(
            core_health=int(os.getenv("BREACHLINE_CORE_HEALTH", defaults.core_health)),
            log_cap=int(os.getenv("BREACHLINE_LOG_CAP", defaults.log_cap)),
            save_dir=os.getenv("BREACHLINE_SAVE_DIR", defaults.save_dir),
            log_level=os.getenv("BREACHLINE_LOG_LEVEL", defaults.log_level).upper(),
        )


DEFAULT_CONFIG = GameConfig()
