"""
Persistence - Snapshots and save files.

The engine never touches the filesystem; this package does it on the
engine's behalf.
"""

from .schemas import (
    CardModel,
    CoreModel,
    PlayerStateModel,
    LogEntryModel,
    GameStateModel,
    SaveMetadata,
    SaveFile,
    SaveSummary,
    to_snapshot,
    from_snapshot,
)
from .save_system import SaveSystem, SaveError, VERSION

__all__ = [
    "CardModel",
    "CoreModel",
    "PlayerStateModel",
    "LogEntryModel",
    "GameStateModel",
    "SaveMetadata",
    "SaveFile",
    "SaveSummary",
    "to_snapshot",
    "from_snapshot",
    "SaveSystem",
    "SaveError",
    "VERSION",
]
