"""
Save System - Writes and reads game snapshots as JSON files.

Save file layout:
    {
        "metadata": {"version", "timestamp", "turn_number", "description"},
        "game_state": {...GameStateModel...}
    }

Only files written by the same VERSION can be loaded.
"""

from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError as ModelValidationError

from ..config import DEFAULT_CONFIG
from ..engine_core.errors import GameError, StateIntegrityError
from ..engine_core.state import GameState
from .schemas import SaveFile, SaveMetadata, SaveSummary, from_snapshot, to_snapshot

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


class SaveError(GameError):
    """A save file could not be written, found or read."""

    def __init__(self, message: str):
        super().__init__(message, rule="SAVE")


class SaveSystem:
    """
    Saves and loads games in a single directory.

    The directory is created on first use.
    """

    def __init__(self, save_dir: str | Path | None = None):
        self.save_dir = Path(save_dir if save_dir is not None else DEFAULT_CONFIG.save_dir)
        self.save_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, filename: str) -> Path:
        # Only bare file names: saves never escape the directory
        return self.save_dir / Path(filename).name

    def save_game(self, state: GameState, description: str = "Manual save") -> str:
        """
        Write the state to a new save file.

        Returns:
            The file name (relative to save_dir)
        """
        now = datetime.now(tz=timezone.utc)
        save = SaveFile(
            metadata=SaveMetadata(
                version=VERSION,
                timestamp=now.isoformat(),
                turn_number=state.turn_number,
                description=description,
            ),
            game_state=to_snapshot(state),
        )
        filename = f"save_{now.strftime('%Y-%m-%dT%H-%M-%S-%f')}.json"
        path = self._path(filename)
        try:
            path.write_text(save.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise SaveError(f"Could not write save file {filename}: {e}") from e

        logger.info("Saved turn %d to %s", state.turn_number, path)
        return filename

    def load_game(self, filename: str) -> GameState:
        """
        Read a save file back into a GameState.

        Raises SaveError if the file is missing, unparsable, from another
        version, or holds a state that fails the integrity check.
        """
        path = self._path(filename)
        if not path.exists():
            raise SaveError(f"Save file not found: {filename}")

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SaveError(f"Failed to parse save file {filename}: {e}") from e

        metadata = raw.get("metadata") if isinstance(raw, dict) else None
        version = metadata.get("version") if isinstance(metadata, dict) else None
        if version != VERSION:
            raise SaveError(f"Incompatible save file version: {version or 'unknown'}")

        try:
            save = SaveFile.model_validate(raw)
            state = from_snapshot(save.game_state)
        except ModelValidationError as e:
            raise SaveError(f"Failed to parse save file {filename}: {e}") from e
        except StateIntegrityError as e:
            raise SaveError(f"Save file {filename} holds an invalid game: {e.message}") from e

        logger.info("Loaded turn %d from %s", state.turn_number, path)
        return state

    def list_saves(self) -> list[SaveSummary]:
        """List save files, oldest first. Unreadable files are flagged, not skipped."""
        summaries = []
        for path in sorted(self.save_dir.glob("*.json")):
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                metadata = SaveMetadata.model_validate(raw["metadata"])
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("Unreadable save file %s: %s", path.name, e)
                summaries.append(SaveSummary(filename=path.name, corrupted=True))
                continue
            summaries.append(SaveSummary(filename=path.name, metadata=metadata))
        return summaries

    def delete_save(self, filename: str) -> bool:
        """Delete a save file. Returns False if it did not exist."""
        path = self._path(filename)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Deleted %s", path)
        return True

    def create_autosave(self, state: GameState) -> str:
        """Save with an autosave description naming the turn."""
        return self.save_game(state, f"Autosave - Turn {state.turn_number}")
