"""
Session Module - Drives one play-through of a game.

A session:
- Starts from a set-up GameState
- Feeds human actions to the engine
- Lets the Defender bot answer attacks and play its turns
- Saves and loads through the persistence package on request
"""

from .game_loop import GameLoop, LoopState, TurnResult, MAX_BOT_STEPS
from .help import help_lines

__all__ = [
    "GameLoop",
    "LoopState",
    "TurnResult",
    "MAX_BOT_STEPS",
    "help_lines",
]
