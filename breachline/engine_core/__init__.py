"""
Engine Core - Deterministic game state management and rules.

The engine:
1. Holds the GameState (state, store)
2. Sequences phases and turns (phases)
3. Validates and applies actions (processor)
4. Resolves combat (combat) and the Barrier ability (abilities)
"""

from .state import (
    Card,
    CardCategory,
    UnitType,
    BarrierType,
    DefenderCore,
    GameState,
    LogCategory,
    LogEntry,
    Phase,
    PlayerState,
    Side,
)
from .action import Action, ActionKind, ActionPayload, ActionResult
from .errors import GameError, ValidationError, CombatError, StateIntegrityError
from .phases import advance_phase, next_phase, is_action_allowed
from .processor import ActionProcessor, process_action

__all__ = [
    "Card",
    "CardCategory",
    "UnitType",
    "BarrierType",
    "DefenderCore",
    "GameState",
    "LogCategory",
    "LogEntry",
    "Phase",
    "PlayerState",
    "Side",
    "Action",
    "ActionKind",
    "ActionPayload",
    "ActionResult",
    "GameError",
    "ValidationError",
    "CombatError",
    "StateIntegrityError",
    "advance_phase",
    "next_phase",
    "is_action_allowed",
    "ActionProcessor",
    "process_action",
]
