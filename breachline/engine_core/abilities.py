"""
Barrier repair - the Defender's one special ability.

During the Defender's Main phase, a Barrier-subtype card on the Defender's
field can repair the core by one point (never above maximum).
"""

from __future__ import annotations

from .errors import ValidationError
from .state import BarrierType, GameState, LogCategory, Phase, Side
from . import store

REPAIR_AMOUNT = 1


def can_use_barrier_ability(state: GameState, field_index: int) -> bool:
    field = state.defender.field
    if not 0 <= field_index < len(field):
        return False
    if field[field_index].subtype != BarrierType.BARRIER:
        return False
    return state.phase == Phase.MAIN and state.active_side is Side.DEFENDER


def use_barrier_ability(state: GameState, field_index: int) -> GameState:
    """Repair the Defender core using the Barrier at field_index."""
    if not can_use_barrier_ability(state, field_index):
        raise ValidationError(
            "Only a Barrier can repair the core, during the Defender's Main phase",
            rule="INVALID_ABILITY",
        )
    barrier = state.defender.field[field_index]
    state = store.append_log(
        state,
        f"{barrier.name} repairs the core",
        LogCategory.GAME,
        {"card_id": barrier.id, "amount": REPAIR_AMOUNT},
    )
    return store.adjust_core_health(state, REPAIR_AMOUNT)
