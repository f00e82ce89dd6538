"""
Combat Resolver - Single attacker, optional single blocker.

Protocol per attack:
1. declare_attack: the Intruder names an attacking Unit (no damage yet)
2. declare_block: the Defender names a Barrier, or None to let it through
   - Unblocked: the attacker's damage goes to the Defender core
   - Blocked: both cards deal damage at once, computed from the pre-combat
     state; each card is destroyed if the damage it takes >= its toughness
3. clear_combat_effects: closes the combat phase in the log

Damage rules:
- A Fracter deals floor(1.5 * power) to a Barrier-subtype blocker
- A Barrier-subtype blocker deals power + 1
- Everything else deals its base power
"""

from __future__ import annotations
import logging
import math

from .errors import CombatError
from .state import (
    BarrierType,
    Card,
    CardCategory,
    GameState,
    LogCategory,
    Phase,
    Side,
    UnitType,
)
from . import store

logger = logging.getLogger(__name__)

FRACTER_MULTIPLIER = 1.5
BARRIER_BONUS = 1


def effectiveness(attacker: Card, against: BarrierType | None = None) -> float:
    """Damage multiplier for a Unit against a blocker subtype."""
    if attacker.subtype == UnitType.FRACTER and against == BarrierType.BARRIER:
        return FRACTER_MULTIPLIER
    return 1.0


def effective_damage(card: Card, against: BarrierType | None = None) -> int:
    """
    Damage a card deals in combat.

    Args:
        card: Unit or Barrier dealing the damage
        against: Subtype of the blocker a Unit is hitting (None for the core)
    """
    power = card.power or 0
    if card.category == CardCategory.BARRIER:
        if card.subtype == BarrierType.BARRIER:
            return power + BARRIER_BONUS
        return power
    if against is None:
        return power
    return math.floor(power * effectiveness(card, against))


def _in_intruder_combat(state: GameState) -> bool:
    return state.phase == Phase.COMBAT and state.active_side is Side.INTRUDER


def can_attack(state: GameState, attacker_index: int) -> bool:
    """A Unit on the Intruder's field, during the Intruder's combat."""
    field = state.intruder.field
    if not 0 <= attacker_index < len(field):
        return False
    if field[attacker_index].category != CardCategory.UNIT:
        return False
    return _in_intruder_combat(state)


def can_block(state: GameState, blocker_index: int) -> bool:
    """A Barrier on the Defender's field, during the Intruder's combat."""
    field = state.defender.field
    if not 0 <= blocker_index < len(field):
        return False
    if field[blocker_index].category != CardCategory.BARRIER:
        return False
    return _in_intruder_combat(state)


def declare_attack(state: GameState, attacker_index: int) -> GameState:
    """Declare an attack. The attack waits for the Defender's block decision."""
    if not can_attack(state, attacker_index):
        raise CombatError("This card cannot attack", rule="INVALID_ATTACKER")
    if state.pending_attack is not None:
        raise CombatError("An attack is already waiting for a block decision", rule="ATTACK_PENDING")

    attacker = state.intruder.field[attacker_index]
    logger.debug("Attack declared with %s (%s)", attacker.name, attacker.id)
    state = store.append_log(
        state,
        f"Intruder declares attack with {attacker.name}",
        LogCategory.COMBAT,
        {"card_id": attacker.id, "field_index": attacker_index},
    )
    return state._copy_with(pending_attack=attacker_index)


def declare_block(state: GameState, attacker_index: int, blocker_index: int | None) -> GameState:
    """Resolve the pending attack against a blocker, or unblocked when blocker_index is None."""
    if not can_attack(state, attacker_index):
        raise CombatError("No valid attack to block", rule="INVALID_ATTACKER")
    if state.pending_attack != attacker_index:
        raise CombatError(
            f"No attack declared by the card at {attacker_index}",
            rule="NO_PENDING_ATTACK",
        )
    if blocker_index is not None and not can_block(state, blocker_index):
        raise CombatError("This card cannot block", rule="INVALID_BLOCKER")

    state = state._copy_with(pending_attack=None)
    if blocker_index is None:
        return _resolve_unblocked(state, attacker_index)
    return _resolve_blocked(state, attacker_index, blocker_index)


def _resolve_unblocked(state: GameState, attacker_index: int) -> GameState:
    attacker = state.intruder.field[attacker_index]
    damage = effective_damage(attacker)
    state = store.append_log(
        state,
        f"{attacker.name} attack is unblocked and deals {damage} damage to the core",
        LogCategory.COMBAT,
        {"card_id": attacker.id, "damage": damage},
    )
    return store.adjust_core_health(state, -damage)


def _resolve_blocked(state: GameState, attacker_index: int, blocker_index: int) -> GameState:
    attacker = state.intruder.field[attacker_index]
    blocker = state.defender.field[blocker_index]

    # Both computed before either card is touched
    to_blocker = effective_damage(attacker, blocker.subtype)
    to_attacker = effective_damage(blocker)
    attacker_destroyed = to_attacker >= (attacker.toughness or 0)
    blocker_destroyed = to_blocker >= (blocker.toughness or 0)

    state = store.append_log(
        state,
        f"Defender blocks with {blocker.name}",
        LogCategory.COMBAT,
        {"card_id": blocker.id, "field_index": blocker_index},
    )
    state = store.append_log(
        state,
        f"{attacker.name} deals {to_blocker} damage to {blocker.name}",
        LogCategory.COMBAT,
        {"attacker": attacker.id, "target": blocker.id, "damage": to_blocker},
    )
    state = store.append_log(
        state,
        f"{blocker.name} deals {to_attacker} damage to {attacker.name}",
        LogCategory.COMBAT,
        {"attacker": blocker.id, "target": attacker.id, "damage": to_attacker},
    )
    logger.debug(
        "Combat %s vs %s: %d/%d damage, destroyed attacker=%s blocker=%s",
        attacker.id, blocker.id, to_blocker, to_attacker, attacker_destroyed, blocker_destroyed,
    )

    if attacker_destroyed:
        state = store.remove_from_field(state, Side.INTRUDER, attacker_index)
    if blocker_destroyed:
        state = store.remove_from_field(state, Side.DEFENDER, blocker_index)
    return state


def clear_combat_effects(state: GameState) -> GameState:
    """Close the combat phase. No temporary modifiers exist, so this only logs."""
    return store.append_log(
        state,
        "Combat phase ended",
        LogCategory.PHASE,
        {"phase": Phase.COMBAT.value},
    )
