"""
Phase Sequencer - Phase cycle and turn boundaries.

Cycle:
    Intruder: DRAW -> RESOURCE -> MAIN -> COMBAT -> (Defender) DRAW
    Defender: DRAW -> RESOURCE -> MAIN -> (Intruder) DRAW, turn + 1

Phase entry actions run once, for the side entering the phase:
    DRAW      draw one card
    RESOURCE  available resources refreshed to the full total
    MAIN      nothing
    COMBAT    nothing
"""

from __future__ import annotations
import logging

from .action import ActionKind
from .state import GameState, LogCategory, Phase, Side
from . import store
from .combat import clear_combat_effects

logger = logging.getLogger(__name__)

DRAW_PER_TURN = 1

# Static permission table: action kind -> phases it may be taken in
ACTION_PHASES: dict[ActionKind, frozenset[Phase]] = {
    ActionKind.PLAY_RESOURCE: frozenset({Phase.MAIN}),
    ActionKind.PLAY_CARD: frozenset({Phase.MAIN}),
    ActionKind.USE_ABILITY: frozenset({Phase.MAIN}),
    ActionKind.ATTACK: frozenset({Phase.COMBAT}),
    ActionKind.BLOCK: frozenset({Phase.COMBAT}),
    ActionKind.END_PHASE: frozenset(Phase),
}

# Action kinds restricted to one side, regardless of whose turn it is
ACTION_SIDES: dict[ActionKind, Side] = {
    ActionKind.ATTACK: Side.INTRUDER,
    ActionKind.BLOCK: Side.DEFENDER,
    ActionKind.USE_ABILITY: Side.DEFENDER,
}


def next_phase(phase: Phase, side: Side) -> tuple[Phase, Side, bool]:
    """
    Work out the phase that follows.

    Returns:
        (next phase, next active side, whether the turn number increments)
    """
    if phase == Phase.DRAW:
        return Phase.RESOURCE, side, False
    if phase == Phase.RESOURCE:
        return Phase.MAIN, side, False
    if phase == Phase.MAIN:
        if side is Side.INTRUDER:
            return Phase.COMBAT, side, False
        # Defender skips combat; the cycle completes here
        return Phase.DRAW, Side.INTRUDER, True
    if phase == Phase.COMBAT:
        return Phase.DRAW, Side.DEFENDER, False
    raise ValueError(f"Invalid phase: {phase}")


def is_action_allowed(state: GameState, kind: ActionKind, side: Side) -> bool:
    """Check the static phase/side table for an action."""
    if kind.is_meta:
        return True
    if state.phase not in ACTION_PHASES.get(kind, frozenset()):
        return False
    required = ACTION_SIDES.get(kind)
    if required is not None and side is not required:
        return False
    if kind == ActionKind.BLOCK:
        # Blocks answer the Intruder's attacks
        return state.active_side is Side.INTRUDER
    return side is state.active_side


def enter_phase(state: GameState) -> GameState:
    """Run the entry action for the state's current phase and active side."""
    if state.phase == Phase.DRAW:
        return store.draw_cards(state, state.active_side, DRAW_PER_TURN)
    if state.phase == Phase.RESOURCE:
        return store.refresh_resources(state, state.active_side)
    return state


def advance_phase(state: GameState) -> GameState:
    """
    Move to the next phase.

    Leaving combat closes it out, the entered phase's entry action runs,
    and terminal conditions are re-checked before returning since a draw
    can end the game.
    """
    if state.is_over:
        return state

    phase, side, new_turn = next_phase(state.phase, state.active_side)
    if state.phase == Phase.COMBAT:
        state = clear_combat_effects(state)

    turn_number = state.turn_number + 1 if new_turn else state.turn_number
    state = state._copy_with(
        phase=phase,
        active_side=side,
        turn_number=turn_number,
        pending_attack=None,
    )

    suffix = " (new turn)" if new_turn else ""
    state = store.append_log(
        state,
        f"{side.label} begins {phase.value} phase{suffix}",
        LogCategory.PHASE,
        {"side": side.value, "phase": phase.value, "turn": turn_number},
    )
    logger.info("Turn %d: %s %s phase", turn_number, side.label, phase.value)

    state = enter_phase(state)
    return store.evaluate_terminal_condition(state)
