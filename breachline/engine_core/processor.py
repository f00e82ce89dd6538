"""
Action Processor - The single gate between intent and mutation.

Validation order:
1. State integrity (fatal, propagates as StateIntegrityError)
2. Finished game: only QUIT is accepted
3. Meta actions (help, save, load, quit) pass without touching state
4. Side: the action must come from the side allowed to take it
5. Phase: the action kind must be permitted in the current phase

Each accepted game action maps to one store, combat, ability or phase
call. Rejected actions raise ValidationError or CombatError and the
caller's state is left as it was.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable

from .action import Action, ActionKind, ActionResult
from .errors import GameError, StateIntegrityError, ValidationError
from .state import CardCategory, GameState, INSTALLABLE_CATEGORY, Side
from . import abilities, combat, phases, store

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, Action], GameState]


def _new_messages(old: GameState, new: GameState) -> list[str]:
    """Messages of log entries appended between two states."""
    if not old.log:
        return [e.message for e in new.log]
    last = old.log[-1]
    for i in range(len(new.log) - 1, -1, -1):
        if new.log[i] is last:
            return [e.message for e in new.log[i + 1:]]
    return [e.message for e in new.log]


@dataclass
class ActionProcessor:
    """
    Applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Validate and apply an action.

        Returns ActionResult with the new state.
        Raises ValidationError / CombatError for illegal actions.
        """
        store.check_integrity(state)

        try:
            self._validate_action(state, action)
        except GameError as e:
            logger.warning("Rejected %s: %s", action.describe(), e.message)
            raise

        if action.kind.is_meta:
            return ActionResult(
                new_state=state,
                action=action,
                meta=action.kind,
                quit_requested=action.kind == ActionKind.QUIT,
            )

        handler = self._get_handler(action.kind)
        try:
            new_state = handler(state, action)
        except StateIntegrityError:
            raise
        except GameError as e:
            logger.warning("Rejected %s: %s", action.describe(), e.message)
            raise

        logger.debug("Applied %s", action.describe())
        return ActionResult.with_state(new_state, action, _new_messages(state, new_state))

    def _validate_action(self, state: GameState, action: Action) -> None:
        """Raise ValidationError if the action is not allowed right now."""
        kind = action.kind

        if state.is_over:
            if kind == ActionKind.QUIT:
                return
            raise ValidationError("Game is over - no actions allowed", rule="GAME_OVER")

        if kind.is_meta:
            return

        # Side checks
        required = phases.ACTION_SIDES.get(kind)
        if required is not None and action.side is not required:
            raise ValidationError(
                f"Only the {required.label} can {kind.value.replace('_', ' ')}",
                rule="WRONG_SIDE",
            )
        if kind == ActionKind.BLOCK:
            if state.active_side is not Side.INTRUDER:
                raise ValidationError("Blocks are only declared during the Intruder's turn", rule="WRONG_SIDE")
        elif action.side is not state.active_side:
            raise ValidationError(f"Not the {action.side.label}'s turn", rule="NOT_ACTIVE_SIDE")

        # Phase checks
        if not phases.is_action_allowed(state, kind, action.side):
            raise ValidationError(
                f"Cannot {kind.value.replace('_', ' ')} during the {state.phase.value} phase",
                rule="WRONG_PHASE",
            )

        if kind == ActionKind.END_PHASE and state.pending_attack is not None:
            raise ValidationError("Resolve the pending attack before ending the phase", rule="ATTACK_PENDING")

    def _get_handler(self, kind: ActionKind) -> Handler:
        handlers: dict[ActionKind, Handler] = {
            ActionKind.PLAY_RESOURCE: self._handle_play_resource,
            ActionKind.PLAY_CARD: self._handle_play_card,
            ActionKind.ATTACK: self._handle_attack,
            ActionKind.BLOCK: self._handle_block,
            ActionKind.USE_ABILITY: self._handle_use_ability,
            ActionKind.END_PHASE: self._handle_end_phase,
        }
        return handlers[kind]

    @staticmethod
    def _require(value: int | None, name: str) -> int:
        if value is None:
            raise ValidationError(f"Missing {name} in payload", rule="MISSING_PAYLOAD")
        return value

    def _hand_card_category(self, state: GameState, action: Action) -> tuple[int, CardCategory]:
        index = self._require(action.payload.card_index, "card_index")
        hand = state.player(action.side).hand
        if not 0 <= index < len(hand):
            raise ValidationError(f"Invalid hand index: {index}", rule="HAND_INDEX")
        return index, hand[index].category

    def _handle_play_resource(self, state: GameState, action: Action) -> GameState:
        index, category = self._hand_card_category(state, action)
        if category != CardCategory.RESOURCE:
            raise ValidationError("That card is not a resource", rule="WRONG_CARD_TYPE")
        return store.move_card_to_field(state, action.side, index)

    def _handle_play_card(self, state: GameState, action: Action) -> GameState:
        index, category = self._hand_card_category(state, action)
        allowed = INSTALLABLE_CATEGORY[action.side]
        if category != allowed:
            raise ValidationError(
                f"The {action.side.label} can only install {allowed.value} cards this way",
                rule="WRONG_CARD_TYPE",
            )
        return store.move_card_to_field(state, action.side, index)

    def _handle_attack(self, state: GameState, action: Action) -> GameState:
        index = self._require(action.payload.field_index, "field_index")
        return combat.declare_attack(state, index)

    def _handle_block(self, state: GameState, action: Action) -> GameState:
        attacker = action.payload.field_index
        if attacker is None:
            attacker = state.pending_attack
        attacker = self._require(attacker, "field_index")
        return combat.declare_block(state, attacker, action.payload.blocker_index)

    def _handle_use_ability(self, state: GameState, action: Action) -> GameState:
        index = self._require(action.payload.field_index, "field_index")
        return abilities.use_barrier_ability(state, index)

    def _handle_end_phase(self, state: GameState, action: Action) -> GameState:
        return phases.advance_phase(state)


def process_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates an ActionProcessor and applies the action.
    """
    return ActionProcessor().apply(state, action)
