"""
State Store - The only place game state is changed.

Every operation takes a GameState and returns a new one; the input is
never modified. Other components read state freely but request changes
through these functions.

Failure semantics:
- Bad indices and unaffordable cards raise ValidationError
- Drawing from an empty deck is not an error: it ends the game
- A finished game accepts no further mutation
"""

from __future__ import annotations
import logging
from collections import Counter
from typing import Any

from .errors import StateIntegrityError, ValidationError
from .state import (
    GameState,
    PlayerState,
    Side,
    Phase,
    CardCategory,
    LogCategory,
    LogEntry,
)

logger = logging.getLogger(__name__)


def _require_live(state: GameState, operation: str) -> None:
    if state.is_over:
        raise ValidationError(f"Game is over - cannot {operation}", rule="GAME_OVER")


def _with_entry(state: GameState, entry: LogEntry) -> GameState:
    """Append a log entry, dropping the oldest entries beyond the cap."""
    log = state.log + [entry]
    if len(log) > state.log_cap:
        log = log[len(log) - state.log_cap:]
    return state._copy_with(log=log)


def append_log(
    state: GameState,
    message: str,
    category: LogCategory,
    metadata: dict[str, Any] | None = None,
) -> GameState:
    """Append a timestamped entry to the event log."""
    _require_live(state, "append to the log")
    return _with_entry(state, LogEntry.create(message, category, metadata))


def _declare_winner(state: GameState, winner: Side, reason: str) -> GameState:
    """Finish the game. The closing log entry lands in the same derived state."""
    logger.info("Game over: %s wins (%s)", winner.label, reason)
    state = _with_entry(
        state,
        LogEntry.create(f"{winner.label} wins: {reason}", LogCategory.GAME, {"winner": winner.value}),
    )
    return state._copy_with(is_over=True, winner=winner, pending_attack=None)


def draw_cards(state: GameState, side: Side, count: int) -> GameState:
    """
    Move up to `count` cards from the front of the deck to the hand.

    An attempted draw from an empty deck loses the game for the drawing
    side; the loss is recorded in the returned state.
    """
    _require_live(state, "draw")
    player = state.player(side)
    if count <= 0:
        return state

    if not player.deck:
        logger.info("%s attempted to draw from an empty deck", side.label)
        state = append_log(
            state,
            f"{side.label} attempted to draw but has no cards left",
            LogCategory.GAME,
            {"side": side.value},
        )
        return _declare_winner(state, side.opponent, f"{side.label} deck is empty")

    drawn = player.deck[:count]
    new_player = player._copy_with(deck=player.deck[count:], hand=player.hand + drawn)
    state = state.with_player(side, new_player)
    logger.debug("%s drew %d card(s)", side.label, len(drawn))
    return append_log(
        state,
        f"{side.label} drew {len(drawn)} card(s)",
        LogCategory.CARD,
        {"side": side.value, "card_ids": [c.id for c in drawn]},
    )


def move_card_to_field(state: GameState, side: Side, hand_index: int) -> GameState:
    """
    Install a card from hand onto the tail of the field.

    Resource cards also grow the side's total capacity by 1.
    """
    _require_live(state, "play a card")
    player = state.player(side)

    if not 0 <= hand_index < len(player.hand):
        raise ValidationError(f"Invalid hand index: {hand_index}", rule="HAND_INDEX")

    card = player.hand[hand_index]
    if card.cost > player.resource_available:
        raise ValidationError(
            f"Not enough resources to play {card.name} "
            f"(cost {card.cost}, available {player.resource_available})",
            rule="INSUFFICIENT_RESOURCES",
        )

    new_hand = player.hand[:hand_index] + player.hand[hand_index + 1:]
    new_total = player.resource_total + (1 if card.is_resource else 0)
    new_player = player._copy_with(
        hand=new_hand,
        field=player.field + [card],
        resource_available=player.resource_available - card.cost,
        resource_total=new_total,
    )
    state = state.with_player(side, new_player)
    logger.debug("%s installed %s (%s)", side.label, card.name, card.id)
    return append_log(
        state,
        f"{side.label} played {card.name}",
        LogCategory.CARD,
        {"side": side.value, "card_id": card.id, "cost": card.cost},
    )


def adjust_resource(state: GameState, side: Side, delta: int) -> GameState:
    """Change available resources, clamped to [0, resource_total]."""
    _require_live(state, "adjust resources")
    player = state.player(side)
    value = max(0, min(player.resource_available + delta, player.resource_total))
    return state.with_player(side, player._copy_with(resource_available=value))


def refresh_resources(state: GameState, side: Side) -> GameState:
    """Set available resources back to the full total."""
    _require_live(state, "refresh resources")
    player = state.player(side)
    state = state.with_player(side, player._copy_with(resource_available=player.resource_total))
    return append_log(
        state,
        f"{side.label} refreshed resources to {player.resource_total}",
        LogCategory.GAME,
        {"side": side.value, "amount": player.resource_total},
    )


def adjust_core_health(state: GameState, delta: int) -> GameState:
    """Change the Defender core's health, clamped to [0, max_health]."""
    _require_live(state, "adjust core health")
    if delta == 0:
        return state
    core = state.core
    value = max(0, min(core.current_health + delta, core.max_health))
    defender = state.defender._copy_with(core=core.with_health(value))
    state = state.with_player(Side.DEFENDER, defender)

    if delta < 0:
        message = f"Defender core took {-delta} damage ({value}/{core.max_health})"
        category = LogCategory.COMBAT
    else:
        message = f"Defender core repaired {delta} ({value}/{core.max_health})"
        category = LogCategory.GAME
    state = append_log(state, message, category, {"delta": delta, "health": value})

    if value == 0:
        return _declare_winner(state, Side.INTRUDER, "Defender core reduced to 0")
    return state


def remove_from_field(state: GameState, side: Side, field_index: int) -> GameState:
    """Remove a field card by index, keeping the order of the rest."""
    _require_live(state, "remove a card")
    player = state.player(side)
    if not 0 <= field_index < len(player.field):
        raise ValidationError(f"Invalid field index: {field_index}", rule="FIELD_INDEX")

    card = player.field[field_index]
    new_field = player.field[:field_index] + player.field[field_index + 1:]
    state = state.with_player(side, player._copy_with(field=new_field))
    logger.debug("%s lost %s (%s)", side.label, card.name, card.id)
    return append_log(
        state,
        f"{card.name} is destroyed",
        LogCategory.COMBAT,
        {"side": side.value, "card_id": card.id},
    )


def is_exhausted(player: PlayerState) -> bool:
    """True when a side has no deck, no hand, and nothing on the field that can act."""
    return (
        not player.deck
        and not player.hand
        and not any(not c.is_resource for c in player.field)
    )


def evaluate_terminal_condition(state: GameState) -> GameState:
    """
    Decide whether the game has ended.

    Idempotent: a finished game is returned as-is, so this may be called
    as often as convenient.
    """
    if state.is_over:
        return state
    if state.core.is_destroyed:
        return _declare_winner(state, Side.INTRUDER, "Defender core reduced to 0")
    if is_exhausted(state.intruder):
        return _declare_winner(state, Side.DEFENDER, "Intruder has nothing left to play")
    if is_exhausted(state.defender):
        return _declare_winner(state, Side.INTRUDER, "Defender has nothing left to play")
    return state


def check_integrity(state: GameState) -> None:
    """
    Verify every state invariant.

    Raises StateIntegrityError listing all violations found.
    """
    violations: list[str] = []

    if state.turn_number < 1:
        violations.append(f"turn_number must be >= 1, got {state.turn_number}")
    if state.phase == Phase.COMBAT and state.active_side != Side.INTRUDER:
        violations.append("combat phase on the Defender's turn")
    if state.winner is not None and not state.is_over:
        violations.append("winner set while the game is not over")

    for side in Side:
        player = state.player(side)
        if player.resource_total < 0:
            violations.append(f"{side.value}: negative resource_total")
        if not 0 <= player.resource_available <= player.resource_total:
            violations.append(
                f"{side.value}: resource_available {player.resource_available} "
                f"outside [0, {player.resource_total}]"
            )
        forbidden = CardCategory.BARRIER if side is Side.INTRUDER else CardCategory.UNIT
        for card in player.all_cards():
            if card.category == forbidden:
                violations.append(f"{side.value}: holds {card.category.value} card {card.id}")
        dealt = state.dealt.get(side)
        if dealt is not None and player.card_count > dealt:
            violations.append(f"{side.value}: holds {player.card_count} cards but was dealt {dealt}")

    if state.intruder.core is not None:
        violations.append("intruder must not have a core")
    core = state.defender.core
    if core is None:
        violations.append("defender core missing")
    else:
        if core.max_health <= 0:
            violations.append("core max_health must be > 0")
        if not 0 <= core.current_health <= core.max_health:
            violations.append(
                f"core health {core.current_health} outside [0, {core.max_health}]"
            )

    ids = Counter(c.id for side in Side for c in state.player(side).all_cards())
    duplicates = sorted(card_id for card_id, n in ids.items() if n > 1)
    if duplicates:
        violations.append(f"duplicate card ids: {', '.join(duplicates)}")

    if state.pending_attack is not None:
        if state.phase != Phase.COMBAT:
            violations.append("attack pending outside combat")
        elif not 0 <= state.pending_attack < len(state.intruder.field):
            violations.append(f"pending attack index {state.pending_attack} out of range")

    if violations:
        raise StateIntegrityError(violations)
