"""
Game Setup - Creates the initial game state.

This module handles:
- Building the fixed starter decks
- Shuffling with a seed (or a caller-supplied shuffle) for determinism
- Dealing opening hands

The game opens on turn 1 in the Intruder's Draw phase. The opening hands
take the place of that first Draw phase's card.
"""

from __future__ import annotations
from typing import Callable
import random

from ..config import GameConfig, DEFAULT_CONFIG
from ..engine_core.state import (
    Card,
    DefenderCore,
    GameState,
    LogCategory,
    Phase,
    PlayerState,
    Side,
)
from ..engine_core import store
from .cards import intruder_starter_deck, defender_starter_deck, shuffle_deck


def setup_game(
    config: GameConfig = DEFAULT_CONFIG,
    random_seed: int | None = None,
    shuffle: Callable[[list[Card]], list[Card]] | None = None,
    intruder_deck: list[Card] | None = None,
    defender_deck: list[Card] | None = None,
) -> GameState:
    """
    Set up a new game.

    Args:
        config: Game constants (core health, hand sizes, log cap)
        random_seed: Seed for deterministic shuffling
        shuffle: Ordering function used instead of the seeded shuffle
        intruder_deck: Deck to use instead of the Intruder starter deck
        defender_deck: Deck to use instead of the Defender starter deck

    Returns:
        Initial GameState ready for play
    """
    rng = random.Random(random_seed)

    intruder_cards = shuffle_deck(
        intruder_deck if intruder_deck is not None else intruder_starter_deck(),
        rng=rng,
        shuffle=shuffle,
    )
    defender_cards = shuffle_deck(
        defender_deck if defender_deck is not None else defender_starter_deck(),
        rng=rng,
        shuffle=shuffle,
    )

    state = GameState(
        intruder=PlayerState(deck=intruder_cards),
        defender=PlayerState(
            deck=defender_cards,
            core=DefenderCore(max_health=config.core_health, current_health=config.core_health),
        ),
        turn_number=1,
        active_side=Side.INTRUDER,
        phase=Phase.DRAW,
        dealt={Side.INTRUDER: len(intruder_cards), Side.DEFENDER: len(defender_cards)},
        log_cap=config.log_cap,
    )
    state = store.append_log(state, "Game started", LogCategory.GAME, {"seed": random_seed})

    # Opening hands
    state = store.draw_cards(state, Side.INTRUDER, config.intruder_hand_size)
    state = store.draw_cards(state, Side.DEFENDER, config.defender_hand_size)

    store.check_integrity(state)
    return state
