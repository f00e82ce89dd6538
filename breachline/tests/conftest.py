"""
Pytest fixtures for Breachline tests.
"""

import itertools

import pytest

from ..config import GameConfig
from ..engine_core.state import (
    BarrierType,
    Card,
    CardCategory,
    DefenderCore,
    GameState,
    Phase,
    PlayerState,
    Side,
    UnitType,
)
from ..game import setup_game

_ids = itertools.count(1)


def make_resource() -> Card:
    return Card(id=f"res_{next(_ids)}", name="NPU", category=CardCategory.RESOURCE, cost=0)


def make_unit(power: int = 1, toughness: int = 2, subtype=UnitType.FRACTER, cost: int = 1) -> Card:
    return Card(
        id=f"unit_{next(_ids)}",
        name=subtype.value.capitalize(),
        category=CardCategory.UNIT,
        cost=cost,
        power=power,
        toughness=toughness,
        subtype=subtype,
    )


def make_barrier(power: int = 1, toughness: int = 1, subtype=BarrierType.BARRIER, cost: int = 1) -> Card:
    return Card(
        id=f"ice_{next(_ids)}",
        name=subtype.value.capitalize(),
        category=CardCategory.BARRIER,
        cost=cost,
        power=power,
        toughness=toughness,
        subtype=subtype,
    )


def build_state(
    *,
    intruder_deck=None,
    intruder_hand=None,
    intruder_field=None,
    defender_deck=None,
    defender_hand=None,
    defender_field=None,
    intruder_resources: tuple[int, int] = (0, 0),
    defender_resources: tuple[int, int] = (0, 0),
    phase: Phase = Phase.MAIN,
    active_side: Side = Side.INTRUDER,
    core_health: int = 10,
    turn_number: int = 1,
) -> GameState:
    """
    Hand-built state for focused tests.

    Decks default to a few resources so nobody is exhausted by accident.
    """
    return GameState(
        intruder=PlayerState(
            deck=list(intruder_deck) if intruder_deck is not None else [make_resource() for _ in range(3)],
            hand=list(intruder_hand or []),
            field=list(intruder_field or []),
            resource_available=intruder_resources[0],
            resource_total=intruder_resources[1],
        ),
        defender=PlayerState(
            deck=list(defender_deck) if defender_deck is not None else [make_resource() for _ in range(3)],
            hand=list(defender_hand or []),
            field=list(defender_field or []),
            resource_available=defender_resources[0],
            resource_total=defender_resources[1],
            core=DefenderCore(max_health=10, current_health=core_health),
        ),
        turn_number=turn_number,
        active_side=active_side,
        phase=phase,
    )


def reverse_order(deck):
    """Shuffle stand-in: puts the non-resource cards on top."""
    return deck[::-1]


@pytest.fixture
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture
def new_game(config) -> GameState:
    """A seeded new game."""
    return setup_game(config, random_seed=1234)


@pytest.fixture
def ordered_game(config) -> GameState:
    """
    A new game with known hands.

    Intruder hand: 3 Fracters then 4 NPU.
    Defender hand: 3 Barriers then 1 NPU.
    """
    return setup_game(config, shuffle=reverse_order)


@pytest.fixture
def combat_state() -> GameState:
    """Intruder combat with one Fracter facing one Barrier."""
    return build_state(
        intruder_field=[make_resource(), make_unit()],
        defender_field=[make_barrier()],
        phase=Phase.COMBAT,
    )
