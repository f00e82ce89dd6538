"""
Game content - The fixed card vocabulary, starter decks and game setup.
"""

from .cards import (
    CardTemplate,
    CATALOG,
    RESOURCE_NODE,
    FRACTER,
    BARRIER,
    build_deck,
    intruder_starter_deck,
    defender_starter_deck,
    shuffle_deck,
)
from .setup import setup_game

__all__ = [
    "CardTemplate",
    "CATALOG",
    "RESOURCE_NODE",
    "FRACTER",
    "BARRIER",
    "build_deck",
    "intruder_starter_deck",
    "defender_starter_deck",
    "shuffle_deck",
    "setup_game",
]
