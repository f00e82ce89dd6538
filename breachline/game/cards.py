"""
Card Catalog - Card definitions and starter deck construction.

Card structure:
- Category (resource, unit, barrier)
- Cost, and power/toughness for units and barriers
- Subtype (Fracter for units, Barrier for barriers in the starter set)
- Art lines and flavor text for the renderer

Every factory call produces a card with a freshly generated id.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import random
import uuid

from ..engine_core.state import Card, CardCategory, UnitType, BarrierType


@dataclass(frozen=True)
class CardTemplate:
    """Static definition that card instances are stamped from."""
    key: str
    name: str
    category: CardCategory
    cost: int
    power: int | None = None
    toughness: int | None = None
    subtype: UnitType | BarrierType | None = None
    art: tuple[str, ...] = ()
    flavor_text: str = ""

    def instantiate(self) -> Card:
        """Create a new card instance with a unique id."""
        return Card(
            id=f"{self.key}_{uuid.uuid4().hex[:12]}",
            name=self.name,
            category=self.category,
            cost=self.cost,
            power=self.power,
            toughness=self.toughness,
            subtype=self.subtype,
            art=self.art,
            flavor_text=self.flavor_text,
        )


RESOURCE_NODE = CardTemplate(
    key="npu",
    name="NPU",
    category=CardCategory.RESOURCE,
    cost=0,
    art=(
        "  ___[]___  ",
        " |__   __| ",
        "    | |    ",
        "    |_|    ",
    ),
    flavor_text="Neural processing unit. The backbone of any rig.",
)

FRACTER = CardTemplate(
    key="fracter",
    name="Fracter",
    category=CardCategory.UNIT,
    cost=1,
    power=1,
    toughness=2,
    subtype=UnitType.FRACTER,
    art=(
        "  /\\      ",
        " /  \\     ",
        "/____\\    ",
        "|    |    ",
    ),
    flavor_text="Breaking through barriers with digital force.",
)

BARRIER = CardTemplate(
    key="barrier",
    name="Barrier",
    category=CardCategory.BARRIER,
    cost=1,
    power=1,
    toughness=1,
    subtype=BarrierType.BARRIER,
    art=(
        " ######    ",
        " #    #    ",
        " #    #    ",
        " ######    ",
    ),
    flavor_text="A wall between you and what you want.",
)

CATALOG: dict[str, CardTemplate] = {
    t.key: t for t in (RESOURCE_NODE, FRACTER, BARRIER)
}

# Fixed starter compositions: template key -> count
INTRUDER_STARTER: tuple[tuple[str, int], ...] = (("npu", 10), ("fracter", 3))
DEFENDER_STARTER: tuple[tuple[str, int], ...] = (("npu", 5), ("barrier", 3))


def get_template(key: str) -> CardTemplate:
    """Look up a template by key."""
    try:
        return CATALOG[key]
    except KeyError:
        raise ValueError(f"Unknown card template: {key}") from None


def build_deck(composition: tuple[tuple[str, int], ...]) -> list[Card]:
    """Build an unshuffled deck from (template key, count) pairs."""
    deck: list[Card] = []
    for key, count in composition:
        template = get_template(key)
        deck.extend(template.instantiate() for _ in range(count))
    return deck


def intruder_starter_deck() -> list[Card]:
    """10 resources followed by 3 Fracters."""
    return build_deck(INTRUDER_STARTER)


def defender_starter_deck() -> list[Card]:
    """5 resources followed by 3 Barriers."""
    return build_deck(DEFENDER_STARTER)


def shuffle_deck(
    deck: list[Card],
    rng: random.Random | None = None,
    shuffle: Callable[[list[Card]], list[Card]] | None = None,
) -> list[Card]:
    """
    Return a shuffled copy of the deck.

    Args:
        deck: Cards to shuffle (not modified)
        rng: Random source for the default shuffle (seed it for determinism)
        shuffle: Caller-supplied ordering function; replaces the default

    Returns:
        A new list
    """
    if shuffle is not None:
        return list(shuffle(list(deck)))
    shuffled = list(deck)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled
