"""
Game State - The single authoritative state container.

Design principles:
- Immutable-friendly: every operation derives a new state from the old one
- Serializable: snapshots can be saved/loaded for replays
- Side-symmetric: both sides share PlayerState; only the Defender has a core
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from copy import deepcopy

from .errors import StateIntegrityError


class Side(Enum):
    """The two sides of the table."""
    INTRUDER = "intruder"
    DEFENDER = "defender"

    @property
    def opponent(self) -> Side:
        return Side.DEFENDER if self is Side.INTRUDER else Side.INTRUDER

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Phase(Enum):
    """Turn phases. Combat only happens on the Intruder's turn."""
    DRAW = "draw"
    RESOURCE = "resource"
    MAIN = "main"
    COMBAT = "combat"


class CardCategory(Enum):
    """Card categories."""
    RESOURCE = "resource"
    UNIT = "unit"  # Intruder only
    BARRIER = "barrier"  # Defender only


class UnitType(Enum):
    """Unit subtypes."""
    FRACTER = "fracter"
    KILLER = "killer"
    DECODER = "decoder"


class BarrierType(Enum):
    """Barrier subtypes."""
    BARRIER = "barrier"
    SENTRY = "sentry"
    CODE_GATE = "code_gate"


class LogCategory(Enum):
    """Event log categories (used for filtering and display)."""
    GAME = "game"
    COMBAT = "combat"
    CARD = "card"
    PHASE = "phase"


# Which field category each side may install
INSTALLABLE_CATEGORY: dict[Side, CardCategory] = {
    Side.INTRUDER: CardCategory.UNIT,
    Side.DEFENDER: CardCategory.BARRIER,
}


@dataclass(frozen=True)
class Card:
    """
    A card instance.

    Cards are created once when decks are built. The id is unique across
    the whole game and never changes when the card moves between zones.
    """
    id: str
    name: str
    category: CardCategory
    cost: int
    power: int | None = None
    toughness: int | None = None
    subtype: UnitType | BarrierType | None = None
    art: tuple[str, ...] = ()
    flavor_text: str = ""

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError(f"Card {self.name} has negative cost")
        has_stats = self.power is not None and self.toughness is not None
        if self.category == CardCategory.RESOURCE and (
            self.power is not None or self.toughness is not None
        ):
            raise ValueError(f"Resource card {self.name} cannot carry power/toughness")
        if self.category != CardCategory.RESOURCE and not has_stats:
            raise ValueError(f"{self.category.value} card {self.name} needs power and toughness")

    @property
    def is_resource(self) -> bool:
        return self.category == CardCategory.RESOURCE

    @property
    def is_unit(self) -> bool:
        return self.category == CardCategory.UNIT

    @property
    def is_barrier(self) -> bool:
        return self.category == CardCategory.BARRIER


@dataclass(frozen=True)
class LogEntry:
    """An event log entry. Entries are never edited once appended."""
    timestamp: str
    message: str
    category: LogCategory
    metadata: dict[str, Any] | None = None

    @classmethod
    def create(
        cls,
        message: str,
        category: LogCategory,
        metadata: dict[str, Any] | None = None,
    ) -> LogEntry:
        """Create an entry stamped with the current UTC time."""
        return cls(
            timestamp=datetime.now(tz=timezone.utc).isoformat(),
            message=message,
            category=category,
            metadata=metadata,
        )


@dataclass(frozen=True)
class DefenderCore:
    """The Defender's health pool."""
    max_health: int
    current_health: int

    @property
    def is_destroyed(self) -> bool:
        return self.current_health == 0

    def with_health(self, value: int) -> DefenderCore:
        return DefenderCore(max_health=self.max_health, current_health=value)


@dataclass
class PlayerState:
    """
    State for one side.

    deck[0] is the next card drawn. Field order is installation order and
    is significant: the oldest card sits at index 0.
    """
    deck: list[Card] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    field: list[Card] = field(default_factory=list)
    resource_available: int = 0
    resource_total: int = 0

    # Defender only
    core: DefenderCore | None = None

    def all_cards(self) -> list[Card]:
        """Every card this side holds, in deck/hand/field order."""
        return self.deck + self.hand + self.field

    @property
    def card_count(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.field)

    def _copy_with(self, **kwargs) -> PlayerState:
        """Create a copy with some fields replaced."""
        return PlayerState(
            deck=kwargs.get("deck", self.deck),
            hand=kwargs.get("hand", self.hand),
            field=kwargs.get("field", self.field),
            resource_available=kwargs.get("resource_available", self.resource_available),
            resource_total=kwargs.get("resource_total", self.resource_total),
            core=kwargs.get("core", self.core),
        )


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    All state changes go through the store operations, which return new
    GameState objects and leave the one they were given untouched.
    """
    intruder: PlayerState
    defender: PlayerState

    turn_number: int = 1
    active_side: Side = Side.INTRUDER
    phase: Phase = Phase.DRAW

    log: list[LogEntry] = field(default_factory=list)

    is_over: bool = False
    winner: Side | None = None

    # Field index of the Intruder unit whose attack awaits a block decision
    pending_attack: int | None = None

    # Cards dealt to each side at setup (for conservation checks)
    dealt: dict[Side, int] = field(default_factory=dict)

    # Event log retention cap
    log_cap: int = 200

    @property
    def core(self) -> DefenderCore:
        """The Defender's core."""
        if self.defender.core is None:
            raise StateIntegrityError(["defender core missing"])
        return self.defender.core

    @property
    def active_player(self) -> PlayerState:
        return self.player(self.active_side)

    def player(self, side: Side) -> PlayerState:
        """Get the state for a side."""
        return self.intruder if side is Side.INTRUDER else self.defender

    def with_player(self, side: Side, player: PlayerState) -> GameState:
        """Return new state with one side replaced."""
        if side is Side.INTRUDER:
            return self._copy_with(intruder=player)
        return self._copy_with(defender=player)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            intruder=kwargs.get("intruder", self.intruder),
            defender=kwargs.get("defender", self.defender),
            turn_number=kwargs.get("turn_number", self.turn_number),
            active_side=kwargs.get("active_side", self.active_side),
            phase=kwargs.get("phase", self.phase),
            log=kwargs.get("log", self.log),
            is_over=kwargs.get("is_over", self.is_over),
            winner=kwargs.get("winner", self.winner),
            pending_attack=kwargs.get("pending_attack", self.pending_attack),
            dealt=kwargs.get("dealt", self.dealt),
            log_cap=kwargs.get("log_cap", self.log_cap),
        )

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
