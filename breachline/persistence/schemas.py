"""
Pydantic Schemas for snapshots and save files.

These models define the serialized contract for a GameState. Field
constraints reject obviously broken data (negative counts, empty ids);
from_snapshot() then runs the full integrity check on the rebuilt state.
Nothing is normalised: a bad snapshot fails rather than being repaired.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.errors import StateIntegrityError
from ..engine_core.state import (
    BarrierType,
    Card,
    CardCategory,
    DefenderCore,
    GameState,
    LogCategory,
    LogEntry,
    Phase,
    PlayerState,
    Side,
    UnitType,
)
from ..engine_core import store


# =============================================================================
# State Models
# =============================================================================

class CardModel(BaseModel):
    """A card instance."""
    id: str = Field(min_length=1)
    name: str
    category: CardCategory
    cost: int = Field(ge=0)
    power: Optional[int] = Field(None, ge=0)
    toughness: Optional[int] = Field(None, ge=0)
    subtype: Optional[str] = Field(None, description="fracter, killer, decoder, barrier, sentry, code_gate")
    art: list[str] = Field(default_factory=list)
    flavor_text: str = ""


class CoreModel(BaseModel):
    """The Defender's core."""
    max_health: int = Field(ge=1)
    current_health: int = Field(ge=0)

    model_config = {"from_attributes": True}


class PlayerStateModel(BaseModel):
    """One side's zones and resources."""
    deck: list[CardModel] = Field(default_factory=list)
    hand: list[CardModel] = Field(default_factory=list)
    field: list[CardModel] = Field(default_factory=list)
    resource_available: int = Field(0, ge=0)
    resource_total: int = Field(0, ge=0)
    core: Optional[CoreModel] = None


class LogEntryModel(BaseModel):
    """An event log entry."""
    timestamp: str
    message: str
    category: LogCategory
    metadata: Optional[dict[str, Any]] = None

    model_config = {"from_attributes": True}


class GameStateModel(BaseModel):
    """Complete serialized game state."""
    intruder: PlayerStateModel
    defender: PlayerStateModel
    turn_number: int = Field(ge=1)
    active_side: Side
    phase: Phase
    log: list[LogEntryModel] = Field(default_factory=list)
    is_over: bool = False
    winner: Optional[Side] = None
    pending_attack: Optional[int] = Field(None, ge=0)
    dealt: dict[Side, int] = Field(default_factory=dict)
    log_cap: int = Field(200, ge=1)


# =============================================================================
# Save File Models
# =============================================================================

class SaveMetadata(BaseModel):
    """Header of a save file."""
    version: str
    timestamp: str
    turn_number: int
    description: str = ""


class SaveFile(BaseModel):
    """A save file on disk."""
    metadata: SaveMetadata
    game_state: GameStateModel


class SaveSummary(BaseModel):
    """One entry in a save listing."""
    filename: str
    metadata: Optional[SaveMetadata] = None
    corrupted: bool = False


# =============================================================================
# Conversion
# =============================================================================

def _card_to_model(card: Card) -> CardModel:
    return CardModel(
        id=card.id,
        name=card.name,
        category=card.category,
        cost=card.cost,
        power=card.power,
        toughness=card.toughness,
        subtype=card.subtype.value if card.subtype is not None else None,
        art=list(card.art),
        flavor_text=card.flavor_text,
    )


def _player_to_model(player: PlayerState) -> PlayerStateModel:
    return PlayerStateModel(
        deck=[_card_to_model(c) for c in player.deck],
        hand=[_card_to_model(c) for c in player.hand],
        field=[_card_to_model(c) for c in player.field],
        resource_available=player.resource_available,
        resource_total=player.resource_total,
        core=CoreModel.model_validate(player.core) if player.core is not None else None,
    )


def to_snapshot(state: GameState) -> GameStateModel:
    """Serialize a GameState into its pydantic model."""
    return GameStateModel(
        intruder=_player_to_model(state.intruder),
        defender=_player_to_model(state.defender),
        turn_number=state.turn_number,
        active_side=state.active_side,
        phase=state.phase,
        log=[LogEntryModel.model_validate(e) for e in state.log],
        is_over=state.is_over,
        winner=state.winner,
        pending_attack=state.pending_attack,
        dealt=dict(state.dealt),
        log_cap=state.log_cap,
    )


def _subtype_from(category: CardCategory, value: str | None) -> UnitType | BarrierType | None:
    if value is None:
        return None
    if category == CardCategory.UNIT:
        return UnitType(value)
    if category == CardCategory.BARRIER:
        return BarrierType(value)
    raise ValueError(f"{category.value} cards have no subtype")


def _card_from_model(model: CardModel) -> Card:
    return Card(
        id=model.id,
        name=model.name,
        category=model.category,
        cost=model.cost,
        power=model.power,
        toughness=model.toughness,
        subtype=_subtype_from(model.category, model.subtype),
        art=tuple(model.art),
        flavor_text=model.flavor_text,
    )


def _player_from_model(model: PlayerStateModel) -> PlayerState:
    core = None
    if model.core is not None:
        core = DefenderCore(max_health=model.core.max_health, current_health=model.core.current_health)
    return PlayerState(
        deck=[_card_from_model(c) for c in model.deck],
        hand=[_card_from_model(c) for c in model.hand],
        field=[_card_from_model(c) for c in model.field],
        resource_available=model.resource_available,
        resource_total=model.resource_total,
        core=core,
    )


def from_snapshot(model: GameStateModel) -> GameState:
    """
    Rebuild a GameState from its model.

    Raises StateIntegrityError if the cards are malformed or the rebuilt
    state violates any invariant.
    """
    try:
        intruder = _player_from_model(model.intruder)
        defender = _player_from_model(model.defender)
    except ValueError as e:
        raise StateIntegrityError([str(e)]) from e

    state = GameState(
        intruder=intruder,
        defender=defender,
        turn_number=model.turn_number,
        active_side=model.active_side,
        phase=model.phase,
        log=[
            LogEntry(timestamp=e.timestamp, message=e.message, category=e.category, metadata=e.metadata)
            for e in model.log
        ],
        is_over=model.is_over,
        winner=model.winner,
        pending_attack=model.pending_attack,
        dealt=dict(model.dealt),
        log_cap=model.log_cap,
    )
    store.check_integrity(state)
    return state
