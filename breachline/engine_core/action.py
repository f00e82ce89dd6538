"""
Action System - Actions, payloads, and results.

Actions represent:
1. Game actions (play a card, attack, block, use an ability, end a phase)
2. Meta actions (help, save, load, quit) that never touch game state

Both the interactive side and the opponent policy produce the same
Action objects, and all state changes flow through the action processor.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Side


class ActionKind(Enum):
    """Kinds of actions."""
    PLAY_RESOURCE = "play_resource"
    PLAY_CARD = "play_card"
    ATTACK = "attack"
    BLOCK = "block"
    USE_ABILITY = "use_ability"
    END_PHASE = "end_phase"

    # Meta actions
    HELP = "help"
    SAVE = "save"
    LOAD = "load"
    QUIT = "quit"

    @property
    def is_meta(self) -> bool:
        return self in META_ACTIONS


META_ACTIONS = frozenset({ActionKind.HELP, ActionKind.SAVE, ActionKind.LOAD, ActionKind.QUIT})


@dataclass(frozen=True)
class ActionPayload:
    """
    Parameters for an action.

    card_index: position in the acting side's hand
    field_index: position of the acting card on the field (attacker, ability user)
    blocker_index: position of the blocking Barrier, None for no block
    """
    card_index: int | None = None
    field_index: int | None = None
    blocker_index: int | None = None

    # Meta action parameters (save description, load file name)
    params: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class Action:
    """A complete action, tagged with the side that issued it."""
    kind: ActionKind
    side: Side
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def play_resource(cls, side: Side, card_index: int) -> Action:
        return cls(ActionKind.PLAY_RESOURCE, side, ActionPayload(card_index=card_index))

    @classmethod
    def play_card(cls, side: Side, card_index: int) -> Action:
        return cls(ActionKind.PLAY_CARD, side, ActionPayload(card_index=card_index))

    @classmethod
    def attack(cls, field_index: int) -> Action:
        """Factory for an Intruder attack declaration."""
        return cls(ActionKind.ATTACK, Side.INTRUDER, ActionPayload(field_index=field_index))

    @classmethod
    def block(cls, attacker_index: int, blocker_index: int | None) -> Action:
        """Factory for a Defender block decision. blocker_index=None lets the attack through."""
        return cls(
            ActionKind.BLOCK,
            Side.DEFENDER,
            ActionPayload(field_index=attacker_index, blocker_index=blocker_index),
        )

    @classmethod
    def use_ability(cls, field_index: int) -> Action:
        """Factory for the Defender's Barrier repair ability."""
        return cls(ActionKind.USE_ABILITY, Side.DEFENDER, ActionPayload(field_index=field_index))

    @classmethod
    def end_phase(cls, side: Side) -> Action:
        return cls(ActionKind.END_PHASE, side)

    @classmethod
    def meta(cls, kind: ActionKind, side: Side, **params: Any) -> Action:
        """Factory for help/save/load/quit."""
        if not kind.is_meta:
            raise ValueError(f"{kind.value} is not a meta action")
        return cls(kind, side, ActionPayload(params=dict(params)))

    def describe(self) -> str:
        """Short human-readable form, for logs and prompts."""
        parts = [f"{self.side.label} {self.kind.value}"]
        if self.payload.card_index is not None:
            parts.append(f"card={self.payload.card_index}")
        if self.payload.field_index is not None:
            parts.append(f"field={self.payload.field_index}")
        if self.kind == ActionKind.BLOCK:
            parts.append(f"blocker={self.payload.blocker_index}")
        return " ".join(parts)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Failures are raised as exceptions, so a result always describes an
    accepted action. Meta actions return the state unchanged and say what
    the caller is expected to do through `meta`.
    """
    new_state: Any  # GameState
    action: Action | None = None

    # For UI/presentation
    state_changes: list[str] = field(default_factory=list)

    # Meta handling for the driver
    meta: ActionKind | None = None
    quit_requested: bool = False

    @classmethod
    def with_state(
        cls,
        state: Any,
        action: Action,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a result carrying a new state."""
        return cls(new_state=state, action=action, state_changes=changes or [])
