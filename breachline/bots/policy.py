"""
Opponent Policy - Interface for bot decision-making.

An OpponentPolicy takes a game state and returns a decision.
Decisions include:
- Which action to take (or None to pass control back)
- Which heuristic rule produced it
- A short explanation for the game log / UI
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    action is None when the bot has nothing to do: not its turn, or no
    legal block during the opponent's combat.
    """
    action: Action | None
    rule: str = ""
    explanation: str = ""

    @property
    def passes(self) -> bool:
        return self.action is None


class OpponentPolicy(ABC):
    """
    Abstract base class for opponent policies.

    A policy must be a pure function of the state it is shown: the same
    state always yields the same action.
    """

    @abstractmethod
    def decide(self, state: GameState) -> BotDecision:
        """
        Decide what to do in the given state.

        Args:
            state: Current game state

        Returns:
            BotDecision with the selected action (or None)
        """
        pass

    def next_action(self, state: GameState) -> Action | None:
        """The action from decide(), without the explanation."""
        return self.decide(state).action

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__
