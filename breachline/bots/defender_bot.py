"""
Defender Bot - Rule-driven automa for the Defender side.

The bot:
- Walks a fixed, ordered list of heuristic rules
- Returns the first action a rule produces
- Keeps no memory between calls (same state, same action)

It never attacks and never uses the Barrier repair ability.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .policy import OpponentPolicy, BotDecision
from .rules import DEFAULT_RULES, HeuristicRule, STOP
from ..engine_core.state import GameState, Side

logger = logging.getLogger(__name__)


@dataclass
class DefenderBot(OpponentPolicy):
    """
    Deterministic Defender policy.

    Usage:
        bot = DefenderBot()
        action = bot.next_action(state)  # None when the bot has nothing to do
    """
    rules: tuple[HeuristicRule, ...] = DEFAULT_RULES

    def decide(self, state: GameState) -> BotDecision:
        if state.is_over:
            return BotDecision(action=None, rule="game_over", explanation="Game is over")

        for rule in self.rules:
            outcome = rule.apply(state)
            if outcome is None:
                continue
            if outcome is STOP:
                logger.debug("Bot passes (%s)", rule.name)
                return BotDecision(action=None, rule=rule.name, explanation=rule.description)
            logger.debug("Bot chose %s (%s)", outcome.describe(), rule.name)
            return BotDecision(action=outcome, rule=rule.name, explanation=rule.description)

        return BotDecision(action=None, rule="no_rule", explanation="No rule applied")

    @staticmethod
    def placement_index(state: GameState) -> int:
        """Field position a newly installed Defender card will take (always the tail)."""
        return len(state.player(Side.DEFENDER).field)
