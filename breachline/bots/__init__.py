"""
Bots module - Automa opponent for the Defender side.

Provides:
- OpponentPolicy: Interface for bot decision-making
- HeuristicRule: Named, ordered decision rules
- DefenderBot: Deterministic Defender automa
"""

from .policy import OpponentPolicy, BotDecision
from .rules import HeuristicRule, DEFAULT_RULES
from .defender_bot import DefenderBot

__all__ = [
    "OpponentPolicy",
    "BotDecision",
    "HeuristicRule",
    "DEFAULT_RULES",
    "DefenderBot",
]
