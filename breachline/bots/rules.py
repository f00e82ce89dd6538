"""
Defender heuristics - ordered, named rules.

Each rule looks at the state and either returns an Action or None
("does not apply"). The first rule that returns an action wins. A rule
can also stop evaluation without acting by returning STOP.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Union

from ..engine_core.action import Action
from ..engine_core.combat import can_block
from ..engine_core.state import CardCategory, GameState, Phase, Side


class _Stop:
    """Sentinel: the bot passes and no later rule is consulted."""

    def __repr__(self) -> str:
        return "STOP"


STOP = _Stop()

RuleOutcome = Union[Action, _Stop, None]


@dataclass(frozen=True)
class HeuristicRule:
    """A named decision rule."""
    name: str
    apply: Callable[[GameState], RuleOutcome]
    description: str = ""


def _own_turn(state: GameState) -> bool:
    return state.active_side is Side.DEFENDER


def not_my_turn(state: GameState) -> RuleOutcome:
    if not _own_turn(state) and state.phase != Phase.COMBAT:
        return STOP
    return None


def block_with_oldest_barrier(state: GameState) -> RuleOutcome:
    if _own_turn(state) or state.phase != Phase.COMBAT:
        return None
    if state.pending_attack is None:
        return STOP
    for index in range(len(state.defender.field)):
        if can_block(state, index):
            return Action.block(state.pending_attack, index)
    # No legal blocker, the attack goes through
    return STOP


def skip_automatic_phase(state: GameState) -> RuleOutcome:
    if _own_turn(state) and state.phase in (Phase.DRAW, Phase.RESOURCE):
        return Action.end_phase(Side.DEFENDER)
    return None


def _first_affordable(state: GameState, category: CardCategory) -> int | None:
    defender = state.defender
    for index, card in enumerate(defender.hand):
        if card.category == category and card.cost <= defender.resource_available:
            return index
    return None


def play_resource(state: GameState) -> RuleOutcome:
    if not (_own_turn(state) and state.phase == Phase.MAIN):
        return None
    index = _first_affordable(state, CardCategory.RESOURCE)
    if index is None:
        return None
    return Action.play_resource(Side.DEFENDER, index)


def install_barrier(state: GameState) -> RuleOutcome:
    if not (_own_turn(state) and state.phase == Phase.MAIN):
        return None
    index = _first_affordable(state, CardCategory.BARRIER)
    if index is None:
        return None
    return Action.play_card(Side.DEFENDER, index)


def end_main(state: GameState) -> RuleOutcome:
    if _own_turn(state) and state.phase == Phase.MAIN:
        return Action.end_phase(Side.DEFENDER)
    return None


DEFAULT_RULES: tuple[HeuristicRule, ...] = (
    HeuristicRule("not_my_turn", not_my_turn, "Pass outside own turn, except during combat"),
    HeuristicRule("block_with_oldest_barrier", block_with_oldest_barrier, "Block with the first legal Barrier"),
    HeuristicRule("skip_automatic_phase", skip_automatic_phase, "End Draw and Resource phases"),
    HeuristicRule("play_resource", play_resource, "Play the first Resource in hand"),
    HeuristicRule("install_barrier", install_barrier, "Install the first affordable Barrier"),
    HeuristicRule("end_main", end_main, "End Main when nothing else applies"),
)
