"""
Game Loop - The driver between the human side and the bot.

The loop:
1. Human submits an action
2. Engine validates and applies it
3. After an attack, the bot decides the block immediately
4. When control passes to the bot, it plays its whole turn
5. Result lists what changed, what the bot did, and any errors
6. Repeat

Recoverable errors are reported in the result; integrity errors propagate.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum

from ..bots.defender_bot import DefenderBot
from ..bots.policy import OpponentPolicy
from ..engine_core.action import Action, ActionKind, ActionResult
from ..engine_core.errors import CombatError, ValidationError
from ..engine_core.processor import ActionProcessor
from ..engine_core.state import GameState, Side
from ..persistence.save_system import SaveError, SaveSystem
from .help import help_lines

logger = logging.getLogger(__name__)

# A bot turn never needs more actions than this
MAX_BOT_STEPS = 100


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN_ACTION = "waiting_human_action"
    RUNNING_BOT = "running_bot"
    GAME_OVER = "game_over"
    QUIT = "quit"


@dataclass
class TurnResult:
    """
    Result of processing one human action.

    Contains the log messages the action produced, the bot's actions,
    and any messages for the player (help text, save file name).
    """
    success: bool
    loop_state: LoopState

    # Event log messages produced, in order
    state_changes: list[str] = field(default_factory=list)

    # Bot actions taken
    bot_actions: list[str] = field(default_factory=list)

    # Help text, save confirmations
    messages: list[str] = field(default_factory=list)

    # Errors (recoverable, re-prompt)
    errors: list[str] = field(default_factory=list)

    # Game over info
    winner: Side | None = None


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(setup_game(random_seed=7))
        result = loop.submit(Action.end_phase(Side.INTRUDER))
        if result.errors:
            # show errors, ask again
            ...
    """

    def __init__(
        self,
        state: GameState,
        human_side: Side = Side.INTRUDER,
        bot: OpponentPolicy | None = None,
        save_system: SaveSystem | None = None,
    ):
        if human_side is not Side.INTRUDER:
            raise ValueError("The bot plays the Defender, so the human side must be the Intruder")
        self.state = state
        self.human_side = human_side
        self.bot_side = human_side.opponent
        self.bot = bot if bot is not None else DefenderBot()
        self.save_system = save_system
        self.processor = ActionProcessor()
        self.loop_state = LoopState.GAME_OVER if state.is_over else LoopState.WAITING_HUMAN_ACTION

    def _result(self, success: bool, **kwargs) -> TurnResult:
        if self.state.is_over and self.loop_state != LoopState.QUIT:
            self.loop_state = LoopState.GAME_OVER
        return TurnResult(
            success=success,
            loop_state=self.loop_state,
            winner=self.state.winner,
            **kwargs,
        )

    def submit(self, action: Action) -> TurnResult:
        """
        Apply a human action, then let the bot respond.

        Steps:
        1. Validate and apply the action
        2. Handle meta actions (help, save, load, quit)
        3. After an attack, resolve the bot's block decision
        4. Run the bot's turn if control passed to it
        """
        try:
            result = self.processor.apply(self.state, action)
        except (ValidationError, CombatError) as e:
            return self._result(False, errors=[e.message])

        if result.meta is not None:
            return self._handle_meta(result)

        self.state = result.new_state
        changes = list(result.state_changes)
        bot_actions: list[str] = []

        if action.kind == ActionKind.ATTACK and not self.state.is_over:
            try:
                changes.extend(self._resolve_block(bot_actions))
            except (ValidationError, CombatError) as e:
                logger.error("Bot block failed: %s", e.message)
                return self._result(False, state_changes=changes, errors=[e.message])

        bot_turn = self.run_bot_turn()
        return self._result(
            not bot_turn.errors,
            state_changes=changes + bot_turn.state_changes,
            bot_actions=bot_actions + bot_turn.bot_actions,
            errors=bot_turn.errors,
        )

    def _resolve_block(self, bot_actions: list[str]) -> list[str]:
        """Ask the bot how to answer the pending attack and apply its answer."""
        decision = self.bot.decide(self.state)
        block = decision.action
        if block is None:
            # No decision: the attack goes through unblocked
            block = Action.block(self.state.pending_attack, None)
        result = self.processor.apply(self.state, block)
        self.state = result.new_state
        bot_actions.append(block.describe())
        return result.state_changes

    def run_bot_turn(self) -> TurnResult:
        """
        Run bot actions while the bot side is active.

        Stops when control returns to the human, the game ends, or the bot
        has nothing to do.
        """
        changes: list[str] = []
        actions: list[str] = []

        self.loop_state = LoopState.RUNNING_BOT
        for _ in range(MAX_BOT_STEPS):
            if self.state.is_over or self.state.active_side is not self.bot_side:
                break
            decision = self.bot.decide(self.state)
            if decision.action is None:
                break
            try:
                result: ActionResult = self.processor.apply(self.state, decision.action)
            except (ValidationError, CombatError) as e:
                # A legal policy never gets here
                logger.error("Bot action %s rejected: %s", decision.action.describe(), e.message)
                self.loop_state = LoopState.WAITING_HUMAN_ACTION
                return self._result(False, state_changes=changes, bot_actions=actions, errors=[e.message])
            self.state = result.new_state
            changes.extend(result.state_changes)
            actions.append(f"{decision.action.describe()} ({decision.rule})")
        else:
            logger.warning("Bot turn stopped after %d steps", MAX_BOT_STEPS)

        self.loop_state = LoopState.WAITING_HUMAN_ACTION
        return self._result(True, state_changes=changes, bot_actions=actions)

    def _handle_meta(self, result: ActionResult) -> TurnResult:
        params = result.action.payload.params if result.action is not None else {}

        if result.meta == ActionKind.HELP:
            return self._result(True, messages=help_lines(self.state.phase))

        if result.meta == ActionKind.QUIT:
            self.loop_state = LoopState.QUIT
            return self._result(True, messages=["Goodbye."])

        if self.save_system is None:
            return self._result(False, errors=["Saving and loading are not available"])

        try:
            if result.meta == ActionKind.SAVE:
                filename = self.save_system.save_game(
                    self.state, params.get("description", "Manual save")
                )
                return self._result(True, messages=[f"Game saved to {filename}"])

            filename = params.get("filename")
            if not filename:
                return self._result(False, errors=["No save file given"])
            self.state = self.save_system.load_game(filename)
        except SaveError as e:
            return self._result(False, errors=[e.message])

        self.loop_state = LoopState.WAITING_HUMAN_ACTION
        bot_turn = self.run_bot_turn()
        return self._result(
            not bot_turn.errors,
            messages=[f"Loaded {filename} (turn {self.state.turn_number})"],
            state_changes=bot_turn.state_changes,
            bot_actions=bot_turn.bot_actions,
            errors=bot_turn.errors,
        )
