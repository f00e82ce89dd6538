"""
Breachline CLI - Command-line interface for the game.

Usage:
    breachline play [--seed N] [--save-dir DIR]   Play as the Intruder against the Defender bot
    breachline saves [--save-dir DIR]             List save files
"""

import argparse
import logging
import sys

from .config import GameConfig
from .engine_core.action import Action, ActionKind
from .engine_core.state import GameState, Phase, Side


class CommandError(ValueError):
    """Input line could not be turned into an action."""


def parse_command(line: str, side: Side) -> Action:
    """
    Turn one input line into an Action.

    Raises CommandError for unknown commands or a missing/bad number.
    """
    parts = line.strip().split()
    if not parts:
        raise CommandError("Enter a command (h for help)")
    cmd, args = parts[0].lower(), parts[1:]

    if cmd == "e":
        return Action.end_phase(side)
    if cmd == "h":
        return Action.meta(ActionKind.HELP, side)
    if cmd == "q":
        return Action.meta(ActionKind.QUIT, side)
    if cmd == "s":
        description = " ".join(args) if args else "Manual save"
        return Action.meta(ActionKind.SAVE, side, description=description)
    if cmd == "l":
        if not args:
            raise CommandError("Usage: l FILE")
        return Action.meta(ActionKind.LOAD, side, filename=args[0])

    if cmd not in ("r", "p", "a", "u"):
        raise CommandError(f"Unknown command: {cmd}")
    if len(args) != 1 or not args[0].isdigit():
        raise CommandError(f"Usage: {cmd} N")
    index = int(args[0])

    if cmd == "r":
        return Action.play_resource(side, index)
    if cmd == "p":
        return Action.play_card(side, index)
    if cmd == "a":
        return Action.attack(index)
    return Action.use_ability(index)


def _format_card_list(cards) -> str:
    if not cards:
        return "(empty)"
    parts = []
    for i, card in enumerate(cards):
        stats = "" if card.is_resource else f" {card.power}/{card.toughness}"
        parts.append(f"[{i}] {card.name}{stats} (cost {card.cost})")
    return ", ".join(parts)


def render_state(state: GameState) -> list[str]:
    """Plain text view of the table."""
    core = state.core
    lines = [
        f"Turn {state.turn_number} - {state.active_side.label} {state.phase.value} phase",
        f"Core: {core.current_health}/{core.max_health}",
    ]
    for side in Side:
        player = state.player(side)
        lines.append(
            f"{side.label}: deck {len(player.deck)}, "
            f"resources {player.resource_available}/{player.resource_total}"
        )
        lines.append(f"  field: {_format_card_list(player.field)}")
    lines.append(f"Your hand: {_format_card_list(state.intruder.hand)}")
    if state.pending_attack is not None and state.phase == Phase.COMBAT:
        lines.append(f"Attack pending from field position {state.pending_attack}")
    return lines


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Breachline - Intruder vs Defender card game",
        prog="breachline",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game against the Defender bot")
    play_parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    play_parser.add_argument("--save-dir", help="Directory for save files")

    # Saves command
    saves_parser = subparsers.add_parser("saves", help="List save files")
    saves_parser.add_argument("--save-dir", help="Directory for save files")

    args = parser.parse_args(argv)

    config = GameConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args, config)
    elif args.command == "saves":
        cmd_saves(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_saves(args, config: GameConfig):
    """List save files."""
    from .persistence import SaveSystem

    saves = SaveSystem(args.save_dir or config.save_dir).list_saves()
    if not saves:
        print("No save files.")
        return
    for summary in saves:
        if summary.corrupted or summary.metadata is None:
            print(f"{summary.filename}  (unreadable)")
            continue
        meta = summary.metadata
        print(f"{summary.filename}  turn {meta.turn_number}  {meta.timestamp}  {meta.description}")


def cmd_play(args, config: GameConfig):
    """Interactive text loop."""
    from .game import setup_game
    from .persistence import SaveSystem
    from .session import GameLoop, LoopState

    state = setup_game(config, random_seed=args.seed)
    loop = GameLoop(state, save_system=SaveSystem(args.save_dir or config.save_dir))

    print("Breachline - you are the Intruder. Type h for help.")
    while True:
        print()
        print("\n".join(render_state(loop.state)))
        try:
            line = input("> ")
        except EOFError:
            break

        try:
            action = parse_command(line, Side.INTRUDER)
        except CommandError as e:
            print(f"Error: {e}")
            continue

        result = loop.submit(action)
        for change in result.state_changes:
            print(f"  {change}")
        for message in result.messages:
            print(message)
        for error in result.errors:
            print(f"Error: {error}")

        if result.loop_state == LoopState.QUIT:
            break
        if result.loop_state == LoopState.GAME_OVER:
            winner = result.winner.label if result.winner else "Nobody"
            print(f"\nGame over - {winner} wins.")
            break


if __name__ == "__main__":
    main()
