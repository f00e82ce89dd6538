"""
Context help - Short help text keyed by phase.
"""

from __future__ import annotations

from ..engine_core.state import Phase

COMMAND_HELP = [
    "Commands:",
    "  r N   play the Resource card at hand position N",
    "  p N   install the Unit (or Barrier) at hand position N",
    "  a N   attack with the Unit at field position N",
    "  u N   repair the core with the Barrier at field position N (Defender)",
    "  e     end the current phase",
    "  h     show this help",
    "  s     save the game",
    "  l F   load the save file F",
    "  q     quit",
]

PHASE_HELP: dict[Phase, list[str]] = {
    Phase.DRAW: [
        "Draw phase: one card is drawn on entering this phase.",
        "Nothing to do here. End the phase to move on.",
    ],
    Phase.RESOURCE: [
        "Resource phase: available resources refresh to your total.",
        "Resources are played during the Main phase.",
    ],
    Phase.MAIN: [
        "Main phase: play Resource cards (each adds 1 to your total)",
        "and install Units or Barriers you can afford.",
        "Fracters hit Barrier-type Barriers 1.5x as hard.",
    ],
    Phase.COMBAT: [
        "Combat phase (Intruder only): attack with a Unit on the field.",
        "The Defender may block with one Barrier. Unblocked attacks hit the core.",
        "A card is destroyed when the damage it takes reaches its toughness.",
    ],
}

RULES_HELP = [
    "The Intruder wins by reducing the Defender core to 0.",
    "A side with no deck, no hand and nothing but Resources on the field loses.",
    "Drawing from an empty deck loses the game.",
]


def help_lines(phase: Phase) -> list[str]:
    """Help for the current phase, followed by the command list and the win conditions."""
    return PHASE_HELP[phase] + [""] + COMMAND_HELP + [""] + RULES_HELP
