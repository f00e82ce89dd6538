"""
Tests for the phase sequencer.

Tests:
- Phase cycle and turn boundaries
- Phase entry actions
- Static permission table
"""

import pytest

from ..engine_core.action import ActionKind
from ..engine_core.phases import advance_phase, is_action_allowed, next_phase
from ..engine_core.state import Phase, Side
from .conftest import build_state, make_resource, make_unit


class TestNextPhase:
    """Tests for the transition table."""

    @pytest.mark.parametrize("phase,side,expected", [
        (Phase.DRAW, Side.INTRUDER, (Phase.RESOURCE, Side.INTRUDER, False)),
        (Phase.RESOURCE, Side.INTRUDER, (Phase.MAIN, Side.INTRUDER, False)),
        (Phase.MAIN, Side.INTRUDER, (Phase.COMBAT, Side.INTRUDER, False)),
        (Phase.COMBAT, Side.INTRUDER, (Phase.DRAW, Side.DEFENDER, False)),
        (Phase.DRAW, Side.DEFENDER, (Phase.RESOURCE, Side.DEFENDER, False)),
        (Phase.RESOURCE, Side.DEFENDER, (Phase.MAIN, Side.DEFENDER, False)),
        (Phase.MAIN, Side.DEFENDER, (Phase.DRAW, Side.INTRUDER, True)),
    ])
    def test_transitions(self, phase, side, expected):
        assert next_phase(phase, side) == expected


class TestAdvancePhase:
    """Tests for advance_phase."""

    def test_full_cycle(self, new_game):
        """4 steps reach the Defender's Draw; 3 more start the next turn."""
        state = new_game
        for _ in range(4):
            state = advance_phase(state)
        assert (state.phase, state.active_side, state.turn_number) == (Phase.DRAW, Side.DEFENDER, 1)

        for _ in range(3):
            state = advance_phase(state)
        assert (state.phase, state.active_side, state.turn_number) == (Phase.DRAW, Side.INTRUDER, 2)

    def test_draw_on_entry(self, new_game):
        """Entering Draw draws one card for the side entering."""
        state = new_game
        for _ in range(4):
            state = advance_phase(state)
        assert len(state.defender.hand) == 5
        assert len(state.intruder.hand) == 7

    def test_resource_refresh_on_entry(self):
        """Entering Resource restores available resources to the total."""
        state = build_state(phase=Phase.DRAW, intruder_resources=(0, 3))
        state = advance_phase(state)
        assert state.phase == Phase.RESOURCE
        assert state.intruder.resource_available == 3

    def test_phase_change_logged(self, new_game):
        state = advance_phase(new_game)
        assert any("begins resource phase" in e.message for e in state.log)

    def test_leaving_combat_logged(self):
        state = build_state(phase=Phase.COMBAT, intruder_field=[make_unit()])
        state = advance_phase(state)
        messages = [e.message for e in state.log]
        assert "Combat phase ended" in messages
        assert messages[-1].startswith("Defender drew")

    def test_empty_deck_draw_ends_game(self):
        """A Draw phase entry with an empty deck loses the game."""
        state = build_state(
            phase=Phase.COMBAT,
            defender_deck=[],
            defender_field=[make_resource()],
            intruder_field=[make_unit()],
        )
        state = advance_phase(state)
        assert state.is_over
        assert state.winner is Side.INTRUDER

    def test_finished_game_does_not_advance(self):
        state = build_state(defender_deck=[])._copy_with(is_over=True, winner=Side.INTRUDER)
        assert advance_phase(state) is state


class TestPermissions:
    """Tests for is_action_allowed."""

    def test_main_actions(self):
        state = build_state(phase=Phase.MAIN)
        assert is_action_allowed(state, ActionKind.PLAY_RESOURCE, Side.INTRUDER)
        assert is_action_allowed(state, ActionKind.PLAY_CARD, Side.INTRUDER)
        assert not is_action_allowed(state, ActionKind.ATTACK, Side.INTRUDER)
        assert not is_action_allowed(state, ActionKind.PLAY_CARD, Side.DEFENDER)

    def test_combat_actions(self):
        state = build_state(phase=Phase.COMBAT)
        assert is_action_allowed(state, ActionKind.ATTACK, Side.INTRUDER)
        assert is_action_allowed(state, ActionKind.BLOCK, Side.DEFENDER)
        assert not is_action_allowed(state, ActionKind.ATTACK, Side.DEFENDER)
        assert not is_action_allowed(state, ActionKind.BLOCK, Side.INTRUDER)
        assert not is_action_allowed(state, ActionKind.PLAY_CARD, Side.INTRUDER)

    def test_end_phase_anywhere(self):
        for phase in (Phase.DRAW, Phase.RESOURCE, Phase.MAIN):
            state = build_state(phase=phase, active_side=Side.DEFENDER)
            assert is_action_allowed(state, ActionKind.END_PHASE, Side.DEFENDER)
            assert not is_action_allowed(state, ActionKind.END_PHASE, Side.INTRUDER)

    def test_ability_is_defender_main(self):
        state = build_state(phase=Phase.MAIN, active_side=Side.DEFENDER)
        assert is_action_allowed(state, ActionKind.USE_ABILITY, Side.DEFENDER)
        assert not is_action_allowed(build_state(phase=Phase.MAIN), ActionKind.USE_ABILITY, Side.INTRUDER)

    def test_meta_always_allowed(self):
        state = build_state(phase=Phase.COMBAT)
        assert is_action_allowed(state, ActionKind.HELP, Side.DEFENDER)
