"""
Tests for the action processor.

Tests:
- Validation order (integrity, game over, meta, side, phase)
- Dispatch to store, combat, ability and phase operations
- Input state is untouched on every failure
"""

import pytest

from ..engine_core.action import Action, ActionKind
from ..engine_core.errors import CombatError, StateIntegrityError, ValidationError
from ..engine_core.processor import ActionProcessor, process_action
from ..engine_core.state import Phase, Side
from .conftest import build_state, make_barrier, make_resource, make_unit


@pytest.fixture
def processor() -> ActionProcessor:
    return ActionProcessor()


def assert_rejected(processor, state, action, error=ValidationError, rule=None):
    """Apply an illegal action and check nothing changed."""
    before = state.clone()
    with pytest.raises(error) as exc:
        processor.apply(state, action)
    assert state == before
    if rule is not None:
        assert exc.value.rule == rule
    return exc.value


class TestPlayActions:
    """Tests for PLAY_RESOURCE and PLAY_CARD."""

    def test_play_resource(self, processor):
        state = build_state(intruder_hand=[make_resource()])
        result = processor.apply(state, Action.play_resource(Side.INTRUDER, 0))
        assert result.new_state.intruder.resource_total == 1
        assert result.state_changes == ["Intruder played NPU"]
        assert result.action.kind == ActionKind.PLAY_RESOURCE

    def test_play_resource_rejects_unit(self, processor):
        state = build_state(intruder_hand=[make_unit()], intruder_resources=(1, 1))
        assert_rejected(processor, state, Action.play_resource(Side.INTRUDER, 0), rule="WRONG_CARD_TYPE")

    def test_play_card_rejects_resource(self, processor):
        state = build_state(intruder_hand=[make_resource()])
        assert_rejected(processor, state, Action.play_card(Side.INTRUDER, 0), rule="WRONG_CARD_TYPE")

    def test_defender_installs_barrier(self, processor):
        state = build_state(
            defender_hand=[make_barrier()],
            defender_resources=(1, 1),
            active_side=Side.DEFENDER,
        )
        result = processor.apply(state, Action.play_card(Side.DEFENDER, 0))
        assert len(result.new_state.defender.field) == 1
        assert result.new_state.defender.resource_available == 0

    def test_unaffordable(self, processor):
        state = build_state(intruder_hand=[make_unit()])
        assert_rejected(processor, state, Action.play_card(Side.INTRUDER, 0), rule="INSUFFICIENT_RESOURCES")

    def test_bad_hand_index(self, processor):
        state = build_state(intruder_hand=[make_resource()])
        assert_rejected(processor, state, Action.play_resource(Side.INTRUDER, 3), rule="HAND_INDEX")

    def test_wrong_phase(self, processor):
        state = build_state(intruder_hand=[make_resource()], phase=Phase.DRAW)
        assert_rejected(processor, state, Action.play_resource(Side.INTRUDER, 0), rule="WRONG_PHASE")

    def test_not_your_turn(self, processor):
        state = build_state(defender_hand=[make_resource()])
        assert_rejected(processor, state, Action.play_resource(Side.DEFENDER, 0), rule="NOT_ACTIVE_SIDE")


class TestCombatActions:
    """Tests for ATTACK and BLOCK."""

    def test_attack_then_block(self, processor, combat_state):
        state = processor.apply(combat_state, Action.attack(1)).new_state
        assert state.pending_attack == 1
        result = processor.apply(state, Action.block(1, 0))
        assert result.new_state.defender.field == []
        assert result.new_state.pending_attack is None
        assert "Defender blocks with Barrier" in result.state_changes

    def test_no_block(self, processor, combat_state):
        state = processor.apply(combat_state, Action.attack(1)).new_state
        result = processor.apply(state, Action.block(1, None))
        assert result.new_state.core.current_health == 9

    def test_block_defaults_to_pending_attacker(self, processor, combat_state):
        state = processor.apply(combat_state, Action.attack(1)).new_state
        block = Action(ActionKind.BLOCK, Side.DEFENDER)
        assert processor.apply(state, block).new_state.core.current_health == 9

    def test_attack_from_defender(self, processor, combat_state):
        action = Action(ActionKind.ATTACK, Side.DEFENDER, Action.attack(1).payload)
        assert_rejected(processor, combat_state, action, rule="WRONG_SIDE")

    def test_block_from_intruder(self, processor, combat_state):
        state = processor.apply(combat_state, Action.attack(1)).new_state
        action = Action(ActionKind.BLOCK, Side.INTRUDER, Action.block(1, 0).payload)
        assert_rejected(processor, state, action, rule="WRONG_SIDE")

    def test_attack_with_resource(self, processor, combat_state):
        assert_rejected(processor, combat_state, Action.attack(0), error=CombatError, rule="INVALID_ATTACKER")

    def test_block_without_attack(self, processor, combat_state):
        assert_rejected(processor, combat_state, Action.block(1, 0), error=CombatError, rule="NO_PENDING_ATTACK")

    def test_end_phase_with_pending_attack(self, processor, combat_state):
        state = processor.apply(combat_state, Action.attack(1)).new_state
        assert_rejected(processor, state, Action.end_phase(Side.INTRUDER), rule="ATTACK_PENDING")


class TestOtherActions:
    """Tests for END_PHASE, USE_ABILITY and meta actions."""

    def test_end_phase(self, processor, new_game):
        result = processor.apply(new_game, Action.end_phase(Side.INTRUDER))
        assert result.new_state.phase == Phase.RESOURCE
        assert new_game.phase == Phase.DRAW

    def test_use_ability(self, processor):
        state = build_state(
            defender_field=[make_barrier()],
            active_side=Side.DEFENDER,
            core_health=5,
        )
        result = processor.apply(state, Action.use_ability(0))
        assert result.new_state.core.current_health == 6

    def test_use_ability_on_intruder_turn(self, processor):
        state = build_state(defender_field=[make_barrier()], core_health=5)
        assert_rejected(processor, state, Action.use_ability(0))

    @pytest.mark.parametrize("kind", [ActionKind.HELP, ActionKind.SAVE, ActionKind.LOAD])
    def test_meta_leaves_state(self, processor, new_game, kind):
        """Meta actions are accepted from either side and return the same state."""
        result = processor.apply(new_game, Action.meta(kind, Side.DEFENDER))
        assert result.new_state is new_game
        assert result.meta == kind
        assert not result.quit_requested

    def test_quit(self, processor, new_game):
        result = processor.apply(new_game, Action.meta(ActionKind.QUIT, Side.INTRUDER))
        assert result.quit_requested
        assert result.new_state is new_game

    def test_meta_factory_rejects_game_action(self):
        with pytest.raises(ValueError):
            Action.meta(ActionKind.ATTACK, Side.INTRUDER)


class TestGuards:
    """Tests for the checks that run before anything else."""

    def test_integrity_failure_propagates(self, processor):
        state = build_state(intruder_resources=(5, 1))
        with pytest.raises(StateIntegrityError):
            processor.apply(state, Action.end_phase(Side.INTRUDER))

    def test_game_over_rejects_actions(self, processor):
        state = build_state(defender_deck=[])._copy_with(is_over=True, winner=Side.INTRUDER)
        assert_rejected(processor, state, Action.end_phase(Side.INTRUDER), rule="GAME_OVER")
        assert_rejected(processor, state, Action.meta(ActionKind.HELP, Side.INTRUDER), rule="GAME_OVER")

    def test_game_over_accepts_quit(self, processor):
        state = build_state(defender_deck=[])._copy_with(is_over=True, winner=Side.INTRUDER)
        assert processor.apply(state, Action.meta(ActionKind.QUIT, Side.INTRUDER)).quit_requested

    def test_missing_payload(self, processor):
        state = build_state(intruder_hand=[make_resource()])
        action = Action(ActionKind.PLAY_RESOURCE, Side.INTRUDER)
        assert_rejected(processor, state, action, rule="MISSING_PAYLOAD")

    def test_process_action_helper(self, new_game):
        result = process_action(new_game, Action.end_phase(Side.INTRUDER))
        assert result.new_state.phase == Phase.RESOURCE
