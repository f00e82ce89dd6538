"""
Tests for the combat resolver and the Barrier repair ability.

Tests:
- Damage rules and the Fracter multiplier
- Attack declaration and block resolution
- Destruction symmetry
"""

import pytest

from ..engine_core import abilities, combat
from ..engine_core.errors import CombatError, ValidationError
from ..engine_core.state import BarrierType, Phase, Side, UnitType
from .conftest import build_state, make_barrier, make_resource, make_unit


class TestEffectiveDamage:
    """Tests for effective_damage."""

    def test_fracter_vs_core(self):
        """Against the core a Fracter deals base power."""
        assert combat.effective_damage(make_unit(power=2)) == 2

    def test_fracter_vs_barrier(self):
        """Against a Barrier-subtype blocker a Fracter deals 1.5x, rounded down."""
        assert combat.effective_damage(make_unit(power=2), BarrierType.BARRIER) == 3
        assert combat.effective_damage(make_unit(power=1), BarrierType.BARRIER) == 1

    def test_fracter_vs_other_barrier(self):
        assert combat.effective_damage(make_unit(power=2), BarrierType.SENTRY) == 2

    def test_other_unit_vs_barrier(self):
        unit = make_unit(power=2, subtype=UnitType.KILLER)
        assert combat.effective_damage(unit, BarrierType.BARRIER) == 2

    def test_barrier_bonus(self):
        """Barrier-subtype blockers deal +1."""
        assert combat.effective_damage(make_barrier(power=1)) == 2
        assert combat.effective_damage(make_barrier(power=1, subtype=BarrierType.CODE_GATE)) == 1


class TestDeclareAttack:
    """Tests for declare_attack."""

    def test_records_pending(self, combat_state):
        state = combat.declare_attack(combat_state, 1)
        assert state.pending_attack == 1
        assert state.core.current_health == 10
        assert "declares attack" in state.log[-1].message

    def test_resource_cannot_attack(self, combat_state):
        with pytest.raises(CombatError) as exc:
            combat.declare_attack(combat_state, 0)
        assert exc.value.rule == "INVALID_ATTACKER"

    def test_outside_combat(self):
        state = build_state(intruder_field=[make_unit()], phase=Phase.MAIN)
        with pytest.raises(CombatError):
            combat.declare_attack(state, 0)

    def test_second_attack_while_pending(self, combat_state):
        state = combat.declare_attack(combat_state, 1)
        with pytest.raises(CombatError) as exc:
            combat.declare_attack(state, 1)
        assert exc.value.rule == "ATTACK_PENDING"


class TestDeclareBlock:
    """Tests for block resolution."""

    def test_unblocked_hits_core(self):
        """An unblocked Fracter with power 2 deals 2 to the core."""
        state = build_state(intruder_field=[make_unit(power=2)], phase=Phase.COMBAT)
        state = combat.declare_attack(state, 0)
        state = combat.declare_block(state, 0, None)
        assert state.core.current_health == 8
        assert state.pending_attack is None

    def test_fracter_breaks_barrier(self):
        """A power 2 Fracter deals 3 to a Barrier."""
        blocker = make_barrier(power=0, toughness=3)
        state = build_state(intruder_field=[make_unit(power=2, toughness=5)], defender_field=[blocker], phase=Phase.COMBAT)
        state = combat.declare_attack(state, 0)
        state = combat.declare_block(state, 0, 0)
        assert state.defender.field == []
        assert len(state.intruder.field) == 1
        assert any("deals 3 damage" in e.message for e in state.log)

    def test_mutual_destruction(self):
        """A 3/2 Unit and a 2/3 Barrier destroy each other."""
        unit = make_unit(power=3, toughness=2, subtype=UnitType.KILLER)
        barrier = make_barrier(power=2, toughness=3)
        state = build_state(intruder_field=[unit], defender_field=[barrier], phase=Phase.COMBAT)
        state = combat.declare_attack(state, 0)
        state = combat.declare_block(state, 0, 0)
        assert state.intruder.field == []
        assert state.defender.field == []
        assert state.core.current_health == 10

    def test_neither_destroyed(self):
        unit = make_unit(power=1, toughness=5, subtype=UnitType.DECODER)
        barrier = make_barrier(power=1, toughness=5, subtype=BarrierType.SENTRY)
        state = build_state(intruder_field=[unit], defender_field=[barrier], phase=Phase.COMBAT)
        state = combat.declare_block(combat.declare_attack(state, 0), 0, 0)
        assert len(state.intruder.field) == 1
        assert len(state.defender.field) == 1

    def test_starter_cards_trade(self, combat_state):
        """Starter Fracter vs starter Barrier: both destroyed."""
        state = combat.declare_block(combat.declare_attack(combat_state, 1), 1, 0)
        assert [c.category.value for c in state.intruder.field] == ["resource"]
        assert state.defender.field == []

    def test_block_without_attack(self, combat_state):
        with pytest.raises(CombatError) as exc:
            combat.declare_block(combat_state, 1, 0)
        assert exc.value.rule == "NO_PENDING_ATTACK"

    def test_invalid_blocker(self, combat_state):
        state = combat.declare_attack(combat_state, 1)
        with pytest.raises(CombatError) as exc:
            combat.declare_block(state, 1, 4)
        assert exc.value.rule == "INVALID_BLOCKER"
        assert state.pending_attack == 1

    def test_lethal_attack_ends_game(self):
        state = build_state(intruder_field=[make_unit(power=3)], phase=Phase.COMBAT, core_health=2)
        state = combat.declare_block(combat.declare_attack(state, 0), 0, None)
        assert state.is_over
        assert state.winner is Side.INTRUDER


class TestBarrierAbility:
    """Tests for the repair ability."""

    def test_repairs_core(self):
        state = build_state(
            defender_field=[make_barrier()],
            phase=Phase.MAIN,
            active_side=Side.DEFENDER,
            core_health=7,
        )
        state = abilities.use_barrier_ability(state, 0)
        assert state.core.current_health == 8

    def test_never_above_max(self):
        state = build_state(defender_field=[make_barrier()], phase=Phase.MAIN, active_side=Side.DEFENDER)
        assert abilities.use_barrier_ability(state, 0).core.current_health == 10

    def test_only_barrier_subtype(self):
        state = build_state(
            defender_field=[make_barrier(subtype=BarrierType.SENTRY), make_resource()],
            phase=Phase.MAIN,
            active_side=Side.DEFENDER,
        )
        for index in (0, 1, 2):
            with pytest.raises(ValidationError):
                abilities.use_barrier_ability(state, index)

    def test_only_defender_main(self):
        state = build_state(defender_field=[make_barrier()], phase=Phase.MAIN, active_side=Side.INTRUDER)
        assert not abilities.can_use_barrier_ability(state, 0)
