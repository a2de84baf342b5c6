"""Tests for toughness, weakness break, and break damage over time."""

import pytest

from hsr_sim.ir.elements import ElementType, PathType
from hsr_sim.ir.skills import SkillKit
from hsr_sim.sim.core.battle_state import ActionType
from hsr_sim.sim.core.entities import Character, EffectPolarity, Enemy
from hsr_sim.sim.mechanics.breaking import (
    BROKEN_TURNS,
    apply_break_effect,
    apply_toughness_damage,
    calculate_break_damage,
    calculate_super_break_damage,
    calculate_toughness_damage,
    create_break_dot,
    process_dot_damage,
    recover_from_break,
)
from hsr_sim.sim.mechanics.effects import get_effect


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_character(element: ElementType = ElementType.LIGHTNING, **kwargs) -> Character:
    kit = SkillKit(basic_multiplier=1.0, skill_multiplier=2.0, ult_multiplier=3.0,
                   ult_cost=120, base_atk=600)
    defaults = dict(
        id="attacker", name="Attacker", element=element, path=PathType.DESTRUCTION,
        base_atk=1000, current_hp=10000, max_hp=10000, speed=130, max_energy=120, kit=kit,
    )
    defaults.update(kwargs)
    return Character(**defaults)


def _make_enemy(**kwargs) -> Enemy:
    defaults = dict(
        id="boss", name="Boss", current_hp=100000, max_hp=100000, speed=80,
        defense=1000, weakness=(ElementType.LIGHTNING, ElementType.WIND),
    )
    defaults.update(kwargs)
    return Enemy(**defaults)


# ---------------------------------------------------------------------------
# Toughness
# ---------------------------------------------------------------------------

class TestToughness:
    @pytest.mark.parametrize(
        "action,expected",
        [(ActionType.BASIC, 30), (ActionType.SKILL, 60), (ActionType.ULTIMATE, 90)],
    )
    def test_weakness_hit(self, action, expected):
        weakness = (ElementType.LIGHTNING,)
        assert calculate_toughness_damage(action, ElementType.LIGHTNING, weakness) == expected

    def test_non_weakness_hit(self):
        weakness = (ElementType.FIRE,)
        assert calculate_toughness_damage(ActionType.ULTIMATE, ElementType.ICE, weakness) == 0

    def test_partial_depletion(self):
        enemy, broke = apply_toughness_damage(_make_enemy(), 90)
        assert enemy.toughness == 30
        assert not broke
        assert not enemy.is_broken

    def test_break(self):
        enemy, _ = apply_toughness_damage(_make_enemy(), 90)
        enemy, broke = apply_toughness_damage(enemy, 60)

        assert broke
        assert enemy.toughness == 0
        assert enemy.is_broken
        assert enemy.broken_turns_remaining == BROKEN_TURNS

    def test_broken_enemy_ignores_toughness_damage(self):
        enemy = _make_enemy(toughness=0, is_broken=True, broken_turns_remaining=2)
        same, broke = apply_toughness_damage(enemy, 60)
        assert same is enemy
        assert not broke


class TestRecovery:
    def test_counts_down(self):
        enemy = _make_enemy(toughness=0, is_broken=True, broken_turns_remaining=2)
        enemy = recover_from_break(enemy)
        assert enemy.is_broken
        assert enemy.broken_turns_remaining == 1

    def test_refills_toughness(self):
        enemy = _make_enemy(toughness=0, is_broken=True, broken_turns_remaining=1)
        enemy = recover_from_break(enemy)
        assert not enemy.is_broken
        assert enemy.toughness == enemy.max_toughness

    def test_unbroken_unchanged(self):
        enemy = _make_enemy()
        assert recover_from_break(enemy) is enemy


# ---------------------------------------------------------------------------
# Break damage
# ---------------------------------------------------------------------------

class TestBreakDamage:
    def test_lightning_break(self):
        # 1000 base * 100/1110 DEF, 0 RES, 120 max toughness
        assert calculate_break_damage(_make_character(), _make_enemy()) == 90

    def test_break_effect_scales(self):
        char = _make_character(break_effect=1.0)
        assert calculate_break_damage(char, _make_enemy()) == 180

    def test_super_break_needs_broken_target(self):
        assert calculate_super_break_damage(_make_character(), _make_enemy(), ActionType.SKILL) == 0

    def test_super_break(self):
        enemy = _make_enemy(toughness=0, is_broken=True, broken_turns_remaining=2)
        assert calculate_super_break_damage(_make_character(), enemy, ActionType.ULTIMATE) == 900


# ---------------------------------------------------------------------------
# Break effects and DoT
# ---------------------------------------------------------------------------

class TestBreakEffects:
    def test_shock_dot(self):
        dot = create_break_dot(_make_character(), _make_enemy())
        assert dot is not None
        assert dot.name == "Shock"
        assert dot.polarity == EffectPolarity.DOT
        # 1000 ATK * 80 / (90 + 500)
        assert dot.dot_damage == 135
        assert dot.duration == 2

    def test_imaginary_has_no_dot(self):
        assert create_break_dot(_make_character(ElementType.IMAGINARY), _make_enemy()) is None

    def test_imprisonment_is_recorded_without_slowing(self):
        before = _make_enemy()
        enemy, note = apply_break_effect(before, _make_character(ElementType.IMAGINARY))
        effect = get_effect(enemy, "Imprisonment")
        assert effect is not None
        assert effect.stat == "speed"
        assert enemy.speed == before.speed
        assert note == "Imprisonment applied"

    def test_wind_shear_stacks_to_five(self):
        attacker = _make_character(ElementType.WIND)
        enemy = _make_enemy()
        notes = []
        for _ in range(6):
            enemy, note = apply_break_effect(enemy, attacker)
            notes.append(note)

        shear = get_effect(enemy, "Wind Shear")
        assert shear.stacks == 5
        assert notes[0].startswith("Wind Shear applied")
        assert notes[1] == "Wind Shear (2 stacks)"
        assert notes[-1] == "Wind Shear refreshed"

    def test_process_dot_damage(self):
        attacker = _make_character(ElementType.WIND)
        enemy, _ = apply_break_effect(_make_enemy(), attacker)
        enemy, _ = apply_break_effect(enemy, attacker)
        per_stack = get_effect(enemy, "Wind Shear").dot_damage

        damaged, total, lines = process_dot_damage(enemy)

        assert total == per_stack * 2
        assert damaged.current_hp == enemy.current_hp - total
        assert lines == [f"Wind Shear: {total} DMG"]

    def test_no_dots_no_damage(self):
        enemy = _make_enemy()
        damaged, total, lines = process_dot_damage(enemy)
        assert total == 0
        assert lines == []
        assert damaged.current_hp == enemy.current_hp
