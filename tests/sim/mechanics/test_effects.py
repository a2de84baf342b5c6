"""Tests for effect application, stacking, and expiry."""

import pytest

from hsr_sim.ir.skills import EffectDeclaration
from hsr_sim.sim.core.entities import Effect, EffectPolarity, Enemy
from hsr_sim.sim.mechanics.effects import (
    apply_effect,
    effect_from_declaration,
    get_effect,
    has_effect,
    remove_effect,
    sum_effect_stat,
    tick_effects,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_enemy(**kwargs) -> Enemy:
    defaults = dict(id="boss", name="Boss", current_hp=1000, max_hp=1000, speed=80)
    defaults.update(kwargs)
    return Enemy(**defaults)


def _debuff(name: str = "Silver Wolf Debuff", source: str = "silver_wolf", **kwargs) -> Effect:
    defaults = dict(
        name=name, polarity=EffectPolarity.DEBUFF, stat="vulnerability",
        value=0.13, duration=2, max_stacks=3, source=source,
    )
    defaults.update(kwargs)
    return Effect(**defaults)


# ---------------------------------------------------------------------------
# apply_effect
# ---------------------------------------------------------------------------

class TestApplyEffect:
    def test_new_effect_starts_at_one_stack(self):
        incoming = _debuff(stacks=2)
        enemy = apply_effect(_make_enemy(), incoming)

        [effect] = enemy.effects
        assert effect.stacks == 1
        assert effect.id != incoming.id

    def test_input_not_modified(self):
        enemy = _make_enemy()
        apply_effect(enemy, _debuff())
        assert enemy.effects == ()

    def test_reapply_stacks_and_refreshes(self):
        enemy = apply_effect(_make_enemy(), _debuff())
        enemy = tick_effects(enemy)
        enemy = apply_effect(enemy, _debuff())

        [effect] = enemy.effects
        assert effect.stacks == 2
        assert effect.duration == 2

    def test_stacks_capped(self):
        enemy = _make_enemy()
        for _ in range(5):
            enemy = apply_effect(enemy, _debuff())

        [effect] = enemy.effects
        assert effect.stacks == 3
        assert sum_effect_stat(enemy.effects, "vulnerability") == pytest.approx(0.39)

    def test_single_stack_effect_only_refreshes(self):
        enemy = _make_enemy()
        for _ in range(3):
            enemy = apply_effect(enemy, _debuff(max_stacks=1))
        assert enemy.effects[0].stacks == 1

    def test_different_sources_do_not_merge(self):
        enemy = apply_effect(_make_enemy(), _debuff(name="Debuff", source="a"))
        enemy = apply_effect(enemy, _debuff(name="Debuff", source="b"))
        assert len(enemy.effects) == 2

    def test_different_names_do_not_merge(self):
        enemy = apply_effect(_make_enemy(), _debuff(name="Silver Wolf Debuff"))
        enemy = apply_effect(enemy, _debuff(name="Silver Wolf Ult Debuff"))
        assert len(enemy.effects) == 2


# ---------------------------------------------------------------------------
# tick_effects
# ---------------------------------------------------------------------------

class TestTickEffects:
    def test_two_round_effect_lasts_two_ticks(self):
        enemy = apply_effect(_make_enemy(), _debuff(duration=2))

        enemy = tick_effects(enemy)
        assert get_effect(enemy, "Silver Wolf Debuff").duration == 1

        enemy = tick_effects(enemy)
        assert not has_effect(enemy, "Silver Wolf Debuff")

    def test_no_effects_returns_same_object(self):
        enemy = _make_enemy()
        assert tick_effects(enemy) is enemy

    def test_ticks_every_effect(self):
        enemy = apply_effect(_make_enemy(), _debuff(name="A", duration=1))
        enemy = apply_effect(enemy, _debuff(name="B", duration=3))
        enemy = tick_effects(enemy)

        assert [e.name for e in enemy.effects] == ["B"]
        assert enemy.effects[0].duration == 2


# ---------------------------------------------------------------------------
# Queries and helpers
# ---------------------------------------------------------------------------

class TestQueries:
    def test_sum_ignores_other_stats(self):
        effects = [_debuff(), _debuff(name="X", stat="defReduction", value=0.45)]
        assert sum_effect_stat(effects, "defReduction") == pytest.approx(0.45)
        assert sum_effect_stat(effects, "atkPercent") == 0.0

    def test_get_effect_by_source(self):
        enemy = apply_effect(_make_enemy(), _debuff(name="Debuff", source="a"))
        assert get_effect(enemy, "Debuff", source="a") is not None
        assert get_effect(enemy, "Debuff", source="b") is None

    def test_remove_effect(self):
        enemy = apply_effect(_make_enemy(), _debuff(name="Debuff", source="a"))
        enemy = apply_effect(enemy, _debuff(name="Debuff", source="b"))

        assert len(remove_effect(enemy, "Debuff", source="a").effects) == 1
        assert remove_effect(enemy, "Debuff").effects == ()

    def test_effect_from_declaration(self):
        decl = EffectDeclaration(stat="defReduction", value=0.45, duration=3)
        effect = effect_from_declaration(
            decl, name="Silver Wolf Ult Debuff", polarity=EffectPolarity.DEBUFF,
            source="silver_wolf", max_stacks=5,
        )
        assert effect.stat == "defReduction"
        assert effect.duration == 3
        assert effect.stacks == 1
        assert effect.max_stacks == 5
