"""Tests for battle setup, action resolution, and turn flow."""

import pytest

from hsr_sim.sim.battle import (
    DEFAULT_ENEMY_ID,
    build_battle,
    can_perform,
    can_use_skill,
    create_battle_character,
    create_default_enemy,
    end_turn,
    get_active_character,
    init_battle,
    perform_action,
    reset_battle,
    summarize_battle,
)
from hsr_sim.sim.core.battle_state import ActionType, BattlePhase, BattleRules
from hsr_sim.sim.core.rng import GameRNG
from hsr_sim.sim.mechanics.damage import calculate_damage
from hsr_sim.sim.mechanics.effects import get_effect, has_effect


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _charge(state, char_id: str):
    """Return *state* with *char_id* at full energy."""
    char = state.get_character(char_id)
    return state.with_character(char.model_copy(update={"current_energy": char.max_energy}))


def _downed_character(registry):
    definition, kit = registry.require_character("kafka")
    return create_battle_character(definition, kit).model_copy(update={"current_hp": 0})


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

class TestSetup:
    def test_reset_battle(self):
        state = reset_battle()
        assert state.phase == BattlePhase.SETUP
        assert state.enemy.id == DEFAULT_ENEMY_ID
        assert state.team == ()

    def test_init_battle(self, registry):
        state = init_battle(registry, ["kafka", "silver_wolf"])

        assert state.phase == BattlePhase.BATTLE
        assert state.turn == 1
        # Silver Wolf 137, Kafka 130, Training Dummy 80
        assert state.turn_order == ("silver_wolf", "kafka", DEFAULT_ENEMY_ID)
        assert state.current_actor_id == "silver_wolf"
        assert state.skill_points == 3
        assert state.battle_log == ()

    def test_gear_applied(self, registry):
        definition, kit = registry.require_character("kafka")
        char = create_battle_character(definition, kit)

        assert char.base_atk == kit.base_atk + 1500
        assert char.speed == definition.base_speed + 30
        assert char.crit_rate == pytest.approx(0.65)
        assert char.crit_dmg == pytest.approx(2.0)
        assert char.max_energy == kit.ult_cost
        assert char.current_energy == 0

    def test_named_enemy(self, registry):
        state = init_battle(registry, ["seele"], enemy_id="cocolia")
        assert state.enemy.id == "cocolia"
        assert state.enemy.current_hp == 600000
        assert state.enemy.defense == 1100

    def test_enemy_overrides(self, registry):
        state = init_battle(registry, ["seele"], enemy_overrides={"max_hp": 5000})
        assert state.enemy.max_hp == 5000
        assert state.enemy.current_hp == 5000

    def test_sp_capacity_bonus(self, registry):
        state = init_battle(registry, ["sparkle", "seele"])
        assert state.max_skill_points == 7

    @pytest.mark.parametrize("team", [
        [],
        ["kafka", "kafka"],
        ["kafka", "silver_wolf", "pela", "huohuo", "seele"],
        ["kafka", "nobody"],
    ])
    def test_rejected_teams(self, registry, team):
        with pytest.raises(ValueError):
            init_battle(registry, team)

    def test_unknown_enemy(self, registry):
        with pytest.raises(ValueError):
            init_battle(registry, ["kafka"], enemy_id="nobody")

    def test_faster_enemy_acts_first(self, registry):
        # Phantylia 132 vs Himeko 126
        state = init_battle(registry, ["himeko"], enemy_id="phantylia")

        assert state.turn_order == ("phantylia", "himeko")
        assert state.current_actor_id == "himeko"
        assert state.turn == 1
        assert state.battle_log[0].description == "Phantylia the Undying attacks!"


# ---------------------------------------------------------------------------
# Basic attacks
# ---------------------------------------------------------------------------

class TestBasicAttack:
    def test_resolves(self, registry):
        state = init_battle(registry, ["kafka", "silver_wolf"])
        after = perform_action(state, ActionType.BASIC, is_crit=False, auto_advance=False)

        wolf = after.get_character("silver_wolf")
        entry = after.battle_log[0]
        assert wolf.current_energy == 20
        assert after.skill_points == 4
        assert entry.description == "Silver Wolf uses Basic ATK (+1 SP)"
        assert entry.damage > 0
        assert after.enemy.current_hp == state.enemy.current_hp - entry.damage
        assert after.total_damage == entry.damage
        assert after.current_actor_id == "silver_wolf"

    def test_auto_advance(self, registry):
        state = init_battle(registry, ["kafka", "silver_wolf"])
        after = perform_action(state, "basic", rng=GameRNG(1))
        assert after.current_actor_id == "kafka"

    def test_sp_capped(self, registry):
        state = init_battle(registry, ["kafka"]).model_copy(update={"skill_points": 5})
        after = perform_action(state, ActionType.BASIC, is_crit=False)
        assert after.skill_points == 5

    def test_damage_matches_calculator(self, registry):
        state = init_battle(registry, ["kafka"])
        char = get_active_character(state)
        expected = calculate_damage(char, state.enemy, char.kit.basic_multiplier, is_crit=True)

        after = perform_action(state, ActionType.BASIC, is_crit=True, auto_advance=False)
        assert after.battle_log[0].damage == expected.final_damage
        assert after.battle_log[0].is_crit


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

class TestSkill:
    def test_spends_sp_and_applies_debuff(self, registry):
        state = init_battle(registry, ["silver_wolf"])
        after = perform_action(state, ActionType.SKILL, is_crit=False, auto_advance=False)

        debuff = get_effect(after.enemy, "Silver Wolf Debuff")
        assert after.skill_points == 2
        assert after.get_character("silver_wolf").current_energy == 30
        assert after.battle_log[0].description == "Silver Wolf uses Skill (-1 SP)"
        assert debuff.stat == "vulnerability"
        assert debuff.duration == 2

    def test_debuff_stacks_capped(self, registry):
        state = init_battle(registry, ["silver_wolf"]).model_copy(update={"skill_points": 5})
        for _ in range(4):
            state = perform_action(state, ActionType.SKILL, is_crit=False)
        assert get_effect(state.enemy, "Silver Wolf Debuff").stacks == 3

    def test_no_sp_is_noop(self, registry):
        state = init_battle(registry, ["kafka"]).model_copy(update={"skill_points": 0})
        assert not can_use_skill(state)
        assert perform_action(state, ActionType.SKILL, is_crit=False) is state

    def test_free_skill(self, registry):
        state = init_battle(registry, ["arlan"]).model_copy(update={"skill_points": 0})
        after = perform_action(state, ActionType.SKILL, is_crit=False, auto_advance=False)

        assert after.skill_points == 0
        assert after.battle_log[0].description == "Arlan uses Skill (Free!)"

    def test_support_skill_buffs_whole_team(self, registry):
        # Sparkle 131 acts before Kafka 130
        state = init_battle(registry, ["sparkle", "kafka"])
        after = perform_action(state, ActionType.SKILL, auto_advance=False)

        entry = after.battle_log[0]
        assert entry.description == "Sparkle uses Skill (Support) (-1 SP)"
        assert entry.damage is None
        assert after.total_damage == 0
        assert after.enemy.current_hp == state.enemy.current_hp
        assert all(has_effect(c, "Sparkle Buff", "sparkle") for c in after.team)


# ---------------------------------------------------------------------------
# Ultimates
# ---------------------------------------------------------------------------

class TestUltimate:
    def test_one_energy_short_is_noop(self, registry):
        state = init_battle(registry, ["kafka"])
        char = get_active_character(state)
        state = state.with_character(
            char.model_copy(update={"current_energy": char.max_energy - 1})
        )

        after = perform_action(state, ActionType.ULTIMATE, is_crit=False)

        assert after is state
        assert after.battle_log == ()
        assert after.get_character("kafka").current_energy == char.max_energy - 1

    def test_consumes_energy_and_applies_debuff(self, registry):
        state = _charge(init_battle(registry, ["silver_wolf"]), "silver_wolf")
        after = perform_action(state, ActionType.ULTIMATE, is_crit=False, auto_advance=False)

        assert after.get_character("silver_wolf").current_energy == 0
        assert after.battle_log[0].description == "Silver Wolf uses Ultimate!"
        assert get_effect(after.enemy, "Silver Wolf Ult Debuff").stat == "defReduction"

    def test_sp_restoring_support_ultimate(self, registry):
        state = _charge(init_battle(registry, ["sparkle", "kafka"]), "sparkle")
        state = state.model_copy(update={"skill_points": 0})

        after = perform_action(state, ActionType.ULTIMATE, auto_advance=False)

        assert after.skill_points == 4
        assert after.battle_log[0].description == "Sparkle uses Ultimate (Support)! (+4 SP)"
        assert after.total_damage == 0


# ---------------------------------------------------------------------------
# Turn flow
# ---------------------------------------------------------------------------

class TestTurnFlow:
    def test_enemy_turn_logged_and_round_advances(self, registry):
        state = init_battle(registry, ["kafka"])
        after = perform_action(state, ActionType.BASIC, is_crit=False)

        assert after.current_actor_id == "kafka"
        assert after.turn == 2
        assert after.battle_log[0].description == "Training Dummy attacks!"
        assert after.battle_log[1].actor_name == "Kafka"
        assert after.enemy.current_hp == state.enemy.current_hp - after.total_damage

    def test_buff_expires_by_rounds(self, registry):
        state = init_battle(registry, ["huohuo"])
        state = perform_action(state, ActionType.SKILL)
        assert get_effect(state.get_character("huohuo"), "Huohuo Buff").duration == 1

        state = perform_action(state, ActionType.BASIC, is_crit=False)
        assert not has_effect(state.get_character("huohuo"), "Huohuo Buff")

    def test_end_turn_outside_battle(self):
        state = reset_battle()
        assert end_turn(state) is state

    def test_can_perform(self, registry):
        state = init_battle(registry, ["kafka"])
        assert can_perform(state, ActionType.BASIC)
        assert can_perform(state, "skill")
        assert not can_perform(state, ActionType.ULTIMATE)
        assert not can_perform(reset_battle(), ActionType.BASIC)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class TestOutcome:
    def test_exact_lethal_hit_wins_immediately(self, registry):
        probe = init_battle(registry, ["kafka", "silver_wolf"])
        attacker = get_active_character(probe)
        lethal = calculate_damage(
            attacker, probe.enemy, attacker.kit.basic_multiplier, is_crit=False,
        ).final_damage

        state = init_battle(registry, ["kafka", "silver_wolf"],
                            enemy_overrides={"max_hp": lethal})
        after = perform_action(state, ActionType.BASIC, is_crit=False)

        assert after.phase == BattlePhase.VICTORY
        assert after.enemy.current_hp == 0
        assert after.current_actor_id == attacker.id
        assert after.turn == 1
        assert after.battle_log[0].actor_name == attacker.name
        assert perform_action(after, ActionType.BASIC, is_crit=False) is after
        assert end_turn(after) is after

    def test_defeat_when_team_down(self, registry):
        char = _downed_character(registry)
        state = build_battle([char], create_default_enemy())

        assert state.phase == BattlePhase.DEFEAT
        assert state.battle_log == ()
        assert perform_action(state, ActionType.BASIC, is_crit=False) is state

    def test_downed_character_cannot_act(self, registry):
        definition, kit = registry.require_character("silver_wolf")
        state = build_battle(
            [_downed_character(registry), create_battle_character(definition, kit)],
            create_default_enemy(),
        )
        state = perform_action(state, ActionType.BASIC, is_crit=False)

        assert state.phase == BattlePhase.BATTLE
        assert state.current_actor_id == "kafka"
        assert not can_perform(state, ActionType.BASIC)
        assert perform_action(state, ActionType.BASIC, is_crit=False) is state

    def test_defeat_check_can_be_disabled(self, registry):
        char = _downed_character(registry)
        state = build_battle([char], create_default_enemy(), BattleRules(defeat_check=False))

        assert state.phase == BattlePhase.BATTLE
        assert perform_action(state, ActionType.BASIC, is_crit=False) is state

    def test_summary(self, registry):
        state = perform_action(init_battle(registry, ["kafka"]), ActionType.BASIC, is_crit=False)
        summary = summarize_battle(state)

        assert summary.phase == BattlePhase.BATTLE
        assert summary.team_ids == ["kafka"]
        assert summary.enemy_id == DEFAULT_ENEMY_ID
        assert summary.total_damage == state.total_damage
        assert summary.actions_logged == 2


# ---------------------------------------------------------------------------
# Weakness break
# ---------------------------------------------------------------------------

class TestBreak:
    def test_disabled_by_default(self, registry):
        state = init_battle(registry, ["kafka"])
        after = perform_action(state, ActionType.SKILL, is_crit=False)
        assert after.enemy.toughness == after.enemy.max_toughness

    def test_break_and_dot(self, registry):
        rules = BattleRules(break_enabled=True)
        state = init_battle(registry, ["kafka"], rules=rules)

        state = perform_action(state, ActionType.SKILL, is_crit=False, auto_advance=False)
        assert state.enemy.toughness == 60
        state = end_turn(state)

        state = perform_action(state, ActionType.SKILL, is_crit=False, auto_advance=False)
        notes = state.battle_log[0].effects
        assert state.enemy.is_broken
        assert any(n.startswith("Weakness Break!") for n in notes)
        assert any(n.startswith("Shock applied") for n in notes)

        state = end_turn(state)
        dot_entries = [e for e in state.battle_log if "damage over time" in e.description]
        assert len(dot_entries) == 1
        assert dot_entries[0].damage > 0

    def test_non_weak_element_does_not_break(self, registry):
        rules = BattleRules(break_enabled=True)
        # Seele is Quantum; the training dummy is only weak to Lightning
        state = init_battle(registry, ["seele"], rules=rules)
        after = perform_action(state, ActionType.SKILL, is_crit=False, auto_advance=False)
        assert after.enemy.toughness == 120
