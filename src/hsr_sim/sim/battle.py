"""Battle orchestration -- the setup/battle/victory/defeat state machine.

Every public function here is a reducer: it takes a :class:`BattleState`
and returns a new one.  Nothing is stored at module level and nothing is
scheduled; the caller decides when to step (immediately, after a UI
delay, or inside a batch loop) and owns every state it receives.

Flow of one turn::

    state = perform_action(state, ActionType.SKILL, rng)
    # resolves the action, logs it, checks victory, then (by default)
    # calls end_turn() which advances past any enemy turn

Enemy turns are cosmetic: the enemy logs an "attacks!" line and play
passes to the next actor.  No enemy action is resolved.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Sequence

from hsr_sim.ir.elements import ElementType
from hsr_sim.sim.core.battle_state import (
    ActionType,
    BattleLogEntry,
    BattlePhase,
    BattleRules,
    BattleState,
    BattleSummary,
)
from hsr_sim.sim.core.entities import Character, EffectPolarity, Enemy
from hsr_sim.sim.core.rng import GameRNG
from hsr_sim.sim.mechanics.breaking import (
    apply_break_effect,
    apply_toughness_damage,
    calculate_break_damage,
    calculate_super_break_damage,
    calculate_toughness_damage,
    process_dot_damage,
    recover_from_break,
)
from hsr_sim.sim.mechanics.damage import apply_damage, calculate_damage
from hsr_sim.sim.mechanics.effects import apply_effect, effect_from_declaration
from hsr_sim.sim.mechanics.energy import (
    add_energy,
    can_use_ultimate,
    consume_ultimate_energy,
)
from hsr_sim.sim.mechanics.skill_points import (
    BASIC_SP_GAIN,
    can_afford_skill,
    gain_skill_points,
    spend_skill_points,
    team_max_skill_points,
)
from hsr_sim.sim.scheduler import advance_turn, compute_turn_order, is_round_boundary

if TYPE_CHECKING:
    from hsr_sim.ir.characters import CharacterDefinition
    from hsr_sim.ir.enemies import EnemyDefinition
    from hsr_sim.ir.skills import SkillKit
    from hsr_sim.sim.content.registry import ContentRegistry

logger = logging.getLogger(__name__)

MAX_TEAM_SIZE = 4
DEFAULT_ENEMY_ID = "default_boss"


# =====================================================================
# Actor factories
# =====================================================================

def create_battle_character(
    definition: CharacterDefinition,
    kit: SkillKit,
    rules: BattleRules | None = None,
) -> Character:
    """Build a battle-ready character from static data plus gear constants."""
    rules = rules or BattleRules()
    return Character(
        id=definition.id,
        name=definition.name,
        element=definition.element,
        path=definition.path,
        base_atk=kit.base_atk + rules.gear_atk_bonus,
        current_hp=rules.gear_max_hp,
        max_hp=rules.gear_max_hp,
        current_energy=0,
        max_energy=kit.ult_cost,
        speed=definition.base_speed + rules.gear_speed_bonus,
        crit_rate=kit.base_crit_rate + rules.gear_crit_rate_bonus,
        crit_dmg=kit.base_crit_dmg + rules.gear_crit_dmg_bonus,
        dmg_bonus=rules.gear_dmg_bonus,
        kit=kit,
    )


def create_enemy(definition: EnemyDefinition) -> Enemy:
    return Enemy(
        id=definition.id,
        name=definition.name,
        current_hp=definition.hp,
        max_hp=definition.hp,
        speed=definition.speed,
        defense=definition.defense,
        weakness=tuple(definition.weakness),
        resistance=dict(definition.resistance),
        toughness=definition.toughness,
        max_toughness=definition.toughness,
    )


def create_default_enemy() -> Enemy:
    """The training dummy used when no enemy is configured."""
    resistance = {element: 0.2 for element in ElementType}
    resistance[ElementType.LIGHTNING] = 0.0
    return Enemy(
        id=DEFAULT_ENEMY_ID,
        name="Training Dummy",
        current_hp=1_000_000,
        max_hp=1_000_000,
        speed=80,
        defense=1000,
        weakness=(ElementType.LIGHTNING,),
        resistance=resistance,
        toughness=120,
        max_toughness=120,
    )


def _override_enemy(enemy: Enemy, overrides: dict[str, Any]) -> Enemy:
    """Merge *overrides* into *enemy* and revalidate.  HP starts full."""
    data = {**enemy.model_dump(), **overrides}
    data["current_hp"] = data["max_hp"]
    if "toughness" in overrides and "max_toughness" not in overrides:
        data["max_toughness"] = data["toughness"]
    return Enemy.model_validate(data)


# =====================================================================
# Setup
# =====================================================================

def reset_battle(rules: BattleRules | None = None) -> BattleState:
    """A fresh ``setup`` state facing the training dummy."""
    rules = rules or BattleRules()
    return BattleState(
        enemy=create_default_enemy(),
        skill_points=rules.starting_skill_points,
        max_skill_points=rules.max_skill_points,
        rules=rules,
    )


def build_battle(
    team: Sequence[Character],
    enemy: Enemy,
    rules: BattleRules | None = None,
) -> BattleState:
    """Validate the participants and start a battle.

    Raises
    ------
    ValueError
        If the team is empty, has more than four members, repeats an id,
        shares an id with the enemy, or any participant has a
        non-positive speed.
    """
    rules = rules or BattleRules()
    team = tuple(team)

    if not team:
        raise ValueError("Cannot start a battle with an empty team")
    if len(team) > MAX_TEAM_SIZE:
        raise ValueError(f"A team holds at most {MAX_TEAM_SIZE} characters, got {len(team)}")
    ids = [c.id for c in team]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate characters in team: {ids}")
    if enemy.id in ids:
        raise ValueError(f"Enemy id {enemy.id!r} collides with a team member")

    turn_order = compute_turn_order(team, enemy)

    state = BattleState(
        turn=1,
        phase=BattlePhase.BATTLE,
        team=team,
        enemy=enemy,
        turn_order=turn_order,
        current_actor_id=turn_order[0],
        skill_points=rules.starting_skill_points,
        max_skill_points=team_max_skill_points(team, rules.max_skill_points),
        rules=rules,
    )
    logger.debug("Battle started: order=%s", ", ".join(turn_order))

    # A team fielded with no one standing is already lost.
    state = _check_outcome(state)
    if state.phase == BattlePhase.BATTLE and state.is_enemy_turn:
        state = _resolve_enemy_turn(state)
    return state


def init_battle(
    registry: ContentRegistry,
    character_ids: Sequence[str],
    enemy_id: str | None = None,
    enemy_overrides: dict[str, Any] | None = None,
    rules: BattleRules | None = None,
) -> BattleState:
    """Start a battle from registry ids.

    Parameters
    ----------
    registry:
        Source of character definitions, skill kits, and enemies.
    character_ids:
        Up to four character ids, in slot order.
    enemy_id:
        Enemy to fight.  Defaults to the training dummy.
    enemy_overrides:
        Field overrides applied on top of the enemy (e.g. ``{"max_hp": 5000}``).
    rules:
        Battle constants; defaults to :class:`BattleRules`.

    Raises
    ------
    ValueError
        For unknown ids or any configuration :func:`build_battle` rejects.
    """
    rules = rules or BattleRules()
    team = []
    for cid in character_ids:
        definition, kit = registry.require_character(cid)
        team.append(create_battle_character(definition, kit, rules))

    if enemy_id is None:
        enemy = create_default_enemy()
    else:
        enemy = create_enemy(registry.require_enemy(enemy_id))
    if enemy_overrides:
        enemy = _override_enemy(enemy, enemy_overrides)

    return build_battle(team, enemy, rules)


# =====================================================================
# Queries
# =====================================================================

def get_active_character(state: BattleState) -> Character | None:
    """The team member whose turn it is, or ``None`` on the enemy's turn."""
    return state.get_character(state.current_actor_id)


def can_use_skill(state: BattleState) -> bool:
    char = get_active_character(state)
    return char is not None and can_afford_skill(state, char)


def can_perform(state: BattleState, action: ActionType | str) -> bool:
    """Whether :func:`perform_action` would resolve *action* right now."""
    if state.phase != BattlePhase.BATTLE or state.enemy is None:
        return False
    char = get_active_character(state)
    if char is None or char.is_dead:
        return False
    action = ActionType(action)
    if action == ActionType.ULTIMATE:
        return can_use_ultimate(char)
    if action == ActionType.SKILL:
        return can_afford_skill(state, char)
    return True


def summarize_battle(state: BattleState) -> BattleSummary:
    return BattleSummary(
        phase=state.phase,
        turns=state.turn,
        total_damage=state.total_damage,
        team_ids=[c.id for c in state.team],
        enemy_id=state.enemy.id if state.enemy else None,
        enemy_hp_remaining=state.enemy.current_hp if state.enemy else None,
        actions_logged=len(state.battle_log),
    )


# =====================================================================
# Actions
# =====================================================================

def perform_action(
    state: BattleState,
    action: ActionType | str,
    rng: GameRNG | None = None,
    is_crit: bool | None = None,
    auto_advance: bool = True,
) -> BattleState:
    """Resolve the current character's *action*.

    Parameters
    ----------
    state:
        Current battle state.
    action:
        ``"basic"``, ``"skill"``, or ``"ultimate"``.
    rng:
        Crit roll source.  A randomly seeded one is created if omitted.
    is_crit:
        Force the crit outcome of a damaging action.
    auto_advance:
        Call :func:`end_turn` once the action resolves and the battle is
        still running.

    Returns
    -------
    BattleState
        The resulting state.  When the action is illegal (ultimate without
        full energy, skill without enough skill points, a downed active
        character, battle not running) the *same* state object is
        returned, with nothing logged.
    """
    if state.phase != BattlePhase.BATTLE or state.enemy is None:
        return state

    char = get_active_character(state)
    if char is None:
        # The pointer is on the enemy; let end_turn move past it.
        return end_turn(state)

    if char.is_dead:
        logger.debug("%s is down and cannot act", char.name)
        return state

    action = ActionType(action)
    kit = char.kit
    rules = state.rules

    if action == ActionType.ULTIMATE and not can_use_ultimate(char):
        logger.debug("%s cannot use ultimate (%s/%s energy)",
                     char.name, char.current_energy, char.max_energy)
        return state
    if action == ActionType.SKILL and not can_afford_skill(state, char):
        logger.debug("%s cannot afford skill (%d SP)", char.name, state.skill_points)
        return state

    if rng is None and is_crit is None:
        rng = GameRNG(random.getrandbits(64))

    multiplier = {
        ActionType.BASIC: kit.basic_multiplier,
        ActionType.SKILL: kit.skill_multiplier,
        ActionType.ULTIMATE: kit.ult_multiplier,
    }[action]

    enemy = state.enemy
    damage = 0
    crit = False
    notes: list[str] = []

    if multiplier > 0:
        result = calculate_damage(
            char, enemy, multiplier, rng=rng, is_crit=is_crit,
            attacker_level=rules.attacker_level,
            target_level=rules.target_level,
        )
        damage = result.final_damage
        crit = result.is_crit
        if rules.break_enabled:
            enemy, break_damage, break_notes = _resolve_break(char, enemy, action, rules)
            damage += break_damage
            notes.extend(break_notes)
        enemy = apply_damage(enemy, damage)

    new_sp = state
    if action == ActionType.BASIC:
        char = add_energy(char, kit.basic_energy)
        new_sp = gain_skill_points(state, BASIC_SP_GAIN)
        description = f"{char.name} uses Basic ATK (+{BASIC_SP_GAIN} SP)"

    elif action == ActionType.SKILL:
        cost = kit.skill_sp_cost
        support = " (Support)" if multiplier == 0 else ""
        cost_label = f"-{cost} SP" if cost > 0 else "Free!"
        description = f"{char.name} uses Skill{support} ({cost_label})"
        char = add_energy(char, kit.skill_energy)
        new_sp = spend_skill_points(state, cost)
        if kit.skill_debuff is not None:
            enemy = apply_effect(enemy, effect_from_declaration(
                kit.skill_debuff, name=f"{char.name} Debuff",
                polarity=EffectPolarity.DEBUFF, source=char.id,
                max_stacks=rules.skill_debuff_max_stacks,
            ))
            notes.append(f"Applied {kit.skill_debuff.stat} debuff")

    else:
        description = (
            f"{char.name} uses Ultimate!" if multiplier > 0
            else f"{char.name} uses Ultimate (Support)!"
        )
        char = consume_ultimate_energy(char)
        if kit.ult_sp_change > 0:
            new_sp = gain_skill_points(state, kit.ult_sp_change)
            description += f" (+{kit.ult_sp_change} SP)"
            notes.append(f"+{kit.ult_sp_change} SP")
        if kit.ult_debuff is not None:
            enemy = apply_effect(enemy, effect_from_declaration(
                kit.ult_debuff, name=f"{char.name} Ult Debuff",
                polarity=EffectPolarity.DEBUFF, source=char.id,
                max_stacks=rules.ult_debuff_max_stacks,
            ))
            notes.append(f"Applied {kit.ult_debuff.stat} debuff")

    state = new_sp.with_character(char)

    if action == ActionType.SKILL and kit.skill_buff is not None:
        buff = effect_from_declaration(
            kit.skill_buff, name=f"{char.name} Buff",
            polarity=EffectPolarity.BUFF, source=char.id,
            max_stacks=rules.skill_buff_max_stacks,
        )
        state = state.model_copy(
            update={"team": tuple(apply_effect(c, buff) for c in state.team)}
        )
        notes.append(f"Applied {kit.skill_buff.stat} buff to team")

    entry = BattleLogEntry(
        turn=state.turn,
        actor_name=char.name,
        description=description,
        damage=damage if damage > 0 else None,
        is_crit=crit,
        effects=notes or None,
    )
    state = state.model_copy(
        update={"enemy": enemy, "total_damage": state.total_damage + damage}
    ).with_log(entry)
    state = _check_outcome(state)

    logger.debug("Turn %d: %s -> %d damage%s",
                 state.turn, description, damage, " (crit)" if crit else "")

    if auto_advance and state.phase == BattlePhase.BATTLE:
        state = end_turn(state)
    return state


def end_turn(state: BattleState) -> BattleState:
    """Pass play to the next actor, skipping through the enemy's turn.

    At a round boundary (and with break rules enabled) break DoTs deal
    their damage and broken enemies count down to recovery before the
    effect tick in :func:`~hsr_sim.sim.scheduler.advance_turn`.
    """
    if state.phase != BattlePhase.BATTLE or state.enemy is None:
        return state

    if state.rules.break_enabled and is_round_boundary(state):
        state = _resolve_round_end_break(state)
        if state.phase != BattlePhase.BATTLE:
            return state

    state = advance_turn(state)
    if state.is_enemy_turn:
        state = _resolve_enemy_turn(state)
    return state


# =====================================================================
# Internals
# =====================================================================

def _resolve_enemy_turn(state: BattleState) -> BattleState:
    """Log the enemy's placeholder attack and move on."""
    enemy = state.enemy
    assert enemy is not None
    state = state.with_log(BattleLogEntry(
        turn=state.turn,
        actor_name=enemy.name,
        description=f"{enemy.name} attacks!",
    ))
    return end_turn(state)


def _check_outcome(state: BattleState) -> BattleState:
    if state.enemy is not None and state.enemy.current_hp <= 0:
        logger.debug("Victory on turn %d (%d total damage)", state.turn, state.total_damage)
        return state.model_copy(update={"phase": BattlePhase.VICTORY})
    if state.rules.defeat_check and state.team and all(c.is_dead for c in state.team):
        logger.debug("Defeat on turn %d", state.turn)
        return state.model_copy(update={"phase": BattlePhase.DEFEAT})
    return state


def _resolve_break(
    char: Character,
    enemy: Enemy,
    action: ActionType,
    rules: BattleRules,
) -> tuple[Enemy, int, list[str]]:
    """Toughness, break, and super-break for one damaging hit.

    Returns the updated enemy (HP untouched), extra damage, and log notes.
    """
    if enemy.is_broken:
        if not enemy.is_weak_to(char.element):
            return enemy, 0, []
        extra = calculate_super_break_damage(char, enemy, action)
        return enemy, extra, [f"Super Break: {extra} DMG"]

    toughness_damage = calculate_toughness_damage(action, char.element, enemy.weakness)
    enemy, broke = apply_toughness_damage(enemy, toughness_damage)
    if not broke:
        return enemy, 0, []

    extra = calculate_break_damage(char, enemy, rules.attacker_level, rules.target_level)
    notes = [f"Weakness Break! {extra} DMG"]
    enemy, applied = apply_break_effect(enemy, char)
    if applied:
        notes.append(applied)
    return enemy, extra, notes


def _resolve_round_end_break(state: BattleState) -> BattleState:
    enemy = state.enemy
    assert enemy is not None

    enemy, dot_damage, lines = process_dot_damage(enemy)
    enemy = recover_from_break(enemy)
    state = state.model_copy(
        update={"enemy": enemy, "total_damage": state.total_damage + dot_damage}
    )
    if dot_damage > 0:
        state = state.with_log(BattleLogEntry(
            turn=state.turn,
            actor_name=enemy.name,
            description=f"{enemy.name} suffers damage over time",
            damage=dot_damage,
            effects=lines,
        ))
    return _check_outcome(state)
