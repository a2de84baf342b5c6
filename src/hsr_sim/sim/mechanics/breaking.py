"""Weakness break -- toughness, break damage, break DoTs, and recovery.

Hitting an enemy with an element it is weak to depletes its toughness.
When toughness reaches 0 the enemy is broken: it takes a burst of break
damage, receives the element's break effect (usually a damage-over-time),
and stays broken for two rounds before its toughness refills.  Hits on an
already-broken enemy deal extra super-break damage instead.

Only consulted when :attr:`BattleRules.break_enabled` is set.  Imprisonment's
speed debuff is bookkeeping only: it does not change the turn order.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from hsr_sim.ir.elements import ElementType
from hsr_sim.sim.core.battle_state import ActionType
from hsr_sim.sim.core.entities import Effect, EffectPolarity

from .damage import DEFAULT_ATTACKER_LEVEL, DEFAULT_TARGET_LEVEL
from .effects import apply_effect

if TYPE_CHECKING:
    from hsr_sim.sim.core.entities import Character, Enemy

BROKEN_TURNS = 2

TOUGHNESS_DAMAGE: dict[ActionType, int] = {
    ActionType.BASIC: 30,
    ActionType.SKILL: 60,
    ActionType.ULTIMATE: 90,
}

BREAK_BASE_DAMAGE: dict[ElementType, float] = {
    ElementType.PHYSICAL: 2000,
    ElementType.FIRE: 2000,
    ElementType.ICE: 1000,
    ElementType.LIGHTNING: 1000,
    ElementType.WIND: 1500,
    ElementType.QUANTUM: 1200,
    ElementType.IMAGINARY: 1200,
}


class BreakDoT(NamedTuple):
    name: str
    multiplier: float
    turns: int
    max_stacks: int


BREAK_DOTS: dict[ElementType, BreakDoT] = {
    ElementType.PHYSICAL: BreakDoT("Bleed", 0.5, 2, 1),
    ElementType.FIRE: BreakDoT("Burn", 1.0, 2, 1),
    ElementType.ICE: BreakDoT("Frozen", 0.5, 1, 1),
    ElementType.LIGHTNING: BreakDoT("Shock", 1.0, 2, 1),
    ElementType.WIND: BreakDoT("Wind Shear", 0.25, 2, 5),
    ElementType.QUANTUM: BreakDoT("Entanglement", 0.5, 1, 1),
    ElementType.IMAGINARY: BreakDoT("Imprisonment", 0.0, 1, 1),
}

# Imaginary breaks mark the enemy with a speed debuff instead of dealing
# damage over time.  Turn order is fixed when the battle starts, so the
# debuff is recorded on the enemy but never delays its turn.
IMPRISONMENT_SPEED_DEBUFF = -0.1


# ---------------------------------------------------------------------------
# Toughness
# ---------------------------------------------------------------------------

def calculate_toughness_damage(
    action: ActionType,
    attacker_element: ElementType,
    enemy_weakness: tuple[ElementType, ...] | list[ElementType],
) -> int:
    """Toughness removed by *action*; 0 unless the element is a weakness."""
    if attacker_element not in enemy_weakness:
        return 0
    return TOUGHNESS_DAMAGE.get(action, 30)


def apply_toughness_damage(enemy: Enemy, toughness_damage: int) -> tuple[Enemy, bool]:
    """Deplete toughness.

    Returns
    -------
    tuple[Enemy, bool]
        The updated enemy and whether this hit broke it.
    """
    if enemy.is_broken or toughness_damage <= 0:
        return enemy, False

    new_toughness = max(0, enemy.toughness - toughness_damage)
    broke = new_toughness == 0 and enemy.toughness > 0
    update: dict[str, object] = {"toughness": new_toughness}
    if new_toughness == 0:
        update["is_broken"] = True
        update["broken_turns_remaining"] = BROKEN_TURNS
    return enemy.model_copy(update=update), broke


def recover_from_break(enemy: Enemy) -> Enemy:
    """Count down a broken enemy's recovery; refill toughness when it ends."""
    if not enemy.is_broken:
        return enemy

    remaining = enemy.broken_turns_remaining - 1
    if remaining <= 0:
        return enemy.model_copy(
            update={
                "is_broken": False,
                "toughness": enemy.max_toughness,
                "broken_turns_remaining": 0,
            }
        )
    return enemy.model_copy(update={"broken_turns_remaining": remaining})


# ---------------------------------------------------------------------------
# Break damage
# ---------------------------------------------------------------------------

def calculate_break_damage(
    attacker: Character,
    target: Enemy,
    attacker_level: int = DEFAULT_ATTACKER_LEVEL,
    target_level: int = DEFAULT_TARGET_LEVEL,
) -> int:
    """Burst damage dealt the moment toughness hits 0.

    ``base[element] * (1 + BE) * DEF mult * RES mult * toughness mult``,
    where toughness mult grows with the enemy's max toughness.
    """
    base = BREAK_BASE_DAMAGE.get(attacker.element, 1000)
    break_effect_mult = 1 + attacker.break_effect
    def_mult = (attacker_level + 20) / (target_level + 20 + target.defense)
    res_mult = 1 - max(-1.0, target.resistance_to(attacker.element))
    toughness_mult = 0.5 + (target.max_toughness / 120) * 0.5
    return math.floor(base * break_effect_mult * def_mult * res_mult * toughness_mult)


def calculate_super_break_damage(
    attacker: Character,
    target: Enemy,
    action: ActionType,
) -> int:
    """Extra damage for hitting an already-broken enemy; 0 otherwise."""
    if not target.is_broken:
        return 0
    toughness_dmg = TOUGHNESS_DAMAGE.get(action, 30)
    return math.floor(toughness_dmg * 10 * (1 + attacker.break_effect))


# ---------------------------------------------------------------------------
# Break effects
# ---------------------------------------------------------------------------

def create_break_dot(attacker: Character, target: Enemy) -> Effect | None:
    """Build the damage-over-time for *attacker*'s element, or ``None``."""
    config = BREAK_DOTS.get(attacker.element)
    if config is None or config.multiplier == 0:
        return None

    dot_base = attacker.base_atk * config.multiplier * (1 + attacker.break_effect * 0.5)
    def_mult = 80 / (90 + target.defense * 0.5)
    return Effect(
        name=config.name,
        polarity=EffectPolarity.DOT,
        stat="dot",
        value=0,
        duration=config.turns,
        max_stacks=config.max_stacks,
        source=attacker.id,
        dot_damage=math.floor(dot_base * def_mult),
        dot_element=attacker.element,
    )


def apply_break_effect(enemy: Enemy, attacker: Character) -> tuple[Enemy, str | None]:
    """Apply the element's break effect to a freshly broken *enemy*.

    Returns the updated enemy and a short description for the log (or
    ``None`` when the element has no break effect).
    """
    dot = create_break_dot(attacker, enemy)

    if dot is None:
        if attacker.element == ElementType.IMAGINARY:
            slow = Effect(
                name="Imprisonment",
                polarity=EffectPolarity.DEBUFF,
                stat="speed",
                value=IMPRISONMENT_SPEED_DEBUFF,
                duration=BREAK_DOTS[ElementType.IMAGINARY].turns,
                source=attacker.id,
            )
            return apply_effect(enemy, slow), "Imprisonment applied"
        return enemy, None

    for i, existing in enumerate(enemy.effects):
        if existing.name != dot.name or existing.polarity != EffectPolarity.DOT:
            continue
        effects = list(enemy.effects)
        if existing.stacks < dot.max_stacks:
            effects[i] = existing.model_copy(
                update={
                    "stacks": existing.stacks + 1,
                    "duration": dot.duration,
                    "dot_damage": dot.dot_damage,
                }
            )
            return enemy.with_effects(effects), f"{dot.name} ({existing.stacks + 1} stacks)"
        effects[i] = existing.model_copy(update={"duration": dot.duration})
        return enemy.with_effects(effects), f"{dot.name} refreshed"

    enemy = apply_effect(enemy, dot)
    return enemy, f"{dot.name} applied ({dot.dot_damage} DMG/turn)"


def process_dot_damage(enemy: Enemy) -> tuple[Enemy, int, list[str]]:
    """Deal every active DoT's damage to *enemy*.

    Returns
    -------
    tuple[Enemy, int, list[str]]
        The damaged enemy, total DoT damage, and one log line per DoT.
    """
    total = 0
    lines: list[str] = []
    for effect in enemy.effects:
        if effect.polarity == EffectPolarity.DOT and effect.dot_damage:
            damage = effect.dot_damage * effect.stacks
            total += damage
            lines.append(f"{effect.name}: {damage} DMG")
    return enemy.take_damage(total), total, lines
