"""Damage calculation and application.

Implements the multiplicative damage pipeline:
    ATK * multiplier -> crit -> DMG bonus -> DEF -> RES -> vulnerability
    -> broken bonus -> floor

The crit roll is the only source of randomness.  Passing ``is_crit``
fixes it, which makes the result a pure function of the input stats.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel

from .effects import sum_effect_stat

if TYPE_CHECKING:
    from hsr_sim.sim.core.entities import Actor, Character, Enemy
    from hsr_sim.sim.core.rng import GameRNG

_A = TypeVar("_A", bound="Actor")

BROKEN_MULTIPLIER = 1.1
DEFAULT_ATTACKER_LEVEL = 80
DEFAULT_TARGET_LEVEL = 90


class DamageBreakdown(BaseModel):
    attack_stat: float
    skill_multiplier: float
    crit_multiplier: float
    dmg_bonus_multiplier: float
    def_multiplier: float
    res_multiplier: float
    vulnerability_multiplier: float
    broken_multiplier: float


class DamageResult(BaseModel):
    """Outcome of one damage calculation."""

    base_damage: int
    """``floor(effective ATK * multiplier)`` before any other factor."""

    final_damage: int
    is_crit: bool
    breakdown: DamageBreakdown


# ---------------------------------------------------------------------------
# Effective stats
# ---------------------------------------------------------------------------

def effective_atk(char: Character) -> float:
    atk_percent = sum_effect_stat(char.effects, "atkPercent")
    flat_atk = sum_effect_stat(char.effects, "atk")
    return char.base_atk * (1 + atk_percent) + flat_atk


def effective_crit_rate(char: Character) -> float:
    """Crit rate including buffs, clamped to at most 1."""
    return min(1.0, char.crit_rate + sum_effect_stat(char.effects, "critRate"))


def effective_crit_dmg(char: Character) -> float:
    return char.crit_dmg + sum_effect_stat(char.effects, "critDmg")


def effective_dmg_bonus(char: Character) -> float:
    return char.dmg_bonus + sum_effect_stat(char.effects, "dmgBonus")


def def_multiplier(
    target: Enemy,
    attacker_level: int = DEFAULT_ATTACKER_LEVEL,
    target_level: int = DEFAULT_TARGET_LEVEL,
) -> float:
    """``(Lv_atk + 20) / (Lv_tgt + 20 + DEF * (1 - DEF reduction))``."""
    def_reduction = sum_effect_stat(target.effects, "defReduction")
    effective_def = target.defense * (1 - def_reduction)
    return (attacker_level + 20) / (target_level + 20 + effective_def)


def res_multiplier(attacker: Character, target: Enemy) -> float:
    """``1 - max(-1, RES - RES penetration)``."""
    res_pen = sum_effect_stat(attacker.effects, "resPen")
    effective_res = max(-1.0, target.resistance_to(attacker.element) - res_pen)
    return 1 - effective_res


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def calculate_damage(
    attacker: Character,
    target: Enemy,
    skill_multiplier: float,
    rng: GameRNG | None = None,
    is_crit: bool | None = None,
    attacker_level: int = DEFAULT_ATTACKER_LEVEL,
    target_level: int = DEFAULT_TARGET_LEVEL,
) -> DamageResult:
    """Calculate the damage *attacker* deals to *target*.

    Parameters
    ----------
    attacker:
        The acting character, with its current buffs.
    target:
        The enemy, with its current debuffs.
    skill_multiplier:
        ATK scaling of the action being resolved.
    rng:
        Source of the crit roll.  Required unless *is_crit* is given.
    is_crit:
        Force the crit outcome instead of rolling.
    attacker_level, target_level:
        Levels feeding the DEF multiplier.

    Returns
    -------
    DamageResult
        Final (floored) damage, crit flag, and every multiplier used.
    """
    attack_stat = effective_atk(attacker)
    base_damage = attack_stat * skill_multiplier

    if is_crit is None:
        if rng is None:
            raise ValueError("calculate_damage needs an rng when is_crit is not given")
        is_crit = rng.roll(effective_crit_rate(attacker))
    crit_mult = 1 + effective_crit_dmg(attacker) if is_crit else 1.0

    dmg_bonus_mult = 1 + effective_dmg_bonus(attacker)
    def_mult = def_multiplier(target, attacker_level, target_level)
    res_mult = res_multiplier(attacker, target)
    vuln_mult = 1 + sum_effect_stat(target.effects, "vulnerability")
    broken_mult = BROKEN_MULTIPLIER if target.is_broken else 1.0

    final_damage = math.floor(
        base_damage
        * crit_mult
        * dmg_bonus_mult
        * def_mult
        * res_mult
        * vuln_mult
        * broken_mult
    )

    return DamageResult(
        base_damage=math.floor(base_damage),
        final_damage=max(0, final_damage),
        is_crit=is_crit,
        breakdown=DamageBreakdown(
            attack_stat=attack_stat,
            skill_multiplier=skill_multiplier,
            crit_multiplier=crit_mult,
            dmg_bonus_multiplier=dmg_bonus_mult,
            def_multiplier=def_mult,
            res_multiplier=res_mult,
            vulnerability_multiplier=vuln_mult,
            broken_multiplier=broken_mult,
        ),
    )


def apply_damage(target: _A, damage: int) -> _A:
    """Return a copy of *target* with *damage* HP removed (floored at 0)."""
    return target.take_damage(damage)
