"""Skill point economy shared by the whole team.

Basic attacks generate one point, skills spend their kit's cost, and a
few ultimates restore points.  The pool is capped at the battle's
``max_skill_points``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hsr_sim.sim.core.battle_state import BattleState
    from hsr_sim.sim.core.entities import Character

BASIC_SP_GAIN = 1


def gain_skill_points(state: BattleState, amount: int) -> BattleState:
    """Return a copy of *state* with *amount* points added, capped at the max."""
    if amount <= 0:
        return state
    new_sp = min(state.max_skill_points, state.skill_points + amount)
    return state.model_copy(update={"skill_points": new_sp})


def can_afford_skill(state: BattleState, char: Character) -> bool:
    """Free skills are always affordable."""
    cost = char.kit.skill_sp_cost
    return cost == 0 or state.skill_points >= cost


def spend_skill_points(state: BattleState, amount: int) -> BattleState:
    """Return a copy of *state* with *amount* points removed.

    Raises
    ------
    ValueError
        If the pool holds fewer than *amount* points.
    """
    if amount > state.skill_points:
        raise ValueError(
            f"Cannot spend {amount} skill points with only {state.skill_points}"
        )
    if amount <= 0:
        return state
    return state.model_copy(update={"skill_points": state.skill_points - amount})


def team_max_skill_points(team: tuple[Character, ...] | list[Character], base: int) -> int:
    """Skill point capacity for *team*: *base* plus every member's bonus."""
    return base + sum(c.kit.team_max_sp_bonus for c in team)
