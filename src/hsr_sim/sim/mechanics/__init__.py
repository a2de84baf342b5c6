"""Core combat mechanics for the simulator.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from hsr_sim.sim.mechanics import (
        calculate_damage, apply_damage,
        apply_effect, tick_effects, sum_effect_stat,
        add_energy, can_use_ultimate, consume_ultimate_energy,
        gain_skill_points, spend_skill_points,
    )
"""

# -- damage ------------------------------------------------------------------
from .damage import DamageResult, apply_damage, calculate_damage

# -- effects -----------------------------------------------------------------
from .effects import (
    apply_effect,
    effect_from_declaration,
    get_effect,
    has_effect,
    remove_effect,
    sum_effect_stat,
    tick_effects,
)

# -- energy ------------------------------------------------------------------
from .energy import add_energy, can_use_ultimate, consume_ultimate_energy

# -- skill points ------------------------------------------------------------
from .skill_points import (
    can_afford_skill,
    gain_skill_points,
    spend_skill_points,
    team_max_skill_points,
)

# -- break -------------------------------------------------------------------
from .breaking import (
    apply_break_effect,
    apply_toughness_damage,
    calculate_break_damage,
    calculate_super_break_damage,
    calculate_toughness_damage,
    process_dot_damage,
    recover_from_break,
)

__all__ = [
    # damage
    "DamageResult",
    "calculate_damage",
    "apply_damage",
    # effects
    "apply_effect",
    "effect_from_declaration",
    "get_effect",
    "has_effect",
    "remove_effect",
    "sum_effect_stat",
    "tick_effects",
    # energy
    "add_energy",
    "can_use_ultimate",
    "consume_ultimate_energy",
    # skill points
    "can_afford_skill",
    "gain_skill_points",
    "spend_skill_points",
    "team_max_skill_points",
    # break
    "apply_break_effect",
    "apply_toughness_damage",
    "calculate_break_damage",
    "calculate_super_break_damage",
    "calculate_toughness_damage",
    "process_dot_damage",
    "recover_from_break",
]
