"""Skill kits -- per-character multipliers, energy values, and declared effects."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EffectDeclaration(BaseModel):
    """A buff or debuff an action applies when it resolves."""

    stat: str
    """Stat key the effect modifies (e.g. ``"defReduction"``, ``"atkPercent"``)."""

    value: float
    """Magnitude per stack (fractions, so ``0.2`` means 20 %)."""

    duration: int = Field(ge=1)
    """Number of full rounds the effect lasts."""


class SkillKit(BaseModel):
    """Everything the combat engine needs to resolve a character's three actions.

    A multiplier of ``0`` on the skill or ultimate marks a pure support
    action: it resolves and grants/consumes energy but deals no damage.
    """

    basic_multiplier: float = Field(gt=0)
    skill_multiplier: float = Field(ge=0)
    ult_multiplier: float = Field(ge=0)

    basic_energy: float = 20
    skill_energy: float = 30
    ult_cost: float = Field(gt=0)
    """Energy required for the ultimate; also the character's max energy."""

    base_atk: float = Field(ge=0)
    base_crit_rate: float = 0.05
    base_crit_dmg: float = 0.5

    skill_sp_cost: int = Field(default=1, ge=0)
    """Skill points the skill consumes.  ``0`` marks a free skill."""

    ult_sp_change: int = 0
    """Skill points restored when the ultimate resolves."""

    team_max_sp_bonus: int = 0
    """Extra skill-point capacity granted to the whole team while this
    character is fielded."""

    skill_buff: EffectDeclaration | None = None
    """Buff the skill grants to every ally."""

    skill_debuff: EffectDeclaration | None = None
    """Debuff the skill applies to the enemy."""

    ult_debuff: EffectDeclaration | None = None
    """Debuff the ultimate applies to the enemy."""
