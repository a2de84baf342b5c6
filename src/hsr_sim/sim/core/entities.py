"""Actor and effect models for the turn-based combat simulator.

All models are frozen Pydantic v2 ``BaseModel`` instances.  Mutations
never happen in place: every helper returns a new copy built with
``model_copy(update=...)`` so battle logs and replays always reference
the exact state they were produced from.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hsr_sim.ir.elements import ElementType, PathType
from hsr_sim.ir.skills import SkillKit

_A = TypeVar("_A", bound="Actor")


# ---------------------------------------------------------------------------
# Effect
# ---------------------------------------------------------------------------

class EffectPolarity(str, Enum):
    BUFF = "buff"
    DEBUFF = "debuff"
    DOT = "dot"


class Effect(BaseModel):
    """A timed buff, debuff, or damage-over-time attached to an actor.

    Two effects are "the same" for stacking purposes when they share both
    ``name`` and ``source``; the ``id`` only distinguishes instances for
    rendering.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    polarity: EffectPolarity
    stat: str
    """Stat key the effect feeds into (``"atkPercent"``, ``"vulnerability"``,
    ``"dot"``, ...)."""

    value: float
    """Magnitude contributed per stack."""

    duration: int = Field(ge=1)
    """Full rounds remaining."""

    stacks: int = Field(default=1, ge=1)
    max_stacks: int = Field(default=1, ge=1)
    source: str
    """Id of the actor that applied the effect."""

    dot_damage: int | None = None
    """Per-stack damage dealt at each round boundary (DoT effects only)."""

    dot_element: ElementType | None = None

    @property
    def total(self) -> float:
        return self.value * self.stacks


# ---------------------------------------------------------------------------
# Actor base
# ---------------------------------------------------------------------------

class Actor(BaseModel):
    """Common base for every combat participant."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    current_hp: int
    max_hp: int = Field(gt=0)
    speed: float = Field(gt=0)
    effects: tuple[Effect, ...] = ()

    @model_validator(mode="after")
    def _check_hp(self) -> "Actor":
        if not 0 <= self.current_hp <= self.max_hp:
            raise ValueError(
                f"current_hp must be within [0, {self.max_hp}], got {self.current_hp}"
            )
        return self

    # -- HP ------------------------------------------------------------------

    @property
    def is_dead(self) -> bool:
        return self.current_hp <= 0

    def take_damage(self: _A, amount: int) -> _A:
        """Return a copy with *amount* HP removed.  HP never drops below 0."""
        if amount <= 0:
            return self
        return self.model_copy(update={"current_hp": max(0, self.current_hp - amount)})

    def heal(self: _A, amount: int) -> _A:
        """Return a copy with *amount* HP restored, capped at ``max_hp``."""
        if amount <= 0:
            return self
        return self.model_copy(
            update={"current_hp": min(self.max_hp, self.current_hp + amount)}
        )

    # -- effects -------------------------------------------------------------

    def with_effects(self: _A, effects: tuple[Effect, ...] | list[Effect]) -> _A:
        return self.model_copy(update={"effects": tuple(effects)})


# ---------------------------------------------------------------------------
# Character
# ---------------------------------------------------------------------------

class Character(Actor):
    """A playable character fielded in the team."""

    element: ElementType
    path: PathType
    base_atk: float = Field(ge=0)

    current_energy: float = 0
    max_energy: float = Field(gt=0)

    crit_rate: float = 0.05
    crit_dmg: float = 0.5
    dmg_bonus: float = 0.0
    break_effect: float = 0.0

    kit: SkillKit
    """Multipliers and energy values for basic, skill, and ultimate."""

    @model_validator(mode="after")
    def _check_energy(self) -> "Character":
        if not 0 <= self.current_energy <= self.max_energy:
            raise ValueError(
                f"current_energy must be within [0, {self.max_energy}], "
                f"got {self.current_energy}"
            )
        return self


# ---------------------------------------------------------------------------
# Enemy
# ---------------------------------------------------------------------------

class Enemy(Actor):
    """The single enemy the team fights."""

    defense: float = Field(default=1000, ge=0)
    weakness: tuple[ElementType, ...] = ()
    resistance: dict[ElementType, float] = Field(default_factory=dict)
    """Per-element resistance.  Missing elements resist nothing."""

    toughness: int = Field(default=120, ge=0)
    max_toughness: int = Field(default=120, gt=0)
    is_broken: bool = False
    broken_turns_remaining: int = 0

    def resistance_to(self, element: ElementType) -> float:
        return self.resistance.get(element, 0.0)

    def is_weak_to(self, element: ElementType) -> bool:
        return element in self.weakness
