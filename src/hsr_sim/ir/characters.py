"""Character definitions and team-builder slots."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

from .elements import ElementType, PathType


class CharacterDefinition(BaseModel):
    """Static roster entry for a playable character."""

    id: str
    """Unique identifier (e.g. ``"kafka"``)."""

    name: str
    """Display name."""

    element: ElementType
    path: PathType
    rarity: int = Field(default=5, ge=4, le=5)

    base_speed: float = Field(gt=0)
    """Speed before any gear or buffs."""


class TeamMember(BaseModel):
    """A character slotted into a team, plus the speed sources the planner tracks."""

    character: CharacterDefinition

    speed_bonus: float = 0.0
    """Flat speed from traces and other fixed sources."""

    speed_percent: float = 0.0
    """Percentage speed bonus, expressed in percent (``10`` means +10 %)."""

    relic_speed_bonus: float = 0.0
    """Flat speed from relic substats and boots."""

    light_cone_speed: float = 0.0
    """Flat speed granted by the equipped light cone."""

    @property
    def total_speed(self) -> int:
        return calculate_total_speed(self)


def calculate_total_speed(member: TeamMember) -> int:
    """Return the member's speed with every bonus folded in (floored).

    Percentage bonuses scale only the base speed; flat sources are added
    afterwards.
    """
    base = member.character.base_speed
    flat = member.speed_bonus + member.relic_speed_bonus + member.light_cone_speed
    percent = member.speed_percent / 100
    return math.floor(base * (1 + percent) + flat)
