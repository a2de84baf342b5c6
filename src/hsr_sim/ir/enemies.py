"""Enemy definitions -- bosses, elites, and user-configured targets."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from .elements import ElementType


class EnemyKind(str, Enum):
    BOSS = "boss"
    ELITE = "elite"
    CUSTOM = "custom"


class EnemyDefinition(BaseModel):
    """Static definition of an enemy the team can be pitted against."""

    id: str
    name: str
    type: EnemyKind = EnemyKind.BOSS

    hp: int = Field(gt=0)
    speed: float = Field(gt=0)
    weakness: list[ElementType] = Field(default_factory=list)

    resistance: dict[ElementType, float] = Field(default_factory=dict)
    """Per-element resistance as a signed fraction.  Elements missing from
    the map resist nothing."""

    defense: float = Field(default=1000, ge=0, alias="def")
    """Flat defense value.  Serialised as ``"def"``."""

    toughness: int = Field(default=120, gt=0)

    model_config = {"populate_by_name": True}
