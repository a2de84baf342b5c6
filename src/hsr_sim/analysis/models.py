"""Pydantic v2 models for batch analysis output.

Aggregate statistics over many automated battles, serialisable to and
from JSON.
"""

from __future__ import annotations

from pydantic import BaseModel


class CharacterMetrics(BaseModel):
    """Per-character damage contribution across a batch."""

    character_id: str
    total_damage: int
    avg_damage_per_battle: float
    damage_share: float
    """Fraction of the team's action damage dealt by this character."""


class BatchMetrics(BaseModel):
    """Aggregate statistics for one batch of battles."""

    total_battles: int
    victories: int
    defeats: int
    unfinished: int
    """Battles stopped by the action cap."""

    victory_rate: float
    avg_turns: float
    """Average rounds per battle."""

    avg_turns_to_victory: float | None = None
    avg_total_damage: float
    avg_damage_per_action: float
    crit_rate: float
    """Crits among damaging actions."""

    action_mix: dict[str, float]
    """Share of each action type among all actions."""

    characters: list[CharacterMetrics] = []


class BatchReport(BaseModel):
    """Batch metrics plus the configuration that produced them."""

    agent: str
    team: list[str]
    enemy_id: str | None = None
    base_seed: int
    generated_at: str
    metrics: BatchMetrics
