"""Telemetry data structures for batch simulation output.

``BattleTelemetry`` captures per-battle statistics for one automated
battle: outcome, round count, damage, and how each action was used.

Plain ``dataclass`` instances (not Pydantic models) to keep collection
cheap during batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BattleTelemetry:
    """Stats from a single automated battle.

    Attributes
    ----------
    seed:
        Seed the battle was run with.
    team_ids:
        Character ids in slot order.
    enemy_id:
        Identifier of the enemy fought.
    result:
        Terminal phase: ``"victory"``, ``"defeat"``, or ``"battle"`` when
        the action cap stopped the run first.
    turns:
        Rounds elapsed (the battle's turn counter).
    actions_taken:
        Character actions resolved.
    total_damage:
        Damage dealt, including break and DoT damage.
    crits:
        Number of damaging actions that crit.
    damaging_actions:
        Number of actions that dealt damage.
    actions_by_type:
        ``"basic" | "skill" | "ultimate" -> count``.
    damage_by_character:
        ``character id -> damage dealt``.
    """

    seed: int
    team_ids: list[str]
    enemy_id: str
    result: str
    turns: int
    actions_taken: int
    total_damage: int
    crits: int = 0
    damaging_actions: int = 0
    actions_by_type: dict[str, int] = field(default_factory=dict)
    damage_by_character: dict[str, int] = field(default_factory=dict)

    @property
    def won(self) -> bool:
        return self.result == "victory"
