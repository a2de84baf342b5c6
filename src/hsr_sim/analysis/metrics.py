"""Pure metric computation functions for batch analysis.

All functions take a list of BattleTelemetry and return structured metrics.
No side effects, no I/O.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from hsr_sim.analysis.models import BatchMetrics, CharacterMetrics

if TYPE_CHECKING:
    from hsr_sim.sim.telemetry import BattleTelemetry


def compute_character_metrics(battles: list[BattleTelemetry]) -> list[CharacterMetrics]:
    """Per-character damage totals, sorted by damage dealt (highest first)."""
    if not battles:
        return []

    totals: Counter[str] = Counter()
    for b in battles:
        totals.update(b.damage_by_character)

    team_total = sum(totals.values())
    metrics = [
        CharacterMetrics(
            character_id=cid,
            total_damage=dmg,
            avg_damage_per_battle=dmg / len(battles),
            damage_share=dmg / team_total if team_total else 0.0,
        )
        for cid, dmg in totals.items()
    ]
    metrics.sort(key=lambda m: m.total_damage, reverse=True)
    return metrics


def compute_batch_metrics(battles: list[BattleTelemetry]) -> BatchMetrics:
    """Compute aggregate statistics for a batch."""
    total = len(battles)
    if total == 0:
        return BatchMetrics(
            total_battles=0, victories=0, defeats=0, unfinished=0,
            victory_rate=0.0, avg_turns=0.0, avg_total_damage=0.0,
            avg_damage_per_action=0.0, crit_rate=0.0, action_mix={},
        )

    victories = [b for b in battles if b.result == "victory"]
    defeats = sum(1 for b in battles if b.result == "defeat")

    actions = sum(b.actions_taken for b in battles)
    damaging = sum(b.damaging_actions for b in battles)
    crits = sum(b.crits for b in battles)
    action_damage = sum(sum(b.damage_by_character.values()) for b in battles)

    mix: Counter[str] = Counter()
    for b in battles:
        mix.update(b.actions_by_type)

    return BatchMetrics(
        total_battles=total,
        victories=len(victories),
        defeats=defeats,
        unfinished=total - len(victories) - defeats,
        victory_rate=len(victories) / total,
        avg_turns=sum(b.turns for b in battles) / total,
        avg_turns_to_victory=(
            sum(b.turns for b in victories) / len(victories) if victories else None
        ),
        avg_total_damage=sum(b.total_damage for b in battles) / total,
        avg_damage_per_action=action_damage / actions if actions else 0.0,
        crit_rate=crits / damaging if damaging else 0.0,
        action_mix={k: v / actions for k, v in sorted(mix.items())} if actions else {},
        characters=compute_character_metrics(battles),
    )
