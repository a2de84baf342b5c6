"""Report generation and persistence for batch results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from hsr_sim.analysis.models import BatchMetrics, BatchReport


def format_damage(damage: float) -> str:
    """Compact damage label: ``1.23M``, ``45.6K``, or the plain number."""
    if damage >= 1_000_000:
        return f"{damage / 1_000_000:.2f}M"
    if damage >= 1_000:
        return f"{damage / 1_000:.1f}K"
    return str(int(damage))


def hp_percent(current: int, maximum: int) -> int:
    if maximum <= 0:
        return 0
    return round(current / maximum * 100)


def build_report(
    metrics: BatchMetrics,
    agent: str,
    team: list[str],
    enemy_id: str | None,
    base_seed: int,
) -> BatchReport:
    return BatchReport(
        agent=agent,
        team=team,
        enemy_id=enemy_id,
        base_seed=base_seed,
        generated_at=datetime.now(timezone.utc).isoformat(),
        metrics=metrics,
    )


def save_report(report: BatchReport, path: Path) -> None:
    """Save a report to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.model_dump(mode="json"), indent=2))


def load_report(path: Path) -> BatchReport:
    return BatchReport.model_validate_json(path.read_text())


def generate_text_report(report: BatchReport) -> str:
    """Generate a human-readable summary of a batch."""
    m = report.metrics
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"Battle Batch Report - {report.agent} agent")
    lines.append(f"Team: {', '.join(report.team)} vs {report.enemy_id or 'training dummy'}")
    lines.append(f"Battles: {m.total_battles:,} | Generated: {report.generated_at}")
    lines.append("=" * 60)

    lines.append("")
    lines.append("## Outcomes")
    lines.append(f"  Victory rate:    {m.victory_rate:.1%} ({m.victories}/{m.total_battles})")
    lines.append(f"  Defeats:         {m.defeats}")
    lines.append(f"  Unfinished:      {m.unfinished}")
    lines.append(f"  Avg rounds:      {m.avg_turns:.1f}")
    if m.avg_turns_to_victory is not None:
        lines.append(f"  Rounds to win:   {m.avg_turns_to_victory:.1f}")

    lines.append("")
    lines.append("## Damage")
    lines.append(f"  Avg total:       {format_damage(m.avg_total_damage)}")
    lines.append(f"  Avg per action:  {format_damage(m.avg_damage_per_action)}")
    lines.append(f"  Crit rate:       {m.crit_rate:.1%}")

    if m.action_mix:
        lines.append("")
        lines.append("## Action Mix")
        for action, share in m.action_mix.items():
            lines.append(f"  {action:10s} {share:.1%}")

    if m.characters:
        lines.append("")
        lines.append("## Damage by Character")
        for c in m.characters:
            lines.append(
                f"  {c.character_id:20s} {format_damage(c.total_damage):>8s}"
                f"  share={c.damage_share:.1%}"
                f"  per_battle={format_damage(c.avg_damage_per_battle)}"
            )

    return "\n".join(lines)
