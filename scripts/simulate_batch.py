"""Run a batch of automated battles and print a damage report.

Usage:
    uv run python scripts/simulate_batch.py --team kafka silver_wolf pela huohuo
    uv run python scripts/simulate_batch.py --team seele sparkle --enemy cocolia \
        --runs 1000 --agent random --parallel --output data/reports/seele.json
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Any

from hsr_sim.analysis.metrics import compute_batch_metrics
from hsr_sim.analysis.report import build_report, generate_text_report, save_report
from hsr_sim.sim.content.registry import ContentRegistry
from hsr_sim.sim.play_agents import AGENTS
from hsr_sim.sim.runner import BatchRunner


def main() -> None:
    parser = argparse.ArgumentParser(description="Run automated battles for a team")
    parser.add_argument("--team", nargs="+", required=True, help="Character ids in slot order")
    parser.add_argument("--enemy", type=str, default=None, help="Enemy id (default: training dummy)")
    parser.add_argument("--enemy-hp", type=int, default=None, help="Override the enemy's max HP")
    parser.add_argument("--runs", type=int, default=100, help="Number of battles")
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--agent", choices=sorted(AGENTS), default="greedy", help="Action policy")
    parser.add_argument("--max-actions", type=int, default=500, help="Action cap per battle")
    parser.add_argument("--break", dest="break_enabled", action="store_true", help="Enable weakness break")
    parser.add_argument("--parallel", action="store_true", help="Use a process pool")
    parser.add_argument("--output", type=Path, default=None, help="Write the JSON report here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("Loading registry...")
    registry = ContentRegistry()
    registry.load_all()

    config: dict[str, Any] = {
        "team": args.team,
        "enemy_id": args.enemy,
        "break_enabled": args.break_enabled,
        "max_actions": args.max_actions,
    }
    if args.enemy_hp is not None:
        config["enemy_overrides"] = {"max_hp": args.enemy_hp}

    runner = BatchRunner(registry, agent_class=AGENTS[args.agent])
    print(f"Running {args.runs:,} battles with the {args.agent} agent...")
    t0 = time.perf_counter()
    try:
        telemetry = runner.run_batch(
            args.runs, config, base_seed=args.seed, parallel=args.parallel,
        )
    except ValueError as exc:
        parser.error(str(exc))
    elapsed = time.perf_counter() - t0
    print(f"Done in {elapsed:.1f}s")

    report = build_report(
        compute_batch_metrics(telemetry),
        agent=args.agent,
        team=args.team,
        enemy_id=args.enemy,
        base_seed=args.seed,
    )
    if args.output is not None:
        save_report(report, args.output)
        print(f"Saved report to {args.output}")

    print()
    print(generate_text_report(report))


if __name__ == "__main__":
    main()
