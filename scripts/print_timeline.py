"""Print the predicted action-value timeline for a team.

Usage:
    uv run python scripts/print_timeline.py kafka silver_wolf pela huohuo
    uv run python scripts/print_timeline.py seele sparkle --cycles 5 --enemy-speed 132
"""

from __future__ import annotations

import argparse
import logging

from hsr_sim.sim.content.registry import ContentRegistry
from hsr_sim.sim.scheduler import (
    CYCLE_AV,
    DEFAULT_CYCLES,
    DEFAULT_ENEMY_SPEED,
    actions_per_cycle,
    compute_timeline,
    cycle_boundaries,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Show who acts when over a few cycles")
    parser.add_argument("team", nargs="+", help="Character ids in slot order")
    parser.add_argument("--cycles", type=int, default=DEFAULT_CYCLES, help="Cycles to plan")
    parser.add_argument("--enemy-speed", type=float, default=DEFAULT_ENEMY_SPEED, help="Enemy speed")
    parser.add_argument("--speed-bonus", type=float, default=0.0, help="Flat speed added to every member")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    registry = ContentRegistry()
    registry.load_characters()
    team = [
        m.model_copy(update={"speed_bonus": args.speed_bonus})
        for m in registry.team_members(args.team)
    ]
    if not team:
        parser.error("no known characters in team")

    print("Speeds:")
    for member in team:
        print(f"  {member.character.name:20s} {member.total_speed:4d} SPD"
              f"  {actions_per_cycle(member.total_speed)} action(s)/cycle")

    timeline = compute_timeline(team, cycles=args.cycles, enemy_speed=args.enemy_speed)
    boundaries = cycle_boundaries(args.cycles)
    shown = -1

    for entry in timeline:
        cycle = min(int(entry.action_value // CYCLE_AV), len(boundaries) - 1)
        if cycle != shown:
            b = boundaries[cycle]
            print(f"\n-- Cycle {b.cycle} ({b.start_av:.0f}-{b.end_av:.0f} AV) --")
            shown = cycle
        marker = "!" if entry.is_enemy else " "
        print(f"{marker} {entry.turn_number:3d}  {entry.action_value:7.1f} AV  {entry.name}")


if __name__ == "__main__":
    main()
