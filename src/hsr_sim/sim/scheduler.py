"""Action-value scheduling -- who acts next.

Two schedulers live here, and they intentionally differ:

- **Timeline** (:func:`compute_timeline`): true action-value accumulation
  for the speed planner.  Every actor waits ``10000 / speed`` AV between
  turns (half that before its first turn), and the queue always releases
  the actor with the lowest accumulated AV.
- **Turn order** (:func:`compute_turn_order` / :func:`advance_turn`): the
  interactive simulator's simplified round-robin.  Actors are sorted once
  by speed, fastest first, and the current-actor pointer walks that list
  circularly.  Wrapping back to the first actor ends a round and ticks
  every effect.

Ties are always broken by slot order: team members in the order given,
then the enemy.
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from pydantic import BaseModel

from hsr_sim.ir.characters import calculate_total_speed
from hsr_sim.ir.elements import ElementType
from hsr_sim.sim.core.battle_state import BattlePhase
from hsr_sim.sim.mechanics.effects import tick_effects

if TYPE_CHECKING:
    from hsr_sim.ir.characters import TeamMember
    from hsr_sim.sim.core.battle_state import BattleState
    from hsr_sim.sim.core.entities import Character, Enemy

logger = logging.getLogger(__name__)

AV_BASE = 10000
CYCLE_AV = 150
MAX_TIMELINE_TURNS = 100
DEFAULT_CYCLES = 3
DEFAULT_ENEMY_SPEED = 80
ENEMY_TIMELINE_ID = "boss"


# ---------------------------------------------------------------------------
# Action value
# ---------------------------------------------------------------------------

def action_value(speed: float) -> float:
    """AV an actor waits between turns: ``10000 / speed``.

    Raises
    ------
    ValueError
        If *speed* is not strictly positive.
    """
    if speed <= 0:
        raise ValueError(f"speed must be > 0, got {speed}")
    return AV_BASE / speed


def initial_action_value(speed: float) -> float:
    """AV before an actor's first turn (half the regular wait)."""
    return action_value(speed) * 0.5


def actions_per_cycle(speed: float) -> int:
    """Whole turns an actor with *speed* fits into one 150 AV cycle."""
    return math.floor(CYCLE_AV / action_value(speed))


# Minimum speed for N actions per cycle.
SPEED_BREAKPOINTS: tuple[tuple[int, int], ...] = (
    (1, 67),
    (2, 134),
    (3, 200),
)


# ---------------------------------------------------------------------------
# Timeline
# ---------------------------------------------------------------------------

@dataclass
class ScheduledActor:
    """Transient queue record.  Only ``action_value`` ever changes."""

    id: str
    name: str
    speed: float
    action_value: float
    slot: int
    element: ElementType | None = None
    is_enemy: bool = False


class TimelineEntry(BaseModel):
    actor_id: str
    name: str
    action_value: float
    """Accumulated AV at which the turn happens."""

    turn_number: int
    element: ElementType | None = None
    is_enemy: bool = False


class CycleBoundary(BaseModel):
    cycle: int
    start_av: float
    end_av: float


def schedule(
    actors: Sequence[ScheduledActor],
    horizon: float,
    max_turns: int = MAX_TIMELINE_TURNS,
) -> list[TimelineEntry]:
    """Release turns in AV order until *horizon* or *max_turns* is reached.

    The queue is keyed on ``(action_value, slot)``, so equal AVs resolve
    to the lower slot.  Each released actor is pushed back with its full
    per-turn AV added.
    """
    queue: list[tuple[float, int, ScheduledActor]] = [
        (a.action_value, a.slot, a) for a in actors
    ]
    heapq.heapify(queue)

    entries: list[TimelineEntry] = []
    while queue and len(entries) < max_turns:
        av, slot, actor = heapq.heappop(queue)
        if av > horizon:
            break

        entries.append(TimelineEntry(
            actor_id=actor.id,
            name=actor.name,
            action_value=av,
            turn_number=len(entries) + 1,
            element=actor.element,
            is_enemy=actor.is_enemy,
        ))

        actor.action_value = av + action_value(actor.speed)
        heapq.heappush(queue, (actor.action_value, slot, actor))

    return entries


def compute_timeline(
    team: Sequence[TeamMember],
    cycles: int = DEFAULT_CYCLES,
    enemy_speed: float = DEFAULT_ENEMY_SPEED,
) -> list[TimelineEntry]:
    """Predict turn order for *team* against one enemy over *cycles* cycles.

    Parameters
    ----------
    team:
        Team slots, in slot order.  An empty team yields an empty timeline.
    cycles:
        Horizon in 150 AV cycles.
    enemy_speed:
        Speed of the enemy, which takes the last slot.

    Returns
    -------
    list[TimelineEntry]
        At most :data:`MAX_TIMELINE_TURNS` entries in acting order.
    """
    if not team:
        return []
    if cycles < 0:
        raise ValueError(f"cycles must be >= 0, got {cycles}")

    actors: list[ScheduledActor] = []
    for slot, member in enumerate(team):
        speed = calculate_total_speed(member)
        actors.append(ScheduledActor(
            id=member.character.id,
            name=member.character.name,
            speed=speed,
            action_value=initial_action_value(speed),
            slot=slot,
            element=member.character.element,
        ))
    actors.append(ScheduledActor(
        id=ENEMY_TIMELINE_ID,
        name="Boss",
        speed=enemy_speed,
        action_value=initial_action_value(enemy_speed),
        slot=len(team),
        is_enemy=True,
    ))

    return schedule(actors, horizon=CYCLE_AV * cycles)


def cycle_boundaries(cycles: int) -> list[CycleBoundary]:
    return [
        CycleBoundary(cycle=i, start_av=i * CYCLE_AV, end_av=(i + 1) * CYCLE_AV)
        for i in range(cycles)
    ]


# ---------------------------------------------------------------------------
# Interactive turn order
# ---------------------------------------------------------------------------

def compute_turn_order(team: Sequence[Character], enemy: Enemy) -> tuple[str, ...]:
    """Fixed acting order for a battle: speed descending, ties by slot."""
    slots = [*team, enemy]
    for actor in slots:
        if actor.speed <= 0:
            raise ValueError(f"{actor.name} has non-positive speed {actor.speed}")
    ranked = sorted(enumerate(slots), key=lambda pair: (-pair[1].speed, pair[0]))
    return tuple(actor.id for _, actor in ranked)


def next_turn_index(state: BattleState) -> int:
    if not state.turn_order:
        return 0
    return (state.current_index + 1) % len(state.turn_order)


def is_round_boundary(state: BattleState) -> bool:
    """True when advancing from *state* wraps back to the first actor."""
    return (
        bool(state.turn_order)
        and state.current_index >= 0
        and next_turn_index(state) == 0
    )


def advance_turn(state: BattleState) -> BattleState:
    """Move the current-actor pointer one step around the turn order.

    When the pointer wraps, the round counter increments and every
    actor's effects tick down once.  States not in the ``battle`` phase
    are returned unchanged.
    """
    if state.phase != BattlePhase.BATTLE or not state.turn_order:
        return state

    wrapped = is_round_boundary(state)
    next_id = state.turn_order[next_turn_index(state)]
    update: dict[str, object] = {"current_actor_id": next_id}

    if wrapped:
        update["turn"] = state.turn + 1
        update["team"] = tuple(tick_effects(c) for c in state.team)
        if state.enemy is not None:
            update["enemy"] = tick_effects(state.enemy)
        logger.debug("Round %d ends, effects ticked", state.turn)

    return state.model_copy(update=update)
