"""Battle simulation runner -- ties the battle reducers, agents, and telemetry together.

Provides two key classes:

- **BattleSimulator**: Plays a single battle to completion with an agent.
- **BatchRunner**: Orchestrates many seeded battles (optionally in parallel).

Battles share nothing mutable, so parallel runs simply give each worker
its own registry and its own states.
"""

from __future__ import annotations

import logging
import multiprocessing
from collections import Counter
from typing import Any, TYPE_CHECKING

from hsr_sim.sim.battle import (
    can_perform,
    end_turn,
    get_active_character,
    init_battle,
    perform_action,
)
from hsr_sim.sim.core.battle_state import ActionType, BattlePhase, BattleRules
from hsr_sim.sim.core.rng import GameRNG
from hsr_sim.sim.play_agents import AGENTS
from hsr_sim.sim.play_agents.base import PlayAgent
from hsr_sim.sim.play_agents.greedy_agent import GreedyAgent
from hsr_sim.sim.play_agents.random_agent import RandomAgent
from hsr_sim.sim.telemetry import BattleTelemetry

if TYPE_CHECKING:
    from hsr_sim.sim.content.registry import ContentRegistry
    from hsr_sim.sim.core.battle_state import BattleState

logger = logging.getLogger(__name__)

_MAX_ACTIONS = 500


# =====================================================================
# BattleSimulator
# =====================================================================

class BattleSimulator:
    """Runs one battle until victory, defeat, or the action cap.

    Parameters
    ----------
    agent:
        Policy choosing each character's action.
    max_actions:
        Character actions after which the run stops even if the enemy
        still stands.
    """

    def __init__(self, agent: PlayAgent, max_actions: int = _MAX_ACTIONS) -> None:
        self.agent = agent
        self.max_actions = max_actions

    def run_battle(
        self,
        battle: BattleState,
        rng: GameRNG,
        seed: int = 0,
    ) -> tuple[BattleState, BattleTelemetry]:
        """Play *battle* out and return the final state with its telemetry."""
        actions_by_type: Counter[str] = Counter()
        damage_by_character: Counter[str] = Counter()
        crits = 0
        damaging = 0
        actions = 0

        while battle.phase == BattlePhase.BATTLE and actions < self.max_actions:
            char = get_active_character(battle)
            if char is None:
                battle = end_turn(battle)
                continue
            if char.is_dead:
                if all(c.is_dead for c in battle.team):
                    break
                battle = end_turn(battle)
                continue

            action = ActionType(self.agent.choose_action(battle, char))
            if not can_perform(battle, action):
                logger.warning(
                    "%s chose illegal action %s for %s, falling back to basic",
                    type(self.agent).__name__, action.value, char.name,
                )
                action = ActionType.BASIC

            damage_before = battle.total_damage
            battle = perform_action(battle, action, rng=rng, auto_advance=False)
            actions += 1

            dealt = battle.total_damage - damage_before
            actions_by_type[action.value] += 1
            damage_by_character[char.id] += dealt
            if dealt > 0:
                damaging += 1
                if battle.battle_log[0].is_crit:
                    crits += 1

            battle = end_turn(battle)

        if battle.phase == BattlePhase.BATTLE and actions >= self.max_actions:
            logger.warning("Battle stopped at the %d action cap", self.max_actions)

        assert battle.enemy is not None
        telemetry = BattleTelemetry(
            seed=seed,
            team_ids=[c.id for c in battle.team],
            enemy_id=battle.enemy.id,
            result=battle.phase.value,
            turns=battle.turn,
            actions_taken=actions,
            total_damage=battle.total_damage,
            crits=crits,
            damaging_actions=damaging,
            actions_by_type=dict(actions_by_type),
            damage_by_character=dict(damage_by_character),
        )
        return battle, telemetry


# =====================================================================
# BatchRunner
# =====================================================================

def _make_agent(agent_class: type[PlayAgent], seed: int) -> PlayAgent:
    if agent_class is RandomAgent:
        return RandomAgent(rng=GameRNG(seed).fork("agent"))
    return agent_class()


def _run_single_battle(
    registry: ContentRegistry,
    agent: PlayAgent,
    seed: int,
    encounter_config: dict[str, Any],
) -> BattleTelemetry:
    """Run one battle with the given seed and configuration.

    ``encounter_config`` keys: ``team`` (character ids), ``enemy_id``,
    ``enemy_overrides``, ``break_enabled``, ``max_actions``.
    """
    rules = BattleRules(break_enabled=encounter_config.get("break_enabled", False))
    battle = init_battle(
        registry,
        encounter_config["team"],
        enemy_id=encounter_config.get("enemy_id"),
        enemy_overrides=encounter_config.get("enemy_overrides"),
        rules=rules,
    )
    combat_rng = GameRNG(seed).fork("combat")
    simulator = BattleSimulator(agent, encounter_config.get("max_actions", _MAX_ACTIONS))
    _, telemetry = simulator.run_battle(battle, combat_rng, seed=seed)
    return telemetry


def _worker_run_single(args: tuple) -> BattleTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    agent_name, characters_path, skills_path, enemies_path, seed, encounter_config = args

    from hsr_sim.sim.content.registry import ContentRegistry

    registry = ContentRegistry()
    registry.load_all(characters_path, skills_path, enemies_path)

    agent = _make_agent(AGENTS[agent_name], seed)
    return _run_single_battle(registry, agent, seed, encounter_config)


class BatchRunner:
    """Runs many seeded battles, optionally in parallel."""

    def __init__(
        self,
        registry: ContentRegistry,
        agent_class: type[PlayAgent] = GreedyAgent,
    ) -> None:
        self.registry = registry
        self.agent_class = agent_class

    def run_batch(
        self,
        n_runs: int,
        encounter_config: dict[str, Any],
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[BattleTelemetry]:
        """Run *n_runs* battles with seeds ``base_seed .. base_seed + n_runs - 1``.

        Raises
        ------
        ValueError
            If the configuration is rejected (checked once, up front).
        """
        if "team" not in encounter_config:
            raise ValueError("encounter_config needs a 'team' list of character ids")
        seeds = [base_seed + i for i in range(n_runs)]
        if not seeds:
            return []

        # Fail fast on bad ids before spinning up workers.
        init_battle(
            self.registry,
            encounter_config["team"],
            enemy_id=encounter_config.get("enemy_id"),
            enemy_overrides=encounter_config.get("enemy_overrides"),
        )

        if parallel and n_runs > 1:
            return self._run_parallel(seeds, encounter_config)
        return self._run_sequential(seeds, encounter_config)

    def _run_sequential(
        self,
        seeds: list[int],
        encounter_config: dict[str, Any],
    ) -> list[BattleTelemetry]:
        results: list[BattleTelemetry] = []
        for seed in seeds:
            agent = _make_agent(self.agent_class, seed)
            results.append(
                _run_single_battle(self.registry, agent, seed, encounter_config)
            )
        return results

    def _run_parallel(
        self,
        seeds: list[int],
        encounter_config: dict[str, Any],
    ) -> list[BattleTelemetry]:
        """Run battles in a process pool.

        Rather than pickling the registry, each worker reloads it from the
        JSON files the caller's registry was loaded from.
        """
        agent_name = next(
            (name for name, cls in AGENTS.items() if cls is self.agent_class), None,
        )
        if agent_name is None:
            raise ValueError(
                f"Parallel runs need a registered agent, got {self.agent_class.__name__}"
            )

        reg = self.registry
        work_items = [
            (
                agent_name,
                str(reg.characters_path),
                str(reg.skills_path),
                str(reg.enemies_path),
                seed,
                encounter_config,
            )
            for seed in seeds
        ]
        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            return pool.map(_worker_run_single, work_items)
