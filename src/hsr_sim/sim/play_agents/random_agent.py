"""Random action agent -- picks uniformly among the legal actions.

Used as the baseline for batch runs: it exercises every action path and
gives a lower bound on team damage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hsr_sim.sim.core.battle_state import ActionType
from hsr_sim.sim.core.rng import GameRNG
from hsr_sim.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from hsr_sim.sim.core.battle_state import BattleState
    from hsr_sim.sim.core.entities import Character


class RandomAgent(PlayAgent):
    """Agent that plays a random legal action each turn.

    Parameters
    ----------
    rng:
        Seeded RNG for deterministic choices.  If ``None``, a default
        ``GameRNG(seed=0)`` is created.
    """

    def __init__(self, rng: GameRNG | None = None) -> None:
        self._rng = rng or GameRNG(seed=0)

    def choose_action(self, battle: BattleState, character: Character) -> ActionType:
        legal = self.legal_actions(battle)
        if not legal:
            return ActionType.BASIC
        return self._rng.random_choice(legal)
