"""Base class for agents that choose actions in automated battles.

The battle simulator asks the agent which action the active character
should take.  Agents only see the state; they never mutate it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from hsr_sim.sim.battle import can_perform
from hsr_sim.sim.core.battle_state import ActionType

if TYPE_CHECKING:
    from hsr_sim.sim.core.battle_state import BattleState
    from hsr_sim.sim.core.entities import Character


class PlayAgent(ABC):
    """Base class for action-choosing policies."""

    @abstractmethod
    def choose_action(self, battle: BattleState, character: Character) -> ActionType:
        """Choose the action *character* takes this turn.

        Parameters
        ----------
        battle:
            The current state, giving the agent full observability.
        character:
            The active team member.

        Returns
        -------
        ActionType
            The chosen action.  Returning an action that cannot be
            performed makes the simulator fall back to a basic attack.
        """

    @staticmethod
    def legal_actions(battle: BattleState) -> list[ActionType]:
        """Every action the active character could perform right now."""
        return [a for a in ActionType if can_perform(battle, a)]
