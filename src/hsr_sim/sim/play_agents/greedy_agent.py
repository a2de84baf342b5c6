"""Greedy agent -- ultimate when charged, skill when affordable, else basic.

Matches how most players auto-battle a training dummy.  Two refinements
keep the skill point pool healthy:

    - Support skills (no damage) are only used while their buff is not
      already on the caster, so the team does not burn points refreshing it.
    - With ``sp_reserve`` set, damaging skills are held back unless the
      pool stays at or above the reserve after paying.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hsr_sim.sim.core.battle_state import ActionType
from hsr_sim.sim.mechanics.effects import has_effect
from hsr_sim.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from hsr_sim.sim.core.battle_state import BattleState
    from hsr_sim.sim.core.entities import Character


class GreedyAgent(PlayAgent):
    """Agent that always spends resources as soon as it can.

    Parameters
    ----------
    sp_reserve:
        Skill points to keep in the pool when choosing a damaging skill.
    """

    def __init__(self, sp_reserve: int = 0) -> None:
        self._sp_reserve = sp_reserve

    def choose_action(self, battle: BattleState, character: Character) -> ActionType:
        legal = self.legal_actions(battle)

        if ActionType.ULTIMATE in legal:
            return ActionType.ULTIMATE

        if ActionType.SKILL in legal and self._wants_skill(battle, character):
            return ActionType.SKILL

        return ActionType.BASIC

    def _wants_skill(self, battle: BattleState, character: Character) -> bool:
        kit = character.kit
        if kit.skill_multiplier == 0:
            if kit.skill_buff is not None:
                return not has_effect(character, f"{character.name} Buff", character.id)
            return kit.skill_debuff is not None
        return battle.skill_points - kit.skill_sp_cost >= self._sp_reserve
