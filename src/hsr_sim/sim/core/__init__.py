"""Core simulation primitives for the combat simulator."""

from hsr_sim.sim.core.battle_state import (
    ActionType,
    BattleLogEntry,
    BattlePhase,
    BattleRules,
    BattleState,
    BattleSummary,
)
from hsr_sim.sim.core.entities import Actor, Character, Effect, EffectPolarity, Enemy
from hsr_sim.sim.core.rng import GameRNG

__all__ = [
    # rng
    "GameRNG",
    # entities
    "Actor",
    "Character",
    "Enemy",
    "Effect",
    "EffectPolarity",
    # battle_state
    "ActionType",
    "BattleLogEntry",
    "BattlePhase",
    "BattleRules",
    "BattleState",
    "BattleSummary",
]
