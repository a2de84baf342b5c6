"""Battle state and rules for the combat simulator.

``BattleState`` is the whole-battle record the orchestration reducers in
:mod:`hsr_sim.sim.battle` receive and return.  It is frozen: a reducer
produces a new state and the caller decides what to keep, so independent
simulations can run side by side without sharing anything mutable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from hsr_sim.sim.core.entities import Character, Enemy


class BattlePhase(str, Enum):
    SETUP = "setup"
    BATTLE = "battle"
    VICTORY = "victory"
    DEFEAT = "defeat"


class ActionType(str, Enum):
    BASIC = "basic"
    SKILL = "skill"
    ULTIMATE = "ultimate"


# ---------------------------------------------------------------------------
# BattleRules
# ---------------------------------------------------------------------------

class BattleRules(BaseModel):
    """Tunable constants for a battle.

    The gear fields approximate a built character on top of the bare
    skill-kit stats, since the simulator has no relic or light cone model.
    """

    model_config = ConfigDict(frozen=True)

    attacker_level: int = 80
    target_level: int = 90

    gear_atk_bonus: float = 1500
    gear_max_hp: int = 10000
    gear_speed_bonus: float = 30
    gear_crit_rate_bonus: float = 0.6
    gear_crit_dmg_bonus: float = 1.5
    gear_dmg_bonus: float = 0.46

    starting_skill_points: int = 3
    max_skill_points: int = 5

    skill_debuff_max_stacks: int = 3
    ult_debuff_max_stacks: int = 5
    skill_buff_max_stacks: int = 1

    break_enabled: bool = False
    """Resolve toughness, break damage, and break DoTs."""

    defeat_check: bool = True
    """Enter ``defeat`` once every team member is at 0 HP."""


# ---------------------------------------------------------------------------
# BattleLogEntry
# ---------------------------------------------------------------------------

class BattleLogEntry(BaseModel):
    """One line of the battle log."""

    model_config = ConfigDict(frozen=True)

    turn: int
    actor_name: str
    description: str
    damage: int | None = None
    is_crit: bool | None = None
    effects: list[str] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# BattleState
# ---------------------------------------------------------------------------

class BattleState(BaseModel):
    """Full orchestration record of a single battle."""

    model_config = ConfigDict(frozen=True)

    turn: int = 0
    """Round counter.  Starts at 1 when the battle begins and increments
    each time the turn order wraps."""

    phase: BattlePhase = BattlePhase.SETUP
    team: tuple[Character, ...] = ()
    enemy: Enemy | None = None

    turn_order: tuple[str, ...] = ()
    """Actor ids in acting order, fixed for the whole battle."""

    current_actor_id: str = ""
    battle_log: tuple[BattleLogEntry, ...] = ()
    """Most recent entry first."""

    total_damage: int = 0
    skill_points: int = 3
    max_skill_points: int = 5
    rules: BattleRules = Field(default_factory=BattleRules)

    # -- queries -------------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.phase in (BattlePhase.VICTORY, BattlePhase.DEFEAT)

    @property
    def current_index(self) -> int:
        """Position of the current actor in ``turn_order`` (``-1`` if unset)."""
        try:
            return self.turn_order.index(self.current_actor_id)
        except ValueError:
            return -1

    @property
    def is_enemy_turn(self) -> bool:
        return self.enemy is not None and self.current_actor_id == self.enemy.id

    def get_character(self, character_id: str) -> Character | None:
        for char in self.team:
            if char.id == character_id:
                return char
        return None

    # -- copy helpers --------------------------------------------------------

    def with_character(self, character: Character) -> BattleState:
        """Return a copy with the team member sharing *character*'s id replaced."""
        team = tuple(character if c.id == character.id else c for c in self.team)
        return self.model_copy(update={"team": team})

    def with_log(self, entry: BattleLogEntry) -> BattleState:
        """Return a copy with *entry* prepended to the log."""
        return self.model_copy(update={"battle_log": (entry, *self.battle_log)})


# ---------------------------------------------------------------------------
# BattleSummary
# ---------------------------------------------------------------------------

class BattleSummary(BaseModel):
    """Compact result record handed to match-history storage."""

    phase: BattlePhase
    turns: int
    total_damage: int
    team_ids: list[str]
    enemy_id: str | None = None
    enemy_hp_remaining: int | None = None
    actions_logged: int = 0
