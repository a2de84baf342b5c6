"""Static game-data schema for the combat simulator.

Characters, skill kits, and enemies are plain Pydantic models that load
cleanly from the JSON tables under ``data/game/``.  The simulator treats
them as read-only input.
"""

from .characters import CharacterDefinition, TeamMember, calculate_total_speed
from .elements import ElementType, PathType
from .enemies import EnemyDefinition, EnemyKind
from .skills import EffectDeclaration, SkillKit

__all__ = [
    # characters
    "CharacterDefinition",
    "TeamMember",
    "calculate_total_speed",
    # elements
    "ElementType",
    "PathType",
    # enemies
    "EnemyDefinition",
    "EnemyKind",
    # skills
    "EffectDeclaration",
    "SkillKit",
]
