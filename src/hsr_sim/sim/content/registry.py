"""Content registry -- loads and serves character, skill kit, and enemy definitions.

Game data is loaded from JSON files in ``data/game/``.  The simulator
treats everything served from here as read-only, fully-validated input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hsr_sim.ir.characters import CharacterDefinition, TeamMember
from hsr_sim.ir.enemies import EnemyDefinition
from hsr_sim.ir.skills import SkillKit

logger = logging.getLogger(__name__)

# Default paths relative to the project root.
_PROJECT_ROOT = Path(__file__).resolve().parents[4]  # src/hsr_sim/sim/content -> root
_DEFAULT_CHARACTERS_PATH = _PROJECT_ROOT / "data" / "game" / "characters.json"
_DEFAULT_SKILLS_PATH = _PROJECT_ROOT / "data" / "game" / "skills.json"
_DEFAULT_ENEMIES_PATH = _PROJECT_ROOT / "data" / "game" / "enemies.json"


def _read_json(path: str | Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class ContentRegistry:
    """Loads and serves static game data.

    Usage::

        registry = ContentRegistry()
        registry.load_all()

        kafka = registry.get_character("kafka")
        kit = registry.get_skill_kit("kafka")
        dummy = registry.get_enemy("training_dummy")
    """

    def __init__(self) -> None:
        self.characters: dict[str, CharacterDefinition] = {}
        self.skills: dict[str, SkillKit] = {}
        self.enemies: dict[str, EnemyDefinition] = {}
        # Files most recently loaded, so worker processes can rebuild the
        # same registry.
        self.characters_path: Path = _DEFAULT_CHARACTERS_PATH
        self.skills_path: Path = _DEFAULT_SKILLS_PATH
        self.enemies_path: Path = _DEFAULT_ENEMIES_PATH

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_characters(self, path: str | Path | None = None) -> None:
        """Load character definitions from a JSON list.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to
            ``data/game/characters.json`` relative to the project root.
        """
        self.characters_path = Path(path or _DEFAULT_CHARACTERS_PATH)
        raw_chars: list[dict[str, Any]] = _read_json(self.characters_path)
        for raw in raw_chars:
            if "_section" in raw:
                continue  # Skip organizational section markers
            char = CharacterDefinition(**raw)
            self.characters[char.id] = char

    def load_skills(self, path: str | Path | None = None) -> None:
        """Load skill kits from a JSON object keyed by character id.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to
            ``data/game/skills.json`` relative to the project root.
        """
        self.skills_path = Path(path or _DEFAULT_SKILLS_PATH)
        raw_kits: dict[str, dict[str, Any]] = _read_json(self.skills_path)
        for char_id, raw in raw_kits.items():
            self.skills[char_id] = SkillKit(**raw)

    def load_enemies(self, path: str | Path | None = None) -> None:
        """Load enemy definitions from a JSON list.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to
            ``data/game/enemies.json`` relative to the project root.
        """
        self.enemies_path = Path(path or _DEFAULT_ENEMIES_PATH)
        raw_enemies: list[dict[str, Any]] = _read_json(self.enemies_path)
        for raw in raw_enemies:
            if "_section" in raw:
                continue  # Skip organizational section markers
            enemy = EnemyDefinition(**raw)
            self.enemies[enemy.id] = enemy

    def load_all(
        self,
        characters_path: str | Path | None = None,
        skills_path: str | Path | None = None,
        enemies_path: str | Path | None = None,
    ) -> None:
        self.load_characters(characters_path)
        self.load_skills(skills_path)
        self.load_enemies(enemies_path)

        missing = sorted(set(self.characters) - set(self.skills))
        if missing:
            logger.warning("Characters without a skill kit: %s", ", ".join(missing))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_character(self, character_id: str) -> CharacterDefinition | None:
        """Return the :class:`CharacterDefinition` for *character_id*, or ``None``."""
        return self.characters.get(character_id)

    def get_skill_kit(self, character_id: str) -> SkillKit | None:
        """Return the :class:`SkillKit` for *character_id*, or ``None``."""
        return self.skills.get(character_id)

    def get_enemy(self, enemy_id: str) -> EnemyDefinition | None:
        """Return the :class:`EnemyDefinition` for *enemy_id*, or ``None``."""
        return self.enemies.get(enemy_id)

    def battle_ready_ids(self) -> list[str]:
        """Ids of every character that has both a definition and a skill kit."""
        return sorted(cid for cid in self.characters if cid in self.skills)

    # ------------------------------------------------------------------
    # Strict lookups (configuration boundary)
    # ------------------------------------------------------------------

    def require_character(self, character_id: str) -> tuple[CharacterDefinition, SkillKit]:
        """Return the definition and kit for *character_id*.

        Raises
        ------
        ValueError
            If either the definition or the skill kit is missing.
        """
        definition = self.get_character(character_id)
        kit = self.get_skill_kit(character_id)
        if definition is None or kit is None:
            raise ValueError(f"Unknown or incomplete character: {character_id!r}")
        return definition, kit

    def require_enemy(self, enemy_id: str) -> EnemyDefinition:
        enemy = self.get_enemy(enemy_id)
        if enemy is None:
            raise ValueError(f"Unknown enemy: {enemy_id!r}")
        return enemy

    def team_members(self, character_ids: list[str]) -> list[TeamMember]:
        """Build default (no speed bonus) team slots for the speed planner.

        Unknown ids are skipped with a warning, matching how the team
        builder ignores stale preset entries.
        """
        members: list[TeamMember] = []
        for cid in character_ids:
            definition = self.get_character(cid)
            if definition is None:
                logger.warning("Skipping unknown character %r in team", cid)
                continue
            members.append(TeamMember(character=definition))
        return members
