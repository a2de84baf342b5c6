"""Energy system -- gain, ultimate readiness, and consumption.

Rules:
    - Basic attacks and skills grant energy, capped at ``max_energy``.
    - The ultimate is usable only at full energy and drains it to 0.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hsr_sim.sim.core.entities import Character


def add_energy(char: Character, amount: float) -> Character:
    """Return a copy of *char* with *amount* energy added (capped, never negative)."""
    new_energy = max(0.0, min(char.max_energy, char.current_energy + amount))
    return char.model_copy(update={"current_energy": new_energy})


def can_use_ultimate(char: Character) -> bool:
    return char.current_energy >= char.max_energy


def consume_ultimate_energy(char: Character) -> Character:
    """Return a copy of *char* with energy reset to exactly 0."""
    return char.model_copy(update={"current_energy": 0})
