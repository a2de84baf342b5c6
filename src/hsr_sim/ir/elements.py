"""Element and path enumerations shared by characters, enemies, and effects."""

from __future__ import annotations

from enum import Enum


class ElementType(str, Enum):
    """The seven combat elements.  Enemies resist and are weak to these."""

    PHYSICAL = "Physical"
    FIRE = "Fire"
    ICE = "Ice"
    LIGHTNING = "Lightning"
    WIND = "Wind"
    QUANTUM = "Quantum"
    IMAGINARY = "Imaginary"


class PathType(str, Enum):
    """Role classification of a playable character."""

    DESTRUCTION = "Destruction"
    HUNT = "Hunt"
    ERUDITION = "Erudition"
    HARMONY = "Harmony"
    NIHILITY = "Nihility"
    PRESERVATION = "Preservation"
    ABUNDANCE = "Abundance"
    REMEMBRANCE = "Remembrance"
