"""Seeded random number generator for reproducible battle simulation.

The only randomness in combat is the crit coin-flip, but batch runs also
need random action choices.  Each consumer should use a *forked* stream
(``"combat"``, ``"agent"``) so drawing from one never perturbs the other.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class GameRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def random_float(self) -> float:
        """Return a random float in ``[0.0, 1.0)``."""
        return self._rng.random()

    def roll(self, probability: float) -> bool:
        """Return ``True`` with the given *probability*.

        Matches the engine's crit check: ``random() < probability``, so a
        probability of 0 never succeeds and 1 always does.
        """
        return self._rng.random() < probability

    def random_choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        return self._rng.choice(seq)

    def fork(self, name: str) -> GameRNG:
        """Create a child RNG whose seed is derived from this seed and *name*.

        Forking with the same *name* always yields the same child seed.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return GameRNG(child_seed)

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
