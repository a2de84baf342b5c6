"""Effect lifecycle -- aggregate, apply, tick, query.

Effects live in the ``effects`` tuple of an actor.  Applying an effect
that the target already carries from the same source refreshes it
instead of adding a second copy: stacks go up by one (capped at the
effect's ``max_stacks``) and the duration resets to the new application's
duration.  Durations tick down once per full round, not once per turn.

Every function returns a new actor; inputs are never modified.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Iterable, TypeVar

from hsr_sim.sim.core.entities import Effect, EffectPolarity

if TYPE_CHECKING:
    from hsr_sim.ir.skills import EffectDeclaration
    from hsr_sim.sim.core.entities import Actor

_A = TypeVar("_A", bound="Actor")


def sum_effect_stat(effects: Iterable[Effect], stat: str) -> float:
    """Sum ``value * stacks`` over every effect that modifies *stat*.

    This is the aggregation primitive behind every buffed stat in the
    damage formula.  Returns ``0.0`` when nothing matches.
    """
    return sum((e.value * e.stacks for e in effects if e.stat == stat), 0.0)


def effect_from_declaration(
    declaration: EffectDeclaration,
    name: str,
    polarity: EffectPolarity,
    source: str,
    max_stacks: int = 1,
) -> Effect:
    """Build a single-stack :class:`Effect` from a skill kit declaration."""
    return Effect(
        name=name,
        polarity=polarity,
        stat=declaration.stat,
        value=declaration.value,
        duration=declaration.duration,
        stacks=1,
        max_stacks=max_stacks,
        source=source,
    )


def apply_effect(target: _A, effect: Effect) -> _A:
    """Apply *effect* to *target* using the refresh-and-stack rule.

    Parameters
    ----------
    target:
        The actor receiving the effect.
    effect:
        The incoming application.  Its ``id`` and ``stacks`` are ignored:
        new entries always start at one stack with a fresh id.

    Returns
    -------
    Actor
        A copy of *target* with the effect merged in.
    """
    effects = list(target.effects)

    for i, existing in enumerate(effects):
        if existing.name == effect.name and existing.source == effect.source:
            effects[i] = existing.model_copy(
                update={
                    "stacks": min(existing.stacks + 1, effect.max_stacks),
                    "duration": effect.duration,
                }
            )
            return target.with_effects(effects)

    effects.append(effect.model_copy(update={"id": uuid.uuid4().hex, "stacks": 1}))
    return target.with_effects(effects)


def tick_effects(target: _A) -> _A:
    """Decrement every effect's duration by 1 and drop the expired ones."""
    if not target.effects:
        return target
    remaining = [
        e.model_copy(update={"duration": e.duration - 1})
        for e in target.effects
        if e.duration - 1 > 0
    ]
    return target.with_effects(remaining)


def remove_effect(target: _A, name: str, source: str | None = None) -> _A:
    """Drop effects named *name* (optionally only those from *source*)."""
    kept = [
        e for e in target.effects
        if not (e.name == name and (source is None or e.source == source))
    ]
    return target.with_effects(kept)


def get_effect(target: Actor, name: str, source: str | None = None) -> Effect | None:
    """Return the first effect named *name* (optionally from *source*), or ``None``."""
    for e in target.effects:
        if e.name == name and (source is None or e.source == source):
            return e
    return None


def has_effect(target: Actor, name: str, source: str | None = None) -> bool:
    return get_effect(target, name, source) is not None
