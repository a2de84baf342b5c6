"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from hsr_sim.sim.content.registry import ContentRegistry


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Module-scoped registry with the bundled game data loaded once."""
    reg = ContentRegistry()
    reg.load_all()
    return reg
