"""Pytest configuration and fixtures for Crystal Quest tests."""

import random

import pytest

from game.crystal.entities import Crystal
from game.crystal.session import GameSession

from helpers import hold_still


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def session(seeded_rng):
    """A session that has just started playing level 1 on an 800x600 arena."""
    s = GameSession(800, 600, rng=seeded_rng)
    s.start()
    return s


@pytest.fixture
def quiet(session):
    """
    Playing session with no enemies and a single far-away crystal,
    so the gate stays closed and nothing touches the ship.
    """
    session.enemies = []
    session.bullets = []
    session.particles = []
    session.crystals = [Crystal(x=60.0, y=560.0)]
    hold_still(session)
    return session
