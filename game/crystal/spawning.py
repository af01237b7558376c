"""
Procedural placement of level entities.

Every function takes the random source explicitly so a seeded
``random.Random`` makes levels reproducible.
"""

from __future__ import annotations

import math
import random
from typing import Iterable, List, Tuple

from .config import WorldConfig
from .entities import Bounds, Chaser, Crystal, Enemy, Gate, Particle, Player, Wanderer
from .utils import TAU, distance_sq


def place_avoiding(
    obstacles: Iterable,
    min_distance: float,
    bounds: Bounds,
    padding: float,
    rng: random.Random,
    attempts: int = 1200,
) -> Tuple[float, float]:
    """
    Rejection-sample a point inside ``bounds`` shrunk by ``padding``.

    A candidate is accepted when it is at least ``min_distance`` plus the
    obstacle radius away from every obstacle centre. Falls back to the
    bounds centre when no candidate fits within ``attempts`` tries.
    """
    obstacles = list(obstacles)
    for _ in range(attempts):
        x = rng.uniform(padding, bounds.width - padding)
        y = rng.uniform(padding, bounds.height - padding)
        ok = True
        for o in obstacles:
            clearance = min_distance + getattr(o, "radius", 0.0)
            if distance_sq(x, y, o.x, o.y) < clearance * clearance:
                ok = False
                break
        if ok:
            return x, y
    return bounds.center


def crystal_count(level: int, config: WorldConfig) -> int:
    return config.crystal_count + math.floor((level - 1) * config.crystal_growth)


def enemy_count(level: int, config: WorldConfig) -> int:
    return config.enemy_base + math.floor((level - 1) * config.enemy_growth)


def make_player(bounds: Bounds, config: WorldConfig) -> Player:
    return Player(x=bounds.width * 0.5, y=bounds.height * 0.7, radius=config.player_radius)


def make_gate(bounds: Bounds, config: WorldConfig) -> Gate:
    # near the top centre, well clear of the player spawn
    y = max(config.padding + 60, bounds.height * 0.12)
    return Gate(x=bounds.width * 0.5, y=y, radius=config.gate_radius)


def make_crystals(level: int, gate: Gate, bounds: Bounds, config: WorldConfig,
                  rng: random.Random) -> List[Crystal]:
    crystals = []
    for _ in range(crystal_count(level, config)):
        x, y = place_avoiding([gate], gate.radius + config.crystal_clearance, bounds,
                              config.padding, rng, config.placement_attempts)
        crystals.append(Crystal(x=x, y=y, radius=10 + rng.random() * 3, spin=rng.random() * TAU))
    return crystals


def random_target(bounds: Bounds, config: WorldConfig, rng: random.Random) -> Tuple[float, float]:
    return place_avoiding([], 0.0, bounds, config.padding, rng, config.placement_attempts)


def make_enemy(level: int, bounds: Bounds, config: WorldConfig, rng: random.Random) -> Enemy:
    """Spawn a random enemy just outside a random edge of the arena"""
    chaser = rng.random() < 0.5
    if chaser:
        speed = rng.uniform(90, 140) + level * 4
    else:
        speed = rng.uniform(110, 180) + level * 6

    off = config.enemy_spawn_offset
    edge = rng.randrange(4)
    if edge == 0:
        x, y = -off, rng.uniform(0, bounds.height)
    elif edge == 1:
        x, y = bounds.width + off, rng.uniform(0, bounds.height)
    elif edge == 2:
        x, y = rng.uniform(0, bounds.width), -off
    else:
        x, y = rng.uniform(0, bounds.width), bounds.height + off

    common = dict(
        x=x,
        y=y,
        vx=rng.uniform(-1, 1) * 50,
        vy=rng.uniform(-1, 1) * 50,
        speed=speed,
        turn_rate=rng.uniform(0.6, 1.6),
        ttl=rng.uniform(10, 22),
    )
    if chaser:
        return Chaser(**common)
    tx, ty = random_target(bounds, config, rng)
    return Wanderer(target_x=tx, target_y=ty, **common)


def make_enemies(level: int, bounds: Bounds, config: WorldConfig, rng: random.Random) -> List[Enemy]:
    return [make_enemy(level, bounds, config, rng) for _ in range(enemy_count(level, config))]


def spawn_burst(x: float, y: float, color: str, config: WorldConfig,
                rng: random.Random) -> List[Particle]:
    particles = []
    for _ in range(config.burst_size):
        a = rng.uniform(0, TAU)
        s = rng.uniform(40, 200)
        particles.append(Particle(x=x, y=y, vx=math.cos(a) * s, vy=math.sin(a) * s,
                                  ttl=rng.uniform(0.2, 0.6), color=color))
    return particles
