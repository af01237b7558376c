"""
Game entity dataclasses
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


@dataclass
class Bounds:
    """Playfield size in simulation units (y grows downwards)"""
    width: float
    height: float

    @property
    def center(self):
        return self.width * 0.5, self.height * 0.5


@dataclass
class Player:
    """Player ship steered toward the pointer"""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 14.0
    fire_cooldown: float = 0.0  # seconds until the next shot
    invulnerable: float = 0.0  # seconds of hit immunity left


class EnemyKind(str, Enum):
    CHASER = "chaser"
    WANDERER = "wanderer"


@dataclass
class Enemy:
    """Roaming hostile; use Chaser or Wanderer"""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 12.0
    speed: float = 90.0  # px/s
    turn_rate: float = 1.0  # velocity blend rate, 1/s
    ttl: float = 15.0  # seconds; counts down but never removes the enemy
    alive: bool = True

    kind: ClassVar[Optional[EnemyKind]] = None


@dataclass
class Chaser(Enemy):
    """Enemy that steers straight at the player"""
    radius: float = 16.0

    kind = EnemyKind.CHASER


@dataclass
class Wanderer(Enemy):
    """Enemy that roams between random targets"""
    radius: float = 12.0
    target_x: float = 0.0
    target_y: float = 0.0

    kind = EnemyKind.WANDERER


@dataclass
class Bullet:
    """Bullet projectile entity"""
    x: float
    y: float
    vx: float
    vy: float
    radius: float = 3.5
    ttl: float = 0.8  # seconds
    alive: bool = True


@dataclass
class Crystal:
    """Collectible crystal"""
    x: float
    y: float
    radius: float = 10.0
    spin: float = 0.0  # rotation phase, radians
    alive: bool = True


@dataclass
class Gate:
    """Level exit; opens once every crystal is collected"""
    x: float
    y: float
    radius: float = 28.0
    open: bool = False
    pulse: float = 0.0  # animation clock, seconds


@dataclass
class Particle:
    """Cosmetic burst particle"""
    x: float
    y: float
    vx: float
    vy: float
    ttl: float
    color: str
    alive: bool = True
