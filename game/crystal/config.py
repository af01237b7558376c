"""
Gameplay configuration for Crystal Quest.

All distances are in pixels, times in seconds, speeds in px/s. The six
entries of ``TUNABLES`` may be changed at runtime through
:class:`game.crystal.tuning.Tuning`; everything else is fixed per session.
"""

from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(frozen=True)
class Tunable:
    """Describes one live-tunable parameter of WorldConfig"""
    key: str
    label: str
    lo: float
    hi: float
    step: float
    fmt: Callable[[float], str]

    def contains(self, value: float) -> bool:
        return self.lo <= value <= self.hi


TUNABLES = (
    Tunable("kp", "Kp (spring)", 0.0, 30.0, 0.1, lambda v: f"{v:.1f}"),
    Tunable("kd", "Kd (damper)", 0.0, 30.0, 0.1, lambda v: f"{v:.1f}"),
    Tunable("dead_zone", "Deadzone (px)", 0.0, 20.0, 0.5, lambda v: f"{v:.1f}"),
    Tunable("max_speed", "Max speed", 100.0, 1200.0, 10.0, lambda v: f"{v:.0f}"),
    Tunable("bullet_speed", "Bullet speed", 300.0, 1500.0, 10.0, lambda v: f"{v:.0f}"),
    Tunable("fire_cooldown", "Fire cooldown", 0.05, 0.3, 0.01, lambda v: f"{v:.2f}"),
)

TUNABLES_BY_KEY: Dict[str, Tunable] = {t.key: t for t in TUNABLES}


@dataclass
class WorldConfig:
    # Arena
    padding: float = 40.0  # player clamp inset and placement margin
    max_dt: float = 0.033

    # Steering (PD controller toward the pointer):
    # accel = kp * (target - pos) - kd * vel
    kp: float = 12.0
    kd: float = 7.5
    dead_zone: float = 4.0
    settle_ratio: float = 0.75  # settle radius as a fraction of dead_zone
    settle_damping: float = 0.85
    max_speed: float = 520.0
    wall_restitution: float = 0.4

    # Player
    player_radius: float = 14.0
    initial_lives: int = 3
    invulnerability: float = 1.2

    # Weapons
    bullet_speed: float = 720.0
    fire_cooldown: float = 0.10
    bullet_radius: float = 3.5
    bullet_ttl: float = 0.8
    muzzle_gap: float = 6.0
    bullet_margin: float = 20.0

    # Level contents
    crystal_count: int = 10
    crystal_growth: float = 1.2  # extra crystals per level
    crystal_clearance: float = 80.0  # min gap between crystals and gate edge
    crystal_spin_rate: float = 2.0
    enemy_base: int = 4
    enemy_growth: float = 1.5  # extra enemies per level
    gate_radius: float = 28.0
    placement_attempts: int = 1200

    # Enemies
    enemy_spawn_offset: float = 30.0
    enemy_wrap_margin: float = 40.0
    wander_retarget_radius: float = 40.0

    # Scoring
    score_enemy: int = 25
    score_crystal: int = 100
    score_gate: int = 500

    # Particles
    burst_size: int = 12
    particle_damping: float = 0.98

    def tunable_values(self) -> Dict[str, float]:
        return {t.key: float(getattr(self, t.key)) for t in TUNABLES}
