"""
GameSession - the Crystal Quest simulation core
-----------------------------------------------
- Player ship steered by a PD controller toward the pointer
- Click/hold to fire bullets that destroy enemies
- Collect every crystal to open the exit gate
- Touch the open gate to advance to a harder level
- Chaser/Wanderer enemies cost a life on contact

The session owns all world state. Input adapters write ``controls``
between ticks, presentation adapters read ``snapshot()`` and audio
adapters call ``drain_sound_events()`` (or register ``on_sound``).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .config import WorldConfig
from .entities import Bounds, Bullet, Chaser, Crystal, Enemy, Gate, Particle, Player, Wanderer
from .events import SoundEvent
from .spawning import make_crystals, make_enemies, make_gate, make_player, random_target, spawn_burst
from .utils import circle_collide, clamp, lerp, normalize, vec_len

logger = logging.getLogger(__name__)


class GameState(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    LEVEL_CLEAR = "levelclear"  # level changes happen inside advance(); never entered
    GAME_OVER = "gameover"


@dataclass
class Controls:
    """Latest pointer target and fire intent, in simulation coordinates"""
    target_x: float = 0.0
    target_y: float = 0.0
    fire: bool = False


@dataclass
class SessionStats:
    """Running totals since the last reset"""
    crystals_collected: int = 0
    enemies_killed: int = 0
    lives_lost: int = 0
    levels_cleared: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of everything the presentation layer draws"""
    state: GameState
    level: int
    score: int
    lives: int
    bounds: Bounds
    player: Player
    gate: Gate
    enemies: Tuple[Enemy, ...]
    bullets: Tuple[Bullet, ...]
    crystals: Tuple[Crystal, ...]
    particles: Tuple[Particle, ...]


class GameSession:
    """One play session: state machine, level progression and per-tick simulation"""

    def __init__(
        self,
        width: float,
        height: float,
        config: Optional[WorldConfig] = None,
        rng: Optional[random.Random] = None,
        on_sound: Optional[Callable[[SoundEvent], None]] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")
        self.config = config if config is not None else WorldConfig()
        self.rng = rng if rng is not None else random.Random()
        self.on_sound = on_sound
        self.bounds = Bounds(float(width), float(height))

        self.state = GameState.MENU
        self.level = 1
        self.score = 0
        self.lives = self.config.initial_lives
        self.stats = SessionStats()

        # World state (rebuilt by start_level)
        self.player: Player = None  # type: ignore
        self.gate: Gate = None  # type: ignore
        self.enemies: List[Enemy] = []
        self.bullets: List[Bullet] = []
        self.crystals: List[Crystal] = []
        self.particles: List[Particle] = []

        cx, cy = self.bounds.center
        self.controls = Controls(target_x=cx, target_y=cy)
        self.sound_events: List[SoundEvent] = []

        # The menu shows a live level behind it
        self.start_level(self.level)

    # ----------------------------
    # State machine
    # ----------------------------

    def start(self) -> bool:
        """Begin a new game from the menu or the game-over screen"""
        if self.state in (GameState.MENU, GameState.GAME_OVER):
            self.restart()
            return True
        return False

    def restart(self):
        """Reset score, lives and level, then play level 1"""
        self.level = 1
        self.score = 0
        self.lives = self.config.initial_lives
        self.stats = SessionStats()
        self.start_level(self.level)
        self.state = GameState.PLAYING
        logger.info("New game started")

    def toggle_pause(self):
        if self.state == GameState.PLAYING:
            self.state = GameState.PAUSED
        elif self.state == GameState.PAUSED:
            self.state = GameState.PLAYING

    def start_level(self, n: int):
        """Throw away every entity and seed level ``n``"""
        self.level = n
        self.player = make_player(self.bounds, self.config)
        self.bullets = []
        self.particles = []
        self.gate = make_gate(self.bounds, self.config)
        self.crystals = make_crystals(n, self.gate, self.bounds, self.config, self.rng)
        self.enemies = make_enemies(n, self.bounds, self.config, self.rng)
        logger.debug("Level %d: %d crystals, %d enemies", n, len(self.crystals), len(self.enemies))

    def resize(self, width: float, height: float):
        """Viewport changed; only future clamping and placement see the new size"""
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")
        self.bounds = Bounds(float(width), float(height))

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, elapsed: float):
        """Advance by wall-clock ``elapsed`` seconds, capped to avoid large steps"""
        self.advance(clamp(elapsed, 0.0, self.config.max_dt))

    def advance(self, dt: float):
        self.sound_events = []

        if self.state == GameState.PAUSED:
            return
        if self.state != GameState.PLAYING:
            # gentle gate pulse behind menus
            self.gate.pulse += dt
            return

        self._steer(dt)
        if self.player.invulnerable > 0:
            self.player.invulnerable -= dt
        self._fire(dt)
        self._update_bullets(dt)
        self._update_enemies(dt)
        self._shoot_enemies()
        if self._collide_player():
            return
        self._collect_crystals(dt)
        self._update_gate(dt)
        self._update_particles(dt)

    # ----------------------------
    # Simulation stages
    # ----------------------------

    def _steer(self, dt: float):
        p, cfg, c = self.player, self.config, self.controls

        # PD controller toward the pointer (spring-damper)
        dx = c.target_x - p.x
        dy = c.target_y - p.y
        dist = vec_len(dx, dy)
        if dist < cfg.dead_zone:
            dx = dy = 0.0
        ax = cfg.kp * dx - cfg.kd * p.vx
        ay = cfg.kp * dy - cfg.kd * p.vy
        p.vx += ax * dt
        p.vy += ay * dt

        sp = vec_len(p.vx, p.vy)
        if sp > cfg.max_speed:
            s = cfg.max_speed / sp
            p.vx *= s
            p.vy *= s

        # very close to the pointer: bleed off velocity so the ship settles
        if dist < cfg.dead_zone * cfg.settle_ratio:
            p.vx *= cfg.settle_damping
            p.vy *= cfg.settle_damping

        p.x += p.vx * dt
        p.y += p.vy * dt

        # soft bounce off the padded arena edges
        pad = cfg.padding
        w, h = self.bounds.width, self.bounds.height
        if p.x < pad:
            p.x = pad
            p.vx *= -cfg.wall_restitution
        if p.x > w - pad:
            p.x = w - pad
            p.vx *= -cfg.wall_restitution
        if p.y < pad:
            p.y = pad
            p.vy *= -cfg.wall_restitution
        if p.y > h - pad:
            p.y = h - pad
            p.vy *= -cfg.wall_restitution

    def _fire(self, dt: float):
        p, cfg, c = self.player, self.config, self.controls
        p.fire_cooldown -= dt
        if not c.fire or p.fire_cooldown > 0:
            return

        # Aim at the pointer; when it sits on the ship use the heading instead
        aim_x, aim_y = c.target_x - p.x, c.target_y - p.y
        if vec_len(aim_x, aim_y) < 1:
            ux, uy = normalize(p.vx, p.vy)
        else:
            ux, uy = normalize(aim_x, aim_y)

        offset = p.radius + cfg.muzzle_gap
        self.bullets.append(Bullet(
            x=p.x + ux * offset,
            y=p.y + uy * offset,
            vx=ux * cfg.bullet_speed,
            vy=uy * cfg.bullet_speed,
            radius=cfg.bullet_radius,
            ttl=cfg.bullet_ttl,
        ))
        p.fire_cooldown = cfg.fire_cooldown
        self._emit(SoundEvent.FIRE)

    def _update_bullets(self, dt: float):
        m = self.config.bullet_margin
        w, h = self.bounds.width, self.bounds.height
        for b in self.bullets:
            b.x += b.vx * dt
            b.y += b.vy * dt
            b.ttl -= dt
            if b.ttl <= 0 or b.x < -m or b.x > w + m or b.y < -m or b.y > h + m:
                b.alive = False
        self.bullets = [b for b in self.bullets if b.alive]

    def _update_enemies(self, dt: float):
        p = self.player
        m = self.config.enemy_wrap_margin
        w, h = self.bounds.width, self.bounds.height

        for e in self.enemies:
            # ttl is tracked for presentation only; it never removes the enemy
            e.ttl -= dt
            if isinstance(e, Chaser):
                ux, uy = normalize(p.x - e.x, p.y - e.y)
            elif isinstance(e, Wanderer):
                dx, dy = e.target_x - e.x, e.target_y - e.y
                r = self.config.wander_retarget_radius
                if dx * dx + dy * dy < r * r:
                    e.target_x, e.target_y = random_target(self.bounds, self.config, self.rng)
                ux, uy = normalize(dx, dy)
            else:
                raise TypeError(f"Unknown enemy type: {type(e).__name__}")

            t = clamp(e.turn_rate * dt, 0.0, 1.0)
            e.vx = lerp(e.vx, ux * e.speed, t)
            e.vy = lerp(e.vy, uy * e.speed, t)
            e.x += e.vx * dt
            e.y += e.vy * dt

            # wrap around the edges instead of clamping
            if e.x < -m:
                e.x = w + m
            elif e.x > w + m:
                e.x = -m
            if e.y < -m:
                e.y = h + m
            elif e.y > h + m:
                e.y = -m

    def _shoot_enemies(self):
        for e in self.enemies:
            for b in self.bullets:
                if not b.alive:
                    continue
                if circle_collide(b.x, b.y, b.radius, e.x, e.y, e.radius):
                    # one bullet per enemy, first match wins
                    b.alive = False
                    e.alive = False
                    self.score += self.config.score_enemy
                    self.stats.enemies_killed += 1
                    self._burst(e.x, e.y, e.kind.value)
                    self._emit(SoundEvent.ENEMY_DESTROYED)
                    break
        self.enemies = [e for e in self.enemies if e.alive]
        self.bullets = [b for b in self.bullets if b.alive]

    def _collide_player(self) -> bool:
        """Apply contact damage; returns True when the game just ended"""
        p = self.player
        for e in self.enemies:
            if not circle_collide(p.x, p.y, p.radius, e.x, e.y, e.radius):
                continue
            # the invulnerability reset below shields the rest of this loop
            if p.invulnerable <= 0:
                self.lives = max(0, self.lives - 1)
                self.stats.lives_lost += 1
                p.invulnerable = self.config.invulnerability
                self._burst(p.x, p.y, "player")
                self._emit(SoundEvent.PLAYER_HIT)
                if self.lives <= 0:
                    self.state = GameState.GAME_OVER
                    logger.info("Game over on level %d with score %d", self.level, self.score)
                    return True
        return False

    def _collect_crystals(self, dt: float):
        p = self.player
        for c in self.crystals:
            c.spin += dt * self.config.crystal_spin_rate
            if circle_collide(p.x, p.y, p.radius, c.x, c.y, c.radius):
                c.alive = False
                self.score += self.config.score_crystal
                self.stats.crystals_collected += 1
                self._burst(c.x, c.y, "crystal")
                self._emit(SoundEvent.PICKUP)
        self.crystals = [c for c in self.crystals if c.alive]

    def _update_gate(self, dt: float):
        g, p = self.gate, self.player
        opened_now = False
        if not g.open and not self.crystals:
            g.open = True
            g.pulse = 0.0
            opened_now = True
            self._emit(SoundEvent.GATE_OPEN)
        g.pulse += dt

        # a gate opened this tick can be entered from the next tick on
        if g.open and not opened_now and circle_collide(p.x, p.y, p.radius, g.x, g.y, g.radius):
            self.score += self.config.score_gate
            self.stats.levels_cleared += 1
            self.start_level(self.level + 1)
            self._emit(SoundEvent.LEVEL_ADVANCE)
            logger.info("Advanced to level %d (score %d)", self.level, self.score)

    def _update_particles(self, dt: float):
        damping = self.config.particle_damping
        for pt in self.particles:
            pt.ttl -= dt
            pt.x += pt.vx * dt
            pt.y += pt.vy * dt
            pt.vx *= damping
            pt.vy *= damping
            if pt.ttl <= 0:
                pt.alive = False
        self.particles = [pt for pt in self.particles if pt.alive]

    # ----------------------------
    # Helpers / adapters
    # ----------------------------

    def _burst(self, x: float, y: float, color: str):
        self.particles.extend(spawn_burst(x, y, color, self.config, self.rng))

    def _emit(self, event: SoundEvent):
        self.sound_events.append(event)
        if self.on_sound is not None:
            self.on_sound(event)

    def drain_sound_events(self) -> List[SoundEvent]:
        """Return the queued sound events and clear the queue"""
        events = self.sound_events
        self.sound_events = []
        return events

    def snapshot(self) -> Snapshot:
        return Snapshot(
            state=self.state,
            level=self.level,
            score=self.score,
            lives=self.lives,
            bounds=replace(self.bounds),
            player=replace(self.player),
            gate=replace(self.gate),
            enemies=tuple(replace(e) for e in self.enemies),
            bullets=tuple(replace(b) for b in self.bullets),
            crystals=tuple(replace(c) for c in self.crystals),
            particles=tuple(replace(pt) for pt in self.particles),
        )
