"""
CrystalQuestEnv - Gymnasium facade over GameSession
---------------------------------------------------
- Gymnasium API, 1 agent steering the ship by placing the pointer
- Discrete MultiDiscrete action space: [steer(9), fire(2)]
- Vector observation: player state + gate + top-K nearest enemies + top-M nearest crystals
- Reward follows the game score, with a penalty for every life lost

Rendering goes through the same Arcade window used for interactive play,
imported lazily so headless training never needs a display.

Quick test:
    python -m game.crystal.crystal_env
"""

from __future__ import annotations

import math
import random
from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import WorldConfig
from .session import GameSession, GameState
from .utils import clamp, distance_sq, seed_everything


class CrystalQuestEnv(gym.Env):
    """Crystal Quest as a reinforcement learning environment"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        dt: float = 1 / 30,
        max_steps: int = 3600,  # 120s at 30 FPS
        k_enemies: int = 5,
        m_crystals: int = 3,
        reach: float = 120.0,
        r_life_lost: float = 5.0,
        r_time: float = 0.001,
        config: Optional[WorldConfig] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"], render_mode
        assert 0 < dt <= 0.1, "dt must be a small positive step"
        self.render_mode = render_mode

        # Arena
        self.width = width
        self.height = height
        self.dt = dt
        self.max_steps = max_steps

        # Observation config
        self.k_enemies = k_enemies
        self.m_crystals = m_crystals

        # Gameplay config
        self.reach = reach
        self.r_life_lost = r_life_lost
        self.r_time = r_time
        self.config = config if config is not None else WorldConfig()

        # Action space:
        # steer: 0 hold position, 1..8 pointer `reach` px away in 8 directions
        # fire: 0/1
        self.action_space = spaces.MultiDiscrete([9, 2])

        # Observation space (vector)
        # Player: pos(2) vel(2) lives(1) inv(1) cooldown(1)
        # Gate: rel pos(2) open(1)
        # Each enemy: rel pos(2) rel vel(2)
        # Each crystal: rel pos(2)
        obs_dim = 7 + 3 + (self.k_enemies * 4) + (self.m_crystals * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self.session: GameSession = None  # type: ignore
        self._step_count = 0

        # Precompute steering directions (8-way)
        self._steer_dirs = [(0.0, 0.0)]
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._steer_dirs.append((math.cos(ang), math.sin(ang)))

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        rng_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.session = GameSession(self.width, self.height, config=self.config,
                                   rng=random.Random(rng_seed))
        self.session.start()
        self._step_count = 0

        return self._get_obs(), self._get_info()

    def step(self, action):
        s = self.session
        steer, fire = int(action[0]), int(action[1])

        dx, dy = self._steer_dirs[steer % 9]
        s.controls.target_x = s.player.x + dx * self.reach
        s.controls.target_y = s.player.y + dy * self.reach
        s.controls.fire = fire == 1

        score_before = s.score
        lives_before = s.lives
        s.advance(self.dt)

        reward = (s.score - score_before) / 100.0
        reward -= self.r_life_lost * (lives_before - s.lives)
        reward -= self.r_time

        terminated = s.state == GameState.GAME_OVER
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ----------------------------
    # Observation / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        s = self.session
        p = s.player
        w, h = s.bounds.width, s.bounds.height
        cfg = self.config
        vmax = max(1e-6, cfg.max_speed)

        obs_parts: List[float] = [
            (p.x / w) * 2 - 1, (p.y / h) * 2 - 1,  # map to [-1,1]
            p.vx / vmax, p.vy / vmax,
            (s.lives / max(1, cfg.initial_lives)) * 2 - 1,
            max(0.0, p.invulnerable) / max(1e-6, cfg.invulnerability) * 2 - 1,
            max(0.0, p.fire_cooldown) / max(1e-6, cfg.fire_cooldown) * 2 - 1,
        ]

        g = s.gate
        obs_parts += [(g.x - p.x) / w, (g.y - p.y) / h, 1.0 if g.open else -1.0]

        # Enemies: top-K nearest
        enemies_sorted = sorted(s.enemies, key=lambda e: distance_sq(p.x, p.y, e.x, e.y))
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    (e.x - p.x) / w,
                    (e.y - p.y) / h,
                    (e.vx - p.vx) / vmax,
                    (e.vy - p.vy) / vmax,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        # Crystals: top-M nearest
        crystals_sorted = sorted(s.crystals, key=lambda c: distance_sq(p.x, p.y, c.x, c.y))
        for i in range(self.m_crystals):
            if i < len(crystals_sorted):
                c = crystals_sorted[i]
                obs_parts += [(c.x - p.x) / w, (c.y - p.y) / h]
            else:
                obs_parts += [0.0, 0.0]

        return np.array([clamp(v, -1.0, 1.0) for v in obs_parts], dtype=np.float32)

    def _get_info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "level": s.level,
            "score": s.score,
            "lives": s.lives,
            "gate_open": s.gate.open,
            "num_enemies": len(s.enemies),
            "num_crystals": len(s.crystals),
            "num_bullets": len(s.bullets),
            "crystals_collected": s.stats.crystals_collected,
            "enemies_killed": s.stats.enemies_killed,
            "lives_lost": s.stats.lives_lost,
            "levels_cleared": s.stats.levels_cleared,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import CrystalQuestWindow

            self._window = CrystalQuestWindow(
                self.session, self.width, self.height,
                visible=self.render_mode == "human", interactive=False,
            )
        self._window.session = self.session

        if self.render_mode == "human":
            self._window.dispatch_events()
            self._window.on_draw()
            self._window.flip()
            return None
        return self._window.capture_frame()

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: int = 42):
    """Run a random episode for testing"""
    env = CrystalQuestEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"Random episode return: {total:.2f} "
          f"(level {info['level']}, score {info['score']}, steps {info['step']})")
    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(render=True)
