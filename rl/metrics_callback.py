"""
Custom callback for tracking task-specific metrics during training.
Records: crystals collected, enemies killed, levels cleared, lives lost.
"""

import os
import csv
from typing import Dict, List, Any, Optional

import numpy as np
from stable_baselines3.common.callbacks import BaseCallback


class MetricsCallback(BaseCallback):
    """
    Callback to track and log task-specific metrics per episode.
    Saves to CSV for easy plotting.
    """

    COLUMNS = [
        "timestep", "episode", "reward", "length",
        "crystals", "kills", "levels", "lives_lost", "final_level", "score",
    ]

    def __init__(
        self,
        log_dir: str,
        algo_name: str,
        verbose: int = 1,
    ):
        super().__init__(verbose)
        self.log_dir = log_dir
        self.algo_name = algo_name

        # Episode tracking
        self.episode_rewards: List[float] = []
        self.episode_lengths: List[int] = []
        self.episode_crystals: List[int] = []
        self.episode_kills: List[int] = []
        self.episode_levels: List[int] = []

        # CSV file
        self.csv_path: Optional[str] = None
        self.csv_file = None
        self.csv_writer = None

    def _on_training_start(self) -> None:
        """Initialize CSV file for logging."""
        os.makedirs(self.log_dir, exist_ok=True)
        self.csv_path = os.path.join(self.log_dir, f"{self.algo_name}_metrics.csv")

        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow(self.COLUMNS)
        self.csv_file.flush()

        if self.verbose > 0:
            print(f"[MetricsCallback] Logging to {self.csv_path}")

    def _on_step(self) -> bool:
        """Called after each step."""
        infos = self.locals.get("infos", [])
        dones = self.locals.get("dones", [])

        for info, done in zip(infos, dones):
            # Monitor adds the episode summary on the final step
            if not (done and "episode" in info):
                continue
            ep_info = info["episode"]
            ep_reward = float(ep_info["r"])
            ep_length = int(ep_info["l"])

            crystals = info.get("crystals_collected", 0)
            kills = info.get("enemies_killed", 0)
            levels = info.get("levels_cleared", 0)

            self.episode_rewards.append(ep_reward)
            self.episode_lengths.append(ep_length)
            self.episode_crystals.append(crystals)
            self.episode_kills.append(kills)
            self.episode_levels.append(levels)

            if self.csv_writer:
                self.csv_writer.writerow([
                    self.num_timesteps,
                    len(self.episode_rewards),
                    ep_reward,
                    ep_length,
                    crystals,
                    kills,
                    levels,
                    info.get("lives_lost", 0),
                    info.get("level", 1),
                    info.get("score", 0),
                ])
                self.csv_file.flush()

            if self.verbose > 0 and len(self.episode_rewards) % 10 == 0:
                avg_reward = sum(self.episode_rewards[-10:]) / 10
                print(f"[{self.algo_name}] Episode {len(self.episode_rewards)}, "
                      f"Timestep {self.num_timesteps}, "
                      f"Avg Reward (10 ep): {avg_reward:.2f}")

        return True

    def _on_training_end(self) -> None:
        """Cleanup CSV file."""
        if self.csv_file:
            self.csv_file.close()
            self.csv_file = None
            if self.verbose > 0:
                print(f"[MetricsCallback] Saved {len(self.episode_rewards)} episodes to {self.csv_path}")

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        if not self.episode_rewards:
            return {}

        return {
            "mean_reward": float(np.mean(self.episode_rewards)),
            "std_reward": float(np.std(self.episode_rewards)),
            "mean_length": float(np.mean(self.episode_lengths)),
            "total_episodes": len(self.episode_rewards),
            "mean_crystals": float(np.mean(self.episode_crystals)),
            "mean_kills": float(np.mean(self.episode_kills)),
            "max_levels": int(max(self.episode_levels)),
        }
