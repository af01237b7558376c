import csv

import numpy as np
import pytest

from game.crystal.crystal_env import CrystalQuestEnv
from rl.wrappers import MultiDiscreteToDiscreteWrapper


def test_discrete_wrapper_flattens_actions():
    env = MultiDiscreteToDiscreteWrapper(CrystalQuestEnv())
    assert env.action_space.n == 18
    np.testing.assert_array_equal(env.action(0), [0, 0])
    np.testing.assert_array_equal(env.action(3), [1, 1])
    np.testing.assert_array_equal(env.action(17), [8, 1])


def test_discrete_wrapper_steps_env():
    env = MultiDiscreteToDiscreteWrapper(CrystalQuestEnv())
    env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(3)
    assert info["num_bullets"] == 1


def test_metrics_callback_writes_episode_rows(tmp_path):
    pytest.importorskip("stable_baselines3")
    from rl.metrics_callback import MetricsCallback

    cb = MetricsCallback(log_dir=str(tmp_path), algo_name="ppo", verbose=0)
    cb._on_training_start()
    cb.locals = {
        "infos": [
            {"episode": {"r": 4.5, "l": 120}, "crystals_collected": 7, "enemies_killed": 2,
             "levels_cleared": 0, "lives_lost": 3, "level": 1, "score": 750},
            {"lives": 2},
        ],
        "dones": [True, False],
    }
    assert cb._on_step() is True
    cb._on_training_end()

    with open(tmp_path / "ppo_metrics.csv", newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == MetricsCallback.COLUMNS
    assert len(rows) == 2
    assert rows[1][2:] == ["4.5", "120", "7", "2", "0", "3", "1", "750"]

    summary = cb.get_summary()
    assert summary["total_episodes"] == 1
    assert summary["mean_crystals"] == 7
