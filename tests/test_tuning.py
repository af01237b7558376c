import json

import pytest

from game.crystal.config import TUNABLES, WorldConfig
from game.crystal.tuning import JsonTuningStore, MemoryTuningStore, Tuning


def test_every_tunable_default_is_in_range():
    cfg = WorldConfig()
    for t in TUNABLES:
        assert t.contains(getattr(cfg, t.key)), t.key


def test_load_applies_only_valid_known_values():
    store = MemoryTuningStore({
        "kp": 20.0,
        "kd": "fast",  # not a number
        "dead_zone": 50,  # out of range
        "max_speed": True,  # booleans are not tuning values
        "bullet_speed": float("nan"),
        "fire_cooldown": 0.2,
        "gravity": 9.8,  # unknown
    })
    tuning = Tuning(store=store)
    applied = tuning.load()
    assert applied == {"kp": 20.0, "fire_cooldown": 0.2}
    cfg = tuning.config
    assert cfg.kp == 20.0 and cfg.fire_cooldown == 0.2
    assert cfg.kd == 7.5 and cfg.dead_zone == 4.0 and cfg.max_speed == 520.0
    assert not hasattr(cfg, "gravity")


def test_set_validates_and_persists():
    store = MemoryTuningStore()
    tuning = Tuning(store=store)
    assert tuning.set("max_speed", 800) == 800.0
    assert tuning.config.max_speed == 800.0
    assert store.data["max_speed"] == 800.0
    assert set(store.data) == {t.key for t in TUNABLES}


@pytest.mark.parametrize("key, value", [
    ("max_speed", 50),
    ("fire_cooldown", 0.5),
    ("kp", "12"),
    ("kd", float("inf")),
    ("padding", 10),
    ("nope", 1),
])
def test_set_rejects_bad_input(key, value):
    store = MemoryTuningStore()
    tuning = Tuning(store=store)
    with pytest.raises(ValueError):
        tuning.set(key, value)
    assert store.data == {}
    assert tuning.values() == WorldConfig().tunable_values()


def test_nudge_moves_by_steps_and_stops_at_range():
    tuning = Tuning()
    assert tuning.nudge("max_speed", 3) == pytest.approx(550.0)
    tuning.set("max_speed", 1190)
    assert tuning.nudge("max_speed", 5) == pytest.approx(1200.0)
    assert tuning.nudge("fire_cooldown", -100) == pytest.approx(0.05)
    assert tuning.nudge("kd", 1) == pytest.approx(7.6)


def test_reset_restores_defaults_and_clears_store():
    store = MemoryTuningStore()
    tuning = Tuning(store=store)
    tuning.set("kp", 3.0)
    tuning.reset()
    assert tuning.get("kp") == 12.0
    assert store.load() == {}


def test_json_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "tuning.json"
    store = JsonTuningStore(str(path))
    assert store.load() == {}

    tuning = Tuning(store=store)
    tuning.set("dead_zone", 6.5)

    again = Tuning(store=JsonTuningStore(str(path)))
    assert again.load()["dead_zone"] == 6.5
    assert again.config.dead_zone == 6.5

    store.clear()
    assert not path.exists()
    store.clear()


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", "42", ""])
def test_json_store_ignores_corrupt_files(tmp_path, content):
    path = tmp_path / "tuning.json"
    path.write_text(content)
    assert JsonTuningStore(str(path)).load() == {}


def test_json_store_write_failure_is_silent(tmp_path):
    # a directory cannot be opened for writing
    store = JsonTuningStore(str(tmp_path))
    store.save({"kp": 1.0})
    assert store.load() == {}


def test_json_store_writes_plain_object(tmp_path):
    path = tmp_path / "t.json"
    JsonTuningStore(str(path)).save({"kp": 2.5})
    assert json.loads(path.read_text()) == {"kp": 2.5}
