import dataclasses
import math
import random

import pytest

from game.crystal.config import WorldConfig
from game.crystal.entities import Chaser
from game.crystal.events import SoundEvent
from game.crystal.session import GameSession, GameState
from game.crystal.spawning import crystal_count, enemy_count

from helpers import hold_still, move_player


def test_new_session_starts_in_menu_with_a_level_behind_it(seeded_rng):
    s = GameSession(800, 600, rng=seeded_rng)
    assert s.state == GameState.MENU
    assert s.level == 1 and s.score == 0 and s.lives == 3
    assert len(s.crystals) == 10
    assert len(s.enemies) == 4
    assert (s.player.x, s.player.y) == (400, 420)


def test_rejects_empty_arena():
    with pytest.raises(ValueError):
        GameSession(0, 600)


def test_menu_only_advances_gate_pulse(seeded_rng):
    s = GameSession(800, 600, rng=seeded_rng)
    before = s.snapshot()
    s.advance(0.02)
    after = s.snapshot()
    assert after.gate.pulse == pytest.approx(before.gate.pulse + 0.02)
    assert after.player == before.player
    assert after.enemies == before.enemies
    assert after.crystals == before.crystals


def test_gameover_only_advances_gate_pulse(session):
    session.state = GameState.GAME_OVER
    enemies = [dataclasses.replace(e) for e in session.enemies]
    session.advance(0.02)
    assert session.enemies == enemies
    assert session.gate.pulse == pytest.approx(0.02)


def test_paused_freezes_everything(session):
    session.toggle_pause()
    assert session.state == GameState.PAUSED
    before = session.snapshot()
    session.advance(0.02)
    assert session.snapshot() == before
    session.toggle_pause()
    assert session.state == GameState.PLAYING


def test_toggle_pause_ignored_outside_play(seeded_rng):
    s = GameSession(800, 600, rng=seeded_rng)
    s.toggle_pause()
    assert s.state == GameState.MENU


def test_start_only_from_menu_or_gameover(session):
    session.score = 300
    assert session.start() is False
    assert session.score == 300

    session.state = GameState.GAME_OVER
    assert session.start() is True
    assert session.state == GameState.PLAYING
    assert session.score == 0


def test_restart_resets_counters_from_any_state(session):
    session.level, session.score, session.lives = 4, 1234, 1
    session.state = GameState.GAME_OVER
    session.restart()
    assert session.state == GameState.PLAYING
    assert (session.level, session.score, session.lives) == (1, 0, 3)
    assert len(session.crystals) == crystal_count(1, session.config)


@pytest.mark.parametrize("level", [1, 2, 3, 5, 8])
def test_start_level_reseeds_to_level_counts(session, level):
    session.bullets = [object()]
    session.particles = [object()]
    session.gate.open = True
    session.start_level(level)
    assert session.level == level
    assert len(session.crystals) == 10 + math.floor((level - 1) * 1.2)
    assert len(session.enemies) == enemy_count(level, session.config)
    assert session.bullets == [] and session.particles == []
    assert not session.gate.open


def test_tick_clamps_large_steps(seeded_rng):
    s = GameSession(800, 600, rng=seeded_rng)
    s.tick(2.0)
    assert s.gate.pulse == pytest.approx(0.033)
    s.tick(-1.0)
    assert s.gate.pulse == pytest.approx(0.033)


def test_resize_changes_bounds_but_not_entities(quiet):
    px, py = quiet.player.x, quiet.player.y
    quiet.resize(1024, 768)
    assert (quiet.bounds.width, quiet.bounds.height) == (1024, 768)
    assert (quiet.player.x, quiet.player.y) == (px, py)
    with pytest.raises(ValueError):
        quiet.resize(100, -1)


def test_resize_affects_future_placement(quiet):
    quiet.resize(400, 300)
    quiet.start_level(2)
    assert (quiet.player.x, quiet.player.y) == (200, 210)
    for c in quiet.crystals:
        assert 40 <= c.x <= 360 and 40 <= c.y <= 260


def test_snapshot_is_a_detached_copy(quiet):
    snap = quiet.snapshot()
    snap.player.x = -999
    assert quiet.player.x != -999
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.score = 10
    assert snap.state == GameState.PLAYING
    assert snap.lives == quiet.lives


def test_on_sound_callback_receives_events(seeded_rng):
    heard = []
    s = GameSession(800, 600, rng=seeded_rng, on_sound=heard.append)
    s.start()
    s.enemies = []
    hold_still(s)
    s.controls.target_x = s.player.x + 200
    s.controls.fire = True
    s.advance(0.01)
    assert SoundEvent.FIRE in heard
    assert heard == s.sound_events


def test_sound_events_only_hold_latest_tick(quiet):
    quiet.controls.target_x += 200
    quiet.controls.fire = True
    quiet.advance(0.01)
    assert quiet.sound_events == [SoundEvent.FIRE]
    quiet.controls.fire = False
    quiet.advance(0.01)
    assert quiet.sound_events == []


def test_lives_never_increase_and_drop_at_most_one_per_tick():
    s = GameSession(800, 600, rng=random.Random(3))
    s.start()
    driver = random.Random(11)
    lives = s.lives
    for _ in range(3000):
        if s.state != GameState.PLAYING:
            break
        s.controls.target_x = driver.uniform(0, 800)
        s.controls.target_y = driver.uniform(0, 600)
        s.controls.fire = driver.random() < 0.3
        score = s.score
        s.advance(1 / 60)
        assert lives - 1 <= s.lives <= lives
        assert s.score >= score
        assert 0 <= s.lives <= s.config.initial_lives
        lives = s.lives


def test_tuning_changes_apply_to_a_live_session(seeded_rng):
    cfg = WorldConfig()
    s = GameSession(800, 600, config=cfg, rng=seeded_rng)
    s.start()
    s.enemies = []
    move_player(s, 400, 300)
    s.controls.target_x = 700
    cfg.kp = 0.0
    s.advance(0.01)
    assert s.player.vx == 0.0
    cfg.kp = 12.0
    s.advance(0.01)
    assert s.player.vx > 0.0


def test_enemy_variants_survive_snapshot(quiet):
    quiet.enemies = [Chaser(x=10, y=10)]
    snap = quiet.snapshot()
    assert isinstance(snap.enemies[0], Chaser)


def test_drain_sound_events_returns_and_clears(quiet):
    quiet.controls.target_x += 200
    quiet.controls.fire = True
    quiet.advance(0.01)
    assert quiet.drain_sound_events() == [SoundEvent.FIRE]
    assert quiet.sound_events == []
    assert quiet.drain_sound_events() == []
