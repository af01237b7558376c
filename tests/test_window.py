import pytest

from game.crystal.events import SoundEvent

arcade = pytest.importorskip("arcade")
window = pytest.importorskip("game.crystal.window")


def test_undecodable_sound_is_skipped(monkeypatch):
    from pyglet.media.exceptions import MediaDecodeException

    def broken(path):
        raise MediaDecodeException(f"cannot decode {path}")

    played = []
    monkeypatch.setattr(window.arcade, "load_sound", broken)
    monkeypatch.setattr(window.arcade, "play_sound", lambda *a, **kw: played.append(a))

    audio = window.ArcadeAudio()
    audio.play(SoundEvent.FIRE)
    audio.play(SoundEvent.FIRE)
    assert played == []
    assert audio._sounds[SoundEvent.FIRE] is None


def test_muted_audio_never_loads(monkeypatch):
    loaded = []
    monkeypatch.setattr(window.arcade, "load_sound", lambda path: loaded.append(path))

    audio = window.ArcadeAudio(muted=True)
    audio.play(SoundEvent.PICKUP)
    assert loaded == []
    audio.toggle_mute()
    assert not audio.muted
