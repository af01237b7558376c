"""
Arcade front-end for Crystal Quest: drawing, mouse/keyboard input,
sound cues and the F1 tuning panel.

The simulation uses screen-style coordinates (y grows downwards); Arcade's
origin is bottom-left, so every y is flipped on the way in and out.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, Optional

import arcade
import numpy as np
from pyglet.media.exceptions import MediaDecodeException, MediaException

from .config import TUNABLES
from .entities import EnemyKind
from .events import SoundEvent
from .session import GameSession, GameState, Snapshot
from .tuning import Tuning
from .utils import clamp

logger = logging.getLogger(__name__)

TITLE = "Crystal Quest"

COLORS: Dict[str, tuple] = {
    "bg": (11, 15, 20),
    "grid": (255, 255, 255, 10),
    "player": (141, 210, 255),
    "bullet": (157, 240, 155),
    "chaser": (255, 107, 107),
    "wanderer": (255, 169, 77),
    "crystal": (177, 159, 255),
    "crystal_core": (233, 221, 255),
    "gate": (126, 249, 255),
    "text": (230, 241, 255),
    "panel": (0, 0, 0, 170),
    "highlight": (255, 230, 120),
}

SOUND_FILES = {
    SoundEvent.FIRE: ":resources:sounds/laser1.wav",
    SoundEvent.ENEMY_DESTROYED: ":resources:sounds/explosion2.wav",
    SoundEvent.PLAYER_HIT: ":resources:sounds/hurt1.wav",
    SoundEvent.PICKUP: ":resources:sounds/coin1.wav",
    SoundEvent.GATE_OPEN: ":resources:sounds/upgrade1.wav",
    SoundEvent.LEVEL_ADVANCE: ":resources:sounds/secret2.wav",
}


def _with_alpha(color, alpha: float):
    return (color[0], color[1], color[2], int(clamp(alpha, 0.0, 1.0) * 255))


class ArcadeAudio:
    """Plays a short cue per sound event; silently does nothing while muted"""

    def __init__(self, muted: bool = False, volume: float = 0.3):
        self.muted = muted
        self.volume = volume
        self._sounds: Dict[SoundEvent, Optional[arcade.Sound]] = {}

    def toggle_mute(self):
        self.muted = not self.muted

    def play(self, event: SoundEvent):
        if self.muted:
            return
        if event not in self._sounds:
            try:
                self._sounds[event] = arcade.load_sound(SOUND_FILES[event])
            except (OSError, MediaException, MediaDecodeException) as exc:
                logger.debug("No sound for %s: %s", event.value, exc)
                self._sounds[event] = None
        sound = self._sounds[event]
        if sound is not None:
            arcade.play_sound(sound, volume=self.volume)


class CrystalQuestWindow(arcade.Window):
    """Arcade window that drives, draws and controls a GameSession"""

    def __init__(
        self,
        session: GameSession,
        width: int,
        height: int,
        tuning: Optional[Tuning] = None,
        audio: Optional[ArcadeAudio] = None,
        visible: bool = True,
        interactive: bool = True,
    ):
        # on_resize may fire while the base window is being created
        self.session = session
        super().__init__(width, height, TITLE, resizable=interactive, visible=visible)
        self.tuning = tuning
        self.audio = audio
        # non-interactive windows only draw; someone else advances the session
        self.interactive = interactive

        self.debug_open = False
        self.debug_index = 0

        self.background_color = COLORS["bg"]

    # ----------------------------
    # Tick
    # ----------------------------

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        self.session.tick(delta_time)
        events = self.session.drain_sound_events()
        if self.audio is not None:
            for event in events:
                self.audio.play(event)

    def on_resize(self, width: int, height: int):
        super().on_resize(width, height)
        if width > 0 and height > 0:
            self.session.resize(width, height)

    # ----------------------------
    # Input
    # ----------------------------

    def _point_at(self, x: float, y: float):
        c = self.session.controls
        c.target_x = x
        c.target_y = self.session.bounds.height - y

    def on_mouse_motion(self, x, y, dx, dy):
        self._point_at(x, y)

    def on_mouse_drag(self, x, y, dx, dy, buttons, modifiers):
        self._point_at(x, y)

    def on_mouse_press(self, x, y, button, modifiers):
        if not self.interactive:
            return
        self._point_at(x, y)
        self.session.controls.fire = True
        self.session.start()

    def on_mouse_release(self, x, y, button, modifiers):
        self.session.controls.fire = False

    def on_deactivate(self):
        self.session.controls.fire = False

    def on_key_press(self, symbol, modifiers):
        if not self.interactive:
            return
        s = self.session
        if symbol in (arcade.key.F1, arcade.key.GRAVE):
            self.debug_open = not self.debug_open
            return
        if self.debug_open and self.tuning is not None and self._debug_key(symbol, modifiers):
            return
        if symbol == arcade.key.P:
            s.toggle_pause()
        elif symbol == arcade.key.R:
            s.restart()
        elif symbol == arcade.key.M:
            if self.audio is not None:
                self.audio.toggle_mute()
        elif symbol in (arcade.key.SPACE, arcade.key.ENTER, arcade.key.RETURN):
            if s.state != GameState.PLAYING:
                s.start()

    def _debug_key(self, symbol, modifiers) -> bool:
        if symbol == arcade.key.UP:
            self.debug_index = (self.debug_index - 1) % len(TUNABLES)
        elif symbol == arcade.key.DOWN:
            self.debug_index = (self.debug_index + 1) % len(TUNABLES)
        elif symbol in (arcade.key.LEFT, arcade.key.RIGHT):
            steps = 10 if modifiers & arcade.key.MOD_SHIFT else 1
            if symbol == arcade.key.LEFT:
                steps = -steps
            self.tuning.nudge(TUNABLES[self.debug_index].key, steps)
        elif symbol == arcade.key.BACKSPACE:
            self.tuning.reset()
        else:
            return False
        return True

    # ----------------------------
    # Drawing
    # ----------------------------

    def on_draw(self):
        self.clear()
        snap = self.session.snapshot()
        h = snap.bounds.height

        self._draw_grid(snap)
        self._draw_gate(snap, h)
        for c in snap.crystals:
            self._draw_crystal(c, h)
        for e in snap.enemies:
            self._draw_enemy(e, h)
        for b in snap.bullets:
            arcade.draw_circle_filled(b.x, h - b.y, b.radius, COLORS["bullet"])
        for pt in snap.particles:
            color = COLORS.get(pt.color, COLORS["text"])
            arcade.draw_circle_filled(pt.x, h - pt.y, 2.2, _with_alpha(color, pt.ttl * 2))
        self._draw_player(snap, h)
        self._draw_hud(snap)

        if snap.state == GameState.MENU:
            self._draw_center_text("Crystal Quest", "Press SPACE or click to start")
        elif snap.state == GameState.PAUSED:
            self._draw_center_text("Paused", "Press P to resume")
        elif snap.state == GameState.GAME_OVER:
            self._draw_center_text("Game Over", "Press SPACE to retry")

        if self.debug_open and self.tuning is not None:
            self._draw_debug_panel()

    def _draw_grid(self, snap: Snapshot):
        w, h = int(snap.bounds.width), int(snap.bounds.height)
        grid = 40
        points = []
        for x in range(w % grid, w, grid):
            points += [(x, 0), (x, h)]
        for y in range(h % grid, h, grid):
            points += [(0, y), (w, y)]
        if points:
            arcade.draw_lines(points, COLORS["grid"], 1)

    def _draw_gate(self, snap: Snapshot, h: float):
        g = snap.gate
        glow = 1.0 if g.open else 0.5
        arcade.draw_circle_outline(g.x, h - g.y, g.radius, _with_alpha(COLORS["gate"], 0.6 * glow), 3)
        # pulsing inner ring
        pr = g.radius * (0.7 + 0.1 * math.sin(g.pulse * 6))
        arcade.draw_circle_outline(g.x, h - g.y, pr, _with_alpha(COLORS["gate"], 0.3 * glow), 3)

    def _draw_crystal(self, c, h: float):
        a = -c.spin * 0.5
        ca, sa = math.cos(a), math.sin(a)
        shape = [(0, -c.radius), (c.radius * 0.7, 0), (0, c.radius), (-c.radius * 0.7, 0)]
        points = [(c.x + px * ca - py * sa, h - c.y + px * sa + py * ca) for px, py in shape]
        arcade.draw_polygon_filled(points, COLORS["crystal"])
        arcade.draw_circle_filled(c.x, h - c.y, c.radius * 0.35, _with_alpha(COLORS["crystal_core"], 0.9))

    def _draw_enemy(self, e, h: float):
        color = COLORS[e.kind.value]
        x, y, r = e.x, h - e.y, e.radius
        if e.kind == EnemyKind.CHASER:
            arcade.draw_polygon_filled([(x, y + r), (x + r, y), (x, y - r), (x - r, y)], color)
        else:
            arcade.draw_circle_filled(x, y, r, color)

    def _draw_player(self, snap: Snapshot, h: float):
        p = snap.player
        # heading along velocity, mirrored because y is flipped
        a = -math.atan2(p.vy, p.vx)
        flicker = (math.sin(time.monotonic() * 20) * 0.5 + 0.5) if p.invulnerable > 0 else 1.0
        ca, sa = math.cos(a), math.sin(a)
        shape = [(16, 0), (-10, 9), (-6, 0), (-10, -9)]
        points = [(p.x + px * ca - py * sa, h - p.y + px * sa + py * ca) for px, py in shape]
        arcade.draw_polygon_filled(points, _with_alpha(COLORS["player"], 0.9 * flicker))
        arcade.draw_circle_filled(p.x, h - p.y, 18, _with_alpha(COLORS["player"], 0.25 * flicker))

    def _draw_hud(self, snap: Snapshot):
        top = snap.bounds.height - 22
        arcade.draw_text(f"Level {snap.level}   Score {snap.score}", 12, top, COLORS["text"], 14)
        arcade.draw_text(
            f"Lives {snap.lives}   Crystals {len(snap.crystals)}",
            snap.bounds.width - 12, top, COLORS["text"], 14, anchor_x="right",
        )
        if self.audio is not None and self.audio.muted:
            arcade.draw_text("muted", 12, top - 20, _with_alpha(COLORS["text"], 0.6), 11)

    def _draw_center_text(self, title: str, subtitle: str):
        w, h = self.session.bounds.width, self.session.bounds.height
        arcade.draw_text(title, w * 0.5, h * 0.58, COLORS["text"], 36,
                         anchor_x="center", anchor_y="center", bold=True)
        arcade.draw_text(subtitle, w * 0.5, h * 0.52, _with_alpha(COLORS["text"], 0.8), 16,
                         anchor_x="center", anchor_y="center")

    def _draw_debug_panel(self):
        x0, width = 12, 300
        row_h = 22
        height = row_h * (len(TUNABLES) + 2) + 12
        top = self.session.bounds.height - 50
        arcade.draw_lrbt_rectangle_filled(x0, x0 + width, top - height, top, COLORS["panel"])
        y = top - row_h
        arcade.draw_text("Tuning (F1 to close)", x0 + 10, y, COLORS["text"], 13, bold=True)
        for i, t in enumerate(TUNABLES):
            y -= row_h
            color = COLORS["highlight"] if i == self.debug_index else COLORS["text"]
            arcade.draw_text(t.label, x0 + 10, y, color, 12)
            arcade.draw_text(t.fmt(self.tuning.get(t.key)), x0 + width - 10, y, color, 12,
                             anchor_x="right")
        arcade.draw_text("UP/DOWN select  LEFT/RIGHT adjust  BACKSPACE reset",
                         x0 + 10, y - row_h, _with_alpha(COLORS["text"], 0.6), 9)

    def capture_frame(self) -> np.ndarray:
        """Draw the current state and return it as an (H, W, 3) uint8 array"""
        self.switch_to()
        self.on_draw()
        image = arcade.get_image(0, 0, self.width, self.height)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)
