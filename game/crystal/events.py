"""Sound cues raised by the simulation for the audio adapter"""

from enum import Enum


class SoundEvent(str, Enum):
    FIRE = "fire"
    ENEMY_DESTROYED = "enemy_destroyed"
    PLAYER_HIT = "player_hit"
    PICKUP = "pickup"
    GATE_OPEN = "gate_open"
    LEVEL_ADVANCE = "level_advance"
