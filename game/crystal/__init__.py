"""Crystal Quest - steer, collect crystals, shoot enemies, exit through the gate"""

from .config import WorldConfig, TUNABLES
from .events import SoundEvent
from .session import GameSession, GameState, Controls, Snapshot
from .tuning import Tuning, JsonTuningStore, MemoryTuningStore
from .crystal_env import CrystalQuestEnv, run_random_episode

__all__ = [
    'WorldConfig', 'TUNABLES', 'SoundEvent',
    'GameSession', 'GameState', 'Controls', 'Snapshot',
    'Tuning', 'JsonTuningStore', 'MemoryTuningStore',
    'CrystalQuestEnv', 'run_random_episode',
]
