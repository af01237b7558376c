"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np

TAU = math.pi * 2


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if v < lo else hi if v > hi else v


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from a to b"""
    return a + (b - a) * t


def vec_len(x: float, y: float) -> float:
    """Calculate vector length (magnitude)"""
    return math.hypot(x, y)


def normalize(x: float, y: float) -> Tuple[float, float]:
    """Normalize a vector to unit length; the zero vector stays (0, 0)"""
    l = math.hypot(x, y) or 1.0
    return x / l, y / l


def distance_sq(x1: float, y1: float, x2: float, y2: float) -> float:
    """Squared distance between two points"""
    dx = x2 - x1
    dy = y2 - y1
    return dx * dx + dy * dy


def circle_collide(x1, y1, r1, x2, y2, r2) -> bool:
    """Check if two circles overlap (touching does not count)"""
    rr = r1 + r2
    return distance_sq(x1, y1, x2, y2) < rr * rr


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
