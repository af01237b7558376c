import random

import numpy as np
import pytest

from game.crystal.utils import circle_collide, clamp, distance_sq, lerp, normalize, seed_everything


def test_normalize_unit_vector():
    assert normalize(3.0, 4.0) == pytest.approx((0.6, 0.8))


def test_normalize_zero_vector_is_safe():
    assert normalize(0.0, 0.0) == (0.0, 0.0)


def test_normalize_short_vector_still_unit_length():
    ux, uy = normalize(0.5, 0.0)
    assert (ux, uy) == pytest.approx((1.0, 0.0))


def test_distance_sq():
    assert distance_sq(1, 2, 4, 6) == 25


def test_clamp_and_lerp():
    assert clamp(5, 0, 3) == 3
    assert clamp(-1, 0, 3) == 0
    assert clamp(2, 0, 3) == 2
    assert lerp(10, 20, 0.25) == pytest.approx(12.5)
    assert lerp(10, 20, 0.0) == 10


def test_circle_collide_requires_strict_overlap():
    assert circle_collide(0, 0, 5, 9, 0, 5)
    # exactly touching does not count as a hit
    assert not circle_collide(0, 0, 5, 10, 0, 5)


def test_seed_everything_is_reproducible():
    seed_everything(7)
    a = (random.random(), np.random.rand())
    seed_everything(7)
    b = (random.random(), np.random.rand())
    assert a == b
