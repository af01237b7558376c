"""
Live tuning of steering/weapon parameters with best-effort persistence.

Stores never raise: a missing or corrupt file loads as "no saved tuning"
and a failed write is dropped.
"""

from __future__ import annotations

import json
import logging
import math
import os
from typing import Dict, Mapping, Optional

from .config import TUNABLES, TUNABLES_BY_KEY, WorldConfig
from .utils import clamp

logger = logging.getLogger(__name__)

DEFAULT_TUNING_PATH = os.path.join(os.path.expanduser("~"), ".crystal_quest", "tuning_v1.json")


class MemoryTuningStore:
    """In-process store, used for tests and when persistence is disabled"""

    def __init__(self, data: Optional[Mapping[str, float]] = None):
        self.data: Dict[str, float] = dict(data or {})

    def load(self) -> Dict[str, float]:
        return dict(self.data)

    def save(self, mapping: Mapping[str, float]) -> None:
        self.data = dict(mapping)

    def clear(self) -> None:
        self.data = {}


class JsonTuningStore:
    """Tuning persisted as a flat JSON object on disk"""

    def __init__(self, path: str = DEFAULT_TUNING_PATH):
        self.path = path

    def load(self) -> Dict[str, float]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.debug("Ignoring unreadable tuning file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.debug("Ignoring tuning file %s: not a JSON object", self.path)
            return {}
        return data

    def save(self, mapping: Mapping[str, float]) -> None:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(dict(mapping), fh, indent=2, sort_keys=True)
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("Could not save tuning to %s: %s", self.path, exc)

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except OSError:
            pass


def _as_number(value) -> Optional[float]:
    # bool is an int subclass but never a meaningful tuning value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


class Tuning:
    """
    Owns the tunable fields of a WorldConfig.

    Every change goes through ``set`` which validates the range and then
    persists the full tunable mapping to the store.
    """

    def __init__(self, config: Optional[WorldConfig] = None, store=None):
        self.config = config if config is not None else WorldConfig()
        self.store = store if store is not None else MemoryTuningStore()
        self._defaults = self.config.tunable_values()

    def load(self) -> Dict[str, float]:
        """Apply saved values; unknown keys and bad values are skipped"""
        applied = {}
        for key, raw in self.store.load().items():
            tunable = TUNABLES_BY_KEY.get(key)
            value = _as_number(raw)
            if tunable is None or value is None or not tunable.contains(value):
                logger.debug("Skipping saved tuning %r=%r", key, raw)
                continue
            setattr(self.config, key, value)
            applied[key] = value
        return applied

    def get(self, key: str) -> float:
        self._tunable(key)
        return float(getattr(self.config, key))

    def set(self, key: str, value) -> float:
        tunable = self._tunable(key)
        number = _as_number(value)
        if number is None:
            raise ValueError(f"Tuning value for {key!r} must be a finite number, got {value!r}")
        if not tunable.contains(number):
            raise ValueError(f"{key!r} must be within [{tunable.lo}, {tunable.hi}], got {number}")
        setattr(self.config, key, number)
        self.store.save(self.config.tunable_values())
        return number

    def nudge(self, key: str, steps: int) -> float:
        """Move a tunable by whole slider steps, stopping at its range ends"""
        tunable = self._tunable(key)
        value = clamp(self.get(key) + steps * tunable.step, tunable.lo, tunable.hi)
        # keep the value on the step grid so repeated nudges don't drift
        value = round(value / tunable.step) * tunable.step
        return self.set(key, round(clamp(value, tunable.lo, tunable.hi), 6))

    def reset(self) -> None:
        """Restore defaults and forget any saved tuning"""
        for key, value in self._defaults.items():
            setattr(self.config, key, value)
        clear = getattr(self.store, "clear", None)
        if clear is not None:
            clear()

    def values(self) -> Dict[str, float]:
        return self.config.tunable_values()

    @staticmethod
    def _tunable(key: str):
        try:
            return TUNABLES_BY_KEY[key]
        except KeyError:
            raise ValueError(f"Unknown tunable {key!r}; expected one of {[t.key for t in TUNABLES]}") from None
