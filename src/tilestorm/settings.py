"""Tunable game configuration.

Every write to a ``Settings`` field, construction included, is clamped into the
documented range for that field; no setter ever raises. Persisting settings is
left to the host application, ``load_settings`` only reads them.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

from tilestorm.constants import (
    DEFAULT_BOARD_COLS,
    DEFAULT_BOARD_ROWS,
    DEFAULT_DISASTER_TIME_DELTA,
    DEFAULT_DUPLICATE_RESOURCES,
    DEFAULT_INITIAL_DISASTER_MOVE_TIME,
    DEFAULT_MAX_ACTIVE_DISASTERS,
    DEFAULT_SCORE_PER_DISASTER,
    DEFAULT_SCORE_PER_WAVE,
    DEFAULT_SCORE_PER_WAVE_MULTIPLIER,
    DEFAULT_TIME_PER_WAVE,
    DEFAULT_WAVES_PER_ADDITIONAL_DISASTER,
    MAX_BOARD_SIZE,
    MAX_DISASTER_MOVE_TIME,
    MAX_DUPLICATE_RESOURCES,
    MAX_INITIAL_DISASTER_MOVE_TIME,
    MAX_SCORE_PER_DISASTER,
    MAX_SCORE_PER_WAVE,
    MAX_SCORE_PER_WAVE_MULTIPLIER,
    MAX_TIME_PER_WAVE,
    MAX_WAVES_PER_ADDITIONAL_DISASTER,
    MIN_BOARD_SIZE,
    MIN_DISASTER_MOVE_TIME,
    MIN_DISASTER_TIME_DELTA,
    MIN_DUPLICATE_RESOURCES,
    MIN_INITIAL_DISASTER_MOVE_TIME,
    MIN_MAX_ACTIVE_DISASTERS,
    MIN_SCORE_PER_DISASTER,
    MIN_SCORE_PER_WAVE,
    MIN_SCORE_PER_WAVE_MULTIPLIER,
    MIN_TIME_PER_WAVE,
    MIN_WAVES_PER_ADDITIONAL_DISASTER,
)


class WaveMode(Enum):
    """What advances the wave counter. Exactly one mode is active at a time."""
    SCORE = "score"
    TIME = "time"
    DISABLED = "disabled"


Bounds = Tuple[float, float]

# Field name -> callable returning the (min, max) allowed for that field.
_BOUNDS: Dict[str, Callable[["Settings"], Bounds]] = {
    "board_rows": lambda s: (MIN_BOARD_SIZE, MAX_BOARD_SIZE),
    "board_cols": lambda s: (MIN_BOARD_SIZE, MAX_BOARD_SIZE),
    "duplicate_resources": lambda s: (MIN_DUPLICATE_RESOURCES, MAX_DUPLICATE_RESOURCES),
    "initial_disaster_move_time": lambda s: (MIN_INITIAL_DISASTER_MOVE_TIME, MAX_INITIAL_DISASTER_MOVE_TIME),
    "disaster_time_delta": lambda s: (MIN_DISASTER_TIME_DELTA, s.max_disaster_time_delta),
    "max_active_disasters": lambda s: (MIN_MAX_ACTIVE_DISASTERS, s.max_active_disasters_possible),
    "waves_per_additional_disaster": lambda s: (MIN_WAVES_PER_ADDITIONAL_DISASTER, MAX_WAVES_PER_ADDITIONAL_DISASTER),
    "score_per_disaster": lambda s: (MIN_SCORE_PER_DISASTER, MAX_SCORE_PER_DISASTER),
    "time_per_wave": lambda s: (MIN_TIME_PER_WAVE, MAX_TIME_PER_WAVE),
    "score_per_wave": lambda s: (MIN_SCORE_PER_WAVE, MAX_SCORE_PER_WAVE),
    "score_per_wave_multiplier": lambda s: (MIN_SCORE_PER_WAVE_MULTIPLIER, MAX_SCORE_PER_WAVE_MULTIPLIER),
}

_FLOAT_FIELDS = {"score_per_wave_multiplier"}

# Changing the key re-clamps the fields whose range depends on it.
_DEPENDENTS: Dict[str, Tuple[str, ...]] = {
    "initial_disaster_move_time": ("disaster_time_delta",),
    "board_cols": ("max_active_disasters",),
}


@dataclass
class Settings:
    board_rows: int = DEFAULT_BOARD_ROWS
    board_cols: int = DEFAULT_BOARD_COLS
    duplicate_resources: int = DEFAULT_DUPLICATE_RESOURCES
    initial_disaster_move_time: int = DEFAULT_INITIAL_DISASTER_MOVE_TIME
    disaster_time_delta: int = DEFAULT_DISASTER_TIME_DELTA
    max_active_disasters: int = DEFAULT_MAX_ACTIVE_DISASTERS
    waves_per_additional_disaster: int = DEFAULT_WAVES_PER_ADDITIONAL_DISASTER
    score_per_disaster: int = DEFAULT_SCORE_PER_DISASTER
    wave_mode: WaveMode = WaveMode.TIME
    time_per_wave: int = DEFAULT_TIME_PER_WAVE
    score_per_wave: int = DEFAULT_SCORE_PER_WAVE
    score_per_wave_multiplier: float = DEFAULT_SCORE_PER_WAVE_MULTIPLIER

    def __setattr__(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, self._sanitize(name, value))
        for dependent in _DEPENDENTS.get(name, ()):
            # Only re-clamp once the dependent has been assigned by __init__.
            if dependent in self.__dict__:
                object.__setattr__(self, dependent, self._sanitize(dependent, self.__dict__[dependent]))

    def _sanitize(self, name: str, value: Any) -> Any:
        if name == "wave_mode":
            return _coerce_wave_mode(value, self.__dict__.get("wave_mode", WaveMode.TIME))
        bounds = _BOUNDS.get(name)
        if bounds is None:
            return value
        low, high = bounds(self)
        cast = float if name in _FLOAT_FIELDS else int
        try:
            number = cast(value)
        except (TypeError, ValueError):
            number = cast(self.__dict__.get(name, low))
        return cast(min(max(number, low), high))

    @property
    def min_disaster_move_time(self) -> int:
        return MIN_DISASTER_MOVE_TIME

    @property
    def max_disaster_move_time(self) -> int:
        return MAX_DISASTER_MOVE_TIME

    @property
    def max_disaster_time_delta(self) -> int:
        """Largest amount the move interval may shrink per wave."""
        initial = self.__dict__.get("initial_disaster_move_time", DEFAULT_INITIAL_DISASTER_MOVE_TIME)
        return max(MIN_DISASTER_TIME_DELTA, initial - MIN_DISASTER_MOVE_TIME)

    @property
    def max_active_disasters_possible(self) -> int:
        return self.__dict__.get("board_cols", DEFAULT_BOARD_COLS)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a plain mapping, ignoring keys that are not settings."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def _coerce_wave_mode(value: Any, fallback: WaveMode) -> WaveMode:
    if isinstance(value, WaveMode):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        for mode in WaveMode:
            if lowered in (mode.value, mode.name.lower()):
                return mode
    return fallback


def load_settings(path: Path | str) -> Settings:
    """Read settings from a JSON object on disk."""
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"settings file {path} must contain a JSON object")
    return Settings.from_dict(data)
