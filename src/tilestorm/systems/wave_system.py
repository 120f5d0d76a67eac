from __future__ import annotations

import math
from typing import Optional

from esper import World

from tilestorm.components.wave_state import WaveState
from tilestorm.events.bus import EventBus, EVENT_WAVE_ADVANCED
from tilestorm.settings import Settings, WaveMode
from tilestorm.utils.game_state import get_game_state


def get_wave_state(world: World) -> WaveState:
    """Return the shared WaveState component, creating it if absent."""
    for _, state in world.get_component(WaveState):
        return state
    state = WaveState()
    world.create_entity(state)
    return state


class WaveSystem:
    """Tracks wave progression and derives the disaster pressure knobs from it."""

    def __init__(self, world: World, event_bus: EventBus, settings: Optional[Settings] = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.settings = settings or Settings()
        get_wave_state(world).mode = self.settings.wave_mode

    @property
    def current_wave(self) -> int:
        return get_wave_state(self.world).wave

    def update(self) -> bool:
        """Advance at most one wave if the active mode's threshold has been reached."""
        state = get_wave_state(self.world)
        game = get_game_state(self.world)
        if state.mode is WaveMode.SCORE:
            if game.score >= self.score_threshold():
                self.next_wave()
                return True
        elif state.mode is WaveMode.TIME:
            if game.clock - state.wave_started_at >= self.settings.time_per_wave:
                self.next_wave()
                return True
        return False

    def next_wave(self) -> int:
        state = get_wave_state(self.world)
        state.wave += 1
        state.wave_started_at = get_game_state(self.world).clock
        self.event_bus.emit(EVENT_WAVE_ADVANCED, wave=state.wave, mode=state.mode)
        return state.wave

    def score_threshold(self) -> float:
        """Score at which the current wave gives way to the next one in score mode."""
        wave = get_wave_state(self.world).wave
        return self.settings.score_per_wave * self.settings.score_per_wave_multiplier * (wave - 1)

    def score_until_next_wave(self) -> float:
        return max(0.0, self.score_threshold() - get_game_state(self.world).score)

    def time_until_next_wave(self) -> float:
        state = get_wave_state(self.world)
        if state.mode is not WaveMode.TIME:
            return math.inf
        elapsed = get_game_state(self.world).clock - state.wave_started_at
        return max(0.0, self.settings.time_per_wave - elapsed)

    def max_active_disasters(self) -> int:
        wave = get_wave_state(self.world).wave
        per_disaster = self.settings.waves_per_additional_disaster
        if wave < per_disaster:
            return 1
        return min(wave // per_disaster, self.settings.max_active_disasters)

    def disaster_move_interval(self) -> float:
        """Seconds between moves for a disaster spawned during the current wave."""
        wave = get_wave_state(self.world).wave
        interval = self.settings.initial_disaster_move_time - (wave - 1) * self.settings.disaster_time_delta
        low = self.settings.min_disaster_move_time
        high = self.settings.max_disaster_move_time
        return float(min(max(interval, low), high))
