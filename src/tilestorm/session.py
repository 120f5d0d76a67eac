"""Headless game session: the surface hosts drive and read.

A host calls ``setup`` once, then ``tick`` regularly with the elapsed seconds and
``attempt_swap`` whenever the player drags one tile onto another. Everything runs
to completion inside the call; there is no internal scheduling or threading, so a
multi-threaded host must serialise calls into one session.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from tilestorm.components.tile import ResourceKind, TileView
from tilestorm.events.bus import EventBus, EVENT_BOARD_READY, EVENT_TICK
from tilestorm.settings import Settings
from tilestorm.systems.board import BoardSystem, SwapResult
from tilestorm.systems.board_ops import clear_just_drawn, get_board, tile_view
from tilestorm.systems.dispenser import reservoir_size
from tilestorm.systems.disaster_system import DisasterSystem
from tilestorm.systems.wave_system import WaveSystem
from tilestorm.utils.game_state import get_game_state
from tilestorm.world import create_world

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class TickResult:
    lost: bool = False
    score_delta: int = 0


class GameSession:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        event_bus: Optional[EventBus] = None,
        kinds: Optional[Sequence[ResourceKind]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.event_bus, self.settings, kinds=kinds, rng=rng)
        self.wave_system = WaveSystem(self.world, self.event_bus, self.settings)
        self.board_system = BoardSystem(self.world, self.event_bus, self.settings)
        self.disaster_system = DisasterSystem(
            self.world, self.event_bus, self.board_system, self.wave_system, self.settings
        )

    def setup(self) -> None:
        """Deal a board with no runs and place the first disaster."""
        self.board_system.setup()
        self.disaster_system.spawn_disaster()
        state = get_game_state(self.world)
        state.ready = True
        board = get_board(self.world)
        self.event_bus.emit(EVENT_BOARD_READY, cols=board.cols, rows=board.rows)

    def attempt_swap(self, src: Position, dst: Position) -> SwapResult:
        if not get_game_state(self.world).ready:
            return SwapResult(accepted=False, score_delta=0)
        return self.board_system.attempt_swap(src, dst)

    def tick(self, elapsed: float) -> TickResult:
        """Advance the session clock and let waves and disasters react.

        A loss is reported by exactly one tick; afterwards ticks do nothing.
        """
        state = get_game_state(self.world)
        if not state.ready or state.lost:
            return TickResult()
        clear_just_drawn(self.world)
        state.clock += max(0.0, float(elapsed))
        self.event_bus.emit(EVENT_TICK, dt=elapsed)
        self.wave_system.update()
        update = self.disaster_system.update()
        return TickResult(lost=update.lost, score_delta=update.score_delta)

    def get_tile_at(self, position: Position) -> TileView:
        return tile_view(self.world, *position)

    def get_current_wave(self) -> int:
        return self.wave_system.current_wave

    def get_active_disaster_count(self) -> int:
        return self.disaster_system.active_count()

    def get_time_until_next_disaster_move(self) -> float:
        return self.disaster_system.time_until_next_move()

    def get_time_until_next_wave(self) -> float:
        return self.wave_system.time_until_next_wave()

    def get_score_until_next_wave(self) -> float:
        return self.wave_system.score_until_next_wave()

    @property
    def score(self) -> int:
        return get_game_state(self.world).score

    @property
    def lost(self) -> bool:
        return get_game_state(self.world).lost

    @property
    def reservoir_size(self) -> int:
        return reservoir_size(self.world)


def setup_session(
    width: int,
    height: int,
    resource_kinds: Sequence[ResourceKind] = tuple(ResourceKind),
    duplicates_per_kind: int = 10,
    *,
    settings: Optional[Settings] = None,
    event_bus: Optional[EventBus] = None,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Create and set up a session for a width x height board."""
    settings = replace(settings) if settings is not None else Settings()
    settings.board_cols = width
    settings.board_rows = height
    settings.duplicate_resources = duplicates_per_kind
    session = GameSession(settings, event_bus=event_bus, kinds=resource_kinds, rng=rng)
    session.setup()
    return session
