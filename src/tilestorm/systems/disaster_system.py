from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from esper import World

from tilestorm.components.disaster import DisasterUnit
from tilestorm.components.tile import MatchFlags, TileLifecycle, TileStatus
from tilestorm.constants import DISASTER_DRIFT_CHOICES, DISASTER_SPAWN_RETRIES
from tilestorm.events.bus import (
    EventBus,
    EVENT_DISASTER_DESTROYED,
    EVENT_DISASTER_MOVED,
    EVENT_DISASTER_SPAWNED,
    EVENT_GAME_LOST,
)
from tilestorm.settings import Settings
from tilestorm.systems.board import BoardSystem
from tilestorm.systems.board_ops import (
    destroy_disaster,
    get_board,
    get_disaster_roster,
    is_disaster,
    place_tile,
    position_of,
    remove_tile,
    tile_at,
)
from tilestorm.systems.wave_system import WaveSystem
from tilestorm.utils.game_state import add_score, get_game_state
from tilestorm.utils.rng import world_rng


@dataclass(frozen=True, slots=True)
class DisasterUpdate:
    lost: bool = False
    score_delta: int = 0


class DisasterSystem:
    """Spawns, advances and retires disaster units on the session clock."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        board_system: BoardSystem,
        wave_system: WaveSystem,
        settings: Optional[Settings] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.wave_system = wave_system
        self.settings = settings or Settings()

    def update(self) -> DisasterUpdate:
        """One disaster step: purge, top up the roster, move, then retire strays.

        Strays found at the end of a tick are purged at the start of the next one.
        """
        if get_game_state(self.world).lost:
            return DisasterUpdate()
        self.purge_destroyed()
        if self.active_count() < self.wave_system.max_active_disasters():
            self.spawn_disaster()
        update = self.move_disasters()
        if not update.lost:
            self.sweep_stray_disasters()
        return update

    def active_count(self) -> int:
        return get_disaster_roster(self.world).live_count()

    def time_until_next_move(self) -> float:
        now = get_game_state(self.world).clock
        times = [unit.time_until_move(now) for unit in self._live_units()]
        return min(times) if times else math.inf

    def spawn_disaster(self) -> Optional[int]:
        """Drop a new disaster onto the top row, replacing the resource tile there."""
        board = get_board(self.world)
        rng = world_rng(self.world)
        top = board.rows - 1
        col = rng.randint(0, board.cols - 1)
        tries = 0
        while is_disaster(self.world, tile_at(self.world, col, top)):
            if tries >= DISASTER_SPAWN_RETRIES:
                return None
            tries += 1
            col = rng.randint(0, board.cols - 1)
        remove_tile(self.world, col, top)
        interval = self.wave_system.disaster_move_interval()
        now = get_game_state(self.world).clock
        unit = DisasterUnit(move_interval=interval, next_move_at=now + interval)
        entity = self.world.create_entity(unit, MatchFlags(), TileLifecycle(status=TileStatus.ON_BOARD))
        place_tile(self.world, col, top, entity)
        get_disaster_roster(self.world).active.append(entity)
        self.event_bus.emit(EVENT_DISASTER_SPAWNED, entity=entity, position=(col, top), move_interval=interval)
        return entity

    def sweep_stray_disasters(self) -> List[int]:
        """Retire live units that no longer sit on a board cell of their own."""
        board = get_board(self.world)
        stray: List[int] = []
        for entity in list(get_disaster_roster(self.world).active):
            unit = self.world.component_for_entity(entity, DisasterUnit)
            if unit.destroyed:
                continue
            position = position_of(self.world, entity)
            if position is not None and board.entity_at(*position) == entity:
                continue
            destroy_disaster(self.world, entity)
            stray.append(entity)
            self.event_bus.emit(EVENT_DISASTER_DESTROYED, entity=entity, position=position, reason="out_of_bounds")
        return stray

    def purge_destroyed(self) -> None:
        roster = get_disaster_roster(self.world)
        if not roster.destroyed:
            return
        for entity in roster.destroyed:
            if entity in roster.active:
                roster.active.remove(entity)
            self.world.delete_entity(entity, immediate=True)
        roster.destroyed.clear()

    def move_disasters(self) -> DisasterUpdate:
        state = get_game_state(self.world)
        board = get_board(self.world)
        rng = world_rng(self.world)
        score = 0
        for entity in list(get_disaster_roster(self.world).active):
            unit = self.world.component_for_entity(entity, DisasterUnit)
            if unit.destroyed or not unit.ready_for_move(state.clock):
                continue
            position = position_of(self.world, entity)
            if position is None or board.entity_at(*position) != entity:
                continue
            col, row = position
            if row - 1 < 0:
                add_score(self.world, self.event_bus, score, reason="disaster_move")
                state.lost = True
                self.event_bus.emit(EVENT_GAME_LOST, entity=entity, position=position, score=state.score)
                return DisasterUpdate(lost=True, score_delta=score)
            choices = [
                delta for delta in DISASTER_DRIFT_CHOICES
                if board.in_bounds(col + delta, row - 1)
                and not is_disaster(self.world, tile_at(self.world, col + delta, row - 1))
            ]
            if not choices:
                # Every cell below is held by another disaster; wait a full interval.
                unit.reschedule(state.clock)
                continue
            delta = rng.choice(choices)
            target = tile_at(self.world, col + delta, row - 1)
            unit.reschedule(state.clock)
            if target is None:
                continue
            self.event_bus.emit(EVENT_DISASTER_MOVED, entity=entity, src=position, dst=(col + delta, row - 1))
            score += self.board_system.swap_tiles(target, entity).score
        add_score(self.world, self.event_bus, score, reason="disaster_move")
        return DisasterUpdate(lost=False, score_delta=score)

    def _live_units(self) -> List[DisasterUnit]:
        units: List[DisasterUnit] = []
        for entity in get_disaster_roster(self.world).active:
            unit = self.world.component_for_entity(entity, DisasterUnit)
            if not unit.destroyed:
                units.append(unit)
        return units
