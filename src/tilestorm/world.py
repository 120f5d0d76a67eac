import random
from typing import Optional, Sequence

from esper import World

from tilestorm.components.board import Board
from tilestorm.components.disaster_roster import DisasterRoster
from tilestorm.components.game_state import GameState
from tilestorm.components.tile import ResourceKind
from tilestorm.components.wave_state import WaveState
from tilestorm.events.bus import EventBus
from tilestorm.settings import Settings
from tilestorm.systems.dispenser import create_resource_dispenser


def create_world(
    event_bus: EventBus,
    settings: Optional[Settings] = None,
    *,
    kinds: Optional[Sequence[ResourceKind]] = None,
    rng: Optional[random.Random] = None,
) -> World:
    """Build a world holding an empty board, the tile pool and the session singletons.

    Tiles are not dealt here; BoardSystem.setup does that.
    """
    settings = settings or Settings()
    world = World()
    setattr(world, "random", rng or random.Random())

    world.create_entity(GameState())
    world.create_entity(WaveState(mode=settings.wave_mode))
    world.create_entity(DisasterRoster())
    world.create_entity(Board(cols=settings.board_cols, rows=settings.board_rows))

    resource_kinds = list(kinds) if kinds is not None else list(ResourceKind)
    pool_size = len(resource_kinds) * settings.duplicate_resources
    cells = settings.board_cols * settings.board_rows
    if pool_size <= cells:
        raise ValueError(
            f"{pool_size} resource tiles cannot fill a {settings.board_cols}x{settings.board_rows} board; "
            "increase duplicate_resources"
        )
    create_resource_dispenser(world, resource_kinds, settings.duplicate_resources)
    return world
