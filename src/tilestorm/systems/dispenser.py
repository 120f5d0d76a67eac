"""Resource dispenser operations.

The dispenser owns every resource tile that is not on the board. Tiles are created
once, shuffled into a FIFO reservoir, drawn from the front and recycled onto the
back; none is ever deleted during a session.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Sequence

from esper import World

from tilestorm.components.board_position import BoardPosition
from tilestorm.components.resource_dispenser import ResourceDispenser
from tilestorm.components.tile import MatchFlags, ResourceKind, ResourceTile, TileLifecycle, TileStatus
from tilestorm.constants import SHUFFLE_THRESHOLD_RATIO
from tilestorm.utils.rng import world_rng


def create_resource_dispenser(world: World, kinds: Sequence[ResourceKind], duplicates: int) -> int:
    """Create ``duplicates`` tiles of each kind, shuffle them and return the dispenser entity."""
    if not kinds:
        raise ValueError("At least one resource kind is required")
    if duplicates < 1:
        raise ValueError("Each resource kind needs at least one tile")
    tiles = [
        world.create_entity(ResourceTile(kind=kind), MatchFlags(), TileLifecycle())
        for kind in kinds
        for _ in range(duplicates)
    ]
    world_rng(world).shuffle(tiles)
    pool_size = len(tiles)
    dispenser = ResourceDispenser(
        pool_size=pool_size,
        shuffle_threshold=max(1, math.ceil(pool_size * SHUFFLE_THRESHOLD_RATIO)),
        reservoir=deque(tiles),
    )
    return world.create_entity(dispenser)


def get_dispenser(world: World) -> ResourceDispenser:
    for _, dispenser in world.get_component(ResourceDispenser):
        return dispenser
    raise RuntimeError("ResourceDispenser not found")


def shuffle_reservoir(world: World) -> None:
    dispenser = get_dispenser(world)
    tiles = list(dispenser.reservoir)
    world_rng(world).shuffle(tiles)
    dispenser.reservoir = deque(tiles)
    dispenser.draw_count = 0


def draw_resource_tile(world: World) -> int:
    """Take the next tile off the front of the reservoir, reshuffling first when due."""
    dispenser = get_dispenser(world)
    if not dispenser.reservoir:
        raise RuntimeError("Resource reservoir is empty")
    if dispenser.draw_count >= dispenser.shuffle_threshold:
        shuffle_reservoir(world)
    entity = dispenser.reservoir.popleft()
    lifecycle: TileLifecycle = world.component_for_entity(entity, TileLifecycle)
    lifecycle.just_drawn = True
    dispenser.draw_count += 1
    return entity


def return_resource_tile(world: World, entity: int) -> None:
    """Recycle a tile onto the back of the reservoir."""
    dispenser = get_dispenser(world)
    lifecycle: TileLifecycle = world.component_for_entity(entity, TileLifecycle)
    lifecycle.status = TileStatus.IN_RESERVOIR
    lifecycle.just_drawn = False
    world.component_for_entity(entity, MatchFlags).clear()
    if world.has_component(entity, BoardPosition):
        world.remove_component(entity, BoardPosition)
    dispenser.reservoir.append(entity)


def reservoir_size(world: World) -> int:
    return len(get_dispenser(world))
