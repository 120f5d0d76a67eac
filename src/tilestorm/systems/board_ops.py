from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from esper import World

from tilestorm.components.board import Board
from tilestorm.components.board_position import BoardPosition
from tilestorm.components.disaster import DisasterUnit
from tilestorm.components.disaster_roster import DisasterRoster
from tilestorm.components.tile import (
    EMPTY_TILE_VIEW,
    MatchFlags,
    ResourceKind,
    ResourceTile,
    TileLifecycle,
    TileStatus,
    TileView,
)
from tilestorm.systems.dispenser import return_resource_tile

Position = Tuple[int, int]

NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, 1), (0, -1))


@dataclass(slots=True)
class GravityMove:
    entity: int
    source: Position
    target: Position


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_disaster_roster(world: World) -> DisasterRoster:
    for _, roster in world.get_component(DisasterRoster):
        return roster
    raise RuntimeError("DisasterRoster not found")


def tile_at(world: World, col: int, row: int) -> Optional[int]:
    """Entity at (col, row), or None when the cell is empty or off the board."""
    return get_board(world).entity_at(col, row)


def position_of(world: World, entity: int) -> Optional[Position]:
    position = world.try_component(entity, BoardPosition)
    if position is None:
        return None
    return position.as_tuple()


def is_disaster(world: World, entity: Optional[int]) -> bool:
    return entity is not None and world.has_component(entity, DisasterUnit)


def resource_kind(world: World, entity: Optional[int]) -> Optional[ResourceKind]:
    if entity is None:
        return None
    tile = world.try_component(entity, ResourceTile)
    if tile is None:
        return None
    return tile.kind


def tiles_match(world: World, first: Optional[int], second: Optional[int]) -> bool:
    """True when both entities are resource tiles of the same kind."""
    kind = resource_kind(world, first)
    return kind is not None and kind == resource_kind(world, second)


def is_in_match(world: World, entity: Optional[int]) -> bool:
    if entity is None or is_disaster(world, entity):
        return False
    flags = world.try_component(entity, MatchFlags)
    return flags is not None and flags.is_in_match


def place_tile(world: World, col: int, row: int, entity: int) -> None:
    """Put entity into (col, row) and record the cell on the tile.

    The tile's previous cell is left untouched; callers moving a tile clear or
    overwrite it themselves.
    """
    board = get_board(world)
    position = world.try_component(entity, BoardPosition)
    if position is None:
        world.add_component(entity, BoardPosition(col=col, row=row))
    else:
        position.col = col
        position.row = row
    flags = world.try_component(entity, MatchFlags)
    if flags is not None:
        flags.clear()
    lifecycle = world.try_component(entity, TileLifecycle)
    if lifecycle is not None:
        lifecycle.status = TileStatus.ON_BOARD
    board.grid[col][row] = entity


def clear_cell(world: World, col: int, row: int) -> Optional[int]:
    board = get_board(world)
    entity = board.entity_at(col, row)
    if entity is not None:
        board.grid[col][row] = None
    return entity


def remove_tile(world: World, col: int, row: int) -> Optional[int]:
    """Take a resource tile off the board and recycle it. Disasters are left alone."""
    entity = tile_at(world, col, row)
    if entity is None or is_disaster(world, entity):
        return None
    clear_cell(world, col, row)
    return_resource_tile(world, entity)
    return entity


def destroy_disaster(world: World, entity: int) -> Optional[Position]:
    """Retire a disaster unit; it leaves the active roster on the next tick purge."""
    unit = world.try_component(entity, DisasterUnit)
    if unit is None or unit.destroyed:
        return None
    unit.destroyed = True
    lifecycle = world.try_component(entity, TileLifecycle)
    if lifecycle is not None:
        lifecycle.status = TileStatus.DESTROYED
    position = position_of(world, entity)
    if position is not None:
        board = get_board(world)
        if board.entity_at(*position) == entity:
            board.grid[position[0]][position[1]] = None
        world.remove_component(entity, BoardPosition)
    get_disaster_roster(world).mark_destroyed(entity)
    return position


def remove_adjacent_disasters(world: World, col: int, row: int) -> List[Tuple[int, Position]]:
    """Destroy every disaster in the 4-neighbourhood of (col, row)."""
    destroyed: List[Tuple[int, Position]] = []
    for dc, dr in NEIGHBOR_OFFSETS:
        neighbor = tile_at(world, col + dc, row + dr)
        if not is_disaster(world, neighbor):
            continue
        position = destroy_disaster(world, neighbor)
        if position is not None:
            destroyed.append((neighbor, position))
    return destroyed


def apply_gravity(world: World) -> List[GravityMove]:
    """Drop resource tiles straight down into empty cells, column by column, keeping their order.

    Disasters hold their cell; tiles above one fall past it. A disaster only ever
    changes row by its own timed move.
    """
    board = get_board(world)
    moves: List[GravityMove] = []
    for col in range(board.cols):
        for row in range(board.rows):
            if board.grid[col][row] is not None:
                continue
            for above in range(row + 1, board.rows):
                entity = board.grid[col][above]
                if entity is None or is_disaster(world, entity):
                    continue
                place_tile(world, col, row, entity)
                board.grid[col][above] = None
                moves.append(GravityMove(entity=entity, source=(col, above), target=(col, row)))
                break
    return moves


def empty_cells(world: World) -> List[Position]:
    board = get_board(world)
    return [(col, row) for col, row in board.positions() if board.grid[col][row] is None]


def tile_view(world: World, col: int, row: int) -> TileView:
    entity = tile_at(world, col, row)
    if entity is None:
        return EMPTY_TILE_VIEW
    flags = world.try_component(entity, MatchFlags)
    lifecycle = world.try_component(entity, TileLifecycle)
    disaster = is_disaster(world, entity)
    return TileView(
        kind=resource_kind(world, entity),
        is_disaster=disaster,
        in_row_match=bool(flags and flags.in_row_match) and not disaster,
        in_column_match=bool(flags and flags.in_column_match) and not disaster,
        just_drawn=bool(lifecycle and lifecycle.just_drawn),
    )


def clear_just_drawn(world: World) -> None:
    """Forget which tiles on the board were dealt by an earlier call."""
    for _, lifecycle in world.get_component(TileLifecycle):
        lifecycle.just_drawn = False
