from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from esper import World

from tilestorm.components.tile import ResourceKind
from tilestorm.systems.board_ops import (
    GravityMove,
    apply_gravity,
    empty_cells,
    get_board,
    is_disaster,
    is_in_match,
    place_tile,
    remove_adjacent_disasters,
    remove_tile,
    resource_kind,
)
from tilestorm.systems.dispenser import draw_resource_tile, reservoir_size, return_resource_tile
from tilestorm.systems.match import flag_matches, will_create_match

Position = Tuple[int, int]


@dataclass(slots=True)
class MatchPass:
    """What a single flag-and-remove sweep took off the board."""
    positions: List[Position] = field(default_factory=list)
    kinds: List[ResourceKind] = field(default_factory=list)
    disasters: List[Tuple[int, Position]] = field(default_factory=list)

    @property
    def tiles_removed(self) -> int:
        return len(self.positions)

    @property
    def disasters_destroyed(self) -> int:
        return len(self.disasters)

    @property
    def total_removed(self) -> int:
        return self.tiles_removed + self.disasters_destroyed


@dataclass(slots=True)
class RefillResult:
    moves: List[GravityMove] = field(default_factory=list)
    new_tiles: List[Position] = field(default_factory=list)


def remove_matches(world: World) -> MatchPass:
    """Flag centred runs, then clear every flagged tile.

    Disasters next to a cleared tile are destroyed before the tile itself is
    recycled into the dispenser.
    """
    flag_matches(world)
    board = get_board(world)
    result = MatchPass()
    for col, row in board.positions():
        entity = board.grid[col][row]
        if entity is None or is_disaster(world, entity) or not is_in_match(world, entity):
            continue
        result.disasters.extend(remove_adjacent_disasters(world, col, row))
        kind = resource_kind(world, entity)
        remove_tile(world, col, row)
        result.positions.append((col, row))
        if kind is not None:
            result.kinds.append(kind)
    return result


def deal_fresh_tile(world: World, col: int, row: int, *, force: bool = True) -> Optional[int]:
    """Fill an empty cell from the dispenser, skipping tiles that would complete a run.

    Every reservoir tile is tried at most once; rejected tiles go back to the bottom.
    When nothing fits, ``force`` places the next tile anyway (the cascade resolves
    it) and otherwise None is returned with the cell left empty.
    """
    for _ in range(reservoir_size(world)):
        entity = draw_resource_tile(world)
        if not will_create_match(world, col, row, entity):
            place_tile(world, col, row, entity)
            return entity
        return_resource_tile(world, entity)
    if not force:
        return None
    entity = draw_resource_tile(world)
    place_tile(world, col, row, entity)
    return entity


def refill_board(world: World) -> RefillResult:
    """Compact every column downward, then deal fresh tiles into the cells left at the top."""
    moves = apply_gravity(world)
    new_tiles: List[Position] = []
    for col, row in empty_cells(world):
        deal_fresh_tile(world, col, row)
        new_tiles.append((col, row))
    return RefillResult(moves=moves, new_tiles=new_tiles)
