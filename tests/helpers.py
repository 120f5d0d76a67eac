from __future__ import annotations

import random
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from esper import World

from tilestorm.components.board_position import BoardPosition
from tilestorm.components.disaster import DisasterUnit
from tilestorm.components.tile import MatchFlags, ResourceKind, ResourceTile, TileLifecycle, TileStatus
from tilestorm.session import GameSession
from tilestorm.settings import Settings, WaveMode
from tilestorm.systems.board_ops import (
    destroy_disaster,
    get_board,
    get_disaster_roster,
    is_disaster,
    place_tile,
    remove_tile,
)
from tilestorm.systems.dispenser import get_dispenser
from tilestorm.systems.match import check_horizontal_matches, check_vertical_matches
from tilestorm.utils.game_state import get_game_state

KIND_CODES: Dict[str, ResourceKind] = {
    "S": ResourceKind.SUN,
    "E": ResourceKind.EARTH,
    "W": ResourceKind.WIND,
    "A": ResourceKind.WATER,
    "T": ResourceKind.TREE,
}
CYCLE = "SEWAT"


def make_session(
    cols: int = 6,
    rows: int = 8,
    duplicates: int = 20,
    seed: int = 0,
    **overrides,
) -> GameSession:
    """Session with waves switched off unless overridden; not set up yet."""
    overrides.setdefault("wave_mode", WaveMode.DISABLED)
    settings = Settings(board_cols=cols, board_rows=rows, duplicate_resources=duplicates, **overrides)
    return GameSession(settings, rng=random.Random(seed))


def pattern_layout(cols: int = 6, rows: int = 8) -> List[str]:
    """Run-free layout, top row first: horizontal neighbours differ by one kind, vertical by two."""
    return [
        "".join(CYCLE[(col + 2 * row) % len(CYCLE)] for col in range(cols))
        for row in reversed(range(rows))
    ]


def set_cell(layout: List[str], col: int, row: int, code: str) -> List[str]:
    """Return a copy of layout with (col, row) replaced; row 0 is the bottom line."""
    index = len(layout) - 1 - row
    line = layout[index]
    updated = list(layout)
    updated[index] = line[:col] + code + line[col + 1:]
    return updated


def take_from_reservoir(world: World, kind: ResourceKind) -> int:
    dispenser = get_dispenser(world)
    for entity in dispenser.reservoir:
        if world.component_for_entity(entity, ResourceTile).kind == kind:
            dispenser.reservoir.remove(entity)
            return entity
    raise AssertionError(f"no {kind} tile left in the reservoir")


def add_disaster(world: World, col: int, row: int, *, interval: float = 10.0, next_move_at: Optional[float] = None) -> int:
    unit = DisasterUnit(move_interval=interval, next_move_at=interval if next_move_at is None else next_move_at)
    entity = world.create_entity(unit, MatchFlags(), TileLifecycle(status=TileStatus.ON_BOARD))
    place_tile(world, col, row, entity)
    get_disaster_roster(world).active.append(entity)
    return entity


def load_layout(session: GameSession, layout: Sequence[str]) -> Dict[Tuple[int, int], int]:
    """Replace the board with layout (top row first). 'D' is a disaster, '.' an empty cell.

    Returns the disaster entities by cell. Marks the session ready for play.
    """
    world = session.world
    board = get_board(world)
    assert len(layout) == board.rows
    for col, row in board.positions():
        entity = board.grid[col][row]
        if is_disaster(world, entity):
            destroy_disaster(world, entity)
        else:
            remove_tile(world, col, row)
    session.disaster_system.purge_destroyed()
    disasters: Dict[Tuple[int, int], int] = {}
    for index, line in enumerate(layout):
        row = board.rows - 1 - index
        assert len(line) == board.cols
        for col, code in enumerate(line):
            if code == ".":
                continue
            if code == "D":
                disasters[(col, row)] = add_disaster(world, col, row)
            else:
                place_tile(world, col, row, take_from_reservoir(world, KIND_CODES[code]))
    get_game_state(world).ready = True
    return disasters


def grid_codes(world: World) -> List[str]:
    board = get_board(world)
    names = {kind: code for code, kind in KIND_CODES.items()}
    lines = []
    for row in reversed(range(board.rows)):
        line = ""
        for col in range(board.cols):
            entity = board.grid[col][row]
            if entity is None:
                line += "."
            elif is_disaster(world, entity):
                line += "D"
            else:
                line += names[world.component_for_entity(entity, ResourceTile).kind]
        lines.append(line)
    return lines


def iter_adjacent_pairs(world: World) -> Iterator[Tuple[Tuple[int, int], Tuple[int, int]]]:
    board = get_board(world)
    for col, row in board.positions():
        if col + 1 < board.cols:
            yield (col, row), (col + 1, row)
        if row + 1 < board.rows:
            yield (col, row), (col, row + 1)


def find_legal_swap(session: GameSession) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    board = get_board(session.world)
    for src, dst in iter_adjacent_pairs(session.world):
        first = board.entity_at(*src)
        second = board.entity_at(*dst)
        if first is not None and second is not None and session.board_system.can_swap(first, second):
            return src, dst
    return None


def assert_grid_consistent(world: World) -> None:
    board = get_board(world)
    seen = set()
    for col, row in board.positions():
        entity = board.grid[col][row]
        if entity is None:
            continue
        assert entity not in seen, f"entity {entity} held by two cells"
        seen.add(entity)
        position = world.component_for_entity(entity, BoardPosition)
        assert position.as_tuple() == (col, row)


def resource_tiles_on_board(world: World) -> List[int]:
    board = get_board(world)
    return [
        entity
        for col, row in board.positions()
        if (entity := board.grid[col][row]) is not None and not world.has_component(entity, DisasterUnit)
    ]


def find_runs(world: World) -> List[Tuple[int, int]]:
    """Cells whose tile is part of any horizontal or vertical run of three or more."""
    board = get_board(world)
    return [
        (col, row)
        for col, row in board.positions()
        if check_horizontal_matches(world, col, row) or check_vertical_matches(world, col, row)
    ]


def occupied_count(world: World) -> int:
    board = get_board(world)
    return sum(1 for column in board.grid for entity in column if entity is not None)


def just_drawn_cells(session: GameSession) -> List[Tuple[int, int]]:
    board = get_board(session.world)
    return [(col, row) for col, row in board.positions() if session.get_tile_at((col, row)).just_drawn]
