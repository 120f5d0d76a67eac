"""Match detection on the grid.

Two windows are used on purpose. The broad checks (``will_create_match``,
``check_horizontal_matches``, ``check_vertical_matches``) look two cells out
and decide whether a placement or swap is legal. ``flag_matches`` is the narrow
scan used for removal: it flags a run only around cells that sit exactly in the
middle of three, which still covers every tile of a longer run.
"""
from __future__ import annotations

from typing import Optional

from esper import World

from tilestorm.components.tile import MatchFlags, ResourceKind
from tilestorm.systems.board_ops import get_board, resource_kind, tile_at


def _kind_at(world: World, col: int, row: int) -> Optional[ResourceKind]:
    return resource_kind(world, tile_at(world, col, row))


def will_create_match(world: World, col: int, row: int, candidate: int) -> bool:
    """Would placing candidate at (col, row) complete a run with two already-placed tiles?

    Each direction needs both the cell one step and two steps away to hold the same
    kind as the candidate.
    """
    kind = resource_kind(world, candidate)
    if kind is None:
        return False
    for dc, dr in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        if _kind_at(world, col + dc, row + dr) == kind and _kind_at(world, col + 2 * dc, row + 2 * dr) == kind:
            return True
    return False


def _in_line_match(world: World, col: int, row: int, dc: int, dr: int) -> bool:
    kind = _kind_at(world, col, row)
    if kind is None:
        return False
    before1 = _kind_at(world, col - dc, row - dr) == kind
    before2 = _kind_at(world, col - 2 * dc, row - 2 * dr) == kind
    after1 = _kind_at(world, col + dc, row + dr) == kind
    after2 = _kind_at(world, col + 2 * dc, row + 2 * dr) == kind
    return (before1 and after1) or (before1 and before2) or (after1 and after2)


def check_horizontal_matches(world: World, col: int, row: int) -> bool:
    """True if the tile at (col, row) is part of a horizontal run of three or more."""
    return _in_line_match(world, col, row, 1, 0)


def check_vertical_matches(world: World, col: int, row: int) -> bool:
    """True if the tile at (col, row) is part of a vertical run of three or more."""
    return _in_line_match(world, col, row, 0, 1)


def flag_matches(world: World) -> int:
    """Mark every tile sitting in a centred run of three. Returns how many flags were set."""
    board = get_board(world)
    flagged = 0
    for col, row in board.positions():
        kind = _kind_at(world, col, row)
        if kind is None:
            continue
        if 0 < col < board.cols - 1:
            if _kind_at(world, col - 1, row) == kind and _kind_at(world, col + 1, row) == kind:
                for c in (col - 1, col, col + 1):
                    world.component_for_entity(board.grid[c][row], MatchFlags).in_row_match = True
                    flagged += 1
        if 0 < row < board.rows - 1:
            if _kind_at(world, col, row - 1) == kind and _kind_at(world, col, row + 1) == kind:
                for r in (row - 1, row, row + 1):
                    world.component_for_entity(board.grid[col][r], MatchFlags).in_column_match = True
                    flagged += 1
    return flagged
