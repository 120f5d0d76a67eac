from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from esper import World

from tilestorm.constants import SCORE_PER_TILE, SETUP_MAX_ATTEMPTS
from tilestorm.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_DISASTER_DESTROYED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_REFILL_COMPLETED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from tilestorm.settings import Settings
from tilestorm.systems.board_ops import (
    clear_just_drawn,
    get_board,
    is_disaster,
    place_tile,
    position_of,
    remove_tile,
    tile_at,
)
from tilestorm.systems.dispenser import shuffle_reservoir
from tilestorm.systems.match import check_horizontal_matches, check_vertical_matches
from tilestorm.systems.match_resolution import deal_fresh_tile, refill_board, remove_matches
from tilestorm.utils.game_state import add_score, get_game_state

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class SwapResult:
    accepted: bool
    score_delta: int = 0


@dataclass(slots=True)
class CascadeOutcome:
    """Totals for one swap and the cascade it set off."""
    removed: int = 0
    disasters_destroyed: int = 0
    depth: int = 0
    score: int = 0


class BoardSystem:
    """Owns grid mutation: the no-match deal, swap legality, swaps and cascades."""

    def __init__(self, world: World, event_bus: EventBus, settings: Optional[Settings] = None):
        self.world = world
        self.event_bus = event_bus
        self.settings = settings or Settings()
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def setup(self, max_attempts: int = SETUP_MAX_ATTEMPTS) -> None:
        """Deal a full board that contains no run of three.

        Fills bottom row first, left to right. If the reservoir runs out of tiles that
        fit a cell, every dealt tile is recycled and the deal starts over.
        """
        for _ in range(max_attempts):
            self._clear_resources()
            if self._fill_without_matches():
                return
            shuffle_reservoir(self.world)
        self._clear_resources()
        raise RuntimeError("Unable to deal a board without matches")

    def _fill_without_matches(self) -> bool:
        board = get_board(self.world)
        for col, row in board.positions():
            if board.grid[col][row] is not None:
                continue
            if deal_fresh_tile(self.world, col, row, force=False) is None:
                return False
        return True

    def _clear_resources(self) -> None:
        board = get_board(self.world)
        for col, row in board.positions():
            remove_tile(self.world, col, row)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.attempt_swap(tuple(src), tuple(dst))

    def attempt_swap(self, src: Position, dst: Position) -> SwapResult:
        """Legality-checked player swap between two cells."""
        state = get_game_state(self.world)
        clear_just_drawn(self.world)
        first = tile_at(self.world, *src)
        second = tile_at(self.world, *dst)
        if state.lost or first is None or second is None or not self.can_swap(first, second):
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return SwapResult(accepted=False, score_delta=0)
        outcome = self.swap_tiles(first, second)
        add_score(self.world, self.event_bus, outcome.score, reason="swap")
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, score=outcome.score)
        return SwapResult(accepted=True, score_delta=outcome.score)

    def can_swap(self, first: int, second: int) -> bool:
        """Orthogonal neighbours, no disaster involved, and the exchange forms a run.

        The check swaps the grid slots speculatively and always puts them back.
        """
        pos_a = position_of(self.world, first)
        pos_b = position_of(self.world, second)
        if pos_a is None or pos_b is None:
            return False
        if abs(pos_a[0] - pos_b[0]) + abs(pos_a[1] - pos_b[1]) != 1:
            return False
        if is_disaster(self.world, first) or is_disaster(self.world, second):
            return False
        board = get_board(self.world)
        (x1, y1), (x2, y2) = pos_a, pos_b
        board.grid[x1][y1] = second
        board.grid[x2][y2] = first
        try:
            return (
                check_vertical_matches(self.world, x1, y1)
                or check_vertical_matches(self.world, x2, y2)
                or check_horizontal_matches(self.world, x1, y1)
                or check_horizontal_matches(self.world, x2, y2)
            )
        finally:
            board.grid[x1][y1] = first
            board.grid[x2][y2] = second

    def swap_tiles(self, first: int, second: int) -> CascadeOutcome:
        """Exchange two tiles unconditionally, then resolve the cascade.

        Callers wanting a legal move must ask ``can_swap`` first.
        """
        pos_a = position_of(self.world, first)
        pos_b = position_of(self.world, second)
        outcome = CascadeOutcome()
        if pos_a is None or pos_b is None:
            return outcome
        place_tile(self.world, pos_a[0], pos_a[1], second)
        place_tile(self.world, pos_b[0], pos_b[1], first)
        self.resolve_cascade(outcome)
        return outcome

    def resolve_cascade(self, outcome: Optional[CascadeOutcome] = None) -> CascadeOutcome:
        """Remove matches and refill until a sweep removes nothing."""
        outcome = outcome or CascadeOutcome()
        while True:
            match_pass = remove_matches(self.world)
            if match_pass.total_removed == 0:
                break
            outcome.depth += 1
            outcome.removed += match_pass.total_removed
            outcome.disasters_destroyed += match_pass.disasters_destroyed
            self.event_bus.emit(EVENT_MATCH_CLEARED, positions=list(match_pass.positions), kinds=list(match_pass.kinds))
            for entity, position in match_pass.disasters:
                self.event_bus.emit(EVENT_DISASTER_DESTROYED, entity=entity, position=position, reason="match")
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=outcome.depth, removed=match_pass.total_removed)
            refill = refill_board(self.world)
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=refill.moves)
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=refill.new_tiles)
        outcome.score = outcome.removed * SCORE_PER_TILE + outcome.disasters_destroyed * self.settings.score_per_disaster
        if outcome.depth:
            self.event_bus.emit(
                EVENT_CASCADE_COMPLETE,
                depth=outcome.depth,
                removed=outcome.removed,
                disasters_destroyed=outcome.disasters_destroyed,
            )
        return outcome
