from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

Position = Tuple[int, int]


@dataclass(slots=True)
class Board:
    """Singleton grid of tile entity ids.

    Indexed as ``grid[col][row]`` with row 0 at the bottom. A cell holds at most one
    entity, and that entity's BoardPosition always names the same cell once a
    mutating operation has finished.
    """
    cols: int
    rows: int
    grid: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.grid:
            self.grid = [[None] * self.rows for _ in range(self.cols)]

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.cols and 0 <= row < self.rows

    def entity_at(self, col: int, row: int) -> Optional[int]:
        if not self.in_bounds(col, row):
            return None
        return self.grid[col][row]

    def positions(self) -> Iterator[Position]:
        """Yield every cell row by row, bottom row first, left to right."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield col, row
