from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class BoardPosition:
    """Grid cell currently holding the tile. Absent while the tile is off the board."""
    col: int
    row: int

    def as_tuple(self) -> Tuple[int, int]:
        return self.col, self.row
