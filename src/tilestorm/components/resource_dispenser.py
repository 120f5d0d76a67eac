from collections import deque
from dataclasses import dataclass, field
from typing import Deque


@dataclass(slots=True)
class ResourceDispenser:
    """FIFO reservoir of resource tile entities not currently on the board.

    pool_size: every resource tile of the session; reservoir + on-board always equals it.
    shuffle_threshold: draws allowed before the reservoir is fully reshuffled.
    draw_count: draws since the last shuffle.
    """
    pool_size: int
    shuffle_threshold: int
    reservoir: Deque[int] = field(default_factory=deque)
    draw_count: int = 0

    def __len__(self) -> int:
        return len(self.reservoir)
