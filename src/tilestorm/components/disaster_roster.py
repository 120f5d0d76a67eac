from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class DisasterRoster:
    """Active disaster entities plus those destroyed since the last tick.

    Destroyed units stay in ``active`` until the next tick purges them so the active
    list is never mutated while a tick is iterating it.
    """
    active: List[int] = field(default_factory=list)
    destroyed: List[int] = field(default_factory=list)

    def mark_destroyed(self, entity: int) -> None:
        if entity not in self.destroyed:
            self.destroyed.append(entity)

    def live_count(self) -> int:
        return sum(1 for entity in self.active if entity not in self.destroyed)
