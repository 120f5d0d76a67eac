from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResourceKind(Enum):
    SUN = "sun"
    EARTH = "earth"
    WIND = "wind"
    WATER = "water"
    TREE = "tree"


class TileStatus(Enum):
    IN_RESERVOIR = "in_reservoir"
    ON_BOARD = "on_board"
    DESTROYED = "destroyed"


@dataclass(slots=True)
class ResourceTile:
    """Matchable tile identity. Resource tiles live for the whole session."""
    kind: ResourceKind


@dataclass(slots=True)
class MatchFlags:
    """Transient match markers, cleared whenever the tile changes cell."""
    in_row_match: bool = False
    in_column_match: bool = False

    @property
    def is_in_match(self) -> bool:
        return self.in_row_match or self.in_column_match

    def clear(self) -> None:
        self.in_row_match = False
        self.in_column_match = False


@dataclass(slots=True)
class TileLifecycle:
    """Where a tile is in its life, decoupled from coordinates.

    just_drawn is set when the dispenser hands the tile out so a renderer can play a
    drop-in; the engine never reads it.
    """
    status: TileStatus = TileStatus.IN_RESERVOIR
    just_drawn: bool = False


@dataclass(frozen=True, slots=True)
class TileView:
    """Read-only snapshot of a cell for rendering collaborators."""
    kind: Optional[ResourceKind] = None
    is_disaster: bool = False
    in_row_match: bool = False
    in_column_match: bool = False
    just_drawn: bool = False

    @property
    def is_empty(self) -> bool:
        return self.kind is None and not self.is_disaster


EMPTY_TILE_VIEW = TileView()
