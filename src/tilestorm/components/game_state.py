"""Session-wide state that replaces process-global game-over/ready flags."""
from dataclasses import dataclass


@dataclass(slots=True)
class GameState:
    """Singleton component for the running session.

    clock: seconds of tick time accumulated since setup.
    lost: set once a disaster runs off the bottom row; no further play afterwards.
    """
    score: int = 0
    clock: float = 0.0
    ready: bool = False
    lost: bool = False
