from dataclasses import dataclass

from tilestorm.settings import WaveMode


@dataclass(slots=True)
class WaveState:
    """Current difficulty epoch. The wave only ever goes up."""
    mode: WaveMode = WaveMode.TIME
    wave: int = 1
    wave_started_at: float = 0.0
