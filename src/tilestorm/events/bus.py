from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so handlers from systems nobody keeps a variable for still fire.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_BOARD_READY = "board_ready"                  # payload: cols=int, rows=int
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(col,row), dst=(col,row)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(col,row), dst=(col,row), score=int
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(col,row), dst=(col,row)
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(col,row),...], kinds=[ResourceKind,...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(col,row),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, removed=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, removed=int, disasters_destroyed=int


# ============================================================================
# SCORE & PROGRESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int, reason=str
EVENT_WAVE_ADVANCED = "wave_advanced"              # payload: wave=int, mode=WaveMode


# ============================================================================
# DISASTERS
# ============================================================================
EVENT_DISASTER_SPAWNED = "disaster_spawned"        # payload: entity=int, position=(col,row), move_interval=float
EVENT_DISASTER_MOVED = "disaster_moved"            # payload: entity=int, src=(col,row), dst=(col,row)
EVENT_DISASTER_DESTROYED = "disaster_destroyed"    # payload: entity=int, position=(col,row)|None, reason=str


# ============================================================================
# GAME FLOW
# ============================================================================
EVENT_GAME_LOST = "game_lost"                      # payload: entity=int, position=(col,row), score=int
