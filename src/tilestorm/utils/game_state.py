from __future__ import annotations

from esper import World

from tilestorm.components.game_state import GameState
from tilestorm.events.bus import EVENT_SCORE_CHANGED, EventBus


def get_game_state(world: World) -> GameState:
    """Return the session GameState, creating it if absent."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def add_score(world: World, event_bus: EventBus, delta: int, *, reason: str) -> int:
    """Credit delta to the session score and announce it. Returns the new total."""
    state = get_game_state(world)
    if delta <= 0:
        return state.score
    state.score += delta
    event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=delta, reason=reason)
    return state.score
