import math
import random

from tilestorm.components.tile import TileLifecycle
from tilestorm.events.bus import EVENT_SCORE_CHANGED, EVENT_TICK
from tilestorm.session import GameSession, TickResult, setup_session
from tilestorm.settings import Settings, WaveMode
from tilestorm.systems.board_ops import get_board
from tests.helpers import just_drawn_cells, load_layout, make_session, pattern_layout, set_cell


def test_tick_before_setup_does_nothing():
    session = make_session()
    assert session.tick(5.0) == TickResult(lost=False, score_delta=0)
    assert session.get_active_disaster_count() == 0


def test_tick_advances_the_clock_and_publishes():
    session = make_session()
    load_layout(session, pattern_layout())
    seen = []
    session.event_bus.subscribe(EVENT_TICK, lambda s, **k: seen.append(k["dt"]))
    session.tick(0.25)
    session.tick(-3.0)
    session.tick(0.5)
    assert seen == [0.25, -3.0, 0.5]
    assert session.get_time_until_next_wave() == math.inf


def test_display_accessors_after_setup():
    settings = Settings(wave_mode=WaveMode.TIME, time_per_wave=30, initial_disaster_move_time=25)
    session = setup_session(6, 8, settings=settings, rng=random.Random(1))
    assert session.get_current_wave() == 1
    assert session.get_active_disaster_count() == 1
    assert session.get_time_until_next_disaster_move() == 25.0
    assert session.get_time_until_next_wave() == 30.0

    session.tick(12.0)
    assert session.get_time_until_next_disaster_move() == 13.0
    assert session.get_time_until_next_wave() == 18.0

    session.tick(18.0)
    assert session.get_current_wave() == 2


def test_score_accumulates_and_is_announced():
    session = make_session()
    layout = pattern_layout()
    layout[0] = "TSEWAW"
    layout[1] = "WATSWW"
    load_layout(session, layout)
    changes = []
    session.event_bus.subscribe(EVENT_SCORE_CHANGED, lambda s, **k: changes.append((k["score"], k["delta"], k["reason"])))
    session.attempt_swap((4, 7), (4, 6))
    assert session.score == 300
    assert changes == [(300, 300, "swap")]


def test_sessions_with_the_same_seed_deal_the_same_board():
    first = GameSession(Settings(), rng=random.Random(99))
    second = GameSession(Settings(), rng=random.Random(99))
    first.setup()
    second.setup()
    for row in range(8):
        for col in range(6):
            assert first.get_tile_at((col, row)) == second.get_tile_at((col, row))


def test_just_drawn_marks_only_tiles_dealt_by_the_last_call():
    session = make_session()
    session.setup()
    assert len(just_drawn_cells(session)) == 47

    session.tick(0.0)
    assert just_drawn_cells(session) == []


def test_cascade_refill_is_the_only_just_drawn_area():
    session = make_session()
    layout = pattern_layout()
    layout = set_cell(layout, 3, 7, "W")
    layout = set_cell(layout, 4, 7, "A")
    layout = set_cell(layout, 5, 7, "W")
    layout = set_cell(layout, 4, 6, "W")
    load_layout(session, layout)
    world = session.world
    board = get_board(world)
    for col, row in board.positions():
        world.component_for_entity(board.grid[col][row], TileLifecycle).just_drawn = True

    assert session.attempt_swap((4, 7), (4, 6)).accepted

    assert just_drawn_cells(session) == [(3, 7), (4, 7), (5, 7)]


def test_setup_session_leaves_the_callers_settings_alone():
    settings = Settings(board_cols=8, board_rows=10, duplicate_resources=30)
    session = setup_session(6, 8, duplicates_per_kind=12, settings=settings, rng=random.Random(3))
    assert (settings.board_cols, settings.board_rows, settings.duplicate_resources) == (8, 10, 30)
    assert (session.settings.board_cols, session.settings.board_rows) == (6, 8)
    assert session.settings.duplicate_resources == 12
