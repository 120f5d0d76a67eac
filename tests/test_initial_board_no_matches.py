import random

import pytest

from tilestorm.components.tile import ResourceKind
from tilestorm.events.bus import EVENT_BOARD_READY, EVENT_DISASTER_SPAWNED, EventBus
from tilestorm.session import GameSession, setup_session
from tilestorm.settings import Settings
from tilestorm.systems.board_ops import get_board, get_disaster_roster, is_disaster
from tilestorm.systems.dispenser import get_dispenser
from tilestorm.systems.match import check_horizontal_matches, check_vertical_matches
from tests.helpers import assert_grid_consistent, occupied_count, resource_tiles_on_board


@pytest.mark.parametrize("seed", range(12))
def test_setup_deals_a_full_board_without_runs(seed):
    session = setup_session(6, 8, tuple(ResourceKind), 10, rng=random.Random(seed))
    world = session.world
    board = get_board(world)
    assert occupied_count(world) == 48
    for col, row in board.positions():
        assert not check_horizontal_matches(world, col, row)
        assert not check_vertical_matches(world, col, row)
    assert_grid_consistent(world)


def test_setup_places_the_first_disaster_on_the_top_row():
    bus = EventBus()
    spawned = []
    ready = {}
    bus.subscribe(EVENT_DISASTER_SPAWNED, lambda s, **k: spawned.append(k["position"]))
    bus.subscribe(EVENT_BOARD_READY, lambda s, **k: ready.update(k))
    session = setup_session(6, 8, event_bus=bus, rng=random.Random(4))
    world = session.world
    roster = get_disaster_roster(world)
    assert len(roster.active) == 1
    assert session.get_active_disaster_count() == 1
    assert len(spawned) == 1
    col, row = spawned[0]
    assert row == 7
    assert is_disaster(world, get_board(world).entity_at(col, row))
    assert session.get_tile_at((col, row)).is_disaster
    assert ready == {"cols": 6, "rows": 8}


def test_setup_keeps_every_resource_tile_accounted_for():
    session = setup_session(6, 8, rng=random.Random(9))
    world = session.world
    on_board = resource_tiles_on_board(world)
    # The spawned disaster displaced one resource tile back into the reservoir.
    assert len(on_board) == 47
    assert len(on_board) + session.reservoir_size == get_dispenser(world).pool_size == 50


def test_setup_with_fewer_kinds_still_avoids_runs():
    settings = Settings(board_cols=5, board_rows=5, duplicate_resources=20)
    kinds = (ResourceKind.SUN, ResourceKind.WATER, ResourceKind.TREE)
    session = GameSession(settings, kinds=kinds, rng=random.Random(2))
    session.setup()
    world = session.world
    board = get_board(world)
    for col, row in board.positions():
        assert not check_horizontal_matches(world, col, row)
        assert not check_vertical_matches(world, col, row)


def test_setup_rejects_a_pool_too_small_for_the_board():
    with pytest.raises(ValueError):
        setup_session(6, 8, (ResourceKind.SUN, ResourceKind.EARTH), 20)
