from navplan.navfn import COST_NEUTRAL, COST_OBS, POT_HIGH, NavFn
from navplan.propagation import (
    calc_nav_fn_astar,
    calc_nav_fn_dijkstra,
    prop_nav_fn_dijkstra,
    update_cell,
    update_cell_astar,
)

SIZE = 10


def make_grid(goal=(5, 5), start=(2, 2), walls=()):
    nav = NavFn(SIZE, SIZE)
    cmap = [0] * (SIZE * SIZE)
    for x, y in walls:
        cmap[y * SIZE + x] = COST_OBS
    nav.set_costmap(cmap, True, True)
    nav.set_goal(goal)
    nav.set_start(start)
    return nav


def idx(x, y):
    return y * SIZE + x


WALL = [(4, y) for y in range(SIZE)]


def test_neighbour_of_goal_gets_neutral_cost():
    nav = make_grid()
    nav.setup_nav_fn(True)
    update_cell(nav, idx(6, 5))
    assert nav.potential[idx(6, 5)] == COST_NEUTRAL
    assert idx(7, 5) in nav.next_buf
    assert nav.pending[idx(7, 5)]
    assert idx(5, 5) not in nav.next_buf


def test_astar_update_uses_heuristic_for_priority():
    nav = make_grid()
    nav.setup_nav_fn(True)
    update_cell_astar(nav, idx(6, 5))
    assert nav.potential[idx(6, 5)] == COST_NEUTRAL
    assert idx(7, 5) in nav.over_buf
    assert idx(7, 5) not in nav.next_buf


def test_update_cell_skips_obstacles():
    nav = make_grid(walls=[(6, 5)])
    nav.setup_nav_fn(True)
    update_cell(nav, idx(6, 5))
    assert nav.potential[idx(6, 5)] == POT_HIGH
    assert nav.next_buf == []


def test_full_dijkstra_reaches_every_free_cell():
    nav = make_grid()
    assert calc_nav_fn_dijkstra(nav, False) is True
    assert nav.potential[idx(5, 5)] == 0.0
    for y in range(1, SIZE - 1):
        for x in range(1, SIZE - 1):
            assert nav.potential[idx(x, y)] < POT_HIGH
    for x in range(SIZE):
        assert nav.potential[idx(x, 0)] == POT_HIGH
        assert nav.potential[idx(x, SIZE - 1)] == POT_HIGH


def test_potential_grows_with_distance_from_goal():
    nav = make_grid()
    calc_nav_fn_dijkstra(nav, False)
    row = [nav.potential[idx(x, 5)] for x in range(5, 9)]
    assert row == sorted(row)
    assert len(set(row)) == len(row)


def test_dijkstra_stops_at_start():
    nav = make_grid()
    assert calc_nav_fn_dijkstra(nav, True) is True
    assert nav.potential[idx(2, 2)] < POT_HIGH


def test_zero_cycles_reports_failure():
    nav = make_grid()
    nav.setup_nav_fn(True)
    assert prop_nav_fn_dijkstra(nav, 0, False) is False


def test_obstacle_cells_keep_high_potential():
    nav = make_grid(walls=[(7, 7)])
    calc_nav_fn_dijkstra(nav, False)
    assert nav.potential[idx(7, 7)] == POT_HIGH
    assert nav.potential[idx(7, 6)] < POT_HIGH


def test_astar_finds_start_and_records_cost():
    nav = make_grid()
    assert calc_nav_fn_astar(nav) is True
    assert nav.last_path_cost == nav.potential[idx(2, 2)]
    assert nav.last_path_cost < POT_HIGH


def test_astar_fails_behind_wall():
    nav = make_grid(walls=WALL)
    assert calc_nav_fn_astar(nav) is False
    assert nav.last_path_cost == POT_HIGH


def test_dijkstra_wall_leaves_start_unreached():
    nav = make_grid(walls=WALL)
    calc_nav_fn_dijkstra(nav, True)
    assert nav.potential[idx(2, 2)] == POT_HIGH
    assert nav.potential[idx(6, 6)] < POT_HIGH