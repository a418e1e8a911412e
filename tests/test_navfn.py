import pytest

from navplan.navfn import (
    COST_NEUTRAL,
    COST_OBS,
    COST_OBS_ROS,
    COST_UNKNOWN_ROS,
    POT_HIGH,
    PRIORITYBUFSIZE,
    NavFn,
)


def _open_grid(nx=10, ny=8):
    nav = NavFn(nx, ny)
    nav.set_costmap([0] * (nx * ny), True, True)
    return nav


def test_construction_sizes_and_defaults():
    nav = NavFn(6, 4)
    assert (nav.nx, nav.ny, nav.ns) == (6, 4, 24)
    assert len(nav.cost) == 24
    assert len(nav.potential) == 24
    assert nav.pending == [False] * 24
    assert nav.pri_inc == 2 * COST_NEUTRAL
    assert nav.path_step == 0.5
    assert nav.goal == (0, 0) and nav.start == (0, 0)
    assert nav.path_len == 0


def test_set_nav_arr_resizes_and_clears():
    nav = NavFn(5, 5)
    nav.cost[3] = 7
    nav.set_nav_arr(3, 7)
    assert nav.ns == 21
    assert all(c == 0 for c in nav.cost)
    assert all(g == 0.0 for g in nav.grad_x)


@pytest.mark.parametrize("size", [(0, 5), (5, 0), (-1, 3)])
def test_invalid_size_rejected(size):
    with pytest.raises(ValueError):
        NavFn(*size)


def test_ros_costmap_translation():
    nav = NavFn(3, 2)
    nav.set_costmap([0, COST_OBS_ROS, COST_OBS, COST_UNKNOWN_ROS, 252, 100], True, True)
    assert nav.cost[0] == COST_NEUTRAL
    assert nav.cost[1] == COST_OBS
    assert nav.cost[2] == COST_OBS
    assert nav.cost[3] == COST_OBS - 1
    assert COST_NEUTRAL < nav.cost[5] <= nav.cost[4] < COST_OBS


def test_ros_costmap_unknown_blocked_when_not_allowed():
    nav = NavFn(2, 1)
    nav.set_costmap([COST_UNKNOWN_ROS, 0], True, False)
    assert nav.cost[0] == COST_OBS
    assert nav.cost[1] == COST_NEUTRAL


def test_ros_translation_is_monotonic():
    nav = NavFn(COST_OBS_ROS, 1)
    nav.set_costmap(list(range(COST_OBS_ROS)), True, True)
    values = list(nav.cost)
    assert values == sorted(values)
    assert max(values) < COST_OBS


def test_plain_costmap_has_seven_cell_border():
    nav = NavFn(20, 20)
    cmap = [0] * 400
    cmap[10 * 20 + 10] = COST_UNKNOWN_ROS
    nav.set_costmap(cmap, False, False)
    assert nav.cost[7 * 20 + 7] == COST_NEUTRAL
    assert nav.cost[12 * 20 + 12] == COST_NEUTRAL
    assert nav.cost[6 * 20 + 10] == COST_OBS
    assert nav.cost[10 * 20 + 13] == COST_OBS
    # unknown space is passable in plain maps regardless of the flag
    assert nav.cost[10 * 20 + 10] == COST_OBS - 1


def test_costmap_too_short_rejected():
    nav = NavFn(4, 4)
    with pytest.raises(ValueError):
        nav.set_costmap([0] * 15)


def test_set_goal_and_start():
    nav = NavFn(5, 5)
    nav.set_goal([2, 3])
    nav.set_start((1, 4))
    assert nav.goal == (2, 3)
    assert nav.start == (1, 4)


def test_setup_keeps_costs_and_marks_border():
    nav = _open_grid()
    nav.set_goal((4, 3))
    nav.setup_nav_fn(True)
    nx, ny = nav.nx, nav.ny
    for x in range(nx):
        assert nav.cost[x] == COST_OBS
        assert nav.cost[(ny - 1) * nx + x] == COST_OBS
    for y in range(ny):
        assert nav.cost[y * nx] == COST_OBS
        assert nav.cost[y * nx + nx - 1] == COST_OBS
    assert nav.cost[2 * nx + 2] == COST_NEUTRAL
    assert nav.nobs == sum(1 for c in nav.cost if c >= COST_OBS)
    assert nav.cur_t == COST_OBS


def test_setup_seeds_goal_potential_and_neighbours():
    nav = _open_grid()
    nav.set_goal((4, 3))
    nav.setup_nav_fn(True)
    k = 4 + 3 * nav.nx
    assert nav.potential[k] == 0.0
    assert sorted(nav.cur_buf) == sorted([k + 1, k - 1, k - nav.nx, k + nav.nx])
    assert all(nav.pending[n] for n in nav.cur_buf)
    assert nav.next_buf == [] and nav.over_buf == []
    others = [p for i, p in enumerate(nav.potential) if i != k]
    assert all(p == POT_HIGH for p in others)


def test_setup_without_keepit_resets_costs():
    nav = NavFn(6, 6)
    nav.set_costmap([200] * 36, True, True)
    nav.set_goal((2, 2))
    nav.setup_nav_fn(False)
    assert nav.cost[2 * 6 + 3] == COST_NEUTRAL
    assert nav.cost[0] == COST_OBS


def test_goal_next_to_border_skips_obstacle_neighbours():
    nav = _open_grid()
    nav.set_goal((1, 1))
    nav.setup_nav_fn(True)
    k = 1 + nav.nx
    assert sorted(nav.cur_buf) == sorted([k + 1, k + nav.nx])


def test_push_ignores_out_of_range_obstacles_and_duplicates():
    nav = _open_grid()
    nav.setup_nav_fn(True)
    nav.pending = [False] * nav.ns
    nav.push_next(-1)
    nav.push_next(nav.ns)
    nav.push_next(0)  # border obstacle
    assert nav.next_buf == []
    cell = 2 * nav.nx + 3
    nav.push_next(cell)
    nav.push_next(cell)
    nav.push_over(cell)
    assert nav.next_buf == [cell]
    assert nav.over_buf == []
    assert nav.pending[cell]


def test_push_over_appends_to_overflow():
    nav = _open_grid()
    nav.setup_nav_fn(True)
    nav.pending = [False] * nav.ns
    cell = 3 * nav.nx + 5
    nav.push_over(cell)
    assert nav.over_buf == [cell]
    assert nav.next_buf == []


def test_push_respects_buffer_capacity():
    nav = NavFn(120, 100)
    nav.set_costmap([0] * nav.ns, True, True)
    nav.setup_nav_fn(True)
    nav.pending = [False] * nav.ns
    for n in range(nav.ns):
        nav.push_next(n)
    assert len(nav.next_buf) == PRIORITYBUFSIZE
    assert sum(nav.pending) == PRIORITYBUFSIZE


def test_init_cost_sets_value():
    nav = _open_grid()
    nav.setup_nav_fn(True)
    nav.pending = [False] * nav.ns
    nav.cur_buf = []
    k = 3 * nav.nx + 5
    nav.init_cost(k, 12.5)
    assert nav.potential[k] == 12.5
    assert set(nav.cur_buf) == {k + 1, k - 1, k - nav.nx, k + nav.nx}