"""Grid state for the navigation function: costs, potentials and priority buffers."""

from __future__ import annotations

from array import array
from collections.abc import Sequence

COST_UNKNOWN_ROS = 255
"""Incoming cost value meaning unknown space."""
COST_OBS = 254
"""Cost of forbidden cells."""
COST_OBS_ROS = 253
"""Incoming cost values from here up are obstacles."""
COST_NEUTRAL = 50
"""Cost of open space."""
COST_FACTOR = 0.8
"""Scale applied to incoming cost values."""
POT_HIGH = 1.0e10
"""Potential of a cell that has not been reached."""
PRIORITYBUFSIZE = 10000
"""Capacity of each priority buffer."""


def _translate(value: int, unknown_is_free: bool) -> int:
    """Map one incoming cost value onto the planner's cost range."""
    if value < COST_OBS_ROS:
        cost = int(COST_NEUTRAL + COST_FACTOR * value)
        return min(cost, COST_OBS - 1)
    if value == COST_UNKNOWN_ROS and unknown_is_free:
        return COST_OBS - 1
    return COST_OBS


class NavFn:
    """Navigation function buffers for a pixel grid.

    The origin is the upper left corner, x grows to the right and y grows down.
    Cells are addressed by index ``x + y * nx``.
    """

    def __init__(self, nx: int, ny: int) -> None:
        self.nx = 0
        self.ny = 0
        self.ns = 0
        self.cost = bytearray()
        self.potential = array("f")
        self.pending: list[bool] = []
        self.grad_x = array("f")
        self.grad_y = array("f")
        self.nobs = 0

        self.cur_buf: list[int] = []
        self.next_buf: list[int] = []
        self.over_buf: list[int] = []
        self.cur_t = float(COST_OBS)
        self.pri_inc = float(2 * COST_NEUTRAL)

        self.goal: tuple[int, int] = (0, 0)
        self.start: tuple[int, int] = (0, 0)

        self.path_x: list[float] = []
        self.path_y: list[float] = []
        self.path_step = 0.5
        self.last_path_cost = POT_HIGH

        self.set_nav_arr(nx, ny)

    @property
    def path_len(self) -> int:
        """Number of points in the last computed path."""
        return len(self.path_x)

    def set_nav_arr(self, nx: int, ny: int) -> None:
        """Set or reset the grid size, clearing every cell array."""
        if nx < 1 or ny < 1:
            raise ValueError(f"grid size must be positive, got {nx} x {ny}")
        self.nx = nx
        self.ny = ny
        self.ns = nx * ny
        self.cost = bytearray(self.ns)
        self.potential = array("f", [POT_HIGH]) * self.ns
        self.pending = [False] * self.ns
        self.grad_x = array("f", [0.0]) * self.ns
        self.grad_y = array("f", [0.0]) * self.ns

    def set_costmap(
        self, cmap: Sequence[int], is_ros: bool = True, allow_unknown: bool = True
    ) -> None:
        """Load the cost array from incoming cost values, row by row.

        A ROS costmap is translated cell for cell; any other map gets a
        seven-cell obstacle border and treats unknown space as passable.
        """
        if len(cmap) < self.ns:
            raise ValueError(f"cost map holds {len(cmap)} cells, expected {self.ns}")
        nx, ny = self.nx, self.ny
        for k in range(self.ns):
            value = cmap[k]
            if is_ros:
                self.cost[k] = _translate(value, allow_unknown)
                continue
            row, col = divmod(k, nx)
            if row < 7 or row > ny - 8 or col < 7 or col > nx - 8:
                self.cost[k] = COST_OBS
            else:
                self.cost[k] = _translate(value, True)

    def set_goal(self, goal: Sequence[int]) -> None:
        """Set the goal cell; the potential is propagated outward from here."""
        self.goal = (int(goal[0]), int(goal[1]))

    def set_start(self, start: Sequence[int]) -> None:
        """Set the start cell, where propagation may stop and paths begin."""
        self.start = (int(start[0]), int(start[1]))

    def setup_nav_fn(self, keepit: bool = False) -> None:
        """Prepare the potential, gradient and priority buffers for propagation.

        Unless ``keepit`` is true, every cost is reset to open space first.
        The outer rim of the grid is always made an obstacle.
        """
        ns, nx, ny = self.ns, self.nx, self.ny
        self.potential = array("f", [POT_HIGH]) * ns
        self.grad_x = array("f", [0.0]) * ns
        self.grad_y = array("f", [0.0]) * ns
        if not keepit:
            self.cost = bytearray([COST_NEUTRAL]) * ns

        last_row = (ny - 1) * nx
        for x in range(nx):
            self.cost[x] = COST_OBS
            self.cost[last_row + x] = COST_OBS
        for y in range(ny):
            self.cost[y * nx] = COST_OBS
            self.cost[y * nx + nx - 1] = COST_OBS

        self.cur_t = float(COST_OBS)
        self.cur_buf = []
        self.next_buf = []
        self.over_buf = []
        self.pending = [False] * ns

        self.init_cost(self.goal[0] + self.goal[1] * nx, 0.0)

        self.nobs = sum(1 for c in self.cost if c >= COST_OBS)

    def init_cost(self, k: int, v: float) -> None:
        """Give cell ``k`` potential ``v`` and queue its four neighbours."""
        self.potential[k] = v
        for n in (k + 1, k - 1, k - self.nx, k + self.nx):
            self._push(self.cur_buf, n)

    def push_next(self, n: int) -> None:
        """Queue cell ``n`` in the block below the current threshold."""
        self._push(self.next_buf, n)

    def push_over(self, n: int) -> None:
        """Queue cell ``n`` in the overflow block."""
        self._push(self.over_buf, n)

    def _push(self, buf: list[int], n: int) -> None:
        if (
            0 <= n < self.ns
            and not self.pending[n]
            and self.cost[n] < COST_OBS
            and len(buf) < PRIORITYBUFSIZE
        ):
            buf.append(n)
            self.pending[n] = True