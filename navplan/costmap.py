"""A two-dimensional grid of cost values placed in the world frame."""

from __future__ import annotations

import logging
import math
import threading

FREE_SPACE = 0
"""Cost of a cell known to be free."""
INSCRIBED_INFLATED_OBSTACLE = 253
"""Cost of a cell within the robot's inscribed radius of an obstacle."""
LETHAL_OBSTACLE = 254
"""Cost of a cell holding an obstacle."""
NO_INFORMATION = 255
"""Cost of a cell about which nothing is known."""

log = logging.getLogger(__name__)


def _round_half_away(value: float) -> int:
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


class Costmap2D:
    """Row-major grid of byte costs with a world origin and a cell resolution."""

    def __init__(
        self,
        size_x: int,
        size_y: int,
        resolution: float,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
        default_value: int = FREE_SPACE,
    ) -> None:
        if size_x < 1 or size_y < 1:
            raise ValueError(f"grid size must be positive, got {size_x} x {size_y}")
        if not resolution > 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        if not 0 <= default_value <= 255:
            raise ValueError(f"cost {default_value} is not a byte value")
        self.size_x = size_x
        self.size_y = size_y
        self.resolution = float(resolution)
        self.origin_x = float(origin_x)
        self.origin_y = float(origin_y)
        self.lock = threading.RLock()
        self._costs = bytearray([default_value]) * (size_x * size_y)

    def _index(self, mx: int, my: int) -> int:
        if not (0 <= mx < self.size_x and 0 <= my < self.size_y):
            raise IndexError(
                f"cell ({mx}, {my}) outside a {self.size_x} x {self.size_y} grid"
            )
        return my * self.size_x + mx

    def get_cost(self, mx: int, my: int) -> int:
        """Cost of the cell at map coordinates ``(mx, my)``."""
        return self._costs[self._index(mx, my)]

    def set_cost(self, mx: int, my: int, cost: int) -> None:
        """Set the cost of the cell at map coordinates ``(mx, my)``."""
        index = self._index(mx, my)
        if not 0 <= cost <= 255:
            raise ValueError(f"cost {cost} is not a byte value")
        self._costs[index] = cost

    def char_map(self) -> bytes:
        """A copy of all costs, row by row."""
        return bytes(self._costs)

    def world_to_map(self, wx: float, wy: float) -> tuple[int, int] | None:
        """Cell nearest to world point ``(wx, wy)``, or None if it is off the map."""
        if wx < self.origin_x or wy < self.origin_y:
            return None
        mx = _round_half_away((wx - self.origin_x) / self.resolution)
        my = _round_half_away((wy - self.origin_y) / self.resolution)
        if mx < self.size_x and my < self.size_y:
            return mx, my
        log.error(
            "world_to_map failed: mx,my: %d,%d, size_x,size_y: %d,%d",
            mx,
            my,
            self.size_x,
            self.size_y,
        )
        return None

    def map_to_world(self, mx: float, my: float) -> tuple[float, float]:
        """World coordinates of map point ``(mx, my)``; fractions are allowed."""
        return (
            self.origin_x + mx * self.resolution,
            self.origin_y + my * self.resolution,
        )