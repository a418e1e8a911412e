"""Global planner that plans paths over a costmap with the navigation function."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from .costmap import FREE_SPACE, LETHAL_OBSTACLE, Costmap2D
from .geometry import Pose, bernstein, orientation_around_z, squared_distance
from .navfn import POT_HIGH, NavFn
from .path import calc_path
from .propagation import calc_nav_fn_astar, calc_nav_fn_dijkstra

BEZIER_SAMPLES = 50
"""Number of intervals sampled along the smoothing curve."""

_BOOL_PARAMETERS = ("use_astar", "allow_unknown", "use_final_approach_orientation")

log = logging.getLogger(__name__)


class NavfnPlanner:
    """Plans from a start pose to a goal pose over a :class:`Costmap2D`.

    The potential is spread outward from the robot's start; the path is then
    followed down the gradient from the goal and reversed.
    """

    def __init__(
        self,
        costmap: Costmap2D,
        name: str = "navfn",
        tolerance: float = 0.5,
        use_astar: bool = False,
        allow_unknown: bool = True,
        use_bezier: bool = False,
        use_final_approach_orientation: bool = False,
    ) -> None:
        self.costmap = costmap
        self.name = name
        self.tolerance = tolerance
        self.use_astar = use_astar
        self.allow_unknown = allow_unknown
        self.use_bezier = use_bezier
        self.use_final_approach_orientation = use_final_approach_orientation
        self.navfn = NavFn(costmap.size_x, costmap.size_y)

    def set_parameters(self, parameters: Mapping[str, Any]) -> bool:
        """Apply changed parameters named ``<name>.<parameter>``.

        Only ``tolerance`` (a float) and the flags ``use_astar``,
        ``allow_unknown`` and ``use_final_approach_orientation`` (bools) can
        change; anything else, or a value of the wrong type, is ignored.
        """
        prefix = self.name + "."
        for full_name, value in parameters.items():
            if not full_name.startswith(prefix):
                continue
            key = full_name[len(prefix):]
            if isinstance(value, float) and key == "tolerance":
                self.tolerance = value
            elif isinstance(value, bool) and key in _BOOL_PARAMETERS:
                setattr(self, key, value)
        return True

    def create_plan(self, start: Pose, goal: Pose) -> list[Pose]:
        """Plan from ``start`` to ``goal``; an empty list means no plan."""
        if self.is_planner_out_of_date():
            self.navfn.set_nav_arr(self.costmap.size_x, self.costmap.size_y)

        if start.x == goal.x and start.y == goal.y:
            cell = self.costmap.world_to_map(start.x, start.y)
            if cell is None or self.costmap.get_cost(*cell) == LETHAL_OBSTACLE:
                log.warning("Failed to create a unique pose path because of obstacles")
                return []
            pose = start
            if (
                start.orientation != goal.orientation
                and not self.use_final_approach_orientation
            ):
                pose = replace(start, orientation=goal.orientation)
            return [pose]

        plan = self.make_plan(start, goal, self.tolerance)
        if not plan:
            log.warning(
                "%s: failed to create plan with tolerance %.2f.",
                self.name,
                self.tolerance,
            )
        return plan

    def make_plan(self, start: Pose, goal: Pose, tolerance: float) -> list[Pose]:
        """Compute a plan, relaxing the goal by up to ``tolerance`` in x and y."""
        log.debug(
            "Making plan from (%.2f,%.2f) to (%.2f,%.2f)",
            start.x,
            start.y,
            goal.x,
            goal.y,
        )
        map_start = self.costmap.world_to_map(start.x, start.y)
        if map_start is None:
            log.warning(
                "Cannot create a plan: the robot's start position is off the "
                "global costmap."
            )
            return []

        self.costmap.set_cost(map_start[0], map_start[1], FREE_SPACE)

        with self.costmap.lock:
            self.navfn.set_nav_arr(self.costmap.size_x, self.costmap.size_y)
            self.navfn.set_costmap(self.costmap.char_map(), True, self.allow_unknown)

        map_goal = self.costmap.world_to_map(goal.x, goal.y)
        if map_goal is None:
            log.warning("The goal sent to the planner is off the global costmap.")
            return []

        # The potential grows from the robot; the path is traced back from the goal.
        self.navfn.set_start(map_goal)
        self.navfn.set_goal(map_start)
        if self.use_astar:
            calc_nav_fn_astar(self.navfn)
        else:
            calc_nav_fn_dijkstra(self.navfn, True)

        best_pose = self._reachable_goal(goal, tolerance)
        if best_pose is None:
            return []

        plan = self.get_plan_from_potential(best_pose)
        if not plan:
            log.error(
                "Failed to create a plan from potential when a legal potential "
                "was found. This shouldn't happen."
            )
            return []

        if self.use_bezier:
            plan = self.optimize_path_with_bezier(plan)
        plan = self.smooth_approach_to_goal(best_pose, plan)

        if self.use_final_approach_orientation:
            plan = self._orient_final_approach(start, plan)
        return plan

    def _reachable_goal(self, goal: Pose, tolerance: float) -> Pose | None:
        """The goal itself if reachable, else the nearest reachable pose near it."""
        if self.get_point_potential(goal.x, goal.y) < POT_HIGH:
            return goal

        resolution = self.costmap.resolution
        best: Pose | None = None
        best_sdist = sys.float_info.max
        y = goal.y - tolerance
        while y <= goal.y + tolerance:
            x = goal.x - tolerance
            while x <= goal.x + tolerance:
                candidate = replace(goal, x=x, y=y)
                sdist = squared_distance(candidate, goal)
                if self.get_point_potential(x, y) < POT_HIGH and sdist < best_sdist:
                    best_sdist = sdist
                    best = candidate
                x += resolution
            y += resolution
        return best

    @staticmethod
    def _orient_final_approach(start: Pose, plan: list[Pose]) -> list[Pose]:
        plan = list(plan)
        if len(plan) == 1:
            plan[-1] = replace(plan[-1], orientation=start.orientation)
        elif len(plan) > 1:
            last = plan[-1]
            approach = plan[-2]
            if (
                abs(last.x - approach.x) < 0.0001
                and abs(last.y - approach.y) < 0.0001
                and len(plan) > 2
            ):
                approach = plan[-3]
            theta = math.atan2(last.y - approach.y, last.x - approach.x)
            plan[-1] = replace(last, orientation=orientation_around_z(theta))
        return plan

    def get_plan_from_potential(self, goal: Pose) -> list[Pose]:
        """Follow the computed potential from ``goal`` back to the robot's start."""
        map_goal = self.costmap.world_to_map(goal.x, goal.y)
        if map_goal is None:
            log.warning("The goal sent to the navfn planner is off the global costmap.")
            return []

        self.navfn.set_start(map_goal)
        max_cycles = 4 * max(self.costmap.size_x, self.costmap.size_y)
        path_len = calc_path(self.navfn, max_cycles)
        if path_len == 0:
            return []
        log.debug(
            "Path found, %d steps, %f cost", path_len, self.navfn.last_path_cost
        )

        points = zip(reversed(self.navfn.path_x), reversed(self.navfn.path_y))
        plan = []
        for mx, my in points:
            wx, wy = self.costmap.map_to_world(mx, my)
            plan.append(Pose(x=wx, y=wy, z=0.0))
        return plan

    def optimize_path_with_bezier(self, path: list[Pose]) -> list[Pose]:
        """Resample ``path`` as a Bezier curve with the poses as control points."""
        degree = len(path) - 1
        smoothed = []
        for sample in range(BEZIER_SAMPLES + 1):
            t = sample / BEZIER_SAMPLES
            x = 0.0
            y = 0.0
            for i, control in enumerate(path):
                coef = bernstein(degree, i, t)
                x += coef * control.x
                y += coef * control.y
            smoothed.append(Pose(x=x, y=y))
        return smoothed

    def smooth_approach_to_goal(self, goal: Pose, plan: list[Pose]) -> list[Pose]:
        """End the plan at ``goal``, replacing a last pose that overshoots it."""
        plan = list(plan)
        if len(plan) >= 2:
            second_to_last, last = plan[-2], plan[-1]
            if squared_distance(last, second_to_last) > squared_distance(
                goal, second_to_last
            ):
                plan[-1] = goal
                return plan
        plan.append(goal)
        return plan

    def get_point_potential(self, wx: float, wy: float) -> float:
        """Navigation potential at a world point; the largest float if off the map."""
        cell = self.costmap.world_to_map(wx, wy)
        if cell is None:
            return sys.float_info.max
        mx, my = cell
        return float(self.navfn.potential[my * self.navfn.nx + mx])

    def is_planner_out_of_date(self) -> bool:
        """True if the navigation grid no longer matches the costmap's size."""
        return (
            self.navfn is None
            or self.navfn.nx != self.costmap.size_x
            or self.navfn.ny != self.costmap.size_y
        )