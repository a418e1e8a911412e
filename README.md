# navplan

A grid path planner built on a navigation function. Costs on a 2-D grid
are propagated outward from a seed cell, either as a breadth-first
Dijkstra wavefront or as a best-first A* variant with a Euclidean
heuristic. A path is then recovered by following the gradient of the
resulting potential field at sub-cell resolution.

The package also holds two small helpers for local controllers: a
one-dimensional velocity sampler that respects acceleration limits, and
a record of a robot's kinematic limits.

It has no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `navplan.navfn`: `NavFn` holds the cost, potential, gradient and
  priority-buffer state for a grid of `nx` by `ny` cells, addressed by
  index `x + y * nx`. `set_costmap(cmap, is_ros, allow_unknown)`
  translates incoming 8-bit costs (0–252 become 50–253, 253 and 254
  become obstacles, 255 is an obstacle unless unknown space is allowed).
  `set_goal` and `set_start` take `(x, y)` cells. After a path is
  computed its points are in `path_x` and `path_y`, and `path_len` gives
  their number. The cost constants (`COST_OBS`, `COST_NEUTRAL`,
  `POT_HIGH`, ...) live here too.
- `navplan.propagation`: `calc_nav_fn_dijkstra(nav, at_start)` and
  `calc_nav_fn_astar(nav)` set up the buffers and spread the potential
  from the goal cell; the lower-level `prop_nav_fn_dijkstra`,
  `prop_nav_fn_astar`, `update_cell` and `update_cell_astar` are also
  available. A* records the potential reached at the start cell in
  `nav.last_path_cost`.
- `navplan.path`: `calc_path(nav, n, start=None)` walks down the
  gradient from the start cell for at most `n` steps and returns the
  number of points, or 0 on failure; `grad_cell` computes the
  normalised gradient at one cell.
- `navplan.costmap`: `Costmap2D`, a row-major grid of byte costs with a
  resolution and a world origin. `world_to_map` returns the nearest cell
  or `None` when the point is off the map; `map_to_world` accepts
  fractional cells. It also defines `FREE_SPACE`, `LETHAL_OBSTACLE`,
  `INSCRIBED_INFLATED_OBSTACLE` and `NO_INFORMATION`.
- `navplan.geometry`: the frozen dataclasses `Pose` and `Quaternion`,
  plus `orientation_around_z`, `squared_distance` and `bernstein`.
- `navplan.planner`: `NavfnPlanner` plans between two world poses on a
  `Costmap2D`.
- `navplan.velocity`: `project_velocity` and `OneDVelocityIterator`.
- `navplan.kinematics`: `KinematicParameters`, a frozen dataclass of
  velocity and acceleration limits with the derived properties
  `min_theta`, `max_theta`, `min_speed_xy_sq` and `max_speed_xy_sq`.

## Planning between poses

```python
from navplan.costmap import Costmap2D
from navplan.geometry import Pose
from navplan.planner import NavfnPlanner

costmap = Costmap2D(40, 40, 0.05, 0.0, 0.0, 0)
planner = NavfnPlanner(costmap, name="planner", tolerance=0.5,
                       use_astar=False, allow_unknown=True,
                       use_bezier=False,
                       use_final_approach_orientation=False)

start = Pose(x=0.5, y=0.5)
goal = Pose(x=1.5, y=1.2)
for pose in planner.create_plan(start, goal):
    print(pose.x, pose.y)
```

`create_plan` returns a list of `Pose`; an empty list means no plan was
found. The robot's own cell is marked free before planning. If the goal
cannot be reached, the reachable point nearest to it within `tolerance`
(in x and y, stepped by the costmap's resolution) is used instead. With
`use_bezier` the path is resampled as a Bézier curve of 51 points; the
path always ends at the goal. With `use_final_approach_orientation` the
last pose faces along the final segment of the path. When start and
goal coincide, the plan is a single pose, unless that cell is a lethal
obstacle.

Parameters can be changed while the planner is in use. Names carry the
planner's name as a prefix, and only `tolerance` (a float) and the
flags `use_astar`, `allow_unknown` and `use_final_approach_orientation`
are taken; other names or values of the wrong type are ignored:

```python
planner.set_parameters({"planner.tolerance": 1.0, "planner.use_astar": True})
```

## Working with the grid directly

```python
from navplan.navfn import NavFn
from navplan.propagation import calc_nav_fn_dijkstra
from navplan.path import calc_path

nav = NavFn(20, 20)
nav.set_costmap(bytes(400))
nav.set_goal((2, 2))
nav.set_start((15, 15))
calc_nav_fn_dijkstra(nav, True)
if calc_path(nav, 80):
    print(list(zip(nav.path_x, nav.path_y)))
```

## Sampling velocities

```python
from navplan.velocity import OneDVelocityIterator

samples = list(OneDVelocityIterator(current=0.0, min_vel=-1.0, max_vel=1.0,
                                    acc_limit=2.5, decel_limit=-2.5,
                                    acc_time=0.2, num_samples=5))
```

The deceleration limit is applied as given, so it is normally negative.
When the sampled range crosses zero, an exact `0.0` is inserted before
the first positive velocity.

## What it does not do

This is a library only: there is no command-line tool, no map loading
from files, and no messaging or node layer. Poses carry no frames or
timestamps. The velocity sampler and kinematic limits are building
blocks; the package does not generate or score trajectories.