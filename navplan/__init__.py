"""Grid navigation-function path planning, with velocity sampling and kinematic limits."""

__version__ = "0.1.0"

__all__ = [
    "costmap",
    "geometry",
    "kinematics",
    "navfn",
    "path",
    "planner",
    "propagation",
    "velocity",
]