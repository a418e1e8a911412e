"""Poses, orientations and small geometric helpers used by the planner."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Quaternion:
    """A rotation as a unit quaternion; the default is the identity."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass(frozen=True)
class Pose:
    """A position in the world frame together with an orientation."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    orientation: Quaternion = field(default_factory=Quaternion)


def orientation_around_z(theta: float) -> Quaternion:
    """Return the quaternion for a rotation of ``theta`` radians about the z axis."""
    half = theta / 2.0
    return Quaternion(0.0, 0.0, math.sin(half), math.cos(half))


def squared_distance(p1: Pose, p2: Pose) -> float:
    """Squared distance between two poses in the x-y plane."""
    dx = p1.x - p2.x
    dy = p1.y - p2.y
    return dx * dx + dy * dy


def bernstein(n: int, i: int, t: float) -> float:
    """Value of the ``i``-th Bernstein basis polynomial of degree ``n`` at ``t``."""
    if n < 0 or not 0 <= i <= n:
        raise ValueError(f"basis index {i} out of range for degree {n}")
    if t == 0.0:
        return 1.0 if i == 0 else 0.0
    if t == 1.0:
        return 1.0 if i == n else 0.0
    try:
        return math.comb(n, i) * t**i * (1.0 - t) ** (n - i)
    except OverflowError:
        if not 0.0 < t < 1.0:
            raise
        log_coef = math.lgamma(n + 1) - math.lgamma(i + 1) - math.lgamma(n - i + 1)
        return math.exp(log_coef + i * math.log(t) + (n - i) * math.log1p(-t))