"""Gradient descent over the navigation potential to extract a path."""

from __future__ import annotations

import logging
import math
import struct
from collections.abc import Sequence

from .navfn import COST_NEUTRAL, COST_OBS, POT_HIGH, NavFn

log = logging.getLogger(__name__)

_INT_MIN = -(2**31)


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _c_round(value: float) -> int:
    """Round half away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _to_int32(value: float) -> int:
    """Truncate to a 32-bit int; out-of-range values become the minimum int."""
    if not _INT_MIN <= value < 2**31:
        return _INT_MIN
    return int(value)


def _pot(nav: NavFn, i: int) -> float:
    return nav.potential[i] if 0 <= i < nav.ns else POT_HIGH


def _grad(values, nav: NavFn, i: int) -> float:
    return values[i] if 0 <= i < nav.ns else 0.0


def grad_cell(nav: NavFn, n: int) -> float:
    """Compute the normalised gradient at cell ``n`` and return its inverse norm.

    A cell that already has a gradient returns 1.0; a cell on the top or
    bottom row returns 0.0. Positive values point right and down.
    """
    if not 0 <= n < nav.ns:
        return 0.0
    if nav.grad_x[n] + nav.grad_y[n] > 0.0:
        return 1.0
    nx = nav.nx
    if n < nx or n > nav.ns - nx:
        return 0.0

    cv = nav.potential[n]
    left, right = _pot(nav, n - 1), _pot(nav, n + 1)
    up, down = _pot(nav, n - nx), _pot(nav, n + nx)
    dx = 0.0
    dy = 0.0

    if cv >= POT_HIGH:
        if left < POT_HIGH:
            dx = -COST_OBS
        elif right < POT_HIGH:
            dx = COST_OBS
        if up < POT_HIGH:
            dy = -COST_OBS
        elif down < POT_HIGH:
            dy = COST_OBS
    else:
        if left < POT_HIGH:
            dx += left - cv
        if right < POT_HIGH:
            dx += cv - right
        if up < POT_HIGH:
            dy += up - cv
        if down < POT_HIGH:
            dy += cv - down

    norm = math.hypot(dx, dy)
    if norm > 0:
        norm = 1.0 / norm
        nav.grad_x[n] = norm * dx
        nav.grad_y[n] = norm * dy
    return norm


def calc_path(nav: NavFn, n: int, start: Sequence[int] | None = None) -> int:
    """Follow the gradient from ``start`` (the planner's start by default).

    Runs for at most ``n`` steps, storing the points in ``nav.path_x`` and
    ``nav.path_y``. Returns the number of points when the goal is reached,
    or 0 on failure.
    """
    nx, ns = nav.nx, nav.ns
    sx, sy = nav.start if start is None else (int(start[0]), int(start[1]))
    stc = sy * nx + sx
    dx = 0.0
    dy = 0.0
    path_x: list[float] = []
    path_y: list[float] = []
    nav.path_x = path_x
    nav.path_y = path_y

    for _ in range(n):
        nearest = max(0, min(ns - 1, stc + _c_round(dx) + nx * _c_round(dy)))
        if nav.potential[nearest] < COST_NEUTRAL:
            path_x.append(float(nav.goal[0]))
            path_y.append(float(nav.goal[1]))
            return len(path_x)

        if stc < nx or stc > ns - nx:
            log.debug("Path out of bounds")
            return 0

        path_x.append(_f32(stc % nx + dx))
        path_y.append(_f32(stc // nx + dy))

        oscillating = (
            len(path_x) > 2 and path_x[-1] == path_x[-3] and path_y[-1] == path_y[-3]
        )
        if oscillating:
            log.debug("Path oscillation detected, attempting fix")

        below = stc + nx
        above = stc - nx
        ring = (
            above - 1,
            above,
            above + 1,
            stc - 1,
            stc + 1,
            below - 1,
            below,
            below + 1,
        )

        if oscillating or _pot(nav, stc) >= POT_HIGH or any(
            _pot(nav, c) >= POT_HIGH for c in ring
        ):
            best = stc
            best_pot = _to_int32(_pot(nav, stc))
            for c in ring:
                p = _pot(nav, c)
                if p < best_pot:
                    best_pot = _to_int32(p)
                    best = c
            stc = best
            dx = 0.0
            dy = 0.0
            if _pot(nav, stc) >= POT_HIGH:
                log.debug("No path found, high potential")
                return 0
            continue

        for c in (stc, stc + 1, below, below + 1):
            grad_cell(nav, c)

        gx, gy = nav.grad_x, nav.grad_y
        x1 = (1.0 - dx) * _grad(gx, nav, stc) + dx * _grad(gx, nav, stc + 1)
        x2 = (1.0 - dx) * _grad(gx, nav, below) + dx * _grad(gx, nav, below + 1)
        x = (1.0 - dy) * x1 + dy * x2
        y1 = (1.0 - dx) * _grad(gy, nav, stc) + dx * _grad(gy, nav, stc + 1)
        y2 = (1.0 - dx) * _grad(gy, nav, below) + dx * _grad(gy, nav, below + 1)
        y = (1.0 - dy) * y1 + dy * y2

        if x == 0.0 and y == 0.0:
            log.debug("Zero gradient")
            return 0

        ss = nav.path_step / math.hypot(x, y)
        dx = _f32(dx + x * ss)
        dy = _f32(dy + y * ss)

        if dx > 1.0:
            stc += 1
            dx -= 1.0
        if dx < -1.0:
            stc -= 1
            dx += 1.0
        if dy > 1.0:
            stc += nx
            dy -= 1.0
        if dy < -1.0:
            stc -= nx
            dy += 1.0

    log.debug("No path found, path too long")
    return 0