"""Propagation of the navigation potential outward from the goal cell."""

from __future__ import annotations

import logging
import math

from .navfn import COST_NEUTRAL, COST_OBS, POT_HIGH, NavFn

INVSQRT2 = 0.707106781
"""Scale applied to a neighbour's cost when deciding whether to requeue it."""

_FLT_MAX = 3.4028234663852886e38

log = logging.getLogger(__name__)


def _relax(nav: NavFn, n: int, astar: bool) -> None:
    """Planar-wave update of cell ``n`` from its two lowest neighbours."""
    cost = nav.cost
    hf = cost[n]
    if hf >= COST_OBS:
        return

    pot_arr = nav.potential
    nx = nav.nx
    l = pot_arr[n - 1]
    r = pot_arr[n + 1]
    u = pot_arr[n - nx]
    d = pot_arr[n + nx]

    tc = l if l < r else r
    ta = u if u < d else d
    dc = tc - ta
    if dc < 0:
        dc = -dc
        ta = tc

    if dc >= hf:
        pot = ta + hf
    else:
        f = dc / hf
        pot = ta + hf * (-0.2301 * f * f + 0.5307 * f + 0.7040)

    if not pot < pot_arr[n]:
        return

    pot_arr[n] = pot
    if astar:
        x, y = n % nx, n // nx
        pot += math.hypot(x - nav.start[0], y - nav.start[1]) * COST_NEUTRAL

    push = nav.push_next if pot < nav.cur_t else nav.push_over
    for m, neighbour in ((n - 1, l), (n + 1, r), (n - nx, u), (n + nx, d)):
        if neighbour > pot + INVSQRT2 * cost[m]:
            push(m)


def update_cell(nav: NavFn, n: int) -> None:
    """Update the potential of cell ``n`` and queue the neighbours it improves."""
    _relax(nav, n, astar=False)


def update_cell_astar(nav: NavFn, n: int) -> None:
    """Like :func:`update_cell`, prioritising by distance to the start cell."""
    _relax(nav, n, astar=True)


def _propagate(nav: NavFn, cycles: int, astar: bool, stop_at_start: bool) -> int:
    """Run the priority-block loop and return the number of the last cycle."""
    start_cell = nav.start[1] * nav.nx + nav.start[0]
    visited = 0
    widest = 0
    cycle = 0
    while cycle < cycles:
        if not nav.cur_buf and not nav.next_buf:
            break

        current = nav.cur_buf
        visited += len(current)
        widest = max(widest, len(current))

        for m in current:
            nav.pending[m] = False
        for m in current:
            _relax(nav, m, astar)

        nav.cur_buf = nav.next_buf
        nav.next_buf = []

        if not nav.cur_buf:
            nav.cur_t += nav.pri_inc
            nav.cur_buf = nav.over_buf
            nav.over_buf = []

        if stop_at_start and nav.potential[start_cell] < POT_HIGH:
            break
        cycle += 1

    free = nav.ns - nav.nobs
    share = int(visited * 100.0 / free) if free > 0 else 0
    log.debug(
        "Used %d cycles, %d cells visited (%d%%), priority buf max %d",
        cycle,
        visited,
        share,
        widest,
    )
    return cycle


def prop_nav_fn_dijkstra(nav: NavFn, cycles: int, at_start: bool = False) -> bool:
    """Breadth-first propagation for at most ``cycles`` cycles.

    Stops early when the blocks run empty or, with ``at_start``, when the
    start cell is reached. Returns true if it stopped before the cycle limit.
    """
    return _propagate(nav, cycles, astar=False, stop_at_start=at_start) < cycles


def prop_nav_fn_astar(nav: NavFn, cycles: int) -> bool:
    """Best-first propagation with a Euclidean heuristic.

    Returns true if the start cell received a potential.
    """
    gx, gy = nav.goal
    sx, sy = nav.start
    span = math.hypot(gx - sx, gy - sy)
    growth = math.exp(span) if span < 709.0 else math.inf
    if growth > _FLT_MAX:
        growth = math.inf
    nav.cur_t = span * growth + nav.cur_t if span else nav.cur_t

    _propagate(nav, cycles, astar=True, stop_at_start=True)

    start_cell = sy * nav.nx + sx
    nav.last_path_cost = nav.potential[start_cell]
    return nav.potential[start_cell] < POT_HIGH


def _cycle_budget(nav: NavFn) -> int:
    return max(nav.nx * nav.ny // 20, nav.nx + nav.ny)


def calc_nav_fn_dijkstra(nav: NavFn, at_start: bool = False) -> bool:
    """Set up the buffers, keeping costs, and run Dijkstra propagation."""
    nav.setup_nav_fn(True)
    return prop_nav_fn_dijkstra(nav, _cycle_budget(nav), at_start)


def calc_nav_fn_astar(nav: NavFn) -> bool:
    """Set up the buffers, keeping costs, and run A* propagation."""
    nav.setup_nav_fn(True)
    return prop_nav_fn_astar(nav, _cycle_budget(nav))