"""Sampling of reachable velocities along one axis."""

from __future__ import annotations

from collections.abc import Iterator

EPSILON = 1e-5
"""Tolerance used when comparing velocities."""


def project_velocity(
    v0: float, accel: float, decel: float, dt: float, target: float
) -> float:
    """Velocity ``dt`` seconds after ``v0`` when heading for ``target``.

    ``decel`` is applied as given, so it is normally negative.
    """
    if v0 < target:
        return min(target, v0 + accel * dt)
    return max(target, v0 + decel * dt)


class OneDVelocityIterator:
    """Evenly spaced velocities reachable from the current one.

    When the range crosses zero, a sample of exactly zero is slipped in
    before the first positive velocity.
    """

    def __init__(
        self,
        current: float,
        min_vel: float,
        max_vel: float,
        acc_limit: float,
        decel_limit: float,
        acc_time: float,
        num_samples: int,
    ) -> None:
        if current < min_vel:
            current = min_vel
        elif current > max_vel:
            current = max_vel
        self._max_vel = project_velocity(current, acc_limit, decel_limit, acc_time, max_vel)
        self._min_vel = project_velocity(current, acc_limit, decel_limit, acc_time, min_vel)
        self.reset()

        if abs(self._min_vel - self._max_vel) < EPSILON:
            self._increment = 1.0
            return
        num_samples = max(2, num_samples)
        self._increment = (self._max_vel - self._min_vel) / max(1, num_samples - 1)

    @property
    def velocity(self) -> float:
        """The velocity at the current position."""
        if self._return_zero_now:
            return 0.0
        return self._current

    def advance(self) -> None:
        """Move on to the next velocity."""
        step = self._current + self._increment
        if (
            self._return_zero
            and self._current < 0.0
            and step > 0.0
            and step <= self._max_vel + EPSILON
        ):
            self._return_zero_now = True
            self._return_zero = False
        else:
            self._current = step
            self._return_zero_now = False

    def reset(self) -> None:
        """Go back to the first velocity."""
        self._current = self._min_vel
        self._return_zero = True
        self._return_zero_now = False

    def is_finished(self) -> bool:
        """True once every velocity has been visited."""
        return self._current > self._max_vel + EPSILON

    def __iter__(self) -> Iterator[float]:
        self.reset()
        while not self.is_finished():
            yield self.velocity
            self.advance()