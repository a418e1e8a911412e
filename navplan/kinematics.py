"""Kinematic limits of a robot base."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KinematicParameters:
    """Velocity, speed, acceleration and deceleration limits of a robot."""

    min_vel_x: float = 0.0
    min_vel_y: float = 0.0
    max_vel_x: float = 0.0
    max_vel_y: float = 0.0
    base_max_vel_x: float = 0.0
    base_max_vel_y: float = 0.0
    max_vel_theta: float = 0.0
    base_max_vel_theta: float = 0.0
    min_speed_xy: float = 0.0
    max_speed_xy: float = 0.0
    base_max_speed_xy: float = 0.0
    min_speed_theta: float = 0.0
    acc_lim_x: float = 0.0
    acc_lim_y: float = 0.0
    acc_lim_theta: float = 0.0
    decel_lim_x: float = 0.0
    decel_lim_y: float = 0.0
    decel_lim_theta: float = 0.0

    @property
    def min_theta(self) -> float:
        """Lowest rotational velocity: the maximum turned the other way."""
        return -self.max_vel_theta

    @property
    def max_theta(self) -> float:
        """Highest rotational velocity."""
        return self.max_vel_theta

    @property
    def min_speed_xy_sq(self) -> float:
        """Square of the minimum translational speed."""
        return self.min_speed_xy * self.min_speed_xy

    @property
    def max_speed_xy_sq(self) -> float:
        """Square of the maximum translational speed."""
        return self.max_speed_xy * self.max_speed_xy