"""
Pitch Kinematics Records
========================
Immutable value objects shared by the resolver, sampler and tunnel
synthesizer:

  - Kinematics  — constant-acceleration motion from release to plate
  - DesignSpec  — a user-designed pitch (speed, break, release, target)

A Kinematics record is never mutated; when its source design or record
changes the resolver produces a new one.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .movement import (
    DEFAULT_RELEASE_EXTENSION_FT, MPH_TO_FPS, RUBBER_TO_PLATE_FT,
    acceleration_to_break,
)


# Plate center, middle of the strike zone
DEFAULT_TARGET = (0.0, 2.5)


@dataclass(frozen=True)
class Kinematics:
    """
    Release state, constant acceleration, and flight time to the plate.

    y decreases from release toward the plate, so ``vy0`` is negative and
    a positive ``ay`` is deceleration.
    """
    x0: float
    y0: float
    z0: float
    vx0: float
    vy0: float
    vz0: float
    ax: float
    ay: float
    az: float
    flight_time: float        # s, release → y = 0

    @property
    def release_position(self) -> np.ndarray:
        return np.array([self.x0, self.y0, self.z0])

    @property
    def initial_velocity(self) -> np.ndarray:
        return np.array([self.vx0, self.vy0, self.vz0])

    @property
    def acceleration(self) -> np.ndarray:
        return np.array([self.ax, self.ay, self.az])

    @property
    def release_extension(self) -> float:
        """Distance in front of the rubber at release (ft)."""
        return RUBBER_TO_PLATE_FT - self.y0

    @property
    def release_speed_mph(self) -> float:
        return float(np.linalg.norm(self.initial_velocity)) / MPH_TO_FPS

    @property
    def movement_in(self) -> Tuple[float, float]:
        """(horizontal break, induced vertical break) in inches."""
        return acceleration_to_break(self.ax, self.az, self.flight_time)

    def position_at(self, t: float) -> np.ndarray:
        """p(t) = p0 + v0·t + ½·a·t²"""
        return self.release_position + self.initial_velocity * t \
            + 0.5 * self.acceleration * t * t

    def velocity_at(self, t: float) -> np.ndarray:
        """v(t) = v0 + a·t"""
        return self.initial_velocity + self.acceleration * t

    @property
    def plate_crossing(self) -> np.ndarray:
        return self.position_at(self.flight_time)


@dataclass(frozen=True)
class DesignSpec:
    """
    Input from the pitch-design panel.

    Break values use the Statcast convention: horizontal break positive
    toward the first-base side (catcher's view), induced vertical break
    positive up with gravity removed.
    """
    name: str
    speed_mph: float
    h_break_in: float
    v_break_in: float
    release_x: float
    release_z: float
    target: Optional[Tuple[float, float]] = None
    release_extension: float = DEFAULT_RELEASE_EXTENSION_FT


@dataclass(frozen=True)
class TunnelKinematics:
    """
    Two-phase motion: ``phase1`` up to ``commit_time``, then ``phase2``.

    ``phase2`` starts from phase 1's exact state at ``commit_time``; its
    own clock starts at zero there, and its ``flight_time`` is the
    remaining time to the plate.
    """
    phase1: Kinematics
    commit_time: float
    phase2: Kinematics

    @property
    def flight_time(self) -> float:
        return self.commit_time + self.phase2.flight_time

    def position_at(self, t: float) -> np.ndarray:
        if t <= self.commit_time:
            return self.phase1.position_at(t)
        return self.phase2.position_at(t - self.commit_time)

    def velocity_at(self, t: float) -> np.ndarray:
        if t <= self.commit_time:
            return self.phase1.velocity_at(t)
        return self.phase2.velocity_at(t - self.commit_time)

    @property
    def plate_crossing(self) -> np.ndarray:
        return self.phase2.plate_crossing
