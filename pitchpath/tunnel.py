"""
Tunnel Synthesizer
==================
Builds a "tunneled" follower pitch: kinematically identical to a
reference pitch up to a commitment time, diverging only afterwards.

Phase 1 is the reference's own kinematics, untouched.  Phase 2 starts
from the reference's exact position and velocity at the commitment time
and gets a new constant acceleration:

  - ay is the speed-only deceleration of the follower's release speed,
    which fixes the remaining time to the plate
  - ax, az land the ball on the follower's target, or, when the follower
    has no target, show the follower's break over the remaining time

Because only the acceleration changes at the seam, position and
velocity are continuous there by construction.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .deceleration import DecelerationModel
from .errors import InvalidTunnelPointError
from .kinematics import DesignSpec, Kinematics, TunnelKinematics
from .movement import (
    INCHES_PER_FOOT, PLATE_FRONT_Y_FT, acceleration_to_break,
    break_to_acceleration, drag_deceleration, flight_time,
)
from .resolver import as_finite, from_design

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TunnelRequest:
    """Reference pitch, follower design, and a commit time or distance."""
    reference: Kinematics
    follower: DesignSpec
    commit_time: Optional[float] = None
    commit_distance_ft: Optional[float] = None


@dataclass(frozen=True)
class TunnelPlan:
    """Result of ``build_tunnel``."""
    kinematics: TunnelKinematics
    follower_alone: Kinematics      # the follower as an untunneled design
    seed_position: np.ndarray       # reference state at the commit time (read-only)
    seed_velocity: np.ndarray
    tunnel_score_in: float          # plate-crossing separation (inches)

    @property
    def commit_time(self) -> float:
        return self.kinematics.commit_time

    @property
    def flight_time(self) -> float:
        return self.kinematics.flight_time

    @property
    def late_break_in(self):
        """(h, v) break accrued after the commit point, inches."""
        phase2 = self.kinematics.phase2
        return acceleration_to_break(phase2.ax, phase2.az, phase2.flight_time)


@dataclass(frozen=True)
class Divergence:
    """First sample where two trajectories separate."""
    index: int
    t: float
    separation_in: float
    distance_from_plate_ft: float   # measured to the front edge of the plate


def _frozen(vector: np.ndarray) -> np.ndarray:
    vector = np.array(vector, dtype=float)
    vector.setflags(write=False)
    return vector


def plate_separation_in(a, b) -> float:
    """Horizontal/vertical distance between two plate crossings, inches."""
    pa = a.plate_crossing
    pb = b.plate_crossing
    return float(np.hypot(pa[0] - pb[0], pa[2] - pb[2]) * INCHES_PER_FOOT)


def commit_time_at_distance(reference: Kinematics, distance_ft: float) -> float:
    """Time at which the reference pitch is ``distance_ft`` from the plate."""
    distance_ft = as_finite('commit_distance_ft', distance_ft)
    if not 0.0 < distance_ft < reference.y0:
        raise InvalidTunnelPointError(
            f"Commit distance {distance_ft:.2f} ft outside (0, {reference.y0:.2f}) ft",
            window=(0.0, reference.y0),
        )
    t = flight_time(reference.vy0, reference.ay, reference.y0 - distance_ft)
    if t is None:
        raise InvalidTunnelPointError(
            f"Reference pitch never reaches {distance_ft:.2f} ft from the plate"
        )
    return t


def build_tunnel(reference: Kinematics, follower: DesignSpec, commit_time: float,
                 deceleration: Optional[DecelerationModel] = None) -> TunnelPlan:
    """
    Two-phase kinematics sharing the reference's flight up to ``commit_time``.

    Phase 2 keeps the speed-only deceleration of the follower's release
    speed, so its remaining time to the plate follows from the seed state.
    Its lateral acceleration lands the ball on the follower's target when
    one is given (the seed velocity is fixed, so the target takes priority
    over the designed break), otherwise it shows the follower's break over
    the remaining time.

    Raises
    ------
    InvalidTunnelPointError  commit time outside (0, T_reference), or one
                             from which the ball cannot reach the plate
    InvalidPitchSpecError    the follower design itself has no solution
    """
    commit_time = as_finite('commit_time', commit_time)
    T_ref = reference.flight_time
    if not 0.0 < commit_time < T_ref:
        raise InvalidTunnelPointError(
            f"Commit time {commit_time:.3f} s outside (0, {T_ref:.3f}) s",
            window=(0.0, T_ref),
        )

    seed_position = _frozen(reference.position_at(commit_time))
    seed_velocity = _frozen(reference.velocity_at(commit_time))
    x_c, y_c, z_c = seed_position
    vx_c, vy_c, vz_c = seed_velocity

    ay = drag_deceleration(as_finite('speed_mph', follower.speed_mph), deceleration)
    remaining = flight_time(vy_c, ay, y_c)
    if remaining is None:
        raise InvalidTunnelPointError(
            f"From the commit time {commit_time:.3f} s the ball cannot reach the "
            f"plate under ay={ay:.2f} ft/s²",
            window=(0.0, T_ref),
        )

    if follower.target is not None:
        tx = as_finite('target_x', follower.target[0])
        tz = as_finite('target_z', follower.target[1])
        scale = 2.0 / (remaining * remaining)
        ax = scale * (tx - x_c - vx_c * remaining)
        az = scale * (tz - z_c - vz_c * remaining)
    else:
        ax, az = break_to_acceleration(
            as_finite('h_break_in', follower.h_break_in),
            as_finite('v_break_in', follower.v_break_in),
            remaining,
        )

    follower_alone = from_design(follower, deceleration=deceleration)

    phase2 = Kinematics(
        x0=float(x_c), y0=float(y_c), z0=float(z_c),
        vx0=float(vx_c), vy0=float(vy_c), vz0=float(vz_c),
        ax=float(ax), ay=float(ay), az=float(az),
        flight_time=float(remaining),
    )
    descriptor = TunnelKinematics(phase1=reference, commit_time=commit_time, phase2=phase2)
    score = plate_separation_in(reference, descriptor)

    logger.debug("Tunnel %s: commit %.3f s, phase 2 %.3f s, score %.2f in",
                 follower.name, commit_time, remaining, score)

    return TunnelPlan(
        kinematics=descriptor,
        follower_alone=follower_alone,
        seed_position=seed_position,
        seed_velocity=seed_velocity,
        tunnel_score_in=score,
    )


def build_tunnel_request(request: TunnelRequest,
                         deceleration: Optional[DecelerationModel] = None) -> TunnelPlan:
    """``build_tunnel`` for a request holding either a commit time or distance."""
    has_time = request.commit_time is not None
    has_distance = request.commit_distance_ft is not None
    if has_time == has_distance:
        raise ValueError("TunnelRequest needs exactly one of commit_time / commit_distance_ft")

    commit_time = request.commit_time
    if has_distance:
        commit_time = commit_time_at_distance(request.reference, request.commit_distance_ft)
    return build_tunnel(request.reference, request.follower, commit_time,
                        deceleration=deceleration)


def divergence_point(a: List, b: List, threshold_in: float = 1.0) -> Optional[Divergence]:
    """
    First index at which two trajectories (same step count) separate by
    more than ``threshold_in`` in the x/z plane.  None if they never do.
    """
    threshold_ft = threshold_in / INCHES_PER_FOOT
    for index, (pa, pb) in enumerate(zip(a, b)):
        separation = np.hypot(pa.x - pb.x, pa.z - pb.z)
        if separation > threshold_ft:
            return Divergence(
                index=index,
                t=pa.t,
                separation_in=float(separation * INCHES_PER_FOOT),
                distance_from_plate_ft=float(pa.y - PLATE_FRONT_Y_FT),
            )
    return None
