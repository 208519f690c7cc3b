"""
Pitch Path Engine
=================
Closed-form 3D flight paths for thrown baseballs, plus two kinds of
synthesized pitches:

  - designed pitches that show a given movement profile and cross the
    plate at a chosen target
  - tunneled pitches that match a reference pitch exactly up to a
    commitment point and diverge only afterwards

Motion uses the constant-acceleration convention of Statcast
measurements (feet, seconds, catcher's-perspective axes).  The engine
returns plain 3D points; projection and drawing belong to the caller.
"""

from .errors import (
    PitchPathError, MissingFieldError, MalformedInputError,
    InvalidPitchSpecError, InvalidTunnelPointError,
)
from .deceleration import DecelerationModel, DEFAULT_DECELERATION_TABLE
from .movement import (
    GRAVITY_FTPS2, MPH_TO_FPS, RUBBER_TO_PLATE_FT, PLATE_FRONT_Y_FT,
    flight_time, drag_deceleration, spin_free_endpoint,
    break_to_acceleration, acceleration_to_break, arm_side_break,
)
from .kinematics import Kinematics, DesignSpec, TunnelKinematics
from .resolver import from_observed, from_design, resolve
from .sampler import (
    TrajectoryPoint, sample, sample_batch, flight_time_seconds,
    trajectory_array, steps_for_quality, QUALITY_STEPS,
)
from .tunnel import (
    TunnelRequest, TunnelPlan, build_tunnel, build_tunnel_request,
    commit_time_at_distance, divergence_point, plate_separation_in,
)
from .arsenal import group_by_pitch_type, average_trajectory, design_from_observed

__version__ = "1.0.0"
__all__ = [
    'PitchPathError', 'MissingFieldError', 'MalformedInputError',
    'InvalidPitchSpecError', 'InvalidTunnelPointError',
    'DecelerationModel', 'DEFAULT_DECELERATION_TABLE',
    'GRAVITY_FTPS2', 'MPH_TO_FPS', 'RUBBER_TO_PLATE_FT', 'PLATE_FRONT_Y_FT',
    'flight_time', 'drag_deceleration', 'spin_free_endpoint',
    'break_to_acceleration', 'acceleration_to_break', 'arm_side_break',
    'Kinematics', 'DesignSpec', 'TunnelKinematics',
    'from_observed', 'from_design', 'resolve',
    'TrajectoryPoint', 'sample', 'sample_batch', 'flight_time_seconds',
    'trajectory_array', 'steps_for_quality', 'QUALITY_STEPS',
    'TunnelRequest', 'TunnelPlan', 'build_tunnel', 'build_tunnel_request',
    'commit_time_at_distance', 'divergence_point', 'plate_separation_in',
    'group_by_pitch_type', 'average_trajectory', 'design_from_observed',
]
