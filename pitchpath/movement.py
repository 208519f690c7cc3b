"""
Movement Model
==============
The shared physical convention every other module builds on:

  - time-to-plate from a constant-acceleration y motion
  - the speed-only along-path deceleration
  - the spin-free (gravity only) baseline trajectory
  - closed-form conversion between break (inches) and acceleration

Coordinate system (Statcast, catcher's perspective):
  x = horizontal, positive toward the first-base side
  y = distance from home plate, positive toward the mound
  z = vertical, positive up

Horizontal break follows the same axis: positive break moves the ball
toward +x (first-base side as the catcher sees it), exactly like
Statcast ``pfx_x``.  ``arm_side_break`` converts pitcher-relative
"arm-side positive" numbers onto that axis.

All units are feet and seconds unless the name says otherwise.
"""

from typing import Optional, Tuple

import numpy as np

from .deceleration import DEFAULT_DECELERATION_MODEL, DecelerationModel


# ── Physical constants ────────────────────────────────────────────────────
GRAVITY_FTPS2               = 32.174        # ft/s²
MPH_TO_FPS                  = 5280.0 / 3600.0
RUBBER_TO_PLATE_FT          = 60.5          # front of rubber to point of plate
PLATE_FRONT_Y_FT            = 17.0 / 12.0   # front edge of home plate
DEFAULT_RELEASE_EXTENSION_FT = 6.0
INCHES_PER_FOOT             = 12.0


def release_y(extension: float = DEFAULT_RELEASE_EXTENSION_FT) -> float:
    """y coordinate of the release point for a given release extension."""
    return RUBBER_TO_PLATE_FT - extension


def flight_time(vy0: float, ay: float, y0: float) -> Optional[float]:
    """
    Time for the ball to travel from ``y0`` to the plate (y = 0).

    Solves y0 + vy0·T + ½·ay·T² = 0 for the smaller positive root.

    Returns
    -------
    float or None
        ``None`` when the ball cannot reach the plate under the given
        deceleration (negative discriminant, ay ≤ 0, or a non-positive
        root).
    """
    if not (np.isfinite(vy0) and np.isfinite(ay) and np.isfinite(y0)):
        return None
    if ay <= 0.0:
        return None

    discriminant = vy0 * vy0 - 2.0 * ay * y0
    if discriminant < 0.0:
        return None

    T = (-vy0 - np.sqrt(discriminant)) / ay
    if not np.isfinite(T) or T <= 0.0:
        return None
    return float(T)


def drag_deceleration(speed_mph: float,
                      model: Optional[DecelerationModel] = None) -> float:
    """Along-path deceleration ay (ft/s²) from release speed alone."""
    model = DEFAULT_DECELERATION_MODEL if model is None else model
    return model.ay(speed_mph)


def spin_free_endpoint(vx0: float, vz0: float, T: float,
                       x0: float = 0.0, z0: float = 0.0) -> Tuple[float, float]:
    """
    Plate-crossing (x, z) of a ball launched with the same velocity but
    feeling gravity only (ax = 0, az = −g).

    With the default zero release position the result is the
    displacement over ``T``.
    """
    x = x0 + vx0 * T
    z = z0 + vz0 * T - 0.5 * GRAVITY_FTPS2 * T * T
    return float(x), float(z)


def break_to_acceleration(h_break_in: float, v_break_in: float,
                          T: float) -> Tuple[float, float]:
    """
    Accelerations that reproduce a given break over flight time ``T``.

    A pitch and its spin-free twin share the initial velocity, so at
    time T they differ only by ½·Δa·T².  Hence

        ax = 2·(h/12) / T²
        az = −g + 2·(v/12) / T²

    Parameters
    ----------
    h_break_in : horizontal break (inches, + toward first-base side)
    v_break_in : induced vertical break (inches, + up)
    T : flight time (s), must be positive

    Returns
    -------
    (ax, az) in ft/s²
    """
    if not T > 0.0:
        raise ValueError(f"Flight time must be positive, got {T!r}")
    scale = 2.0 / (T * T)
    ax = scale * (h_break_in / INCHES_PER_FOOT)
    az = -GRAVITY_FTPS2 + scale * (v_break_in / INCHES_PER_FOOT)
    return float(ax), float(az)


def acceleration_to_break(ax: float, az: float, T: float) -> Tuple[float, float]:
    """Inverse of ``break_to_acceleration``: (h_break_in, v_break_in)."""
    if not T > 0.0:
        raise ValueError(f"Flight time must be positive, got {T!r}")
    half_t2 = 0.5 * T * T
    h_break = ax * half_t2 * INCHES_PER_FOOT
    v_break = (az + GRAVITY_FTPS2) * half_t2 * INCHES_PER_FOOT
    return float(h_break), float(v_break)


def arm_side_break(h_break_in: float, throws: str) -> float:
    """
    Map a pitcher-relative horizontal break (arm side positive) onto the
    catcher-view x axis.

    A right-hander's arm side is the third-base side (−x); a
    left-hander's is the first-base side (+x).
    """
    hand = str(throws).strip().upper()
    if hand == 'R':
        return -h_break_in
    if hand == 'L':
        return h_break_in
    raise ValueError(f"throws must be 'R' or 'L', got {throws!r}")
