"""
Kinematics Resolver
===================
Turns either source of pitch information into a canonical ``Kinematics``:

1. **Observed** — a Statcast-style measurement record that already holds
   the initial velocity, acceleration and release geometry.  Passed
   through after validation.
2. **Designed** — a ``DesignSpec`` (speed, break, release, target).
   Solved in one pass:

     ay  ← speed-only deceleration curve
     vy0 ← release speed projected on the release→target line
     T   ← flight_time(vy0, ay, y0)
     ax, az ← break_to_acceleration(hBreak, vBreak, T)
     vx0, vz0 ← chosen so the ball is at the target at time T

   T never depends on the transverse solve, so no iteration is needed.
"""

from typing import Any, Optional, Tuple

import numpy as np

from .deceleration import DecelerationModel
from .errors import InvalidPitchSpecError, MalformedInputError, MissingFieldError
from .kinematics import DEFAULT_TARGET, DesignSpec, Kinematics
from .movement import (
    MPH_TO_FPS, break_to_acceleration, drag_deceleration, flight_time,
    release_y,
)


# Statcast column names of an observed measurement record
OBSERVED_FIELDS = (
    'vx0', 'vy0', 'vz0',
    'ax', 'ay', 'az',
    'release_pos_x', 'release_pos_z', 'release_extension',
)

# ── Design sanity bounds ──────────────────────────────────────────────────
MIN_DESIGN_SPEED_MPH = 30.0
MAX_DESIGN_SPEED_MPH = 110.0
MAX_TRANSVERSE_RATIO = 0.5     # |vx0|, |vz0| relative to release speed


def as_finite(field: str, value: Any) -> float:
    """Coerce a field to float; NaN, inf, bools and junk are malformed."""
    if isinstance(value, bool):
        raise MalformedInputError(field, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedInputError(field, value) from None
    if not np.isfinite(number):
        raise MalformedInputError(field, value)
    return number


def _read_field(record: Any, field: str) -> float:
    value = record.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingFieldError(field)
    return as_finite(field, value)


def from_observed(record) -> Kinematics:
    """
    Validate a fully specified physical measurement and wrap it.

    Raises
    ------
    MissingFieldError      a required field is absent or empty
    MalformedInputError    a field is not a finite number
    InvalidPitchSpecError  the measured motion never reaches the plate
    """
    values = {field: _read_field(record, field) for field in OBSERVED_FIELDS}

    y0 = release_y(values['release_extension'])
    T = flight_time(values['vy0'], values['ay'], y0)
    if T is None:
        raise InvalidPitchSpecError(
            f"Observed pitch cannot reach the plate "
            f"(vy0={values['vy0']:.2f} ft/s, ay={values['ay']:.2f} ft/s², "
            f"y0={y0:.2f} ft)"
        )

    return Kinematics(
        x0=values['release_pos_x'],
        y0=y0,
        z0=values['release_pos_z'],
        vx0=values['vx0'],
        vy0=values['vy0'],
        vz0=values['vz0'],
        ax=values['ax'],
        ay=values['ay'],
        az=values['az'],
        flight_time=T,
    )


def from_design(spec: DesignSpec, target: Optional[Tuple[float, float]] = None,
                deceleration: Optional[DecelerationModel] = None) -> Kinematics:
    """
    Solve the kinematics of a designed pitch.

    Parameters
    ----------
    spec : DesignSpec
    target : (x, z) in feet, overrides ``spec.target``; plate center at
        mid-zone when neither is given
    deceleration : optional replacement speed → ay curve

    Raises
    ------
    MalformedInputError    a numeric field is not a finite number
    InvalidPitchSpecError  speed out of range, no real flight time, or an
                           implausible transverse velocity
    """
    speed_mph = as_finite('speed_mph', spec.speed_mph)
    h_break = as_finite('h_break_in', spec.h_break_in)
    v_break = as_finite('v_break_in', spec.v_break_in)
    x0 = as_finite('release_x', spec.release_x)
    z0 = as_finite('release_z', spec.release_z)
    extension = as_finite('release_extension', spec.release_extension)

    if target is None:
        target = spec.target if spec.target is not None else DEFAULT_TARGET
    tx = as_finite('target_x', target[0])
    tz = as_finite('target_z', target[1])

    if not MIN_DESIGN_SPEED_MPH < speed_mph <= MAX_DESIGN_SPEED_MPH:
        raise InvalidPitchSpecError(
            f"{spec.name}: speed {speed_mph:.1f} mph outside "
            f"({MIN_DESIGN_SPEED_MPH:.0f}, {MAX_DESIGN_SPEED_MPH:.0f}] mph"
        )

    y0 = release_y(extension)
    if y0 <= 0.0:
        raise InvalidPitchSpecError(
            f"{spec.name}: release extension {extension:.2f} ft puts release "
            f"at or past the plate"
        )

    # 1. Along-path deceleration from speed alone
    ay = drag_deceleration(speed_mph, deceleration)

    # 2. Motion is predominantly along y: project the release speed onto
    #    the straight release → target line
    speed_fps = speed_mph * MPH_TO_FPS
    path_length = np.sqrt((tx - x0) ** 2 + y0 ** 2 + (tz - z0) ** 2)
    vy0 = -speed_fps * y0 / path_length
    T = flight_time(vy0, ay, y0)
    if T is None:
        raise InvalidPitchSpecError(
            f"{spec.name}: {speed_mph:.1f} mph with ay={ay:.2f} ft/s² "
            f"never reaches the plate"
        )

    # 3. Break → acceleration over the same flight time
    ax, az = break_to_acceleration(h_break, v_break, T)

    # 4. Aim: position at T equals the target
    vx0 = (tx - x0 - 0.5 * ax * T * T) / T
    vz0 = (tz - z0 - 0.5 * az * T * T) / T

    limit = MAX_TRANSVERSE_RATIO * speed_fps
    if abs(vx0) > limit or abs(vz0) > limit:
        raise InvalidPitchSpecError(
            f"{spec.name}: target/break combination needs "
            f"vx0={vx0:.1f}, vz0={vz0:.1f} ft/s (limit ±{limit:.1f})"
        )

    return Kinematics(
        x0=x0, y0=float(y0), z0=z0,
        vx0=float(vx0), vy0=float(vy0), vz0=float(vz0),
        ax=ax, ay=ay, az=az,
        flight_time=T,
    )


def resolve(source, target: Optional[Tuple[float, float]] = None,
            deceleration: Optional[DecelerationModel] = None) -> Kinematics:
    """Dispatch a DesignSpec, an observed record, or an existing Kinematics."""
    if isinstance(source, Kinematics):
        return source
    if isinstance(source, DesignSpec):
        return from_design(source, target=target, deceleration=deceleration)
    if hasattr(source, 'get'):
        return from_observed(source)
    raise TypeError(
        f"Cannot resolve kinematics from {type(source).__name__}; expected "
        f"DesignSpec, Kinematics or an observed record mapping"
    )
