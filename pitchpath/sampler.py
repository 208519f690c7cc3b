"""
Trajectory Sampler
==================
Evaluates a kinematics record analytically at ``steps`` evenly spaced
instants from release (t = 0) to plate crossing (t = T):

    p(t) = p0 + v0·t + ½·a·t²

No numerical integration is involved, so sampling is exact, pure and
deterministic: identical inputs always give identical points, which
keeps frozen landing dots and scrub/playback reproducible.

Two-phase (tunneled) records are sampled contiguously on one time grid:
phase 1 for t ≤ commit time, phase 2 (on its own clock) afterwards.

Absent or incomplete pitches sample to an empty list so a batch of
pitches can be drawn without special-casing the missing ones.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import numpy as np

from .errors import InvalidPitchSpecError, MalformedInputError, MissingFieldError
from .kinematics import Kinematics, TunnelKinematics
from .resolver import as_finite, resolve

logger = logging.getLogger(__name__)


# Render-quality presets → samples per pitch
QUALITY_STEPS = {
    'draft': 40,
    'standard': 80,
    'high': 120,
    'ultra': 120,
}

DEFAULT_STEPS = 60

# Position, velocity and acceleration components of a Kinematics record
MOTION_FIELDS = ('x0', 'y0', 'z0', 'vx0', 'vy0', 'vz0', 'ax', 'ay', 'az')

AnyKinematics = Union[Kinematics, TunnelKinematics]


@dataclass(frozen=True)
class TrajectoryPoint:
    """Position (ft) at elapsed time t (s) since release."""
    x: float
    y: float
    z: float
    t: float


def steps_for_quality(name: str) -> int:
    """Sample count for a named quality preset."""
    try:
        return QUALITY_STEPS[name]
    except KeyError:
        raise ValueError(
            f"Unknown quality preset '{name}'. "
            f"Available: {list(QUALITY_STEPS.keys())}"
        ) from None


def _usable(kinematics: AnyKinematics) -> bool:
    T = kinematics.flight_time
    return T is not None and bool(np.isfinite(T)) and T > 0.0


def _check_finite(kinematics: AnyKinematics):
    """Raise MalformedInputError for a NaN or infinite state or acceleration."""
    if isinstance(kinematics, TunnelKinematics):
        _check_finite(kinematics.phase1)
        as_finite('commit_time', kinematics.commit_time)
        _check_finite(kinematics.phase2)
        return
    for field in MOTION_FIELDS:
        as_finite(field, getattr(kinematics, field))


def _coerce(source) -> Optional[AnyKinematics]:
    """Kinematics for ``source``, or None when the pitch is absent/incomplete."""
    if source is None:
        return None
    if isinstance(source, (Kinematics, TunnelKinematics)):
        if not _usable(source):
            return None
        _check_finite(source)
        return source
    try:
        return resolve(source)
    except MissingFieldError as exc:
        logger.debug("Skipping pitch: %s", exc)
    except InvalidPitchSpecError as exc:
        logger.debug("Skipping unresolvable pitch: %s", exc)
    return None


def _positions(kinematics: AnyKinematics, times: np.ndarray) -> np.ndarray:
    """(N, 3) positions at the given times."""
    if isinstance(kinematics, Kinematics):
        return kinematics.position_at(times[:, None])

    positions = np.empty((times.size, 3))
    early = times <= kinematics.commit_time
    positions[early] = kinematics.phase1.position_at(times[early][:, None])
    late_times = times[~early] - kinematics.commit_time
    positions[~early] = kinematics.phase2.position_at(late_times[:, None])
    return positions


def sample(source, steps: int = DEFAULT_STEPS) -> List[TrajectoryPoint]:
    """
    Sample a pitch from release to plate crossing.

    Parameters
    ----------
    source : Kinematics, TunnelKinematics, observed record mapping, or None
    steps : number of points (≥ 2), t linearly spaced over [0, T]

    Returns
    -------
    list of TrajectoryPoint, empty for an absent or incomplete pitch

    Raises
    ------
    ValueError            steps < 2
    MalformedInputError   a record or kinematics holds NaN / non-numeric data
    """
    if int(steps) != steps or steps < 2:
        raise ValueError(f"steps must be an integer ≥ 2, got {steps!r}")

    kinematics = _coerce(source)
    if kinematics is None:
        return []

    times = np.linspace(0.0, kinematics.flight_time, int(steps))
    positions = _positions(kinematics, times)
    return [
        TrajectoryPoint(x=float(x), y=float(y), z=float(z), t=float(t))
        for (x, y, z), t in zip(positions, times)
    ]


def sample_batch(sources: Iterable, steps: int = DEFAULT_STEPS) -> List[List[TrajectoryPoint]]:
    """
    Sample many pitches; one list per source, in order.

    Malformed pitches are logged once each and come back empty so the
    rest of the batch still renders.
    """
    trajectories = []
    for index, source in enumerate(sources):
        try:
            trajectories.append(sample(source, steps))
        except MalformedInputError as exc:
            logger.warning("Pitch %d has malformed data: %s", index, exc)
            trajectories.append([])
    return trajectories


def flight_time_seconds(source) -> Optional[float]:
    """Physical flight time, for syncing playback duration; None if unresolvable."""
    kinematics = _coerce(source)
    return None if kinematics is None else float(kinematics.flight_time)


def trajectory_array(points: List[TrajectoryPoint]) -> np.ndarray:
    """(N, 4) array of [t, x, y, z] rows."""
    if not points:
        return np.empty((0, 4))
    return np.array([[p.t, p.x, p.y, p.z] for p in points])
