"""
Pitch Arsenal Helpers
=====================
Works on a pitcher's observed pitches as a group:

  - group_by_pitch_type   — bucket records by ``pitch_name``
  - average_trajectory    — point-wise mean path of a pitch type
  - design_from_observed  — seed a DesignSpec from a pitch type's averages
"""

from collections import OrderedDict
from typing import Dict, Iterable, List

import numpy as np

from .errors import MissingFieldError
from .kinematics import DesignSpec
from .movement import DEFAULT_RELEASE_EXTENSION_FT, INCHES_PER_FOOT
from .resolver import as_finite
from .sampler import DEFAULT_STEPS, TrajectoryPoint, sample_batch, trajectory_array


def group_by_pitch_type(records: Iterable, min_count: int = 5) -> Dict[str, List]:
    """
    Records keyed by ``pitch_name``, largest group first.

    Records without a pitch name are ignored, as are groups with fewer
    than ``min_count`` pitches.
    """
    groups = OrderedDict()
    for record in records:
        name = record.get('pitch_name')
        if not name:
            continue
        groups.setdefault(str(name), []).append(record)

    kept = [(name, rows) for name, rows in groups.items() if len(rows) >= min_count]
    kept.sort(key=lambda item: len(item[1]), reverse=True)
    return OrderedDict(kept)


def average_trajectory(records: Iterable, steps: int = DEFAULT_STEPS) -> List[TrajectoryPoint]:
    """
    Mean trajectory of a group of pitches.

    Every pitch is sampled with the same step count, so point i of the
    result averages point i of each resolvable pitch.  Returns an empty
    list when none of the records can be sampled.
    """
    arrays = [trajectory_array(points) for points in sample_batch(records, steps) if points]
    if not arrays:
        return []

    mean = np.mean(np.stack(arrays), axis=0)
    return [TrajectoryPoint(x=float(x), y=float(y), z=float(z), t=float(t))
            for t, x, y, z in mean]


def _mean_field(records: List, field: str, required: bool = True):
    values = []
    for record in records:
        value = record.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        values.append(as_finite(field, value))
    if not values:
        if required:
            raise MissingFieldError(field)
        return None
    return float(np.mean(values))


def design_from_observed(name: str, records: List) -> DesignSpec:
    """
    DesignSpec from the averages of a pitch type.

    Uses ``release_speed`` (mph), ``pfx_x`` / ``pfx_z`` (feet of movement,
    converted to inches), ``release_pos_x`` / ``release_pos_z`` and,
    when present, ``release_extension``.
    """
    if not records:
        raise ValueError(f"No records to build '{name}' from")

    extension = _mean_field(records, 'release_extension', required=False)
    return DesignSpec(
        name=name,
        speed_mph=round(_mean_field(records, 'release_speed'), 1),
        h_break_in=round(_mean_field(records, 'pfx_x') * INCHES_PER_FOOT, 1),
        v_break_in=round(_mean_field(records, 'pfx_z') * INCHES_PER_FOOT, 1),
        release_x=round(_mean_field(records, 'release_pos_x'), 2),
        release_z=round(_mean_field(records, 'release_pos_z'), 2),
        release_extension=(DEFAULT_RELEASE_EXTENSION_FT if extension is None
                           else round(extension, 2)),
    )
