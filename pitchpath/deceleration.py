"""
Along-Path Deceleration Model
=============================
Speed-only calibration of the y-axis deceleration ``ay`` (ft/s²).

Air drag on a baseball grows roughly with the square of its speed, so
``ay`` is tabulated against release speed (mph) and interpolated.  The
default knots are a v² fit through typical Statcast ``ay`` values
(≈ 28.5 ft/s² for a 95 mph four-seamer, ≈ 20 ft/s² for an 80 mph
breaking ball).

The curve ignores spin and movement profile: transverse
(break-producing) forces never feed into ``ay``.  Swap in a different
curve by building a ``DecelerationModel`` from another monotonic table.
"""

import numpy as np
from scipy.interpolate import interp1d


# ══════════════════════════════════════════════════════════════════════════
#  Calibration table: (release speed mph, ay ft/s²)
# ══════════════════════════════════════════════════════════════════════════

DEFAULT_DECELERATION_TABLE = {
    'name': 'Statcast v² fit',
    'speed_mph': [60.0, 70.0, 75.0, 80.0, 85.0, 90.0, 95.0, 100.0, 105.0],
    'ay':        [11.4, 15.5, 17.8, 20.2, 22.8, 25.6, 28.5, 31.6, 34.8],
}

MIN_DECELERATION_FTPS2 = 1.0


class DecelerationModel:
    """
    Monotonic speed → deceleration curve.

    Uses linear interpolation over the calibration knots, with linear
    extrapolation beyond the table limits.  Values never drop below
    MIN_DECELERATION_FTPS2, so slow pitches still decelerate.
    """

    def __init__(self, table: dict = None):
        """
        Parameters
        ----------
        table : dict
            ``{'name': str, 'speed_mph': [...], 'ay': [...]}`` with strictly
            increasing speeds and strictly increasing decelerations.
        """
        table = DEFAULT_DECELERATION_TABLE if table is None else table
        speeds = np.asarray(table['speed_mph'], dtype=float)
        values = np.asarray(table['ay'], dtype=float)

        if speeds.ndim != 1 or speeds.shape != values.shape or speeds.size < 2:
            raise ValueError(
                "Calibration table needs matching 1-D 'speed_mph' and 'ay' "
                "arrays with at least two knots"
            )
        if np.any(np.diff(speeds) <= 0) or np.any(np.diff(values) <= 0):
            raise ValueError("Calibration knots must be strictly increasing")

        self.name = table.get('name', 'custom')
        self.speed_mph = speeds
        self.values = values
        self._interp = interp1d(
            speeds, values,
            kind='linear',
            fill_value='extrapolate',
            assume_sorted=True,
        )

    def ay(self, speed_mph: float) -> float:
        """Deceleration (ft/s², positive opposes motion) at the given speed."""
        ay_val = float(self._interp(speed_mph))
        return max(ay_val, MIN_DECELERATION_FTPS2)  # physical floor

    def ay_array(self, speed_array: np.ndarray) -> np.ndarray:
        """Vectorized lookup."""
        values = self._interp(np.asarray(speed_array, dtype=float))
        return np.clip(values, MIN_DECELERATION_FTPS2, None)


DEFAULT_DECELERATION_MODEL = DecelerationModel()
