"""
Validation Against Representative Pitches
=========================================
Resolves and samples a set of typical MLB pitch designs and checks the
engine's physical invariants on each:

  - flight time falls inside the window seen for that pitch speed
  - the sampled path ends on the target (round trip)
  - plate-crossing minus spin-free endpoint reproduces the design break
  - the last point sits on the plate (y = 0)

Expected plate times are approximate Statcast values for pitches
released with ~6 ft of extension.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from .kinematics import DesignSpec
from .movement import INCHES_PER_FOOT, spin_free_endpoint
from .resolver import from_design
from .sampler import sample


# (name, mph, hBreak in, iVB in, release x, release z, target, T window s)
REFERENCE_PITCHES = {
    'name': 'RHP arsenal',
    'pitches': [
        ('Four-Seam',  95.0,  -8.0,  16.0, -1.5, 6.0, (0.0, 2.5),  (0.39, 0.43)),
        ('Sinker',     93.0, -15.0,   8.0, -1.6, 5.8, (-0.4, 2.0), (0.40, 0.44)),
        ('Slider',     85.0,   4.0,   2.0, -1.5, 5.9, (0.6, 1.9),  (0.43, 0.48)),
        ('Changeup',   85.0, -14.0,   6.0, -1.5, 5.9, (-0.5, 1.8), (0.43, 0.48)),
        ('Curveball',  78.0,   7.0, -12.0, -1.4, 6.1, (0.3, 1.6),  (0.47, 0.53)),
    ],
}


@dataclass
class ValidationResult:
    """Result of one pitch check."""
    name: str
    flight_time: float
    window: tuple
    target_miss_ft: float       # distance from last sample to target (x/z)
    break_error_in: float       # |achieved − designed| break
    plate_y_ft: float           # y of the last sample

    @property
    def passed(self) -> bool:
        low, high = self.window
        return (low <= self.flight_time <= high
                and self.target_miss_ft < 1e-4
                and self.break_error_in < 1e-3
                and abs(self.plate_y_ft) < 1e-6)


def validate_design(spec: DesignSpec, window: tuple, steps: int = 100) -> ValidationResult:
    """Resolve, sample and check one design."""
    kin = from_design(spec)
    points = sample(kin, steps)
    last = points[-1]
    tx, tz = spec.target

    base_x, base_z = spin_free_endpoint(kin.vx0, kin.vz0, kin.flight_time, kin.x0, kin.z0)
    achieved = np.array([last.x - base_x, last.z - base_z]) * INCHES_PER_FOOT
    designed = np.array([spec.h_break_in, spec.v_break_in])

    return ValidationResult(
        name=spec.name,
        flight_time=kin.flight_time,
        window=window,
        target_miss_ft=float(np.hypot(last.x - tx, last.z - tz)),
        break_error_in=float(np.max(np.abs(achieved - designed))),
        plate_y_ft=last.y,
    )


def validate_against_reference(reference: dict = REFERENCE_PITCHES, steps: int = 100,
                               verbose: bool = True) -> List[ValidationResult]:
    """Run every reference pitch and optionally print a comparison table."""
    results = []

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: {reference['name']}  ({steps} samples per pitch)")
        print(f"{'='*75}")
        print(f"{'Pitch':<12} {'T (s)':>7} {'Window':>13} {'Miss (ft)':>11} "
              f"{'Break err':>11} {'Plate y':>10} {'':>6}")
        print("-" * 75)

    for name, mph, hb, vb, rx, rz, target, window in reference['pitches']:
        spec = DesignSpec(name=name, speed_mph=mph, h_break_in=hb, v_break_in=vb,
                          release_x=rx, release_z=rz, target=target)
        vr = validate_design(spec, window, steps=steps)
        results.append(vr)

        if verbose:
            status = "✓" if vr.passed else "✗"
            print(f"{name:<12} {vr.flight_time:>7.3f} "
                  f"{window[0]:>6.2f}-{window[1]:<6.2f} "
                  f"{vr.target_miss_ft:>11.2e} {vr.break_error_in:>11.2e} "
                  f"{vr.plate_y_ft:>10.1e} {status:>6}")

    if verbose:
        n_pass = sum(r.passed for r in results)
        print("-" * 75)
        print(f"  {n_pass}/{len(results)} pitches within tolerance")
        print(f"{'='*75}\n")

    return results
