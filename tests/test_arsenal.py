"""
Unit Tests for Arsenal Helpers, Validation and Plotting
=======================================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from pitchpath.errors import MalformedInputError, MissingFieldError
from pitchpath.kinematics import DesignSpec
from pitchpath.resolver import from_design
from pitchpath.sampler import sample
from pitchpath.arsenal import average_trajectory, design_from_observed, group_by_pitch_type
from pitchpath.tunnel import build_tunnel
from pitchpath.validation import REFERENCE_PITCHES, validate_against_reference
from pitchpath.visualization import (
    plot_pitch_views, plot_tunnel, plot_deceleration_curve, plot_validation,
)


OBSERVED = {'vx0': 6.1, 'vy0': -138.2, 'vz0': -5.9, 'ax': -11.3, 'ay': 29.4, 'az': -14.8,
            'release_pos_x': -1.6, 'release_pos_z': 5.9, 'release_extension': 6.3}


def _statcast_row(name, speed, pfx_x, pfx_z, **extra):
    row = {'pitch_name': name, 'release_speed': speed, 'pfx_x': pfx_x, 'pfx_z': pfx_z,
           'release_pos_x': -1.5, 'release_pos_z': 6.0}
    row.update(extra)
    return row


class TestGrouping:
    """Bucketing observed pitches by type."""

    def test_largest_group_first(self):
        rows = ([_statcast_row('Slider', 85, 0.3, 0.1)] * 6
                + [_statcast_row('4-Seam Fastball', 95, -0.7, 1.3)] * 9)
        groups = group_by_pitch_type(rows, min_count=5)
        assert list(groups.keys()) == ['4-Seam Fastball', 'Slider']
        assert len(groups['4-Seam Fastball']) == 9

    def test_small_and_unnamed_dropped(self):
        rows = ([_statcast_row('Curveball', 78, 0.5, -1.0)] * 2
                + [_statcast_row('', 90, 0.0, 0.0)] * 8
                + [_statcast_row('Sinker', 93, -1.2, 0.6)] * 5)
        groups = group_by_pitch_type(rows, min_count=5)
        assert list(groups.keys()) == ['Sinker']


class TestAverageTrajectory:
    """Point-wise mean of a group of pitches."""

    def test_identical_pitches_average_to_one(self):
        single = sample(OBSERVED, 50)
        mean = average_trajectory([OBSERVED, dict(OBSERVED)], 50)
        assert len(mean) == 50
        for a, b in zip(single, mean):
            assert a.x == pytest.approx(b.x)
            assert a.y == pytest.approx(b.y)
            assert a.z == pytest.approx(b.z)
            assert a.t == pytest.approx(b.t)

    def test_incomplete_records_skipped(self):
        incomplete = {k: v for k, v in OBSERVED.items() if k != 'az'}
        mean = average_trajectory([incomplete, OBSERVED, None], 40)
        single = sample(OBSERVED, 40)
        assert mean[-1].z == pytest.approx(single[-1].z)

    def test_nothing_resolvable(self):
        assert average_trajectory([None, {}], 40) == []

    def test_mean_lies_between_pitches(self):
        slower = dict(OBSERVED, vy0=-125.0)
        mean = average_trajectory([OBSERVED, slower], 30)
        t_fast = sample(OBSERVED, 30)[-1].t
        t_slow = sample(slower, 30)[-1].t
        assert t_fast < mean[-1].t < t_slow


class TestDesignFromObserved:
    """Seeding a design from averaged Statcast rows."""

    def test_averages_and_units(self):
        rows = [_statcast_row('Changeup', 86.0, -1.2, 0.5, release_extension=6.4),
                _statcast_row('Changeup', 88.0, -1.0, 0.7, release_extension=6.6)]
        spec = design_from_observed('Changeup', rows)
        assert spec.name == 'Changeup'
        assert spec.speed_mph == pytest.approx(87.0)
        assert spec.h_break_in == pytest.approx(-13.2)
        assert spec.v_break_in == pytest.approx(7.2)
        assert spec.release_x == pytest.approx(-1.5)
        assert spec.release_z == pytest.approx(6.0)
        assert spec.release_extension == pytest.approx(6.5)
        assert spec.target is None

    def test_default_extension(self):
        spec = design_from_observed('Slider', [_statcast_row('Slider', 85.0, 0.3, 0.1)])
        assert spec.release_extension == pytest.approx(6.0)

    def test_seeded_design_resolves(self):
        spec = design_from_observed('Slider', [_statcast_row('Slider', 85.0, 0.3, 0.1)])
        kin = from_design(spec)
        assert kin.movement_in == pytest.approx((3.6, 1.2))

    def test_missing_column(self):
        row = _statcast_row('Slider', 85.0, 0.3, 0.1)
        del row['pfx_z']
        with pytest.raises(MissingFieldError) as info:
            design_from_observed('Slider', [row])
        assert info.value.field == 'pfx_z'

    def test_malformed_column(self):
        row = _statcast_row('Slider', 'fast', 0.3, 0.1)
        with pytest.raises(MalformedInputError):
            design_from_observed('Slider', [row])

    def test_no_records(self):
        with pytest.raises(ValueError):
            design_from_observed('Slider', [])


class TestValidation:
    """Representative pitches pass every invariant check."""

    def test_all_reference_pitches_pass(self):
        results = validate_against_reference(steps=100, verbose=False)
        assert len(results) == len(REFERENCE_PITCHES['pitches'])
        for r in results:
            assert r.passed, f"{r.name} failed: T={r.flight_time:.3f}"

    def test_flight_time_ordering(self):
        results = {r.name: r for r in validate_against_reference(verbose=False)}
        assert results['Four-Seam'].flight_time < results['Slider'].flight_time
        assert results['Slider'].flight_time < results['Curveball'].flight_time


class TestPlots:
    """Figures build and save without a display."""

    def test_figures_save(self, tmp_path):
        four_seam = DesignSpec(name='Four-Seam', speed_mph=95.0, h_break_in=-8.0,
                               v_break_in=16.0, release_x=-1.5, release_z=6.0,
                               target=(0.0, 2.5))
        changeup = DesignSpec(name='Changeup', speed_mph=87.0, h_break_in=3.0,
                              v_break_in=-2.0, release_x=-1.5, release_z=6.0,
                              target=(0.3, 1.8))
        kin = from_design(four_seam)
        plan = build_tunnel(kin, changeup, 0.10)
        ref_pts = sample(kin, 40)
        fol_pts = sample(plan.kinematics, 40)

        figures = [
            (plot_pitch_views({'Four-Seam': ref_pts}, save_path=str(tmp_path / 'views.png')),
             'views.png'),
            (plot_tunnel(ref_pts, fol_pts, plan, names=('Four-Seam', 'Changeup'),
                         save_path=str(tmp_path / 'tunnel.png')), 'tunnel.png'),
            (plot_deceleration_curve(save_path=str(tmp_path / 'decel.png')), 'decel.png'),
            (plot_validation(validate_against_reference(verbose=False),
                             save_path=str(tmp_path / 'validation.png')), 'validation.png'),
        ]
        for fig, filename in figures:
            assert (tmp_path / filename).exists()
            plt.close(fig)
