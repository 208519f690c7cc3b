"""
Unit Tests for the Tunnel Synthesizer
=====================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pitchpath.deceleration import DecelerationModel
from pitchpath.errors import InvalidTunnelPointError
from pitchpath.kinematics import DesignSpec
from pitchpath.movement import drag_deceleration, flight_time
from pitchpath.resolver import from_design
from pitchpath.sampler import sample, trajectory_array
from pitchpath.tunnel import (
    TunnelRequest, build_tunnel, build_tunnel_request, commit_time_at_distance,
    divergence_point, plate_separation_in,
)


FOUR_SEAM = DesignSpec(name='Four-Seam', speed_mph=95.0, h_break_in=-8.0, v_break_in=16.0,
                       release_x=-1.5, release_z=6.0, target=(0.0, 2.5))
CHANGEUP = DesignSpec(name='Changeup', speed_mph=87.0, h_break_in=3.0, v_break_in=-2.0,
                      release_x=-1.5, release_z=6.0, target=(0.3, 1.8))
COMMIT = 0.10


@pytest.fixture
def reference():
    return from_design(FOUR_SEAM)


@pytest.fixture
def plan(reference):
    return build_tunnel(reference, CHANGEUP, COMMIT)


class TestTunnelBuild:
    """Two-phase construction and its invariants."""

    def test_seam_continuity(self, reference, plan):
        phase1 = plan.kinematics.phase1
        phase2 = plan.kinematics.phase2
        assert np.allclose(phase1.position_at(COMMIT), phase2.release_position, rtol=0, atol=1e-9)
        assert np.allclose(phase1.velocity_at(COMMIT), phase2.initial_velocity, rtol=0, atol=1e-9)
        assert np.allclose(plan.seed_position, phase2.release_position, rtol=0, atol=1e-9)
        assert np.allclose(plan.seed_velocity, phase2.initial_velocity, rtol=0, atol=1e-9)

    def test_phase1_is_reference(self, reference, plan):
        assert plan.kinematics.phase1 is reference
        assert plan.commit_time == COMMIT

    def test_identical_before_commit(self, reference, plan):
        for t in np.linspace(0.0, COMMIT, 25):
            assert np.allclose(plan.kinematics.position_at(t), reference.position_at(t),
                               rtol=0, atol=1e-9)
            assert np.allclose(plan.kinematics.velocity_at(t), reference.velocity_at(t),
                               rtol=0, atol=1e-9)

    def test_sampled_identity_before_commit(self, reference, plan):
        points = sample(plan.kinematics, 120)
        early = [p for p in points if p.t <= COMMIT]
        assert len(early) > 1
        for p in early:
            assert np.allclose([p.x, p.y, p.z], reference.position_at(p.t), rtol=0, atol=1e-9)

    def test_phase2_uses_follower_deceleration(self, reference, plan):
        phase2 = plan.kinematics.phase2
        assert phase2.ay == drag_deceleration(CHANGEUP.speed_mph)
        remaining = flight_time(phase2.vy0, phase2.ay, phase2.y0)
        assert phase2.flight_time == pytest.approx(remaining)
        assert plan.flight_time == pytest.approx(COMMIT + remaining)
        # Lighter deceleration than the 95 mph reference after the seam
        assert plan.flight_time < reference.flight_time

    def test_phase2_uses_given_deceleration_model(self, reference):
        model = DecelerationModel({'speed_mph': [60.0, 100.0], 'ay': [15.0, 35.0]})
        plan = build_tunnel(reference, CHANGEUP, COMMIT, deceleration=model)
        assert plan.kinematics.phase2.ay == model.ay(CHANGEUP.speed_mph)
        assert plan.follower_alone.ay == model.ay(CHANGEUP.speed_mph)

    def test_seed_state_is_read_only(self, plan):
        with pytest.raises(ValueError):
            plan.seed_position[0] = 0.0
        with pytest.raises(ValueError):
            plan.seed_velocity[1] = 0.0

    def test_follower_reaches_target(self, plan):
        x, y, z = plan.kinematics.plate_crossing
        assert abs(x - 0.3) < 1e-4
        assert abs(y) < 1e-6
        assert abs(z - 1.8) < 1e-4

    def test_tunnel_score(self, plan):
        expected = np.hypot(0.3, 0.7) * 12.0
        assert plan.tunnel_score_in == pytest.approx(expected, abs=1e-4)
        assert plan.tunnel_score_in > 0

    def test_tunnel_score_reproducible(self, reference):
        first = build_tunnel(reference, CHANGEUP, COMMIT)
        second = build_tunnel(reference, CHANGEUP, COMMIT)
        assert first.tunnel_score_in == second.tunnel_score_in
        assert sample(first.kinematics, 60) == sample(second.kinematics, 60)

    def test_zero_separation_is_valid(self, reference):
        same_spot = DesignSpec(name='Same', speed_mph=88.0, h_break_in=0.0, v_break_in=5.0,
                               release_x=-1.5, release_z=6.0, target=(0.0, 2.5))
        plan = build_tunnel(reference, same_spot, COMMIT)
        assert plan.tunnel_score_in == pytest.approx(0.0, abs=1e-6)

    def test_break_only_follower(self, reference):
        no_target = DesignSpec(name='Cutter', speed_mph=90.0, h_break_in=4.0, v_break_in=8.0,
                               release_x=-1.5, release_z=6.0)
        plan = build_tunnel(reference, no_target, COMMIT)
        h, v = plan.late_break_in
        assert h == pytest.approx(4.0)
        assert v == pytest.approx(8.0)

    def test_sampled_tunnel_shape(self, plan):
        points = sample(plan.kinematics, 100)
        assert len(points) == 100
        arr = trajectory_array(points)
        assert np.all(np.diff(arr[:, 0]) > 0)
        assert np.all(np.diff(arr[:, 2]) < 0)
        assert abs(arr[-1, 2]) < 1e-6
        assert arr[-1, 0] == pytest.approx(plan.flight_time)

    def test_plate_separation_symmetry(self, reference, plan):
        assert plate_separation_in(reference, plan.kinematics) == \
            pytest.approx(plate_separation_in(plan.kinematics, reference))


class TestTunnelErrors:
    """Commit points outside the valid window."""

    @pytest.mark.parametrize("commit", [0.0, -0.05, 0.5, 10.0])
    def test_commit_outside_reference(self, reference, commit):
        with pytest.raises(InvalidTunnelPointError) as info:
            build_tunnel(reference, CHANGEUP, commit)
        assert info.value.window == (0.0, reference.flight_time)

    def test_commit_at_reference_arrival(self, reference):
        with pytest.raises(InvalidTunnelPointError):
            build_tunnel(reference, CHANGEUP, reference.flight_time)

    def test_late_commit_still_reaches_plate(self, reference):
        heater = DesignSpec(name='Heater', speed_mph=105.0, h_break_in=0.0, v_break_in=18.0,
                            release_x=-1.5, release_z=6.0)
        plan = build_tunnel(reference, heater, 0.39)
        assert plan.kinematics.phase2.flight_time > 0.0
        assert abs(plan.kinematics.plate_crossing[1]) < 1e-6

    def test_ball_cannot_reach_plate(self, reference):
        heavy = DecelerationModel({'speed_mph': [60.0, 110.0], 'ay': [8000.0, 9000.0]})
        with pytest.raises(InvalidTunnelPointError) as info:
            build_tunnel(reference, CHANGEUP, 0.40, deceleration=heavy)
        assert info.value.window == (0.0, reference.flight_time)


class TestCommitDistance:
    """Distance-from-plate as an alternative commit point."""

    def test_time_at_distance(self, reference):
        t = commit_time_at_distance(reference, 23.8)
        assert 0.0 < t < reference.flight_time
        assert reference.position_at(t)[1] == pytest.approx(23.8, abs=1e-9)

    @pytest.mark.parametrize("distance", [0.0, -3.0, 60.0])
    def test_distance_out_of_range(self, reference, distance):
        with pytest.raises(InvalidTunnelPointError):
            commit_time_at_distance(reference, distance)

    def test_request_by_distance(self, reference):
        request = TunnelRequest(reference=reference, follower=CHANGEUP, commit_distance_ft=23.8)
        plan = build_tunnel_request(request)
        t = commit_time_at_distance(reference, 23.8)
        assert plan.commit_time == t
        assert plan.tunnel_score_in == build_tunnel(reference, CHANGEUP, t).tunnel_score_in

    def test_request_by_time(self, reference):
        request = TunnelRequest(reference=reference, follower=CHANGEUP, commit_time=COMMIT)
        assert build_tunnel_request(request).commit_time == COMMIT

    def test_request_needs_exactly_one(self, reference):
        with pytest.raises(ValueError):
            build_tunnel_request(TunnelRequest(reference=reference, follower=CHANGEUP))
        with pytest.raises(ValueError):
            build_tunnel_request(TunnelRequest(reference=reference, follower=CHANGEUP,
                                               commit_time=0.1, commit_distance_ft=20.0))


class TestDivergence:
    """Visible split point between two sampled paths."""

    def test_split_after_commit(self, reference, plan):
        split = divergence_point(sample(reference, 120), sample(plan.kinematics, 120),
                                 threshold_in=1.0)
        assert split is not None
        assert split.separation_in > 1.0
        assert split.index > 0
        assert split.distance_from_plate_ft < plan.seed_position[1]

    def test_identical_paths_never_split(self, reference):
        points = sample(reference, 50)
        assert divergence_point(points, points) is None
