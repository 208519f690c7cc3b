#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PITCH PATH ENGINE — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete demonstration pipeline:
    1. Deceleration calibration curve
    2. Designed pitch (95 mph four-seamer) resolve + sample
    3. Full arsenal views
    4. Tunnel: changeup tunneled off the four-seamer
    5. Validation against representative pitches
    6. Observed-record batch with a missing pitch
    7. Animated catcher's view GIF

  All outputs saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip animation (faster)
═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import os
import time
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from pitchpath.kinematics import DesignSpec
from pitchpath.movement import PLATE_FRONT_Y_FT
from pitchpath.resolver import from_design
from pitchpath.sampler import sample, sample_batch, steps_for_quality
from pitchpath.tunnel import build_tunnel, divergence_point
from pitchpath.validation import validate_against_reference
from pitchpath.visualization import (
    plot_pitch_views, plot_tunnel, plot_deceleration_curve,
    plot_validation, create_pitch_animation, ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


FOUR_SEAM = DesignSpec(name='Four-Seam', speed_mph=95.0, h_break_in=-8.0, v_break_in=16.0,
                       release_x=-1.5, release_z=6.0, target=(0.0, 2.5))
CHANGEUP = DesignSpec(name='Changeup', speed_mph=87.0, h_break_in=3.0, v_break_in=-2.0,
                      release_x=-1.5, release_z=6.0, target=(0.3, 1.8))
ARSENAL = [
    FOUR_SEAM,
    DesignSpec(name='Slider', speed_mph=85.0, h_break_in=4.0, v_break_in=2.0,
               release_x=-1.5, release_z=5.9, target=(0.6, 1.9)),
    DesignSpec(name='Curveball', speed_mph=78.0, h_break_in=7.0, v_break_in=-12.0,
               release_x=-1.4, release_z=6.1, target=(0.3, 1.6)),
    DesignSpec(name='Sinker', speed_mph=93.0, h_break_in=-15.0, v_break_in=8.0,
               release_x=-1.6, release_z=5.8, target=(-0.4, 2.0)),
]


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    logging.basicConfig(level=logging.INFO, format='  %(levelname)s %(name)s: %(message)s')

    out = ensure_output_dir('outputs')
    steps = steps_for_quality('high')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Deceleration Calibration
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Speed → Deceleration Calibration")
    fig = plot_deceleration_curve(save_path=f'{out}/01_deceleration_curve.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/01_deceleration_curve.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Designed Four-Seamer
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Designed Pitch — 95 mph Four-Seam")
    kin = from_design(FOUR_SEAM)
    points = sample(kin, 100)
    last = points[-1]
    h_break, v_break = kin.movement_in
    print(f"  Flight time  : {kin.flight_time:.4f} s")
    print(f"  v0           : ({kin.vx0:+.2f}, {kin.vy0:+.2f}, {kin.vz0:+.2f}) ft/s")
    print(f"  a            : ({kin.ax:+.2f}, {kin.ay:+.2f}, {kin.az:+.2f}) ft/s²")
    print(f"  Break        : {h_break:+.2f} in H, {v_break:+.2f} in IVB")
    print(f"  Plate cross  : x={last.x:+.4f}  y={last.y:+.2e}  z={last.z:.4f} ft")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Arsenal Views
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Arsenal Views")
    arsenal = {spec.name: sample(from_design(spec), steps) for spec in ARSENAL}
    for name, pts in arsenal.items():
        print(f"  {name:<12s}  T={pts[-1].t:.3f} s  "
              f"plate=({pts[-1].x:+.2f}, {pts[-1].z:.2f}) ft")
    fig = plot_pitch_views(arsenal, save_path=f'{out}/03_arsenal_views.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/03_arsenal_views.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Tunnel
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Changeup Tunneled off the Four-Seamer")
    plan = build_tunnel(kin, CHANGEUP, commit_time=0.10)
    ref_pts = sample(kin, steps)
    fol_pts = sample(plan.kinematics, steps)
    late_h, late_v = plan.late_break_in
    print(f"  Commit time     : {plan.commit_time:.3f} s "
          f"({plan.seed_position[1] - PLATE_FRONT_Y_FT:.1f} ft from plate)")
    print(f"  Follower T      : {plan.flight_time:.4f} s")
    print(f"  Late break      : {late_h:+.2f} in H, {late_v:+.2f} in V")
    print(f"  Tunnel score    : {plan.tunnel_score_in:.2f} in")
    split = divergence_point(ref_pts, fol_pts, threshold_in=1.0)
    if split is not None:
        print(f"  Visible split   : t={split.t:.3f} s, "
              f"{split.distance_from_plate_ft:.1f} ft from plate")
    fig = plot_tunnel(ref_pts, fol_pts, plan, names=(FOUR_SEAM.name, CHANGEUP.name),
                      save_path=f'{out}/04_tunnel.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/04_tunnel.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Validation — Representative Pitches")
    results = validate_against_reference(steps=100)
    fig = plot_validation(results, save_path=f'{out}/05_validation.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/05_validation.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Observed Batch
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Observed Records (one incomplete, one malformed)")
    observed = [
        {'vx0': 6.1, 'vy0': -138.2, 'vz0': -5.9, 'ax': -11.3, 'ay': 29.4, 'az': -14.8,
         'release_pos_x': -1.6, 'release_pos_z': 5.9, 'release_extension': 6.3},
        {'vx0': 3.0, 'vy0': -125.0, 'vz0': -2.1, 'ax': 4.2, 'ay': 23.0, 'az': -27.5,
         'release_pos_x': -1.5, 'release_pos_z': 6.0},
        {'vx0': 'n/a', 'vy0': -125.0, 'vz0': -2.1, 'ax': 4.2, 'ay': 23.0, 'az': -27.5,
         'release_pos_x': -1.5, 'release_pos_z': 6.0, 'release_extension': 6.0},
    ]
    batch = sample_batch(observed, steps)
    for i, pts in enumerate(batch):
        status = f"{len(pts)} points, T={pts[-1].t:.3f} s" if pts else "not drawn"
        print(f"  Pitch {i}: {status}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 7: Catcher's View Animation (GIF)")
        create_pitch_animation({FOUR_SEAM.name: ref_pts, CHANGEUP.name: fol_pts},
                               save_path=f'{out}/07_catcher_view.gif')
        print(f"  ✓ Saved: {out}/07_catcher_view.gif")
    else:
        section("PHASE 7: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
