"""
Visualization
=============
Diagnostic plots built on the engine's 3D feet-space points.  The engine
itself never projects anything; every view below picks its own
projection:

  1. Pitch views — side (y-z), top (y-x) and catcher (x-z)
  2. Tunnel comparison with the commit point marked
  3. Speed → deceleration calibration curve
  4. Validation summary
  5. Animated catcher's-eye view (GIF), timed to true flight time
"""

import os
from typing import Dict, List, Optional

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .deceleration import DEFAULT_DECELERATION_MODEL, DecelerationModel
from .movement import PLATE_FRONT_Y_FT
from .sampler import TrajectoryPoint, trajectory_array
from .tunnel import TunnelPlan


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

# Strike zone (ft): plate half-width 17/24, typical 1.5–3.5 ft heights
ZONE_HALF_WIDTH = 17.0 / 24.0
ZONE_BOTTOM = 1.5
ZONE_TOP = 3.5


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax):
    ax.legend(fontsize=9, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])


def _save(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def _draw_zone(ax):
    xs = [-ZONE_HALF_WIDTH, ZONE_HALF_WIDTH, ZONE_HALF_WIDTH, -ZONE_HALF_WIDTH, -ZONE_HALF_WIDTH]
    zs = [ZONE_BOTTOM, ZONE_BOTTOM, ZONE_TOP, ZONE_TOP, ZONE_BOTTOM]
    ax.plot(xs, zs, color='#888888', linewidth=1.2, linestyle='--')


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Pitch Views
# ══════════════════════════════════════════════════════════════════════════

def plot_pitch_views(trajectories: Dict[str, List[TrajectoryPoint]],
                     save_path: str = None) -> plt.Figure:
    """Side, top and catcher's views for a set of named trajectories."""
    fig, axes = plt.subplots(1, 3, figsize=(18, 6))
    _apply_dark_style(fig, axes)
    ax_side, ax_top, ax_catcher = axes

    for i, (name, points) in enumerate(trajectories.items()):
        if not points:
            continue
        arr = trajectory_array(points)
        color = STYLE['accent_colors'][i % len(STYLE['accent_colors'])]
        ax_side.plot(arr[:, 2], arr[:, 3], color=color, linewidth=2, label=name)
        ax_top.plot(arr[:, 2], arr[:, 1], color=color, linewidth=2, label=name)
        ax_catcher.plot(arr[:, 1], arr[:, 3], color=color, linewidth=1.5, alpha=0.6)
        ax_catcher.plot(arr[-1, 1], arr[-1, 3], 'o', color=color, markersize=9, label=name)

    ax_side.set_xlabel('Distance from plate (ft)')
    ax_side.set_ylabel('Height (ft)')
    ax_side.set_title('Side View', fontweight='bold')
    ax_side.invert_xaxis()

    ax_top.set_xlabel('Distance from plate (ft)')
    ax_top.set_ylabel('Horizontal (ft, + first-base side)')
    ax_top.set_title('Top View', fontweight='bold')
    ax_top.invert_xaxis()

    _draw_zone(ax_catcher)
    ax_catcher.set_xlabel('Horizontal (ft)')
    ax_catcher.set_ylabel('Height (ft)')
    ax_catcher.set_title("Catcher's View (orthographic)", fontweight='bold')
    ax_catcher.set_aspect('equal', adjustable='datalim')

    for ax in axes:
        _legend(ax)

    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Tunnel Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_tunnel(reference: List[TrajectoryPoint], follower: List[TrajectoryPoint],
                plan: TunnelPlan, names=('Reference', 'Follower'),
                save_path: str = None) -> plt.Figure:
    """Reference vs tunneled follower with the commit point marked."""
    fig, axes = plt.subplots(1, 2, figsize=(15, 6))
    _apply_dark_style(fig, axes)
    ax_side, ax_top = axes

    ref = trajectory_array(reference)
    fol = trajectory_array(follower)
    seed_y = plan.seed_position[1]

    for arr, name, color in ((ref, names[0], STYLE['accent_colors'][0]),
                             (fol, names[1], STYLE['accent_colors'][1])):
        ax_side.plot(arr[:, 2], arr[:, 3], color=color, linewidth=2, label=name)
        ax_top.plot(arr[:, 2], arr[:, 1], color=color, linewidth=2, label=name)

    for ax in axes:
        ax.axvline(seed_y, color='#ffeb3b', linestyle='--', alpha=0.7,
                   label=f'Commit ({plan.commit_time:.3f} s, '
                         f'{seed_y - PLATE_FRONT_Y_FT:.1f} ft)')
        ax.invert_xaxis()
        ax.set_xlabel('Distance from plate (ft)')
        _legend(ax)

    ax_side.set_ylabel('Height (ft)')
    ax_side.set_title('Side View', fontweight='bold')
    ax_top.set_ylabel('Horizontal (ft)')
    ax_top.set_title('Top View', fontweight='bold')

    fig.suptitle(f'Pitch Tunnel — plate separation {plan.tunnel_score_in:.1f} in',
                 fontsize=14, fontweight='bold', color=STYLE['text_color'])
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Deceleration Calibration
# ══════════════════════════════════════════════════════════════════════════

def plot_deceleration_curve(model: DecelerationModel = None,
                            save_path: str = None) -> plt.Figure:
    """Calibration knots and the interpolated ay curve."""
    model = DEFAULT_DECELERATION_MODEL if model is None else model
    fig, ax = plt.subplots(figsize=(10, 6))
    _apply_dark_style(fig, ax)

    speeds = np.linspace(55.0, 110.0, 300)
    ax.plot(speeds, model.ay_array(speeds), color=STYLE['accent_colors'][0],
            linewidth=2.5, label=model.name)
    ax.plot(model.speed_mph, model.values, 'o', color=STYLE['accent_colors'][1],
            markersize=7, label='Calibration knots')

    ax.set_xlabel('Release speed (mph)', fontsize=12)
    ax.set_ylabel('ay (ft/s²)', fontsize=12)
    ax.set_title('Along-Path Deceleration vs Release Speed',
                 fontsize=14, fontweight='bold')
    _legend(ax)
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results, save_path: str = None) -> plt.Figure:
    """Flight time against its expected window for each reference pitch."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    names = [r.name for r in validation_results]
    idx = np.arange(len(names))
    lows = np.array([r.window[0] for r in validation_results])
    highs = np.array([r.window[1] for r in validation_results])
    times = np.array([r.flight_time for r in validation_results])

    ax.bar(idx, highs - lows, bottom=lows, color='#333333', width=0.5,
           label='Expected window')
    colors = ['#00e676' if r.passed else '#ff5252' for r in validation_results]
    ax.scatter(idx, times, color=colors, s=80, zorder=5, label='Model T')

    ax.set_xticks(idx)
    ax.set_xticklabels(names)
    ax.set_ylabel('Flight time (s)', fontsize=12)
    ax.set_title('Validation — Flight Time to Plate', fontsize=14, fontweight='bold')
    _legend(ax)
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated Catcher's View (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_pitch_animation(trajectories: Dict[str, List[TrajectoryPoint]],
                           save_path: str = 'outputs/pitch_anim.gif',
                           fps: int = 30, camera_y: float = -2.0,
                           camera_z: float = 2.5,
                           slow_motion: float = 4.0) -> Optional[str]:
    """
    Pinhole-projected catcher's view, all pitches released together.

    Frames are spaced in real flight time (slowed by ``slow_motion``), so
    the animation length follows the slowest pitch's physical flight time.
    """
    from matplotlib.animation import FuncAnimation, PillowWriter

    arrays = {name: trajectory_array(points) for name, points in trajectories.items() if points}
    if not arrays:
        return None

    def project(arr):
        depth = np.maximum(arr[:, 2] - camera_y, 0.01)
        return arr[:, 1] / depth, (arr[:, 3] - camera_z) / depth, 1.0 / depth

    projected = {name: project(arr) for name, arr in arrays.items()}
    duration = max(arr[-1, 0] for arr in arrays.values())
    n_frames = max(2, int(round(duration * slow_motion * fps)))
    frame_times = np.linspace(0.0, duration, n_frames)

    fig, ax = plt.subplots(figsize=(8, 8))
    _apply_dark_style(fig, ax)
    ax.set_xlim(-0.5, 0.5)
    ax.set_ylim(-0.5, 0.5)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title("Catcher's View", fontsize=14, fontweight='bold')

    zone_depth = PLATE_FRONT_Y_FT - camera_y
    zx = np.array([-1, 1, 1, -1, -1]) * ZONE_HALF_WIDTH / zone_depth
    zz = (np.array([ZONE_BOTTOM, ZONE_BOTTOM, ZONE_TOP, ZONE_TOP, ZONE_BOTTOM]) - camera_z) / zone_depth
    ax.plot(zx, zz, color='#888888', linewidth=1.2)

    artists = {}
    for i, name in enumerate(projected):
        color = STYLE['accent_colors'][i % len(STYLE['accent_colors'])]
        trail, = ax.plot([], [], color=color, linewidth=1.5, alpha=0.6)
        ball, = ax.plot([], [], 'o', color=color, label=name)
        artists[name] = (trail, ball)
    time_text = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                        color=STYLE['text_color'], fontsize=11, fontfamily='monospace')
    _legend(ax)

    def animate(frame_idx):
        t = frame_times[frame_idx]
        updated = []
        for name, (trail, ball) in artists.items():
            arr = arrays[name]
            sx, sz, scale = projected[name]
            idx = int(np.searchsorted(arr[:, 0], t, side='right')) - 1
            idx = min(max(idx, 0), len(arr) - 1)
            trail.set_data(sx[:idx + 1], sz[:idx + 1])
            ball.set_data([sx[idx]], [sz[idx]])
            ball.set_markersize(float(np.clip(scale[idx] * 40.0, 2.0, 22.0)))
            updated.extend([trail, ball])
        time_text.set_text(f't={t:.3f}s')
        updated.append(time_text)
        return updated

    anim = FuncAnimation(fig, animate, frames=n_frames, interval=1000 / fps, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=fps),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    return save_path
