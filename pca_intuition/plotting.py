"""
RENDERING — matplotlib stand-in for the interactive canvas.

Panel 1 (the canvas):
    - light grid, points colored by the current color mode
    - mean crosshair
    - PC1 / PC2 arrows, half-length max(24, 8·sqrt(λ))
    - projection segments from each point to its spot on the PC1 line
    - rank-1 reconstructions (optional)
Panel 2: explained-variance bars for the current var_mode.

Canvas coordinates have y pointing DOWN, so the y-axis is inverted to
match what the browser would show.
"""

from dataclasses import replace

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import PillowWriter
from matplotlib.colors import LinearSegmentedColormap

from pca_intuition.config import CANVAS_HEIGHT, CANVAS_WIDTH
from pca_intuition.geometry import pc1_color_fraction


PC1_COLOR = (30 / 255, 120 / 255, 1.0)
PC2_COLOR = (0.0, 180 / 255, 90 / 255)
PROJ_COLOR = (1.0, 200 / 255, 0.0)

CLUSTER_PALETTE = [
    (30, 120, 255), (0, 180, 120), (255, 150, 0), (200, 0, 120),
    (80, 80, 80), (140, 90, 255), (0, 160, 255), (255, 80, 80),
]

PC1_CMAP = LinearSegmentedColormap.from_list('pc1', [(30 / 255, 120 / 255, 1.0), (1.0, 90 / 255, 30 / 255)])

GRID_STEP = 40


def point_colors(frame, color_mode):
    """One RGBA color per point for the given color mode."""
    n = frame.points.shape[0]

    if color_mode == 'pc1':
        return PC1_CMAP(pc1_color_fraction(frame.points, frame.geometry))

    if color_mode == 'cluster' and frame.labels.shape[0] == n and n > 0:
        palette = np.array([(r / 255, g / 255, b / 255, 1.0) for r, g, b in CLUSTER_PALETTE])
        return palette[frame.labels % len(palette)]

    return np.tile((60 / 255, 60 / 255, 60 / 255, 120 / 255), (n, 1))


def _draw_arrow(ax, center, v, length, color):
    start = center - v * length
    end = center + v * length
    ax.annotate('', xy=end, xytext=start,
                arrowprops=dict(arrowstyle='->', color=color, lw=3))


def plot_frame(frame, config, ax=None):
    """Draw one frame onto ax (created if omitted). Returns ax."""
    if ax is None:
        _, ax = plt.subplots(figsize=(9.6, 6.0))

    ax.set_xlim(0, CANVAS_WIDTH)
    ax.set_ylim(CANVAS_HEIGHT, 0)
    ax.set_xticks(np.arange(0, CANVAS_WIDTH + 1, GRID_STEP))
    ax.set_yticks(np.arange(0, CANVAS_HEIGHT + 1, GRID_STEP))
    ax.tick_params(labelbottom=False, labelleft=False, length=0)
    ax.grid(True, alpha=0.15)
    ax.set_aspect('equal')

    P = frame.points
    mean = frame.geometry.mean
    eigen = frame.geometry.eigen

    if config.show_projections and len(P):
        for p, q in zip(P, frame.reconstructions):
            ax.plot([p[0], q[0]], [p[1], q[1]], color=PROJ_COLOR, alpha=0.7, linewidth=0.8)
        ax.scatter(frame.reconstructions[:, 0], frame.reconstructions[:, 1],
                   s=max(2, config.point_size - 1) ** 2, color=PROJ_COLOR, alpha=0.8)

    if config.show_reconstruction and len(P):
        ax.scatter(frame.reconstructions[:, 0], frame.reconstructions[:, 1],
                   s=config.point_size ** 2, color=(0, 0, 0, 60 / 255))

    ax.scatter(P[:, 0], P[:, 1], s=config.point_size ** 2,
               c=point_colors(frame, config.color_mode), edgecolors='none')

    # Mean crosshair
    ax.plot([mean[0] - 6, mean[0] + 6], [mean[1], mean[1]], color='0.25', linewidth=2)
    ax.plot([mean[0], mean[0]], [mean[1] - 6, mean[1] + 6], color='0.25', linewidth=2)

    if config.show_axes:
        l1, l2 = eigen.eigenvalues
        _draw_arrow(ax, mean, eigen.pc1, max(24, np.sqrt(max(0, l1)) * 8), PC1_COLOR)
        _draw_arrow(ax, mean, eigen.pc2, max(24, np.sqrt(max(0, l2)) * 8), PC2_COLOR)

    l1, l2 = eigen.eigenvalues
    ax.set_title(f'λ₁={l1:.1f}, λ₂={l2:.1f}', fontsize=11)
    return ax


def plot_explained_variance(variance, mode, ax=None):
    if ax is None:
        _, ax = plt.subplots(figsize=(3, 4))
    ax.bar(['PC1', 'PC2'], [variance.pc1, variance.pc2], color=[PC1_COLOR, PC2_COLOR], alpha=0.8)
    ax.set_ylim(0, 1)
    ax.set_ylabel('Fraction of variance')
    basis = 'principal axes' if mode == 'pca' else 'view angle'
    ax.set_title(f'Explained variance\n({basis})', fontsize=11)
    ax.grid(True, alpha=0.3, axis='y')
    return ax


def visualize_viewer(viewer):
    """Canvas + variance bars for the viewer's current state."""
    frame = viewer.frame()
    fig, axes = plt.subplots(1, 2, figsize=(14, 6), gridspec_kw={'width_ratios': [4, 1]})
    plot_frame(frame, viewer.config, ax=axes[0])
    plot_explained_variance(frame.variance, viewer.config.var_mode, ax=axes[1])

    cfg = viewer.config
    plt.suptitle(f'PCA VIEWER — n={cfg.n_points}, anisotropy={cfg.anisotropy:g}×, '
                 f'θ={cfg.angle_deg:.0f}°, k={cfg.n_clusters or "off"}',
                 fontsize=13, fontweight='bold')
    plt.tight_layout()
    return fig


def save_figure(fig, path):
    fig.savefig(path, dpi=150, bbox_inches='tight')
    return path


def animate_spin(viewer, path, n_frames=60, fps=20):
    """
    Spin the cloud for n_frames ticks and write a GIF.

    Spinning is switched on for the duration; the viewer is left at the
    final angle.
    """
    was_spinning = viewer.config.spin
    viewer.config = replace(viewer.config, spin=True)

    fig, axes = plt.subplots(1, 2, figsize=(14, 6), gridspec_kw={'width_ratios': [4, 1]})
    writer = PillowWriter(fps=fps)

    try:
        with writer.saving(fig, path, dpi=80):
            for _ in range(n_frames):
                viewer.tick()
                frame = viewer.frame()
                for ax in axes:
                    ax.clear()
                plot_frame(frame, viewer.config, ax=axes[0])
                plot_explained_variance(frame.variance, viewer.config.var_mode, ax=axes[1])
                writer.grab_frame()
    finally:
        plt.close(fig)
        viewer.config = replace(viewer.config, spin=was_spinning)
    return path
