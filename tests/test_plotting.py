"""Smoke tests for the matplotlib renderer."""
from dataclasses import replace

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pytest

import pca_intuition.plotting as plotting
from pca_intuition.config import ViewerConfig
from pca_intuition.plotting import (
    CLUSTER_PALETTE,
    animate_spin,
    plot_explained_variance,
    plot_frame,
    point_colors,
    save_figure,
    visualize_viewer,
)
from pca_intuition.viewer import PCAViewer


@pytest.fixture
def viewer():
    v = PCAViewer(ViewerConfig(n_points=60), random_state=3)
    yield v
    plt.close('all')


class TestPointColors:

    @pytest.mark.parametrize("mode", ['none', 'pc1', 'cluster'])
    def test_one_rgba_per_point(self, viewer, mode):
        viewer.recluster(k=3)
        colors = point_colors(viewer.frame(), mode)
        assert colors.shape == (60, 4)
        assert colors.min() >= 0.0 and colors.max() <= 1.0

    def test_cluster_colors_follow_labels(self, viewer):
        viewer.recluster(k=2)
        frame = viewer.frame()
        colors = point_colors(frame, 'cluster')
        r, g, b = CLUSTER_PALETTE[frame.labels[0]]
        np.testing.assert_allclose(colors[0, :3], [r / 255, g / 255, b / 255])

    def test_cluster_mode_without_labels_falls_back(self, viewer):
        colors = point_colors(viewer.frame(), 'cluster')
        assert np.all(colors == colors[0])


class TestPlots:

    def test_canvas_is_y_down(self, viewer):
        ax = plot_frame(viewer.frame(), viewer.config)
        bottom, top = ax.get_ylim()
        assert bottom > top

    def test_title_reports_eigenvalues(self, viewer):
        ax = plot_frame(viewer.frame(), viewer.config)
        assert ax.get_title().startswith('λ₁=')

    def test_all_overlays(self, viewer):
        config = replace(viewer.config, show_reconstruction=True, color_mode='pc1')
        assert plot_frame(viewer.frame(), config) is not None

    def test_empty_cloud(self):
        viewer = PCAViewer(ViewerConfig(n_points=0), random_state=0)
        assert plot_frame(viewer.frame(), viewer.config) is not None
        plt.close('all')

    def test_variance_bars(self, viewer):
        ax = plot_explained_variance(viewer.explained_variance(), 'view')
        assert len(ax.patches) == 2
        assert 'view angle' in ax.get_title()


class TestOutputs:

    def test_save_figure(self, viewer, tmp_path):
        fig = visualize_viewer(viewer)
        path = save_figure(fig, str(tmp_path / 'viewer.png'))
        assert (tmp_path / 'viewer.png').stat().st_size > 0
        assert path.endswith('viewer.png')

    def test_animate_spin(self, viewer, tmp_path):
        start = viewer.config.angle_deg
        animate_spin(viewer, str(tmp_path / 'spin.gif'), n_frames=3, fps=10)
        assert (tmp_path / 'spin.gif').stat().st_size > 0
        assert viewer.config.angle_deg == pytest.approx(start + 3 * viewer.config.spin_step_deg())
        assert viewer.config.spin is False

    def test_failed_frame_restores_viewer(self, viewer, tmp_path, monkeypatch):
        calls = []
        real_plot_frame = plotting.plot_frame

        def plot_frame_then_fail(frame, config, ax=None):
            calls.append(1)
            if len(calls) > 1:
                raise RuntimeError("render failed")
            return real_plot_frame(frame, config, ax=ax)

        monkeypatch.setattr(plotting, 'plot_frame', plot_frame_then_fail)
        plt.close('all')

        with pytest.raises(RuntimeError):
            animate_spin(viewer, str(tmp_path / 'spin.gif'), n_frames=5)
        assert viewer.config.spin is False
        assert plt.get_fignums() == []
