"""
PCA VIEWER — the analytics pipeline behind the interactive plot.

    latent batch ──reshape──▶ points ──▶ moments ──▶ eigen ──▶ variance
                                 │                    │
                                 │                    └──▶ projections / reconstructions
                                 └──▶ k-means (when k > 0)

evaluate() is the pure pipeline: latent batch + config snapshot in,
Frame out. PCAViewer is the small stateful shell a renderer drives: it
keeps the one latent batch, the current config snapshot and the current
cluster labels, and replaces them wholesale on every change.
"""

from dataclasses import replace
from typing import NamedTuple

import numpy as np

from pca_intuition.config import ViewerConfig
from pca_intuition.geometry import (
    Geometry,
    VarianceExplained,
    explained_variance,
    pc1_color_fraction,
    project_onto_axis,
    recompute_geometry,
    reconstruct,
)
from pca_intuition.kmeans import cluster
from pca_intuition.sampling import check_random_state, generate_latent, project


class Frame(NamedTuple):
    """Everything the renderer needs for one draw."""
    points: np.ndarray
    geometry: Geometry
    pc1_scores: np.ndarray
    pc2_scores: np.ndarray
    reconstructions: np.ndarray
    labels: np.ndarray
    variance: VarianceExplained


def reshape_and_rotate(latent, config):
    """Points for the current anisotropy/angle; the latent batch is untouched."""
    return project(latent, config.anisotropy, config.angle_deg,
                   center=config.center, base_scale=config.base_scale)


def recluster(points, config, random_state=None):
    """Cluster ids under config.n_clusters; empty when clustering is off."""
    if config.n_clusters <= 0:
        return np.empty(0, dtype=int)
    return cluster(points, config.n_clusters, config.kmeans_iterations, random_state)


def evaluate(latent, config, labels=None, random_state=None):
    """
    Run the full pipeline for one config snapshot.

    If labels is None they are recomputed with k-means; pass the current
    labels to reuse them.
    """
    config.validate()
    points = reshape_and_rotate(latent, config)
    geometry = recompute_geometry(points)

    pc1, pc2 = geometry.eigen.components
    t1 = project_onto_axis(points, geometry.mean, pc1)
    t2 = project_onto_axis(points, geometry.mean, pc2)

    if labels is None:
        labels = recluster(points, config, random_state)

    variance = explained_variance(geometry.moments, geometry.eigen,
                                  mode=config.var_mode, view_angle_deg=config.angle_deg)

    return Frame(points, geometry, t1, t2, reconstruct(geometry.mean, pc1, t1),
                 labels, variance)


class PCAViewer:
    """
    Stateful controller around evaluate().

    State carried between updates:
        latent : the frozen (u, v) batch
        config : the current ViewerConfig snapshot
        labels : the current cluster assignment
    """

    def __init__(self, config=None, random_state=None):
        self.config = (config or ViewerConfig()).validate()
        self.rng = check_random_state(random_state)
        self.latent = None
        self.points = None
        self.labels = np.empty(0, dtype=int)
        self.regenerate()

    # -------- resampling --------

    def regenerate(self, n_points=None):
        """New latent batch (count change or the regenerate button)."""
        if n_points is not None:
            self.config = replace(self.config, n_points=n_points).validate()
        self.latent = generate_latent(self.config.n_points, self.rng)
        return self._refresh()

    # -------- reshaping --------

    def reshape_and_rotate(self, anisotropy=None, angle_deg=None):
        """Deform the SAME latent batch; no new random draws for the cloud."""
        changes = {}
        if anisotropy is not None:
            changes['anisotropy'] = anisotropy
        if angle_deg is not None:
            changes['angle_deg'] = angle_deg
        self.config = replace(self.config, **changes).validate()
        return self._refresh()

    def _refresh(self):
        self.points = reshape_and_rotate(self.latent, self.config)
        self.labels = recluster(self.points, self.config, self.rng)
        return self.points

    # -------- derived quantities --------

    def recompute_geometry(self, points=None):
        return recompute_geometry(self.points if points is None else points)

    def recluster(self, points=None, k=None):
        """
        Re-run k-means. Changing k goes through ViewerConfig.with_clusters,
        so the color mode follows the slider.
        """
        if k is not None:
            self.config = self.config.with_clusters(k)
        points = self.points if points is None else points
        self.labels = recluster(points, self.config, self.rng)
        return self.labels

    def explained_variance(self, mode=None, view_angle_deg=None):
        geometry = self.recompute_geometry()
        return explained_variance(
            geometry.moments, geometry.eigen,
            mode=self.config.var_mode if mode is None else mode,
            view_angle_deg=self.config.angle_deg if view_angle_deg is None else view_angle_deg,
        )

    def pc1_colors(self):
        return pc1_color_fraction(self.points, self.recompute_geometry())

    def frame(self):
        """Frame for the current state, reusing the current labels."""
        return evaluate(self.latent, self.config, labels=self.labels)

    # -------- animation --------

    def tick(self):
        """
        One animation tick. While spinning, advance the angle by
        spin_speed / ticks_per_second (wrapped to [0, 180)) and re-run
        the pipeline. Returns True if anything changed.
        """
        if not self.config.spin:
            return False
        angle = (self.config.angle_deg + self.config.spin_step_deg()) % 180
        self.reshape_and_rotate(angle_deg=angle)
        return True

    def update(self, **changes):
        """
        Apply a batch of UI changes. Count changes resample; anything that
        moves the points reshapes; k changes re-cluster.
        """
        old = self.config
        k = changes.pop('n_clusters', None)
        self.config = replace(old, **changes).validate()
        if k is not None:
            self.config = self.config.with_clusters(k)

        if self.config.n_points != old.n_points:
            self.regenerate()
        elif (self.config.anisotropy, self.config.angle_deg, self.config.center, self.config.base_scale) != \
                (old.anisotropy, old.angle_deg, old.center, old.base_scale):
            self._refresh()
        elif (self.config.n_clusters, self.config.kmeans_iterations) != (old.n_clusters, old.kmeans_iterations):
            self.recluster()
        return self.config
