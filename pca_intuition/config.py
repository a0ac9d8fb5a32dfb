"""
VIEWER CONFIGURATION

Every knob the viewer exposes lives here, in one immutable snapshot.

The renderer owns the current ViewerConfig and swaps it for a new one
(dataclasses.replace) whenever a slider moves. The analytics code only
ever READS a snapshot, so one evaluation always sees one consistent set
of parameters.

USAGE:
    from pca_intuition.config import ViewerConfig

    cfg = ViewerConfig(n_points=400, anisotropy=5, angle_deg=30)
    cfg = cfg.with_clusters(3)       # also switches color_mode to 'cluster'
"""

from dataclasses import dataclass, replace
from typing import Tuple


# ============================================================
# DEFAULTS
# ============================================================

CANVAS_WIDTH = 960
CANVAS_HEIGHT = 600
CENTER = (CANVAS_WIDTH * 0.5, CANVAS_HEIGHT * 0.5)

BASE_SCALE = 10.0          # std of the minor axis, in canvas units
N_POINTS = 400
ANISOTROPY = 5.0           # major/minor std ratio
ANGLE_DEG = 30.0
SPIN_SPEED = 30.0          # deg/s
TICKS_PER_SECOND = 60
KMEANS_ITERATIONS = 10
POINT_SIZE = 3.0

EIGEN_EPS = 1e-12          # |b| below this → matrix treated as diagonal
VARIANCE_FLOOR = 1e-12     # denominator floor for variance fractions
SCORE_RANGE_FLOOR = 1e-9   # denominator floor for pc1 coloring

VAR_MODES = ('pca', 'view')
COLOR_MODES = ('none', 'pc1', 'cluster')


@dataclass(frozen=True)
class ViewerConfig:
    """
    Snapshot of the viewer's UI state.

    Parameters:
    -----------
    n_points : size of the latent batch
    anisotropy : major/minor standard deviation ratio
    angle_deg : rotation of the cloud (degrees)
    n_clusters : k for k-means (0 = clustering off)
    var_mode : 'pca' (principal basis) or 'view' (view-angle basis)
    color_mode : 'none', 'pc1' or 'cluster'
    spin : advance the angle on every tick
    spin_speed : degrees per second while spinning
    """
    n_points: int = N_POINTS
    anisotropy: float = ANISOTROPY
    angle_deg: float = ANGLE_DEG
    center: Tuple[float, float] = CENTER
    base_scale: float = BASE_SCALE
    n_clusters: int = 0
    kmeans_iterations: int = KMEANS_ITERATIONS
    var_mode: str = 'pca'
    color_mode: str = 'none'
    spin: bool = False
    spin_speed: float = SPIN_SPEED
    ticks_per_second: int = TICKS_PER_SECOND
    show_projections: bool = True
    show_reconstruction: bool = False
    show_axes: bool = True
    point_size: float = POINT_SIZE

    def validate(self):
        """Raise ValueError on settings no slider could produce."""
        if self.n_points < 0:
            raise ValueError(f"n_points must be >= 0, got {self.n_points}")
        if self.n_clusters < 0:
            raise ValueError(f"n_clusters must be >= 0, got {self.n_clusters}")
        if self.kmeans_iterations < 0:
            raise ValueError(f"kmeans_iterations must be >= 0, got {self.kmeans_iterations}")
        if self.var_mode not in VAR_MODES:
            raise ValueError(f"Unknown var_mode: {self.var_mode}")
        if self.color_mode not in COLOR_MODES:
            raise ValueError(f"Unknown color_mode: {self.color_mode}")
        if self.ticks_per_second <= 0:
            raise ValueError(f"ticks_per_second must be > 0, got {self.ticks_per_second}")
        return self

    def with_clusters(self, k):
        """
        Change k the way the cluster slider does.

        Turning clustering on switches coloring to clusters; turning it
        off while coloring by cluster falls back to plain points.
        """
        color_mode = self.color_mode
        if k > 0:
            color_mode = 'cluster'
        elif color_mode == 'cluster':
            color_mode = 'none'
        return replace(self, n_clusters=k, color_mode=color_mode).validate()

    def spin_step_deg(self):
        """Angle advanced by one animation tick."""
        return self.spin_speed / self.ticks_per_second
