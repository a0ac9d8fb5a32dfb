"""
2D PCA GEOMETRY — Paradigm: LINEAR PROJECTION

===============================================================
WHAT IT IS (THE CORE IDEA)
===============================================================

Take a 2D point cloud. Find the direction along which it spreads the
most. That direction is PC1; the perpendicular one is PC2.

THE ALGORITHM (2D only, closed form, no iterative solver):
    1. Mean:        m = (1/n) Σ p_i
    2. Covariance:  S = (1/(n-1)) Σ (p_i - m)(p_i - m)^T
    3. Eigen:       S v = λ v     (S is symmetric 2×2 → closed form)
    4. Project:     t_i = (p_i - m) · v1
    5. Reconstruct: p̂_i = m + t_i v1   (rank-1 approximation)

===============================================================
THE MATHEMATICS (2×2 SYMMETRIC EIGENPROBLEM)
===============================================================

S = [[a, b],
     [b, c]]

Characteristic polynomial: λ² - (a+c) λ + (ac - b²) = 0

    λ = tr/2 ± sqrt(tr²/4 - det)

tr²/4 - det = ((a-c)/2)² + b² ≥ 0 in exact arithmetic, but rounding
can push it a hair below zero → clamp before the sqrt.

EIGENVECTOR for λ: (S - λI) v = 0  →  first row: (a-λ) x + b y = 0
    → v ∝ (b, λ - a)            (valid whenever b ≠ 0)

If b ≈ 0 the matrix is already diagonal: the axes ARE the eigenvectors.
Convention: PC1 = (1, 0) when a ≥ c, else (0, 1). PC2 is always the
perpendicular of PC1.

NOTE: each eigenvector is only defined up to sign. Another equally
correct implementation may return -v. Only the orientation of the
drawn arrows depends on it; variances and projections' magnitudes
do not.

===============================================================
EXPLAINED VARIANCE — TWO BASES
===============================================================

PCA basis:   pc1 = λ1 / (λ1 + λ2)
View basis:  variance along the CURRENT view angle θ:
                 var(θ) = a cos²θ + 2b sinθ cosθ + c sin²θ
             pc1 = var(θ) / (a + c)

The view basis shows what you'd capture if you projected onto the
direction you're looking at rather than the optimal one. When θ
matches PC1, both modes agree.
===============================================================
"""

from typing import NamedTuple

import numpy as np

from pca_intuition.config import EIGEN_EPS, SCORE_RANGE_FLOOR, VARIANCE_FLOOR, VAR_MODES


# ============================================================
# RESULT TYPES
# ============================================================

class MomentSummary(NamedTuple):
    """Sample mean and unbiased covariance of a 2D cloud."""
    mx: float
    my: float
    sxx: float
    sxy: float
    syy: float

    @property
    def mean(self):
        return np.array([self.mx, self.my])

    @property
    def covariance(self):
        return np.array([[self.sxx, self.sxy],
                         [self.sxy, self.syy]])


class EigenResult(NamedTuple):
    """
    eigenvalues : (2,), descending
    components : (2, 2), row i is the unit eigenvector of eigenvalues[i]
    """
    eigenvalues: np.ndarray
    components: np.ndarray

    @property
    def pc1(self):
        return self.components[0]

    @property
    def pc2(self):
        return self.components[1]


class Geometry(NamedTuple):
    moments: MomentSummary
    eigen: EigenResult

    @property
    def mean(self):
        return self.moments.mean

    @property
    def covariance(self):
        return self.moments.covariance


class VarianceExplained(NamedTuple):
    pc1: float
    pc2: float


# ============================================================
# MOMENTS
# ============================================================

def _as_points(points):
    return np.asarray(points, dtype=float).reshape(-1, 2)


def estimate_moments(points):
    """
    Mean and unbiased covariance.

    Denominators are max(1, n) and max(1, n-1), so an empty cloud gives a
    zero mean and zero covariance, and a single point gives itself as the
    mean with zero covariance. No division faults either way.
    """
    X = _as_points(points)
    n = X.shape[0]

    mean = X.sum(axis=0) / max(1, n)
    D = X - mean
    c = 1.0 / max(1, n - 1)

    sxx = float(np.sum(D[:, 0] * D[:, 0]) * c)
    sxy = float(np.sum(D[:, 0] * D[:, 1]) * c)
    syy = float(np.sum(D[:, 1] * D[:, 1]) * c)
    return MomentSummary(float(mean[0]), float(mean[1]), sxx, sxy, syy)


# ============================================================
# EIGEN-DECOMPOSITION (closed form)
# ============================================================

def _abc(cov):
    if isinstance(cov, MomentSummary):
        return cov.sxx, cov.sxy, cov.syy
    S = np.asarray(cov, dtype=float)
    return float(S[0, 0]), float(S[0, 1]), float(S[1, 1])


def eigen_2x2(cov):
    """
    Eigenvalues and eigenvectors of a symmetric 2×2 matrix.

    Args:
        cov: MomentSummary or 2×2 array-like [[a, b], [b, c]]

    Returns:
        EigenResult with λ1 ≥ λ2 and orthonormal rows [pc1, pc2]
    """
    a, b, c = _abc(cov)

    tr = a + c
    det = a * c - b * b
    disc = np.sqrt(max(0.0, tr * tr / 4 - det))
    l1, l2 = tr / 2 + disc, tr / 2 - disc

    if abs(b) > EIGEN_EPS:
        vx, vy = b, l1 - a
        norm = np.hypot(vx, vy) or 1.0
        v1 = np.array([vx / norm, vy / norm])
    else:
        # Already diagonal: the larger-variance axis is PC1
        v1 = np.array([1.0, 0.0]) if a >= c else np.array([0.0, 1.0])

    v2 = np.array([-v1[1], v1[0]])
    return EigenResult(np.array([l1, l2]), np.vstack([v1, v2]))


def recompute_geometry(points):
    """Moments + eigen-decomposition of the current cloud."""
    moments = estimate_moments(points)
    return Geometry(moments, eigen_2x2(moments))


# ============================================================
# PROJECTION / RECONSTRUCTION
# ============================================================

def project_onto_axis(points, mean, axis):
    """Signed distance along `axis` from the mean: (p - mean) · axis."""
    return (np.asarray(points, dtype=float) - np.asarray(mean, dtype=float)) @ np.asarray(axis, dtype=float)


def project_onto_pc1(points, mean, pc1):
    """PC1 score t for one point or a batch."""
    return project_onto_axis(points, mean, pc1)


def reconstruct(mean, pc1, t):
    """
    Rank-1 reconstruction: mean + t · pc1.

    t may be a scalar (→ one point) or an array of scores (→ (n, 2)).
    """
    t = np.asarray(t, dtype=float)
    return np.asarray(mean, dtype=float) + t[..., np.newaxis] * np.asarray(pc1, dtype=float)


def pc1_color_fraction(points, geometry):
    """
    PC1 scores rescaled to [0, 1] for coloring.

    0 = most negative score in the cloud, 1 = most positive.
    """
    t = project_onto_pc1(_as_points(points), geometry.mean, geometry.eigen.pc1)
    if t.size == 0:
        return t
    span = max(SCORE_RANGE_FLOOR, t.max() - t.min())
    return np.clip((t - t.min()) / span, 0.0, 1.0)


# ============================================================
# EXPLAINED VARIANCE
# ============================================================

def explained_variance(cov, eigen=None, mode='pca', view_angle_deg=0.0):
    """
    Fraction of total variance on the first axis of the chosen basis.

    Args:
        cov: MomentSummary or 2×2 covariance
        eigen: EigenResult of cov (computed if omitted)
        mode: 'pca' → principal basis, 'view' → basis at view_angle_deg
        view_angle_deg: view direction, used in 'view' mode

    Returns:
        VarianceExplained(pc1, pc2), each in [0, 1], pc1 + pc2 = 1.
        A covariance with no variance at all has no preferred axis → 0.5/0.5.
    """
    if mode not in VAR_MODES:
        raise ValueError(f"Unknown variance mode: {mode}")

    a, b, c = _abc(cov)

    if mode == 'view':
        rad = np.radians(view_angle_deg)
        cs, sn = np.cos(rad), np.sin(rad)
        captured = a * cs * cs + 2 * b * sn * cs + c * sn * sn
        total = a + c
    else:
        if eigen is None:
            eigen = eigen_2x2(cov)
        l1, l2 = eigen.eigenvalues
        captured = l1
        total = l1 + l2

    if total < VARIANCE_FLOOR:
        return VarianceExplained(0.5, 0.5)

    pc1 = float(np.clip(captured / max(VARIANCE_FLOOR, total), 0.0, 1.0))
    return VarianceExplained(pc1, 1.0 - pc1)
