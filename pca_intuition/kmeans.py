"""
K-MEANS CLUSTERING — Paradigm: CENTROID PARTITIONING

===============================================================
WHAT IT IS (THE CORE IDEA)
===============================================================

Partition the cloud into K groups by finding K centroids that
minimize within-cluster variance:

    argmin  Σₖ Σ_{x∈Cₖ} ||x - μₖ||²

THE ALGORITHM (Lloyd's Algorithm, FIXED budget):
    1. Initialize K centroids with k-means++
    2. ASSIGN: each point → nearest centroid (squared distance)
    3. UPDATE: each centroid → mean of its points
    4. Repeat 2-3 exactly n_iter times

No convergence check: in a viewer that re-clusters every frame a fixed,
small budget keeps the cost bounded at O(n · k · n_iter).

===============================================================
K-MEANS++ INITIALIZATION
===============================================================

    1. First centroid: uniform over the points
    2. Each next centroid: pick x with probability ∝ D(x)²,
       D(x) = distance to the nearest centroid chosen so far
       (roulette wheel over the cumulative D² sums)

===============================================================
DETAILS THAT MATTER
===============================================================

- Ties in ASSIGN go to the LOWEST cluster index.
- An empty cluster keeps its old centroid (mean of nothing = NaN).
- Each ASSIGN+UPDATE step never increases the within-cluster sum of
  squares, so more iterations never hurt (for the same seeding).
- Seeding is random: cluster ids are only reproducible with a fixed
  random_state. Test cluster QUALITY, not cluster identity.
===============================================================
"""

import numpy as np

from pca_intuition.config import KMEANS_ITERATIONS
from pca_intuition.sampling import check_random_state


class KMeans:
    """
    K-Means with k-means++ seeding and a fixed number of Lloyd steps.

    Parameters:
    -----------
    n_clusters : int
        Number of clusters K
    n_iter : int
        Exact number of assign/update steps (no early exit)
    random_state : None, int or numpy Generator
        Random source for the k-means++ seeding
    """

    def __init__(self, n_clusters=3, n_iter=KMEANS_ITERATIONS, random_state=None):
        if n_iter < 0:
            raise ValueError(f"n_iter must be >= 0, got {n_iter}")
        self.n_clusters = n_clusters
        self.n_iter = n_iter
        self.random_state = random_state

        # Attributes set after fit
        self.cluster_centers_ = None  # Centroids (K × 2)
        self.labels_ = None           # Cluster ids (n_samples,)
        self.inertia_ = None          # Within-cluster sum of squares

    def _init_centroids_kmeans_plus_plus(self, X, rng):
        """k-means++: uniform first pick, then roulette over D² to the nearest chosen centroid."""
        n_samples = X.shape[0]
        centroids = [X[rng.integers(n_samples)].copy()]

        while len(centroids) < self.n_clusters:
            C = np.array(centroids)
            d2 = np.min(np.sum((X[:, np.newaxis, :] - C[np.newaxis, :, :]) ** 2, axis=2), axis=1)
            total = d2.sum() or 1.0

            # Roulette wheel: first index whose cumulative D² reaches r
            r = rng.random() * total
            idx = int(np.searchsorted(np.cumsum(d2), r, side='left'))
            centroids.append(X[min(idx, n_samples - 1)].copy())

        return np.array(centroids)

    def _assign_clusters(self, X, centroids):
        """Nearest centroid per point; argmin keeps the lowest index on ties."""
        distances_sq = np.sum((X[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2, axis=2)
        return np.argmin(distances_sq, axis=1)

    def _update_centroids(self, X, labels, centroids):
        """Move each non-empty cluster to its mean; empty clusters keep their centroid."""
        new_centroids = centroids.copy()
        for k in range(self.n_clusters):
            mask = labels == k
            if np.any(mask):
                new_centroids[k] = X[mask].mean(axis=0)
        return new_centroids

    def fit(self, X):
        X = np.asarray(X, dtype=float).reshape(-1, 2)

        if self.n_clusters <= 0 or X.shape[0] == 0:
            self.cluster_centers_ = np.empty((0, 2))
            self.labels_ = np.empty(0, dtype=int)
            self.inertia_ = 0.0
            return self

        rng = check_random_state(self.random_state)
        centroids = self._init_centroids_kmeans_plus_plus(X, rng)
        labels = np.zeros(X.shape[0], dtype=int)

        for _ in range(self.n_iter):
            labels = self._assign_clusters(X, centroids)
            centroids = self._update_centroids(X, labels, centroids)

        self.cluster_centers_ = centroids
        self.labels_ = labels
        self.inertia_ = float(np.sum((X - centroids[labels]) ** 2))
        return self

    def fit_predict(self, X):
        """Fit and return cluster labels."""
        return self.fit(X).labels_


def cluster(points, k, iterations=KMEANS_ITERATIONS, random_state=None):
    """
    Cluster ids for every point, or an empty array when k <= 0 or
    there are no points.
    """
    return KMeans(n_clusters=k, n_iter=iterations, random_state=random_state).fit_predict(points)
