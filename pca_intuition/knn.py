"""
K-NEAREST NEIGHBORS — Paradigm: MEMORY

The companion sketch: random labelled points in a [0, 100]² data space,
and a cursor that gets classified by its k nearest neighbours.

    1. Squared distance from the query to every point (brute force)
    2. Stable sort, keep the first min(k, n)
    3. Majority vote; ties go to the LOWEST class id

No training. The data IS the model.
"""

import numpy as np

from pca_intuition.sampling import check_random_state


DATA_MIN, DATA_MAX = 0.0, 100.0


def make_points(n_points=20, n_classes=2, random_state=None):
    """Uniform points in data space with uniform random class ids."""
    if n_points < 0:
        raise ValueError(f"n_points must be >= 0, got {n_points}")
    rng = check_random_state(random_state)
    X = rng.uniform(DATA_MIN, DATA_MAX, size=(n_points, 2))
    y = rng.integers(0, max(1, n_classes), size=n_points)
    return X, y


def shuffle_classes(y, n_classes, random_state=None):
    """Fresh class ids for the same points."""
    rng = check_random_state(random_state)
    return rng.integers(0, max(1, n_classes), size=len(y))


def classify(X, y, query, k, n_classes=None):
    """
    Classify one query point.

    Returns:
        (prediction, neighbor_indices), indices ordered nearest first
    """
    X = np.asarray(X, dtype=float).reshape(-1, 2)
    y = np.asarray(y, dtype=int)
    if n_classes is None:
        n_classes = int(y.max()) + 1 if len(y) else 1

    d2 = np.sum((X - np.asarray(query, dtype=float)) ** 2, axis=1)
    order = np.argsort(d2, kind='stable')
    neighbor_indices = order[:max(0, min(k, len(order)))]

    votes = np.bincount(y[neighbor_indices], minlength=max(1, n_classes))
    prediction = int(np.argmax(votes))
    return prediction, neighbor_indices


class KNN:
    """
    Thin stateful wrapper: fit stores the data, predict classifies a batch.

    Parameters:
    -----------
    k : number of neighbours to vote
    n_classes : number of class ids (defaults to max label + 1)
    """

    def __init__(self, k=3, n_classes=None):
        self.k = k
        self.n_classes = n_classes
        self.X_train = None
        self.y_train = None

    def fit(self, X, y):
        self.X_train = np.asarray(X, dtype=float).copy()
        self.y_train = np.asarray(y, dtype=int).copy()
        if self.n_classes is None:
            self.n_classes = int(self.y_train.max()) + 1 if len(self.y_train) else 1
        return self

    def kneighbors(self, query):
        return classify(self.X_train, self.y_train, query, self.k, self.n_classes)[1]

    def predict(self, X):
        return np.array([classify(self.X_train, self.y_train, q, self.k, self.n_classes)[0]
                         for q in np.asarray(X, dtype=float).reshape(-1, 2)])
