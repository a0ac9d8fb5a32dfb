"""
pca_intuition — the analytics core of an interactive 2D PCA viewer.

    from pca_intuition import PCAViewer

    viewer = PCAViewer(random_state=42)
    viewer.reshape_and_rotate(anisotropy=5, angle_deg=30)
    geometry = viewer.recompute_geometry()
    labels = viewer.recluster(k=3)
    pc1, pc2 = viewer.explained_variance()
"""

from pca_intuition.config import ViewerConfig
from pca_intuition.geometry import (
    EigenResult,
    Geometry,
    MomentSummary,
    VarianceExplained,
    eigen_2x2,
    estimate_moments,
    explained_variance,
    project_onto_pc1,
    recompute_geometry,
    reconstruct,
)
from pca_intuition.kmeans import KMeans, cluster
from pca_intuition.sampling import generate_latent, project
from pca_intuition.viewer import Frame, PCAViewer, evaluate

__all__ = [
    'ViewerConfig',
    'EigenResult',
    'Geometry',
    'MomentSummary',
    'VarianceExplained',
    'eigen_2x2',
    'estimate_moments',
    'explained_variance',
    'project_onto_pc1',
    'recompute_geometry',
    'reconstruct',
    'KMeans',
    'cluster',
    'generate_latent',
    'project',
    'Frame',
    'PCAViewer',
    'evaluate',
]
