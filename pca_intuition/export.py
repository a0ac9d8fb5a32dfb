"""
CSV export of a viewer frame.

One row per point:  i, x, y, pc1, pc2, cluster
(cluster = -1 while clustering is off), followed by a trailer line

    # eigvals,<λ1>,<λ2>
"""

import numpy as np
import pandas as pd


def frame_to_dataframe(frame):
    n = frame.points.shape[0]
    if frame.labels.shape[0] == n and n > 0:
        clusters = frame.labels
    else:
        clusters = np.full(n, -1, dtype=int)

    return pd.DataFrame({
        'i': np.arange(n),
        'x': frame.points[:, 0],
        'y': frame.points[:, 1],
        'pc1': frame.pc1_scores,
        'pc2': frame.pc2_scores,
        'cluster': clusters,
    })


def frame_to_csv(frame):
    l1, l2 = frame.geometry.eigen.eigenvalues
    body = frame_to_dataframe(frame).to_csv(index=False, lineterminator='\n')
    return body + f"# eigvals,{l1},{l2}\n"


def export_csv(frame, path):
    """Write the frame to path and return the path."""
    with open(path, 'w', newline='') as f:
        f.write(frame_to_csv(frame))
    return path


def read_csv(path):
    """Read an exported file back: (points table, eigenvalues)."""
    df = pd.read_csv(path, comment='#')
    with open(path) as f:
        trailer = [line for line in f if line.startswith('# eigvals')]
    eigvals = np.array([float(v) for v in trailer[-1].strip().split(',')[1:]]) if trailer else None
    return df, eigvals
