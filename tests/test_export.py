"""Tests for the CSV export of a viewer frame."""
from pathlib import Path

import numpy as np
import pytest

from pca_intuition.config import ViewerConfig
from pca_intuition.export import export_csv, frame_to_csv, frame_to_dataframe, read_csv
from pca_intuition.viewer import PCAViewer


@pytest.fixture
def frame():
    return PCAViewer(ViewerConfig(n_points=30), random_state=7).frame()


@pytest.fixture
def clustered_frame():
    viewer = PCAViewer(ViewerConfig(n_points=30), random_state=7)
    viewer.recluster(k=3)
    return viewer.frame()


class TestFrameToCsv:

    def test_header_and_row_count(self, frame):
        lines = frame_to_csv(frame).splitlines()
        assert lines[0] == 'i,x,y,pc1,pc2,cluster'
        assert len(lines) == 30 + 2

    def test_eigenvalue_trailer(self, frame):
        trailer = frame_to_csv(frame).splitlines()[-1]
        name, l1, l2 = trailer.split(',')
        assert name == '# eigvals'
        np.testing.assert_allclose([float(l1), float(l2)], frame.geometry.eigen.eigenvalues)

    def test_clusters_off_written_as_minus_one(self, frame):
        df = frame_to_dataframe(frame)
        assert (df['cluster'] == -1).all()

    def test_cluster_ids_written(self, clustered_frame):
        df = frame_to_dataframe(clustered_frame)
        np.testing.assert_array_equal(df['cluster'].to_numpy(), clustered_frame.labels)

    def test_rows_carry_scores(self, frame):
        df = frame_to_dataframe(frame)
        np.testing.assert_array_equal(df['i'].to_numpy(), np.arange(30))
        np.testing.assert_allclose(df['pc1'].to_numpy(), frame.pc1_scores)
        np.testing.assert_allclose(df['pc2'].to_numpy(), frame.pc2_scores)

    def test_empty_cloud(self):
        frame = PCAViewer(ViewerConfig(n_points=0), random_state=0).frame()
        lines = frame_to_csv(frame).splitlines()
        assert lines[0] == 'i,x,y,pc1,pc2,cluster'
        assert lines[1].startswith('# eigvals')


class TestFileRoundTrip:

    def test_written_file_reads_back(self, clustered_frame, tmp_path):
        path = export_csv(clustered_frame, tmp_path / 'points.csv')
        df, eigvals = read_csv(path)
        assert list(df.columns) == ['i', 'x', 'y', 'pc1', 'pc2', 'cluster']
        assert len(df) == 30
        np.testing.assert_allclose(df[['x', 'y']].to_numpy(), clustered_frame.points)
        np.testing.assert_allclose(eigvals, clustered_frame.geometry.eigen.eigenvalues)


class TestLineEndings:

    def test_unix_newlines(self, frame):
        assert '\r' not in frame_to_csv(frame)

    def test_pandas_floor_declared(self):
        # to_csv(lineterminator=...) needs pandas 1.5
        pyproject = Path(__file__).resolve().parents[1] / 'pyproject.toml'
        assert '"pandas>=1.5"' in pyproject.read_text()
