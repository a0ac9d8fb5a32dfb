"""Tests for latent sampling and the anisotropic projector."""
import numpy as np
import pytest

from pca_intuition.config import CENTER
from pca_intuition.sampling import _nonzero_uniform, generate_latent, project, randn


class QueuedRng:
    """Stands in for a Generator: hands out pre-set uniform draws."""

    def __init__(self, draws):
        self.draws = [np.array(d, dtype=float) for d in draws]

    def random(self, n):
        out = self.draws.pop(0)
        assert len(out) == n
        return out


# ---------------------------------------------------------------------------
# Latent batch
# ---------------------------------------------------------------------------

class TestGenerateLatent:

    def test_shape(self):
        assert generate_latent(400, random_state=0).shape == (400, 2)

    def test_zero_count(self):
        assert generate_latent(0, random_state=0).shape == (0, 2)

    def test_negative_count_raises(self):
        with pytest.raises(ValueError):
            generate_latent(-1)

    def test_read_only(self):
        latent = generate_latent(10, random_state=0)
        with pytest.raises(ValueError):
            latent[0, 0] = 1.0

    def test_seeded_batches_repeat(self):
        np.testing.assert_array_equal(generate_latent(50, random_state=3),
                                      generate_latent(50, random_state=3))

    def test_standard_normal_moments(self):
        latent = generate_latent(20000, random_state=1)
        assert np.all(np.abs(latent.mean(axis=0)) < 0.05)
        assert np.all(np.abs(latent.std(axis=0) - 1.0) < 0.05)
        assert abs(np.corrcoef(latent.T)[0, 1]) < 0.05

    def test_generator_is_shared(self):
        rng = np.random.default_rng(5)
        a = generate_latent(5, rng)
        b = generate_latent(5, rng)
        assert not np.array_equal(a, b)


class TestBoxMuller:

    def test_zero_draws_are_redrawn(self):
        rng = QueuedRng([[0.0, 0.5, 0.0], [0.0, 0.3], [0.7]])
        u = _nonzero_uniform(3, rng)
        np.testing.assert_array_equal(u, [0.7, 0.5, 0.3])

    def test_randn_finite(self):
        z = randn(1000, random_state=0)
        assert z.shape == (1000,)
        assert np.all(np.isfinite(z))


# ---------------------------------------------------------------------------
# Projector
# ---------------------------------------------------------------------------

class TestProject:

    def test_single_pair_rotated_90(self):
        p = project([1.0, 0.0], anisotropy=2, angle_deg=90, center=(0, 0), base_scale=10)
        np.testing.assert_allclose(p, [0.0, 20.0], atol=1e-12)

    def test_minor_axis_scale(self):
        p = project([0.0, 1.0], anisotropy=5, angle_deg=0, center=(0, 0), base_scale=10)
        np.testing.assert_allclose(p, [0.0, 10.0], atol=1e-12)

    def test_origin_maps_to_center(self):
        np.testing.assert_allclose(project([0.0, 0.0], 5, 30), CENTER)

    def test_batch_shape(self):
        latent = generate_latent(25, random_state=0)
        assert project(latent, 3, 45).shape == (25, 2)

    def test_isotropic_rotation_preserves_radius(self):
        latent = generate_latent(100, random_state=0)
        P = project(latent, 1, 73, center=(5, -5), base_scale=10)
        r_in = np.linalg.norm(latent, axis=1) * 10
        r_out = np.linalg.norm(P - np.array([5, -5]), axis=1)
        np.testing.assert_allclose(r_out, r_in)

    def test_latent_untouched(self):
        latent = generate_latent(10, random_state=0)
        before = latent.copy()
        project(latent, 4, 10)
        np.testing.assert_array_equal(latent, before)
