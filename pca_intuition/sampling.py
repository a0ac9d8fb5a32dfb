"""
LATENT SAMPLES + ANISOTROPIC PROJECTION

===============================================================
WHY TWO STAGES?
===============================================================

The cloud on screen is an elongated, rotated Gaussian:

    [x]   [cos θ  -sin θ] [anisotropy · s · u]   [cx]
    [y] = [sin θ   cos θ] [       s · v      ] + [cy]

with (u, v) ~ N(0, I).

If we drew fresh (u, v) every time a slider moved, the cloud would
"boil": every frame a brand new random set of points. Instead:

    1. LATENT BATCH: draw (u, v) ONCE, freeze it.
    2. RESHAPE: apply scale + rotation + offset (pure, deterministic).

Dragging the anisotropy slider or spinning the angle deforms the SAME
cloud smoothly. Only "resample" (new count, regenerate button) touches
stage 1.

===============================================================
BOX–MULLER
===============================================================

Two independent uniforms u1, u2 ∈ (0, 1):

    z = sqrt(-2 ln u1) · cos(2π u2)   ~  N(0, 1)

u1 = 0 would give ln(0) = -inf, so zeros are rejected and redrawn.
===============================================================
"""

import numpy as np

from pca_intuition.config import BASE_SCALE, CENTER


def check_random_state(random_state=None):
    """None / int seed / Generator → Generator."""
    return np.random.default_rng(random_state)


def _nonzero_uniform(n, rng):
    """n draws from U(0, 1) with exact zeros rejected."""
    u = np.asarray(rng.random(n), dtype=float)
    zero = u == 0.0
    while np.any(zero):
        u[zero] = rng.random(int(zero.sum()))
        zero = u == 0.0
    return u


def randn(n, random_state=None):
    """
    n standard-normal draws via Box–Muller.

    Uses two uniforms per normal value (the cosine branch only).
    """
    rng = check_random_state(random_state)
    u1 = _nonzero_uniform(n, rng)
    u2 = _nonzero_uniform(n, rng)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def generate_latent(n, random_state=None):
    """
    Draw a fresh latent batch.

    Args:
        n: number of (u, v) pairs, must be >= 0
        random_state: None, int seed or numpy Generator

    Returns:
        Read-only array, shape (n, 2)
    """
    if n < 0:
        raise ValueError(f"Latent count must be >= 0, got {n}")

    rng = check_random_state(random_state)
    latent = np.column_stack([randn(n, rng), randn(n, rng)])
    latent.flags.writeable = False
    return latent


def project(latent, anisotropy, angle_deg, center=CENTER, base_scale=BASE_SCALE):
    """
    Reshape latent draws into canvas points.

    Scale u by anisotropy * base_scale and v by base_scale, rotate by
    angle_deg, translate by center. Accepts one (u, v) pair or a batch.
    """
    latent = np.asarray(latent, dtype=float)

    theta = np.radians(angle_deg)
    ct, st = np.cos(theta), np.sin(theta)

    u = latent[..., 0] * anisotropy * base_scale
    v = latent[..., 1] * base_scale

    x = u * ct - v * st + center[0]
    y = u * st + v * ct + center[1]
    return np.stack([x, y], axis=-1)
