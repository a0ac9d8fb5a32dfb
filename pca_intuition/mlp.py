"""
FORWARD PASS — the neural-network companion sketch.

A tiny 2 → H → 2 network driven by the mouse position (x₁, x₂ ∈ [0, 1]):

    z1 = W1 x + b1        h = act(z1)
    z2 = W2 h + b2        y = act(z2)

No training: the point is to watch activations light up as the input
moves. The same activation is used on both layers.

Optional input noise: x ← clip(x + ε, 0, 1), ε ~ N(0, σ²), σ = noise_pct/100 · 0.25.
With hold_noise on, ε is only redrawn when the input actually moves, so a
resting cursor sees one fixed perturbation instead of jitter.

Display side: the readout is an EMA of the output (weight smooth_k on the
newest value), and output_stats() gives mean and σ of the raw outputs over
the last STATS_WINDOW seconds.
"""

from collections import deque
import time

import numpy as np

from pca_intuition.sampling import check_random_state


MIN_HIDDEN, MAX_HIDDEN = 2, 64
MAX_SMOOTH = 0.95
STATS_WINDOW = 2.0         # seconds
MOVE_EPS = 1e-3            # input-space distance that counts as a move


class Activation:
    """Base class for activation functions."""
    def forward(self, x):
        raise NotImplementedError


class ReLU(Activation):
    def forward(self, x):
        return np.maximum(0, x)


class Sigmoid(Activation):
    def forward(self, x):
        return 1 / (1 + np.exp(-x))


class Tanh(Activation):
    def forward(self, x):
        return np.tanh(x)


ACTIVATIONS = {
    'relu': ReLU(),
    'sigmoid': Sigmoid(),
    'tanh': Tanh(),
}


class ForwardNet:
    """
    2 → hidden → 2 network with fixed random weights.

    Parameters:
    -----------
    hidden : hidden width, clamped to [2, 64]
    activation : 'relu', 'tanh' or 'sigmoid'
    noise_pct : input noise level, clamped to [0, 100]
    hold_noise : keep the noise offset until the input moves
    smooth_k : EMA weight of the newest output in the readout, clamped to [0, 0.95]
    random_state : None, int or numpy Generator
    """

    def __init__(self, hidden=3, activation='relu', noise_pct=0.0, hold_noise=False,
                 smooth_k=0.2, random_state=None):
        self.rng = check_random_state(random_state)
        self.set_activation(activation)
        self.set_noise(noise_pct)
        self.set_smoothing(smooth_k)
        self.hold_noise = hold_noise
        self.set_hidden(hidden)

        self.noise_offset = np.zeros(2)
        self.display = np.zeros(2)
        self.history = deque()     # (time, output) pairs
        self._last_input = None

    def init_weights(self):
        """Weights ~ U(-1, 1) · 0.8, biases ~ U(-1, 1) · 0.1."""
        self.W1 = self.rng.uniform(-1, 1, size=(self.hidden, 2)) * 0.8
        self.b1 = self.rng.uniform(-1, 1, size=self.hidden) * 0.1
        self.W2 = self.rng.uniform(-1, 1, size=(2, self.hidden)) * 0.8
        self.b2 = self.rng.uniform(-1, 1, size=2) * 0.1

    def set_hidden(self, k):
        self.hidden = max(MIN_HIDDEN, min(MAX_HIDDEN, int(k)))
        self.init_weights()

    def set_activation(self, name):
        if name not in ACTIVATIONS:
            raise ValueError(f"Unknown activation: {name}")
        self.activation_name = name
        self.activation = ACTIVATIONS[name]

    def set_noise(self, pct):
        self.noise_pct = max(0.0, min(100.0, float(pct)))

    def set_smoothing(self, k):
        self.smooth_k = max(0.0, min(MAX_SMOOTH, float(k)))

    def _update_noise(self, xy, std):
        moved = self._last_input is None or np.hypot(*(xy - self._last_input)) > MOVE_EPS
        if not self.hold_noise or moved:
            self.noise_offset = self.rng.normal(0, std, size=2)
        if moved:
            self._last_input = xy.copy()

    def forward(self, xy, now=None):
        """
        Returns dict with x (the clamped, possibly noisy input), z1,
        hidden, z2, output and display (the smoothed readout).

        now : timestamp in seconds for the rolling stats (monotonic clock if omitted)
        """
        xy = np.asarray(xy, dtype=float)
        std = self.noise_pct / 100 * 0.25
        x = xy
        if std:
            self._update_noise(xy, std)
            x = xy + self.noise_offset
        x = np.clip(x, 0, 1)

        z1 = self.W1 @ x + self.b1
        h = self.activation.forward(z1)
        z2 = self.W2 @ h + self.b2
        y = self.activation.forward(z2)

        self.display = (1 - self.smooth_k) * self.display + self.smooth_k * y
        self._record(y, time.monotonic() if now is None else now)
        return {'x': x, 'z1': z1, 'hidden': h, 'z2': z2, 'output': y,
                'display': self.display.copy()}

    def _record(self, y, now):
        self.history.append((now, y))
        while self.history and self.history[0][0] < now - STATS_WINDOW:
            self.history.popleft()

    def output_stats(self):
        """
        Mean and σ (n-1 denominator, floored at 1) of each output over the
        last STATS_WINDOW seconds. Zeros before the first forward pass.
        """
        if not self.history:
            return np.zeros(2), np.zeros(2)
        Y = np.array([y for _, y in self.history])
        mean = Y.mean(axis=0)
        std = np.sqrt(np.sum((Y - mean) ** 2, axis=0) / max(1, len(Y) - 1))
        return mean, std
